#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
shogi-chat の入口。

使い方（例）:
  shogi-chat                       # AI と対局（TUI）
  shogi-chat --hotseat             # 2人で対局（AI なし）
  shogi-chat --sfen "<SFEN>"       # 指定局面から
  shogi-chat replay game.kif --kif copy.kif
"""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from config import AppConfig, load_config
from kif_format import write_kif
from kif_parser import parse_kif_moves, parse_kif_startpos, read_kif_text
from paths import _resolve_existing_kif_path
from position import GameState, parse_and_apply
from render import DISPLAY, PROMPT, render
from sfen import sfen_to_state


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="shogi-chat", description="将棋 AI 対局（チャット版）")
    ap.add_argument("--strict", action="store_true", help="移動元の到達チェックを有効にする（python-shogi）")
    ap.add_argument("--hotseat", action="store_true", help="AI を使わず両方の手を入力する")
    ap.add_argument("--model", type=str, default=None, help="AI のモデル名（OpenRouter）")
    ap.add_argument("--sfen", type=str, default=None, help="開始局面の SFEN")

    sub = ap.add_subparsers(dest="command")
    rp = sub.add_parser("replay", help="KIF / テキスト棋譜を再生する")
    rp.add_argument("file", type=str, help="KIF または 1行1手のテキスト")
    rp.add_argument("--kif", type=str, default=None, help="再生結果を KIF で保存（OUTPUT/）")
    rp.add_argument("--format", choices=[DISPLAY, PROMPT], default=DISPLAY, help="最終局面の表示形式")
    return ap


def replay(path: str, config: AppConfig, kif_out: Optional[str] = None, fmt: str = DISPLAY) -> int:
    """棋譜を1手ずつ適用して最終局面を表示する。失敗した手で止まる。"""
    try:
        text = read_kif_text(str(_resolve_existing_kif_path(path)))
        start = parse_kif_startpos(text)
    except (OSError, ValueError) as e:
        print(f"[replay] 読み込みエラー: {e}")
        return 2
    moves: List[str] = parse_kif_moves(text)

    state: GameState = start
    status = 0
    for i, mv in enumerate(moves, start=1):
        res = parse_and_apply(state, mv, None, config.game)
        if not res.success:
            print(f"[replay] {i}手目 {mv}: {res.message}")
            status = 1
            break
        state = res.new_state
        print(f"[replay] {i:3d} {state.log[-1]}")
        if state.game_over:
            who = state.winner.label if state.winner else "なし"
            print(f"[replay] 対局終了（勝者: {who}）")
            break

    print(render(state, fmt))

    if kif_out:
        try:
            saved = write_kif(start, state, kif_out)
        except OSError as e:
            print(f"[replay] KIF保存エラー: {e}")
            return 2
        if saved is None:
            print("[replay] 同一内容のため保存をスキップしました")
        else:
            print(f"[replay] 保存しました: {saved}")
    return status


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    config = load_config()
    if args.strict:
        config.game.strict_reachability = True
    if args.hotseat:
        config.hotseat = True
    if args.model:
        config.ai.model = args.model

    if args.command == "replay":
        return replay(args.file, config, args.kif, args.format)

    start = None
    if args.sfen:
        try:
            start = sfen_to_state(args.sfen)
        except ValueError as e:
            print(f"SFEN エラー: {e}")
            return 2

    # TUI は textual を読み込むので必要なときだけ
    from tui_app import ShogiChatTui

    ShogiChatTui(config, start=start).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
