#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from __future__ import annotations

from typing import Dict, List, Optional, Tuple
import pathlib

from constants import PIECE_JP, PROMOTED_JP, SAME_MARK, DROP_MARK, PROMOTE_MARK
from helpers import sq_to_kif, sq_to_paren, now_yyyy_mm_dd_hhmmss, _write_kif_unique
from models import Move, Side, Square
from paths import _resolve_kif_path
from position import GameState, create_initial_state
from render import state_to_piyo

__all__ = [
    "kif_line_for_move",
    "generate_kif_text",
    "write_kif",
]


def _moved_name(mv: Move) -> str:
    if mv.was_promoted and mv.kind.value in PROMOTED_JP:
        return PROMOTED_JP[mv.kind.value]
    name = PIECE_JP[mv.kind.value]
    return name + (PROMOTE_MARK if mv.promote else "")


def kif_line_for_move(idx: int, mv: Move, prev_to: Optional[Square]) -> Tuple[str, Square]:
    dst = f"{SAME_MARK}　" if (prev_to is not None and prev_to == mv.to_sq) else sq_to_kif(mv.to_sq)
    if mv.is_drop:
        body = f"{dst}{PIECE_JP[mv.kind.value]}{DROP_MARK}"
    else:
        body = f"{dst}{_moved_name(mv)}{sq_to_paren(mv.from_sq)}"
    line = f"{idx:4d} {body:<12} ( 0:00/00:00:00)"
    return line, mv.to_sq


def _result_line(state: GameState) -> Optional[str]:
    if not state.game_over or state.winner is None:
        return None
    n = len(state.moves)
    who = "先手" if state.winner is Side.SENTE else "後手"
    return f"まで{n}手で{who}の勝ち"


def generate_kif_text(
    start: GameState,
    state: GameState,
    sente_name: str = Side.SENTE.label,
    gote_name: str = Side.GOTE.label,
) -> str:
    """
    start から state までの棋譜を KIF 形式にする。
    平手初期局面以外から始めた場合は盤面図と持駒を付ける。
    """
    header: List[str] = []
    header.append("# ---- shogi-chat 棋譜ファイル ----")
    header.append(f"終了日時：{now_yyyy_mm_dd_hhmmss()}")
    initial = create_initial_state()
    if start.board == initial.board and not start.sente_hand and not start.gote_hand:
        header.append("手合割：平手")
    else:
        header.append(state_to_piyo(start))
        if start.side_to_move is Side.GOTE:
            header.append("後手番")
    header.append(f"先手：{sente_name}")
    header.append(f"後手：{gote_name}")
    header.append("手数----指手---------消費時間--")

    lines: List[str] = []
    prev_to = start.last_to
    for idx, mv in enumerate(state.moves[len(start.moves):], start=1):
        line, prev_to = kif_line_for_move(idx, mv, prev_to)
        lines.append(line)

    result = _result_line(state)
    if result:
        lines.append(result)
    return "\n".join(header + lines) + "\n"


def write_kif(
    start: GameState,
    state: GameState,
    outfile: str,
    seen: Optional[Dict[str, str]] = None,
) -> Optional[pathlib.Path]:
    """KIF を cp932 で保存する。同一内容（seen に登録済み）はスキップして None"""
    text = generate_kif_text(start, state)
    outp = _resolve_kif_path(outfile)
    outp.parent.mkdir(parents=True, exist_ok=True)
    saved = _write_kif_unique(outp.parent, outp.name, text, seen)
    return pathlib.Path(saved) if saved else None
