#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from __future__ import annotations

from typing import List, Optional

from constants import RANK_KANJI, NONE_JP
from helpers import hand_to_kif
from models import Kind, Piece, Side
from position import GameState, Board

__all__ = ["render", "board_to_piyo", "state_to_piyo", "hand_names", "DISPLAY", "PROMPT"]

DISPLAY = "display"
PROMPT = "prompt"

_FW_HEADER = "  ９ ８ ７ ６ ５ ４ ３ ２ １"
_HW_HEADER = "  9 8 7 6 5 4 3 2 1"


def hand_names(hand, sep: str = " ") -> str:
    """持駒を取得順のまま並べる（空なら なし）"""
    if not hand:
        return NONE_JP
    return sep.join(k.jp for k in hand)


def _cell_display(p: Optional[Piece]) -> str:
    if p is None:
        return " ・"
    # 後手の駒は v で示す（盤は反転しない）
    return ("v" + p.glyph) if p.side is Side.GOTE else (" " + p.glyph)


def render_display(state: GameState, viewer: Side = Side.SENTE) -> str:
    opp = viewer.opponent
    lines: List[str] = []
    lines.append(f"【{opp.label} の持ち駒】{hand_names(state.hand(opp))}")
    lines.append("")
    lines.append(_FW_HEADER)
    lines.append("┏" + "━" * 27 + "┓")
    for r, row in enumerate(state.board, start=1):
        lines.append("┃" + "".join(_cell_display(p) for p in row) + f"┃{RANK_KANJI[r]}")
    lines.append("┗" + "━" * 27 + "┛")
    lines.append("")
    lines.append(f"【{viewer.label} の持ち駒】{hand_names(state.hand(viewer))}")
    return "\n".join(lines)


def render_prompt(state: GameState, viewer: Side = Side.SENTE) -> str:
    """LLM 向けの簡易盤面（大文字=先手、小文字=後手、+は成駒）"""
    opp = viewer.opponent
    lines: List[str] = ["現在の盤面:"]
    lines.append(f"{opp.label}持駒: {hand_names(state.hand(opp), ',')}")
    lines.append(_HW_HEADER)
    for r, row in enumerate(state.board, start=1):
        lines.append(f"{r} " + " ".join("." if p is None else p.letter for p in row))
    lines.append(f"{viewer.label}持駒: {hand_names(state.hand(viewer), ',')}")
    lines.append(f"手番: {state.side_to_move.label}")
    return "\n".join(lines)


def render(state: GameState, fmt: str = DISPLAY, viewer: Side = Side.SENTE) -> str:
    if fmt == DISPLAY:
        return render_display(state, viewer)
    if fmt == PROMPT:
        return render_prompt(state, viewer)
    raise ValueError(f"unknown render format: {fmt}")


# ---- KIF 盤面図 ----

def board_to_piyo(board: Board) -> str:
    lines = []
    lines.append("  ９ ８ ７ ６ ５ ４ ３ ２ １")
    lines.append("+---------------------------+")
    for r, row in enumerate(board, start=1):
        cells = []
        for p in row:
            if p is None:
                cells.append(" ・")
                continue
            # KIF は先後とも「玉」、成駒は1字名
            name = "玉" if p.kind is Kind.KING else p.glyph
            cells.append(("v" + name) if p.side is Side.GOTE else (" " + name))
        lines.append("|" + "".join(cells) + f"|{RANK_KANJI[r]}")
    lines.append("+---------------------------+")
    return "\n".join(lines)


def state_to_piyo(state: GameState) -> str:
    return "\n".join([
        "後手の持駒：" + hand_to_kif(state.gote_hand),
        board_to_piyo(state.board),
        "先手の持駒：" + hand_to_kif(state.sente_hand),
    ])
