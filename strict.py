#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
到達可能性チェック（python-shogi）

通常は「最初に見つかった同種の駒」を動かすだけだが、
GameConfig.strict_reachability が有効なときは
その駒が移動先へ動けるか（王手放置などは見ない疑似合法）を確かめる。
"""
from __future__ import annotations

import shogi  # pip install python-shogi

from models import Side, Square
from position import GameState
from sfen import state_to_sfen

__all__ = ["is_reachable", "to_shogi_square"]


def to_shogi_square(sq: Square) -> int:
    # python-shogi: 0 = 9一, 80 = 1九
    return sq.row * 9 + sq.col


def is_reachable(state: GameState, frm: Square, to: Square, side: Side) -> bool:
    board = shogi.Board(state_to_sfen(state, side))
    a, b = to_shogi_square(frm), to_shogi_square(to)
    # 成/不成どちらかで指せれば到達可能とみなす
    for promotion in (False, True):
        if board.is_pseudo_legal(shogi.Move(a, b, promotion)):
            return True
    return False
