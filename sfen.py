#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

from typing import Dict, List, Optional

from constants import HAND_ORDER, KIND_LETTERS
from helpers import hand_counts
from models import Kind, Piece, Side, Square
from position import Board, GameState, Hand, empty_board, with_square


def hands_to_sfen(hand_b: Hand, hand_w: Hand) -> str:
    parts: List[str] = []

    def add(kind: str, n: int, is_black: bool) -> None:
        if n <= 0:
            return
        c = kind if is_black else kind.lower()
        parts.append(c if n == 1 else f"{n}{c}")

    counts_b = hand_counts(hand_b)
    counts_w = hand_counts(hand_w)
    for k in HAND_ORDER:
        add(k, counts_b.get(k, 0), True)
    for k in HAND_ORDER:
        add(k, counts_w.get(k, 0), False)

    return "-" if not parts else "".join(parts)


def board_to_sfen(board: Board) -> str:
    rows: List[str] = []
    for cells in board:
        empties = 0
        row = ""
        for p in cells:
            if p is None:
                empties += 1
                continue
            if empties:
                row += str(empties)
                empties = 0
            row += p.letter
        if empties:
            row += str(empties)
        rows.append(row)
    return "/".join(rows)


def state_to_sfen(state: GameState, side_to_move: Optional[Side] = None) -> str:
    side = side_to_move or state.side_to_move
    turn = "b" if side is Side.SENTE else "w"
    hands_part = hands_to_sfen(state.sente_hand, state.gote_hand)
    return f"{board_to_sfen(state.board)} {turn} {hands_part} {len(state.moves) + 1}"


def _parse_hands(hands_part: str) -> Dict[Side, List[Kind]]:
    out: Dict[Side, List[Kind]] = {Side.SENTE: [], Side.GOTE: []}
    if hands_part == "-":
        return out
    i = 0
    while i < len(hands_part):
        # 枚数は2桁のこともある
        if hands_part[i].isdigit():
            j = i
            while j < len(hands_part) and hands_part[j].isdigit():
                j += 1
            if j >= len(hands_part):
                raise ValueError("SFEN持駒が不正です")
            cnt = int(hands_part[i:j])
            pch = hands_part[j]
            i = j + 1
        else:
            cnt = 1
            pch = hands_part[i]
            i += 1
        if pch.upper() not in HAND_ORDER:
            raise ValueError("SFEN持駒の駒種が不正です")
        side = Side.SENTE if pch.isupper() else Side.GOTE
        out[side].extend([Kind(pch.upper())] * cnt)
    return out


def sfen_to_state(sfen: str) -> GameState:
    """SFEN から GameState を作る（手数は無視、棋譜ログは空）"""
    parts = sfen.strip().split()
    if len(parts) < 3:
        raise ValueError("SFEN形式が不正です")
    board_part, turn_part, hands_part = parts[0], parts[1], parts[2]

    rows = board_part.split("/")
    if len(rows) != 9:
        raise ValueError("SFEN盤面の段数が不正です")

    board = empty_board()
    kings = {Side.SENTE: 0, Side.GOTE: 0}
    for r, row in enumerate(rows):
        c = 0
        i = 0
        while i < len(row):
            ch = row[i]
            if ch.isdigit():
                c += int(ch)
                i += 1
                continue
            prom = False
            if ch == "+":
                prom = True
                i += 1
                if i >= len(row):
                    raise ValueError("SFEN駒種が不正です")
                ch = row[i]
            if ch.upper() not in KIND_LETTERS or c > 8:
                raise ValueError("SFEN駒種が不正です")
            kind = Kind(ch.upper())
            if prom and not kind.promotable:
                raise ValueError("SFEN駒種が不正です")
            side = Side.SENTE if ch.isupper() else Side.GOTE
            if kind is Kind.KING:
                kings[side] += 1
                if kings[side] > 1:
                    raise ValueError("SFEN盤面に玉が2枚あります")
            board = with_square(board, Square(c, r), Piece(side, kind, prom))
            c += 1
            i += 1
        if c != 9:
            raise ValueError("SFEN盤面の筋数が不正です")

    if turn_part not in ("b", "w"):
        raise ValueError("SFEN手番が不正です")
    hands = _parse_hands(hands_part)
    return GameState(
        board=board,
        side_to_move=Side.SENTE if turn_part == "b" else Side.GOTE,
        sente_hand=tuple(hands[Side.SENTE]),
        gote_hand=tuple(hands[Side.GOTE]),
    )
