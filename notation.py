#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
指し手表記（「7六歩」「5五歩打」「3三角成」「同歩」「7六歩(77)」）の解析。

Public API:
- parse_position
- parse_move / parse
- parse_numeric
- format_move
- extract_move
"""
from __future__ import annotations

import re
from typing import Optional, Tuple, Union

from constants import (
    FILE_CHARS,
    RANK_CHARS,
    RANK_KANJI,
    PIECE_NAMES_LONGEST,
    DROP_MARK,
    PROMOTE_MARK,
    NO_PROMOTE_MARK,
    SAME_MARK,
    TURN_MARKS,
)
from models import (
    FailureKind,
    MoveError,
    ParsedMove,
    ParseFailure,
    Piece,
    Square,
    kind_from_name,
)

__all__ = [
    "parse_position",
    "parse_move",
    "parse",
    "parse_numeric",
    "format_move",
    "extract_move",
]


_FILE_RE = re.compile(r"[１-９1-9]")
_RANK_RE = re.compile(r"[一二三四五六七八九]")
_SOURCE_RE = re.compile(r"\(([1-9])([1-9])\)$")
_FW_TO_HW = str.maketrans("０１２３４５６７８９（）", "0123456789()")

# 応答文の中から最初の指し手らしき部分を拾う
_PIECE_ALT = "|".join(re.escape(n) for n in PIECE_NAMES_LONGEST)
_NOTATION_RE = re.compile(
    rf"(?:[１-９1-9][一二三四五六七八九]|{SAME_MARK}[\s　]*)"
    rf"(?:{_PIECE_ALT})"
    rf"(?:{DROP_MARK}|{NO_PROMOTE_MARK}|{PROMOTE_MARK})?"
    r"(?:\([1-9][1-9]\))?"
)


def _normalize(move_str: str) -> str:
    s = "".join(move_str.split())  # 全角スペースも除去
    return s.lstrip(TURN_MARKS)


def _square_of(file_ch: str, rank_ch: str) -> Square:
    idx = FILE_CHARS.index(file_ch) % 9  # 全角/半角を同じ番号に
    return Square(8 - idx, RANK_CHARS.index(rank_ch))


def parse_position(pos: str) -> Optional[Square]:
    """'7六' / '７六' → Square(col=2, row=5)。読めなければ None"""
    col_m = _FILE_RE.search(pos)
    row_m = _RANK_RE.search(pos)
    if not col_m or not row_m:
        return None
    return _square_of(col_m.group(0), row_m.group(0))


def parse_move(move_str: str, prev_to: Optional[Square] = None) -> ParsedMove:
    """
    指し手文字列を構造化する。失敗時は MoveError(NOTATION_UNRECOGNIZED)。
    prev_to は「同」の解決に使う直前の移動先。
    """
    s = _normalize(move_str)
    if not s:
        raise MoveError(FailureKind.NOTATION_UNRECOGNIZED, "指し手が空です")

    same = False
    if s.startswith(SAME_MARK):
        if prev_to is None:
            raise MoveError(FailureKind.NOTATION_UNRECOGNIZED, "「同」の直前の指し手がありません")
        to_sq = prev_to
        rest = s[len(SAME_MARK):]
        same = True
    else:
        fm = _FILE_RE.search(s)
        if not fm:
            raise MoveError(FailureKind.NOTATION_UNRECOGNIZED, "筋（1〜9）が読み取れません")
        rm = _RANK_RE.match(s, fm.end())
        if not rm:
            raise MoveError(FailureKind.NOTATION_UNRECOGNIZED, "段（一〜九）が読み取れません")
        to_sq = _square_of(fm.group(0), rm.group(0))
        rest = s[rm.end():]

    rest = rest.translate(_FW_TO_HW)
    from_sq: Optional[Square] = None
    m = _SOURCE_RE.search(rest)
    if m:
        from_sq = Square.from_file_rank(int(m.group(1)), int(m.group(2)))
        rest = rest[:m.start()]

    is_drop = DROP_MARK in rest
    promote = False
    if is_drop:
        rest = rest.replace(DROP_MARK, "")
        from_sq = None
    elif rest.endswith(NO_PROMOTE_MARK):
        rest = rest[:-len(NO_PROMOTE_MARK)]
    elif rest.endswith(PROMOTE_MARK) and len(rest) > len(PROMOTE_MARK):
        rest = rest[:-len(PROMOTE_MARK)]
        promote = True

    if not rest:
        raise MoveError(FailureKind.NOTATION_UNRECOGNIZED, "駒の種類が読み取れません")
    hit = kind_from_name(rest)
    if hit is None:
        raise MoveError(FailureKind.NOTATION_UNRECOGNIZED, f"駒「{rest}」を理解できませんでした")
    kind, token_promoted = hit

    return ParsedMove(
        text=move_str.strip(),
        to_sq=to_sq,
        kind=kind,
        token_promoted=token_promoted,
        is_drop=is_drop,
        promote=promote,
        from_sq=from_sq,
        same_as_prev=same,
    )


def parse(move_str: str, prev_to: Optional[Square] = None) -> Union[ParsedMove, ParseFailure]:
    try:
        return parse_move(move_str, prev_to)
    except MoveError as e:
        return ParseFailure(e.kind, str(e))


def parse_numeric(s: str) -> Tuple[Square, Square, bool]:
    """
    数字入力: 4桁(移動) / 5桁(末尾1で成り)。例 7776 / 22331
    Returns (from_sq, to_sq, promote)
    """
    s = s.strip()
    if not re.fullmatch(r"\d{4,5}", s):
        raise ValueError("数字入力は 4桁(移動) / 5桁(成り) です")
    promote = (len(s) == 5 and s[-1] == "1")
    f1, r1, f2, r2 = map(int, s[:4])
    return Square.from_file_rank(f1, r1), Square.from_file_rank(f2, r2), promote


def format_move(
    to_sq: Square,
    piece: Piece,
    promote: bool = False,
    from_sq: Optional[Square] = None,
    drop: bool = False,
) -> str:
    """座標と駒から表記を作る（例: 7六歩(77) / 2二角成 / 5五歩打）"""
    text = f"{to_sq.file}{RANK_KANJI[to_sq.rank]}{piece.name}"
    if drop:
        return text + DROP_MARK
    if promote and not piece.promoted and piece.kind.promotable:
        text += PROMOTE_MARK
    if from_sq is not None:
        text += f"({from_sq.file}{from_sq.rank})"
    return text


def extract_move(text: str) -> Optional[str]:
    """自由文から最初の指し手表記を取り出す（無ければ None）"""
    m = _NOTATION_RE.search(text or "")
    if not m:
        return None
    return "".join(m.group(0).split())
