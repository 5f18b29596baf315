#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import NamedTuple, Optional, Tuple, TYPE_CHECKING

from constants import (
    PIECE_JP,
    PROMOTED_JP,
    PROMOTABLE,
    NAME_TO_KIND,
    DISP_NAME,
    SENTE_KING_GLYPH,
    SIDE_LABEL,
)

if TYPE_CHECKING:
    from position import GameState


class Side(Enum):
    SENTE = "B"  # 先手（あなた）
    GOTE = "W"   # 後手（AI）

    @property
    def opponent(self) -> "Side":
        return Side.GOTE if self is Side.SENTE else Side.SENTE

    @property
    def label(self) -> str:
        return SIDE_LABEL[self.value]


class Kind(Enum):
    KING = "K"
    ROOK = "R"
    BISHOP = "B"
    GOLD = "G"
    SILVER = "S"
    KNIGHT = "N"
    LANCE = "L"
    PAWN = "P"

    @property
    def promotable(self) -> bool:
        return self.value in PROMOTABLE

    @property
    def jp(self) -> str:
        return PIECE_JP[self.value]


def piece_name(kind: Kind, promoted: bool = False) -> str:
    """指し手表記での駒名（成駒は 龍/馬/と/成銀/成桂/成香）"""
    if promoted and kind.promotable:
        return PROMOTED_JP[kind.value]
    return PIECE_JP[kind.value]


def kind_from_name(name: str) -> Optional[Tuple[Kind, bool]]:
    """駒名 → (駒種, 成駒か)。知らない名前は None"""
    hit = NAME_TO_KIND.get(name)
    if hit is None:
        return None
    letter, prom = hit
    return Kind(letter), prom


class Square(NamedTuple):
    """盤上の座標。col 0 = ９筋（左端）、row 0 = 一段目（上端）"""
    col: int
    row: int

    @property
    def file(self) -> int:
        return 9 - self.col

    @property
    def rank(self) -> int:
        return self.row + 1

    @classmethod
    def from_file_rank(cls, file_: int, rank: int) -> "Square":
        if not (1 <= file_ <= 9 and 1 <= rank <= 9):
            raise ValueError("マスは 11〜99 の範囲です")
        return cls(9 - file_, rank - 1)


@dataclass(frozen=True)
class Piece:
    side: Side
    kind: Kind
    promoted: bool = False

    def demoted(self) -> "Piece":
        return replace(self, promoted=False)

    def promote(self) -> "Piece":
        # 玉・金は成れない（黙って不成のまま）
        if not self.kind.promotable:
            return self
        return replace(self, promoted=True)

    @property
    def name(self) -> str:
        return piece_name(self.kind, self.promoted)

    @property
    def glyph(self) -> str:
        if self.kind is Kind.KING and self.side is Side.SENTE:
            return SENTE_KING_GLYPH
        return DISP_NAME[(self.kind.value, self.promoted)]

    @property
    def letter(self) -> str:
        """'P' / '+r' など（大文字=先手）"""
        ch = self.kind.value if self.side is Side.SENTE else self.kind.value.lower()
        return ("+" + ch) if self.promoted else ch


class FailureKind(Enum):
    NOTATION_UNRECOGNIZED = "notation_unrecognized"
    HAND_EMPTY = "hand_empty"
    PIECE_NOT_FOUND = "piece_not_found"
    SQUARE_OCCUPIED = "square_occupied"


class MoveError(ValueError):
    def __init__(self, kind: FailureKind, message: str):
        super().__init__(message)
        self.kind = kind


@dataclass(frozen=True)
class ParsedMove:
    text: str
    to_sq: Square
    kind: Kind
    token_promoted: bool   # 駒名そのものが成駒（龍・馬・と…）
    is_drop: bool
    promote: bool          # 末尾の「成」
    from_sq: Optional[Square] = None  # 「7六歩(77)」のように明示された移動元
    same_as_prev: bool = False


@dataclass(frozen=True)
class ParseFailure:
    kind: FailureKind
    reason: str

    def __bool__(self) -> bool:
        return False


@dataclass(frozen=True)
class Move:
    """適用済みの1手（KIF出力・同の判定用）"""
    side: Side
    is_drop: bool
    kind: Kind
    from_sq: Optional[Square]
    to_sq: Square
    promote: bool
    was_promoted: bool
    same_as_prev: bool
    captured: Optional[Kind] = None


@dataclass(frozen=True)
class ApplyResult:
    success: bool
    new_state: "GameState"
    message: str
    failure: Optional[FailureKind] = None
