#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterator, List, Optional, Tuple

from constants import INITIAL_ROWS
from models import (
    ApplyResult,
    FailureKind,
    Kind,
    Move,
    MoveError,
    ParsedMove,
    Piece,
    Side,
    Square,
    piece_name,
)
from notation import parse_move


__all__ = [
    "GameState",
    "create_initial_state",
    "apply",
    "parse_and_apply",
    "check_terminal",
    "is_terminal",
]


Row = Tuple[Optional[Piece], ...]
Board = Tuple[Row, ...]
Hand = Tuple[Kind, ...]


def piece_from_letter(tok: str) -> Optional[Piece]:
    """'.' / 'P' / 'p' / '+R' / '+r' → Piece"""
    if tok == ".":
        return None
    prom = tok.startswith("+")
    ch = tok[1:] if prom else tok
    side = Side.SENTE if ch.isupper() else Side.GOTE
    try:
        kind = Kind(ch.upper())
    except ValueError:
        raise ValueError(f"駒指定が不正です: {tok}")
    return Piece(side, kind, prom)


def empty_board() -> Board:
    return tuple(tuple(None for _ in range(9)) for _ in range(9))


def _initial_board() -> Board:
    return tuple(tuple(piece_from_letter(tok) for tok in row.split()) for row in INITIAL_ROWS)


def with_square(board: Board, sq: Square, p: Optional[Piece]) -> Board:
    rows = list(board)
    cells = list(rows[sq.row])
    cells[sq.col] = p
    rows[sq.row] = tuple(cells)
    return tuple(rows)


@dataclass(frozen=True)
class GameState:
    board: Board
    side_to_move: Side = Side.SENTE
    sente_hand: Hand = ()
    gote_hand: Hand = ()
    log: Tuple[str, ...] = ()
    moves: Tuple[Move, ...] = ()
    game_over: bool = False
    winner: Optional[Side] = None

    def piece_at(self, sq: Square) -> Optional[Piece]:
        return self.board[sq.row][sq.col]

    def hand(self, side: Side) -> Hand:
        return self.sente_hand if side is Side.SENTE else self.gote_hand

    @property
    def last_to(self) -> Optional[Square]:
        return self.moves[-1].to_sq if self.moves else None

    def squares(self) -> Iterator[Tuple[Square, Optional[Piece]]]:
        """行優先（一段目→九段目、９筋→１筋）の走査順"""
        for r in range(9):
            for c in range(9):
                yield Square(c, r), self.board[r][c]

    def _with_hand(self, side: Side, hand: Hand) -> "GameState":
        if side is Side.SENTE:
            return replace(self, sente_hand=hand)
        return replace(self, gote_hand=hand)


def create_initial_state() -> GameState:
    return GameState(board=_initial_board())


# ---- terminal ----

def check_terminal(board: Board) -> Optional[Side]:
    """玉が消えた側の相手を勝者として返す。両方ある/両方無いときは None"""
    kings = {Side.SENTE: False, Side.GOTE: False}
    for row in board:
        for p in row:
            if p is not None and p.kind is Kind.KING:
                kings[p.side] = True
    if kings[Side.SENTE] and not kings[Side.GOTE]:
        return Side.SENTE
    if kings[Side.GOTE] and not kings[Side.SENTE]:
        return Side.GOTE
    return None


def is_terminal(state: GameState) -> Tuple[bool, Optional[Side]]:
    return state.game_over, state.winner


# ---- move resolution ----

def _matches(p: Piece, mv: ParsedMove) -> bool:
    if p.kind is not mv.kind:
        return False
    # 成駒名（龍・馬…）は成駒だけ。元の駒名は成/不成どちらにも当たる
    return p.promoted or not mv.token_promoted


def _find_source(state: GameState, mv: ParsedMove, side: Side, strict: bool) -> Tuple[Square, Piece]:
    name = piece_name(mv.kind, mv.token_promoted)

    if mv.from_sq is not None:
        p = state.piece_at(mv.from_sq)
        if p is None or p.side is not side or not _matches(p, mv):
            raise MoveError(
                FailureKind.PIECE_NOT_FOUND,
                f"{mv.from_sq.file}{mv.from_sq.rank} に動かせる「{name}」が見つかりません",
            )
        if strict and not _reachable(state, mv.from_sq, mv.to_sq, side):
            raise MoveError(FailureKind.PIECE_NOT_FOUND, f"その「{name}」は移動先に動けません")
        return mv.from_sq, p

    candidates: List[Tuple[Square, Piece]] = [
        (sq, p) for sq, p in state.squares()
        if p is not None and p.side is side and _matches(p, mv)
    ]
    if strict:
        candidates = [(sq, p) for sq, p in candidates if _reachable(state, sq, mv.to_sq, side)]
    if not candidates:
        raise MoveError(FailureKind.PIECE_NOT_FOUND, f"動かせる「{name}」が見つかりません")
    # 簡易的に最初に見つかった駒を使う
    return candidates[0]


def _reachable(state: GameState, frm: Square, to: Square, side: Side) -> bool:
    from strict import is_reachable
    return is_reachable(state, frm, to, side)


def _remove_from_hand(hand: Hand, kind: Kind) -> Hand:
    idx = hand.index(kind)
    return hand[:idx] + hand[idx + 1:]


def _apply_drop(state: GameState, mv: ParsedMove, side: Side, allow_occupied: bool) -> Tuple[GameState, Move]:
    hand = state.hand(side)
    name = piece_name(mv.kind, mv.token_promoted)
    if mv.token_promoted or mv.kind not in hand:
        raise MoveError(FailureKind.HAND_EMPTY, f"持ち駒に「{name}」がありません")
    if state.piece_at(mv.to_sq) is not None and not allow_occupied:
        raise MoveError(FailureKind.SQUARE_OCCUPIED, "打ち先に駒があります")

    nxt = state._with_hand(side, _remove_from_hand(hand, mv.kind))
    nxt = replace(nxt, board=with_square(nxt.board, mv.to_sq, Piece(side, mv.kind, False)))
    rec = Move(side, True, mv.kind, None, mv.to_sq, False, False, mv.same_as_prev)
    return nxt, rec


def _apply_board_move(state: GameState, mv: ParsedMove, side: Side, strict: bool) -> Tuple[GameState, Move]:
    frm, p = _find_source(state, mv, side, strict)

    nxt = state
    captured = state.piece_at(mv.to_sq)
    if captured is not None and captured.kind is not Kind.KING:
        # 成駒は元に戻して、動かした側の持駒へ
        nxt = nxt._with_hand(side, nxt.hand(side) + (captured.demoted().kind,))

    wants_promote = mv.promote or mv.token_promoted
    moved = p.promote() if (wants_promote and not p.promoted) else p

    board = with_square(nxt.board, frm, None)
    board = with_square(board, mv.to_sq, moved)
    nxt = replace(nxt, board=board)
    rec = Move(
        side, False, p.kind, frm, mv.to_sq,
        promote=moved.promoted and not p.promoted,
        was_promoted=p.promoted,
        same_as_prev=mv.same_as_prev,
        captured=captured.kind if captured is not None else None,
    )
    return nxt, rec


def apply(
    state: GameState,
    mv: ParsedMove,
    side: Optional[Side] = None,
    strict: bool = False,
    allow_drop_on_occupied: bool = False,
) -> ApplyResult:
    """
    解析済みの指し手を適用し、新しい GameState を返す。
    state 自体は変更しない（失敗時は state をそのまま返す）。
    """
    side = side or state.side_to_move
    try:
        if mv.is_drop:
            nxt, rec = _apply_drop(state, mv, side, allow_drop_on_occupied)
        else:
            nxt, rec = _apply_board_move(state, mv, side, strict)
    except MoveError as e:
        return ApplyResult(False, state, str(e), e.kind)

    nxt = replace(
        nxt,
        side_to_move=side.opponent,
        log=nxt.log + (f"{side.label}: {mv.text}",),
        moves=nxt.moves + (rec,),
    )
    if not nxt.game_over:
        winner = check_terminal(nxt.board)
        if winner is not None:
            nxt = replace(nxt, game_over=True, winner=winner)
    return ApplyResult(True, nxt, "OK")


def parse_and_apply(
    state: GameState,
    move_str: str,
    side: Optional[Side] = None,
    config=None,
) -> ApplyResult:
    try:
        mv = parse_move(move_str, state.last_to)
    except MoveError as e:
        return ApplyResult(False, state, str(e), e.kind)
    strict = bool(config and config.strict_reachability)
    allow_occupied = bool(config and config.allow_drop_on_occupied)
    return apply(state, mv, side, strict=strict, allow_drop_on_occupied=allow_occupied)
