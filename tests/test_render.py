# tests/test_render.py
from collections import Counter

import pytest

from constants import INITIAL_COUNTS
from models import Kind, Piece, Side, Square
from position import GameState, create_initial_state, empty_board, with_square
from render import DISPLAY, PROMPT, board_to_piyo, render

GLYPH_TO_KIND = {
    "歩": "P", "香": "L", "桂": "N", "銀": "S", "金": "G",
    "角": "B", "飛": "R", "玉": "K", "王": "K",
}


def _count_pieces(display_text: str):
    """表示用テキストの盤面から (先手, 後手) の駒数を数える"""
    sente, gote = Counter(), Counter()
    for line in display_text.splitlines():
        if not line.startswith("┃"):
            continue
        body = line[1:19]
        for i in range(0, 18, 2):
            mark, glyph = body[i], body[i + 1]
            if glyph == "・":
                continue
            (gote if mark == "v" else sente)[GLYPH_TO_KIND[glyph]] += 1
    return sente, gote


def test_initial_display_piece_counts_match():
    sente, gote = _count_pieces(render(create_initial_state(), DISPLAY))
    assert dict(sente) == INITIAL_COUNTS
    assert dict(gote) == INITIAL_COUNTS


def test_display_layout():
    text = render(create_initial_state())
    lines = text.splitlines()
    assert lines[0] == "【AI の持ち駒】なし"
    assert lines[2] == "  ９ ８ ７ ６ ５ ４ ３ ２ １"
    assert lines[4] == "┃v香v桂v銀v金v玉v金v銀v桂v香┃一"
    assert lines[12] == "┃ 香 桂 銀 金 王 金 銀 桂 香┃九"
    assert lines[-1] == "【あなた の持ち駒】なし"


def test_display_promoted_glyphs_and_hands():
    board = empty_board()
    board = with_square(board, Square(0, 0), Piece(Side.SENTE, Kind.ROOK, True))
    board = with_square(board, Square(1, 0), Piece(Side.GOTE, Kind.BISHOP, True))
    board = with_square(board, Square(2, 0), Piece(Side.GOTE, Kind.SILVER, True))
    board = with_square(board, Square(3, 0), Piece(Side.SENTE, Kind.PAWN, True))
    s = GameState(board=board, sente_hand=(Kind.PAWN, Kind.ROOK), gote_hand=(Kind.GOLD,))
    text = render(s, DISPLAY)
    lines = text.splitlines()
    assert lines[4].startswith("┃ 龍v馬v全 と ・")
    assert lines[0] == "【AI の持ち駒】金"
    assert lines[-1] == "【あなた の持ち駒】歩 飛"


def test_display_from_gote_view_swaps_hands():
    s = GameState(board=empty_board(), sente_hand=(Kind.PAWN,), gote_hand=(Kind.GOLD,))
    lines = render(s, DISPLAY, viewer=Side.GOTE).splitlines()
    assert lines[0] == "【あなた の持ち駒】歩"
    assert lines[-1] == "【AI の持ち駒】金"


def test_prompt_format():
    text = render(create_initial_state(), PROMPT)
    lines = text.splitlines()
    assert lines[0] == "現在の盤面:"
    assert lines[1] == "AI持駒: なし"
    assert lines[2] == "  9 8 7 6 5 4 3 2 1"
    assert lines[3] == "1 l n s g k g s n l"
    assert lines[11] == "9 L N S G K G S N L"
    assert lines[12] == "あなた持駒: なし"
    assert lines[13] == "手番: あなた"


def test_prompt_marks_promoted_and_joins_hand_with_commas():
    board = with_square(empty_board(), Square(4, 4), Piece(Side.GOTE, Kind.ROOK, True))
    s = GameState(board=board, sente_hand=(Kind.PAWN, Kind.PAWN))
    text = render(s, PROMPT)
    assert "5 . . . . +r . . . ." in text
    assert "あなた持駒: 歩,歩" in text


def test_unknown_format():
    with pytest.raises(ValueError):
        render(create_initial_state(), "html")


def test_board_to_piyo_uses_gyoku_for_both_kings():
    text = board_to_piyo(create_initial_state().board)
    lines = text.splitlines()
    assert lines[1] == "+---------------------------+"
    assert lines[2] == "|v香v桂v銀v金v玉v金v銀v桂v香|一"
    assert lines[10] == "| 香 桂 銀 金 玉 金 銀 桂 香|九"
