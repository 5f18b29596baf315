# tests/test_kif.py
from pathlib import Path

import pytest

import kif_format
from kif_format import generate_kif_text, kif_line_for_move, write_kif
from kif_parser import parse_kif_moves, parse_kif_startpos, read_kif_text
from models import Kind, Piece, Side, Square
from position import GameState, create_initial_state, empty_board, parse_and_apply, with_square
from sfen import sfen_to_state

MOVES = ["7六歩(77)", "3四歩(33)", "2二角成(88)", "同銀(31)"]


def _play(start, moves):
    s = start
    for text in moves:
        res = parse_and_apply(s, text)
        assert res.success, res.message
        s = res.new_state
    return s


@pytest.fixture
def fixed_clock(monkeypatch):
    monkeypatch.setattr(kif_format, "now_yyyy_mm_dd_hhmmss", lambda: "2024/01/02 03:04:05")


def test_kif_line_format():
    s = _play(create_initial_state(), MOVES[:1])
    line, to_sq = kif_line_for_move(1, s.moves[0], None)
    assert line.startswith("   1 ７六歩(77)")
    assert line.endswith("( 0:00/00:00:00)")
    assert to_sq == Square(2, 5)


def test_generate_kif_from_hirate(fixed_clock):
    start = create_initial_state()
    text = generate_kif_text(start, _play(start, MOVES))
    assert "終了日時：2024/01/02 03:04:05" in text
    assert "手合割：平手" in text
    assert "先手：あなた" in text and "後手：AI" in text
    assert "   1 ７六歩(77)" in text
    assert "   2 ３四歩(33)" in text
    assert "   3 ２二角成(88)" in text
    assert "   4 同　銀(31)" in text
    assert "まで" not in text


def test_drop_line():
    start = GameState(
        board=with_square(
            with_square(empty_board(), Square(4, 8), Piece(Side.SENTE, Kind.KING)),
            Square(4, 0), Piece(Side.GOTE, Kind.KING),
        ),
        sente_hand=(Kind.GOLD,),
    )
    text = generate_kif_text(start, _play(start, ["5二金打"]))
    assert "   1 ５二金打" in text


def test_kif_round_trip_replays_to_same_position(fixed_clock):
    start = create_initial_state()
    end = _play(start, MOVES)
    text = generate_kif_text(start, end)

    assert parse_kif_moves(text) == ["７六歩(77)", "３四歩(33)", "２二角成(88)", "同銀(31)"]
    start2 = parse_kif_startpos(text)
    assert start2 == start
    end2 = _play(start2, parse_kif_moves(text))
    assert end2.board == end.board
    assert end2.sente_hand == end.sente_hand and end2.gote_hand == end.gote_hand


def test_non_hirate_start_writes_diagram(fixed_clock):
    start = sfen_to_state("4k4/9/9/9/9/9/9/9/4K4 w 2Pr 1")
    end = _play(start, ["5二飛打"])
    text = generate_kif_text(start, end)
    assert "手合割" not in text
    assert "後手番" in text
    assert "先手の持駒：歩二" in text
    assert "後手の持駒：飛" in text
    assert parse_kif_startpos(text) == start
    assert parse_kif_moves(text) == ["５二飛打"]


def test_result_line_after_king_capture(fixed_clock):
    start = sfen_to_state("4k4/9/9/9/9/9/9/4r4/4K4 w - 1")
    end = _play(start, ["5九飛"])
    text = generate_kif_text(start, end)
    assert text.rstrip().endswith("まで1手で後手の勝ち")
    assert parse_kif_moves(text) == ["５九飛(58)"]


def test_write_kif_to_output_dir_in_cp932(tmp_path, monkeypatch, fixed_clock):
    monkeypatch.setenv("SHOGI_CHAT_HOME", str(tmp_path))
    start = create_initial_state()
    end = _play(start, MOVES[:2])

    p = write_kif(start, end, "game.kif")
    assert p is not None
    assert p.resolve() == (tmp_path / "OUTPUT" / "game.kif").resolve()
    text = p.read_bytes().decode("cp932")
    assert "７六歩(77)" in text
    assert read_kif_text(str(p)) == text


def test_write_kif_skips_duplicates_with_seen(tmp_path, monkeypatch, fixed_clock):
    monkeypatch.setenv("SHOGI_CHAT_HOME", str(tmp_path))
    start = create_initial_state()
    end = _play(start, MOVES[:1])
    seen = {}
    assert write_kif(start, end, "a.kif", seen) is not None
    assert write_kif(start, end, "b.kif", seen) is None
    assert not (tmp_path / "OUTPUT" / "b.kif").exists()


def test_write_kif_explicit_path(tmp_path, fixed_clock):
    start = create_initial_state()
    out = tmp_path / "sub" / "x.kif"
    p = write_kif(start, start, str(out))
    assert Path(p) == out
    assert out.exists()


def test_plain_text_moves():
    text = "# 先手から\n7六歩\n\n3四歩\n  2六歩  \n"
    assert parse_kif_moves(text) == ["7六歩", "3四歩", "2六歩"]
    assert parse_kif_startpos(text) == create_initial_state()


def test_kif_moves_stop_at_resign_and_variations():
    text = "\n".join([
        "手合割：平手",
        "手数----指手---------消費時間--",
        "   1 ７六歩(77)   ( 0:01/00:00:01)",
        "   2 投了",
        "変化：2手",
        "   2 ８四歩(83)   ( 0:01/00:00:02)",
    ])
    assert parse_kif_moves(text) == ["７六歩(77)"]
