# tests/test_sfen.py
import pytest

from models import Kind, Piece, Side, Square
from position import create_initial_state, parse_and_apply
from sfen import hands_to_sfen, sfen_to_state, state_to_sfen

HIRATE = "lnsgkgsnl/1r5b1/ppppppppp/9/9/9/PPPPPPPPP/1B5R1/LNSGKGSNL b - 1"


def test_initial_state_to_sfen():
    assert state_to_sfen(create_initial_state()) == HIRATE


def test_sfen_to_state_initial():
    s = sfen_to_state(HIRATE)
    assert s == create_initial_state()


def test_side_override_and_move_number():
    s = parse_and_apply(create_initial_state(), "7六歩(77)").new_state
    sfen = state_to_sfen(s)
    assert sfen.endswith(" w - 2")
    assert state_to_sfen(s, Side.SENTE).split()[1] == "b"


def test_hands_and_turn():
    s = sfen_to_state("4k4/9/9/9/9/9/9/9/4K4 w 2Pr 1")
    assert s.side_to_move is Side.GOTE
    assert s.sente_hand == (Kind.PAWN, Kind.PAWN)
    assert s.gote_hand == (Kind.ROOK,)
    assert s.piece_at(Square(4, 0)) == Piece(Side.GOTE, Kind.KING)


def test_two_digit_hand_count():
    s = sfen_to_state("4k4/9/9/9/9/9/9/9/4K4 b 10p 1")
    assert s.gote_hand == (Kind.PAWN,) * 10
    assert hands_to_sfen(s.sente_hand, s.gote_hand) == "10p"


def test_promoted_piece():
    s = sfen_to_state("4k4/9/9/9/4+R4/9/9/9/4K4 b - 1")
    assert s.piece_at(Square(4, 4)) == Piece(Side.SENTE, Kind.ROOK, True)


@pytest.mark.parametrize(
    "sfen",
    [
        "lnsgk2nl/1r4gs1/p1pppp1pp/6p2/1p5P1/2P6/PP1PPPP1P/1SG4R1/LN2KGSNL b Bb 1",
        "4k4/9/9/9/4+R4/9/9/9/4K4 b - 1",
        "8k/9/9/9/9/9/9/9/K8 w RB2G3Pn 1",
    ],
)
def test_round_trip(sfen):
    assert state_to_sfen(sfen_to_state(sfen)) == sfen


@pytest.mark.parametrize(
    "sfen",
    [
        "abc",
        "lnsgkgsnl/1r5b1/ppppppppp/9/9/9/PPPPPPPPP/1B5R1 b - 1",
        "lnsgkgsnl/1r5b1/ppppppppp/9/9/9/PPPPPPPPP/1B5R1/LNSGKGSNL x - 1",
        "lnsgkgsnl/1r5b1/ppppppppp/9/9/9/PPPPPPPPP/1B5R1/LNSGKGSN b - 1",
        "lnsgkgsnl/1r5b1/ppppppppp/9/9/9/PPPPPPPPP/1B5R1/LNSGKGSNL b 2K 1",
        "lnsgkgsnl/1r5b1/ppppppppp/9/9/9/PPPPXPPPP/1B5R1/LNSGKGSNL b - 1",
        "4+k4/9/9/9/9/9/9/9/4K4 b - 1",
        "4k4/9/9/9/4+G4/9/9/9/4K4 b - 1",
        "4k4/9/9/9/9/9/9/9/3KK4 b - 1",
        "k3k4/9/9/9/9/9/9/9/4K4 w - 1",
    ],
)
def test_invalid_sfen(sfen):
    with pytest.raises(ValueError):
        sfen_to_state(sfen)
