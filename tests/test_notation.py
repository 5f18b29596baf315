# tests/test_notation.py
import pytest

from models import FailureKind, Kind, MoveError, ParseFailure, Piece, Side, Square
from notation import extract_move, format_move, parse, parse_move, parse_numeric, parse_position


def test_parse_position_fullwidth_and_halfwidth_are_same_square():
    assert parse_position("7六") == Square(2, 5)
    assert parse_position("７六") == Square(2, 5)
    assert parse_position("9一") == Square(0, 0)
    assert parse_position("１九") == Square(8, 8)


def test_parse_position_unreadable_is_none():
    assert parse_position("六") is None
    assert parse_position("77") is None


def test_parse_board_move():
    mv = parse_move("7六歩")
    assert mv.to_sq == Square(2, 5)
    assert mv.kind is Kind.PAWN
    assert not mv.is_drop
    assert not mv.promote
    assert not mv.token_promoted
    assert mv.from_sq is None
    assert mv.text == "7六歩"


def test_parse_drop():
    mv = parse_move("5五歩打")
    assert mv.is_drop
    assert mv.kind is Kind.PAWN
    assert mv.to_sq == Square(4, 4)
    assert not mv.promote


def test_parse_promote_and_explicit_no_promote():
    mv = parse_move("3三角成")
    assert mv.kind is Kind.BISHOP
    assert mv.to_sq == Square(6, 2)
    assert mv.promote

    mv = parse_move("3三角不成")
    assert mv.kind is Kind.BISHOP
    assert not mv.promote


@pytest.mark.parametrize(
    "text, kind",
    [
        ("2二馬", Kind.BISHOP),
        ("8二龍", Kind.ROOK),
        ("8二竜", Kind.ROOK),
        ("5一成銀", Kind.SILVER),
        ("1三成香", Kind.LANCE),
        ("4四と", Kind.PAWN),
    ],
)
def test_parse_promoted_piece_names(text, kind):
    mv = parse_move(text)
    assert mv.kind is kind
    assert mv.token_promoted
    # 成駒名そのものは「成」の指定ではない
    assert not mv.promote


def test_parse_ignores_turn_marks_and_spaces():
    mv = parse_move("▲７六　歩")
    assert mv.to_sq == Square(2, 5)
    assert mv.kind is Kind.PAWN


def test_parse_explicit_source():
    assert parse_move("7六歩(77)").from_sq == Square(2, 6)
    assert parse_move("７六歩（７７）").from_sq == Square(2, 6)
    assert parse_move("2二角成(88)").from_sq == Square(1, 7)


def test_parse_same_square():
    mv = parse_move("同歩", prev_to=Square(2, 5))
    assert mv.to_sq == Square(2, 5)
    assert mv.same_as_prev

    mv = parse_move("同　銀(31)", prev_to=Square(7, 1))
    assert mv.to_sq == Square(7, 1)
    assert mv.from_sq == Square(6, 0)


def test_same_without_previous_move_fails():
    with pytest.raises(MoveError) as ei:
        parse_move("同歩")
    assert ei.value.kind is FailureKind.NOTATION_UNRECOGNIZED


@pytest.mark.parametrize(
    "text, reason",
    [
        ("六歩", "筋"),
        ("7歩", "段"),
        ("7六犬", "駒「犬」"),
        ("7六", "駒の種類"),
        ("", "空"),
    ],
)
def test_failures_report_distinct_reasons(text, reason):
    res = parse(text)
    assert isinstance(res, ParseFailure)
    assert not res
    assert res.kind is FailureKind.NOTATION_UNRECOGNIZED
    assert reason in res.reason


def test_parse_numeric():
    assert parse_numeric("7776") == (Square(2, 6), Square(2, 5), False)
    assert parse_numeric("22331") == (Square(7, 1), Square(6, 2), True)
    assert parse_numeric("22330") == (Square(7, 1), Square(6, 2), False)


@pytest.mark.parametrize("text", ["776", "777777", "0776", "7a76"])
def test_parse_numeric_rejects(text):
    with pytest.raises(ValueError):
        parse_numeric(text)


def test_format_move():
    pawn = Piece(Side.SENTE, Kind.PAWN)
    assert format_move(Square(2, 5), pawn, from_sq=Square(2, 6)) == "7六歩(77)"
    bishop = Piece(Side.SENTE, Kind.BISHOP)
    assert format_move(Square(6, 2), bishop, True, Square(7, 1)) == "3三角成(22)"
    assert format_move(Square(4, 4), Piece(Side.GOTE, Kind.PAWN), drop=True) == "5五歩打"


def test_format_move_never_promotes_gold_or_promoted_piece():
    gold = Piece(Side.SENTE, Kind.GOLD)
    assert format_move(Square(4, 1), gold, True) == "5二金"
    horse = Piece(Side.SENTE, Kind.BISHOP, True)
    assert format_move(Square(7, 1), horse, True) == "2二馬"


def test_format_then_parse_keeps_the_move():
    text = format_move(Square(6, 2), Piece(Side.SENTE, Kind.BISHOP), True, Square(1, 7))
    mv = parse_move(text)
    assert (mv.to_sq, mv.kind, mv.promote, mv.from_sq) == (Square(6, 2), Kind.BISHOP, True, Square(1, 7))


@pytest.mark.parametrize(
    "reply, move",
    [
        ("私の手は「3四歩」です。", "3四歩"),
        ("▲２六歩 と指します", "２六歩"),
        ("2二角成！これで優勢です", "2二角成"),
        ("5五歩打でどうでしょう", "5五歩打"),
        ("同 歩 で取り返します", "同歩"),
        ("8四飛(82)", "8四飛(82)"),
    ],
)
def test_extract_move(reply, move):
    assert extract_move(reply) == move


def test_extract_move_none():
    assert extract_move("うーん、わかりません") is None
    assert extract_move("") is None


def test_parse_move_fullwidth_destination():
    mv = parse_move("▲７六歩")
    assert mv.to_sq == Square(2, 5)
    assert parse_move("１九香").to_sq == Square(8, 8)
