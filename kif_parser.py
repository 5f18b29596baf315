from __future__ import annotations
from typing import List, Optional, Tuple
import pathlib
import re

from constants import PIECE_NAMES_LONGEST
from models import Kind, Piece, Side, Square, kind_from_name
from position import GameState, create_initial_state, empty_board, with_square

# ----------------- KIF / テキスト棋譜の読み込み（replay 用） -----------------

_KANJI_DIGITS = {"一":1,"二":2,"三":3,"四":4,"五":5,"六":6,"七":7,"八":8,"九":9}
_MOVES_HEADER = "手数----指手"
_TIME_RE = re.compile(r"\(\s*\d+:\d+/[\d:]+\)\s*$")
_MOVE_LINE_RE = re.compile(r"^\s*(\d+)\s+(.*)$")
_END_WORDS = ("投了", "詰み", "中断", "千日手", "持将棋")


def read_kif_text(path: str) -> str:
    raw = pathlib.Path(path).read_bytes()
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        return raw.decode("cp932", errors="replace")


def _kanji_count_to_int(s: str) -> int:
    """Parse counts like '二','四','十','十七' used by our KIF output."""
    s = s.strip()
    if not s:
        return 1
    if s == "十":
        return 10
    if "十" in s:
        a, b = s.split("十", 1)
        tens = _KANJI_DIGITS.get(a, 1) if a else 1
        ones = _KANJI_DIGITS.get(b, 0) if b else 0
        return tens * 10 + ones
    return _KANJI_DIGITS.get(s, 1)


def _parse_hands_line(line: str) -> Tuple[Kind, ...]:
    """
    Parse: '先手の持駒：金' or '後手の持駒：飛二　角　歩十七'
    Returns kinds in 飛角金銀桂香歩 order (K excluded).
    """
    if "：" not in line:
        return ()
    _, rest = line.split("：", 1)
    rest = rest.strip()
    if not rest or rest == "なし":
        return ()
    out: List[Kind] = []
    for tok in rest.split():
        name = None
        cnt = 1
        for pn in PIECE_NAMES_LONGEST:
            if tok.startswith(pn):
                name = pn
                suffix = tok[len(pn):]
                if suffix:
                    cnt = _kanji_count_to_int(suffix)
                break
        if not name:
            raise ValueError(f"持駒の駒名が不正です: {tok}")
        kind, _prom = kind_from_name(name)
        if kind is Kind.KING:
            continue
        out.extend([kind] * cnt)
    return tuple(out)


def _consume_one_cell(s: str) -> Tuple[Optional[Piece], str]:
    """
    盤面図の1マス分を読む。
      空:   ' ・'
      先手: ' 歩' / ' と'
      後手: 'v歩' / 'v龍'
    """
    if len(s) < 2:
        raise ValueError("盤面図の行が短すぎます")
    side = Side.GOTE if s[0] == "v" else Side.SENTE
    s = s[1:]
    if s.startswith("・"):
        return None, s[1:]
    for pn in PIECE_NAMES_LONGEST:
        if s.startswith(pn):
            kind, prom = kind_from_name(pn)
            return Piece(side, kind, prom), s[len(pn):]
    raise ValueError(f"盤面図の駒が読めません: {s[:2]}")


def parse_kif_startpos(text: str) -> GameState:
    """
    KIF の開始局面。盤面図があれば読み、無ければ平手。
    """
    lines = text.splitlines()

    i0 = None
    for i, ln in enumerate(lines):
        if ln.strip().startswith("９") and "１" in ln and i + 1 < len(lines) and lines[i + 1].startswith("+"):
            i0 = i + 2
            break
    if i0 is None:
        return create_initial_state()

    board = empty_board()
    for r in range(9):
        if i0 + r >= len(lines) or "|" not in lines[i0 + r]:
            raise ValueError("盤面図が途中で終わっています")
        body = lines[i0 + r].split("|", 2)[1]
        rest = body
        for col in range(9):
            p, rest = _consume_one_cell(rest)
            if p is not None:
                board = with_square(board, Square(col, r), p)

    sente_hand: Tuple[Kind, ...] = ()
    gote_hand: Tuple[Kind, ...] = ()
    side = Side.SENTE
    for ln in lines:
        if ln.startswith("先手の持駒：") or ln.startswith("下手の持駒："):
            sente_hand = _parse_hands_line(ln)
        elif ln.startswith("後手の持駒：") or ln.startswith("上手の持駒："):
            gote_hand = _parse_hands_line(ln)
        elif ln.strip() == "後手番":
            side = Side.GOTE
    return GameState(board=board, side_to_move=side, sente_hand=sente_hand, gote_hand=gote_hand)


def parse_kif_moves(text: str) -> List[str]:
    """
    指し手部分を '７六歩(77)' のような表記のリストにする。
    変化（'変化：'）以降と終局行は読まない。
    KIF でなければ、1行1手のテキストとして扱う（# はコメント）。
    """
    lines = text.splitlines()
    idx = None
    for i, ln in enumerate(lines):
        if ln.strip().startswith(_MOVES_HEADER):
            idx = i + 1
            break

    if idx is None:
        return [ln.strip() for ln in lines if ln.strip() and not ln.strip().startswith("#")]

    moves: List[str] = []
    for ln in lines[idx:]:
        if ln.startswith("変化："):
            break
        if ln.strip().startswith("まで"):
            break
        m = _MOVE_LINE_RE.match(ln)
        if not m:
            continue
        body = _TIME_RE.sub("", m.group(2))
        body = "".join(body.split())
        if not body or any(w in body for w in _END_WORDS):
            break
        moves.append(body)
    return moves
