#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from __future__ import annotations

import datetime
import hashlib
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from constants import FW_DIGITS, RANK_KANJI, HAND_ORDER, PIECE_JP, NONE_JP
from models import Kind, Square


def now_yyyy_mm_dd_hhmmss() -> str:
    # KIF の日時表記: YYYY/MM/DD HH:MM:SS
    return datetime.datetime.now().strftime("%Y/%m/%d %H:%M:%S")


def sq_to_kif(sq: Square) -> str:
    """Square → '７六'"""
    return f"{FW_DIGITS[str(sq.file)]}{RANK_KANJI[sq.rank]}"


def sq_to_paren(sq: Square) -> str:
    return f"({sq.file}{sq.rank})"


def inv_count_kanji(n: int) -> str:
    inv = {
        1:"",2:"二",3:"三",4:"四",5:"五",6:"六",7:"七",8:"八",9:"九",
        10:"十",11:"十一",12:"十二",13:"十三",14:"十四",15:"十五",16:"十六",17:"十七",18:"十八"
    }
    return inv.get(n, str(n))


def hand_counts(hand: Iterable[Kind]) -> Dict[str, int]:
    out: Dict[str, int] = {}
    for k in hand:
        out[k.value] = out.get(k.value, 0) + 1
    return out


def hand_to_kif(hand: Iterable[Kind]) -> str:
    """持駒を KIF 流に '飛 角 歩三' と整形（無ければ なし）"""
    counts = hand_counts(hand)
    parts: List[str] = []
    for k in HAND_ORDER:
        n = counts.get(k, 0)
        if n <= 0:
            continue
        parts.append(PIECE_JP[k] + inv_count_kanji(n))
    return "　".join(parts) if parts else NONE_JP


def _dedup_key_from_kif_text(kif_text: str) -> str:
    b = kif_text.encode("cp932", errors="replace")
    return hashlib.sha1(b).hexdigest()


def _write_kif_unique(
    outdir: Path,
    filename: str,
    kif_text: str,
    seen: Optional[Dict[str, str]] = None,
) -> Optional[str]:
    key = _dedup_key_from_kif_text(kif_text)
    if seen is not None and key in seen:
        return None
    p = outdir / filename
    p.write_bytes(kif_text.encode("cp932", errors="replace"))
    if seen is not None:
        seen[key] = str(p)
    return str(p)
