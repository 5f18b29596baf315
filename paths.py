#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
paths.py

KIF の入出力フォルダ（INPUT/OUTPUT）とパス解決。
SHOGI_CHAT_HOME が設定されていればそこを基準にする。
"""

from __future__ import annotations

import os
from pathlib import Path


def _base_dir() -> Path:
    home = os.environ.get("SHOGI_CHAT_HOME")
    if home:
        return Path(home).expanduser().resolve()
    # 既定はカレントディレクトリ
    return Path.cwd()


def _output_dir() -> Path:
    return _base_dir() / "OUTPUT"


def _ensure_output_dir() -> Path:
    out = _output_dir()
    out.mkdir(parents=True, exist_ok=True)
    return out


def _input_dir() -> Path:
    return _base_dir() / "INPUT"


def _resolve_kif_path(name: str) -> Path:
    """相対パス（ディレクトリ無し）の場合は OUTPUT/ に保存する。"""
    p = Path(name)
    if p.is_absolute() or p.parent != Path("."):
        return p
    return _ensure_output_dir() / p.name


def _resolve_existing_kif_path(name: str) -> Path:
    """読み込み用。相対パスで見つからなければ INPUT/ と OUTPUT/ も探す。"""
    p = Path(name)
    if p.exists():
        return p
    if not p.is_absolute() and p.parent == Path("."):
        for d in (_input_dir(), _output_dir()):
            q = d / p.name
            if q.exists():
                return q
    return p
