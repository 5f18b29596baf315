#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from dotenv import find_dotenv, load_dotenv

DEFAULT_API_URL = "https://openrouter.ai/api/v1/chat/completions"
DEFAULT_MODEL = "x-ai/grok-4.1-fast:free"


@dataclass
class GameConfig:
    # True: 移動元の駒が移動先に動けるかを python-shogi で確認する
    strict_reachability: bool = False
    # True: 駒のあるマスへの打ちを許す（上書き）
    allow_drop_on_occupied: bool = False


@dataclass
class AIConfig:
    api_key: Optional[str] = None
    api_url: str = DEFAULT_API_URL
    model: str = DEFAULT_MODEL
    max_tokens: int = 100
    temperature: float = 0.7
    timeout_sec: float = 60.0
    history_window: int = 5
    referer: str = "https://shogi-chat.vercel.app"
    title: str = "Shogi Chat AI"


@dataclass
class AppConfig:
    game: GameConfig = field(default_factory=GameConfig)
    ai: AIConfig = field(default_factory=AIConfig)
    hotseat: bool = False


def _flag(env: Mapping[str, str], name: str) -> bool:
    return env.get(name, "").strip().lower() in ("1", "true", "yes", "on")


def load_config(env: Optional[Mapping[str, str]] = None, dotenv: bool = True) -> AppConfig:
    """
    .env と環境変数から設定を作る。
      OPENROUTER_API_KEY / SHOGI_CHAT_MODEL / SHOGI_CHAT_API_URL / SHOGI_CHAT_TIMEOUT
      SHOGI_CHAT_STRICT / SHOGI_CHAT_ALLOW_DROP_ON_OCCUPIED / SHOGI_CHAT_HOTSEAT
    """
    if env is None:
        if dotenv:
            # .env はカレントディレクトリから探す
            load_dotenv(find_dotenv(usecwd=True))
        env = os.environ

    ai = AIConfig(api_key=env.get("OPENROUTER_API_KEY") or None)
    if env.get("SHOGI_CHAT_MODEL"):
        ai.model = env["SHOGI_CHAT_MODEL"]
    if env.get("SHOGI_CHAT_API_URL"):
        ai.api_url = env["SHOGI_CHAT_API_URL"]
    if env.get("SHOGI_CHAT_TIMEOUT"):
        try:
            ai.timeout_sec = float(env["SHOGI_CHAT_TIMEOUT"])
        except ValueError:
            raise ValueError("SHOGI_CHAT_TIMEOUT は秒数（数値）で指定してください")

    game = GameConfig(
        strict_reachability=_flag(env, "SHOGI_CHAT_STRICT"),
        allow_drop_on_occupied=_flag(env, "SHOGI_CHAT_ALLOW_DROP_ON_OCCUPIED"),
    )
    return AppConfig(game=game, ai=ai, hotseat=_flag(env, "SHOGI_CHAT_HOTSEAT"))
