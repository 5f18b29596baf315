#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
AI（言語モデル）に次の一手を尋ねるクライアント。

盤面は render(..., "prompt") の簡易形式で渡し、
応答文から最初の指し手表記を extract_move で取り出して返す。
局面の更新は呼び出し側（parse_and_apply）が行う。
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

import requests

from config import AIConfig
from models import Side
from notation import extract_move
from position import GameState
from render import PROMPT, hand_names, render

__all__ = [
    "MoveSuggestion",
    "MoveSuggestionError",
    "MoveSuggestionClient",
    "build_system_prompt",
    "build_user_prompt",
]


class MoveSuggestionError(Exception):
    pass


@dataclass(frozen=True)
class MoveSuggestion:
    move: str
    raw: str
    model: str


def build_system_prompt(side: Side = Side.GOTE) -> str:
    mine, theirs = ("小文字", "大文字") if side is Side.GOTE else ("大文字", "小文字")
    turn = "後手" if side is Side.GOTE else "先手"
    return f"""あなたは将棋AIです。{turn}（{mine}の駒）を担当しています。
盤面表記:
- {theirs}は相手の駒、{mine}はあなたの駒
- "."は空きマス
- +は成り駒
- 列は右から1-9、行は上から1-9

駒の略称:
K/k=王/玉, R/r=飛, B/b=角, G/g=金, S/s=銀, N/n=桂, L/l=香, P/p=歩
+R/+r=龍, +B/+b=馬, +P/+p=と, +S/+s=成銀, +N/+n=成桂, +L/+l=成香

あなたの指し手を「7六歩」のような形式で1手だけ返答してください。
成る場合は「3三角成」、打つ場合は「5五歩打」と書いてください。
必ず合法手を指してください。簡潔に1手だけ回答してください。"""


def build_user_prompt(state: GameState, side: Side = Side.GOTE, history_window: int = 5) -> str:
    lines: List[str] = [render(state, PROMPT, viewer=side.opponent)]
    lines.append("")
    lines.append(f"あなた({'後手' if side is Side.GOTE else '先手'})の持駒: {hand_names(state.hand(side), ', ')}")
    lines.append(f"相手の持駒: {hand_names(state.hand(side.opponent), ', ')}")
    recent = list(state.log[-history_window:]) if history_window > 0 else []
    if recent:
        lines.append("")
        lines.append("直近の棋譜:")
        lines.extend(recent)
    lines.append("")
    lines.append("あなたの番です。次の一手を指してください。")
    return "\n".join(lines)


class MoveSuggestionClient:
    def __init__(self, config: AIConfig, session: Optional[requests.Session] = None):
        self.config = config
        self.session = session or requests.Session()

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.config.api_key}",
            "Content-Type": "application/json",
            "HTTP-Referer": self.config.referer,
            "X-Title": self.config.title,
        }

    def _payload(self, state: GameState, side: Side) -> dict:
        return {
            "model": self.config.model,
            "messages": [
                {"role": "system", "content": build_system_prompt(side)},
                {"role": "user", "content": build_user_prompt(state, side, self.config.history_window)},
            ],
            "max_tokens": self.config.max_tokens,
            "temperature": self.config.temperature,
        }

    def complete(self, state: GameState, side: Side = Side.GOTE) -> str:
        """モデルの応答文（生テキスト）を返す"""
        if not self.config.api_key:
            raise MoveSuggestionError("API key not configured (OPENROUTER_API_KEY)")
        try:
            resp = self.session.post(
                self.config.api_url,
                headers=self._headers(),
                json=self._payload(state, side),
                timeout=self.config.timeout_sec,
            )
        except requests.RequestException as e:
            raise MoveSuggestionError(f"AI request failed: {e}") from e

        if resp.status_code != 200:
            raise MoveSuggestionError(f"AI request failed: {resp.status_code} {resp.text[:200]}")
        try:
            data = resp.json()
        except ValueError as e:
            raise MoveSuggestionError("AI response is not JSON") from e

        choices = data.get("choices") if isinstance(data, dict) else None
        if not choices or not isinstance(choices, list) or not isinstance(choices[0], dict):
            raise MoveSuggestionError("AI response has no choices")
        message = choices[0].get("message")
        content = message.get("content") if isinstance(message, dict) else None
        content = content.strip() if isinstance(content, str) else ""
        if not content:
            raise MoveSuggestionError("AI response was empty")
        return content

    def suggest_move(self, state: GameState, side: Side = Side.GOTE) -> MoveSuggestion:
        raw = self.complete(state, side)
        move = extract_move(raw)
        if move is None:
            raise MoveSuggestionError(f"AIの手を認識できませんでした: {raw[:40]}")
        return MoveSuggestion(move=move, raw=raw, model=self.config.model)
