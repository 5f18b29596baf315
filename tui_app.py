#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from __future__ import annotations

import asyncio
import datetime as _dt
import re
from typing import List, Optional

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static, Input, RichLog

from ai_client import MoveSuggestionClient, MoveSuggestionError
from config import AppConfig, load_config
from help_texts import HELP_MAIN, HELP_MAP
from kif_format import generate_kif_text, write_kif
from models import Side
from notation import format_move, parse_numeric
from position import GameState, create_initial_state, parse_and_apply
from render import render_display
from sfen import sfen_to_state, state_to_sfen


# render_display の盤面1行目（┃ の行）の位置
_BOARD_TOP = 4


# ----------------- UI components -----------------

class BoardView(Static):
    """盤面表示（直前の着手先は reverse でハイライト）"""

    def __init__(self, tui: "ShogiChatTui"):
        super().__init__(id="board")
        self.tui = tui

    def render(self) -> Text:
        state = self.tui.state
        last = state.last_to
        t = Text()
        for i, line in enumerate(render_display(state, viewer=self.tui.human).splitlines()):
            if last is not None and i - _BOARD_TOP == last.row:
                a = 1 + 2 * last.col
                t.append(line[:a])
                t.append_text(Text(line[a:a + 2], style="reverse"))
                t.append(line[a + 2:])
            else:
                t.append(line)
            t.append("\n")
        return t


class KifViewer(ModalScreen[None]):
    def __init__(self, text: str):
        super().__init__()
        self.text = text

    def compose(self) -> ComposeResult:
        yield VerticalScroll(Static(self.text))

    async def on_key(self, event: Key) -> None:
        if event.key == "escape":
            event.stop()
            self.dismiss(None)


class ShogiChatTui(App):
    CSS = """
    Screen { layout: vertical; }
    #root { height: 1fr; layout: horizontal; }
    #left { width: 38; }
    #right { width: 1fr; }
    #cmd { height: 3; }
    #log { height: 1fr; }
    """

    BINDINGS = [
        Binding("ctrl+l", "clear_log", "clear", show=False),
    ]

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        client: Optional[MoveSuggestionClient] = None,
        start: Optional[GameState] = None,
    ) -> None:
        super().__init__()
        self.config = config or load_config()
        self.hotseat = self.config.hotseat
        if client is None and not self.hotseat:
            client = MoveSuggestionClient(self.config.ai)
        self.client = client
        self.human = Side.SENTE

        self.state = start or create_initial_state()
        # KIF 出力用の開始局面と、undo 用の履歴
        self.start_state = self.state
        self.history: List[GameState] = []
        self.busy = False

        self.board_view = BoardView(self)
        self.cmd_input: Optional[Input] = None
        self.log_widget: Optional[RichLog] = None

    def compose(self) -> ComposeResult:
        with Horizontal(id="root"):
            with Vertical(id="left"):
                yield self.board_view
            with Vertical(id="right"):
                self.log_widget = RichLog(id="log", wrap=True)
                yield self.log_widget
                self.cmd_input = Input(placeholder="7六歩 / 7776 / help / :q", id="cmd")
                yield self.cmd_input

    def on_mount(self) -> None:
        self.board_view.refresh()
        self._set_title()
        self.log_ok("起動しました（help でコマンド一覧）")
        if self.hotseat:
            self.log_state("対面モード：両方の手を入力してください")
        elif not self.config.ai.api_key:
            self.log_err("OPENROUTER_API_KEY が未設定です（AI は応答できません）")
        if self.cmd_input:
            self.cmd_input.focus()
        if not self.hotseat and self.state.side_to_move is not self.human:
            self.log_state("AI の手番です。ai で指させてください")

    def _set_title(self) -> None:
        mode = "対面" if self.hotseat else "AI対局"
        strict = "  [strict]" if self.config.game.strict_reachability else ""
        turn = "終局" if self.state.game_over else self.state.side_to_move.label
        self.title = f"将棋AIチャット  [{mode}]  [手番: {turn}]{strict}"

    def _refresh(self) -> None:
        self._set_title()
        self.board_view.refresh()

    # --- logging helpers ---
    def _log(self, msg: str) -> None:
        if self.log_widget:
            self.log_widget.write(msg)

    def log_ok(self, msg: str) -> None:
        self._log(f"[OK] {msg}")

    def log_err(self, msg: str) -> None:
        self._log(f"[ERR] {msg}")

    def log_state(self, msg: str) -> None:
        self._log(f"[STATE] {msg}")

    def log_sfen(self, sfen: str) -> None:
        self._log(f"[SFEN] {sfen}")

    def log_ai(self, msg: str) -> None:
        self._log(f"[AI] {msg}")

    def log_kif(self, msg: str) -> None:
        self._log(f"[KIF] {msg}")

    def action_clear_log(self) -> None:
        if self.log_widget:
            self.log_widget.clear()

    # --- game helpers ---
    def _reset(self, state: GameState) -> None:
        self.state = state
        self.start_state = state
        self.history = []
        self._refresh()

    def _apply_text(self, move_str: str, side: Side) -> bool:
        res = parse_and_apply(self.state, move_str, side, self.config.game)
        if not res.success:
            self.log_err(res.message)
            return False
        self.history.append(self.state)
        self.state = res.new_state
        self.log_ok(f"{side.label}: {move_str}")
        self._refresh()
        if self.state.game_over:
            if self.state.winner is None:
                self.log_state("対局終了（勝者なし）")
            else:
                self.log_state(f"対局終了: {self.state.winner.label} の勝ち")
        return True

    def _numeric_to_notation(self, line: str, side: Side) -> str:
        frm, to, promote = parse_numeric(line)
        p = self.state.piece_at(frm)
        if p is None or p.side is not side:
            raise ValueError("移動元に自分の駒がありません")
        return format_move(to, p, promote, frm)

    def _ai_to_move(self) -> bool:
        return (
            not self.hotseat
            and not self.state.game_over
            and self.state.side_to_move is self.human.opponent
        )

    def _request_ai(self) -> None:
        self.busy = True
        self.run_worker(self._ai_turn(), exclusive=True)

    async def _ai_turn(self) -> None:
        ai_side = self.human.opponent
        self.log_state("AI が考えています...")
        try:
            suggestion = await asyncio.to_thread(self.client.suggest_move, self.state, ai_side)
        except MoveSuggestionError as e:
            self.log_err(f"AIエラー: {e}")
            self.log_state("局面はそのままです。ai で再要求できます")
            return
        finally:
            self.busy = False

        self.log_ai(f"{suggestion.move}  ({suggestion.model})")
        if not self._apply_text(suggestion.move, ai_side):
            self.log_state("AI の手を適用できませんでした。ai で再要求できます")

    # --- save helpers ---
    def _normalize_kif_filename(self, name: str) -> str:
        name = name.strip()
        if not name:
            return name
        if name.lower().endswith(".kif"):
            return name
        return name + ".kif"

    def _save_kif(self, filename: Optional[str] = None) -> None:
        if filename and filename.strip():
            filename = self._normalize_kif_filename(filename)
        else:
            filename = "export_" + _dt.datetime.now().strftime("%Y%m%d_%H%M%S") + ".kif"

        saved = write_kif(self.start_state, self.state, filename)
        if saved is None:
            self.log_ok("同一内容のため保存をスキップしました")
        else:
            self.log_ok(f"保存しました: {saved}")

    # ---- Command input ----
    async def on_input_submitted(self, event: Input.Submitted) -> None:
        line = event.value.strip()
        event.input.value = ""

        if not line:
            return

        self._log(f"> {line}")

        cmd, *rest = line.split(maxsplit=1)
        arg = rest[0].strip() if rest else ""

        if cmd in (":q", ":quit"):
            await self.action_quit()
            return

        if cmd in ("help", "?"):
            self._log(HELP_MAP.get(arg, HELP_MAIN))
            return

        if cmd == "show":
            self.log_state(f"手番={self.state.side_to_move.label}, 手数={len(self.state.moves)}")
            self._log(render_display(self.state, viewer=self.human))
            return

        if cmd in ("log", "moves"):
            if not self.state.log:
                self.log_state("まだ指し手がありません")
            for i, entry in enumerate(self.state.log, start=1):
                self._log(f"{i:3d}. {entry}")
            return

        if cmd == "sfen" and not arg:
            self.log_sfen(state_to_sfen(self.state))
            return

        if cmd == "strict":
            if arg not in ("on", "off"):
                self.log_err("使い方: strict on|off")
                return
            self.config.game.strict_reachability = arg == "on"
            self.log_ok(f"strict = {arg}")
            self._set_title()
            return

        if cmd == "kif":
            try:
                if arg == "view":
                    self.log_kif("出力しました")
                    await self.push_screen(KifViewer(generate_kif_text(self.start_state, self.state)))
                    return
                self._save_kif(arg or None)
            except OSError as e:
                self.log_err(f"KIF保存に失敗: {e}")
            return

        # ここから下は局面を変えるので AI 思考中は受け付けない
        if self.busy:
            self.log_err("AI が考え中です。応答を待ってください")
            return

        if cmd in ("new", "reset"):
            self._reset(create_initial_state())
            self.log_ok("新しい対局を始めました")
            return

        if cmd in ("load", "sfen") and arg:
            try:
                state = sfen_to_state(arg)
            except ValueError as e:
                self.log_err(str(e))
                return
            self._reset(state)
            self.log_ok("SFENを読み込みました")
            if self._ai_to_move():
                self.log_state("AI の手番です。ai で指させてください")
            return

        if cmd == "undo":
            if not self.history:
                self.log_err("戻せる手がありません")
                return
            self.state = self.history.pop()
            # AI 対局では自分の手番まで戻す
            while not self.hotseat and self.state.side_to_move is not self.human and self.history:
                self.state = self.history.pop()
            self.log_ok(f"undo（手数={len(self.state.moves)}）")
            self._refresh()
            return

        if cmd == "ai":
            if self.hotseat or self.client is None:
                self.log_err("対面モードでは AI を使いません")
                return
            if not self._ai_to_move():
                self.log_err("AI の手番ではありません")
                return
            self._request_ai()
            return

        # --- move input ---
        if self.state.game_over:
            self.log_err("対局は終了しています。new で新しい対局を始めてください")
            return
        side = self.state.side_to_move
        if not self.hotseat and side is not self.human:
            self.log_err("AI の手番です。ai で再要求してください")
            return

        move_str = line
        if re.fullmatch(r"\d{4,5}", line):
            try:
                move_str = self._numeric_to_notation(line, side)
            except ValueError as e:
                self.log_err(str(e))
                return

        if not self._apply_text(move_str, side):
            return
        if self._ai_to_move():
            self._request_ai()


if __name__ == "__main__":
    ShogiChatTui().run()
