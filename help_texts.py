#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from __future__ import annotations

# ----------------- Help -----------------

HELP_MAIN = """\
============================================================
  将棋 AI 対局（チャット版）
============================================================

【最短の流れ】
  1) 指し手を入力: 7六歩 / 2二角成 / 5五歩打 / 同歩
  2) AI が次の一手を返します（後手・小文字の駒）
  3) 保存:         kif out.kif

【コマンド】
  7六歩 / ７六歩        : 指し手（筋は全角/半角どちらでも、段は漢数字）
  7六歩(77)            : 移動元を明示
  7776 / 22331         : 数字入力（移動元4桁 → 移動先、末尾1で成り）
  ai                   : AI に指してもらう（失敗時の再要求にも）
  undo                 : 直前の自分の手番まで戻す
  new                  : 新しい対局
  log                  : 棋譜ログ
  sfen / load <SFEN>   : 局面の SFEN 表示 / 読み込み
  kif [name]           : KIF を OUTPUT に保存
  strict on|off        : 移動元の到達チェック（python-shogi）
  help [topic]         : サブヘルプ（topic: move / drop / ai / save）
  :q                   : 終了
============================================================
"""

HELP_MOVE = """\
[help move]
指し手の書き方

形式:
  7六歩          : 7筋6段へ歩を動かす
  3三角成        : 成る（玉・金は成れません。指定しても不成のまま）
  3三角不成      : 成らないことを明示
  2二馬          : 成駒名（龍/竜 馬 と 成銀 成桂 成香）は成駒だけを動かす
  同歩 / 同　歩  : 直前の着手先へ
  7六歩(77)      : 移動元を明示（省略すると最初に見つかった同種の駒）

補足:
  - 移動元を省略したときは 一段目→九段目、９筋→１筋 の順で最初の駒を使います
  - strict on のときは、移動先に動ける駒だけを候補にします
"""

HELP_DROP = """\
[help drop]
持ち駒を打つ

形式:
  5五歩打        : 持ち駒の歩を5五に打つ

注意:
  - 持ち駒に無い駒は打てません
  - 駒のあるマスには打てません（SHOGI_CHAT_ALLOW_DROP_ON_OCCUPIED=1 で上書き可）
  - 二歩・打ち歩詰めはチェックしません
"""

HELP_AI = """\
[help ai]
AI（言語モデル）との対局

  - OPENROUTER_API_KEY を環境変数か .env に設定してください
  - モデルは SHOGI_CHAT_MODEL / --model で変更できます
  - AI の応答から最初の「7六歩」形式を取り出して指します
  - 読み取れない/通信エラーのときは局面はそのまま。ai で再要求できます
  - --hotseat で起動すると AI を使わず両方の手を入力できます
"""

HELP_SAVE = """\
[help save]
保存と読み込み

KIF保存:
  kif out.kif        : OUTPUT/out.kif（cp932）。同一内容はスキップ

SFEN:
  sfen               : 現在の局面を表示
  load <SFEN>        : 局面を読み込んで新しい対局にする

再生（コマンドライン）:
  shogi-chat replay game.kif --kif copy.kif
"""

HELP_MAP = {
    "move": HELP_MOVE,
    "drop": HELP_DROP,
    "ai": HELP_AI,
    "save": HELP_SAVE,
}

__all__ = [
    "HELP_MAIN",
    "HELP_MOVE",
    "HELP_DROP",
    "HELP_AI",
    "HELP_SAVE",
    "HELP_MAP",
]
