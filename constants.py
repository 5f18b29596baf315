#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# ----------------- constants -----------------

FW_DIGITS = {str(i): ch for i, ch in enumerate("０１２３４５６７８９")}
RANK_KANJI = {1: "一", 2: "二", 3: "三", 4: "四", 5: "五", 6: "六", 7: "七", 8: "八", 9: "九"}

# 筋の文字表（全角1-9 → 半角1-9）。index % 9 が 筋-1
FILE_CHARS = "１２３４５６７８９123456789"
RANK_CHARS = "一二三四五六七八九"

# 駒種の文字（SFEN流：大文字=先手）
KIND_LETTERS = "KRBGSNLP"

PIECE_JP = {"P": "歩", "L": "香", "N": "桂", "S": "銀", "G": "金", "B": "角", "R": "飛", "K": "玉"}
PROMOTED_JP = {"P": "と", "L": "成香", "N": "成桂", "S": "成銀", "B": "馬", "R": "龍"}
PROMOTABLE = set(["P", "L", "N", "S", "B", "R"])

# 指し手表記で受け付ける駒名 → (駒種, 成り)
# 長い名前から順に照合すること
NAME_TO_KIND = {
    "成香": ("L", True), "成桂": ("N", True), "成銀": ("S", True),
    "龍": ("R", True), "竜": ("R", True), "馬": ("B", True), "と": ("P", True),
    "全": ("S", True), "圭": ("N", True), "杏": ("L", True),
    "王": ("K", False), "玉": ("K", False),
    "飛": ("R", False), "角": ("B", False), "金": ("G", False), "銀": ("S", False),
    "桂": ("N", False), "香": ("L", False), "歩": ("P", False),
}
PIECE_NAMES_LONGEST = sorted(NAME_TO_KIND, key=len, reverse=True)

# 盤面表示用（1字幅に揃える：成香/成桂/成銀 → 杏/圭/全）
DISP_NAME = {
    ("P", False): "歩", ("L", False): "香", ("N", False): "桂", ("S", False): "銀",
    ("G", False): "金", ("B", False): "角", ("R", False): "飛", ("K", False): "玉",
    ("P", True): "と", ("L", True): "杏", ("N", True): "圭", ("S", True): "全",
    ("B", True): "馬", ("R", True): "龍",
}
# 先手の玉は「王」で表示する
SENTE_KING_GLYPH = "王"

# 持駒の並び順
HAND_ORDER = ["R", "B", "G", "S", "N", "L", "P"]

# 平手初期配置（1段目から。大文字=先手、小文字=後手）
INITIAL_ROWS = [
    "l n s g k g s n l",
    ". r . . . . . b .",
    "p p p p p p p p p",
    ". . . . . . . . .",
    ". . . . . . . . .",
    ". . . . . . . . .",
    "P P P P P P P P P",
    ". B . . . . . R .",
    "L N S G K G S N L",
]

# 片側あたりの初期枚数
INITIAL_COUNTS = {"K": 1, "R": 1, "B": 1, "G": 2, "S": 2, "N": 2, "L": 2, "P": 9}

# 手番の呼び名（棋譜ログの接頭辞にも使う）
SIDE_LABEL = {"B": "あなた", "W": "AI"}

NONE_JP = "なし"
DROP_MARK = "打"
PROMOTE_MARK = "成"
NO_PROMOTE_MARK = "不成"
SAME_MARK = "同"
TURN_MARKS = "▲△☗☖"
