"""
自治体コード検証

JIS X 0401 / 0402 形式の6桁自治体コードのチェックディジットを検証・計算する。

    >>> is_valid("131016")
    True
    >>> is_valid("131019")
    False
"""

import re
from typing import Any

# チェックディジットの桁位置（0始まり）
CHECK_DIGITS_INDEX = 5
# モジュラス演算の基数
CHECK_BASE = 11
# 有効な都道府県コード範囲
PREFECTURE_RANGE = range(1, 48)

_CODE_PATTERN = re.compile(r'[0-9]{6}')
_BODY_PATTERN = re.compile(r'[0-9]{5}')


def is_valid(code: Any) -> bool:
    """
    自治体コードの形式とチェックディジットを検証する

    Args:
        code: 6桁自治体コード

    Returns:
        形式・都道府県コード・チェックディジットがすべて正しければTrue。
        文字列以外や桁数違いは例外にせずFalseを返す。
    """
    if not isinstance(code, str) or not _CODE_PATTERN.fullmatch(code):
        return False
    if int(code[:2]) not in PREFECTURE_RANGE:
        return False

    return int(code[CHECK_DIGITS_INDEX]) == compute_check_digit(code)


def compute_check_digit(code: str) -> int:
    """
    チェックディジットを計算する

    先頭5桁に重み 6, 5, 4, 3, 2 を掛けた合計から求める。6桁目は参照しない。

    Args:
        code: 先頭5桁が数字の自治体コード（5桁または6桁）

    Returns:
        0〜9のチェックディジット

    Raises:
        ValueError: 先頭5桁が数字でない場合
    """
    if not isinstance(code, str) or not _BODY_PATTERN.fullmatch(code[:CHECK_DIGITS_INDEX]):
        raise ValueError(f"自治体コードの先頭5桁が数字ではありません: {code!r}")

    sub_total = sum(
        int(digit) * (CHECK_DIGITS_INDEX - i + 1)
        for i, digit in enumerate(code[:CHECK_DIGITS_INDEX])
    )

    if sub_total >= CHECK_BASE:
        return (CHECK_BASE - sub_total % CHECK_BASE) % 10
    return CHECK_BASE - sub_total


def append_check_digit(body: str) -> str:
    """5桁の本体にチェックディジットを付けた6桁コードを返す"""
    return f"{body[:CHECK_DIGITS_INDEX]}{compute_check_digit(body)}"
