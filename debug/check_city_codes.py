#!/usr/bin/env python3
"""
市区町村コードを確認するスクリプト

同梱データの現行市区町村について、チェックディジットと
先頭2桁・都道府県コードの一致を確認する。
"""

import os
import sys

# プロジェクトのルートディレクトリをパスに追加
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from jpaddr.services.code_validator import is_valid
from jpaddr.services.data_store import DataStore


def check_city_codes(store: DataStore) -> tuple:
    """(確認件数, 問題のリスト) を返す"""
    checked = 0
    problems = []
    for pref in store.prefectures():
        for city in store.cities(pref["code"]):
            checked += 1
            code = city["code"]
            if not is_valid(code):
                problems.append((code, city["name"], "チェックディジット不正"))
            if code[:2] != f"{int(city['prefecture_code']):02d}":
                problems.append((code, city["name"], f"都道府県コード不一致: {city['prefecture_code']}"))
    return checked, problems


def main():
    """メイン関数"""
    print("市区町村コード確認")
    print("=" * 50)

    checked, problems = check_city_codes(DataStore())

    for code, name, message in problems:
        print(f"❌ {code} {name}: {message}")

    print("=" * 50)
    print(f"確認した市区町村: {checked}件, 問題: {len(problems)}件")
    return 1 if problems else 0


if __name__ == "__main__":
    sys.exit(main())
