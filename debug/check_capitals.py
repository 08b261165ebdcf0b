#!/usr/bin/env python3
"""
県庁所在地データを確認するスクリプト

各都道府県の capital_code が同じ都道府県の市区町村を指し、
その市区町村に capital フラグが立っていることを確認する。
"""

import os
import sys

# プロジェクトのルートディレクトリをパスに追加
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from jpaddr.services.data_store import DataStore


def check_capitals(store: DataStore) -> list:
    """問題のある都道府県の一覧を返す"""
    problems = []
    for pref in store.prefectures():
        capital_code = pref.get("capital_code")
        cities = {city["code"]: city for city in store.cities(pref["code"])}
        flagged = [city["code"] for city in cities.values() if city.get("capital")]

        if not capital_code or capital_code not in cities:
            problems.append((pref["name"], f"capital_code {capital_code} が市区町村データにありません"))
        elif flagged != [capital_code]:
            problems.append((pref["name"], f"capital フラグが不一致: {flagged}"))
    return problems


def main():
    """メイン関数"""
    print("県庁所在地データ確認")
    print("=" * 50)

    store = DataStore()
    problems = check_capitals(store)

    for name, message in problems:
        print(f"❌ {name}: {message}")

    print("=" * 50)
    print(f"確認した都道府県: {len(store.prefectures())}件, 問題: {len(problems)}件")
    return 1 if problems else 0


if __name__ == "__main__":
    sys.exit(main())
