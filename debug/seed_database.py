#!/usr/bin/env python3
"""
永続ストアへ同梱データを投入するスクリプト

DATABASE_URL のデータベースにテーブルを作成し、都道府県・市区町村データを投入する。

    DATABASE_URL=sqlite:///jpaddr.db python debug/seed_database.py
"""

import os
import sys

# プロジェクトのルートディレクトリをパスに追加
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from jpaddr.config import config, mask_db_url
from jpaddr.database import DatabaseManager
from jpaddr.errors import DatabaseError
from jpaddr.services.data_store import DataStore
from jpaddr.services.seeder import seed_database
from jpaddr.utils.logging import setup_logging


def main():
    """メイン関数"""
    setup_logging()

    if not config.DATABASE_URL:
        print("❌ DATABASE_URL が設定されていません")
        return 1

    db = DatabaseManager(config.DATABASE_URL)
    try:
        db.initialize()
        db.create_tables()
        counts = seed_database(db, DataStore())
    except DatabaseError as e:
        print(f"❌ 投入に失敗しました: {e}")
        return 1
    finally:
        db.close()

    print(f"✅ {mask_db_url(config.DATABASE_URL)}")
    print(f"   都道府県: {counts['prefectures']}件")
    print(f"   市区町村: {counts['cities']}件")
    return 0


if __name__ == "__main__":
    sys.exit(main())
