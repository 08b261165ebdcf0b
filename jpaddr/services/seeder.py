"""同梱JSONデータを永続ストアへ一括投入する"""

from typing import Any, Dict, List

from sqlalchemy import delete, insert

from ..config import mask_db_url
from ..database import DatabaseManager
from ..models.tables import CityRecord, PrefectureRecord
from ..utils.logging import get_logger
from .data_store import DataStore

PREFECTURE_CODES = range(1, 48)


def prefecture_rows(store: DataStore) -> List[Dict[str, Any]]:
    rows = []
    for pref in store.prefectures():
        row = {key: value for key, value in pref.items() if key != "type"}
        row["prefecture_type"] = pref["type"]
        rows.append(row)
    return rows


def city_rows(store: DataStore) -> List[Dict[str, Any]]:
    """現行と廃止の市区町村行。コードが重複する場合は現行を優先する"""
    rows: Dict[str, Dict[str, Any]] = {}
    for record in store.deprecated_cities():
        rows[record["code"]] = _city_row(record)
    for code in PREFECTURE_CODES:
        for record in store.cities(code):
            rows[record["code"]] = _city_row(record)
    return list(rows.values())


def _city_row(record: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "code": record["code"],
        "prefecture_code": record["prefecture_code"],
        "name": record["name"],
        "name_kana": record["name_kana"],
        "district": record.get("district"),
        "capital": bool(record.get("capital", False)),
        "deprecated_at": record.get("deprecated_at"),
        "successor_code": record.get("successor_code"),
    }


def seed_database(db: DatabaseManager, store: DataStore) -> Dict[str, int]:
    """
    都道府県・市区町村テーブルの内容を同梱データで置き換える（冪等）

    Returns:
        投入件数 {"prefectures": n, "cities": m}
    """
    prefs = prefecture_rows(store)
    cities = city_rows(store)

    with db.session() as session:
        session.execute(delete(CityRecord))
        session.execute(delete(PrefectureRecord))
        if prefs:
            session.execute(insert(PrefectureRecord), prefs)
        if cities:
            session.execute(insert(CityRecord), cities)

    get_logger(__name__, database=mask_db_url(db.database_url)).info(
        f"データベースへの投入が完了しました: 都道府県 {len(prefs)}件, 市区町村 {len(cities)}件"
    )
    return {"prefectures": len(prefs), "cities": len(cities)}
