"""
検索バックエンド

同梱データ（InMemoryIndex）と永続ストア（PersistedIndex）の2実装を共通インターフェースで提供し、
どちらを使うかを BackendSelector がプロセスの生存期間中に一度だけ決定する。
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from ..config import Config, config as default_config
from ..database import DatabaseManager
from ..errors import DatabaseError
from ..models.city import City
from ..models.prefecture import Prefecture
from ..models.tables import CITIES_TABLE, PREFECTURES_TABLE, CityRecord, PrefectureRecord
from ..utils.logging import get_logger
from .data_store import DataStore

logger = logging.getLogger(__name__)

REQUIRED_TABLES = (PREFECTURES_TABLE, CITIES_TABLE)


class GeoBackend(ABC):
    """都道府県・市区町村検索の共通インターフェース"""

    name: str = "abstract"

    @abstractmethod
    def prefectures(self) -> List[Prefecture]:
        """全都道府県をコード順で返す"""
        ...

    @abstractmethod
    def find_prefecture(self, attribute: str, value) -> Optional[Prefecture]:
        """属性（code / name / name_en）の完全一致で1件検索する"""
        ...

    @abstractmethod
    def prefectures_in_region(self, region_name: str) -> List[Prefecture]:
        ...

    @abstractmethod
    def find_city(self, code: str) -> Optional[City]:
        """6桁コードで1件検索する（廃止済みを含む）"""
        ...

    @abstractmethod
    def cities_in(self, prefecture_code: int) -> List[City]:
        """都道府県の現行市区町村を返す（廃止済みを除く）"""
        ...

    def reset(self) -> None:
        """キャッシュを持つ実装はここでクリアする"""


class InMemoryIndex(GeoBackend):
    """同梱JSONデータを使うバックエンド"""

    name = "memory"

    def __init__(self, store: DataStore):
        self.store = store
        self._lock = threading.Lock()
        self._prefectures: Optional[List[Prefecture]] = None

    def prefectures(self) -> List[Prefecture]:
        if self._prefectures is None:
            with self._lock:
                if self._prefectures is None:
                    records = sorted(self.store.prefectures(), key=lambda r: int(r["code"]))
                    self._prefectures = [Prefecture.from_record(r) for r in records]
        return list(self._prefectures)

    def find_prefecture(self, attribute: str, value) -> Optional[Prefecture]:
        for pref in self.prefectures():
            if getattr(pref, attribute) == value:
                return pref
        return None

    def prefectures_in_region(self, region_name: str) -> List[Prefecture]:
        return [pref for pref in self.prefectures() if pref.region_name == region_name]

    def find_city(self, code: str) -> Optional[City]:
        try:
            prefecture_code = int(code[:2])
        except ValueError:
            return None

        # 現行データを優先し、見つからなければ廃止データを引く
        for record in self.store.cities(prefecture_code):
            if record["code"] == code:
                return City.from_record(record)

        record = self.store.deprecated_city(code)
        return City.from_record(record) if record else None

    def cities_in(self, prefecture_code: int) -> List[City]:
        cities = (City.from_record(r) for r in self.store.cities(prefecture_code))
        return [city for city in cities if city.is_active()]

    def reset(self) -> None:
        with self._lock:
            self._prefectures = None


class PersistedIndex(GeoBackend):
    """永続ストア（jpaddr_prefectures / jpaddr_cities テーブル）を使うバックエンド"""

    name = "database"

    def __init__(self, db: DatabaseManager):
        self.db = db

    def prefectures(self) -> List[Prefecture]:
        with self.db.session() as session:
            rows = session.scalars(select(PrefectureRecord).order_by(PrefectureRecord.code))
            return [row.to_entity() for row in rows]

    def find_prefecture(self, attribute: str, value) -> Optional[Prefecture]:
        column = getattr(PrefectureRecord, attribute)
        with self.db.session() as session:
            row = session.scalars(select(PrefectureRecord).where(column == value)).first()
            return row.to_entity() if row else None

    def prefectures_in_region(self, region_name: str) -> List[Prefecture]:
        with self.db.session() as session:
            rows = session.scalars(
                select(PrefectureRecord)
                .where(PrefectureRecord.region_name == region_name)
                .order_by(PrefectureRecord.code)
            )
            return [row.to_entity() for row in rows]

    def find_city(self, code: str) -> Optional[City]:
        with self.db.session() as session:
            row = session.get(CityRecord, code)
            return row.to_entity() if row else None

    def cities_in(self, prefecture_code: int) -> List[City]:
        with self.db.session() as session:
            rows = session.scalars(
                select(CityRecord)
                .where(CityRecord.prefecture_code == prefecture_code)
                .where(CityRecord.deprecated_at.is_(None))
                .order_by(CityRecord.code)
            )
            return [row.to_entity() for row in rows]


class BackendSelector:
    """
    永続ストアを使うかどうかを一度だけ判定してキャッシュする

    DATABASE_URL に接続でき、必要なテーブルがすべて存在する場合のみ永続ストアを使う。
    検出中の接続エラーは伝播させず、同梱データへのフォールバックとして扱う。
    """

    def __init__(self, db: DatabaseManager, cfg: Optional[Config] = None):
        self.db = db
        self.config = cfg or default_config
        self._lock = threading.Lock()
        self._use_database: Optional[bool] = None

    def use_database(self) -> bool:
        decided = self._use_database
        if decided is not None:
            return decided

        with self._lock:
            if self._use_database is None:
                self._use_database = self._detect()
                backend = "database" if self._use_database else "memory"
                get_logger(__name__, backend=backend, setting=self.config.BACKEND).info(
                    f"検索バックエンドを決定しました: {backend}"
                )
            return self._use_database

    def force(self, value: bool) -> None:
        """バックエンドを強制指定する。主にテスト用"""
        with self._lock:
            self._use_database = bool(value)

    def reset(self) -> None:
        """判定結果をリセットする。マイグレーション後の再検出やテストに使用"""
        with self._lock:
            self._use_database = None

    def is_decided(self) -> bool:
        return self._use_database is not None

    def _detect(self) -> bool:
        if not self.config.database_enabled():
            return False

        try:
            self.db.initialize()
            found = self.db.has_tables(REQUIRED_TABLES)
        except (SQLAlchemyError, DatabaseError, ImportError) as e:
            # ドライバ未導入も接続不可として扱う
            log = logger.error if self.config.BACKEND == "database" else logger.warning
            log(f"永続ストアを利用できないため同梱データを使用します: {e}")
            return False

        if not found:
            logger.info(f"必要なテーブルが存在しません: {', '.join(REQUIRED_TABLES)}")
        return found
