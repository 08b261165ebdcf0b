"""
同梱データストア

同梱JSONデータ（都道府県・市区町村・廃止市区町村・郵便番号）を遅延読み込みし、
プロセスの生存期間中キャッシュする。
"""

import json
import logging
import re
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..config import config
from ..errors import DataLoadError
from .code_validator import PREFECTURE_RANGE

logger = logging.getLogger(__name__)

Record = Dict[str, Any]

POSTAL_PREFIX_PATTERN = re.compile(r"[0-9]{3}")


class DataStore:
    """同梱JSONデータの遅延読み込みとキャッシュ

    各メソッドは初回呼び出し時にJSONファイルを読み込み、以降はキャッシュを返す。
    キャッシュの初期化はロックで保護し、二重読み込みを防ぐ。
    初期化済みのキャッシュはロックなしで参照する。
    """

    PREFECTURES_FILE = "prefectures.json"
    DEPRECATED_CITIES_FILE = "deprecated_cities.json"
    CITIES_DIR = "cities"
    POSTAL_CODES_DIR = "postal_codes"

    def __init__(self, data_dir: Optional[Union[str, Path]] = None):
        self.data_dir = Path(data_dir or config.DATA_DIR).resolve()
        self._lock = threading.RLock()
        self._prefectures: Optional[List[Record]] = None
        self._deprecated_cities: Optional[List[Record]] = None
        self._deprecated_cities_by_code: Optional[Dict[str, Record]] = None
        self._cities_cache: Dict[int, List[Record]] = {}
        self._postal_cache: Dict[str, List[Record]] = {}

    def prefectures(self) -> List[Record]:
        """全47都道府県データを返す"""
        if self._prefectures is None:
            with self._lock:
                if self._prefectures is None:
                    self._prefectures = self._load_json(self.PREFECTURES_FILE) or []
        return self._prefectures

    def cities(self, prefecture_code: Any) -> List[Record]:
        """
        指定した都道府県の市区町村データを返す

        Args:
            prefecture_code: 都道府県コード

        Returns:
            市区町村データのリスト。存在しない都道府県コードは空リスト。
        """
        try:
            key = int(prefecture_code)
        except (TypeError, ValueError):
            return []
        if key not in PREFECTURE_RANGE:
            return []

        cached = self._cities_cache.get(key)
        if cached is not None:
            return cached

        with self._lock:
            if key not in self._cities_cache:
                records = self._load_json(f"{key:02d}.json", self.CITIES_DIR)
                # 存在しないシャードはキャッシュしない
                if records is None:
                    return []
                self._cities_cache[key] = records
            return self._cities_cache[key]

    def deprecated_cities(self) -> List[Record]:
        """廃止された市区町村データを返す"""
        if self._deprecated_cities is None:
            with self._lock:
                if self._deprecated_cities is None:
                    self._deprecated_cities = self._load_json(self.DEPRECATED_CITIES_FILE) or []
        return self._deprecated_cities

    def deprecated_city(self, code: str) -> Optional[Record]:
        """
        廃止コードで1件検索する

        初回呼び出し時に廃止リストからコード索引を構築し、以降は O(1) で引く。
        """
        index = self._deprecated_cities_by_code
        if index is None:
            with self._lock:
                if self._deprecated_cities_by_code is None:
                    self._deprecated_cities_by_code = {
                        record["code"]: record for record in self.deprecated_cities()
                    }
                index = self._deprecated_cities_by_code
        return index.get(code)

    def postal_codes(self, prefix: str) -> List[Record]:
        """
        指定したプレフィックスの郵便番号データを返す

        Args:
            prefix: 3桁プレフィックス（例: "154"）

        Returns:
            郵便番号データのリスト。3桁の数字でない・存在しないプレフィックスは空リスト。
        """
        key = str(prefix)
        if not POSTAL_PREFIX_PATTERN.fullmatch(key):
            return []

        cached = self._postal_cache.get(key)
        if cached is not None:
            return cached

        with self._lock:
            if key not in self._postal_cache:
                records = self._load_json(f"{key}.json", self.POSTAL_CODES_DIR)
                if records is None:
                    return []
                self._postal_cache[key] = records
            return self._postal_cache[key]

    def reset(self) -> None:
        """全キャッシュをクリアする"""
        with self._lock:
            self._prefectures = None
            self._deprecated_cities = None
            self._deprecated_cities_by_code = None
            self._cities_cache = {}
            self._postal_cache = {}
        logger.debug("データストアのキャッシュをクリアしました")

    def cache_info(self) -> Dict[str, Any]:
        """キャッシュの状態を取得"""
        return {
            "data_dir": str(self.data_dir),
            "prefectures_loaded": self._prefectures is not None,
            "deprecated_cities_loaded": self._deprecated_cities is not None,
            "deprecated_index_built": self._deprecated_cities_by_code is not None,
            "city_shards": sorted(self._cities_cache),
            "postal_shards": sorted(self._postal_cache),
        }

    def _resolve(self, relative_path: str, shard_dir: Optional[str] = None) -> Optional[Path]:
        """シャードディレクトリ配下のパスに解決する。外を指す場合はNone"""
        root = (self.data_dir / shard_dir).resolve() if shard_dir else self.data_dir
        try:
            path = (root / relative_path).resolve()
        except (OSError, ValueError) as e:
            logger.warning(f"解決できないパスを拒否しました: {relative_path!r} - {e}")
            return None
        if root not in path.parents or self.data_dir not in path.parents:
            logger.warning(f"データルート外のパスを拒否しました: {relative_path}")
            return None
        return path

    def _load_json(self, relative_path: str, shard_dir: Optional[str] = None) -> Optional[List[Record]]:
        """JSONファイルを読み込む。ファイルが存在しない場合はNone"""
        path = self._resolve(relative_path, shard_dir)
        if path is None or not path.is_file():
            logger.debug(f"データファイルが存在しません: {relative_path!r}")
            return None

        try:
            with path.open(encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f"JSONデコードエラー: {path} - {str(e)}")
            raise DataLoadError(f"データファイルの解析に失敗しました: {relative_path}") from e

        logger.debug(f"データファイルを読み込みました: {relative_path} ({len(data)}件)")
        return data
