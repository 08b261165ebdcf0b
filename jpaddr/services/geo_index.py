"""
住所データ検索サービス

都道府県・市区町村・郵便番号の検索窓口。入力コードの正規化と検証を行い、
BackendSelector が選んだバックエンドへ問い合わせる。
不正な入力は例外にせず「見つからない」（None / 空リスト）として扱う。
"""

import logging
import re
import threading
from typing import Any, List, Optional

from ..database import DatabaseManager, db_manager as default_db_manager
from ..models.city import City
from ..models.postal_code import PostalCode
from ..models.prefecture import Prefecture
from ..models.region import Region
from .backend import BackendSelector, GeoBackend, InMemoryIndex, PersistedIndex
from .code_validator import PREFECTURE_RANGE, is_valid
from .data_store import DataStore
from .merger_resolver import MergerResolver

logger = logging.getLogger(__name__)

CITY_CODE_LENGTH = 6
POSTAL_CODE_PATTERN = re.compile(r'[0-9]{7}')
POSTAL_PREFIX_LENGTH = 3


class GeoIndex:
    """都道府県・市区町村・郵便番号の検索サービス"""

    def __init__(
        self,
        store: Optional[DataStore] = None,
        db: Optional[DatabaseManager] = None,
        selector: Optional[BackendSelector] = None,
    ):
        self.store = store or DataStore()
        self.db = db or default_db_manager
        self.selector = selector or BackendSelector(self.db)
        self.memory = InMemoryIndex(self.store)
        self.persisted = PersistedIndex(self.db)
        self.merger = MergerResolver(self.find_city)

    @property
    def backend(self) -> GeoBackend:
        """現在有効なバックエンド"""
        return self.persisted if self.selector.use_database() else self.memory

    # ── 地方 ──────────────────────────────────

    def regions(self) -> List[Region]:
        return Region.all()

    def find_region(self, name: str) -> Optional[Region]:
        return Region.find(name)

    # ── 都道府県 ──────────────────────────────────

    def prefectures(self) -> List[Prefecture]:
        """全47都道府県をコード順で返す"""
        return self.backend.prefectures()

    def find_prefecture(self, code: Any) -> Optional[Prefecture]:
        prefecture_code = _to_int(code)
        if prefecture_code is None:
            return None
        return self.backend.find_prefecture("code", prefecture_code)

    def find_prefecture_by_name(self, name: str) -> Optional[Prefecture]:
        if not name:
            return None
        return self.backend.find_prefecture("name", name)

    def find_prefecture_by_english_name(self, name_en: str) -> Optional[Prefecture]:
        if not name_en:
            return None
        return self.backend.find_prefecture("name_en", name_en)

    def prefectures_in_region(self, region: Optional[str] = None) -> List[Prefecture]:
        """地方名で絞り込む。None の場合は全件"""
        if region is None:
            return self.prefectures()
        return self.backend.prefectures_in_region(region)

    # ── 市区町村 ──────────────────────────────────

    def find_city(self, code: Any) -> Optional[City]:
        """
        6桁自治体コードで市区町村を検索する

        現行データを優先し、見つからない場合は廃止データから引く。
        6文字でない入力は問い合わせずにNoneを返す。
        """
        if not isinstance(code, str) or len(code) != CITY_CODE_LENGTH:
            return None
        return self.backend.find_city(code)

    def cities_in(self, prefecture_code: Any) -> List[City]:
        """都道府県コードで現行の市区町村を返す。不正なコードは空リスト"""
        code = _to_int(prefecture_code)
        if code not in PREFECTURE_RANGE:
            return []
        return self.backend.cities_in(code)

    def valid_city_code(self, code: Any) -> bool:
        return is_valid(code)

    # ── 郵便番号 ──────────────────────────────────

    def postal_codes(self, code: Any) -> List[PostalCode]:
        """
        郵便番号で検索する

        ハイフンを除去して7桁の数字でなければ空リストを返す。
        先頭3桁のシャードだけを読み込み、完全一致する全町域を返す。
        """
        normalized = normalize_postal_code(code)
        if normalized is None:
            return []

        shard = self.store.postal_codes(normalized[:POSTAL_PREFIX_LENGTH])
        return [PostalCode.from_record(r) for r in shard if r["code"] == normalized]

    def find_postal_code(self, code: Any) -> Optional[PostalCode]:
        results = self.postal_codes(code)
        return results[0] if results else None

    # ── キャッシュ ──────────────────────────────────

    def reset(self) -> None:
        """データキャッシュとバックエンド判定をクリアする"""
        self.store.reset()
        self.memory.reset()
        self.selector.reset()

    def status(self) -> dict:
        """検索サービスの状態を取得"""
        return {
            "backend": self.backend.name,
            "cache": self.store.cache_info(),
        }


def normalize_postal_code(code: Any) -> Optional[str]:
    """ハイフンを除去した7桁の郵便番号を返す。不正な形式はNone"""
    if code is None:
        return None
    normalized = str(code).replace("-", "")
    if not POSTAL_CODE_PATTERN.fullmatch(normalized):
        return None
    return normalized


def _to_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, float) and not value.is_integer():
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


_geo_index: Optional[GeoIndex] = None
_geo_index_lock = threading.Lock()


def get_geo_index() -> GeoIndex:
    """プロセス共有の GeoIndex を返す"""
    global _geo_index
    if _geo_index is None:
        with _geo_index_lock:
            if _geo_index is None:
                _geo_index = GeoIndex()
    return _geo_index


def set_geo_index(index: Optional[GeoIndex]) -> None:
    """プロセス共有の GeoIndex を差し替える。None で次回アクセス時に再生成"""
    global _geo_index
    with _geo_index_lock:
        _geo_index = index
