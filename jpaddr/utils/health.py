"""
ヘルスチェック機能を提供するモジュール
"""

import logging
import sys
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError

from ..errors import JpAddrError
from ..models.region import REGIONS
from ..services.geo_index import GeoIndex, get_geo_index

logger = logging.getLogger(__name__)

PREFECTURE_COUNT = 47


def collect_health(index: Optional[GeoIndex] = None) -> Dict[str, Any]:
    """
    ヘルスチェックの各項目を実行し、結果を辞書で返す

    以下の項目を確認します:
    1. データセットのルートディレクトリが存在するか
    2. 47都道府県が読み込めるか
    3. 9地方の都道府県コードが1〜47をちょうど1回ずつ網羅しているか
    4. 検索バックエンドの状態
    """
    index = index or get_geo_index()
    checks: Dict[str, Any] = {}

    checks["data_dir"] = index.store.data_dir.is_dir()

    prefectures = index.prefectures()
    checks["prefecture_count"] = len(prefectures)
    checks["prefectures"] = len(prefectures) == PREFECTURE_COUNT

    region_codes = [code for region in REGIONS for code in region.prefecture_codes]
    checks["region_partition"] = sorted(region_codes) == list(range(1, PREFECTURE_COUNT + 1))

    checks["backend"] = index.backend.name
    if checks["backend"] == "database":
        checks["database"] = index.db.health_check()

    checks["healthy"] = all(checks[key] for key in ("data_dir", "prefectures", "region_partition"))
    return checks


def check_health(index: Optional[GeoIndex] = None) -> bool:
    """
    ヘルスチェックを実行します。

    Returns:
        bool: ヘルスチェックが成功した場合はTrue、失敗した場合はFalse
    """
    try:
        checks = collect_health(index)
    except (JpAddrError, SQLAlchemyError, OSError) as e:
        logger.error(f"ヘルスチェック中にエラーが発生しました: {e}")
        return False

    if not checks["data_dir"]:
        logger.error("データセットのディレクトリが存在しません")
    if not checks["prefectures"]:
        logger.error(f"都道府県データの件数が不正です: {checks['prefecture_count']}件")
    if not checks["region_partition"]:
        logger.error("地方区分が47都道府県を網羅していません")

    if checks["healthy"]:
        logger.info(f"ヘルスチェック成功: バックエンド={checks['backend']}")
    return checks["healthy"]


if __name__ == "__main__":
    """
    コマンドラインから直接実行された場合、ヘルスチェックを実行し、
    結果に応じた終了コードを返します。
    """
    is_healthy = check_health()
    print("ヘルスチェック結果: " + ("成功" if is_healthy else "失敗"))
    sys.exit(0 if is_healthy else 1)
