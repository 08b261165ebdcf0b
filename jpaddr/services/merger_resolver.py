"""
合併チェーン解決

廃止された自治体コードは合併先コードを指し、合併先がさらに廃止されている場合がある。
データの不整合で循環していても必ず停止するよう、訪問済みコードを記録しながらたどる。
"""

import logging
from enum import Enum
from typing import Callable, Optional, Set

from ..models.city import City

logger = logging.getLogger(__name__)


class MergerState(Enum):
    """合併チェーン上の状態"""
    ACTIVE = "active"
    DEPRECATED_WITH_SUCCESSOR = "deprecated_with_successor"
    DEPRECATED_WITHOUT_SUCCESSOR = "deprecated_without_successor"


class MergerResolver:
    """市区町村の合併先をたどるリゾルバ"""

    def __init__(self, find_city: Callable[[str], Optional[City]]):
        """
        Args:
            find_city: 6桁コードから市区町村（廃止済みを含む）を引く関数
        """
        self._find_city = find_city

    def successor(self, city: City) -> Optional[City]:
        """合併先を1段だけ解決する。コードがない・解決できない場合はNone"""
        if not city.successor_code:
            return None
        return self._find_city(city.successor_code)

    def state(self, city: City) -> MergerState:
        if city.is_active():
            return MergerState.ACTIVE
        if self.successor(city) is None:
            return MergerState.DEPRECATED_WITHOUT_SUCCESSOR
        return MergerState.DEPRECATED_WITH_SUCCESSOR

    def current(self, city: City) -> City:
        """
        合併チェーンをたどり、現行の市区町村を返す

        現行の市区町村は即座に自身を返す。合併先が解決できなくなった時点で
        最後に解決できた市区町村を返し、既に訪れたコードに戻った時点で打ち切る。
        """
        current = city
        seen: Set[str] = set()

        while current.is_deprecated() and current.successor_code and current.successor_code not in seen:
            seen.add(current.successor_code)
            next_city = self._find_city(current.successor_code)
            if next_city is None:
                break
            current = next_city

        if current.is_deprecated() and current.successor_code in seen:
            logger.warning(f"合併チェーンの循環を検出しました: {city.code} -> {current.code}")

        return current
