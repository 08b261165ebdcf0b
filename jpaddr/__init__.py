"""
jpaddr - 日本の住所データ（地方・都道府県・市区町村・郵便番号）検索ライブラリ

    >>> from jpaddr import Prefecture, City, PostalCode
    >>> Prefecture.find(13).name
    '東京都'
    >>> City.find("131016").name
    '千代田区'
"""

from .errors import (
    ConfigurationError,
    DatabaseConnectionError,
    DatabaseError,
    DataLoadError,
    JpAddrError,
)
from .models import REGIONS, City, PostalCode, Prefecture, Region
from .services.address_resolver import city_full_address, install_postal_auto_resolve, postal_address
from .services.code_validator import append_check_digit, compute_check_digit, is_valid
from .services.geo_index import GeoIndex, get_geo_index, set_geo_index
from .services.merger_resolver import MergerState

__version__ = "0.1.0"

__all__ = [
    "Region",
    "REGIONS",
    "Prefecture",
    "City",
    "PostalCode",
    "GeoIndex",
    "get_geo_index",
    "set_geo_index",
    "MergerState",
    "is_valid",
    "compute_check_digit",
    "append_check_digit",
    "city_full_address",
    "postal_address",
    "install_postal_auto_resolve",
    "JpAddrError",
    "DataLoadError",
    "DatabaseError",
    "DatabaseConnectionError",
    "ConfigurationError",
]
