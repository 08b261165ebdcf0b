"""市区町村データモデル"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class City:
    """
    市区町村

    code は6桁自治体コード（JIS X 0402 + チェックディジット、例: "131016"）。
    district は郡に属する町村のみ設定される（例: "島尻郡"）。
    deprecated_at がある場合は廃止済みで、successor_code が合併先を指す。
    """
    code: str
    prefecture_code: int
    name: str
    name_kana: str
    district: Optional[str] = None
    capital: bool = False
    deprecated_at: Optional[str] = None
    successor_code: Optional[str] = None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> 'City':
        """同梱データの1レコードから生成"""
        return cls(
            code=record['code'],
            prefecture_code=int(record['prefecture_code']),
            name=record['name'],
            name_kana=record['name_kana'],
            district=record.get('district'),
            capital=bool(record.get('capital', False)),
            deprecated_at=record.get('deprecated_at'),
            successor_code=record.get('successor_code'),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @property
    def is_capital(self) -> bool:
        """県庁所在地かどうか"""
        return self.capital

    @property
    def full_name(self) -> str:
        """郡名付きの正式名（例: "島尻郡八重瀬町"）。郡がない場合は name と同じ"""
        return f"{self.district}{self.name}" if self.district else self.name

    def is_deprecated(self) -> bool:
        return self.deprecated_at is not None

    def is_active(self) -> bool:
        return self.deprecated_at is None

    def successor(self) -> Optional['City']:
        """合併先の市区町村を返す。解決できない場合はNone"""
        return _index().merger.successor(self)

    def current(self) -> 'City':
        """合併チェーンをたどり、現行の市区町村を返す"""
        return _index().merger.current(self)

    def prefecture(self):
        """所属する都道府県を返す"""
        from .prefecture import Prefecture

        return Prefecture.find(self.prefecture_code)

    @classmethod
    def find(cls, code: Any) -> Optional['City']:
        """6桁自治体コードで検索する（廃止コードを含む）"""
        return _index().find_city(code)

    @classmethod
    def where(cls, prefecture_code: Any) -> List['City']:
        """都道府県コードで現行の市区町村を絞り込む"""
        return _index().cities_in(prefecture_code)

    @classmethod
    def valid_code(cls, code: Any) -> bool:
        """チェックディジットで自治体コードを検証する"""
        from ..services.code_validator import is_valid

        return is_valid(code)


def _index():
    from ..services.geo_index import get_geo_index

    return get_geo_index()
