"""
郵便番号データモデル

常に同梱データから読み込む（永続ストアの対象外）。
city_name は市区町村テーブルへの外部キーではなく、名前での照合のみ可能。
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class PostalCode:
    """郵便番号（1つの番号が複数の町域にまたがることがある）"""
    code: str
    prefecture_code: int
    city_name: str
    town: str

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> 'PostalCode':
        return cls(
            code=record['code'],
            prefecture_code=int(record['prefecture_code']),
            city_name=record['city_name'],
            town=record['town'],
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @property
    def formatted_code(self) -> str:
        """ハイフン付きの郵便番号（例: "154-0011"）"""
        return f"{self.code[:3]}-{self.code[3:]}"

    def prefecture(self):
        from .prefecture import Prefecture

        return Prefecture.find(self.prefecture_code)

    @property
    def prefecture_name(self) -> Optional[str]:
        pref = self.prefecture()
        return pref.name if pref else None

    @classmethod
    def find(cls, code: Any) -> Optional['PostalCode']:
        """郵便番号で検索し、最初の1件を返す。ハイフン有無どちらも可"""
        results = cls.where(code)
        return results[0] if results else None

    @classmethod
    def where(cls, code: Any) -> List['PostalCode']:
        """郵便番号で検索し、該当する全町域を返す"""
        from ..services.geo_index import get_geo_index

        return get_geo_index().postal_codes(code)
