"""都道府県データモデル"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class Prefecture:
    """
    都道府県

    code は JIS X 0401 都道府県コード（1〜47）。
    type は "都" / "道" / "府" / "県" のいずれか。
    capital_code は県庁所在地の6桁自治体コード（例: "131041"）。
    """
    code: int
    name: str
    name_en: str
    name_kana: str
    name_hiragana: str
    region_name: str
    type: str
    capital_code: Optional[str] = None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> 'Prefecture':
        """同梱データの1レコードから生成"""
        return cls(
            code=int(record['code']),
            name=record['name'],
            name_en=record['name_en'],
            name_kana=record['name_kana'],
            name_hiragana=record['name_hiragana'],
            region_name=record['region_name'],
            type=record['type'],
            capital_code=record.get('capital_code'),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def region(self):
        """所属する地方を返す"""
        from .region import Region

        return Region.find(self.region_name)

    def cities(self) -> list:
        """所属する現行の市区町村の一覧を返す"""
        from .city import City

        return City.where(self.code)

    def capital(self):
        """県庁所在地を返す"""
        from .city import City

        return City.find(self.capital_code) if self.capital_code else None

    @classmethod
    def all(cls) -> List['Prefecture']:
        """全47都道府県をコード順で返す"""
        return _index().prefectures()

    @classmethod
    def find(cls, code: Any) -> Optional['Prefecture']:
        """都道府県コードで検索する"""
        return _index().find_prefecture(code)

    @classmethod
    def find_by_name(cls, name: str) -> Optional['Prefecture']:
        """日本語名で検索する（例: "東京都"）"""
        return _index().find_prefecture_by_name(name)

    @classmethod
    def find_by_english_name(cls, name_en: str) -> Optional['Prefecture']:
        """英語名で検索する（例: "Tokyo"）"""
        return _index().find_prefecture_by_english_name(name_en)

    @classmethod
    def where(cls, region: Optional[str] = None) -> List['Prefecture']:
        """地方名で絞り込む。引数なしで全件返す"""
        return _index().prefectures_in_region(region)


def _index():
    from ..services.geo_index import get_geo_index

    return get_geo_index()
