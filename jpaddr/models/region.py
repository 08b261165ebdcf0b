"""
地方区分データモデル

北海道、東北、関東、中部、近畿、中国、四国、九州、沖縄の9地方。
静的に定義し、永続化しない。
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class Region:
    """地方区分"""
    name: str
    name_en: str
    prefecture_codes: Tuple[int, ...]

    def prefectures(self) -> list:
        """所属する都道府県の一覧を返す"""
        from .prefecture import Prefecture

        return [pref for pref in (Prefecture.find(code) for code in self.prefecture_codes) if pref]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'name_en': self.name_en,
            'prefecture_codes': list(self.prefecture_codes),
        }

    @classmethod
    def all(cls) -> List['Region']:
        """全9地方を返す"""
        return list(REGIONS)

    @classmethod
    def find(cls, name: Optional[str]) -> Optional['Region']:
        """日本語名または英語名で地方を検索する（例: "関東", "Kanto"）"""
        for region in REGIONS:
            if name in (region.name, region.name_en):
                return region
        return None


REGIONS: Tuple[Region, ...] = (
    Region(name="北海道", name_en="Hokkaido", prefecture_codes=(1,)),
    Region(name="東北", name_en="Tohoku", prefecture_codes=(2, 3, 4, 5, 6, 7)),
    Region(name="関東", name_en="Kanto", prefecture_codes=(8, 9, 10, 11, 12, 13, 14)),
    Region(name="中部", name_en="Chubu", prefecture_codes=(15, 16, 17, 18, 19, 20, 21, 22, 23)),
    Region(name="近畿", name_en="Kinki", prefecture_codes=(24, 25, 26, 27, 28, 29, 30)),
    Region(name="中国", name_en="Chugoku", prefecture_codes=(31, 32, 33, 34, 35)),
    Region(name="四国", name_en="Shikoku", prefecture_codes=(36, 37, 38, 39)),
    Region(name="九州", name_en="Kyushu", prefecture_codes=(40, 41, 42, 43, 44, 45, 46)),
    Region(name="沖縄", name_en="Okinawa", prefecture_codes=(47,)),
)
