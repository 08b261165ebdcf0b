"""Persisted store tables for prefectures and cities."""

from sqlalchemy import Boolean, Column, ForeignKey, Integer, String
from sqlalchemy.orm import declarative_base, relationship

from .city import City
from .prefecture import Prefecture

Base = declarative_base()

PREFECTURES_TABLE = 'jpaddr_prefectures'
CITIES_TABLE = 'jpaddr_cities'


class PrefectureRecord(Base):
    """都道府県テーブル"""

    __tablename__ = PREFECTURES_TABLE

    code = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String(10), nullable=False, unique=True)
    name_en = Column(String(20), nullable=False, unique=True)
    name_kana = Column(String(20), nullable=False)
    name_hiragana = Column(String(20), nullable=False)
    region_name = Column(String(10), nullable=False, index=True)
    # "type" は予約語と紛らわしいためカラム名を変える
    prefecture_type = Column(String(1), nullable=False)
    capital_code = Column(String(6), nullable=True)

    cities = relationship('CityRecord', back_populates='prefecture')

    def __repr__(self) -> str:
        return f"<PrefectureRecord(code={self.code}, name='{self.name}')>"

    def to_entity(self) -> Prefecture:
        """イミュータブルな Prefecture に変換"""
        return Prefecture(
            code=self.code,
            name=self.name,
            name_en=self.name_en,
            name_kana=self.name_kana,
            name_hiragana=self.name_hiragana,
            region_name=self.region_name,
            type=self.prefecture_type,
            capital_code=self.capital_code,
        )


class CityRecord(Base):
    """市区町村テーブル（廃止済みを含む）"""

    __tablename__ = CITIES_TABLE

    code = Column(String(6), primary_key=True)
    prefecture_code = Column(Integer, ForeignKey(f'{PREFECTURES_TABLE}.code'), nullable=False, index=True)
    name = Column(String(50), nullable=False)
    name_kana = Column(String(100), nullable=False)
    district = Column(String(50), nullable=True)
    capital = Column(Boolean, default=False, nullable=False)
    deprecated_at = Column(String(10), nullable=True)  # "2025-04-01"
    successor_code = Column(String(6), nullable=True)

    prefecture = relationship('PrefectureRecord', back_populates='cities')

    def __repr__(self) -> str:
        return f"<CityRecord(code='{self.code}', name='{self.name}', deprecated_at={self.deprecated_at})>"

    def to_entity(self) -> City:
        """イミュータブルな City に変換"""
        return City(
            code=self.code,
            prefecture_code=self.prefecture_code,
            name=self.name,
            name_kana=self.name_kana,
            district=self.district,
            capital=bool(self.capital),
            deprecated_at=self.deprecated_at,
            successor_code=self.successor_code,
        )
