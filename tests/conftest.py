"""
pytest設定ファイル

全テストで共通して使用されるフィクスチャとセットアップを定義します。
"""

import json
from pathlib import Path

import pytest

from jpaddr.config import BUNDLED_DATA_DIR
from jpaddr.database import DatabaseManager
from jpaddr.services.backend import BackendSelector
from jpaddr.services.data_store import DataStore
from jpaddr.services.geo_index import GeoIndex, set_geo_index


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: 単体テスト")
    config.addinivalue_line("markers", "integration: 統合テスト")
    config.addinivalue_line("markers", "database: 永続ストアを使うテスト")


def build_index(data_dir, db=None, use_database=False) -> GeoIndex:
    """バックエンドを固定した GeoIndex を作成する"""
    db = db or DatabaseManager("")
    selector = BackendSelector(db)
    selector.force(use_database)
    return GeoIndex(store=DataStore(data_dir), db=db, selector=selector)


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch):
    """テスト環境のセットアップ"""
    monkeypatch.setenv('TESTING', 'true')
    monkeypatch.setenv('LOG_LEVEL', 'ERROR')
    monkeypatch.delenv('DATABASE_URL', raising=False)
    monkeypatch.delenv('JPADDR_BACKEND', raising=False)
    monkeypatch.delenv('JPADDR_DATA_DIR', raising=False)


@pytest.fixture(autouse=True)
def geo_index():
    """同梱データを使うプロセス共有の GeoIndex（テストごとに作り直す）"""
    index = build_index(BUNDLED_DATA_DIR)
    set_geo_index(index)
    yield index
    set_geo_index(None)


# 合併チェーン・重複コードのテスト用廃止データ
DEPRECATED_FIXTURE = [
    # A -> B -> 千代田区
    {"code": "130001", "prefecture_code": 13, "name": "旧甲町", "name_kana": "キュウコウマチ",
     "deprecated_at": "2001-04-01", "successor_code": "130002"},
    {"code": "130002", "prefecture_code": 13, "name": "旧乙町", "name_kana": "キュウオツマチ",
     "deprecated_at": "2005-04-01", "successor_code": "131016"},
    # 循環
    {"code": "130010", "prefecture_code": 13, "name": "循環一町", "name_kana": "ジュンカンイチマチ",
     "deprecated_at": "2006-01-01", "successor_code": "130028"},
    {"code": "130028", "prefecture_code": 13, "name": "循環二町", "name_kana": "ジュンカンニマチ",
     "deprecated_at": "2006-01-01", "successor_code": "130010"},
    # 合併先が存在しない
    {"code": "130036", "prefecture_code": 13, "name": "孤立町", "name_kana": "コリツマチ",
     "deprecated_at": "2010-03-31", "successor_code": "139999"},
    # 合併先なし
    {"code": "130044", "prefecture_code": 13, "name": "消滅村", "name_kana": "ショウメツムラ",
     "deprecated_at": "1999-10-01", "successor_code": None},
    # 現行コードと重複する廃止データ
    {"code": "131016", "prefecture_code": 13, "name": "旧千代田区", "name_kana": "キュウチヨダク",
     "deprecated_at": "1947-05-03", "successor_code": None},
]

CITIES_13_FIXTURE = [
    {"code": "131016", "prefecture_code": 13, "name": "千代田区", "name_kana": "チヨダク",
     "district": None, "capital": False},
    {"code": "131041", "prefecture_code": 13, "name": "新宿区", "name_kana": "シンジュクク",
     "district": None, "capital": True},
    {"code": "133035", "prefecture_code": 13, "name": "瑞穂町", "name_kana": "ミズホマチ",
     "district": "西多摩郡", "capital": False},
    # シャード内に残った廃止済みレコード
    {"code": "131997", "prefecture_code": 13, "name": "廃止区", "name_kana": "ハイシク",
     "district": None, "capital": False, "deprecated_at": "2000-01-01", "successor_code": "131016"},
]

POSTAL_100_FIXTURE = [
    {"code": "1000004", "prefecture_code": 13, "city_name": "千代田区", "town": "大手町"},
    {"code": "1000004", "prefecture_code": 13, "city_name": "千代田区", "town": "丸の内"},
    {"code": "1000005", "prefecture_code": 13, "city_name": "千代田区", "town": "丸の内"},
]


@pytest.fixture
def index_factory():
    """バックエンドを固定した GeoIndex のファクトリ"""
    return build_index


@pytest.fixture
def make_dataset(tmp_path):
    """一時データセットを作成するファクトリ"""

    def _make(prefectures=None, cities=None, deprecated=None, postal_codes=None) -> Path:
        root = tmp_path / "data"
        (root / "cities").mkdir(parents=True, exist_ok=True)
        (root / "postal_codes").mkdir(parents=True, exist_ok=True)

        if prefectures is None:
            prefectures = json.loads((BUNDLED_DATA_DIR / "prefectures.json").read_text(encoding="utf-8"))
        _write(root / "prefectures.json", prefectures)
        _write(root / "deprecated_cities.json", deprecated or [])

        for code, records in (cities or {}).items():
            _write(root / "cities" / f"{int(code):02d}.json", records)
        for prefix, records in (postal_codes or {}).items():
            _write(root / "postal_codes" / f"{prefix}.json", records)
        return root

    return _make


@pytest.fixture
def fixture_dataset(make_dataset):
    """合併チェーン・複数町域の郵便番号を含む一時データセット"""
    return make_dataset(
        cities={13: CITIES_13_FIXTURE},
        deprecated=DEPRECATED_FIXTURE,
        postal_codes={"100": POSTAL_100_FIXTURE},
    )


@pytest.fixture
def fixture_index(fixture_dataset):
    """一時データセットを使う GeoIndex をプロセス共有に設定"""
    index = build_index(fixture_dataset)
    set_geo_index(index)
    return index


@pytest.fixture
def sqlite_db():
    """インメモリSQLiteの DatabaseManager"""
    db = DatabaseManager("sqlite://")
    db.initialize()
    db.create_tables()
    yield db
    db.close()


def _write(path: Path, data) -> None:
    path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
