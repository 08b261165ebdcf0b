"""
DataStore（同梱データの遅延読み込み）のユニットテスト
"""

import threading
from unittest.mock import patch

import pytest

from jpaddr.config import BUNDLED_DATA_DIR
from jpaddr.errors import DataLoadError
from jpaddr.services.data_store import DataStore


@pytest.fixture
def store():
    return DataStore(BUNDLED_DATA_DIR)


@pytest.mark.unit
class TestDataStore:
    """DataStoreのユニットテストクラス"""

    def test_prefectures_loaded_once(self, store):
        """2回目以降はキャッシュを返す"""
        first = store.prefectures()
        assert len(first) == 47
        assert store.prefectures() is first

    def test_cities_shard_cached_by_int_code(self, store):
        """文字列・整数どちらのコードでも同じシャードを返す"""
        tokyo = store.cities(13)
        assert any(record["code"] == "131016" for record in tokyo)
        assert store.cities("13") is tokyo

    @pytest.mark.parametrize("code", [0, 48, 99, -1, "abc", None])
    def test_missing_city_shard(self, store, code):
        """存在しないシャードは空リスト"""
        assert store.cities(code) == []

    def test_postal_shard(self, store):
        codes = {record["code"] for record in store.postal_codes("154")}
        assert "1540011" in codes
        assert store.postal_codes("999") == []

    @pytest.mark.parametrize("prefix", [
        "../prefectures", "../../../etc/passwd", "../cities/13", "15\x00", "\x00", "1540", "１５４",
    ])
    def test_path_traversal_rejected(self, store, prefix):
        """シャードディレクトリ外のパスや不正なプレフィックスは読み込まない"""
        assert store.postal_codes(prefix) == []
        assert store.cache_info()["postal_shards"] == []

    @pytest.mark.parametrize("relative_path, shard_dir", [
        ("../prefectures.json", "cities"),
        ("../../setup.json", None),
        ("13\x00.json", "cities"),
    ])
    def test_resolve_rejects_outside_paths(self, store, relative_path, shard_dir):
        """シャードの外を指すパスやNULを含むパスは例外にせずNone"""
        assert store._load_json(relative_path, shard_dir) is None

    def test_missing_shards_are_not_cached(self, make_dataset):
        """存在しないシャードはキャッシュに残らない"""
        store = DataStore(make_dataset(cities={13: []}))

        assert store.cities(14) == []
        assert store.postal_codes("999") == []
        assert store.cities(13) == []

        info = store.cache_info()
        assert info["city_shards"] == [13]
        assert info["postal_shards"] == []

    def test_reset_reloads(self, store):
        """reset後は再読み込みされる"""
        first = store.prefectures()
        tokyo = store.cities(13)
        store.reset()

        assert store.prefectures() is not first
        assert store.prefectures() == first
        assert store.cities(13) is not tokyo

    def test_cache_info(self, store):
        store.cities(13)
        store.postal_codes("100")
        info = store.cache_info()

        assert info["prefectures_loaded"] is False
        assert info["city_shards"] == [13]
        assert info["postal_shards"] == ["100"]

    def test_deprecated_city_lookup(self, fixture_dataset):
        """廃止コードで1件検索できる"""
        store = DataStore(fixture_dataset)
        assert store.deprecated_city("130001")["successor_code"] == "130002"
        assert store.deprecated_city("999999") is None
        assert len(store.deprecated_cities()) == 7

    def test_bundled_deprecated_cities(self, store):
        """同梱の廃止データは合併先コードを持つ"""
        urawa = store.deprecated_city("112046")
        assert urawa["name"] == "浦和市"
        assert urawa["successor_code"] == "111007"
        assert store.deprecated_city("131016") is None
        assert all(record["deprecated_at"] for record in store.deprecated_cities())

    def test_corrupt_json_raises(self, make_dataset):
        """壊れたJSONはDataLoadError"""
        root = make_dataset()
        (root / "cities" / "13.json").write_text("[{broken", encoding="utf-8")

        with pytest.raises(DataLoadError):
            DataStore(root).cities(13)

    def test_concurrent_first_access_loads_once(self, store):
        """同時の初回アクセスでも1回しか読み込まない"""
        barrier = threading.Barrier(8)
        results = []

        def worker():
            barrier.wait()
            results.append(store.cities(13))

        with patch.object(store, "_load_json", wraps=store._load_json) as load:
            threads = [threading.Thread(target=worker) for _ in range(8)]
            for t in threads:
                t.start()
            for t in threads:
                t.join()

        assert load.call_count == 1
        assert all(result is results[0] for result in results)
