"""
ヘルスチェックのユニットテスト
"""

import pytest

from jpaddr.utils.health import check_health, collect_health


@pytest.mark.unit
class TestHealth:

    def test_bundled_dataset_is_healthy(self, geo_index):
        checks = collect_health(geo_index)

        assert checks["healthy"] is True
        assert checks["prefecture_count"] == 47
        assert checks["region_partition"] is True
        assert checks["backend"] == "memory"
        assert check_health(geo_index) is True

    def test_missing_prefectures(self, make_dataset, index_factory):
        index = index_factory(make_dataset(prefectures=[]))

        assert collect_health(index)["prefectures"] is False
        assert check_health(index) is False

    def test_missing_data_dir(self, tmp_path, index_factory):
        index = index_factory(tmp_path / "missing")
        assert check_health(index) is False

    def test_corrupt_data(self, make_dataset, index_factory):
        root = make_dataset()
        (root / "prefectures.json").write_text("{", encoding="utf-8")
        assert check_health(index_factory(root)) is False
