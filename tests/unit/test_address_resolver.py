"""
住所解決フックのユニットテスト
"""

import pytest
from sqlalchemy import Column, Integer, String, create_engine
from sqlalchemy.orm import Session, declarative_base

from jpaddr.errors import ConfigurationError
from jpaddr.models.postal_code import PostalCode
from jpaddr.services.address_resolver import (
    city_full_address,
    install_postal_auto_resolve,
    postal_address,
    resolve_city_code,
)


@pytest.mark.unit
class TestAddressHelpers:

    def test_city_full_address(self):
        assert city_full_address("131016") == "東京都千代田区"
        assert city_full_address("473626") == "沖縄県八重瀬町"
        assert city_full_address("999999") is None
        assert city_full_address(None) is None

    def test_postal_address(self):
        assert postal_address("154-0011") == "東京都世田谷区上馬"
        assert postal_address("0000000") is None

    def test_resolve_city_code(self):
        assert resolve_city_code(PostalCode.find("1540011")) == "131121"
        assert resolve_city_code(PostalCode.find("9000006")) == "472018"

    def test_resolve_city_code_not_matched(self):
        """政令市の区など市区町村データにない名前はNone"""
        assert resolve_city_code(PostalCode.find("5300001")) is None


@pytest.fixture
def shop_class():
    """フックを登録するSQLAlchemyモデル（テストごとに新規作成）"""
    Base = declarative_base()

    class Shop(Base):
        __tablename__ = "shops"

        id = Column(Integer, primary_key=True)
        name = Column(String(50))
        postal_code = Column(String(8))
        pref_name = Column(String(10))
        city_name = Column(String(50))
        town_name = Column(String(50))
        city_code = Column(String(6))

    engine = create_engine("sqlite://")
    Base.metadata.create_all(engine)
    Shop.engine = engine
    yield Shop
    engine.dispose()


@pytest.mark.unit
@pytest.mark.database
class TestSQLAlchemyAutoResolve:
    """SQLAlchemyモデルへの自動入力"""

    def test_insert(self, shop_class):
        install_postal_auto_resolve(
            shop_class, "postal_code",
            prefecture="pref_name", city="city_name", town="town_name", city_code="city_code",
        )

        with Session(shop_class.engine) as session:
            shop = shop_class(name="本店", postal_code="154-0011")
            session.add(shop)
            session.commit()

            assert shop.pref_name == "東京都"
            assert shop.city_name == "世田谷区"
            assert shop.town_name == "上馬"
            assert shop.city_code == "131121"

    def test_update_when_postal_code_changes(self, shop_class):
        install_postal_auto_resolve(shop_class, "postal_code", prefecture="pref_name", town="town_name")

        with Session(shop_class.engine) as session:
            shop = shop_class(name="支店", postal_code="1540011")
            session.add(shop)
            session.commit()

            shop.postal_code = "9000006"
            session.commit()

            assert shop.pref_name == "沖縄県"
            assert shop.town_name == "おもろまち"

    def test_unchanged_postal_code_is_not_resolved(self, shop_class):
        """郵便番号が変わらない書き込みでは上書きしない"""
        install_postal_auto_resolve(shop_class, "postal_code", prefecture="pref_name")

        with Session(shop_class.engine) as session:
            shop = shop_class(name="支店", postal_code="1540011")
            session.add(shop)
            session.commit()

            shop.pref_name = "手入力"
            shop.name = "新支店"
            session.commit()

            assert shop.pref_name == "手入力"

    def test_unresolvable_postal_code_writes_none(self, shop_class):
        install_postal_auto_resolve(shop_class, "postal_code", prefecture="pref_name", city="city_name")

        with Session(shop_class.engine) as session:
            shop = shop_class(name="不明", postal_code="0000000", pref_name="仮")
            session.add(shop)
            session.commit()

            assert shop.pref_name is None
            assert shop.city_name is None

    def test_missing_column(self, shop_class):
        with pytest.raises(ConfigurationError):
            install_postal_auto_resolve(shop_class, "postal_code", prefecture="no_such_column")


class CallbackHost:
    """before_save / attribute_changed を持つ素のホスト"""

    callbacks = []

    def __init__(self, **values):
        self.changed = set()
        for key, value in values.items():
            setattr(self, key, value)
            self.changed.add(key)

    @classmethod
    def before_save(cls, callback):
        cls.callbacks.append(callback)

    def attribute_changed(self, name):
        return name in self.changed

    def save(self):
        for callback in self.callbacks:
            callback(self)
        self.changed.clear()


@pytest.mark.unit
class TestCallbackAutoResolve:
    """before_save フックを持つ素のクラスへの自動入力"""

    @pytest.fixture
    def host_class(self):
        class Customer(CallbackHost):
            callbacks = []

        return Customer

    def test_resolves_on_save(self, host_class):
        mapping = install_postal_auto_resolve(
            host_class, "zip", prefecture="pref", city="city", prefecture_code="pref_code",
        )
        customer = host_class(zip="900-0006")
        customer.save()

        assert mapping.source_column == "zip"
        assert customer.pref == "沖縄県"
        assert customer.city == "那覇市"
        assert customer.pref_code == 47

    def test_skips_when_unchanged(self, host_class):
        install_postal_auto_resolve(host_class, "zip", town="town")
        customer = host_class(zip="1540011")
        customer.save()
        customer.town = "手入力"
        customer.save()

        assert customer.town == "手入力"


@pytest.mark.unit
class TestInstallErrors:
    """登録時の誤用はConfigurationError"""

    def test_host_without_hooks(self):
        class Plain:
            pass

        with pytest.raises(ConfigurationError, match="does not support before_save callbacks"):
            install_postal_auto_resolve(Plain, "zip", prefecture="pref")

    def test_host_without_change_tracking(self):
        class OnlyCallback:
            @classmethod
            def before_save(cls, callback):
                pass

        with pytest.raises(ConfigurationError):
            install_postal_auto_resolve(OnlyCallback, "zip", prefecture="pref")

    def test_empty_mapping(self):
        with pytest.raises(ConfigurationError):
            install_postal_auto_resolve(CallbackHost, "zip")

    def test_unknown_mapping_key(self):
        with pytest.raises(ConfigurationError, match="latitude"):
            install_postal_auto_resolve(CallbackHost, "zip", latitude="lat")
