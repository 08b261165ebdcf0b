"""
住所解決フック

ホストレコード（任意のモデル）の郵便番号カラムから、保存直前に都道府県名・市区町村名などを
他のカラムへ自動入力する。対応するホストは次のいずれか。

- SQLAlchemy のマップ済みクラス（before_insert / before_update イベントを使う）
- ``before_save(callback)`` クラスメソッドと ``attribute_changed(name)`` メソッドを持つクラス

    >>> install_postal_auto_resolve(Shop, "postal_code", prefecture="pref_name", city="city_name")
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from sqlalchemy import event, inspect

from ..errors import ConfigurationError
from ..models.city import City
from ..models.postal_code import PostalCode

logger = logging.getLogger(__name__)

# サポートするマッピングキーの一覧
MAPPING_KEYS = ("prefecture", "city", "town", "prefecture_code", "city_code")


def city_full_address(code: Optional[str]) -> Optional[str]:
    """自治体コードから「都道府県名 + 市区町村名」を返す"""
    city = City.find(code)
    if city is None:
        return None
    pref = city.prefecture()
    if pref is None:
        return None
    return f"{pref.name}{city.name}"


def postal_address(code: Optional[str]) -> Optional[str]:
    """郵便番号から「都道府県名 + 市区町村名 + 町域名」を返す"""
    postal = PostalCode.find(code)
    if postal is None:
        return None
    return f"{postal.prefecture_name or ''}{postal.city_name}{postal.town}"


def resolve_city_code(postal: PostalCode) -> Optional[str]:
    """郵便番号データから自治体コードを逆引きする（郡名付きの正式名で照合）"""
    for city in City.where(postal.prefecture_code):
        if city.full_name == postal.city_name:
            return city.code
    return None


def resolve_value(postal: Optional[PostalCode], key: str) -> Any:
    """マッピングキーに対応する値を郵便番号データから解決する"""
    if postal is None:
        return None

    if key == "prefecture":
        return postal.prefecture_name
    if key == "city":
        return postal.city_name
    if key == "town":
        return postal.town
    if key == "prefecture_code":
        return postal.prefecture_code
    if key == "city_code":
        return resolve_city_code(postal)
    return None


@dataclass(frozen=True)
class AutoResolveMapping:
    """郵便番号カラムから住所カラムへの自動入力設定"""
    source_column: str
    targets: Dict[str, str]

    def apply(self, record: Any) -> None:
        """郵便番号を解決し、マッピング先カラムへ書き込む。解決できなければNoneを書く"""
        postal = PostalCode.find(getattr(record, self.source_column, None))
        for key, target_column in self.targets.items():
            setattr(record, target_column, resolve_value(postal, key))


def install_postal_auto_resolve(host_class: type, postal_column: str, **mappings: str) -> AutoResolveMapping:
    """
    保存前に郵便番号から住所カラムを自動入力するフックを登録する

    Args:
        host_class: ホストレコードのクラス
        postal_column: 郵便番号を格納するカラム名
        **mappings: マッピングキー（prefecture / city / town / prefecture_code / city_code）と保存先カラム名

    Returns:
        登録した AutoResolveMapping

    Raises:
        ConfigurationError: マッピングが空・未知のキーを含む・ホストが保存前フックに対応していない場合
    """
    if not mappings:
        raise ConfigurationError("マッピングが指定されていません")

    unknown = sorted(set(mappings) - set(MAPPING_KEYS))
    if unknown:
        raise ConfigurationError(
            f"未対応のマッピングキー: {', '.join(unknown)} (対応: {', '.join(MAPPING_KEYS)})"
        )

    mapping = AutoResolveMapping(
        source_column=str(postal_column),
        targets={key: str(column) for key, column in mappings.items()},
    )

    mapper = inspect(host_class, raiseerr=False)
    if mapper is not None:
        _install_sqlalchemy_hook(host_class, mapper, mapping)
    elif callable(getattr(host_class, "before_save", None)) and callable(getattr(host_class, "attribute_changed", None)):
        _install_callback_hook(host_class, mapping)
    else:
        raise ConfigurationError(f"{host_class.__name__} does not support before_save callbacks")

    logger.debug(f"郵便番号の自動入力を登録しました: {host_class.__name__}.{mapping.source_column}")
    return mapping


def _install_sqlalchemy_hook(host_class: type, mapper: Any, mapping: AutoResolveMapping) -> None:
    columns = set(mapper.column_attrs.keys())
    missing = [c for c in (mapping.source_column, *mapping.targets.values()) if c not in columns]
    if missing:
        raise ConfigurationError(f"{host_class.__name__} にカラムがありません: {', '.join(missing)}")

    def before_write(mapper, connection, target):
        history = inspect(target).attrs[mapping.source_column].history
        if history.has_changes():
            mapping.apply(target)

    event.listen(host_class, "before_insert", before_write, propagate=True)
    event.listen(host_class, "before_update", before_write, propagate=True)


def _install_callback_hook(host_class: type, mapping: AutoResolveMapping) -> None:
    def before_write(record: Any) -> None:
        if record.attribute_changed(mapping.source_column):
            mapping.apply(record)

    host_class.before_save(before_write)
