"""環境設定ユーティリティ"""

import platform
import sys
from typing import Any, Dict

from ..config import config


def get_environment_info() -> Dict[str, Any]:
    """環境情報を取得"""
    info = config.get_environment_info()
    info.update({
        "platform": platform.platform(),
        "python_implementation": platform.python_implementation(),
        "executable": sys.executable,
    })
    return info


def get_database_info() -> Dict[str, Any]:
    """データベース情報を取得"""
    return config.get_database_info()


def is_production() -> bool:
    """本番環境かどうかを判定"""
    return config.ENVIRONMENT == 'production'


def is_development() -> bool:
    """開発環境かどうかを判定"""
    return config.ENVIRONMENT == 'development'


def is_staging() -> bool:
    """ステージング環境かどうかを判定"""
    return config.ENVIRONMENT == 'staging'
