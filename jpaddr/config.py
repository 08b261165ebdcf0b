"""Configuration management for jpaddr."""

import os
import sys
from typing import Optional, Dict, Any
from pathlib import Path
from dotenv import load_dotenv

# 環境変数ファイルの読み込み
env_files = ['.env', '.env.local']
for env_file in env_files:
    if os.path.exists(env_file):
        load_dotenv(env_file)
        break

# 同梱JSONデータのディレクトリ
BUNDLED_DATA_DIR = Path(__file__).resolve().parent / 'data'

BACKEND_CHOICES = ('auto', 'memory', 'database')


class Config:
    """Configuration class for jpaddr."""

    ENVIRONMENT: str
    DATA_DIR: str
    DATABASE_URL: str
    BACKEND: str
    DB_CONNECT_TIMEOUT: int
    LOG_LEVEL: str
    LOG_FILE: str

    def __init__(self):
        """環境変数を読み込み、環境に応じた設定を初期化"""
        # 環境設定
        self.ENVIRONMENT = os.getenv('ENVIRONMENT', 'development')

        # Dataset Configuration
        self.DATA_DIR = os.getenv('JPADDR_DATA_DIR', str(BUNDLED_DATA_DIR))

        # Database Configuration
        self.DATABASE_URL = os.getenv('DATABASE_URL', '')
        self.BACKEND = os.getenv('JPADDR_BACKEND', 'auto').lower()
        self.DB_CONNECT_TIMEOUT = int(os.getenv('DB_CONNECT_TIMEOUT', '3'))  # seconds

        # Logging Configuration
        self.LOG_LEVEL = os.getenv('LOG_LEVEL', '')
        self.LOG_FILE = os.getenv('LOG_FILE', '')

        self._apply_environment_settings()

    def _apply_environment_settings(self):
        """環境に応じた設定を適用"""
        if not self.LOG_LEVEL:
            if self.ENVIRONMENT == 'production':
                self.LOG_LEVEL = 'WARNING'
            elif self.ENVIRONMENT == 'staging':
                self.LOG_LEVEL = 'INFO'
            else:
                self.LOG_LEVEL = 'DEBUG'

        if self.BACKEND not in BACKEND_CHOICES:
            raise ValueError(
                f"Unknown JPADDR_BACKEND: {self.BACKEND}. "
                f"Supported values: {', '.join(BACKEND_CHOICES)}"
            )

    @property
    def data_path(self) -> Path:
        """データセットのルートディレクトリ"""
        return Path(self.DATA_DIR).resolve()

    def database_enabled(self) -> bool:
        """永続ストアの検出を試みるかどうか"""
        if self.BACKEND == 'memory':
            return False
        return bool(self.DATABASE_URL)

    def get_database_info(self) -> Dict[str, Any]:
        """データベース設定情報を取得"""
        db_type: Optional[str] = None
        db_name: Optional[str] = None

        if "postgresql" in self.DATABASE_URL:
            db_type = "PostgreSQL"
            db_name = self.DATABASE_URL.split("/")[-1]
        elif "sqlite" in self.DATABASE_URL:
            db_type = "SQLite"
            db_path = self.DATABASE_URL.replace("sqlite:///", "")
            db_name = os.path.basename(db_path) or ":memory:"

        return {
            "type": db_type,
            "name": db_name,
            "url_masked": mask_db_url(self.DATABASE_URL),
            "backend": self.BACKEND,
        }

    def get_environment_info(self) -> Dict[str, Any]:
        """環境情報を取得"""
        return {
            "environment": self.ENVIRONMENT,
            "python_version": f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}",
            "log_level": self.LOG_LEVEL,
            "log_file": self.LOG_FILE,
            "data_dir": str(self.data_path),
        }


def mask_db_url(url: str) -> str:
    """データベースURLの機密情報をマスク"""
    if "@" in url:
        parts = url.split("@")
        if len(parts) == 2:
            auth_part = parts[0]
            if ":" in auth_part.split("//", 1)[-1]:
                protocol_user = auth_part.rsplit(":", 1)[0]
                return f"{protocol_user}:***@{parts[1]}"
    return url


# Global config instance
config = Config()
