"""Database connection and session management for jpaddr."""

import logging
import time
from contextlib import contextmanager
from typing import Any, Dict, Iterable, Iterator, Optional

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .config import config, mask_db_url
from .errors import DatabaseConnectionError, DatabaseError
from .models.tables import Base

logger = logging.getLogger(__name__)


class DatabaseManager:
    """Database connection and session manager."""

    def __init__(self, database_url: Optional[str] = None, connect_timeout: Optional[int] = None):
        """Initialize database manager with connection URL."""
        self._database_url = database_url
        self.connect_timeout = connect_timeout if connect_timeout is not None else config.DB_CONNECT_TIMEOUT
        self.engine: Optional[Engine] = None
        self.session_factory: Optional[sessionmaker] = None

    @property
    def database_url(self) -> str:
        """接続URL（未指定の場合は設定値）"""
        return self._database_url if self._database_url is not None else config.DATABASE_URL

    def is_initialized(self) -> bool:
        return self.engine is not None

    def _create_engine(self, url: str) -> Engine:
        """データベース種別に応じたエンジンを作成"""
        if url.startswith('sqlite'):
            # SQLite specific configuration
            options: Dict[str, Any] = {
                "echo": False,
                "connect_args": {
                    "check_same_thread": False,
                    "timeout": self.connect_timeout,
                },
            }
            if url in ('sqlite://', 'sqlite:///:memory:'):
                # インメモリDBは接続を共有しないとテーブルが見えない
                options["poolclass"] = StaticPool
            return create_engine(url, **options)

        if url.startswith('postgresql'):
            return create_engine(
                url,
                echo=False,
                pool_size=5,
                max_overflow=10,
                pool_pre_ping=True,
                pool_recycle=3600,
                connect_args={
                    "connect_timeout": self.connect_timeout,
                    "application_name": f"jpaddr_{config.ENVIRONMENT}",
                },
            )

        raise DatabaseError(f"未対応のデータベースタイプ: {mask_db_url(url)}")

    def initialize(self) -> None:
        """
        エンジンとセッションファクトリを初期化し、接続を確認する

        Raises:
            DatabaseConnectionError: URL未設定または接続に失敗した場合
        """
        if self.engine is not None:
            return

        url = self.database_url
        if not url:
            raise DatabaseConnectionError("DATABASE_URL が設定されていません")

        engine = self._create_engine(url)
        try:
            self._test_connection(engine)
        except DatabaseConnectionError:
            engine.dispose()
            raise

        self.engine = engine
        self.session_factory = sessionmaker(bind=engine, expire_on_commit=False)
        logger.info(f"データベースが正常に初期化されました: {mask_db_url(url)}")

    def _test_connection(self, engine: Engine) -> None:
        """データベース接続をテスト"""
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            raise DatabaseConnectionError(f"データベース接続テストに失敗: {e}") from e

    def has_tables(self, table_names: Iterable[str]) -> bool:
        """指定したテーブルがすべて存在するかどうか"""
        self._require_engine()
        inspector = inspect(self.engine)
        return all(inspector.has_table(name) for name in table_names)

    def create_tables(self) -> None:
        """Create all database tables if they don't exist."""
        self._require_engine()
        Base.metadata.create_all(self.engine)
        logger.info("Database tables created successfully")

    def drop_tables(self) -> None:
        """Drop all database tables."""
        self._require_engine()
        Base.metadata.drop_all(self.engine)
        logger.info("Database tables dropped successfully")

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Get database session context manager."""
        self._require_engine()

        session = self.session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def close(self) -> None:
        """Close database connections."""
        if self.engine is not None:
            self.engine.dispose()
            logger.info("Database engine disposed")
        self.engine = None
        self.session_factory = None

    def health_check(self) -> Dict[str, Any]:
        """Check database connection health."""
        if self.engine is None:
            return {"status": "not_initialized", "database_url_masked": mask_db_url(self.database_url)}

        try:
            start_time = time.time()
            with self.session() as session:
                session.execute(text("SELECT 1"))
            response_time = time.time() - start_time

            return {
                "status": "healthy",
                "response_time_seconds": round(response_time, 3),
                "database_url_masked": mask_db_url(self.database_url),
            }
        except SQLAlchemyError as e:
            logger.error(f"Database health check failed: {e}")
            return {
                "status": "error",
                "error": str(e),
                "database_url_masked": mask_db_url(self.database_url),
            }

    def _require_engine(self) -> None:
        if self.engine is None or self.session_factory is None:
            raise DatabaseError("Database not initialized. Call initialize() first.")


# Global database manager instance
db_manager = DatabaseManager()
