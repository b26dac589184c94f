"""
Database adapter factory.

This module builds the database adapter matching a database URL and opens
it. The opened adapter is returned to the caller, which owns it and must
close it; the factory keeps no reference to it.
"""

from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from src.adapters.database import DatabaseAdapter
from src.adapters.database.sqlite import SQLiteAdapter
from src.adapters.database.postgres import PostgresAdapter
from src.exceptions import ErrorCode
from src.utils.config import Settings, get_settings
from src.utils.database import to_async_url
from src.utils.logger import get_logger
from src.utils.result import Result

logger = get_logger(__name__)


class DatabaseAdapterFactory:
    """Factory for creating database adapters."""

    @classmethod
    def create(cls, database_url: str, settings: Optional[Settings] = None) -> DatabaseAdapter:
        """Build, without connecting, the adapter for ``database_url``.

        Args:
            database_url: SQLite or PostgreSQL URL, sync or async driver
            settings: Settings supplying echo and pool options

        Returns:
            DatabaseAdapter: An unopened adapter

        Raises:
            ValueError: If the URL names an unsupported database
        """
        settings = settings or get_settings()
        url = to_async_url(database_url)

        if url.startswith("sqlite+aiosqlite://"):
            logger.info("Using SQLite adapter")
            return SQLiteAdapter(url, echo=settings.DB_ECHO)
        if url.startswith("postgresql+asyncpg://"):
            logger.info("Using PostgreSQL adapter")
            return PostgresAdapter(
                url,
                echo=settings.DB_ECHO,
                pool_size=settings.POOL_SIZE,
                max_overflow=settings.MAX_OVERFLOW,
                pool_timeout=settings.POOL_TIMEOUT,
                pool_recycle=settings.POOL_RECYCLE,
            )

        scheme = url.partition("://")[0] or url
        raise ValueError(f"unsupported database URL scheme '{scheme}'")

    @classmethod
    async def open(cls, database_url: str, settings: Optional[Settings] = None) -> Result[DatabaseAdapter]:
        """Create and initialize the adapter for ``database_url``.

        No retries are attempted: any connectivity, authentication or
        configuration failure is returned as a ``DB`` error.

        Returns:
            Result[DatabaseAdapter]: The open adapter, or a ``DB`` error
        """
        try:
            adapter = cls.create(database_url, settings)
            await adapter.init()
        except (SQLAlchemyError, OSError, ImportError, ValueError) as e:
            logger.error(f"Error opening database: {str(e)}")
            return Result.err(str(e), ErrorCode.DB)
        return Result.ok(adapter)

    @classmethod
    async def close(cls, adapter: DatabaseAdapter) -> Result[None]:
        """Close ``adapter``, reporting failures as a ``DB`` error."""
        try:
            await adapter.close()
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Error closing database connection: {str(e)}")
            return Result.err(str(e), ErrorCode.DB)
        return Result.ok(None)
