"""
PostgreSQL database adapter.
"""

from sqlalchemy import Table
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.sql.dml import Insert

from src.adapters.database import DatabaseAdapter


class PostgresAdapter(DatabaseAdapter):
    """PostgreSQL database adapter."""

    dialect_name = "postgresql"

    def __init__(
        self,
        database_url: str = None,
        echo: bool = False,
        pool_size: int = 5,
        max_overflow: int = 10,
        pool_timeout: int = 30,
        pool_recycle: int = 1800,
    ):
        """Initialize the adapter.

        Args:
            database_url (str): Database connection URL (``postgresql+asyncpg://...``)
            echo (bool): Log every SQL statement
            pool_size (int): Connections kept open in the pool
            max_overflow (int): Extra connections allowed beyond pool_size
            pool_timeout (int): Seconds to wait for a pooled connection
            pool_recycle (int): Seconds after which a connection is replaced
        """
        if not database_url:
            raise ValueError("Database URL is required")
        super().__init__(database_url, echo)
        self.pool_size = pool_size
        self.max_overflow = max_overflow
        self.pool_timeout = pool_timeout
        self.pool_recycle = pool_recycle

    def _create_engine(self) -> AsyncEngine:
        return create_async_engine(
            self.database_url,
            echo=self.echo,
            pool_size=self.pool_size,
            max_overflow=self.max_overflow,
            pool_timeout=self.pool_timeout,
            pool_recycle=self.pool_recycle,
            pool_pre_ping=True,  # Verify connections before using them
        )

    def insert_ignoring_conflict(self, table: Table, index_elements) -> Insert:
        return pg_insert(table).on_conflict_do_nothing(index_elements=index_elements)
