"""
SQLite database adapter implementation.

This module provides a SQLite-specific implementation of the DatabaseAdapter
interface, used for development and testing.
"""

from sqlalchemy import Table, event
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool, StaticPool
from sqlalchemy.sql.dml import Insert

from src.adapters.database import DatabaseAdapter


def is_memory_url(database_url: str) -> bool:
    """Whether ``database_url`` names a private in-memory SQLite database."""
    _, _, path = database_url.partition("://")
    return path in ("", "/", "/:memory:") or path.startswith("/:memory:?")


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


class SQLiteAdapter(DatabaseAdapter):
    """SQLite adapter implementation."""

    dialect_name = "sqlite"

    def __init__(self, database_url: str = None, echo: bool = False):
        """Initialize the SQLite adapter.

        Args:
            database_url: Optional database URL. If not provided, uses in-memory SQLite.
            echo: Log every SQL statement
        """
        super().__init__(database_url or "sqlite+aiosqlite://", echo)

    @property
    def serializes_sessions(self) -> bool:
        return is_memory_url(self.database_url)

    def _create_engine(self) -> AsyncEngine:
        # An in-memory database lives and dies with its connection, so every
        # session must share the same one.
        poolclass = StaticPool if is_memory_url(self.database_url) else NullPool
        engine = create_async_engine(
            self.database_url,
            connect_args={"check_same_thread": False},
            poolclass=poolclass,
            echo=self.echo,
        )

        # Enable foreign key support for SQLite, and replace the built-in
        # lower(), which only folds ASCII letters
        @event.listens_for(engine.sync_engine, "connect", insert=True)
        def _enable_foreign_keys(dbapi_connection, connection_record):
            dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine

    def insert_ignoring_conflict(self, table: Table, index_elements) -> Insert:
        return sqlite_insert(table).on_conflict_do_nothing(index_elements=index_elements)
