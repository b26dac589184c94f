"""
Database adapters for switching between SQLite and PostgreSQL.

An adapter owns the catalog's handle on the database: the async engine and
the session factory built on it. It is opened once, shared by every
in-flight repository operation, and closed exactly once on shutdown.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy import Table, text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.sql.dml import Insert

from src.models.base import Base

logger = logging.getLogger(__name__)


class DatabaseAdapter(ABC):
    """Abstract base class for database adapters."""

    dialect_name: str = ""

    def __init__(self, database_url: str, echo: bool = False):
        """Initialize the adapter.

        Args:
            database_url: Async SQLAlchemy database URL
            echo: Log every SQL statement
        """
        self.database_url = database_url
        self.echo = echo
        self.engine: Optional[AsyncEngine] = None
        self.session_factory: Optional[async_sessionmaker] = None
        self._session_lock: Optional[asyncio.Lock] = None

    @abstractmethod
    def _create_engine(self) -> AsyncEngine:
        """Build the dialect-specific async engine."""

    @abstractmethod
    def insert_ignoring_conflict(self, table: Table, index_elements) -> Insert:
        """Return an ``INSERT ... ON CONFLICT DO NOTHING`` statement for ``table``.

        Args:
            table: Table to insert into
            index_elements: Columns of the unique index that may conflict

        Returns:
            Insert statement still awaiting ``.values(...)``
        """

    @property
    def is_open(self) -> bool:
        return self.engine is not None

    @property
    def serializes_sessions(self) -> bool:
        """Whether sessions must take turns because they share one connection."""
        return False

    async def init(self) -> None:
        """Connect, verify the connection and create the catalog tables.

        Raises:
            SQLAlchemyError: On connectivity or authentication failure
        """
        self.engine = self._create_engine()
        try:
            async with self.engine.begin() as conn:
                await conn.execute(text("SELECT 1"))
                await conn.run_sync(Base.metadata.create_all)
        except Exception:
            await self.engine.dispose()
            self.engine = None
            raise

        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        self._session_lock = asyncio.Lock() if self.serializes_sessions else None
        logger.info(f"Initialized {self.dialect_name} database")

    async def close(self) -> None:
        """Dispose of the engine. Closing a closed adapter does nothing."""
        if self.engine is not None:
            await self.engine.dispose()
            self.engine = None
            self.session_factory = None
            self._session_lock = None
            logger.info(f"Closed {self.dialect_name} database connection")

    async def get_session(self) -> AsyncSession:
        """Get a database session.

        Returns:
            AsyncSession: A new database session

        Raises:
            RuntimeError: If the adapter is not open
        """
        if self.session_factory is None:
            raise RuntimeError("Database not initialized or already closed. Call init() first.")
        return self.session_factory()

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Yield a session that is closed when the block exits.

        On adapters whose sessions share one connection, only one such block
        runs at a time, so a rollback in one operation cannot discard the
        uncommitted writes of another.
        """
        lock = self._session_lock
        if lock is not None:
            await lock.acquire()
        try:
            session = await self.get_session()
            try:
                yield session
            finally:
                await session.close()
        finally:
            if lock is not None:
                lock.release()

    async def drop_all(self) -> None:
        """Drop the catalog tables."""
        if self.engine is None:
            raise RuntimeError("Database not initialized or already closed. Call init() first.")
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    def __repr__(self):
        state = "open" if self.is_open else "closed"
        return f"<{type(self).__name__} {self.dialect_name} {state}>"
