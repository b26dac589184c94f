"""
Base repository pattern implementation for database operations.

This module provides a generic async repository that specific repositories
extend. The repository holds the database adapter it was given; it does not
create or share it, but closing the repository closes the adapter.
"""

from typing import Any, Generic, Optional, Type, TypeVar
import logging

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.adapters.database import DatabaseAdapter
from src.adapters.database.factory import DatabaseAdapterFactory
from src.exceptions import ErrorCode
from src.models.base import Base
from src.utils.result import Result

# Type variable for the model
T = TypeVar('T', bound=Base)

logger = logging.getLogger(__name__)


def validation_error(e: ValidationError) -> Result:
    """Turn a pydantic validation failure into a ``BAD_ARG`` result."""
    first = e.errors()[0]
    widget = ".".join(str(part) for part in first.get("loc", ())) or None
    return Result.err(first.get("msg", str(e)), ErrorCode.BAD_ARG, widget)


class BaseRepository(Generic[T]):
    """
    Generic async repository for database operations.

    Attributes:
        adapter (DatabaseAdapter): Open database adapter
        model (Type[T]): SQLAlchemy model class
    """

    def __init__(self, adapter: DatabaseAdapter, model: Type[T]):
        """
        Initialize the repository with a database adapter and model class.

        Args:
            adapter (DatabaseAdapter): Open database adapter, owned by the repository from now on
            model (Type[T]): SQLAlchemy model class
        """
        self.adapter = adapter
        self.model = model

    async def get_by_id(self, session: AsyncSession, id: Any) -> Optional[T]:
        """
        Get a record by ID within ``session``.

        Args:
            session (AsyncSession): Session to query with
            id (Any): Primary key value

        Returns:
            Optional[T]: Model instance if found, None otherwise
        """
        result = await session.execute(select(self.model).where(self.model.id == id))
        return result.scalar_one_or_none()

    async def close(self) -> Result[None]:
        """
        Close the underlying adapter. The repository is unusable afterwards.

        Returns:
            Result[None]: ok, or a ``DB`` error if the adapter failed to close
        """
        return await DatabaseAdapterFactory.close(self.adapter)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        result = await self.close()
        if not result.is_ok:
            logger.error(f"Error closing {type(self).__name__}: {result.error.message}")
