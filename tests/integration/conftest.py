"""
Test configuration and fixtures for integration tests.

Every test gets its own in-memory SQLite database opened through the real
adapter, so repository behavior is checked against actual SQL.
"""

import pytest_asyncio

from src.adapters.database import DatabaseAdapter
from src.adapters.database.sqlite import SQLiteAdapter
from src.repositories.book import BookRepository, CreatePolicy

# Test database URL - use in-memory SQLite
TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest_asyncio.fixture
async def sqlite_adapter() -> DatabaseAdapter:
    """Open an in-memory SQLite adapter with the catalog tables created."""
    adapter = SQLiteAdapter(TEST_DATABASE_URL)
    await adapter.init()
    yield adapter
    await adapter.close()


@pytest_asyncio.fixture
async def repo(sqlite_adapter) -> BookRepository:
    """Book repository merging creates for existing isbns."""
    return BookRepository(sqlite_adapter)


@pytest_asyncio.fixture
async def reject_repo(sqlite_adapter) -> BookRepository:
    """Book repository rejecting creates for existing isbns."""
    return BookRepository(sqlite_adapter, CreatePolicy.REJECT)


@pytest_asyncio.fixture
async def loaded_repo(repo, hobbit_books) -> BookRepository:
    """Repository holding the search test books."""
    for book in hobbit_books:
        result = await repo.create(book)
        assert result.is_ok, result
    return repo
