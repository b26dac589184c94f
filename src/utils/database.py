"""
Database URL resolution for the catalog.

This module decides which database the catalog talks to:
- In-memory SQLite while testing
- ``DATABASE_URL_DEV`` (or a local SQLite file) in development
- ``DATABASE_URL`` in production

It also rewrites plain driver URLs to their asyncio drivers, since the
catalog only ever uses SQLAlchemy's asyncio engine.
"""

import os
import logging
from typing import Optional

from dotenv import load_dotenv

from src.utils.config import Settings, get_settings

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_SQLITE_URL = "sqlite+aiosqlite:///library.db"
MEMORY_SQLITE_URL = "sqlite+aiosqlite://"


def to_async_url(db_url: str) -> str:
    """
    Rewrite a database URL so that it names an asyncio driver.

    Args:
        db_url (str): Database URL, possibly naming a sync driver

    Returns:
        str: URL usable with ``create_async_engine``
    """
    # Fix potential newline issues in .env file
    db_url = db_url.split('\n')[0].strip()

    if db_url.startswith("sqlite://") and not db_url.startswith("sqlite+"):
        return "sqlite+aiosqlite://" + db_url[len("sqlite://"):]
    if db_url.startswith("postgres://"):
        db_url = "postgresql://" + db_url[len("postgres://"):]
    if db_url.startswith("postgresql://"):
        return "postgresql+asyncpg://" + db_url[len("postgresql://"):]
    if db_url.startswith("postgresql+psycopg2://"):
        return "postgresql+asyncpg://" + db_url[len("postgresql+psycopg2://"):]
    return db_url


def get_database_url(settings: Optional[Settings] = None) -> str:
    """
    Get database URL based on environment.

    Args:
        settings (Settings, optional): Settings to read. Defaults to the cached settings.

    Returns:
        str: Async database connection URL
    """
    settings = settings or get_settings()

    # For testing, always use in-memory SQLite
    if settings.TESTING or os.getenv("TESTING", "").lower() == "true":
        logger.info("Using in-memory SQLite database for testing")
        return MEMORY_SQLITE_URL

    env = settings.ENVIRONMENT.lower()
    logger.info(f"Current environment: {env}")

    if env == "development":
        if settings.DATABASE_URL_DEV:
            db_url = to_async_url(settings.DATABASE_URL_DEV)
            db_type = "PostgreSQL" if db_url.startswith("postgresql") else "SQLite"
            logger.info(f"Using {db_type} database for development")
            return db_url

        logger.info("Using default SQLite database for development")
        return DEFAULT_SQLITE_URL

    if settings.DATABASE_URL:
        db_url = to_async_url(settings.DATABASE_URL)
        db_type = "PostgreSQL" if db_url.startswith("postgresql") else "SQLite"
        logger.info(f"Using {db_type} database for {env}")
        return db_url

    # Fallback to SQLite if no production URL is set
    logger.warning(f"No DATABASE_URL found, falling back to SQLite for {env}")
    return DEFAULT_SQLITE_URL
