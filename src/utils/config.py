"""
Configuration settings for the catalog.
"""

from functools import lru_cache
from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Catalog settings, read from the environment and an optional .env file."""

    # Database
    DATABASE_URL: str = ""
    DATABASE_URL_DEV: str = ""
    DB_ECHO: bool = False

    # Pool (PostgreSQL only)
    POOL_SIZE: int = 5
    MAX_OVERFLOW: int = 10
    POOL_TIMEOUT: int = 30
    POOL_RECYCLE: int = 1800

    # Repository
    CREATE_POLICY: str = "merge"

    # Logging
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Environment
    ENVIRONMENT: str = "development"
    TESTING: bool = False

    model_config = ConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore"
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
