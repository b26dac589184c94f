"""
Logger utility for consistent logging across the library catalog.

This module provides a standardized way to create and configure loggers
throughout the catalog, ensuring consistent log formatting and behavior.

Features:
- Consistent log format across all modules
- Log level taken from settings (``LOG_LEVEL``, ``DEBUG``)
- Stream handler to stdout for easy viewing in console/terminal
- Rotating file handler for errors, plus an optional debug log
- Prevents duplicate log handlers when called multiple times
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional

from src.utils.config import Settings, get_settings

# Default log format
DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
VERBOSE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(pathname)s:%(lineno)d - %(message)s'
DEFAULT_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

APP_LOGGER_NAME = "library_catalog"


def _level_from(settings: Settings) -> int:
    return getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)


def setup_logging(settings: Optional[Settings] = None, log_dir: Optional[Path] = None) -> logging.Logger:
    """
    Configure global logging for the catalog.

    Args:
        settings: Settings to read; defaults to the cached settings
        log_dir: Directory for log files; defaults to ``./logs``

    Returns:
        logging.Logger: The catalog's top-level logger
    """
    settings = settings or get_settings()
    log_level = _level_from(settings)

    log_dir = Path(log_dir or "logs")
    log_dir.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates when reloading
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    verbose_formatter = logging.Formatter(VERBOSE_FORMAT, datefmt=DEFAULT_DATE_FORMAT)
    standard_formatter = logging.Formatter(DEFAULT_FORMAT, datefmt=DEFAULT_DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(standard_formatter)
    console_handler.setLevel(logging.DEBUG if settings.DEBUG else log_level)
    root_logger.addHandler(console_handler)

    error_file_handler = logging.handlers.RotatingFileHandler(
        log_dir / "error.log",
        maxBytes=10 * 1024 * 1024,  # 10 MB
        backupCount=5
    )
    error_file_handler.setLevel(logging.ERROR)
    error_file_handler.setFormatter(verbose_formatter)
    root_logger.addHandler(error_file_handler)

    if settings.DEBUG:
        debug_file_handler = logging.handlers.RotatingFileHandler(
            log_dir / "debug.log",
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5
        )
        debug_file_handler.setLevel(log_level)
        debug_file_handler.setFormatter(verbose_formatter)
        root_logger.addHandler(debug_file_handler)

    # SQL echo is controlled by DB_ECHO, keep the engine logger quiet otherwise
    logging.getLogger('sqlalchemy.engine').setLevel(
        logging.INFO if settings.DB_ECHO else logging.WARNING
    )
    logging.getLogger('aiosqlite').setLevel(logging.WARNING)
    logging.getLogger('asyncpg').setLevel(logging.WARNING)

    logger = logging.getLogger(APP_LOGGER_NAME)
    logger.info(f"Logging initialized with level {logging.getLevelName(log_level)}")
    return logger


def get_logger(name: Optional[str] = None, level: Optional[int] = None) -> logging.Logger:
    """
    Get a configured logger instance with consistent formatting.

    If neither the logger nor the root logger has handlers yet, a stdout
    handler is attached so that messages are not lost before
    :func:`setup_logging` runs.

    Args:
        name: Logger name, usually ``__name__``
        level: Logging level; defaults to ``LOG_LEVEL`` from settings

    Returns:
        logging.Logger: Configured logger instance
    """
    if level is None:
        level = _level_from(get_settings())

    logger = logging.getLogger(name or APP_LOGGER_NAME)
    logger.setLevel(level)

    root_logger = logging.getLogger()
    if not logger.handlers and not root_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(DEFAULT_FORMAT, datefmt=DEFAULT_DATE_FORMAT))
        logger.addHandler(handler)

    return logger
