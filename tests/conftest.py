"""
Pytest configuration and fixtures for testing.

This module provides shared fixtures and configuration for all tests.
"""

import os
import sys
from pathlib import Path

import pytest

# Add the project root directory to the Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Set testing environment
os.environ["TESTING"] = "true"

from src.schemas.book import Book
from src.utils.config import Settings


@pytest.fixture
def settings() -> Settings:
    """Settings that ignore the developer's environment and .env file."""
    return Settings(_env_file=None, TESTING=True)


@pytest.fixture
def hobbit_books():
    """Books used by the search tests."""
    return [
        Book(
            isbn="978-0261103344",
            title="J.R.R. Tolkien: The Hobbit",
            authors=["Tolkien, J.R.R."],
            n_copies=2,
        ),
        Book(
            isbn="978-0000000002",
            title="Tales of the Shire",
            authors=["Baggins, Frodo", "Hobbit, Thomas"],
            n_copies=1,
        ),
        Book(
            isbn="978-0000000003",
            title="Unrelated",
            authors=["Nobody, Ann"],
            n_copies=5,
        ),
    ]
