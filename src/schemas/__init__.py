"""
This package contains Pydantic models for catalog entities.
"""

from src.schemas.book import Book, BookPatch, StoredBook

__all__ = [
    'Book',
    'BookPatch',
    'StoredBook'
]
