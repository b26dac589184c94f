"""
This package contains the database models for the catalog.
"""

from src.models.book import BookAuthor, BookRecord

__all__ = ['BookAuthor', 'BookRecord']
