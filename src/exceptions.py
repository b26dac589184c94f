"""
Custom exceptions for the catalog.
"""

from enum import Enum
from typing import Optional


class ErrorCode(str, Enum):
    """Kinds of failure a repository operation can report."""

    DB = "DB"
    NOT_FOUND = "NOT_FOUND"
    DUPLICATE = "DUPLICATE"
    BAD_ARG = "BAD_ARG"


class CatalogError(Exception):
    """Base exception for catalog errors.

    Attributes:
        message: Human readable description, always present
        code: One of :class:`ErrorCode`
        widget: Name of the offending input field, if any
    """

    def __init__(self, message: str, code: ErrorCode = ErrorCode.DB, widget: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = ErrorCode(code)
        self.widget = widget

    def __repr__(self):
        return f"<CatalogError {self.code.value}: {self.message}>"


class BookNotFoundError(CatalogError):
    """Raised when no book matches an isbn."""

    def __init__(self, isbn: str):
        super().__init__(f"no book for isbn '{isbn}'", ErrorCode.NOT_FOUND, "isbn")


class DuplicateBookError(CatalogError):
    """Raised when creating a book whose isbn already exists."""

    def __init__(self, isbn: str):
        super().__init__(f"book with isbn '{isbn}' already exists", ErrorCode.DUPLICATE, "isbn")
