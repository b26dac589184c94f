"""
Conversion of stored books into the entities handed to callers.

Everything a read or search returns goes through :func:`project`, which
keeps only the :class:`~src.schemas.book.Book` fields. The identity key
duplicate and the patron list never leave the repository.
"""

from typing import Union

from src.models.book import BookRecord
from src.schemas.book import Book, StoredBook

BOOK_FIELDS = frozenset(Book.model_fields)


def to_stored(record: BookRecord) -> StoredBook:
    """Copy an ORM row into a detached :class:`StoredBook`."""
    return StoredBook(
        id=record.id,
        isbn=record.isbn,
        title=record.title,
        authors=list(record.authors),
        n_copies=record.n_copies,
        patrons=list(record.patrons or []),
    )


def project(stored: Union[StoredBook, BookRecord]) -> Book:
    """Strip storage-only fields, returning the caller-visible book."""
    if isinstance(stored, BookRecord):
        stored = to_stored(stored)
    return Book(**stored.model_dump(include=BOOK_FIELDS))
