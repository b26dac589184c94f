"""
Repository for catalog books.

Every operation returns a :class:`~src.utils.result.Result`. Invalid input
is rejected with ``BAD_ARG`` before the database is touched; database
failures come back as ``DB`` errors carrying the underlying message.
"""

from enum import Enum
from typing import Any, List, Mapping, Optional, Union

from pydantic import ValidationError
from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import SQLAlchemyError

from src.adapters.database import DatabaseAdapter
from src.adapters.database.factory import DatabaseAdapterFactory
from src.adapters.database.sql_filters import to_sql_clause
from src.exceptions import BookNotFoundError, CatalogError, DuplicateBookError, ErrorCode
from src.models.book import BookAuthor, BookRecord
from src.repositories.base import BaseRepository, validation_error
from src.repositories.filters import compile_search
from src.repositories.projection import project, to_stored
from src.schemas.book import Book, BookPatch, StoredBook
from src.utils.config import Settings, get_settings
from src.utils.database import get_database_url
from src.utils.logger import get_logger
from src.utils.result import Result

logger = get_logger(__name__)


class CreatePolicy(str, Enum):
    """What ``create`` does when the isbn is already stored."""

    MERGE = "merge"    # add the incoming copies to the stored book
    REJECT = "reject"  # fail with DUPLICATE


def _bad_isbn(isbn: Any) -> Optional[Result]:
    if not isinstance(isbn, str) or not isbn:
        return Result.err("isbn must be a non-empty string", ErrorCode.BAD_ARG, "isbn")
    return None


def _db_error(operation: str, e: SQLAlchemyError) -> Result:
    logger.error(f"Database error in {operation}: {str(e)}", exc_info=True)
    return Result.err(str(e), ErrorCode.DB)


class BookRepository(BaseRepository[BookRecord]):
    """
    Create, read, update, delete and search catalog books.

    The repository holds no cache: operations may run concurrently, each in
    its own session from the adapter, and rely on the database's
    transactions for atomicity.
    """

    def __init__(self, adapter: DatabaseAdapter, create_policy: CreatePolicy = CreatePolicy.MERGE):
        """
        Initialize the repository.

        Args:
            adapter (DatabaseAdapter): Open database adapter
            create_policy (CreatePolicy): Handling of creates for an existing isbn
        """
        super().__init__(adapter, BookRecord)
        self.create_policy = CreatePolicy(create_policy)

    async def create(self, book: Union[Book, Mapping[str, Any]]) -> Result[StoredBook]:
        """
        Store a new book, or merge it into the stored book with the same isbn.

        With :attr:`CreatePolicy.MERGE` an existing book gets its copy count
        increased by ``book.n_copies`` and keeps every other field. With
        :attr:`CreatePolicy.REJECT` it is a ``DUPLICATE`` error.

        The insert and the merge run in one transaction around
        ``INSERT ... ON CONFLICT DO NOTHING``, so two concurrent creates of
        the same new isbn never produce two records.

        Args:
            book: Book, or a mapping of its fields

        Returns:
            Result[StoredBook]: The stored record after the create
        """
        try:
            book = book if isinstance(book, Book) else Book.model_validate(book)
        except ValidationError as e:
            logger.warning(f"Rejected invalid book: {str(e)}")
            return validation_error(e)

        try:
            async with self.adapter.session() as session:
                async with session.begin():
                    stmt = self.adapter.insert_ignoring_conflict(
                        BookRecord.__table__, [BookRecord.__table__.c.id]
                    ).values(
                        id=book.isbn,
                        isbn=book.isbn,
                        title=book.title,
                        n_copies=book.n_copies,
                        patrons=[],
                    )
                    result = await session.execute(stmt)

                    if result.rowcount == 1:
                        if book.authors:
                            await session.execute(
                                insert(BookAuthor),
                                [
                                    {"book_id": book.isbn, "position": i, "name": name}
                                    for i, name in enumerate(book.authors)
                                ],
                            )
                        logger.info(f"Created book {book.isbn}")
                    elif self.create_policy is CreatePolicy.REJECT:
                        raise DuplicateBookError(book.isbn)
                    else:
                        result = await session.execute(
                            update(BookRecord)
                            .where(BookRecord.id == book.isbn)
                            .values(n_copies=BookRecord.n_copies + book.n_copies)
                        )
                        if result.rowcount != 1:
                            # The conflicting row was deleted between the insert and the update
                            raise CatalogError(
                                f"book {book.isbn} disappeared while merging copies", ErrorCode.DB, "isbn"
                            )
                        logger.info(f"Merged {book.n_copies} copies into book {book.isbn}")

                    record = await self.get_by_id(session, book.isbn)
                    stored = to_stored(record)
        except CatalogError as e:
            logger.warning(f"create({book.isbn}) failed: {e.message}")
            return Result.from_error(e)
        except SQLAlchemyError as e:
            return _db_error("create", e)

        return Result.ok(stored)

    async def get(self, isbn: str) -> Result[Book]:
        """
        Look up a book by isbn.

        Returns:
            Result[Book]: The projected book, ``NOT_FOUND`` if there is none
        """
        bad = _bad_isbn(isbn)
        if bad is not None:
            return bad

        try:
            async with self.adapter.session() as session:
                record = await self.get_by_id(session, isbn)
                if record is None:
                    return Result.from_error(BookNotFoundError(isbn))
                return Result.ok(project(record))
        except SQLAlchemyError as e:
            return _db_error("get", e)

    async def update(self, isbn: str, patch: Union[BookPatch, Mapping[str, Any]]) -> Result[int]:
        """
        Overwrite some fields of a stored book.

        Fields absent from ``patch`` are left unchanged; ``authors`` is
        replaced as a whole list.

        Args:
            isbn: Book to update
            patch: Fields to overwrite

        Returns:
            Result[int]: 1 if a field changed, 0 if the patch matched the
            stored values, ``NOT_FOUND`` if there is no such book
        """
        bad = _bad_isbn(isbn)
        if bad is not None:
            return bad
        try:
            patch = patch if isinstance(patch, BookPatch) else BookPatch.model_validate(patch)
        except ValidationError as e:
            logger.warning(f"Rejected invalid patch for {isbn}: {str(e)}")
            return validation_error(e)

        try:
            async with self.adapter.session() as session:
                async with session.begin():
                    result = await session.execute(
                        select(BookRecord).where(BookRecord.id == isbn).with_for_update()
                    )
                    record = result.scalar_one_or_none()
                    if record is None:
                        raise BookNotFoundError(isbn)

                    modified = 0
                    for field, value in patch.changes().items():
                        if field == "authors":
                            if list(record.authors) != value:
                                record.author_links = [
                                    BookAuthor(position=i, name=name) for i, name in enumerate(value)
                                ]
                                modified = 1
                        elif getattr(record, field) != value:
                            setattr(record, field, value)
                            modified = 1
        except CatalogError as e:
            logger.info(f"update({isbn}) failed: {e.message}")
            return Result.from_error(e)
        except SQLAlchemyError as e:
            return _db_error("update", e)

        logger.info(f"Updated book {isbn} (modified={modified})")
        return Result.ok(modified)

    async def remove(self, isbn: str) -> Result[int]:
        """
        Delete a book.

        Returns:
            Result[int]: 1 if a book was deleted, 0 if none matched
        """
        bad = _bad_isbn(isbn)
        if bad is not None:
            return bad

        try:
            async with self.adapter.session() as session:
                async with session.begin():
                    await session.execute(delete(BookAuthor).where(BookAuthor.book_id == isbn))
                    result = await session.execute(delete(BookRecord).where(BookRecord.id == isbn))
                    deleted = result.rowcount
        except SQLAlchemyError as e:
            return _db_error("remove", e)

        logger.info(f"Removed book {isbn} (deleted={deleted})")
        return Result.ok(deleted)

    async def search(self, search_text: Optional[str], offset: int = -1, limit: int = -1) -> Result[List[Book]]:
        """
        Find books whose title or authors contain every word of ``search_text``.

        Words are runs of two or more word characters, matched as
        case-insensitive substrings. Text without words matches every book.
        Results are ordered by title, then isbn, so that successive pages
        (``offset=k*limit``) never overlap or skip a book.

        Args:
            search_text: Free text; None is the same as empty text
            offset: Matches to skip; negative means none
            limit: Maximum matches to return; negative means no limit

        Returns:
            Result[List[Book]]: Projected books, in order
        """
        if search_text is not None and not isinstance(search_text, str):
            return Result.err("search text must be a string", ErrorCode.BAD_ARG, "search_text")
        for name, value in (("offset", offset), ("limit", limit)):
            if not isinstance(value, int) or isinstance(value, bool):
                return Result.err(f"{name} must be an integer", ErrorCode.BAD_ARG, name)

        query = (
            select(BookRecord)
            .where(to_sql_clause(compile_search(search_text)))
            .order_by(BookRecord.title, BookRecord.isbn)
        )
        if offset > 0:
            query = query.offset(offset)
        if limit >= 0:
            query = query.limit(limit)

        try:
            async with self.adapter.session() as session:
                result = await session.execute(query)
                return Result.ok([project(record) for record in result.scalars().all()])
        except SQLAlchemyError as e:
            return _db_error("search", e)

    async def clear(self) -> Result[int]:
        """
        Delete every book.

        Returns:
            Result[int]: Number of books deleted
        """
        try:
            async with self.adapter.session() as session:
                async with session.begin():
                    await session.execute(delete(BookAuthor))
                    result = await session.execute(delete(BookRecord))
                    deleted = result.rowcount
        except SQLAlchemyError as e:
            return _db_error("clear", e)

        logger.info(f"Cleared {deleted} books")
        return Result.ok(deleted)


async def make_book_repository(
    database_url: Optional[str] = None,
    create_policy: Optional[CreatePolicy] = None,
    settings: Optional[Settings] = None,
) -> Result[BookRepository]:
    """
    Open the database and build a :class:`BookRepository` on it.

    Args:
        database_url: Database to use; defaults to the one configured for the environment
        create_policy: Create policy; defaults to ``CREATE_POLICY`` from settings
        settings: Settings to read; defaults to the cached settings

    Returns:
        Result[BookRepository]: The repository, or a ``DB``/``BAD_ARG`` error
    """
    settings = settings or get_settings()
    try:
        policy = CreatePolicy(create_policy or settings.CREATE_POLICY.lower())
    except ValueError:
        return Result.err(
            f"unknown create policy '{create_policy or settings.CREATE_POLICY}'",
            ErrorCode.BAD_ARG,
            "create_policy",
        )

    opened = await DatabaseAdapterFactory.open(database_url or get_database_url(settings), settings)
    if not opened.is_ok:
        return Result.from_error(opened.error)
    return Result.ok(BookRepository(opened.value, policy))
