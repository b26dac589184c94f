from sqlalchemy import CheckConstraint, Column, ForeignKey, Integer, JSON, String
from sqlalchemy.ext.associationproxy import association_proxy
from sqlalchemy.orm import relationship

from src.models.base import Base


class BookRecord(Base):
    """
    Persisted catalog entry.

    The logical record is ``{id, isbn, title, authors[], n_copies, patrons[]}``.
    ``id`` always equals ``isbn`` and is the primary key, so identity lookups
    go through the primary key index. Authors are kept in their own rows
    (see :class:`BookAuthor`) so they can be searched with plain SQL.

    Attributes:
        id (str): Primary key, equal to isbn
        isbn (str): ISBN-like identity key
        title (str): Book title
        n_copies (int): Copies owned by the library, never negative
        patrons (JSON): Ids of patrons holding a checked-out copy

    Relationships:
        author_links: One-to-many relationship with BookAuthor, ordered by position
    """
    __tablename__ = "books"
    __table_args__ = (
        CheckConstraint("n_copies >= 0", name="ck_books_n_copies_non_negative"),
    )

    id = Column(String, primary_key=True)
    isbn = Column(String, nullable=False, unique=True)
    title = Column(String, nullable=False, index=True)
    n_copies = Column(Integer, nullable=False, default=0)
    patrons = Column(JSON, nullable=False, default=list)

    # Relationships
    author_links = relationship(
        "BookAuthor",
        back_populates="book",
        order_by="BookAuthor.position",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
    )

    # Read-only view of the author names, in order
    authors = association_proxy("author_links", "name")

    def __repr__(self):
        return f"<BookRecord {self.isbn}>"


class BookAuthor(Base):
    """
    One author of a book, at a fixed position in the book's author list.

    Attributes:
        id (int): Surrogate primary key
        book_id (str): Foreign key to books.id
        position (int): Zero-based index in the author list
        name (str): Author name as given
    """
    __tablename__ = "book_authors"

    id = Column(Integer, primary_key=True, autoincrement=True)
    book_id = Column(String, ForeignKey("books.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    name = Column(String, nullable=False)

    book = relationship("BookRecord", back_populates="author_links")

    def __repr__(self):
        return f"<BookAuthor {self.name}>"
