"""
Pydantic models for catalog books.

``Book`` is what callers see. ``StoredBook`` is what the database keeps:
the same fields plus the identity key duplicate and the patron list.
``BookPatch`` carries a partial update.
"""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator


class Book(BaseModel):
    """Externally visible catalog entry"""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    isbn: str = Field(..., min_length=1, description="Unique identity key")
    title: str = Field(..., description="Title of the book")
    authors: List[str] = Field(default_factory=list, description="Authors, in order")
    n_copies: int = Field(0, ge=0, alias="nCopies", description="Copies owned by the library")


class StoredBook(Book):
    """Persisted catalog entry, including storage-only bookkeeping"""

    id: str = Field(..., min_length=1, description="Identity key, always equal to isbn")
    patrons: List[str] = Field(default_factory=list, description="Patrons holding a checked-out copy")

    @model_validator(mode="after")
    def _id_matches_isbn(self) -> "StoredBook":
        if self.id != self.isbn:
            raise ValueError(f"identity key '{self.id}' does not match isbn '{self.isbn}'")
        return self


class BookPatch(BaseModel):
    """Fields to overwrite on an existing book; absent fields are left unchanged"""
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    title: Optional[str] = None
    authors: Optional[List[str]] = None
    n_copies: Optional[int] = Field(None, ge=0, alias="nCopies")

    @model_validator(mode="after")
    def _has_changes(self) -> "BookPatch":
        changes = self.changes()
        if not changes:
            raise ValueError("patch must set at least one field")
        nulls = sorted(name for name, value in changes.items() if value is None)
        if nulls:
            raise ValueError(f"patch cannot clear required fields: {', '.join(nulls)}")
        return self

    def changes(self) -> dict:
        """Return only the fields the caller actually set."""
        return self.model_dump(exclude_unset=True)
