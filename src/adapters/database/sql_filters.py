"""
Translation of catalog filter expressions into SQLAlchemy clauses.
"""

from sqlalchemy import and_, false, or_, true
from sqlalchemy.sql.elements import ColumnElement

from src.models.book import BookAuthor, BookRecord
from src.repositories.filters import AUTHORS, TITLE, AllOf, AnyOf, FieldContains, FilterExpression


def to_sql_clause(expression: FilterExpression) -> ColumnElement:
    """
    Build the WHERE clause selecting the books matched by ``expression``.

    Args:
        expression: Filter expression built by :func:`~src.repositories.filters.compile_search`

    Returns:
        ColumnElement: Boolean clause over :class:`~src.models.book.BookRecord`

    Raises:
        ValueError: If the expression is of an unknown kind
    """
    if isinstance(expression, AllOf):
        if not expression.clauses:
            return true()
        return and_(*(to_sql_clause(clause) for clause in expression.clauses))

    if isinstance(expression, AnyOf):
        if not expression.clauses:
            return false()
        return or_(*(to_sql_clause(clause) for clause in expression.clauses))

    if isinstance(expression, FieldContains):
        # autoescape: tokens may contain "_", a LIKE wildcard
        if expression.field == TITLE:
            return BookRecord.title.icontains(expression.token, autoescape=True)
        if expression.field == AUTHORS:
            return BookRecord.author_links.any(BookAuthor.name.icontains(expression.token, autoescape=True))

    raise ValueError(f"unsupported filter expression: {expression!r}")
