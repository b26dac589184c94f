"""
Filter expressions for catalog searches.

A search string is compiled into a small typed expression tree that the
database adapter layer turns into SQL (see
:mod:`src.adapters.database.sql_filters`):

- :class:`FieldContains`: a field contains a token, ignoring case
- :class:`AllOf`: every clause matches (an empty ``AllOf`` matches everything)
- :class:`AnyOf`: at least one clause matches (an empty ``AnyOf`` matches nothing)

``compile_search("The Hobbit")`` gives::

    AllOf((AnyOf((FieldContains("title", "The"), FieldContains("authors", "The"))),
           AnyOf((FieldContains("title", "Hobbit"), FieldContains("authors", "Hobbit")))))
"""

import re
from dataclasses import dataclass
from typing import List, Tuple, Union

TITLE = "title"
AUTHORS = "authors"
SEARCH_FIELDS = (TITLE, AUTHORS)

# Maximal runs of at least two word characters; shorter runs are noise
# (initials, stray punctuation).
TOKEN_RE = re.compile(r"\w{2,}")


@dataclass(frozen=True)
class FieldContains:
    """``field`` contains ``token`` as a case-insensitive substring.

    For a list field (``authors``) at least one element must contain it.
    """
    field: str
    token: str

    def __post_init__(self):
        if self.field not in SEARCH_FIELDS:
            raise ValueError(f"cannot search field '{self.field}'")


@dataclass(frozen=True)
class AllOf:
    clauses: Tuple["FilterExpression", ...] = ()


@dataclass(frozen=True)
class AnyOf:
    clauses: Tuple["FilterExpression", ...] = ()


FilterExpression = Union[FieldContains, AllOf, AnyOf]


def search_tokens(search_text: str) -> List[str]:
    """Split ``search_text`` into search tokens, in order of appearance."""
    return TOKEN_RE.findall(search_text or "")


def token_clause(token: str) -> AnyOf:
    """Clause matching ``token`` in the title or in any author."""
    return AnyOf(tuple(FieldContains(field, token) for field in SEARCH_FIELDS))


def compile_search(search_text: str) -> AllOf:
    """
    Compile free text into a filter matching books that contain every token.

    Args:
        search_text: Free text; anything that is not a word character separates tokens

    Returns:
        AllOf: One clause per token. No tokens gives ``AllOf(())``, which
        matches every book.
    """
    return AllOf(tuple(token_clause(token) for token in search_tokens(search_text)))

