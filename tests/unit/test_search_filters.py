import pytest
from sqlalchemy.dialects import sqlite

from src.adapters.database.sql_filters import to_sql_clause
from src.repositories.filters import (
    AUTHORS,
    TITLE,
    AllOf,
    AnyOf,
    FieldContains,
    compile_search,
    search_tokens,
)


def sql(clause):
    return str(clause.compile(dialect=sqlite.dialect(), compile_kwargs={"literal_binds": True}))


@pytest.mark.parametrize(
    "text, tokens",
    [
        ("The Hobbit", ["The", "Hobbit"]),
        ("J.R.R. Tolkien", ["Tolkien"]),
        ("  a  bb ccc ", ["bb", "ccc"]),
        ("snake_case-word", ["snake_case", "word"]),
        ("", []),
        (None, []),
        ("!? - .", []),
    ],
)
def test_search_tokens(text, tokens):
    assert search_tokens(text) == tokens


def test_compile_search_is_conjunction_of_title_or_author():
    expression = compile_search("The Hobbit")

    assert expression == AllOf((
        AnyOf((FieldContains(TITLE, "The"), FieldContains(AUTHORS, "The"))),
        AnyOf((FieldContains(TITLE, "Hobbit"), FieldContains(AUTHORS, "Hobbit"))),
    ))


def test_compile_search_without_words_is_empty_conjunction():
    assert compile_search("x . y") == AllOf(())


def test_field_contains_rejects_unknown_field():
    with pytest.raises(ValueError):
        FieldContains("patrons", "someone")


def test_expressions_are_immutable():
    clause = FieldContains(TITLE, "dune")
    with pytest.raises(AttributeError):
        clause.token = "other"


def test_empty_conjunction_matches_everything():
    assert sql(to_sql_clause(AllOf(()))) in ("1", "true", "1 = 1")


def test_empty_disjunction_matches_nothing():
    assert sql(to_sql_clause(AnyOf(()))) in ("0", "false", "0 = 1")


def test_title_clause_is_case_insensitive_like():
    text = sql(to_sql_clause(FieldContains(TITLE, "hobbit"))).lower()

    assert "books.title" in text
    assert "like" in text
    assert "lower(" in text


def test_author_clause_is_exists_subquery():
    text = sql(to_sql_clause(FieldContains(AUTHORS, "tolkien"))).lower()

    assert "exists" in text
    assert "book_authors.name" in text


def test_compiled_search_joins_tokens_with_and_and_fields_with_or():
    text = sql(to_sql_clause(compile_search("the hobbit"))).lower()

    assert " and " in text
    assert text.count(" or ") == 2


def test_unknown_expression_is_rejected():
    with pytest.raises(ValueError):
        to_sql_clause("title = 'x'")
