import pytest

from src.exceptions import BookNotFoundError, CatalogError, DuplicateBookError, ErrorCode
from src.utils.result import Result


def test_ok_result():
    result = Result.ok(5)

    assert result.is_ok
    assert result
    assert result.value == 5
    assert result.error is None
    assert result.unwrap() == 5


def test_ok_result_may_carry_none():
    assert Result.ok().is_ok
    assert Result.ok().value is None


def test_error_result():
    result = Result.err("boom", ErrorCode.NOT_FOUND, "isbn")

    assert not result.is_ok
    assert not result
    assert result.error.code == ErrorCode.NOT_FOUND
    assert result.error.message == "boom"
    assert result.error.widget == "isbn"
    with pytest.raises(ValueError):
        result.value
    with pytest.raises(CatalogError) as excinfo:
        result.unwrap()
    assert excinfo.value.code == ErrorCode.NOT_FOUND


def test_error_defaults_to_db_code():
    assert Result.err("lost connection").error.code == ErrorCode.DB


def test_error_code_accepts_strings():
    assert CatalogError("x", "BAD_ARG").code is ErrorCode.BAD_ARG


def test_specific_errors_carry_codes():
    assert BookNotFoundError("1").code == ErrorCode.NOT_FOUND
    assert DuplicateBookError("1").code == ErrorCode.DUPLICATE
    assert Result.from_error(DuplicateBookError("1")).error.widget == "isbn"


def test_repr():
    assert repr(Result.ok(1)) == "Result.ok(1)"
    assert repr(Result.err("bad", ErrorCode.BAD_ARG)) == "Result.err(BAD_ARG, 'bad')"
