"""
Success/error result values returned by the repository layer.

Repository operations never let storage faults escape as exceptions; they
return a :class:`Result` that is either ok (carrying a value) or an error
(carrying a :class:`~src.exceptions.CatalogError`). Callers that prefer
exceptions can call :meth:`Result.unwrap`.

Example:
    ```python
    result = await repo.get("978-0261103344")
    if result.is_ok:
        print(result.value.title)
    elif result.error.code == ErrorCode.NOT_FOUND:
        ...
    ```
"""

from typing import Generic, Optional, TypeVar

from src.exceptions import CatalogError, ErrorCode

T = TypeVar("T")


class Result(Generic[T]):
    """Either a value or a :class:`CatalogError`, never both."""

    __slots__ = ("_value", "_error")

    def __init__(self, value: Optional[T] = None, error: Optional[CatalogError] = None):
        self._value = value
        self._error = error

    @classmethod
    def ok(cls, value: T = None) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def err(
        cls,
        message: str,
        code: ErrorCode = ErrorCode.DB,
        widget: Optional[str] = None,
    ) -> "Result[T]":
        return cls(error=CatalogError(message, code, widget))

    @classmethod
    def from_error(cls, error: CatalogError) -> "Result[T]":
        return cls(error=error)

    @property
    def is_ok(self) -> bool:
        return self._error is None

    @property
    def value(self) -> T:
        if self._error is not None:
            raise ValueError(f"error result has no value: {self._error.message}")
        return self._value

    @property
    def error(self) -> Optional[CatalogError]:
        return self._error

    def unwrap(self) -> T:
        """Return the value, or raise the carried error."""
        if self._error is not None:
            raise self._error
        return self._value

    def __bool__(self) -> bool:
        return self.is_ok

    def __repr__(self):
        if self._error is not None:
            return f"Result.err({self._error.code.value}, {self._error.message!r})"
        return f"Result.ok({self._value!r})"
