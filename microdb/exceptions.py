"""
microdb exceptions
"""

from __future__ import annotations

from typing import Any, Optional, Union


class MicroDBError(Exception):
    """Base exception for microdb"""
    pass


class InvalidArgumentError(MicroDBError, ValueError):
    """A bound value is not null, bool, int, float or str"""
    def __init__(self, message: str, placeholder: Union[int, str, None] = None, value_type: Optional[str] = None):
        self.placeholder = placeholder
        self.value_type = value_type
        super().__init__(message)

    @classmethod
    def for_value(cls, placeholder: Union[int, str], value: Any) -> "InvalidArgumentError":
        label = f"#{placeholder}" if isinstance(placeholder, int) else f"`{placeholder}`"
        value_type = type(value).__name__
        return cls(
            f"Bound value {label} expected to be scalar or null, a {value_type} given",
            placeholder=placeholder,
            value_type=value_type,
        )


class DriverError(MicroDBError):
    """
    Error raised by the database driver.

    Carries the SQL query and the bound values that were in effect when the
    driver failed. The driver exception is kept as ``cause`` and is also
    chained as ``__cause__``.
    """
    def __init__(
        self,
        message: str,
        query: Optional[str] = None,
        values: Any = None,
        cause: Optional[BaseException] = None,
    ):
        self.query = query
        self.values = values
        self.cause = cause
        super().__init__(message)

    @classmethod
    def wrap(cls, exc: BaseException, query: Optional[str] = None, values: Any = None) -> "DriverError":
        message = str(exc) or type(exc).__name__
        if query is not None:
            message += f"; SQL query: ({query})"
        if values is not None:
            message += f"; bound values: {values!r}"
        error = cls(message, query=query, values=values, cause=exc)
        error.__cause__ = exc
        return error
