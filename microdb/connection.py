"""
Connection — wraps a DB-API handle for more convenient usage.

Usage:
    db = Connection.create("sqlite3", "data/app.db")
    db.insert("INSERT INTO users (name) VALUES (:name)", {"name": "Ann"})
    rows = db.select("SELECT * FROM users WHERE id > ?", [0])
"""

from __future__ import annotations

import importlib
import logging
import re
import sqlite3
import sys
from contextlib import closing, contextmanager
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple, Type, Union

from .binding import BoundValues, bind_values
from .exceptions import DriverError
from .protocol import DBCursor, DBHandle

logger = logging.getLogger(__name__)

Row = Dict[str, Any]

_INTEGER_ID = re.compile(r"\s*[+-]?\d+\s*")

# PEP 249 paramstyle -> placeholder for the sequence name
_SEQUENCE_PLACEHOLDERS = {
    "qmark": "?",
    "numeric": ":1",
    "named": ":sequence",
    "format": "%s",
    "pyformat": "%(sequence)s",
}


def _dict_row(cursor: DBCursor, row: Any) -> Row:
    """Row factory keying each value by its column name."""
    return {column[0]: value for column, value in zip(cursor.description, row)}


def _driver_module(handle: Any):
    return sys.modules.get(type(handle).__module__.split(".")[0])


def _is_error_class(candidate: Any) -> bool:
    return isinstance(candidate, type) and issubclass(candidate, Exception)


def _resolve_driver_error(handle: Any) -> Type[Exception]:
    """Find the DB-API ``Error`` base class of the handle's driver."""
    error = getattr(handle, "Error", None)
    if not _is_error_class(error):
        error = getattr(_driver_module(handle), "Error", None)
    if not _is_error_class(error):
        error = sqlite3.Error
    return error


def _normalize_id(value: Any) -> Union[int, str, None]:
    if value is None or isinstance(value, int):
        return value
    if isinstance(value, bytes):
        value = value.decode()
    value = str(value)
    return int(value) if _INTEGER_ID.fullmatch(value) else value


class Connection:
    """
    Convenience wrapper around one DB-API connection handle.

    The handle is configured on construction: rows come back as dicts keyed
    by column name and fetched values keep their native types. The given
    handle WILL BE MODIFIED; callers must not change its configuration
    afterwards. Closing the handle stays with the caller.
    """

    def __init__(self, handle: DBHandle, driver_error: Optional[Type[Exception]] = None):
        if not callable(getattr(handle, "cursor", None)):
            raise TypeError(f"Expected a DB-API connection, got {type(handle).__name__}")

        self._handle = handle
        self._driver_errors: Tuple[Type[Exception], ...] = (driver_error or _resolve_driver_error(handle),)
        self._configure(handle)

    @staticmethod
    def _configure(handle: DBHandle) -> None:
        # DB-API drivers always raise on errors; only sqlite3 needs row/text setup
        if isinstance(handle, sqlite3.Connection):
            handle.row_factory = _dict_row
            handle.text_factory = str

    @classmethod
    def create(cls, driver: str = "sqlite3", *args: Any, **kwargs: Any) -> "Connection":
        """
        Open a new handle with the given DB-API driver and wrap it.

        Args:
            driver: importable DB-API module name, e.g. "sqlite3" or "psycopg2".
            *args, **kwargs: arguments for the driver's ``connect()``.

        Raises:
            DriverError: the driver failed to connect.
        """
        module = importlib.import_module(driver)
        if driver == "sqlite3":
            kwargs.setdefault("isolation_level", None)

        error = getattr(module, "Error", None)
        if not _is_error_class(error):
            error = sqlite3.Error

        with cls._translate_errors((error,)):
            handle = module.connect(*args, **kwargs)

        logger.info("Opened %s connection", driver)
        return cls(handle, driver_error=error)

    def select(self, query: str, values: Optional[BoundValues] = None) -> List[Row]:
        """Run a select query and return all result rows."""
        with self._translate_errors(self._driver_errors, query, values):
            with closing(self._execute(query, values)) as cursor:
                return [self._shape_row(cursor, row) for row in cursor.fetchall()]

    def select_first(self, query: str, values: Optional[BoundValues] = None) -> Optional[Row]:
        """Run a select query and return the first row, or None if nothing is found."""
        with self._translate_errors(self._driver_errors, query, values):
            with closing(self._execute(query, values)) as cursor:
                row = cursor.fetchone()
                return None if row is None else self._shape_row(cursor, row)

    def insert(self, query: str, values: Optional[BoundValues] = None) -> int:
        """Run an insert query and return the number of inserted rows."""
        return self._affected_rows(query, values)

    def insert_get_id(
        self,
        query: str,
        values: Optional[BoundValues] = None,
        sequence: Optional[str] = None,
    ) -> Union[int, str, None]:
        """
        Run an insert query and return the identifier of the last inserted row.

        Args:
            query: full SQL query
            values: values to bind
            sequence: name of the sequence the identifier is read from, for
                      drivers which report no row id (PostgreSQL). Ignored
                      when the cursor has a ``lastrowid`` and by sqlite3.

        Returns:
            The identifier as an int when it is an integer (optional sign and
            digits only, so "1.5" or "1e3" stay strings), otherwise the string
            the driver reported. None if the driver reports no identifier.
        """
        with self._translate_errors(self._driver_errors, query, values):
            with closing(self._execute(query, values)) as cursor:
                return _normalize_id(self._last_insert_id(cursor, sequence))

    def update(self, query: str, values: Optional[BoundValues] = None) -> int:
        """Run an update query and return the number of updated rows."""
        return self._affected_rows(query, values)

    def delete(self, query: str, values: Optional[BoundValues] = None) -> int:
        """Run a delete query and return the number of deleted rows."""
        return self._affected_rows(query, values)

    def statement(self, query: str, values: Optional[BoundValues] = None) -> None:
        """Run a general query, e.g. DDL."""
        with self._translate_errors(self._driver_errors, query, values):
            self._execute(query, values).close()

    def get_handle(self) -> DBHandle:
        """Return the wrapped handle. You MUST NOT modify it."""
        return self._handle

    # ── Internals ──

    @staticmethod
    @contextmanager
    def _translate_errors(
        errors: Tuple[Type[Exception], ...],
        query: Optional[str] = None,
        values: Optional[BoundValues] = None,
    ) -> Iterator[None]:
        try:
            yield
        except errors as exc:
            logger.warning("Database driver error: %s", exc)
            raise DriverError.wrap(exc, query, values) from exc

    def _execute(self, query: str, values: Optional[BoundValues]) -> DBCursor:
        bindings = bind_values(values)
        cursor = self._handle.cursor()
        logger.debug("Executing query: %s (%d bound values)", query, len(bindings))
        try:
            if bindings:
                cursor.execute(query, bindings.parameters())
            else:
                cursor.execute(query)
        except OverflowError as exc:
            # drivers reject out-of-range integers while binding with a plain OverflowError
            cursor.close()
            logger.warning("Database driver error: %s", exc)
            raise DriverError.wrap(exc, query, values) from exc
        except Exception:
            cursor.close()
            raise
        return cursor

    def _affected_rows(self, query: str, values: Optional[BoundValues]) -> int:
        with self._translate_errors(self._driver_errors, query, values):
            with closing(self._execute(query, values)) as cursor:
                return cursor.rowcount

    @staticmethod
    def _shape_row(cursor: DBCursor, row: Any) -> Row:
        if isinstance(row, dict):
            return row
        if isinstance(row, Mapping):
            return dict(row)
        return _dict_row(cursor, row)

    def _last_insert_id(self, cursor: DBCursor, sequence: Optional[str]) -> Any:
        row_id = cursor.lastrowid
        if row_id or sequence is None or isinstance(self._handle, sqlite3.Connection):
            return row_id

        # no row id from the driver: read the sequence (PostgreSQL style)
        paramstyle = getattr(_driver_module(self._handle), "paramstyle", "qmark")
        placeholder = _SEQUENCE_PLACEHOLDERS.get(paramstyle, "?")
        params = {"sequence": sequence} if paramstyle in ("named", "pyformat") else [sequence]

        with closing(self._handle.cursor()) as id_cursor:
            id_cursor.execute(f"SELECT currval({placeholder})", params)
            row = id_cursor.fetchone()

        if row is None:
            return None
        return next(iter(row.values())) if isinstance(row, Mapping) else row[0]
