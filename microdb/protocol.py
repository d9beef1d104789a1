"""
DB-API handle protocols — the contract a wrapped driver handle must satisfy.

Any PEP 249 connection (sqlite3, psycopg2, pymysql, ...) fits.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence, runtime_checkable


@runtime_checkable
class DBCursor(Protocol):
    """Minimal cursor interface returned by DBHandle.cursor()."""

    def execute(self, sql: str, parameters: Any = ...) -> Any: ...
    def fetchone(self) -> Optional[Any]: ...
    def fetchall(self) -> list: ...
    def close(self) -> None: ...
    @property
    def description(self) -> Optional[Sequence[Sequence[Any]]]: ...
    @property
    def lastrowid(self) -> Any: ...
    @property
    def rowcount(self) -> int: ...


@runtime_checkable
class DBHandle(Protocol):
    """
    Minimal connection interface wrapped by microdb.Connection.

    Transaction control (commit/rollback) and close() stay with the caller.
    """

    def cursor(self) -> DBCursor: ...
    def commit(self) -> None: ...
    def rollback(self) -> None: ...
    def close(self) -> None: ...
