"""
microdb — a thin convenience layer over DB-API connections.

Usage:
    from microdb import Connection

    db = Connection.create("sqlite3", ":memory:")
    db.statement("CREATE TABLE users (id INTEGER PRIMARY KEY, name TEXT)")
    db.insert("INSERT INTO users (name) VALUES (:name)", {"name": "Ann"})
    db.select("SELECT * FROM users")
"""

from .binding import BoundParameter, Bindings, ParamType, bind_values
from .config import DatabaseSettings, get_connection
from .connection import Connection
from .exceptions import DriverError, InvalidArgumentError, MicroDBError
from .protocol import DBCursor, DBHandle

__all__ = [
    "BoundParameter",
    "Bindings",
    "ParamType",
    "bind_values",
    "DatabaseSettings",
    "get_connection",
    "Connection",
    "DriverError",
    "InvalidArgumentError",
    "MicroDBError",
    "DBCursor",
    "DBHandle",
]
