"""
Database configuration — reads MICRODB_* settings and opens the
appropriate Connection.

Usage:
    from microdb import get_connection

    db = get_connection("jobs")      # data/jobs.db with the default settings
    db.select("SELECT 1 AS one")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic_settings import BaseSettings

from .connection import Connection

logger = logging.getLogger(__name__)

SQLITE_MEMORY = ":memory:"


class DatabaseSettings(BaseSettings):
    """Connection settings"""

    driver: str = "sqlite3"  # DB-API module name: sqlite3 | psycopg2 | pymysql ...
    database: Optional[str] = None  # path or DSN, first argument of connect()
    database_dir: Path = Path("data")  # where named SQLite databases live
    connect_kwargs: Dict[str, Any] = {}  # JSON in the environment

    class Config:
        env_prefix = "MICRODB_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


def sqlite_path(db_name: Optional[str], settings: DatabaseSettings) -> str:
    """Resolve the SQLite database file for ``db_name``, creating its directory."""
    if settings.database:
        path = settings.database
    elif db_name:
        path = str(settings.database_dir / f"{db_name}.db")
    else:
        return SQLITE_MEMORY

    if path != SQLITE_MEMORY and not path.startswith("file:"):
        Path(path).parent.mkdir(parents=True, exist_ok=True)
    return path


def get_connection(
    db_name: Optional[str] = None,
    settings: Optional[DatabaseSettings] = None,
) -> Connection:
    """
    Factory: open a Connection according to the settings.

    Args:
        db_name: logical name, e.g. "jobs". For SQLite this becomes
                 ``<database_dir>/<db_name>.db`` unless ``database`` is set.
        settings: explicit settings. Defaults to DatabaseSettings() read from
                  the environment.

    Raises:
        ValueError: a non-SQLite driver has nothing to connect with.
        DriverError: the driver failed to connect.
    """
    if settings is None:
        settings = DatabaseSettings()

    kwargs = dict(settings.connect_kwargs)

    if settings.driver == "sqlite3":
        path = sqlite_path(db_name, settings)
        if path.startswith("file:"):
            kwargs.setdefault("uri", True)
        logger.debug("Using SQLite database %s", path)
        return Connection.create("sqlite3", path, **kwargs)

    if settings.database:
        return Connection.create(settings.driver, settings.database, **kwargs)
    if kwargs:
        return Connection.create(settings.driver, **kwargs)

    raise ValueError(f"No database configured for driver: {settings.driver}")
