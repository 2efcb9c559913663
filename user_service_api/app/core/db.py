"""
SQLite database integration.

This module provides functions for resolving the database location
(``get_database_path``), obtaining a connection (``get_connection``)
and, when explicitly enabled, creating the ``users`` table
(``init_db``).  The schema is normally managed outside this service;
``init_db`` only exists for local development and tests.
"""

import logging
import os
import sqlite3
from pathlib import Path
from typing import Optional

from .config import settings


logger = logging.getLogger(__name__)

# AUTOINCREMENT keeps SQLite from handing out the id of a deleted row again.
USERS_SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    email TEXT,
    phone TEXT
);
"""


def get_database_path(database_url: Optional[str] = None) -> str:
    """Compute the path to the SQLite database file.

    If the configured URL is an absolute path, use it directly.
    Otherwise resolve it relative to the project root.  ``:memory:`` is
    passed through unchanged.
    """
    db_url = database_url if database_url is not None else settings.database_url
    if db_url == ":memory:" or os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent.parent  # project root
    return str((base_dir / db_url).resolve())


def get_connection(database_url: Optional[str] = None) -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    Rows are returned as ``sqlite3.Row`` so columns can be accessed by
    name.  Callers own the connection and must close it.
    """
    conn = sqlite3.connect(get_database_path(database_url))
    conn.row_factory = sqlite3.Row
    return conn


def init_db(database_url: Optional[str] = None) -> None:
    """Create the ``users`` table if it does not exist."""
    db_path = get_database_path(database_url)
    conn = get_connection(db_path)
    try:
        conn.executescript(USERS_SCHEMA)
        conn.commit()
    finally:
        conn.close()
    logger.info("Ensured users schema in %s", db_path)
