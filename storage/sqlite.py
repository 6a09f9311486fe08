"""SQLite helpers for the persistence layer."""
from __future__ import annotations

import os
import sqlite3
from contextlib import contextmanager
from typing import Iterator

from config.settings import settings
from services.errors import PersistenceError


@contextmanager
def get_conn() -> Iterator[sqlite3.Connection]:
    """Yield a SQLite connection, ensuring the data directory exists.

    Any ``sqlite3.Error`` raised inside the block is re-raised as
    :class:`PersistenceError`; the transaction is rolled back in that case.
    """

    directory = os.path.dirname(settings.DB_PATH) or "."
    os.makedirs(directory, exist_ok=True)
    try:
        conn = sqlite3.connect(settings.DB_PATH)
    except sqlite3.Error as exc:
        raise PersistenceError(f"Unable to open database: {exc}") from exc
    conn.row_factory = sqlite3.Row
    try:
        conn.execute("PRAGMA foreign_keys = ON")
        yield conn
        conn.commit()
    except sqlite3.Error as exc:
        conn.rollback()
        raise PersistenceError(str(exc)) from exc
    finally:
        conn.close()
