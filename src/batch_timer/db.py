"""SQLite key/value store backing the persistence gateway."""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator, Optional


DATETIME_FMT = "%Y-%m-%d %H:%M:%S.%f"


def open_database(path: Path, *, check_same_thread: bool = True) -> sqlite3.Connection:
    """Open (and initialize) the SQLite database."""
    conn = sqlite3.connect(
        path,
        isolation_level=None,
        check_same_thread=check_same_thread,
    )
    conn.row_factory = sqlite3.Row
    initialize_schema(conn)
    return conn


@contextmanager
def database_connection(
    path: Path, *, check_same_thread: bool = True
) -> Iterator[sqlite3.Connection]:
    conn = open_database(path, check_same_thread=check_same_thread)
    try:
        yield conn
    finally:
        conn.close()


def initialize_schema(conn: sqlite3.Connection) -> None:
    conn.executescript(
        """
        CREATE TABLE IF NOT EXISTS kv_store (
            key TEXT PRIMARY KEY,
            value BLOB NOT NULL,
            updated_at TEXT NOT NULL
        );
        """
    )


def fetch_value(conn: sqlite3.Connection, key: str) -> Optional[bytes]:
    row = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
    if row is None:
        return None
    value = row["value"]
    return value.encode("utf-8") if isinstance(value, str) else bytes(value)


def upsert_value(conn: sqlite3.Connection, key: str, value: bytes) -> None:
    conn.execute(
        """
        INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, ?)
        ON CONFLICT(key) DO UPDATE SET
            value = excluded.value,
            updated_at = excluded.updated_at
        """,
        (key, sqlite3.Binary(value), datetime.now().strftime(DATETIME_FMT)),
    )


def delete_value(conn: sqlite3.Connection, key: str) -> bool:
    cur = conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
    return cur.rowcount > 0


class SqliteStore:
    """Durable string-keyed byte store kept in a single SQLite file."""

    def __init__(self, db_path: Path) -> None:
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def get(self, key: str) -> Optional[bytes]:
        with database_connection(self.db_path, check_same_thread=False) as conn:
            return fetch_value(conn, key)

    def set(self, key: str, value: bytes) -> None:
        with database_connection(self.db_path, check_same_thread=False) as conn:
            upsert_value(conn, key, value)

    def remove(self, key: str) -> bool:
        with database_connection(self.db_path, check_same_thread=False) as conn:
            return delete_value(conn, key)
