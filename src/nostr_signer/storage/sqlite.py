"""
SQLite blob store for persistent key storage.

A single table maps slot names to text values.
The key store keeps exactly one row in it: the hex-encoded private key.
"""

from __future__ import annotations

import sqlite3
import threading
from pathlib import Path

from .namespaces import BLOBS


class SQLiteBlobStore:
    """
    SQLite implementation of the BlobStore protocol.

    Stores all slots in a single SQLite file.
    Thread-safe through a connection lock plus SQLite's own file locking.
    """

    def __init__(self, path: Path | str) -> None:
        """
        Initialize SQLite blob store.

        Creates the database file and table if they don't exist.

        Args:
            path: Path to SQLite database file.
                  Use ":memory:" for in-memory database.
        """
        self._path = Path(path) if isinstance(path, str) else path

        if str(self._path) != ":memory:":
            self._path.parent.mkdir(parents=True, exist_ok=True)

        # check_same_thread=False lets the provider be shared across threads.
        #
        # The Python-level lock serializes cursor use on the shared connection.
        self._conn = sqlite3.connect(
            str(self._path),
            check_same_thread=False,
        )
        self._conn.row_factory = sqlite3.Row
        self._lock = threading.Lock()

        self._init_schema()

    def _init_schema(self) -> None:
        """Create tables if they don't exist."""
        with self._lock:
            self._conn.execute(BLOBS.CREATE_TABLE)
            self._conn.commit()

    def get(self, key: str) -> str | None:
        """Retrieve the value stored under a key."""
        with self._lock:
            cursor = self._conn.execute(
                f"SELECT value FROM {BLOBS.TABLE_NAME} WHERE key = ?",
                (key,),
            )
            row = cursor.fetchone()
        if row is None:
            return None
        return row["value"]

    def set(self, key: str, value: str) -> None:
        """Store a value, replacing any previous one."""
        with self._lock:
            self._conn.execute(
                f"""
                INSERT OR REPLACE INTO {BLOBS.TABLE_NAME} (key, value)
                VALUES (?, ?)
                """,
                (key, value),
            )

            # Commit immediately so the write is durable when this returns.
            self._conn.commit()

    def has(self, key: str) -> bool:
        """Check whether a slot holds a value."""
        with self._lock:
            cursor = self._conn.execute(
                f"SELECT 1 FROM {BLOBS.TABLE_NAME} WHERE key = ?",
                (key,),
            )
            return cursor.fetchone() is not None

    def setdefault(self, key: str, value: str) -> str:
        """
        Store a value only if the slot is empty, returning the stored value.

        INSERT OR IGNORE is the compare-and-swap: when two processes race,
        the primary key constraint lets exactly one insert land.
        Both then read back the same row.
        """
        with self._lock:
            self._conn.execute(
                f"""
                INSERT OR IGNORE INTO {BLOBS.TABLE_NAME} (key, value)
                VALUES (?, ?)
                """,
                (key, value),
            )
            self._conn.commit()
            cursor = self._conn.execute(
                f"SELECT value FROM {BLOBS.TABLE_NAME} WHERE key = ?",
                (key,),
            )
            row = cursor.fetchone()
        return row["value"]

    def close(self) -> None:
        """Close database connection."""
        self._conn.close()

    def __enter__(self) -> SQLiteBlobStore:
        """Context manager entry."""
        return self

    def __exit__(self, *args: object) -> None:
        """Context manager exit."""
        self.close()
