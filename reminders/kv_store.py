"""Key-value storage backends (the app's local storage equivalent).

Values are opaque strings (JSON in practice). SqliteKVStore survives restarts;
MemoryKVStore is for tests and throwaway sessions.
"""

import sqlite3
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

from logger import logger


class KVStore:
    """Minimal key-value store interface."""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError

    def close(self) -> None:
        pass


class MemoryKVStore(KVStore):
    """In-memory store, lost when the process exits."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class SqliteKVStore(KVStore):
    """Durable store backed by a local SQLite file in WAL mode."""

    def __init__(self, db_path: str):
        self.db_path = db_path
        self._connection: Optional[sqlite3.Connection] = None

    def _get_connection(self) -> sqlite3.Connection:
        """Get or create the database connection."""
        if self._connection is not None:
            return self._connection

        # Ensure data directory exists
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

        self._connection = sqlite3.connect(self.db_path, timeout=10.0)

        # WAL keeps reads cheap while the scheduler writes markers
        self._connection.execute("PRAGMA journal_mode=WAL")
        self._connection.execute("PRAGMA busy_timeout=5000")

        self._connection.executescript("""
            CREATE TABLE IF NOT EXISTS kv_store (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at INTEGER NOT NULL
            );
        """)
        self._connection.commit()

        logger.info(f"Key-value store initialized: {self.db_path}")
        return self._connection

    @contextmanager
    def _transaction(self):
        """Context manager for database transactions."""
        conn = self._get_connection()
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise

    def get(self, key: str) -> Optional[str]:
        row = self._get_connection().execute(
            "SELECT value FROM kv_store WHERE key = ?",
            (key,)
        ).fetchone()
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        with self._transaction() as conn:
            conn.execute(
                """
                INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
                """,
                (key, value, int(time.time()))
            )

    def delete(self, key: str) -> None:
        with self._transaction() as conn:
            conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))

    def close(self) -> None:
        """Close the connection (reopened lazily on next use)."""
        if self._connection is not None:
            self._connection.close()
            self._connection = None
