"""SQLite-based key-value store."""

import sqlite3
from datetime import datetime, timezone
from pathlib import Path

from taskvantage.utils.logging import get_logger

logger = get_logger(__name__)


class StorageError(Exception):
    """Raised when the store cannot be opened."""


class KeyValueStore:
    """Persistent string key-value store backed by a single SQLite table.

    Values are opaque text (the repository stores JSON). Every write commits
    immediately.
    """

    def __init__(self, path: str | Path = ":memory:") -> None:
        """Initialize the store.

        Args:
            path: SQLite database file, or ":memory:" for a transient store
        """
        self.path = str(path)
        self._db: sqlite3.Connection | None = None

    def initialize(self) -> None:
        """Open the database and create the table.

        Raises:
            StorageError: If the database cannot be opened
        """
        if self._db is not None:
            return

        in_memory = self.path == ":memory:"
        try:
            target = self.path
            if not in_memory:
                file_path = Path(self.path).expanduser()
                file_path.parent.mkdir(parents=True, exist_ok=True)
                target = str(file_path)
            self._db = sqlite3.connect(target)

            if not in_memory:
                self._db.execute("PRAGMA journal_mode=WAL")
                self._db.execute("PRAGMA synchronous=NORMAL")

            self._db.execute("""
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)
            self._db.commit()
        except (sqlite3.Error, OSError) as e:
            self._db = None
            raise StorageError(f"Cannot open key-value store at {self.path}: {e}") from e

        logger.info("kv_store_initialized", path=self.path)

    @property
    def db(self) -> sqlite3.Connection:
        if self._db is None:
            self.initialize()
        assert self._db is not None
        return self._db

    def get(self, key: str) -> str | None:
        """Return the value for key, or None if absent."""
        row = self.db.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        """Insert or replace a value."""
        self.db.execute(
            """
            INSERT INTO kv (key, value, updated_at) VALUES (?, ?, ?)
            ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
            """,
            (key, value, datetime.now(timezone.utc).isoformat()),
        )
        self.db.commit()

    def delete(self, key: str) -> bool:
        """Remove a key. Returns True if it existed."""
        cursor = self.db.execute("DELETE FROM kv WHERE key = ?", (key,))
        self.db.commit()
        return cursor.rowcount > 0

    def keys(self) -> list[str]:
        return [row[0] for row in self.db.execute("SELECT key FROM kv ORDER BY key")]

    def close(self) -> None:
        if self._db is not None:
            self._db.close()
            self._db = None
            logger.debug("kv_store_closed", path=self.path)
