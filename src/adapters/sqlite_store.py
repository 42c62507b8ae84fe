"""SQLite storage adapter.

Implements the core PolicyStorePort as a single key/value table.
"""

from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from typing import Optional

from core.errors import StoreUnavailable


class SQLiteBlobStore:
    """Thin SQLite wrapper that satisfies the PolicyStorePort contract."""

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def init_db(self) -> None:
        """Create the blobs table if it does not exist.

        Fields:
        - key: logical store key (PRIMARY KEY)
        - value: serialized records for that key
        - updated_at: timestamp of the last save
        """

        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS blobs (
                        key TEXT PRIMARY KEY,
                        value BLOB NOT NULL,
                        updated_at TIMESTAMP NOT NULL
                    )
                    """
                )
        except sqlite3.Error as exc:
            raise StoreUnavailable(f"cannot initialize {self._db_path}: {exc}") from exc

    def load(self, key: str) -> Optional[bytes]:
        """Return the stored bytes for a key, if any."""

        try:
            with self._connect() as conn:
                row = conn.execute("SELECT value FROM blobs WHERE key = ?", (key,)).fetchone()
        except sqlite3.Error as exc:
            raise StoreUnavailable(f"cannot read {key}: {exc}") from exc
        return bytes(row["value"]) if row else None

    def save(self, key: str, data: bytes) -> None:
        """Upsert the bytes for a key in one transaction."""

        now = datetime.now(timezone.utc)
        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    INSERT INTO blobs (key, value, updated_at)
                    VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = excluded.updated_at
                    """,
                    (key, sqlite3.Binary(data), now.isoformat()),
                )
        except sqlite3.Error as exc:
            raise StoreUnavailable(f"cannot write {key}: {exc}") from exc

    def updated_at(self, key: str) -> Optional[datetime]:
        """Return when a key was last saved."""

        try:
            with self._connect() as conn:
                row = conn.execute("SELECT updated_at FROM blobs WHERE key = ?", (key,)).fetchone()
        except sqlite3.Error as exc:
            raise StoreUnavailable(f"cannot read {key}: {exc}") from exc
        return datetime.fromisoformat(row["updated_at"]) if row else None
