"""Durable tier — authoritative image storage backed by SQLite."""

from __future__ import annotations

import logging
import sqlite3
import threading
from datetime import datetime
from pathlib import Path
from typing import Protocol

from tenacity import retry, retry_if_exception, stop_after_attempt, wait_exponential

from imgstash.errors.exceptions import (
    StoreDeleteError,
    StoreError,
    StoreReadError,
    StoreWriteError,
)
from imgstash.types import ImageRecord

logger = logging.getLogger(__name__)

_DEFAULT_DB_PATH = Path.home() / ".imgstash" / "images.db"
_TABLE = "raw_image"


class DurableStore(Protocol):
    """Authoritative store, queried by the record's ``id`` field."""

    def put(self, record: ImageRecord) -> None: ...

    def find_by_id(self, key: str) -> ImageRecord | None: ...

    def delete_by_id(self, key: str) -> None: ...


def _is_locked(exc: BaseException) -> bool:
    return isinstance(exc, sqlite3.OperationalError) and "locked" in str(exc).lower()


class SQLiteImageStore:
    """SQLite-backed durable store.

    Rows are stored under a storage key equal to the image id, but lookups
    and deletes go through the indexed ``id`` column rather than the
    primary key.
    """

    def __init__(self, db_path: Path | None = None, timeout: float = 5.0) -> None:
        self._db_path = db_path or _DEFAULT_DB_PATH
        self._lock = threading.Lock()
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(
                str(self._db_path), timeout=timeout, check_same_thread=False
            )
        except (OSError, sqlite3.Error) as e:
            raise StoreError(f"Cannot open store at {self._db_path}: {e}", original=e) from e
        self._conn.row_factory = sqlite3.Row
        try:
            self._create_table()
        except sqlite3.Error as e:
            self._conn.close()
            raise StoreError(f"Cannot open store at {self._db_path}: {e}", original=e) from e

    @property
    def db_path(self) -> Path:
        return self._db_path

    def put(self, record: ImageRecord) -> None:
        try:
            self._insert(record)
        except sqlite3.Error as e:
            raise StoreWriteError(
                f"Failed to store image {record.id}: {e}", key=record.id, original=e
            ) from e
        logger.debug("Stored image %s (%d bytes)", record.id, record.size_bytes)

    def find_by_id(self, key: str) -> ImageRecord | None:
        try:
            with self._lock:
                row = self._conn.execute(
                    f"SELECT id, payload, expires_at FROM {_TABLE} WHERE id = ? LIMIT 1",
                    (key,),
                ).fetchone()
        except sqlite3.Error as e:
            raise StoreReadError(f"Lookup failed for {key}: {e}", key=key, original=e) from e
        if row is None:
            return None
        return self._row_to_record(row)

    def delete_by_id(self, key: str) -> None:
        try:
            with self._lock:
                cursor = self._conn.execute(f"DELETE FROM {_TABLE} WHERE id = ?", (key,))
                self._conn.commit()
        except sqlite3.Error as e:
            raise StoreDeleteError(f"Delete failed for {key}: {e}", key=key, original=e) from e
        if cursor.rowcount:
            logger.debug("Deleted %d row(s) for %s", cursor.rowcount, key)

    def count(self) -> int:
        with self._lock:
            row = self._conn.execute(f"SELECT COUNT(*) FROM {_TABLE}").fetchone()
        return row[0]

    def close(self) -> None:
        self._conn.close()

    @retry(
        retry=retry_if_exception(_is_locked),
        wait=wait_exponential(multiplier=0.05, max=1),
        stop=stop_after_attempt(3),
        reraise=True,
    )
    def _insert(self, record: ImageRecord) -> None:
        with self._lock:
            self._conn.execute(
                f"""INSERT OR REPLACE INTO {_TABLE}
                    (storage_key, id, payload, expires_at)
                    VALUES (?, ?, ?, ?)""",
                (record.id, record.id, record.payload, record.expires_at.isoformat()),
            )
            self._conn.commit()

    def _create_table(self) -> None:
        with self._lock:
            self._conn.execute(f"""
                CREATE TABLE IF NOT EXISTS {_TABLE} (
                    storage_key TEXT PRIMARY KEY,
                    id TEXT NOT NULL,
                    payload BLOB NOT NULL,
                    expires_at TEXT NOT NULL
                )
            """)
            self._conn.execute(f"CREATE INDEX IF NOT EXISTS idx_{_TABLE}_id ON {_TABLE} (id)")
            self._conn.commit()

    @staticmethod
    def _row_to_record(row: sqlite3.Row) -> ImageRecord:
        return ImageRecord(
            id=row["id"],
            payload=bytes(row["payload"]),
            expires_at=datetime.fromisoformat(row["expires_at"]),
        )
