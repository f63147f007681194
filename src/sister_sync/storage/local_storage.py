# src/sister_sync/storage/local_storage.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
import time
from pathlib import Path

from ..tasks.errors import StorageReadCorruption, StorageWriteError

logger = logging.getLogger(__name__)


class SQLiteLocalStorage:
    """
    Named string slots in a single SQLite table (a local stand-in for the
    browser's localStorage).

    quota_bytes caps the total UTF-8 size of all stored values; a write that
    would exceed it raises StorageWriteError and leaves the old value in place.

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "storage.sqlite3", *, quota_bytes: int = 0) -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._quota_bytes = max(0, int(quota_bytes))
        self._ensure_schema()
        logger.info("LocalStorage ready db=%s quota=%s", self._db_path, self._quota_bytes or "none")

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        with contextlib.suppress(Exception):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )
            conn.commit()
        finally:
            conn.close()

    # ---- public API ----

    def get_item(self, key: str) -> str | None:
        try:
            conn = self._get_conn()
        except sqlite3.Error as e:
            raise StorageReadCorruption(f"cannot open {self._db_path}") from e
        try:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
            return None if row is None else str(row["value"])
        except sqlite3.Error as e:
            raise StorageReadCorruption(f"cannot read key={key}") from e
        finally:
            conn.close()

    def set_item(self, key: str, value: str) -> None:
        try:
            conn = self._get_conn()
        except sqlite3.Error as e:
            raise StorageWriteError(f"cannot open {self._db_path}") from e
        try:
            if self._quota_bytes:
                cur = conn.execute(
                    "SELECT COALESCE(SUM(LENGTH(CAST(value AS BLOB))), 0) FROM kv WHERE key != ?",
                    (key,),
                )
                (others,) = cur.fetchone()
                needed = int(others) + len(value.encode("utf-8"))
                if needed > self._quota_bytes:
                    raise StorageWriteError(
                        f"quota exceeded: {needed} bytes > {self._quota_bytes} bytes"
                    )

            conn.execute(
                """
                INSERT INTO kv(key, value, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
                """,
                (key, value, time.time()),
            )
            conn.commit()
        except sqlite3.Error as e:
            raise StorageWriteError(f"cannot write key={key}") from e
        finally:
            conn.close()

    def remove_item(self, key: str) -> None:
        try:
            conn = self._get_conn()
        except sqlite3.Error as e:
            raise StorageWriteError(f"cannot open {self._db_path}") from e
        try:
            conn.execute("DELETE FROM kv WHERE key = ?", (key,))
            conn.commit()
        except sqlite3.Error as e:
            raise StorageWriteError(f"cannot remove key={key}") from e
        finally:
            conn.close()
