# todos/todo_store.py

from __future__ import annotations

import contextlib
import logging
import os
import re
import sqlite3
import time
from pathlib import Path

from ..core.ports import KeyValueStore
from .todo_models import TodoError

logger = logging.getLogger(__name__)

_SAFE_KEY_RE = re.compile(r"[^A-Za-z0-9_.-]")


class StorageError(TodoError):
    """Backend I/O failed (file system / SQLite)."""


class MemoryKeyValueStore:
    """Dict-backed store. Nothing survives the process."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileKeyValueStore:
    """
    One file per key under a directory: <dir>/<key>.json

    Writes go to a tmp file first and are swapped in with os.replace.
    """

    def __init__(self, directory: str | Path) -> None:
        self._dir = Path(directory)
        self._dir.mkdir(parents=True, exist_ok=True)
        logger.info("JsonFileKeyValueStore ready dir=%s", self._dir)

    def _path_for(self, key: str) -> Path:
        if not key:
            raise ValueError("key is required")
        return self._dir / f"{_SAFE_KEY_RE.sub('_', key)}.json"

    def get(self, key: str) -> str | None:
        path = self._path_for(key)
        if not path.exists():
            return None
        try:
            return path.read_text("utf-8")
        except UnicodeDecodeError as e:
            raise StorageError(f"Stored value is not valid UTF-8: {path}") from e
        except OSError as e:
            raise StorageError(f"Failed to read {path}") from e

    def set(self, key: str, value: str) -> None:
        path = self._path_for(key)
        tmp = path.with_suffix(".tmp")
        try:
            tmp.write_text(value, "utf-8")
            os.replace(tmp, path)
        except OSError as e:
            with contextlib.suppress(OSError):
                tmp.unlink(missing_ok=True)
            raise StorageError(f"Failed to write {path}") from e
        with contextlib.suppress(OSError):
            os.chmod(path, 0o600)
        logger.debug("Stored key=%s bytes=%d path=%s", key, len(value), path)

    def remove(self, key: str) -> None:
        path = self._path_for(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to remove {path}") from e
        logger.debug("Removed key=%s path=%s", key, path)


class SqliteKeyValueStore:
    """
    SQLite key-value store.

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "todos.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        logger.info("SqliteKeyValueStore ready db=%s", self._db_path)

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        return

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _ensure_schema(self) -> None:
        try:
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
        except sqlite3.Error as e:
            raise StorageError(f"Failed to initialize {self._db_path}") from e

    # ---- public API ----

    def get(self, key: str) -> str | None:
        try:
            conn = self._get_conn()
            try:
                row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to read key={key}") from e
        return None if row is None else str(row[0])

    def set(self, key: str, value: str) -> None:
        try:
            conn = self._get_conn()
            try:
                conn.execute(
                    """
                    INSERT INTO kv(key, value, updated_at) VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET value = excluded.value,
                                                   updated_at = excluded.updated_at
                    """,
                    (key, value, time.time()),
                )
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to write key={key}") from e
        logger.debug("Stored key=%s bytes=%d db=%s", key, len(value), self._db_path)

    def remove(self, key: str) -> None:
        try:
            conn = self._get_conn()
            try:
                conn.execute("DELETE FROM kv WHERE key = ?", (key,))
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to remove key={key}") from e
        logger.debug("Removed key=%s db=%s", key, self._db_path)


STORE_BACKENDS = ("json", "sqlite", "memory")


def open_store(backend: str, path: str | Path) -> KeyValueStore:
    """
    Build a store for the configured backend.

    json   -> `path` is a directory
    sqlite -> `path` is a database file
    memory -> `path` is ignored
    """
    name = (backend or "").strip().lower()
    if name == "json":
        return JsonFileKeyValueStore(path)
    if name == "sqlite":
        return SqliteKeyValueStore(path)
    if name == "memory":
        return MemoryKeyValueStore()
    raise ValueError(f"Unknown store backend: {backend!r} (expected one of {', '.join(STORE_BACKENDS)})")
