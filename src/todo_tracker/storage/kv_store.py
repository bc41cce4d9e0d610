# src/todo_tracker/storage/kv_store.py

from __future__ import annotations

import contextlib
import json
import logging
import sqlite3
import time
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_NAMESPACE = "todos"


def _encode(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False)


class SqliteKeyValueStore:
    """
    SQLite key-value store.

    Every key is stored as "<namespace>_<key>" so several apps (or test runs)
    can share one database file without stepping on each other.

    Failure model:
    - save/remove/clear/keys never raise; errors are logged
    - load returns the caller's default on missing key or bad JSON

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "todos.sqlite3", namespace: str = DEFAULT_NAMESPACE) -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self.namespace = namespace
        self._ensure_schema()
        logger.info("SqliteKeyValueStore ready db=%s namespace=%s", self._db_path, namespace)

    # ---- low-level helpers ----

    def _full_key(self, key: str) -> str:
        return f"{self.namespace}_{key}"

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(Exception):
            conn.execute("PRAGMA journal_mode=WAL")

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

    def save(self, key: str, value: Any) -> None:
        full_key = self._full_key(key)
        try:
            payload = _encode(value)
            conn = self._get_conn()
            try:
                conn.execute(
                    """
                    INSERT INTO kv(key, value, updated_at)
                    VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = excluded.updated_at
                    """,
                    (full_key, payload, time.time()),
                )
                conn.commit()
            finally:
                conn.close()
        except Exception:
            logger.exception("Failed to save key=%s", full_key)

    def load(self, key: str, default: Any = None) -> Any:
        full_key = self._full_key(key)
        try:
            conn = self._get_conn()
            try:
                row = conn.execute("SELECT value FROM kv WHERE key = ?", (full_key,)).fetchone()
            finally:
                conn.close()
            if row is None or not row["value"]:
                return default
            return json.loads(row["value"])
        except Exception:
            logger.exception("Failed to load key=%s; using default", full_key)
            return default

    def remove(self, key: str) -> None:
        full_key = self._full_key(key)
        try:
            conn = self._get_conn()
            try:
                conn.execute("DELETE FROM kv WHERE key = ?", (full_key,))
                conn.commit()
            finally:
                conn.close()
        except Exception:
            logger.exception("Failed to remove key=%s", full_key)

    def clear(self) -> None:
        """Remove every key under this store's namespace."""
        try:
            conn = self._get_conn()
            try:
                # Literal prefix match; LIKE would treat "_" in the namespace as a wildcard.
                prefix = f"{self.namespace}_"
                cur = conn.execute(
                    "DELETE FROM kv WHERE substr(key, 1, ?) = ?",
                    (len(prefix), prefix),
                )
                conn.commit()
                logger.debug("Cleared namespace=%s removed=%s", self.namespace, cur.rowcount)
            finally:
                conn.close()
        except Exception:
            logger.exception("Failed to clear namespace=%s", self.namespace)

    def keys(self) -> list[str]:
        """Keys under this namespace, without the prefix."""
        prefix = f"{self.namespace}_"
        try:
            conn = self._get_conn()
            try:
                rows = conn.execute(
                    "SELECT key FROM kv WHERE substr(key, 1, ?) = ? ORDER BY key",
                    (len(prefix), prefix),
                ).fetchall()
            finally:
                conn.close()
        except Exception:
            logger.exception("Failed to list keys namespace=%s", self.namespace)
            return []
        return [str(r["key"])[len(prefix) :] for r in rows]


class MemoryKeyValueStore:
    """
    In-process store with the same semantics as SqliteKeyValueStore.

    Values are kept as JSON text, so loads return fresh objects and callers
    can never mutate what was stored.
    """

    def __init__(self, namespace: str = DEFAULT_NAMESPACE) -> None:
        self.namespace = namespace
        self._data: dict[str, str] = {}

    def _full_key(self, key: str) -> str:
        return f"{self.namespace}_{key}"

    def save(self, key: str, value: Any) -> None:
        try:
            self._data[self._full_key(key)] = _encode(value)
        except Exception:
            logger.exception("Failed to save key=%s", self._full_key(key))

    def load(self, key: str, default: Any = None) -> Any:
        raw = self._data.get(self._full_key(key))
        if not raw:
            return default
        try:
            return json.loads(raw)
        except Exception:
            logger.exception("Failed to load key=%s; using default", self._full_key(key))
            return default

    def remove(self, key: str) -> None:
        self._data.pop(self._full_key(key), None)

    def clear(self) -> None:
        prefix = f"{self.namespace}_"
        for k in [k for k in self._data if k.startswith(prefix)]:
            del self._data[k]

    def keys(self) -> list[str]:
        prefix = f"{self.namespace}_"
        return sorted(k[len(prefix) :] for k in self._data if k.startswith(prefix))
