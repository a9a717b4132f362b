"""Key-value store capability used for per-client persistence."""

import os
import sqlite3
import threading
from abc import ABC, abstractmethod


class KeyValueStore(ABC):
    """String keys to string values, written as whole-value overwrites."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        pass

    @abstractmethod
    def keys(self, prefix: str = "") -> list[str]:
        pass

    def clear(self) -> None:
        """Remove every key in the store."""
        for key in self.keys():
            self.delete(key)

    def scoped(self, namespace: str) -> "ScopedStore":
        """View of this store whose keys are prefixed with ``namespace``."""
        return ScopedStore(self, namespace)


class MemoryStore(KeyValueStore):
    """Process-local store, mainly for tests."""

    def __init__(self):
        self._data: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self, prefix: str = "") -> list[str]:
        return [k for k in self._data if k.startswith(prefix)]


class SQLiteStore(KeyValueStore):
    """Durable store backed by a single SQLite table."""

    def __init__(self, path: str):
        self.path = path
        self._lock = threading.Lock()
        directory = os.path.dirname(path)
        if directory and not os.path.exists(directory):
            os.makedirs(directory, exist_ok=True)
        self._create_table()

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(self.path)

    def _create_table(self) -> None:
        conn = self._connect()
        with conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at DATETIME DEFAULT CURRENT_TIMESTAMP
                );
            """
            )
        conn.close()

    def get(self, key: str) -> str | None:
        conn = self._connect()
        try:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        finally:
            conn.close()
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        with self._lock:
            conn = self._connect()
            with conn:
                conn.execute(
                    "INSERT OR REPLACE INTO kv (key, value, updated_at) "
                    "VALUES (?, ?, CURRENT_TIMESTAMP)",
                    (key, value),
                )
            conn.close()

    def delete(self, key: str) -> None:
        with self._lock:
            conn = self._connect()
            with conn:
                conn.execute("DELETE FROM kv WHERE key = ?", (key,))
            conn.close()

    def keys(self, prefix: str = "") -> list[str]:
        conn = self._connect()
        try:
            rows = conn.execute("SELECT key FROM kv ORDER BY key").fetchall()
        finally:
            conn.close()
        return [r[0] for r in rows if r[0].startswith(prefix)]


class ScopedStore(KeyValueStore):
    """Namespaced view over another store (one per browser client)."""

    def __init__(self, store: KeyValueStore, namespace: str):
        self.store = store
        self.prefix = f"{namespace}:"

    def get(self, key: str) -> str | None:
        return self.store.get(self.prefix + key)

    def set(self, key: str, value: str) -> None:
        self.store.set(self.prefix + key, value)

    def delete(self, key: str) -> None:
        self.store.delete(self.prefix + key)

    def keys(self, prefix: str = "") -> list[str]:
        return [k[len(self.prefix):] for k in self.store.keys(self.prefix + prefix)]
