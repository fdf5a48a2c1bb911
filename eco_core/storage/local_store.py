# =============================================================================
# eco_core/storage/local_store.py
# Persistent Key-Value Store backed by SQLite
# =============================================================================
"""
LocalKeyValueStore - small persistent string store.

Holds two unrelated things under distinct keys:
- the serialized Supabase auth session (the auth client reads and writes it
  through get_item / set_item / remove_item)
- the user's theme-mode preference

Features:
- Automatic schema creation
- Thread-safe operations (thread-local connections, one write lock)
"""

from __future__ import annotations
import os
import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import List, Optional
import logging

logger = logging.getLogger(__name__)


# Session token key used by the Supabase auth client
SESSION_STORAGE_KEY = "supabase.auth.token"

# Theme preference key
THEME_STORAGE_KEY = "EcoNexus_theme_mode"


class LocalKeyValueStore:
    """
    SQLite-backed key-value store with the storage-adapter surface expected
    by the Supabase auth client.
    """

    DEFAULT_DB_PATH = Path(__file__).parent.parent.parent / "local_data" / "econexus.db"

    SCHEMA = """
        CREATE TABLE IF NOT EXISTS kv_store (
            key TEXT PRIMARY KEY,
            value TEXT,
            updated_at TEXT DEFAULT CURRENT_TIMESTAMP
        )
    """

    _instance: Optional[LocalKeyValueStore] = None
    _instance_lock = threading.Lock()

    def __init__(self, db_path: Optional[Path] = None):
        """
        Initialize the store.

        Args:
            db_path: Path to SQLite database file
        """
        env_path = os.getenv("ECONEXUS_STORAGE_PATH")
        self.db_path = Path(db_path or env_path or self.DEFAULT_DB_PATH)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._local = threading.local()
        self._write_lock = threading.Lock()

        with self.transaction() as conn:
            conn.execute(self.SCHEMA)
        logger.debug(f"Key-value store ready at: {self.db_path}")

    @classmethod
    def get_instance(cls, db_path: Optional[Path] = None) -> LocalKeyValueStore:
        """Get or create singleton instance."""
        if cls._instance is None:
            with cls._instance_lock:
                if cls._instance is None:
                    cls._instance = LocalKeyValueStore(db_path)
        return cls._instance

    def _get_connection(self) -> sqlite3.Connection:
        """Get thread-local database connection."""
        if getattr(self._local, "connection", None) is None:
            self._local.connection = sqlite3.connect(str(self.db_path), check_same_thread=False)
        return self._local.connection

    @contextmanager
    def transaction(self):
        """Context manager for write transactions."""
        conn = self._get_connection()
        with self._write_lock:
            try:
                yield conn
                conn.commit()
            except Exception:
                conn.rollback()
                raise

    # =========================================================================
    # STORAGE ADAPTER SURFACE
    # =========================================================================

    def get_item(self, key: str) -> Optional[str]:
        """Return the stored value for key, or None."""
        row = self._get_connection().execute(
            "SELECT value FROM kv_store WHERE key = ?", (key,)
        ).fetchone()
        return row[0] if row else None

    def set_item(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""
        with self.transaction() as conn:
            conn.execute(
                "INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, ?) "
                "ON CONFLICT(key) DO UPDATE SET value = excluded.value, "
                "updated_at = excluded.updated_at",
                (key, value, datetime.now().isoformat()),
            )

    def remove_item(self, key: str) -> None:
        """Delete key if present."""
        with self.transaction() as conn:
            conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))

    # =========================================================================
    # MAINTENANCE
    # =========================================================================

    def keys(self) -> List[str]:
        rows = self._get_connection().execute("SELECT key FROM kv_store ORDER BY key").fetchall()
        return [row[0] for row in rows]

    def clear(self) -> None:
        with self.transaction() as conn:
            conn.execute("DELETE FROM kv_store")

    def close(self) -> None:
        """Close this thread's connection."""
        conn = getattr(self._local, "connection", None)
        if conn is not None:
            conn.close()
            self._local.connection = None


_local_store: Optional[LocalKeyValueStore] = None


def get_local_store() -> LocalKeyValueStore:
    """Get the global LocalKeyValueStore instance."""
    global _local_store
    if _local_store is None:
        _local_store = LocalKeyValueStore.get_instance()
    return _local_store


class NamespacedStore:
    """
    A view of a LocalKeyValueStore with every key prefixed by a namespace.

    Each browser session gets its own namespace, so the session token and
    theme preference written by one visitor are never read by another.
    Exposes the storage adapter interface supabase-py expects.
    """

    def __init__(self, store: LocalKeyValueStore, namespace: str):
        if not namespace:
            raise ValueError("namespace must be non-empty")
        self.store = store
        self.namespace = namespace

    def _key(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    def get_item(self, key: str) -> Optional[str]:
        return self.store.get_item(self._key(key))

    def set_item(self, key: str, value: str) -> None:
        self.store.set_item(self._key(key), value)

    def remove_item(self, key: str) -> None:
        self.store.remove_item(self._key(key))
