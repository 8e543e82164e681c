"""
Local storage implementations.

These are in-memory or filesystem-based implementations
that work without any external services.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

from lingobatch.config import Settings
from lingobatch.storage.base import CacheEntry, CacheStorage, CacheUnavailable

logger = logging.getLogger(__name__)


# =============================================================================
# In-Memory Cache Storage
# =============================================================================


class InMemoryCacheStorage(CacheStorage):
    """In-memory cache for development and tests."""

    def __init__(self):
        self._entries: dict[str, CacheEntry] = {}

    async def get(self, key: str) -> CacheEntry | None:
        return self._entries.get(key)

    async def put(self, key: str, entry: CacheEntry) -> None:
        self._entries[key] = entry

    async def delete(self, key: str) -> bool:
        if key in self._entries:
            del self._entries[key]
            return True
        return False

    async def sweep(self, cutoff_ms: float) -> int:
        stale = [key for key, entry in self._entries.items() if entry.timestamp <= cutoff_ms]
        for key in stale:
            del self._entries[key]
        return len(stale)

    async def clear(self) -> None:
        self._entries.clear()

    async def count(self) -> int:
        return len(self._entries)


# =============================================================================
# SQLite Cache Storage
# =============================================================================


class SQLiteCacheStorage(CacheStorage):
    """
    File-backed cache in a single SQLite table.

    Queries are small point lookups on a primary key, so they run inline
    on the event loop rather than in a worker thread.
    """

    def __init__(self, path: str = "./data/translations.db"):
        self.path = path
        self._conn: sqlite3.Connection | None = None

    async def initialize(self) -> None:
        if self._conn is not None:
            return
        try:
            if self.path != ":memory:":
                Path(self.path).parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(self.path)
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS translations (
                    key TEXT PRIMARY KEY,
                    translation TEXT NOT NULL,
                    timestamp REAL NOT NULL
                )
                """
            )
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_translations_timestamp ON translations (timestamp)"
            )
            conn.commit()
        except (sqlite3.Error, OSError) as e:
            raise CacheUnavailable(f"Cannot open translation cache at {self.path}: {e}") from e

        self._conn = conn
        logger.info(f"SQLite translation cache ready at {self.path}")

    async def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise CacheUnavailable("SQLite cache used before initialize()")
        return self._conn

    async def get(self, key: str) -> CacheEntry | None:
        try:
            row = self._connection().execute(
                "SELECT key, translation, timestamp FROM translations WHERE key = ?",
                (key,),
            ).fetchone()
        except sqlite3.Error as e:
            raise CacheUnavailable(f"Cache read failed: {e}") from e

        if row is None:
            return None
        return CacheEntry(key=row[0], translation=row[1], timestamp=row[2])

    async def put(self, key: str, entry: CacheEntry) -> None:
        conn = self._connection()
        try:
            conn.execute(
                "INSERT OR REPLACE INTO translations (key, translation, timestamp) VALUES (?, ?, ?)",
                (key, entry.translation, entry.timestamp),
            )
            conn.commit()
        except sqlite3.Error as e:
            raise CacheUnavailable(f"Cache write failed: {e}") from e

    async def delete(self, key: str) -> bool:
        conn = self._connection()
        try:
            cursor = conn.execute("DELETE FROM translations WHERE key = ?", (key,))
            conn.commit()
        except sqlite3.Error as e:
            raise CacheUnavailable(f"Cache delete failed: {e}") from e
        return cursor.rowcount > 0

    async def sweep(self, cutoff_ms: float) -> int:
        conn = self._connection()
        try:
            cursor = conn.execute("DELETE FROM translations WHERE timestamp <= ?", (cutoff_ms,))
            conn.commit()
        except sqlite3.Error as e:
            raise CacheUnavailable(f"Cache sweep failed: {e}") from e
        return cursor.rowcount

    async def clear(self) -> None:
        conn = self._connection()
        try:
            conn.execute("DELETE FROM translations")
            conn.commit()
        except sqlite3.Error as e:
            raise CacheUnavailable(f"Cache clear failed: {e}") from e

    async def count(self) -> int:
        try:
            row = self._connection().execute("SELECT COUNT(*) FROM translations").fetchone()
        except sqlite3.Error as e:
            raise CacheUnavailable(f"Cache count failed: {e}") from e
        return row[0]


# =============================================================================
# Factory
# =============================================================================


def create_cache_storage(settings: Settings) -> CacheStorage:
    """Create the cache backend named by settings."""
    if settings.cache_backend == "memory":
        return InMemoryCacheStorage()
    if settings.cache_backend == "sqlite":
        return SQLiteCacheStorage(settings.cache_path)
    raise ValueError(f"Unknown cache backend: {settings.cache_backend}")
