"""
Storage abstraction layer.

Translations persist through this interface. This allows swapping
implementations (in-memory → SQLite file → Redis, etc.)
without changing the cache or scheduler.

The store only has to keep a value with its write timestamp and offer
read-your-own-writes within a process. Expiry policy lives above it, in
`lingobatch.i18n.cache.TranslationCache`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel


class CacheUnavailable(Exception):
    """The persistent store failed to initialize, or a read/write failed."""


# =============================================================================
# Models
# =============================================================================


class CacheEntry(BaseModel):
    """A persisted translation."""

    key: str
    translation: str
    timestamp: float  # epoch milliseconds at write time

    def age_ms(self, now_ms: float) -> float:
        return now_ms - self.timestamp


# =============================================================================
# Storage Interface
# =============================================================================


class CacheStorage(ABC):
    """
    Key-value store for cache entries.

    Local Implementations: In-memory dict, SQLite file
    """

    async def initialize(self) -> None:
        """Prepare the backend. Raises CacheUnavailable on failure."""

    async def close(self) -> None:
        """Release backend resources."""

    @abstractmethod
    async def get(self, key: str) -> CacheEntry | None:
        """Get an entry by key."""
        pass

    @abstractmethod
    async def put(self, key: str, entry: CacheEntry) -> None:
        """Store an entry, replacing any existing one (last write wins)."""
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Delete an entry."""
        pass

    @abstractmethod
    async def sweep(self, cutoff_ms: float) -> int:
        """Delete every entry written at or before `cutoff_ms`. Returns count removed."""
        pass

    @abstractmethod
    async def clear(self) -> None:
        """Delete everything."""
        pass

    @abstractmethod
    async def count(self) -> int:
        """Number of stored entries, expired or not."""
        pass
