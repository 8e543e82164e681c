"""
Storage abstractions.

Integration Points:
- CacheStorage → SQLite file locally, any KV service in deployment
"""

from lingobatch.storage.base import (
    CacheEntry,
    CacheStorage,
    CacheUnavailable,
)
from lingobatch.storage.local import (
    InMemoryCacheStorage,
    SQLiteCacheStorage,
    create_cache_storage,
)

__all__ = [
    "CacheEntry",
    "CacheStorage",
    "CacheUnavailable",
    "InMemoryCacheStorage",
    "SQLiteCacheStorage",
    "create_cache_storage",
]
