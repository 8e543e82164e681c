"""
Translation cache with expiry.

Wraps a `CacheStorage` backend with the translation-specific rules:
entries expire after a TTL, failed translations are never stored, and a
broken backend degrades to pass-through instead of raising.
"""

from __future__ import annotations

import asyncio
import hashlib
import json
import logging
from typing import Callable

from lingobatch.core.utils import epoch_ms
from lingobatch.storage.base import CacheEntry, CacheStorage, CacheUnavailable

logger = logging.getLogger(__name__)


DEFAULT_TTL_SECONDS = 60 * 60 * 24  # 24 hours


def make_cache_key(text: str, target: str, source: str) -> str:
    """
    Create cache key from content hash.

    Codes are expected to be normalized already. Surrounding whitespace
    does not affect the key. The language pair is hashed with the text so
    codes containing ":" cannot collide with another pair.
    """
    payload = json.dumps([source, target, text.strip()], ensure_ascii=False)
    digest = hashlib.sha256(payload.encode("utf-8")).hexdigest()
    return f"trans:{digest}"


class TranslationCache:
    """
    TTL cache for translations.

    Usage:
        cache = TranslationCache(InMemoryCacheStorage())
        await cache.set(key, "नमस्ते", original="Hello")
        await cache.get(key)  # -> "नमस्ते" until the TTL runs out

    If the backend raises `CacheUnavailable` the cache switches itself
    off: reads miss and writes are dropped for the rest of its life.
    """

    def __init__(
        self,
        storage: CacheStorage,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = epoch_ms,
    ):
        self.storage = storage
        self.ttl_ms = ttl_seconds * 1000
        self._clock = clock
        self._available = True
        self._initialized = False
        self._sweeper: asyncio.Task | None = None

    @property
    def available(self) -> bool:
        return self._available

    def _degrade(self, error: CacheUnavailable) -> None:
        if self._available:
            logger.warning(f"⚠️ Translation cache unavailable, continuing without it: {error}")
        self._available = False

    async def _ensure_ready(self) -> bool:
        if not self._available:
            return False
        if not self._initialized:
            try:
                await self.storage.initialize()
            except CacheUnavailable as e:
                self._degrade(e)
                return False
            self._initialized = True
        return True

    def _is_expired(self, entry: CacheEntry, now: float) -> bool:
        return entry.age_ms(now) >= self.ttl_ms

    async def get(self, key: str) -> str | None:
        """Get cached translation, or None if missing or expired."""
        if not await self._ensure_ready():
            return None

        try:
            entry = await self.storage.get(key)
            if entry is None:
                return None

            if self._is_expired(entry, self._clock()):
                await self.storage.delete(key)
                return None
        except CacheUnavailable as e:
            self._degrade(e)
            return None

        return entry.translation

    async def set(self, key: str, translation: str | None, original: str | None = None) -> None:
        """
        Cache a translation.

        Empty values and values equal to `original` are skipped, since the
        scheduler hands back the original text when the provider fails.
        """
        if not translation or not isinstance(translation, str):
            return
        if original is not None and translation == original:
            return
        if not await self._ensure_ready():
            return

        entry = CacheEntry(key=key, translation=translation, timestamp=self._clock())
        try:
            await self.storage.put(key, entry)
        except CacheUnavailable as e:
            self._degrade(e)

    async def delete(self, key: str) -> bool:
        """Invalidate one entry."""
        if not await self._ensure_ready():
            return False
        try:
            return await self.storage.delete(key)
        except CacheUnavailable as e:
            self._degrade(e)
            return False

    async def clear(self) -> None:
        if not await self._ensure_ready():
            return
        try:
            await self.storage.clear()
        except CacheUnavailable as e:
            self._degrade(e)

    async def sweep(self) -> int:
        """Remove every expired entry. Returns the number removed."""
        if not await self._ensure_ready():
            return 0
        try:
            removed = await self.storage.sweep(self._clock() - self.ttl_ms)
        except CacheUnavailable as e:
            self._degrade(e)
            return 0

        if removed:
            logger.info(f"Swept {removed} expired translations")
        return removed

    # =========================================================================
    # Periodic sweep
    # =========================================================================

    def start_sweeper(self, interval_seconds: float) -> None:
        """Run `sweep()` every `interval_seconds` until `stop_sweeper()`."""
        if self._sweeper is not None and not self._sweeper.done():
            return
        self._sweeper = asyncio.get_running_loop().create_task(
            self._sweep_forever(interval_seconds)
        )

    async def _sweep_forever(self, interval_seconds: float) -> None:
        while True:
            await asyncio.sleep(interval_seconds)
            await self.sweep()

    async def stop_sweeper(self) -> None:
        if self._sweeper is None:
            return
        self._sweeper.cancel()
        try:
            await self._sweeper
        except asyncio.CancelledError:
            pass
        self._sweeper = None

    async def close(self) -> None:
        await self.stop_sweeper()
        if self._initialized:
            await self.storage.close()
            self._initialized = False
