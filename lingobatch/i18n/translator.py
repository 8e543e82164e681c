"""
Translator service.

Wires the provider client, the TTL cache and the batch scheduler together
behind one object. Callers always get a displayable string back.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from lingobatch.config import Settings, get_settings
from lingobatch.core.utils import epoch_ms, monotonic_ms
from lingobatch.i18n.cache import TranslationCache, make_cache_key
from lingobatch.i18n.languages import Language, normalize_language_code
from lingobatch.i18n.provider import ProviderError, TranslationProvider, create_provider
from lingobatch.i18n.scheduler import BatchScheduler, ScheduleFn, asyncio_schedule
from lingobatch.storage import CacheStorage, create_cache_storage

logger = logging.getLogger(__name__)


class Translator:
    """
    Main translation service.

    Usage:
        translator = Translator.from_settings()
        await translator.start()

        # Single translation (batched behind the scenes)
        hi_text = await translator.translate("Schedule Pickup", target="hi")

        # Several at once, order preserved
        ta_texts = await translator.translate_batch(
            ["Sell Scrap", "Wallet", "Order History"],
            target="ta",
        )

        # Objects go straight to the provider, uncached
        item = await translator.translate_object(
            {"name": "Copper wire", "unit": "kg"}, target="mr", keys=["name"]
        )

        await translator.close()
    """

    def __init__(
        self,
        provider: TranslationProvider,
        storage: CacheStorage,
        default_source: str = "en",
        batch_window_ms: float = 100,
        max_batch_size: int = 10,
        min_request_interval_ms: float = 200,
        cache_ttl_seconds: int = 60 * 60 * 24,
        cache_sweep_interval_seconds: float = 60 * 60,
        schedule: ScheduleFn = asyncio_schedule,
        clock: Callable[[], float] = monotonic_ms,
        cache_clock: Callable[[], float] = epoch_ms,
    ):
        self.provider = provider
        self.default_source = normalize_language_code(default_source)
        self.cache_sweep_interval_seconds = cache_sweep_interval_seconds
        self.cache = TranslationCache(storage, ttl_seconds=cache_ttl_seconds, clock=cache_clock)
        self.scheduler = BatchScheduler(
            provider,
            self.cache,
            batch_window_ms=batch_window_ms,
            max_batch_size=max_batch_size,
            min_request_interval_ms=min_request_interval_ms,
            default_source=self.default_source,
            schedule=schedule,
            clock=clock,
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        provider: TranslationProvider | None = None,
        storage: CacheStorage | None = None,
    ) -> "Translator":
        settings = settings or get_settings()
        return cls(
            provider=provider or create_provider(settings),
            storage=storage or create_cache_storage(settings),
            default_source=settings.default_source_language,
            batch_window_ms=settings.batch_window_ms,
            max_batch_size=settings.max_batch_size,
            min_request_interval_ms=settings.min_request_interval_ms,
            cache_ttl_seconds=settings.cache_ttl_seconds,
            cache_sweep_interval_seconds=settings.cache_sweep_interval_seconds,
        )

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def start(self) -> None:
        """Start the periodic cache sweep."""
        self.cache.start_sweeper(self.cache_sweep_interval_seconds)

    async def close(self) -> None:
        await self.scheduler.close()
        await self.cache.close()
        await self.provider.aclose()

    # =========================================================================
    # Translation
    # =========================================================================

    async def translate(
        self,
        text: str,
        target: str | Language,
        source: str | Language | None = None,
    ) -> str:
        """
        Translate text to target language.

        Args:
            text: Text to translate
            target: Target language code or locale tag
            source: Source language (defaults to `default_source`)

        Returns:
            Translated text, or `text` unchanged on failure
        """
        return await self.scheduler.request_one(text, target, source)

    async def translate_batch(
        self,
        texts: list[str],
        target: str | Language,
        source: str | Language | None = None,
    ) -> list[str]:
        """Translate multiple texts, preserving order."""
        return await self.scheduler.request_batch(texts, target, source)

    async def translate_object(
        self,
        obj: dict[str, Any],
        target: str | Language,
        source: str | Language | None = None,
        keys: list[str] | None = None,
    ) -> dict[str, Any]:
        """
        Translate the values under `keys` in a dict.

        Goes straight to the provider: no batching, no cache. Returns `obj`
        unchanged when there is nothing to do or the provider fails.
        """
        if not isinstance(obj, dict) or not keys:
            return obj

        target = normalize_language_code(target)
        source = normalize_language_code(source) if source else self.default_source
        if source == target:
            return obj

        try:
            return await self.provider.translate_object(obj, target, source, keys)
        except ProviderError as e:
            logger.warning(f"⚠️ Object translation failed ({source}->{target}): {e}")
        except Exception:
            logger.exception(f"Unexpected error in object translation ({source}->{target})")
        return obj

    async def invalidate(
        self,
        text: str,
        target: str | Language,
        source: str | Language | None = None,
    ) -> bool:
        """Drop a cached translation. Returns True if one was removed."""
        target = normalize_language_code(target)
        source = normalize_language_code(source) if source else self.default_source
        return await self.cache.delete(make_cache_key(text, target, source))

    async def is_cached(
        self,
        text: str,
        target: str | Language,
        source: str | Language | None = None,
    ) -> bool:
        target = normalize_language_code(target)
        source = normalize_language_code(source) if source else self.default_source
        return await self.cache.get(make_cache_key(text, target, source)) is not None


# =============================================================================
# Module-level convenience functions
# =============================================================================


_translator: Translator | None = None


def get_translator() -> Translator:
    """Get or create the process-wide translator instance."""
    global _translator
    if _translator is None:
        _translator = Translator.from_settings()
    return _translator


def set_translator(translator: Translator | None) -> None:
    """Replace the process-wide translator (None resets it)."""
    global _translator
    _translator = translator


def reset_translator() -> None:
    set_translator(None)


async def translate(
    text: str,
    target: str | Language,
    source: str | Language | None = None,
) -> str:
    """Translate text (convenience function)."""
    return await get_translator().translate(text, target, source)


async def translate_batch(
    texts: list[str],
    target: str | Language,
    source: str | Language | None = None,
) -> list[str]:
    """Translate multiple texts (convenience function)."""
    return await get_translator().translate_batch(texts, target, source)


async def translate_object(
    obj: dict[str, Any],
    target: str | Language,
    source: str | Language | None = None,
    keys: list[str] | None = None,
) -> dict[str, Any]:
    """Translate object values (convenience function)."""
    return await get_translator().translate_object(obj, target, source, keys)
