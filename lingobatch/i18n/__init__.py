"""
Internationalization - batched, cached translation of UI text.

Design:
1. Coalesce near-simultaneous calls into a few provider batches
2. Space provider calls by a global minimum interval
3. Cache translations with a 24h TTL
4. Never fail - fall back to the original text

Usage:
    from lingobatch.i18n import translate, translate_batch

    # Simple
    text_hi = await translate("Schedule Pickup", target="hi")

    # Batch
    texts_ta = await translate_batch(["Wallet", "Balance"], target="ta")
"""

from lingobatch.i18n.translator import (
    Translator,
    get_translator,
    set_translator,
    reset_translator,
    translate,
    translate_batch,
    translate_object,
)
from lingobatch.i18n.scheduler import (
    BatchScheduler,
    TranslationRequest,
    asyncio_schedule,
)
from lingobatch.i18n.cache import (
    TranslationCache,
    make_cache_key,
)
from lingobatch.i18n.provider import (
    TranslationProvider,
    HttpTranslationProvider,
    GoogleTranslateProvider,
    ProviderError,
    NetworkError,
    MalformedResponse,
    create_provider,
)
from lingobatch.i18n.languages import (
    Language,
    SUPPORTED_LANGUAGES,
    WARM_UP_LANGUAGES,
    LTR_LANGUAGES,
    RTL_LANGUAGES,
    get_language_name,
    is_rtl,
    normalize_language_code,
    text_direction,
)
from lingobatch.i18n.warmup import warm_translation_cache

__all__ = [
    # Core translation
    "Translator",
    "get_translator",
    "set_translator",
    "reset_translator",
    "translate",
    "translate_batch",
    "translate_object",
    # Batching
    "BatchScheduler",
    "TranslationRequest",
    "asyncio_schedule",
    # Cache
    "TranslationCache",
    "make_cache_key",
    "warm_translation_cache",
    # Providers
    "TranslationProvider",
    "HttpTranslationProvider",
    "GoogleTranslateProvider",
    "ProviderError",
    "NetworkError",
    "MalformedResponse",
    "create_provider",
    # Language utilities
    "Language",
    "SUPPORTED_LANGUAGES",
    "WARM_UP_LANGUAGES",
    "LTR_LANGUAGES",
    "RTL_LANGUAGES",
    "get_language_name",
    "is_rtl",
    "normalize_language_code",
    "text_direction",
]
