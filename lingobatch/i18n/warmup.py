"""
Cache warming for translations.

Pre-translates static UI strings to priority languages so users never
hit a cold cache.

Run on:
- Deploy (recommended)
- Cron job, at least once per cache TTL (to keep entries fresh)

Usage:
    # Warm all priority languages
    await warm_translation_cache()

    # Warm specific languages
    await warm_translation_cache(languages=["hi", "ta"])

    # CLI
    python -m lingobatch.i18n.warmup
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any

import yaml

from lingobatch.config import get_settings
from lingobatch.i18n.languages import (
    Language,
    WARM_UP_LANGUAGES,
    get_language_name,
)
from lingobatch.i18n.translator import Translator, get_translator

logger = logging.getLogger(__name__)


# =============================================================================
# Content Loaders
# =============================================================================


def _flatten_strings(data: Any) -> list[str]:
    """Collect every string leaf from a YAML document (lists and nested maps)."""
    if isinstance(data, str):
        return [data]
    if isinstance(data, dict):
        return [s for value in data.values() for s in _flatten_strings(value)]
    if isinstance(data, list):
        return [s for value in data for s in _flatten_strings(value)]
    return []


def load_string_catalogs(strings_dir: str = "config/strings") -> list[str]:
    """Load UI strings from YAML catalogs (one file per screen or feature)."""
    strings: list[str] = []
    config_path = Path(strings_dir)

    if not config_path.exists():
        logger.warning(f"String catalog directory not found: {strings_dir}")
        return strings

    for yaml_file in sorted(config_path.glob("*.yaml")):
        try:
            with open(yaml_file, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Error loading {yaml_file}: {e}")
            continue

        strings.extend(_flatten_strings(data))
        logger.debug(f"Loaded {yaml_file.name}")

    return [s for s in strings if s and s.strip()]


# Common UI strings that should be pre-translated
UI_STRINGS = [
    # Navigation
    "Home",
    "Back",
    "Next",
    "Continue",
    "Cancel",
    "Save",
    "Submit",

    # Orders
    "Sell Scrap",
    "Schedule Pickup",
    "Order History",
    "Pickup Address",
    "Pickup Scheduled",
    "Order Completed",
    "Order Cancelled",

    # Prices
    "Today's Prices",
    "Price per kg",
    "Estimated Amount",

    # Wallet
    "Wallet",
    "Balance",
    "Withdraw",
    "Transaction History",

    # Account
    "Profile",
    "KYC Verification",
    "Upload Documents",
    "Verification Pending",
    "Verified",

    # Status
    "Loading...",
    "Saving...",
    "Saved",

    # Errors
    "Something went wrong",
    "Please try again",
    "Connection lost",
]


# =============================================================================
# Cache Warming
# =============================================================================


async def warm_translation_cache(
    languages: list[str | Language] | None = None,
    include_ui: bool = True,
    strings_dir: str | None = "config/strings",
    extra_texts: list[str] | None = None,
    source: str = "en",
    batch_size: int = 20,
    translator: Translator | None = None,
    verbose: bool = True,
) -> dict[str, Any]:
    """
    Pre-warm translation cache for priority languages.

    Args:
        languages: Languages to warm (defaults to WARM_UP_LANGUAGES)
        include_ui: Include built-in UI strings
        strings_dir: Path to YAML string catalogs (None to skip)
        extra_texts: Additional texts to warm
        source: Language the texts are written in
        batch_size: Texts handed to the translator per call
        translator: Translator to use (defaults to the process-wide one)
        verbose: Print progress

    Returns:
        Stats dict with counts
    """
    if languages is None:
        languages = WARM_UP_LANGUAGES

    lang_codes = [
        lang.value if isinstance(lang, Language) else str(lang)
        for lang in languages
    ]

    all_texts: list[str] = []
    if strings_dir:
        all_texts.extend(load_string_catalogs(strings_dir))
    if include_ui:
        all_texts.extend(UI_STRINGS)
    if extra_texts:
        all_texts.extend(extra_texts)

    # Deduplicate, keeping first-seen order
    all_texts = list(dict.fromkeys(t for t in all_texts if t and t.strip()))

    if verbose:
        print("=" * 60)
        print("🔥 TRANSLATION CACHE WARM-UP")
        print("=" * 60)
        print(f"\nTarget languages: {', '.join(lang_codes)}")
        print(f"Unique texts: {len(all_texts)} × {len(lang_codes)} languages")

    translator = translator or get_translator()

    stats = {
        "languages": len(lang_codes),
        "texts": len(all_texts),
        "translations": 0,
        "cached": 0,
        "untranslated": 0,
    }

    for lang in lang_codes:
        if verbose:
            print(f"\n🌍 Warming {get_language_name(lang)} ({lang})...")

        for i in range(0, len(all_texts), batch_size):
            batch = all_texts[i:i + batch_size]

            uncached = []
            for text in batch:
                if await translator.is_cached(text, lang, source):
                    stats["cached"] += 1
                else:
                    uncached.append(text)

            if uncached:
                results = await translator.translate_batch(uncached, target=lang, source=source)
                for text, result in zip(uncached, results):
                    if result == text:
                        stats["untranslated"] += 1
                    else:
                        stats["translations"] += 1

            if verbose:
                progress = min(i + batch_size, len(all_texts))
                print(f"   {progress}/{len(all_texts)} texts", end="\r")

        if verbose:
            print(f"   ✓ {lang} complete")

    if verbose:
        print("\n" + "=" * 60)
        print("✅ WARM-UP COMPLETE")
        print("=" * 60)
        print(f"   Already cached: {stats['cached']}")
        print(f"   New translations: {stats['translations']}")
        print(f"   Left untranslated: {stats['untranslated']}")

    return stats


# =============================================================================
# CLI Entry Point
# =============================================================================


def main():
    """Run cache warm-up from command line."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Warm translation cache for priority languages"
    )
    parser.add_argument(
        "--languages", "-l",
        nargs="+",
        help="Specific languages to warm (default: priority languages)"
    )
    parser.add_argument(
        "--all", "-a",
        action="store_true",
        help="Warm ALL supported languages (slow!)"
    )
    parser.add_argument(
        "--strings-dir",
        default="config/strings",
        help="Path to UI string YAML catalogs"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Minimal output"
    )

    args = parser.parse_args()

    settings = get_settings()
    logging.basicConfig(level=settings.log_level)

    if args.all:
        from lingobatch.i18n.languages import SUPPORTED_LANGUAGES
        languages = [lang for lang in SUPPORTED_LANGUAGES if lang.value != settings.default_source_language]
    else:
        languages = args.languages

    async def run() -> None:
        translator = Translator.from_settings(settings)
        try:
            await warm_translation_cache(
                languages=languages,
                strings_dir=args.strings_dir,
                source=settings.default_source_language,
                translator=translator,
                verbose=not args.quiet,
            )
        finally:
            await translator.close()

    asyncio.run(run())


if __name__ == "__main__":
    main()
