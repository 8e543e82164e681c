"""
Lingobatch - Main entry point.

Translates a handful of UI strings through the configured provider, then
repeats the same calls to show they are served from the cache.
"""

from __future__ import annotations

import asyncio
import logging
import sys

from lingobatch.config import get_settings
from lingobatch.i18n import Translator, get_language_name, is_rtl


DEMO_TEXTS = [
    "Sell Scrap",
    "Schedule Pickup",
    "Today's Prices",
    "Wallet",
]


async def demo(target: str = "hi"):
    """Run a demonstration of batching and caching."""
    settings = get_settings()
    translator = Translator.from_settings(settings)
    await translator.start()

    print("=" * 60)
    print("LINGOBATCH DEMO")
    print("=" * 60)
    print(f"Provider: {settings.translation_provider}  Cache: {settings.cache_backend}")
    print(f"Target: {get_language_name(target)} ({'RTL' if is_rtl(target) else 'LTR'})")
    print()

    try:
        for attempt in ("cold", "warm"):
            results = await translator.translate_batch(DEMO_TEXTS, target=target)
            print(f"{attempt} run:")
            for original, translated in zip(DEMO_TEXTS, results):
                print(f"  • {original} → {translated}")
            print(f"  stats: {translator.scheduler.stats}")
            print()
    finally:
        await translator.close()

    print("=" * 60)
    print("Demo complete!")
    print("=" * 60)


def main():
    """Main entry point."""
    logging.basicConfig(level=get_settings().log_level)
    target = sys.argv[1] if len(sys.argv) > 1 else "hi"
    asyncio.run(demo(target))


if __name__ == "__main__":
    main()
