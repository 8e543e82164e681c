"""
Shared fixtures: a scripted provider, a controllable clock and a manual timer.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any, Callable

import pytest

from lingobatch.i18n.provider import TranslationProvider
from lingobatch.i18n.translator import Translator
from lingobatch.storage.local import InMemoryCacheStorage


class FakeProvider(TranslationProvider):
    """
    Provider that translates from a lookup table and records every call.

    Unknown texts come back as "[target] text". Set `error` to make every
    call raise, or `respond` to control the returned list.
    """

    def __init__(self, table: dict[str, str] | None = None):
        self.table = table or {}
        self.calls: list[dict[str, Any]] = []
        self.object_calls: list[dict[str, Any]] = []
        self.error: Exception | None = None
        self.respond: Callable[[list[str]], Any] | None = None
        self.gates: dict[str, asyncio.Event] = {}
        self.closed = False

    async def translate_batch(self, texts, target_lang, source_lang):
        self.calls.append({
            "texts": list(texts),
            "target": target_lang,
            "source": source_lang,
            "at": time.monotonic() * 1000,
        })
        gate = self.gates.get(target_lang)
        if gate is not None:
            await gate.wait()
        if self.error is not None:
            raise self.error
        if self.respond is not None:
            return self.respond(texts)
        return [self.table.get(t, f"[{target_lang}] {t}") for t in texts]

    async def translate_object(self, obj, target_lang, source_lang, keys):
        self.object_calls.append({"obj": obj, "target": target_lang, "keys": keys})
        if self.error is not None:
            raise self.error
        return {
            k: (f"[{target_lang}] {v}" if k in keys and isinstance(v, str) else v)
            for k, v in obj.items()
        }

    async def aclose(self):
        self.closed = True

    @property
    def dispatched_texts(self) -> list[list[str]]:
        return [call["texts"] for call in self.calls]


class FakeClock:
    """Settable millisecond clock."""

    def __init__(self, now: float = 1_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


class ManualHandle:
    def __init__(self, callback, delay_ms):
        self.callback = callback
        self.delay_ms = delay_ms
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class ManualSchedule:
    """Timer capability that only fires when the test says so."""

    def __init__(self):
        self.handles: list[ManualHandle] = []

    def __call__(self, callback, delay_ms):
        handle = ManualHandle(callback, delay_ms)
        self.handles.append(handle)
        return handle

    @property
    def armed(self) -> list[ManualHandle]:
        return [h for h in self.handles if not h.cancelled]

    def fire_all(self) -> None:
        due = self.armed
        self.handles.clear()
        for handle in due:
            handle.callback()


async def settle(rounds: int = 5) -> None:
    """Let every ready task run until it blocks."""
    for _ in range(rounds):
        await asyncio.sleep(0)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def provider():
    """Provider knowing a few translations."""
    return FakeProvider({
        "Hello": "नमस्ते",
        "apple": "pomme",
        "banana": "banane",
        "cherry": "cerise",
    })


@pytest.fixture
def storage():
    """Empty in-memory cache backend."""
    return InMemoryCacheStorage()


@pytest.fixture
def cache_clock():
    return FakeClock()


@pytest.fixture
def make_translator(provider, storage, cache_clock):
    """Build a translator with short timings; keyword overrides pass through."""

    def _make(**overrides) -> Translator:
        options = {
            "provider": provider,
            "storage": storage,
            "batch_window_ms": 10,
            "max_batch_size": 10,
            "min_request_interval_ms": 0,
            "cache_clock": cache_clock,
        }
        options.update(overrides)
        return Translator(**options)

    return _make
