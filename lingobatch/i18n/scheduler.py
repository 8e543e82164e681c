"""
Request-batching scheduler.

Individual translation calls are collected for a short fixed window, split
by language pair, and sent to the provider as ordered batches. Dispatches
are spaced by a global minimum interval, because the provider has one
throughput budget for all language pairs.

Callers never see an error: if a batch fails, every request in it resolves
with its own original text, and nothing is cached.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Callable

from lingobatch.core.utils import monotonic_ms
from lingobatch.i18n.cache import TranslationCache, make_cache_key
from lingobatch.i18n.languages import normalize_language_code
from lingobatch.i18n.provider import MalformedResponse, ProviderError, TranslationProvider

logger = logging.getLogger(__name__)


# schedule(callback, delay_ms) -> handle with .cancel()
ScheduleFn = Callable[[Callable[[], None], float], Any]


def asyncio_schedule(callback: Callable[[], None], delay_ms: float) -> asyncio.TimerHandle:
    """Run `callback` on the running event loop after `delay_ms`."""
    loop = asyncio.get_running_loop()
    return loop.call_later(max(delay_ms, 0) / 1000, callback)


@dataclass
class TranslationRequest:
    """
    A queued translation, owned by the scheduler until resolved.

    The future holds the translation, or None when the request fell back.
    """

    text: str
    source_lang: str
    target_lang: str
    cache_key: str
    future: asyncio.Future = field(repr=False)

    @property
    def group_key(self) -> tuple[str, str]:
        return (self.source_lang, self.target_lang)


class BatchScheduler:
    """
    Coalesces translation calls into rate-limited provider batches.

    Usage:
        scheduler = BatchScheduler(provider, cache)
        hi = await scheduler.request_one("Hello", "hi", "en")
        texts = await scheduler.request_batch(["Sell", "Buy"], "ta")

    Lifecycle of a miss:
        1. The request joins the queue; the first one arms the batch window.
        2. When the window closes (or the queue holds `max_batch_size`
           requests) one processing cycle pulls up to `max_batch_size`
           requests, oldest first.
        3. The slice is grouped by (source, target); each group becomes one
           provider call, started no sooner than `min_request_interval_ms`
           after the previous one.
        4. Results are cached, then the waiting callers are resolved.

    Identical requests (same text and language pair) that arrive while one
    is queued or in flight share its result rather than being sent twice.
    """

    def __init__(
        self,
        provider: TranslationProvider,
        cache: TranslationCache,
        batch_window_ms: float = 100,
        max_batch_size: int = 10,
        min_request_interval_ms: float = 200,
        default_source: str = "en",
        schedule: ScheduleFn = asyncio_schedule,
        clock: Callable[[], float] = monotonic_ms,
    ):
        if max_batch_size < 1:
            raise ValueError("max_batch_size must be at least 1")

        self.provider = provider
        self.cache = cache
        self.batch_window_ms = batch_window_ms
        self.max_batch_size = max_batch_size
        self.min_request_interval_ms = min_request_interval_ms
        self.default_source = normalize_language_code(default_source)

        self._schedule = schedule
        self._clock = clock

        self._queue: list[TranslationRequest] = []
        self._inflight: dict[str, TranslationRequest] = {}
        self._timer: Any = None
        self._processing = False
        self._last_dispatch: float | None = None
        self._tasks: set[asyncio.Task] = set()

        self._stats = {
            "requests": 0,
            "cache_hits": 0,
            "coalesced": 0,
            "dispatches": 0,
            "fallbacks": 0,
        }

    @property
    def stats(self) -> dict[str, int]:
        return dict(self._stats)

    @property
    def pending_count(self) -> int:
        """Requests waiting for a processing cycle."""
        return len(self._queue)

    # =========================================================================
    # Public API
    # =========================================================================

    async def request_one(
        self,
        text: str,
        target_lang: str,
        source_lang: str | None = None,
    ) -> str:
        """
        Translate one text through the batch queue.

        Returns the translation, or `text` itself if translation is not
        needed or failed.
        """
        if not text or not text.strip():
            return text

        target = normalize_language_code(target_lang)
        source = normalize_language_code(source_lang) if source_lang else self.default_source
        if source == target:
            return text

        self._stats["requests"] += 1
        key = make_cache_key(text, target, source)

        cached = await self.cache.get(key)
        if cached:
            self._stats["cache_hits"] += 1
            return cached

        request = self._inflight.get(key)
        if request is None:
            request = TranslationRequest(
                text=text,
                source_lang=source,
                target_lang=target,
                cache_key=key,
                future=asyncio.get_running_loop().create_future(),
            )
            self._inflight[key] = request
            self._enqueue(request)
        else:
            self._stats["coalesced"] += 1

        # Shielded so one caller giving up does not cancel the shared result
        result = await asyncio.shield(request.future)
        # Coalesced callers may differ in whitespace; each falls back to its own text
        return text if result is None else result

    async def request_batch(
        self,
        texts: list[str],
        target_lang: str,
        source_lang: str | None = None,
    ) -> list[str]:
        """Translate several texts; results keep the input order."""
        if not texts:
            return []
        return list(
            await asyncio.gather(
                *(self.request_one(text, target_lang, source_lang) for text in texts)
            )
        )

    async def close(self) -> None:
        """Stop all timers and tasks; anything unresolved gets its original text."""
        self._cancel_timer()

        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

        self._queue.clear()
        for request in list(self._inflight.values()):
            self._fall_back_one(request)

    # =========================================================================
    # Queue and timer
    # =========================================================================

    def _enqueue(self, request: TranslationRequest) -> None:
        self._queue.append(request)

        if len(self._queue) >= self.max_batch_size:
            self._cancel_timer()
            self._spawn(self._process_queue())
        else:
            self._arm_timer()

    def _arm_timer(self) -> None:
        # Fixed window: later arrivals never push it back
        if self._timer is None:
            self._timer = self._schedule(self._on_timer, self.batch_window_ms)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _on_timer(self) -> None:
        self._timer = None
        self._spawn(self._process_queue())

    def _spawn(self, coro) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _sleep(self, delay_ms: float) -> None:
        future = asyncio.get_running_loop().create_future()

        def wake() -> None:
            if not future.done():
                future.set_result(None)

        handle = self._schedule(wake, delay_ms)
        try:
            await future
        except asyncio.CancelledError:
            handle.cancel()
            raise

    # =========================================================================
    # Processing cycle
    # =========================================================================

    async def _process_queue(self) -> None:
        if self._processing or not self._queue:
            return

        self._processing = True
        try:
            batch = self._queue[: self.max_batch_size]
            del self._queue[: self.max_batch_size]

            groups: dict[tuple[str, str], list[TranslationRequest]] = {}
            for request in batch:
                groups.setdefault(request.group_key, []).append(request)

            for (source, target), requests in groups.items():
                await self._wait_for_dispatch_slot()
                self._spawn(self._dispatch(source, target, requests))
        finally:
            self._processing = False

        if self._queue:
            self._cancel_timer()
            self._spawn(self._process_queue())

    async def _wait_for_dispatch_slot(self) -> None:
        """Delay until the global minimum interval since the last dispatch has passed."""
        if self._last_dispatch is not None:
            wait = self._last_dispatch + self.min_request_interval_ms - self._clock()
            if wait > 0:
                await self._sleep(wait)
        self._last_dispatch = self._clock()

    async def _dispatch(
        self,
        source: str,
        target: str,
        requests: list[TranslationRequest],
    ) -> None:
        texts = [request.text for request in requests]
        self._stats["dispatches"] += 1
        logger.debug(f"Dispatching {len(texts)} texts {source}->{target}")

        try:
            translations = await self.provider.translate_batch(texts, target, source)
            if not isinstance(translations, list) or len(translations) != len(texts):
                got = len(translations) if isinstance(translations, list) else type(translations).__name__
                raise MalformedResponse(f"Expected {len(texts)} translations, got {got}")
        except ProviderError as e:
            logger.warning(f"⚠️ Batch translation failed ({source}->{target}, {len(texts)} texts): {e}")
            self._fall_back(requests)
            return
        except Exception:
            logger.exception(f"Unexpected error in batch translation ({source}->{target})")
            self._fall_back(requests)
            return

        for request, translation in zip(requests, translations):
            if isinstance(translation, str) and translation.strip():
                await self.cache.set(request.cache_key, translation, original=request.text)
                self._resolve(request, translation)
            else:
                self._fall_back_one(request)

    # =========================================================================
    # Resolution
    # =========================================================================

    def _resolve(self, request: TranslationRequest, value: str | None) -> None:
        if self._inflight.get(request.cache_key) is request:
            del self._inflight[request.cache_key]
        if not request.future.done():
            request.future.set_result(value)

    def _fall_back_one(self, request: TranslationRequest) -> None:
        self._stats["fallbacks"] += 1
        self._resolve(request, None)

    def _fall_back(self, requests: list[TranslationRequest]) -> None:
        for request in requests:
            self._fall_back_one(request)
