"""
Translation provider clients.

A provider takes an ordered list of texts plus a language pair and
returns an equal-length list of translations, position for position.
Anything else is a protocol violation and raises `MalformedResponse`.
"""

from __future__ import annotations

import copy
import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from lingobatch.config import Settings

logger = logging.getLogger(__name__)


# =============================================================================
# Errors
# =============================================================================


class ProviderError(Exception):
    """Base error for provider calls."""


class NetworkError(ProviderError):
    """Provider unreachable or returned a non-success status."""


class RateLimited(NetworkError):
    """Provider answered 429."""


class MalformedResponse(ProviderError):
    """Response is missing the translations, or has the wrong number of them."""


# =============================================================================
# Provider Interface
# =============================================================================


class TranslationProvider(ABC):
    """Remote translation service."""

    @abstractmethod
    async def translate_batch(
        self,
        texts: list[str],
        target_lang: str,
        source_lang: str,
    ) -> list[str]:
        """Translate texts, preserving order and length."""
        pass

    @abstractmethod
    async def translate_object(
        self,
        obj: dict[str, Any],
        target_lang: str,
        source_lang: str,
        keys: list[str],
    ) -> dict[str, Any]:
        """Return a copy of `obj` with the values under `keys` translated."""
        pass

    async def aclose(self) -> None:
        """Release network resources."""


def _check_length(translations: Any, texts: list[str]) -> list[str]:
    if not isinstance(translations, list):
        raise MalformedResponse("Response has no translations array")
    if len(translations) != len(texts):
        raise MalformedResponse(
            f"Expected {len(texts)} translations, got {len(translations)}"
        )
    return translations


# =============================================================================
# HTTP Provider (batch/object endpoints)
# =============================================================================


class HttpTranslationProvider(TranslationProvider):
    """
    Client for a translation backend speaking the envelope protocol.

    Endpoints:
        POST {base_url}/translate/batch
            {texts, targetLang, sourceLang} -> {success, data: {translations}}
        POST {base_url}/translate/object
            {obj, targetLang, sourceLang, keysToTranslate} -> {success, data: {translation}}

    429 responses are retried with exponential backoff.
    """

    batch_path = "/translate/batch"
    object_path = "/translate/object"

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        timeout: float = 10.0,
        max_attempts: int = 3,
        backoff_seconds: float = 1.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url
        self.api_key = api_key
        self.timeout = timeout
        self.max_attempts = max_attempts
        self.backoff_seconds = backoff_seconds
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            headers = {"Authorization": f"Bearer {self.api_key}"} if self.api_key else {}
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=headers,
                transport=self._transport,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _post_once(
        self,
        url: str,
        payload: dict[str, Any],
        params: dict[str, str] | None = None,
    ) -> Any:
        try:
            response = await self.client.post(url, json=payload, params=params)
        except httpx.HTTPError as e:
            raise NetworkError(f"Provider unreachable: {e}") from e

        if response.status_code == 429:
            raise RateLimited("Provider rate limit hit (429)")
        if not response.is_success:
            raise NetworkError(f"Provider returned {response.status_code}: {response.text[:200]}")

        try:
            return response.json()
        except ValueError as e:
            raise MalformedResponse("Provider response is not JSON") from e

    async def _post(
        self,
        url: str,
        payload: dict[str, Any],
        params: dict[str, str] | None = None,
    ) -> Any:
        """POST with retry on 429."""
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.backoff_seconds, max=10),
            retry=retry_if_exception_type(RateLimited),
            before_sleep=lambda state: logger.warning(
                f"Rate limited by provider, retry {state.attempt_number}/{self.max_attempts}"
            ),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                body = await self._post_once(url, payload, params)
        return body

    @staticmethod
    def _unwrap(body: Any) -> dict[str, Any]:
        if not isinstance(body, dict):
            raise MalformedResponse("Provider response is not an object")
        if not body.get("success"):
            raise NetworkError(f"Provider reported failure: {body.get('message', 'unknown error')}")
        data = body.get("data")
        if not isinstance(data, dict):
            raise MalformedResponse("Provider response has no data")
        return data

    async def translate_batch(
        self,
        texts: list[str],
        target_lang: str,
        source_lang: str,
    ) -> list[str]:
        if not texts:
            return []

        body = await self._post(
            self.batch_path,
            {"texts": texts, "targetLang": target_lang, "sourceLang": source_lang},
        )
        return _check_length(self._unwrap(body).get("translations"), texts)

    async def translate_object(
        self,
        obj: dict[str, Any],
        target_lang: str,
        source_lang: str,
        keys: list[str],
    ) -> dict[str, Any]:
        body = await self._post(
            self.object_path,
            {
                "obj": obj,
                "targetLang": target_lang,
                "sourceLang": source_lang,
                "keysToTranslate": keys,
            },
        )
        translation = self._unwrap(body).get("translation")
        if not isinstance(translation, dict):
            raise MalformedResponse("Object translation missing from response")
        return translation


# =============================================================================
# Google Cloud Translation v2
# =============================================================================


class GoogleTranslateProvider(HttpTranslationProvider):
    """
    Google Cloud Translation v2 (basic) client.

    The v2 API accepts a list of `q` values and answers with translations
    in the same order. Object translation is done client-side on top of
    `translate_batch`.
    """

    URL = "https://translation.googleapis.com/language/translate/v2"

    def __init__(self, api_key: str, **kwargs):
        super().__init__(base_url=self.URL, **kwargs)
        self.google_api_key = api_key

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout, transport=self._transport)
        return self._client

    async def translate_batch(
        self,
        texts: list[str],
        target_lang: str,
        source_lang: str,
    ) -> list[str]:
        if not texts:
            return []

        body = await self._post(
            self.URL,
            {"q": texts, "target": target_lang, "source": source_lang, "format": "text"},
            params={"key": self.google_api_key},
        )
        try:
            items = body["data"]["translations"]
        except (KeyError, TypeError) as e:
            raise MalformedResponse("Google response has no translations") from e

        items = _check_length(items, texts)
        try:
            return [item["translatedText"] for item in items]
        except (KeyError, TypeError) as e:
            raise MalformedResponse("Google translation item without translatedText") from e

    async def translate_object(
        self,
        obj: dict[str, Any],
        target_lang: str,
        source_lang: str,
        keys: list[str],
    ) -> dict[str, Any]:
        found: list[tuple[list[Any], str]] = []
        _collect_strings(obj, set(keys), [], found)

        result = copy.deepcopy(obj)
        if not found:
            return result

        translations = await self.translate_batch(
            [text for _, text in found], target_lang, source_lang
        )
        for (path, _), translated in zip(found, translations):
            _set_path(result, path, translated)
        return result


def _collect_strings(
    value: Any,
    keys: set[str],
    path: list[Any],
    found: list[tuple[list[Any], str]],
) -> None:
    """Find non-blank strings stored under any of `keys`, at any depth."""
    if isinstance(value, dict):
        items = value.items()
    elif isinstance(value, list):
        items = enumerate(value)
    else:
        return

    for key, child in items:
        child_path = [*path, key]
        if key in keys and isinstance(child, str) and child.strip():
            found.append((child_path, child))
        else:
            _collect_strings(child, keys, child_path, found)


def _set_path(target: Any, path: list[Any], value: Any) -> None:
    for key in path[:-1]:
        target = target[key]
    target[path[-1]] = value


# =============================================================================
# Factory
# =============================================================================


def create_provider(settings: Settings) -> TranslationProvider:
    """Create the provider client named by settings."""
    if settings.use_google:
        return GoogleTranslateProvider(
            api_key=settings.google_translate_api_key,
            timeout=settings.provider_timeout_seconds,
        )
    return HttpTranslationProvider(
        base_url=settings.provider_url,
        api_key=settings.provider_api_key,
        timeout=settings.provider_timeout_seconds,
    )
