"""
Tests for the HTTP provider clients, against httpx mock transports.
"""

import json

import httpx
import pytest

from lingobatch.config import Settings
from lingobatch.i18n.provider import (
    GoogleTranslateProvider,
    HttpTranslationProvider,
    MalformedResponse,
    NetworkError,
    create_provider,
)


def envelope(data, success=True):
    return {"success": success, "message": "ok", "data": data}


def make_http_provider(handler, **kwargs) -> HttpTranslationProvider:
    return HttpTranslationProvider(
        "http://provider.test/api",
        transport=httpx.MockTransport(handler),
        backoff_seconds=0,
        **kwargs,
    )


# =============================================================================
# HttpTranslationProvider
# =============================================================================


class TestHttpTranslationProvider:
    @pytest.mark.asyncio
    async def test_batch_request_and_response(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            body = json.loads(request.content)
            return httpx.Response(200, json=envelope({
                "translations": [f"<{t}>" for t in body["texts"]],
            }))

        provider = make_http_provider(handler, api_key="secret")
        result = await provider.translate_batch(["apple", "banana"], "fr", "en")
        await provider.aclose()

        assert result == ["<apple>", "<banana>"]
        assert seen[0].url == "http://provider.test/api/translate/batch"
        assert json.loads(seen[0].content) == {
            "texts": ["apple", "banana"],
            "targetLang": "fr",
            "sourceLang": "en",
        }
        assert seen[0].headers["Authorization"] == "Bearer secret"

    @pytest.mark.asyncio
    async def test_empty_batch_makes_no_request(self):
        def handler(request):
            raise AssertionError("should not be called")

        assert await make_http_provider(handler).translate_batch([], "fr", "en") == []

    @pytest.mark.asyncio
    async def test_length_mismatch_is_malformed(self):
        provider = make_http_provider(
            lambda r: httpx.Response(200, json=envelope({"translations": ["only one"]}))
        )
        with pytest.raises(MalformedResponse):
            await provider.translate_batch(["a", "b", "c"], "fr", "en")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [
        envelope({}),
        envelope({"translations": "nope"}),
        envelope(None),
        ["not", "an", "object"],
    ])
    async def test_missing_translations_is_malformed(self, body):
        provider = make_http_provider(lambda r: httpx.Response(200, json=body))
        with pytest.raises(MalformedResponse):
            await provider.translate_batch(["a"], "fr", "en")

    @pytest.mark.asyncio
    async def test_non_json_is_malformed(self):
        provider = make_http_provider(lambda r: httpx.Response(200, text="<html>"))
        with pytest.raises(MalformedResponse):
            await provider.translate_batch(["a"], "fr", "en")

    @pytest.mark.asyncio
    async def test_unsuccessful_envelope_is_network_error(self):
        provider = make_http_provider(
            lambda r: httpx.Response(200, json=envelope({"translations": ["x"]}, success=False))
        )
        with pytest.raises(NetworkError):
            await provider.translate_batch(["a"], "fr", "en")

    @pytest.mark.asyncio
    async def test_server_error_is_network_error(self):
        provider = make_http_provider(lambda r: httpx.Response(500, text="boom"))
        with pytest.raises(NetworkError):
            await provider.translate_batch(["a"], "fr", "en")

    @pytest.mark.asyncio
    async def test_connection_error_is_network_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(NetworkError):
            await make_http_provider(handler).translate_batch(["a"], "fr", "en")

    @pytest.mark.asyncio
    async def test_rate_limit_is_retried(self):
        attempts = []

        def handler(request):
            attempts.append(request)
            if len(attempts) == 1:
                return httpx.Response(429)
            return httpx.Response(200, json=envelope({"translations": ["x"]}))

        assert await make_http_provider(handler).translate_batch(["a"], "fr", "en") == ["x"]
        assert len(attempts) == 2

    @pytest.mark.asyncio
    async def test_rate_limit_gives_up(self):
        attempts = []

        def handler(request):
            attempts.append(request)
            return httpx.Response(429)

        with pytest.raises(NetworkError):
            await make_http_provider(handler, max_attempts=3).translate_batch(["a"], "fr", "en")
        assert len(attempts) == 3

    @pytest.mark.asyncio
    async def test_object_translation(self):
        def handler(request):
            body = json.loads(request.content)
            assert request.url.path == "/api/translate/object"
            assert body["keysToTranslate"] == ["name"]
            return httpx.Response(200, json=envelope({
                "translation": {**body["obj"], "name": "तांब्याची तार"},
            }))

        result = await make_http_provider(handler).translate_object(
            {"name": "Copper wire", "unit": "kg"}, "mr", "en", ["name"]
        )
        assert result == {"name": "तांब्याची तार", "unit": "kg"}

    @pytest.mark.asyncio
    async def test_object_translation_missing_is_malformed(self):
        provider = make_http_provider(lambda r: httpx.Response(200, json=envelope({})))
        with pytest.raises(MalformedResponse):
            await provider.translate_object({"name": "x"}, "mr", "en", ["name"])


# =============================================================================
# GoogleTranslateProvider
# =============================================================================


class TestGoogleTranslateProvider:
    @staticmethod
    def make(handler) -> GoogleTranslateProvider:
        return GoogleTranslateProvider(
            api_key="g-key",
            transport=httpx.MockTransport(handler),
            backoff_seconds=0,
        )

    @pytest.mark.asyncio
    async def test_batch(self):
        seen = []

        def handler(request):
            seen.append(request)
            body = json.loads(request.content)
            return httpx.Response(200, json={"data": {"translations": [
                {"translatedText": t.upper()} for t in body["q"]
            ]}})

        result = await self.make(handler).translate_batch(["a", "b"], "hi", "en")

        assert result == ["A", "B"]
        assert seen[0].url.params["key"] == "g-key"
        assert json.loads(seen[0].content) == {
            "q": ["a", "b"], "target": "hi", "source": "en", "format": "text",
        }

    @pytest.mark.asyncio
    async def test_malformed(self):
        provider = self.make(lambda r: httpx.Response(200, json={"error": "x"}))
        with pytest.raises(MalformedResponse):
            await provider.translate_batch(["a"], "hi", "en")

    @pytest.mark.asyncio
    async def test_object_translated_client_side(self):
        def handler(request):
            body = json.loads(request.content)
            return httpx.Response(200, json={"data": {"translations": [
                {"translatedText": f"[hi] {t}"} for t in body["q"]
            ]}})

        order = {
            "title": "Pickup",
            "count": 2,
            "items": [{"title": "Iron"}, {"title": "  "}, {"note": "keep"}],
            "meta": {"title": "Nested"},
        }
        result = await self.make(handler).translate_object(order, "hi", "en", ["title"])

        assert result == {
            "title": "[hi] Pickup",
            "count": 2,
            "items": [{"title": "[hi] Iron"}, {"title": "  "}, {"note": "keep"}],
            "meta": {"title": "[hi] Nested"},
        }
        assert order["title"] == "Pickup"


class TestCreateProvider:
    def test_http_by_default(self):
        assert type(create_provider(Settings())) is HttpTranslationProvider

    def test_google_when_configured(self):
        settings = Settings(translation_provider="google", google_translate_api_key="k")
        assert isinstance(create_provider(settings), GoogleTranslateProvider)

    def test_google_without_key_falls_back_to_http(self):
        settings = Settings(translation_provider="google")
        assert type(create_provider(settings)) is HttpTranslationProvider
