"""
FastAPI application for the translation engine.

Frontends call these routes instead of the provider directly, so every
client shares one batch queue, one rate limit and one cache.

Responses use the envelope `{success, message, data}`. The batch and
object routes match the provider protocol, so one instance can serve as
another instance's provider.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from lingobatch.config import Settings, get_settings
from lingobatch.core.utils import utc_now
from lingobatch.i18n import (
    SUPPORTED_LANGUAGES,
    Translator,
    get_language_name,
    reset_translator,
    set_translator,
    text_direction,
)

logger = logging.getLogger(__name__)


# =============================================================================
# App State
# =============================================================================


class AppState:
    """Application state - initialized at startup."""

    translator: Translator


state = AppState()


# =============================================================================
# Lifespan
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize and cleanup app resources."""
    settings = get_settings()
    logging.basicConfig(level=settings.log_level)

    state.translator = Translator.from_settings(settings)
    set_translator(state.translator)
    await state.translator.start()

    logger.info(f"🚀 Translation API starting in {settings.environment} mode")

    yield

    await state.translator.close()
    reset_translator()
    logger.info("👋 Translation API shutting down")


# =============================================================================
# App Setup
# =============================================================================


app = FastAPI(
    title="Lingobatch API",
    description="Batched, rate-limited and cached translation of UI text",
    version="0.1.0",
    lifespan=lifespan,
)


settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Dependencies
# =============================================================================


def get_translator_dependency() -> Translator:
    return state.translator


def _success(message: str, data: Any) -> dict[str, Any]:
    return {"success": True, "message": message, "data": data}


# =============================================================================
# Request Models
# =============================================================================


class TranslateRequest(BaseModel):
    model_config = {"populate_by_name": True}

    text: str
    target_lang: str = Field(alias="targetLang")
    source_lang: str | None = Field(default=None, alias="sourceLang")


class BatchTranslateRequest(BaseModel):
    model_config = {"populate_by_name": True}

    texts: list[str]
    target_lang: str = Field(alias="targetLang")
    source_lang: str | None = Field(default=None, alias="sourceLang")


class ObjectTranslateRequest(BaseModel):
    model_config = {"populate_by_name": True}

    obj: dict[str, Any]
    target_lang: str = Field(alias="targetLang")
    source_lang: str | None = Field(default=None, alias="sourceLang")
    keys_to_translate: list[str] = Field(alias="keysToTranslate")


# =============================================================================
# Health Check
# =============================================================================


@app.get("/health")
async def health_check(translator: Translator = Depends(get_translator_dependency)):
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "lingobatch-api",
        "timestamp": utc_now().isoformat(),
        "cache_available": translator.cache.available,
        "pending_requests": translator.scheduler.pending_count,
    }


# =============================================================================
# Translation
# =============================================================================


@app.post("/translate")
async def translate_text(
    request: TranslateRequest,
    translator: Translator = Depends(get_translator_dependency),
):
    """Translate one text through the shared batch queue."""
    if not request.text or not request.target_lang:
        raise HTTPException(status_code=400, detail="Text and targetLang are required")

    translation = await translator.translate(
        request.text,
        target=request.target_lang,
        source=request.source_lang,
    )

    return _success("Translation successful", {
        "original": request.text,
        "translation": translation,
        "sourceLang": request.source_lang,
        "targetLang": request.target_lang,
    })


@app.post("/translate/batch")
async def translate_batch(
    request: BatchTranslateRequest,
    translator: Translator = Depends(get_translator_dependency),
    settings: Settings = Depends(get_settings),
):
    """Translate several texts; `translations[i]` belongs to `texts[i]`."""
    if len(request.texts) > settings.max_request_texts:
        raise HTTPException(
            status_code=400,
            detail=f"Batch size exceeds limit (max {settings.max_request_texts})",
        )

    translations = await translator.translate_batch(
        request.texts,
        target=request.target_lang,
        source=request.source_lang,
    )

    return _success("Batch translation successful", {
        "original": request.texts,
        "translations": translations,
        "sourceLang": request.source_lang,
        "targetLang": request.target_lang,
    })


@app.post("/translate/object")
async def translate_object(
    request: ObjectTranslateRequest,
    translator: Translator = Depends(get_translator_dependency),
):
    """Translate the named keys of an object. Not cached."""
    translation = await translator.translate_object(
        request.obj,
        target=request.target_lang,
        source=request.source_lang,
        keys=request.keys_to_translate,
    )

    return _success("Object translation successful", {
        "original": request.obj,
        "translation": translation,
        "sourceLang": request.source_lang,
        "targetLang": request.target_lang,
    })


@app.get("/languages")
async def list_languages():
    """List all supported languages for translation."""
    return _success("Supported languages", {
        "languages": [
            {
                "code": lang.value,
                "name": get_language_name(lang.value),
                "direction": text_direction(lang.value),
            }
            for lang in SUPPORTED_LANGUAGES
        ]
    })


# =============================================================================
# Cache Management
# =============================================================================


@app.post("/cache/invalidate")
async def invalidate_translation(
    request: TranslateRequest,
    translator: Translator = Depends(get_translator_dependency),
):
    """Drop one cached translation so the next request refetches it."""
    removed = await translator.invalidate(
        request.text,
        target=request.target_lang,
        source=request.source_lang,
    )
    return _success("Cache entry invalidated" if removed else "Nothing cached", {"removed": removed})


@app.post("/cache/sweep")
async def sweep_cache(translator: Translator = Depends(get_translator_dependency)):
    """Remove expired translations now instead of waiting for the periodic sweep."""
    removed = await translator.cache.sweep()
    return _success(f"Removed {removed} expired translations", {"removed": removed})
