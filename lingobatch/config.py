"""
Application configuration.

Loads settings from environment variables with sensible defaults.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # ==========================================================================
    # Environment
    # ==========================================================================

    environment: str = "development"
    log_level: str = "INFO"

    # ==========================================================================
    # API Server
    # ==========================================================================

    cors_origins: str = "http://localhost:3000,http://localhost:5173"

    # ==========================================================================
    # Translation Provider
    # ==========================================================================

    # "http" (batch/object endpoints) or "google" (Cloud Translation v2)
    translation_provider: str = "http"
    provider_url: str = "http://localhost:5000/api"
    provider_api_key: str = ""
    provider_timeout_seconds: float = 10.0
    google_translate_api_key: str = ""

    # ==========================================================================
    # Batching
    # ==========================================================================

    batch_window_ms: int = 100
    max_batch_size: int = 10
    min_request_interval_ms: int = 200

    # ==========================================================================
    # Cache
    # ==========================================================================

    # "sqlite" (file-backed) or "memory"
    cache_backend: str = "sqlite"
    cache_path: str = "./data/translations.db"
    cache_ttl_seconds: int = 60 * 60 * 24
    cache_sweep_interval_seconds: int = 60 * 60

    # ==========================================================================
    # Requests
    # ==========================================================================

    default_source_language: str = "en"
    max_request_texts: int = 100

    # ==========================================================================
    # Helpers
    # ==========================================================================

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def use_google(self) -> bool:
        """Whether Google Cloud Translation should back the provider."""
        return self.translation_provider == "google" and bool(self.google_translate_api_key)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
