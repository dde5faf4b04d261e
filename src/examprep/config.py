"""Environment driven configuration for the exam preparation service."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_UPLOAD_BYTES = 25 * 1024 * 1024
DEFAULT_MIN_CONTENT_CHARS = 50


def _env_str(name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return default
    value = value.strip()
    return value or default


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        LOGGER.warning("Invalid integer for %s: %s; using default %s", name, value, default)
        return default


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        LOGGER.warning("Invalid float for %s: %s; using default %s", name, value, default)
        return default


@dataclass(slots=True)
class Settings:
    """Runtime settings resolved from the process environment."""

    llm_provider: str = "gemini"
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-1.5-flash"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    http_timeout_seconds: float = 30.0
    google_search_api_key: Optional[str] = None
    google_search_engine_id: Optional[str] = None
    youtube_api_key: Optional[str] = None
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    min_content_chars: int = DEFAULT_MIN_CONTENT_CHARS
    enforce_upload_policy: bool = True
    log_dir: str = "logs"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            llm_provider=(_env_str("LLM_PROVIDER", "gemini") or "gemini").lower(),
            gemini_api_key=_env_str("GEMINI_API_KEY"),
            gemini_model=_env_str("GEMINI_MODEL", "gemini-1.5-flash") or "gemini-1.5-flash",
            gemini_base_url=_env_str(
                "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
            )
            or "https://generativelanguage.googleapis.com/v1beta",
            http_timeout_seconds=_env_float("HTTP_TIMEOUT_SECONDS", 30.0),
            google_search_api_key=_env_str("GOOGLE_SEARCH_API_KEY"),
            google_search_engine_id=_env_str("GOOGLE_SEARCH_ENGINE_ID"),
            youtube_api_key=_env_str("YOUTUBE_API_KEY"),
            max_upload_bytes=_env_int("MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES),
            min_content_chars=_env_int("MIN_CONTENT_CHARS", DEFAULT_MIN_CONTENT_CHARS),
            enforce_upload_policy=_env_flag("ENFORCE_UPLOAD_POLICY", True),
            log_dir=_env_str("LOG_DIR", "logs") or "logs",
            log_level=(_env_str("LOG_LEVEL", "INFO") or "INFO").upper(),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return process-wide settings, resolved once."""

    return Settings.from_env()


__all__ = ["Settings", "get_settings", "DEFAULT_MAX_UPLOAD_BYTES", "DEFAULT_MIN_CONTENT_CHARS"]
