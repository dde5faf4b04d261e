"""Completion provider exports and factory."""
from __future__ import annotations

import logging

from ..config import Settings
from .base import CompletionError, CompletionProvider
from .gemini import GeminiCompletionProvider
from .mock_llm import FailingCompletionProvider, MockCompletionProvider

LOGGER = logging.getLogger(__name__)


def create_completion_provider(settings: Settings) -> CompletionProvider:
    """Build the provider selected by ``LLM_PROVIDER``."""

    if settings.llm_provider == "mock":
        return MockCompletionProvider()
    if settings.llm_provider == "gemini":
        if settings.gemini_api_key:
            return GeminiCompletionProvider(
                settings.gemini_api_key,
                model=settings.gemini_model,
                base_url=settings.gemini_base_url,
                timeout=settings.http_timeout_seconds,
            )
        LOGGER.warning("GEMINI_API_KEY is not set; generation will use fallback artifacts")
        return FailingCompletionProvider("GEMINI_API_KEY is not configured")
    raise ValueError(f"Unknown LLM_PROVIDER: {settings.llm_provider}")


__all__ = [
    "CompletionError",
    "CompletionProvider",
    "FailingCompletionProvider",
    "GeminiCompletionProvider",
    "MockCompletionProvider",
    "create_completion_provider",
]
