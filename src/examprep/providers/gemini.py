"""Google Gemini completion provider using the Generative Language REST API."""
from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from ..http_client import http_session
from .base import CompletionError, CompletionProvider

LOGGER = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


class GeminiCompletionProvider(CompletionProvider):
    """Send prompts to ``models/{model}:generateContent``."""

    def __init__(
        self,
        api_key: str,
        *,
        model: str = "gemini-1.5-flash",
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        if not api_key:
            raise ValueError("api_key must be provided for the Gemini provider")
        self._api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    async def complete(self, prompt: str) -> str:
        payload = {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}
        try:
            async with http_session(self._client, self.timeout) as client:
                response = await client.post(self.endpoint, params={"key": self._api_key}, json=payload)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as error:
            LOGGER.warning("Gemini API returned status %s", error.response.status_code)
            raise CompletionError(f"Gemini API error: {error.response.status_code}") from error
        except (httpx.HTTPError, ValueError) as error:
            LOGGER.warning("Gemini API request failed: %s", error)
            raise CompletionError("Failed to generate response. Please try again.") from error

        return self._extract_text(body)

    @staticmethod
    def _extract_text(body: Any) -> str:
        try:
            candidates = body.get("candidates") or []
            parts = candidates[0]["content"]["parts"]
        except (AttributeError, IndexError, KeyError, TypeError) as error:
            feedback = body.get("promptFeedback") if isinstance(body, dict) else None
            raise CompletionError(f"Gemini returned no candidates (feedback: {feedback})") from error

        text = "".join(part.get("text", "") for part in parts if isinstance(part, dict))
        if not text.strip():
            raise CompletionError("Gemini returned an empty completion")
        return text


__all__ = ["DEFAULT_BASE_URL", "GeminiCompletionProvider"]
