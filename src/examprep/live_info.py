"""Keyword routing and snippet lookup for questions about current events."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Protocol

import httpx

from .http_client import http_session

LOGGER = logging.getLogger(__name__)

LIVE_INFO_KEYWORDS = (
    "today",
    "current",
    "latest",
    "who is",
    "when is",
    "what is happening",
    "recent",
    "now",
    "this year",
    "new",
    "breaking",
    "update",
    "news",
)

GOOGLE_SEARCH_URL = "https://www.googleapis.com/customsearch/v1"

_LEADING_INTERROGATIVE = re.compile(
    r"^(?:what|how|when|where|why|who|which|can you|tell me|explain)\b", re.IGNORECASE
)
_TRAILING_QUESTION_MARKS = re.compile(r"\?+$")


class SearchError(RuntimeError):
    """Raised by search clients when a lookup cannot be completed."""


@dataclass(frozen=True, slots=True)
class SearchHit:
    title: Optional[str]
    snippet: Optional[str]
    link: Optional[str] = None


class WebSearchClient(Protocol):
    async def search(self, query: str, *, limit: int = 1) -> List[SearchHit]:
        ...


class GoogleCustomSearchClient:
    """Google Programmable Search (Custom Search JSON API) over httpx."""

    def __init__(
        self,
        api_key: str,
        engine_id: str,
        *,
        base_url: str = GOOGLE_SEARCH_URL,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._api_key = api_key
        self._engine_id = engine_id
        self.base_url = base_url
        self.timeout = timeout
        self._client = client

    async def search(self, query: str, *, limit: int = 1) -> List[SearchHit]:
        params = {"key": self._api_key, "cx": self._engine_id, "q": query, "num": limit}
        try:
            async with http_session(self._client, self.timeout) as client:
                response = await client.get(self.base_url, params=params)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as error:
            raise SearchError(f"Google Search API error: {error.response.status_code}") from error
        except (httpx.HTTPError, ValueError) as error:
            raise SearchError(f"Google Search request failed: {error}") from error

        items = payload.get("items") if isinstance(payload, dict) else None
        hits: List[SearchHit] = []
        for item in items or []:
            if not isinstance(item, dict):
                continue
            hits.append(SearchHit(title=item.get("title"), snippet=item.get("snippet"), link=item.get("link")))
        return hits


def needs_live_info(query: str) -> bool:
    lowered = (query or "").lower()
    return any(keyword in lowered for keyword in LIVE_INFO_KEYWORDS)


def clean_query(query: str) -> str:
    """Strip a leading interrogative and trailing question marks."""

    stripped = _LEADING_INTERROGATIVE.sub("", (query or "").strip(), count=1)
    stripped = _TRAILING_QUESTION_MARKS.sub("", stripped.strip())
    return stripped.strip()


class RealTimeInfoRouter:
    """Decide whether a query needs web context and fetch a single snippet for it."""

    def __init__(self, search_client: Optional[WebSearchClient] = None) -> None:
        self._search = search_client

    def needs_live_info(self, query: str) -> bool:
        return needs_live_info(query)

    async def fetch_snippet(self, query: str) -> Optional[str]:
        if self._search is None:
            LOGGER.debug("No search client configured; skipping live lookup")
            return None

        search_query = clean_query(query)
        if not search_query:
            return None
        LOGGER.info("Searching the web for %r", search_query)
        try:
            hits = await self._search.search(search_query, limit=1)
        except SearchError as error:
            LOGGER.warning("Live info lookup failed: %s", error)
            return None

        if not hits:
            return None
        first = hits[0]
        return first.snippet or first.title or None


__all__ = [
    "GoogleCustomSearchClient",
    "LIVE_INFO_KEYWORDS",
    "RealTimeInfoRouter",
    "SearchError",
    "SearchHit",
    "WebSearchClient",
    "clean_query",
    "needs_live_info",
]
