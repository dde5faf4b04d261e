"""Resolve YouTube links into text that can be summarised."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional, Protocol

import httpx

from .http_client import http_session

LOGGER = logging.getLogger(__name__)

YOUTUBE_VIDEOS_URL = "https://www.googleapis.com/youtube/v3/videos"

VIDEO_LINK_PATTERNS = (
    re.compile(r"(?:https?://)?(?:www\.)?youtube\.com/watch\?v=([a-zA-Z0-9_-]{11})"),
    re.compile(r"(?:https?://)?(?:www\.)?youtu\.be/([a-zA-Z0-9_-]{11})"),
    re.compile(r"(?:https?://)?(?:www\.)?youtube\.com/embed/([a-zA-Z0-9_-]{11})"),
    re.compile(r"(?:https?://)?(?:www\.)?youtube\.com/v/([a-zA-Z0-9_-]{11})"),
)

DESCRIPTION_NOTE = (
    "Note: This summary is based on the video's title and description, not a transcript. "
    "For more detailed analysis, provide the transcript or the key points to focus on."
)


class VideoLookupError(RuntimeError):
    """Raised by metadata clients when a video cannot be looked up."""


@dataclass(frozen=True, slots=True)
class VideoMetadata:
    title: str
    description: str
    channel: str


@dataclass(frozen=True, slots=True)
class VideoContent:
    content: str
    title: str


class VideoMetadataClient(Protocol):
    async def fetch(self, video_id: str) -> Optional[VideoMetadata]:
        ...


class YouTubeMetadataClient:
    """Read video snippets from the YouTube Data API v3."""

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = YOUTUBE_VIDEOS_URL,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self._client = client

    async def fetch(self, video_id: str) -> Optional[VideoMetadata]:
        params = {"part": "snippet", "id": video_id, "key": self._api_key}
        try:
            async with http_session(self._client, self.timeout) as client:
                response = await client.get(self.base_url, params=params)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as error:
            raise VideoLookupError(f"YouTube API error: {error.response.status_code}") from error
        except (httpx.HTTPError, ValueError) as error:
            raise VideoLookupError(f"YouTube request failed: {error}") from error

        items = payload.get("items") if isinstance(payload, dict) else None
        if not items:
            return None
        snippet = items[0].get("snippet") if isinstance(items[0], dict) else None
        if not isinstance(snippet, dict):
            return None
        return VideoMetadata(
            title=str(snippet.get("title") or ""),
            description=str(snippet.get("description") or ""),
            channel=str(snippet.get("channelTitle") or ""),
        )


def is_video_link(text: str) -> bool:
    candidate = (text or "").strip()
    return any(pattern.search(candidate) for pattern in VIDEO_LINK_PATTERNS)


def extract_video_id(url: str) -> Optional[str]:
    for pattern in VIDEO_LINK_PATTERNS:
        match = pattern.search(url or "")
        if match:
            return match.group(1)
    return None


def build_video_content(metadata: VideoMetadata) -> str:
    return (
        f"Video Title: {metadata.title}\n"
        f"Channel: {metadata.channel}\n\n"
        f"Video Description:\n{metadata.description}\n\n"
        f"{DESCRIPTION_NOTE}"
    )


class VideoContentResolver:
    """Turn a video link into a title/description surrogate for summarisation."""

    def __init__(self, metadata_client: Optional[VideoMetadataClient] = None) -> None:
        self._metadata = metadata_client

    def is_video_link(self, text: str) -> bool:
        return is_video_link(text)

    def extract_id(self, url: str) -> Optional[str]:
        return extract_video_id(url)

    async def resolve(self, url: str) -> Optional[VideoContent]:
        video_id = extract_video_id(url)
        if video_id is None:
            return None
        if self._metadata is None:
            LOGGER.warning("No video metadata client configured; cannot resolve %s", video_id)
            return None
        try:
            metadata = await self._metadata.fetch(video_id)
        except VideoLookupError as error:
            LOGGER.warning("Video lookup failed for %s: %s", video_id, error)
            return None
        if metadata is None:
            LOGGER.info("Video %s was not found", video_id)
            return None
        return VideoContent(content=build_video_content(metadata), title=metadata.title)


__all__ = [
    "DESCRIPTION_NOTE",
    "VideoContent",
    "VideoContentResolver",
    "VideoLookupError",
    "VideoMetadata",
    "VideoMetadataClient",
    "YouTubeMetadataClient",
    "build_video_content",
    "extract_video_id",
    "is_video_link",
]
