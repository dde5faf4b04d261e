"""Free-form study assistant answering questions and summarising videos."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .live_info import RealTimeInfoRouter
from .prompt_builder import build_tutor_prompt, build_video_summary_prompt
from .providers.base import CompletionError, CompletionProvider
from .video import VideoContentResolver

LOGGER = logging.getLogger(__name__)

VIDEO_UNAVAILABLE_MESSAGE = (
    "I was unable to retrieve information from this YouTube video. "
    "Please check the URL or try a different video."
)
VIDEO_ERROR_MESSAGE = (
    "I encountered an error while processing this YouTube video. The video might be private, "
    "unavailable, or there might be an issue with the YouTube API."
)
QUESTION_ERROR_MESSAGE = (
    "I apologize, but I encountered an error while processing your question. "
    "Please try rephrasing your question or try again later."
)


@dataclass(frozen=True, slots=True)
class AssistantReply:
    response: str
    is_video_link: bool = False
    video_title: Optional[str] = None
    has_live_info: bool = False


class AskMeService:
    """Route a chat message to the video summariser or the tutor prompt."""

    def __init__(
        self,
        completion: CompletionProvider,
        live_info: RealTimeInfoRouter,
        video: VideoContentResolver,
    ) -> None:
        self._completion = completion
        self._live_info = live_info
        self._video = video

    async def process_query(self, text: str) -> AssistantReply:
        if self._video.is_video_link(text):
            return await self._answer_video(text.strip())
        return await self._answer_question(text)

    async def _answer_video(self, url: str) -> AssistantReply:
        content = await self._video.resolve(url)
        if content is None:
            return AssistantReply(response=VIDEO_UNAVAILABLE_MESSAGE, is_video_link=True)
        try:
            summary = await self._completion.complete(build_video_summary_prompt(content.content))
        except CompletionError as error:
            LOGGER.warning("Video summary completion failed: %s", error)
            return AssistantReply(response=VIDEO_ERROR_MESSAGE, is_video_link=True)
        return AssistantReply(response=summary, is_video_link=True, video_title=content.title)

    async def _answer_question(self, text: str) -> AssistantReply:
        snippet: Optional[str] = None
        if self._live_info.needs_live_info(text):
            snippet = await self._live_info.fetch_snippet(text)
        try:
            response = await self._completion.complete(build_tutor_prompt(text, snippet))
        except CompletionError as error:
            LOGGER.warning("Tutor completion failed: %s", error)
            return AssistantReply(response=QUESTION_ERROR_MESSAGE)
        return AssistantReply(response=response, has_live_info=bool(snippet))


__all__ = [
    "AskMeService",
    "AssistantReply",
    "QUESTION_ERROR_MESSAGE",
    "VIDEO_ERROR_MESSAGE",
    "VIDEO_UNAVAILABLE_MESSAGE",
]
