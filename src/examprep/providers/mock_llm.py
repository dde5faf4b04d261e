"""Mock completion provider for tests and offline development."""
from __future__ import annotations

from collections import deque
from typing import Deque, Iterable, List, Optional, Union

from .base import CompletionError, CompletionProvider

ScriptedReply = Union[str, BaseException]


class MockCompletionProvider(CompletionProvider):
    """Replay scripted replies in order, echoing the prompt once they run out.

    A scripted ``BaseException`` instance is raised instead of returned, which
    makes provider failures easy to simulate.
    """

    def __init__(self, replies: Optional[Iterable[ScriptedReply]] = None) -> None:
        self._replies: Deque[ScriptedReply] = deque(replies or [])
        self.prompts: List[str] = []

    def queue(self, *replies: ScriptedReply) -> None:
        self._replies.extend(replies)

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self._replies:
            return f"MOCK_ANSWER: {prompt[:100]}"
        reply = self._replies.popleft()
        if isinstance(reply, BaseException):
            raise reply
        return reply


class FailingCompletionProvider(CompletionProvider):
    """Provider that always fails, used when no backend is configured."""

    def __init__(self, reason: str = "No completion backend is configured") -> None:
        self.reason = reason

    async def complete(self, prompt: str) -> str:
        raise CompletionError(self.reason)


__all__ = ["FailingCompletionProvider", "MockCompletionProvider"]
