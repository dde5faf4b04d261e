"""Base provider interface for text completion backends."""

from __future__ import annotations

from abc import ABC, abstractmethod

__all__ = ["CompletionError", "CompletionProvider"]


class CompletionError(RuntimeError):
    """Raised when the completion backend fails to return text."""


class CompletionProvider(ABC):
    """Abstract interface for generative text providers.

    Implementations own no domain logic: a prompt goes in, text comes out,
    and any transport or provider failure surfaces as :class:`CompletionError`.
    """

    @abstractmethod
    async def complete(self, prompt: str) -> str:
        """Return generated text for the given prompt."""
