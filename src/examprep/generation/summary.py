"""Tiered document summaries backed by the completion provider."""
from __future__ import annotations

import logging
import re
import time
from pathlib import PurePath
from typing import Any, Optional

from ..models import ArtifactSource, DocumentSummary
from ..prompt_builder import build_summary_prompt
from ..providers.base import CompletionError, CompletionProvider
from ..telemetry import emit_completion_request, emit_completion_result, emit_fallback_event
from ..tiers import Tier, count_words, estimate_pages, estimate_read_time, tier_for_pages
from .fallbacks import fallback_summary_text
from .parsing import ParseOutcome, coerce_string_list, coerce_text, parse_json_object

LOGGER = logging.getLogger(__name__)

DEFAULT_SUMMARY_TEXT = "Summary could not be generated."

_WORD_START = re.compile(r"\b\w")


def title_from_file_name(file_name: str) -> str:
    """Turn ``intro_to-biology.pdf`` into ``Intro To Biology``."""

    stem = PurePath(file_name or "").name
    if "." in stem.lstrip("."):
        stem = stem.rsplit(".", 1)[0]
    spaced = re.sub(r"[-_]", " ", stem).strip()
    if not spaced:
        return "Untitled Document"
    return _WORD_START.sub(lambda match: match.group(0).upper(), spaced)


def _read_time(value: Any, word_count: int) -> int:
    if isinstance(value, bool):
        return estimate_read_time(word_count)
    if isinstance(value, int) and value >= 0:
        return value
    if isinstance(value, float) and value.is_integer() and value >= 0:
        return int(value)
    return estimate_read_time(word_count)


class SummaryGenerator:
    """Produce a :class:`DocumentSummary` sized to the document's length tier.

    The generator never raises for generation problems. Completion failures and
    unusable responses resolve to the canned summary for the same tier, tagged
    ``ArtifactSource.FALLBACK``.
    """

    def __init__(self, completion: CompletionProvider) -> None:
        self._completion = completion

    async def summarize(self, content: str, display_name: str) -> DocumentSummary:
        word_count = count_words(content)
        pages = estimate_pages(word_count)
        tier = tier_for_pages(pages)
        prompt = build_summary_prompt(content, tier, pages)

        emit_completion_request(operation="summary", prompt=prompt)
        started = time.perf_counter()
        try:
            response = await self._completion.complete(prompt)
        except CompletionError as error:
            LOGGER.warning("Summary completion failed for %s: %s", display_name, error)
            return self._fallback(display_name, tier, word_count, reason=str(error))
        emit_completion_result(
            operation="summary",
            duration_ms=(time.perf_counter() - started) * 1000.0,
            response=response,
        )

        outcome = parse_json_object(response)
        if not outcome.ok:
            LOGGER.warning("Summary response for %s was malformed: %s", display_name, outcome.error)
            return self._fallback(display_name, tier, word_count, reason=outcome.error or "malformed")
        return self._from_payload(outcome, display_name, word_count)

    @staticmethod
    def _from_payload(outcome: ParseOutcome, display_name: str, word_count: int) -> DocumentSummary:
        payload = outcome.value or {}
        return DocumentSummary(
            title=coerce_text(payload.get("title")) or title_from_file_name(display_name),
            summary=coerce_text(payload.get("summary")) or DEFAULT_SUMMARY_TEXT,
            highlights=coerce_string_list(payload.get("highlights")),
            key_topics=coerce_string_list(payload.get("keyTopics")),
            estimated_read_time=_read_time(payload.get("estimatedReadTime"), word_count),
            source=ArtifactSource.AI,
        )

    @staticmethod
    def _fallback(
        display_name: str,
        tier: Tier,
        word_count: int,
        *,
        reason: Optional[str] = None,
    ) -> DocumentSummary:
        emit_fallback_event(operation="summary", reason=reason or "unknown")
        template = fallback_summary_text(tier.label)
        return DocumentSummary(
            title=title_from_file_name(display_name),
            summary=template.summary,
            highlights=list(template.highlights),
            key_topics=list(template.key_topics),
            estimated_read_time=estimate_read_time(word_count),
            source=ArtifactSource.FALLBACK,
        )


__all__ = ["DEFAULT_SUMMARY_TEXT", "SummaryGenerator", "title_from_file_name"]
