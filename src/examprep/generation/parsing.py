"""Helpers for turning untrusted model output into typed values."""
from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, Optional

_FENCE_PATTERN = re.compile(r"```[A-Za-z0-9_-]*[ \t]*\n?")


@dataclass(frozen=True, slots=True)
class ParseOutcome:
    """Result of parsing a completion: either a JSON object or a malformed marker."""

    value: Optional[dict[str, Any]] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.value is not None

    @classmethod
    def malformed(cls, error: str) -> "ParseOutcome":
        return cls(value=None, error=error)


def strip_code_fences(text: str) -> str:
    """Remove Markdown code fences such as ```json or ```mermaid and trim the result."""

    return _FENCE_PATTERN.sub("", text or "").strip()


def parse_json_object(text: str) -> ParseOutcome:
    cleaned = strip_code_fences(text)
    if not cleaned:
        return ParseOutcome.malformed("empty response")
    try:
        payload = json.loads(cleaned)
    except ValueError as error:
        return ParseOutcome.malformed(f"invalid JSON: {error}")
    if not isinstance(payload, dict):
        return ParseOutcome.malformed(f"expected a JSON object, got {type(payload).__name__}")
    return ParseOutcome(value=payload)


def coerce_text(value: Any) -> Optional[str]:
    """Return a stripped string for scalar values, ``None`` for blanks and containers."""

    if value is None or isinstance(value, (dict, list)):
        return None
    text = str(value).strip()
    return text or None


def coerce_string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    items: list[str] = []
    for entry in value:
        text = coerce_text(entry)
        if text is not None:
            items.append(text)
    return items


__all__ = ["ParseOutcome", "coerce_string_list", "coerce_text", "parse_json_object", "strip_code_fences"]
