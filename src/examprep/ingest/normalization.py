"""Text normalisation utilities."""
from __future__ import annotations

import re
import unicodedata

_WHITESPACE_RE = re.compile(r"[ \t]+")
_MULTIPLE_NEWLINES_RE = re.compile(r"\n{3,}")


def normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def normalize_text(text: str) -> str:
    """Collapse whitespace noise into one trimmed, non-empty line per row.

    Total and idempotent: applying it twice yields the same string.
    """

    normalized = unicodedata.normalize("NFC", text)
    normalized = normalize_newlines(normalized)
    normalized = _WHITESPACE_RE.sub(" ", normalized)
    normalized = _MULTIPLE_NEWLINES_RE.sub("\n\n", normalized)
    lines = (line.strip() for line in normalized.split("\n"))
    return "\n".join(line for line in lines if line).strip()
