"""Lexical checks for generated Mermaid flowcharts.

This is a scanner, not a parser: it rejects output that is obviously broken
(truncated nodes, nested shapes, connector debris) and accepts anything that
is balanced and has at least one edge.
"""
from __future__ import annotations

import re
from typing import Iterable, List

GRAMMAR_KEYWORDS = ("flowchart", "graph")

INVALID_SHAPE_NESTING = (
    re.compile(r"\[\(\("),
    re.compile(r"\)\)\]"),
    re.compile(r"\{\["),
    re.compile(r"\]\}"),
    re.compile(r"\[\{"),
    re.compile(r"\}\]"),
    re.compile(r"\(\(\["),
    re.compile(r"\]\)\)"),
    re.compile(r"\(\(\{"),
    re.compile(r"\}\)\)"),
)

MALFORMED_CONNECTORS = (
    re.compile(r"---+\^"),
    re.compile(r"===+\^"),
    re.compile(r"\^\s*$"),
    re.compile(r"\s---+\s"),
    re.compile(r"\s===+\s"),
    re.compile(r"\|\s*---"),
    re.compile(r"---\s*\|"),
)

CONNECTOR_TOKENS = ("-->", "---", "-.->", "==>", "<--", "<|--")

_BRACKET_PAIRS = (("[", "]"), ("{", "}"), ("(", ")"))
_UNCLOSED_OPENERS = (("[", "]"), ("{", "}"), ("((", "))"))


class DiagramValidationError(ValueError):
    """Raised when generated diagram text fails a structural check."""

    def __init__(self, reason: str, line: str | None = None) -> None:
        message = reason if line is None else f"{reason}: {line!r}"
        super().__init__(message)
        self.reason = reason
        self.line = line


def _significant_lines(source: str) -> List[str]:
    return [line.strip() for line in source.splitlines() if line.strip()]


def starts_with_keyword(text: str) -> bool:
    lowered = text.lower()
    return any(lowered.startswith(keyword) for keyword in GRAMMAR_KEYWORDS)


def _check_line(line: str) -> None:
    for pattern in INVALID_SHAPE_NESTING:
        if pattern.search(line):
            raise DiagramValidationError("nested node shapes", line)
    for pattern in MALFORMED_CONNECTORS:
        if pattern.search(line):
            raise DiagramValidationError("malformed connector", line)
    for opening, closing in _BRACKET_PAIRS:
        if line.count(opening) != line.count(closing):
            raise DiagramValidationError(f"unbalanced {opening}{closing}", line)
    for opening, closing in _UNCLOSED_OPENERS:
        if opening in line and closing not in line:
            raise DiagramValidationError(f"unclosed {opening}", line)


def _has_connector(lines: Iterable[str]) -> bool:
    return any(token in line for line in lines for token in CONNECTOR_TOKENS)


def validate_diagram(source: str) -> None:
    """Raise :class:`DiagramValidationError` unless ``source`` looks renderable."""

    lines = _significant_lines(source or "")
    if len(lines) < 2:
        raise DiagramValidationError("diagram needs a header and at least one statement")
    if not starts_with_keyword(lines[0]):
        raise DiagramValidationError("diagram must start with 'flowchart' or 'graph'", lines[0])

    for line in lines[1:]:
        if line.startswith("%%"):
            continue
        _check_line(line)

    if not _has_connector(lines):
        raise DiagramValidationError("diagram has no connections")


def is_valid_diagram(source: str) -> bool:
    try:
        validate_diagram(source)
    except DiagramValidationError:
        return False
    return True


__all__ = [
    "CONNECTOR_TOKENS",
    "DiagramValidationError",
    "GRAMMAR_KEYWORDS",
    "is_valid_diagram",
    "starts_with_keyword",
    "validate_diagram",
]
