"""Length tiers that size summaries, highlights, topics and question counts."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from .models import Difficulty

WORDS_PER_PAGE = 250
WORDS_PER_MINUTE = 200


@dataclass(frozen=True, slots=True)
class Tier:
    """One row of the tier table.

    ``max_pages`` is inclusive; ``None`` marks the open-ended last row.
    Ranges are ``(low, high)`` targets communicated to the model.
    """

    max_pages: Optional[int]
    label: str
    length_label: str
    summary_lines: Tuple[int, int]
    highlight_count: Tuple[int, int]
    topic_count: Tuple[int, int]
    question_counts: Mapping[Difficulty, int]

    def question_count(self, difficulty: Difficulty | str) -> int:
        return self.question_counts[Difficulty(difficulty)]

    @staticmethod
    def describe(bounds: Tuple[int, int]) -> str:
        return f"{bounds[0]}-{bounds[1]}"


_SHORT_QUESTIONS = {Difficulty.EASY: 10, Difficulty.MEDIUM: 25, Difficulty.HARD: 30}
_MEDIUM_QUESTIONS = {Difficulty.EASY: 15, Difficulty.MEDIUM: 25, Difficulty.HARD: 30}
_LONG_QUESTIONS = {Difficulty.EASY: 15, Difficulty.MEDIUM: 30, Difficulty.HARD: 40}

TIER_TABLE: Tuple[Tier, ...] = (
    Tier(1, "concise", "1 page", (3, 5), (3, 5), (3, 4), _SHORT_QUESTIONS),
    Tier(2, "moderate", "2 pages", (5, 10), (5, 7), (4, 6), _SHORT_QUESTIONS),
    Tier(3, "moderate", "3 pages", (5, 10), (5, 7), (4, 6), _MEDIUM_QUESTIONS),
    Tier(5, "moderate", "5 pages", (5, 10), (5, 7), (4, 6), _MEDIUM_QUESTIONS),
    Tier(None, "comprehensive", "6+ pages", (15, 20), (7, 10), (6, 8), _LONG_QUESTIONS),
)


def count_words(content: str) -> int:
    return len(content.split())


def estimate_pages(word_count: int) -> int:
    return math.ceil(word_count / WORDS_PER_PAGE)


def estimate_read_time(word_count: int) -> int:
    return math.ceil(word_count / WORDS_PER_MINUTE)


def tier_for_pages(pages: int) -> Tier:
    for tier in TIER_TABLE:
        if tier.max_pages is None or pages <= tier.max_pages:
            return tier
    return TIER_TABLE[-1]


def tier_for_content(content: str) -> Tier:
    return tier_for_pages(estimate_pages(count_words(content)))


__all__ = [
    "TIER_TABLE",
    "Tier",
    "WORDS_PER_MINUTE",
    "WORDS_PER_PAGE",
    "count_words",
    "estimate_pages",
    "estimate_read_time",
    "tier_for_content",
    "tier_for_pages",
]
