"""Multiple choice question generation with sanitisation and padding."""
from __future__ import annotations

import dataclasses
import logging
import time
from typing import Any, List, Optional, Set, Tuple

from ..models import ArtifactSource, Difficulty, Question, QuestionSet
from ..prompt_builder import build_questions_prompt
from ..providers.base import CompletionError, CompletionProvider
from ..telemetry import emit_completion_request, emit_completion_result, emit_fallback_event
from ..tiers import tier_for_content
from .fallbacks import FALLBACK_QUESTIONS
from .parsing import coerce_text, parse_json_object

LOGGER = logging.getLogger(__name__)

PLACEHOLDER_OPTIONS = ("Option A", "Option B", "Option C", "Option D")
DEFAULT_EXPLANATION = "Explanation not available."
DEFAULT_TOPIC = "General"


def fallback_question(slot: int) -> Question:
    """Return the canned question for 1-based ``slot``, cycling through the templates."""

    template = FALLBACK_QUESTIONS[(slot - 1) % len(FALLBACK_QUESTIONS)]
    return Question(
        id=f"fallback_q_{slot}",
        question=f"{template.question} (Question {slot})",
        options=tuple(template.options),
        correct_answer=template.correct_answer,
        explanation=template.explanation,
        topic=template.topic,
    )


def fallback_questions(count: int, *, start: int = 1) -> List[Question]:
    return [fallback_question(slot) for slot in range(start, start + max(count, 0))]


def _options(value: Any) -> Tuple[str, ...]:
    if not isinstance(value, list) or len(value) != 4:
        return PLACEHOLDER_OPTIONS
    options = [coerce_text(option) for option in value]
    if any(option is None for option in options):
        return PLACEHOLDER_OPTIONS
    return tuple(option for option in options if option is not None)


def _correct_answer(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, int) and 0 <= value <= 3:
        return value
    return 0


def sanitize_question(raw: dict[str, Any], number: int, seen_ids: Set[str]) -> Question:
    """Coerce one parsed entry into a valid :class:`Question`.

    ``number`` is the 1-based position used for generated ids and text;
    ``seen_ids`` is updated so ids stay unique across the set.
    """

    question_id = coerce_text(raw.get("id"))
    if question_id is None or question_id in seen_ids:
        question_id = f"q_{number}"
    suffix = 1
    while question_id in seen_ids:
        suffix += 1
        question_id = f"q_{number}_{suffix}"
    seen_ids.add(question_id)

    return Question(
        id=question_id,
        question=coerce_text(raw.get("question")) or f"Question {number}",
        options=_options(raw.get("options")),
        correct_answer=_correct_answer(raw.get("correctAnswer")),
        explanation=coerce_text(raw.get("explanation")) or DEFAULT_EXPLANATION,
        topic=coerce_text(raw.get("topic")) or DEFAULT_TOPIC,
    )


class QuestionGenerator:
    """Generate exactly ``count`` questions for a document."""

    def __init__(self, completion: CompletionProvider) -> None:
        self._completion = completion

    async def generate_questions(
        self, content: str, difficulty: Difficulty | str, count: int
    ) -> List[Question]:
        question_set = await self.generate_question_set(content, difficulty, count)
        return question_set.questions

    async def generate_question_set(
        self, content: str, difficulty: Difficulty | str, count: int
    ) -> QuestionSet:
        if count <= 0:
            return QuestionSet(questions=[], source=ArtifactSource.AI)

        level = Difficulty(difficulty)
        tier = tier_for_content(content)
        prompt = build_questions_prompt(content, level, tier, count)

        emit_completion_request(operation="questions", prompt=prompt)
        started = time.perf_counter()
        try:
            response = await self._completion.complete(prompt)
        except CompletionError as error:
            LOGGER.warning("Question completion failed: %s", error)
            return self._fallback_set(count, reason=str(error))
        emit_completion_result(
            operation="questions",
            duration_ms=(time.perf_counter() - started) * 1000.0,
            response=response,
        )

        parsed = self._parse(response, count)
        if parsed is None:
            return self._fallback_set(count, reason="unusable questions payload")
        if not parsed:
            return self._fallback_set(count, reason="no usable questions in payload")

        if len(parsed) < count:
            LOGGER.info("Model returned %d of %d questions; padding with fallbacks", len(parsed), count)
            emit_fallback_event(operation="questions.padding", reason=f"{len(parsed)} of {count} returned")
            taken = {question.id for question in parsed}
            for filler in fallback_questions(count - len(parsed), start=len(parsed) + 1):
                filler_id = filler.id
                while filler_id in taken:
                    filler_id = f"{filler_id}_pad"
                taken.add(filler_id)
                parsed.append(dataclasses.replace(filler, id=filler_id))
        return QuestionSet(questions=parsed[:count], source=ArtifactSource.AI)

    @staticmethod
    def _parse(response: str, count: int) -> Optional[List[Question]]:
        outcome = parse_json_object(response)
        if not outcome.ok:
            LOGGER.warning("Question response was malformed: %s", outcome.error)
            return None
        entries = (outcome.value or {}).get("questions")
        if not isinstance(entries, list):
            LOGGER.warning("Question response is missing a 'questions' list")
            return None

        seen_ids: Set[str] = set()
        questions: List[Question] = []
        for entry in entries:
            if len(questions) >= count:
                break
            if not isinstance(entry, dict):
                continue
            questions.append(sanitize_question(entry, len(questions) + 1, seen_ids))
        return questions

    @staticmethod
    def _fallback_set(count: int, *, reason: str) -> QuestionSet:
        emit_fallback_event(operation="questions", reason=reason)
        return QuestionSet(questions=fallback_questions(count), source=ArtifactSource.FALLBACK)


__all__ = [
    "DEFAULT_EXPLANATION",
    "DEFAULT_TOPIC",
    "PLACEHOLDER_OPTIONS",
    "QuestionGenerator",
    "fallback_question",
    "fallback_questions",
    "sanitize_question",
]
