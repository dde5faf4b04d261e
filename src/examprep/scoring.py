"""Pure scoring of submitted practice tests."""
from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Sequence

from .models import Question, TestConfig, TestResult

MAX_SCORE = 10


@dataclass(frozen=True, slots=True)
class ScoreTally:
    score: float
    correct: int
    incorrect: int
    unanswered: int

    @property
    def total(self) -> int:
        return self.correct + self.incorrect + self.unanswered


def _round_half_up(value: Decimal) -> float:
    return float(value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def score_test(questions: Sequence[Question], answers: Sequence[Optional[int]]) -> ScoreTally:
    """Tally answers against the questions' correct indices.

    Missing trailing answers count as unanswered; any index that is not the
    correct one (out of range included) counts as incorrect.
    """

    correct = incorrect = unanswered = 0
    for index, question in enumerate(questions):
        answer = answers[index] if index < len(answers) else None
        if answer is None:
            unanswered += 1
        elif answer == question.correct_answer:
            correct += 1
        else:
            incorrect += 1

    total = len(questions)
    if total == 0:
        return ScoreTally(score=0.0, correct=0, incorrect=0, unanswered=0)
    score = _round_half_up(Decimal(correct) * MAX_SCORE / Decimal(total))
    return ScoreTally(score=score, correct=correct, incorrect=incorrect, unanswered=unanswered)


def build_test_result(
    config: TestConfig,
    questions: Sequence[Question],
    answers: Sequence[Optional[int]],
    time_spent_seconds: int,
) -> TestResult:
    if len(answers) != len(questions):
        raise ValueError(
            f"Expected {len(questions)} answers, got {len(answers)}"
        )
    if len(questions) != config.question_count:
        raise ValueError(
            f"Test requires {config.question_count} questions, got {len(questions)}"
        )
    if time_spent_seconds < 0:
        raise ValueError("time_spent_seconds must not be negative")

    tally = score_test(questions, answers)
    return TestResult(
        document_id=config.document_id,
        config=config,
        questions=tuple(questions),
        answers=tuple(answers),
        score=tally.score,
        correct_answers=tally.correct,
        incorrect_answers=tally.incorrect,
        unanswered=tally.unanswered,
        time_spent_seconds=int(time_spent_seconds),
    )


__all__ = ["MAX_SCORE", "ScoreTally", "build_test_result", "score_test"]
