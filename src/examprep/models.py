"""Domain models shared by the ingestion, generation and scoring stages."""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional, Tuple


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ArtifactSource(str, Enum):
    """Whether an artifact was authored by the model or substituted locally."""

    AI = "ai"
    FALLBACK = "fallback"


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


@dataclass(slots=True)
class DocumentSummary:
    """Structured summary of an ingested document."""

    title: str
    summary: str
    highlights: List[str] = field(default_factory=list)
    key_topics: List[str] = field(default_factory=list)
    estimated_read_time: int = 0
    source: ArtifactSource = ArtifactSource.AI


@dataclass(frozen=True, slots=True)
class Document:
    """An uploaded document together with its extracted content.

    Instances are frozen: the content never changes once extracted. Attaching
    a summary produces a new instance via :meth:`with_summary`.
    """

    name: str
    media_type: str
    size_bytes: int
    content: str
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    uploaded_at: datetime = field(default_factory=_utcnow)
    summary: Optional[DocumentSummary] = None

    def with_summary(self, summary: DocumentSummary) -> "Document":
        return Document(
            name=self.name,
            media_type=self.media_type,
            size_bytes=self.size_bytes,
            content=self.content,
            id=self.id,
            uploaded_at=self.uploaded_at,
            summary=summary,
        )


@dataclass(frozen=True, slots=True)
class Question:
    """A multiple choice question with exactly four options."""

    id: str
    question: str
    options: Tuple[str, ...]
    correct_answer: int
    explanation: str
    topic: str


@dataclass(slots=True)
class QuestionSet:
    questions: List[Question]
    source: ArtifactSource


@dataclass(frozen=True, slots=True)
class TestConfig:
    """Settings for a practice test; the question count comes from the tier table."""

    __test__ = False  # keep pytest from collecting this class

    difficulty: Difficulty
    document_id: str
    question_count: int

    @classmethod
    def for_document(cls, document: Document, difficulty: Difficulty | str) -> "TestConfig":
        from .tiers import tier_for_content

        level = Difficulty(difficulty)
        tier = tier_for_content(document.content)
        return cls(difficulty=level, document_id=document.id, question_count=tier.question_count(level))


@dataclass(frozen=True, slots=True)
class TestResult:
    """Immutable record of a submitted practice test."""

    __test__ = False

    document_id: str
    config: TestConfig
    questions: Tuple[Question, ...]
    answers: Tuple[Optional[int], ...]
    score: float
    correct_answers: int
    incorrect_answers: int
    unanswered: int
    time_spent_seconds: int
    completed_at: datetime = field(default_factory=_utcnow)
    id: str = field(default_factory=lambda: uuid.uuid4().hex)


class DiagramKind(str, Enum):
    MERMAID = "mermaid"
    TEXT = "text"


class DiagramStructure(str, Enum):
    CLASSIFICATION = "classification"
    PROCESS = "process"


class DiagramOutput(str, Enum):
    VISUAL = "visual"
    TEXT = "text"


@dataclass(frozen=True, slots=True)
class FlowchartIntent:
    structure: DiagramStructure
    output: DiagramOutput


@dataclass(frozen=True, slots=True)
class FlowchartArtifact:
    """Generated diagram; never persisted."""

    kind: DiagramKind
    body: str
    prompt: str
    intent: FlowchartIntent
    source: ArtifactSource = ArtifactSource.AI


__all__ = [
    "ArtifactSource",
    "DiagramKind",
    "DiagramOutput",
    "DiagramStructure",
    "Difficulty",
    "Document",
    "DocumentSummary",
    "FlowchartArtifact",
    "FlowchartIntent",
    "Question",
    "QuestionSet",
    "TestConfig",
    "TestResult",
]
