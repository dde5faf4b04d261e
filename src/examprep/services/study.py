from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..generation.questions import QuestionGenerator
from ..generation.summary import SummaryGenerator
from ..ingest.models import UploadedFile
from ..ingest.pipeline import IngestPipeline
from ..logging_config import AUDIT_LOGGER_NAME
from ..models import Difficulty, Document, Question, QuestionSet, TestConfig, TestResult
from ..scoring import build_test_result
from ..storage import DocumentRepository
from ..telemetry import emit_exception, traced_duration

LOGGER = logging.getLogger(__name__)
AUDIT_LOGGER = logging.getLogger(AUDIT_LOGGER_NAME)


class DocumentNotFoundError(LookupError):
    def __init__(self, document_id: str) -> None:
        super().__init__(f"Document {document_id} was not found")
        self.document_id = document_id


@dataclass(slots=True)
class PreparedTest:
    """Test configuration plus the questions generated for it."""

    config: TestConfig
    question_set: QuestionSet


class StudyService:
    """High level orchestration of the upload, summarise, test and score workflow."""

    def __init__(
        self,
        *,
        pipeline: IngestPipeline,
        summaries: SummaryGenerator,
        questions: QuestionGenerator,
        repository: DocumentRepository,
    ) -> None:
        self.pipeline = pipeline
        self.summaries = summaries
        self.questions = questions
        self.repository = repository

    async def upload_document(self, user_id: str, upload: UploadedFile) -> Document:
        with traced_duration("study.upload", file_name=upload.name, user_id=user_id):
            try:
                content = await self.pipeline.ingest(upload)
            except Exception as error:
                emit_exception(module=f"{__name__}.pipeline", error=error)
                raise
            summary = await self.summaries.summarize(content, upload.name)
            document = Document(
                name=upload.name,
                media_type=upload.media_type or "application/octet-stream",
                size_bytes=upload.size_bytes,
                content=content,
                summary=summary,
            )
            saved = await self.repository.save_document(user_id, document)
        AUDIT_LOGGER.info(
            {
                "event": "document.saved",
                "user_id": user_id,
                "document_id": saved.id,
                "summary_source": summary.source.value,
            }
        )
        return saved

    async def list_documents(self, user_id: str) -> List[Document]:
        return await self.repository.list_documents(user_id)

    async def get_document(self, user_id: str, document_id: str) -> Document:
        document = await self.repository.get_document(user_id, document_id)
        if document is None:
            raise DocumentNotFoundError(document_id)
        return document

    async def delete_document(self, user_id: str, document_id: str) -> bool:
        deleted = await self.repository.delete_document(user_id, document_id)
        if deleted:
            AUDIT_LOGGER.info({"event": "document.deleted", "user_id": user_id, "document_id": document_id})
        return deleted

    async def prepare_test(
        self, user_id: str, document_id: str, difficulty: Difficulty | str
    ) -> PreparedTest:
        document = await self.get_document(user_id, document_id)
        config = TestConfig.for_document(document, difficulty)
        with traced_duration(
            "study.questions",
            document_id=document_id,
            difficulty=config.difficulty.value,
            count=config.question_count,
        ):
            question_set = await self.questions.generate_question_set(
                document.content, config.difficulty, config.question_count
            )
        return PreparedTest(config=config, question_set=question_set)

    async def submit_test(
        self,
        user_id: str,
        config: TestConfig,
        questions: Sequence[Question],
        answers: Sequence[Optional[int]],
        time_spent_seconds: int,
    ) -> TestResult:
        await self.get_document(user_id, config.document_id)
        result = build_test_result(config, questions, answers, time_spent_seconds)
        saved = await self.repository.save_test_result(user_id, result)
        LOGGER.info(
            "Test %s scored %.2f (%d/%d) for document %s",
            saved.id,
            saved.score,
            saved.correct_answers,
            len(saved.questions),
            saved.document_id,
        )
        return saved

    async def list_results(self, user_id: str) -> List[TestResult]:
        return await self.repository.list_test_results(user_id)


__all__ = ["DocumentNotFoundError", "PreparedTest", "StudyService"]
