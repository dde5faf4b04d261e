"""API router exposing document, test, flowchart and assistant endpoints."""
from __future__ import annotations

import re
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile
from pydantic import BaseModel, Field

from ..assistant import AskMeService
from ..auth import User, current_user
from ..generation.diagram_validation import DiagramValidationError, validate_diagram
from ..generation.flowchart import FlowchartGenerator, classify_intent, export_diagram
from ..ingest.errors import (
    ExtractionError,
    FileTooLargeError,
    IngestError,
    TooShortError,
    UnsupportedFormatError,
)
from ..ingest.models import UploadedFile
from ..ingest.pipeline import IngestPipelineConfig
from ..models import (
    ArtifactSource,
    DiagramKind,
    Difficulty,
    Document,
    FlowchartArtifact,
    Question,
    TestConfig,
    TestResult,
)
from ..scoring import score_test
from ..services.study import DocumentNotFoundError, StudyService
from .dependencies import get_ask_service, get_flowchart_generator, get_study_service

router = APIRouter(tags=["study"])

_FILENAME_SAFE_CHARS_RE = re.compile(r"[^A-Za-z0-9._-]+")


class SummaryPayload(BaseModel):
    title: str
    summary: str
    highlights: List[str]
    key_topics: List[str]
    estimated_read_time: int
    source: ArtifactSource


class DocumentResponse(BaseModel):
    """Document metadata returned to clients; content is included for review screens."""

    id: str
    name: str
    media_type: str
    size_bytes: int
    uploaded_at: datetime
    content: str
    summary: Optional[SummaryPayload] = None


class QuestionPayload(BaseModel):
    id: str
    question: str
    options: List[str] = Field(..., min_length=4, max_length=4)
    correct_answer: int = Field(..., ge=0, le=3)
    explanation: str = ""
    topic: str = ""


class CreateTestRequest(BaseModel):
    difficulty: Difficulty


class TestConfigPayload(BaseModel):
    difficulty: Difficulty
    document_id: str
    question_count: int


class PreparedTestResponse(BaseModel):
    config: TestConfigPayload
    questions: List[QuestionPayload]
    source: ArtifactSource


class SubmitTestRequest(BaseModel):
    document_id: str
    difficulty: Difficulty
    questions: List[QuestionPayload]
    answers: List[Optional[int]]
    time_spent_seconds: int = Field(0, ge=0)


class TestResultResponse(BaseModel):
    id: str
    document_id: str
    config: TestConfigPayload
    questions: List[QuestionPayload]
    answers: List[Optional[int]]
    score: float
    correct_answers: int
    incorrect_answers: int
    unanswered: int
    time_spent_seconds: int
    completed_at: datetime


class ScoreRequest(BaseModel):
    questions: List[QuestionPayload]
    answers: List[Optional[int]]


class ScoreResponse(BaseModel):
    score: float
    correct: int
    incorrect: int
    unanswered: int


class FlowchartRequest(BaseModel):
    prompt: str = Field(..., min_length=1, description="What the diagram should show.")


class FlowchartResponse(BaseModel):
    kind: DiagramKind
    body: str
    prompt: str
    structure: str
    output: str
    source: ArtifactSource


class FlowchartExportRequest(BaseModel):
    kind: DiagramKind
    body: str = Field(..., min_length=1)
    prompt: str = ""
    file_name: str = Field("flowchart", min_length=1, max_length=100)


class AskRequest(BaseModel):
    message: str = Field(..., min_length=1)


class AskResponse(BaseModel):
    response: str
    is_video_link: bool
    video_title: Optional[str] = None
    has_live_info: bool


def _ingest_http_error(error: IngestError) -> HTTPException:
    if isinstance(error, FileTooLargeError):
        return HTTPException(status_code=413, detail=str(error))
    if isinstance(error, UnsupportedFormatError):
        return HTTPException(status_code=415, detail=str(error))
    if isinstance(error, ExtractionError):
        return HTTPException(status_code=422, detail={"reason": error.reason.value, "message": error.message})
    if isinstance(error, TooShortError):
        return HTTPException(status_code=422, detail={"reason": "too_short", "message": str(error)})
    return HTTPException(status_code=400, detail=str(error))


def _serialise_document(document: Document) -> DocumentResponse:
    summary = None
    if document.summary is not None:
        summary = SummaryPayload(
            title=document.summary.title,
            summary=document.summary.summary,
            highlights=list(document.summary.highlights),
            key_topics=list(document.summary.key_topics),
            estimated_read_time=document.summary.estimated_read_time,
            source=document.summary.source,
        )
    return DocumentResponse(
        id=document.id,
        name=document.name,
        media_type=document.media_type,
        size_bytes=document.size_bytes,
        uploaded_at=document.uploaded_at,
        content=document.content,
        summary=summary,
    )


def _serialise_question(question: Question) -> QuestionPayload:
    return QuestionPayload(
        id=question.id,
        question=question.question,
        options=list(question.options),
        correct_answer=question.correct_answer,
        explanation=question.explanation,
        topic=question.topic,
    )


def _to_question(payload: QuestionPayload) -> Question:
    return Question(
        id=payload.id,
        question=payload.question,
        options=tuple(payload.options),
        correct_answer=payload.correct_answer,
        explanation=payload.explanation,
        topic=payload.topic,
    )


def _serialise_config(config: TestConfig) -> TestConfigPayload:
    return TestConfigPayload(
        difficulty=config.difficulty,
        document_id=config.document_id,
        question_count=config.question_count,
    )


def _serialise_result(result: TestResult) -> TestResultResponse:
    return TestResultResponse(
        id=result.id,
        document_id=result.document_id,
        config=_serialise_config(result.config),
        questions=[_serialise_question(question) for question in result.questions],
        answers=list(result.answers),
        score=result.score,
        correct_answers=result.correct_answers,
        incorrect_answers=result.incorrect_answers,
        unanswered=result.unanswered,
        time_spent_seconds=result.time_spent_seconds,
        completed_at=result.completed_at,
    )


def _not_found(error: DocumentNotFoundError) -> HTTPException:
    return HTTPException(status_code=404, detail=str(error))


async def _read_upload(file: UploadFile, config: IngestPipelineConfig) -> bytes:
    """Read an upload, stopping one byte past the size limit when it is enforced."""

    if not config.enforce_upload_policy:
        return await file.read()
    limit = config.max_upload_bytes
    if file.size is not None and file.size > limit:
        raise FileTooLargeError(file.size, limit)
    data = await file.read(limit + 1)
    if len(data) > limit:
        raise FileTooLargeError(len(data), limit)
    return data


@router.post("/documents", response_model=DocumentResponse, status_code=201)
async def upload_document(
    file: UploadFile = File(...),
    user: User = Depends(current_user),
    service: StudyService = Depends(get_study_service),
) -> DocumentResponse:
    """Ingest and summarise an uploaded study document."""

    try:
        data = await _read_upload(file, service.pipeline.config)
    except IngestError as exc:
        raise _ingest_http_error(exc) from exc
    upload = UploadedFile(data=data, name=file.filename or "upload", media_type=file.content_type)
    try:
        document = await service.upload_document(user.id, upload)
    except IngestError as exc:
        raise _ingest_http_error(exc) from exc
    return _serialise_document(document)


@router.get("/documents", response_model=List[DocumentResponse])
async def list_documents(
    user: User = Depends(current_user),
    service: StudyService = Depends(get_study_service),
) -> List[DocumentResponse]:
    documents = await service.list_documents(user.id)
    return [_serialise_document(document) for document in documents]


@router.delete("/documents/{document_id}", status_code=204)
async def delete_document(
    document_id: str,
    user: User = Depends(current_user),
    service: StudyService = Depends(get_study_service),
) -> Response:
    """Delete a document together with its test results."""

    if not await service.delete_document(user.id, document_id):
        raise HTTPException(status_code=404, detail=f"Document {document_id} was not found")
    return Response(status_code=204)


@router.post("/documents/{document_id}/tests", response_model=PreparedTestResponse)
async def create_test(
    document_id: str,
    request: CreateTestRequest,
    user: User = Depends(current_user),
    service: StudyService = Depends(get_study_service),
) -> PreparedTestResponse:
    try:
        prepared = await service.prepare_test(user.id, document_id, request.difficulty)
    except DocumentNotFoundError as exc:
        raise _not_found(exc) from exc
    return PreparedTestResponse(
        config=_serialise_config(prepared.config),
        questions=[_serialise_question(question) for question in prepared.question_set.questions],
        source=prepared.question_set.source,
    )


@router.post("/tests/submit", response_model=TestResultResponse, status_code=201)
async def submit_test(
    request: SubmitTestRequest,
    user: User = Depends(current_user),
    service: StudyService = Depends(get_study_service),
) -> TestResultResponse:
    """Score a completed test and store the result."""

    if len(request.answers) != len(request.questions):
        raise HTTPException(status_code=422, detail="answers must have one entry per question")
    try:
        document = await service.get_document(user.id, request.document_id)
        config = TestConfig.for_document(document, request.difficulty)
        result = await service.submit_test(
            user.id,
            config,
            [_to_question(question) for question in request.questions],
            request.answers,
            request.time_spent_seconds,
        )
    except DocumentNotFoundError as exc:
        raise _not_found(exc) from exc
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return _serialise_result(result)


@router.get("/tests/results", response_model=List[TestResultResponse])
async def list_results(
    user: User = Depends(current_user),
    service: StudyService = Depends(get_study_service),
) -> List[TestResultResponse]:
    results = await service.list_results(user.id)
    return [_serialise_result(result) for result in results]


@router.post("/tests/score", response_model=ScoreResponse)
async def score(request: ScoreRequest) -> ScoreResponse:
    """Score answers without storing anything."""

    tally = score_test([_to_question(question) for question in request.questions], request.answers)
    return ScoreResponse(
        score=tally.score,
        correct=tally.correct,
        incorrect=tally.incorrect,
        unanswered=tally.unanswered,
    )


@router.post("/flowcharts", response_model=FlowchartResponse)
async def create_flowchart(
    request: FlowchartRequest,
    generator: FlowchartGenerator = Depends(get_flowchart_generator),
) -> FlowchartResponse:
    if not request.prompt.strip():
        raise HTTPException(status_code=422, detail="Prompt must not be empty")
    artifact = await generator.generate(request.prompt)
    return FlowchartResponse(
        kind=artifact.kind,
        body=artifact.body,
        prompt=artifact.prompt,
        structure=artifact.intent.structure.value,
        output=artifact.intent.output.value,
        source=artifact.source,
    )


@router.post("/flowcharts/export")
async def export_flowchart(request: FlowchartExportRequest) -> Response:
    """Return diagram text as a downloadable file."""

    if request.kind is DiagramKind.MERMAID:
        try:
            validate_diagram(request.body)
        except DiagramValidationError as exc:
            raise HTTPException(status_code=422, detail={"reason": exc.reason, "line": exc.line}) from exc
    artifact = FlowchartArtifact(
        kind=request.kind,
        body=request.body,
        prompt=request.prompt,
        intent=classify_intent(request.prompt),
    )
    base_name = _FILENAME_SAFE_CHARS_RE.sub("_", request.file_name).strip("._") or "flowchart"
    export = export_diagram(artifact, base_name=base_name)
    return Response(
        content=export.body,
        media_type=export.media_type,
        headers={"Content-Disposition": f'attachment; filename="{export.file_name}"'},
    )


@router.post("/ask", response_model=AskResponse)
async def ask(
    request: AskRequest,
    service: AskMeService = Depends(get_ask_service),
) -> AskResponse:
    if not request.message.strip():
        raise HTTPException(status_code=422, detail="Message must not be empty")
    reply = await service.process_query(request.message)
    return AskResponse(
        response=reply.response,
        is_video_link=reply.is_video_link,
        video_title=reply.video_title,
        has_live_info=reply.has_live_info,
    )


__all__ = ["router"]
