from __future__ import annotations

import asyncio
import io
import json

import pytest
from fastapi import UploadFile
from fastapi.testclient import TestClient

from examprep.api.dependencies import get_ask_service, get_flowchart_generator, get_study_service
from examprep.api.routes import _read_upload
from examprep.assistant import AskMeService
from examprep.auth import USER_HEADER
from examprep.generation import FlowchartGenerator, QuestionGenerator, SummaryGenerator
from examprep.ingest import FileTooLargeError, IngestPipeline, IngestPipelineConfig
from examprep.live_info import RealTimeInfoRouter
from examprep.main import app
from examprep.providers import MockCompletionProvider
from examprep.services import StudyService
from examprep.storage import InMemoryRepository
from examprep.video import VideoContentResolver

NOTES = (
    "Photosynthesis is the process by which green plants use sunlight to synthesise food "
    "from carbon dioxide and water. Chlorophyll absorbs light energy."
)
HEADERS = {USER_HEADER: "alice"}


def _study_service(provider=None, **config) -> StudyService:
    completion = provider or MockCompletionProvider()
    return StudyService(
        pipeline=IngestPipeline(config=IngestPipelineConfig(**config)),
        summaries=SummaryGenerator(completion),
        questions=QuestionGenerator(completion),
        repository=InMemoryRepository(),
    )


@pytest.fixture
def study_client():
    service = _study_service()
    app.dependency_overrides[get_study_service] = lambda: service
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def _upload(client: TestClient, name: str = "photosynthesis.txt", body: str = NOTES, headers=HEADERS):
    return client.post(
        "/documents",
        files={"file": (name, body.encode("utf-8"), "text/plain")},
        headers=headers,
    )


def test_read_root_returns_ok() -> None:
    client = TestClient(app)

    assert client.get("/").text == "ok"
    assert client.get("/healthz").text == "ok"


def test_upload_requires_user(study_client: TestClient) -> None:
    response = _upload(study_client, headers={})

    assert response.status_code == 401
    assert response.json()["detail"] == "Authentication required"


def test_upload_returns_document_with_summary(study_client: TestClient) -> None:
    response = _upload(study_client)

    assert response.status_code == 201
    payload = response.json()
    assert payload["name"] == "photosynthesis.txt"
    assert payload["media_type"] == "text/plain"
    assert payload["content"] == NOTES
    assert payload["summary"]["title"] == "Photosynthesis"
    assert payload["summary"]["source"] == "fallback"
    assert len(payload["summary"]["highlights"]) == 3

    listed = study_client.get("/documents", headers=HEADERS).json()
    assert [document["id"] for document in listed] == [payload["id"]]
    assert study_client.get("/documents", headers={USER_HEADER: "bob"}).json() == []


def test_upload_uses_model_summary_when_valid() -> None:
    reply = json.dumps(
        {
            "title": "Photosynthesis Basics",
            "summary": "Plants make food.\nLight is absorbed.\nOxygen is released.",
            "highlights": ["Chlorophyll", "Sunlight", "Glucose"],
            "keyTopics": ["Plants", "Energy", "Chemistry"],
            "estimatedReadTime": 1,
        }
    )
    service = _study_service(MockCompletionProvider([reply]))
    app.dependency_overrides[get_study_service] = lambda: service
    try:
        response = _upload(TestClient(app))
    finally:
        app.dependency_overrides.clear()

    summary = response.json()["summary"]
    assert summary["source"] == "ai"
    assert summary["title"] == "Photosynthesis Basics"
    assert summary["key_topics"] == ["Plants", "Energy", "Chemistry"]


def test_upload_rejects_oversized_file() -> None:
    service = _study_service(max_upload_bytes=10)
    app.dependency_overrides[get_study_service] = lambda: service
    try:
        response = _upload(TestClient(app))
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 413


@pytest.mark.parametrize(("declared_size", "expected_position"), [(None, 11), (1000, 0)])
def test_upload_read_stops_at_size_limit(declared_size, expected_position: int) -> None:
    upload = UploadFile(io.BytesIO(b"x" * 1000), size=declared_size, filename="big.txt")

    with pytest.raises(FileTooLargeError):
        asyncio.run(_read_upload(upload, IngestPipelineConfig(max_upload_bytes=10)))

    assert upload.file.tell() == expected_position


def test_upload_read_is_unbounded_when_policy_disabled() -> None:
    upload = UploadFile(io.BytesIO(b"x" * 1000), filename="big.txt")

    data = asyncio.run(_read_upload(upload, IngestPipelineConfig(max_upload_bytes=10, enforce_upload_policy=False)))

    assert len(data) == 1000


def test_upload_rejects_unsupported_format(study_client: TestClient) -> None:
    response = _upload(study_client, name="slides.pptx")

    assert response.status_code == 415
    assert "Unsupported file format" in response.json()["detail"]


def test_upload_rejects_short_content(study_client: TestClient) -> None:
    response = _upload(study_client, body="Too short.")

    assert response.status_code == 422
    assert response.json()["detail"]["reason"] == "too_short"


def test_upload_reports_extraction_failure(study_client: TestClient) -> None:
    response = study_client.post(
        "/documents",
        files={"file": ("broken.pdf", b"not a pdf", "application/pdf")},
        headers=HEADERS,
    )

    assert response.status_code == 422
    assert response.json()["detail"]["reason"] == "corrupted"


def test_full_test_flow(study_client: TestClient) -> None:
    document_id = _upload(study_client).json()["id"]

    prepared = study_client.post(
        f"/documents/{document_id}/tests", json={"difficulty": "easy"}, headers=HEADERS
    )
    assert prepared.status_code == 200
    body = prepared.json()
    assert body["config"] == {"difficulty": "easy", "document_id": document_id, "question_count": 10}
    assert body["source"] == "fallback"
    questions = body["questions"]
    assert len(questions) == 10

    answers = [question["correct_answer"] for question in questions[:7]] + [None, None, None]
    submitted = study_client.post(
        "/tests/submit",
        json={
            "document_id": document_id,
            "difficulty": "easy",
            "questions": questions,
            "answers": answers,
            "time_spent_seconds": 120,
        },
        headers=HEADERS,
    )
    assert submitted.status_code == 201
    result = submitted.json()
    assert result["score"] == 7.0
    assert (result["correct_answers"], result["incorrect_answers"], result["unanswered"]) == (7, 0, 3)

    results = study_client.get("/tests/results", headers=HEADERS).json()
    assert [entry["id"] for entry in results] == [result["id"]]

    assert study_client.delete(f"/documents/{document_id}", headers=HEADERS).status_code == 204
    assert study_client.get("/tests/results", headers=HEADERS).json() == []
    assert study_client.delete(f"/documents/{document_id}", headers=HEADERS).status_code == 404


def test_create_test_for_unknown_document_is_404(study_client: TestClient) -> None:
    response = study_client.post("/documents/missing/tests", json={"difficulty": "hard"}, headers=HEADERS)

    assert response.status_code == 404


def test_submit_rejects_mismatched_answers(study_client: TestClient) -> None:
    document_id = _upload(study_client).json()["id"]
    question = {
        "id": "q_1",
        "question": "What absorbs light?",
        "options": ["Chlorophyll", "Water", "Soil", "Air"],
        "correct_answer": 0,
    }

    response = study_client.post(
        "/tests/submit",
        json={"document_id": document_id, "difficulty": "easy", "questions": [question], "answers": [0, 1]},
        headers=HEADERS,
    )

    assert response.status_code == 422


def test_score_endpoint_is_stateless() -> None:
    question = {"id": "q", "question": "?", "options": ["a", "b", "c", "d"], "correct_answer": 2}

    response = TestClient(app).post(
        "/tests/score",
        json={"questions": [question, question, question], "answers": [2, 1, None]},
    )

    assert response.json() == {"score": 3.33, "correct": 1, "incorrect": 1, "unanswered": 1}


def test_score_endpoint_validates_option_count() -> None:
    question = {"id": "q", "question": "?", "options": ["a", "b"], "correct_answer": 0}

    response = TestClient(app).post("/tests/score", json={"questions": [question], "answers": [0]})

    assert response.status_code == 422


def test_flowchart_endpoint_returns_validated_diagram() -> None:
    generator = FlowchartGenerator(MockCompletionProvider(["```mermaid\nflowchart TD\nA --> B\n```"]))
    app.dependency_overrides[get_flowchart_generator] = lambda: generator
    try:
        response = TestClient(app).post("/flowcharts", json={"prompt": "Classify types of clouds"})
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 200
    assert response.json() == {
        "kind": "mermaid",
        "body": "flowchart TD\nA --> B",
        "prompt": "Classify types of clouds",
        "structure": "classification",
        "output": "visual",
        "source": "ai",
    }


def test_flowchart_endpoint_rejects_blank_prompt() -> None:
    generator = FlowchartGenerator(MockCompletionProvider())
    app.dependency_overrides[get_flowchart_generator] = lambda: generator
    try:
        response = TestClient(app).post("/flowcharts", json={"prompt": "   "})
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 422


def test_flowchart_export_returns_attachment() -> None:
    response = TestClient(app).post(
        "/flowcharts/export",
        json={"kind": "mermaid", "body": "flowchart TD\nA --> B", "file_name": "water cycle/v2"},
    )

    assert response.status_code == 200
    assert response.text == "flowchart TD\nA --> B"
    assert response.headers["content-type"].startswith("text/vnd.mermaid")
    assert response.headers["content-disposition"] == 'attachment; filename="water_cycle_v2.mmd"'


def test_ask_endpoint_routes_question() -> None:
    provider = MockCompletionProvider(["Mitochondria are the powerhouse of the cell."])
    service = AskMeService(provider, RealTimeInfoRouter(), VideoContentResolver())
    app.dependency_overrides[get_ask_service] = lambda: service
    try:
        response = TestClient(app).post("/ask", json={"message": "What do mitochondria do?"})
    finally:
        app.dependency_overrides.clear()

    assert response.json() == {
        "response": "Mitochondria are the powerhouse of the cell.",
        "is_video_link": False,
        "video_title": None,
        "has_live_info": False,
    }


def test_submit_rejects_question_count_not_matching_tier(study_client: TestClient) -> None:
    document_id = _upload(study_client).json()["id"]
    question = {
        "id": "q_1",
        "question": "What absorbs light?",
        "options": ["Chlorophyll", "Water", "Soil", "Air"],
        "correct_answer": 0,
    }

    response = study_client.post(
        "/tests/submit",
        json={"document_id": document_id, "difficulty": "easy", "questions": [question], "answers": [0]},
        headers=HEADERS,
    )

    assert response.status_code == 422
    assert "requires 10 questions" in response.json()["detail"]
    assert study_client.get("/tests/results", headers=HEADERS).json() == []


def test_flowchart_export_rejects_invalid_mermaid() -> None:
    response = TestClient(app).post(
        "/flowcharts/export",
        json={"kind": "mermaid", "body": "flowchart TD\nA[(Start]--> B[End]"},
    )

    assert response.status_code == 422
    assert response.json()["detail"]["line"] == "A[(Start]--> B[End]"


def test_flowchart_export_accepts_free_text_charts() -> None:
    response = TestClient(app).post(
        "/flowcharts/export",
        json={"kind": "text", "body": "Start\n  |\n  v\nEnd", "file_name": "notes"},
    )

    assert response.status_code == 200
    assert response.headers["content-disposition"] == 'attachment; filename="notes.txt"'
