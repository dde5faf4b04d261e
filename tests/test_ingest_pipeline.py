from __future__ import annotations

import asyncio
import logging

import pytest

from examprep.ingest import (
    DocumentFormat,
    ExtractionError,
    ExtractionFailure,
    FileTooLargeError,
    IngestPipeline,
    IngestPipelineConfig,
    TextExtractor,
    TooShortError,
    UnsupportedFormatError,
    UploadedFile,
)
from examprep.logging_config import AUDIT_LOGGER_NAME


class SpyExtractor:
    def __init__(self, text: str = "") -> None:
        self.text = text
        self.calls = []

    def extract(self, data, file_name, media_type=None):
        self.calls.append(file_name)
        return self.text


class RecordingHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__()
        self.records = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


class FailingExtractor:
    def extract(self, data, file_name, media_type=None):
        raise ExtractionError(ExtractionFailure.CORRUPTED, "The file may be corrupted.")


def _ingest(pipeline: IngestPipeline, upload: UploadedFile) -> str:
    return asyncio.run(pipeline.ingest(upload))


def test_ingest_normalises_text_upload() -> None:
    raw = "Photosynthesis   overview\r\n\r\n\r\nPlants convert light energy into chemical energy.  "
    upload = UploadedFile(data=raw.encode("utf-8"), name="bio.txt", media_type="text/plain")

    content = _ingest(IngestPipeline(), upload)

    assert content == "Photosynthesis overview\nPlants convert light energy into chemical energy."


def test_ingest_rejects_short_content_and_accepts_minimum() -> None:
    pipeline = IngestPipeline()

    with pytest.raises(TooShortError) as excinfo:
        _ingest(pipeline, UploadedFile(data=b"x" * 49, name="short.txt"))
    assert excinfo.value.length == 49
    assert excinfo.value.minimum == 50

    assert _ingest(pipeline, UploadedFile(data=b"x" * 50, name="ok.txt")) == "x" * 50


def test_length_check_applies_after_normalisation() -> None:
    padded = ("word " * 5 + "\n\n\n\n" + " " * 60).encode("utf-8")

    with pytest.raises(TooShortError):
        _ingest(IngestPipeline(), UploadedFile(data=padded, name="padded.txt"))


def test_oversized_upload_rejected_before_extraction() -> None:
    spy = SpyExtractor("x" * 100)
    pipeline = IngestPipeline(
        extractors={DocumentFormat.TXT: spy},
        config=IngestPipelineConfig(max_upload_bytes=10),
    )

    with pytest.raises(FileTooLargeError):
        _ingest(pipeline, UploadedFile(data=b"y" * 11, name="big.txt"))

    assert spy.calls == []


def test_unsupported_extension_rejected() -> None:
    with pytest.raises(UnsupportedFormatError):
        _ingest(IngestPipeline(), UploadedFile(data=b"# Heading\n" * 20, name="notes.md"))


def test_disabled_policy_treats_unknown_files_as_text() -> None:
    pipeline = IngestPipeline(config=IngestPipelineConfig(enforce_upload_policy=False))
    body = "Markdown notes about the French Revolution and its causes."

    content = _ingest(pipeline, UploadedFile(data=body.encode("utf-8"), name="notes.md"))

    assert content == body


def test_extractor_is_selected_by_format() -> None:
    spy = SpyExtractor("Spreadsheet text that is long enough to pass the minimum length check.")
    pipeline = IngestPipeline(extractors={DocumentFormat.TXT: TextExtractor(), DocumentFormat.XLSX: spy})

    content = _ingest(pipeline, UploadedFile(data=b"ignored", name="grades.xlsx"))

    assert spy.calls == ["grades.xlsx"]
    assert content.startswith("Spreadsheet text")


def test_docx_upload_end_to_end(docx_factory) -> None:
    data = docx_factory(
        [
            "The water cycle describes how water evaporates, condenses and precipitates.",
            "Evaporation is driven by solar energy.",
        ]
    )

    content = _ingest(IngestPipeline(), UploadedFile(data=data, name="water.docx"))

    assert "The water cycle describes" in content
    assert "Evaporation is driven by solar energy." in content


def test_extraction_errors_propagate_and_are_logged(caplog: pytest.LogCaptureFixture) -> None:
    pipeline = IngestPipeline(extractors={DocumentFormat.TXT: FailingExtractor()})

    with caplog.at_level(logging.INFO):
        with pytest.raises(ExtractionError) as excinfo:
            _ingest(pipeline, UploadedFile(data=b"irrelevant", name="broken.txt"))

    assert excinfo.value.reason is ExtractionFailure.CORRUPTED
    events = [record.msg for record in caplog.records if isinstance(record.msg, dict)]
    assert any(event.get("step") == "ingest.file.failed" for event in events)


def test_successful_ingest_writes_audit_record() -> None:
    body = "A sufficiently long body of study notes about cellular respiration."
    audit_logger = logging.getLogger(AUDIT_LOGGER_NAME)
    handler = RecordingHandler()
    previous_level = audit_logger.level
    audit_logger.addHandler(handler)
    audit_logger.setLevel(logging.INFO)
    try:
        _ingest(IngestPipeline(), UploadedFile(data=body.encode("utf-8"), name="notes.txt"))
    finally:
        audit_logger.removeHandler(handler)
        audit_logger.setLevel(previous_level)

    audit = [record.msg for record in handler.records]
    assert audit == [{"event": "ingest", "file_name": "notes.txt", "format": "txt", "content_chars": len(body)}]
