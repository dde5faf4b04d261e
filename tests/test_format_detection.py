from __future__ import annotations

import pytest

from examprep.ingest import (
    DocumentFormat,
    DocumentFormatDetector,
    FileTooLargeError,
    UnsupportedFormatError,
    UploadPolicy,
)


@pytest.mark.parametrize(
    ("file_name", "mime_type", "expected"),
    [
        ("notes.PDF", None, DocumentFormat.PDF),
        ("essay.docx", "text/plain", DocumentFormat.DOCX),
        ("legacy.doc", None, DocumentFormat.DOC),
        ("grades.xlsx", None, DocumentFormat.XLSX),
        ("old.xls", None, DocumentFormat.XLS),
        ("upload", "application/pdf", DocumentFormat.PDF),
        ("upload", "text/plain; charset=utf-8", DocumentFormat.TXT),
        ("mystery.bin", "application/octet-stream", DocumentFormat.TXT),
    ],
)
def test_detect_prefers_extension_then_media_type(file_name, mime_type, expected) -> None:
    assert DocumentFormatDetector.detect(file_name, mime_type) is expected


def test_policy_rejects_oversized_upload_before_format() -> None:
    policy = UploadPolicy(max_bytes=100)

    with pytest.raises(FileTooLargeError) as excinfo:
        policy.check("slides.pptx", 101)

    assert excinfo.value.size_bytes == 101


def test_policy_allows_exact_size_limit() -> None:
    UploadPolicy(max_bytes=100).check("notes.txt", 100)


def test_default_limit_message_mentions_25mb() -> None:
    policy = UploadPolicy()

    with pytest.raises(FileTooLargeError, match="25MB"):
        policy.check("big.pdf", 25 * 1024 * 1024 + 1)


@pytest.mark.parametrize("file_name", ["slides.pptx", "notes.md", "image.png"])
def test_policy_rejects_unknown_extensions(file_name: str) -> None:
    with pytest.raises(UnsupportedFormatError):
        UploadPolicy().check(file_name, 10, "text/plain")


def test_policy_judges_extensionless_files_by_media_type() -> None:
    policy = UploadPolicy()

    policy.check("README", 10, "text/plain")
    with pytest.raises(UnsupportedFormatError):
        policy.check("README", 10, "image/png")
    with pytest.raises(UnsupportedFormatError):
        policy.check("README", 10, None)
