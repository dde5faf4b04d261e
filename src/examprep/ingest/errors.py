"""Typed failures raised by the ingestion stage."""
from __future__ import annotations

from enum import Enum


class IngestError(RuntimeError):
    """Base class for ingestion failures that require user action."""


class ExtractionFailure(str, Enum):
    CORRUPTED = "corrupted"
    PASSWORD_PROTECTED = "password_protected"
    EMPTY = "empty"
    SCANNED = "scanned"


class ExtractionError(IngestError):
    """Raised when an extractor cannot produce text from a file."""

    def __init__(self, reason: ExtractionFailure, message: str) -> None:
        super().__init__(message)
        self.reason = reason
        self.message = message


class TooShortError(IngestError):
    """Raised when normalized content is below the minimum viable length."""

    def __init__(self, length: int, minimum: int) -> None:
        super().__init__(
            f"The document contains too little readable text ({length} characters, "
            f"at least {minimum} required). Please upload a document with more content."
        )
        self.length = length
        self.minimum = minimum


class UnsupportedFormatError(IngestError):
    """Raised for uploads outside the accepted file types."""

    def __init__(self, file_name: str) -> None:
        super().__init__(
            f"Unsupported file format: {file_name}. Please upload a PDF, Word (.doc/.docx), "
            "Excel (.xlsx/.xls) or Text (.txt) file."
        )
        self.file_name = file_name


class FileTooLargeError(IngestError):
    """Raised when an upload exceeds the size limit."""

    def __init__(self, size_bytes: int, max_bytes: int) -> None:
        limit_mb = max_bytes / (1024 * 1024)
        super().__init__(f"File size must be less than {limit_mb:g}MB.")
        self.size_bytes = size_bytes
        self.max_bytes = max_bytes


__all__ = [
    "ExtractionError",
    "ExtractionFailure",
    "FileTooLargeError",
    "IngestError",
    "TooShortError",
    "UnsupportedFormatError",
]
