"""Utilities for detecting the format of uploaded documents."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import FrozenSet, Optional

from ..config import DEFAULT_MAX_UPLOAD_BYTES
from .errors import FileTooLargeError, UnsupportedFormatError


class DocumentFormat(str, Enum):
    """Supported document formats."""

    PDF = "pdf"
    DOCX = "docx"
    DOC = "doc"
    XLSX = "xlsx"
    XLS = "xls"
    TXT = "txt"


class DocumentFormatDetector:
    """Detects the document format based on file name and optional MIME type."""

    _MIME_MAP = {
        "application/pdf": DocumentFormat.PDF,
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document": DocumentFormat.DOCX,
        "application/msword": DocumentFormat.DOC,
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": DocumentFormat.XLSX,
        "application/vnd.ms-excel": DocumentFormat.XLS,
        "text/plain": DocumentFormat.TXT,
    }

    @staticmethod
    def extension(file_name: str) -> str:
        return Path(file_name or "").suffix.lower().lstrip(".")

    @classmethod
    def from_media_type(cls, mime_type: Optional[str]) -> Optional[DocumentFormat]:
        if not mime_type:
            return None
        base_type = mime_type.split(";", 1)[0].strip().lower()
        return cls._MIME_MAP.get(base_type)

    @classmethod
    def detect(cls, file_name: str, mime_type: Optional[str] = None) -> DocumentFormat:
        """Return the detected document format.

        The file extension wins; the declared MIME type is consulted next and
        anything still unknown is treated as plain text.
        """

        suffix = cls.extension(file_name)
        try:
            return DocumentFormat(suffix)
        except ValueError:
            pass

        return cls.from_media_type(mime_type) or DocumentFormat.TXT


ACCEPTED_EXTENSIONS: FrozenSet[str] = frozenset({"txt", "pdf", "doc", "docx", "xlsx", "xls"})


@dataclass(frozen=True, slots=True)
class UploadPolicy:
    """Upload boundary checks applied before any extraction attempt."""

    max_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    accepted_extensions: FrozenSet[str] = ACCEPTED_EXTENSIONS

    def check(self, file_name: str, size_bytes: int, mime_type: Optional[str] = None) -> None:
        if size_bytes > self.max_bytes:
            raise FileTooLargeError(size_bytes, self.max_bytes)

        suffix = DocumentFormatDetector.extension(file_name)
        if suffix:
            if suffix not in self.accepted_extensions:
                raise UnsupportedFormatError(file_name)
            return

        detected = DocumentFormatDetector.from_media_type(mime_type)
        if detected is None or detected.value not in self.accepted_extensions:
            raise UnsupportedFormatError(file_name)


__all__ = ["ACCEPTED_EXTENSIONS", "DocumentFormat", "DocumentFormatDetector", "UploadPolicy"]
