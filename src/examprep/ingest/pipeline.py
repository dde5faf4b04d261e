"""High level ingestion pipeline entry point."""
from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Dict, Mapping, Optional

from ..config import DEFAULT_MAX_UPLOAD_BYTES, DEFAULT_MIN_CONTENT_CHARS, Settings
from ..logging_config import AUDIT_LOGGER_NAME
from ..telemetry import emit_ingest_event
from .errors import ExtractionError, TooShortError
from .extractors import (
    DocxExtractor,
    ExcelExtractor,
    Extractor,
    LegacyDocExtractor,
    PDFExtractor,
    TextExtractor,
)
from .format_detection import DocumentFormat, DocumentFormatDetector, UploadPolicy
from .models import UploadedFile
from .normalization import normalize_text

LOGGER = logging.getLogger(__name__)
AUDIT_LOGGER = logging.getLogger(AUDIT_LOGGER_NAME)


@dataclass(slots=True)
class IngestPipelineConfig:
    min_content_chars: int = DEFAULT_MIN_CONTENT_CHARS
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    enforce_upload_policy: bool = True

    @classmethod
    def from_settings(cls, settings: Settings) -> "IngestPipelineConfig":
        return cls(
            min_content_chars=settings.min_content_chars,
            max_upload_bytes=settings.max_upload_bytes,
            enforce_upload_policy=settings.enforce_upload_policy,
        )


def default_extractors() -> Dict[DocumentFormat, Extractor]:
    text_extractor = TextExtractor()
    return {
        DocumentFormat.TXT: text_extractor,
        DocumentFormat.PDF: PDFExtractor(),
        DocumentFormat.DOCX: DocxExtractor(),
        DocumentFormat.DOC: LegacyDocExtractor(text_extractor),
        DocumentFormat.XLSX: ExcelExtractor(),
        DocumentFormat.XLS: ExcelExtractor(),
    }


class IngestPipeline:
    """Pipeline orchestrating format detection, extraction and normalisation.

    The pipeline is a pure transform: it never stores the documents it reads.
    """

    def __init__(
        self,
        extractors: Optional[Mapping[DocumentFormat, Extractor]] = None,
        config: Optional[IngestPipelineConfig] = None,
    ) -> None:
        self.config = config or IngestPipelineConfig()
        self.extractors: Dict[DocumentFormat, Extractor] = dict(extractors or default_extractors())
        self.upload_policy = UploadPolicy(max_bytes=self.config.max_upload_bytes)

    async def ingest(self, upload: UploadedFile) -> str:
        """Return the normalised textual content of an uploaded file."""

        started = time.perf_counter()
        if self.config.enforce_upload_policy:
            self.upload_policy.check(upload.name, upload.size_bytes, upload.media_type)

        document_format = DocumentFormatDetector.detect(upload.name, upload.media_type)
        extractor = self.extractors.get(document_format) or self.extractors[DocumentFormat.TXT]
        LOGGER.info("Processing file %s (%s, %s bytes)", upload.name, document_format.value, upload.size_bytes)
        emit_ingest_event(
            "ingest.file.start",
            file_name=upload.name,
            size_bytes=upload.size_bytes,
            document_format=document_format.value,
        )

        try:
            raw_text = await asyncio.to_thread(extractor.extract, upload.data, upload.name, upload.media_type)
        except ExtractionError as error:
            emit_ingest_event(
                "ingest.file.failed",
                file_name=upload.name,
                size_bytes=upload.size_bytes,
                document_format=document_format.value,
                reason=error.reason.value,
            )
            raise

        content = normalize_text(raw_text)
        if len(content) < self.config.min_content_chars:
            emit_ingest_event(
                "ingest.file.failed",
                file_name=upload.name,
                size_bytes=upload.size_bytes,
                document_format=document_format.value,
                content_chars=len(content),
                reason="too_short",
            )
            raise TooShortError(len(content), self.config.min_content_chars)

        duration_ms = (time.perf_counter() - started) * 1000.0
        emit_ingest_event(
            "ingest.file.complete",
            file_name=upload.name,
            size_bytes=upload.size_bytes,
            document_format=document_format.value,
            duration_ms=duration_ms,
            content_chars=len(content),
        )
        AUDIT_LOGGER.info(
            {
                "event": "ingest",
                "file_name": upload.name,
                "format": document_format.value,
                "content_chars": len(content),
            }
        )
        return content


__all__ = ["IngestPipeline", "IngestPipelineConfig", "default_extractors"]
