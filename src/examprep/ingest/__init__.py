"""Document ingestion: format detection, extraction and normalisation."""
from __future__ import annotations

from .errors import (
    ExtractionError,
    ExtractionFailure,
    FileTooLargeError,
    IngestError,
    TooShortError,
    UnsupportedFormatError,
)
from .extractors import (
    DocxExtractor,
    ExcelExtractor,
    Extractor,
    LegacyDocExtractor,
    PDFExtractor,
    TextExtractor,
)
from .format_detection import ACCEPTED_EXTENSIONS, DocumentFormat, DocumentFormatDetector, UploadPolicy
from .models import UploadedFile
from .normalization import normalize_text
from .pipeline import IngestPipeline, IngestPipelineConfig, default_extractors

__all__ = [
    "ACCEPTED_EXTENSIONS",
    "DocumentFormat",
    "DocumentFormatDetector",
    "DocxExtractor",
    "ExcelExtractor",
    "ExtractionError",
    "ExtractionFailure",
    "Extractor",
    "FileTooLargeError",
    "IngestError",
    "IngestPipeline",
    "IngestPipelineConfig",
    "LegacyDocExtractor",
    "PDFExtractor",
    "TextExtractor",
    "TooShortError",
    "UnsupportedFormatError",
    "UploadPolicy",
    "UploadedFile",
    "default_extractors",
    "normalize_text",
]
