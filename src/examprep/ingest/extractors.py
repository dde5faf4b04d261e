"""Extractors for supported document types.

Every extractor exposes the same ``extract(data, file_name, media_type)``
capability and either returns raw text (line endings already unified) or
raises :class:`ExtractionError` with a reason the user can act on.
"""
from __future__ import annotations

import codecs
import io
import logging
import re
from typing import Iterable, List, Optional, Protocol, runtime_checkable

import pandas as pd
from docx import Document as load_docx
from PyPDF2 import PdfReader

from .errors import ExtractionError, ExtractionFailure
from .models import PageContent
from .normalization import normalize_newlines

LOGGER = logging.getLogger(__name__)

# Encrypted OOXML packages (and legacy Office binaries) are OLE compound files.
OLE_SIGNATURE = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"

_SCANNED_PDF_MESSAGE = (
    "This PDF appears to be a scanned document or image-based PDF without selectable text. "
    "Please run it through an OCR tool first, or upload the document in a different format "
    "(Word, Text, etc.)."
)


@runtime_checkable
class Extractor(Protocol):
    """Common contract implemented by all format extractors."""

    def extract(self, data: bytes, file_name: str, media_type: Optional[str] = None) -> str:
        ...


def _is_ole_container(data: bytes) -> bool:
    return data.startswith(OLE_SIGNATURE)


class TextExtractor:
    """Extract text from plaintext documents."""

    def extract(self, data: bytes, file_name: str, media_type: Optional[str] = None) -> str:
        text = normalize_newlines(self._decode(data))
        if not text.strip():
            raise ExtractionError(ExtractionFailure.EMPTY, "The text file appears to be empty.")
        return text

    @staticmethod
    def _decode(data: bytes) -> str:
        if data.startswith(codecs.BOM_UTF8):
            return data.decode("utf-8-sig")
        if data.startswith((codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)):
            return data.decode("utf-16")
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError:
            LOGGER.info("Text upload is not valid UTF-8; decoding as latin-1")
            return data.decode("latin-1")


class DocxExtractor:
    """Extract raw text from Microsoft Word (.docx) documents."""

    def extract(self, data: bytes, file_name: str, media_type: Optional[str] = None) -> str:
        if _is_ole_container(data):
            raise ExtractionError(
                ExtractionFailure.PASSWORD_PROTECTED,
                "This Word document is password-protected. Please remove the password and upload it again.",
            )

        try:
            document = load_docx(io.BytesIO(data))
        except Exception as error:
            LOGGER.warning("python-docx failed to parse %s: %s", file_name, error)
            raise ExtractionError(
                ExtractionFailure.CORRUPTED,
                "Failed to extract text from Word document. The file may be corrupted.",
            ) from error

        parts: List[str] = [paragraph.text for paragraph in document.paragraphs if paragraph.text]
        for table in document.tables:
            for row in table.rows:
                cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
                if cells:
                    parts.append(" | ".join(cells))

        text = normalize_newlines("\n\n".join(parts))
        if not text.strip():
            raise ExtractionError(ExtractionFailure.EMPTY, "No readable text found in the Word document.")
        return text


class LegacyDocExtractor:
    """Best-effort text recovery from legacy Word 97-2003 (.doc) files.

    Files that are not OLE containers (renamed text or RTF exports) are read
    as plain text. Binary documents are scanned for printable runs in both
    the 8-bit and UTF-16LE encodings Word uses for its text stream.
    """

    _UTF16_RUN_RE = re.compile(rb"(?:[\x20-\x7e\t\r\n]\x00){4,}")
    _ASCII_RUN_RE = re.compile(rb"[\x20-\x7e\t\r\n]{4,}")
    _WORDLIKE_RE = re.compile(r"[A-Za-z]{2,}")

    def __init__(self, text_extractor: Optional[TextExtractor] = None) -> None:
        self.text_extractor = text_extractor or TextExtractor()

    def extract(self, data: bytes, file_name: str, media_type: Optional[str] = None) -> str:
        if not _is_ole_container(data):
            return self.text_extractor.extract(data, file_name, media_type)

        utf16_runs = [match.decode("utf-16-le") for match in self._UTF16_RUN_RE.findall(data)]
        ascii_runs = [match.decode("ascii") for match in self._ASCII_RUN_RE.findall(data)]
        runs = max(
            self._keep_wordlike(utf16_runs),
            self._keep_wordlike(ascii_runs),
            key=lambda candidate: sum(len(run) for run in candidate),
        )

        text = normalize_newlines("\n".join(runs))
        if not text.strip():
            raise ExtractionError(
                ExtractionFailure.EMPTY,
                "No readable text found in the Word document. Please save it as .docx and try again.",
            )
        return text

    def _keep_wordlike(self, runs: Iterable[str]) -> List[str]:
        return [run.strip() for run in runs if self._WORDLIKE_RE.search(run)]


class ExcelExtractor:
    """Render every sheet of a workbook as pipe-delimited rows."""

    def extract(self, data: bytes, file_name: str, media_type: Optional[str] = None) -> str:
        if file_name.lower().endswith(".xlsx") and _is_ole_container(data):
            raise ExtractionError(
                ExtractionFailure.PASSWORD_PROTECTED,
                "This Excel workbook is password-protected. Please remove the password and upload it again.",
            )

        try:
            sheets = pd.read_excel(io.BytesIO(data), sheet_name=None, header=None, dtype=object)
        except Exception as error:
            LOGGER.warning("Failed to read workbook %s: %s", file_name, error)
            raise ExtractionError(
                ExtractionFailure.CORRUPTED,
                "Failed to extract data from Excel file. The file may be corrupted or password-protected.",
            ) from error

        blocks: List[str] = []
        for sheet_name, frame in sheets.items():
            rows = [self._render_row(row) for row in frame.itertuples(index=False, name=None)]
            rows = [row for row in rows if row]
            if not rows:
                LOGGER.debug("Skipping empty sheet %s in %s", sheet_name, file_name)
                continue
            banner = f"Sheet: {sheet_name}\n" + "=" * (len(str(sheet_name)) + 7)
            blocks.append(banner + "\n\n" + "\n".join(rows))

        if not blocks:
            raise ExtractionError(ExtractionFailure.EMPTY, "No readable data found in the Excel file.")
        return normalize_newlines("\n\n\n".join(blocks))

    @staticmethod
    def _render_row(row: Iterable[object]) -> str:
        cells = []
        for cell in row:
            if cell is None or (not isinstance(cell, str) and pd.isna(cell)):
                continue
            if isinstance(cell, float) and cell.is_integer():
                cell = int(cell)
            value = str(cell).strip()
            if value:
                cells.append(value)
        return " | ".join(cells)


class PDFExtractor:
    """Extract text page by page; failed pages are skipped."""

    def extract(self, data: bytes, file_name: str, media_type: Optional[str] = None) -> str:
        pages = [page for page in self.extract_pages(data, file_name) if page.text.strip()]
        if not pages:
            raise ExtractionError(ExtractionFailure.SCANNED, _SCANNED_PDF_MESSAGE)
        return normalize_newlines("\n\n".join(page.text for page in pages))

    def extract_pages(self, data: bytes, file_name: str = "document.pdf") -> List[PageContent]:
        reader = self._open(data, file_name)
        try:
            page_list = list(reader.pages)
        except Exception as error:
            LOGGER.warning("PyPDF2 could not read the page tree of %s: %s", file_name, error)
            raise ExtractionError(
                ExtractionFailure.CORRUPTED,
                "Failed to process PDF file. The file may be corrupted or use an unsupported PDF format.",
            ) from error

        pages: List[PageContent] = []
        for index, page in enumerate(page_list, start=1):
            try:
                text = page.extract_text() or ""
            except Exception as error:
                LOGGER.warning("Failed to extract text from PDF page %s of %s: %s", index, file_name, error)
                continue
            pages.append(PageContent(page_number=index, text=text))
        return pages

    @staticmethod
    def _open(data: bytes, file_name: str) -> PdfReader:
        try:
            reader = PdfReader(io.BytesIO(data))
        except Exception as error:
            LOGGER.warning("PyPDF2 could not open %s: %s", file_name, error)
            raise ExtractionError(
                ExtractionFailure.CORRUPTED,
                "Failed to process PDF file. The file may be corrupted or use an unsupported PDF format.",
            ) from error

        if reader.is_encrypted:
            try:
                decrypted = reader.decrypt("")
            except Exception as error:
                LOGGER.info("Empty-password decryption failed for %s: %s", file_name, error)
                decrypted = 0
            if not decrypted:
                raise ExtractionError(
                    ExtractionFailure.PASSWORD_PROTECTED,
                    "This PDF is password-protected. Please remove the password and upload it again.",
                )
        return reader


__all__ = [
    "DocxExtractor",
    "ExcelExtractor",
    "Extractor",
    "LegacyDocExtractor",
    "OLE_SIGNATURE",
    "PDFExtractor",
    "TextExtractor",
]
