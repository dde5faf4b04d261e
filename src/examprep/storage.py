"""Persistence interface for documents and test results, with an in-memory backend."""
from __future__ import annotations

import asyncio
import logging
from typing import Dict, List, Optional, Protocol

from .models import Document, TestResult

LOGGER = logging.getLogger(__name__)


class DocumentRepository(Protocol):
    """Storage collaborator keyed by user id."""

    async def save_document(self, user_id: str, document: Document) -> Document:
        ...

    async def list_documents(self, user_id: str) -> List[Document]:
        ...

    async def get_document(self, user_id: str, document_id: str) -> Optional[Document]:
        ...

    async def delete_document(self, user_id: str, document_id: str) -> bool:
        ...

    async def save_test_result(self, user_id: str, result: TestResult) -> TestResult:
        ...

    async def list_test_results(self, user_id: str) -> List[TestResult]:
        ...


class InMemoryRepository:
    """Process-local repository; deleting a document also deletes its results."""

    def __init__(self) -> None:
        self._documents: Dict[str, Dict[str, Document]] = {}
        self._results: Dict[str, Dict[str, TestResult]] = {}
        self._lock = asyncio.Lock()

    async def save_document(self, user_id: str, document: Document) -> Document:
        async with self._lock:
            self._documents.setdefault(user_id, {})[document.id] = document
        LOGGER.debug("Stored document %s for user %s", document.id, user_id)
        return document

    async def list_documents(self, user_id: str) -> List[Document]:
        async with self._lock:
            documents = list(self._documents.get(user_id, {}).values())
        return sorted(documents, key=lambda document: document.uploaded_at, reverse=True)

    async def get_document(self, user_id: str, document_id: str) -> Optional[Document]:
        async with self._lock:
            return self._documents.get(user_id, {}).get(document_id)

    async def delete_document(self, user_id: str, document_id: str) -> bool:
        async with self._lock:
            documents = self._documents.get(user_id, {})
            if documents.pop(document_id, None) is None:
                return False
            results = self._results.get(user_id, {})
            orphaned = [key for key, result in results.items() if result.document_id == document_id]
            for key in orphaned:
                del results[key]
        LOGGER.info(
            "Deleted document %s for user %s (%d test results removed)",
            document_id,
            user_id,
            len(orphaned),
        )
        return True

    async def save_test_result(self, user_id: str, result: TestResult) -> TestResult:
        async with self._lock:
            if result.document_id not in self._documents.get(user_id, {}):
                raise KeyError(f"Unknown document {result.document_id}")
            self._results.setdefault(user_id, {})[result.id] = result
        return result

    async def list_test_results(self, user_id: str) -> List[TestResult]:
        async with self._lock:
            results = list(self._results.get(user_id, {}).values())
        return sorted(results, key=lambda result: result.completed_at, reverse=True)


__all__ = ["DocumentRepository", "InMemoryRepository"]
