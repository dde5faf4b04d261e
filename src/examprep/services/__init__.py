"""Application services composing the ingestion and generation stages."""
from __future__ import annotations

from .study import DocumentNotFoundError, PreparedTest, StudyService

__all__ = ["DocumentNotFoundError", "PreparedTest", "StudyService"]
