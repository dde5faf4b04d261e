"""FastAPI dependency factories; override them via ``app.dependency_overrides``."""
from __future__ import annotations

from functools import lru_cache
from typing import Optional

from ..assistant import AskMeService
from ..config import get_settings
from ..generation.flowchart import FlowchartGenerator
from ..generation.questions import QuestionGenerator
from ..generation.summary import SummaryGenerator
from ..ingest.pipeline import IngestPipeline, IngestPipelineConfig
from ..live_info import GoogleCustomSearchClient, RealTimeInfoRouter
from ..providers import CompletionProvider, create_completion_provider
from ..services.study import StudyService
from ..storage import InMemoryRepository
from ..video import VideoContentResolver, YouTubeMetadataClient


@lru_cache(maxsize=1)
def get_completion_provider() -> CompletionProvider:
    return create_completion_provider(get_settings())


@lru_cache(maxsize=1)
def get_repository() -> InMemoryRepository:
    return InMemoryRepository()


@lru_cache(maxsize=1)
def get_study_service() -> StudyService:
    settings = get_settings()
    completion = get_completion_provider()
    return StudyService(
        pipeline=IngestPipeline(config=IngestPipelineConfig.from_settings(settings)),
        summaries=SummaryGenerator(completion),
        questions=QuestionGenerator(completion),
        repository=get_repository(),
    )


@lru_cache(maxsize=1)
def get_flowchart_generator() -> FlowchartGenerator:
    return FlowchartGenerator(get_completion_provider())


@lru_cache(maxsize=1)
def get_ask_service() -> AskMeService:
    settings = get_settings()
    search_client: Optional[GoogleCustomSearchClient] = None
    if settings.google_search_api_key and settings.google_search_engine_id:
        search_client = GoogleCustomSearchClient(
            settings.google_search_api_key,
            settings.google_search_engine_id,
            timeout=settings.http_timeout_seconds,
        )
    metadata_client: Optional[YouTubeMetadataClient] = None
    if settings.youtube_api_key:
        metadata_client = YouTubeMetadataClient(settings.youtube_api_key, timeout=settings.http_timeout_seconds)
    return AskMeService(
        get_completion_provider(),
        RealTimeInfoRouter(search_client),
        VideoContentResolver(metadata_client),
    )


__all__ = [
    "get_ask_service",
    "get_completion_provider",
    "get_flowchart_generator",
    "get_repository",
    "get_study_service",
]
