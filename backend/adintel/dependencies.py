"""
FastAPI dependencies — wire the pipeline to the configured Creative Source and Intelligence Store.
Tests override these via app.dependency_overrides.
"""

import logging
import random
from functools import lru_cache

from fastapi import Depends

from adintel.config import get_settings
from adintel.mcp_client import create_memory_client, create_puppeteer_client
from adintel.services.acquisition_service import CreativeAcquisitionService
from adintel.services.analysis_service import AdIntelligenceService
from adintel.services.creative_sources import (
    CreativeSource,
    StaticCreativeSource,
    UnavailableCreativeSource,
)
from adintel.services.intelligence_stores import (
    DatabaseIntelligenceStore,
    InMemoryIntelligenceStore,
    IntelligenceStore,
)
from adintel.services.recorder_service import IntelligenceRecorder

logger = logging.getLogger(__name__)


def get_creative_source() -> CreativeSource:
    settings = get_settings()
    if settings.creative_source_backend == "static":
        return StaticCreativeSource()
    if not settings.puppeteer_mcp_url:
        return UnavailableCreativeSource("PUPPETEER_MCP_URL is not configured")
    return create_puppeteer_client(settings.puppeteer_mcp_url)


@lru_cache
def get_intelligence_store() -> IntelligenceStore:
    """One store per process so the in-memory backend keeps its entities between requests."""
    settings = get_settings()
    backend = settings.intelligence_store_backend
    logger.info(f"Intelligence store backend: {backend}")
    if backend == "memory_mcp":
        return create_memory_client(settings.memory_mcp_url)
    if backend == "in_memory":
        return InMemoryIntelligenceStore()
    return DatabaseIntelligenceStore()


def get_recorder(store: IntelligenceStore = Depends(get_intelligence_store)) -> IntelligenceRecorder:
    return IntelligenceRecorder(store, timeout_seconds=get_settings().recording_timeout_seconds)


def build_analysis_service(source: CreativeSource, recorder: IntelligenceRecorder) -> AdIntelligenceService:
    """Assemble the pipeline from settings. Used by the API and the CLI script."""
    settings = get_settings()
    acquisition = CreativeAcquisitionService(
        source,
        rng=random.Random(settings.synthetic_seed),
        timeout_seconds=settings.acquisition_timeout_seconds,
        settle_seconds=settings.ad_library_settle_seconds,
        max_creatives=settings.max_live_creatives,
        country=settings.ad_library_country,
    )
    return AdIntelligenceService(acquisition, recorder, top_limit=settings.top_ads_limit)


def get_analysis_service(
    source: CreativeSource = Depends(get_creative_source),
    recorder: IntelligenceRecorder = Depends(get_recorder),
) -> AdIntelligenceService:
    return build_analysis_service(source, recorder)
