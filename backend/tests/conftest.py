"""
Shared fixtures. The environment is pinned before any adintel import so the cached
Settings never point at a real Postgres or a real MCP server.
"""

import asyncio
import os

os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("INTELLIGENCE_STORE_BACKEND", "in_memory")
os.environ.setdefault("AD_LIBRARY_SETTLE_SECONDS", "0")

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from adintel.database import Base
from adintel.schemas import AdCreative


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def make_creative():
    """Factory for AdCreative with sensible defaults; override any field by keyword."""
    counter = {"n": 0}

    def _make(**overrides) -> AdCreative:
        counter["n"] += 1
        fields = {
            "id": f"ad_{counter['n']}",
            "format": "image",
            "headline": "Plain headline",
            "body_text": "Plain body",
            "call_to_action": "Shop Now",
            "creative_url": "https://example.com/creative.jpg",
            "estimated_reach": 100_000,
            "running_days": 10,
            "performance_score": 70,
            "platform": "facebook",
        }
        fields.update(overrides)
        return AdCreative(**fields)

    return _make


@pytest.fixture
async def session_factory():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    import adintel.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


# ── Collaborator doubles ──────────────────────────────────────────────

class RecordingStore:
    """Accepts every write and keeps the payloads."""

    def __init__(self, response=None):
        self.calls: list[list[dict]] = []
        self.response = response

    async def create_entities(self, entities):
        self.calls.append(entities)
        if self.response is not None:
            return self.response
        return {"success": True, "stored": len(entities), "entities": entities}

    async def search_nodes(self, query):
        return {"success": True, "results": [], "query": query, "totalFound": 0}

    async def read_graph(self):
        return {"success": True, "graph": {"entities": [], "relations": []}}


class FailingStore(RecordingStore):
    async def create_entities(self, entities):
        self.calls.append(entities)
        raise RuntimeError("memory server exploded")


class HangingStore(RecordingStore):
    async def create_entities(self, entities):
        self.calls.append(entities)
        await asyncio.sleep(10)
        return {"success": True, "stored": len(entities)}


class HangingSource:
    def __init__(self):
        self.navigated: list[str] = []

    async def navigate(self, url):
        self.navigated.append(url)
        await asyncio.sleep(10)
        return {"status": "loaded"}

    async def evaluate(self, script):
        return {"result": []}


@pytest.fixture
def recording_store():
    return RecordingStore()


@pytest.fixture
def failing_store():
    return FailingStore()


@pytest.fixture
def hanging_store():
    return HangingStore()


@pytest.fixture
def hanging_source():
    return HangingSource()


@pytest.fixture
def sample_report(make_creative):
    from datetime import datetime, timezone
    from adintel.services.report_service import assemble_report, calculate_breakdown, estimate_spend

    creatives = [
        make_creative(format="video", performance_score=90, running_days=40),
        make_creative(format="video", performance_score=90, running_days=40),
        make_creative(format="image", performance_score=90, running_days=40),
    ]
    return assemble_report(
        brand_name="Acme  Coffee Co",
        creatives=creatives,
        breakdown=calculate_breakdown(creatives),
        insights=["insight one", "insight two"],
        opportunities=["opportunity one"],
        spend=estimate_spend(creatives),
        score=77,
        analysis_date=datetime(2025, 7, 31, 10, 30, tzinfo=timezone.utc),
    )


@pytest.fixture
def make_store():
    """RecordingStore that answers every write with the given response."""
    return lambda response: RecordingStore(response=response)
