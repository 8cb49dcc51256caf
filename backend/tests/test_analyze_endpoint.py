"""
Tests for POST /api/analyze-ads.
"""

import random

import pytest
from httpx import AsyncClient, ASGITransport

from adintel.config import get_settings
from adintel.dependencies import get_analysis_service
from adintel.main import app
from adintel.services.acquisition_service import CreativeAcquisitionService
from adintel.services.analysis_service import AdIntelligenceService
from adintel.services.creative_sources import StaticCreativeSource, UnavailableCreativeSource
from adintel.services.intelligence_stores import InMemoryIntelligenceStore
from adintel.services.recorder_service import IntelligenceRecorder


@pytest.fixture
def store():
    return InMemoryIntelligenceStore()


@pytest.fixture
def use_source(store):
    """Point the endpoint at the given creative source and an in-memory store."""

    def _use(source):
        acquisition = CreativeAcquisitionService(source, rng=random.Random(5), settle_seconds=0)
        service = AdIntelligenceService(acquisition, IntelligenceRecorder(store))
        app.dependency_overrides[get_analysis_service] = lambda: service
        return service

    yield _use
    app.dependency_overrides.clear()


async def _post(**kwargs):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        return await client.post("/api/analyze-ads", **kwargs)


@pytest.mark.anyio
async def test_analyze_returns_report(use_source, store):
    use_source(StaticCreativeSource())
    response = await _post(json={"brandName": "Acme"})

    assert response.status_code == 200
    data = response.json()
    assert data["brandName"] == "Acme"
    assert data["totalAds"] == 6
    assert data["dataSource"] == "live"
    assert data["adBreakdown"] == {"video": 2, "image": 2, "carousel": 2}
    assert data["topPerformingAds"][0]["id"] == "fb_ad_001"
    assert data["topPerformingAds"][0]["estimatedReach"] == "245,000"
    assert data["estimatedSpend"]["daily"].startswith("$")
    assert data["analysisDate"].endswith("Z")
    assert len(store) == 1


@pytest.mark.anyio
async def test_analyze_without_source_uses_synthetic(use_source):
    use_source(UnavailableCreativeSource())
    response = await _post(json={"brandName": "Acme"})

    assert response.status_code == 200
    data = response.json()
    assert data["dataSource"] == "synthetic"
    assert data["totalAds"] == 6
    assert data["insights"] or data["opportunities"]


@pytest.mark.anyio
@pytest.mark.parametrize("body", [{}, {"brandName": ""}, {"brandName": "   "}, {"brandName": 42}, {"brandName": None}, ["Acme"]])
async def test_bad_brand_is_400(use_source, body):
    source = StaticCreativeSource()
    use_source(source)
    response = await _post(json=body)

    assert response.status_code == 400
    assert response.json() == {"detail": "Brand name is required"}
    assert source.navigated == []


@pytest.mark.anyio
async def test_malformed_json_is_400(use_source):
    use_source(StaticCreativeSource())
    response = await _post(content=b"{not json", headers={"Content-Type": "application/json"})
    assert response.status_code == 400


@pytest.mark.anyio
async def test_unexpected_failure_is_generic_500():
    class ExplodingService:
        async def analyze(self, brand_name, record=True):
            raise RuntimeError("database password is hunter2")

    app.dependency_overrides[get_analysis_service] = lambda: ExplodingService()
    try:
        response = await _post(json={"brandName": "Acme"})
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json() == {"detail": "Failed to analyze ads. Please try again."}
    assert "hunter2" not in response.text


@pytest.mark.anyio
async def test_store_failure_still_returns_200(failing_store):
    acquisition = CreativeAcquisitionService(StaticCreativeSource(), settle_seconds=0)
    service = AdIntelligenceService(acquisition, IntelligenceRecorder(failing_store))
    app.dependency_overrides[get_analysis_service] = lambda: service
    try:
        response = await _post(json={"brandName": "Acme"})
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 200
    assert len(failing_store.calls) == 1


@pytest.mark.anyio
async def test_background_recording(use_source, store, monkeypatch):
    monkeypatch.setattr(get_settings(), "record_in_background", True)
    use_source(StaticCreativeSource())
    response = await _post(json={"brandName": "Acme"})

    assert response.status_code == 200
    assert len(store) == 1
