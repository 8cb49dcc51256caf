"""
Tests for the end-to-end analysis pipeline.
"""

import random
from datetime import datetime, timezone

import pytest

from adintel.errors import InternalFailure, InvalidInput
from adintel.schemas import DataSource
from adintel.services.acquisition_service import Acquisition, CreativeAcquisitionService
from adintel.services.analysis_service import AdIntelligenceService
from adintel.services.creative_sources import StaticCreativeSource, UnavailableCreativeSource
from adintel.services.recorder_service import IntelligenceRecorder

FIXED_NOW = datetime(2025, 7, 31, 10, 30, tzinfo=timezone.utc)


def _pipeline(source, store, seed=11):
    acquisition = CreativeAcquisitionService(source, rng=random.Random(seed), settle_seconds=0)
    return AdIntelligenceService(acquisition, IntelligenceRecorder(store), clock=lambda: FIXED_NOW)


@pytest.mark.anyio
async def test_unavailable_source_produces_synthetic_report(recording_store):
    report = await _pipeline(UnavailableCreativeSource(), recording_store).analyze("Acme")

    assert report.brand_name == "Acme"
    assert report.data_source is DataSource.SYNTHETIC
    assert report.total_ads == 6
    assert len(report.top_performing_ads) == 6
    assert report.insights or report.opportunities
    assert 0 <= report.competitor_score <= 100
    assert report.analysis_date == FIXED_NOW
    assert len(recording_store.calls) == 1


@pytest.mark.anyio
async def test_static_source_report_is_live(recording_store):
    report = await _pipeline(StaticCreativeSource(), recording_store).analyze("  Acme  ")

    assert report.brand_name == "Acme"
    assert report.data_source is DataSource.LIVE
    assert report.total_ads == 6
    assert report.ad_breakdown.total == 6
    assert report.ad_breakdown.video == 2
    assert report.ad_breakdown.carousel == 2
    assert "📱 Cross-platform strategy: Running ads on both Facebook and Instagram" in report.insights


@pytest.mark.anyio
@pytest.mark.parametrize("brand", ["", "   ", None, 3.14])
async def test_invalid_brand_raises_before_any_call(recording_store, brand):
    source = StaticCreativeSource()
    with pytest.raises(InvalidInput):
        await _pipeline(source, recording_store).analyze(brand)
    assert source.navigated == []
    assert recording_store.calls == []


@pytest.mark.anyio
async def test_store_failure_does_not_change_report(failing_store, recording_store):
    failing = await _pipeline(StaticCreativeSource(), failing_store).analyze("Acme")
    healthy = await _pipeline(StaticCreativeSource(), recording_store).analyze("Acme")

    assert len(failing_store.calls) == 1
    assert failing.model_dump() == healthy.model_dump()


@pytest.mark.anyio
async def test_record_false_skips_store(recording_store):
    await _pipeline(StaticCreativeSource(), recording_store).analyze("Acme", record=False)
    assert recording_store.calls == []


def test_build_report_wraps_unexpected_errors(recording_store):
    service = _pipeline(StaticCreativeSource(), recording_store)
    with pytest.raises(InternalFailure) as exc_info:
        service.build_report("Acme", Acquisition(creatives=(), source=DataSource.LIVE))
    assert isinstance(exc_info.value.__cause__, ValueError)
