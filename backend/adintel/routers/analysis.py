"""
Analysis Router — Competitor ad analysis.
Returns the intelligence report and records it in the Intelligence Store.
"""

import logging
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request
from pydantic import ValidationError
from adintel.config import get_settings
from adintel.dependencies import get_analysis_service
from adintel.errors import InvalidInput
from adintel.schemas import AnalyzeRequest
from adintel.services.analysis_service import AdIntelligenceService
from adintel.utils import safe_error_detail

logger = logging.getLogger(__name__)

router = APIRouter()

BRAND_REQUIRED = "Brand name is required"
ANALYSIS_FAILED = "Failed to analyze ads. Please try again."


async def _parse_request(request: Request) -> AnalyzeRequest:
    """Anything but {"brandName": "<string>"} is a 400, not FastAPI's default 422."""
    try:
        raw = await request.json()
    except ValueError:
        raise HTTPException(status_code=400, detail=BRAND_REQUIRED)
    try:
        return AnalyzeRequest.model_validate(raw)
    except ValidationError:
        raise HTTPException(status_code=400, detail=BRAND_REQUIRED)


@router.post("/analyze-ads")
async def analyze_ads(
    request: Request,
    background_tasks: BackgroundTasks,
    service: AdIntelligenceService = Depends(get_analysis_service),
):
    """
    Analyze a competitor's active ads:
    1. Pull creatives from the Ad Library (synthetic fallback when unavailable)
    2. Break down, score, and generate insights/opportunities
    3. Store the result in the Intelligence Store (never fails the request)
    """
    payload = await _parse_request(request)
    record_later = get_settings().record_in_background

    try:
        report = await service.analyze(payload.brand_name, record=not record_later)
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e) or BRAND_REQUIRED)
    except Exception as e:
        raise HTTPException(status_code=500, detail=safe_error_detail(e, ANALYSIS_FAILED))

    if record_later:
        background_tasks.add_task(service.recorder.record, report)

    return report.model_dump(by_alias=True, mode="json")
