"""
Analysis Service — Runs the full ad intelligence pipeline for one brand.

1. Acquire creatives (live, or synthetic fallback)
2. Break down by format
3. Evaluate insight and opportunity rules
4. Score the competitor
5. Estimate spend
6. Assemble the report
7. Record it in the Intelligence Store (best effort)
"""

import logging
from datetime import datetime
from typing import Any, Callable

from adintel.errors import InternalFailure
from adintel.schemas import IntelligenceReport
from adintel.services.acquisition_service import (
    Acquisition,
    CreativeAcquisitionService,
    validate_brand_name,
)
from adintel.services.heuristics import run_heuristics
from adintel.services.recorder_service import IntelligenceRecorder
from adintel.services.report_service import (
    TOP_ADS_LIMIT,
    assemble_report,
    calculate_breakdown,
    estimate_spend,
)
from adintel.services.scoring import competitor_score
from adintel.utils import utcnow

logger = logging.getLogger(__name__)


class AdIntelligenceService:
    def __init__(
        self,
        acquisition: CreativeAcquisitionService,
        recorder: IntelligenceRecorder,
        clock: Callable[[], datetime] = utcnow,
        top_limit: int = TOP_ADS_LIMIT,
    ):
        self.acquisition = acquisition
        self.recorder = recorder
        self.clock = clock
        self.top_limit = top_limit

    async def analyze(self, brand_name: Any, record: bool = True) -> IntelligenceReport:
        """
        Analyze a competitor's ads. Raises InvalidInput for a blank/non-string brand
        (before any external call) and InternalFailure for anything unexpected.
        Pass record=False when the caller schedules recording itself.
        """
        brand = validate_brand_name(brand_name)
        logger.info(f"Starting ad analysis for: {brand}")

        acquisition = await self.acquisition.acquire(brand)
        report = self.build_report(brand, acquisition)

        logger.info(
            f"Analysis complete for '{brand}': {report.total_ads} ads ({report.data_source.value}), "
            f"score {report.competitor_score}/100, {len(report.insights)} insights, "
            f"{len(report.opportunities)} opportunities"
        )

        if record:
            await self.recorder.record(report)
        return report

    def build_report(self, brand: str, acquisition: Acquisition) -> IntelligenceReport:
        try:
            creatives = acquisition.creatives
            breakdown = calculate_breakdown(creatives)
            insights, opportunities = run_heuristics(creatives, breakdown)
            score = competitor_score(creatives, breakdown)
            spend = estimate_spend(creatives)
            return assemble_report(
                brand_name=brand,
                creatives=creatives,
                breakdown=breakdown,
                insights=insights,
                opportunities=opportunities,
                spend=spend,
                score=score,
                analysis_date=self.clock(),
                data_source=acquisition.source,
                top_limit=self.top_limit,
            )
        except Exception as e:
            logger.error(f"Ad analysis failed for '{brand}': {e}", exc_info=True)
            raise InternalFailure("Failed to build intelligence report") from e
