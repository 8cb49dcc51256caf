"""
Recorder Service — Best-effort persistence of analysis reports to the Intelligence Store.

Recording never fails the analysis: every error (exception, timeout, rejected write)
is logged and swallowed. No retries.
"""

import asyncio
import logging
import re

from adintel.errors import PersistenceFailed
from adintel.schemas import IntelligenceEntity, IntelligenceReport
from adintel.services.intelligence_stores import IntelligenceStore
from adintel.utils import isoformat_z

logger = logging.getLogger(__name__)

ENTITY_TYPE = "Advertisement Intelligence"
ENTITY_NAME_PREFIX = "AdCampaign_"

_WHITESPACE_RE = re.compile(r"\s+")


def entity_name_for(brand_name: str) -> str:
    return ENTITY_NAME_PREFIX + _WHITESPACE_RE.sub("_", brand_name)


def build_observations(report: IntelligenceReport) -> list[str]:
    """Summary lines first (fixed order), then insights, then opportunities. No dedup."""
    breakdown = report.ad_breakdown
    return [
        f"Competitor Score: {report.competitor_score}/100",
        f"Total Active Ads: {report.total_ads}",
        f"Estimated Daily Spend: {report.estimated_spend.daily}",
        f"Estimated Monthly Spend: {report.estimated_spend.monthly}",
        f"Video Ads: {breakdown.video}",
        f"Image Ads: {breakdown.image}",
        f"Carousel Ads: {breakdown.carousel}",
        f"Analysis Date: {isoformat_z(report.analysis_date)}",
        *report.insights,
        *report.opportunities,
    ]


def build_entity(report: IntelligenceReport) -> IntelligenceEntity:
    return IntelligenceEntity(
        name=entity_name_for(report.brand_name),
        entity_type=ENTITY_TYPE,
        observations=tuple(build_observations(report)),
    )


class IntelligenceRecorder:
    def __init__(self, store: IntelligenceStore, timeout_seconds: float = 10.0):
        self.store = store
        self.timeout_seconds = timeout_seconds

    async def record(self, report: IntelligenceReport) -> bool:
        """Submit the report. Returns True when the store confirmed the write."""
        try:
            entity = build_entity(report)
            await self._submit(entity)
        except PersistenceFailed as e:
            logger.warning(f"Failed to store ad intelligence for '{report.brand_name}': {e}")
            return False
        except Exception as e:
            logger.warning(f"Memory storage failed for '{report.brand_name}': {e}", exc_info=True)
            return False

        logger.info(f"Stored ad intelligence entity '{entity.name}' ({len(entity.observations)} observations)")
        return True

    async def _submit(self, entity: IntelligenceEntity) -> None:
        payload = [entity.model_dump(by_alias=True, mode="json")]
        try:
            response = await asyncio.wait_for(
                self.store.create_entities(payload), timeout=self.timeout_seconds
            )
        except asyncio.TimeoutError:
            raise PersistenceFailed(f"Intelligence store timed out after {self.timeout_seconds}s")

        if not isinstance(response, dict):
            raise PersistenceFailed(f"Unexpected store response: {type(response).__name__}")
        if response.get("success") is False or response.get("isError"):
            raise PersistenceFailed(response.get("error") or response.get("message") or "store rejected the write")
        stored = response.get("stored")
        if isinstance(stored, int) and stored < 1:
            raise PersistenceFailed("store reported 0 entities stored")
