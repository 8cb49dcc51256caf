"""
Acquisition Service — Pulls a brand's active creatives from the Facebook Ad Library.

Flow:
1. Validate the brand name (InvalidInput before any external call)
2. Navigate the browser to the Ad Library search page, let it settle, run the extraction script
3. Normalize the scraped cards into AdCreative records
4. Any failure, timeout or empty result degrades to the Synthetic Generator
"""

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Any, Optional
from urllib.parse import quote, urlencode

from pydantic import ValidationError

from adintel.errors import AcquisitionDegraded, InternalFailure, InvalidInput
from adintel.schemas import AdCreative, DataSource, Platform, TEXT_PLACEHOLDERS
from adintel.services.creative_sources import CreativeSource
from adintel.services.synthetic_generator import (
    SyntheticCreativeGenerator,
    draw_performance,
    draw_reach,
    draw_running_days,
)

logger = logging.getLogger(__name__)

AD_LIBRARY_URL = "https://www.facebook.com/ads/library/"

# Runs inside the Ad Library page. Only reads what the page shows; reach, running days,
# performance and platform are not exposed there and get estimated afterwards.
EXTRACTION_SCRIPT = """
(() => {
  const cards = Array.from(document.querySelectorAll('[data-testid="search-result-item"]'));
  return cards.map((card, index) => {
    const text = (selector) => {
      const el = card.querySelector(selector);
      return el && el.textContent ? el.textContent.trim() : null;
    };
    const video = card.querySelector('video');
    const image = card.querySelector('img[src*="scontent"]');
    return {
      id: card.getAttribute('data-ad-id') || 'ad_' + index,
      type: video ? 'video' : (card.querySelectorAll('img').length > 1 ? 'carousel' : 'image'),
      headline: text('[data-testid="ad-preview-headline"]'),
      bodyText: text('[data-testid="ad-preview-body"]'),
      callToAction: text('[data-testid="ad-preview-cta"]'),
      creative: (video && video.poster) || (image && image.src) || '',
    };
  });
})()
"""

FAILED_NAVIGATION_STATUSES = {"error", "failed", "timeout"}


@dataclass(frozen=True)
class Acquisition:
    creatives: tuple[AdCreative, ...]
    source: DataSource


def validate_brand_name(brand_name: Any) -> str:
    """Return the trimmed brand name or raise InvalidInput."""
    if not isinstance(brand_name, str) or not brand_name.strip():
        raise InvalidInput("Brand name is required")
    return brand_name.strip()


def build_ad_library_url(brand_name: str, country: str = "US") -> str:
    params = {
        "active_status": "active",
        "ad_type": "all",
        "country": country,
        "q": brand_name,
    }
    return f"{AD_LIBRARY_URL}?{urlencode(params, quote_via=quote)}"


class CreativeAcquisitionService:
    def __init__(
        self,
        source: CreativeSource,
        generator: Optional[SyntheticCreativeGenerator] = None,
        rng: Optional[random.Random] = None,
        timeout_seconds: float = 30.0,
        settle_seconds: float = 3.0,
        max_creatives: int = 20,
        country: str = "US",
    ):
        self.source = source
        self.rng = rng or random.Random()
        self.generator = generator or SyntheticCreativeGenerator(self.rng)
        self.timeout_seconds = timeout_seconds
        self.settle_seconds = settle_seconds
        self.max_creatives = max_creatives
        self.country = country

    async def acquire(self, brand_name: Any) -> Acquisition:
        brand = validate_brand_name(brand_name)
        try:
            creatives = await self._fetch_live_bounded(brand)
        except AcquisitionDegraded as e:
            logger.warning(f"Acquisition degraded for '{brand}': {e} — using synthetic creatives")
            return self._synthetic(brand)

        logger.info(f"Acquired {len(creatives)} live creatives for '{brand}'")
        return Acquisition(creatives=tuple(creatives), source=DataSource.LIVE)

    async def _fetch_live_bounded(self, brand: str) -> list[AdCreative]:
        try:
            return await asyncio.wait_for(self._fetch_live(brand), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            raise AcquisitionDegraded(f"Creative source timed out after {self.timeout_seconds}s")
        except AcquisitionDegraded:
            raise
        except Exception as e:
            raise AcquisitionDegraded(f"Creative source failed: {e}") from e

    async def _fetch_live(self, brand: str) -> list[AdCreative]:
        url = build_ad_library_url(brand, self.country)
        navigation = await self.source.navigate(url)
        status = str(navigation.get("status", "")).lower() if isinstance(navigation, dict) else ""
        if status in FAILED_NAVIGATION_STATUSES:
            raise AcquisitionDegraded(f"Failed to navigate to Ad Library (status={status})")

        if self.settle_seconds > 0:
            await asyncio.sleep(self.settle_seconds)

        evaluated = await self.source.evaluate(EXTRACTION_SCRIPT)
        return self.normalize(evaluated)

    def normalize(self, evaluated: Any) -> list[AdCreative]:
        """
        Turn an evaluate() response into creatives. Anything other than a non-empty list
        of usable ads raises AcquisitionDegraded.
        """
        payload = evaluated.get("result") if isinstance(evaluated, dict) else None
        if not isinstance(payload, list) or not payload:
            raise AcquisitionDegraded("Creative source returned no ads")

        creatives = []
        seen_ids = set()
        dropped = 0
        for index, item in enumerate(payload):
            if len(creatives) >= self.max_creatives:
                break
            if not isinstance(item, dict):
                dropped += 1
                continue
            try:
                creative = AdCreative.model_validate(self._fill_missing_metrics(item, index))
            except ValidationError as e:
                logger.debug(f"Dropping malformed creative #{index}: {e.error_count()} validation errors")
                dropped += 1
                continue
            if creative.headline == TEXT_PLACEHOLDERS["headline"] or creative.id in seen_ids:
                dropped += 1
                continue
            seen_ids.add(creative.id)
            creatives.append(creative)

        if dropped:
            logger.info(f"Dropped {dropped} unusable creatives from the source payload")
        if not creatives:
            raise AcquisitionDegraded("Creative source returned no usable ads")
        return creatives

    def _fill_missing_metrics(self, item: dict, index: int) -> dict:
        record = dict(item)
        if record.get("id") in (None, ""):
            record["id"] = f"ad_{index}"
        if record.get("estimatedReach") is None:
            record["estimatedReach"] = draw_reach(self.rng)
        if record.get("runningDays") is None:
            record["runningDays"] = draw_running_days(self.rng)
        if record.get("performanceScore") is None:
            record["performanceScore"] = draw_performance(self.rng)
        if record.get("platform") is None:
            record["platform"] = self._draw_platform()
        return record

    def _draw_platform(self) -> Platform:
        if self.rng.random() > 0.5:
            return Platform.BOTH
        return Platform.FACEBOOK if self.rng.random() > 0.5 else Platform.INSTAGRAM

    def _synthetic(self, brand: str) -> Acquisition:
        try:
            creatives = self.generator.generate(brand)
        except Exception as e:
            raise InternalFailure("Synthetic generator failed") from e
        if not creatives:
            raise InternalFailure("Synthetic generator produced no creatives")
        return Acquisition(creatives=tuple(creatives), source=DataSource.SYNTHETIC)
