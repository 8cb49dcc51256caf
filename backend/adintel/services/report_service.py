"""
Report Service — Breakdown aggregation, spend estimation and report assembly.
All functions are pure; the clock is passed in.
"""

from collections import Counter
from datetime import datetime
from typing import Sequence

from adintel.schemas import (
    AdBreakdown, AdCreative, CreativeFormat, DataSource,
    IntelligenceReport, SpendEstimate,
)
from adintel.utils import format_currency, round_half_up

BASE_DAILY_SPEND_PER_AD = 150  # dollars
DAYS_PER_MONTH = 30
TOP_ADS_LIMIT = 6


def calculate_breakdown(creatives: Sequence[AdCreative]) -> AdBreakdown:
    if not creatives:
        raise ValueError("Cannot break down an empty creative set")
    counts = Counter(ad.format for ad in creatives)
    return AdBreakdown(
        video=counts[CreativeFormat.VIDEO],
        image=counts[CreativeFormat.IMAGE],
        carousel=counts[CreativeFormat.CAROUSEL],
    )


def estimate_spend(creatives: Sequence[AdCreative]) -> SpendEstimate:
    """
    Rough spend heuristic: $150/day per active creative, scaled by average performance.
    Not a calibrated model.
    """
    if not creatives:
        raise ValueError("Cannot estimate spend for an empty creative set")
    base_daily = len(creatives) * BASE_DAILY_SPEND_PER_AD
    performance_multiplier = sum(ad.performance_score for ad in creatives) / len(creatives) / 100
    daily = round_half_up(base_daily * performance_multiplier)
    monthly = daily * DAYS_PER_MONTH
    return SpendEstimate(daily=format_currency(daily), monthly=format_currency(monthly))


def top_performing_ads(creatives: Sequence[AdCreative], limit: int = TOP_ADS_LIMIT) -> tuple[AdCreative, ...]:
    # Acquisition order, not sorted by performance_score (see DESIGN.md)
    return tuple(creatives[:limit])


def assemble_report(
    brand_name: str,
    creatives: Sequence[AdCreative],
    breakdown: AdBreakdown,
    insights: Sequence[str],
    opportunities: Sequence[str],
    spend: SpendEstimate,
    score: int,
    analysis_date: datetime,
    data_source: DataSource = DataSource.LIVE,
    top_limit: int = TOP_ADS_LIMIT,
) -> IntelligenceReport:
    return IntelligenceReport(
        brand_name=brand_name,
        analysis_date=analysis_date,
        total_ads=len(creatives),
        ad_breakdown=breakdown,
        top_performing_ads=top_performing_ads(creatives, top_limit),
        insights=tuple(insights),
        opportunities=tuple(opportunities),
        estimated_spend=spend,
        competitor_score=score,
        data_source=data_source,
    )
