"""
Scoring Model — Competitor strength score (0-100).

Four components, each worth up to 25 points:
- Volume: how many active creatives the brand runs
- Diversity: video and carousel share of the mix
- Performance: average performance score scaled to 25
- Longevity: how many creatives have run for more than 30 days

Count thresholds are inclusive (>=); ratio thresholds are strict (>).
"""

from dataclasses import dataclass
from typing import Sequence

from adintel.schemas import AdBreakdown, AdCreative
from adintel.utils import round_half_up

MAX_SCORE = 100
LONG_RUNNING_DAYS = 30


@dataclass(frozen=True)
class ScoreBreakdown:
    volume: int
    diversity: int
    performance: int
    longevity: int

    @property
    def total(self) -> int:
        return max(0, min(self.volume + self.diversity + self.performance + self.longevity, MAX_SCORE))


def volume_score(ad_count: int) -> int:
    if ad_count >= 15:
        return 25
    if ad_count >= 10:
        return 20
    if ad_count >= 5:
        return 15
    return 10


def diversity_score(breakdown: AdBreakdown, ad_count: int) -> int:
    video_ratio = breakdown.video / ad_count
    carousel_ratio = breakdown.carousel / ad_count
    if video_ratio > 0.4 and carousel_ratio > 0.2:
        return 25
    if video_ratio > 0.3:
        return 20
    return 15


def performance_score(creatives: Sequence[AdCreative]) -> int:
    avg_performance = sum(ad.performance_score for ad in creatives) / len(creatives)
    return round_half_up(avg_performance / 4)


def longevity_score(creatives: Sequence[AdCreative]) -> int:
    long_running = sum(1 for ad in creatives if ad.running_days > LONG_RUNNING_DAYS)
    if long_running >= 5:
        return 25
    if long_running >= 3:
        return 20
    if long_running >= 1:
        return 15
    return 10


def score_components(creatives: Sequence[AdCreative], breakdown: AdBreakdown) -> ScoreBreakdown:
    if not creatives:
        raise ValueError("Cannot score an empty creative set")
    return ScoreBreakdown(
        volume=volume_score(len(creatives)),
        diversity=diversity_score(breakdown, len(creatives)),
        performance=performance_score(creatives),
        longevity=longevity_score(creatives),
    )


def competitor_score(creatives: Sequence[AdCreative], breakdown: AdBreakdown) -> int:
    return score_components(creatives, breakdown).total
