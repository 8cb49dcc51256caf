"""
Heuristics Engine — Rule battery that turns a creative set into insights and opportunities.

Each rule is an independent predicate → message pair evaluated in table order.
Rules never see each other's output, so any number of them can fire for one report.
Percentages and averages stay unrounded for the threshold checks; rounding (half-up)
only happens when the message is formatted.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Sequence

from adintel.schemas import AdBreakdown, AdCreative, Platform
from adintel.utils import round_half_up

logger = logging.getLogger(__name__)

VIDEO_BENCHMARK_PCT = 60


@dataclass(frozen=True)
class CreativeStats:
    """Everything the rules look at, computed once per report."""

    total: int
    video_pct: float
    carousel_pct: float
    avg_performance: float
    avg_running_days: float
    long_running: int
    platforms: frozenset
    distinct_ctas: int
    texts: tuple[str, ...]  # lower-cased headlines and bodies

    @classmethod
    def collect(cls, creatives: Sequence[AdCreative], breakdown: AdBreakdown) -> "CreativeStats":
        total = len(creatives)
        if total == 0:
            raise ValueError("Cannot evaluate heuristics on an empty creative set")
        texts = []
        for ad in creatives:
            texts.append(ad.headline.lower())
            texts.append(ad.body_text.lower())
        return cls(
            total=total,
            video_pct=breakdown.video / total * 100,
            carousel_pct=breakdown.carousel / total * 100,
            avg_performance=sum(ad.performance_score for ad in creatives) / total,
            avg_running_days=sum(ad.running_days for ad in creatives) / total,
            long_running=sum(1 for ad in creatives if ad.running_days > 30),
            platforms=frozenset(ad.platform for ad in creatives),
            distinct_ctas=len({ad.call_to_action for ad in creatives}),
            texts=tuple(texts),
        )

    def mentions(self, *keywords: str) -> bool:
        """True if any headline or body contains any of the keywords (substring match)."""
        return any(keyword in text for text in self.texts for keyword in keywords)


@dataclass(frozen=True)
class Rule:
    name: str
    predicate: Callable[[CreativeStats], bool]
    message: Callable[[CreativeStats], str]

    def evaluate(self, stats: CreativeStats) -> str | None:
        return self.message(stats) if self.predicate(stats) else None


# ── Rule tables (order is the output order) ──────────────────────────

INSIGHT_RULES: tuple[Rule, ...] = (
    Rule(
        "heavy_video_focus",
        lambda s: s.video_pct > 50,
        lambda s: f"🎥 Heavy video focus: {round_half_up(s.video_pct)}% of ads use video content",
    ),
    Rule(
        "high_performance",
        lambda s: s.avg_performance > 80,
        lambda s: f"🚀 High-performing creative strategy with {round_half_up(s.avg_performance)}/100 average score",
    ),
    Rule(
        "strong_longevity",
        lambda s: s.long_running > 3,
        lambda s: f"📈 Strong ad longevity: {s.long_running} ads running 30+ days",
    ),
    Rule(
        "cross_platform",
        lambda s: Platform.BOTH in s.platforms,
        lambda s: "📱 Cross-platform strategy: Running ads on both Facebook and Instagram",
    ),
    Rule(
        "urgency_messaging",
        lambda s: s.mentions("limited", "sale", "offer"),
        lambda s: "⏰ Using urgency messaging to drive immediate action",
    ),
    Rule(
        "free_shipping",
        lambda s: s.mentions("free shipping"),
        lambda s: "🚚 Promoting free shipping as key value proposition",
    ),
)

OPPORTUNITY_RULES: tuple[Rule, ...] = (
    Rule(
        "low_video_share",
        lambda s: s.video_pct < 30,
        lambda s: (
            f"📹 Increase video content: Only {round_half_up(s.video_pct)}% video ads "
            f"vs industry avg of {VIDEO_BENCHMARK_PCT}%"
        ),
    ),
    Rule(
        "low_carousel_share",
        lambda s: s.carousel_pct < 20,
        lambda s: f"🖼️ Add carousel ads to showcase multiple products (current: {round_half_up(s.carousel_pct)}%)",
    ),
    Rule(
        "missing_social_proof",
        lambda s: not s.mentions("customer", "review"),
        lambda s: "⭐ Missing customer testimonial ads for social proof",
    ),
    Rule(
        "missing_app_promotion",
        lambda s: not s.mentions("app", "download"),
        lambda s: "📱 No mobile app promotion ads detected",
    ),
    Rule(
        "short_campaigns",
        lambda s: s.avg_running_days < 20,
        lambda s: "🔄 Ads refresh too frequently - extend successful campaigns longer",
    ),
    Rule(
        "limited_cta_variety",
        lambda s: s.distinct_ctas < 3,
        lambda s: "🎯 Limited CTA variety - test different call-to-action buttons",
    ),
)


def evaluate_rules(rules: Sequence[Rule], stats: CreativeStats) -> list[str]:
    messages = []
    for rule in rules:
        message = rule.evaluate(stats)
        if message is not None:
            logger.debug(f"Rule fired: {rule.name}")
            messages.append(message)
    return messages


def run_heuristics(
    creatives: Sequence[AdCreative], breakdown: AdBreakdown
) -> tuple[list[str], list[str]]:
    """Evaluate both rule tables against one set of stats: (insights, opportunities)."""
    stats = CreativeStats.collect(creatives, breakdown)
    return evaluate_rules(INSIGHT_RULES, stats), evaluate_rules(OPPORTUNITY_RULES, stats)
