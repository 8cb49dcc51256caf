"""
Synthetic Generator — plausible creatives for a brand when no live data is available.

Always returns SYNTHETIC_AD_COUNT creatives. Formats and platforms rotate so every
breakdown bucket and the cross-platform insight get exercised; reach, running days
and performance come from an injectable random source.
"""

import random
from typing import Optional

from adintel.schemas import AdCreative, CreativeFormat, Platform

SYNTHETIC_AD_COUNT = 6

FORMAT_ROTATION = (CreativeFormat.VIDEO, CreativeFormat.IMAGE, CreativeFormat.CAROUSEL)
PLATFORM_ROTATION = (Platform.FACEBOOK, Platform.INSTAGRAM, Platform.BOTH)
CTA_ROTATION = ("Shop Now", "Learn More", "Sign Up", "Download", "Get Started", "See Menu")

# Half-open bounds [low, high)
REACH_RANGE = (50_000, 550_000)
PERFORMANCE_RANGE = (60, 100)
RUNNING_DAYS_RANGE = (1, 61)

_COPY_TEMPLATES = (
    (
        "{brand} - New Collection Available Now",
        "Discover our latest collection of premium products. "
        "Limited time offer with free shipping on orders over $75.",
    ),
    (
        "Join Thousands of Happy {brand} Customers",
        "See why customers love our products. Read reviews and join our community of satisfied buyers.",
    ),
    (
        "{brand} Sale - Up to 50% Off Everything",
        "Don't miss our biggest sale of the year. Premium quality at unbeatable prices.",
    ),
    (
        "Free Shipping on All {brand} Orders",
        "No minimum purchase required. Get your favorite products delivered free to your door.",
    ),
    (
        "{brand} - Trusted by 100K+ Customers",
        "Join the community that trusts us for quality and service. See what makes us different.",
    ),
    (
        "New {brand} App - Download Today",
        "Get exclusive deals and early access to new products. Download now and get 15% off.",
    ),
)


def draw_reach(rng: random.Random) -> int:
    return rng.randrange(*REACH_RANGE)


def draw_performance(rng: random.Random) -> int:
    return rng.randrange(*PERFORMANCE_RANGE)


def draw_running_days(rng: random.Random) -> int:
    return rng.randrange(*RUNNING_DAYS_RANGE)


class SyntheticCreativeGenerator:
    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def generate(self, brand_name: str) -> list[AdCreative]:
        creatives = []
        for index, (headline, body) in enumerate(_COPY_TEMPLATES[:SYNTHETIC_AD_COUNT]):
            creatives.append(AdCreative(
                id=f"synthetic_ad_{index}",
                format=FORMAT_ROTATION[index % len(FORMAT_ROTATION)],
                headline=headline.format(brand=brand_name),
                body_text=body.format(brand=brand_name),
                call_to_action=CTA_ROTATION[index % len(CTA_ROTATION)],
                creative_url=f"https://images.unsplash.com/photo-{1500000000 + index}?w=400&h=300&fit=crop",
                estimated_reach=draw_reach(self.rng),
                running_days=draw_running_days(self.rng),
                performance_score=draw_performance(self.rng),
                platform=PLATFORM_ROTATION[index % len(PLATFORM_ROTATION)],
            ))
        return creatives
