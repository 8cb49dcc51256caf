"""
Creative Sources — where raw ad creatives come from.

The acquisition service only needs navigate() and evaluate(). PuppeteerMCP (mcp_client)
is the remote implementation; the classes here are the local ones.
"""

import copy
import logging
from typing import Any, Protocol, runtime_checkable

from adintel.mcp_client import MCPError

logger = logging.getLogger(__name__)


@runtime_checkable
class CreativeSource(Protocol):
    async def navigate(self, url: str) -> dict:
        ...

    async def evaluate(self, script: str) -> dict:
        ...


class UnavailableCreativeSource:
    """Used when no browser automation server is configured. Every call fails."""

    def __init__(self, reason: str = "No creative source configured"):
        self.reason = reason

    async def navigate(self, url: str) -> dict:
        raise MCPError(self.reason)

    async def evaluate(self, script: str) -> dict:
        raise MCPError(self.reason)


# Canned Ad Library listing for local development and tests
SAMPLE_AD_LIBRARY_ADS: list[dict[str, Any]] = [
    {
        "id": "fb_ad_001",
        "type": "video",
        "headline": "New Summer Collection - Limited Time Only",
        "bodyText": "Discover our latest summer styles with up to 50% off select items. "
                    "Free shipping on orders over $75. Shop now before sizes run out!",
        "callToAction": "Shop Now",
        "creative": "https://images.unsplash.com/photo-1441986300917-64674bd600d8?w=400&h=300&fit=crop",
        "estimatedReach": "245,000",
        "runningDays": 23,
        "performanceScore": 87,
        "platform": "both",
    },
    {
        "id": "fb_ad_002",
        "type": "carousel",
        "headline": "Join 50,000+ Happy Customers",
        "bodyText": "See why customers love our products. Real reviews from real people. "
                    "Quality guaranteed or your money back.",
        "callToAction": "Learn More",
        "creative": "https://images.unsplash.com/photo-1556742049-0cfed4f6a45d?w=400&h=300&fit=crop",
        "estimatedReach": "180,000",
        "runningDays": 45,
        "performanceScore": 92,
        "platform": "facebook",
    },
    {
        "id": "fb_ad_003",
        "type": "image",
        "headline": "Free Shipping on Everything",
        "bodyText": "No minimum purchase required. Get your favorite products delivered free "
                    "to your door. Limited time offer.",
        "callToAction": "Get Started",
        "creative": "https://images.unsplash.com/photo-1472851294608-062f824d29cc?w=400&h=300&fit=crop",
        "estimatedReach": "320,000",
        "runningDays": 12,
        "performanceScore": 79,
        "platform": "instagram",
    },
    {
        "id": "fb_ad_004",
        "type": "video",
        "headline": "Customer Success Stories",
        "bodyText": "Watch real customers share their experiences. Thousands of 5-star reviews. "
                    "Join the community today.",
        "callToAction": "Watch Video",
        "creative": "https://images.unsplash.com/photo-1573164713714-d95e436ab8d6?w=400&h=300&fit=crop",
        "estimatedReach": "156,000",
        "runningDays": 67,
        "performanceScore": 94,
        "platform": "both",
    },
    {
        "id": "fb_ad_005",
        "type": "image",
        "headline": "Download Our App - Get 15% Off",
        "bodyText": "Exclusive app-only deals and early access to new products. "
                    "Download now and save on your first order.",
        "callToAction": "Download",
        "creative": "https://images.unsplash.com/photo-1512941937669-90a1b58e7e9c?w=400&h=300&fit=crop",
        "estimatedReach": "89,000",
        "runningDays": 8,
        "performanceScore": 73,
        "platform": "instagram",
    },
    {
        "id": "fb_ad_006",
        "type": "carousel",
        "headline": "Back by Popular Demand",
        "bodyText": "Our bestselling items are back in stock. These won't last long - "
                    "get yours before they're gone again.",
        "callToAction": "Shop Now",
        "creative": "https://images.unsplash.com/photo-1556905055-8f358a7a47b2?w=400&h=300&fit=crop",
        "estimatedReach": "198,000",
        "runningDays": 34,
        "performanceScore": 85,
        "platform": "facebook",
    },
]


class StaticCreativeSource:
    """
    Fixture source: navigate() always succeeds and evaluate() returns a fixed payload.
    Records every call so tests can assert on what was (or wasn't) requested.
    """

    def __init__(self, ads: Any = None):
        self.ads = copy.deepcopy(SAMPLE_AD_LIBRARY_ADS if ads is None else ads)
        self.navigated: list[str] = []
        self.scripts: list[str] = []

    async def navigate(self, url: str) -> dict:
        self.navigated.append(url)
        logger.info(f"Static source: navigate {url}")
        return {"status": "loaded", "url": url}

    async def evaluate(self, script: str) -> dict:
        self.scripts.append(script)
        return {"result": copy.deepcopy(self.ads)}
