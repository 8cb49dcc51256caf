"""
Ad Intelligence — wire and domain models.
camelCase on the wire, snake_case in Python. Reports and creatives are frozen once built.
"""

import enum
from datetime import datetime
from pydantic import (
    AliasChoices, BaseModel, ConfigDict, Field, StrictStr,
    field_serializer, field_validator,
)
from pydantic.alias_generators import to_camel
from adintel.utils import format_thousands, isoformat_z, parse_int


# ══════════════════════════════════════════════════════════════════════
#  ENUMS
# ══════════════════════════════════════════════════════════════════════

class CreativeFormat(str, enum.Enum):
    VIDEO = "video"
    IMAGE = "image"
    CAROUSEL = "carousel"


class Platform(str, enum.Enum):
    FACEBOOK = "facebook"
    INSTAGRAM = "instagram"
    BOTH = "both"


class DataSource(str, enum.Enum):
    LIVE = "live"
    SYNTHETIC = "synthetic"


TEXT_PLACEHOLDERS = {
    "headline": "No headline",
    "body_text": "No body text",
    "call_to_action": "Learn More",
}


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


# ══════════════════════════════════════════════════════════════════════
#  CREATIVES
# ══════════════════════════════════════════════════════════════════════

class AdCreative(CamelModel):
    """One advertising unit observed for a brand."""

    id: str
    # The Ad Library extraction script reports the format as "type"
    format: CreativeFormat = Field(
        validation_alias=AliasChoices("format", "type"),
        serialization_alias="format",
    )
    headline: str = TEXT_PLACEHOLDERS["headline"]
    body_text: str = TEXT_PLACEHOLDERS["body_text"]
    call_to_action: str = TEXT_PLACEHOLDERS["call_to_action"]
    creative_url: str = Field(
        default="",
        validation_alias=AliasChoices("creativeUrl", "creative", "creative_url"),
        serialization_alias="creativeUrl",
    )
    estimated_reach: int = Field(ge=0)
    running_days: int = Field(ge=0)
    performance_score: int = Field(ge=0, le=100)
    platform: Platform

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_string(cls, value):
        if value is None or str(value).strip() == "":
            raise ValueError("creative id must not be empty")
        return str(value).strip()

    @field_validator("headline", "body_text", "call_to_action", mode="before")
    @classmethod
    def _text_or_placeholder(cls, value, info):
        if value is None:
            return TEXT_PLACEHOLDERS[info.field_name]
        text = str(value).strip()
        return text or TEXT_PLACEHOLDERS[info.field_name]

    @field_validator("format", "platform", mode="before")
    @classmethod
    def _lowercase_enum(cls, value):
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator("estimated_reach", mode="before")
    @classmethod
    def _parse_reach(cls, value):
        parsed = parse_int(value)
        if parsed is None:
            raise ValueError(f"estimatedReach is not a whole number: {value!r}")
        return parsed

    @field_serializer("estimated_reach", when_used="json")
    def _display_reach(self, value: int) -> str:
        return format_thousands(value)


# ══════════════════════════════════════════════════════════════════════
#  REPORT
# ══════════════════════════════════════════════════════════════════════

class AdBreakdown(CamelModel):
    video: int = 0
    image: int = 0
    carousel: int = 0

    @property
    def total(self) -> int:
        return self.video + self.image + self.carousel


class SpendEstimate(CamelModel):
    daily: str
    monthly: str


class IntelligenceReport(CamelModel):
    """Final artifact of one analysis. Never mutated after assembly."""

    brand_name: str
    analysis_date: datetime
    total_ads: int = Field(ge=0)
    ad_breakdown: AdBreakdown
    # First N creatives in acquisition order, not sorted by performance
    top_performing_ads: tuple[AdCreative, ...]
    insights: tuple[str, ...]
    opportunities: tuple[str, ...]
    estimated_spend: SpendEstimate
    competitor_score: int = Field(ge=0, le=100)
    data_source: DataSource = DataSource.LIVE

    @field_serializer("analysis_date")
    def _iso_date(self, value: datetime) -> str:
        return isoformat_z(value)


class IntelligenceEntity(CamelModel):
    """Knowledge-graph entity submitted to the Intelligence Store."""

    name: str
    entity_type: str
    observations: tuple[str, ...] = ()


# ── Request Models ────────────────────────────────────────────────────

class AnalyzeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    brand_name: StrictStr = Field(alias="brandName")


class MemoryActionRequest(BaseModel):
    action: str
    entities: list[dict] | None = None
    query: str | None = None
