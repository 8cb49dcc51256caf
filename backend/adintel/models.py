"""
Ad Intelligence — Database Models
Backing tables for the built-in Intelligence Store.
"""

import secrets
import string
from datetime import datetime
from sqlalchemy import String, DateTime, JSON, Index
from sqlalchemy.orm import Mapped, mapped_column
from adintel.database import Base
from adintel.utils import utcnow_naive

_ID_ALPHABET = string.digits + string.ascii_lowercase


def generate_entity_id() -> str:
    """ad_intel_ + 9 base-36 characters."""
    return "ad_intel_" + "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))


# ══════════════════════════════════════════════════════════════════════
#  INTELLIGENCE ENTITIES — one per analysed brand
# ══════════════════════════════════════════════════════════════════════

class IntelligenceEntityRecord(Base):
    """A named, typed container of observation strings derived from an analysis report."""
    __tablename__ = "intelligence_entities"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=generate_entity_id)
    name: Mapped[str] = mapped_column(String(512), nullable=False, unique=True)
    entity_type: Mapped[str] = mapped_column(String(255), nullable=False)
    observations: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow_naive)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow_naive, onupdate=utcnow_naive)

    __table_args__ = (
        Index("ix_intelligence_entities_entity_type", "entity_type"),
        Index("ix_intelligence_entities_updated_at", "updated_at"),
    )
