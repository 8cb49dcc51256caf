"""
Intelligence Stores — persistence and query surface for recorded analyses.

Every store speaks the same three operations as the Memory MCP server:
create_entities, search_nodes and read_graph. MemoryMCP (mcp_client) is the remote
implementation; DatabaseIntelligenceStore keeps entities in our own Postgres;
InMemoryIntelligenceStore is for tests and local experiments.
"""

import logging
import re
from typing import Any, Optional, Protocol, runtime_checkable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from adintel.database import async_session
from adintel.models import IntelligenceEntityRecord, generate_entity_id
from adintel.utils import isoformat_z, utcnow, utcnow_naive

logger = logging.getLogger(__name__)

STORED_ENTITY_KIND = "ad_intelligence"

_SCORE_RE = re.compile(r"^Competitor Score: (\d+)/100$")
_TOTAL_ADS_RE = re.compile(r"^Total Active Ads: (\d+)$")


@runtime_checkable
class IntelligenceStore(Protocol):
    async def create_entities(self, entities: list[dict]) -> dict:
        ...

    async def search_nodes(self, query: str) -> dict:
        ...

    async def read_graph(self) -> dict:
        ...


# ── Shared helpers ────────────────────────────────────────────────────

def validate_entity(entity: Any) -> tuple[str, str, list[str]]:
    """Return (name, entityType, observations) or raise ValueError."""
    if not isinstance(entity, dict):
        raise ValueError("Entity must be an object")
    name = entity.get("name")
    entity_type = entity.get("entityType")
    observations = entity.get("observations", [])
    if not isinstance(name, str) or not name.strip():
        raise ValueError("Entity name is required")
    if not isinstance(entity_type, str) or not entity_type.strip():
        raise ValueError(f"Entity '{name}' is missing entityType")
    if not isinstance(observations, list) or not all(isinstance(o, str) for o in observations):
        raise ValueError(f"Entity '{name}' observations must be a list of strings")
    return name.strip(), entity_type.strip(), list(observations)


def entity_matches(entity: dict, query: str) -> bool:
    needle = (query or "").lower()
    if needle in entity["name"].lower():
        return True
    return any(needle in observation.lower() for observation in entity["observations"])


def graph_statistics(entities: list[dict]) -> dict:
    """Roll-up of recorded analyses, parsed back out of the observation strings."""
    scores = []
    total_ads = 0
    for entity in entities:
        for observation in entity["observations"]:
            score_match = _SCORE_RE.match(observation)
            if score_match:
                scores.append(int(score_match.group(1)))
                continue
            ads_match = _TOTAL_ADS_RE.match(observation)
            if ads_match:
                total_ads += int(ads_match.group(1))
    return {
        "totalCampaigns": len(entities),
        "totalAds": total_ads,
        "avgCompetitorScore": round(sum(scores) / len(scores), 1) if scores else None,
        "lastUpdated": isoformat_z(utcnow()),
    }


def search_response(entities: list[dict], query: str) -> dict:
    results = [e for e in entities if entity_matches(e, query)]
    return {
        "success": True,
        "results": results,
        "query": query,
        "totalFound": len(results),
    }


def graph_response(entities: list[dict]) -> dict:
    return {
        "success": True,
        "graph": {
            "entities": entities,
            "relations": [],
            "statistics": graph_statistics(entities),
        },
        "message": "Knowledge graph retrieved successfully",
    }


def created_response(stored: list[dict]) -> dict:
    return {
        "success": True,
        "stored": len(stored),
        "entities": stored,
        "message": "Ad intelligence stored successfully",
    }


# ══════════════════════════════════════════════════════════════════════
#  Database-backed store
# ══════════════════════════════════════════════════════════════════════

def _record_to_dict(record: IntelligenceEntityRecord) -> dict:
    return {
        "id": record.id,
        "name": record.name,
        "entityType": record.entity_type,
        "observations": list(record.observations or []),
        "createdAt": isoformat_z(record.created_at),
        "updatedAt": isoformat_z(record.updated_at),
        "type": STORED_ENTITY_KIND,
    }


class DatabaseIntelligenceStore:
    """
    Entities live in the intelligence_entities table, one row per name.
    Recording a name again replaces its observations and bumps updated_at.
    """

    def __init__(self, session_factory: Optional[async_sessionmaker[AsyncSession]] = None):
        self.session_factory = session_factory or async_session

    async def create_entities(self, entities: list[dict]) -> dict:
        validated = [validate_entity(e) for e in entities]
        logger.info(f"Storing ad intelligence entities: {[name for name, _, _ in validated]}")

        stored = []
        async with self.session_factory() as session:
            try:
                for name, entity_type, observations in validated:
                    result = await session.execute(
                        select(IntelligenceEntityRecord).where(IntelligenceEntityRecord.name == name)
                    )
                    record = result.scalar_one_or_none()
                    if record:
                        record.entity_type = entity_type
                        record.observations = observations
                        record.updated_at = utcnow_naive()
                    else:
                        record = IntelligenceEntityRecord(
                            name=name,
                            entity_type=entity_type,
                            observations=observations,
                        )
                        session.add(record)
                    await session.flush()
                    stored.append(_record_to_dict(record))
                await session.commit()
            except Exception:
                await session.rollback()
                raise
        return created_response(stored)

    async def _all_entities(self) -> list[dict]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(IntelligenceEntityRecord).order_by(IntelligenceEntityRecord.updated_at.desc())
            )
            return [_record_to_dict(r) for r in result.scalars().all()]

    async def search_nodes(self, query: str) -> dict:
        logger.info(f"Searching ad intelligence for: {query}")
        return search_response(await self._all_entities(), query)

    async def read_graph(self) -> dict:
        return graph_response(await self._all_entities())


# ══════════════════════════════════════════════════════════════════════
#  In-memory store
# ══════════════════════════════════════════════════════════════════════

class InMemoryIntelligenceStore:
    """Process-local store with the same semantics as the database store."""

    def __init__(self):
        self._entities: dict[str, dict] = {}

    async def create_entities(self, entities: list[dict]) -> dict:
        validated = [validate_entity(e) for e in entities]
        now = isoformat_z(utcnow())
        stored = []
        for name, entity_type, observations in validated:
            existing = self._entities.get(name)
            entity = {
                "id": existing["id"] if existing else generate_entity_id(),
                "name": name,
                "entityType": entity_type,
                "observations": observations,
                "createdAt": existing["createdAt"] if existing else now,
                "updatedAt": now,
                "type": STORED_ENTITY_KIND,
            }
            self._entities[name] = entity
            stored.append(dict(entity))
        return created_response(stored)

    def _sorted(self) -> list[dict]:
        return sorted(self._entities.values(), key=lambda e: e["updatedAt"], reverse=True)

    async def search_nodes(self, query: str) -> dict:
        return search_response(self._sorted(), query)

    async def read_graph(self) -> dict:
        return graph_response(self._sorted())

    def __len__(self) -> int:
        return len(self._entities)

