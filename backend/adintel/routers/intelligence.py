"""
Intelligence Router — Query surface over recorded analyses.

/intelligence/* are plain REST reads. /mcp/memory mirrors the Memory MCP action
protocol (create_entities | search_nodes | read_graph) so other tools can use this
service as their knowledge-graph store.
"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Query
from adintel.dependencies import get_intelligence_store
from adintel.schemas import MemoryActionRequest
from adintel.services.intelligence_stores import IntelligenceStore
from adintel.utils import safe_error_detail

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/intelligence/search")
async def search_intelligence(
    q: str = Query(..., min_length=1, description="Brand name or observation text"),
    store: IntelligenceStore = Depends(get_intelligence_store),
):
    """Search recorded analyses by entity name or observation text (case-insensitive)."""
    try:
        return await store.search_nodes(q)
    except Exception as e:
        raise HTTPException(status_code=500, detail=safe_error_detail(e, "Search failed. Please try again."))


@router.get("/intelligence/graph")
async def read_intelligence_graph(store: IntelligenceStore = Depends(get_intelligence_store)):
    """All recorded analyses plus roll-up statistics."""
    try:
        return await store.read_graph()
    except Exception as e:
        raise HTTPException(status_code=500, detail=safe_error_detail(e, "Graph read failed. Please try again."))


@router.post("/mcp/memory")
async def memory_action(
    payload: MemoryActionRequest,
    store: IntelligenceStore = Depends(get_intelligence_store),
):
    """Dispatch a Memory MCP style action to the configured store."""
    action = payload.action
    try:
        if action == "create_entities":
            if not payload.entities:
                raise HTTPException(status_code=400, detail="entities are required")
            return await store.create_entities(payload.entities)
        if action == "search_nodes":
            if payload.query is None:
                raise HTTPException(status_code=400, detail="query is required")
            return await store.search_nodes(payload.query)
        if action == "read_graph":
            return await store.read_graph()
    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=safe_error_detail(e, "Internal server error"))

    raise HTTPException(status_code=400, detail="Invalid action")
