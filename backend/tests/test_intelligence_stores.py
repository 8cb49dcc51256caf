"""
Tests for the database and in-memory Intelligence Stores and the query endpoints.
"""

import pytest
from httpx import AsyncClient, ASGITransport

from adintel.dependencies import get_intelligence_store
from adintel.main import app
from adintel.services.intelligence_stores import (
    DatabaseIntelligenceStore,
    InMemoryIntelligenceStore,
    graph_statistics,
    validate_entity,
)


def _entity(name, *observations, entity_type="Advertisement Intelligence"):
    return {"name": name, "entityType": entity_type, "observations": list(observations)}


ACME = _entity(
    "AdCampaign_Acme",
    "Competitor Score: 80/100",
    "Total Active Ads: 6",
    "🚚 Promoting free shipping as key value proposition",
)
GLOBEX = _entity("AdCampaign_Globex", "Competitor Score: 65/100", "Total Active Ads: 20")


@pytest.fixture(params=["memory", "database"])
async def store(request, session_factory):
    if request.param == "memory":
        return InMemoryIntelligenceStore()
    return DatabaseIntelligenceStore(session_factory)


# ── Store semantics (both backends) ───────────────────────────────────

@pytest.mark.anyio
async def test_create_entities_reports_stored_count(store):
    response = await store.create_entities([ACME, GLOBEX])
    assert response["success"] is True
    assert response["stored"] == 2
    first = response["entities"][0]
    assert first["name"] == "AdCampaign_Acme"
    assert first["entityType"] == "Advertisement Intelligence"
    assert first["id"].startswith("ad_intel_")
    assert first["createdAt"].endswith("Z")
    assert first["type"] == "ad_intelligence"


@pytest.mark.anyio
async def test_same_name_is_upserted(store):
    created = await store.create_entities([ACME])
    updated = await store.create_entities([_entity("AdCampaign_Acme", "Competitor Score: 90/100")])

    assert updated["entities"][0]["id"] == created["entities"][0]["id"]
    graph = (await store.read_graph())["graph"]
    assert len(graph["entities"]) == 1
    assert graph["entities"][0]["observations"] == ["Competitor Score: 90/100"]


@pytest.mark.anyio
async def test_search_matches_name_and_observations(store):
    await store.create_entities([ACME, GLOBEX])

    by_name = await store.search_nodes("acme")
    assert by_name["totalFound"] == 1
    assert by_name["results"][0]["name"] == "AdCampaign_Acme"
    assert by_name["query"] == "acme"

    by_observation = await store.search_nodes("FREE SHIPPING")
    assert [e["name"] for e in by_observation["results"]] == ["AdCampaign_Acme"]

    by_prefix = await store.search_nodes("AdCampaign_")
    assert by_prefix["totalFound"] == 2

    assert (await store.search_nodes("initech"))["totalFound"] == 0


@pytest.mark.anyio
async def test_read_graph_statistics(store):
    await store.create_entities([ACME, GLOBEX])
    graph = (await store.read_graph())["graph"]

    assert graph["relations"] == []
    stats = graph["statistics"]
    assert stats["totalCampaigns"] == 2
    assert stats["totalAds"] == 26
    assert stats["avgCompetitorScore"] == 72.5
    assert stats["lastUpdated"].endswith("Z")


@pytest.mark.anyio
async def test_invalid_entity_writes_nothing(store):
    with pytest.raises(ValueError):
        await store.create_entities([GLOBEX, {"name": "AdCampaign_Broken"}])
    assert (await store.read_graph())["graph"]["entities"] == []


# ── Helpers ───────────────────────────────────────────────────────────

def test_graph_statistics_without_scores():
    stats = graph_statistics([_entity("AdCampaign_Empty", "Video Ads: 3")])
    assert stats["totalCampaigns"] == 1
    assert stats["totalAds"] == 0
    assert stats["avgCompetitorScore"] is None


@pytest.mark.parametrize("entity", [
    "not an object",
    {"entityType": "x", "observations": []},
    {"name": "  ", "entityType": "x"},
    {"name": "a", "observations": []},
    {"name": "a", "entityType": "x", "observations": "one"},
    {"name": "a", "entityType": "x", "observations": [1, 2]},
])
def test_validate_entity_rejects(entity):
    with pytest.raises(ValueError):
        validate_entity(entity)


# ── HTTP query surface ────────────────────────────────────────────────

@pytest.fixture
async def client():
    memory_store = InMemoryIntelligenceStore()
    await memory_store.create_entities([ACME, GLOBEX])
    app.dependency_overrides[get_intelligence_store] = lambda: memory_store
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


@pytest.mark.anyio
async def test_search_endpoint(client):
    response = await client.get("/api/intelligence/search", params={"q": "globex"})
    assert response.status_code == 200
    assert response.json()["totalFound"] == 1


@pytest.mark.anyio
async def test_search_endpoint_requires_query(client):
    response = await client.get("/api/intelligence/search")
    assert response.status_code == 422


@pytest.mark.anyio
async def test_graph_endpoint(client):
    response = await client.get("/api/intelligence/graph")
    assert response.status_code == 200
    assert response.json()["graph"]["statistics"]["totalCampaigns"] == 2


@pytest.mark.anyio
async def test_memory_actions(client):
    created = await client.post("/api/mcp/memory", json={
        "action": "create_entities",
        "entities": [_entity("AdCampaign_Initech", "Total Active Ads: 4")],
    })
    assert created.status_code == 200
    assert created.json()["stored"] == 1

    found = await client.post("/api/mcp/memory", json={"action": "search_nodes", "query": "initech"})
    assert found.json()["totalFound"] == 1

    graph = await client.post("/api/mcp/memory", json={"action": "read_graph"})
    assert graph.json()["graph"]["statistics"]["totalAds"] == 30


@pytest.mark.anyio
@pytest.mark.parametrize("body,detail", [
    ({"action": "create_entities"}, "entities are required"),
    ({"action": "search_nodes"}, "query is required"),
    ({"action": "delete_everything"}, "Invalid action"),
    ({"action": "create_entities", "entities": [{"name": "x"}]}, "Entity 'x' is missing entityType"),
])
async def test_memory_action_errors(client, body, detail):
    response = await client.post("/api/mcp/memory", json=body)
    assert response.status_code == 400
    assert response.json() == {"detail": detail}
