"""Tests for the /builds endpoints."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from src.main import app
from src.services.catalog import CatalogProvider
from src.services.search.engine import SearchEngine, get_search_engine
from src.services.storage.redis_client import get_redis_client


@pytest.mark.asyncio
async def test_assemble_and_fetch_build(client):
    # Act
    created = await client.post("/builds/s1", json={"budget": 500000})
    fetched = await client.get("/builds/s1")

    # Assert
    assert created.status_code == 200
    build = created.json()
    assert build["total"] == 518000
    assert build["budget"] == 500000
    assert build["parts"]["gpu"]["sku"] == "GPU-002"
    assert fetched.json() == build


@pytest.mark.asyncio
async def test_build_summary_reflects_stored_build(client):
    await client.post(
        "/builds/s1", json={"budget": 500000, "filters": {"brand": ["Intel"]}}
    )

    response = await client.get("/builds/s1/summary")

    data = response.json()
    assert data["has_build"] is True
    assert "- CPU: Intel Core i7-13700K" in data["summary"]


@pytest.mark.asyncio
async def test_unknown_session_has_empty_build(client):
    build = await client.get("/builds/nobody")
    summary = await client.get("/builds/nobody/summary")

    assert build.status_code == 200
    assert build.json()["total"] == 0
    assert all(part is None for part in build.json()["parts"].values())
    assert summary.json()["has_build"] is False


@pytest.mark.asyncio
async def test_non_positive_budget_is_rejected(client):
    response = await client.post("/builds/s1", json={"budget": 0})

    assert response.status_code == 422


@pytest.mark.asyncio
@pytest.mark.parametrize("budget", ["inf", "-inf", "nan"])
async def test_non_finite_budget_is_rejected(client, budget):
    response = await client.post("/builds/s1", json={"budget": budget})

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_assembly_reports_missing_catalog(client):
    app.dependency_overrides[get_search_engine] = lambda: SearchEngine(CatalogProvider())

    response = await client.post("/builds/s1", json={"budget": 500000})

    assert response.status_code == 503


@pytest.mark.asyncio
async def test_assembly_is_returned_when_redis_is_down(client):
    """Store failures degrade: the computed build is still the response."""
    # Arrange
    down = RedisConnectionError("down")
    broken = MagicMock()
    broken.get = AsyncMock(side_effect=down)
    broken.set = AsyncMock(side_effect=down)
    broken.lock.return_value.acquire = AsyncMock(side_effect=down)
    app.dependency_overrides[get_redis_client] = lambda: broken

    # Act
    response = await client.post("/builds/s1", json={"budget": 500000})

    # Assert
    assert response.status_code == 200
    assert response.json()["total"] == 518000
