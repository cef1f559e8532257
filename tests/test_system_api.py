"""Tests for system and catalog browsing routes."""

from __future__ import annotations

import pytest

from src.main import app
from src.services.catalog import CatalogProvider, get_catalog
from src.services.search.engine import SearchEngine, get_search_engine


@pytest.mark.asyncio
async def test_root_returns_hello_world(client):
    response = await client.get("/")

    assert response.status_code == 200
    assert response.json() == {"message": "Hello World"}


@pytest.mark.asyncio
async def test_health_reports_dependencies(client):
    response = await client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["redis"] == "connected"
    assert data["catalog"] == "loaded"


@pytest.mark.asyncio
async def test_browse_products_by_brand(client):
    response = await client.get("/products", params={"q": "apple"})

    data = response.json()
    assert data["count"] == 2
    assert {product["sku"] for product in data["products"]} == {
        "IPH-16P-256",
        "IPH-15-128",
    }


@pytest.mark.asyncio
async def test_browse_without_catalog_is_not_found(client):
    app.dependency_overrides[get_search_engine] = lambda: SearchEngine(CatalogProvider())

    response = await client.get("/products")

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_reload_reports_snapshot_size(client):
    response = await client.post("/products/reload")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["count"] == 19


@pytest.mark.asyncio
async def test_reload_failure_is_service_unavailable(client):
    app.dependency_overrides[get_catalog] = lambda: CatalogProvider()

    response = await client.post("/products/reload")

    assert response.status_code == 503
