"""Tests for the /search endpoint."""

from __future__ import annotations

import pytest

from src.main import app
from src.services.catalog import CatalogProvider
from src.services.search.engine import SearchEngine, get_search_engine


@pytest.mark.asyncio
async def test_search_returns_presentation_fields(client):
    # Act
    response = await client.post("/search", json={"query": "iphone 16 pro"})

    # Assert
    assert response.status_code == 200
    hits = response.json()
    assert hits[0] == {
        "sku": "IPH-16P-256",
        "name": "iPhone 16 Pro 256GB Black",
        "price": 450000,
        "stock": 5,
        "brand": "Apple",
    }


@pytest.mark.asyncio
async def test_search_honours_limit(client):
    response = await client.post("/search", json={"query": "rtx", "limit": 1})

    assert len(response.json()) == 1


@pytest.mark.asyncio
async def test_search_ignores_malformed_filters(client):
    payload = {
        "query": "iphone",
        "filters": {"brand": 42, "max_price": "cheap", "min_price": -1},
    }

    response = await client.post("/search", json=payload)

    assert response.status_code == 200
    assert {hit["sku"] for hit in response.json()} == {"IPH-16P-256", "IPH-15-128"}


@pytest.mark.asyncio
async def test_search_applies_brand_and_price_filters(client):
    payload = {
        "query": "rtx",
        "filters": {
            "brand": ["asus"],
            "category": ["Видеокарты"],
            "max_price": 300000,
        },
    }

    response = await client.post("/search", json=payload)

    assert [hit["sku"] for hit in response.json()] == ["GPU-001"]


@pytest.mark.asyncio
async def test_empty_query_returns_empty_list(client):
    response = await client.post("/search", json={"query": ""})

    assert response.status_code == 200
    assert response.json() == []


@pytest.mark.asyncio
async def test_invalid_limit_is_rejected(client):
    response = await client.post("/search", json={"query": "rtx", "limit": 0})

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_search_reports_missing_catalog(client):
    app.dependency_overrides[get_search_engine] = lambda: SearchEngine(CatalogProvider())

    response = await client.post("/search", json={"query": "iphone"})

    assert response.status_code == 503
    assert response.json()["detail"] == "Catalog is not available"
