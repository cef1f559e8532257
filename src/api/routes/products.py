"""Routes for browsing and reloading the catalog snapshot."""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, HTTPException, Query, status

from src.config import settings
from src.models.product import CatalogPage
from src.services.catalog import CatalogDependency, EngineUnavailable
from src.services.search.engine import SearchEngineDependency

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products", tags=["products"])


@router.get(
    "",
    response_model=CatalogPage,
    summary="Browse the catalog by name, brand or SKU",
)
async def browse_products(
    engine: SearchEngineDependency,
    q: str = Query("", description="Case-insensitive text to look for"),
) -> CatalogPage:
    try:
        count, products = await asyncio.to_thread(
            engine.browse, q, settings.SEARCH_MAX_LIMIT
        )
    except EngineUnavailable as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Catalog snapshot not found",
        ) from exc
    return CatalogPage(count=count, products=products)


@router.post(
    "/reload",
    summary="Re-read the catalog snapshot file",
)
async def reload_catalog(catalog: CatalogDependency) -> dict[str, str | int]:
    try:
        snapshot = await asyncio.to_thread(catalog.reload)
    except EngineUnavailable as exc:
        logger.error("Catalog reload failed: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Catalog is not available",
        ) from exc
    return {
        "status": "ok",
        "count": len(snapshot),
        "loaded_at": snapshot.loaded_at.isoformat(),
    }
