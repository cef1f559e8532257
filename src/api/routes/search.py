"""Route exposing the ranked catalog search."""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, HTTPException, status

from src.config import settings
from src.models.product import SearchHit, SearchRequest
from src.services.catalog import EngineUnavailable
from src.services.search.engine import SearchEngineDependency

logger = logging.getLogger(__name__)

router = APIRouter(tags=["search"])


@router.post(
    "/search",
    response_model=list[SearchHit],
    summary="Search the catalog by free text and structured filters",
)
async def search_products(
    payload: SearchRequest,
    engine: SearchEngineDependency,
) -> list[SearchHit]:
    limit = min(
        payload.limit or settings.SEARCH_DEFAULT_LIMIT,
        settings.SEARCH_MAX_LIMIT,
    )
    try:
        hits = await asyncio.to_thread(
            engine.search_hits, payload.query, payload.filters, limit
        )
    except EngineUnavailable as exc:
        logger.error("Search failed, catalog unavailable: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Catalog is not available",
        ) from exc

    logger.info(
        "Found %s products",
        len(hits),
        extra={"query": payload.query},
    )
    return hits
