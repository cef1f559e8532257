"""System-level routes such as health checks."""

from __future__ import annotations

import logging
from typing import Annotated

import redis.asyncio as redis
from fastapi import APIRouter, Depends
from redis.exceptions import RedisError

from src.config import settings
from src.services.catalog import CatalogDependency
from src.services.storage.redis_client import get_redis_client

logger = logging.getLogger(__name__)

router = APIRouter(tags=["system"])


@router.get("/")
async def read_root() -> dict[str, str]:
    """Hello World endpoint used by smoke tests."""

    return {"message": "Hello World"}


@router.get("/health")
async def health_check(
    catalog: CatalogDependency,
    client: Annotated[redis.Redis, Depends(get_redis_client)],
) -> dict[str, str]:
    """Health check reporting Redis connectivity and catalog state."""

    try:
        await client.ping()
        redis_status = "connected"
    except (RedisError, OSError) as exc:
        logger.warning("Redis health check failed: %s", exc)
        redis_status = "disconnected"

    return {
        "status": "healthy",
        "redis": redis_status,
        "catalog": "loaded" if catalog.is_loaded else "not loaded",
        "environment": settings.ENVIRONMENT,
    }
