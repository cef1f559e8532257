"""FastAPI application factory and bootstrap helpers."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.routes import include_api_routes
from src.config import settings
from src.services.catalog import EngineUnavailable, get_catalog
from src.services.storage.redis_client import close_redis_client

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Warm the catalog snapshot on startup and release Redis on shutdown."""
    catalog = get_catalog()
    try:
        snapshot = await asyncio.to_thread(catalog.snapshot)
        logger.info("Catalog ready with %s products", len(snapshot))
    except EngineUnavailable as exc:
        # Searches will report the outage until the snapshot appears.
        logger.warning("Starting without a catalog snapshot: %s", exc)

    yield

    await close_redis_client()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="Over-Shop Assistant",
        description="Product search and budget PC assembly for the shop assistant",
        version="1.0.0",
        lifespan=lifespan,
    )

    _configure_cors(app)
    include_api_routes(app)

    return app


def _configure_cors(app: FastAPI) -> None:
    """Allow broad access in non-production environments."""

    if settings.is_production:
        return

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
