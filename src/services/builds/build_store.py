"""Redis-backed persistence for session builds."""

from __future__ import annotations

import logging
from typing import Annotated

import redis.asyncio as redis
from fastapi import Depends
from pydantic import ValidationError
from redis.exceptions import RedisError

from src.config import settings
from src.models.build import Build
from src.services.builds.session_lock import SessionLock
from src.services.storage.redis_client import get_redis_client

logger = logging.getLogger(__name__)


class BuildStore:
    """Key-value store of the current build per session.

    ``save`` is an upsert where the last write wins. ``get`` never fails: a
    missing or unreadable record is an empty build.
    """

    def __init__(self, client: redis.Redis):
        self._client = client
        self._prefix = settings.BUILD_KEY_PREFIX
        self._ttl = settings.BUILD_TTL_SECONDS

    def _key(self, session_id: str) -> str:
        return f"{self._prefix}{session_id}"

    async def get(self, session_id: str) -> Build:
        try:
            raw = await self._client.get(self._key(session_id))
        except RedisError as exc:
            logger.warning("Build read failed for session %s: %s", session_id, exc)
            return Build.empty()
        if not raw:
            return Build.empty()
        try:
            return Build.model_validate_json(raw)
        except ValidationError as exc:
            logger.warning("Discarding unreadable build for %s: %s", session_id, exc)
            return Build.empty()

    async def save(self, session_id: str, build: Build) -> bool:
        """Upsert the build; returns False when Redis rejected the write."""
        try:
            await self._client.set(
                self._key(session_id),
                build.model_dump_json(),
                ex=self._ttl,
            )
        except RedisError as exc:
            logger.warning("Build write failed for session %s: %s", session_id, exc)
            return False
        logger.info(
            "Saved build for session %s",
            session_id,
            extra={"total": build.total, "budget": build.budget},
        )
        return True

    def session_lock(self, session_id: str) -> SessionLock:
        return SessionLock(
            self._client,
            f"{settings.SESSION_LOCK_PREFIX}{session_id}",
            ttl=settings.SESSION_LOCK_TTL_SECONDS,
            wait_timeout=settings.SESSION_LOCK_WAIT_SECONDS,
        )


def get_build_store(
    client: Annotated[redis.Redis, Depends(get_redis_client)],
) -> BuildStore:
    """FastAPI dependency factory."""

    return BuildStore(client)


BuildStoreDependency = Annotated[BuildStore, Depends(get_build_store)]
