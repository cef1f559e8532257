"""Per-session lock so that only one assembly at a time writes a build."""

from __future__ import annotations

import logging

import redis.asyncio as redis
from redis.exceptions import LockError, RedisError

logger = logging.getLogger(__name__)


class SessionLock:
    """Single-instance Redis lock around one session's assembly.

    Acquisition polls until ``wait_timeout``; release is a token-checked
    compare-and-delete, so a lock that expired and was taken over is left
    alone. If the lock cannot be taken the holder proceeds anyway and the
    build store's last-write-wins semantics apply.
    """

    def __init__(
        self,
        client: redis.Redis,
        key: str,
        *,
        ttl: int,
        wait_timeout: float,
        poll_interval: float = 0.05,
    ) -> None:
        self.key = key
        self._lock = client.lock(
            key,
            timeout=ttl,
            sleep=poll_interval,
            blocking_timeout=wait_timeout,
        )
        self._acquired = False

    @property
    def acquired(self) -> bool:
        return self._acquired

    async def acquire(self) -> bool:
        self._acquired = bool(await self._lock.acquire())
        return self._acquired

    async def release(self) -> None:
        if not self._acquired:
            return
        self._acquired = False
        try:
            await self._lock.release()
        except LockError as exc:
            logger.warning("Session lock %s was lost before release: %s", self.key, exc)

    async def __aenter__(self) -> SessionLock:
        try:
            acquired = await self.acquire()
        except RedisError as exc:
            logger.warning("Session lock %s unavailable: %s", self.key, exc)
            acquired = False
        if not acquired:
            logger.warning(
                "Proceeding without session lock, last write wins",
                extra={"lock_key": self.key},
            )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        try:
            await self.release()
        except RedisError as release_exc:
            logger.warning("Failed to release %s: %s", self.key, release_exc)
