"""Redis-backed conversation history per session."""

from __future__ import annotations

import logging
from typing import Annotated

import redis.asyncio as redis
from fastapi import Depends
from pydantic import ValidationError
from redis.exceptions import RedisError

from src.config import settings
from src.models.chat import ChatExchange, ChatMessage
from src.services.storage.redis_client import get_redis_client

logger = logging.getLogger(__name__)


class ChatHistoryStore:
    """Keeps the most recent messages of each session in a capped Redis list."""

    def __init__(self, client: redis.Redis):
        self._client = client
        self._prefix = settings.CHAT_HISTORY_KEY_PREFIX
        self._limit = settings.CHAT_HISTORY_LIMIT

    def _key(self, session_id: str) -> str:
        return f"{self._prefix}{session_id}"

    async def append_exchange(self, session_id: str, question: str, answer: str) -> None:
        key = self._key(session_id)
        messages = [
            ChatMessage(role="user", content=question),
            ChatMessage(role="assistant", content=answer),
        ]
        try:
            await self._client.rpush(
                key, *(message.model_dump_json() for message in messages)
            )
            await self._client.ltrim(key, -self._limit, -1)
        except RedisError as exc:
            logger.warning("History write failed for session %s: %s", session_id, exc)

    async def recent(self, session_id: str, count: int | None = None) -> list[ChatMessage]:
        """Return up to ``count`` latest messages, oldest first."""
        start = -count if count else 0
        try:
            raw_items = await self._client.lrange(self._key(session_id), start, -1)
        except RedisError as exc:
            logger.warning("History read failed for session %s: %s", session_id, exc)
            return []

        messages: list[ChatMessage] = []
        for raw in raw_items:
            try:
                messages.append(ChatMessage.model_validate_json(raw))
            except ValidationError:
                logger.debug("Skipping malformed history entry for %s", session_id)
        return messages

    async def exchanges(self, session_id: str) -> list[ChatExchange]:
        """Stored history grouped into question/answer pairs."""
        exchanges: list[ChatExchange] = []
        for message in await self.recent(session_id):
            if message.role == "user" or not exchanges:
                exchanges.append(ChatExchange())
            if message.role == "user":
                exchanges[-1].user = message.content
            else:
                exchanges[-1].bot = message.content
        return exchanges


def get_history_store(
    client: Annotated[redis.Redis, Depends(get_redis_client)],
) -> ChatHistoryStore:
    """FastAPI dependency factory."""

    return ChatHistoryStore(client)


HistoryStoreDependency = Annotated[ChatHistoryStore, Depends(get_history_store)]
