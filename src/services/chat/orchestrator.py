"""Intent dispatch for the conversational assistant."""

from __future__ import annotations

import asyncio
import logging
import uuid
from datetime import datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from src.config import settings
from src.models.chat import ChatRequest, ChatResponse
from src.services.assembly.assembler import BudgetAssembler
from src.services.builds.build_store import BuildStore
from src.services.catalog import EngineUnavailable
from src.services.chat import reply_builder
from src.services.chat.history_store import ChatHistoryStore
from src.services.chat.history_utils import asks_for_date, search_query_for
from src.services.chat.rephraser import answer_without_data, rephrase_reply
from src.services.clients.decoder_client import DecoderClient
from src.services.search.engine import SearchEngine, rank_for_presentation

logger = logging.getLogger(__name__)


class ChatOrchestrator:
    """Turns a classified question into an answer and records the exchange."""

    def __init__(
        self,
        *,
        engine: SearchEngine,
        assembler: BudgetAssembler,
        build_store: BuildStore,
        history_store: ChatHistoryStore,
        decoder: DecoderClient | None,
    ) -> None:
        self._engine = engine
        self._assembler = assembler
        self._build_store = build_store
        self._history = history_store
        self._decoder = decoder

    async def handle(self, payload: ChatRequest) -> ChatResponse:
        session_id = payload.session_id or str(uuid.uuid4())
        intent = payload.intent
        question = payload.question
        logger.info(
            "Chat question received",
            extra={"session_id": session_id, "intent": intent.intent},
        )

        if intent.needs_clarification and intent.clarification_prompt:
            answer = intent.clarification_prompt
        elif intent.dispatch_key == "other" and asks_for_date(question):
            answer = reply_builder.date_reply(_store_now())
        else:
            try:
                answer = await self._dispatch(session_id, payload)
            except EngineUnavailable as exc:
                logger.error("Catalog unavailable while answering: %s", exc)
                answer = reply_builder.catalog_unavailable_reply()

        await self._history.append_exchange(session_id, question, answer)
        return ChatResponse(
            session_id=session_id,
            intent=intent.dispatch_key,
            answer=answer,
        )

    async def _dispatch(self, session_id: str, payload: ChatRequest) -> str:
        intent = payload.intent
        key = intent.dispatch_key

        if key == "order_build":
            build = await self._build_store.get(session_id)
            return reply_builder.format_order_summary(build)

        if key == "build_pc" and intent.effective_budget is None:
            return reply_builder.budget_missing_reply()

        history = await self._history.recent(
            session_id, settings.CHAT_HISTORY_LIMIT
        )

        if key == "search_product":
            display_query, search_query = search_query_for(intent, payload.question)
            candidates = await asyncio.to_thread(
                self._engine.search, search_query, intent.filters
            )
            ranked = rank_for_presentation(candidates)
            draft = reply_builder.format_search_reply(display_query, ranked)
            build = await self._build_store.get(session_id)
            if not ranked:
                return draft
            return await rephrase_reply(self._decoder, draft, build, history)

        if key == "build_pc":
            build = await self._assembler.assemble_for_session(
                session_id,
                intent.effective_budget,
                intent.filters,
            )
            draft = reply_builder.format_build_reply(build)
            return await rephrase_reply(self._decoder, draft, build, history)

        build = await self._build_store.get(session_id)
        return await answer_without_data(
            self._decoder, payload.question, build, history
        )


def _store_now() -> datetime:
    try:
        return datetime.now(ZoneInfo(settings.STORE_TIMEZONE))
    except ZoneInfoNotFoundError:
        logger.warning("Unknown timezone %s, using local time", settings.STORE_TIMEZONE)
        return datetime.now()


def create_chat_orchestrator(
    *,
    engine: SearchEngine,
    build_store: BuildStore,
    history_store: ChatHistoryStore,
    decoder: DecoderClient | None,
) -> ChatOrchestrator:
    return ChatOrchestrator(
        engine=engine,
        assembler=BudgetAssembler(engine, build_store),
        build_store=build_store,
        history_store=history_store,
        decoder=decoder,
    )
