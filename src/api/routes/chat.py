"""Routes implementing the conversational /chat API."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from src.models.chat import ChatHistoryResponse, ChatRequest, ChatResponse
from src.services.builds.build_store import BuildStoreDependency
from src.services.chat.history_store import HistoryStoreDependency
from src.services.chat.orchestrator import ChatOrchestrator, create_chat_orchestrator
from src.services.clients.decoder_client import DecoderDependency
from src.services.search.engine import SearchEngineDependency

router = APIRouter(prefix="/chat", tags=["chat"])


def _build_orchestrator(
    engine: SearchEngineDependency,
    build_store: BuildStoreDependency,
    history_store: HistoryStoreDependency,
    decoder: DecoderDependency,
) -> ChatOrchestrator:
    return create_chat_orchestrator(
        engine=engine,
        build_store=build_store,
        history_store=history_store,
        decoder=decoder,
    )


OrchestratorDependency = Annotated[ChatOrchestrator, Depends(_build_orchestrator)]


@router.post(
    "",
    response_model=ChatResponse,
    summary="Answer a classified customer question",
)
async def submit_chat(
    payload: ChatRequest,
    orchestrator: OrchestratorDependency,
) -> ChatResponse:
    return await orchestrator.handle(payload)


@router.get(
    "/history/{session_id}",
    response_model=ChatHistoryResponse,
    summary="Fetch the stored conversation of a session",
)
async def fetch_chat_history(
    session_id: str,
    history_store: HistoryStoreDependency,
) -> ChatHistoryResponse:
    exchanges = await history_store.exchanges(session_id)
    return ChatHistoryResponse(session_id=session_id, messages=exchanges)
