"""Routes for assembling and reading session builds."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from src.models.build import Build, BuildRequest, BuildSummary
from src.services.assembly.assembler import BudgetAssembler
from src.services.builds.build_store import BuildStoreDependency
from src.services.catalog import EngineUnavailable
from src.services.chat.reply_builder import format_order_summary
from src.services.search.engine import SearchEngineDependency

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/builds", tags=["builds"])


@router.post(
    "/{session_id}",
    response_model=Build,
    summary="Assemble a budget build and store it for the session",
)
async def assemble_build(
    session_id: str,
    payload: BuildRequest,
    engine: SearchEngineDependency,
    store: BuildStoreDependency,
) -> Build:
    assembler = BudgetAssembler(engine, store)
    try:
        return await assembler.assemble_for_session(
            session_id, payload.budget, payload.filters
        )
    except EngineUnavailable as exc:
        logger.error("Assembly failed, catalog unavailable: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Catalog is not available",
        ) from exc


@router.get(
    "/{session_id}",
    response_model=Build,
    summary="Fetch the current build of a session",
)
async def fetch_build(session_id: str, store: BuildStoreDependency) -> Build:
    return await store.get(session_id)


@router.get(
    "/{session_id}/summary",
    response_model=BuildSummary,
    summary="Order summary of the current build",
)
async def fetch_build_summary(
    session_id: str,
    store: BuildStoreDependency,
) -> BuildSummary:
    build = await store.get(session_id)
    return BuildSummary(
        session_id=session_id,
        has_build=not build.is_empty,
        summary=format_order_summary(build),
    )
