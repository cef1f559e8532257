"""Budget-constrained PC assembly on top of the search engine."""

from __future__ import annotations

import asyncio
import logging
import math
from collections.abc import Sequence
from typing import Protocol

from src.config import settings
from src.models.build import (
    GPU_UPGRADE_QUERY,
    Build,
    BuildParts,
    Slot,
    allocate,
)
from src.models.product import ScoredCandidate, SearchFilters, SearchHit
from src.services.builds.build_store import BuildStore
from src.services.text.normalizer import normalize

logger = logging.getLogger(__name__)

SEARCH_HEADROOM = 1.2
BAND_LOW = 0.6
BAND_HIGH = 1.4
REBALANCE_TRIGGER = 0.85
GPU_UPGRADE_SHARE = 0.4


class CandidateSearch(Protocol):
    def search(
        self,
        query: str | None,
        filters: SearchFilters | None = None,
        limit: int | None = None,
    ) -> list[ScoredCandidate]: ...


def _mentions_brand(name: str, brands: Sequence[str]) -> bool:
    normalized = normalize(name)
    return any(brand in normalized for brand in brands)


def select_component(
    candidates: Sequence[ScoredCandidate],
    allocated: float,
    brands: Sequence[str] = (),
) -> ScoredCandidate | None:
    """Pick the "sensible middle" candidate for a slot.

    Only prices strictly inside ``(0.6, 1.4) * allocated`` qualify. Requested
    brands sort first, then price ascending; the element at ``count // 2`` wins.
    """
    low, high = allocated * BAND_LOW, allocated * BAND_HIGH
    in_band = [
        candidate.model_copy(
            update={
                "distance_from_allocation": abs(candidate.product.price - allocated)
            }
        )
        for candidate in candidates
        if low < candidate.product.price < high
    ]
    if not in_band:
        return None

    in_band.sort(
        key=lambda c: (0 if _mentions_brand(c.product.name, brands) else 1, c.product.price)
    )
    return in_band[len(in_band) // 2]


class BudgetAssembler:
    """Splits a budget over the slots and fills each one from the catalog.

    Slot searches are independent and run concurrently, each bounded by a
    timeout; a slot that times out stays empty. The rebalancing pass runs once
    after every slot has reported.
    """

    def __init__(
        self,
        engine: CandidateSearch,
        store: BuildStore | None = None,
        *,
        slot_timeout: float | None = None,
    ) -> None:
        self._engine = engine
        self._store = store
        self._slot_timeout = (
            slot_timeout
            if slot_timeout is not None
            else settings.SLOT_SEARCH_TIMEOUT_SECONDS
        )

    async def assemble(
        self,
        budget: float,
        filters: SearchFilters | None = None,
    ) -> Build:
        if not math.isfinite(budget) or budget <= 0:
            logger.warning("Refusing to assemble for budget %s", budget)
            return Build.empty()

        filters = filters or SearchFilters()
        brands =[term for term in (normalize(b) for b in filters.brand) if term]

        picks = await asyncio.gather(
            *(self._fill_slot(slot, budget, filters, brands) for slot in Slot)
        )
        choices: dict[Slot, SearchHit] = {
            slot: hit for slot, hit in zip(Slot, picks) if hit is not None
        }
        total = _total(choices)

        if total < budget * REBALANCE_TRIGGER:
            choices = await self._rebalance(budget, choices)
            total = _total(choices)

        logger.info(
            "Assembled build with %s of %s slots",
            len(choices),
            len(Slot),
            extra={"budget": budget, "total": total},
        )
        return Build(
            parts=BuildParts.from_choices(choices),
            total=total,
            budget=budget,
        )

    async def assemble_for_session(
        self,
        session_id: str,
        budget: float,
        filters: SearchFilters | None = None,
    ) -> Build:
        """Assemble and persist the session's build, one assembly at a time."""
        if self._store is None:
            raise RuntimeError("BudgetAssembler has no build store configured")

        async with self._store.session_lock(session_id):
            build = await self.assemble(budget, filters)
            await self._store.save(session_id, build)
        return build

    async def _fill_slot(
        self,
        slot: Slot,
        budget: float,
        filters: SearchFilters,
        brands: Sequence[str],
    ) -> SearchHit | None:
        allocated = allocate(budget, slot)
        label = slot.category_label
        query = " ".join([label, *filters.keywords, *filters.brand])
        scoped = SearchFilters(
            category=[label],
            max_price=math.floor(allocated * SEARCH_HEADROOM),
        )

        candidates = await self._search(query, scoped, slot.value)
        chosen = select_component(candidates, allocated, brands)
        if chosen is None:
            logger.info(
                "No acceptable candidate for slot %s",
                slot.value,
                extra={"allocated": allocated, "found": len(candidates)},
            )
            return None

        logger.debug(
            "Slot %s -> %s (%s)",
            slot.value,
            chosen.product.name,
            chosen.product.price,
            extra={"distance_from_allocation": chosen.distance_from_allocation},
        )
        return SearchHit.from_product(chosen.product)

    async def _rebalance(
        self,
        budget: float,
        choices: dict[Slot, SearchHit],
    ) -> dict[Slot, SearchHit]:
        upgrade_filters = SearchFilters(max_price=budget * GPU_UPGRADE_SHARE)
        candidates = [
            candidate
            for candidate in await self._search(
                GPU_UPGRADE_QUERY, upgrade_filters, "rebalance"
            )
            if candidate.product.is_presentable
        ]
        if not candidates:
            return choices

        best = max(candidates, key=lambda candidate: candidate.product.price)
        current = choices.get(Slot.GPU)
        if current is not None and best.product.price <= current.price:
            return choices

        logger.info(
            "Rebalanced gpu slot to %s",
            best.product.name,
            extra={
                "previous": current.name if current else None,
                "price": best.product.price,
            },
        )
        return {**choices, Slot.GPU: SearchHit.from_product(best.product)}

    async def _search(
        self,
        query: str,
        filters: SearchFilters,
        label: str,
    ) -> list[ScoredCandidate]:
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(self._engine.search, query, filters),
                timeout=self._slot_timeout,
            )
        except TimeoutError:
            logger.warning(
                "Search for %s timed out after %ss", label, self._slot_timeout
            )
            return []


def _total(choices: dict[Slot, SearchHit]) -> float:
    return sum(hit.price for hit in choices.values())
