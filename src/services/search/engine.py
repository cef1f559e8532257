"""Keyword search over the catalog snapshot with fuzzy fallback and ranking."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends

from src.config import settings
from src.models.product import Product, ScoredCandidate, SearchFilters, SearchHit
from src.services.catalog import CatalogProvider, CatalogSnapshot, get_catalog
from src.services.text.normalizer import normalize
from src.services.text.similarity import is_similar

logger = logging.getLogger(__name__)

SUBSTRING_BONUS = 3
FUZZY_BONUS = 2


@dataclass(frozen=True)
class _IndexedProduct:
    product: Product
    name: str
    brand: str
    category: str
    article: str
    sku: str

    @classmethod
    def build(cls, product: Product) -> _IndexedProduct:
        return cls(
            product=product,
            name=normalize(product.name),
            brand=normalize(product.brand),
            category=normalize(product.category),
            article=normalize(product.article),
            sku=normalize(product.sku),
        )

    def contains(self, keyword: str) -> bool:
        return (
            keyword in self.name
            or keyword in self.brand
            or keyword in self.category
            or keyword in self.article
            or keyword in self.sku
        )


def build_keywords(query: str | None, filters: SearchFilters) -> list[str]:
    """Normalized, de-duplicated keyword list in first-seen order."""
    raw = [query, *filters.keywords, *filters.brand, *filters.category]
    keywords: list[str] = []
    for item in raw:
        term = normalize(item)
        if term and term not in keywords:
            keywords.append(term)
    return keywords


def _normalized_terms(values: Iterable[str]) -> list[str]:
    return [term for term in (normalize(value) for value in values) if term]


def _field_matches(field: str, terms: Sequence[str]) -> bool:
    return any(term in field or is_similar(field, term) for term in terms)


def score_name(name: str, keywords: Sequence[str]) -> int:
    """Rank score of a normalized product name.

    Substring and fuzzy bonuses are independent, so one keyword can add both.
    """
    score = 0
    for keyword in keywords:
        if keyword in name:
            score += SUBSTRING_BONUS
        if is_similar(name, keyword):
            score += FUZZY_BONUS
    return score


class SearchEngine:
    """Ranked, size-bounded product search against the current snapshot."""

    def __init__(self, catalog: CatalogProvider) -> None:
        self._catalog = catalog
        self._index: tuple[CatalogSnapshot, list[_IndexedProduct]] | None = None

    def search(
        self,
        query: str | None,
        filters: SearchFilters | None = None,
        limit: int | None = None,
    ) -> list[ScoredCandidate]:
        """Return candidates sorted by score (descending), at most ``limit``.

        Raises EngineUnavailable when the catalog cannot be read.
        """
        filters = filters or SearchFilters()
        limit = limit or settings.SEARCH_DEFAULT_LIMIT

        keywords = build_keywords(query, filters)
        if not keywords:
            return []

        brands = _normalized_terms(filters.brand)
        categories = _normalized_terms(filters.category)

        candidates: list[ScoredCandidate] = []
        for entry in self._indexed():
            if not self._is_candidate(entry, keywords):
                continue
            if brands and not _field_matches(entry.brand, brands):
                continue
            if categories and not _field_matches(entry.category, categories):
                continue
            price = entry.product.price
            if filters.max_price is not None and price > filters.max_price:
                continue
            if filters.min_price is not None and price < filters.min_price:
                continue
            candidates.append(
                ScoredCandidate(
                    product=entry.product,
                    score=score_name(entry.name, keywords),
                )
            )

        candidates.sort(key=lambda candidate: -candidate.score)
        results = candidates[:limit]
        logger.debug(
            "Search matched %s products, returning %s",
            len(candidates),
            len(results),
            extra={"query": query, "keywords": keywords},
        )
        return results

    def search_hits(
        self,
        query: str | None,
        filters: SearchFilters | None = None,
        limit: int | None = None,
    ) -> list[SearchHit]:
        """Search and reduce each result to its presentation-safe fields."""
        return [
            SearchHit.from_product(candidate.product)
            for candidate in self.search(query, filters, limit)
        ]

    def browse(self, text: str | None, limit: int) -> tuple[int, list[Product]]:
        """Plain case-insensitive lookup by name, brand or SKU.

        Without ``text`` the first ``limit`` records are returned.
        """
        products = self._catalog.snapshot().products
        needle = (text or "").strip().lower()
        if not needle:
            return len(products), list(products[:limit])
        matches = [
            product
            for product in products
            if needle in product.name.lower()
            or needle in product.brand.lower()
            or needle in product.sku.lower()
        ]
        return len(matches), matches[:limit]

    @staticmethod
    def _is_candidate(entry: _IndexedProduct, keywords: Sequence[str]) -> bool:
        return any(
            entry.contains(keyword)
            or is_similar(entry.name, keyword)
            or is_similar(entry.category, keyword)
            for keyword in keywords
        )

    def _indexed(self) -> list[_IndexedProduct]:
        snapshot = self._catalog.snapshot()
        cached = self._index
        if cached is not None and cached[0] is snapshot:
            return cached[1]
        entries = [_IndexedProduct.build(product) for product in snapshot.products]
        self._index = (snapshot, entries)
        return entries


def rank_for_presentation(
    candidates: Iterable[ScoredCandidate],
    top: int | None = None,
) -> list[ScoredCandidate]:
    """Pick the candidates worth showing for a plain product question.

    Invalid records are dropped; zero-score matches are dropped unless nothing
    else is left. Ties on score go to the cheaper item.
    """
    top = top or settings.PRESENTATION_TOP_N
    valid = [candidate for candidate in candidates if candidate.product.is_presentable]
    relevant = [candidate for candidate in valid if candidate.score > 0]
    pool = relevant or valid
    ranked = sorted(pool, key=lambda c: (-c.score, c.product.price))
    return ranked[:top]


_engine = SearchEngine(get_catalog())


def get_search_engine() -> SearchEngine:
    """FastAPI dependency factory."""

    return _engine


SearchEngineDependency = Annotated[SearchEngine, Depends(get_search_engine)]
