"""Product domain models and search API schemas."""

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def parse_number(value: Any) -> float | None:
    """Parse catalog numbers such as ``"123 990"`` or ``"1 299,5"``.

    Returns None for empty, non-numeric or non-finite input.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = "".join(str(value).split()).replace(",", ".")
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    if not math.isfinite(number):
        return None
    return number


class Product(BaseModel):
    """Immutable catalog record taken from the inventory snapshot."""

    model_config = ConfigDict(frozen=True)

    sku: str = ""
    name: str = ""
    brand: str = ""
    category: str = ""
    article: str = ""
    price: float = 0.0
    stock: int | None = None

    @property
    def is_presentable(self) -> bool:
        """True when the record can be shown to a customer."""
        if not self.name.strip():
            return False
        if not math.isfinite(self.price) or self.price <= 0:
            return False
        return self.stock is None or self.stock >= 0

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> Product:
        """Build a product from a raw snapshot record.

        The installment (``credit``) price is preferred over the list price
        when the record carries one.
        """
        price = parse_number(record.get("credit"))
        if not price:
            price = parse_number(record.get("price"))
        stock = parse_number(record.get("stock"))
        return cls(
            sku=_text(record.get("sku")),
            name=_text(record.get("name")),
            brand=_text(record.get("brand")),
            category=_text(record.get("category")),
            article=_text(record.get("article")),
            price=price or 0.0,
            stock=int(stock) if stock is not None else None,
        )


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _coerce_terms(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple, set)):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


def _coerce_price(value: Any) -> float | None:
    number = parse_number(value)
    if number is None or number <= 0:
        return None
    return number


class SearchFilters(BaseModel):
    """Structured, advisory filters. Malformed values are treated as absent."""

    keywords: list[str] = Field(default_factory=list)
    brand: list[str] = Field(default_factory=list)
    category: list[str] = Field(default_factory=list)
    min_price: float | None = None
    max_price: float | None = None

    @field_validator("keywords", "brand", "category", mode="before")
    @classmethod
    def _terms(cls, value: Any) -> list[str]:
        return _coerce_terms(value)

    @field_validator("min_price", "max_price", mode="before")
    @classmethod
    def _prices(cls, value: Any) -> float | None:
        return _coerce_price(value)


class ScoredCandidate(BaseModel):
    """A product matched by the search engine together with its rank score."""

    model_config = ConfigDict(frozen=True)

    product: Product
    score: int = Field(0, ge=0)
    distance_from_allocation: float | None = None


class SearchHit(BaseModel):
    """Presentation-safe subset of a product returned across the search boundary."""

    model_config = ConfigDict(frozen=True)

    sku: str
    name: str
    price: float
    stock: int | None = None
    brand: str = ""

    @classmethod
    def from_product(cls, product: Product) -> SearchHit:
        return cls(
            sku=product.sku,
            name=product.name,
            price=product.price,
            stock=product.stock,
            brand=product.brand,
        )


class SearchRequest(BaseModel):
    """Incoming payload for POST /search."""

    query: str = ""
    filters: SearchFilters = Field(default_factory=SearchFilters)
    limit: int | None = Field(
        default=None,
        ge=1,
        description="Maximum number of hits, defaults to the configured limit",
    )

    @field_validator("query", mode="before")
    @classmethod
    def _query(cls, value: Any) -> str:
        return value if isinstance(value, str) else ""

    @field_validator("filters", mode="before")
    @classmethod
    def _filters(cls, value: Any) -> Any:
        return value if isinstance(value, (dict, SearchFilters)) else {}


class CatalogPage(BaseModel):
    """Response body for GET /products."""

    count: int
    products: list[Product] = Field(default_factory=list)
