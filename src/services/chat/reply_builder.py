"""Deterministic reply texts for search results, builds and orders."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from src.config import settings
from src.models.build import Build, Slot
from src.models.product import ScoredCandidate

CURRENCY = "₸"

_MONTHS = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


def format_price(value: float) -> str:
    """``450000`` -> ``"450 000 ₸"``."""
    return f"{round(value):,}".replace(",", " ") + f" {CURRENCY}"


def format_search_reply(query: str, candidates: Sequence[ScoredCandidate]) -> str:
    if not candidates:
        return (
            f'I could not find exact matches for "{query}".\n'
            'Try to be more specific, for example "iPhone 16 Pro 256GB black".'
        )

    lines = []
    for index, candidate in enumerate(candidates, start=1):
        product = candidate.product
        stock = product.stock if product.stock is not None else "?"
        lines.append(
            f"{index}. {product.name}\n"
            f"{format_price(product.price)} | SKU: {product.sku or '-'} "
            f"| In stock: {stock} pcs."
        )
    return (
        f'Here is what I found for "{query}":\n\n'
        + "\n\n".join(lines)
        + "\n\nShould I narrow it down by color, memory size or budget?"
    )


def _slot_title(slot: Slot) -> str:
    return slot.value.upper()


def format_build_reply(build: Build) -> str:
    header = f"Assembling a PC for a budget of {format_price(build.budget)}...\n\n"
    if build.is_empty:
        return (
            header
            + "I could not find suitable components for this budget. "
            "Try a different budget or fewer brand preferences."
        )

    parts = "\n\n".join(
        f"- {_slot_title(slot)}: {hit.name}\n{format_price(hit.price)}"
        for slot, hit in build.parts.items()
    )
    missing = [slot.value for slot in Slot if build.parts.get(slot) is None]

    text = header + parts + f"\n\nTotal: {format_price(build.total)}"
    if missing:
        text += f"\nNo matching offer for: {', '.join(missing)}."
    text += "\n" + _budget_verdict(build)
    text += f"\n\nAll prices are taken from the {settings.STORE_NAME} catalog."
    return text


def _budget_verdict(build: Build) -> str:
    if build.total > build.budget * 1.1:
        overrun = format_price(build.total - build.budget)
        return f"The build is slightly over budget ({overrun})."
    if build.total < build.budget * 0.8:
        return "There is budget left: the GPU or CPU could be upgraded."
    return "The build fits the budget."


def format_order_summary(build: Build) -> str:
    if build.is_empty:
        return (
            "You do not have a saved build yet. Let's assemble a PC first "
            "and then I will help you place the order."
        )
    components = "\n".join(
        f"- {_slot_title(slot)}: {hit.name}" for slot, hit in build.parts.items()
    )
    return (
        "Would you like to order your latest PC build for "
        f"{format_price(build.total)}?\n\n"
        f"{components}\n\n"
        "Confirm the order or tell me more details, such as case color, "
        "delivery or payment."
    )


def format_build_context(build: Build) -> str:
    """Describe the stored build for the rephrasing prompt."""
    if build.is_empty:
        return ""
    components = "\n".join(
        f"- {slot.value}: {hit.name} ({format_price(hit.price)})"
        for slot, hit in build.parts.items()
    )
    return (
        "The customer already has a saved PC build costing "
        f"{format_price(build.total)}.\n"
        f"Components:\n{components}\n"
        'If they ask "did we build a PC?" or "show my build", use this data '
        "and do not assemble a new one."
    )


def budget_missing_reply() -> str:
    return (
        "I can assemble a PC for you. What budget should I aim for? "
        "For example: 500 000 ₸."
    )


def catalog_unavailable_reply() -> str:
    return (
        "Sorry, the product catalog is temporarily unavailable. "
        "Please try again in a few minutes."
    )


def date_reply(now: datetime) -> str:
    date_text = f"{now.day} {_MONTHS[now.month - 1]} {now.year}"
    return f"Today is {date_text}, the time is {now:%H:%M}."
