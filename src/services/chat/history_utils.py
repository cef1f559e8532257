"""Utilities to inspect the question and previous chat interactions."""

from __future__ import annotations

import re
from collections.abc import Iterable

from src.models.chat import ChatIntent, ChatMessage

_DATE_QUESTION = re.compile(
    r"(дата|время|число|сегодня|сейчас|\bdate\b|\btime\b|\btoday\b)",
    re.IGNORECASE,
)


def asks_for_date(question: str) -> bool:
    """Detect "what day/time is it" questions."""
    return bool(_DATE_QUESTION.search(question))


def search_query_for(intent: ChatIntent, question: str) -> tuple[str, str]:
    """Return ``(display_query, search_query)`` for a product question.

    The search query appends the intent keywords to the best available phrasing.
    """
    base = intent.normalized_query or intent.original_query or question
    full = f"{base} {' '.join(intent.filters.keywords)}".strip().lower()
    return base, full


def format_history_entry(entry: ChatMessage) -> str:
    return f"{entry.role}: {entry.content}"


def format_history(entries: Iterable[ChatMessage]) -> str:
    return "\n".join(format_history_entry(entry) for entry in entries)
