"""Schemas used by the conversational /chat API."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from src.models.product import SearchFilters, parse_number

IntentName = Literal["search_product", "build_pc", "order_build", "other"]


class ChatIntent(BaseModel):
    """Structured intent produced upstream by the intent classifier.

    The dispatch key is trusted as-is; unknown values are handled as "other".
    """

    intent: str = "other"
    filters: SearchFilters = Field(default_factory=SearchFilters)
    budget: float | None = None
    normalized_query: str | None = None
    original_query: str | None = None
    needs_clarification: bool = False
    clarification_prompt: str | None = None

    @field_validator("budget", mode="before")
    @classmethod
    def _budget(cls, value: Any) -> float | None:
        number = parse_number(value)
        if number is None or number <= 0:
            return None
        return number

    @field_validator("filters", mode="before")
    @classmethod
    def _filters(cls, value: Any) -> Any:
        return value if isinstance(value, (dict, SearchFilters)) else {}

    @property
    def dispatch_key(self) -> IntentName:
        if self.intent in ("search_product", "build_pc", "order_build"):
            return self.intent  # type: ignore[return-value]
        return "other"

    @property
    def effective_budget(self) -> float | None:
        """Explicit budget, else the price ceiling from the filters."""
        return self.budget or self.filters.max_price


class ChatRequest(BaseModel):
    """Incoming payload for POST /chat."""

    session_id: str | None = None
    question: str = Field(..., min_length=1)
    intent: ChatIntent = Field(default_factory=ChatIntent)

    @field_validator("question")
    @classmethod
    def _question(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Question cannot be empty")
        return value


class ChatResponse(BaseModel):
    """Answer returned by POST /chat."""

    session_id: str
    intent: IntentName
    answer: str


class ChatMessage(BaseModel):
    """A stored history message."""

    role: Literal["user", "assistant"]
    content: str


class ChatExchange(BaseModel):
    """A question paired with the assistant's answer."""

    user: str = ""
    bot: str = ""


class ChatHistoryResponse(BaseModel):
    """Response body for GET /chat/history/{session_id}."""

    session_id: str
    messages: list[ChatExchange] = Field(default_factory=list)
