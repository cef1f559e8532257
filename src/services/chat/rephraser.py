"""Stylistic polishing of generated replies through the decoder."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from src.config import settings
from src.models.build import Build
from src.models.chat import ChatMessage
from src.services.chat.history_utils import format_history
from src.services.chat.reply_builder import format_build_context
from src.services.clients.decoder_client import DecoderClient

logger = logging.getLogger(__name__)

NO_DATA_FALLBACK = (
    "I could not find matching products. Could you describe what you are "
    "looking for in a bit more detail?"
)


async def rephrase_reply(
    decoder: DecoderClient | None,
    draft: str,
    build: Build,
    history: Sequence[ChatMessage],
) -> str:
    """Make a data-bearing reply friendlier without touching its content.

    Every product, price, brand and SKU of ``draft`` must survive; on any
    decoder problem the draft is returned unchanged.
    """
    if decoder is None:
        return draft
    recent = history[-settings.REPHRASE_HISTORY_MESSAGES :]
    prompt = (
        f"Conversation so far:\n{format_history(recent)}\n\n"
        f"Prepared answer:\n{draft}\n\n"
        "Make this answer sound a bit more natural, but do not change the data."
    )
    try:
        reply = await decoder.decode(
            prompt,
            instructions=_rephrase_instructions(build),
            temperature=0.3,
        )
    except Exception as exc:  # pylint: disable=broad-exception-caught
        logger.warning("Decoder error during rephrasing, using draft: %s", exc)
        return draft
    return reply.strip() or draft


async def answer_without_data(
    decoder: DecoderClient | None,
    question: str,
    build: Build,
    history: Sequence[ChatMessage],
) -> str:
    """Free-form answer for questions that are not about catalog data."""
    if decoder is None:
        return NO_DATA_FALLBACK
    prompt = (
        f"Conversation so far:\n{format_history(history)}\n\n"
        f"Customer: {question}"
    )
    try:
        reply = await decoder.decode(
            prompt,
            instructions=_no_data_instructions(build),
            temperature=0.6,
        )
    except Exception as exc:  # pylint: disable=broad-exception-caught
        logger.warning("Decoder error while answering without data: %s", exc)
        return NO_DATA_FALLBACK
    return reply.strip() or NO_DATA_FALLBACK


def _rephrase_instructions(build: Build) -> str:
    return (
        f"You are Robert, a sales consultant at {settings.STORE_NAME}.\n"
        "You receive a prepared answer with real products and prices from the "
        "store catalog. Your task:\n"
        "1. Rephrase the text to sound friendlier.\n"
        "2. Do not add, remove or change products, prices, brands, SKUs or "
        "categories.\n"
        "3. Do not invent anything: the list is final and comes from the catalog.\n"
        "If the text is already well formatted, return it as is.\n"
        f"{format_build_context(build)}"
    )


def _no_data_instructions(build: Build) -> str:
    return (
        f"You are Robert, a sales consultant at {settings.STORE_NAME}.\n"
        "If there are no products or builds to show, politely explain it and "
        "suggest refining the request. Never invent products.\n"
        f"{format_build_context(build)}"
    )
