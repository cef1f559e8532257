"""Decoder (LLM) client used to polish assistant replies."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Annotated, Any

from fastapi import Depends
from openai import AsyncOpenAI

from src.config import settings

DEFAULT_MAX_TOKENS = 400


class DecoderClient(ABC):
    """Abstract decoder interface for text generation models."""

    @abstractmethod
    async def decode(
        self,
        prompt: str,
        *,
        instructions: str | None = None,
        temperature: float | None = None,
    ) -> str:
        """Return the completion for ``prompt`` under optional system ``instructions``."""


class OpenAIDecoderClient(DecoderClient):
    """Decoder implementation backed by the OpenAI Chat Completions API."""

    def __init__(
        self,
        *,
        api_key: str,
        model: str,
        base_url: str | None = None,
        max_tokens: int = DEFAULT_MAX_TOKENS,
    ) -> None:
        if not api_key:
            raise ValueError("OpenAI API key is required to initialize decoder client")
        self._client = AsyncOpenAI(api_key=api_key, base_url=base_url or None)
        self._model = model
        self._max_tokens = max_tokens

    async def decode(
        self,
        prompt: str,
        *,
        instructions: str | None = None,
        temperature: float | None = None,
    ) -> str:
        messages: list[dict[str, str]] = []
        if instructions:
            messages.append({"role": "system", "content": instructions})
        messages.append({"role": "user", "content": prompt})

        options: dict[str, Any] = {"max_tokens": self._max_tokens}
        if temperature is not None:
            options["temperature"] = temperature

        completion = await self._client.chat.completions.create(
            model=self._model,
            messages=messages,
            **options,
        )

        if getattr(completion, "choices", None):
            content = getattr(completion.choices[0].message, "content", None)
            if isinstance(content, list):
                # Newer SDKs can return list-based content payloads
                text_chunks = (
                    part.get("text", "") for part in content if isinstance(part, dict)
                )
                return "".join(text_chunks)
            if content:
                return content
        return ""


_decoder_client: DecoderClient | None = None


def _initialize_decoder() -> DecoderClient | None:
    if not settings.OPENAI_API_KEY:
        return None
    return OpenAIDecoderClient(
        api_key=settings.OPENAI_API_KEY,
        model=settings.OPENAI_MODEL,
    )


_decoder_client = _initialize_decoder()


def get_decoder_client() -> DecoderClient | None:
    """FastAPI dependency to obtain the configured decoder client if available."""

    return _decoder_client


DecoderDependency = Annotated[DecoderClient | None, Depends(get_decoder_client)]
