"""Async Claude API client."""

from __future__ import annotations

import logging
from typing import Any

import anthropic

from src.config import settings
from src.llm.models import resolve_model

logger = logging.getLogger(__name__)

_client: anthropic.AsyncAnthropic | None = None


def _get_client() -> anthropic.AsyncAnthropic:
    """Lazily initialize the Anthropic client."""
    global _client  # noqa: PLW0603
    if _client is None:
        _client = anthropic.AsyncAnthropic(
            api_key=settings.anthropic_api_key,
            timeout=settings.translation_timeout_seconds,
            max_retries=1,
        )
    return _client


async def complete_text(
    messages: list[dict[str, Any]],
    *,
    system: str | list[dict[str, Any]] | None = None,
    model: str | None = None,
    max_tokens: int = 1024,
) -> str:
    """Single-shot Claude call — no tools, no streaming.

    Returns the concatenated text blocks of the response. Raises
    ``anthropic.APIError`` subclasses on provider failure and ValueError
    when the response carries no text.
    """
    client = _get_client()
    kwargs: dict[str, Any] = {
        "model": model or resolve_model(settings.translation_model),
        "max_tokens": max_tokens,
        "messages": messages,
    }
    if system is not None:
        kwargs["system"] = system
    response = await client.messages.create(**kwargs)
    text_blocks = [block.text for block in response.content if block.type == "text"]
    if not text_blocks:
        msg = "Unexpected response type from Claude: no text block"
        raise ValueError(msg)
    return "".join(text_blocks)
