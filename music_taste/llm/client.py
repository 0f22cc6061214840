"""LiteLLM wrapper with structured logging."""

from __future__ import annotations

import json
import logging
from typing import Any

import litellm

from music_taste.config import AGENT_CONFIG

logger = logging.getLogger(__name__)

# Suppress litellm's verbose logging
litellm.suppress_debug_info = True


async def llm_complete(
    messages: list[dict[str, str]],
    model: str | None = None,
    temperature: float | None = None,
    max_tokens: int | None = None,
    max_attempts: int | None = None,
) -> str:
    """Send a chat completion request via litellm and return the text response.

    Returns an empty string when the model produced no content.
    """
    model = model or AGENT_CONFIG["llm_model"]
    temperature = temperature if temperature is not None else AGENT_CONFIG["llm_temperature"]
    max_tokens = max_tokens or AGENT_CONFIG["llm_max_tokens"]
    max_attempts = max_attempts or AGENT_CONFIG["llm_max_attempts"]

    for attempt in range(max_attempts):
        try:
            response = await litellm.acompletion(
                model=model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
            )
            return response.choices[0].message.content or ""
        except Exception:
            if attempt == max_attempts - 1:
                raise
            logger.warning("LLM call failed (attempt %d/%d), retrying...", attempt + 1, max_attempts)

    return ""  # unreachable but satisfies type checker


def strip_code_fences(text: str) -> str:
    """Remove a surrounding markdown code fence, if any."""
    cleaned = text.strip()
    if cleaned.startswith("```"):
        lines = cleaned.split("\n")
        # Remove first and last lines (fences)
        lines = [l for l in lines[1:] if not l.strip().startswith("```")]
        cleaned = "\n".join(lines)
    return cleaned


async def llm_complete_json(
    messages: list[dict[str, str]],
    model: str | None = None,
    temperature: float | None = None,
    max_tokens: int | None = None,
) -> Any:
    """Send a completion request and parse the response as JSON.

    The prompt should instruct the LLM to respond with valid JSON only.
    Raises ``json.JSONDecodeError`` on unparseable output.
    """
    text = await llm_complete(messages, model=model, temperature=temperature, max_tokens=max_tokens)
    return json.loads(strip_code_fences(text))
