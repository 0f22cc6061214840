"""Text and suggestion generators backed by litellm.

The agent only sees ``GenerationResult`` values: every exception, timeout, or
malformed reply is converted to a failure here so it never crosses into the
state engine.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Generic, Protocol, TypeVar

from music_taste.config import AGENT_CONFIG
from music_taste.llm.client import llm_complete, llm_complete_json
from music_taste.models import ConversationTurn, SongSuggestion
from music_taste.prompts import RECOMMENDATION_SYSTEM

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class GenerationResult(Generic[T]):
    ok: bool
    value: T | None = None
    error: str | None = None

    @classmethod
    def success(cls, value: T) -> GenerationResult[T]:
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, reason: str) -> GenerationResult[T]:
        return cls(ok=False, error=reason)


class TextGenerator(Protocol):
    async def generate(
        self, context_summary: str, history: list[ConversationTurn],
    ) -> GenerationResult[str]: ...


class SuggestionGenerator(Protocol):
    async def generate(
        self, genres: list[str], moods: list[str], count: int,
    ) -> GenerationResult[list[SongSuggestion]]: ...


def parse_suggestions(payload: Any) -> list[SongSuggestion]:
    """Validate a decoded suggestion reply.

    The payload must be a list of objects each carrying string song, artist,
    genre and mood. Any bad item rejects the whole payload with ValueError.
    """
    if not isinstance(payload, list):
        raise ValueError(f"expected a JSON array, got {type(payload).__name__}")

    suggestions = []
    for idx, item in enumerate(payload):
        if not isinstance(item, dict):
            raise ValueError(f"item {idx} is not an object")
        fields = {}
        for key in ("song", "artist", "genre", "mood"):
            value = item.get(key)
            if not isinstance(value, str):
                raise ValueError(f"item {idx} has no string '{key}'")
            fields[key] = value
        suggestions.append(SongSuggestion(**fields))
    return suggestions


class LiteLLMTextGenerator:
    """Free-text chat replies from conversation history and a profile summary."""

    def __init__(
        self,
        model: str | None = None,
        timeout: float | None = None,
    ) -> None:
        self.model = model or AGENT_CONFIG["llm_model"]
        self.timeout = timeout if timeout is not None else AGENT_CONFIG["generator_timeout_seconds"]

    async def generate(
        self, context_summary: str, history: list[ConversationTurn],
    ) -> GenerationResult[str]:
        messages = [{"role": "system", "content": context_summary}]
        messages.extend(turn.to_dict() for turn in history)

        try:
            text = await asyncio.wait_for(
                llm_complete(messages, model=self.model),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            logger.warning("Chat generation timed out after %.1fs", self.timeout)
            return GenerationResult.failure("timeout")
        except Exception as exc:
            logger.exception("Chat generation failed")
            return GenerationResult.failure(str(exc) or type(exc).__name__)

        return GenerationResult.success(text)


class LiteLLMSuggestionGenerator:
    """Ranked song suggestions for a set of genre and mood facets."""

    def __init__(
        self,
        model: str | None = None,
        timeout: float | None = None,
    ) -> None:
        self.model = model or AGENT_CONFIG["llm_model"]
        self.timeout = timeout if timeout is not None else AGENT_CONFIG["generator_timeout_seconds"]

    async def generate(
        self, genres: list[str], moods: list[str], count: int,
    ) -> GenerationResult[list[SongSuggestion]]:
        system = RECOMMENDATION_SYSTEM.format(
            genres=", ".join(genres) or "None",
            moods=", ".join(moods) or "None",
            count=count,
        )

        try:
            payload = await asyncio.wait_for(
                llm_complete_json([{"role": "system", "content": system}], model=self.model),
                timeout=self.timeout,
            )
            suggestions = parse_suggestions(payload)
        except asyncio.TimeoutError:
            logger.warning("Suggestion generation timed out after %.1fs", self.timeout)
            return GenerationResult.failure("timeout")
        except ValueError as exc:
            # json.JSONDecodeError is a ValueError too
            logger.warning("Failed to parse recommendations: %s", exc)
            return GenerationResult.failure(f"malformed: {exc}")
        except Exception as exc:
            logger.exception("Suggestion generation failed")
            return GenerationResult.failure(str(exc) or type(exc).__name__)

        return GenerationResult.success(suggestions)
