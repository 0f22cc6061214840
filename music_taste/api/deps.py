"""
FastAPI dependency providers.

The state store is a process-wide singleton opened by the app lifespan.
Agents are cheap to build; they share the module-level identity locks, so
two requests for the same identity still serialise.
"""

from __future__ import annotations

from music_taste.config import AGENT_CONFIG
from music_taste.core.agent import MusicTasteAgent
from music_taste.llm.generators import LiteLLMSuggestionGenerator, LiteLLMTextGenerator
from music_taste.storage.sqlite_store import SQLiteStateStore

_store: SQLiteStateStore | None = None
_text_generator: LiteLLMTextGenerator | None = None
_suggestion_generator: LiteLLMSuggestionGenerator | None = None


def get_state_store() -> SQLiteStateStore:
    """Return the ``SQLiteStateStore`` singleton (not yet initialised)."""
    global _store  # noqa: PLW0603
    if _store is None:
        _store = SQLiteStateStore()
    return _store


def get_agent() -> MusicTasteAgent:
    """Return an agent bound to the single fixed identity."""
    global _text_generator, _suggestion_generator  # noqa: PLW0603
    if _text_generator is None:
        _text_generator = LiteLLMTextGenerator()
    if _suggestion_generator is None:
        _suggestion_generator = LiteLLMSuggestionGenerator()
    return MusicTasteAgent(
        store=get_state_store(),
        text_generator=_text_generator,
        suggestion_generator=_suggestion_generator,
        identity=AGENT_CONFIG["default_identity"],
    )
