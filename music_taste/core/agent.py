"""Music Taste Agent: the state engine behind chat, song logging, and insights.

This is the primary interface for the transport layer. Every operation runs
the same linear flow under the identity's lock:

    load (or initialise) → compute → optional generator call → mutate → save

Generators report through ``GenerationResult`` and never raise here; store
failures propagate to the caller unchanged.
"""

from __future__ import annotations

import json
import logging
import time
from datetime import datetime
from typing import Any, Protocol

from music_taste.config import AGENT_CONFIG
from music_taste.core.locks import DEFAULT_LOCKS, IdentityLocks
from music_taste.core.taste import (
    add_facet,
    analyze_music_taste,
    extract_music_info,
    generate_insights,
    recalculate_profile,
)
from music_taste.llm.generators import (
    LiteLLMSuggestionGenerator,
    LiteLLMTextGenerator,
    SuggestionGenerator,
    TextGenerator,
)
from music_taste.models import (
    AgentState,
    ConversationTurn,
    DeleteResult,
    ListeningSession,
    TasteAnalysis,
    TasteProfile,
)
from music_taste.prompts import CHAT_SYSTEM

logger = logging.getLogger(__name__)


def _discovery_date(discovered_at: str) -> str:
    """Date part of a stored ``discoveredAt``; never raises on odd formats."""
    try:
        # fromisoformat() only accepts a trailing "Z" from 3.11 on
        parsed = datetime.fromisoformat(discovered_at.replace("Z", "+00:00"))
    except ValueError:
        return discovered_at[:10]
    return parsed.date().isoformat()


class StateStore(Protocol):
    async def load(self, identity: str) -> AgentState | None: ...

    async def save(self, identity: str, state: AgentState) -> None: ...


class MusicTasteAgent:
    """Owns one identity's ``AgentState`` and exposes its operations."""

    def __init__(
        self,
        store: StateStore,
        text_generator: TextGenerator | None = None,
        suggestion_generator: SuggestionGenerator | None = None,
        identity: str | None = None,
        locks: IdentityLocks | None = None,
        config: dict[str, Any] | None = None,
    ) -> None:
        self.store = store
        self.text_generator = text_generator or LiteLLMTextGenerator()
        self.suggestion_generator = suggestion_generator or LiteLLMSuggestionGenerator()
        self.config = {**AGENT_CONFIG, **(config or {})}
        self.identity = identity or self.config["default_identity"]
        # IdentityLocks defines __len__, so an empty registry is falsy
        self._lock = (locks if locks is not None else DEFAULT_LOCKS).for_identity(self.identity)

    async def ensure_state(self) -> AgentState:
        """Load the snapshot, or build a fresh one without saving it."""
        state = await self.store.load(self.identity)
        if state is None:
            logger.info("No stored state for %s, starting a new profile", self.identity)
            state = AgentState()
        return state

    # ── Conversation ──

    async def chat(self, message: str) -> str:
        async with self._lock:
            state = await self.ensure_state()
            state.conversation_history.append(ConversationTurn(role="user", content=message))

            analysis = analyze_music_taste(state.listening_sessions, self.config["top_n"])
            history = state.conversation_history[-self.config["history_window"]:]
            result = await self.text_generator.generate(
                self._context_summary(state, analysis), history,
            )
            if result.ok:
                reply = result.value or self.config["empty_reply"]
            else:
                logger.warning("Using fallback reply: %s", result.error)
                reply = self.config["fallback_reply"]

            state.conversation_history.append(ConversationTurn(role="assistant", content=reply))

            # Extraction reads the user's words, never the reply
            genres, moods = extract_music_info(message, state.profile, self.config["profile_cap"])
            if genres or moods:
                logger.debug("Picked up genres=%s moods=%s from chat", genres, moods)

            await self.store.save(self.identity, state)
            return reply

    def _context_summary(self, state: AgentState, analysis: TasteAnalysis) -> str:
        recent = state.listening_sessions[-self.config["recent_activity_count"]:]
        return CHAT_SYSTEM.format(
            genres=", ".join(analysis.top_genres) or "Not yet discovered",
            moods=", ".join(analysis.top_moods) or "Not yet discovered",
            session_count=len(state.listening_sessions),
            discovered_on=_discovery_date(state.profile.discovered_at),
            recent_activity=json.dumps([s.to_dict() for s in recent], ensure_ascii=False),
        )

    # ── Session log ──

    async def log_song(
        self, song: str, artist: str, genre: str, mood: str,
        rating: float | None = None,
    ) -> ListeningSession:
        async with self._lock:
            state = await self.ensure_state()
            session = ListeningSession.create(song, artist, genre, mood, rating=rating)
            state.listening_sessions.append(session)

            cap = self.config["profile_cap"]
            add_facet(state.profile.favorite_genres, session.genre, cap)
            add_facet(state.profile.top_moods, session.mood, cap)

            await self.store.save(self.identity, state)
            return session

    async def delete_song(self, session_id: str) -> DeleteResult:
        async with self._lock:
            state = await self.ensure_state()
            remaining = [s for s in state.listening_sessions if s.id != session_id]

            if len(remaining) == len(state.listening_sessions):
                logger.warning("Delete requested for unknown session %s", session_id)
                return DeleteResult(success=False, message="Song not found")

            state.listening_sessions = remaining
            recalculate_profile(state)
            await self.store.save(self.identity, state)
            logger.info("Deleted session %s for %s", session_id, self.identity)
            return DeleteResult(success=True, message="Song deleted successfully")

    async def get_listening_sessions(self) -> list[ListeningSession]:
        """Full session log, most recent first."""
        async with self._lock:
            state = await self.ensure_state()
        return list(reversed(state.listening_sessions))

    # ── Profile & recommendations ──

    async def get_taste_profile(self) -> TasteProfile:
        async with self._lock:
            state = await self.ensure_state()

        sessions = state.listening_sessions
        analysis = analyze_music_taste(sessions, self.config["top_n"])
        limit = self.config["recent_sessions_limit"]
        return TasteProfile(
            favorite_genres=analysis.top_genres,
            top_moods=analysis.top_moods,
            total_songs=len(sessions),
            recent_sessions=list(reversed(sessions[-limit:])),
            insights=generate_insights(state, self.config["insight_milestone"]),
        )

    async def get_recommendations(self) -> list[ListeningSession]:
        """Ask the suggestion generator for songs matching the stored profile.

        Uses the profile's stored facet order, not the frequency ranking.
        Suggestions are shaped like sessions but never added to the log.
        """
        async with self._lock:
            state = await self.ensure_state()

        n = self.config["recommendation_facets"]
        genres = state.profile.favorite_genres[:n]
        moods = state.profile.top_moods[:n]
        if not genres and not moods:
            return []

        result = await self.suggestion_generator.generate(
            genres, moods, self.config["recommendation_count"],
        )
        if not result.ok:
            logger.warning("No recommendations: %s", result.error)
            return []

        stamp = int(time.time() * 1000)
        return [
            ListeningSession.create(
                s.song, s.artist, s.genre, s.mood, id=f"rec_{stamp}_{idx}",
            )
            for idx, s in enumerate(result.value or [])
        ]
