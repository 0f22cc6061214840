"""Taste aggregation, preference extraction, and insight shaping.

Everything here is a pure function of the session log or an in-place update
of a ``Profile``. Nothing is cached: the frequency ranking is recomputed from
the current log on every read so it can never reference deleted sessions.

Two growth policies coexist on purpose:
  - capped append (``add_facet``): used when a song is logged or a chat
    message mentions a vocabulary term; first-seen order, at most
    ``profile_cap`` entries.
  - full recomputation (``recalculate_profile``): used after a delete; the
    distinct genres/moods left in the log, with no cap.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable

from music_taste.config import AGENT_CONFIG
from music_taste.models import AgentState, ListeningSession, Profile, TasteAnalysis

# Scan order matters: it is the order in which matches are appended.
GENRES = (
    "pop", "rock", "hip hop", "rap", "indie", "electronic", "jazz", "classical",
    "country", "r&b", "metal", "folk", "punk", "soul", "blues", "reggae",
)

MOODS = (
    "happy", "sad", "energetic", "chill", "romantic", "angry", "nostalgic",
    "upbeat", "melancholic", "peaceful", "intense",
)


def _rank(values: Iterable[str], top_n: int) -> list[str]:
    # Counter keeps first-seen order and most_common() sorts stably,
    # so equal counts stay in first-seen order.
    return [value for value, _ in Counter(values).most_common(top_n)]


def analyze_music_taste(
    sessions: list[ListeningSession], top_n: int | None = None,
) -> TasteAnalysis:
    """Rank genres and moods by how often they occur in the session log."""
    top_n = top_n if top_n is not None else AGENT_CONFIG["top_n"]
    return TasteAnalysis(
        top_genres=_rank((s.genre for s in sessions), top_n),
        top_moods=_rank((s.mood for s in sessions), top_n),
    )


def add_facet(values: list[str], value: str, cap: int | None = None) -> bool:
    """Append ``value`` unless it is already present or the list is full.

    Returns True if the list changed.
    """
    cap = cap if cap is not None else AGENT_CONFIG["profile_cap"]
    if value in values or len(values) >= cap:
        return False
    values.append(value)
    return True


def extract_music_info(
    message: str, profile: Profile, cap: int | None = None,
) -> tuple[list[str], list[str]]:
    """Scan a chat message for vocabulary genres and moods.

    Plain substring containment on the lowercased message, so "rap" also
    matches inside "trap". Returns the (genres, moods) actually added.
    """
    lower = message.lower()
    added_genres = [
        genre for genre in GENRES
        if genre in lower and add_facet(profile.favorite_genres, genre, cap)
    ]
    added_moods = [
        mood for mood in MOODS
        if mood in lower and add_facet(profile.top_moods, mood, cap)
    ]
    return added_genres, added_moods


def recalculate_profile(state: AgentState) -> None:
    """Rebuild profile facets as the distinct values left in the session log."""
    state.profile.favorite_genres = list(dict.fromkeys(s.genre for s in state.listening_sessions))
    state.profile.top_moods = list(dict.fromkeys(s.mood for s in state.listening_sessions))


def generate_insights(state: AgentState, milestone: int | None = None) -> list[str]:
    sessions = state.listening_sessions
    if not sessions:
        return ["Start logging songs to discover your music taste!"]

    milestone = milestone if milestone is not None else AGENT_CONFIG["insight_milestone"]
    analysis = analyze_music_taste(sessions)
    insights: list[str] = []

    if analysis.top_genres:
        insights.append(f"Your top genre is {analysis.top_genres[0]}")
    if analysis.top_moods:
        insights.append(f"You often listen to {analysis.top_moods[0]} music")
    if len(sessions) >= milestone:
        insights.append(f"You've logged {len(sessions)} songs - your taste is taking shape!")

    return insights
