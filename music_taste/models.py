"""Data models for the Music Taste Agent.

Snapshots are serialised with the camelCase field names of the public API
(``listeningSessions``, ``favoriteGenres`` ...) so a stored state can be
returned to clients as-is.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def new_session_id(prefix: str = "session") -> str:
    return f"{prefix}_{uuid.uuid4().hex}"


@dataclass(frozen=True)
class ListeningSession:
    """A song the user logged. Never mutated once created."""

    song: str
    artist: str
    genre: str
    mood: str
    rating: float | None = None
    id: str = field(default_factory=new_session_id)
    timestamp: str = field(default_factory=_now)

    @classmethod
    def create(
        cls, song: str, artist: str, genre: str, mood: str,
        rating: float | None = None, id: str | None = None,
    ) -> ListeningSession:
        """Build a session with genre and mood case-normalised."""
        return cls(
            song=song,
            artist=artist,
            genre=genre.lower(),
            mood=mood.lower(),
            rating=rating,
            id=id or new_session_id(),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "song": self.song,
            "artist": self.artist,
            "genre": self.genre,
            "mood": self.mood,
        }
        if self.rating is not None:
            data["rating"] = self.rating
        data["timestamp"] = self.timestamp
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ListeningSession:
        return cls(
            id=data["id"],
            song=data.get("song", ""),
            artist=data.get("artist", ""),
            genre=data.get("genre", ""),
            mood=data.get("mood", ""),
            rating=data.get("rating"),
            timestamp=data.get("timestamp") or _now(),
        )


@dataclass(frozen=True)
class ConversationTurn:
    role: str  # user | assistant
    content: str

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass
class MusicPreference:
    """Reserved for explicit preference statements; not populated yet."""

    genre: str = ""
    artists: list[str] = field(default_factory=list)
    mood: str = ""
    timestamp: str = field(default_factory=_now)


@dataclass
class Profile:
    favorite_genres: list[str] = field(default_factory=list)
    top_moods: list[str] = field(default_factory=list)
    discovered_at: str = field(default_factory=_now)


@dataclass
class AgentState:
    preferences: list[MusicPreference] = field(default_factory=list)
    listening_sessions: list[ListeningSession] = field(default_factory=list)
    conversation_history: list[ConversationTurn] = field(default_factory=list)
    profile: Profile = field(default_factory=Profile)

    def to_dict(self) -> dict[str, Any]:
        return {
            "preferences": [
                {"genre": p.genre, "artists": list(p.artists), "mood": p.mood, "timestamp": p.timestamp}
                for p in self.preferences
            ],
            "listeningSessions": [s.to_dict() for s in self.listening_sessions],
            "conversationHistory": [t.to_dict() for t in self.conversation_history],
            "profile": {
                "favoriteGenres": list(self.profile.favorite_genres),
                "topMoods": list(self.profile.top_moods),
                "discoveredAt": self.profile.discovered_at,
            },
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AgentState:
        profile = data.get("profile") or {}
        return cls(
            preferences=[
                MusicPreference(
                    genre=p.get("genre", ""),
                    artists=list(p.get("artists", [])),
                    mood=p.get("mood", ""),
                    timestamp=p.get("timestamp") or _now(),
                )
                for p in data.get("preferences", [])
            ],
            listening_sessions=[
                ListeningSession.from_dict(s) for s in data.get("listeningSessions", [])
            ],
            conversation_history=[
                ConversationTurn(role=t["role"], content=t["content"])
                for t in data.get("conversationHistory", [])
            ],
            profile=Profile(
                favorite_genres=list(profile.get("favoriteGenres", [])),
                top_moods=list(profile.get("topMoods", [])),
                discovered_at=profile.get("discoveredAt") or _now(),
            ),
        )


@dataclass
class TasteAnalysis:
    """Frequency-ranked facets, recomputed from the session log on every read."""

    top_genres: list[str] = field(default_factory=list)
    top_moods: list[str] = field(default_factory=list)


@dataclass
class TasteProfile:
    favorite_genres: list[str] = field(default_factory=list)
    top_moods: list[str] = field(default_factory=list)
    total_songs: int = 0
    recent_sessions: list[ListeningSession] = field(default_factory=list)
    insights: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "favoriteGenres": list(self.favorite_genres),
            "topMoods": list(self.top_moods),
            "totalSongs": self.total_songs,
            "recentSessions": [s.to_dict() for s in self.recent_sessions],
            "insights": list(self.insights),
        }


@dataclass
class DeleteResult:
    success: bool = False
    message: str = ""


@dataclass
class SongSuggestion:
    """One record of a suggestion generator reply, before it is shaped into a session."""

    song: str = ""
    artist: str = ""
    genre: str = ""
    mood: str = ""
