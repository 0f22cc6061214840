"""Pydantic schemas for /api endpoints."""

from __future__ import annotations

from pydantic import BaseModel, Field

from music_taste.models import ListeningSession


class ListeningSessionResponse(BaseModel):
    id: str
    song: str
    artist: str
    genre: str
    mood: str
    rating: float | None = None
    timestamp: str

    @classmethod
    def from_session(cls, session: ListeningSession) -> ListeningSessionResponse:
        return cls(**session.to_dict())


class ChatRequest(BaseModel):
    message: str = Field(..., min_length=1)


class ChatResponse(BaseModel):
    response: str


class LogSongRequest(BaseModel):
    song: str = Field(..., min_length=1)
    artist: str = Field(..., min_length=1)
    genre: str = Field(..., min_length=1)
    mood: str = Field(..., min_length=1)
    rating: float | None = None


class LogSongResponse(BaseModel):
    session: ListeningSessionResponse


class DeleteSongRequest(BaseModel):
    sessionId: str = Field(..., min_length=1)


class DeleteSongResponse(BaseModel):
    success: bool
    message: str


class RecommendationsResponse(BaseModel):
    recommendations: list[ListeningSessionResponse]


class ProfileResponse(BaseModel):
    favoriteGenres: list[str]
    topMoods: list[str]
    totalSongs: int
    recentSessions: list[ListeningSessionResponse]
    insights: list[str]


class SessionsResponse(BaseModel):
    sessions: list[ListeningSessionResponse]
