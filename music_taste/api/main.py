"""HTTP adapter for the Music Taste Agent."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from music_taste.api.deps import get_agent, get_state_store
from music_taste.api.schemas import (
    ChatRequest,
    ChatResponse,
    DeleteSongRequest,
    DeleteSongResponse,
    ListeningSessionResponse,
    LogSongRequest,
    LogSongResponse,
    ProfileResponse,
    RecommendationsResponse,
    SessionsResponse,
)
from music_taste.core.agent import MusicTasteAgent

logger = logging.getLogger(__name__)

Agent = Annotated[MusicTasteAgent, Depends(get_agent)]


@asynccontextmanager
async def lifespan(app: FastAPI):
    store = get_state_store()
    await store.initialize()
    try:
        yield
    finally:
        await store.close()


app = FastAPI(title="Music Taste Agent", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type"],
)


@app.exception_handler(Exception)
async def internal_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Request %s %s failed", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


@app.get("/health")
def health() -> dict[str, str]:
    """Return a simple liveness check."""
    return {"status": "ok"}


@app.post("/api/chat", response_model=ChatResponse)
async def chat(body: ChatRequest, agent: Agent) -> ChatResponse:
    return ChatResponse(response=await agent.chat(body.message))


@app.post("/api/log-song", response_model=LogSongResponse)
async def log_song(body: LogSongRequest, agent: Agent) -> LogSongResponse:
    session = await agent.log_song(body.song, body.artist, body.genre, body.mood, body.rating)
    return LogSongResponse(session=ListeningSessionResponse.from_session(session))


@app.delete("/api/delete-song", response_model=DeleteSongResponse)
async def delete_song(body: DeleteSongRequest, agent: Agent) -> DeleteSongResponse:
    result = await agent.delete_song(body.sessionId)
    return DeleteSongResponse(success=result.success, message=result.message)


@app.get("/api/recommendations", response_model=RecommendationsResponse)
async def recommendations(agent: Agent) -> RecommendationsResponse:
    recs = await agent.get_recommendations()
    return RecommendationsResponse(
        recommendations=[ListeningSessionResponse.from_session(r) for r in recs],
    )


@app.get("/api/profile", response_model=ProfileResponse)
async def profile(agent: Agent) -> ProfileResponse:
    return ProfileResponse(**(await agent.get_taste_profile()).to_dict())


@app.get("/api/sessions", response_model=SessionsResponse)
async def sessions(agent: Agent) -> SessionsResponse:
    return SessionsResponse(
        sessions=[ListeningSessionResponse.from_session(s) for s in await agent.get_listening_sessions()],
    )
