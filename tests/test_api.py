"""Tests for the HTTP adapter."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from music_taste.api.deps import get_agent
from music_taste.api.main import app
from music_taste.core.agent import MusicTasteAgent
from music_taste.core.locks import IdentityLocks
from music_taste.llm.generators import GenerationResult
from music_taste.models import AgentState, SongSuggestion


class InMemoryStore:
    """Dict-backed store; snapshots round-trip through to_dict like the real one."""

    def __init__(self) -> None:
        self.snapshots: dict[str, dict] = {}

    async def load(self, identity):
        data = self.snapshots.get(identity)
        return AgentState.from_dict(data) if data is not None else None

    async def save(self, identity, state):
        self.snapshots[identity] = state.to_dict()


class BrokenStore(InMemoryStore):
    async def save(self, identity, state):
        raise RuntimeError("disk full")


class FakeTextGenerator:
    async def generate(self, context_summary, history):
        return GenerationResult.success("Tell me more!")


class FakeSuggestionGenerator:
    async def generate(self, genres, moods, count):
        return GenerationResult.success([
            SongSuggestion(song="So What", artist="Miles Davis", genre="Jazz", mood="Chill"),
        ])


def _agent(store) -> MusicTasteAgent:
    return MusicTasteAgent(
        store=store,
        text_generator=FakeTextGenerator(),
        suggestion_generator=FakeSuggestionGenerator(),
        identity="user_default",
        locks=IdentityLocks(),
    )


@pytest.fixture()
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture(autouse=True)
def _setup_and_teardown(store: InMemoryStore):  # type: ignore[no-untyped-def]
    agent = _agent(store)
    app.dependency_overrides.clear()
    app.dependency_overrides[get_agent] = lambda: agent
    yield
    app.dependency_overrides.clear()


client = TestClient(app, raise_server_exceptions=False)


def _log(song="Blue", genre="Jazz", mood="Chill", **extra):
    return client.post("/api/log-song", json={"song": song, "artist": "X", "genre": genre, "mood": mood, **extra})


class TestHealth:
    def test_health(self) -> None:
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}

    def test_cors_preflight(self) -> None:
        resp = client.options(
            "/api/chat",
            headers={"Origin": "http://example.com", "Access-Control-Request-Method": "POST"},
        )
        assert resp.status_code == 200
        assert resp.headers["access-control-allow-origin"] == "*"


class TestChatEndpoint:
    def test_chat_returns_reply(self, store: InMemoryStore) -> None:
        resp = client.post("/api/chat", json={"message": "I love upbeat indie rock"})
        assert resp.status_code == 200
        assert resp.json() == {"response": "Tell me more!"}
        profile = store.snapshots["user_default"]["profile"]
        assert profile["favoriteGenres"] == ["rock", "indie"]

    def test_chat_requires_message(self) -> None:
        assert client.post("/api/chat", json={}).status_code == 422


class TestLogSongEndpoint:
    def test_log_song(self) -> None:
        resp = _log(rating=5)
        assert resp.status_code == 200
        session = resp.json()["session"]
        assert session["genre"] == "jazz"
        assert session["mood"] == "chill"
        assert session["rating"] == 5
        assert session["id"].startswith("session_")

    def test_log_song_missing_field(self) -> None:
        resp = client.post("/api/log-song", json={"song": "Blue", "artist": "X", "genre": "Jazz"})
        assert resp.status_code == 422

    def test_persistence_failure_is_500(self) -> None:
        agent = _agent(BrokenStore())
        app.dependency_overrides[get_agent] = lambda: agent
        resp = _log()
        assert resp.status_code == 500
        assert resp.json() == {"error": "Internal server error"}


class TestDeleteSongEndpoint:
    def test_delete_existing(self) -> None:
        session_id = _log().json()["session"]["id"]
        resp = client.request("DELETE", "/api/delete-song", json={"sessionId": session_id})
        assert resp.status_code == 200
        assert resp.json() == {"success": True, "message": "Song deleted successfully"}
        assert client.get("/api/sessions").json()["sessions"] == []

    def test_delete_missing(self) -> None:
        resp = client.request("DELETE", "/api/delete-song", json={"sessionId": "nope"})
        assert resp.status_code == 200
        assert resp.json() == {"success": False, "message": "Song not found"}


class TestReadEndpoints:
    def test_profile(self) -> None:
        _log("Blue", "Jazz", "Chill")
        _log("Red", "Jazz", "Energetic")
        data = client.get("/api/profile").json()
        assert data["favoriteGenres"] == ["jazz"]
        assert data["topMoods"] == ["chill", "energetic"]
        assert data["totalSongs"] == 2
        assert [s["song"] for s in data["recentSessions"]] == ["Red", "Blue"]
        assert data["insights"][0] == "Your top genre is jazz"

    def test_sessions_newest_first(self) -> None:
        for song in ("a", "b", "c"):
            _log(song)
        songs = [s["song"] for s in client.get("/api/sessions").json()["sessions"]]
        assert songs == ["c", "b", "a"]

    def test_recommendations_empty_profile(self) -> None:
        assert client.get("/api/recommendations").json() == {"recommendations": []}

    def test_recommendations(self) -> None:
        _log()
        recs = client.get("/api/recommendations").json()["recommendations"]
        assert len(recs) == 1
        assert recs[0]["song"] == "So What"
        assert recs[0]["genre"] == "jazz"
        assert recs[0]["id"].startswith("rec_")

    def test_unknown_route(self) -> None:
        assert client.get("/api/nothing").status_code == 404
