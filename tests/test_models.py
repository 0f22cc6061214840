"""Tests for the data models."""

import dataclasses

import pytest

from music_taste.models import (
    AgentState,
    ConversationTurn,
    ListeningSession,
    MusicPreference,
    TasteProfile,
)


def test_listening_session_create_lowercases_facets():
    s = ListeningSession.create("Blue", "X", "Jazz", "Chill", rating=4)
    assert s.genre == "jazz"
    assert s.mood == "chill"
    assert s.song == "Blue"  # song/artist kept as supplied
    assert s.rating == 4
    assert s.id.startswith("session_")
    assert s.timestamp


def test_listening_session_ids_unique():
    ids = {ListeningSession.create("a", "b", "pop", "happy").id for _ in range(50)}
    assert len(ids) == 50


def test_listening_session_is_immutable():
    s = ListeningSession.create("a", "b", "pop", "happy")
    with pytest.raises(dataclasses.FrozenInstanceError):
        s.genre = "rock"


def test_session_to_dict_omits_missing_rating():
    s = ListeningSession.create("a", "b", "pop", "happy")
    assert "rating" not in s.to_dict()
    assert ListeningSession.create("a", "b", "pop", "happy", rating=3.5).to_dict()["rating"] == 3.5


def test_agent_state_defaults():
    state = AgentState()
    assert state.preferences == []
    assert state.listening_sessions == []
    assert state.conversation_history == []
    assert state.profile.favorite_genres == []
    assert state.profile.top_moods == []
    assert state.profile.discovered_at


def test_agent_state_snapshot_keys():
    state = AgentState()
    state.listening_sessions.append(ListeningSession.create("Blue", "X", "Jazz", "Chill"))
    state.conversation_history.append(ConversationTurn(role="user", content="hi"))
    state.profile.favorite_genres.append("jazz")

    data = state.to_dict()
    assert set(data) == {"preferences", "listeningSessions", "conversationHistory", "profile"}
    assert data["profile"]["favoriteGenres"] == ["jazz"]
    assert data["conversationHistory"] == [{"role": "user", "content": "hi"}]
    assert data["listeningSessions"][0]["genre"] == "jazz"


def test_agent_state_from_dict_restores_everything():
    state = AgentState(preferences=[MusicPreference(genre="rock", artists=["A"], mood="angry")])
    state.listening_sessions.append(ListeningSession.create("Blue", "X", "Jazz", "Chill", rating=5))
    state.conversation_history.append(ConversationTurn(role="assistant", content="hello"))
    state.profile.top_moods.append("chill")

    restored = AgentState.from_dict(state.to_dict())
    assert restored.listening_sessions == state.listening_sessions
    assert restored.conversation_history == state.conversation_history
    assert restored.profile == state.profile
    assert restored.preferences[0].artists == ["A"]


def test_agent_state_from_partial_dict():
    restored = AgentState.from_dict({"profile": {"discoveredAt": "2026-01-01T00:00:00+00:00"}})
    assert restored.listening_sessions == []
    assert restored.profile.discovered_at == "2026-01-01T00:00:00+00:00"


def test_taste_profile_to_dict():
    s = ListeningSession.create("a", "b", "pop", "happy")
    profile = TasteProfile(favorite_genres=["pop"], top_moods=["happy"], total_songs=1, recent_sessions=[s])
    data = profile.to_dict()
    assert data["totalSongs"] == 1
    assert data["recentSessions"][0]["id"] == s.id
    assert data["insights"] == []
