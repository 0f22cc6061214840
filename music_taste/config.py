"""Configuration for the Music Taste Agent."""

from pathlib import Path

# Base data directory, all runtime data stored here
DATA_DIR = Path("data")
DB_PATH = DATA_DIR / "agent_state.db"

AGENT_CONFIG = {
    # LLM
    "llm_model": "claude-sonnet-4-6",
    "llm_temperature": 0.8,
    "llm_max_tokens": 400,
    # Single attempt, then fallback
    "llm_max_attempts": 1,
    "generator_timeout_seconds": 30.0,

    # Chat context
    "history_window": 12,
    "recent_activity_count": 3,
    "fallback_reply": (
        "I apologize, but I'm having trouble connecting to the AI service. "
        "Please try again in a moment!"
    ),
    "empty_reply": "Tell me about some music you love!",

    # Profile
    "profile_cap": 10,
    "top_n": 3,
    "recent_sessions_limit": 10,
    "insight_milestone": 10,

    # Recommendations
    "recommendation_count": 5,
    "recommendation_facets": 3,

    # Transport
    "default_identity": "user_default",
}
