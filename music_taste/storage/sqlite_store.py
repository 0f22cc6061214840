"""SQLite storage for agent state snapshots.

Each agent identity owns exactly one row holding its full ``AgentState`` as
JSON. Reads and writes always move the whole snapshot; there are no partial
updates.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

import aiosqlite

from music_taste.config import DB_PATH
from music_taste.models import AgentState

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS agent_state (
    identity    TEXT PRIMARY KEY,
    snapshot    TEXT NOT NULL,
    updated_at  TEXT NOT NULL
);
"""


class SQLiteStateStore:
    """Async key-value store of agent snapshots keyed by identity."""

    def __init__(self, db_path: Path | None = None) -> None:
        self.db_path = db_path or DB_PATH
        self._db: aiosqlite.Connection | None = None

    async def initialize(self) -> None:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._db = await aiosqlite.connect(str(self.db_path))
        self._db.row_factory = aiosqlite.Row
        await self._db.executescript(_SCHEMA)
        await self._db.commit()

    async def close(self) -> None:
        if self._db:
            await self._db.close()
            self._db = None

    @property
    def db(self) -> aiosqlite.Connection:
        if self._db is None:
            raise RuntimeError("SQLiteStateStore not initialized, call initialize() first")
        return self._db

    async def load(self, identity: str) -> AgentState | None:
        async with self.db.execute(
            "SELECT snapshot FROM agent_state WHERE identity = ?", (identity,)
        ) as cur:
            row = await cur.fetchone()
        if not row:
            return None
        return AgentState.from_dict(json.loads(row["snapshot"]))

    async def save(self, identity: str, state: AgentState) -> None:
        snapshot = json.dumps(state.to_dict(), ensure_ascii=False)
        await self.db.execute(
            "INSERT OR REPLACE INTO agent_state (identity, snapshot, updated_at) VALUES (?, ?, ?)",
            (identity, snapshot, datetime.now(timezone.utc).isoformat()),
        )
        await self.db.commit()
        logger.debug("Saved snapshot for %s (%d bytes)", identity, len(snapshot))

    async def delete(self, identity: str) -> bool:
        cur = await self.db.execute("DELETE FROM agent_state WHERE identity = ?", (identity,))
        await self.db.commit()
        return cur.rowcount > 0

    async def list_identities(self) -> list[str]:
        async with self.db.execute("SELECT identity FROM agent_state ORDER BY identity") as cur:
            return [row["identity"] async for row in cur]
