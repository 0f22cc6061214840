"""Per-identity mutual exclusion for load → compute → save spans.

Every public agent operation reads the whole snapshot, transforms it, and
writes it back. Two interleaved operations on the same identity would lose
one update, so each operation holds its identity's lock for the whole span.
Different identities never contend.
"""

from __future__ import annotations

import asyncio


class IdentityLocks:
    """Lazily created ``asyncio.Lock`` per agent identity.

    Entries are never evicted, so the registry grows with the number of
    distinct identities seen by the process.
    """

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}

    def for_identity(self, identity: str) -> asyncio.Lock:
        lock = self._locks.get(identity)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[identity] = lock
        return lock

    def __len__(self) -> int:
        return len(self._locks)


# Shared by every agent in the process unless a caller supplies its own.
DEFAULT_LOCKS = IdentityLocks()
