"""
Per-session write serialization.

Capacity and duplicate-registration checks are read-then-write; two
joins racing at the capacity boundary could both pass the check. Joins
on the same session therefore run one at a time inside this process.
Cross-process safety comes from the row lock taken by
``SessionCRUD.get_live_for_update``.

Dependencies: asyncio
System role: In-process mutual exclusion keyed by session id
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator
from uuid import UUID


class SessionLockRegistry:
    """Hands out one asyncio.Lock per session id, released when unused."""

    def __init__(self) -> None:
        self._locks: dict[UUID, asyncio.Lock] = {}
        self._waiters: dict[UUID, int] = {}

    @asynccontextmanager
    async def hold(self, session_id: UUID) -> AsyncIterator[None]:
        """Hold the lock for ``session_id`` for the duration of the block."""
        lock = self._locks.setdefault(session_id, asyncio.Lock())
        self._waiters[session_id] = self._waiters.get(session_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._waiters[session_id] -= 1
            if self._waiters[session_id] == 0:
                del self._waiters[session_id]
                del self._locks[session_id]

    def __len__(self) -> int:
        return len(self._locks)


session_locks = SessionLockRegistry()
