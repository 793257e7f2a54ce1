import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict


class SessionLockRegistry:
    """
    Hands out one asyncio.Lock per game session.

    Use cases hold the lock for the whole load -> mutate -> save sequence,
    so two interactions for the same player never interleave, while
    different players proceed concurrently.
    """

    def __init__(self):
        self._locks: Dict[str, asyncio.Lock] = {}

    def get(self, session_id: str) -> asyncio.Lock:
        lock = self._locks.get(session_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[session_id] = lock
        return lock

    @asynccontextmanager
    async def hold(self, session_id: str) -> AsyncIterator[None]:
        async with self.get(session_id):
            yield
