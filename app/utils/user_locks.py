"""
Per-user locks.

Checkout and payout settlement both read-modify-write a user's point
counters; they serialize on the same lock per user_id. These are asyncio
locks, so they only serialize callers running on one event loop. Callers on
other loops (each dramatiq worker thread runs its own) or in other processes
are covered by the User.version counter instead.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from loguru import logger


class UserLockRegistry:
    """
    Lazily created asyncio locks keyed by user_id.

    A lock taken through hold() is dropped again once its last holder or
    waiter leaves, so the registry only keeps locks that are in use.
    Not shared across event loops: use one registry per loop.
    """

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._holders: dict[str, int] = {}

    def get(self, user_id: str) -> asyncio.Lock:
        """Get (or create) the lock for a user."""
        lock = self._locks.get(user_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[user_id] = lock
        return lock

    @asynccontextmanager
    async def hold(self, user_id: str) -> AsyncIterator[None]:
        """Hold the user's lock for the duration of the block."""
        lock = self.get(user_id)
        if lock.locked():
            logger.debug(f"Waiting for point lock of user {user_id}")
        self._holders[user_id] = self._holders.get(user_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._holders[user_id] -= 1
            if not self._holders[user_id]:
                del self._holders[user_id]
                self._locks.pop(user_id, None)

    def __len__(self) -> int:
        return len(self._locks)


user_point_locks = UserLockRegistry()
