"""
sidkik_firebase.locks

Per-key lock registry.

Responsibilities:
- Serialize operations that touch the same logical resource name while letting
  unrelated keys proceed concurrently.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager


class KeyedLocks:
    """
    Injected into services instead of living at module level, so each composition
    root owns its own registry.
    """

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}

    def _lock(self, key: str) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        return lock

    def locked(self, key: str) -> bool:
        lock = self._locks.get(key)
        return lock is not None and lock.locked()

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        async with self._lock(key):
            yield


# --- Module Notes -----------------------------------------------------------
# Locks are never evicted; keys are release names, a small and bounded set.
