"""
tests.test_locks

Per-key lock registry.
"""

from __future__ import annotations

import asyncio

import pytest

from sidkik_firebase.locks import KeyedLocks


@pytest.mark.asyncio
async def test_same_key_is_serialized() -> None:
    locks = KeyedLocks()
    order: list[str] = []

    async def work(tag: str) -> None:
        async with locks.hold("release"):
            order.append(f"{tag}-start")
            await asyncio.sleep(0)
            order.append(f"{tag}-end")

    await asyncio.gather(work("a"), work("b"))

    assert order == ["a-start", "a-end", "b-start", "b-end"]


@pytest.mark.asyncio
async def test_different_keys_do_not_block() -> None:
    locks = KeyedLocks()

    async with locks.hold("firestore"):
        assert locks.locked("firestore")
        assert not locks.locked("storage")
        async with locks.hold("storage"):
            assert locks.locked("storage")

    assert not locks.locked("firestore")
