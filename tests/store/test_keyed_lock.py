"""Keyed in-process locks."""

import asyncio

from skillswap.store.locks import keyed_lock


async def test_same_key_shares_lock_while_held():
    lock = keyed_lock("swap:abc")
    async with lock:
        assert keyed_lock("swap:abc") is lock
        assert keyed_lock("swap:other") is not lock


async def test_serializes_critical_sections():
    order: list[str] = []

    async def worker(name: str) -> None:
        async with keyed_lock("rating:bob"):
            order.append(f"{name}-start")
            await asyncio.sleep(0.01)
            order.append(f"{name}-end")

    await asyncio.gather(worker("a"), worker("b"))
    assert order == ["a-start", "a-end", "b-start", "b-end"]
