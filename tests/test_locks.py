"""
Tests for per-key asyncio locks.
"""

import asyncio

import pytest

from planter.utils.locks import KeyedLock


class TestKeyedLock:

    @pytest.mark.asyncio
    async def test_same_key_is_serialized(self):
        locks = KeyedLock()
        order = []

        async def worker(name):
            async with locks.hold("session"):
                order.append(f"{name}-start")
                await asyncio.sleep(0.01)
                order.append(f"{name}-end")

        await asyncio.gather(worker("a"), worker("b"))

        assert order == ["a-start", "a-end", "b-start", "b-end"]

    @pytest.mark.asyncio
    async def test_different_keys_do_not_block(self):
        locks = KeyedLock()
        entered = asyncio.Event()

        async with locks.hold("a"):
            async def other():
                async with locks.hold("b"):
                    entered.set()

            await asyncio.wait_for(other(), timeout=1)

        assert entered.is_set()

    @pytest.mark.asyncio
    async def test_entries_removed_after_release(self):
        locks = KeyedLock()

        async with locks.hold("a"):
            assert locks.locked("a")
            assert len(locks) == 1

        assert not locks.locked("a")
        assert len(locks) == 0

    @pytest.mark.asyncio
    async def test_entry_removed_after_exception(self):
        locks = KeyedLock()

        with pytest.raises(RuntimeError):
            async with locks.hold("a"):
                raise RuntimeError("boom")

        assert len(locks) == 0
