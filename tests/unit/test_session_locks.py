from __future__ import annotations

import asyncio
import gc

import pytest

from roleplay_sim.application.session.locks import SessionLocks


@pytest.mark.asyncio
async def test_same_session_is_serialized():
    locks = SessionLocks()
    events: list[str] = []

    async def turn(name: str) -> None:
        async with locks.hold("s-1"):
            events.append(f"{name}:start")
            await asyncio.sleep(0.01)
            events.append(f"{name}:end")

    await asyncio.gather(turn("a"), turn("b"))
    assert events == ["a:start", "a:end", "b:start", "b:end"]


@pytest.mark.asyncio
async def test_different_sessions_run_concurrently():
    locks = SessionLocks()
    inside = asyncio.Event()
    release = asyncio.Event()

    async def holder() -> None:
        async with locks.hold("a"):
            inside.set()
            await release.wait()

    task = asyncio.create_task(holder())
    await inside.wait()
    assert locks.is_locked("a")

    async def other() -> bool:
        async with locks.hold("b"):
            return locks.is_locked("a")

    # "b" não espera "a"
    assert await asyncio.wait_for(other(), timeout=1.0) is True
    release.set()
    await task


@pytest.mark.asyncio
async def test_idle_locks_are_collected():
    locks = SessionLocks()
    async with locks.hold("s-1"):
        assert len(locks) == 1
    gc.collect()
    assert len(locks) == 0
