# file: agentstudio/tests/unit_tests/orchestrator/test_tick_scheduler.py
import asyncio

import pytest

from agentstudio.orchestrator import AsyncioTickScheduler, ManualTickScheduler

@pytest.mark.asyncio
async def test_manual_scheduler_runs_only_when_driven():
    scheduler = ManualTickScheduler()
    calls = []

    async def tick():
        calls.append("tick")

    assert await scheduler.run_pending() is False
    scheduler.schedule(2.0, tick)
    assert scheduler.pending
    assert scheduler.last_delay == 2.0
    assert calls == []

    assert await scheduler.run_pending() is True
    assert calls == ["tick"]
    assert not scheduler.pending

@pytest.mark.asyncio
async def test_manual_scheduler_cancel_and_replace():
    scheduler = ManualTickScheduler()
    calls = []

    async def first():
        calls.append("first")

    async def second():
        calls.append("second")

    scheduler.schedule(1, first)
    scheduler.schedule(1, second)
    await scheduler.run_pending()
    assert calls == ["second"]

    scheduler.schedule(1, first)
    scheduler.cancel()
    assert await scheduler.run_pending() is False
    assert scheduler.scheduled_count == 3

@pytest.mark.asyncio
async def test_manual_run_until_idle_follows_rescheduling():
    scheduler = ManualTickScheduler()
    remaining = [3]

    async def tick():
        remaining[0] -= 1
        if remaining[0] > 0:
            scheduler.schedule(0, tick)

    scheduler.schedule(0, tick)
    assert await scheduler.run_until_idle() == 3
    assert await scheduler.run_until_idle(max_ticks=5) == 0

@pytest.mark.asyncio
async def test_asyncio_scheduler_fires_after_delay():
    scheduler = AsyncioTickScheduler()
    fired = asyncio.Event()

    async def tick():
        fired.set()

    scheduler.schedule(0.01, tick)
    assert scheduler.pending
    await asyncio.wait_for(fired.wait(), timeout=1)
    assert not scheduler.pending

@pytest.mark.asyncio
async def test_asyncio_scheduler_cancel_prevents_fire():
    scheduler = AsyncioTickScheduler()
    calls = []

    async def tick():
        calls.append("tick")

    scheduler.schedule(0.01, tick)
    scheduler.cancel()
    await asyncio.sleep(0.05)
    assert calls == []
    assert not scheduler.pending

@pytest.mark.asyncio
async def test_asyncio_scheduler_logs_failing_callback(caplog):
    scheduler = AsyncioTickScheduler()
    done = asyncio.Event()

    async def tick():
        done.set()
        raise RuntimeError("tick exploded")

    scheduler.schedule(0, tick)
    await asyncio.wait_for(done.wait(), timeout=1)
    await asyncio.sleep(0.01)
    assert "Scheduled tick raised: tick exploded" in caplog.text
