import asyncio

from app.core import deps, scheduler
from app.core.cache import TTLCache
from app.core.sessions import GuestSessionStore


def test_run_cycle_sweeps_sessions_and_caches(monkeypatch, clock):
    sessions = GuestSessionStore(duration=60, clock=clock)
    hub = TTLCache("data-hub", clock=clock)
    monkeypatch.setattr(deps, "session_store", sessions)
    monkeypatch.setattr(deps, "data_hub_cache", hub)
    monkeypatch.setattr(deps, "nasa_cache", TTLCache("nasa-data", clock=clock))
    monkeypatch.setattr(deps, "learning_cache", TTLCache("learning-hub", clock=clock))

    sessions.create("old")
    hub.set("market", {"corn": 4.5}, "market_data")
    clock.advance(61)
    sessions.create("new")

    assert scheduler.run_cycle() == {"sessions": 1, "cacheEntries": 0}

    clock.advance(10 * 60)
    assert scheduler.run_cycle() == {"sessions": 1, "cacheEntries": 1}
    assert len(sessions) == 0
    assert len(hub) == 0


def test_scheduler_survives_failed_cycles(monkeypatch):
    calls = []

    def flaky_cycle():
        calls.append(1)
        if len(calls) == 1:
            raise RuntimeError("boom")
        return {"sessions": 0, "cacheEntries": 0}

    monkeypatch.setattr(scheduler, "run_cycle", flaky_cycle)

    async def drive():
        task = asyncio.create_task(scheduler.run_scheduler(interval=0.001))
        while len(calls) < 3:
            await asyncio.sleep(0.001)
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    asyncio.run(drive())
    assert len(calls) >= 3
    assert scheduler._running is False


def test_duplicate_start_is_ignored(monkeypatch):
    monkeypatch.setattr(scheduler, "_running", True)
    # Returns immediately instead of looping
    asyncio.run(scheduler.run_scheduler(interval=0.001))
    assert scheduler._running is True
