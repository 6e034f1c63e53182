"""
app/core/scheduler.py
═══════════════════════════════════════════════════════════════════════════════
Background housekeeping loop:

  1. ONE scheduler instance ever (guarded by _running flag)
  2. Fixed interval (SESSION_SWEEP_INTERVAL_S, default 1 h), no backoff
  3. Each cycle drops expired guest sessions and stale cache entries
  4. A failed cycle is logged and the loop keeps going
═══════════════════════════════════════════════════════════════════════════════
"""

import asyncio
import logging
import time

from app.core import deps
from app.core.config import SESSION_SWEEP_INTERVAL_S

log = logging.getLogger("scheduler")

_running = False


def run_cycle() -> dict:
    t0 = time.time()
    sessions = deps.session_store.cleanup_expired()
    entries = sum(
        c.cleanup_expired()
        for c in (deps.data_hub_cache, deps.nasa_cache, deps.learning_cache)
    )
    log.info(
        f"Sweep complete in {time.time() - t0:.2f}s: "
        f"{sessions} expired sessions, {entries} stale cache entries"
    )
    return {"sessions": sessions, "cacheEntries": entries}


async def run_scheduler(interval: float = SESSION_SWEEP_INTERVAL_S) -> None:
    """
    Called once at startup. Runs until cancelled.
    Never starts a second instance (guarded by the _running flag).
    """
    global _running
    if _running:
        log.warning("Scheduler already running, ignoring duplicate start")
        return
    _running = True
    log.info(f"Scheduler started (every {interval}s)")
    try:
        while True:
            await asyncio.sleep(interval)
            try:
                run_cycle()
            except Exception as ex:
                log.error(f"Sweep error (continuing): {ex}")
    finally:
        _running = False
        log.info("Scheduler stopped")
