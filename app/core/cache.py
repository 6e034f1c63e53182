"""
app/core/cache.py
═══════════════════════════════════════════════════════════════════════════
In-memory TTL cache, one instance per router.
  • TTL comes from the category table in config.CACHE_DURATIONS
  • Expiry is lazy: a stale entry is dropped when it is read
  • Bounded: past max_entries the least recently used entry is evicted
  • Writes are protected by a threading lock → atomic replace, never partial
  • get_or_fetch() coalesces concurrent misses on one key (single-flight)
═══════════════════════════════════════════════════════════════════════════
"""

import asyncio
import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from app.core.config import CACHE_DURATIONS, CACHE_MAX_ENTRIES, utc_iso

log = logging.getLogger("cache")


@dataclass
class CacheEntry:
    key:           str
    data:          Any
    timestamp:     float
    ttl:           float
    category:      str
    hits:          int = 0
    last_accessed: float = 0.0

    def age(self, now: float) -> float:
        return now - self.timestamp

    def is_fresh(self, now: float) -> bool:
        return now - self.timestamp < self.ttl


class TTLCache:
    def __init__(
        self,
        name: str,
        max_entries: int = CACHE_MAX_ENTRIES,
        durations: Optional[dict[str, int]] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.name        = name
        self.max_entries = max(1, max_entries)
        self.durations   = durations if durations is not None else CACHE_DURATIONS
        self._clock      = clock
        self._store: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock       = threading.Lock()
        self._inflight: dict[str, asyncio.Future] = {}
        self._stats      = {
            "requests":  0,
            "hits":      0,
            "misses":    0,
            "expired":   0,
            "evictions": 0,
            "coalesced": 0,
        }

    def __len__(self) -> int:
        return len(self._store)

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._store.keys())

    def now(self) -> float:
        return self._clock()

    def ttl_for(self, category: str) -> int:
        try:
            return self.durations[category]
        except KeyError:
            raise ValueError(f"Unknown cache category: {category}") from None

    # ── Reads ─────────────────────────────────────────────────────────────────

    def lookup(self, key: str) -> Optional[CacheEntry]:
        """Return the live entry for `key`, or None. Stale entries are deleted."""
        now = self._clock()
        with self._lock:
            self._stats["requests"] += 1
            entry = self._store.get(key)
            if entry is not None and entry.is_fresh(now):
                entry.hits += 1
                entry.last_accessed = now
                self._store.move_to_end(key)
                self._stats["hits"] += 1
                log.debug(f"[{self.name}] HIT {key}")
                return entry
            if entry is not None:
                del self._store[key]
                self._stats["expired"] += 1
                log.debug(f"[{self.name}] EXPIRED {key}")
            self._stats["misses"] += 1
            return None

    def get(self, key: str) -> Optional[Any]:
        entry = self.lookup(key)
        return entry.data if entry is not None else None

    # ── Writes ────────────────────────────────────────────────────────────────

    def set(self, key: str, data: Any, category: str) -> CacheEntry:
        ttl = self.ttl_for(category)
        now = self._clock()
        entry = CacheEntry(key=key, data=data, timestamp=now, ttl=ttl,
                           category=category, last_accessed=now)
        with self._lock:
            self._store.pop(key, None)
            self._store[key] = entry
            while len(self._store) > self.max_entries:
                evicted, _ = self._store.popitem(last=False)
                self._stats["evictions"] += 1
                log.debug(f"[{self.name}] EVICTED {evicted}")
        log.debug(f"[{self.name}] SET {key} (ttl {ttl}s)")
        return entry

    def clear(self, substring: Optional[str] = None) -> int:
        """Delete every entry, or only those whose key contains `substring`."""
        with self._lock:
            if not substring:
                removed = len(self._store)
                self._store.clear()
            else:
                doomed = [k for k in self._store if substring in k]
                for k in doomed:
                    del self._store[k]
                removed = len(doomed)
        log.info(f"[{self.name}] cleared {removed} entries"
                 + (f" matching '{substring}'" if substring else ""))
        return removed

    def cleanup_expired(self) -> int:
        now = self._clock()
        with self._lock:
            dead = [k for k, e in self._store.items() if not e.is_fresh(now)]
            for k in dead:
                del self._store[k]
            self._stats["expired"] += len(dead)
        return len(dead)

    # ── Single-flight ─────────────────────────────────────────────────────────

    async def get_or_fetch(
        self,
        key: str,
        category: str,
        fetcher: Callable[[], Awaitable[Any]],
    ) -> tuple[Any, Optional[CacheEntry]]:
        """
        Return (data, entry). `entry` is the cache hit, or None when this call
        (or the in-flight call it joined) produced the data.
        Fetch errors propagate to every waiter and nothing is cached.
        """
        entry = self.lookup(key)
        if entry is not None:
            return entry.data, entry

        pending = self._inflight.get(key)
        if pending is not None:
            self._stats["coalesced"] += 1
            log.debug(f"[{self.name}] JOIN in-flight fetch for {key}")
            try:
                return await asyncio.shield(pending), None
            except asyncio.CancelledError:
                if not pending.cancelled():
                    raise
                # The owning request was cancelled, not this one: fetch again
                log.debug(f"[{self.name}] in-flight fetch for {key} was cancelled, retrying")
                return await self.get_or_fetch(key, category, fetcher)

        future = asyncio.get_running_loop().create_future()
        self._inflight[key] = future
        try:
            data = await fetcher()
        except asyncio.CancelledError:
            future.cancel()
            raise
        except Exception as ex:
            future.set_exception(ex)
            future.exception()  # mark retrieved when nobody joined
            raise
        else:
            self.set(key, data, category)
            future.set_result(data)
            return data, None
        finally:
            self._inflight.pop(key, None)

    # ── Introspection ─────────────────────────────────────────────────────────

    def stats(self) -> dict:
        now = self._clock()
        with self._lock:
            stats = dict(self._stats)
            categories: dict[str, int] = {}
            for e in self._store.values():
                categories[e.category] = categories.get(e.category, 0) + 1
            oldest = min((e.timestamp for e in self._store.values()), default=None)
            entries = len(self._store)
        requests = stats["requests"]
        hit_rate = stats["hits"] / requests * 100 if requests else 0.0
        return {
            "cache":        self.name,
            **stats,
            "hitRate":      f"{hit_rate:.1f}%",
            "totalEntries": entries,
            "maxEntries":   self.max_entries,
            "categories":   categories,
            "oldestEntry":  utc_iso(oldest) if oldest is not None else None,
            "oldestAgeS":   round(now - oldest, 1) if oldest is not None else None,
        }

    def summary(self) -> dict:
        """Metadata only, safe to expose in /health."""
        now = self._clock()
        with self._lock:
            return {k: {"age_s": round(e.age(now), 1), "category": e.category}
                    for k, e in self._store.items()}


def cache_meta(entry: Optional[CacheEntry], category: str, cache: TTLCache) -> dict:
    """The `cache` block attached to API responses."""
    if entry is None:
        return {
            "strategy":  "server-side",
            "hit":       False,
            "ttl":       cache.ttl_for(category),
            "timestamp": utc_iso(),
        }
    return {
        "strategy":  "server-side",
        "hit":       True,
        "age":       int(entry.age(cache.now())),
        "hits":      entry.hits,
        "ttl":       int(entry.ttl),
        "timestamp": utc_iso(entry.timestamp),
    }
