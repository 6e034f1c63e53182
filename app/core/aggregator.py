"""
app/core/aggregator.py
═══════════════════════════════════════════════════════════════════════════════
Cache → NASA → synthetic fallback chain shared by the data routers.

  1. cache hit                      → source "cache"
  2. real data enabled              → single-flight upstream fetch, cached,
                                      source "nasa"
  3. real data disabled             → synthesize, cached, source "synthetic"
  4. upstream failed (UpstreamError)→ synthesize, NOT cached, source "fallback",
                                      success False, HTTP status still 200
═══════════════════════════════════════════════════════════════════════════════
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from app.core.cache import CacheEntry, TTLCache, cache_meta
from app.core.errors import UpstreamError
from app.sources.nasa import NasaClient

log = logging.getLogger("aggregator")


@dataclass
class Resolution:
    data:     Any
    source:   str
    category: str
    entry:    Optional[CacheEntry] = None
    error:    Optional[str] = None

    @property
    def success(self) -> bool:
        return self.source != "fallback"

    @property
    def fallback(self) -> bool:
        return self.source == "fallback"

    def envelope(self, cache: TTLCache, data: Any = None) -> dict:
        """Standard response body; `data` overrides the resolved payload (derived views)."""
        body = {
            "success": self.success,
            "data":    self.data if data is None else data,
            "source":  self.source,
            "cache":   cache_meta(self.entry, self.category, cache),
        }
        if self.fallback:
            body["fallback"] = True
            body["error"] = self.error
        return body


def memoize(cache: TTLCache, key: str, category: str, build: Callable[[], Any]) -> Resolution:
    """Cache-or-build for data that never comes from an upstream (simulated layers)."""
    entry = cache.lookup(key)
    if entry is not None:
        return Resolution(entry.data, "cache", category, entry)
    data = build()
    cache.set(key, data, category)
    return Resolution(data, "synthetic", category)


async def resolve(
    cache: TTLCache,
    key: str,
    category: str,
    fetch: Callable[[], Awaitable[Any]],
    synthesize: Callable[[], Any],
    client: NasaClient,
) -> Resolution:
    if not client.real_data:
        return memoize(cache, key, category, synthesize)

    try:
        data, entry = await cache.get_or_fetch(key, category, fetch)
    except UpstreamError as ex:
        log.warning(f"{key}: upstream failed, serving fallback ({ex})")
        return Resolution(synthesize(), "fallback", category, error=str(ex))
    if entry is not None:
        return Resolution(data, "cache", category, entry)
    return Resolution(data, "nasa", category)


def static_envelope(cache: TTLCache, data: Any, category: str) -> dict:
    """Envelope for in-process reference data: never fetched, only advertised with its TTL."""
    return {
        "success": True,
        "data":    data,
        "source":  "static",
        "cache":   {"strategy": "server-side", "ttl": cache.ttl_for(category)},
    }
