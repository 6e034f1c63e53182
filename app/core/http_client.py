"""
app/core/http_client.py
Shared async httpx clients.
  • nasa_http()  → client for api.nasa.gov (APOD, Earth assets, TechTransfer)
  • power_http() → client for power.larc.nasa.gov (slow, bigger timeout)
"""

import httpx

_nasa_client:  httpx.AsyncClient | None = None
_power_client: httpx.AsyncClient | None = None

_LIMITS        = httpx.Limits(max_connections=10, max_keepalive_connections=5)
_TIMEOUT       = httpx.Timeout(20.0, connect=10.0)
_POWER_TIMEOUT = httpx.Timeout(45.0, connect=10.0)

_HEADERS = {
    "User-Agent": "nasa-farm-navigators-api/1.0",
    "Accept":     "application/json",
}


def nasa_http() -> httpx.AsyncClient:
    global _nasa_client
    if _nasa_client is None or _nasa_client.is_closed:
        _nasa_client = httpx.AsyncClient(
            headers=_HEADERS,
            timeout=_TIMEOUT,
            follow_redirects=True,
            limits=_LIMITS,
        )
    return _nasa_client


def power_http() -> httpx.AsyncClient:
    global _power_client
    if _power_client is None or _power_client.is_closed:
        _power_client = httpx.AsyncClient(
            headers=_HEADERS,
            timeout=_POWER_TIMEOUT,
            follow_redirects=True,
            limits=_LIMITS,
        )
    return _power_client


async def close_all() -> None:
    for c in [_nasa_client, _power_client]:
        if c and not c.is_closed:
            await c.aclose()
