"""
app/sources/nasa.py
═══════════════════════════════════════════════════════════════════════════════
NASA upstream client.

Endpoints used:
  api.nasa.gov/planetary/apod                 → connectivity check, APOD
  api.nasa.gov/planetary/earth/assets         → Landsat asset for a point/date
  api.nasa.gov/techtransfer/patent/?{query}   → agricultural technology patents
  power.larc.nasa.gov/api/temporal/daily/point→ daily agro-meteorology (no key)

Every data method raises UpstreamError on failure (missing key, network
error, non-2xx, undecodable JSON). Callers decide whether to degrade.
═══════════════════════════════════════════════════════════════════════════════
"""

import asyncio
import logging
import time
from datetime import datetime, timedelta
from typing import Optional

import httpx

from app.core.config import (
    ENABLE_REAL_NASA_DATA,
    NASA_API_KEY,
    NASA_ENDPOINTS,
    POWER_PARAMETERS,
    POWER_WINDOW_DAYS,
    UTC,
    utc_date,
    utc_iso,
)
from app.core.errors import UpstreamError
from app.core.http_client import nasa_http, power_http

log = logging.getLogger("nasa")


def _power_date(dt: datetime) -> str:
    return dt.strftime("%Y%m%d")


class NasaClient:
    def __init__(
        self,
        api_key: str = NASA_API_KEY,
        real_data: bool = ENABLE_REAL_NASA_DATA,
        http: Optional[httpx.AsyncClient] = None,
        power: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key   = api_key
        self.real_data = real_data
        self._http     = http
        self._power    = power

    def _client(self) -> httpx.AsyncClient:
        return self._http or nasa_http()

    def _power_client(self) -> httpx.AsyncClient:
        return self._power or self._http or power_http()

    async def _get_json(self, client: httpx.AsyncClient, label: str, url: str, params: dict):
        try:
            resp = await client.get(url, params=params)
            resp.raise_for_status()
            return resp.json()
        except httpx.HTTPStatusError as ex:
            raise UpstreamError(f"NASA {label} API failed: {ex.response.status_code}") from ex
        except httpx.HTTPError as ex:
            raise UpstreamError(f"NASA {label} API unreachable: {ex}") from ex
        except ValueError as ex:
            raise UpstreamError(f"NASA {label} API returned invalid JSON") from ex

    async def _get_object(self, client: httpx.AsyncClient, label: str, url: str, params: dict) -> dict:
        data = await self._get_json(client, label, url, params)
        if not isinstance(data, dict):
            raise UpstreamError(f"NASA {label} API returned {type(data).__name__}, expected an object")
        return data

    def _require_key(self, label: str) -> None:
        if not self.api_key:
            raise UpstreamError(f"NASA {label} API needs NASA_API_KEY")

    # ── Connectivity ──────────────────────────────────────────────────────────

    async def test_connection(self) -> dict:
        """Ping APOD. Never raises."""
        if not self.api_key:
            return {"success": False, "message": "NASA_API_KEY not configured - using demo data"}
        try:
            resp = await self._client().get(NASA_ENDPOINTS["apod"], params={"api_key": self.api_key})
        except httpx.HTTPError as ex:
            log.warning(f"NASA connectivity check failed: {ex}")
            return {"success": False, "message": "Network error - using offline data"}
        if resp.status_code == 200:
            return {"success": True, "message": "NASA API connected successfully"}
        if resp.status_code == 403:
            return {"success": False, "message": "Invalid API key - using demo data"}
        return {"success": False, "message": f"API error: {resp.status_code}"}

    # ── Data endpoints ────────────────────────────────────────────────────────

    async def get_power_data(
        self,
        lat: float,
        lng: float,
        start: Optional[str] = None,
        end: Optional[str] = None,
    ) -> dict:
        """Raw POWER daily point JSON for the AG community."""
        now = datetime.now(UTC)
        params = {
            "parameters": POWER_PARAMETERS,
            "community":  "AG",
            "latitude":   lat,
            "longitude":  lng,
            "start":      start or _power_date(now - timedelta(days=POWER_WINDOW_DAYS)),
            "end":        end or _power_date(now),
            "format":     "JSON",
        }
        data = await self._get_json(self._power_client(), "POWER", NASA_ENDPOINTS["power"], params)
        if not isinstance(data, dict) or "parameter" not in data.get("properties", {}):
            raise UpstreamError("NASA POWER API returned no parameters")
        log.info(f"POWER: {lat},{lng} {params['start']}–{params['end']}")
        return data

    async def get_earth_assets(self, lat: float, lng: float, date: Optional[str] = None) -> dict:
        self._require_key("Earth")
        params = {
            "lat":     lat,
            "lon":     lng,
            "date":    date or utc_date(),
            "dim":     0.15,
            "api_key": self.api_key,
        }
        data = await self._get_object(self._client(), "Earth", NASA_ENDPOINTS["earth_assets"], params)
        return {
            "id":       data.get("id"),
            "date":     data.get("date", params["date"]),
            "imageUrl": data.get("url"),
            "resource": data.get("resource", {}),
            "metadata": {
                "coordinates": {"lat": lat, "lng": lng},
                "source":      "NASA Landsat",
            },
        }

    async def get_apod(self, date: Optional[str] = None) -> dict:
        self._require_key("APOD")
        params = {"api_key": self.api_key}
        if date:
            params["date"] = date
        data = await self._get_object(self._client(), "APOD", NASA_ENDPOINTS["apod"], params)
        return {
            "title":       data.get("title"),
            "url":         data.get("url"),
            "explanation": data.get("explanation"),
            "mediaType":   data.get("media_type"),
        }

    async def get_tech_transfer(self, query: str = "agriculture") -> dict:
        self._require_key("TechTransfer")
        params = {"query": query, "api_key": self.api_key}
        data = await self._get_object(self._client(), "TechTransfer", NASA_ENDPOINTS["tech_transfer"], params)
        patents = data.get("results") or []
        return {"patents": patents, "count": len(patents)}

    async def get_comprehensive_data(self, lat: float, lng: float, date: Optional[str] = None) -> dict:
        """Earth asset + APOD + patents, fetched concurrently. Partial success is success."""
        t0 = time.time()
        imagery, apod, tech = await asyncio.gather(
            self.get_earth_assets(lat, lng, date),
            self.get_apod(),
            self.get_tech_transfer("agriculture farming"),
            return_exceptions=True,
        )

        result: dict = {"success": False, "errors": []}
        for label, field, value in (
            ("Satellite imagery", "satelliteImage", imagery),
            ("APOD", "apod", apod),
            ("Tech transfer", "agriculturalTech", tech),
        ):
            if isinstance(value, BaseException):
                if not isinstance(value, UpstreamError):
                    raise value
                result["errors"].append(f"{label} failed: {value}")
            else:
                result[field] = value

        if len(result["errors"]) == 3:
            raise UpstreamError("; ".join(result["errors"]))

        result["success"] = True
        result["metadata"] = {
            "coordinates": {"lat": lat, "lng": lng},
            "date":        date or utc_date(),
            "timestamp":   utc_iso(),
            "elapsedS":    round(time.time() - t0, 2),
            "apiCalls": {
                "imagery": "satelliteImage" in result,
                "apod":    "apod" in result,
                "tech":    "agriculturalTech" in result,
            },
        }
        return result
