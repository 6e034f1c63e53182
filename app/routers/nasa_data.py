"""
app/routers/nasa_data.py
Endpoints (all under /api/nasa-data, selected by ?action=):
  test-connection  → APOD ping, {success, message}
  scenarios        → challenge scenarios + dataset ids
  farm-data        → POWER-derived farm profile for a scenario
  weather          → POWER summary + last 7 days      ┐
  soil-analysis    → soil moisture layers, irrigation ├ share one cached
  crop-health      → NDVI/EVI, stress, insights       ┘ POWER payload per point
  earth            → Landsat asset for lat/lng/date
  elevation        → simulated 32×32 SRTM grid
  terrain          → elevation statistics + crop recommendations
  terrain-3d       → elevation + imagery + farmable areas
  cache-stats      → this router's cache statistics
  clear-cache      → ?category= substring-scoped clear (all when omitted)

Upstream failures never surface as errors: the response is 200 with
success=false, fallback=true and synthetic data.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.core.aggregator import Resolution, memoize, resolve
from app.core.cache import TTLCache
from app.core.config import API_PREFIX, DEFAULT_LAT, DEFAULT_LNG, utc_iso
from app.core.content import NASA_DATASETS, NASA_SCENARIOS
from app.core.deps import get_nasa_cache, get_nasa_client
from app.core.errors import BadRequestError
from app.sources import agronomy, synthetic, terrain
from app.sources.nasa import NasaClient

router = APIRouter(prefix=API_PREFIX + "/nasa-data", tags=["nasa-data"])
log = logging.getLogger("nasa_data")


# ── Shared resolvers ─────────────────────────────────────────────────────────

async def _power(cache: TTLCache, client: NasaClient, lat: float, lng: float) -> Resolution:
    return await resolve(
        cache,
        f"power-{lat}-{lng}",
        "power_weather",
        fetch=lambda: client.get_power_data(lat, lng),
        synthesize=lambda: synthetic.power_like(lat, lng),
        client=client,
    )


async def _earth(cache: TTLCache, client: NasaClient, lat: float, lng: float,
                 date: Optional[str]) -> Resolution:
    return await resolve(
        cache,
        f"earth-imagery-{lat}-{lng}-{date or 'latest'}",
        "earth_imagery",
        fetch=lambda: client.get_earth_assets(lat, lng, date),
        synthesize=lambda: synthetic.earth_imagery(lat, lng, date),
        client=client,
    )


def _elevation(cache: TTLCache, lat: float, lng: float) -> Resolution:
    def build() -> dict:
        return {
            "elevationGrid": terrain.elevation_grid(lat, lng),
            "bounds":        terrain.bounds(lat, lng),
            "resolution":    "30m",
            "source":        "NASA SRTM DEM (simulated)",
            "location":      {"lat": lat, "lng": lng},
        }
    return memoize(cache, f"elevation-{lat}-{lng}", "elevation", build)


async def _terrain_3d(cache: TTLCache, client: NasaClient, lat: float, lng: float) -> dict:
    key = f"terrain-3d-{lat}-{lng}"
    entry = cache.lookup(key)
    if entry is not None:
        return Resolution(entry.data, "cache", "terrain_3d", entry).envelope(cache)

    elevation = _elevation(cache, lat, lng).data
    imagery = await _earth(cache, client, lat, lng, None)
    data = {
        "elevation":        elevation,
        "imagery":          imagery.data if imagery.success else None,
        "farmableAreas":    terrain.farmable_areas(elevation["elevationGrid"]),
        "recommendedCrops": terrain.recommended_crops(lat, lng),
        "location":         {"lat": lat, "lng": lng},
    }
    # A degraded imagery layer is served but not cached
    if imagery.success:
        cache.set(key, data, "terrain_3d")
        source = "nasa" if client.real_data else "synthetic"
        return Resolution(data, source, "terrain_3d").envelope(cache)
    return Resolution(data, "fallback", "terrain_3d", error=imagery.error).envelope(cache)


# ── Route ────────────────────────────────────────────────────────────────────

@router.get("")
async def nasa_data_get(
    action:   Optional[str] = Query(None),
    lat:      float         = Query(DEFAULT_LAT, ge=-90, le=90),
    lng:      float         = Query(DEFAULT_LNG, ge=-180, le=180),
    scenario: Optional[str] = Query(None),
    date:     Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    cache:    TTLCache      = Depends(get_nasa_cache),
    client:   NasaClient    = Depends(get_nasa_client),
):
    log.info(f"NASA Data API: {action} @ {lat},{lng}")

    if action == "test-connection":
        status = await client.test_connection()
        return {"success": status["success"], "data": status}

    if action == "scenarios":
        return {"success": True, "data": {"scenarios": NASA_SCENARIOS, "datasets": NASA_DATASETS}}

    if action == "farm-data":
        res = await resolve(
            cache,
            f"nasa-farm-{lat}-{lng}-{scenario or 'default'}",
            "crop_data",
            fetch=lambda: _farm_profile_from_power(client, lat, lng, scenario),
            synthesize=lambda: agronomy.farm_profile(lat, lng, synthetic.power_like(lat, lng), scenario),
            client=client,
        )
        return res.envelope(cache)

    if action in ("weather", "soil-analysis", "crop-health"):
        res = await _power(cache, client, lat, lng)
        if action == "weather":
            view = agronomy.weather_summary(res.data)
        elif action == "soil-analysis":
            view = agronomy.soil_analysis(res.data)
        else:
            view = agronomy.crop_health(res.data)
        view["location"] = {"lat": lat, "lng": lng}
        return res.envelope(cache, data=view)

    if action == "earth":
        res = await _earth(cache, client, lat, lng, date)
        return res.envelope(cache)

    if action == "elevation":
        return _elevation(cache, lat, lng).envelope(cache)

    if action == "terrain":
        res = _elevation(cache, lat, lng)
        grid = res.data["elevationGrid"]
        view = {
            "location":          {"lat": lat, "lng": lng},
            "bounds":            res.data["bounds"],
            "stats":             terrain.grid_stats(grid),
            "farmableAreaCount": len(terrain.farmable_areas(grid)),
            "recommendedCrops":  terrain.recommended_crops(lat, lng),
        }
        return res.envelope(cache, data=view)

    if action == "terrain-3d":
        return await _terrain_3d(cache, client, lat, lng)

    if action == "cache-stats":
        return {"success": True, "data": cache.stats(), "timestamp": utc_iso()}

    if action == "clear-cache":
        cleared = cache.clear(category)
        return {
            "success": True,
            "data": {
                "clearedEntries": cleared,
                "message":        "Cache cleared successfully",
            },
            "timestamp": utc_iso(),
        }

    raise BadRequestError("Invalid action")


async def _farm_profile_from_power(client: NasaClient, lat: float, lng: float,
                                   scenario: Optional[str]) -> dict:
    raw = await client.get_power_data(lat, lng)
    return agronomy.farm_profile(lat, lng, raw, scenario)
