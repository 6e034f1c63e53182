"""
app/routers/data_hub.py
Endpoints (all under /api/data-hub, selected by ?action=):
  GET  farm-overview        → simulated two-field farm for lat/lng (crop_data, 1 h)
  GET  crop-database        → all crops, or ?crop=corn (404 if unknown)
  GET  farming-scenarios    → all scenarios, or ?scenario=id (404 if unknown)
  GET  educational-content  → quick facts, tutorials, glossary
  GET  market-data          → commodity prices and outlook
  GET  nasa-live-data       → NASA Earth + APOD + TechTransfer bundle (nasa_imagery, 30 min)
  GET  weather-forecast     → current conditions + 7-day forecast (weather_data, 15 min)
  GET  cache-stats          → this router's cache statistics
  POST update-farm-data     → body {farmId, fieldUpdates}
  POST clear-cache          → body {category?}; substring-scoped clear
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query

from app.core.aggregator import memoize, resolve, static_envelope
from app.core.cache import TTLCache
from app.core.config import API_PREFIX, DEFAULT_LAT, DEFAULT_LNG, utc_iso
from app.core.content import (
    CROP_DATABASE,
    EDUCATIONAL_CONTENT,
    FARMING_SCENARIOS,
    MARKET_DATA,
    find_scenario,
)
from app.core.deps import get_data_hub_cache, get_nasa_client
from app.core.errors import BadRequestError, NotFoundError
from app.models.bodies import ClearCacheRequest, FarmDataUpdate
from app.sources import synthetic
from app.sources.nasa import NasaClient

router = APIRouter(prefix=API_PREFIX + "/data-hub", tags=["data-hub"])
log = logging.getLogger("data_hub")


@router.get("")
async def data_hub_get(
    action:   Optional[str] = Query(None),
    lat:      float         = Query(DEFAULT_LAT, ge=-90, le=90),
    lng:      float         = Query(DEFAULT_LNG, ge=-180, le=180),
    crop:     Optional[str] = Query(None),
    scenario: Optional[str] = Query(None),
    date:     Optional[str] = Query(None),
    cache:    TTLCache      = Depends(get_data_hub_cache),
    client:   NasaClient    = Depends(get_nasa_client),
):
    log.info(f"Data Hub API: {action}")

    if action == "farm-overview":
        key = f"farm-data-{lat}-{lng}-{date or 'current'}"
        res = memoize(cache, key, "crop_data", lambda: synthetic.farm_overview(lat, lng, date))
        return res.envelope(cache)

    if action == "crop-database":
        if crop is None:
            return static_envelope(cache, CROP_DATABASE, "static_content")
        if crop not in CROP_DATABASE:
            raise NotFoundError(f"Crop '{crop}' not found")
        return static_envelope(cache, CROP_DATABASE[crop], "static_content")

    if action == "farming-scenarios":
        if scenario is None:
            return static_envelope(cache, FARMING_SCENARIOS, "static_content")
        found = find_scenario(scenario)
        if found is None:
            raise NotFoundError(f"Scenario '{scenario}' not found")
        return static_envelope(cache, found, "static_content")

    if action == "educational-content":
        return static_envelope(cache, EDUCATIONAL_CONTENT, "learning_content")

    if action == "market-data":
        return static_envelope(cache, MARKET_DATA, "market_data")

    if action == "nasa-live-data":
        res = await resolve(
            cache,
            f"nasa-live-{lat}-{lng}-{date or 'latest'}",
            "nasa_imagery",
            fetch=lambda: client.get_comprehensive_data(lat, lng, date),
            synthesize=lambda: synthetic.comprehensive(lat, lng, date),
            client=client,
        )
        return res.envelope(cache)

    if action == "weather-forecast":
        key = f"weather-{lat}-{lng}"
        res = memoize(cache, key, "weather_data", lambda: synthetic.weather_forecast(lat, lng))
        return res.envelope(cache)

    if action == "cache-stats":
        return {"success": True, "data": cache.stats()}

    raise BadRequestError("Invalid action")


@router.post("")
async def data_hub_post(
    action:  Optional[str]            = Query(None),
    payload: Optional[dict[str, Any]] = Body(None),
    cache:   TTLCache                 = Depends(get_data_hub_cache),
):
    payload = payload or {}

    if action == "update-farm-data":
        body = FarmDataUpdate.model_validate(payload)
        # Farm records are simulated; acknowledge without storing
        return {
            "success": True,
            "data": {
                "farmId":        body.farm_id,
                "updatedFields": len(body.field_updates),
                "timestamp":     utc_iso(),
                "success":       True,
            },
        }

    if action == "clear-cache":
        body = ClearCacheRequest.model_validate(payload)
        cleared = cache.clear(body.category)
        return {"success": True, "data": {"clearedEntries": cleared}}

    raise BadRequestError("Invalid POST action")
