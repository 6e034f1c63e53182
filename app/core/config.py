"""
app/core/config.py  ── NASA Farm Navigators API
═══════════════════════════════════════════════════════════════════════════════
All environment-driven settings live here.

  NASA_API_KEY            →  api.nasa.gov key (APOD, Earth assets, TechTransfer)
                              POWER does not need a key.
  ENABLE_REAL_NASA_DATA   →  "true" to call NASA upstreams, otherwise every
                              data action is served from synthetic generators
  CACHE_MAX_ENTRIES       →  per-router cache bound (LRU eviction past it)
  SESSION_DURATION_S      →  guest session lifetime (default 4 h)
  SESSION_SWEEP_INTERVAL_S→  expired-session sweep period (default 1 h)
═══════════════════════════════════════════════════════════════════════════════
"""

import logging
import os
import time
from datetime import datetime
from typing import Optional

import pytz

UTC = pytz.utc

log = logging.getLogger("config")


def _env_flag(*names: str) -> bool:
    for name in names:
        raw = os.environ.get(name)
        if raw is not None:
            return raw.strip().lower() in ("1", "true", "yes", "on")
    return False


# ── NASA ──────────────────────────────────────────────────────────────────────
# SECURITY: the key must come from the environment, never from source.
NASA_API_KEY = os.environ.get("NASA_API_KEY", "")
if not NASA_API_KEY:
    log.warning(
        "NASA_API_KEY env var not set; api.nasa.gov requests will fall back to synthetic data"
    )

ENABLE_REAL_NASA_DATA = _env_flag("ENABLE_REAL_NASA_DATA", "NEXT_PUBLIC_ENABLE_REAL_NASA_DATA")

NASA_ENDPOINTS: dict[str, str] = {
    "apod":          "https://api.nasa.gov/planetary/apod",
    "earth_assets":  "https://api.nasa.gov/planetary/earth/assets",
    "tech_transfer": "https://api.nasa.gov/techtransfer/patent/",
    "power":         "https://power.larc.nasa.gov/api/temporal/daily/point",
}

POWER_PARAMETERS = "T2M,PRECTOTCORR,RH2M,WS2M,ALLSKY_SFC_SW_DWN,GWETROOT,GWETTOP"
POWER_WINDOW_DAYS = 30

# ── Cache ─────────────────────────────────────────────────────────────────────
CACHE_MAX_ENTRIES = int(os.environ.get("CACHE_MAX_ENTRIES", "1000"))

_MIN  = 60
_HOUR = 60 * _MIN
_DAY  = 24 * _HOUR

# category → TTL in seconds
CACHE_DURATIONS: dict[str, int] = {
    "user_progress":    5 * _MIN,
    "market_data":      10 * _MIN,
    "weather_data":     15 * _MIN,
    "nasa_imagery":     30 * _MIN,
    "crop_data":        1 * _HOUR,
    "power_weather":    1 * _HOUR,
    "dynamic_content":  1 * _HOUR,
    "earth_imagery":    2 * _HOUR,
    "terrain_3d":       2 * _HOUR,
    "elevation":        4 * _HOUR,
    "learning_content": 1 * _DAY,
    "static_content":   7 * _DAY,
}

# ── Guest sessions ────────────────────────────────────────────────────────────
SESSION_DURATION_S       = int(os.environ.get("SESSION_DURATION_S", str(4 * _HOUR)))
SESSION_SWEEP_INTERVAL_S = int(os.environ.get("SESSION_SWEEP_INTERVAL_S", str(1 * _HOUR)))
SESSION_PAGE_VIEW_LIMIT  = 200

# ── HTTP surface ──────────────────────────────────────────────────────────────
API_PREFIX   = "/api"
CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*").split(",")
LOG_LEVEL    = os.environ.get("LOG_LEVEL", "INFO").upper()

# Default farm location when a request omits coordinates (New York demo farm)
DEFAULT_LAT = 40.7128
DEFAULT_LNG = -74.0060


def utc_iso(ts: Optional[float] = None) -> str:
    """ISO-8601 UTC timestamp for `ts` (epoch seconds), or now."""
    return datetime.fromtimestamp(time.time() if ts is None else ts, UTC).isoformat()


def utc_date(ts: Optional[float] = None) -> str:
    return utc_iso(ts)[:10]
