"""
app/sources/synthetic.py
═══════════════════════════════════════════════════════════════════════════════
Stand-in data for when NASA upstreams are disabled or failing.

Values start from a coordinate-derived base (sin(lat)·cos(lng)) and get
random jitter, then are clamped into plausible ranges:
  NDVI          0 – 1
  soil moisture 0 – 1   (m³/m³)
  temperature  -30 – 50 (°C)
  humidity      0 – 100 (%)
  precipitation ≥ 0     (mm/day)
They look realistic; they are not physical.
═══════════════════════════════════════════════════════════════════════════════
"""

import math
import random
import time
from typing import Optional

from app.core.config import utc_date, utc_iso

NDVI_RANGE     = (0.0, 1.0)
MOISTURE_RANGE = (0.0, 1.0)
TEMP_RANGE     = (-30.0, 50.0)
HUMIDITY_RANGE = (0.0, 100.0)

_CONDITIONS = ["Sunny", "Partly Cloudy", "Overcast", "Rain"]
_DAY = 24 * 60 * 60


def coordinate_seed(lat: float, lng: float) -> float:
    """Deterministic base in [-1, 1] for a location."""
    return math.sin(math.radians(lat)) * math.cos(math.radians(lng))


def _jitter(rng: random.Random, center: float, spread: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, center + (rng.random() - 0.5) * spread))


def _base_temperature(lat: float, seed: float) -> float:
    # warmer toward the equator, nudged by the location seed
    return 30 - abs(lat) * 0.35 + seed * 3


def farm_overview(lat: float, lng: float, date: Optional[str] = None,
                  rng: Optional[random.Random] = None) -> dict:
    rng = rng or random.Random()
    seed = coordinate_seed(lat, lng)
    temp = _base_temperature(lat, seed)

    def health(ndvi: float, moisture: float, temp_spread: float) -> dict:
        return {
            "ndvi":         round(_jitter(rng, ndvi + seed * 0.05, 0.1, *NDVI_RANGE), 3),
            "soilMoisture": round(_jitter(rng, moisture + seed * 0.05, 0.2, *MOISTURE_RANGE), 3),
            "temperature":  round(_jitter(rng, temp, temp_spread, *TEMP_RANGE), 1),
        }

    fields = [
        {
            "id":              "field-001",
            "crop":            "corn",
            "acres":           125,
            "plantingDate":    "2024-04-15",
            "expectedHarvest": "2024-09-20",
            "currentStage":    "Grain Filling",
            "health":          health(0.72, 0.45, 8),
            "alerts":          [],
        },
        {
            "id":              "field-002",
            "crop":            "soybeans",
            "acres":           80,
            "plantingDate":    "2024-05-01",
            "expectedHarvest": "2024-10-10",
            "currentStage":    "Pod Fill",
            "health":          health(0.68, 0.38, 6),
            "alerts":          [],
        },
    ]
    for f in fields:
        if f["health"]["soilMoisture"] < 0.3:
            f["alerts"].append("Low soil moisture detected in Section B")
        if f["health"]["ndvi"] < 0.4:
            f["alerts"].append("Vegetation stress detected")

    avg_ndvi = sum(f["health"]["ndvi"] for f in fields) / len(fields)
    return {
        "coordinates":     {"lat": lat, "lng": lng},
        "date":            date or utc_date(),
        "fields":          fields,
        "overallHealth":   "Good" if avg_ndvi >= 0.6 else "Fair" if avg_ndvi >= 0.4 else "Poor",
        "recommendations": [
            "Monitor soil moisture in soybean field sections",
            "Optimal conditions for corn grain filling stage",
            "Consider irrigation scheduling for next week",
        ],
        "nasaDataSources": ["MODIS Terra NDVI", "SMAP Soil Moisture", "GPM Precipitation"],
        "lastUpdated":     utc_iso(),
    }


def weather_forecast(lat: float, lng: float, rng: Optional[random.Random] = None) -> dict:
    rng = rng or random.Random()
    seed = coordinate_seed(lat, lng)
    temp = _base_temperature(lat, seed)
    now = time.time()
    return {
        "current": {
            "temperature":   round(_jitter(rng, temp, 10, *TEMP_RANGE), 1),
            "humidity":      round(_jitter(rng, 65 + seed * 10, 20, *HUMIDITY_RANGE), 1),
            "windSpeed":     round(_jitter(rng, 12, 8, 0, 150), 1),
            "precipitation": round(rng.random() * 5, 2),
            "conditions":    rng.choice(_CONDITIONS[:3]),
        },
        "forecast": [
            {
                "date":          utc_date(now + i * _DAY),
                "high":          round(_jitter(rng, temp + 2, 8, *TEMP_RANGE), 1),
                "low":           round(_jitter(rng, temp - 6, 6, *TEMP_RANGE), 1),
                "precipitation": round(rng.random() * 10, 2),
                "conditions":    rng.choice(["Sunny", "Partly Cloudy", "Rain"]),
            }
            for i in range(7)
        ],
    }


def power_like(lat: float, lng: float, days: int = 7, rng: Optional[random.Random] = None) -> dict:
    """POWER-shaped payload so the agronomy derivations run unchanged."""
    rng = rng or random.Random()
    seed = coordinate_seed(lat, lng)
    temp = _base_temperature(lat, seed)
    now = time.time()
    series: dict[str, dict[str, float]] = {
        "T2M": {}, "PRECTOTCORR": {}, "RH2M": {}, "WS2M": {},
        "ALLSKY_SFC_SW_DWN": {}, "GWETROOT": {}, "GWETTOP": {},
    }
    for i in range(days - 1, -1, -1):
        day = utc_date(now - i * _DAY).replace("-", "")
        series["T2M"][day]               = round(_jitter(rng, temp, 10, *TEMP_RANGE), 2)
        series["PRECTOTCORR"][day]       = round(rng.random() * 8, 2)
        series["RH2M"][day]              = round(_jitter(rng, 60 + seed * 15, 30, *HUMIDITY_RANGE), 2)
        series["WS2M"][day]              = round(_jitter(rng, 4, 4, 0, 40), 2)
        series["ALLSKY_SFC_SW_DWN"][day] = round(_jitter(rng, 450 + seed * 50, 200, 0, 1000), 2)
        series["GWETROOT"][day]          = round(_jitter(rng, 0.45 + seed * 0.1, 0.3, *MOISTURE_RANGE), 3)
        series["GWETTOP"][day]           = round(_jitter(rng, 0.4 + seed * 0.1, 0.3, *MOISTURE_RANGE), 3)
    return {
        "geometry":   {"type": "Point", "coordinates": [lng, lat]},
        "properties": {"parameter": series},
        "header":     {"title": "Synthetic POWER-like daily data", "source": "synthetic"},
    }


def earth_imagery(lat: float, lng: float, date: Optional[str] = None) -> dict:
    return {
        "id":       f"synthetic_earth_{lat}_{lng}",
        "date":     date or utc_date(),
        "imageUrl": "/placeholder.jpg",
        "resource": {},
        "metadata": {"coordinates": {"lat": lat, "lng": lng}, "source": "Fallback data"},
    }


def comprehensive(lat: float, lng: float, date: Optional[str] = None) -> dict:
    """Stand-in for the combined NASA Earth/APOD/TechTransfer payload."""
    return {
        "success":        True,
        "satelliteImage": earth_imagery(lat, lng, date),
        "apod":           None,
        "agriculturalTech": {"patents": [], "count": 0},
        "errors":         [],
        "metadata": {
            "coordinates": {"lat": lat, "lng": lng},
            "date":        date or utc_date(),
            "timestamp":   utc_iso(),
            "dataSource":  "EDUCATIONAL_MOCK",
        },
    }
