"""
app/sources/agronomy.py
═══════════════════════════════════════════════════════════════════════════════
Turns NASA POWER daily parameters into farm-friendly indicators.

POWER shape:
  {"properties": {"parameter": {"T2M": {"20241001": 21.3, ...}, ...}}}
Missing days carry the POWER fill value -999.

The derivations are simplified educational models, not agronomic truth:
  soil moisture  ← humidity, precipitation, temperature (or GWETROOT/GWETTOP)
  NDVI / EVI     ← temperature, precipitation, solar radiation
  ET             ← temperature, humidity, solar radiation
═══════════════════════════════════════════════════════════════════════════════
"""

from typing import Optional

from app.core.config import utc_iso

POWER_FILL = -999.0

# Used when a parameter is missing for the latest day
DEFAULTS = {
    "T2M":               25.0,
    "PRECTOTCORR":       0.0,
    "RH2M":              60.0,
    "WS2M":              5.0,
    "ALLSKY_SFC_SW_DWN": 500.0,
}


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def power_parameters(raw: dict) -> dict[str, dict[str, float]]:
    params = (raw or {}).get("properties", {}).get("parameter", {}) or {}
    return {
        name: {d: v for d, v in series.items() if v is not None and v != POWER_FILL}
        for name, series in params.items()
        if isinstance(series, dict)
    }


def _dates(params: dict) -> list[str]:
    return sorted(params.get("T2M", {}).keys())


def latest_values(raw: dict) -> dict:
    """Latest-day readings with DEFAULTS filled in. `date` is None if POWER had no T2M."""
    params = power_parameters(raw)
    dates = _dates(params)
    latest = dates[-1] if dates else None
    values = {"date": latest}
    for name in set(DEFAULTS) | set(params):
        series = params.get(name, {})
        values[name] = series.get(latest, DEFAULTS.get(name)) if latest else DEFAULTS.get(name)
    return values


def weather_summary(raw: dict, days: int = 7) -> dict:
    params = power_parameters(raw)
    dates = _dates(params)
    latest = dates[-1] if dates else None

    def at(name: str, d: Optional[str]):
        return params.get(name, {}).get(d) if d else None

    return {
        "summary": {
            "temperature":    at("T2M", latest),
            "humidity":       at("RH2M", latest),
            "precipitation":  at("PRECTOTCORR", latest),
            "wind":           at("WS2M", latest),
            "solarRadiation": at("ALLSKY_SFC_SW_DWN", latest),
            "date":           latest,
        },
        "recent": [
            {
                "date":          d,
                "temp":          at("T2M", d),
                "precipitation": at("PRECTOTCORR", d),
                "humidity":      at("RH2M", d),
                "wind":          at("WS2M", d),
            }
            for d in dates[-days:]
        ],
    }


# ── Derived indicators ───────────────────────────────────────────────────────

def soil_moisture(temp: float, precip: float, humidity: float) -> dict:
    base = humidity / 100 * 0.4
    precip_bonus = min(precip / 10 * 0.1, 0.2)
    temp_penalty = max((temp - 25) / 100, 0)
    return {
        "surface":  _clamp(base + precip_bonus - temp_penalty, 0.1, 0.6),
        "rootZone": _clamp(base * 0.9 + precip_bonus * 0.7, 0.15, 0.5),
        "deepSoil": _clamp(base * 0.8 + precip_bonus * 0.5, 0.2, 0.45),
    }


def vegetation_indices(temp: float, precip: float, solar: float) -> dict:
    temp_factor = 1 - abs(temp - 25) / 20
    water_factor = min(precip / 5, 1)
    solar_factor = min(solar / 500, 1)
    ndvi = _clamp(temp_factor * water_factor * solar_factor * 0.8, 0.2, 0.9)
    evi = _clamp(ndvi * 0.9, 0.15, 0.8)
    return {"ndvi": ndvi, "evi": evi}


def evapotranspiration(temp: float, humidity: float, solar: float) -> float:
    return _clamp((temp - 10) * 0.1 + solar / 100 - humidity / 100, 0, 10)


def vegetation_status(ndvi: float) -> str:
    if ndvi >= 0.6:
        return "healthy"
    if ndvi >= 0.4:
        return "moderate"
    if ndvi >= 0.2:
        return "stressed"
    return "bare"


def moisture_status(value: float) -> str:
    if value > 0.3:
        return "wet"
    if value >= 0.15:
        return "adequate"
    return "dry"


def educational_insights(temp: float, precip: float, humidity: float, ndvi: float) -> list[dict]:
    insights = []
    if temp > 35:
        insights.append({
            "type":              "warning",
            "title":             "Heat Stress Alert",
            "message":           f"High temperature ({temp:.1f}°C) may stress crops",
            "dataSource":        "NASA POWER",
            "learningObjective": "Understanding temperature effects on crop growth",
        })
    if ndvi < 0.4:
        insights.append({
            "type":              "critical",
            "title":             "Vegetation Stress Detected",
            "message":           f"Low NDVI ({ndvi:.2f}) indicates poor plant health",
            "dataSource":        "MODIS-derived calculation",
            "learningObjective": "Interpreting vegetation indices for crop monitoring",
        })
    if precip < 1 and humidity < 40:
        insights.append({
            "type":              "warning",
            "title":             "Drought Conditions",
            "message":           "Low precipitation and humidity detected - consider irrigation",
            "dataSource":        "NASA POWER",
            "learningObjective": "Water management in agriculture",
        })
    return insights


def game_metrics(temp: float, precip: float, humidity: float, ndvi: float) -> dict:
    sustainability = round(ndvi * 40 + min(humidity / 60, 1) * 30 + min(precip / 5, 1) * 30)
    efficiency = round((40 if 20 < temp < 30 else 20) + ndvi * 35 + min(precip / 3, 1) * 25)
    return {
        "sustainabilityScore":  int(_clamp(sustainability, 0, 100)),
        "efficiencyScore":      int(_clamp(efficiency, 0, 100)),
        "yieldPotential":       round(ndvi * 100),
        "resourceOptimization": round((humidity + min(precip * 10, 50)) / 2),
        "completedObjectives":  1,
        "totalObjectives":      4,
    }


# ── Composite views ──────────────────────────────────────────────────────────

def soil_analysis(raw: dict) -> dict:
    v = latest_values(raw)
    layers = soil_moisture(v["T2M"], v["PRECTOTCORR"], v["RH2M"])
    # POWER ships satellite-model wetness for the root zone and topsoil
    if v.get("GWETROOT") is not None:
        layers["rootZone"] = _clamp(v["GWETROOT"], 0, 1)
    if v.get("GWETTOP") is not None:
        layers["surface"] = _clamp(v["GWETTOP"], 0, 1)
    irrigation = layers["rootZone"] < 0.2 and v["PRECTOTCORR"] < 1.0
    return {
        "date":   v["date"],
        "layers": [
            {"depth": "Surface (0-5cm)",     "value": round(layers["surface"], 3)},
            {"depth": "Root Zone (0-100cm)", "value": round(layers["rootZone"], 3)},
            {"depth": "Deep Soil (100cm+)",  "value": round(layers["deepSoil"], 3)},
        ],
        "status":                 moisture_status(layers["rootZone"]),
        "irrigationRecommended":  irrigation,
        "evapotranspiration":     round(evapotranspiration(v["T2M"], v["RH2M"], v["ALLSKY_SFC_SW_DWN"]), 2),
        "explanation": (
            "SMAP-style soil moisture in m³/m³. Above 0.3 = wet soil, "
            "below 0.15 = dry soil requiring irrigation."
        ),
    }


def crop_health(raw: dict) -> dict:
    v = latest_values(raw)
    veg = vegetation_indices(v["T2M"], v["PRECTOTCORR"], v["ALLSKY_SFC_SW_DWN"])
    heat_stress = v["T2M"] > 35 and veg["ndvi"] < 0.5
    return {
        "date":        v["date"],
        "ndvi":        round(veg["ndvi"], 3),
        "evi":         round(veg["evi"], 3),
        "status":      vegetation_status(veg["ndvi"]),
        "heatStress":  heat_stress,
        "insights":    educational_insights(v["T2M"], v["PRECTOTCORR"], v["RH2M"], veg["ndvi"]),
        "gameMetrics": game_metrics(v["T2M"], v["PRECTOTCORR"], v["RH2M"], veg["ndvi"]),
    }


def farm_profile(lat: float, lng: float, raw: dict, scenario: Optional[str] = None) -> dict:
    """Full farm view: location, real-time indicators, insights and game metrics."""
    v = latest_values(raw)
    temp, precip, humidity = v["T2M"], v["PRECTOTCORR"], v["RH2M"]
    solar = v["ALLSKY_SFC_SW_DWN"]
    moisture = soil_moisture(temp, precip, humidity)
    veg = vegetation_indices(temp, precip, solar)
    now = utc_iso()
    return {
        "location": {"lat": lat, "lng": lng, "name": f"NASA Farm at {lat:.3f}, {lng:.3f}"},
        "scenario": scenario or "default",
        "realTimeData": {
            "soilMoisture": [
                {"value": moisture["surface"],  "timestamp": now, "depth": "Surface (0-5cm)"},
                {"value": moisture["rootZone"], "timestamp": now, "depth": "Root Zone (0-100cm)"},
                {"value": moisture["deepSoil"], "timestamp": now, "depth": "Deep Soil (100cm+)"},
            ],
            "vegetation":         [{"ndvi": veg["ndvi"], "evi": veg["evi"], "timestamp": now}],
            "precipitation":      [{"value": precip, "timestamp": now}],
            "temperature":        [{"value": temp, "timestamp": now}],
            "evapotranspiration": [{"value": evapotranspiration(temp, humidity, solar), "timestamp": now}],
        },
        "educationalInsights": educational_insights(temp, precip, humidity, veg["ndvi"]),
        "gameMetrics":         game_metrics(temp, precip, humidity, veg["ndvi"]),
    }
