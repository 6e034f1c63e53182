"""
app/core/content.py
═══════════════════════════════════════════════════════════════════════════════
Static agricultural and educational content served by the data hub and the
NASA data router. Read-only at runtime.
═══════════════════════════════════════════════════════════════════════════════
"""

# ── Crops ─────────────────────────────────────────────────────────────────────
CROP_DATABASE: dict[str, dict] = {
    "corn": {
        "name": "Corn (Maize)",
        "scientificName": "Zea mays",
        "growthStages": ["Planting", "Germination", "V6 Stage", "Tasseling", "Grain Filling", "Maturity"],
        "optimalConditions": {
            "temperature":  {"min": 10, "max": 35, "optimal": 25},
            "soilMoisture": {"min": 0.2, "max": 0.8, "optimal": 0.6},
            "ndvi":         {"healthy": 0.7, "stressed": 0.4},
            "growthPeriod": 120,
        },
        "nasaIndicators": {
            "modisNDVI":        "Monitor vegetation health",
            "smapSoilMoisture": "Track water availability",
            "gpmPrecipitation": "Rainfall monitoring",
        },
    },
    "soybeans": {
        "name": "Soybeans",
        "scientificName": "Glycine max",
        "growthStages": ["Planting", "Emergence", "Flowering", "Pod Fill", "Maturity"],
        "optimalConditions": {
            "temperature":  {"min": 15, "max": 30, "optimal": 23},
            "soilMoisture": {"min": 0.3, "max": 0.7, "optimal": 0.5},
            "ndvi":         {"healthy": 0.65, "stressed": 0.35},
            "growthPeriod": 100,
        },
    },
    "wheat": {
        "name": "Wheat",
        "scientificName": "Triticum aestivum",
        "growthStages": ["Planting", "Tillering", "Jointing", "Heading", "Grain Fill", "Harvest"],
        "optimalConditions": {
            "temperature":  {"min": 5, "max": 25, "optimal": 18},
            "soilMoisture": {"min": 0.25, "max": 0.75, "optimal": 0.5},
            "ndvi":         {"healthy": 0.6, "stressed": 0.3},
            "growthPeriod": 180,
        },
    },
}

# ── Data hub scenarios ───────────────────────────────────────────────────────
FARMING_SCENARIOS: list[dict] = [
    {
        "id": "midwest-corn-belt",
        "name": "Midwest Corn Belt Analysis",
        "location": {"lat": 41.5868, "lng": -93.6250, "name": "Iowa, USA"},
        "primaryCrops": ["corn", "soybeans"],
        "challenges": ["Variable rainfall", "Soil erosion", "Pest management"],
        "nasaDataLayers": ["MODIS_Terra_NDVI", "SMAP_L4_Soil_Moisture", "GPM_IMERG_Precipitation"],
        "seasonalPattern": {
            "spring": "Planting season - monitor soil conditions",
            "summer": "Growth monitoring - NDVI tracking critical",
            "fall":   "Harvest planning - yield estimation",
            "winter": "Field preparation and planning",
        },
    },
    {
        "id": "california-central-valley",
        "name": "California Central Valley",
        "location": {"lat": 36.7783, "lng": -119.4179, "name": "Central Valley, CA"},
        "primaryCrops": ["wheat", "tomatoes", "almonds"],
        "challenges": ["Water scarcity", "Heat stress", "Drought management"],
        "nasaDataLayers": ["MODIS_Terra_LST", "SMAP_L4_Soil_Moisture", "VIIRS_NDVI"],
    },
]

EDUCATIONAL_CONTENT: dict = {
    "quickFacts": [
        {
            "title": "NASA MODIS Satellites",
            "content": "MODIS instruments on Terra and Aqua satellites provide daily global coverage for agricultural monitoring.",
            "category": "satellite-tech",
            "difficulty": "beginner",
        },
        {
            "title": "NDVI Interpretation",
            "content": "NDVI values above 0.6 typically indicate healthy, dense vegetation. Values below 0.3 suggest stressed or sparse vegetation.",
            "category": "data-interpretation",
            "difficulty": "intermediate",
        },
        {
            "title": "Soil Moisture Active Passive (SMAP)",
            "content": "SMAP provides soil moisture data at 36km resolution every 2-3 days, crucial for irrigation planning.",
            "category": "satellite-tech",
            "difficulty": "intermediate",
        },
    ],
    "tutorials": [
        {
            "id": "reading-satellite-data",
            "title": "Reading Satellite Data for Beginners",
            "steps": [
                "Understanding color scales in satellite imagery",
                "Interpreting NDVI values for crop health",
                "Using soil moisture data for irrigation decisions",
                "Combining multiple data layers for insights",
            ],
            "estimatedTime": 20,
            "interactiveElements": True,
        },
    ],
    "glossary": {
        "NDVI": "Normalized Difference Vegetation Index, a remote-sensing measure of vegetation greenness.",
        "SMAP": "Soil Moisture Active Passive, a satellite mission measuring soil moisture.",
        "GPM":  "Global Precipitation Measurement, a satellite mission measuring rainfall.",
        "LST":  "Land Surface Temperature, the skin temperature of the ground seen from orbit.",
    },
}

MARKET_DATA: dict = {
    "commodityPrices": {
        "corn":     {"price": 4.85,  "unit": "USD/bushel", "change": 0.12,  "updated": "2024-10-05"},
        "soybeans": {"price": 11.20, "unit": "USD/bushel", "change": -0.08, "updated": "2024-10-05"},
        "wheat":    {"price": 5.95,  "unit": "USD/bushel", "change": 0.05,  "updated": "2024-10-05"},
    },
    "weatherOutlook": {
        "shortTerm": "Favorable conditions expected for next 7 days",
        "seasonal":  "La Niña conditions may impact winter wheat planting",
        "trends":    ["Increased precipitation in Midwest", "Above average temperatures in Southwest"],
    },
}

# ── NASA datasets and challenge scenarios ────────────────────────────────────
NASA_DATASETS: dict[str, str] = {
    "SMAP_L3":          "SPL3SMP_E.003",
    "SMAP_L4":          "SPL4SMGP.007",
    "MODIS_NDVI":       "MOD13Q1.061",
    "MODIS_EVI":        "MOD13A1.061",
    "VIIRS_NDVI":       "VNP13A1.001",
    "GPM_IMERG":        "GPM_3IMERGHH.06",
    "GPM_MONTHLY":      "GPM_3IMERGM.06",
    "ECOSTRESS_ET":     "ECO3ETPTJPL.001",
    "ECOSTRESS_LST":    "ECO2LSTE.001",
    "MODIS_LANDCOVER":  "MCD12Q1.061",
    "CROP_DATA_LAYER":  "NASS_CDL",
    "LANDSAT_8":        "LANDSAT_LC08_C02_T1_L2",
    "LANDSAT_9":        "LANDSAT_LC09_C02_T1_L2",
    "AIRS_TEMPERATURE": "AIRS3STD.007",
    "MERRA2_WEATHER":   "M2T1NXSLV.5.12.4",
}

NASA_SCENARIOS: list[dict] = [
    {
        "id": "drought-management",
        "name": "Drought Management Challenge",
        "description": "Learn to manage water resources during drought conditions using SMAP soil moisture data",
        "farmType": "commercial",
        "region": "california",
        "crops": ["almonds", "grapes", "citrus"],
        "challenges": ["water_scarcity", "heat_stress", "irrigation_optimization"],
        "datasetsRequired": [NASA_DATASETS["SMAP_L3"], NASA_DATASETS["ECOSTRESS_ET"], NASA_DATASETS["GPM_IMERG"]],
        "educationalObjectives": [
            "Understanding soil moisture depth profiles",
            "Interpreting evapotranspiration rates",
            "Optimizing irrigation timing and amounts",
        ],
    },
    {
        "id": "crop-health-monitoring",
        "name": "Crop Health Monitoring",
        "description": "Use MODIS vegetation indices to detect crop stress and optimize yields",
        "farmType": "smallholder",
        "region": "midwest_us",
        "crops": ["corn", "soybeans"],
        "challenges": ["disease_detection", "nutrient_deficiency", "growth_monitoring"],
        "datasetsRequired": [NASA_DATASETS["MODIS_NDVI"], NASA_DATASETS["MODIS_EVI"], NASA_DATASETS["LANDSAT_8"]],
        "educationalObjectives": [
            "Understanding NDVI vs EVI differences",
            "Recognizing stress patterns in vegetation indices",
            "Linking satellite data to field observations",
        ],
    },
    {
        "id": "precision-agriculture",
        "name": "Precision Agriculture Planning",
        "description": "Integrate multiple NASA datasets for comprehensive farm management decisions",
        "farmType": "industrial",
        "region": "great_plains",
        "crops": ["wheat", "corn", "soybeans"],
        "challenges": ["variable_rate_application", "yield_optimization", "resource_efficiency"],
        "datasetsRequired": [
            NASA_DATASETS["SMAP_L4"],
            NASA_DATASETS["MODIS_NDVI"],
            NASA_DATASETS["GPM_MONTHLY"],
            NASA_DATASETS["ECOSTRESS_LST"],
            NASA_DATASETS["MODIS_LANDCOVER"],
        ],
        "educationalObjectives": [
            "Multi-sensor data fusion techniques",
            "Understanding spatial and temporal resolution trade-offs",
            "Creating management zones from satellite data",
        ],
    },
]

# ── Guest analytics showcase ─────────────────────────────────────────────────
POPULAR_CONTENT: dict = {
    "mostViewedPages": [
        {"path": "/farm",                "title": "Farm Dashboard", "views": 1247, "avgTime": "5:32"},
        {"path": "/learn",               "title": "Learning Hub",   "views": 892,  "avgTime": "8:15"},
        {"path": "/nasa-demo",           "title": "NASA Demo",      "views": 634,  "avgTime": "3:22"},
        {"path": "/nasa-farm-challenge", "title": "Farm Challenge", "views": 445,  "avgTime": "12:08"},
    ],
    "mostCompletedModules": [
        {"id": "intro-nasa-data",      "title": "NASA Data Intro", "completions": 156},
        {"id": "soil-moisture-basics", "title": "Soil Moisture",   "completions": 98},
        {"id": "ndvi-vegetation",      "title": "NDVI Analysis",   "completions": 73},
    ],
    "preferredCrops": [
        {"crop": "corn",     "selections": 423},
        {"crop": "soybeans", "selections": 312},
        {"crop": "wheat",    "selections": 287},
    ],
}


def find_scenario(scenario_id: str, scenarios: list[dict] = FARMING_SCENARIOS) -> dict | None:
    return next((s for s in scenarios if s["id"] == scenario_id), None)
