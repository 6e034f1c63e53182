"""
app/core/curriculum.py
Learning modules, assessments and XP levels for the learning hub.
"""

from typing import Optional

LEARNING_MODULES: dict[str, list[dict]] = {
    "beginner": [
        {
            "id": "intro-nasa-data",
            "title": "Introduction to NASA Agricultural Data",
            "description": "Learn about satellite imagery, NDVI, and soil moisture data",
            "duration": "15 min",
            "xp": 100,
            "content": {
                "sections": [
                    {
                        "title": "What is NASA Earth Observation?",
                        "content": "NASA satellites continuously monitor Earth to provide critical data for agriculture...",
                        "interactive": {
                            "type": "quiz",
                            "questions": [
                                {
                                    "question": "What does NDVI measure?",
                                    "options": ["Soil moisture", "Vegetation health", "Temperature", "Rainfall"],
                                    "correct": 1,
                                },
                            ],
                        },
                    },
                    {
                        "title": "MODIS and Landsat Satellites",
                        "content": "These satellites provide different types of agricultural data...",
                        "interactive": {"type": "simulation", "scenario": "crop-monitoring"},
                    },
                ],
                "resources": [
                    {"title": "NASA Earthdata Guide", "url": "https://earthdata.nasa.gov/"},
                    {"title": "MODIS Data Products", "url": "https://modis.gsfc.nasa.gov/"},
                ],
            },
        },
        {
            "id": "soil-moisture-basics",
            "title": "Understanding Soil Moisture with SMAP",
            "description": "Master soil moisture interpretation for crop management",
            "duration": "20 min",
            "xp": 150,
            "content": {
                "sections": [
                    {
                        "title": "SMAP Mission Overview",
                        "content": "The Soil Moisture Active Passive (SMAP) mission provides global soil moisture data...",
                        "interactive": {"type": "data-analysis", "dataset": "smap-sample"},
                    },
                ],
            },
        },
        {
            "id": "ndvi-vegetation",
            "title": "Vegetation Health Monitoring with NDVI",
            "description": "Learn to interpret NDVI data for crop health assessment",
            "duration": "25 min",
            "xp": 200,
        },
    ],
    "intermediate": [
        {
            "id": "weather-patterns",
            "title": "Weather Pattern Analysis with GPM",
            "description": "Use precipitation data for farm planning",
            "duration": "30 min",
            "xp": 250,
        },
        {
            "id": "crop-yield-prediction",
            "title": "AI-Powered Yield Prediction",
            "description": "Combine satellite data with machine learning",
            "duration": "45 min",
            "xp": 300,
        },
    ],
    "advanced": [
        {
            "id": "climate-adaptation",
            "title": "Climate Change Adaptation Strategies",
            "description": "Long-term agricultural planning with climate data",
            "duration": "60 min",
            "xp": 500,
        },
    ],
}

ASSESSMENTS: list[dict] = [
    {
        "id": "nasa-data-fundamentals",
        "title": "NASA Data Fundamentals",
        "description": "Test your knowledge of satellite data basics",
        "timeLimit": 20,
        "difficulty": "beginner",
        "xpReward": 300,
        "questionsData": [
            {
                "id": 1,
                "question": "Which NASA satellite provides soil moisture data?",
                "options": ["MODIS", "SMAP", "Landsat", "VIIRS"],
                "correct": 1,
                "explanation": "SMAP (Soil Moisture Active Passive) is specifically designed to measure soil moisture.",
            },
            {
                "id": 2,
                "question": "What does NDVI stand for?",
                "options": [
                    "Normalized Difference Vegetation Index",
                    "NASA Data Verification Index",
                    "Natural Diversity Vegetation Indicator",
                    "Normalized Digital Vegetation Interface",
                ],
                "correct": 0,
                "explanation": "NDVI measures vegetation health by comparing red and near-infrared light reflection.",
            },
        ],
    },
]

# (minimum XP, title); level number is position + 1
LEVELS: list[tuple[int, str]] = [
    (0,    "Farm Novice"),
    (500,  "Farm Analyst"),
    (2000, "Sustainability Expert"),
    (5000, "NASA Agronomist"),
]

COMPLETION_XP_DEFAULT = 150
ACHIEVEMENT_XP_BONUS  = 50
PASS_SCORE            = 70
HIGH_ACHIEVER_SCORE   = 80


def all_modules() -> list[dict]:
    return [m for level in LEARNING_MODULES.values() for m in level]


def find_module(module_id: str) -> Optional[dict]:
    return next((m for m in all_modules() if m["id"] == module_id), None)


def find_assessment(assessment_id: str) -> Optional[dict]:
    return next((a for a in ASSESSMENTS if a["id"] == assessment_id), None)


def public_assessment(assessment: dict) -> dict:
    """Assessment without the answer key."""
    questions = [
        {k: v for k, v in q.items() if k not in ("correct", "explanation")}
        for q in assessment["questionsData"]
    ]
    return {**{k: v for k, v in assessment.items() if k != "questionsData"},
            "questions": len(questions), "questionsData": questions}


def level_for(xp: int) -> dict:
    index = 0
    for i, (threshold, _) in enumerate(LEVELS):
        if xp >= threshold:
            index = i
    nxt = LEVELS[index + 1] if index + 1 < len(LEVELS) else None
    return {
        "level":     index + 1,
        "title":     LEVELS[index][1],
        "nextLevel": nxt[1] if nxt else None,
        "xpToNext":  nxt[0] - xp if nxt else 0,
    }


def modules_for(level: str) -> list[dict]:
    """Modules for one difficulty level, or every module for "all". Unknown levels are empty."""
    if level == "all":
        return all_modules()
    return list(LEARNING_MODULES.get(level, []))


def dynamic_content(module_id: str, user_level: int) -> dict:
    """Personalised tips and exercises around a module."""
    return {
        "personalizedTips": [
            f"Based on your level {user_level}, focus on practical applications of {module_id}",
            "Try the interactive simulation to reinforce your learning",
            "Connect this knowledge to your previous completed modules",
        ],
        "recommendedNext": LEARNING_MODULES["intermediate"][:2],
        "practicalExercises": [
            {
                "title":         "Analyze Real Farm Data",
                "description":   "Use actual NASA satellite data to assess a farm in Iowa",
                "estimatedTime": "15 min",
                "difficulty":    "guided" if user_level <= 2 else "independent",
            },
        ],
    }
