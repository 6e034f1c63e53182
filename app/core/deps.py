"""
app/core/deps.py
Process-wide singletons handed to the routers through FastAPI dependencies.
Tests swap them with app.dependency_overrides.
"""

from app.core.cache import TTLCache
from app.core.progress import LearningProgressStore
from app.core.sessions import GuestSessionStore
from app.sources.nasa import NasaClient

# One cache instance per router; namespaces never collide
data_hub_cache = TTLCache("data-hub")
nasa_cache     = TTLCache("nasa-data")
learning_cache = TTLCache("learning-hub")

session_store  = GuestSessionStore()
progress_store = LearningProgressStore()
nasa_client    = NasaClient()


def get_data_hub_cache() -> TTLCache:
    return data_hub_cache


def get_nasa_cache() -> TTLCache:
    return nasa_cache


def get_learning_cache() -> TTLCache:
    return learning_cache


def get_session_store() -> GuestSessionStore:
    return session_store


def get_progress_store() -> LearningProgressStore:
    return progress_store


def get_nasa_client() -> NasaClient:
    return nasa_client
