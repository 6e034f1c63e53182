import httpx
import pytest
from fastapi.testclient import TestClient

from app.core import deps
from app.core.cache import TTLCache
from app.core.progress import LearningProgressStore
from app.core.sessions import GuestSessionStore
from app.main import app
from app.sources.nasa import NasaClient


class FakeClock:
    """Manually advanced wall clock (epoch seconds)."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def mock_nasa_client(handler, real_data: bool = True, api_key: str = "test-key") -> NasaClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return NasaClient(api_key=api_key, real_data=real_data, http=http, power=http)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def stores(clock):
    return {
        "data_hub": TTLCache("data-hub", clock=clock),
        "nasa":     TTLCache("nasa-data", clock=clock),
        "learning": TTLCache("learning-hub", clock=clock),
        "sessions": GuestSessionStore(clock=clock),
        "progress": LearningProgressStore(),
        "client":   NasaClient(api_key="", real_data=False),
    }


@pytest.fixture
def client(stores):
    app.dependency_overrides = {
        deps.get_data_hub_cache: lambda: stores["data_hub"],
        deps.get_nasa_cache:     lambda: stores["nasa"],
        deps.get_learning_cache: lambda: stores["learning"],
        deps.get_session_store:  lambda: stores["sessions"],
        deps.get_progress_store: lambda: stores["progress"],
        deps.get_nasa_client:    lambda: stores["client"],
    }
    # No context manager: the lifespan (session sweeper) stays off in tests
    yield TestClient(app)
    app.dependency_overrides = {}


@pytest.fixture
def nasa_mock():
    """Factory: NasaClient wired to an httpx.MockTransport handler."""
    return mock_nasa_client
