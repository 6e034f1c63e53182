"""
app/main.py  ── NASA Farm Navigators API
Startup: launches the hourly session sweep.
Data routes read through per-router TTL caches; NASA upstreams are only
called when ENABLE_REAL_NASA_DATA is on.
"""

import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core import deps
from app.core.cache import TTLCache
from app.core.config import API_PREFIX, CORS_ORIGINS, ENABLE_REAL_NASA_DATA, LOG_LEVEL
from app.core.errors import register_error_handlers
from app.core.http_client import close_all
from app.core.scheduler import run_scheduler
from app.core.sessions import GuestSessionStore
from app.routers import data_hub, guest_session, learning_hub, nasa_data

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
log = logging.getLogger("main")

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    log.info(f"🚀 NASA Farm Navigators API v{VERSION} starting (real NASA data: {ENABLE_REAL_NASA_DATA})")
    sweeper = asyncio.create_task(run_scheduler())
    yield
    log.info("🛑 Shutting down...")
    sweeper.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await sweeper
    await close_all()


app = FastAPI(
    title="NASA Farm Navigators API",
    description=(
        "Cache-first agricultural data backend. "
        "Sources: NASA POWER (daily agro-meteorology), NASA Earth/APOD/TechTransfer, "
        "simulated SRTM terrain and synthetic fallbacks. "
        "Also serves the learning hub and guest sessions."
    ),
    version=VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["GET", "POST", "DELETE"],
    allow_headers=["*"],
)

register_error_handlers(app)

# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(data_hub.router)
app.include_router(nasa_data.router)
app.include_router(learning_hub.router)
app.include_router(guest_session.router)


@app.get("/", tags=["meta"])
async def root():
    return {
        "status":  "online",
        "version": VERSION,
        "realNasaData": ENABLE_REAL_NASA_DATA,
        "endpoints": {
            "data_hub":      f"{API_PREFIX}/data-hub?action=farm-overview|crop-database|farming-scenarios|"
                             "educational-content|market-data|nasa-live-data|weather-forecast|cache-stats",
            "nasa_data":     f"{API_PREFIX}/nasa-data?action=test-connection|scenarios|farm-data|terrain|"
                             "weather|soil-analysis|crop-health|earth|elevation|terrain-3d|cache-stats|clear-cache",
            "learning_hub":  f"{API_PREFIX}/learning-hub?action=modules|progress|module-content|assessments|"
                             "achievement-unlock|leaderboard",
            "guest_session": f"{API_PREFIX}/guest-session?action=create-session|get-session|session-stats|"
                             "popular-content",
            "health":        "/health",
            "docs":          "/docs",
        },
    }


@app.get("/health", tags=["meta"])
async def health(
    data_hub_cache: TTLCache          = Depends(deps.get_data_hub_cache),
    nasa_cache:     TTLCache          = Depends(deps.get_nasa_cache),
    learning_cache: TTLCache          = Depends(deps.get_learning_cache),
    sessions:       GuestSessionStore = Depends(deps.get_session_store),
):
    """Lightweight health check: cache sizes and live guest sessions."""
    caches = {c.name: c for c in (data_hub_cache, nasa_cache, learning_cache)}
    return {
        "status":       "healthy",
        "realNasaData": ENABLE_REAL_NASA_DATA,
        "caches": {
            name: {
                "entries":   len(c),
                "hitRate":   c.stats()["hitRate"],
                "cacheKeys": c.summary(),
            }
            for name, c in caches.items()
        },
        "sessions": {"active": len(sessions)},
    }
