"""
app/routers/guest_session.py
Endpoints (all under /api/guest-session, selected by ?action=):
  GET    create-session        → ?name= new guest, returns id + expiry
  GET    get-session           → ?sessionId= profile + timeRemaining (ms)
  GET    session-stats         → active sessions, engagement buckets
  GET    popular-content       → showcase analytics
  POST   update-preferences    → body {preferences}
  POST   update-progress       → body {moduleId?, xpGained?, achievement?}
  POST   update-farm-location  → body {lat, lng, name?}
  POST   track-interaction     → body {page, action, data?}
  POST   extend-session        → restarts the 4 h window
  POST   analytics-event       → body {event, page?, data?}; no session needed
  DELETE end-session           → ?sessionId= (404 if unknown)
  DELETE cleanup-sessions      → sweep expired sessions now

Missing sessionId → 400. Unknown or expired session → 401.
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query

from app.core.config import API_PREFIX
from app.core.content import POPULAR_CONTENT
from app.core.deps import get_session_store
from app.core.errors import BadRequestError
from app.core.sessions import GuestSessionStore
from app.models.bodies import (
    AnalyticsEvent,
    FarmLocationUpdate,
    InteractionEvent,
    PreferencesUpdate,
    SessionProgressUpdate,
)

router = APIRouter(prefix=API_PREFIX + "/guest-session", tags=["guest-session"])
log = logging.getLogger("guest_session")

# Showcase figures; there is no analytics backend
AVERAGE_SESSION_TIME = "42 minutes"
POPULAR_PAGES = [
    {"page": "/farm",      "visits": 1247},
    {"page": "/learn",     "visits": 892},
    {"page": "/nasa-demo", "visits": 634},
]


@router.get("")
async def guest_session_get(
    action:     Optional[str]     = Query(None),
    session_id: Optional[str]     = Query(None, alias="sessionId"),
    name:       Optional[str]     = Query(None, max_length=80),
    store:      GuestSessionStore = Depends(get_session_store),
):
    log.info(f"Guest Session API: {action}")

    if action == "create-session":
        return {"success": True, "data": store.create(name)}

    if action == "get-session":
        profile = store.get(session_id)
        return {
            "success": True,
            "data":    profile,
            "meta": {
                "timeRemaining": int(store.time_remaining(session_id) * 1000),
                "totalSessions": len(store),
            },
        }

    if action == "session-stats":
        stats = store.stats()
        stats["averageSessionTime"] = AVERAGE_SESSION_TIME
        stats["popularPages"] = POPULAR_PAGES
        return {"success": True, "data": stats}

    if action == "popular-content":
        return {"success": True, "data": POPULAR_CONTENT}

    raise BadRequestError("Invalid action")


@router.post("")
async def guest_session_post(
    action:     Optional[str]            = Query(None),
    session_id: Optional[str]            = Query(None, alias="sessionId"),
    payload:    Optional[dict[str, Any]] = Body(None),
    store:      GuestSessionStore        = Depends(get_session_store),
):
    payload = payload or {}

    if action == "analytics-event":
        event = AnalyticsEvent.model_validate(payload)
        log.info(f"Analytics Event: {event.event} on {event.page}")
        return {"success": True, "data": {"eventTracked": True}}

    if action == "update-preferences":
        body = PreferencesUpdate.model_validate(payload)
        updated = store.update_preferences(session_id, body.preferences)
        return {"success": True, "data": {"updatedPreferences": updated}}

    if action == "update-progress":
        body = SessionProgressUpdate.model_validate(payload)
        result = store.update_progress(session_id, body.module_id, body.xp_gained, body.achievement)
        return {"success": True, "data": result}

    if action == "update-farm-location":
        body = FarmLocationUpdate.model_validate(payload)
        location = store.update_farm_location(session_id, body.lat, body.lng, body.name)
        return {"success": True, "data": {"updatedLocation": location}}

    if action == "track-interaction":
        body = InteractionEvent.model_validate(payload)
        return {"success": True, "data": store.track_interaction(session_id, body.page, body.action, body.data)}

    if action == "extend-session":
        return {"success": True, "data": store.extend(session_id)}

    raise BadRequestError("Invalid POST action")


@router.delete("")
async def guest_session_delete(
    action:     Optional[str]     = Query(None),
    session_id: Optional[str]     = Query(None, alias="sessionId"),
    store:      GuestSessionStore = Depends(get_session_store),
):
    if action == "end-session":
        return {"success": True, "data": store.end(session_id)}

    if action == "cleanup-sessions":
        removed = store.cleanup_expired()
        return {
            "success": True,
            "data": {
                "removedSessions":   removed,
                "remainingSessions": len(store),
                "cleanupCompleted":  True,
            },
        }

    raise BadRequestError("Invalid DELETE action")
