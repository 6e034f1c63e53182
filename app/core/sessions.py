"""
app/core/sessions.py
═══════════════════════════════════════════════════════════════════════════════
In-memory guest sessions.

  • id format           → guest_{epoch_ms}_{9 random base-36 chars}
  • lifetime            → valid while now - startTime < SESSION_DURATION_S
  • every read/mutation re-validates; expired sessions answer 401
  • extend()            → resets startTime (sliding renewal on request)
  • cleanup_expired()   → bulk sweep, driven hourly by app.core.scheduler
Nothing is persisted; a restart forgets every guest.
═══════════════════════════════════════════════════════════════════════════════
"""

import copy
import logging
import random
import string
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from app.core.config import (
    DEFAULT_LAT,
    DEFAULT_LNG,
    SESSION_DURATION_S,
    SESSION_PAGE_VIEW_LIMIT,
    utc_iso,
)
from app.core.errors import BadRequestError, NotFoundError, SessionError

log = logging.getLogger("sessions")

_ID_ALPHABET = string.ascii_lowercase + string.digits

DEFAULT_GUEST_NAME = "Guest Farmer"

DEFAULT_PROFILE: dict = {
    "level": 1,
    "xp":    0,
    "preferences": {
        "theme":         "dark",
        "units":         "metric",
        "language":      "en",
        "notifications": True,
        "autoSave":      True,
    },
    "progress": {
        "completedModules": [],
        "currentModule":    None,
        "achievements":     [],
        "streakDays":       0,
        "totalStudyTime":   0,
    },
    "farmData": {
        "selectedLocation":  {"lat": DEFAULT_LAT, "lng": DEFAULT_LNG, "name": "Demo Farm"},
        "preferredCrops":    ["corn", "soybeans"],
        "farmingExperience": "beginner",
        "interests":         ["sustainable-farming", "precision-agriculture"],
    },
}


def new_session_id(now: float, rng: Optional[random.Random] = None) -> str:
    rng = rng or random.Random()
    suffix = "".join(rng.choice(_ID_ALPHABET) for _ in range(9))
    return f"guest_{int(now * 1000)}_{suffix}"


@dataclass
class GuestSession:
    session_id: str
    started_at: float
    profile:    dict = field(default_factory=dict)

    def expires_at(self, duration: float) -> float:
        return self.started_at + duration

    def is_valid(self, now: float, duration: float) -> bool:
        return now - self.started_at < duration


class GuestSessionStore:
    def __init__(
        self,
        duration: float = SESSION_DURATION_S,
        clock: Callable[[], float] = time.time,
        page_view_limit: int = SESSION_PAGE_VIEW_LIMIT,
    ):
        self.duration        = duration
        self.page_view_limit = page_view_limit
        self._clock          = clock
        self._sessions: dict[str, GuestSession] = {}
        self._lock           = threading.Lock()

    def __len__(self) -> int:
        return len(self._sessions)

    # ── Internals (caller holds the lock) ─────────────────────────────────────

    def _valid(self, session_id: Optional[str]) -> GuestSession:
        if not session_id:
            raise BadRequestError("Session ID required")
        session = self._sessions.get(session_id)
        if session is None or not session.is_valid(self._clock(), self.duration):
            raise SessionError()
        return session

    def _touch(self, session: GuestSession, activity: Optional[str] = None) -> None:
        now_iso = utc_iso(self._clock())
        meta = session.profile["session"]
        meta["lastActivity"] = now_iso
        if activity is None:
            return
        meta["interactionCount"] += 1
        meta["pageViews"].append({"page": activity, "timestamp": now_iso})
        overflow = len(meta["pageViews"]) - self.page_view_limit
        if overflow > 0:
            del meta["pageViews"][:overflow]

    # ── Lifecycle ─────────────────────────────────────────────────────────────

    def create(self, name: Optional[str] = None) -> dict:
        now = self._clock()
        session_id = new_session_id(now)
        now_iso = utc_iso(now)
        profile = copy.deepcopy(DEFAULT_PROFILE)
        profile["progress"]["lastActive"] = now_iso
        profile.update({
            "sessionId": session_id,
            "name":      name or DEFAULT_GUEST_NAME,
            "session": {
                "startTime":        now_iso,
                "lastActivity":     now_iso,
                "pageViews":        [],
                "interactionCount": 0,
                "interactions":     [],
            },
        })
        session = GuestSession(session_id, now, profile)
        with self._lock:
            self._sessions[session_id] = session
        log.info(f"Created guest session {session_id}")
        return {
            "sessionId": session_id,
            "profile":   copy.deepcopy(profile),
            "expiresAt": utc_iso(session.expires_at(self.duration)),
        }

    def get(self, session_id: Optional[str]) -> dict:
        """Profile snapshot; counts as a `session-check` page view."""
        with self._lock:
            session = self._valid(session_id)
            self._touch(session, "session-check")
            return copy.deepcopy(session.profile)

    def is_valid(self, session_id: Optional[str]) -> bool:
        with self._lock:
            session = self._sessions.get(session_id or "")
            return session is not None and session.is_valid(self._clock(), self.duration)

    def time_remaining(self, session_id: Optional[str]) -> float:
        """Seconds until expiry."""
        with self._lock:
            session = self._valid(session_id)
            return session.expires_at(self.duration) - self._clock()

    def extend(self, session_id: Optional[str]) -> dict:
        with self._lock:
            session = self._valid(session_id)
            now = self._clock()
            session.started_at = now
            session.profile["session"]["startTime"] = utc_iso(now)
            self._touch(session)
            return {"extended": True, "newExpiresAt": utc_iso(session.expires_at(self.duration))}

    def end(self, session_id: Optional[str]) -> dict:
        with self._lock:
            if not session_id or self._sessions.pop(session_id, None) is None:
                raise NotFoundError("Session not found")
        log.info(f"Ended guest session {session_id}")
        return {"sessionEnded": True}

    def cleanup_expired(self) -> int:
        now = self._clock()
        with self._lock:
            dead = [sid for sid, s in self._sessions.items() if not s.is_valid(now, self.duration)]
            for sid in dead:
                del self._sessions[sid]
        for sid in dead:
            log.info(f"Cleaned expired session: {sid}")
        return len(dead)

    # ── Mutations ─────────────────────────────────────────────────────────────

    def update_preferences(self, session_id: Optional[str], preferences: dict) -> dict:
        with self._lock:
            session = self._valid(session_id)
            session.profile["preferences"].update(preferences or {})
            self._touch(session)
            return dict(session.profile["preferences"])

    def update_progress(
        self,
        session_id: Optional[str],
        module_id: Optional[str] = None,
        xp_gained: int = 0,
        achievement: Optional[str] = None,
    ) -> dict:
        with self._lock:
            session = self._valid(session_id)
            profile = session.profile
            progress = profile["progress"]
            if module_id and module_id not in progress["completedModules"]:
                progress["completedModules"].append(module_id)
            if xp_gained:
                profile["xp"] += xp_gained
            if achievement:
                progress["achievements"].append(
                    {"id": achievement, "unlockedAt": utc_iso(self._clock())}
                )
            progress["lastActive"] = utc_iso(self._clock())
            self._touch(session)
            return {
                "newXP":           profile["xp"],
                "newAchievements": copy.deepcopy(progress["achievements"]),
            }

    def update_farm_location(self, session_id: Optional[str], lat: float, lng: float,
                             name: Optional[str] = None) -> dict:
        with self._lock:
            session = self._valid(session_id)
            location = {"lat": lat, "lng": lng, "name": name}
            session.profile["farmData"]["selectedLocation"] = location
            self._touch(session, f"location-update-{name}")
            return dict(location)

    def track_interaction(self, session_id: Optional[str], page: str, action: str,
                          data: Any = None) -> dict:
        with self._lock:
            session = self._valid(session_id)
            self._touch(session, f"{page}-{action}")
            session.profile["session"]["interactions"].append({
                "page":      page,
                "action":    action,
                "data":      data,
                "timestamp": utc_iso(self._clock()),
            })
            return {"tracked": True}

    # ── Introspection ─────────────────────────────────────────────────────────

    def stats(self) -> dict:
        with self._lock:
            counts = [s.profile["session"]["interactionCount"] for s in self._sessions.values()]
        return {
            "activeSessions":    len(counts),
            "totalInteractions": sum(counts),
            "userEngagement": {
                "highActivity":   sum(1 for c in counts if c > 20),
                "mediumActivity": sum(1 for c in counts if 10 < c <= 20),
                "lowActivity":    sum(1 for c in counts if c <= 10),
            },
        }
