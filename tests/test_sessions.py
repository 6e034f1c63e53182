import re

import pytest

from app.core.errors import BadRequestError, NotFoundError, SessionError
from app.core.sessions import GuestSessionStore, new_session_id

FOUR_HOURS = 4 * 60 * 60


@pytest.fixture
def store(clock):
    return GuestSessionStore(clock=clock)


def test_session_id_format():
    sid = new_session_id(1_700_000_000.5)
    assert re.fullmatch(r"guest_1700000000500_[a-z0-9]{9}", sid)


def test_create_uses_defaults_and_name(store, clock):
    created = store.create("Ada")
    profile = created["profile"]
    assert profile["name"] == "Ada"
    assert profile["sessionId"] == created["sessionId"]
    assert profile["xp"] == 0
    assert profile["preferences"]["theme"] == "dark"
    assert profile["farmData"]["selectedLocation"]["name"] == "Demo Farm"
    assert created["expiresAt"].startswith("2023-11-15")


def test_default_guest_name(store):
    assert store.create()["profile"]["name"] == "Guest Farmer"


def test_profiles_do_not_share_mutable_defaults(store):
    a = store.create()["sessionId"]
    b = store.create()["sessionId"]
    store.update_progress(a, module_id="intro-nasa-data")
    assert store.get(b)["progress"]["completedModules"] == []


def test_validity_boundary(store, clock):
    sid = store.create()["sessionId"]
    clock.advance(FOUR_HOURS - 1)
    assert store.is_valid(sid)
    store.get(sid)

    clock.advance(2)
    assert not store.is_valid(sid)
    with pytest.raises(SessionError):
        store.get(sid)


def test_expired_session_rejects_mutations(store, clock):
    sid = store.create()["sessionId"]
    clock.advance(FOUR_HOURS + 1)
    with pytest.raises(SessionError):
        store.update_preferences(sid, {"theme": "light"})
    with pytest.raises(SessionError):
        store.track_interaction(sid, "/farm", "click")


def test_missing_id_is_bad_request(store):
    with pytest.raises(BadRequestError):
        store.get(None)


def test_unknown_id_is_session_error(store):
    with pytest.raises(SessionError):
        store.get("guest_1_abcdefghi")


def test_get_records_session_check(store):
    sid = store.create()["sessionId"]
    profile = store.get(sid)
    assert profile["session"]["interactionCount"] == 1
    assert profile["session"]["pageViews"][-1]["page"] == "session-check"


def test_extend_restarts_window(store, clock):
    sid = store.create()["sessionId"]
    clock.advance(FOUR_HOURS - 10)
    store.extend(sid)
    clock.advance(FOUR_HOURS - 10)
    assert store.is_valid(sid)
    assert store.time_remaining(sid) == pytest.approx(10)


def test_update_progress_dedupes_modules(store):
    sid = store.create()["sessionId"]
    store.update_progress(sid, module_id="intro-nasa-data", xp_gained=100)
    result = store.update_progress(sid, module_id="intro-nasa-data", xp_gained=50, achievement="first-steps")
    profile = store.get(sid)
    assert profile["progress"]["completedModules"] == ["intro-nasa-data"]
    assert result["newXP"] == 150
    assert [a["id"] for a in result["newAchievements"]] == ["first-steps"]


def test_update_preferences_merges(store):
    sid = store.create()["sessionId"]
    prefs = store.update_preferences(sid, {"theme": "light"})
    assert prefs["theme"] == "light"
    assert prefs["units"] == "metric"


def test_update_farm_location(store):
    sid = store.create()["sessionId"]
    location = store.update_farm_location(sid, 41.59, -93.62, "Iowa plot")
    assert location == {"lat": 41.59, "lng": -93.62, "name": "Iowa plot"}
    views = store.get(sid)["session"]["pageViews"]
    assert views[0]["page"] == "location-update-Iowa plot"


def test_page_view_log_is_capped(clock):
    store = GuestSessionStore(clock=clock, page_view_limit=5)
    sid = store.create()["sessionId"]
    for i in range(8):
        store.track_interaction(sid, "/farm", f"click{i}")
    session = store.get(sid)["session"]
    assert len(session["pageViews"]) == 5
    assert session["pageViews"][-1]["page"] == "session-check"
    assert session["interactionCount"] == 9
    assert len(session["interactions"]) == 8


def test_end_and_end_again(store):
    sid = store.create()["sessionId"]
    assert store.end(sid) == {"sessionEnded": True}
    with pytest.raises(NotFoundError):
        store.end(sid)


def test_cleanup_expired(store, clock):
    old = store.create()["sessionId"]
    clock.advance(FOUR_HOURS - 60)
    fresh = store.create()["sessionId"]
    clock.advance(61)
    assert store.cleanup_expired() == 1
    assert len(store) == 1
    assert store.is_valid(fresh)
    assert not store.is_valid(old)


def test_stats_engagement_buckets(store):
    counts = {"high": 21, "medium": 11, "low": 10}
    for n in counts.values():
        sid = store.create()["sessionId"]
        for _ in range(n):
            store.track_interaction(sid, "/learn", "view")
    stats = store.stats()
    assert stats["activeSessions"] == 3
    assert stats["totalInteractions"] == 42
    assert stats["userEngagement"] == {"highActivity": 1, "mediumActivity": 1, "lowActivity": 1}
