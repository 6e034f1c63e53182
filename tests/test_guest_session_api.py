import pytest

URL = "/api/guest-session"
FOUR_HOURS = 4 * 60 * 60


@pytest.fixture
def session_id(client):
    resp = client.get(URL, params={"action": "create-session", "name": "Ada"})
    assert resp.status_code == 200
    return resp.json()["data"]["sessionId"]


def test_create_and_get(client, session_id):
    body = client.get(URL, params={"action": "get-session", "sessionId": session_id}).json()
    assert body["data"]["name"] == "Ada"
    assert body["meta"]["timeRemaining"] == FOUR_HOURS * 1000
    assert body["meta"]["totalSessions"] == 1


def test_get_requires_session_id(client):
    resp = client.get(URL, params={"action": "get-session"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Session ID required"


def test_expired_session_is_401(client, clock, session_id):
    clock.advance(FOUR_HOURS + 1)
    resp = client.get(URL, params={"action": "get-session", "sessionId": session_id})
    assert resp.status_code == 401
    assert resp.json() == {"success": False, "error": "Invalid or expired session"}

    resp = client.post(URL, params={"action": "update-preferences", "sessionId": session_id},
                       json={"preferences": {"theme": "light"}})
    assert resp.status_code == 401


def test_update_preferences(client, session_id):
    resp = client.post(URL, params={"action": "update-preferences", "sessionId": session_id},
                       json={"preferences": {"units": "imperial"}})
    prefs = resp.json()["data"]["updatedPreferences"]
    assert prefs["units"] == "imperial"
    assert prefs["theme"] == "dark"


def test_update_progress(client, session_id):
    params = {"action": "update-progress", "sessionId": session_id}
    client.post(URL, params=params, json={"moduleId": "intro-nasa-data", "xpGained": 100})
    data = client.post(URL, params=params, json={"moduleId": "intro-nasa-data", "achievement": "first"}).json()["data"]
    assert data["newXP"] == 100
    assert len(data["newAchievements"]) == 1


def test_update_farm_location_validates(client, session_id):
    params = {"action": "update-farm-location", "sessionId": session_id}
    ok = client.post(URL, params=params, json={"lat": 36.7, "lng": -119.4, "name": "Fresno"})
    assert ok.json()["data"]["updatedLocation"]["name"] == "Fresno"
    bad = client.post(URL, params=params, json={"lat": 95, "lng": 0})
    assert bad.status_code == 400


def test_track_interaction_and_stats(client, session_id):
    params = {"action": "track-interaction", "sessionId": session_id}
    for _ in range(3):
        resp = client.post(URL, params=params, json={"page": "/farm", "action": "plant", "data": {"crop": "corn"}})
        assert resp.json()["data"] == {"tracked": True}
    stats = client.get(URL, params={"action": "session-stats"}).json()["data"]
    assert stats["activeSessions"] == 1
    assert stats["totalInteractions"] == 3
    assert stats["userEngagement"]["lowActivity"] == 1


def test_extend_session(client, clock, session_id):
    clock.advance(FOUR_HOURS - 60)
    resp = client.post(URL, params={"action": "extend-session", "sessionId": session_id})
    assert resp.json()["data"]["extended"] is True
    clock.advance(FOUR_HOURS - 60)
    assert client.get(URL, params={"action": "get-session", "sessionId": session_id}).status_code == 200


def test_analytics_event_needs_no_session(client):
    resp = client.post(URL, params={"action": "analytics-event"}, json={"event": "page_view", "page": "/learn"})
    assert resp.json()["data"] == {"eventTracked": True}


def test_post_without_session_id(client):
    resp = client.post(URL, params={"action": "extend-session"})
    assert resp.status_code == 400


def test_popular_content(client):
    data = client.get(URL, params={"action": "popular-content"}).json()["data"]
    assert data["mostViewedPages"][0]["path"] == "/farm"


def test_end_session(client, session_id):
    resp = client.delete(URL, params={"action": "end-session", "sessionId": session_id})
    assert resp.json()["data"] == {"sessionEnded": True}
    again = client.delete(URL, params={"action": "end-session", "sessionId": session_id})
    assert again.status_code == 404


def test_cleanup_sessions(client, clock, session_id):
    clock.advance(FOUR_HOURS + 1)
    client.get(URL, params={"action": "create-session"})
    data = client.delete(URL, params={"action": "cleanup-sessions"}).json()["data"]
    assert data["removedSessions"] == 1
    assert data["remainingSessions"] == 1


def test_invalid_actions(client):
    assert client.get(URL, params={"action": "x"}).status_code == 400
    assert client.post(URL, params={"action": "x"}, json={}).status_code == 400
    assert client.delete(URL, params={"action": "x"}).status_code == 400
