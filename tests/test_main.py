def test_index_lists_routes(client):
    body = client.get("/").json()
    assert body["status"] == "online"
    assert set(body["endpoints"]) >= {"data_hub", "nasa_data", "learning_hub", "guest_session", "health"}


def test_health_reports_caches_and_sessions(client):
    client.get("/api/data-hub", params={"action": "weather-forecast"})
    client.get("/api/guest-session", params={"action": "create-session"})

    body = client.get("/health").json()
    assert body["status"] == "healthy"
    assert body["sessions"] == {"active": 1}
    hub = body["caches"]["data-hub"]
    assert hub["entries"] == 1
    assert list(hub["cacheKeys"].values())[0]["category"] == "weather_data"
    assert body["caches"]["nasa-data"]["entries"] == 0


def test_unhandled_route_is_404(client):
    assert client.get("/api/nowhere").status_code == 404
