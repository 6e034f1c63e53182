import httpx
import pytest

URL = "/api/nasa-data"

POWER_BODY = {
    "properties": {
        "parameter": {
            "T2M":               {"20241001": 21.5, "20241002": 36.0},
            "PRECTOTCORR":       {"20241001": 3.0,  "20241002": 0.1},
            "RH2M":              {"20241001": 55.0, "20241002": 30.0},
            "WS2M":              {"20241001": 3.1,  "20241002": 2.2},
            "ALLSKY_SFC_SW_DWN": {"20241001": 480,  "20241002": 510},
            "GWETROOT":          {"20241001": 0.35, "20241002": 0.18},
            "GWETTOP":           {"20241001": 0.30, "20241002": 0.12},
        },
    },
}


def _power_only(request):
    if "power" in request.url.host:
        return httpx.Response(200, json=POWER_BODY)
    return httpx.Response(503)


def test_test_connection_without_key(client):
    body = client.get(URL, params={"action": "test-connection"}).json()
    assert body["success"] is False
    assert "not configured" in body["data"]["message"]


def test_scenarios(client):
    data = client.get(URL, params={"action": "scenarios"}).json()["data"]
    assert {s["id"] for s in data["scenarios"]} == {
        "drought-management", "crop-health-monitoring", "precision-agriculture",
    }
    assert data["datasets"]["SMAP_L4"] == "SPL4SMGP.007"


def test_power_views_share_one_upstream_fetch(client, stores, nasa_mock):
    calls = []

    def handler(request):
        calls.append(request.url.host)
        return _power_only(request)

    stores["client"] = nasa_mock(handler)
    weather = client.get(URL, params={"action": "weather", "lat": 41.5, "lng": -93.6}).json()
    soil = client.get(URL, params={"action": "soil-analysis", "lat": 41.5, "lng": -93.6}).json()
    crop = client.get(URL, params={"action": "crop-health", "lat": 41.5, "lng": -93.6}).json()

    assert len(calls) == 1
    assert weather["source"] == "nasa"
    assert soil["source"] == crop["source"] == "cache"

    assert weather["data"]["summary"]["temperature"] == 36.0
    assert weather["data"]["location"] == {"lat": 41.5, "lng": -93.6}
    assert soil["data"]["layers"][1]["value"] == 0.18
    assert soil["data"]["status"] == "adequate"
    assert crop["data"]["heatStress"] is True
    assert stores["nasa"].keys() == ["power-41.5--93.6"]


def test_weather_falls_back_when_power_fails(client, stores, nasa_mock):
    stores["client"] = nasa_mock(lambda r: httpx.Response(500))
    resp = client.get(URL, params={"action": "weather", "lat": 1, "lng": 2})
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is False
    assert body["fallback"] is True
    assert len(body["data"]["recent"]) == 7
    assert len(stores["nasa"]) == 0


def test_farm_data_per_scenario(client, stores):
    body = client.get(URL, params={"action": "farm-data", "lat": 1, "lng": 2,
                                   "scenario": "drought-management"}).json()
    assert body["data"]["scenario"] == "drought-management"
    client.get(URL, params={"action": "farm-data", "lat": 1, "lng": 2})
    assert sorted(stores["nasa"].keys()) == [
        "nasa-farm-1.0-2.0-default",
        "nasa-farm-1.0-2.0-drought-management",
    ]


def test_earth_imagery_key_and_fallback(client, stores, nasa_mock):
    stores["client"] = nasa_mock(_power_only)
    body = client.get(URL, params={"action": "earth", "lat": 1, "lng": 2, "date": "2024-10-01"}).json()
    assert body["fallback"] is True
    assert body["data"]["imageUrl"] == "/placeholder.jpg"

    stores["client"] = nasa_mock(lambda r: httpx.Response(200, json={"id": "LC08", "url": "https://img"}))
    body = client.get(URL, params={"action": "earth", "lat": 1, "lng": 2, "date": "2024-10-01"}).json()
    assert body["success"] is True
    assert body["data"]["imageUrl"] == "https://img"
    assert "earth-imagery-1.0-2.0-2024-10-01" in stores["nasa"].keys()


def test_elevation_is_cached_for_four_hours(client, clock):
    first = client.get(URL, params={"action": "elevation", "lat": 1, "lng": 2}).json()
    grid = first["data"]["elevationGrid"]
    assert len(grid) == 32 and len(grid[0]) == 32
    assert first["cache"]["ttl"] == 4 * 3600

    clock.advance(4 * 3600 - 1)
    again = client.get(URL, params={"action": "elevation", "lat": 1, "lng": 2}).json()
    assert again["source"] == "cache"
    assert again["data"]["elevationGrid"] == grid

    clock.advance(2)
    fresh = client.get(URL, params={"action": "elevation", "lat": 1, "lng": 2}).json()
    assert fresh["source"] == "synthetic"


def test_terrain_summary(client):
    data = client.get(URL, params={"action": "terrain", "lat": 41.5, "lng": -93.6}).json()["data"]
    assert data["recommendedCrops"] == ["corn", "soybeans", "wheat"]
    assert data["stats"]["terrainClass"] in {"flat", "rolling", "hilly"}
    assert data["bounds"]["north"] == pytest.approx(41.51)


def test_terrain_3d_combines_layers(client, stores):
    body = client.get(URL, params={"action": "terrain-3d", "lat": 25, "lng": 80}).json()
    assert body["success"] is True
    assert body["data"]["recommendedCrops"] == ["cotton", "rice", "sugarcane"]
    assert body["data"]["imagery"]["imageUrl"] == "/placeholder.jpg"
    assert isinstance(body["data"]["farmableAreas"], list)
    assert {"terrain-3d-25.0-80.0", "elevation-25.0-80.0"} <= set(stores["nasa"].keys())


def test_terrain_3d_with_failed_imagery_is_not_cached(client, stores, nasa_mock):
    stores["client"] = nasa_mock(lambda r: httpx.Response(503))
    body = client.get(URL, params={"action": "terrain-3d", "lat": 25, "lng": 80}).json()
    assert body["success"] is False
    assert body["data"]["imagery"] is None
    assert "terrain-3d-25.0-80.0" not in stores["nasa"].keys()


def test_clear_cache_scoped_by_category(client, stores):
    client.get(URL, params={"action": "elevation", "lat": 1, "lng": 2})
    client.get(URL, params={"action": "weather", "lat": 1, "lng": 2})
    body = client.get(URL, params={"action": "clear-cache", "category": "elevation"}).json()
    assert body["data"]["clearedEntries"] == 1
    assert stores["nasa"].keys() == ["power-1.0-2.0"]


def test_cache_stats(client):
    client.get(URL, params={"action": "elevation"})
    stats = client.get(URL, params={"action": "cache-stats"}).json()["data"]
    assert stats["cache"] == "nasa-data"
    assert stats["categories"] == {"elevation": 1}


def test_invalid_action(client):
    resp = client.get(URL, params={"action": "warp"})
    assert resp.status_code == 400
