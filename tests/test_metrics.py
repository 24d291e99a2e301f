import pytest
from fastapi.testclient import TestClient

from src.api.routes import create_app
from src.core.config import get_api_token
from src.core.metrics import UNMATCHED_ROUTE, MetricsCollector, RouteStat


def test_metrics_http_and_events():
    with TestClient(create_app()) as client:
        r = client.get("/")
        assert r.status_code == 200
        client.post("/gmod/update", json={"hostname": "h"}, headers={"Authorization": f"Bearer {get_api_token()}"})
        client.get("/gmod/player/unknown")

        r = client.get("/metrics")
        assert r.status_code == 200
        snap = r.json()
        assert snap["http"]["total_count"] >= 3
        by_route = snap["http"]["by_route"]
        assert "POST:/gmod/update" in by_route
        assert by_route["GET:/gmod/player/{player_id}"]["status_counts"].get("404", 0) >= 1
        assert snap["events"].get("status.updates", 0) >= 1
        assert snap["events"].get("player.not_found", 0) >= 1


def test_collector_counts_events_and_routes():
    m = MetricsCollector()
    m.increment_event("status.updates")
    m.increment_event("status.updates", 2)
    m.increment_event("")
    m.record_http("get", "/gmod/status", 200, 0.01)
    m.record_http("GET", "/gmod/status", 200, 0.03)
    snap = m.snapshot()
    assert snap["events"] == {"status.updates": 3}
    route = snap["http"]["by_route"]["GET:/gmod/status"]
    assert route["count"] == 2
    assert route["status_counts"] == {"200": 2}
    assert route["max_ms"] == pytest.approx(30.0)


def test_unknown_paths_share_one_route_entry():
    with TestClient(create_app()) as client:
        before = set(client.get("/metrics").json()["http"]["by_route"])
        for i in range(50):
            assert client.get(f"/random/{i}").status_code == 404
        by_route = client.get("/metrics").json()["http"]["by_route"]
    assert set(by_route) - before <= {f"GET:{UNMATCHED_ROUTE}", "GET:/metrics"}
    assert not any(key.startswith("GET:/random") for key in by_route)
    assert by_route[f"GET:{UNMATCHED_ROUTE}"]["status_counts"]["404"] >= 50


def test_collector_bounds_routes_and_methods():
    m = MetricsCollector()
    for i in range(100):
        m.record_http("GET", "", 404, 0.001)
        m.record_http(f"VERB{i}", "/gmod/status", 405, 0.001)
    by_route = m.snapshot()["http"]["by_route"]
    assert set(by_route) == {f"GET:{UNMATCHED_ROUTE}", "OTHER:/gmod/status"}
    assert by_route["OTHER:/gmod/status"]["count"] == 100


def test_route_stat_tracks_statuses():
    s = RouteStat()
    assert s.as_dict()["avg_ms"] == 0.0
    s.add(200, 0.002)
    s.add(404, 0.004)
    d = s.as_dict()
    assert d["count"] == 2
    assert d["status_counts"] == {"200": 1, "404": 1}
    assert d["avg_ms"] == pytest.approx(3.0)
    assert d["last_ms"] == pytest.approx(4.0)
