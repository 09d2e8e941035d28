"""Metrics middleware and inspection endpoint tests."""


def test_lifespan_starts_and_stops_registry(config, registry):
    from fastapi.testclient import TestClient
    from pizza_metrics.api.server import create_app

    app = create_app(config=config, registry=registry)
    with TestClient(app):
        assert registry.state == "running"
        assert registry.system.running is True
    assert registry.state == "stopped"
    assert registry.system.running is False


def test_middleware_counts_requests_by_method(client, registry):
    client.get("/")
    client.get("/")
    client.put("/api/chaos/false")
    client.post("/")  # 405, still counted

    assert registry.http.count("GET") == 2
    assert registry.http.count("PUT") == 1
    assert registry.http.count("POST") == 1
    assert registry.http.total == 4


def test_metrics_status(client, registry):
    registry.auth.on_auth_success()
    registry.purchases.on_order_created([{"price": 0.05}])

    response = client.get("/api/metrics")
    assert response.status_code == 200
    data = response.json()
    assert data["source"] == "jwt-pizza-service-test"
    assert data["reporter"]["state"] == "running"
    assert data["reporter"]["reporting"] is False
    assert data["collectors"]["auth"] == {"successes": 1, "failures": 0}
    assert data["collectors"]["purchases"]["purchases"] == 1
    assert data["collectors"]["http"]["get"] == 1
    assert data["collectors"]["chaos"] == {"enabled": False}


def test_metrics_snapshot_is_line_protocol(client):
    response = client.get("/api/metrics/snapshot")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    lines = response.text.split("\n")
    assert "http_requests,source=jwt-pizza-service-test,method=get total=1" in lines
    assert lines[-1] == "chaos,source=jwt-pizza-service-test enabled=0"
