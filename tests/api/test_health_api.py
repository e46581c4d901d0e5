"""Health check endpoint tests"""

from fastapi.testclient import TestClient


def test_health_check(client: TestClient):
    """Test basic health check endpoint."""
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["service"] == "geo-resolver-api"


def test_readiness_lists_provider_chain(client: TestClient):
    """Test readiness check endpoint."""
    response = client.get("/readyz")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ready"
    assert [provider["source"] for provider in body["providers"]] == ["primary", "secondary", "mathematical"]
    assert all(provider["eligible"] for provider in body["providers"])


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint."""
    client.post("/geocoding", json={"address": "Bangkok"})
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "text/plain" in response.headers["content-type"]
    assert "provider_attempts_total" in response.text


def test_metrics_endpoint_requires_auth(client: TestClient):
    """Test that metrics endpoint requires a valid API key."""
    response = client.get("/metrics", headers={"X-API-Key": "wrong-key"})
    assert response.status_code == 401


def test_response_headers(client: TestClient):
    response = client.get("/healthz")
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Run-ID"]
