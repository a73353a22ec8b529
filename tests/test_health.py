from fastapi import status


def test_health_check(client):
    """Test the /health endpoint returns 200 and up status."""
    response = client.get("/health")
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["status"] == "up"
    assert "version" in data
    assert "timestamp" in data
    assert response.headers["X-Request-ID"]
    assert "X-Process-Time" in response.headers


def test_request_id_is_echoed(client):
    response = client.get("/liveness", headers={"X-Request-ID": "trace-123"})
    assert response.status_code == status.HTTP_200_OK
    assert response.headers["X-Request-ID"] == "trace-123"


def test_readiness_check(client):
    """Test the /readiness endpoint reports the record store."""
    response = client.get("/readiness")
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["status"] == "ready"
    assert data["components"]["storage"] == "memory"


def test_readiness_fails_when_store_is_down(client, monkeypatch):
    monkeypatch.setattr(client.app.state.storage, "healthcheck", lambda: False)
    response = client.get("/readiness")
    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
    assert response.json()["message"] == "Service not ready"


def test_root_endpoint(client):
    """Test the API root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    assert "Assessment Hub API" in response.json()["message"]


def test_unknown_route_returns_json_message(client):
    response = client.get("/api/does-not-exist")
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert "message" in response.json()
