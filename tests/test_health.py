from fastapi import status


def test_health_check(client):
    """Test the /health endpoint returns 200 and up status."""
    response = client.get("/health")
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["status"] == "up"
    assert data["environment"] == "testing"
    assert "version" in data
    assert "timestamp" in data

def test_readiness_check(client):
    """Test the /readiness endpoint returns 200 and database status."""
    response = client.get("/readiness")
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["status"] == "ready"
    assert data["components"]["database"] == "connected"

def test_root_endpoint(client):
    """Test the API root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    assert "HR Attendance API" in response.json()["message"]

def test_request_id_is_echoed(client):
    response = client.get("/health", headers={"X-Request-ID": "trace-123"})
    assert response.headers["X-Request-ID"] == "trace-123"
    assert "X-Process-Time" in response.headers

def test_unknown_route_uses_error_envelope(client):
    response = client.get("/api/does-not-exist")
    assert response.status_code == 404
    assert response.json()["success"] is False
