"""
Tests for health check endpoints.
"""


def test_health_check(client):
    """Test health check endpoint returns correct response."""
    response = client.get("/healthz")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["service"] == "RetentionPulse"


def test_health_check_content_type(client):
    """Test health check endpoint returns JSON."""
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/json"


def test_request_id_header(client):
    """Test every response carries a request id."""
    response = client.get("/healthz")
    assert response.headers["X-Request-ID"]


def test_detailed_health(client):
    """Test detailed health reports database status and scoring mode."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["components"]["database"] == "ok"
    assert data["scoring_mode"] == "combined"
