import pytest


@pytest.mark.unit
def test_health_ping_returns_success_envelope(client) -> None:
    response = client.get("/health/ping")

    assert response.status_code == 200
    payload = response.get_json()
    assert payload["success"] is True
    assert payload["error"] is False
    assert payload["data"]["status"] == "healthy"
    assert payload["data"]["version"] == "1.0.0"


@pytest.mark.unit
def test_unknown_route_returns_error_envelope(client) -> None:
    response = client.get("/not-a-route")

    assert response.status_code == 404
    payload = response.get_json()
    assert payload["error"] is True
    assert payload["success"] is False
