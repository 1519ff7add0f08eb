import pytest

from siteflow.constants import HttpHeaders


@pytest.mark.unit
def test_request_id_is_generated_when_missing(client) -> None:
    response = client.get("/health/ping")

    request_id = response.headers.get(HttpHeaders.X_REQUEST_ID)
    assert request_id is not None
    assert request_id.startswith("req_")


@pytest.mark.unit
def test_valid_incoming_request_id_is_echoed(client) -> None:
    response = client.get("/health/ping", headers={HttpHeaders.X_REQUEST_ID: "trace-123"})

    assert response.headers.get(HttpHeaders.X_REQUEST_ID) == "trace-123"


@pytest.mark.unit
@pytest.mark.parametrize("incoming", ["bad id with spaces", "x" * 200, "-leading-dash"])
def test_invalid_incoming_request_id_is_replaced(client, incoming: str) -> None:
    response = client.get("/health/ping", headers={HttpHeaders.X_REQUEST_ID: incoming})

    request_id = response.headers.get(HttpHeaders.X_REQUEST_ID)
    assert request_id != incoming
    assert request_id.startswith("req_")
