from unittest.mock import AsyncMock

from fastapi.testclient import TestClient
import pytest

from app.config import settings
from app.main import app
from app.services import subscription_service
from conftest import auth_headers


@pytest.fixture
def failing_client(monkeypatch):
    monkeypatch.setattr(
        subscription_service, "get_for_broker", AsyncMock(side_effect=RuntimeError("connection reset by peer"))
    )
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c


def test_health(client: TestClient):
    assert client.get("/health").json() == {"status": "ok"}


def test_unhandled_error_hides_details(failing_client: TestClient, broker):
    response = failing_client.get("/api/subscriptions/my-subscription", headers=auth_headers(broker))

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Internal server error"}


def test_unhandled_error_details_when_enabled(failing_client: TestClient, broker, monkeypatch):
    monkeypatch.setattr(settings, "EXPOSE_ERROR_DETAILS", True)

    response = failing_client.get("/api/subscriptions/my-subscription", headers=auth_headers(broker))

    assert response.status_code == 500
    assert response.json()["message"] == "connection reset by peer"


def test_unknown_route_uses_envelope(client: TestClient):
    response = client.get("/api/does-not-exist")
    assert response.status_code == 404
    assert response.json()["success"] is False


def test_malformed_id_is_bad_request(client: TestClient, broker):
    response = client.put("/api/properties/not-a-uuid", json={}, headers=auth_headers(broker))
    assert response.status_code == 400
    assert response.json()["fields"] == ["property_id"]
