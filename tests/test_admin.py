from uuid import uuid4

from fastapi.testclient import TestClient
import pytest

from app.models.property import PropertyStatus, TransactionType
from app.models.subscription import SubscriptionPaymentStatus, SubscriptionStatus
from conftest import auth_headers, make_property, make_subscription, make_user


@pytest.mark.parametrize("path", [
    "/api/admin/stats",
    "/api/admin/brokers",
    "/api/admin/pending-properties",
    "/api/admin/subscription-analytics",
    "/api/admin/property-analytics",
])
def test_admin_routes_reject_brokers(client: TestClient, broker, path):
    response = client.get(path, headers=auth_headers(broker))
    assert response.status_code == 403
    assert response.json()["message"] == "Access denied: Admin rights required"

    assert client.get(path).status_code == 401


def test_dashboard_stats(client: TestClient, broker, admin):
    other = make_user(email="other@example.com")
    make_property(broker)
    make_property(broker, status=PropertyStatus.PENDING)
    make_property(other, status=PropertyStatus.PENDING)
    make_subscription(broker)
    make_subscription(other, status=SubscriptionStatus.PENDING, payment_status=SubscriptionPaymentStatus.PENDING)

    response = client.get("/api/admin/stats", headers=auth_headers(admin))

    assert response.status_code == 200
    assert response.json()["data"] == {
        "totalBrokers": 2,
        "totalProperties": 3,
        "pendingProperties": 2,
        "activeSubscriptions": 1,
    }


class TestBrokers:
    def test_list_excludes_admins(self, client: TestClient, broker, admin):
        make_subscription(broker)
        make_user(email="second@example.com")

        response = client.get("/api/admin/brokers", headers=auth_headers(admin))

        body = response.json()
        assert body["count"] == 2
        emails = {item["email"] for item in body["data"]}
        assert emails == {"broker@example.com", "second@example.com"}
        assert all("passwordHash" not in item for item in body["data"])
        subscribed = next(item for item in body["data"] if item["email"] == "broker@example.com")
        assert subscribed["subscription"]["totalPrice"] == 999

    def test_detail_includes_all_listings(self, client: TestClient, broker, admin):
        make_property(broker)
        make_property(broker, status=PropertyStatus.REJECTED, type=TransactionType.RESALE)

        response = client.get(f"/api/admin/brokers/{broker.id}", headers=auth_headers(admin))

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["broker"]["id"] == str(broker.id)
        assert data["broker"]["subscription"] is None
        assert len(data["properties"]) == 2

    def test_detail_missing_broker(self, client: TestClient, admin):
        response = client.get(f"/api/admin/brokers/{uuid4()}", headers=auth_headers(admin))
        assert response.status_code == 404
        assert response.json()["message"] == "Broker not found"

    def test_deactivated_broker_cannot_log_in(self, client: TestClient, broker, admin):
        response = client.patch(
            f"/api/admin/brokers/{broker.id}/status", json={"status": "inactive"}, headers=auth_headers(admin)
        )

        assert response.status_code == 200
        assert response.json()["data"]["status"] == "inactive"

        login = client.post("/api/auth/login", json={"email": broker.email, "password": "secret123"})
        assert login.status_code == 403

    def test_invalid_broker_status(self, client: TestClient, broker, admin):
        response = client.patch(
            f"/api/admin/brokers/{broker.id}/status", json={"status": "banned"}, headers=auth_headers(admin)
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid status"


def test_pending_properties(client: TestClient, broker, admin):
    pending = make_property(broker, status=PropertyStatus.PENDING)
    make_property(broker)

    response = client.get("/api/admin/pending-properties", headers=auth_headers(admin))

    body = response.json()
    assert body["count"] == 1
    assert body["data"][0]["id"] == str(pending.id)


def test_subscription_analytics(client: TestClient, admin):
    for index, status in enumerate([SubscriptionStatus.ACTIVE, SubscriptionStatus.ACTIVE, SubscriptionStatus.PENDING]):
        make_subscription(make_user(email=f"broker{index}@example.com"), status=status)

    response = client.get("/api/admin/subscription-analytics", headers=auth_headers(admin))

    data = {item["status"]: item for item in response.json()["data"]}
    assert data["active"] == {"status": "active", "count": 2, "totalRevenue": 1998}
    assert data["pending"] == {"status": "pending", "count": 1, "totalRevenue": 999}
    assert "inactive" not in data


def test_property_analytics(client: TestClient, broker, admin):
    make_property(broker)
    make_property(broker)
    make_property(broker, status=PropertyStatus.PENDING, type=TransactionType.RESALE)

    response = client.get("/api/admin/property-analytics", headers=auth_headers(admin))

    data = {(item["type"], item["status"]): item["count"] for item in response.json()["data"]}
    assert data == {("rental", "approved"): 2, ("resale", "pending"): 1}
    assert {item["category"] for item in response.json()["data"]} == {"residential"}
