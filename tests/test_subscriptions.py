from datetime import timedelta
from uuid import UUID, uuid4

from fastapi.testclient import TestClient
import pytest

from app.config import settings
from app.models.base import utcnow
from app.models.subscription import Subscription, SubscriptionPaymentStatus, SubscriptionStatus
from conftest import TestingSessionLocal, auth_headers, make_subscription, run

LOCATIONS = [
    {"name": "Bandra", "latitude": 19.0596, "longitude": 72.8295},
    {"name": "Andheri", "latitude": 19.1136, "longitude": 72.8697, "radius": 3000},
    {"name": "Thane", "latitude": 19.2183, "longitude": 72.9781},
]


def load_subscription(subscription_id):
    async def _get():
        async with TestingSessionLocal() as session:
            return await session.get(Subscription, UUID(str(subscription_id)))
    return run(_get())


class TestIsActive:
    def build(self, **overrides):
        fields = dict(
            status=SubscriptionStatus.ACTIVE,
            payment_status=SubscriptionPaymentStatus.COMPLETED,
            end_date=utcnow() + timedelta(days=1),
            locations=[],
        )
        fields.update(overrides)
        return Subscription(**fields)

    def test_all_conditions_hold(self):
        assert self.build().is_active is True

    @pytest.mark.parametrize("overrides", [
        {"status": SubscriptionStatus.INACTIVE},
        {"status": SubscriptionStatus.PENDING},
        {"payment_status": SubscriptionPaymentStatus.PENDING},
        {"payment_status": SubscriptionPaymentStatus.FAILED},
        {"end_date": utcnow() - timedelta(seconds=1)},
    ])
    def test_any_failed_condition_deactivates(self, overrides):
        assert self.build(**overrides).is_active is False

    def test_naive_end_date_is_treated_as_utc(self):
        naive = (utcnow() + timedelta(hours=1)).replace(tzinfo=None)
        assert self.build(end_date=naive).is_active is True


class TestUpsert:
    def test_three_locations_cost_2997(self, client: TestClient, broker):
        response = client.post("/api/subscriptions", json={"locations": LOCATIONS}, headers=auth_headers(broker))

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["totalPrice"] == 2997
        assert data["status"] == "pending"
        assert data["paymentStatus"] == "pending"
        assert data["isActive"] is False
        assert [location["name"] for location in data["locations"]] == ["Bandra", "Andheri", "Thane"]
        assert [location["radius"] for location in data["locations"]] == [5000, 3000, 5000]
        assert all(location["price"] == 999 for location in data["locations"])

    def test_validity_window_is_thirty_days(self, client: TestClient, broker):
        response = client.post("/api/subscriptions", json={"locations": LOCATIONS[:1]}, headers=auth_headers(broker))

        subscription = load_subscription(response.json()["data"]["id"])
        window = subscription.end_date - subscription.start_date
        assert window == timedelta(days=settings.SUBSCRIPTION_DAYS)

    def test_resubscribing_replaces_locations_and_resets_payment(self, client: TestClient, broker):
        existing = make_subscription(broker)

        response = client.post("/api/subscriptions", json={"locations": LOCATIONS[1:]}, headers=auth_headers(broker))

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["id"] == str(existing.id)
        assert [location["name"] for location in data["locations"]] == ["Andheri", "Thane"]
        assert data["totalPrice"] == 2 * 999
        assert data["status"] == "pending"
        assert data["paymentStatus"] == "pending"

    def test_total_price_follows_configured_price(self, client: TestClient, broker, monkeypatch):
        monkeypatch.setattr(settings, "PRICE_PER_LOCATION", 1500)

        response = client.post("/api/subscriptions", json={"locations": LOCATIONS}, headers=auth_headers(broker))

        assert response.json()["data"]["totalPrice"] == 4500

    def test_empty_locations(self, client: TestClient, broker):
        response = client.post("/api/subscriptions", json={"locations": []}, headers=auth_headers(broker))
        assert response.status_code == 400
        assert response.json()["message"] == "Please select at least one location"

    @pytest.mark.parametrize("payload", [
        {},
        {"locations": "Bandra"},
        {"locations": [{"name": "Bandra"}]},
        {"locations": [{"name": "Bandra", "latitude": 95, "longitude": 72.8}]},
    ])
    def test_malformed_locations(self, client: TestClient, broker, payload):
        response = client.post("/api/subscriptions", json=payload, headers=auth_headers(broker))
        assert response.status_code == 400


class TestPayment:
    def test_complete_payment_activates(self, client: TestClient, broker):
        client.post("/api/subscriptions", json={"locations": LOCATIONS}, headers=auth_headers(broker))

        response = client.post("/api/subscriptions/complete-payment", headers=auth_headers(broker))

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["status"] == "active"
        assert data["paymentStatus"] == "completed"
        assert data["isActive"] is True
        assert len(data["paymentHistory"]) == 1
        entry = data["paymentHistory"][0]
        assert entry["amount"] == 2997
        assert entry["status"] == "completed"
        assert entry["transactionId"].startswith("TRANS_")

    def test_history_is_append_only(self, client: TestClient, broker):
        headers = auth_headers(broker)
        client.post("/api/subscriptions", json={"locations": LOCATIONS[:1]}, headers=headers)
        first = client.post("/api/subscriptions/complete-payment", headers=headers).json()["data"]

        client.post("/api/subscriptions", json={"locations": LOCATIONS}, headers=headers)
        second = client.post("/api/subscriptions/complete-payment", headers=headers).json()["data"]

        assert second["paymentHistory"][0] == first["paymentHistory"][0]
        assert [entry["amount"] for entry in second["paymentHistory"]] == [999, 2997]
        assert second["paymentHistory"][0]["transactionId"] != second["paymentHistory"][1]["transactionId"]

    def test_complete_payment_without_subscription(self, client: TestClient, broker):
        response = client.post("/api/subscriptions/complete-payment", headers=auth_headers(broker))
        assert response.status_code == 404
        assert response.json()["message"] == "Subscription not found"

    def test_paid_subscription_unlocks_listings(self, client: TestClient, broker):
        headers = auth_headers(broker)
        assert client.get("/api/properties", headers=headers).status_code == 403

        client.post("/api/subscriptions", json={"locations": LOCATIONS}, headers=headers)
        assert client.get("/api/properties", headers=headers).status_code == 403

        client.post("/api/subscriptions/complete-payment", headers=headers)
        assert client.get("/api/properties", headers=headers).status_code == 200


class TestAdminStatus:
    def test_admin_deactivates_subscription(self, client: TestClient, broker, admin):
        subscription = make_subscription(broker)
        assert client.get("/api/properties", headers=auth_headers(broker)).status_code == 200

        response = client.patch(
            f"/api/subscriptions/{subscription.id}/status",
            json={"status": "inactive"},
            headers=auth_headers(admin),
        )

        assert response.status_code == 200
        assert response.json()["data"]["status"] == "inactive"
        # The gate re-reads the subscription on every request
        assert client.get("/api/properties", headers=auth_headers(broker)).status_code == 403

    def test_invalid_status(self, client: TestClient, broker, admin):
        subscription = make_subscription(broker)
        response = client.patch(
            f"/api/subscriptions/{subscription.id}/status",
            json={"status": "pending"},
            headers=auth_headers(admin),
        )
        assert response.status_code == 400

    def test_missing_subscription(self, client: TestClient, admin):
        response = client.patch(
            f"/api/subscriptions/{uuid4()}/status", json={"status": "active"}, headers=auth_headers(admin)
        )
        assert response.status_code == 404

    def test_broker_cannot_change_status(self, client: TestClient, broker):
        subscription = make_subscription(broker, status=SubscriptionStatus.INACTIVE)
        response = client.patch(
            f"/api/subscriptions/{subscription.id}/status", json={"status": "active"}, headers=auth_headers(broker)
        )
        assert response.status_code == 403

    def test_admin_lists_subscriptions(self, client: TestClient, broker, admin):
        make_subscription(broker)

        response = client.get("/api/subscriptions", headers=auth_headers(admin))

        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 1
        assert body["data"][0]["broker"]["email"] == broker.email


def test_my_subscription(client: TestClient, broker):
    response = client.get("/api/subscriptions/my-subscription", headers=auth_headers(broker))
    assert response.json() == {"success": True, "data": None, "message": None, "count": None}

    make_subscription(broker)
    response = client.get("/api/subscriptions/my-subscription", headers=auth_headers(broker))
    assert response.json()["data"]["brokerId"] == str(broker.id)


def test_pricing_is_public(client: TestClient):
    response = client.get("/api/subscriptions/pricing")
    assert response.status_code == 200
    assert response.json()["data"]["basePrice"] == 999
