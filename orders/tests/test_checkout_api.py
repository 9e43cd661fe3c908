from unittest.mock import MagicMock

import pytest
from django.core.cache import cache
from records.store import RecordStoreError, set_record_store
from rest_framework.test import APIClient
from users.tests.factories import UserFactory

pytestmark = pytest.mark.django_db

CHECKOUT_URL = "/api/v1/cart/checkout/"

VALID_CHECKOUT = {
    "delivery": {
        "address": "Ayala Ave, Makati",
        "phone_number": "09171234567",
        "instructions": "Leave at the lobby",
        "coordinates": [14.5547, 121.0244],
    },
    "payment": {"method": "gcash", "account_number": "09171234567"},
}


@pytest.fixture
def user():
    return UserFactory()


@pytest.fixture
def client(user):
    client = APIClient()
    client.force_authenticate(user=user)
    resp = client.post("/api/v1/cart/items/", {"item_id": "jollibee:peach-mango-pie", "quantity": 2}, format="json")
    assert resp.status_code == 201
    return client


def test_checkout_places_order_and_clears_cart(client, user, record_store):
    resp = client.post(CHECKOUT_URL, VALID_CHECKOUT, format="json")
    assert resp.status_code == 201
    body = resp.json()
    assert body["message"] == "Order placed successfully!"
    assert body["redirect"] == {"url": "/orders", "delay_ms": 2000}
    assert body["order"]["status"] == "preparing"
    assert body["order"]["total_price"]["amount"] == "70.00"
    assert resp.cookies[f"cart_items_{user.id}"].value == ""

    stored = record_store.read(f"orders/{user.id}/{body['order_id']}")
    assert stored["paymentDetails"]["method"] == "gcash"
    assert client.get("/api/v1/cart/").json()["total_items"] == 0


def test_checkout_reports_first_validation_failure(client):
    payload = {**VALID_CHECKOUT, "delivery": {**VALID_CHECKOUT["delivery"], "phone_number": ""}}
    resp = client.post(CHECKOUT_URL, payload, format="json")
    assert resp.status_code == 400
    assert resp.json() == {"detail": "Please enter your phone number", "code": "phone_required"}
    assert client.get("/api/v1/cart/").json()["total_items"] == 2


def test_checkout_requires_map_location(client):
    payload = {**VALID_CHECKOUT, "delivery": {"address": "", "phone_number": "09171234567"}}
    resp = client.post(CHECKOUT_URL, payload, format="json")
    assert resp.status_code == 400
    assert resp.json()["code"] == "location_required"


def test_checkout_rejects_malformed_coordinates(client):
    payload = {**VALID_CHECKOUT, "delivery": {**VALID_CHECKOUT["delivery"], "coordinates": [200, 0]}}
    resp = client.post(CHECKOUT_URL, payload, format="json")
    assert resp.status_code == 400


def test_checkout_with_empty_cart():
    client = APIClient()
    client.force_authenticate(user=UserFactory())
    resp = client.post(CHECKOUT_URL, VALID_CHECKOUT, format="json")
    assert resp.status_code == 400
    assert resp.json() == {"detail": "Your cart is empty", "code": "empty_cart"}


def test_checkout_conflict_while_submission_in_flight(client, user, record_store):
    cache.add(f"checkout:inflight:{user.id}", True)
    resp = client.post(CHECKOUT_URL, VALID_CHECKOUT, format="json")
    assert resp.status_code == 409
    assert resp.json()["code"] == "in_progress"
    assert record_store.read(f"orders/{user.id}") is None


def test_checkout_store_failure_keeps_cart(client):
    failing = MagicMock()
    failing.write.side_effect = RecordStoreError("unreachable")
    set_record_store(failing)

    resp = client.post(CHECKOUT_URL, VALID_CHECKOUT, format="json")
    assert resp.status_code == 503
    assert resp.json() == {"detail": "Failed to place order", "code": "order_failed"}
    assert client.get("/api/v1/cart/").json()["total_items"] == 2


def test_checkout_requires_authentication():
    assert APIClient().post(CHECKOUT_URL, VALID_CHECKOUT, format="json").status_code == 401
