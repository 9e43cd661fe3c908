from unittest.mock import MagicMock

import pytest
from records.store import RecordStoreError, set_record_store
from rest_framework.test import APIClient
from users.tests.factories import UserFactory

pytestmark = pytest.mark.django_db


@pytest.fixture
def user():
    return UserFactory()


@pytest.fixture
def client(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


def test_profile_falls_back_to_account_values(client, user):
    resp = client.get("/api/v1/account/profile/")
    assert resp.status_code == 200
    assert resp.json() == {
        "user_id": user.id,
        "email": user.email,
        "first_name": "Juan",
        "last_name": "Dela Cruz",
        "mobile_number": "",
        "created_at": None,
        "last_login": None,
    }


def test_profile_reads_stored_record(client, user, record_store):
    record_store.write(f"users/{user.id}", {"mobileNumber": "09170000000", "createdAt": "2024-05-01T10:00:00Z"})
    body = client.get("/api/v1/account/profile/").json()
    assert body["mobile_number"] == "09170000000"
    assert body["created_at"] == "2024-05-01T10:00:00Z"


def test_profile_update_writes_record_and_account(client, user, record_store):
    resp = client.patch("/api/v1/account/profile/", {"first_name": "Maria", "mobile_number": "+639171234567"})
    assert resp.status_code == 200
    assert resp.json()["first_name"] == "Maria"

    stored = record_store.read(f"users/{user.id}")
    assert stored["firstName"] == "Maria"
    assert stored["mobileNumber"] == "+639171234567"
    user.refresh_from_db()
    assert user.first_name == "Maria"


def test_profile_update_rejects_bad_mobile(client):
    resp = client.patch("/api/v1/account/profile/", {"mobile_number": "12"})
    assert resp.status_code == 400


def test_profile_unavailable_when_store_fails(client):
    failing = MagicMock()
    failing.read.side_effect = RecordStoreError("unreachable")
    set_record_store(failing)
    resp = client.get("/api/v1/account/profile/")
    assert resp.status_code == 503


def test_profile_requires_authentication():
    assert APIClient().get("/api/v1/account/profile/").status_code == 401


def test_password_change(client, user):
    resp = client.post(
        "/api/v1/account/password/",
        {"current_password": "pass", "new_password": "N3w-secret-pass", "confirm_password": "N3w-secret-pass"},
    )
    assert resp.status_code == 200
    user.refresh_from_db()
    assert user.check_password("N3w-secret-pass")


@pytest.mark.parametrize(
    "current, confirm, field",
    [
        ("nope", "N3w-secret-pass", "current_password"),
        ("pass", "other-pass-1", "confirm_password"),
    ],
)
def test_password_change_rejected(client, user, current, confirm, field):
    payload = {"current_password": current, "new_password": "N3w-secret-pass", "confirm_password": confirm}
    resp = client.post("/api/v1/account/password/", payload)
    assert resp.status_code == 400
    assert field in resp.json()
    user.refresh_from_db()
    assert user.check_password("pass")
