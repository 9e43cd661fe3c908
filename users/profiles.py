"""Profile records kept in the record store at ``users/<user id>``."""

import logging
from typing import Optional

from django.utils import timezone
from orders.records import format_timestamp
from records.store import RecordStore, RecordStoreError, get_record_store, join_path

logger = logging.getLogger("auth")

# request field -> record key
EDITABLE_FIELDS = {
    "first_name": "firstName",
    "last_name": "lastName",
    "mobile_number": "mobileNumber",
}


def profile_path(user_id) -> str:
    return join_path("users", user_id)


def create_profile(*, user, mobile_number: str = "", now=None, store: Optional[RecordStore] = None) -> dict:
    """Write the initial profile record for a newly registered user."""

    store = store or get_record_store()
    stamp = format_timestamp(now or timezone.now())
    record = {
        "email": user.email,
        "firstName": user.first_name,
        "lastName": user.last_name,
        "mobileNumber": mobile_number,
        "createdAt": stamp,
        "lastLogin": stamp,
    }
    store.write(profile_path(user.id), record)
    return record


def account_profile(user) -> dict:
    """Profile values known from the account alone."""

    return {
        "email": user.email,
        "firstName": user.first_name,
        "lastName": user.last_name,
        "mobileNumber": "",
        "createdAt": None,
        "lastLogin": None,
    }


def get_profile(*, user, store: Optional[RecordStore] = None) -> dict:
    """Return the stored profile, filled in from the account when absent."""

    store = store or get_record_store()
    record = store.read(profile_path(user.id))
    profile = account_profile(user)
    if isinstance(record, dict):
        profile.update({key: record[key] for key in profile if record.get(key) is not None})
    return profile


def update_profile(*, user, changes: dict, store: Optional[RecordStore] = None) -> dict:
    """Merge the editable fields in ``changes`` into the profile record."""

    store = store or get_record_store()
    values = {EDITABLE_FIELDS[name]: value for name, value in changes.items() if name in EDITABLE_FIELDS}
    if values:
        store.update(profile_path(user.id), values)
    account_fields = [name for name in ("first_name", "last_name") if name in changes]
    if account_fields:
        for name in account_fields:
            setattr(user, name, changes[name])
        user.save(update_fields=account_fields)
    return get_profile(user=user, store=store)


def touch_last_login(*, user_id, now=None, store: Optional[RecordStore] = None) -> None:
    """Record a sign-in; failures are logged and do not block the sign-in."""

    store = store or get_record_store()
    try:
        store.update(profile_path(user_id), {"lastLogin": format_timestamp(now or timezone.now())})
    except RecordStoreError:
        logger.warning(
            "auth.last_login_failed",
            extra={"event": "auth.last_login_failed", "user_id": user_id},
            exc_info=True,
        )
