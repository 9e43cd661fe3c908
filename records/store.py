"""Record store contract.

The hosted realtime database is the source of truth for user profiles and
orders. Callers address records by slash-separated paths such as
``users/<uid>`` or ``orders/<uid>/<order_id>``.
"""

import logging
import threading
from typing import Any, Callable, Optional

from django.conf import settings

logger = logging.getLogger("foodhub.records")

OnChange = Callable[[Optional[Any]], None]
Unsubscribe = Callable[[], None]


class RecordStoreError(Exception):
    """Raised when the record store cannot complete a read or write."""


def split_path(path: str) -> list[str]:
    """Return the non-empty segments of a record path."""

    parts = [p for p in str(path).strip("/").split("/") if p]
    for part in parts:
        if part in (".", "..") or any(ch in part for ch in ".#$[]"):
            raise RecordStoreError(f"Invalid path segment: {part!r}")
    return parts


def join_path(*parts) -> str:
    return "/".join(str(p).strip("/") for p in parts if str(p).strip("/"))


class RecordStore:
    """Interface implemented by record store backends.

    ``subscribe`` delivers the current value first and then every change as a
    full replacement of the value at ``path`` (``None`` when absent). The
    returned callable releases the subscription; no callback runs after it
    returns.
    """

    def read(self, path: str) -> Optional[Any]:
        raise NotImplementedError

    def write(self, path: str, value: Any) -> None:
        raise NotImplementedError

    def update(self, path: str, values: dict) -> None:
        raise NotImplementedError

    def subscribe(self, path: str, on_change: OnChange) -> Unsubscribe:
        raise NotImplementedError


_store: Optional[RecordStore] = None
_store_lock = threading.Lock()


def build_record_store() -> RecordStore:
    """Construct the backend named by ``RECORD_STORE_BACKEND``."""

    backend = str(getattr(settings, "RECORD_STORE_BACKEND", "memory")).lower()
    if backend == "firebase":
        from .firebase import FirebaseRecordStore

        return FirebaseRecordStore(
            database_url=settings.FIREBASE_DATABASE_URL,
            auth_token=getattr(settings, "FIREBASE_AUTH_TOKEN", "") or None,
            timeout=getattr(settings, "RECORD_STORE_TIMEOUT", 10),
        )
    if backend == "memory":
        from .memory import InMemoryRecordStore

        return InMemoryRecordStore()
    raise RecordStoreError(f"Unknown record store backend: {backend}")


def get_record_store() -> RecordStore:
    """Return the process-wide record store, building it on first use."""

    global _store
    with _store_lock:
        if _store is None:
            _store = build_record_store()
            logger.info("records.store_ready", extra={"event": "records.store_ready", "backend": type(_store).__name__})
        return _store


def set_record_store(store: Optional[RecordStore]) -> None:
    """Replace the process-wide store (``None`` rebuilds on next access)."""

    global _store
    with _store_lock:
        _store = store
