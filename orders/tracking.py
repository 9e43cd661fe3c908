"""Live order status views.

Watchers subscribe to the record store and keep a local projection that is
replaced wholesale on every emission. ``close()`` releases the subscription;
emissions that race with it are dropped.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Optional

from common.choices import OrderStatus
from records.store import RecordStore

from .records import OrderRecord
from .services import order_path, orders_path

logger = logging.getLogger("foodhub.orders")


@dataclass(frozen=True)
class StatusDisplay:
    color: str
    label: str


STATUS_DISPLAY = {
    OrderStatus.PREPARING.value: StatusDisplay("amber", OrderStatus.PREPARING.label),
    OrderStatus.ON_ROUTE.value: StatusDisplay("blue", OrderStatus.ON_ROUTE.label),
    OrderStatus.DELIVERED.value: StatusDisplay("green", OrderStatus.DELIVERED.label),
}

NEUTRAL_COLOR = "gray"


def status_display(status: str) -> StatusDisplay:
    """Color and label for a status; unknown statuses show their raw value."""

    return STATUS_DISPLAY.get(status) or StatusDisplay(NEUTRAL_COLOR, str(status))


def records_from_collection(value) -> dict[str, OrderRecord]:
    """Parse a ``orders/<uid>`` snapshot, skipping documents that do not parse."""

    records: dict[str, OrderRecord] = {}
    if not isinstance(value, dict):
        return records
    for order_id, data in value.items():
        if not isinstance(data, dict):
            continue
        try:
            records[str(order_id)] = OrderRecord.from_dict(order_id, data)
        except (ValueError, KeyError, TypeError):
            logger.warning(
                "order.unreadable_record",
                extra={"event": "order.unreadable_record", "order_id": str(order_id)},
                exc_info=True,
            )
    return records


def newest_first(records) -> list[OrderRecord]:
    return sorted(records, key=lambda r: r.created_at, reverse=True)


class _Watcher:
    def __init__(self, store: RecordStore, path: str, on_change: Optional[Callable] = None):
        self._lock = threading.RLock()
        self._closed = False
        self._loaded = False
        self._on_change = on_change
        self._unsubscribe = None
        unsubscribe = store.subscribe(path, self._receive)
        with self._lock:
            if self._closed:
                unsubscribe()
            else:
                self._unsubscribe = unsubscribe

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def closed(self) -> bool:
        return self._closed

    def _receive(self, value) -> None:
        with self._lock:
            if self._closed:
                return
            self._replace(value)
            self._loaded = True
            if self._on_change is not None:
                self._on_change(self)

    def _replace(self, value) -> None:
        raise NotImplementedError

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            unsubscribe, self._unsubscribe = self._unsubscribe, None
        if unsubscribe is not None:
            unsubscribe()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


class OrderWatcher(_Watcher):
    """Follow a single order; ``not_found`` is set while the record is absent."""

    def __init__(self, store: RecordStore, user_id, order_id: str, on_change: Optional[Callable] = None):
        self.order_id = str(order_id)
        self.order: Optional[OrderRecord] = None
        self.not_found = False
        super().__init__(store, order_path(user_id, order_id), on_change)

    def _replace(self, value) -> None:
        if not isinstance(value, dict):
            self.order, self.not_found = None, True
            return
        try:
            self.order, self.not_found = OrderRecord.from_dict(self.order_id, value), False
        except (ValueError, KeyError, TypeError):
            logger.warning(
                "order.unreadable_record",
                extra={"event": "order.unreadable_record", "order_id": self.order_id},
                exc_info=True,
            )
            self.order, self.not_found = None, True


class OrderListWatcher(_Watcher):
    """Follow all orders of a user."""

    def __init__(self, store: RecordStore, user_id, on_change: Optional[Callable] = None):
        self.records: dict[str, OrderRecord] = {}
        super().__init__(store, orders_path(user_id), on_change)

    def _replace(self, value) -> None:
        self.records = records_from_collection(value)

    @property
    def is_empty(self) -> bool:
        return not self.records

    def orders(self) -> list[OrderRecord]:
        """Orders sorted by creation time, most recent first."""

        return newest_first(self.records.values())
