"""Point reads of a user's orders from the record store."""

import logging
from typing import Optional

from records.store import RecordStore, get_record_store

from .records import OrderRecord
from .services import order_path, orders_path
from .tracking import newest_first, records_from_collection

logger = logging.getLogger("foodhub.orders")


class UnreadableOrder(Exception):
    """A stored order document exists but cannot be parsed."""


def list_orders(*, user_id, store: Optional[RecordStore] = None) -> list[OrderRecord]:
    """Return the user's orders, most recent first."""

    store = store or get_record_store()
    return newest_first(records_from_collection(store.read(orders_path(user_id))).values())


def get_order(*, user_id, order_id: str, store: Optional[RecordStore] = None) -> Optional[OrderRecord]:
    """Return one order, or None when it does not exist.

    Raises UnreadableOrder when the stored document is malformed.
    """

    store = store or get_record_store()
    data = store.read(order_path(user_id, order_id))
    if not isinstance(data, dict):
        return None
    try:
        return OrderRecord.from_dict(order_id, data)
    except (ValueError, KeyError, TypeError) as exc:
        logger.warning(
            "order.unreadable_record",
            extra={"event": "order.unreadable_record", "user_id": user_id, "order_id": order_id},
            exc_info=True,
        )
        raise UnreadableOrder(order_id) from exc
