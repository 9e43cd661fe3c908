from datetime import datetime, timedelta, timezone

import pytest
from orders.selectors import UnreadableOrder, get_order, list_orders
from orders.tracking import OrderListWatcher, OrderWatcher, status_display
from orders.tests.factories import order_document

T0 = datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)


def test_status_display_table():
    assert (status_display("preparing").color, status_display("preparing").label) == ("amber", "Preparing")
    assert (status_display("on_route").color, status_display("on_route").label) == ("blue", "On the way")
    assert (status_display("delivered").color, status_display("delivered").label) == ("green", "Delivered")
    assert (status_display("cancelled").color, status_display("cancelled").label) == ("gray", "cancelled")


def test_order_watcher_tracks_status_changes(record_store):
    record_store.write("orders/1/abc", order_document())
    changes = []
    watcher = OrderWatcher(record_store, 1, "abc", on_change=lambda w: changes.append(w.order.status))

    assert watcher.order.status == "preparing"
    record_store.update("orders/1/abc", {"status": "on_route"})
    record_store.update("orders/1/abc", {"status": "delivered"})

    assert changes == ["preparing", "on_route", "delivered"]
    assert watcher.not_found is False
    watcher.close()


def test_order_watcher_reports_missing_order(record_store):
    watcher = OrderWatcher(record_store, 1, "missing")
    assert watcher.loaded
    assert watcher.not_found
    assert watcher.order is None

    record_store.write("orders/1/missing", order_document())
    assert watcher.not_found is False
    assert watcher.order.order_id == "missing"
    watcher.close()


def test_closed_watcher_ignores_later_emissions(record_store):
    record_store.write("orders/1/abc", order_document())
    seen = []
    with OrderWatcher(record_store, 1, "abc", on_change=lambda w: seen.append(w.order.status)) as watcher:
        pass
    assert watcher.closed

    record_store.update("orders/1/abc", {"status": "delivered"})
    assert seen == ["preparing"]
    assert watcher.order.status == "preparing"


def test_order_list_watcher_sorts_newest_first(record_store):
    record_store.write("orders/1/old", order_document(created_at=T0))
    record_store.write("orders/1/new", order_document(created_at=T0 + timedelta(hours=2)))
    record_store.write("orders/2/other", order_document(created_at=T0 + timedelta(hours=5)))

    watcher = OrderListWatcher(record_store, 1)
    assert [o.order_id for o in watcher.orders()] == ["new", "old"]

    record_store.write("orders/1/mid", order_document(created_at=T0 + timedelta(hours=1)))
    assert [o.order_id for o in watcher.orders()] == ["new", "mid", "old"]
    watcher.close()


def test_order_list_watcher_empty_state(record_store):
    watcher = OrderListWatcher(record_store, 1)
    assert watcher.is_empty
    assert watcher.orders() == []
    watcher.close()


def test_unreadable_documents_are_skipped(record_store):
    record_store.write("orders/1/good", order_document())
    record_store.write("orders/1/bad", {"status": "preparing"})

    assert [o.order_id for o in list_orders(user_id=1)] == ["good"]
    assert get_order(user_id=1, order_id="nope") is None
    assert get_order(user_id=1, order_id="good").total_price.amount == 7000


def test_get_order_raises_for_malformed_document(record_store):
    record_store.write("orders/1/bad", {"status": "cancelled", "createdAt": "2024-05-01T10:00:00Z"})
    with pytest.raises(UnreadableOrder):
        get_order(user_id=1, order_id="bad")
