import pytest
from records.memory import InMemoryRecordStore
from records.store import RecordStoreError


def test_write_read_and_delete_prunes_empty_parents():
    store = InMemoryRecordStore()
    store.write("orders/1/a", {"status": "preparing"})
    assert store.read("orders/1") == {"a": {"status": "preparing"}}

    store.write("orders/1/a", None)
    assert store.read("orders/1/a") is None
    assert store.read("orders") is None


def test_update_merges_children():
    store = InMemoryRecordStore({"users": {"1": {"email": "a@example.com", "firstName": "A"}}})
    store.update("users/1", {"firstName": "B", "mobileNumber": "0917"})
    assert store.read("users/1") == {"email": "a@example.com", "firstName": "B", "mobileNumber": "0917"}


def test_reads_are_copies():
    store = InMemoryRecordStore({"users": {"1": {"email": "a@example.com"}}})
    value = store.read("users/1")
    value["email"] = "changed"
    assert store.read("users/1/email") == "a@example.com"


def test_subscribe_emits_current_value_then_replacements():
    store = InMemoryRecordStore()
    seen = []
    unsubscribe = store.subscribe("orders/1", seen.append)
    store.write("orders/1/a", {"status": "preparing"})
    store.update("orders/1/a", {"status": "on_route"})
    store.write("orders/2/b", {"status": "preparing"})

    assert seen == [None, {"a": {"status": "preparing"}}, {"a": {"status": "on_route"}}]

    unsubscribe()
    store.write("orders/1/a", None)
    assert len(seen) == 3


def test_ancestor_writes_reach_descendant_subscribers():
    store = InMemoryRecordStore()
    seen = []
    store.subscribe("orders/1/a", seen.append)
    store.write("orders/1", {"a": {"status": "delivered"}})
    assert seen[-1] == {"status": "delivered"}


@pytest.mark.parametrize("path", ["orders/1/../2", "orders/a.b", "users/$x"])
def test_invalid_paths_are_rejected(path):
    with pytest.raises(RecordStoreError):
        InMemoryRecordStore().read(path)
