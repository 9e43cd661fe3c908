import json

import pytest
from cart.slots import InMemorySlot
from cart.store import CartStore, cart_key_for
from cart.tests.factories import CartCandidateFactory
from common.money import Money

KEY = "cart_items_1"


def _cart(slot=None):
    slot = slot or InMemorySlot()
    return slot, CartStore.load(slot, KEY)


def test_add_appends_then_increments():
    slot, cart = _cart()
    a, b = CartCandidateFactory(), CartCandidateFactory()
    cart.add_item(a)
    cart.add_item(b)
    cart.add_item(a)

    assert [(line.id, line.quantity) for line in cart.items] == [(a.id, 2), (b.id, 1)]
    assert cart.total_item_count() == 3


def test_set_quantity_below_one_removes_line():
    _, cart = _cart()
    a, b = CartCandidateFactory(), CartCandidateFactory()
    cart.add_item(a)
    cart.add_item(b)

    cart.set_quantity(a.id, 5)
    assert cart.get(a.id).quantity == 5
    cart.set_quantity(a.id, 0)
    assert [line.id for line in cart.items] == [b.id]
    cart.set_quantity(b.id, -3)
    assert cart.is_empty()


def test_remove_is_idempotent():
    _, cart = _cart()
    a = CartCandidateFactory()
    cart.add_item(a)
    cart.remove_item(a.id)
    cart.remove_item(a.id)
    cart.remove_item("missing")
    assert cart.items == ()


def test_total_price_is_exact_sum_of_lines():
    _, cart = _cart()
    cart.add_item(CartCandidateFactory(unit_price=Money(10, "PHP")))
    pie = CartCandidateFactory(unit_price=Money(3500, "PHP"))
    cart.add_item(pie)
    cart.set_quantity(pie.id, 3)
    assert cart.total_price() == Money(10 + 3 * 3500, "PHP")


def test_empty_cart_total_is_zero():
    _, cart = _cart()
    assert cart.total_item_count() == 0
    assert cart.total_price() == Money(0, "PHP")


def test_every_mutation_persists_and_reloads():
    slot, cart = _cart()
    a, b = CartCandidateFactory(), CartCandidateFactory()
    cart.add_item(a)
    cart.add_item(b)
    cart.set_quantity(b.id, 4)

    reloaded = CartStore.load(slot, KEY)
    assert reloaded.items == cart.items
    assert reloaded.total_price() == cart.total_price()
    assert slot.ttls[KEY].days == 7


def test_emptying_the_cart_deletes_the_slot_entry():
    slot, cart = _cart()
    a = CartCandidateFactory()
    cart.add_item(a)
    assert KEY in slot.values
    cart.remove_item(a.id)
    assert KEY not in slot.values

    cart.add_item(a)
    cart.clear()
    assert KEY not in slot.values
    assert cart.is_empty()


@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        json.dumps({"id": "x"}),
        json.dumps([{"id": "x"}]),
        json.dumps(
            [
                {
                    "id": "x",
                    "name": "X",
                    "restaurant_name": "R",
                    "unit_price": {"amount": 100, "currency": "PHP"},
                    "quantity": 0,
                }
            ]
        ),
    ],
)
def test_unreadable_saved_cart_is_discarded(raw, caplog):
    slot = InMemorySlot({KEY: raw})
    with caplog.at_level("WARNING", logger="foodhub.cart"):
        cart = CartStore.load(slot, KEY)
    assert cart.is_empty()
    assert KEY not in slot.values
    assert any(r.msg == "cart.restore_failed" for r in caplog.records)


def test_duplicate_ids_in_saved_cart_are_discarded():
    line = {
        "id": "x",
        "name": "X",
        "restaurant_name": "R",
        "restaurant_slug": "r",
        "unit_price": {"amount": 100, "currency": "PHP"},
        "image": "",
        "quantity": 1,
    }
    slot = InMemorySlot({KEY: json.dumps([line, line])})
    assert CartStore.load(slot, KEY).is_empty()


def test_cart_key_is_per_user():
    assert cart_key_for(1) == "cart_items_1"
    assert cart_key_for(2) != cart_key_for(1)
