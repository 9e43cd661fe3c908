from datetime import datetime, timedelta, timezone

from cart.services import add_catalog_item
from cart.slots import InMemorySlot
from cart.store import CartStore, cart_key_for
from locations.geometry import Coordinate
from orders.services import DeliveryForm, PaymentForm

MAKATI = Coordinate(14.5547, 121.0244)


def make_cart(user_id=1, items=(("jollibee:peach-mango-pie", 2),)):
    slot = InMemorySlot()
    cart = CartStore.load(slot, cart_key_for(user_id))
    for item_id, quantity in items:
        add_catalog_item(store=cart, item_id=item_id, quantity=quantity)
    return slot, cart


def delivery_form(**overrides):
    values = dict(address="Ayala Ave, Makati", phone_number="09171234567", instructions="", coordinates=MAKATI)
    values.update(overrides)
    return DeliveryForm(**values)


def payment_form(**overrides):
    values = dict(method="cod")
    values.update(overrides)
    return PaymentForm(**values)


def order_document(created_at=None, status="preparing", slug="jollibee", current=None):
    created_at = created_at or datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)
    document = {
        "items": [
            {
                "id": f"{slug}:peach-mango-pie",
                "name": "Peach Mango Pie",
                "restaurant": "Jollibee",
                "restaurantSlug": slug,
                "price": "₱35.00",
                "unitAmount": 3500,
                "currency": "PHP",
                "image": "/assets/Jollibee/item-3-peachmangopie.png",
                "quantity": 2,
            }
        ],
        "totalPrice": "70.00",
        "totalAmount": 7000,
        "currency": "PHP",
        "deliveryDetails": {
            "address": "Ayala Ave, Makati",
            "phoneNumber": "09171234567",
            "instructions": "",
            "coordinates": [14.56, 121.03],
        },
        "paymentDetails": {"method": "cod"},
        "status": status,
        "createdAt": created_at.isoformat().replace("+00:00", "Z"),
        "estimatedDeliveryTime": (created_at + timedelta(minutes=30)).isoformat().replace("+00:00", "Z"),
    }
    if current is not None:
        document["currentLocation"] = list(current)
    return document
