"""Cart services: glue between the catalog, the cart store and its slot."""

import logging

from catalog.selectors import get_menu_item

from .slots import DurableSlot
from .store import CartCandidate, CartError, CartLine, CartStore, cart_key_for

logger = logging.getLogger("foodhub.cart")


class MenuItemNotFound(CartError):
    """Raised when a cart request names an item the catalog does not have."""


def load_cart(*, slot: DurableSlot, user) -> CartStore:
    """Return the cart saved for ``user`` in ``slot``."""

    return CartStore.load(slot, cart_key_for(user.id))


def candidate_for(item_id: str) -> CartCandidate:
    """Build a cart candidate from the catalog entry for ``item_id``."""

    found = get_menu_item(item_id)
    if found is None:
        raise MenuItemNotFound(f"Unknown menu item: {item_id}")
    restaurant, item = found
    return CartCandidate(
        id=item.id,
        name=item.name,
        restaurant_name=restaurant.name,
        restaurant_slug=restaurant.slug,
        unit_price=item.price,
        image=item.image,
    )


def add_catalog_item(*, store: CartStore, item_id: str, quantity: int = 1) -> CartLine:
    """Add a catalog item ``quantity`` times (one increment per unit)."""

    if quantity <= 0:
        raise CartError("Quantity must be positive")
    candidate = candidate_for(item_id)
    line = None
    for _ in range(quantity):
        line = store.add_item(candidate)
    return line


def discard_cart(*, slot: DurableSlot, user_id) -> None:
    """Drop ``user_id``'s saved cart without loading it (used on sign-out)."""

    slot.delete(cart_key_for(user_id))
    logger.info("cart.discarded", extra={"event": "cart.discarded", "user_id": user_id})
