"""Client cart state container.

The cart is an ordered list of lines, unique by item id. Every mutation
writes the full cart to a durable slot (or deletes the slot entry once the
cart is empty). Totals are recomputed from the lines on each read.
"""

import json
import logging
from dataclasses import asdict, dataclass, replace
from datetime import timedelta
from typing import Optional

from common.money import Money
from django.conf import settings

from .slots import DurableSlot

logger = logging.getLogger("foodhub.cart")


class CartError(Exception):
    """Raised for cart mutation failures."""


@dataclass(frozen=True)
class CartCandidate:
    """An item offered to the cart; quantity is decided by the cart."""

    id: str
    name: str
    restaurant_name: str
    restaurant_slug: str
    unit_price: Money
    image: str


@dataclass(frozen=True)
class CartLine:
    id: str
    name: str
    restaurant_name: str
    restaurant_slug: str
    unit_price: Money
    image: str
    quantity: int = 1

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity

    def to_dict(self) -> dict:
        data = asdict(self)
        data["unit_price"] = {"amount": self.unit_price.amount, "currency": self.unit_price.currency}
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "CartLine":
        price = data["unit_price"]
        quantity = int(data["quantity"])
        if quantity < 1:
            raise ValueError(f"Invalid quantity {quantity} for {data.get('id')}")
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            restaurant_name=str(data["restaurant_name"]),
            restaurant_slug=str(data.get("restaurant_slug", "")),
            unit_price=Money(int(price["amount"]), str(price["currency"])),
            image=str(data.get("image", "")),
            quantity=quantity,
        )


def cart_key_for(user_id) -> str:
    """Durable slot key holding ``user_id``'s cart."""

    prefix = getattr(settings, "CART_COOKIE_PREFIX", "cart_items")
    return f"{prefix}_{user_id}"


def cart_ttl() -> timedelta:
    return timedelta(days=getattr(settings, "CART_COOKIE_MAX_AGE_DAYS", 7))


class CartStore:
    def __init__(self, slot: DurableSlot, key: str, lines: Optional[list[CartLine]] = None):
        self.slot = slot
        self.key = key
        self._lines: list[CartLine] = list(lines or [])

    @classmethod
    def load(cls, slot: DurableSlot, key: str) -> "CartStore":
        """Rehydrate the cart saved under ``key``.

        Unreadable data is discarded: the slot entry is deleted and the cart
        starts empty.
        """
        try:
            raw = slot.get(key)
            if raw is None:
                return cls(slot, key)
            payload = json.loads(raw)
            if not isinstance(payload, list):
                raise ValueError("Cart payload is not a list")
            lines = [CartLine.from_dict(entry) for entry in payload]
            if len({line.id for line in lines}) != len(lines):
                raise ValueError("Duplicate item ids in saved cart")
        except (ValueError, KeyError, TypeError):
            logger.warning("cart.restore_failed", extra={"event": "cart.restore_failed", "key": key}, exc_info=True)
            slot.delete(key)
            return cls(slot, key)
        return cls(slot, key, lines)

    @property
    def items(self) -> tuple[CartLine, ...]:
        return tuple(self._lines)

    def is_empty(self) -> bool:
        return not self._lines

    def get(self, item_id: str) -> Optional[CartLine]:
        for line in self._lines:
            if line.id == item_id:
                return line
        return None

    def add_item(self, candidate: CartCandidate) -> CartLine:
        """Append ``candidate`` with quantity 1, or bump an existing line by 1."""

        for index, line in enumerate(self._lines):
            if line.id == candidate.id:
                updated = replace(line, quantity=line.quantity + 1)
                self._lines[index] = updated
                break
        else:
            updated = CartLine(
                id=candidate.id,
                name=candidate.name,
                restaurant_name=candidate.restaurant_name,
                restaurant_slug=candidate.restaurant_slug,
                unit_price=candidate.unit_price,
                image=candidate.image,
                quantity=1,
            )
            self._lines.append(updated)
        self._persist()
        logger.info(
            "cart.item_added",
            extra={"event": "cart.item_added", "key": self.key, "item_id": candidate.id, "quantity": updated.quantity},
        )
        return updated

    def remove_item(self, item_id: str) -> None:
        remaining = [line for line in self._lines if line.id != item_id]
        if len(remaining) == len(self._lines):
            return
        self._lines = remaining
        self._persist()
        logger.info("cart.item_removed", extra={"event": "cart.item_removed", "key": self.key, "item_id": item_id})

    def set_quantity(self, item_id: str, quantity: int) -> None:
        """Overwrite a line's quantity; anything below 1 removes the line."""

        if quantity < 1:
            self.remove_item(item_id)
            return
        for index, line in enumerate(self._lines):
            if line.id == item_id:
                self._lines[index] = replace(line, quantity=int(quantity))
                self._persist()
                logger.info(
                    "cart.item_updated",
                    extra={"event": "cart.item_updated", "key": self.key, "item_id": item_id, "quantity": quantity},
                )
                return

    def clear(self) -> None:
        self._lines = []
        self.slot.delete(self.key)
        logger.info("cart.cleared", extra={"event": "cart.cleared", "key": self.key})

    def total_item_count(self) -> int:
        return sum(line.quantity for line in self._lines)

    def total_price(self) -> Money:
        total = Money.zero(self._lines[0].unit_price.currency if self._lines else None)
        for line in self._lines:
            total = total + line.line_total
        return total

    def _persist(self) -> None:
        if not self._lines:
            self.slot.delete(self.key)
            return
        payload = json.dumps([line.to_dict() for line in self._lines], separators=(",", ":"))
        self.slot.set(self.key, payload, cart_ttl())
