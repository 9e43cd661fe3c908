"""Order records as stored under ``orders/<userId>/<orderId>``.

An ``OrderRecord`` is built once at checkout and never modified by this
service afterwards. Field names on the wire are camelCase to match the
documents other clients of the record store read.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from common.choices import PaymentMethod
from common.money import Money
from locations.geometry import Coordinate


def parse_timestamp(value: str) -> datetime:
    text = str(value)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_timestamp(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class OrderLine:
    id: str
    name: str
    restaurant_name: str
    restaurant_slug: str
    unit_price: Money
    image: str
    quantity: int

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "restaurant": self.restaurant_name,
            "restaurantSlug": self.restaurant_slug,
            "price": self.unit_price.format(),
            "unitAmount": self.unit_price.amount,
            "currency": self.unit_price.currency,
            "image": self.image,
            "quantity": self.quantity,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "OrderLine":
        if "unitAmount" in data:
            price = Money(int(data["unitAmount"]), str(data.get("currency") or "PHP"))
        else:
            price = Money.parse(str(data.get("price", "0")))
        return cls(
            id=str(data.get("id", "")),
            name=str(data.get("name", "")),
            restaurant_name=str(data.get("restaurant", "")),
            restaurant_slug=str(data.get("restaurantSlug", "")),
            unit_price=price,
            image=str(data.get("image", "")),
            quantity=int(data.get("quantity", 1)),
        )


@dataclass(frozen=True)
class DeliveryDetails:
    address: str
    phone_number: str
    coordinates: Coordinate
    instructions: str = ""

    def to_dict(self) -> dict:
        return {
            "address": self.address,
            "phoneNumber": self.phone_number,
            "instructions": self.instructions,
            "coordinates": self.coordinates.as_list(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "DeliveryDetails":
        return cls(
            address=str(data.get("address", "")),
            phone_number=str(data.get("phoneNumber", "")),
            instructions=str(data.get("instructions", "")),
            coordinates=Coordinate.from_value(data.get("coordinates")),
        )


@dataclass(frozen=True)
class PaymentDetails:
    """Payment method and the non-secret fields captured for it.

    Card payments keep only the last four digits and the expiry date.
    """

    method: str
    account_number: str = ""
    card_last4: str = ""
    expiry_date: str = ""

    def to_dict(self) -> dict:
        data = {"method": self.method}
        if self.method in (PaymentMethod.GCASH, PaymentMethod.MAYA):
            data["accountNumber"] = self.account_number
        elif self.method == PaymentMethod.CARD:
            data["cardLast4"] = self.card_last4
            data["expiryDate"] = self.expiry_date
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "PaymentDetails":
        return cls(
            method=str(data.get("method", "")),
            account_number=str(data.get("accountNumber", "")),
            card_last4=str(data.get("cardLast4", "")),
            expiry_date=str(data.get("expiryDate", "")),
        )


@dataclass(frozen=True)
class OrderRecord:
    order_id: str
    items: tuple[OrderLine, ...]
    total_price: Money
    delivery: DeliveryDetails
    payment: PaymentDetails
    status: str
    created_at: datetime
    estimated_delivery_time: Optional[datetime]
    current_location: Optional[Coordinate] = field(default=None)

    def to_dict(self) -> dict:
        data = {
            "items": [line.to_dict() for line in self.items],
            "totalPrice": str(self.total_price.decimal),
            "totalAmount": self.total_price.amount,
            "currency": self.total_price.currency,
            "deliveryDetails": self.delivery.to_dict(),
            "paymentDetails": self.payment.to_dict(),
            "status": self.status,
            "createdAt": format_timestamp(self.created_at),
        }
        if self.estimated_delivery_time is not None:
            data["estimatedDeliveryTime"] = format_timestamp(self.estimated_delivery_time)
        if self.current_location is not None:
            data["currentLocation"] = self.current_location.as_list()
        return data

    @classmethod
    def from_dict(cls, order_id: str, data: dict) -> "OrderRecord":
        """Build a record from a stored document.

        Raises ValueError (or KeyError/TypeError) for malformed documents.
        """
        items = tuple(OrderLine.from_dict(entry) for entry in data.get("items") or [])
        currency = str(data.get("currency") or (items[0].unit_price.currency if items else "PHP"))
        if "totalAmount" in data:
            total = Money(int(data["totalAmount"]), currency)
        else:
            total = Money.parse(str(data.get("totalPrice", "0")), currency)
        current = data.get("currentLocation")
        eta = data.get("estimatedDeliveryTime")
        return cls(
            order_id=str(order_id),
            items=items,
            total_price=total,
            delivery=DeliveryDetails.from_dict(data.get("deliveryDetails") or {}),
            payment=PaymentDetails.from_dict(data.get("paymentDetails") or {}),
            status=str(data.get("status", "")),
            created_at=parse_timestamp(data["createdAt"]),
            estimated_delivery_time=parse_timestamp(eta) if eta else None,
            current_location=Coordinate.from_value(current) if current else None,
        )
