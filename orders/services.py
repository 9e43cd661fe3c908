"""Order assembly: checkout validation and order placement.

Checkout turns the caller's cart and form values into an ``OrderRecord``,
writes it to the record store and clears the cart. Validation runs first and
stops at the first failing rule; nothing is written unless every rule passes.
"""

import logging
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from cart.store import CartStore
from common.choices import OrderStatus, PaymentMethod
from django.conf import settings
from django.core.cache import cache
from django.utils import timezone
from locations.geometry import Coordinate
from records.store import RecordStore, RecordStoreError, get_record_store, join_path

from .records import DeliveryDetails, OrderLine, OrderRecord, PaymentDetails

logger = logging.getLogger("foodhub.orders")

MSG_LOGIN_REQUIRED = "Please log in to place an order"
MSG_EMPTY_CART = "Your cart is empty"
MSG_LOCATION_REQUIRED = "Please select a delivery location on the map"
MSG_PHONE_REQUIRED = "Please enter your phone number"
MSG_CARD_DETAILS_REQUIRED = "Please fill in all card details"
MSG_GCASH_ACCOUNT_REQUIRED = "Please enter your GCash account number"
MSG_MAYA_ACCOUNT_REQUIRED = "Please enter your Maya account number"
MSG_PAYMENT_METHOD_INVALID = "Please choose a payment method"
MSG_ORDER_FAILED = "Failed to place order"
MSG_ORDER_PLACED = "Order placed successfully!"
MSG_IN_PROGRESS = "Your order is already being placed"


class CheckoutError(Exception):
    """Base class for checkout failures."""

    code = "checkout_error"

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code


class CheckoutValidationError(CheckoutError):
    """Checkout input is incomplete; the form stays editable."""

    code = "invalid"


class SubmissionInProgress(CheckoutError):
    """Another submission for the same user has not finished yet."""

    code = "in_progress"


class OrderSubmissionFailed(CheckoutError):
    """The record store rejected the order write; the cart is kept."""

    code = "order_failed"


@dataclass
class DeliveryForm:
    address: str = ""
    phone_number: str = ""
    instructions: str = ""
    coordinates: Optional[Coordinate] = None


@dataclass
class PaymentForm:
    method: str = PaymentMethod.CASH_ON_DELIVERY
    account_number: str = ""
    card_number: str = ""
    expiry_date: str = ""
    cvv: str = ""


@dataclass(frozen=True)
class CheckoutResult:
    order: OrderRecord
    message: str
    redirect_url: str
    redirect_delay_seconds: int


def _blank(value: Optional[str]) -> bool:
    return not (value or "").strip()


def validate_checkout(*, user_id, cart: CartStore, delivery: DeliveryForm, payment: PaymentForm) -> None:
    """Raise CheckoutValidationError for the first rule the input breaks."""

    if user_id in (None, ""):
        raise CheckoutValidationError(MSG_LOGIN_REQUIRED, "login_required")
    if cart.is_empty():
        raise CheckoutValidationError(MSG_EMPTY_CART, "empty_cart")
    if delivery.coordinates is None or _blank(delivery.address):
        raise CheckoutValidationError(MSG_LOCATION_REQUIRED, "location_required")
    if _blank(delivery.phone_number):
        raise CheckoutValidationError(MSG_PHONE_REQUIRED, "phone_required")

    method = payment.method
    if method == PaymentMethod.CARD:
        if _blank(payment.card_number) or _blank(payment.expiry_date) or _blank(payment.cvv):
            raise CheckoutValidationError(MSG_CARD_DETAILS_REQUIRED, "card_details_required")
    elif method == PaymentMethod.GCASH:
        if _blank(payment.account_number):
            raise CheckoutValidationError(MSG_GCASH_ACCOUNT_REQUIRED, "account_number_required")
    elif method == PaymentMethod.MAYA:
        if _blank(payment.account_number):
            raise CheckoutValidationError(MSG_MAYA_ACCOUNT_REQUIRED, "account_number_required")
    elif method != PaymentMethod.CASH_ON_DELIVERY:
        raise CheckoutValidationError(MSG_PAYMENT_METHOD_INVALID, "payment_method_invalid")


def new_order_id() -> str:
    return uuid.uuid4().hex


def orders_path(user_id) -> str:
    return join_path("orders", user_id)


def order_path(user_id, order_id) -> str:
    return join_path("orders", user_id, order_id)


def _payment_details(payment: PaymentForm) -> PaymentDetails:
    method = str(payment.method)
    if method == PaymentMethod.CARD:
        digits = "".join(ch for ch in payment.card_number if ch.isdigit())
        return PaymentDetails(method=method, card_last4=digits[-4:], expiry_date=payment.expiry_date.strip())
    if method in (PaymentMethod.GCASH, PaymentMethod.MAYA):
        return PaymentDetails(method=method, account_number=payment.account_number.strip())
    return PaymentDetails(method=method)


def build_order_record(
    *,
    cart: CartStore,
    delivery: DeliveryForm,
    payment: PaymentForm,
    now=None,
    order_id: Optional[str] = None,
) -> OrderRecord:
    """Snapshot the cart and form values into a new order record."""

    created_at = now or timezone.now()
    eta_minutes = getattr(settings, "ORDER_ESTIMATED_DELIVERY_MINUTES", 30)
    items = tuple(
        OrderLine(
            id=line.id,
            name=line.name,
            restaurant_name=line.restaurant_name,
            restaurant_slug=line.restaurant_slug,
            unit_price=line.unit_price,
            image=line.image,
            quantity=line.quantity,
        )
        for line in cart.items
    )
    return OrderRecord(
        order_id=order_id or new_order_id(),
        items=items,
        total_price=cart.total_price(),
        delivery=DeliveryDetails(
            address=delivery.address.strip(),
            phone_number=delivery.phone_number.strip(),
            instructions=(delivery.instructions or "").strip(),
            coordinates=delivery.coordinates,
        ),
        payment=_payment_details(payment),
        status=OrderStatus.PREPARING.value,
        created_at=created_at,
        estimated_delivery_time=created_at + timedelta(minutes=eta_minutes),
    )


@contextmanager
def submission_guard(user_id):
    """Hold the per-user in-flight flag for the duration of one submission."""

    key = f"checkout:inflight:{user_id}"
    ttl = getattr(settings, "CHECKOUT_INFLIGHT_TTL_SECONDS", 30)
    if not cache.add(key, True, timeout=ttl):
        raise SubmissionInProgress(MSG_IN_PROGRESS)
    try:
        yield
    finally:
        cache.delete(key)


def place_order(
    *,
    user_id,
    cart: CartStore,
    delivery: DeliveryForm,
    payment: PaymentForm,
    store: Optional[RecordStore] = None,
    now=None,
) -> CheckoutResult:
    """Validate, write the order, then clear the cart.

    Raises CheckoutValidationError, SubmissionInProgress or
    OrderSubmissionFailed. On any failure the cart is left untouched.
    """

    validate_checkout(user_id=user_id, cart=cart, delivery=delivery, payment=payment)
    store = store or get_record_store()
    with submission_guard(user_id):
        record = build_order_record(cart=cart, delivery=delivery, payment=payment, now=now)
        try:
            store.write(order_path(user_id, record.order_id), record.to_dict())
        except RecordStoreError as exc:
            logger.exception(
                "order.place_failed",
                extra={"event": "order.place_failed", "user_id": user_id, "order_id": record.order_id},
            )
            raise OrderSubmissionFailed(MSG_ORDER_FAILED) from exc
        cart.clear()

    logger.info(
        "order_placed",
        extra={
            "event": "order_placed",
            "user_id": user_id,
            "order_id": record.order_id,
            "items": len(record.items),
            "total": str(record.total_price.decimal),
            "payment_method": record.payment.method,
        },
    )
    return CheckoutResult(
        order=record,
        message=MSG_ORDER_PLACED,
        redirect_url=getattr(settings, "CHECKOUT_REDIRECT_URL", "/orders"),
        redirect_delay_seconds=getattr(settings, "CHECKOUT_REDIRECT_DELAY_SECONDS", 2),
    )
