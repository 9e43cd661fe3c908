"""Shared enumerations and choices used across apps."""

from django.db import models


class OrderStatus(models.TextChoices):
    """Lifecycle statuses for orders.

    Transitions happen outside this service; new values may appear in the
    record store at any time.
    """

    PREPARING = "preparing", "Preparing"
    ON_ROUTE = "on_route", "On the way"
    DELIVERED = "delivered", "Delivered"


class PaymentMethod(models.TextChoices):
    """Payment methods offered at checkout."""

    CASH_ON_DELIVERY = "cod", "Cash on Delivery"
    GCASH = "gcash", "GCash"
    MAYA = "maya", "Maya"
    CARD = "card", "Credit/Debit Card"
