"""Django app configuration for orders."""

from django.apps import AppConfig


class OrdersConfig(AppConfig):
    """Order placement and tracking backed by the record store."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "orders"
