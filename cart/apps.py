"""Django app configuration for the Cart app."""

from django.apps import AppConfig


class CartConfig(AppConfig):
    """Per-user cart kept in a signed cookie."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "cart"
