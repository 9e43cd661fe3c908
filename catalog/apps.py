"""Django app configuration for the restaurant catalog."""

from django.apps import AppConfig


class CatalogConfig(AppConfig):
    """Static restaurants and menus; no database tables."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "catalog"
