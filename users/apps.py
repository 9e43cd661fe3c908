"""Django app configuration for the users app."""

from django.apps import AppConfig


class UsersConfig(AppConfig):
    """Accounts use Django's built-in user; profiles live in the record store."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "users"
