from django.apps import AppConfig


class AccountsConfig(AppConfig):
    """Users, roles and bearer-token login."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "accounts"

    def ready(self) -> None:  # pragma: no cover (import-time hook)
        # Every new User gets a STUDENT profile; see signals.py
        from . import signals  # noqa: F401
