from django.apps import AppConfig


class RankingsConfig(AppConfig):
    """Student rankings and the system settings that gate them."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "rankings"
