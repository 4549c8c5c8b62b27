from django.apps import AppConfig


class ApiConfig(AppConfig):
    """Shared REST plumbing: error envelope, role permissions and stats."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "api"
    verbose_name = "LMS API"
