from django.apps import AppConfig


class MaterialsConfig(AppConfig):
    """App configuration for link-based learning materials."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "materials"
