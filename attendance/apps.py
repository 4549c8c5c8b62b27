from django.apps import AppConfig


class AttendanceConfig(AppConfig):
    """Daily attendance, recaps and spreadsheet exports."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "attendance"
