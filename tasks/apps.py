from django.apps import AppConfig


class TasksConfig(AppConfig):
    """File-upload tasks and graded submissions."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "tasks"
