from django.apps import AppConfig


class QuizzesConfig(AppConfig):
    """Quizzes, questions and the attempt engine."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "quizzes"
