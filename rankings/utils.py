"""Ranking aggregation.

A student's final score is the mean of two averages: the average grade
over their graded task submissions and the average score over their
completed quiz attempts. A missing side counts as 0.
"""
from __future__ import annotations

from typing import Any

from django.contrib.auth.models import User
from django.db.models import Avg

from accounts.models import Role, display_name
from quizzes.models import AttemptStatus, QuizAttempt
from tasks.models import Submission
from .models import SystemSetting

RANKING_VISIBILITY_KEY = "rankingVisibility"
TOP_LIMIT = 5


def is_ranking_revealed() -> bool:
    setting = SystemSetting.objects.filter(key=RANKING_VISIBILITY_KEY).first()
    value = setting.value if setting else None
    return bool(isinstance(value, dict) and value.get("isRevealed") is True)


def set_ranking_visibility(revealed: bool) -> SystemSetting:
    setting, _ = SystemSetting.objects.update_or_create(
        key=RANKING_VISIBILITY_KEY, defaults={"value": {"isRevealed": bool(revealed)}}
    )
    return setting


def compute_top_students(limit: int = TOP_LIMIT) -> list[dict[str, Any]]:
    """Rank every student by final score; ties go to name, then id."""
    task_avg = dict(
        Submission.objects.filter(grade__isnull=False)
        .order_by()
        .values("student_id")
        .annotate(avg=Avg("grade"))
        .values_list("student_id", "avg")
    )
    quiz_avg = dict(
        QuizAttempt.objects.filter(status=AttemptStatus.COMPLETED)
        .order_by()
        .values("student_id")
        .annotate(avg=Avg("score"))
        .values_list("student_id", "avg")
    )
    rows = []
    for student in User.objects.filter(profile__role=Role.STUDENT).select_related("profile"):
        avg_grade = float(task_avg.get(student.id) or 0.0)
        avg_score = float(quiz_avg.get(student.id) or 0.0)
        rows.append(
            {
                "id": student.id,
                "name": display_name(student),
                "email": student.email,
                "averageTaskGrade": round(avg_grade, 2),
                "averageQuizScore": round(avg_score, 2),
                "finalScore": round((avg_grade + avg_score) / 2, 2),
            }
        )
    rows.sort(key=lambda r: (-r["finalScore"], r["name"].lower(), r["id"]))
    return rows[:limit]


def top_students_for(user_role: str | None) -> dict[str, Any]:
    revealed = is_ranking_revealed()
    if user_role == Role.STUDENT and not revealed:
        return {"quizTitle": "Student ranking", "attempts": [], "isRevealed": False}
    return {"quizTitle": "Top students", "attempts": compute_top_students(), "isRevealed": revealed}
