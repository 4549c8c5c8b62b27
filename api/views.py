"""Dashboard statistics endpoints."""
from __future__ import annotations

from django.contrib.auth.models import User
from django.db.models import Avg, Count
from django.utils import timezone
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from accounts.models import Role, is_staff_role
from quizzes.models import AttemptStatus, Quiz, QuizAttempt
from tasks.models import Submission, Task
from .permissions import IsStaffRole, IsStudent


def _avg(qs, field: str) -> float | None:
    value = qs.aggregate(v=Avg(field))["v"]
    return round(value, 2) if value is not None else None


@api_view(["GET"])
def dashboard_stats(request):
    """Role-aware counters for the landing dashboard."""
    user = request.user
    if is_staff_role(user):
        data = {"tasks": Task.objects.count(), "quizzes": Quiz.objects.count(), "users": User.objects.count()}
        return Response({"message": "Staff statistics retrieved.", "data": data})

    now = timezone.now()
    submitted = set(Submission.objects.filter(student=user).values_list("task_id", flat=True))
    available = Quiz.objects.filter(deadline__gte=now).exclude(attempts__student=user).count()
    data = {
        "activeTasks": Task.objects.exclude(id__in=submitted).count(),
        "availableQuizzes": available,
        "completedTasks": len(submitted),
    }
    return Response({"message": "Student statistics retrieved.", "data": data})


@api_view(["GET"])
@permission_classes([IsStudent])
def my_stats(request):
    submissions = Submission.objects.filter(student=request.user)
    attempts = QuizAttempt.objects.filter(student=request.user, status=AttemptStatus.COMPLETED)
    data = {
        "taskStats": {
            "completedCount": submissions.count(),
            "averageGrade": _avg(submissions.filter(grade__isnull=False), "grade"),
        },
        "quizStats": {
            "completedCount": attempts.count(),
            "averageScore": _avg(attempts, "score"),
        },
    }
    return Response({"message": "Personal statistics retrieved.", "data": data})


@api_view(["GET"])
@permission_classes([IsStaffRole])
def detailed_stats(request):
    user_stats = [
        {"role": row["profile__role"], "count": row["count"]}
        for row in User.objects.values("profile__role").annotate(count=Count("id")).order_by("profile__role")
        if row["profile__role"] in Role.values
    ]
    completed = QuizAttempt.objects.filter(status=AttemptStatus.COMPLETED)
    data = {
        "userStats": user_stats,
        "taskStats": {
            "totalTasks": Task.objects.count(),
            "totalSubmissions": Submission.objects.count(),
            "averageGrade": _avg(Submission.objects.filter(grade__isnull=False), "grade"),
        },
        "quizStats": {
            "totalQuizzes": Quiz.objects.count(),
            "totalAttempts": QuizAttempt.objects.count(),
            "averageScore": _avg(completed, "score"),
        },
    }
    return Response({"message": "Detailed statistics retrieved.", "data": data})
