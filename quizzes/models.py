"""Quiz models: quizzes, questions, attempts and graded answers.

A student gets exactly one `QuizAttempt` per quiz. The attempt moves from
IN_PROGRESS to COMPLETED once, on submit; staff may delete it to allow a
retake. Question options are stored as a JSON list of
`{"text": str, "isCorrect": bool}`.
"""
from __future__ import annotations

from django.conf import settings
from django.db import models
from django.utils import timezone


class QuestionType(models.TextChoices):
    MULTIPLE_CHOICE = "MULTIPLE_CHOICE", "Multiple choice"
    TRUE_FALSE = "TRUE_FALSE", "True/false"
    ESSAY = "ESSAY", "Essay"


class AttemptStatus(models.TextChoices):
    IN_PROGRESS = "IN_PROGRESS", "In progress"
    COMPLETED = "COMPLETED", "Completed"


class Quiz(models.Model):
    author = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="quizzes")
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    submission_start_date = models.DateTimeField(null=True, blank=True)
    deadline = models.DateTimeField()
    # Minutes allowed once an attempt starts; null means untimed
    duration = models.PositiveIntegerField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def is_active(self, now=None) -> bool:
        """True when `now` lies inside [submission_start_date, deadline]."""
        now = now or timezone.now()
        if self.submission_start_date and now < self.submission_start_date:
            return False
        return now <= self.deadline

    @property
    def duration_seconds(self) -> int | None:
        return self.duration * 60 if self.duration is not None else None

    def __str__(self) -> str:  # pragma: no cover
        return self.title


class Question(models.Model):
    quiz = models.ForeignKey(Quiz, on_delete=models.CASCADE, related_name="questions")
    text = models.TextField()
    type = models.CharField(max_length=20, choices=QuestionType.choices, default=QuestionType.MULTIPLE_CHOICE)
    options = models.JSONField(default=list, blank=True)
    image_url = models.URLField(max_length=500, blank=True, null=True)
    correct_answer_keywords = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["id"]

    @property
    def option_count(self) -> int:
        return len(self.options) if isinstance(self.options, list) else 0

    def __str__(self) -> str:  # pragma: no cover
        return f"Q{self.id}: {self.text[:40]}"


class QuizAttempt(models.Model):
    quiz = models.ForeignKey(Quiz, on_delete=models.CASCADE, related_name="attempts")
    student = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="quiz_attempts")
    status = models.CharField(max_length=16, choices=AttemptStatus.choices, default=AttemptStatus.IN_PROGRESS)
    score = models.FloatField(default=0.0)
    time_left_in_seconds = models.PositiveIntegerField(null=True, blank=True)
    violation_count = models.PositiveIntegerField(default=0)
    progress = models.JSONField(default=dict, blank=True)
    started_at = models.DateTimeField(auto_now_add=True)
    submitted_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        unique_together = ("quiz", "student")
        ordering = ["-score", "submitted_at", "id"]

    @property
    def is_completed(self) -> bool:
        return self.status == AttemptStatus.COMPLETED

    def __str__(self) -> str:  # pragma: no cover
        return f"Attempt<{self.quiz_id}:{self.student_id}:{self.status}>"


class QuizAnswer(models.Model):
    attempt = models.ForeignKey(QuizAttempt, on_delete=models.CASCADE, related_name="answers")
    question = models.ForeignKey(Question, on_delete=models.CASCADE, related_name="answers")
    selected_option_index = models.IntegerField(null=True, blank=True)
    answer_text = models.TextField(null=True, blank=True)
    is_correct = models.BooleanField(default=False)

    class Meta:
        unique_together = ("attempt", "question")
        ordering = ["question_id"]

    def __str__(self) -> str:  # pragma: no cover
        return f"Answer<{self.attempt_id}:{self.question_id}:{self.is_correct}>"
