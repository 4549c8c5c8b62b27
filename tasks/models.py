"""Task models and upload validators.

A `Task` is a file-upload assignment open between `submission_start_date`
and `deadline`. Each student submits at most one file per task; staff
grade it 0-100 with an optional comment. Uploads are limited to
`SUBMISSION_MAX_BYTES` and the `SUBMISSION_ALLOWED_MIME` whitelist.
"""
from __future__ import annotations

import mimetypes

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone


def validate_submission_file(file) -> None:
    """Validate file size and MIME type.

    The browser-declared content type is used when present; otherwise the
    type is guessed from the filename.
    """
    size = getattr(file, "size", None)
    limit = settings.SUBMISSION_MAX_BYTES
    if size is not None and size > limit:
        raise ValidationError(f"File too large (max {limit // (1024 * 1024)} MB)")
    mime = getattr(file, "content_type", None) or mimetypes.guess_type(getattr(file, "name", ""))[0]
    if mime not in settings.SUBMISSION_ALLOWED_MIME:
        raise ValidationError("File type not allowed. Upload a PDF, ZIP, Office document or image.")


class Task(models.Model):
    author = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="tasks")
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    submission_start_date = models.DateTimeField()
    deadline = models.DateTimeField()
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def window_error(self, now=None) -> str | None:
        now = now or timezone.now()
        if now < self.submission_start_date:
            return "Submission for this task has not opened yet."
        if now > self.deadline:
            return "The submission deadline for this task has passed."
        return None

    def __str__(self) -> str:  # pragma: no cover
        return self.title


class Submission(models.Model):
    task = models.ForeignKey(Task, on_delete=models.CASCADE, related_name="submissions")
    student = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="submissions")
    file = models.FileField(upload_to="submissions/", blank=True, null=True, validators=[validate_submission_file])
    grade = models.PositiveSmallIntegerField(
        null=True, blank=True, validators=[MinValueValidator(0), MaxValueValidator(100)]
    )
    comment = models.TextField(blank=True, null=True)
    submitted_at = models.DateTimeField(auto_now_add=True)
    graded_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        unique_together = ("task", "student")
        ordering = ["-submitted_at", "-id"]

    def __str__(self) -> str:  # pragma: no cover
        return f"Submission<{self.task_id}:{self.student_id}>"
