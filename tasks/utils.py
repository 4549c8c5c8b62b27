from __future__ import annotations

import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction
from django.utils import timezone

from accounts.models import display_name
from api.exceptions import ConflictError, ValidationError
from .models import Submission, Task, validate_submission_file

logger = logging.getLogger(__name__)


def submit_task(task: Task, student, upload, *, now=None) -> Submission:
    """Store a student's single submission for `task`.

    Raises ValidationError outside the submission window or for a rejected
    file, ConflictError when the student already submitted.
    """
    if upload is None:
        raise ValidationError("A submission file is required.")
    error = task.window_error(now)
    if error:
        raise ValidationError(error)
    if Submission.objects.filter(task=task, student=student).exists():
        raise ConflictError("You have already submitted this task.")
    try:
        validate_submission_file(upload)
    except DjangoValidationError as exc:
        raise ValidationError(exc.messages[0]) from exc
    try:
        with transaction.atomic():
            submission = Submission.objects.create(task=task, student=student, file=upload)
    except IntegrityError as exc:
        raise ConflictError("You have already submitted this task.") from exc
    logger.info("User %s submitted task %s", student.pk, task.pk)
    return submission


def grade_submission(submission: Submission, grade: int, comment: str | None = None) -> Submission:
    submission.grade = grade
    if comment is not None:
        submission.comment = comment
    submission.graded_at = timezone.now()
    submission.save(update_fields=["grade", "comment", "graded_at"])
    return submission


def remove_submission_file(submission: Submission, actor) -> Submission:
    """Delete the stored file but keep the row, noting who removed it."""
    if not submission.file:
        raise ValidationError("This submission has no file or it was already removed.")
    name = submission.file.name
    storage = submission.file.storage
    found = storage.exists(name)
    if found:
        storage.delete(name)
    else:
        logger.warning("Submission %s file %s was already missing from storage", submission.pk, name)
    stamp = timezone.now().isoformat()
    note = f"[File removed by {display_name(actor)} at {stamp}]" if found else (
        f"[File was missing from storage; reference cleared by {display_name(actor)} at {stamp}]"
    )
    submission.file = None
    submission.comment = f"{submission.comment or ''} {note}".strip()
    submission.save(update_fields=["file", "comment"])
    return submission


@transaction.atomic
def delete_task(task: Task) -> int:
    """Delete a task together with its submissions and their stored files."""
    task_id = task.pk
    removed = 0
    for submission in task.submissions.exclude(file="").exclude(file__isnull=True):
        submission.file.delete(save=False)
        removed += 1
    task.delete()
    logger.info("Task %s deleted with %s stored file(s)", task_id, removed)
    return removed
