"""Quiz attempt engine.

Owns the lifecycle of a student's single attempt at a quiz:

    NONE -> IN_PROGRESS -> COMPLETED (terminal)

- `start_or_resume` creates the attempt lazily (with a per-attempt
  shuffled question order) or resumes the stored one.
- `save_progress` autosaves answers, remaining time and violations while
  the attempt is IN_PROGRESS.
- `submit_attempt` grades the answers and is the only path to COMPLETED.

The (quiz, student) unique constraint is the guard against duplicate
attempts; status transitions are conditional updates so a write racing a
submit cannot reopen or overwrite a completed attempt.
"""
from __future__ import annotations

import logging
from typing import Any

from django.db import IntegrityError, transaction
from django.db.models import Count, Q
from django.utils import timezone

from api.exceptions import AuthorizationError, NotFoundError, ValidationError
from .grading import RawAnswer, grade_answers
from .models import AttemptStatus, Question, Quiz, QuizAnswer, QuizAttempt
from .progress import (
    AttemptProgress,
    parse_answers,
    parse_time_left,
    parse_violation_count,
    presentation_order,
    shuffle_question_order,
)

logger = logging.getLogger(__name__)


def get_quiz(quiz_id) -> Quiz:
    quiz = Quiz.objects.filter(pk=quiz_id).first()
    if quiz is None:
        raise NotFoundError("Quiz not found.")
    return quiz


def sanitize_question(question: Question) -> dict[str, Any]:
    """Student-facing view of a question: no answer key, no keywords."""
    options = question.options if isinstance(question.options, list) else []
    return {
        "id": question.id,
        "text": question.text,
        "type": question.type,
        "imageUrl": question.image_url,
        "options": [{"text": opt.get("text", "")} for opt in options if isinstance(opt, dict)],
    }


def _create_attempt(quiz: Quiz, student, rng=None) -> QuizAttempt:
    question_ids = list(quiz.questions.values_list("id", flat=True))
    progress = AttemptProgress(question_order=shuffle_question_order(question_ids, rng))
    try:
        with transaction.atomic():
            attempt = QuizAttempt.objects.create(
                quiz=quiz,
                student=student,
                status=AttemptStatus.IN_PROGRESS,
                score=0.0,
                time_left_in_seconds=quiz.duration_seconds,
                progress=progress.to_json(),
            )
    except IntegrityError:
        # Another request created the row first; use theirs.
        logger.info("Concurrent start on quiz %s by user %s; reusing existing attempt", quiz.pk, student.pk)
        return QuizAttempt.objects.get(quiz=quiz, student=student)
    logger.info("Attempt %s created for quiz %s by user %s", attempt.pk, quiz.pk, student.pk)
    return attempt


def start_or_resume(quiz_id, student, *, now=None, rng=None) -> dict[str, Any]:
    """Start a new attempt or resume the in-progress one.

    Returns the quiz metadata, the sanitized questions in the attempt's
    stored order and the attempt state.
    """
    quiz = get_quiz(quiz_id)
    if not quiz.is_active(now or timezone.now()):
        logger.warning("User %s tried to start inactive quiz %s", student.pk, quiz.pk)
        raise AuthorizationError("This quiz is not active or its deadline has passed.")

    attempt = QuizAttempt.objects.filter(quiz=quiz, student=student).first()
    if attempt is None:
        attempt = _create_attempt(quiz, student, rng)
    else:
        logger.info("Resuming attempt %s for user %s", attempt.pk, student.pk)
    if attempt.is_completed:
        raise AuthorizationError("You have already completed this quiz.")

    progress = AttemptProgress.from_json(attempt.progress)
    questions = {q.id: q for q in quiz.questions.all()}
    order = presentation_order(progress.question_order, questions.keys())

    return {
        "id": quiz.id,
        "title": quiz.title,
        "description": quiz.description,
        "duration": quiz.duration,
        "submissionStartDate": quiz.submission_start_date,
        "deadline": quiz.deadline,
        "questions": [sanitize_question(questions[qid]) for qid in order],
        "attempt": {
            "id": attempt.id,
            "status": attempt.status,
            "timeLeftInSeconds": attempt.time_left_in_seconds,
            "progress": progress.to_json(),
            "violationCount": attempt.violation_count,
        },
    }


def save_progress(attempt_id, student, payload: Any) -> QuizAttempt:
    """Persist autosaved progress for an in-progress attempt.

    `payload` is the request body: `progress` is required,
    `timeLeftInSeconds` and `violationCount` keep their stored values when
    absent or null. The stored question order always wins over the client's.
    """
    attempt = QuizAttempt.objects.select_related("quiz").filter(pk=attempt_id).first()
    if attempt is None or attempt.student_id != student.pk:
        raise AuthorizationError("Access denied.")
    if attempt.is_completed:
        raise AuthorizationError("This quiz has already been completed.")

    if not isinstance(payload, dict):
        raise ValidationError("Invalid progress format.")
    progress = payload.get("progress")
    if not isinstance(progress, dict) or "answers" not in progress:
        raise ValidationError("Invalid progress format.")

    questions = {q.id: q for q in attempt.quiz.questions.all()}
    answers = parse_answers(progress["answers"], questions)

    updates: dict[str, Any] = {}
    if payload.get("timeLeftInSeconds") is not None:
        updates["time_left_in_seconds"] = parse_time_left(payload["timeLeftInSeconds"], attempt.quiz.duration_seconds)
    if payload.get("violationCount") is not None:
        updates["violation_count"] = parse_violation_count(payload["violationCount"])

    stored = AttemptProgress.from_json(attempt.progress)
    updates["progress"] = AttemptProgress(question_order=stored.question_order, answers=answers).to_json()

    saved = QuizAttempt.objects.filter(pk=attempt.pk, status=AttemptStatus.IN_PROGRESS).update(**updates)
    if not saved:
        raise AuthorizationError("This quiz has already been completed.")
    for name, value in updates.items():
        setattr(attempt, name, value)
    return attempt


def submit_attempt(quiz_id, student, answers: Any, *, now=None) -> QuizAttempt:
    """Grade `answers` and complete the student's in-progress attempt.

    Answer rows are replaced wholesale and the status flips to COMPLETED
    in the same transaction.
    """
    if not isinstance(answers, list) or not all(isinstance(item, dict) for item in answers):
        raise ValidationError("Invalid answers format.")
    quiz = get_quiz(quiz_id)
    result = grade_answers(quiz.questions.all(), [RawAnswer.from_payload(item) for item in answers])
    submitted_at = now or timezone.now()

    with transaction.atomic():
        attempt = QuizAttempt.objects.filter(quiz=quiz, student=student, status=AttemptStatus.IN_PROGRESS).first()
        if attempt is None:
            raise NotFoundError("No active attempt for this quiz; it was not started or is already submitted.")
        flipped = QuizAttempt.objects.filter(pk=attempt.pk, status=AttemptStatus.IN_PROGRESS).update(
            status=AttemptStatus.COMPLETED,
            submitted_at=submitted_at,
            score=result.score,
        )
        if not flipped:
            raise NotFoundError("No active attempt for this quiz; it was not started or is already submitted.")
        QuizAnswer.objects.filter(attempt=attempt).delete()
        QuizAnswer.objects.bulk_create(
            [
                QuizAnswer(
                    attempt=attempt,
                    question_id=g.question_id,
                    selected_option_index=g.selected_option_index,
                    answer_text=g.answer_text,
                    is_correct=g.is_correct,
                )
                for g in result.graded
            ]
        )

    attempt.status = AttemptStatus.COMPLETED
    attempt.submitted_at = submitted_at
    attempt.score = result.score
    logger.info(
        "Attempt %s completed: %s/%s correct, score %.2f", attempt.pk, result.correct, result.total, result.score
    )
    return attempt


def delete_attempt(attempt_id) -> None:
    """Remove an attempt and its answers so the student may retake the quiz."""
    deleted, _ = QuizAttempt.objects.filter(pk=attempt_id).delete()
    if not deleted:
        raise NotFoundError("Attempt not found.")
    logger.info("Attempt %s deleted", attempt_id)


def my_result(quiz_id, student) -> QuizAttempt:
    attempt = (
        QuizAttempt.objects.select_related("quiz", "student__profile")
        .prefetch_related("answers__question")
        .filter(quiz_id=quiz_id, student=student, status=AttemptStatus.COMPLETED)
        .first()
    )
    if attempt is None:
        raise NotFoundError("You have not completed this quiz or no result was found.")
    return attempt


def quiz_results(quiz_id) -> dict[str, Any]:
    """Completed attempts ranked by score, earliest submission first on ties."""
    quiz = get_quiz(quiz_id)
    attempts = list(
        QuizAttempt.objects.select_related("student__profile")
        .filter(quiz=quiz, status=AttemptStatus.COMPLETED)
        .order_by("-score", "submitted_at", "id")
    )
    count = len(attempts)
    average = sum(a.score for a in attempts) / count if count else 0.0
    return {
        "quiz": quiz,
        "attempts": attempts,
        "stats": {"participantCount": count, "averageScore": average},
    }


def quiz_submissions(quiz_id) -> list[QuizAttempt]:
    quiz = get_quiz(quiz_id)
    return list(
        QuizAttempt.objects.select_related("student__profile").filter(quiz=quiz).order_by("-started_at", "-id")
    )


def available_quizzes(now=None):
    """Quizzes whose submission window contains `now`, nearest deadline first."""
    now = now or timezone.now()
    return (
        Quiz.objects.select_related("author__profile")
        .filter(deadline__gte=now)
        .filter(Q(submission_start_date__isnull=True) | Q(submission_start_date__lte=now))
        .annotate(question_count=Count("questions"))
        .order_by("deadline", "id")
    )
