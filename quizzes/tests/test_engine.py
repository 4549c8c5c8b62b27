import random
from datetime import timedelta

import pytest
from django.utils import timezone

from api.exceptions import AuthorizationError, NotFoundError, ValidationError
from quizzes import engine
from quizzes.models import AttemptStatus, Question, QuestionType, Quiz, QuizAnswer, QuizAttempt


def make_quiz(author, *, questions=3, duration=10, **kwargs):
    now = timezone.now()
    kwargs.setdefault("submission_start_date", now - timedelta(hours=1))
    kwargs.setdefault("deadline", now + timedelta(days=1))
    quiz = Quiz.objects.create(author=author, title="Capitals", duration=duration, **kwargs)
    for i in range(questions):
        Question.objects.create(
            quiz=quiz,
            text=f"Q{i}",
            type=QuestionType.MULTIPLE_CHOICE,
            options=[{"text": "right", "isCorrect": True}, {"text": "wrong", "isCorrect": False}],
        )
    return quiz


def answers_for(quiz, index=0):
    return [{"questionId": q.id, "selectedOptionIndex": index} for q in quiz.questions.all()]


@pytest.mark.django_db
def test_start_creates_single_attempt_with_full_timer(mentor, student):
    quiz = make_quiz(mentor)
    data = engine.start_or_resume(quiz.id, student)
    attempt = QuizAttempt.objects.get(quiz=quiz, student=student)
    assert data["attempt"]["id"] == attempt.id
    assert data["attempt"]["status"] == AttemptStatus.IN_PROGRESS
    assert data["attempt"]["timeLeftInSeconds"] == 600
    assert data["attempt"]["violationCount"] == 0
    assert sorted(q["id"] for q in data["questions"]) == sorted(quiz.questions.values_list("id", flat=True))


@pytest.mark.security
@pytest.mark.django_db
def test_questions_are_sanitized(mentor, student):
    quiz = make_quiz(mentor, questions=1)
    Question.objects.create(quiz=quiz, text="Essay", type=QuestionType.ESSAY, correct_answer_keywords="secret")
    data = engine.start_or_resume(quiz.id, student)
    for question in data["questions"]:
        assert "correctAnswerKeywords" not in question
        assert all(set(opt) == {"text"} for opt in question["options"])


@pytest.mark.django_db
def test_resume_keeps_question_order(mentor, student):
    quiz = make_quiz(mentor, questions=6)
    first = engine.start_or_resume(quiz.id, student, rng=random.Random(3))
    second = engine.start_or_resume(quiz.id, student, rng=random.Random(99))
    assert [q["id"] for q in first["questions"]] == [q["id"] for q in second["questions"]]
    assert QuizAttempt.objects.filter(quiz=quiz, student=student).count() == 1


@pytest.mark.django_db
def test_deleted_question_is_skipped_and_new_one_appended(mentor, student):
    quiz = make_quiz(mentor, questions=3)
    first = [q["id"] for q in engine.start_or_resume(quiz.id, student)["questions"]]
    Question.objects.filter(pk=first[0]).delete()
    added = Question.objects.create(quiz=quiz, text="New", options=[{"text": "a", "isCorrect": True}])
    again = [q["id"] for q in engine.start_or_resume(quiz.id, student)["questions"]]
    assert again == first[1:] + [added.id]


@pytest.mark.django_db
def test_create_attempt_recovers_from_duplicate(mentor, student):
    quiz = make_quiz(mentor)
    existing = QuizAttempt.objects.create(quiz=quiz, student=student, time_left_in_seconds=42)
    attempt = engine._create_attempt(quiz, student)
    assert attempt.pk == existing.pk
    assert attempt.time_left_in_seconds == 42
    assert QuizAttempt.objects.filter(quiz=quiz, student=student).count() == 1


@pytest.mark.django_db
def test_concurrent_start_reuses_the_winning_attempt(mentor, student, monkeypatch):
    quiz = make_quiz(mentor, questions=6)
    first = engine.start_or_resume(quiz.id, student, rng=random.Random(1))

    # The second request looks up before the first one's row is visible
    real_filter = QuizAttempt.objects.filter
    misses = []

    def stale_filter(*args, **kwargs):
        if not misses:
            misses.append(kwargs)
            return QuizAttempt.objects.none()
        return real_filter(*args, **kwargs)

    monkeypatch.setattr(QuizAttempt.objects, "filter", stale_filter)
    second = engine.start_or_resume(quiz.id, student, rng=random.Random(2))

    assert len(misses) == 1
    assert second["attempt"]["id"] == first["attempt"]["id"]
    assert second["attempt"]["progress"]["questionOrder"] == first["attempt"]["progress"]["questionOrder"]
    assert [q["id"] for q in second["questions"]] == [q["id"] for q in first["questions"]]
    assert QuizAttempt.objects.filter(quiz=quiz, student=student).count() == 1


@pytest.mark.django_db
def test_start_outside_window_is_forbidden(mentor, student):
    now = timezone.now()
    upcoming = make_quiz(mentor, submission_start_date=now + timedelta(hours=1), deadline=now + timedelta(days=1))
    closed = make_quiz(mentor, submission_start_date=now - timedelta(days=2), deadline=now - timedelta(days=1))
    with pytest.raises(AuthorizationError):
        engine.start_or_resume(upcoming.id, student)
    with pytest.raises(AuthorizationError):
        engine.start_or_resume(closed.id, student)
    assert not QuizAttempt.objects.exists()


@pytest.mark.django_db
def test_start_unknown_quiz_is_not_found(student):
    with pytest.raises(NotFoundError):
        engine.start_or_resume(9999, student)


@pytest.mark.django_db
def test_start_after_completion_is_forbidden(mentor, student):
    quiz = make_quiz(mentor)
    engine.start_or_resume(quiz.id, student)
    engine.submit_attempt(quiz.id, student, answers_for(quiz))
    with pytest.raises(AuthorizationError):
        engine.start_or_resume(quiz.id, student)


@pytest.mark.django_db
def test_untimed_quiz_has_no_timer(mentor, student):
    quiz = make_quiz(mentor, duration=None)
    data = engine.start_or_resume(quiz.id, student)
    assert data["attempt"]["timeLeftInSeconds"] is None


@pytest.mark.django_db
def test_zero_duration_is_timed_not_untimed(mentor):
    assert make_quiz(mentor, duration=0, questions=0).duration_seconds == 0
    assert make_quiz(mentor, duration=None, questions=0).duration_seconds is None


@pytest.mark.django_db
def test_save_progress_persists_answers_and_keeps_order(mentor, student):
    quiz = make_quiz(mentor)
    data = engine.start_or_resume(quiz.id, student)
    order = [q["id"] for q in data["questions"]]
    qid = order[0]
    engine.save_progress(
        data["attempt"]["id"],
        student,
        {
            "progress": {
                "answers": {str(qid): {"isAnswered": True, "selectedOptionIndex": 1}},
                "questionOrder": list(reversed(order)),
            },
            "timeLeftInSeconds": 321.7,
            "violationCount": 2,
        },
    )
    attempt = QuizAttempt.objects.get(pk=data["attempt"]["id"])
    assert attempt.time_left_in_seconds == 321
    assert attempt.violation_count == 2
    assert attempt.progress["questionOrder"] == order
    assert attempt.progress["answers"][str(qid)]["selectedOptionIndex"] == 1


@pytest.mark.django_db
def test_save_progress_null_values_keep_stored(mentor, student):
    quiz = make_quiz(mentor)
    attempt_id = engine.start_or_resume(quiz.id, student)["attempt"]["id"]
    QuizAttempt.objects.filter(pk=attempt_id).update(violation_count=4, time_left_in_seconds=100)
    engine.save_progress(attempt_id, student, {"progress": {"answers": {}}, "timeLeftInSeconds": None})
    attempt = QuizAttempt.objects.get(pk=attempt_id)
    assert attempt.violation_count == 4
    assert attempt.time_left_in_seconds == 100


@pytest.mark.django_db
def test_save_progress_is_idempotent(mentor, student):
    quiz = make_quiz(mentor)
    attempt_id = engine.start_or_resume(quiz.id, student)["attempt"]["id"]
    qid = quiz.questions.first().id
    payload = {
        "progress": {"answers": {str(qid): {"isAnswered": True, "selectedOptionIndex": 0, "answerText": None}}},
        "timeLeftInSeconds": 300,
        "violationCount": 1,
    }

    snapshots = []
    for _ in range(2):
        engine.save_progress(attempt_id, student, payload)
        attempt = QuizAttempt.objects.get(pk=attempt_id)
        snapshots.append((attempt.progress, attempt.time_left_in_seconds, attempt.violation_count))

    assert snapshots[0] == snapshots[1]
    assert snapshots[0][1:] == (300, 1)


@pytest.mark.django_db
def test_save_progress_rejects_non_ascii_digit_key(mentor, student):
    quiz = make_quiz(mentor)
    attempt_id = engine.start_or_resume(quiz.id, student)["attempt"]["id"]
    with pytest.raises(ValidationError):
        engine.save_progress(attempt_id, student, {"progress": {"answers": {"²": {"isAnswered": True}}}})
    assert QuizAttempt.objects.get(pk=attempt_id).progress["answers"] == {}


@pytest.mark.django_db
def test_save_progress_rejects_out_of_range_values(mentor, student):
    quiz = make_quiz(mentor, duration=10)
    attempt_id = engine.start_or_resume(quiz.id, student)["attempt"]["id"]
    qid = quiz.questions.first().id
    with pytest.raises(ValidationError):
        engine.save_progress(attempt_id, student, {"progress": {"answers": {}}, "timeLeftInSeconds": 601})
    with pytest.raises(ValidationError):
        engine.save_progress(
            attempt_id, student, {"progress": {"answers": {str(qid): {"isAnswered": True, "selectedOptionIndex": 2}}}}
        )
    with pytest.raises(ValidationError):
        engine.save_progress(attempt_id, student, {"answers": {}})
    assert QuizAttempt.objects.get(pk=attempt_id).time_left_in_seconds == 600


@pytest.mark.security
@pytest.mark.django_db
def test_save_progress_access_rules(mentor, student, other_student):
    quiz = make_quiz(mentor)
    attempt_id = engine.start_or_resume(quiz.id, student)["attempt"]["id"]
    payload = {"progress": {"answers": {}}}
    with pytest.raises(AuthorizationError):
        engine.save_progress(attempt_id, other_student, payload)
    with pytest.raises(AuthorizationError):
        engine.save_progress(123456, student, payload)
    engine.submit_attempt(quiz.id, student, [])
    with pytest.raises(AuthorizationError):
        engine.save_progress(attempt_id, student, payload)


@pytest.mark.django_db
def test_submit_grades_and_completes(mentor, student):
    quiz = make_quiz(mentor, questions=3)
    engine.start_or_resume(quiz.id, student)
    answers = answers_for(quiz)
    answers[0]["selectedOptionIndex"] = 1
    attempt = engine.submit_attempt(quiz.id, student, answers)
    attempt.refresh_from_db()
    assert attempt.status == AttemptStatus.COMPLETED
    assert attempt.score == 66.67
    assert attempt.submitted_at is not None
    assert QuizAnswer.objects.filter(attempt=attempt).count() == 3
    assert QuizAnswer.objects.filter(attempt=attempt, is_correct=True).count() == 2


@pytest.mark.django_db
def test_submit_ignores_unmatched_question_keys(mentor, student):
    quiz = make_quiz(mentor)
    engine.start_or_resume(quiz.id, student)
    extra = [{"questionId": "²", "selectedOptionIndex": 1}, {"questionId": 999999, "selectedOptionIndex": 1}]
    attempt = engine.submit_attempt(quiz.id, student, answers_for(quiz) + extra)
    assert attempt.score == 100.0
    assert QuizAnswer.objects.filter(attempt=attempt).count() == 3


@pytest.mark.django_db
def test_submit_twice_is_not_found(mentor, student):
    quiz = make_quiz(mentor)
    engine.start_or_resume(quiz.id, student)
    engine.submit_attempt(quiz.id, student, answers_for(quiz))
    with pytest.raises(NotFoundError):
        engine.submit_attempt(quiz.id, student, answers_for(quiz, index=1))
    assert QuizAttempt.objects.get(quiz=quiz, student=student).score == 100.0


@pytest.mark.django_db
def test_submit_without_attempt_is_not_found(mentor, student):
    quiz = make_quiz(mentor)
    with pytest.raises(NotFoundError):
        engine.submit_attempt(quiz.id, student, answers_for(quiz))


@pytest.mark.django_db
def test_submit_rejects_malformed_answers(mentor, student):
    quiz = make_quiz(mentor)
    engine.start_or_resume(quiz.id, student)
    with pytest.raises(ValidationError):
        engine.submit_attempt(quiz.id, student, None)
    with pytest.raises(ValidationError):
        engine.submit_attempt(quiz.id, student, ["nope"])
    assert QuizAttempt.objects.get(quiz=quiz, student=student).status == AttemptStatus.IN_PROGRESS


@pytest.mark.django_db
def test_submit_on_empty_quiz_scores_zero(mentor, student):
    quiz = make_quiz(mentor, questions=0)
    engine.start_or_resume(quiz.id, student)
    attempt = engine.submit_attempt(quiz.id, student, [])
    assert attempt.score == 0.0
    assert attempt.status == AttemptStatus.COMPLETED


@pytest.mark.django_db
def test_delete_attempt_allows_retake(mentor, student):
    quiz = make_quiz(mentor)
    attempt_id = engine.start_or_resume(quiz.id, student)["attempt"]["id"]
    engine.submit_attempt(quiz.id, student, answers_for(quiz))
    engine.delete_attempt(attempt_id)
    assert not QuizAnswer.objects.exists()
    data = engine.start_or_resume(quiz.id, student)
    assert data["attempt"]["id"] != attempt_id
    with pytest.raises(NotFoundError):
        engine.delete_attempt(attempt_id)


@pytest.mark.django_db
def test_quiz_results_rank_completed_attempts(mentor, student, other_student):
    quiz = make_quiz(mentor, questions=2)
    for user, index in ((student, 1), (other_student, 0)):
        engine.start_or_resume(quiz.id, user)
        engine.submit_attempt(quiz.id, user, answers_for(quiz, index=index))
    results = engine.quiz_results(quiz.id)
    assert [a.student_id for a in results["attempts"]] == [other_student.id, student.id]
    assert results["stats"] == {"participantCount": 2, "averageScore": 50.0}


@pytest.mark.django_db
def test_available_quizzes_filters_window(mentor):
    now = timezone.now()
    open_quiz = make_quiz(mentor, questions=2)
    make_quiz(mentor, submission_start_date=now + timedelta(hours=1))
    make_quiz(mentor, submission_start_date=None, deadline=now - timedelta(minutes=1))
    listed = list(engine.available_quizzes(now))
    assert [q.id for q in listed] == [open_quiz.id]
    assert listed[0].question_count == 2
