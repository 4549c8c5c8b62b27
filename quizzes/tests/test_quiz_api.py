from datetime import timedelta

import pytest
from django.test import TestCase
from django.utils import timezone
from rest_framework.test import APIClient

from accounts.authentication import issue_token
from accounts.models import Role
from accounts.utils import create_user
from quizzes.models import AttemptStatus, Question, QuestionType, Quiz, QuizAttempt


def auth(user) -> APIClient:
    c = APIClient()
    c.credentials(HTTP_AUTHORIZATION=f"Bearer {issue_token(user).key}")
    return c


class QuizFlowTests(TestCase):
    """Mentor builds a quiz, a student takes it end to end."""

    def setUp(self):
        self.mentor = create_user("mentor@ex.com", "secret123", name="Mo", role=Role.MENTOR)
        self.student = create_user("student@ex.com", "secret123", name="Sam", role=Role.STUDENT)
        self.mc = auth(self.mentor)
        self.sc = auth(self.student)
        now = timezone.now()
        r = self.mc.post(
            "/api/quizzes/",
            {
                "title": "Geography",
                "description": "Capitals",
                "submissionStartDate": (now - timedelta(hours=1)).isoformat(),
                "deadline": (now + timedelta(days=1)).isoformat(),
                "duration": 10,
            },
            format="json",
        )
        self.assertEqual(r.status_code, 201, r.content)
        self.quiz_id = r.json()["quiz"]["id"]

    def add_question(self, payload):
        r = self.mc.post(f"/api/quizzes/{self.quiz_id}/questions", payload, format="json")
        self.assertEqual(r.status_code, 201, r.content)
        return r.json()["question"]["id"]

    def add_standard_questions(self):
        mcq = self.add_question(
            {
                "text": "Capital of France?",
                "type": "MULTIPLE_CHOICE",
                "options": [
                    {"text": "Berlin", "isCorrect": False},
                    {"text": "Paris", "isCorrect": True},
                    {"text": "Rome", "isCorrect": False},
                ],
            }
        )
        tf = self.add_question(
            {
                "text": "London is in England.",
                "type": "TRUE_FALSE",
                "options": [{"text": "True", "isCorrect": True}, {"text": "False", "isCorrect": False}],
            }
        )
        essay = self.add_question(
            {"text": "Name a European capital.", "type": "ESSAY", "correctAnswerKeywords": "paris,london"}
        )
        return mcq, tf, essay

    def test_full_attempt_scores_one_hundred(self):
        mcq, tf, essay = self.add_standard_questions()

        r = self.sc.get(f"/api/quizzes/{self.quiz_id}/take")
        self.assertEqual(r.status_code, 200, r.content)
        data = r.json()["data"]
        attempt_id = data["attempt"]["id"]
        self.assertEqual(data["attempt"]["timeLeftInSeconds"], 600)
        self.assertEqual(len(data["questions"]), 3)
        self.assertNotIn("isCorrect", str(data["questions"]))

        r = self.sc.patch(
            f"/api/quizzes/attempts/{attempt_id}/save-progress",
            {
                "progress": {"answers": {str(mcq): {"isAnswered": True, "selectedOptionIndex": 1}}},
                "timeLeftInSeconds": 500,
                "violationCount": 1,
            },
            format="json",
        )
        self.assertEqual(r.status_code, 200, r.content)

        resumed = self.sc.get(f"/api/quizzes/{self.quiz_id}/take").json()["data"]
        self.assertEqual(resumed["attempt"]["timeLeftInSeconds"], 500)
        self.assertEqual(resumed["attempt"]["violationCount"], 1)
        self.assertEqual([q["id"] for q in resumed["questions"]], [q["id"] for q in data["questions"]])

        r = self.sc.post(
            f"/api/quizzes/{self.quiz_id}/attempt",
            {
                "answers": [
                    {"questionId": mcq, "selectedOptionIndex": 1},
                    {"questionId": tf, "selectedOptionIndex": 0},
                    {"questionId": essay, "answerText": "I love Paris"},
                ]
            },
            format="json",
        )
        self.assertEqual(r.status_code, 200, r.content)
        self.assertEqual(r.json()["attemptId"], attempt_id)

        attempt = QuizAttempt.objects.get(pk=attempt_id)
        self.assertEqual(attempt.status, AttemptStatus.COMPLETED)
        self.assertEqual(attempt.score, 100.0)

        result = self.sc.get(f"/api/quizzes/{self.quiz_id}/attempt").json()["data"]
        self.assertEqual(result["score"], 100.0)
        self.assertEqual(len(result["answers"]), 3)
        self.assertTrue(all(a["isCorrect"] for a in result["answers"]))

        again = self.sc.post(f"/api/quizzes/{self.quiz_id}/attempt", {"answers": []}, format="json")
        self.assertEqual(again.status_code, 404)
        self.assertIn("message", again.json())

        retake = self.sc.get(f"/api/quizzes/{self.quiz_id}/take")
        self.assertEqual(retake.status_code, 403)

    def test_save_progress_rejects_bad_index_and_time(self):
        mcq, _, _ = self.add_standard_questions()
        attempt_id = self.sc.get(f"/api/quizzes/{self.quiz_id}/take").json()["data"]["attempt"]["id"]
        url = f"/api/quizzes/attempts/{attempt_id}/save-progress"

        bad_index = {"progress": {"answers": {str(mcq): {"isAnswered": True, "selectedOptionIndex": 3}}}}
        self.assertEqual(self.sc.patch(url, bad_index, format="json").status_code, 400)

        too_long = {"progress": {"answers": {}}, "timeLeftInSeconds": 601}
        self.assertEqual(self.sc.patch(url, too_long, format="json").status_code, 400)

        other = auth(create_user("x@ex.com", "secret123", role=Role.STUDENT))
        self.assertEqual(other.patch(url, {"progress": {"answers": {}}}, format="json").status_code, 403)

    def test_staff_cannot_take_and_students_cannot_author(self):
        self.assertEqual(self.mc.get(f"/api/quizzes/{self.quiz_id}/take").status_code, 403)
        r = self.sc.post("/api/quizzes/", {"title": "x", "deadline": timezone.now().isoformat()}, format="json")
        self.assertEqual(r.status_code, 403)

    def test_results_and_submissions_for_staff(self):
        mcq, tf, essay = self.add_standard_questions()
        self.sc.get(f"/api/quizzes/{self.quiz_id}/take")
        self.sc.post(
            f"/api/quizzes/{self.quiz_id}/attempt",
            {"answers": [{"questionId": mcq, "selectedOptionIndex": 1}]},
            format="json",
        )
        r = self.mc.get(f"/api/quizzes/{self.quiz_id}/results")
        self.assertEqual(r.status_code, 200)
        data = r.json()["data"]
        self.assertEqual(data["quizTitle"], "Geography")
        self.assertEqual(data["stats"]["participantCount"], 1)
        self.assertEqual(data["attempts"][0]["score"], 33.33)
        self.assertEqual(data["attempts"][0]["student"]["name"], "Sam")

        subs = self.mc.get(f"/api/quizzes/{self.quiz_id}/submissions").json()["data"]
        self.assertEqual(len(subs), 1)

        r = self.mc.delete(f"/api/quizzes/attempts/{subs[0]['id']}")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(self.sc.get(f"/api/quizzes/{self.quiz_id}/take").status_code, 200)

    def test_question_validation(self):
        url = f"/api/quizzes/{self.quiz_id}/questions"
        no_correct = {"text": "?", "type": "MULTIPLE_CHOICE", "options": [{"text": "a", "isCorrect": False}]}
        self.assertEqual(self.mc.post(url, no_correct, format="json").status_code, 400)
        no_keywords = {"text": "?", "type": "ESSAY", "correctAnswerKeywords": " , "}
        self.assertEqual(self.mc.post(url, no_keywords, format="json").status_code, 400)
        self.assertEqual(Question.objects.count(), 0)

    def test_quiz_validation(self):
        now = timezone.now()
        r = self.mc.post(
            "/api/quizzes/",
            {"title": "Bad", "submissionStartDate": now.isoformat(), "deadline": (now - timedelta(hours=1)).isoformat()},
            format="json",
        )
        self.assertEqual(r.status_code, 400)
        self.assertIn("errors", r.json())

    def test_only_author_or_admin_edits(self):
        other = auth(create_user("m2@ex.com", "secret123", role=Role.MENTOR))
        self.assertEqual(other.patch(f"/api/quizzes/{self.quiz_id}", {"title": "x"}, format="json").status_code, 403)
        admin = auth(create_user("a@ex.com", "secret123", role=Role.ADMIN))
        r = admin.patch(f"/api/quizzes/{self.quiz_id}", {"title": "Renamed"}, format="json")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(Quiz.objects.get(pk=self.quiz_id).title, "Renamed")
        self.assertEqual(self.mc.delete(f"/api/quizzes/{self.quiz_id}").status_code, 200)
        self.assertFalse(Quiz.objects.exists())


@pytest.mark.django_db
def test_available_lists_open_quizzes(mentor, student, client_for):
    now = timezone.now()
    open_quiz = Quiz.objects.create(author=mentor, title="Open", deadline=now + timedelta(days=1))
    Question.objects.create(quiz=open_quiz, text="?", type=QuestionType.ESSAY, correct_answer_keywords="x")
    Quiz.objects.create(author=mentor, title="Closed", deadline=now - timedelta(days=1))
    r = client_for(student).get("/api/quizzes/available")
    assert r.status_code == 200
    body = r.json()
    assert [q["title"] for q in body] == ["Open"]
    assert body[0]["questionCount"] == 1
    assert body[0]["authorName"] == mentor.profile.name


@pytest.mark.django_db
def test_quiz_endpoints_require_authentication(api_client):
    assert api_client.get("/api/quizzes/available").status_code == 401
    assert api_client.get("/api/quizzes/1/take").status_code == 401
