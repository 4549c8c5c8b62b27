"""Quiz endpoints: staff authoring, the student attempt flow and results."""
from __future__ import annotations

from django.conf import settings
from django.db.models import Count
from django.shortcuts import get_object_or_404
from django.utils.decorators import method_decorator
from django.views.decorators.cache import cache_page
from rest_framework import generics, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from api.exceptions import AuthorizationError
from api.permissions import IsStaffRole, IsStudent, is_owner_or_admin
from . import engine
from .models import Question, Quiz
from .serializers import (
    AttemptResultSerializer,
    AttemptSerializer,
    AvailableQuizSerializer,
    QuestionSerializer,
    QuizDetailSerializer,
    QuizSerializer,
)


def _ensure_can_edit(user, quiz: Quiz) -> None:
    if not is_owner_or_admin(user, quiz.author_id):
        raise AuthorizationError("Only the quiz author or an admin may change this quiz.")


class QuizListCreateView(generics.ListCreateAPIView):
    permission_classes = [IsStaffRole]
    serializer_class = QuizSerializer
    search_fields = ["title", "description"]
    ordering_fields = ["created_at", "deadline", "title"]

    def get_queryset(self):
        return Quiz.objects.select_related("author__profile").annotate(
            question_count=Count("questions", distinct=True),
            attempt_count=Count("attempts", distinct=True),
        )

    def create(self, request, *args, **kwargs):
        ser = self.get_serializer(data=request.data)
        ser.is_valid(raise_exception=True)
        quiz = ser.save(author=request.user)
        return Response({"message": "Quiz created.", "quiz": QuizSerializer(quiz).data}, status=status.HTTP_201_CREATED)


class QuizDetailView(generics.RetrieveUpdateDestroyAPIView):
    permission_classes = [IsStaffRole]
    queryset = Quiz.objects.select_related("author__profile").prefetch_related("questions")
    lookup_url_kwarg = "quiz_id"

    def get_serializer_class(self):
        return QuizDetailSerializer if self.request.method == "GET" else QuizSerializer

    def update(self, request, *args, **kwargs):
        quiz = self.get_object()
        _ensure_can_edit(request.user, quiz)
        ser = QuizSerializer(quiz, data=request.data, partial=kwargs.get("partial", False))
        ser.is_valid(raise_exception=True)
        quiz = ser.save()
        return Response({"message": "Quiz updated.", "quiz": QuizSerializer(quiz).data})

    def destroy(self, request, *args, **kwargs):
        quiz = self.get_object()
        _ensure_can_edit(request.user, quiz)
        quiz.delete()
        return Response({"message": "Quiz deleted."})


class QuestionListCreateView(APIView):
    permission_classes = [IsStaffRole]

    def get(self, request, quiz_id: int):
        quiz = engine.get_quiz(quiz_id)
        return Response(QuestionSerializer(quiz.questions.all(), many=True).data)

    def post(self, request, quiz_id: int):
        quiz = engine.get_quiz(quiz_id)
        _ensure_can_edit(request.user, quiz)
        ser = QuestionSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        question = ser.save(quiz=quiz)
        return Response(
            {"message": "Question added.", "question": QuestionSerializer(question).data},
            status=status.HTTP_201_CREATED,
        )


class QuestionDetailView(APIView):
    permission_classes = [IsStaffRole]

    def _question(self, quiz_id: int, question_id: int) -> Question:
        question = get_object_or_404(Question.objects.select_related("quiz"), pk=question_id, quiz_id=quiz_id)
        _ensure_can_edit(self.request.user, question.quiz)
        return question

    def _update(self, request, quiz_id: int, question_id: int, partial: bool):
        question = self._question(quiz_id, question_id)
        ser = QuestionSerializer(question, data=request.data, partial=partial)
        ser.is_valid(raise_exception=True)
        question = ser.save()
        return Response({"message": "Question updated.", "question": QuestionSerializer(question).data})

    def put(self, request, quiz_id: int, question_id: int):
        return self._update(request, quiz_id, question_id, partial=False)

    def patch(self, request, quiz_id: int, question_id: int):
        return self._update(request, quiz_id, question_id, partial=True)

    def delete(self, request, quiz_id: int, question_id: int):
        self._question(quiz_id, question_id).delete()
        return Response({"message": "Question deleted."})


@method_decorator(cache_page(settings.QUIZ_LIST_CACHE_SECONDS), name="get")
class AvailableQuizzesView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(AvailableQuizSerializer(engine.available_quizzes(), many=True).data)


class TakeQuizView(APIView):
    permission_classes = [IsStudent]

    def get(self, request, quiz_id: int):
        data = engine.start_or_resume(quiz_id, request.user)
        return Response({"message": "Quiz session started or resumed.", "data": data})


class AttemptView(APIView):
    permission_classes = [IsStudent]

    def post(self, request, quiz_id: int):
        answers = request.data.get("answers") if isinstance(request.data, dict) else None
        attempt = engine.submit_attempt(quiz_id, request.user, answers)
        return Response({"message": "Quiz answers submitted.", "attemptId": attempt.id})

    def get(self, request, quiz_id: int):
        attempt = engine.my_result(quiz_id, request.user)
        return Response({"message": "Quiz result retrieved.", "data": AttemptResultSerializer(attempt).data})


class SaveProgressView(APIView):
    permission_classes = [IsAuthenticated]

    def patch(self, request, attempt_id: int):
        engine.save_progress(attempt_id, request.user, request.data)
        return Response({"message": "Progress saved."})


class QuizResultsView(APIView):
    permission_classes = [IsStaffRole]

    def get(self, request, quiz_id: int):
        results = engine.quiz_results(quiz_id)
        return Response(
            {
                "message": "Quiz results retrieved.",
                "data": {
                    "quizTitle": results["quiz"].title,
                    "attempts": AttemptSerializer(results["attempts"], many=True).data,
                    "stats": results["stats"],
                },
            }
        )


class QuizSubmissionsView(APIView):
    permission_classes = [IsStaffRole]

    def get(self, request, quiz_id: int):
        attempts = engine.quiz_submissions(quiz_id)
        return Response({"message": "Quiz submissions retrieved.", "data": AttemptSerializer(attempts, many=True).data})


class AttemptDeleteView(APIView):
    permission_classes = [IsStaffRole]

    def delete(self, request, attempt_id: int):
        engine.delete_attempt(attempt_id)
        return Response({"message": "Attempt deleted; the student may retake the quiz."})
