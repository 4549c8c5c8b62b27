"""Serializers for quiz authoring and quiz results.

Wire names are camelCase; model fields are snake_case and mapped with
`source=`. Answer keys only appear in staff-facing serializers and in a
student's own completed result.
"""
from __future__ import annotations

from rest_framework import serializers

from accounts.serializers import UserSummarySerializer
from .grading import parse_keywords
from .models import Question, QuestionType, Quiz, QuizAnswer, QuizAttempt


class QuizSerializer(serializers.ModelSerializer):
    submissionStartDate = serializers.DateTimeField(source="submission_start_date", required=False, allow_null=True)
    author = UserSummarySerializer(read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    questionCount = serializers.SerializerMethodField()
    attemptCount = serializers.SerializerMethodField()

    class Meta:
        model = Quiz
        fields = (
            "id",
            "title",
            "description",
            "submissionStartDate",
            "deadline",
            "duration",
            "author",
            "createdAt",
            "questionCount",
            "attemptCount",
        )

    def get_questionCount(self, obj) -> int:
        count = getattr(obj, "question_count", None)
        return count if count is not None else obj.questions.count()

    def get_attemptCount(self, obj) -> int:
        count = getattr(obj, "attempt_count", None)
        return count if count is not None else obj.attempts.count()

    def validate_duration(self, value):
        if value is not None and value <= 0:
            raise serializers.ValidationError("Duration must be a positive number of minutes.")
        return value

    def validate(self, attrs):
        start = attrs.get("submission_start_date", getattr(self.instance, "submission_start_date", None))
        deadline = attrs.get("deadline", getattr(self.instance, "deadline", None))
        if start and deadline and start >= deadline:
            raise serializers.ValidationError({"submissionStartDate": "Submission start must be before the deadline."})
        return attrs


class QuestionSerializer(serializers.ModelSerializer):
    imageUrl = serializers.URLField(source="image_url", required=False, allow_null=True, allow_blank=True, max_length=500)
    correctAnswerKeywords = serializers.CharField(
        source="correct_answer_keywords", required=False, allow_null=True, allow_blank=True
    )
    options = serializers.JSONField(required=False)

    class Meta:
        model = Question
        fields = ("id", "quiz", "text", "type", "options", "imageUrl", "correctAnswerKeywords")
        read_only_fields = ("quiz",)

    def validate(self, attrs):
        qtype = attrs.get("type", getattr(self.instance, "type", QuestionType.MULTIPLE_CHOICE))
        if qtype == QuestionType.ESSAY:
            keywords = attrs.get("correct_answer_keywords", getattr(self.instance, "correct_answer_keywords", None))
            if not parse_keywords(keywords):
                raise serializers.ValidationError(
                    {"correctAnswerKeywords": "Essay questions need at least one answer keyword."}
                )
            attrs["options"] = []
            return attrs

        options = attrs.get("options", getattr(self.instance, "options", None))
        error = options_error(options)
        if error:
            raise serializers.ValidationError({"options": error})
        attrs["options"] = [{"text": opt["text"], "isCorrect": opt["isCorrect"]} for opt in options]
        attrs["correct_answer_keywords"] = None
        return attrs


def options_error(options) -> str | None:
    """Describe what is wrong with a choice question's options, if anything."""
    if not isinstance(options, list) or not options:
        return "Options must be a non-empty list."
    for opt in options:
        if not isinstance(opt, dict) or not isinstance(opt.get("text"), str) or not isinstance(opt.get("isCorrect"), bool):
            return 'Every option needs a string "text" and a boolean "isCorrect".'
    if not any(opt["isCorrect"] for opt in options):
        return "At least one option must be marked correct."
    return None


class QuizDetailSerializer(QuizSerializer):
    questions = QuestionSerializer(many=True, read_only=True)

    class Meta(QuizSerializer.Meta):
        fields = QuizSerializer.Meta.fields + ("questions",)


class AvailableQuizSerializer(serializers.ModelSerializer):
    submissionStartDate = serializers.DateTimeField(source="submission_start_date", read_only=True)
    authorName = serializers.CharField(source="author.profile.name", read_only=True)
    questionCount = serializers.IntegerField(source="question_count", read_only=True)

    class Meta:
        model = Quiz
        fields = ("id", "title", "description", "submissionStartDate", "deadline", "duration", "authorName", "questionCount")


class AttemptSerializer(serializers.ModelSerializer):
    student = UserSummarySerializer(read_only=True)
    quizId = serializers.IntegerField(source="quiz_id", read_only=True)
    timeLeftInSeconds = serializers.IntegerField(source="time_left_in_seconds", read_only=True)
    violationCount = serializers.IntegerField(source="violation_count", read_only=True)
    startedAt = serializers.DateTimeField(source="started_at", read_only=True)
    submittedAt = serializers.DateTimeField(source="submitted_at", read_only=True)

    class Meta:
        model = QuizAttempt
        fields = (
            "id",
            "quizId",
            "student",
            "status",
            "score",
            "timeLeftInSeconds",
            "violationCount",
            "startedAt",
            "submittedAt",
        )


class AnswerResultSerializer(serializers.ModelSerializer):
    questionId = serializers.IntegerField(source="question_id", read_only=True)
    selectedOptionIndex = serializers.IntegerField(source="selected_option_index", read_only=True)
    answerText = serializers.CharField(source="answer_text", read_only=True)
    isCorrect = serializers.BooleanField(source="is_correct", read_only=True)
    question = QuestionSerializer(read_only=True)

    class Meta:
        model = QuizAnswer
        fields = ("id", "questionId", "selectedOptionIndex", "answerText", "isCorrect", "question")


class AttemptResultSerializer(AttemptSerializer):
    quiz = serializers.SerializerMethodField()
    answers = AnswerResultSerializer(many=True, read_only=True)

    class Meta(AttemptSerializer.Meta):
        fields = AttemptSerializer.Meta.fields + ("quiz", "answers")

    def get_quiz(self, obj) -> dict:
        return {"title": obj.quiz.title, "description": obj.quiz.description, "deadline": obj.quiz.deadline}
