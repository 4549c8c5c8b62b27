"""Serializers for tasks and submissions."""
from __future__ import annotations

from rest_framework import serializers

from accounts.serializers import UserSummarySerializer
from .models import Submission, Task


class SubmissionSerializer(serializers.ModelSerializer):
    taskId = serializers.IntegerField(source="task_id", read_only=True)
    student = UserSummarySerializer(read_only=True)
    fileUrl = serializers.SerializerMethodField()
    submittedAt = serializers.DateTimeField(source="submitted_at", read_only=True)
    gradedAt = serializers.DateTimeField(source="graded_at", read_only=True)

    class Meta:
        model = Submission
        fields = ("id", "taskId", "student", "fileUrl", "grade", "comment", "submittedAt", "gradedAt")

    def get_fileUrl(self, obj) -> str | None:
        if not obj.file:
            return None
        request = self.context.get("request")
        return request.build_absolute_uri(obj.file.url) if request else obj.file.url


class MySubmissionSerializer(serializers.ModelSerializer):
    submittedAt = serializers.DateTimeField(source="submitted_at", read_only=True)

    class Meta:
        model = Submission
        fields = ("id", "grade", "submittedAt")


class TaskSerializer(serializers.ModelSerializer):
    submissionStartDate = serializers.DateTimeField(source="submission_start_date")
    author = UserSummarySerializer(read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    submissionCount = serializers.SerializerMethodField()

    class Meta:
        model = Task
        fields = ("id", "title", "description", "submissionStartDate", "deadline", "author", "createdAt", "submissionCount")

    def get_submissionCount(self, obj) -> int:
        count = getattr(obj, "submission_count", None)
        return count if count is not None else obj.submissions.count()

    def validate(self, attrs):
        start = attrs.get("submission_start_date", getattr(self.instance, "submission_start_date", None))
        deadline = attrs.get("deadline", getattr(self.instance, "deadline", None))
        if start and deadline and start >= deadline:
            raise serializers.ValidationError({"deadline": "The deadline must be after the submission start date."})
        return attrs


class GradeSerializer(serializers.Serializer):
    grade = serializers.IntegerField(min_value=0, max_value=100)
    comment = serializers.CharField(required=False, allow_blank=True, allow_null=True)
