"""Task endpoints: authoring, file submission and grading."""
from __future__ import annotations

from django.db.models import Count
from django.shortcuts import get_object_or_404
from rest_framework import generics, status
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.models import Role, role_of
from api.exceptions import AuthorizationError, NotFoundError
from api.permissions import IsStaffRole, IsStudent, is_owner_or_admin
from . import utils
from .models import Submission, Task
from .serializers import GradeSerializer, MySubmissionSerializer, SubmissionSerializer, TaskSerializer


def _ensure_can_edit(user, task: Task) -> None:
    if not is_owner_or_admin(user, task.author_id):
        raise AuthorizationError("Only the task author or an admin may change this task.")


class TaskListCreateView(generics.ListCreateAPIView):
    serializer_class = TaskSerializer
    search_fields = ["title", "description"]
    ordering_fields = ["created_at", "deadline", "title"]

    def get_permissions(self):
        if self.request.method == "POST":
            return [IsStaffRole()]
        return [IsAuthenticated()]

    def get_queryset(self):
        return Task.objects.select_related("author__profile").annotate(submission_count=Count("submissions"))

    def list(self, request, *args, **kwargs):
        tasks = list(self.filter_queryset(self.get_queryset()))
        data = TaskSerializer(tasks, many=True).data
        if role_of(request.user) == Role.STUDENT:
            mine = {s.task_id: s for s in Submission.objects.filter(student=request.user, task__in=tasks)}
            for task, row in zip(tasks, data):
                sub = mine.get(task.id)
                row["mySubmission"] = MySubmissionSerializer(sub).data if sub else None
        return Response(data)

    def create(self, request, *args, **kwargs):
        ser = self.get_serializer(data=request.data)
        ser.is_valid(raise_exception=True)
        task = ser.save(author=request.user)
        return Response({"message": "Task created.", "task": TaskSerializer(task).data}, status=status.HTTP_201_CREATED)


class TaskDetailView(generics.RetrieveUpdateDestroyAPIView):
    queryset = Task.objects.select_related("author__profile")
    serializer_class = TaskSerializer
    lookup_url_kwarg = "task_id"

    def get_permissions(self):
        if self.request.method == "GET":
            return [IsAuthenticated()]
        return [IsStaffRole()]

    def update(self, request, *args, **kwargs):
        task = self.get_object()
        _ensure_can_edit(request.user, task)
        ser = TaskSerializer(task, data=request.data, partial=kwargs.get("partial", False))
        ser.is_valid(raise_exception=True)
        task = ser.save()
        return Response({"message": "Task updated.", "task": TaskSerializer(task).data})

    def destroy(self, request, *args, **kwargs):
        task = self.get_object()
        _ensure_can_edit(request.user, task)
        utils.delete_task(task)
        return Response({"message": "Task and its submission files deleted."})


class SubmitTaskView(APIView):
    permission_classes = [IsStudent]
    parser_classes = [MultiPartParser, FormParser]

    def post(self, request, task_id: int):
        task = get_object_or_404(Task, pk=task_id)
        submission = utils.submit_task(task, request.user, request.FILES.get("submissionFile"))
        return Response(
            {"message": "Task submitted.", "submission": SubmissionSerializer(submission, context={"request": request}).data},
            status=status.HTTP_201_CREATED,
        )


class TaskSubmissionsView(APIView):
    permission_classes = [IsStaffRole]

    def get(self, request, task_id: int):
        task = get_object_or_404(Task, pk=task_id)
        subs = task.submissions.select_related("student__profile")
        return Response(SubmissionSerializer(subs, many=True, context={"request": request}).data)


class MySubmissionView(APIView):
    permission_classes = [IsStudent]

    def get(self, request, task_id: int):
        get_object_or_404(Task, pk=task_id)
        sub = Submission.objects.select_related("student__profile").filter(task_id=task_id, student=request.user).first()
        if sub is None:
            raise NotFoundError("You have not submitted this task yet.")
        return Response(SubmissionSerializer(sub, context={"request": request}).data)


class GradeSubmissionView(APIView):
    permission_classes = [IsStaffRole]
    parser_classes = [JSONParser, FormParser]

    def _grade(self, request, submission_id: int):
        submission = get_object_or_404(Submission.objects.select_related("student__profile"), pk=submission_id)
        ser = GradeSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        utils.grade_submission(submission, ser.validated_data["grade"], ser.validated_data.get("comment"))
        return Response(
            {"message": "Grade and comment saved.", "submission": SubmissionSerializer(submission, context={"request": request}).data}
        )

    def put(self, request, submission_id: int):
        return self._grade(request, submission_id)

    def patch(self, request, submission_id: int):
        return self._grade(request, submission_id)


class SubmissionFileView(APIView):
    permission_classes = [IsStaffRole]

    def delete(self, request, submission_id: int):
        submission = get_object_or_404(Submission.objects.select_related("student__profile"), pk=submission_id)
        utils.remove_submission_file(submission, request.user)
        return Response(
            {"message": "Submission file removed.", "submission": SubmissionSerializer(submission, context={"request": request}).data}
        )
