from django.contrib import admin

from .models import Submission, Task


@admin.register(Task)
class TaskAdmin(admin.ModelAdmin):
    list_display = ("title", "author", "submission_start_date", "deadline")
    search_fields = ("title",)


@admin.register(Submission)
class SubmissionAdmin(admin.ModelAdmin):
    list_display = ("task", "student", "grade", "submitted_at")
    list_filter = ("task",)
