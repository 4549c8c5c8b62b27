from django.contrib import admin

from .models import Question, Quiz, QuizAnswer, QuizAttempt


class QuestionInline(admin.StackedInline):
    model = Question
    extra = 0


@admin.register(Quiz)
class QuizAdmin(admin.ModelAdmin):
    list_display = ("title", "author", "submission_start_date", "deadline", "duration")
    search_fields = ("title",)
    inlines = [QuestionInline]


@admin.register(QuizAttempt)
class QuizAttemptAdmin(admin.ModelAdmin):
    list_display = ("quiz", "student", "status", "score", "submitted_at")
    list_filter = ("status",)


admin.site.register(QuizAnswer)
