from django.urls import path

from . import views

urlpatterns = [
    path("", views.QuizListCreateView.as_view(), name="quiz-list"),
    path("available", views.AvailableQuizzesView.as_view(), name="quiz-available"),
    path("attempts/<int:attempt_id>", views.AttemptDeleteView.as_view(), name="attempt-delete"),
    path("attempts/<int:attempt_id>/save-progress", views.SaveProgressView.as_view(), name="attempt-save-progress"),
    path("<int:quiz_id>", views.QuizDetailView.as_view(), name="quiz-detail"),
    path("<int:quiz_id>/questions", views.QuestionListCreateView.as_view(), name="question-list"),
    path("<int:quiz_id>/questions/<int:question_id>", views.QuestionDetailView.as_view(), name="question-detail"),
    path("<int:quiz_id>/take", views.TakeQuizView.as_view(), name="quiz-take"),
    path("<int:quiz_id>/attempt", views.AttemptView.as_view(), name="quiz-attempt"),
    path("<int:quiz_id>/results", views.QuizResultsView.as_view(), name="quiz-results"),
    path("<int:quiz_id>/submissions", views.QuizSubmissionsView.as_view(), name="quiz-submissions"),
]
