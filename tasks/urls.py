from django.urls import path

from . import views

urlpatterns = [
    path("", views.TaskListCreateView.as_view(), name="task-list"),
    path("<int:task_id>", views.TaskDetailView.as_view(), name="task-detail"),
    path("<int:task_id>/submit", views.SubmitTaskView.as_view(), name="task-submit"),
    path("<int:task_id>/submissions", views.TaskSubmissionsView.as_view(), name="task-submissions"),
    path("<int:task_id>/my-submission", views.MySubmissionView.as_view(), name="task-my-submission"),
    path("submissions/<int:submission_id>/grade", views.GradeSubmissionView.as_view(), name="submission-grade"),
    path("submissions/<int:submission_id>/file", views.SubmissionFileView.as_view(), name="submission-file"),
]
