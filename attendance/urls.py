from django.urls import path

from . import views

urlpatterns = [
    path("request-leave", views.RequestLeaveView.as_view(), name="attendance-request-leave"),
    path("mark", views.MarkAttendanceView.as_view(), name="attendance-mark"),
    path("recap", views.WeeklyRecapView.as_view(), name="attendance-recap"),
    path("recap/export", views.WeeklyRecapExportView.as_view(), name="attendance-recap-export"),
    path("daily-recap", views.DailyRecapView.as_view(), name="attendance-daily-recap"),
    path("student/<int:student_id>", views.StudentHistoryView.as_view(), name="attendance-student"),
    path("student/<int:student_id>/export", views.StudentHistoryExportView.as_view(), name="attendance-student-export"),
    path("qr-check-in", views.QrCheckInView.as_view(), name="attendance-qr-check-in"),
]
