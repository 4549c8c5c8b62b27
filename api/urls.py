"""API routes for the Eduvate LMS backend.

Mounts every app's REST endpoints under /api/ and exposes the OpenAPI
schema with interactive documentation.
"""
from django.urls import include, path
from drf_spectacular.views import (
    SpectacularAPIView,
    SpectacularSwaggerView,
    SpectacularRedocView,
)

from accounts.urls import auth_urlpatterns, user_urlpatterns
from . import views


stats_urlpatterns = [
    path("", views.dashboard_stats, name="stats-dashboard"),
    path("my-stats", views.my_stats, name="stats-mine"),
    path("detailed", views.detailed_stats, name="stats-detailed"),
]

urlpatterns = [
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),
    path("redoc/", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
    path("api/auth/", include(auth_urlpatterns)),
    path("api/users/", include(user_urlpatterns)),
    path("api/quizzes/", include("quizzes.urls")),
    path("api/tasks/", include("tasks.urls")),
    path("api/attendance/", include("attendance.urls")),
    path("api/materials/", include("materials.urls")),
    path("api/rankings/", include("rankings.urls")),
    path("api/stats/", include(stats_urlpatterns)),
]
