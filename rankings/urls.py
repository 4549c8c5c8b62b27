from django.urls import path

from . import views

urlpatterns = [
    path("top-students", views.TopStudentsView.as_view(), name="ranking-top-students"),
    path("reveal", views.RevealRankingView.as_view(), name="ranking-reveal"),
    path("hide", views.HideRankingView.as_view(), name="ranking-hide"),
]
