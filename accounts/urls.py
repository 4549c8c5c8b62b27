from django.urls import path

from . import views

auth_urlpatterns = [
    path("login", views.LoginView.as_view(), name="auth-login"),
    path("me", views.MeView.as_view(), name="auth-me"),
    path("change-password", views.ChangePasswordView.as_view(), name="auth-change-password"),
]

user_urlpatterns = [
    path("", views.UserListView.as_view(), name="user-list"),
    path("add", views.AddUserView.as_view(), name="user-add"),
    path("profile", views.ProfileView.as_view(), name="user-profile"),
    path("<int:user_id>/role", views.UserRoleView.as_view(), name="user-role"),
    path("<int:user_id>", views.UserDetailView.as_view(), name="user-detail"),
]
