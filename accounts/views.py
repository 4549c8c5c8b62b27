"""Authentication and user-administration endpoints."""
from __future__ import annotations

import logging

from django.contrib.auth import authenticate
from django.contrib.auth.models import User
from django.shortcuts import get_object_or_404
from rest_framework import generics, status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle, ScopedRateThrottle
from rest_framework.views import APIView

from api.exceptions import AuthenticationError, ValidationError
from api.permissions import IsAdmin
from .authentication import issue_token
from .filters import UserFilter
from .serializers import (
    ChangePasswordSerializer,
    LoginSerializer,
    ProfileSerializer,
    RegisterSerializer,
    RoleSerializer,
    UserSerializer,
)
from .utils import create_user, normalise_email

logger = logging.getLogger(__name__)


class LoginView(APIView):
    permission_classes = [AllowAny]
    authentication_classes: list = []
    throttle_classes = [ScopedRateThrottle, AnonRateThrottle]
    throttle_scope = "login"

    def post(self, request):
        ser = LoginSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        email = normalise_email(ser.validated_data["email"])
        user = authenticate(request, username=email, password=ser.validated_data["password"])
        if user is None:
            logger.warning("Failed login for %s", email)
            raise AuthenticationError("Incorrect email or password.")
        token = issue_token(user)
        return Response({"message": "Login successful.", "token": token.key, "user": UserSerializer(user).data})


class MeView(APIView):
    def get(self, request):
        return Response(UserSerializer(request.user).data)


class ChangePasswordView(APIView):
    def put(self, request):
        ser = ChangePasswordSerializer(data=request.data, context={"user": request.user})
        ser.is_valid(raise_exception=True)
        user = request.user
        if not user.check_password(ser.validated_data["currentPassword"]):
            raise ValidationError("Current password is incorrect.")
        user.set_password(ser.validated_data["newPassword"])
        user.save(update_fields=["password"])
        return Response({"message": "Password changed successfully."})


class UserListView(generics.ListAPIView):
    queryset = User.objects.select_related("profile").order_by("-date_joined", "-id")
    serializer_class = UserSerializer
    permission_classes = [IsAdmin]
    filterset_class = UserFilter
    search_fields = ["email", "profile__name"]
    ordering_fields = ["date_joined", "email", "id"]

    def list(self, request, *args, **kwargs):
        qs = self.filter_queryset(self.get_queryset())
        return Response({"message": "Users retrieved.", "data": self.get_serializer(qs, many=True).data})


class AddUserView(APIView):
    permission_classes = [IsAdmin]

    def post(self, request):
        ser = RegisterSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        user = create_user(**ser.validated_data)
        logger.info("User %s created with role %s", user.email, user.profile.role)
        return Response({"message": "User registered.", "user": UserSerializer(user).data}, status=status.HTTP_201_CREATED)


class UserRoleView(APIView):
    permission_classes = [IsAdmin]

    def put(self, request, user_id: int):
        ser = RoleSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        if user_id == request.user.id:
            raise ValidationError("Admins cannot change their own role.")
        user = get_object_or_404(User.objects.select_related("profile"), pk=user_id)
        user.profile.role = ser.validated_data["role"]
        user.profile.save(update_fields=["role", "updated_at"])
        return Response({"message": "Role updated.", "data": UserSerializer(user).data})


class UserDetailView(APIView):
    permission_classes = [IsAdmin]

    def delete(self, request, user_id: int):
        if user_id == request.user.id:
            raise ValidationError("Admins cannot delete their own account.")
        user = get_object_or_404(User, pk=user_id)
        # ProtectedError (authored quizzes, tasks, materials) is rendered as 409
        user.delete()
        return Response({"message": "User deleted."})


class ProfileView(APIView):
    permission_classes = [IsAuthenticated]

    def put(self, request):
        ser = ProfileSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        profile = request.user.profile
        profile.name = ser.validated_data["name"].strip()
        profile.save(update_fields=["name", "updated_at"])
        return Response({"message": "Profile updated.", "user": UserSerializer(request.user).data})
