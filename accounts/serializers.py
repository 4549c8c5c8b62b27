"""Serializers for authentication and user administration."""
from __future__ import annotations

from django.contrib.auth import password_validation
from django.contrib.auth.models import User
from rest_framework import serializers

from .models import Role


class UserSerializer(serializers.ModelSerializer):
    name = serializers.CharField(source="profile.name", read_only=True)
    role = serializers.CharField(source="profile.role", read_only=True)
    createdAt = serializers.DateTimeField(source="date_joined", read_only=True)

    class Meta:
        model = User
        fields = ("id", "email", "name", "role", "createdAt")


class UserSummarySerializer(serializers.ModelSerializer):
    """Compact user block embedded in other resources."""

    name = serializers.CharField(source="profile.name", read_only=True)

    class Meta:
        model = User
        fields = ("id", "name", "email")


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(trim_whitespace=False)


class ChangePasswordSerializer(serializers.Serializer):
    currentPassword = serializers.CharField(trim_whitespace=False)
    newPassword = serializers.CharField(trim_whitespace=False)

    def validate_newPassword(self, value: str) -> str:
        password_validation.validate_password(value, user=self.context.get("user"))
        return value


class RegisterSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(trim_whitespace=False)
    name = serializers.CharField(max_length=200, required=False, allow_blank=True, default="")
    role = serializers.ChoiceField(choices=Role.choices, required=False, default=Role.STUDENT)

    def validate_password(self, value: str) -> str:
        password_validation.validate_password(value)
        return value


class RoleSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=Role.choices)


class ProfileSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200, allow_blank=False)
