"""Accounts models: user profile and roles.

Defines a `UserProfile` associated one-to-one with Django's `User`,
capturing the platform role (admin/mentor/student) and the display name.
The profile is created automatically on user creation.
"""
from __future__ import annotations

from django.conf import settings
from django.db import models


class Role(models.TextChoices):
    """Platform roles checked once, at the permission boundary.

    ADMIN and MENTOR are the staff roles; everything a student may do is
    gated on STUDENT.
    """

    ADMIN = "ADMIN", "Admin"
    MENTOR = "MENTOR", "Mentor"
    STUDENT = "STUDENT", "Student"


STAFF_ROLES = frozenset({Role.ADMIN, Role.MENTOR})


def role_of(user) -> str | None:
    """Return the role of an authenticated user, or None."""
    if not getattr(user, "is_authenticated", False):
        return None
    profile = getattr(user, "profile", None)
    return getattr(profile, "role", None)


def is_staff_role(user) -> bool:
    return role_of(user) in STAFF_ROLES


def display_name(user) -> str:
    """Profile name, falling back to the e-mail address."""
    profile = getattr(user, "profile", None)
    return getattr(profile, "name", "") or user.email or user.username


class UserProfile(models.Model):
    """Profile linked to a Django auth user.

    - `role`: authorisation gate for the API permission classes
    - `name`: display name shown in rankings, recaps and exports
    """

    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="profile")
    role = models.CharField(max_length=16, choices=Role.choices, default=Role.STUDENT)
    name = models.CharField(max_length=200, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:  # pragma: no cover (string repr convenience)
        return f"Profile<{self.user.email}:{self.role}>"
