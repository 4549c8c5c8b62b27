from __future__ import annotations

from django.contrib.auth.models import User
from django.db import transaction

from api.exceptions import ConflictError, ValidationError
from .models import Role


def normalise_email(email: str) -> str:
    return (email or "").strip().lower()


@transaction.atomic
def create_user(email: str, password: str, name: str = "", role: str = Role.STUDENT) -> User:
    """Create a user whose username and e-mail are both `email`.

    Raises ConflictError when the address is taken and ValidationError on
    an unknown role.
    """
    email = normalise_email(email)
    if not email or not password:
        raise ValidationError("Email and password are required.")
    if role not in Role.values:
        raise ValidationError(f"Unknown role: {role}")
    if User.objects.filter(username=email).exists():
        raise ConflictError("A user with this email already exists.")
    user = User.objects.create_user(username=email, email=email, password=password)
    profile = user.profile
    profile.role = role
    profile.name = name or ""
    profile.save(update_fields=["role", "name", "updated_at"])
    return user
