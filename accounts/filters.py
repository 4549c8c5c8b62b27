"""django-filter filtersets for user administration."""
from __future__ import annotations

import django_filters
from django.contrib.auth.models import User

from .models import Role


class UserFilter(django_filters.FilterSet):
    role = django_filters.ChoiceFilter(field_name="profile__role", choices=Role.choices)

    class Meta:
        model = User
        fields = ["role"]
