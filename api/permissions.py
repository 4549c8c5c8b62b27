"""Role permissions for the REST API.

Roles are resolved once here; views declare which roles may enter and
never compare role strings themselves.
"""
from __future__ import annotations

from rest_framework.permissions import BasePermission

from accounts.models import Role, STAFF_ROLES, role_of


class HasRole(BasePermission):
    allowed_roles: frozenset = frozenset()
    message = "Your role is not allowed to perform this action."

    def has_permission(self, request, view):
        return role_of(request.user) in self.allowed_roles


class IsStaffRole(HasRole):
    allowed_roles = STAFF_ROLES
    message = "Only admins and mentors may perform this action."


class IsStudent(HasRole):
    allowed_roles = frozenset({Role.STUDENT})
    message = "Only students may perform this action."


class IsAdmin(HasRole):
    allowed_roles = frozenset({Role.ADMIN})
    message = "Only admins may perform this action."


def is_owner_or_admin(user, author_id) -> bool:
    """Authors may mutate their own content; admins may mutate anything."""
    return bool(user and user.is_authenticated and (author_id == user.id or role_of(user) == Role.ADMIN))
