"""Error taxonomy and the DRF exception handler.

Every error leaves the API as `{"message": ...}` with an optional
`errors` mapping for field-level details. Domain code raises the classes
below; store-level uniqueness violations that escape a view become 409 and
anything unexpected is logged and rendered as a generic 500.
"""
from __future__ import annotations

import logging

from django.core.exceptions import PermissionDenied
from django.db import IntegrityError
from django.db.models import ProtectedError
from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


class ValidationError(exceptions.APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid input."
    default_code = "invalid"


class AuthenticationError(exceptions.APIException):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Authentication credentials were not provided or are invalid."
    default_code = "not_authenticated"


class AuthorizationError(exceptions.APIException):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "You do not have permission to perform this action."
    default_code = "forbidden"


class NotFoundError(exceptions.APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found."
    default_code = "not_found"


class ConflictError(exceptions.APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Conflict with the current state of the resource."
    default_code = "conflict"


class InternalError(exceptions.APIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Internal server error."
    default_code = "internal"


def _first_message(detail) -> str:
    if isinstance(detail, list) and detail:
        return _first_message(detail[0])
    if isinstance(detail, dict) and detail:
        return _first_message(next(iter(detail.values())))
    return str(detail)


def exception_handler(exc, context):
    """Render errors in the `{message, errors?}` envelope."""
    if isinstance(exc, ProtectedError):
        exc = ConflictError("The resource is still referenced by other records.")
    elif isinstance(exc, IntegrityError):
        exc = ConflictError("The request conflicts with an existing record.")

    response = drf_exception_handler(exc, context)
    if response is None:
        view = context.get("view")
        logger.error("Unhandled error in %s", view.__class__.__name__ if view else "view", exc_info=exc)
        return Response({"message": InternalError.default_detail}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    detail = getattr(exc, "detail", None)
    if isinstance(exc, (Http404, PermissionDenied)) or detail is None:
        detail = response.data.get("detail", "") if isinstance(response.data, dict) else response.data
    body = {"message": _first_message(detail)}
    if isinstance(detail, (dict, list)):
        body["errors"] = detail
    response.data = body
    return response
