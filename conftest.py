import logging

import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from accounts.authentication import issue_token
from accounts.models import Role
from accounts.utils import create_user


@pytest.fixture(autouse=True)
def silence_django_request_logger():
    """Reduce noise from expected 4xx in passing tests.

    Many tests intentionally exercise 400/403/404 paths. Django logs these
    at WARNING via 'django.request'. Lower that logger to ERROR during
    tests to avoid clutter.
    """
    logger = logging.getLogger("django.request")
    old = logger.level
    logger.setLevel(logging.ERROR)
    try:
        yield
    finally:
        logger.setLevel(old)


@pytest.fixture(autouse=True)
def clear_cache():
    # The available-quizzes response is cached per URL.
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def admin_user(db):
    return create_user("admin@ex.com", "secret123", name="Ada Admin", role=Role.ADMIN)


@pytest.fixture
def mentor(db):
    return create_user("mentor@ex.com", "secret123", name="Mo Mentor", role=Role.MENTOR)


@pytest.fixture
def student(db):
    return create_user("student@ex.com", "secret123", name="Sam Student", role=Role.STUDENT)


@pytest.fixture
def other_student(db):
    return create_user("other@ex.com", "secret123", name="Olive Other", role=Role.STUDENT)


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def client_for(db):
    """Return an APIClient that sends `user`'s bearer token."""

    def _make(user):
        c = APIClient()
        c.credentials(HTTP_AUTHORIZATION=f"Bearer {issue_token(user).key}")
        return c

    return _make
