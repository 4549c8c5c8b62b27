"""Bearer token authentication.

Wraps DRF's `TokenAuthentication` so clients send
`Authorization: Bearer <key>`. Browser clients that keep the key in a
`token` cookie are accepted too. Keys older than `AUTH_TOKEN_TTL_HOURS`
are deleted and rejected.
"""
from __future__ import annotations

from datetime import timedelta

from django.conf import settings
from django.utils import timezone
from rest_framework import exceptions
from rest_framework.authentication import TokenAuthentication, get_authorization_header
from rest_framework.authtoken.models import Token


TOKEN_COOKIE = "token"


def token_expired(token: Token) -> bool:
    ttl = int(getattr(settings, "AUTH_TOKEN_TTL_HOURS", 0) or 0)
    if ttl <= 0:
        return False
    return token.created < timezone.now() - timedelta(hours=ttl)


def issue_token(user) -> Token:
    """Return a live token for `user`, rotating an expired one."""
    token, created = Token.objects.get_or_create(user=user)
    if not created and token_expired(token):
        token.delete()
        token = Token.objects.create(user=user)
    return token


class BearerTokenAuthentication(TokenAuthentication):
    keyword = "Bearer"

    def authenticate(self, request):
        if get_authorization_header(request):
            return super().authenticate(request)
        key = request.COOKIES.get(TOKEN_COOKIE)
        if key:
            return self.authenticate_credentials(key)
        return None

    def authenticate_credentials(self, key):
        user, token = super().authenticate_credentials(key)
        if token_expired(token):
            token.delete()
            raise exceptions.AuthenticationFailed("Token has expired. Please log in again.")
        return user, token
