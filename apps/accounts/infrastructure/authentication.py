from __future__ import annotations

import logging

from django.conf import settings
from rest_framework import exceptions
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError

from apps.accounts.models import AccountProfile

logger = logging.getLogger("bondex.accounts")


class HeaderOrCookieJWTAuthentication(JWTAuthentication):
    """
    Accept the JWT from `Authorization: Bearer <token>` or the admin cookie.

    The header wins when both are present. Accounts whose profile status is
    not active are rejected with 401.
    """

    def authenticate(self, request):
        header = self.get_header(request)
        if header is not None:
            raw_token = self.get_raw_token(header)
        else:
            cookie_name = getattr(settings, "ADMIN_TOKEN_COOKIE", "adminToken")
            raw_token = request.COOKIES.get(cookie_name) or None
        if raw_token is None:
            return None

        try:
            validated_token = self.get_validated_token(raw_token)
        except (InvalidToken, TokenError) as exc:
            raise exceptions.AuthenticationFailed("Invalid or expired token.") from exc

        try:
            user = self.get_user(validated_token)
        except exceptions.AuthenticationFailed as exc:
            raise exceptions.AuthenticationFailed("Invalid token. User not found.") from exc

        profile = AccountProfile.objects.filter(user=user).only("status").first()
        if profile is not None and profile.status != AccountProfile.STATUS_ACTIVE:
            raise exceptions.AuthenticationFailed("Account is not active. Please contact administrator.")

        return user, validated_token


class OptionalJWTAuthentication(HeaderOrCookieJWTAuthentication):
    """Like the strict variant, but a bad token degrades to an anonymous request."""

    def authenticate(self, request):
        try:
            return super().authenticate(request)
        except exceptions.AuthenticationFailed as exc:
            logger.info("auth.optional_token_rejected", extra={"reason": str(exc.detail)})
            return None
