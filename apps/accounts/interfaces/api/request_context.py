from __future__ import annotations

from apps.accounts.domain.types import AuthContext
from apps.accounts.services.profile_service import AccountProfileService


def client_ip(request) -> str | None:
    value = request.META.get("HTTP_X_FORWARDED_FOR") or request.META.get("REMOTE_ADDR")
    if not value:
        return None
    return value.split(",")[0].strip() or None


def user_agent(request) -> str:
    return request.META.get("HTTP_USER_AGENT", "")


def auth_context(request) -> AuthContext:
    return AccountProfileService.auth_context_for(getattr(request, "user", None))
