from __future__ import annotations

from rest_framework import exceptions
from rest_framework.permissions import BasePermission

from apps.accounts.models import AccountProfile


class IsActiveAdmin(BasePermission):
    message = "Access denied. Admin privileges required."

    def has_permission(self, request, view) -> bool:
        user = getattr(request, "user", None)
        if user is None or not user.is_authenticated:
            raise exceptions.NotAuthenticated("Access denied. No token provided.")

        profile = AccountProfile.objects.filter(user=user).only("role", "status").first()
        if profile is None:
            return False
        if profile.status != AccountProfile.STATUS_ACTIVE:
            raise exceptions.AuthenticationFailed("Account is not active. Please contact administrator.")
        return profile.role == AccountProfile.ROLE_ADMIN
