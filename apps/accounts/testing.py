from __future__ import annotations

from django.contrib.auth import get_user_model
from rest_framework_simplejwt.tokens import AccessToken

from apps.accounts.models import AccountProfile


def create_user_with_profile(
    *,
    email: str = "admin@bondex.test",
    password: str = "StrongPass12345!",
    role: str = AccountProfile.ROLE_ADMIN,
    status: str = AccountProfile.STATUS_ACTIVE,
    full_name: str = "Bondex Admin",
):
    user = get_user_model().objects.create_user(username=email, email=email, password=password)
    AccountProfile.objects.create(user=user, full_name=full_name, role=role, status=status)
    return user


def bearer_for(user) -> str:
    return f"Bearer {AccessToken.for_user(user)}"
