from __future__ import annotations

import logging
from dataclasses import dataclass

from django.conf import settings
from django.contrib.auth import get_user_model
from django.utils import timezone

from apps.accounts.domain.errors import (
    AccountInactiveError,
    AccountLockedError,
    AccountValidationError,
    AdminPrivilegesRequiredError,
    InvalidCredentialsError,
)
from apps.accounts.domain.policies import next_failed_attempt_state, normalize_email
from apps.accounts.models import AccountProfile
from apps.accounts.services.audit_service import AccountAuditService

logger = logging.getLogger("bondex.accounts")


@dataclass(frozen=True)
class AdminLoginCommand:
    email: str
    password: str
    ip_address: str | None = None
    user_agent: str = ""


@dataclass(frozen=True)
class AdminLoginResult:
    user: object
    profile: AccountProfile


class AdminLoginUseCase:
    @staticmethod
    def execute(cmd: AdminLoginCommand) -> AdminLoginResult:
        email = normalize_email(cmd.email)
        if not email or not cmd.password:
            raise AccountValidationError("Please provide email and password")

        UserModel = get_user_model()
        user = UserModel.objects.filter(email__iexact=email).order_by("id").first()
        if user is None:
            AccountAuditService.record_action(
                user=None,
                action=AccountAuditService.ACTION_LOGIN_FAILED,
                ip_address=cmd.ip_address,
                user_agent=cmd.user_agent,
                metadata={"email": email, "reason_code": "unknown_email"},
            )
            raise InvalidCredentialsError("Invalid credentials")

        profile = AccountProfile.objects.filter(user=user).first()
        if profile is None or not profile.is_admin:
            raise AdminPrivilegesRequiredError()

        now = timezone.now()
        if profile.is_locked(now):
            raise AccountLockedError(lock_until=profile.lock_until)

        if not user.check_password(cmd.password):
            AdminLoginUseCase._register_failure(profile, now=now, cmd=cmd)
            raise InvalidCredentialsError("Invalid credentials")

        if not profile.is_active_account or not user.is_active:
            raise AccountInactiveError()

        profile.login_attempts = 0
        profile.lock_until = None
        profile.last_login_at = now
        profile.save(update_fields=["login_attempts", "lock_until", "last_login_at", "updated_at"])
        user.last_login = now
        user.save(update_fields=["last_login"])

        AccountAuditService.record_action(
            user=user,
            action=AccountAuditService.ACTION_LOGIN_SUCCEEDED,
            ip_address=cmd.ip_address,
            user_agent=cmd.user_agent,
        )
        logger.info("auth.login_succeeded", extra={"user_id": user.id})
        return AdminLoginResult(user=user, profile=profile)

    @staticmethod
    def _register_failure(profile: AccountProfile, *, now, cmd: AdminLoginCommand) -> None:
        was_locked = profile.is_locked(now)
        state = next_failed_attempt_state(
            attempts=profile.login_attempts,
            lock_until=profile.lock_until,
            now=now,
            max_attempts=getattr(settings, "ACCOUNT_MAX_LOGIN_ATTEMPTS", 5),
            lock_minutes=getattr(settings, "ACCOUNT_LOCK_MINUTES", 120),
        )
        profile.login_attempts = state.attempts
        profile.lock_until = state.lock_until
        profile.save(update_fields=["login_attempts", "lock_until", "updated_at"])

        AccountAuditService.record_action(
            user=profile.user,
            action=AccountAuditService.ACTION_LOGIN_FAILED,
            ip_address=cmd.ip_address,
            user_agent=cmd.user_agent,
            metadata={"attempts": state.attempts},
        )
        if not was_locked and profile.is_locked(now):
            AccountAuditService.record_action(
                user=profile.user,
                action=AccountAuditService.ACTION_ACCOUNT_LOCKED,
                ip_address=cmd.ip_address,
                user_agent=cmd.user_agent,
                metadata={"lock_until": profile.lock_until.isoformat()},
            )
            logger.warning("auth.account_locked", extra={"user_id": profile.user_id})
