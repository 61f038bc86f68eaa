from __future__ import annotations

import logging

from apps.accounts.models import AccountAuditLog

logger = logging.getLogger("bondex.accounts")


class AccountAuditService:
    """Append-only trail of admin sign-in activity."""

    ACTION_LOGIN_SUCCEEDED = AccountAuditLog.ACTION_LOGIN_SUCCEEDED
    ACTION_LOGIN_FAILED = AccountAuditLog.ACTION_LOGIN_FAILED
    ACTION_ACCOUNT_LOCKED = AccountAuditLog.ACTION_ACCOUNT_LOCKED
    ACTION_LOGOUT = AccountAuditLog.ACTION_LOGOUT

    @staticmethod
    def record_action(
        *,
        action: str,
        user=None,
        ip_address: str | None = None,
        user_agent: str = "",
        metadata: dict | None = None,
    ) -> AccountAuditLog:
        entry = AccountAuditLog.objects.create(
            user=user,
            action=action,
            ip_address=ip_address,
            user_agent=user_agent or "",
            metadata=dict(metadata or {}),
        )
        logger.info("accounts.audit", extra={"action": action, "user_id": entry.user_id})
        return entry
