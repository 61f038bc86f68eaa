from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timedelta

from .errors import AccountValidationError

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def normalize_email(raw: str) -> str:
    return (raw or "").strip().lower()


def validate_email(raw: str) -> str:
    email = normalize_email(raw)
    if not email:
        raise AccountValidationError("Email is required.", field="email")
    if len(email) > 254:
        raise AccountValidationError("Email must be 254 characters or fewer.", field="email")
    if not _EMAIL_RE.match(email):
        raise AccountValidationError("Please enter a valid email address.", field="email")
    return email


@dataclass(frozen=True)
class LoginAttemptState:
    attempts: int
    lock_until: datetime | None


def next_failed_attempt_state(
    *,
    attempts: int,
    lock_until: datetime | None,
    now: datetime,
    max_attempts: int,
    lock_minutes: int,
) -> LoginAttemptState:
    """
    Counter/lock after one more failed password check.

    An expired lock restarts the count at 1. Reaching `max_attempts` while not
    already locked sets a fresh lock window.
    """
    if lock_until is not None and lock_until < now:
        return LoginAttemptState(attempts=1, lock_until=None)

    already_locked = lock_until is not None and lock_until > now
    attempts += 1
    if attempts >= max_attempts and not already_locked:
        return LoginAttemptState(attempts=attempts, lock_until=now + timedelta(minutes=lock_minutes))
    return LoginAttemptState(attempts=attempts, lock_until=lock_until)
