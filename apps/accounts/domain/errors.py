from __future__ import annotations


class AccountDomainError(ValueError):
    pass


class AccountValidationError(AccountDomainError):
    def __init__(self, message: str, *, field: str | None = None):
        super().__init__(message)
        self.field = field


class InvalidCredentialsError(AccountDomainError):
    pass


class AdminPrivilegesRequiredError(AccountDomainError):
    def __init__(self, message: str = "Access denied. Admin privileges required."):
        super().__init__(message)


class AccountLockedError(AccountDomainError):
    def __init__(
        self,
        message: str = "Account temporarily locked due to too many failed login attempts",
        *,
        lock_until=None,
    ):
        super().__init__(message)
        self.lock_until = lock_until


class AccountInactiveError(AccountDomainError):
    def __init__(self, message: str = "Account is not active. Please contact administrator."):
        super().__init__(message)


class AccountNotFoundError(AccountDomainError):
    pass
