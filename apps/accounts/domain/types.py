from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AuthContext:
    """Who is acting on a use case; `None` user_id means an anonymous/guest caller."""

    user_id: int | None = None
    email: str = ""
    role: str = ""

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


ANONYMOUS = AuthContext()
