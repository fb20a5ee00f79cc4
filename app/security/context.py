from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from app.models.security import Role


@dataclass(frozen=True)
class SessionClaims:
    """
    Per-request identity and authorization attributes.

    Minted by `TokenService.issue` at login, decoded fresh from the bearer
    token on every request and attached to ``request.state.claims``. Never
    mutated; expires with the token.
    """

    admin_id: int
    username: str
    role: Role
    department_id: int | None
    can_view_all: bool
    expires_at: datetime

    @property
    def is_super_admin(self) -> bool:
        return self.role is Role.SUPER_ADMIN

    def to_payload(self) -> dict[str, object]:
        """JWT payload (``exp`` added by the token service)."""
        return {
            "user_id": self.admin_id,
            "username": self.username,
            "role": self.role.value,
            "department_id": self.department_id,
            "can_view_all": self.can_view_all,
        }
