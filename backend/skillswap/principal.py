"""Principal abstraction for authenticated API callers."""

from __future__ import annotations

from dataclasses import dataclass

from .core.enums import PrincipalRole


@dataclass(frozen=True)
class UserPrincipal:
    """Caller identity decoded from an access token."""

    user_id: str
    role: PrincipalRole

    @property
    def id(self) -> str:
        return self.user_id

    @property
    def is_admin(self) -> bool:
        return self.role is PrincipalRole.ADMIN

    @property
    def is_teacher(self) -> bool:
        return self.role is PrincipalRole.TEACHER
