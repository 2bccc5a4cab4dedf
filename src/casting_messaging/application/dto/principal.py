from __future__ import annotations

from dataclasses import dataclass

from casting_messaging.domain.value_objects.enums import UserRole


@dataclass(frozen=True, slots=True)
class Principal:
    """Authenticated caller identity, resolved from the JWT and the users table."""

    user_id: int
    role: UserRole
    email: str = ""

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
