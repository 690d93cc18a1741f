from __future__ import annotations

from dataclasses import dataclass

from sign_quran_messaging.domain.value_objects.enums import UserRole


@dataclass(frozen=True, slots=True)
class Principal:
    """Authenticated caller identity extracted from JWT."""

    user_id: int
    role: UserRole | None = None
    email: str | None = None

    @property
    def principal_key(self) -> str:
        """Unique key for WS connection registry."""
        return principal_key_for(self.user_id)


def principal_key_for(user_id: int) -> str:
    return f"user:{user_id}"
