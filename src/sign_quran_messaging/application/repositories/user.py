from __future__ import annotations

from typing import Protocol

from sign_quran_messaging.domain.entities.user import User


class UserReader(Protocol):
    async def get_by_id(self, user_id: int) -> User | None: ...

    async def exists(self, user_id: int) -> bool: ...
