from __future__ import annotations

import jwt

from sign_quran_messaging.application.dto.principal import Principal
from sign_quran_messaging.domain.value_objects.enums import UserRole


class HS256Verifier:
    """Verify JWTs issued by the Sign Quran auth service (shared HS256 secret).

    Tokens carry ``userId``, ``email`` and ``role``; a standard ``sub`` claim
    is accepted as a fallback for the user id.
    """

    def __init__(self, secret: str, algorithm: str = "HS256") -> None:
        self._secret = secret
        self._algorithm = algorithm

    async def verify(self, token: str) -> Principal:
        payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        raw_id = payload.get("userId", payload.get("sub"))
        if raw_id is None:
            raise jwt.InvalidTokenError("Token has no user id")
        role_raw = payload.get("role")
        role = UserRole(role_raw) if role_raw in UserRole.__members__.values() else None
        return Principal(
            user_id=int(raw_id),
            role=role,
            email=payload.get("email"),
        )
