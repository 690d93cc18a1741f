"""FastAPI dependency injection helpers."""
from __future__ import annotations

from typing import Annotated, AsyncIterator

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from sign_quran_messaging.application.dto.principal import Principal
from sign_quran_messaging.application.ports.auth import TokenVerifier
from sign_quran_messaging.config import settings
from sign_quran_messaging.infrastructure.auth.hs256_verifier import HS256Verifier
from sign_quran_messaging.infrastructure.db.uow import SqlAlchemyUoW

# The browser client authenticates with the httpOnly cookie; mobile sends a bearer token
_bearer_scheme = HTTPBearer(auto_error=False)


async def get_uow(request: Request) -> AsyncIterator[SqlAlchemyUoW]:
    session_factory = request.app.state.session_factory
    async with session_factory() as session:
        async with SqlAlchemyUoW(session) as uow:
            yield uow


UoWDep = Annotated[SqlAlchemyUoW, Depends(get_uow)]


_verifier: TokenVerifier | None = None


def get_verifier() -> TokenVerifier:
    global _verifier  # noqa: PLW0603
    if _verifier is None:
        _verifier = HS256Verifier(settings.JWT_SECRET, settings.JWT_ALGORITHM)
    return _verifier


async def authenticate(token: str) -> Principal:
    try:
        return await get_verifier().verify(token)
    except Exception as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
        ) from exc


async def get_current_principal(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_bearer_scheme)],
) -> Principal:
    token = request.cookies.get(settings.AUTH_COOKIE_NAME)
    if not token and credentials is not None:
        token = credentials.credentials
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return await authenticate(token)


CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]
