"""FastAPI dependency injection helpers."""
from __future__ import annotations

from typing import Annotated, AsyncIterator

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from casting_messaging.application.dto.principal import Principal
from casting_messaging.application.exceptions import AuthenticationError
from casting_messaging.application.policies.permissions import assert_admin
from casting_messaging.application.ports.auth import TokenVerifier
from casting_messaging.application.ports.presence import TypingPresence
from casting_messaging.config import settings
from casting_messaging.domain.value_objects.enums import UserRole
from casting_messaging.infrastructure.auth.hs256_verifier import HS256Verifier
from casting_messaging.infrastructure.db.session import AsyncSessionLocal
from casting_messaging.infrastructure.db.uow import SqlAlchemyUoW
from casting_messaging.infrastructure.presence.redis_typing import RedisTypingPresence

_bearer_scheme = HTTPBearer()


async def get_uow() -> AsyncIterator[SqlAlchemyUoW]:
    async with AsyncSessionLocal() as session:
        uow = SqlAlchemyUoW(session)
        try:
            yield uow
        finally:
            await session.close()


UoWDep = Annotated[SqlAlchemyUoW, Depends(get_uow)]


_verifier: TokenVerifier | None = None


def get_verifier() -> TokenVerifier:
    global _verifier  # noqa: PLW0603
    if _verifier is None:
        _verifier = HS256Verifier(settings.JWT_SECRET, settings.JWT_ALGORITHM)
    return _verifier


async def get_current_principal(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(_bearer_scheme)],
    uow: UoWDep,
) -> Principal:
    user_id = await get_verifier().verify(credentials.credentials)
    user = await uow.users.get_by_id(user_id)
    if user is None:
        raise AuthenticationError("User not found")
    try:
        role = UserRole(user.role)
    except ValueError as exc:
        raise AuthenticationError("Unsupported account role") from exc
    return Principal(user_id=user.id, role=role, email=user.email)


CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]


async def get_current_admin(principal: CurrentPrincipal) -> Principal:
    assert_admin(principal)
    return principal


CurrentAdmin = Annotated[Principal, Depends(get_current_admin)]


def get_presence(request: Request) -> TypingPresence:
    return RedisTypingPresence(request.app.state.redis, settings.TYPING_TTL_SECONDS)


PresenceDep = Annotated[TypingPresence, Depends(get_presence)]
