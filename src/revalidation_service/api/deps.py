"""FastAPI dependency injection helpers."""
from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from revalidation_service.application.dto.principal import Principal
from revalidation_service.application.ports.auth import TokenVerifier
from revalidation_service.config import settings
from revalidation_service.infrastructure.auth.hs256_verifier import HS256Verifier
from revalidation_service.infrastructure.auth.jwks_verifier import JWKSVerifier
from revalidation_service.infrastructure.db.repositories.post import RecentPostReaderRepo
from revalidation_service.infrastructure.db.session import get_async_session
from revalidation_service.services.dispatcher import Dispatcher
from revalidation_service.services.slug_mapper import SlugMapper

_bearer_scheme = HTTPBearer()


def get_content_reader(
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> RecentPostReaderRepo:
    return RecentPostReaderRepo(session)


ContentReaderDep = Annotated[RecentPostReaderRepo, Depends(get_content_reader)]


def get_dispatcher(request: Request) -> Dispatcher:
    return request.app.state.dispatcher


DispatcherDep = Annotated[Dispatcher, Depends(get_dispatcher)]


def get_mapper(request: Request) -> SlugMapper:
    return request.app.state.mapper


MapperDep = Annotated[SlugMapper, Depends(get_mapper)]


def _get_verifier() -> TokenVerifier:
    if settings.JWT_VERIFY_MODE == "jwks":
        assert settings.JWKS_URL, "JWKS_URL must be set when JWT_VERIFY_MODE=jwks"
        return JWKSVerifier(settings.JWKS_URL)
    return HS256Verifier(settings.JWT_SECRET, settings.JWT_ALGORITHM)


_verifier: TokenVerifier | None = None


def get_verifier() -> TokenVerifier:
    global _verifier  # noqa: PLW0603
    if _verifier is None:
        _verifier = _get_verifier()
    return _verifier


async def get_current_principal(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(_bearer_scheme)],
) -> Principal:
    verifier = get_verifier()
    try:
        return await verifier.verify(credentials.credentials)
    except Exception as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
        ) from exc


CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]


async def get_current_admin(principal: CurrentPrincipal) -> Principal:
    if not principal.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return principal


CurrentAdmin = Annotated[Principal, Depends(get_current_admin)]
