"""Common API dependencies."""

from __future__ import annotations

import uuid
from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, HTTPException, Request, Response, UploadFile, status
from fastapi.security import OAuth2PasswordBearer
from fastapi_limiter import FastAPILimiter
from fastapi_limiter.depends import RateLimiter
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from villa_booking.core.config import get_settings
from villa_booking.core.security import decode_access_token
from villa_booking.db.session import get_session
from villa_booking.domain.access import Caller
from villa_booking.domain.confirmation import ConfirmationLedger
from villa_booking.integrations.blob_store import BlobStore, build_blob_store
from villa_booking.models.user import User, UserStatus
from villa_booking.services import confirmation_service, user_service

settings = get_settings()

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.api_v1_prefix}/auth/token")
optional_oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"{settings.api_v1_prefix}/auth/token", auto_error=False
)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide an async database session."""
    async for session in get_session():
        yield session


async def _user_from_token(session: AsyncSession, token: str) -> User | None:
    try:
        payload = decode_access_token(token)
    except JWTError:
        return None
    subject = payload.get("sub")
    if subject is None:
        return None
    try:
        user_id = uuid.UUID(subject)
    except (ValueError, TypeError):
        return None
    user = await user_service.get_user(session, user_id)
    if user is None or user.status != UserStatus.ACTIVE:
        return None
    return user


async def get_current_user(
    token: Annotated[str, Depends(oauth2_scheme)],
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> User:
    """Authenticate request via bearer token."""
    user = await _user_from_token(session, token)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


async def require_admin(
    current_user: Annotated[User, Depends(get_current_user)],
) -> Caller:
    """Allow only active administrators through."""
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions"
        )
    return Caller(is_admin=True, identity=current_user.id)


async def get_optional_caller(
    token: Annotated[str | None, Depends(optional_oauth2_scheme)],
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> Caller:
    """Resolve the caller on routes open to anonymous token holders."""
    if not token:
        return Caller.anonymous()
    user = await _user_from_token(session, token)
    if user is None:
        return Caller.anonymous()
    return Caller(is_admin=user.is_admin, identity=user.id)


def get_contracts_store() -> BlobStore:
    return build_blob_store(get_settings().contracts_bucket, public=True)


def get_signed_contracts_store() -> BlobStore:
    return build_blob_store(get_settings().signed_contracts_bucket, public=False)


def get_confirmation_ledger() -> ConfirmationLedger:
    return confirmation_service.get_ledger()


async def read_upload(upload: UploadFile) -> bytes:
    """Read an uploaded file, rejecting empty and oversized ones."""
    data = await upload.read()
    if not data:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Uploaded file is empty"
        )
    if len(data) > get_settings().max_upload_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail="Uploaded file is too large",
        )
    return data


def parse_rate(value: str, *, fallback: tuple[int, int]) -> tuple[int, int]:
    try:
        count_str, window_str = value.split("/", 1)
        count = int(count_str.strip())
    except ValueError:
        return fallback
    window = window_str.strip().lower()
    seconds_map = {
        "second": 1,
        "seconds": 1,
        "minute": 60,
        "minutes": 60,
        "hour": 3600,
        "hours": 3600,
        "day": 86400,
        "days": 86400,
    }
    seconds = seconds_map.get(window, fallback[1])
    return count, seconds


def rate_dependency(limit: tuple[int, int]):
    async def _dependency(request: Request, response: Response) -> None:
        if FastAPILimiter.redis is None:
            return None
        limiter = RateLimiter(times=limit[0], seconds=limit[1])
        await limiter(request, response)

    return Depends(_dependency)


LOGIN_RATE_DEP = rate_dependency(parse_rate(settings.rate_limit_login, fallback=(10, 60)))
BOOKING_RATE_DEP = rate_dependency(parse_rate(settings.rate_limit_booking, fallback=(5, 60)))
DEFAULT_RATE_DEP = rate_dependency(parse_rate(settings.rate_limit_default, fallback=(100, 60)))
