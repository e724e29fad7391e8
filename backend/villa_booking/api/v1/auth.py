"""Authentication endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession

from villa_booking.api.deps import LOGIN_RATE_DEP, get_current_user, get_db_session
from villa_booking.models.user import User
from villa_booking.schemas.auth import Token
from villa_booking.schemas.user import UserRead
from villa_booking.services import audit_service
from villa_booking.services.auth_service import (
    authenticate_user,
    create_access_token_for_user,
)
from villa_booking.services.store import commit

router = APIRouter()


@router.post(
    "/token",
    response_model=Token,
    summary="Obtain access token",
    dependencies=[LOGIN_RATE_DEP],
)
async def login_for_access_token(
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> Token:
    """Validate credentials and issue a bearer token."""
    user = await authenticate_user(
        session, email=form_data.username, password=form_data.password
    )
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    audit_service.record_event(
        session,
        user_id=user.id,
        event_type="auth.login",
        description="Successful login",
        payload={"user_id": str(user.id), "email": user.email},
    )
    await commit(session, action="record login")
    return Token(access_token=create_access_token_for_user(user))


@router.get("/me", response_model=UserRead, summary="Current user")
async def read_me(current_user: Annotated[User, Depends(get_current_user)]) -> User:
    return current_user
