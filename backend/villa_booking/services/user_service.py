"""User data access helpers."""
from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from villa_booking.core.security import get_password_hash
from villa_booking.models.user import User
from villa_booking.schemas.user import UserCreate
from villa_booking.services.store import fetch_one


async def get_user_by_email(session: AsyncSession, email: str) -> User | None:
    """Return a user by email address."""
    return await fetch_one(
        session, select(User).where(User.email == email), action="load user"
    )


async def get_user(session: AsyncSession, user_id: uuid.UUID) -> User | None:
    """Return a user by ID."""
    return await fetch_one(
        session, select(User).where(User.id == user_id), action="load user"
    )


async def create_user(session: AsyncSession, payload: UserCreate) -> User:
    """Persist a new user with hashed password."""
    user = User(
        email=payload.email.lower(),
        hashed_password=get_password_hash(payload.password),
        full_name=payload.full_name,
        role=payload.role,
        status=payload.status,
    )
    session.add(user)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise
    await session.refresh(user)
    return user
