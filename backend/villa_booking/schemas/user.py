"""User-related schemas."""

from __future__ import annotations

import uuid

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from villa_booking.models.user import UserRole, UserStatus


class UserCreate(BaseModel):
    """Payload for creating a back-office user."""

    email: EmailStr
    password: str = Field(min_length=8)
    full_name: str | None = None
    role: UserRole = UserRole.ADMIN
    status: UserStatus = UserStatus.ACTIVE


class UserRead(BaseModel):
    """Serialized user response."""

    id: uuid.UUID
    email: str
    full_name: str | None = None
    role: UserRole
    status: UserStatus

    model_config = ConfigDict(from_attributes=True)
