"""Contact form schemas."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from villa_booking.models.booking import GuestLanguage
from villa_booking.models.contact_message import ContactMessageStatus


class ContactMessageCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    email: EmailStr
    phone: str | None = Field(default=None, max_length=64)
    message: str = Field(min_length=1, max_length=5000)
    language: GuestLanguage = GuestLanguage.EN


class ContactMessageRead(BaseModel):
    id: uuid.UUID
    name: str
    email: str
    phone: str | None = None
    message: str
    language: GuestLanguage
    status: ContactMessageStatus
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ContactMessageStatusUpdate(BaseModel):
    status: ContactMessageStatus
