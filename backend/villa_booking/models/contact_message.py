"""Contact form submissions."""
from __future__ import annotations

import enum
import uuid

from sqlalchemy import Enum, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from villa_booking.db.base import Base
from villa_booking.models.booking import GuestLanguage
from villa_booking.models.mixins import TimestampMixin


class ContactMessageStatus(str, enum.Enum):
    """Triage state of a contact message."""

    NEW = "new"
    READ = "read"
    REPLIED = "replied"


class ContactMessage(TimestampMixin, Base):
    """A message left through the public contact form."""

    __tablename__ = "contact_messages"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(64))
    message: Mapped[str] = mapped_column(Text(), nullable=False)
    status: Mapped[ContactMessageStatus] = mapped_column(
        Enum(ContactMessageStatus), default=ContactMessageStatus.NEW, nullable=False
    )
    language: Mapped[GuestLanguage] = mapped_column(
        Enum(GuestLanguage), default=GuestLanguage.EN, nullable=False
    )
