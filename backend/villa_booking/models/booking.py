"""Booking model and its settlement-track columns."""
from __future__ import annotations

import enum
import uuid
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import Boolean, Date, DateTime, Enum, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from villa_booking.core.security import generate_public_token
from villa_booking.db.base import Base
from villa_booking.domain.statuses import BookingStatus
from villa_booking.models.mixins import TimestampMixin


class GuestLanguage(str, enum.Enum):
    """Languages the dossier and messages can be rendered in."""

    EN = "en"
    NL = "nl"
    ES = "es"


class Booking(TimestampMixin, Base):
    """A guest reservation and its dossier workflow state."""

    __tablename__ = "bookings"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    public_token: Mapped[str] = mapped_column(
        String(64), unique=True, index=True, nullable=False, default=generate_public_token
    )
    guest_name: Mapped[str] = mapped_column(String(200), nullable=False)
    guest_email: Mapped[str] = mapped_column(String(320), nullable=False)
    guest_phone: Mapped[str] = mapped_column(String(64), nullable=False)
    check_in: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    check_out: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    num_guests: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    message: Mapped[str | None] = mapped_column(Text())
    language: Mapped[GuestLanguage] = mapped_column(
        Enum(GuestLanguage), nullable=False, default=GuestLanguage.EN
    )
    status: Mapped[BookingStatus] = mapped_column(
        Enum(BookingStatus), nullable=False, default=BookingStatus.PENDING, index=True
    )

    total_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    cleaning_fee: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    deposit_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    payment_notes: Mapped[str | None] = mapped_column(Text())

    whatsapp_notified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    whatsapp_notified_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    contract_sent: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    contract_sent_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    contract_file_path: Mapped[str | None] = mapped_column(String(512))
    contract_uploaded_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    guest_contract_signed: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )
    guest_contract_signed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True)
    )
    guest_contract_signed_name: Mapped[str | None] = mapped_column(String(200))
    guest_signed_contract_file_path: Mapped[str | None] = mapped_column(String(512))
    guest_signed_contract_uploaded_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True)
    )

    deposit_paid: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    deposit_paid_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    remaining_paid: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    remaining_paid_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    contract_signed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    contract_signed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    review_author: Mapped[str | None] = mapped_column(String(200))
    review_rating: Mapped[int | None] = mapped_column(Integer)
    review_text: Mapped[str | None] = mapped_column(Text())
    review_submitted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
