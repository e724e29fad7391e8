"""Owner-declared unavailable periods."""
from __future__ import annotations

import uuid
from datetime import date

from sqlalchemy import CheckConstraint, Date, String
from sqlalchemy.orm import Mapped, mapped_column

from villa_booking.db.base import Base
from villa_booking.models.mixins import TimestampMixin


class BlockedDate(TimestampMixin, Base):
    """Inclusive date range the unit cannot be booked."""

    __tablename__ = "blocked_dates"
    __table_args__ = (
        CheckConstraint("start_date <= end_date", name="ck_blocked_dates_range"),
    )

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    reason: Mapped[str | None] = mapped_column(String(255))
