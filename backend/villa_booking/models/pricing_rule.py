"""Seasonal pricing rule model."""

from __future__ import annotations

import datetime
import uuid
from decimal import Decimal

from sqlalchemy import Boolean, CheckConstraint, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from villa_booking.db.base import Base
from villa_booking.models.mixins import TimestampMixin


class PricingRule(TimestampMixin, Base):
    """Date-range scoped override of the nightly base price."""

    __tablename__ = "pricing_rules"
    __table_args__ = (
        CheckConstraint("start_date <= end_date", name="ck_pricing_rules_range"),
    )

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    start_date: Mapped[datetime.date] = mapped_column(nullable=False)
    end_date: Mapped[datetime.date] = mapped_column(nullable=False)
    price_per_night: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    min_stay: Mapped[int | None] = mapped_column(Integer, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
