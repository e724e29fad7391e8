"""Key/value site settings rows."""

from __future__ import annotations

from typing import Any

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from villa_booking.db.base import Base
from villa_booking.models.mixins import TimestampMixin


class Setting(TimestampMixin, Base):
    """One stored setting; the value shape is fixed per key."""

    __tablename__ = "settings"

    key: Mapped[str] = mapped_column(String(64), primary_key=True)
    value: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
