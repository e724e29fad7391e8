"""Booking status enumeration shared by the core and the ORM."""

from __future__ import annotations

import enum


class BookingStatus(str, enum.Enum):
    """Top-level booking status."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    DECLINED = "declined"
    CANCELLED = "cancelled"


OCCUPYING_STATUSES = frozenset({BookingStatus.PENDING, BookingStatus.CONFIRMED})


def occupies_calendar(status: BookingStatus | str) -> bool:
    """Return True when a booking with this status holds its dates."""
    return BookingStatus(status) in OCCUPYING_STATUSES
