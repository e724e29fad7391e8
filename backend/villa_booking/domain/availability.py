"""Calendar availability over booking and blocked-range snapshots.

Bookings occupy the half-open interval ``[check_in, check_out)`` so the
check-out day is free for the next arrival. Blocked ranges are inclusive on
both ends.
"""

from __future__ import annotations

import datetime
import uuid
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Protocol

from villa_booking.domain.statuses import BookingStatus, occupies_calendar


class StayLike(Protocol):
    check_in: datetime.date
    check_out: datetime.date
    status: BookingStatus | str


class BlockLike(Protocol):
    start_date: datetime.date
    end_date: datetime.date


@dataclass(frozen=True, slots=True)
class BookedRange:
    """Occupancy of one booking, detached from the ORM row."""

    check_in: datetime.date
    check_out: datetime.date
    status: BookingStatus = BookingStatus.PENDING
    booking_id: uuid.UUID | None = None


@dataclass(frozen=True, slots=True)
class BlockedRange:
    """Owner-declared unavailable period, both ends inclusive."""

    start_date: datetime.date
    end_date: datetime.date
    reason: str | None = None
    id: uuid.UUID | None = None


def iter_nights(start: datetime.date, end: datetime.date) -> Iterator[datetime.date]:
    """Yield every night of the stay ``[start, end)``."""
    current = start
    while current < end:
        yield current
        current += datetime.timedelta(days=1)


def night_count(start: datetime.date, end: datetime.date) -> int:
    return (end - start).days


def _occupying(bookings: Iterable[StayLike], exclude_id: uuid.UUID | None = None) -> list[StayLike]:
    result = []
    for booking in bookings:
        if not occupies_calendar(booking.status):
            continue
        if exclude_id is not None and _identity(booking) == exclude_id:
            continue
        result.append(booking)
    return result


def _identity(booking: StayLike) -> uuid.UUID | None:
    return getattr(booking, "booking_id", None) or getattr(booking, "id", None)


def is_date_booked(day: datetime.date, bookings: Iterable[StayLike]) -> bool:
    """Return True if a pending or confirmed stay covers ``day`` as a night."""
    return any(
        booking.check_in <= day < booking.check_out for booking in _occupying(bookings)
    )


def is_date_blocked(day: datetime.date, blocks: Iterable[BlockLike]) -> bool:
    return any(block.start_date <= day <= block.end_date for block in blocks)


def is_date_selectable(
    day: datetime.date,
    bookings: Iterable[StayLike],
    blocks: Iterable[BlockLike],
    today: datetime.date,
) -> bool:
    if day < today:
        return False
    return not is_date_booked(day, bookings) and not is_date_blocked(day, blocks)


def overlaps_bookings(
    start: datetime.date,
    end: datetime.date,
    bookings: Iterable[StayLike],
    *,
    exclude_id: uuid.UUID | None = None,
) -> bool:
    """Return True if any night of ``[start, end)`` is already occupied."""
    return any(
        start < booking.check_out and booking.check_in < end
        for booking in _occupying(bookings, exclude_id)
    )


def overlaps_blocks(
    start: datetime.date, end: datetime.date, blocks: Iterable[BlockLike]
) -> bool:
    """Return True if any day of ``[start, end]`` falls in a blocked range.

    The check-out day is included: guests cannot leave on a blocked day.
    """
    return any(start <= block.end_date and block.start_date <= end for block in blocks)


def has_unavailable_in_range(
    start: datetime.date,
    end: datetime.date,
    bookings: Iterable[StayLike],
    blocks: Iterable[BlockLike],
    *,
    exclude_id: uuid.UUID | None = None,
) -> bool:
    return overlaps_bookings(start, end, bookings, exclude_id=exclude_id) or overlaps_blocks(
        start, end, blocks
    )


def booked_ranges(bookings: Iterable[StayLike]) -> list[BookedRange]:
    """Detach the occupying stays of ``bookings`` into plain ranges."""
    return [
        BookedRange(
            check_in=booking.check_in,
            check_out=booking.check_out,
            status=BookingStatus(booking.status),
            booking_id=_identity(booking),
        )
        for booking in _occupying(bookings)
    ]
