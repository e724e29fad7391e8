"""Stay validation and the in-progress date selection state machine."""

from __future__ import annotations

import datetime
import enum
import uuid
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from decimal import Decimal

from villa_booking.domain.availability import (
    BlockLike,
    StayLike,
    has_unavailable_in_range,
    night_count,
)
from villa_booking.domain.errors import (
    BookingError,
    GuestCountOutOfRange,
    InvalidDates,
    MinStayNotMet,
    RequiredFieldsMissing,
    UnavailableRange,
)
from villa_booking.domain.pricing import PricedStay, RuleLike, min_stay_for_range, quote_stay

REQUIRED_CONTACT_FIELDS = ("full_name", "email", "phone")


@dataclass(frozen=True)
class CalendarSnapshot:
    """Everything needed to validate and price a stay at one point in time."""

    bookings: tuple[StayLike, ...] = ()
    blocks: tuple[BlockLike, ...] = ()
    rules: tuple[RuleLike, ...] = ()
    base_price: Decimal = Decimal("85.00")

    @classmethod
    def build(
        cls,
        *,
        bookings: Iterable[StayLike] = (),
        blocks: Iterable[BlockLike] = (),
        rules: Iterable[RuleLike] = (),
        base_price: Decimal = Decimal("85.00"),
    ) -> CalendarSnapshot:
        return cls(
            bookings=tuple(bookings),
            blocks=tuple(blocks),
            rules=tuple(rules),
            base_price=Decimal(base_price),
        )


def validate_stay(
    start: datetime.date,
    end: datetime.date,
    snapshot: CalendarSnapshot,
    *,
    exclude_id: uuid.UUID | None = None,
) -> PricedStay:
    """Accept ``[start, end)`` against ``snapshot`` or raise the first failure.

    Checks run in a fixed order: night count, availability, minimum stay.
    """
    nights = night_count(start, end)
    if nights < 1:
        raise InvalidDates()
    if has_unavailable_in_range(
        start, end, snapshot.bookings, snapshot.blocks, exclude_id=exclude_id
    ):
        raise UnavailableRange()
    required = min_stay_for_range(start, end)
    if nights < required:
        raise MinStayNotMet(required)
    return quote_stay(start, end, snapshot.rules, snapshot.base_price)


def clamp_guests(count: int, max_guests: int) -> int:
    return max(1, min(count, max(max_guests, 1)))


class SelectionState(str, enum.Enum):
    """Progress of a check-in/check-out selection."""

    EMPTY = "empty"
    PARTIAL_START = "partial_start"
    CONFIRMED = "confirmed"


@dataclass
class DateRangeSelection:
    """A guest's date pick, validated on every change.

    A rejected end date leaves the selection in ``PARTIAL_START`` with the
    original start kept, and the failure is returned rather than raised.
    """

    max_guests: int = 4
    start: datetime.date | None = None
    end: datetime.date | None = None
    guests: int = 1
    priced: PricedStay | None = None
    last_error: BookingError | None = field(default=None, repr=False)

    @property
    def state(self) -> SelectionState:
        if self.start is None:
            return SelectionState.EMPTY
        if self.end is None:
            return SelectionState.PARTIAL_START
        return SelectionState.CONFIRMED

    def reset(self) -> None:
        self.start = None
        self.end = None
        self.priced = None
        self.last_error = None

    def select(self, day: datetime.date, snapshot: CalendarSnapshot) -> BookingError | None:
        """Feed one clicked date into the selection."""
        if self.state is not SelectionState.PARTIAL_START:
            self.start = day
            self.end = None
            self.priced = None
            self.last_error = None
            return None
        assert self.start is not None
        return self._try_end(self.start, day, snapshot)

    def select_range(
        self, start: datetime.date, end: datetime.date, snapshot: CalendarSnapshot
    ) -> BookingError | None:
        self.reset()
        self.select(start, snapshot)
        return self.select(end, snapshot)

    def revalidate(self, snapshot: CalendarSnapshot) -> BookingError | None:
        """Re-check a confirmed range after the snapshot changed.

        An invalidated range drops its end date and keeps the start.
        """
        if self.state is not SelectionState.CONFIRMED:
            return None
        assert self.start is not None and self.end is not None
        return self._try_end(self.start, self.end, snapshot)

    def set_guests(self, count: int) -> int:
        self.guests = clamp_guests(count, self.max_guests)
        return self.guests

    def set_max_guests(self, max_guests: int) -> int:
        self.max_guests = max_guests
        return self.set_guests(self.guests)

    def submission_errors(
        self, contact: Mapping[str, str | None]
    ) -> list[BookingError]:
        """Return every reason the selection cannot be submitted yet."""
        errors: list[BookingError] = []
        if self.state is not SelectionState.CONFIRMED:
            errors.append(self.last_error or InvalidDates("Select check-in and check-out dates"))
        if not 1 <= self.guests <= self.max_guests:
            errors.append(GuestCountOutOfRange(self.max_guests))
        missing = [
            name
            for name in REQUIRED_CONTACT_FIELDS
            if not (contact.get(name) or "").strip()
        ]
        if missing:
            errors.append(RequiredFieldsMissing(missing))
        return errors

    def can_submit(self, contact: Mapping[str, str | None]) -> bool:
        return not self.submission_errors(contact)

    def _try_end(
        self, start: datetime.date, end: datetime.date, snapshot: CalendarSnapshot
    ) -> BookingError | None:
        try:
            priced = validate_stay(start, end, snapshot)
        except BookingError as exc:
            self.start = start
            self.end = None
            self.priced = None
            self.last_error = exc
            return exc
        self.start = start
        self.end = end
        self.priced = priced
        self.last_error = None
        return None
