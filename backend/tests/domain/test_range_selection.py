"""Unit tests for stay validation and the date selection."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from villa_booking.domain.availability import BlockedRange, BookedRange
from villa_booking.domain.errors import (
    GuestCountOutOfRange,
    InvalidDates,
    MinStayNotMet,
    RequiredFieldsMissing,
    UnavailableRange,
)
from villa_booking.domain.range_selection import (
    CalendarSnapshot,
    DateRangeSelection,
    SelectionState,
    validate_stay,
)
from villa_booking.domain.statuses import BookingStatus

SNAPSHOT = CalendarSnapshot.build(
    bookings=[
        BookedRange(
            check_in=date(2026, 2, 15),
            check_out=date(2026, 2, 22),
            status=BookingStatus.PENDING,
        )
    ],
    blocks=[BlockedRange(start_date=date(2026, 3, 10), end_date=date(2026, 3, 12))],
    base_price=Decimal("85"),
)

CONTACT = {"full_name": "Ana Guest", "email": "ana@example.com", "phone": "+34600000000"}


def test_validate_stay_prices_a_valid_range() -> None:
    priced = validate_stay(date(2026, 2, 22), date(2026, 2, 28), SNAPSHOT)
    assert priced.total_price == Decimal("650.00")


@pytest.mark.parametrize(
    ("start", "end", "error"),
    [
        (date(2026, 4, 1), date(2026, 4, 1), InvalidDates),
        (date(2026, 4, 5), date(2026, 4, 1), InvalidDates),
        (date(2026, 2, 10), date(2026, 2, 17), UnavailableRange),
        (date(2026, 3, 5), date(2026, 3, 11), UnavailableRange),
        (date(2026, 4, 1), date(2026, 4, 4), MinStayNotMet),
    ],
)
def test_validate_stay_failures(start: date, end: date, error: type) -> None:
    with pytest.raises(error):
        validate_stay(start, end, SNAPSHOT)


def test_unavailable_wins_over_min_stay() -> None:
    with pytest.raises(UnavailableRange):
        validate_stay(date(2026, 2, 20), date(2026, 2, 23), SNAPSHOT)


def test_short_end_keeps_start() -> None:
    selection = DateRangeSelection()
    assert selection.select(date(2026, 4, 1), SNAPSHOT) is None
    assert selection.state is SelectionState.PARTIAL_START

    error = selection.select(date(2026, 4, 4), SNAPSHOT)

    assert isinstance(error, MinStayNotMet)
    assert error.required == 6
    assert selection.start == date(2026, 4, 1)
    assert selection.end is None
    assert selection.state is SelectionState.PARTIAL_START


def test_overlapping_end_reports_unavailable() -> None:
    selection = DateRangeSelection()
    selection.select(date(2026, 2, 10), SNAPSHOT)
    error = selection.select(date(2026, 2, 17), SNAPSHOT)
    assert isinstance(error, UnavailableRange)
    assert selection.start == date(2026, 2, 10)


def test_third_click_starts_over() -> None:
    selection = DateRangeSelection()
    assert selection.select_range(date(2026, 4, 1), date(2026, 4, 8), SNAPSHOT) is None
    assert selection.state is SelectionState.CONFIRMED
    assert selection.priced is not None
    assert selection.priced.total_price == Decimal("735.00")

    selection.select(date(2026, 5, 1), SNAPSHOT)
    assert selection.state is SelectionState.PARTIAL_START
    assert selection.priced is None


def test_revalidate_drops_end_when_dates_get_taken() -> None:
    selection = DateRangeSelection()
    selection.select_range(date(2026, 4, 1), date(2026, 4, 8), SNAPSHOT)
    taken = CalendarSnapshot.build(
        bookings=[BookedRange(check_in=date(2026, 4, 3), check_out=date(2026, 4, 9))]
    )
    error = selection.revalidate(taken)
    assert isinstance(error, UnavailableRange)
    assert selection.start == date(2026, 4, 1)
    assert selection.end is None


def test_guests_are_clamped() -> None:
    selection = DateRangeSelection(max_guests=4)
    assert selection.set_guests(0) == 1
    assert selection.set_guests(9) == 4
    assert selection.set_max_guests(2) == 2


def test_submission_requires_dates_and_contact() -> None:
    selection = DateRangeSelection()
    errors = selection.submission_errors({"full_name": " ", "email": None, "phone": "1"})
    codes = {error.code for error in errors}
    assert codes == {InvalidDates.code, RequiredFieldsMissing.code}
    missing = next(e for e in errors if isinstance(e, RequiredFieldsMissing))
    assert missing.fields == ["email", "full_name"]

    selection.select_range(date(2026, 4, 1), date(2026, 4, 8), SNAPSHOT)
    assert selection.can_submit(CONTACT)


def test_guest_count_outside_limit_blocks_submission() -> None:
    selection = DateRangeSelection(max_guests=4)
    selection.select_range(date(2026, 4, 1), date(2026, 4, 8), SNAPSHOT)
    selection.guests = 6
    errors = selection.submission_errors(CONTACT)
    assert [type(e) for e in errors] == [GuestCountOutOfRange]
