"""Unit tests for the settlement track of a dossier."""

from __future__ import annotations

import datetime
import uuid
from dataclasses import dataclass, field
from decimal import Decimal

import pytest

from villa_booking.domain.availability import BookedRange
from villa_booking.domain.errors import (
    ContractNotYetSent,
    GateSequenceViolation,
    ReasonRequired,
    RequiredFieldsMissing,
    ReviewWindowClosed,
    UnavailableRange,
)
from villa_booking.domain.range_selection import CalendarSnapshot
from villa_booking.domain.settlement import (
    Gate,
    amend_stay,
    attach_guest_signature,
    attach_owner_contract,
    ensure_delete_reason,
    gate_states,
    mark_gate,
    next_gate,
    reactivates,
    reset_dependents_of,
    review_window_open,
    set_gate,
    submit_review,
)
from villa_booking.domain.statuses import BookingStatus

NOW = datetime.datetime(2026, 1, 5, 12, 0, tzinfo=datetime.UTC)


@dataclass
class FakeBooking:
    check_in: datetime.date = datetime.date(2026, 2, 15)
    check_out: datetime.date = datetime.date(2026, 2, 22)
    status: BookingStatus = BookingStatus.PENDING
    guest_name: str = "Ana Guest"
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    total_price: Decimal = Decimal("735.00")
    cleaning_fee: Decimal = Decimal("140.00")
    deposit_amount: Decimal = Decimal("220.50")
    whatsapp_notified: bool = False
    whatsapp_notified_at: datetime.datetime | None = None
    contract_sent: bool = False
    contract_sent_at: datetime.datetime | None = None
    contract_file_path: str | None = None
    contract_uploaded_at: datetime.datetime | None = None
    guest_contract_signed: bool = False
    guest_contract_signed_at: datetime.datetime | None = None
    guest_contract_signed_name: str | None = None
    guest_signed_contract_file_path: str | None = None
    guest_signed_contract_uploaded_at: datetime.datetime | None = None
    deposit_paid: bool = False
    deposit_paid_at: datetime.datetime | None = None
    remaining_paid: bool = False
    remaining_paid_at: datetime.datetime | None = None
    contract_signed: bool = False
    contract_signed_at: datetime.datetime | None = None
    review_author: str | None = None
    review_rating: int | None = None
    review_text: str | None = None
    review_submitted_at: datetime.datetime | None = None


def _fully_settled() -> FakeBooking:
    booking = FakeBooking()
    mark_gate(booking, Gate.WHATSAPP_NOTIFIED, now=NOW)
    mark_gate(booking, Gate.OWNER_CONFIRMED, now=NOW)
    attach_owner_contract(booking, "b/contract.pdf", now=NOW)
    attach_guest_signature(booking, "guest-signed/t/signed.pdf", signer_name="Ana", now=NOW)
    mark_gate(booking, Gate.DEPOSIT_PAID, now=NOW)
    mark_gate(booking, Gate.REMAINING_PAID, now=NOW)
    mark_gate(booking, Gate.CONTRACT_SIGNED, now=NOW)
    return booking


def test_dependents_table() -> None:
    assert reset_dependents_of(Gate.WHATSAPP_NOTIFIED) == frozenset(Gate) - {Gate.WHATSAPP_NOTIFIED}
    assert reset_dependents_of(Gate.CONTRACT_SENT) == {
        Gate.GUEST_CONTRACT_SIGNED,
        Gate.DEPOSIT_PAID,
        Gate.REMAINING_PAID,
        Gate.CONTRACT_SIGNED,
    }
    assert reset_dependents_of(Gate.DEPOSIT_PAID) == {Gate.REMAINING_PAID, Gate.CONTRACT_SIGNED}
    assert reset_dependents_of(Gate.CONTRACT_SIGNED) == frozenset()


def test_gate_out_of_order_is_rejected() -> None:
    booking = FakeBooking()
    with pytest.raises(GateSequenceViolation) as excinfo:
        mark_gate(booking, Gate.CONTRACT_SENT, now=NOW)
    assert excinfo.value.missing == ["whatsapp_notified", "owner_confirmed"]
    assert booking.contract_sent is False


def test_marking_twice_keeps_first_timestamp() -> None:
    booking = FakeBooking()
    assert mark_gate(booking, Gate.WHATSAPP_NOTIFIED, now=NOW)
    later = NOW + datetime.timedelta(hours=3)
    assert not mark_gate(booking, Gate.WHATSAPP_NOTIFIED, now=later)
    assert booking.whatsapp_notified_at == NOW


def test_owner_confirmed_is_the_status() -> None:
    booking = FakeBooking()
    mark_gate(booking, Gate.WHATSAPP_NOTIFIED, now=NOW)
    mark_gate(booking, Gate.OWNER_CONFIRMED, now=NOW)
    assert booking.status is BookingStatus.CONFIRMED


def test_unmarking_contract_sent_cascades() -> None:
    booking = _fully_settled()

    changed = set_gate(booking, Gate.CONTRACT_SENT, False)

    assert changed == {
        Gate.CONTRACT_SENT,
        Gate.GUEST_CONTRACT_SIGNED,
        Gate.DEPOSIT_PAID,
        Gate.REMAINING_PAID,
        Gate.CONTRACT_SIGNED,
    }
    assert booking.whatsapp_notified is True
    assert booking.status is BookingStatus.CONFIRMED
    assert booking.contract_sent is False
    assert booking.guest_contract_signed_name is None
    assert booking.guest_signed_contract_file_path is None
    assert booking.deposit_paid_at is None
    assert next_gate(booking) is Gate.CONTRACT_SENT


def test_unmarking_whatsapp_moves_confirmed_back_to_pending() -> None:
    booking = _fully_settled()
    set_gate(booking, Gate.WHATSAPP_NOTIFIED, False)
    assert booking.status is BookingStatus.PENDING
    assert not any(state.done for state in gate_states(booking))


def test_gate_states_report_missing_preconditions() -> None:
    booking = FakeBooking()
    mark_gate(booking, Gate.WHATSAPP_NOTIFIED, now=NOW)
    states = {state.gate: state for state in gate_states(booking)}
    assert states[Gate.WHATSAPP_NOTIFIED].done
    assert states[Gate.OWNER_CONFIRMED].can_mark
    assert states[Gate.DEPOSIT_PAID].missing == (
        Gate.OWNER_CONFIRMED,
        Gate.GUEST_CONTRACT_SIGNED,
    )


def test_new_owner_contract_voids_signature() -> None:
    booking = _fully_settled()
    first_sent = booking.contract_sent_at
    later = NOW + datetime.timedelta(days=1)

    cleared = attach_owner_contract(booking, "b/contract-v2.pdf", now=later)

    assert Gate.GUEST_CONTRACT_SIGNED in cleared
    assert booking.contract_file_path == "b/contract-v2.pdf"
    assert booking.contract_uploaded_at == later
    assert booking.contract_sent_at == first_sent
    assert booking.guest_contract_signed is False
    assert booking.deposit_paid is False


def test_guest_signature_needs_sent_contract() -> None:
    booking = FakeBooking()
    with pytest.raises(ContractNotYetSent):
        attach_guest_signature(booking, "guest-signed/t/x.pdf", now=NOW)


def test_guest_signature_defaults_signer_to_guest_name() -> None:
    booking = FakeBooking()
    mark_gate(booking, Gate.WHATSAPP_NOTIFIED, now=NOW)
    mark_gate(booking, Gate.OWNER_CONFIRMED, now=NOW)
    attach_owner_contract(booking, "b/c.pdf", now=NOW)
    attach_guest_signature(booking, "guest-signed/t/x.pdf", signer_name="  ", now=NOW)
    assert booking.guest_contract_signed_name == "Ana Guest"
    assert booking.guest_signed_contract_uploaded_at == NOW


def test_reactivation() -> None:
    assert reactivates(BookingStatus.CANCELLED, BookingStatus.PENDING)
    assert reactivates("declined", "confirmed")
    assert not reactivates(BookingStatus.PENDING, BookingStatus.CONFIRMED)
    assert not reactivates(BookingStatus.CONFIRMED, BookingStatus.CANCELLED)


@pytest.mark.parametrize(
    ("status", "today", "expected"),
    [
        (BookingStatus.CONFIRMED, datetime.date(2026, 2, 21), False),
        (BookingStatus.CONFIRMED, datetime.date(2026, 2, 22), True),
        (BookingStatus.PENDING, datetime.date(2026, 3, 1), False),
        (BookingStatus.CANCELLED, datetime.date(2026, 3, 1), False),
    ],
)
def test_review_window(status: BookingStatus, today: datetime.date, expected: bool) -> None:
    assert review_window_open(FakeBooking(status=status), today) is expected


def test_review_once() -> None:
    booking = FakeBooking(status=BookingStatus.CONFIRMED)
    submit_review(
        booking, text="Lovely house", rating=9, author=None, today=booking.check_out, now=NOW
    )
    assert booking.review_rating == 5
    assert booking.review_author == "Ana Guest"
    assert booking.review_submitted_at == NOW
    assert not review_window_open(booking, booking.check_out)
    with pytest.raises(ReviewWindowClosed):
        submit_review(booking, text="Again", today=booking.check_out, now=NOW)


def test_review_needs_text() -> None:
    booking = FakeBooking(status=BookingStatus.CONFIRMED)
    with pytest.raises(RequiredFieldsMissing):
        submit_review(booking, text="   ", rating=4, today=booking.check_out, now=NOW)
    assert booking.review_rating is None


def test_review_before_check_out_is_closed() -> None:
    booking = FakeBooking(status=BookingStatus.CONFIRMED)
    with pytest.raises(ReviewWindowClosed):
        submit_review(booking, text="Early", today=booking.check_in, now=NOW)


def test_delete_reason_required_for_confirmed() -> None:
    assert ensure_delete_reason(FakeBooking(), None) is None
    assert ensure_delete_reason(FakeBooking(), "  spam ") == "spam"
    with pytest.raises(ReasonRequired):
        ensure_delete_reason(FakeBooking(status=BookingStatus.CONFIRMED), " ")


def test_amend_reprices_and_ignores_own_dates() -> None:
    booking = FakeBooking()
    snapshot = CalendarSnapshot.build(
        bookings=[
            BookedRange(
                check_in=booking.check_in,
                check_out=booking.check_out,
                status=booking.status,
                booking_id=booking.id,
            )
        ],
        base_price=Decimal("85"),
    )

    priced = amend_stay(
        booking, datetime.date(2026, 2, 16), datetime.date(2026, 2, 22), snapshot
    )

    assert priced.total_price == Decimal("650.00")
    assert booking.check_in == datetime.date(2026, 2, 16)
    assert booking.total_price == Decimal("650.00")
    assert booking.deposit_amount == Decimal("195.00")


def test_amend_onto_another_stay_changes_nothing() -> None:
    booking = FakeBooking()
    other = BookedRange(
        check_in=datetime.date(2026, 3, 1),
        check_out=datetime.date(2026, 3, 8),
        status=BookingStatus.CONFIRMED,
        booking_id=uuid.uuid4(),
    )
    snapshot = CalendarSnapshot.build(bookings=[other])
    with pytest.raises(UnavailableRange):
        amend_stay(booking, datetime.date(2026, 2, 26), datetime.date(2026, 3, 4), snapshot)
    assert booking.check_in == datetime.date(2026, 2, 15)
    assert booking.total_price == Decimal("735.00")
