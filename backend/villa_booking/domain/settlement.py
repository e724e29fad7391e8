"""Settlement track of a booking dossier.

The track is an ordered list of gates. Each gate declares the gates it
depends on; marking a gate requires all of them, and unmarking a gate clears
every gate that depends on it, directly or transitively. The second gate is
not a column but the booking status itself being ``confirmed``.

All functions mutate the booking object handed in (an ORM row in practice)
and never touch storage.
"""

from __future__ import annotations

import datetime
import enum
import uuid
from dataclasses import dataclass
from typing import Any

from villa_booking.domain.booking_flow import BOOKING_FLOW
from villa_booking.domain.errors import (
    ContractNotYetSent,
    GateSequenceViolation,
    ReasonRequired,
    RequiredFieldsMissing,
    ReviewWindowClosed,
)
from villa_booking.domain.pricing import PricedStay, to_money
from villa_booking.domain.range_selection import CalendarSnapshot, validate_stay
from villa_booking.domain.statuses import BookingStatus, occupies_calendar


class Gate(str, enum.Enum):
    """Settlement gates in track order."""

    WHATSAPP_NOTIFIED = "whatsapp_notified"
    OWNER_CONFIRMED = "owner_confirmed"
    CONTRACT_SENT = "contract_sent"
    GUEST_CONTRACT_SIGNED = "guest_contract_signed"
    DEPOSIT_PAID = "deposit_paid"
    REMAINING_PAID = "remaining_paid"
    CONTRACT_SIGNED = "contract_signed"


GATE_ORDER: tuple[Gate, ...] = tuple(Gate)

PRECONDITIONS: dict[Gate, frozenset[Gate]] = {
    Gate.WHATSAPP_NOTIFIED: frozenset(),
    Gate.OWNER_CONFIRMED: frozenset({Gate.WHATSAPP_NOTIFIED}),
    Gate.CONTRACT_SENT: frozenset({Gate.WHATSAPP_NOTIFIED, Gate.OWNER_CONFIRMED}),
    Gate.GUEST_CONTRACT_SIGNED: frozenset({Gate.CONTRACT_SENT}),
    Gate.DEPOSIT_PAID: frozenset({Gate.GUEST_CONTRACT_SIGNED, Gate.OWNER_CONFIRMED}),
    Gate.REMAINING_PAID: frozenset(
        {Gate.DEPOSIT_PAID, Gate.GUEST_CONTRACT_SIGNED, Gate.OWNER_CONFIRMED}
    ),
    Gate.CONTRACT_SIGNED: frozenset(
        {
            Gate.DEPOSIT_PAID,
            Gate.REMAINING_PAID,
            Gate.GUEST_CONTRACT_SIGNED,
            Gate.OWNER_CONFIRMED,
        }
    ),
}

# flag column, timestamp column
_GATE_COLUMNS: dict[Gate, tuple[str, str]] = {
    Gate.WHATSAPP_NOTIFIED: ("whatsapp_notified", "whatsapp_notified_at"),
    Gate.CONTRACT_SENT: ("contract_sent", "contract_sent_at"),
    Gate.GUEST_CONTRACT_SIGNED: ("guest_contract_signed", "guest_contract_signed_at"),
    Gate.DEPOSIT_PAID: ("deposit_paid", "deposit_paid_at"),
    Gate.REMAINING_PAID: ("remaining_paid", "remaining_paid_at"),
    Gate.CONTRACT_SIGNED: ("contract_signed", "contract_signed_at"),
}

_GUEST_SIGNATURE_COLUMNS = (
    "guest_contract_signed_name",
    "guest_signed_contract_file_path",
    "guest_signed_contract_uploaded_at",
)


@dataclass(frozen=True, slots=True)
class GateState:
    """Read-only view of one gate for the dossier."""

    gate: Gate
    done: bool
    at: datetime.datetime | None
    can_mark: bool
    missing: tuple[Gate, ...]


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.UTC)


def reset_dependents_of(gate: Gate) -> frozenset[Gate]:
    """Return every gate that depends on ``gate``, transitively."""
    dependents: set[Gate] = set()
    frontier = {gate}
    while frontier:
        current = frontier.pop()
        for candidate, requires in PRECONDITIONS.items():
            if current in requires and candidate not in dependents:
                dependents.add(candidate)
                frontier.add(candidate)
    return frozenset(dependents)


def is_done(booking: Any, gate: Gate) -> bool:
    if gate is Gate.OWNER_CONFIRMED:
        return BookingStatus(booking.status) is BookingStatus.CONFIRMED
    flag, _ = _GATE_COLUMNS[gate]
    return bool(getattr(booking, flag))


def done_at(booking: Any, gate: Gate) -> datetime.datetime | None:
    if gate is Gate.OWNER_CONFIRMED:
        return None
    _, stamp = _GATE_COLUMNS[gate]
    return getattr(booking, stamp)


def missing_preconditions(booking: Any, gate: Gate) -> tuple[Gate, ...]:
    """Preconditions of ``gate`` not yet satisfied, in track order."""
    requires = PRECONDITIONS[gate]
    return tuple(g for g in GATE_ORDER if g in requires and not is_done(booking, g))


def ensure_can_mark(booking: Any, gate: Gate) -> None:
    missing = missing_preconditions(booking, gate)
    if missing:
        raise GateSequenceViolation(gate.value, [g.value for g in missing])


def _clear(booking: Any, gate: Gate) -> None:
    if gate is Gate.OWNER_CONFIRMED:
        if BookingStatus(booking.status) is BookingStatus.CONFIRMED:
            booking.status = BookingStatus.PENDING
        return
    flag, stamp = _GATE_COLUMNS[gate]
    setattr(booking, flag, False)
    setattr(booking, stamp, None)
    if gate is Gate.GUEST_CONTRACT_SIGNED:
        for column in _GUEST_SIGNATURE_COLUMNS:
            setattr(booking, column, None)


def clear_dependents(booking: Any, gate: Gate) -> frozenset[Gate]:
    """Clear every gate downstream of ``gate`` and return them."""
    dependents = reset_dependents_of(gate)
    for dependent in GATE_ORDER:
        if dependent in dependents:
            _clear(booking, dependent)
    return dependents


def mark_gate(
    booking: Any,
    gate: Gate,
    *,
    now: datetime.datetime | None = None,
    signer_name: str | None = None,
) -> bool:
    """Mark ``gate`` done. Return False if it already was.

    An already-done gate keeps its original timestamp.
    """
    if is_done(booking, gate):
        return False
    ensure_can_mark(booking, gate)
    now = now or _utcnow()
    if gate is Gate.OWNER_CONFIRMED:
        booking.status = BookingStatus.CONFIRMED
        return True
    flag, stamp = _GATE_COLUMNS[gate]
    setattr(booking, flag, True)
    setattr(booking, stamp, now)
    if gate is Gate.GUEST_CONTRACT_SIGNED:
        booking.guest_contract_signed_name = (
            signer_name or booking.guest_contract_signed_name or booking.guest_name
        )
    return True


def unmark_gate(booking: Any, gate: Gate) -> frozenset[Gate]:
    """Clear ``gate`` and cascade to its dependents; return all cleared gates."""
    _clear(booking, gate)
    return frozenset({gate}) | clear_dependents(booking, gate)


def set_gate(
    booking: Any,
    gate: Gate,
    done: bool,
    *,
    now: datetime.datetime | None = None,
) -> frozenset[Gate]:
    """Toggle a gate from the back office; return the gates that changed."""
    if done:
        return frozenset({gate}) if mark_gate(booking, gate, now=now) else frozenset()
    if not is_done(booking, gate):
        # cascade even when the gate itself is already clear
        return clear_dependents(booking, gate)
    return unmark_gate(booking, gate)


def gate_states(booking: Any) -> list[GateState]:
    states = []
    for gate in GATE_ORDER:
        missing = missing_preconditions(booking, gate)
        states.append(
            GateState(
                gate=gate,
                done=is_done(booking, gate),
                at=done_at(booking, gate),
                can_mark=not missing,
                missing=missing,
            )
        )
    return states


def next_gate(booking: Any) -> Gate | None:
    for gate in GATE_ORDER:
        if not is_done(booking, gate):
            return gate
    return None


def attach_owner_contract(
    booking: Any, file_path: str, *, now: datetime.datetime | None = None
) -> frozenset[Gate]:
    """Record a freshly uploaded owner contract.

    The upload counts as sending the contract. Any earlier signature and
    everything after it is reset; returns the gates that were cleared.
    """
    ensure_can_mark(booking, Gate.CONTRACT_SENT)
    now = now or _utcnow()
    cleared = clear_dependents(booking, Gate.CONTRACT_SENT)
    booking.contract_file_path = file_path
    booking.contract_uploaded_at = now
    booking.contract_sent = True
    booking.contract_sent_at = booking.contract_sent_at or now
    return cleared


def attach_guest_signature(
    booking: Any,
    file_path: str,
    *,
    signer_name: str | None = None,
    now: datetime.datetime | None = None,
) -> None:
    """Record a guest-signed contract uploaded through the dossier link."""
    if not booking.contract_sent:
        raise ContractNotYetSent()
    now = now or _utcnow()
    booking.guest_contract_signed = True
    booking.guest_contract_signed_at = now
    booking.guest_contract_signed_name = (signer_name or "").strip() or booking.guest_name
    booking.guest_signed_contract_file_path = file_path
    booking.guest_signed_contract_uploaded_at = now


def reactivates(previous: BookingStatus | str, new: BookingStatus | str) -> bool:
    """True when a status change moves a booking back onto the calendar."""
    return not occupies_calendar(previous) and occupies_calendar(new)


def review_window_open(booking: Any, today: datetime.date) -> bool:
    if BookingStatus(booking.status) is not BookingStatus.CONFIRMED:
        return False
    if booking.review_rating is not None:
        return False
    return today >= booking.check_out


def submit_review(
    booking: Any,
    *,
    text: str | None,
    rating: int | None = None,
    author: str | None = None,
    today: datetime.date | None = None,
    now: datetime.datetime | None = None,
) -> None:
    now = now or _utcnow()
    today = today or now.date()
    if BookingStatus(booking.status) is not BookingStatus.CONFIRMED:
        raise ReviewWindowClosed("Only confirmed stays can be reviewed")
    if booking.review_rating is not None:
        raise ReviewWindowClosed("A review was already submitted for this booking")
    if today < booking.check_out:
        raise ReviewWindowClosed("Reviews open on the check-out day")
    body = (text or "").strip()
    if not body:
        raise RequiredFieldsMissing(["review_text"])
    booking.review_author = (author or "").strip() or booking.guest_name
    booking.review_rating = max(1, min(5, rating if rating is not None else 5))
    booking.review_text = body
    booking.review_submitted_at = now


def ensure_delete_reason(booking: Any, reason: str | None) -> str | None:
    """Return the trimmed reason; confirmed bookings must give one."""
    cleaned = (reason or "").strip() or None
    if BookingStatus(booking.status) is BookingStatus.CONFIRMED and cleaned is None:
        raise ReasonRequired()
    return cleaned


def amend_stay(
    booking: Any,
    check_in: datetime.date,
    check_out: datetime.date,
    snapshot: CalendarSnapshot,
) -> PricedStay:
    """Move a booking to new dates and reprice it, or change nothing."""
    booking_id: uuid.UUID | None = getattr(booking, "id", None)
    priced = validate_stay(check_in, check_out, snapshot, exclude_id=booking_id)
    booking.check_in = check_in
    booking.check_out = check_out
    booking.total_price = priced.total_price
    booking.cleaning_fee = to_money(BOOKING_FLOW.cleaning_fee)
    booking.deposit_amount = priced.deposit_amount
    return priced
