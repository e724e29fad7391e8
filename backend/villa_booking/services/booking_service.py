"""Booking creation and every mutation on a booking's dossier."""

from __future__ import annotations

import datetime
import logging
import uuid
from decimal import Decimal

from sqlalchemy import extract, select
from sqlalchemy.ext.asyncio import AsyncSession

from villa_booking.domain import settlement
from villa_booking.domain.access import Caller, DossierAction, require
from villa_booking.domain.availability import has_unavailable_in_range
from villa_booking.domain.booking_flow import BOOKING_FLOW
from villa_booking.domain.confirmation import ConfirmationLedger, DestructiveAction
from villa_booking.domain.errors import (
    BlobFailure,
    ContractNotYetSent,
    GuestCountOutOfRange,
    InvalidDates,
    NotFound,
    QuoteMismatch,
    RequiredFieldsMissing,
    UnavailableRange,
)
from villa_booking.domain.invalidation import Entity
from villa_booking.domain.pricing import PricedStay, remaining_amount, to_money
from villa_booking.domain.range_selection import validate_stay
from villa_booking.domain.statuses import BookingStatus
from villa_booking.integrations.blob_store import BlobStore, BlobStoreError
from villa_booking.models import Booking
from villa_booking.schemas.booking import BookingCreate, ReviewCreate
from villa_booking.services import (
    audit_service,
    availability_service,
    contract_files,
    settings_service,
    snapshot_cache,
)
from villa_booking.services.store import commit, fetch_all, fetch_one

logger = logging.getLogger(__name__)


def _today() -> datetime.date:
    return datetime.datetime.now(datetime.UTC).date()


def _actor_id(caller: Caller) -> uuid.UUID | None:
    return caller.identity if isinstance(caller.identity, uuid.UUID) else None


async def _finish(
    session: AsyncSession, booking: Booking | None, *, action: str
) -> None:
    await commit(session, action=action)
    if booking is not None:
        await session.refresh(booking)
    snapshot_cache.invalidate(Entity.BOOKINGS)


async def _ensure_dates_free(session: AsyncSession, booking: Booking) -> None:
    snapshot = await availability_service.load_snapshot(session, fresh=True)
    if has_unavailable_in_range(
        booking.check_in,
        booking.check_out,
        snapshot.bookings,
        snapshot.blocks,
        exclude_id=booking.id,
    ):
        raise UnavailableRange("These dates are now booked or blocked")


# ----------------------------------------------------------------------
# Public booking flow
# ----------------------------------------------------------------------
async def create_booking(
    session: AsyncSession,
    payload: BookingCreate,
    *,
    today: datetime.date | None = None,
) -> Booking:
    """Validate, price and store a new pending booking.

    The stay is re-validated against a fresh snapshot. A client quote that no
    longer matches is rejected rather than silently repriced.
    """
    today = today or _today()
    contact = {
        "guest_name": payload.guest_name.strip(),
        "guest_email": payload.guest_email.strip().lower(),
        "guest_phone": payload.guest_phone.strip(),
    }
    missing = [field for field, value in contact.items() if not value]
    if missing:
        raise RequiredFieldsMissing(missing)

    site = await settings_service.load_settings(session)
    guests = max(payload.num_guests, 1)
    if guests > site.max_guests.count:
        raise GuestCountOutOfRange(site.max_guests.count)
    if payload.check_in < today:
        raise InvalidDates("Check-in cannot be in the past")

    snapshot = await availability_service.load_snapshot(session, fresh=True)
    priced = validate_stay(payload.check_in, payload.check_out, snapshot)
    if payload.quoted_total is not None and to_money(payload.quoted_total) != priced.total_price:
        raise QuoteMismatch(
            quoted=str(to_money(payload.quoted_total)), current=str(priced.total_price)
        )

    booking = Booking(
        id=uuid.uuid4(),
        **contact,
        check_in=payload.check_in,
        check_out=payload.check_out,
        num_guests=guests,
        message=(payload.message or "").strip() or None,
        language=payload.language,
        status=BookingStatus.PENDING,
        total_price=priced.total_price,
        cleaning_fee=to_money(BOOKING_FLOW.cleaning_fee),
        deposit_amount=priced.deposit_amount,
    )
    session.add(booking)
    audit_service.record_event(
        session,
        event_type="booking.created",
        booking_id=booking.id,
        description="Booking requested",
        payload={
            "check_in": booking.check_in.isoformat(),
            "check_out": booking.check_out.isoformat(),
            "total_price": str(booking.total_price),
        },
    )
    await _finish(session, booking, action="create booking")
    logger.info("Booking %s created for %s nights", booking.id, priced.nights)
    return booking


# ----------------------------------------------------------------------
# Lookups
# ----------------------------------------------------------------------
async def list_bookings(
    session: AsyncSession,
    *,
    status: BookingStatus | None = None,
    year: int | None = None,
) -> list[Booking]:
    """Newest first, optionally filtered by status and check-in year."""
    statement = select(Booking).order_by(Booking.created_at.desc())
    if status is not None:
        statement = statement.where(Booking.status == status)
    if year is not None:
        statement = statement.where(extract("year", Booking.check_in) == year)
    return await fetch_all(session, statement, action="list bookings")


async def booking_years(session: AsyncSession) -> list[int]:
    bookings = await fetch_all(session, select(Booking), action="list bookings")
    return sorted({booking.check_in.year for booking in bookings}, reverse=True)


async def get_booking(session: AsyncSession, booking_id: uuid.UUID) -> Booking:
    booking = await fetch_one(
        session, select(Booking).where(Booking.id == booking_id), action="load booking"
    )
    if booking is None:
        raise NotFound("Booking")
    return booking


async def get_booking_by_token(session: AsyncSession, token: str) -> Booking:
    """Resolve a dossier token; unknown tokens are indistinguishable from missing rows."""
    if not token or len(token) > 64:
        raise NotFound("Booking")
    booking = await fetch_one(
        session,
        select(Booking).where(Booking.public_token == token),
        action="load booking",
    )
    if booking is None:
        raise NotFound("Booking")
    return booking


# ----------------------------------------------------------------------
# Back-office mutations
# ----------------------------------------------------------------------
async def change_status(
    session: AsyncSession,
    *,
    booking: Booking,
    status: BookingStatus,
    caller: Caller,
    ledger: ConfirmationLedger,
) -> Booking:
    """Override the top-level status without touching the settlement gates.

    Cancelling needs the request twice. A booking leaving ``declined`` or
    ``cancelled`` must still fit the calendar.
    """
    require(caller, DossierAction.CHANGE_STATUS)
    previous = BookingStatus(booking.status)
    if status is BookingStatus.CANCELLED and previous is not BookingStatus.CANCELLED:
        ledger.check(
            caller.identity, DestructiveAction.CANCEL, str(booking.id), status.value
        )
    else:
        ledger.disarm(caller.identity)
    if status is previous:
        return booking

    if settlement.reactivates(previous, status):
        await _ensure_dates_free(session, booking)

    booking.status = status
    audit_service.record_event(
        session,
        event_type="booking.status_changed",
        user_id=_actor_id(caller),
        booking_id=booking.id,
        description=f"Status changed from {previous.value} to {status.value}",
        payload={"from": previous.value, "to": status.value},
    )
    await _finish(session, booking, action="update booking status")
    return booking


async def set_gate(
    session: AsyncSession,
    *,
    booking: Booking,
    gate: settlement.Gate,
    done: bool,
    caller: Caller,
    ledger: ConfirmationLedger,
) -> frozenset[settlement.Gate]:
    """Mark or unmark one settlement gate; return the gates that changed."""
    require(caller, DossierAction.TOGGLE_GATE)
    ledger.disarm(caller.identity)
    previous = BookingStatus(booking.status)
    if (
        done
        and gate is settlement.Gate.OWNER_CONFIRMED
        and settlement.reactivates(previous, BookingStatus.CONFIRMED)
    ):
        await _ensure_dates_free(session, booking)
    changed = settlement.set_gate(booking, gate, done)
    if not changed:
        return changed
    audit_service.record_event(
        session,
        event_type="booking.gate_marked" if done else "booking.gate_cleared",
        user_id=_actor_id(caller),
        booking_id=booking.id,
        description=f"{gate.value} {'marked' if done else 'cleared'}",
        payload={"gate": gate.value, "changed": sorted(g.value for g in changed)},
    )
    await _finish(session, booking, action="update settlement gate")
    return changed


async def amend_dates(
    session: AsyncSession,
    *,
    booking: Booking,
    check_in: datetime.date,
    check_out: datetime.date,
    caller: Caller,
    ledger: ConfirmationLedger,
) -> PricedStay:
    """Move a booking and reprice it at current rules, all or nothing."""
    require(caller, DossierAction.EDIT_DATES)
    ledger.disarm(caller.identity)
    snapshot = await availability_service.load_snapshot(session, fresh=True)
    previous = (booking.check_in, booking.check_out, booking.total_price)
    priced = settlement.amend_stay(booking, check_in, check_out, snapshot)
    audit_service.record_event(
        session,
        event_type="booking.dates_amended",
        user_id=_actor_id(caller),
        booking_id=booking.id,
        description="Stay dates changed and repriced",
        payload={
            "from": [previous[0].isoformat(), previous[1].isoformat()],
            "to": [check_in.isoformat(), check_out.isoformat()],
            "previous_total": str(previous[2]),
            "total_price": str(priced.total_price),
        },
    )
    await _finish(session, booking, action="amend booking dates")
    return priced


async def update_payment_notes(
    session: AsyncSession,
    *,
    booking: Booking,
    payment_notes: str | None,
    caller: Caller,
    ledger: ConfirmationLedger,
) -> Booking:
    require(caller, DossierAction.EDIT_PAYMENT_NOTES)
    ledger.disarm(caller.identity)
    booking.payment_notes = (payment_notes or "").strip() or None
    await _finish(session, booking, action="update payment notes")
    return booking


def _upload(store: BlobStore, key: str, data: bytes, content_type: str) -> None:
    try:
        store.upload(key, data, content_type=content_type)
    except BlobStoreError as exc:
        logger.exception("Blob upload failed for bucket %s", store.bucket)
        raise BlobFailure(str(exc)) from exc


async def upload_owner_contract(
    session: AsyncSession,
    *,
    booking: Booking,
    filename: str | None,
    content_type: str | None,
    data: bytes,
    store: BlobStore,
    caller: Caller,
    ledger: ConfirmationLedger,
) -> Booking:
    """Store a new owner contract; a fresh contract voids any earlier signature."""
    require(caller, DossierAction.UPLOAD_CONTRACT)
    ledger.disarm(caller.identity)
    settlement.ensure_can_mark(booking, settlement.Gate.CONTRACT_SENT)
    resolved_type = contract_files.resolve_content_type(filename, content_type)
    key = contract_files.owner_contract_key(booking.id, filename)
    _upload(store, key, data, resolved_type)
    cleared = settlement.attach_owner_contract(booking, key)
    audit_service.record_event(
        session,
        event_type="booking.contract_uploaded",
        user_id=_actor_id(caller),
        booking_id=booking.id,
        description="Owner contract uploaded",
        payload={"path": key, "cleared": sorted(g.value for g in cleared)},
    )
    await _finish(session, booking, action="save contract")
    return booking


async def upload_guest_signed_contract(
    session: AsyncSession,
    *,
    token: str,
    filename: str | None,
    content_type: str | None,
    data: bytes,
    signer_name: str | None,
    store: BlobStore,
    caller: Caller,
) -> Booking:
    booking = await get_booking_by_token(session, token)
    require(caller, DossierAction.UPLOAD_SIGNED_CONTRACT, holds_token=True)
    if not booking.contract_sent:
        raise ContractNotYetSent()
    resolved_type = contract_files.resolve_content_type(filename, content_type)
    key = contract_files.guest_signed_key(booking.public_token, filename)
    _upload(store, key, data, resolved_type)
    settlement.attach_guest_signature(booking, key, signer_name=signer_name)
    audit_service.record_event(
        session,
        event_type="booking.guest_contract_signed",
        user_id=_actor_id(caller),
        booking_id=booking.id,
        description="Guest uploaded the signed contract",
        payload={"path": key, "signer": booking.guest_contract_signed_name},
    )
    await _finish(session, booking, action="save signed contract")
    return booking


async def submit_review(
    session: AsyncSession,
    *,
    token: str,
    payload: ReviewCreate,
    caller: Caller,
    today: datetime.date | None = None,
) -> Booking:
    booking = await get_booking_by_token(session, token)
    require(caller, DossierAction.SUBMIT_REVIEW, holds_token=True)
    settlement.submit_review(
        booking,
        text=payload.text,
        rating=payload.rating,
        author=payload.author,
        today=today or _today(),
    )
    await _finish(session, booking, action="save review")
    return booking


async def delete_booking(
    session: AsyncSession,
    *,
    booking: Booking,
    reason: str | None,
    caller: Caller,
    ledger: ConfirmationLedger,
) -> None:
    """Delete permanently after a confirmed repeat; confirmed stays need a reason."""
    require(caller, DossierAction.DELETE)
    cleaned = settlement.ensure_delete_reason(booking, reason)
    ledger.check(caller.identity, DestructiveAction.DELETE, str(booking.id), cleaned or "")
    audit_service.record_event(
        session,
        event_type="booking.deleted",
        user_id=_actor_id(caller),
        booking_id=booking.id,
        description=cleaned or "Booking deleted",
        payload={
            "status": BookingStatus(booking.status).value,
            "guest_name": booking.guest_name,
            "check_in": booking.check_in.isoformat(),
            "check_out": booking.check_out.isoformat(),
            "reason": cleaned,
        },
    )
    await session.delete(booking)
    await _finish(session, None, action="delete booking")
    logger.info("Booking %s deleted", booking.id)


# ----------------------------------------------------------------------
# Contract URLs
# ----------------------------------------------------------------------
def contract_url(booking: Booking, store: BlobStore) -> str | None:
    if not booking.contract_file_path:
        return None
    return store.public_url(booking.contract_file_path)


def guest_signed_contract_url(
    booking: Booking, store: BlobStore, *, ttl_seconds: int, caller: Caller
) -> str:
    require(caller, DossierAction.VIEW_SIGNED_CONTRACT)
    if not booking.guest_signed_contract_file_path:
        raise NotFound("Signed contract")
    try:
        return store.create_signed_url(booking.guest_signed_contract_file_path, ttl_seconds)
    except BlobStoreError as exc:
        logger.exception("Could not sign URL for booking %s", booking.id)
        raise BlobFailure(str(exc)) from exc


def deposit_and_balance(booking: Booking) -> tuple[Decimal, Decimal]:
    deposit = to_money(booking.deposit_amount)
    return deposit, remaining_amount(to_money(booking.total_price), deposit)
