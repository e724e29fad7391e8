"""Booking submission and back-office booking management."""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from villa_booking.api.deps import (
    BOOKING_RATE_DEP,
    get_confirmation_ledger,
    get_contracts_store,
    get_db_session,
    get_signed_contracts_store,
    read_upload,
    require_admin,
)
from villa_booking.core.config import get_settings
from villa_booking.domain.access import Caller
from villa_booking.domain.confirmation import ConfirmationLedger
from villa_booking.domain.settlement import Gate
from villa_booking.domain.statuses import BookingStatus
from villa_booking.integrations.blob_store import BlobStore
from villa_booking.schemas.availability import QuoteRead
from villa_booking.schemas.booking import (
    AuditEventRead,
    BookingCreate,
    BookingCreated,
    BookingDatesUpdate,
    BookingRead,
    BookingStatusUpdate,
    BookingYears,
    DossierRead,
    GateUpdate,
    PaymentNotesUpdate,
    SignedUrlRead,
)
from villa_booking.services import (
    audit_service,
    availability_service,
    booking_service,
    dossier_service,
    messaging_links,
    settings_service,
)

router = APIRouter(prefix="/bookings", tags=["bookings"])


@router.post(
    "",
    response_model=BookingCreated,
    status_code=status.HTTP_201_CREATED,
    summary="Request a booking",
    dependencies=[BOOKING_RATE_DEP],
)
async def create_booking(
    payload: BookingCreate,
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> BookingCreated:
    booking = await booking_service.create_booking(session, payload)
    return BookingCreated(
        id=booking.id,
        public_token=booking.public_token,
        status=booking.status,
        check_in=booking.check_in,
        check_out=booking.check_out,
        total_price=booking.total_price,
        deposit_amount=booking.deposit_amount,
        dossier_url=messaging_links.dossier_url(
            get_settings().public_site_url, booking.public_token
        ),
    )


@router.get("", response_model=list[BookingRead], summary="List bookings")
async def list_bookings(
    session: Annotated[AsyncSession, Depends(get_db_session)],
    _: Annotated[Caller, Depends(require_admin)],
    status_filter: Annotated[BookingStatus | None, Query(alias="status")] = None,
    year: Annotated[int | None, Query(ge=1900, le=9999)] = None,
) -> list[BookingRead]:
    bookings = await booking_service.list_bookings(session, status=status_filter, year=year)
    return [BookingRead.model_validate(booking) for booking in bookings]


@router.get("/years", response_model=BookingYears, summary="Check-in years with bookings")
async def booking_years(
    session: Annotated[AsyncSession, Depends(get_db_session)],
    _: Annotated[Caller, Depends(require_admin)],
) -> BookingYears:
    return BookingYears(years=await booking_service.booking_years(session))


@router.get("/{booking_id}", response_model=BookingRead, summary="Get booking")
async def get_booking(
    booking_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(get_db_session)],
    _: Annotated[Caller, Depends(require_admin)],
) -> BookingRead:
    booking = await booking_service.get_booking(session, booking_id)
    return BookingRead.model_validate(booking)


@router.get(
    "/{booking_id}/dossier", response_model=DossierRead, summary="Admin dossier view"
)
async def get_booking_dossier(
    booking_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(get_db_session)],
    caller: Annotated[Caller, Depends(require_admin)],
    contracts: Annotated[BlobStore, Depends(get_contracts_store)],
) -> DossierRead:
    booking = await booking_service.get_booking(session, booking_id)
    site = await settings_service.get_settings_view(session)
    return dossier_service.build_dossier(
        booking, caller=caller, holds_token=False, site=site, contracts=contracts
    )


@router.put("/{booking_id}/status", response_model=BookingRead, summary="Override status")
async def update_status(
    booking_id: uuid.UUID,
    payload: BookingStatusUpdate,
    session: Annotated[AsyncSession, Depends(get_db_session)],
    caller: Annotated[Caller, Depends(require_admin)],
    ledger: Annotated[ConfirmationLedger, Depends(get_confirmation_ledger)],
) -> BookingRead:
    """Set the status directly. Cancelling must be sent twice to take effect."""
    booking = await booking_service.get_booking(session, booking_id)
    booking = await booking_service.change_status(
        session, booking=booking, status=payload.status, caller=caller, ledger=ledger
    )
    return BookingRead.model_validate(booking)


@router.put(
    "/{booking_id}/gates/{gate}", response_model=BookingRead, summary="Toggle a gate"
)
async def update_gate(
    booking_id: uuid.UUID,
    gate: Gate,
    payload: GateUpdate,
    session: Annotated[AsyncSession, Depends(get_db_session)],
    caller: Annotated[Caller, Depends(require_admin)],
    ledger: Annotated[ConfirmationLedger, Depends(get_confirmation_ledger)],
) -> BookingRead:
    booking = await booking_service.get_booking(session, booking_id)
    await booking_service.set_gate(
        session,
        booking=booking,
        gate=gate,
        done=payload.done,
        caller=caller,
        ledger=ledger,
    )
    return BookingRead.model_validate(booking)


@router.put("/{booking_id}/dates", response_model=QuoteRead, summary="Change stay dates")
async def update_dates(
    booking_id: uuid.UUID,
    payload: BookingDatesUpdate,
    session: Annotated[AsyncSession, Depends(get_db_session)],
    caller: Annotated[Caller, Depends(require_admin)],
    ledger: Annotated[ConfirmationLedger, Depends(get_confirmation_ledger)],
) -> QuoteRead:
    booking = await booking_service.get_booking(session, booking_id)
    priced = await booking_service.amend_dates(
        session,
        booking=booking,
        check_in=payload.check_in,
        check_out=payload.check_out,
        caller=caller,
        ledger=ledger,
    )
    return availability_service.quote_read(priced)


@router.put(
    "/{booking_id}/payment-notes", response_model=BookingRead, summary="Edit payment notes"
)
async def update_payment_notes(
    booking_id: uuid.UUID,
    payload: PaymentNotesUpdate,
    session: Annotated[AsyncSession, Depends(get_db_session)],
    caller: Annotated[Caller, Depends(require_admin)],
    ledger: Annotated[ConfirmationLedger, Depends(get_confirmation_ledger)],
) -> BookingRead:
    booking = await booking_service.get_booking(session, booking_id)
    booking = await booking_service.update_payment_notes(
        session,
        booking=booking,
        payment_notes=payload.payment_notes,
        caller=caller,
        ledger=ledger,
    )
    return BookingRead.model_validate(booking)


@router.post(
    "/{booking_id}/contract", response_model=BookingRead, summary="Upload owner contract"
)
async def upload_contract(
    booking_id: uuid.UUID,
    file: Annotated[UploadFile, File()],
    session: Annotated[AsyncSession, Depends(get_db_session)],
    caller: Annotated[Caller, Depends(require_admin)],
    contracts: Annotated[BlobStore, Depends(get_contracts_store)],
    ledger: Annotated[ConfirmationLedger, Depends(get_confirmation_ledger)],
) -> BookingRead:
    booking = await booking_service.get_booking(session, booking_id)
    data = await read_upload(file)
    booking = await booking_service.upload_owner_contract(
        session,
        booking=booking,
        filename=file.filename,
        content_type=file.content_type,
        data=data,
        store=contracts,
        caller=caller,
        ledger=ledger,
    )
    return BookingRead.model_validate(booking)


@router.get(
    "/{booking_id}/signed-contract-url",
    response_model=SignedUrlRead,
    summary="Short-lived link to the guest-signed contract",
)
async def signed_contract_url(
    booking_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(get_db_session)],
    caller: Annotated[Caller, Depends(require_admin)],
    signed_contracts: Annotated[BlobStore, Depends(get_signed_contracts_store)],
) -> SignedUrlRead:
    booking = await booking_service.get_booking(session, booking_id)
    ttl = get_settings().signed_url_ttl_seconds
    url = booking_service.guest_signed_contract_url(
        booking, signed_contracts, ttl_seconds=ttl, caller=caller
    )
    return SignedUrlRead(url=url, expires_in=ttl)


@router.get(
    "/{booking_id}/events",
    response_model=list[AuditEventRead],
    summary="Audit trail of a booking",
)
async def booking_events(
    booking_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(get_db_session)],
    _: Annotated[Caller, Depends(require_admin)],
) -> list[AuditEventRead]:
    events = await audit_service.list_events_for_booking(session, booking_id)
    return [AuditEventRead.model_validate(event) for event in events]


@router.delete(
    "/{booking_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete booking",
)
async def delete_booking(
    booking_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(get_db_session)],
    caller: Annotated[Caller, Depends(require_admin)],
    ledger: Annotated[ConfirmationLedger, Depends(get_confirmation_ledger)],
    reason: Annotated[str | None, Query(max_length=1000)] = None,
) -> None:
    """Delete permanently. Must be sent twice with the same reason."""
    booking = await booking_service.get_booking(session, booking_id)
    await booking_service.delete_booking(
        session, booking=booking, reason=reason, caller=caller, ledger=ledger
    )
