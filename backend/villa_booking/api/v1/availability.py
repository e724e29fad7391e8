"""Public calendar, quote and selection endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from villa_booking.api.deps import get_db_session
from villa_booking.domain.range_selection import DateRangeSelection
from villa_booking.schemas.availability import (
    AvailabilityRead,
    QuoteRead,
    QuoteRequest,
    SelectionError,
    SelectionRead,
    SelectionRequest,
)
from villa_booking.services import availability_service, settings_service

router = APIRouter(prefix="/availability", tags=["availability"])


@router.get("", response_model=AvailabilityRead, summary="Calendar data")
async def read_availability(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> AvailabilityRead:
    return await availability_service.availability_view(session)


@router.post("/quote", response_model=QuoteRead, summary="Price a stay")
async def quote_stay(
    payload: QuoteRequest,
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> QuoteRead:
    """Validate and price a stay; invalid ranges answer with the typed error."""
    return await availability_service.quote(
        session, check_in=payload.check_in, check_out=payload.check_out
    )


@router.post("/selection", response_model=SelectionRead, summary="Replay a date selection")
async def replay_selection(
    payload: SelectionRequest,
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> SelectionRead:
    snapshot = await availability_service.load_snapshot(session)
    site = await settings_service.get_settings_view(session)
    selection = DateRangeSelection(max_guests=site.max_guests.count)
    selection.set_guests(payload.guests)
    error = None
    for day in payload.clicks:
        error = selection.select(day, snapshot)
    contact = {"full_name": payload.full_name, "email": payload.email, "phone": payload.phone}
    problems = selection.submission_errors(contact)
    return SelectionRead(
        state=selection.state,
        check_in=selection.start,
        check_out=selection.end,
        guests=selection.guests,
        max_guests=selection.max_guests,
        quote=availability_service.quote_read(selection.priced) if selection.priced else None,
        error=SelectionError(code=error.code, detail=error.message) if error else None,
        can_submit=not problems,
        problems=[SelectionError(code=p.code, detail=p.message) for p in problems],
    )
