"""Contact form endpoints."""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from villa_booking.api.deps import BOOKING_RATE_DEP, get_db_session, require_admin
from villa_booking.domain.access import Caller
from villa_booking.models.contact_message import ContactMessageStatus
from villa_booking.schemas.contact_message import (
    ContactMessageCreate,
    ContactMessageRead,
    ContactMessageStatusUpdate,
)
from villa_booking.services import contact_message_service

router = APIRouter(prefix="/contact-messages", tags=["contact-messages"])


@router.post(
    "",
    response_model=ContactMessageRead,
    status_code=status.HTTP_201_CREATED,
    summary="Send a message to the owner",
    dependencies=[BOOKING_RATE_DEP],
)
async def create_message(
    payload: ContactMessageCreate,
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> ContactMessageRead:
    message = await contact_message_service.create_message(session, payload)
    return ContactMessageRead.model_validate(message)


@router.get("", response_model=list[ContactMessageRead], summary="List messages")
async def list_messages(
    session: Annotated[AsyncSession, Depends(get_db_session)],
    _: Annotated[Caller, Depends(require_admin)],
    status_filter: Annotated[ContactMessageStatus | None, Query(alias="status")] = None,
) -> list[ContactMessageRead]:
    messages = await contact_message_service.list_messages(session, status=status_filter)
    return [ContactMessageRead.model_validate(message) for message in messages]


@router.patch(
    "/{message_id}/status", response_model=ContactMessageRead, summary="Triage a message"
)
async def update_message_status(
    message_id: uuid.UUID,
    payload: ContactMessageStatusUpdate,
    session: Annotated[AsyncSession, Depends(get_db_session)],
    _: Annotated[Caller, Depends(require_admin)],
) -> ContactMessageRead:
    message = await contact_message_service.update_status(
        session, message_id=message_id, status=payload.status
    )
    return ContactMessageRead.model_validate(message)


@router.delete(
    "/{message_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a message"
)
async def delete_message(
    message_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(get_db_session)],
    _: Annotated[Caller, Depends(require_admin)],
) -> None:
    await contact_message_service.delete_message(session, message_id=message_id)
