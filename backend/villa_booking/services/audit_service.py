"""Helper utilities for recording audit events."""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from villa_booking.models.audit_event import AuditEvent
from villa_booking.services.store import fetch_all


def record_event(
    session: AsyncSession,
    *,
    event_type: str,
    user_id: uuid.UUID | None = None,
    booking_id: uuid.UUID | None = None,
    description: str | None = None,
    payload: dict[str, Any] | None = None,
) -> AuditEvent:
    """Stage an audit event in the caller's unit of work."""
    event = AuditEvent(
        user_id=user_id,
        booking_id=booking_id,
        event_type=event_type,
        description=description,
        payload=payload,
    )
    session.add(event)
    return event


async def list_events_for_booking(
    session: AsyncSession, booking_id: uuid.UUID
) -> list[AuditEvent]:
    statement = (
        select(AuditEvent)
        .where(AuditEvent.booking_id == booking_id)
        .order_by(AuditEvent.created_at.asc())
    )
    return await fetch_all(session, statement, action="list audit events")
