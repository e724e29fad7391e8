"""Contact form submissions."""

from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from villa_booking.domain.errors import NotFound
from villa_booking.domain.invalidation import Entity
from villa_booking.models import ContactMessage, ContactMessageStatus
from villa_booking.schemas.contact_message import ContactMessageCreate
from villa_booking.services import snapshot_cache
from villa_booking.services.store import commit, fetch_all, fetch_one


async def create_message(
    session: AsyncSession, payload: ContactMessageCreate
) -> ContactMessage:
    message = ContactMessage(
        name=payload.name.strip(),
        email=str(payload.email).lower(),
        phone=(payload.phone or "").strip() or None,
        message=payload.message.strip(),
        language=payload.language,
        status=ContactMessageStatus.NEW,
    )
    session.add(message)
    await commit(session, action="save contact message")
    await session.refresh(message)
    snapshot_cache.invalidate(Entity.CONTACT_MESSAGES)
    return message


async def list_messages(
    session: AsyncSession, *, status: ContactMessageStatus | None = None
) -> list[ContactMessage]:
    statement = select(ContactMessage).order_by(ContactMessage.created_at.desc())
    if status is not None:
        statement = statement.where(ContactMessage.status == status)
    return await fetch_all(session, statement, action="list contact messages")


async def update_status(
    session: AsyncSession, *, message_id: uuid.UUID, status: ContactMessageStatus
) -> ContactMessage:
    message = await fetch_one(
        session,
        select(ContactMessage).where(ContactMessage.id == message_id),
        action="load contact message",
    )
    if message is None:
        raise NotFound("Contact message")
    message.status = status
    await commit(session, action="update contact message")
    await session.refresh(message)
    snapshot_cache.invalidate(Entity.CONTACT_MESSAGES)
    return message


async def delete_message(session: AsyncSession, *, message_id: uuid.UUID) -> None:
    message = await fetch_one(
        session,
        select(ContactMessage).where(ContactMessage.id == message_id),
        action="load contact message",
    )
    if message is None:
        raise NotFound("Contact message")
    await session.delete(message)
    await commit(session, action="delete contact message")
    snapshot_cache.invalidate(Entity.CONTACT_MESSAGES)
