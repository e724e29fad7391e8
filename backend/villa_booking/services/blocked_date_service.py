"""Owner-declared blocked periods."""

from __future__ import annotations

import datetime
import uuid
from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from villa_booking.domain.availability import is_date_booked, iter_nights
from villa_booking.domain.errors import NotFound, UnavailableRange
from villa_booking.domain.invalidation import Entity
from villa_booking.models import BlockedDate
from villa_booking.schemas.blocked_date import BlockedDateCreate
from villa_booking.services import availability_service, snapshot_cache
from villa_booking.services.store import commit, fetch_all, fetch_one


async def list_blocked_dates(session: AsyncSession) -> list[BlockedDate]:
    return await fetch_all(
        session,
        select(BlockedDate).order_by(BlockedDate.start_date.asc()),
        action="list blocked dates",
    )


async def create_blocked_range(
    session: AsyncSession, payload: BlockedDateCreate
) -> BlockedDate:
    block = BlockedDate(
        start_date=payload.start_date,
        end_date=payload.end_date,
        reason=(payload.reason or "").strip() or None,
    )
    session.add(block)
    await commit(session, action="block dates")
    await session.refresh(block)
    snapshot_cache.invalidate(Entity.BLOCKED_DATES)
    return block


async def block_days(
    session: AsyncSession,
    *,
    days: Iterable[datetime.date],
    reason: str | None = None,
) -> BlockedDate:
    """Block the span from the earliest to the latest selected day.

    No day of that span may be held by a pending or confirmed booking.
    """
    selected = sorted(set(days))
    span = iter_nights(selected[0], selected[-1] + datetime.timedelta(days=1))
    booked = await availability_service.load_booked_ranges(session)
    clashes = [day for day in span if is_date_booked(day, booked)]
    if clashes:
        raise UnavailableRange(
            "Cannot block days that are already booked: "
            + ", ".join(day.isoformat() for day in clashes)
        )
    return await create_blocked_range(
        session,
        BlockedDateCreate(start_date=selected[0], end_date=selected[-1], reason=reason),
    )


async def unblock_days(
    session: AsyncSession, *, days: Iterable[datetime.date]
) -> int:
    """Remove every blocked range containing any of ``days``."""
    selected = set(days)
    removed = 0
    for block in await list_blocked_dates(session):
        if any(block.start_date <= day <= block.end_date for day in selected):
            await session.delete(block)
            removed += 1
    if removed:
        await commit(session, action="unblock dates")
        snapshot_cache.invalidate(Entity.BLOCKED_DATES)
    return removed


async def delete_blocked_range(session: AsyncSession, *, block_id: uuid.UUID) -> None:
    block = await fetch_one(
        session,
        select(BlockedDate).where(BlockedDate.id == block_id),
        action="load blocked range",
    )
    if block is None:
        raise NotFound("Blocked range")
    await session.delete(block)
    await commit(session, action="delete blocked range")
    snapshot_cache.invalidate(Entity.BLOCKED_DATES)
