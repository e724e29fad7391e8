"""Calendar snapshots, quotes and the public availability view."""

from __future__ import annotations

import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from villa_booking.domain.availability import BlockedRange, BookedRange
from villa_booking.domain.booking_flow import BOOKING_FLOW
from villa_booking.domain.invalidation import View
from villa_booking.domain.pricing import PricedStay, RuleSnapshot, remaining_due_date
from villa_booking.domain.range_selection import CalendarSnapshot, validate_stay
from villa_booking.domain.statuses import OCCUPYING_STATUSES
from villa_booking.models import BlockedDate, Booking, PricingRule
from villa_booking.schemas.availability import (
    AvailabilityRead,
    BookedRangeRead,
    BlockedRangeRead,
    NightlyRateRead,
    QuoteRead,
)
from villa_booking.services import settings_service, snapshot_cache
from villa_booking.services.store import fetch_all


async def load_booked_ranges(session: AsyncSession) -> list[BookedRange]:
    bookings = await fetch_all(
        session,
        select(Booking)
        .where(Booking.status.in_(list(OCCUPYING_STATUSES)))
        .order_by(Booking.check_in.asc()),
        action="load booked dates",
    )
    return [
        BookedRange(
            check_in=booking.check_in,
            check_out=booking.check_out,
            status=booking.status,
            booking_id=booking.id,
        )
        for booking in bookings
    ]


async def load_blocked_ranges(session: AsyncSession) -> list[BlockedRange]:
    blocks = await fetch_all(
        session,
        select(BlockedDate).order_by(BlockedDate.start_date.asc()),
        action="load blocked dates",
    )
    return [
        BlockedRange(
            start_date=block.start_date,
            end_date=block.end_date,
            reason=block.reason,
            id=block.id,
        )
        for block in blocks
    ]


async def load_active_rules(session: AsyncSession) -> list[RuleSnapshot]:
    """Active rules in ``start_date`` order, which is the tie-break order."""
    rules = await fetch_all(
        session,
        select(PricingRule)
        .where(PricingRule.is_active.is_(True))
        .order_by(PricingRule.start_date.asc(), PricingRule.created_at.asc()),
        action="load pricing rules",
    )
    return [
        RuleSnapshot(
            name=rule.name,
            start_date=rule.start_date,
            end_date=rule.end_date,
            price_per_night=rule.price_per_night,
            is_active=rule.is_active,
            min_stay=rule.min_stay,
        )
        for rule in rules
    ]


async def load_snapshot(session: AsyncSession, *, fresh: bool = False) -> CalendarSnapshot:
    """Build a calendar snapshot.

    ``fresh`` bypasses the view cache; writes always validate against a
    fresh snapshot.
    """
    if fresh:
        booked = await load_booked_ranges(session)
        blocked = await load_blocked_ranges(session)
        rules = await load_active_rules(session)
        site = await settings_service.load_settings(session)
    else:
        booked = await snapshot_cache.get_or_load(
            View.BOOKED_DATES, lambda: load_booked_ranges(session)
        )
        blocked = await snapshot_cache.get_or_load(
            View.BLOCKED_DATES, lambda: load_blocked_ranges(session)
        )
        rules = await snapshot_cache.get_or_load(
            View.PRICING_RULES, lambda: load_active_rules(session)
        )
        site = await settings_service.get_settings_view(session)
    return CalendarSnapshot.build(
        bookings=booked,
        blocks=blocked,
        rules=rules,
        base_price=site.base_price.amount,
    )


def quote_read(priced: PricedStay) -> QuoteRead:
    return QuoteRead(
        check_in=priced.check_in,
        check_out=priced.check_out,
        nights=priced.nights,
        nightly_total=priced.nightly_total,
        cleaning_fee=priced.cleaning_fee,
        total_price=priced.total_price,
        min_stay_required=priced.min_stay_required,
        deposit_amount=priced.deposit_amount,
        remaining_amount=priced.remaining_amount,
        remaining_due_date=remaining_due_date(priced.check_in),
    )


async def quote(
    session: AsyncSession, *, check_in: datetime.date, check_out: datetime.date
) -> QuoteRead:
    """Validate and price a stay against the cached calendar."""
    snapshot = await load_snapshot(session)
    return quote_read(validate_stay(check_in, check_out, snapshot))


async def availability_view(session: AsyncSession) -> AvailabilityRead:
    """Public calendar payload: booked and blocked ranges, rules and settings."""
    snapshot = await load_snapshot(session)
    site = await settings_service.get_settings_view(session)
    return AvailabilityRead(
        booked=[
            BookedRangeRead(check_in=b.check_in, check_out=b.check_out)
            for b in snapshot.bookings
        ],
        blocked=[BlockedRangeRead.model_validate(block) for block in snapshot.blocks],
        pricing_rules=[NightlyRateRead.model_validate(rule) for rule in snapshot.rules],
        settings=site,
        min_stay_nights=BOOKING_FLOW.min_stay_nights,
        cleaning_fee=BOOKING_FLOW.cleaning_fee,
        deposit_ratio=BOOKING_FLOW.deposit_ratio,
    )
