"""Seasonal pricing rule management."""

from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from villa_booking.domain.errors import InvalidDates, NotFound
from villa_booking.domain.invalidation import Entity
from villa_booking.models import PricingRule
from villa_booking.schemas.pricing_rule import PricingRuleCreate, PricingRuleUpdate
from villa_booking.services import snapshot_cache
from villa_booking.services.store import commit, fetch_all, fetch_one


async def list_rules(session: AsyncSession, *, active_only: bool = False) -> list[PricingRule]:
    statement = select(PricingRule).order_by(
        PricingRule.start_date.asc(), PricingRule.created_at.asc()
    )
    if active_only:
        statement = statement.where(PricingRule.is_active.is_(True))
    return await fetch_all(session, statement, action="list pricing rules")


async def get_rule(session: AsyncSession, rule_id: uuid.UUID) -> PricingRule:
    rule = await fetch_one(
        session,
        select(PricingRule).where(PricingRule.id == rule_id),
        action="load pricing rule",
    )
    if rule is None:
        raise NotFound("Pricing rule")
    return rule


async def create_rule(session: AsyncSession, payload: PricingRuleCreate) -> PricingRule:
    rule = PricingRule(**payload.model_dump())
    session.add(rule)
    await commit(session, action="create pricing rule")
    await session.refresh(rule)
    snapshot_cache.invalidate(Entity.PRICING_RULES)
    return rule


async def update_rule(
    session: AsyncSession, *, rule_id: uuid.UUID, payload: PricingRuleUpdate
) -> PricingRule:
    rule = await get_rule(session, rule_id)
    for field, value in payload.model_dump(exclude_unset=True).items():
        if value is None and field != "min_stay":
            continue
        setattr(rule, field, value)
    if rule.end_date < rule.start_date:
        await session.rollback()
        raise InvalidDates("end_date must not be before start_date")
    await commit(session, action="update pricing rule")
    await session.refresh(rule)
    snapshot_cache.invalidate(Entity.PRICING_RULES)
    return rule


async def delete_rule(session: AsyncSession, *, rule_id: uuid.UUID) -> None:
    rule = await get_rule(session, rule_id)
    await session.delete(rule)
    await commit(session, action="delete pricing rule")
    snapshot_cache.invalidate(Entity.PRICING_RULES)
