"""Seasonal pricing rule endpoints."""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from villa_booking.api.deps import get_db_session, require_admin
from villa_booking.domain.access import Caller
from villa_booking.schemas.pricing_rule import (
    PricingRuleCreate,
    PricingRuleRead,
    PricingRuleUpdate,
)
from villa_booking.services import pricing_rule_service

router = APIRouter(prefix="/pricing-rules", tags=["pricing-rules"])


@router.get("", response_model=list[PricingRuleRead], summary="Active pricing rules")
async def list_active_rules(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> list[PricingRuleRead]:
    rules = await pricing_rule_service.list_rules(session, active_only=True)
    return [PricingRuleRead.model_validate(rule) for rule in rules]


@router.get("/all", response_model=list[PricingRuleRead], summary="All pricing rules")
async def list_all_rules(
    session: Annotated[AsyncSession, Depends(get_db_session)],
    _: Annotated[Caller, Depends(require_admin)],
) -> list[PricingRuleRead]:
    rules = await pricing_rule_service.list_rules(session)
    return [PricingRuleRead.model_validate(rule) for rule in rules]


@router.post(
    "",
    response_model=PricingRuleRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create pricing rule",
)
async def create_rule(
    payload: PricingRuleCreate,
    session: Annotated[AsyncSession, Depends(get_db_session)],
    _: Annotated[Caller, Depends(require_admin)],
) -> PricingRuleRead:
    rule = await pricing_rule_service.create_rule(session, payload)
    return PricingRuleRead.model_validate(rule)


@router.patch("/{rule_id}", response_model=PricingRuleRead, summary="Update pricing rule")
async def update_rule(
    rule_id: uuid.UUID,
    payload: PricingRuleUpdate,
    session: Annotated[AsyncSession, Depends(get_db_session)],
    _: Annotated[Caller, Depends(require_admin)],
) -> PricingRuleRead:
    rule = await pricing_rule_service.update_rule(session, rule_id=rule_id, payload=payload)
    return PricingRuleRead.model_validate(rule)


@router.delete(
    "/{rule_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete pricing rule"
)
async def delete_rule(
    rule_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(get_db_session)],
    _: Annotated[Caller, Depends(require_admin)],
) -> None:
    await pricing_rule_service.delete_rule(session, rule_id=rule_id)
