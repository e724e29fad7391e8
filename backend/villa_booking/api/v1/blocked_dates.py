"""Blocked date endpoints."""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from villa_booking.api.deps import get_db_session, require_admin
from villa_booking.domain.access import Caller
from villa_booking.schemas.blocked_date import (
    BlockDaysRequest,
    BlockedDateCreate,
    BlockedDateRead,
    UnblockDaysRequest,
    UnblockResult,
)
from villa_booking.services import blocked_date_service

router = APIRouter(prefix="/blocked-dates", tags=["blocked-dates"])


@router.get("", response_model=list[BlockedDateRead], summary="List blocked ranges")
async def list_blocked_dates(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> list[BlockedDateRead]:
    blocks = await blocked_date_service.list_blocked_dates(session)
    return [BlockedDateRead.model_validate(block) for block in blocks]


@router.post(
    "",
    response_model=BlockedDateRead,
    status_code=status.HTTP_201_CREATED,
    summary="Block a date range",
)
async def create_blocked_range(
    payload: BlockedDateCreate,
    session: Annotated[AsyncSession, Depends(get_db_session)],
    _: Annotated[Caller, Depends(require_admin)],
) -> BlockedDateRead:
    block = await blocked_date_service.create_blocked_range(session, payload)
    return BlockedDateRead.model_validate(block)


@router.post(
    "/block-days",
    response_model=BlockedDateRead,
    status_code=status.HTTP_201_CREATED,
    summary="Block the span of selected days",
)
async def block_days(
    payload: BlockDaysRequest,
    session: Annotated[AsyncSession, Depends(get_db_session)],
    _: Annotated[Caller, Depends(require_admin)],
) -> BlockedDateRead:
    block = await blocked_date_service.block_days(
        session, days=payload.days, reason=payload.reason
    )
    return BlockedDateRead.model_validate(block)


@router.post("/unblock-days", response_model=UnblockResult, summary="Unblock selected days")
async def unblock_days(
    payload: UnblockDaysRequest,
    session: Annotated[AsyncSession, Depends(get_db_session)],
    _: Annotated[Caller, Depends(require_admin)],
) -> UnblockResult:
    removed = await blocked_date_service.unblock_days(session, days=payload.days)
    return UnblockResult(removed=removed)


@router.delete(
    "/{block_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a blocked range"
)
async def delete_blocked_range(
    block_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(get_db_session)],
    _: Annotated[Caller, Depends(require_admin)],
) -> None:
    await blocked_date_service.delete_blocked_range(session, block_id=block_id)
