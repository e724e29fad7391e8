"""Site settings endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from villa_booking.api.deps import get_db_session, require_admin
from villa_booking.domain.access import Caller
from villa_booking.schemas.settings import SiteSettings, SiteSettingsUpdate
from villa_booking.services import settings_service

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("", response_model=SiteSettings, summary="Public site settings")
async def read_settings(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> SiteSettings:
    return await settings_service.get_settings_view(session)


@router.put("", response_model=SiteSettings, summary="Update site settings")
async def update_settings(
    payload: SiteSettingsUpdate,
    session: Annotated[AsyncSession, Depends(get_db_session)],
    _: Annotated[Caller, Depends(require_admin)],
) -> SiteSettings:
    return await settings_service.update_settings(session, payload)
