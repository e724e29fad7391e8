"""Site settings persistence over key/value rows."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from villa_booking.domain.invalidation import Entity, View
from villa_booking.models.setting import Setting
from villa_booking.schemas.settings import SETTING_KEYS, SiteSettings, SiteSettingsUpdate
from villa_booking.services import snapshot_cache
from villa_booking.services.store import commit, fetch_all

logger = logging.getLogger(__name__)


async def load_settings(session: AsyncSession) -> SiteSettings:
    """Read stored settings straight from the database.

    Rows for unknown keys are ignored and a malformed row falls back to the
    default for that key, so one bad value cannot take the site down.
    """
    rows = await fetch_all(session, select(Setting), action="load settings")
    defaults = SiteSettings()
    values: dict[str, Any] = {}
    for row in rows:
        if row.key not in SETTING_KEYS:
            logger.warning("Ignoring unknown setting %s", row.key)
            continue
        field_type = type(getattr(defaults, row.key))
        try:
            values[row.key] = field_type.model_validate(row.value)
        except ValidationError:
            logger.warning("Ignoring malformed value for setting %s", row.key)
    return defaults.model_copy(update=values)


async def get_settings_view(session: AsyncSession) -> SiteSettings:
    """Cached read used by public pages."""

    async def _load() -> SiteSettings:
        return await load_settings(session)

    return await snapshot_cache.get_or_load(View.SETTINGS, _load)


async def update_settings(
    session: AsyncSession, payload: SiteSettingsUpdate
) -> SiteSettings:
    """Upsert the keys present in ``payload``."""
    changes = payload.model_dump(mode="json", exclude_unset=True, exclude_none=True)
    if changes:
        rows = await fetch_all(
            session,
            select(Setting).where(Setting.key.in_(list(changes))),
            action="update settings",
        )
        existing = {row.key: row for row in rows}
        for key, value in changes.items():
            row = existing.get(key)
            if row is None:
                session.add(Setting(key=key, value=value))
            else:
                row.value = value
        await commit(session, action="update settings")
        snapshot_cache.invalidate(Entity.SETTINGS)
    return await load_settings(session)
