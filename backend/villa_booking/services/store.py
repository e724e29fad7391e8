"""Commit helpers that turn database failures into typed storage errors."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from villa_booking.domain.errors import StorageFailure

logger = logging.getLogger(__name__)


async def commit(session: AsyncSession, *, action: str) -> None:
    """Commit the unit of work or roll back and raise ``StorageFailure``."""
    try:
        await session.commit()
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.exception("Store failure while trying to %s", action)
        raise StorageFailure(f"Could not {action}: {exc.__class__.__name__}") from exc


async def fetch_all(session: AsyncSession, statement: Any, *, action: str) -> list[Any]:
    """Run a select and return its scalars, raising ``StorageFailure`` on error."""
    try:
        result = await session.execute(statement)
    except SQLAlchemyError as exc:
        logger.exception("Store failure while trying to %s", action)
        raise StorageFailure(f"Could not {action}: {exc.__class__.__name__}") from exc
    return list(result.scalars().all())


async def fetch_one(session: AsyncSession, statement: Any, *, action: str) -> Any | None:
    rows = await fetch_all(session, statement, action=action)
    return rows[0] if rows else None
