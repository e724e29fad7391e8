"""Process-wide ledger of armed destructive confirmations."""

from __future__ import annotations

from datetime import timedelta
from functools import lru_cache

from villa_booking.core.config import get_settings
from villa_booking.domain.confirmation import ConfirmationLedger


@lru_cache
def get_ledger() -> ConfirmationLedger:
    settings = get_settings()
    return ConfirmationLedger(ttl=timedelta(seconds=settings.confirmation_ttl_seconds))


def reset() -> None:
    get_ledger().clear()
