"""Public calendar, quote and selection schemas."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from villa_booking.domain.range_selection import SelectionState
from villa_booking.schemas.settings import SiteSettings


class BookedRangeRead(BaseModel):
    check_in: date
    check_out: date

    model_config = ConfigDict(from_attributes=True)


class BlockedRangeRead(BaseModel):
    start_date: date
    end_date: date
    reason: str | None = None

    model_config = ConfigDict(from_attributes=True)


class NightlyRateRead(BaseModel):
    name: str
    start_date: date
    end_date: date
    price_per_night: Decimal
    min_stay: int | None = None

    model_config = ConfigDict(from_attributes=True)


class AvailabilityRead(BaseModel):
    """Everything the booking calendar needs in one response."""

    booked: list[BookedRangeRead]
    blocked: list[BlockedRangeRead]
    pricing_rules: list[NightlyRateRead]
    settings: SiteSettings
    min_stay_nights: int
    cleaning_fee: Decimal
    deposit_ratio: Decimal


class QuoteRequest(BaseModel):
    check_in: date
    check_out: date


class QuoteRead(BaseModel):
    check_in: date
    check_out: date
    nights: int
    nightly_total: Decimal
    cleaning_fee: Decimal
    total_price: Decimal
    min_stay_required: int
    deposit_amount: Decimal
    remaining_amount: Decimal
    remaining_due_date: date

    model_config = ConfigDict(from_attributes=True)


class SelectionRequest(BaseModel):
    """Replay calendar clicks and contact fields through the selection."""

    clicks: list[date] = Field(default_factory=list, max_length=50)
    guests: int = 1
    full_name: str | None = None
    email: str | None = None
    phone: str | None = None


class SelectionError(BaseModel):
    code: str
    detail: str


class SelectionRead(BaseModel):
    state: SelectionState
    check_in: date | None = None
    check_out: date | None = None
    guests: int
    max_guests: int
    quote: QuoteRead | None = None
    error: SelectionError | None = None
    can_submit: bool
    problems: list[SelectionError]
