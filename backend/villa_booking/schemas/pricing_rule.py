"""Seasonal pricing rule schemas."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class PricingRuleBase(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    start_date: date
    end_date: date
    price_per_night: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    min_stay: int | None = Field(default=None, ge=1)
    is_active: bool = True


class PricingRuleCreate(PricingRuleBase):
    """Payload for creating a pricing rule."""

    @model_validator(mode="after")
    def _check_order(self) -> "PricingRuleCreate":
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class PricingRuleUpdate(BaseModel):
    """Mutable pricing rule fields."""

    name: str | None = Field(default=None, min_length=1, max_length=120)
    start_date: date | None = None
    end_date: date | None = None
    price_per_night: Decimal | None = Field(
        default=None, ge=0, max_digits=10, decimal_places=2
    )
    min_stay: int | None = Field(default=None, ge=1)
    is_active: bool | None = None


class PricingRuleRead(PricingRuleBase):
    id: uuid.UUID
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
