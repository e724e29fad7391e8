"""Blocked date schemas."""

from __future__ import annotations

import uuid
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator


class BlockedDateCreate(BaseModel):
    """Payload for blocking an explicit inclusive range."""

    start_date: date
    end_date: date
    reason: str | None = Field(default=None, max_length=255)

    @model_validator(mode="after")
    def _check_order(self) -> "BlockedDateCreate":
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class BlockDaysRequest(BaseModel):
    """Block the span covering a set of calendar days."""

    days: list[date] = Field(min_length=1)
    reason: str | None = Field(default=None, max_length=255)


class UnblockDaysRequest(BaseModel):
    days: list[date] = Field(min_length=1)


class BlockedDateRead(BaseModel):
    id: uuid.UUID
    start_date: date
    end_date: date
    reason: str | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UnblockResult(BaseModel):
    removed: int
