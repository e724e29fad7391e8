"""Site settings as a closed record.

Each known key has its own small value model; unknown keys and extra
attributes are rejected instead of being stored silently.
"""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class _SettingValue(BaseModel):
    model_config = ConfigDict(extra="forbid")


class BasePrice(_SettingValue):
    amount: Decimal = Field(default=Decimal("85"), ge=0, max_digits=10, decimal_places=2)


class MaxGuests(_SettingValue):
    count: int = Field(default=4, ge=1, le=50)


class TimeOfDay(_SettingValue):
    time: str = Field(pattern=r"^([01]\d|2[0-3]):[0-5]\d$")


class Currency(_SettingValue):
    code: str = Field(default="EUR", min_length=3, max_length=3)
    symbol: str = Field(default="€", min_length=1, max_length=4)


class OwnerEmail(_SettingValue):
    email: EmailStr | None = None


class OwnerPhone(_SettingValue):
    phone: str | None = None


class WhatsappNumber(_SettingValue):
    number: str | None = None


class SiteSettings(BaseModel):
    """Every setting the site knows about, with defaults."""

    base_price: BasePrice = Field(default_factory=BasePrice)
    max_guests: MaxGuests = Field(default_factory=MaxGuests)
    check_in_time: TimeOfDay = Field(default_factory=lambda: TimeOfDay(time="16:00"))
    check_out_time: TimeOfDay = Field(default_factory=lambda: TimeOfDay(time="10:00"))
    currency: Currency = Field(default_factory=Currency)
    owner_email: OwnerEmail = Field(default_factory=OwnerEmail)
    owner_phone: OwnerPhone = Field(default_factory=OwnerPhone)
    whatsapp_number: WhatsappNumber = Field(default_factory=WhatsappNumber)

    model_config = ConfigDict(extra="forbid")


class SiteSettingsUpdate(BaseModel):
    """Partial update; only the keys present are written."""

    base_price: BasePrice | None = None
    max_guests: MaxGuests | None = None
    check_in_time: TimeOfDay | None = None
    check_out_time: TimeOfDay | None = None
    currency: Currency | None = None
    owner_email: OwnerEmail | None = None
    owner_phone: OwnerPhone | None = None
    whatsapp_number: WhatsappNumber | None = None

    model_config = ConfigDict(extra="forbid")


SETTING_KEYS: tuple[str, ...] = tuple(SiteSettings.model_fields)
