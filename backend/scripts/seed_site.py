"""Seed default settings, a dev admin and an example high-season rule."""

from __future__ import annotations

import asyncio
from datetime import date
from decimal import Decimal

from sqlalchemy import select

from villa_booking.core.config import get_settings
from villa_booking.db.session import get_sessionmaker
from villa_booking.models import PricingRule, UserRole
from villa_booking.schemas.settings import SiteSettings, SiteSettingsUpdate
from villa_booking.schemas.user import UserCreate
from villa_booking.services import settings_service, user_service

EMAIL = "owner@villa.example.com"
PASSWORD = "change-me-please"


async def main() -> None:
    settings = get_settings()
    sessionmaker = get_sessionmaker(settings.database_url)
    async with sessionmaker() as session:
        defaults = SiteSettings()
        await settings_service.update_settings(
            session, SiteSettingsUpdate(**defaults.model_dump())
        )
        print("Settings written")

        if await user_service.get_user_by_email(session, EMAIL) is None:
            await user_service.create_user(
                session,
                UserCreate(
                    email=EMAIL, password=PASSWORD, full_name="Owner", role=UserRole.ADMIN
                ),
            )
            print(f"Admin {EMAIL} created")
        else:
            print(f"User {EMAIL} already exists")

        year = date.today().year
        existing = await session.execute(
            select(PricingRule).where(PricingRule.name == f"High season {year}")
        )
        if existing.scalar_one_or_none() is None:
            session.add(
                PricingRule(
                    name=f"High season {year}",
                    start_date=date(year, 7, 1),
                    end_date=date(year, 8, 31),
                    price_per_night=Decimal("120.00"),
                    is_active=True,
                )
            )
            await session.commit()
            print("High season rule created")


if __name__ == "__main__":
    asyncio.run(main())
