"""Test fixtures for the villa booking backend."""
from __future__ import annotations

import os
from collections.abc import AsyncIterator
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")

from villa_booking.core.config import get_settings
from villa_booking.core.security import get_password_hash
from villa_booking.db.base import Base
from villa_booking.db.session import dispose_engine, get_sessionmaker
from villa_booking.main import app
from villa_booking.models import Booking, BookingStatus, User, UserRole, UserStatus
from villa_booking.services import confirmation_service, snapshot_cache


@pytest.fixture(scope="session")
def db_url(tmp_path_factory: pytest.TempPathFactory) -> str:
    """Provide a temporary SQLite database URL for the test session."""
    db_path = tmp_path_factory.mktemp("db") / "test.db"
    return f"sqlite+aiosqlite:///{db_path}"


@pytest_asyncio.fixture()
async def reset_database(
    db_url: str, tmp_path: Path
) -> AsyncIterator[None]:
    """Drop and recreate the database schema for an isolated test."""
    os.environ["DATABASE_URL"] = db_url
    os.environ["STORAGE_ROOT"] = str(tmp_path / "storage")
    get_settings.cache_clear()
    get_settings()
    snapshot_cache.clear()
    confirmation_service.reset()

    await dispose_engine(db_url)
    engine = create_async_engine(db_url, future=True)
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.drop_all)
        await connection.run_sync(Base.metadata.create_all)
    await engine.dispose()
    yield
    snapshot_cache.clear()
    confirmation_service.reset()
    await dispose_engine(db_url)


@pytest_asyncio.fixture()
async def app_context(
    reset_database: AsyncIterator[None], db_url: str
) -> AsyncIterator[dict[str, object]]:
    """Yield an async client and a seeded admin account."""
    sessionmaker = get_sessionmaker(db_url)
    admin_password = "Passw0rd!"

    async with sessionmaker() as session:
        admin = User(
            email="owner@example.com",
            hashed_password=get_password_hash(admin_password),
            full_name="Villa Owner",
            role=UserRole.ADMIN,
            status=UserStatus.ACTIVE,
        )
        session.add(admin)
        await session.commit()

        context: dict[str, object] = {
            "admin_id": admin.id,
            "admin_email": admin.email,
            "admin_password": admin_password,
        }

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        context["client"] = client
        yield context


@pytest_asyncio.fixture()
async def admin_headers(app_context: dict[str, object]) -> dict[str, str]:
    """Bearer headers for the seeded admin."""
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    response = await client.post(
        "/api/v1/auth/token",
        data={
            "username": app_context["admin_email"],
            "password": app_context["admin_password"],
        },
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture()
def make_booking(db_url: str):
    """Store bookings directly, bypassing the public flow's date checks."""

    async def _make(
        *,
        check_in: date,
        check_out: date,
        status: BookingStatus = BookingStatus.PENDING,
        total_price: Decimal = Decimal("650.00"),
        **fields: object,
    ) -> Booking:
        sessionmaker = get_sessionmaker(db_url)
        async with sessionmaker() as session:
            booking = Booking(
                guest_name="Ana Guest",
                guest_email="ana@example.com",
                guest_phone="+34 600 000 000",
                check_in=check_in,
                check_out=check_out,
                num_guests=2,
                status=status,
                total_price=total_price,
                cleaning_fee=Decimal("140.00"),
                deposit_amount=(total_price * Decimal("0.30")).quantize(Decimal("0.01")),
                **fields,
            )
            session.add(booking)
            await session.commit()
            await session.refresh(booking)
        snapshot_cache.clear()
        return booking

    return _make
