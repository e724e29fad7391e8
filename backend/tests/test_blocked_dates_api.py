"""API tests for owner-blocked dates."""

from __future__ import annotations

from datetime import date
from typing import Any

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


async def test_block_and_unblock_days(
    app_context: dict[str, Any], admin_headers: dict[str, str]
) -> None:
    client: AsyncClient = app_context["client"]

    blocked = await client.post(
        "/api/v1/blocked-dates/block-days",
        json={"days": ["2030-03-05", "2030-03-02", "2030-03-03"], "reason": "Repairs"},
        headers=admin_headers,
    )
    assert blocked.status_code == 201
    assert blocked.json()["start_date"] == "2030-03-02"
    assert blocked.json()["end_date"] == "2030-03-05"

    quote = await client.post(
        "/api/v1/availability/quote",
        json={"check_in": "2030-02-24", "check_out": "2030-03-02"},
    )
    assert quote.status_code == 409

    removed = await client.post(
        "/api/v1/blocked-dates/unblock-days",
        json={"days": ["2030-03-04"]},
        headers=admin_headers,
    )
    assert removed.json() == {"removed": 1}
    assert (await client.get("/api/v1/blocked-dates")).json() == []


async def test_cannot_block_booked_days(
    app_context: dict[str, Any], admin_headers: dict[str, str], make_booking
) -> None:
    client: AsyncClient = app_context["client"]
    await make_booking(check_in=date(2030, 2, 15), check_out=date(2030, 2, 22))

    clash = await client.post(
        "/api/v1/blocked-dates/block-days",
        json={"days": ["2030-02-20"]},
        headers=admin_headers,
    )
    assert clash.status_code == 409

    check_out_day = await client.post(
        "/api/v1/blocked-dates/block-days",
        json={"days": ["2030-02-22"]},
        headers=admin_headers,
    )
    assert check_out_day.status_code == 201


async def test_cannot_block_span_around_a_booking(
    app_context: dict[str, Any], admin_headers: dict[str, str], make_booking
) -> None:
    client: AsyncClient = app_context["client"]
    await make_booking(check_in=date(2030, 2, 15), check_out=date(2030, 2, 22))

    around = await client.post(
        "/api/v1/blocked-dates/block-days",
        json={"days": ["2030-02-10", "2030-02-25"]},
        headers=admin_headers,
    )
    assert around.status_code == 409
    assert around.json()["code"] == "unavailable_range"
    assert (await client.get("/api/v1/blocked-dates")).json() == []


async def test_block_range_validation_and_delete(
    app_context: dict[str, Any], admin_headers: dict[str, str]
) -> None:
    client: AsyncClient = app_context["client"]

    inverted = await client.post(
        "/api/v1/blocked-dates",
        json={"start_date": "2030-03-05", "end_date": "2030-03-01"},
        headers=admin_headers,
    )
    assert inverted.status_code == 422

    created = await client.post(
        "/api/v1/blocked-dates",
        json={"start_date": "2030-03-01", "end_date": "2030-03-01"},
        headers=admin_headers,
    )
    block_id = created.json()["id"]

    assert (
        await client.delete(f"/api/v1/blocked-dates/{block_id}", headers=admin_headers)
    ).status_code == 204
    missing = await client.delete(f"/api/v1/blocked-dates/{block_id}", headers=admin_headers)
    assert missing.status_code == 404


async def test_blocking_requires_admin(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]
    response = await client.post(
        "/api/v1/blocked-dates",
        json={"start_date": "2030-03-01", "end_date": "2030-03-02"},
    )
    assert response.status_code == 401
