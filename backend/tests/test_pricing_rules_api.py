"""API tests for seasonal pricing rules."""

from __future__ import annotations

from typing import Any

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


async def _create_rule(
    client: AsyncClient, headers: dict[str, str], **overrides: Any
) -> dict[str, Any]:
    payload = {
        "name": "Summer",
        "start_date": "2030-07-01",
        "end_date": "2030-08-31",
        "price_per_night": "150.00",
    }
    payload.update(overrides)
    response = await client.post("/api/v1/pricing-rules", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


async def test_active_and_all_listings(
    app_context: dict[str, Any], admin_headers: dict[str, str]
) -> None:
    client: AsyncClient = app_context["client"]
    await _create_rule(client, admin_headers)
    await _create_rule(
        client,
        admin_headers,
        name="Easter",
        start_date="2030-04-10",
        end_date="2030-04-25",
        is_active=False,
    )

    active = await client.get("/api/v1/pricing-rules")
    assert [rule["name"] for rule in active.json()] == ["Summer"]

    everything = await client.get("/api/v1/pricing-rules/all", headers=admin_headers)
    assert [rule["name"] for rule in everything.json()] == ["Easter", "Summer"]

    assert (await client.get("/api/v1/pricing-rules/all")).status_code == 401


async def test_update_and_delete_rule_changes_quotes(
    app_context: dict[str, Any], admin_headers: dict[str, str]
) -> None:
    client: AsyncClient = app_context["client"]
    rule = await _create_rule(client, admin_headers)
    stay = {"check_in": "2030-07-10", "check_out": "2030-07-16"}

    quote = await client.post("/api/v1/availability/quote", json=stay)
    assert quote.json()["total_price"] == "1040.00"

    updated = await client.patch(
        f"/api/v1/pricing-rules/{rule['id']}",
        json={"price_per_night": "100.00"},
        headers=admin_headers,
    )
    assert updated.status_code == 200
    quote = await client.post("/api/v1/availability/quote", json=stay)
    assert quote.json()["total_price"] == "740.00"

    inverted = await client.patch(
        f"/api/v1/pricing-rules/{rule['id']}",
        json={"end_date": "2030-06-01"},
        headers=admin_headers,
    )
    assert inverted.status_code == 400
    assert inverted.json()["code"] == "invalid_dates"

    deleted = await client.delete(f"/api/v1/pricing-rules/{rule['id']}", headers=admin_headers)
    assert deleted.status_code == 204
    quote = await client.post("/api/v1/availability/quote", json=stay)
    assert quote.json()["total_price"] == "650.00"


async def test_rule_validation(
    app_context: dict[str, Any], admin_headers: dict[str, str]
) -> None:
    client: AsyncClient = app_context["client"]
    response = await client.post(
        "/api/v1/pricing-rules",
        json={
            "name": "Broken",
            "start_date": "2030-07-10",
            "end_date": "2030-07-01",
            "price_per_night": "-1",
        },
        headers=admin_headers,
    )
    assert response.status_code == 422
