"""API tests for the contact form inbox."""

from __future__ import annotations

from typing import Any

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


async def test_message_lifecycle(
    app_context: dict[str, Any], admin_headers: dict[str, str]
) -> None:
    client: AsyncClient = app_context["client"]

    created = await client.post(
        "/api/v1/contact-messages",
        json={
            "name": " Jan ",
            "email": "Jan@Example.com",
            "message": "Is the pool heated?",
            "language": "nl",
        },
    )
    assert created.status_code == 201
    message = created.json()
    assert message["status"] == "new"
    assert message["name"] == "Jan"
    assert message["email"] == "jan@example.com"

    assert (await client.get("/api/v1/contact-messages")).status_code == 401

    listed = await client.get("/api/v1/contact-messages", headers=admin_headers)
    assert [m["id"] for m in listed.json()] == [message["id"]]

    triaged = await client.patch(
        f"/api/v1/contact-messages/{message['id']}/status",
        json={"status": "replied"},
        headers=admin_headers,
    )
    assert triaged.json()["status"] == "replied"

    new_only = await client.get(
        "/api/v1/contact-messages", params={"status": "new"}, headers=admin_headers
    )
    assert new_only.json() == []

    deleted = await client.delete(
        f"/api/v1/contact-messages/{message['id']}", headers=admin_headers
    )
    assert deleted.status_code == 204


async def test_message_requires_valid_email(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]
    response = await client.post(
        "/api/v1/contact-messages",
        json={"name": "Jan", "email": "not-an-email", "message": "Hi"},
    )
    assert response.status_code == 422
