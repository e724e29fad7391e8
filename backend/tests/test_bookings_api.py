"""API tests for the public booking flow and back-office booking management."""

from __future__ import annotations

from datetime import date
from typing import Any

import pytest
from httpx import AsyncClient

from villa_booking.models import BookingStatus

pytestmark = pytest.mark.asyncio

CHECK_IN = date(2030, 2, 15)
CHECK_OUT = date(2030, 2, 22)


def _payload(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "guest_name": "Ana Guest",
        "guest_email": "Ana@Example.com",
        "guest_phone": "+34 600 000 000",
        "check_in": CHECK_IN.isoformat(),
        "check_out": CHECK_OUT.isoformat(),
        "num_guests": 2,
        "message": "Arriving late",
    }
    payload.update(overrides)
    return payload


async def _create(client: AsyncClient, **overrides: Any) -> dict[str, Any]:
    response = await client.post("/api/v1/bookings", json=_payload(**overrides))
    assert response.status_code == 201, response.text
    return response.json()


async def test_guest_creates_pending_booking(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]

    created = await _create(client, quoted_total="735.00")

    assert created["status"] == "pending"
    assert created["total_price"] == "735.00"
    assert created["deposit_amount"] == "220.50"
    assert len(created["public_token"]) == 32
    assert created["dossier_url"].endswith(f"/booking/dossier/{created['public_token']}")


async def test_booking_rejects_missing_contact_fields(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]

    response = await client.post(
        "/api/v1/bookings", json=_payload(guest_name=" ", guest_phone="")
    )

    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "required_fields_missing"
    assert body["fields"] == ["guest_name", "guest_phone"]


async def test_booking_rejects_short_and_overlapping_stays(
    app_context: dict[str, Any],
) -> None:
    client: AsyncClient = app_context["client"]

    short = await client.post(
        "/api/v1/bookings", json=_payload(check_out=date(2030, 2, 18).isoformat())
    )
    assert short.status_code == 400
    assert short.json()["code"] == "min_stay_not_met"
    assert short.json()["required"] == 6

    await _create(client)
    overlap = await client.post(
        "/api/v1/bookings",
        json=_payload(
            check_in=date(2030, 2, 21).isoformat(), check_out=date(2030, 2, 28).isoformat()
        ),
    )
    assert overlap.status_code == 409
    assert overlap.json()["code"] == "unavailable_range"

    back_to_back = await client.post(
        "/api/v1/bookings",
        json=_payload(
            check_in=CHECK_OUT.isoformat(), check_out=date(2030, 2, 28).isoformat()
        ),
    )
    assert back_to_back.status_code == 201


async def test_booking_rejects_stale_quote_and_guest_limit(
    app_context: dict[str, Any],
) -> None:
    client: AsyncClient = app_context["client"]

    stale = await client.post("/api/v1/bookings", json=_payload(quoted_total="650.00"))
    assert stale.status_code == 409
    assert stale.json()["code"] == "quote_mismatch"
    assert stale.json()["current"] == "735.00"

    crowded = await client.post("/api/v1/bookings", json=_payload(num_guests=9))
    assert crowded.status_code == 400
    assert crowded.json()["code"] == "guest_count_out_of_range"


async def test_booking_rejects_past_check_in(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]
    response = await client.post(
        "/api/v1/bookings",
        json=_payload(
            check_in=date(2020, 1, 1).isoformat(), check_out=date(2020, 1, 8).isoformat()
        ),
    )
    assert response.status_code == 400
    assert response.json()["code"] == "invalid_dates"


async def test_back_office_requires_admin(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]
    assert (await client.get("/api/v1/bookings")).status_code == 401
    bogus = {"Authorization": "Bearer not-a-token"}
    assert (await client.get("/api/v1/bookings", headers=bogus)).status_code == 401


async def test_list_filters_and_years(
    app_context: dict[str, Any], admin_headers: dict[str, str], make_booking
) -> None:
    client: AsyncClient = app_context["client"]
    await make_booking(check_in=date(2029, 7, 1), check_out=date(2029, 7, 8))
    await make_booking(
        check_in=date(2030, 7, 1),
        check_out=date(2030, 7, 8),
        status=BookingStatus.CONFIRMED,
    )

    everything = await client.get("/api/v1/bookings", headers=admin_headers)
    assert everything.status_code == 200
    assert len(everything.json()) == 2

    confirmed = await client.get(
        "/api/v1/bookings", params={"status": "confirmed"}, headers=admin_headers
    )
    assert [b["check_in"] for b in confirmed.json()] == ["2030-07-01"]

    in_2029 = await client.get("/api/v1/bookings", params={"year": 2029}, headers=admin_headers)
    assert [b["check_in"] for b in in_2029.json()] == ["2029-07-01"]

    years = await client.get("/api/v1/bookings/years", headers=admin_headers)
    assert years.json() == {"years": [2030, 2029]}


async def test_cancel_needs_confirmation(
    app_context: dict[str, Any], admin_headers: dict[str, str]
) -> None:
    client: AsyncClient = app_context["client"]
    created = await _create(client)
    url = f"/api/v1/bookings/{created['id']}/status"

    first = await client.put(url, json={"status": "cancelled"}, headers=admin_headers)
    assert first.status_code == 409
    assert first.json()["code"] == "confirmation_required"

    second = await client.put(url, json={"status": "cancelled"}, headers=admin_headers)
    assert second.status_code == 200
    assert second.json()["status"] == "cancelled"

    availability = await client.get("/api/v1/availability")
    assert availability.json()["booked"] == []


async def test_other_edits_disarm_pending_cancel(
    app_context: dict[str, Any], admin_headers: dict[str, str]
) -> None:
    client: AsyncClient = app_context["client"]
    created = await _create(client)
    base = f"/api/v1/bookings/{created['id']}"

    armed = await client.put(
        f"{base}/status", json={"status": "cancelled"}, headers=admin_headers
    )
    assert armed.status_code == 409

    notes = await client.put(
        f"{base}/payment-notes", json={"payment_notes": "Wire pending"}, headers=admin_headers
    )
    assert notes.status_code == 200
    gate = await client.put(
        f"{base}/gates/whatsapp_notified", json={"done": True}, headers=admin_headers
    )
    assert gate.status_code == 200

    repeat = await client.put(
        f"{base}/status", json={"status": "cancelled"}, headers=admin_headers
    )
    assert repeat.status_code == 409
    assert repeat.json()["code"] == "confirmation_required"
    assert (await client.get(base, headers=admin_headers)).json()["status"] == "pending"


async def test_other_edits_disarm_pending_delete(
    app_context: dict[str, Any], admin_headers: dict[str, str]
) -> None:
    client: AsyncClient = app_context["client"]
    created = await _create(client)
    base = f"/api/v1/bookings/{created['id']}"

    armed = await client.delete(base, headers=admin_headers)
    assert armed.status_code == 409
    notes = await client.put(
        f"{base}/payment-notes", json={"payment_notes": None}, headers=admin_headers
    )
    assert notes.status_code == 200

    repeat = await client.delete(base, headers=admin_headers)
    assert repeat.status_code == 409
    assert (await client.get(base, headers=admin_headers)).status_code == 200


async def test_reactivation_rechecks_overlap(
    app_context: dict[str, Any], admin_headers: dict[str, str], make_booking
) -> None:
    client: AsyncClient = app_context["client"]
    cancelled = await make_booking(
        check_in=CHECK_IN, check_out=CHECK_OUT, status=BookingStatus.CANCELLED
    )
    await make_booking(check_in=date(2030, 2, 18), check_out=date(2030, 2, 25))

    response = await client.put(
        f"/api/v1/bookings/{cancelled.id}/status",
        json={"status": "pending"},
        headers=admin_headers,
    )
    assert response.status_code == 409
    assert response.json()["code"] == "unavailable_range"


async def test_reactivation_rechecks_blocked_dates(
    app_context: dict[str, Any], admin_headers: dict[str, str], make_booking
) -> None:
    client: AsyncClient = app_context["client"]
    declined = await make_booking(
        check_in=CHECK_IN, check_out=CHECK_OUT, status=BookingStatus.DECLINED
    )
    blocked = await client.post(
        "/api/v1/blocked-dates/block-days",
        json={"days": ["2030-02-17"]},
        headers=admin_headers,
    )
    assert blocked.status_code == 201

    reopened = await client.put(
        f"/api/v1/bookings/{declined.id}/status",
        json={"status": "pending"},
        headers=admin_headers,
    )
    assert reopened.status_code == 409
    assert reopened.json()["code"] == "unavailable_range"

    gate = await client.put(
        f"/api/v1/bookings/{declined.id}/gates/owner_confirmed",
        json={"done": True},
        headers=admin_headers,
    )
    assert gate.status_code == 409
    current = await client.get(f"/api/v1/bookings/{declined.id}", headers=admin_headers)
    assert current.json()["status"] == "declined"


async def test_status_override_leaves_gates(
    app_context: dict[str, Any], admin_headers: dict[str, str]
) -> None:
    client: AsyncClient = app_context["client"]
    created = await _create(client)
    base = f"/api/v1/bookings/{created['id']}"

    marked = await client.put(
        f"{base}/gates/whatsapp_notified", json={"done": True}, headers=admin_headers
    )
    assert marked.json()["whatsapp_notified"] is True

    declined = await client.put(
        f"{base}/status", json={"status": "declined"}, headers=admin_headers
    )
    assert declined.status_code == 200
    assert declined.json()["status"] == "declined"
    assert declined.json()["whatsapp_notified"] is True


async def test_gate_sequence_and_cascade(
    app_context: dict[str, Any], admin_headers: dict[str, str]
) -> None:
    client: AsyncClient = app_context["client"]
    created = await _create(client)
    base = f"/api/v1/bookings/{created['id']}"

    early = await client.put(
        f"{base}/gates/deposit_paid", json={"done": True}, headers=admin_headers
    )
    assert early.status_code == 400
    assert early.json()["code"] == "gate_sequence_violation"
    assert early.json()["missing"] == ["owner_confirmed", "guest_contract_signed"]

    for gate in ("whatsapp_notified", "owner_confirmed", "contract_sent"):
        response = await client.put(
            f"{base}/gates/{gate}", json={"done": True}, headers=admin_headers
        )
        assert response.status_code == 200, response.text
    assert response.json()["status"] == "confirmed"
    assert response.json()["contract_sent"] is True

    cleared = await client.put(
        f"{base}/gates/owner_confirmed", json={"done": False}, headers=admin_headers
    )
    body = cleared.json()
    assert body["status"] == "pending"
    assert body["contract_sent"] is False
    assert body["whatsapp_notified"] is True

    events = await client.get(f"{base}/events", headers=admin_headers)
    types = [event["event_type"] for event in events.json()]
    assert types[0] == "booking.created"
    assert "booking.gate_cleared" in types


async def test_amend_dates_reprices(
    app_context: dict[str, Any], admin_headers: dict[str, str]
) -> None:
    client: AsyncClient = app_context["client"]
    created = await _create(client)
    base = f"/api/v1/bookings/{created['id']}"

    rule = await client.post(
        "/api/v1/pricing-rules",
        json={
            "name": "March",
            "start_date": "2030-03-01",
            "end_date": "2030-03-31",
            "price_per_night": "120.00",
        },
        headers=admin_headers,
    )
    assert rule.status_code == 201

    moved = await client.put(
        f"{base}/dates",
        json={"check_in": "2030-03-10", "check_out": "2030-03-16"},
        headers=admin_headers,
    )
    assert moved.status_code == 200, moved.text
    assert moved.json()["total_price"] == "860.00"
    assert moved.json()["deposit_amount"] == "258.00"

    booking = (await client.get(base, headers=admin_headers)).json()
    assert booking["check_in"] == "2030-03-10"
    assert booking["total_price"] == "860.00"

    too_short = await client.put(
        f"{base}/dates",
        json={"check_in": "2030-03-10", "check_out": "2030-03-12"},
        headers=admin_headers,
    )
    assert too_short.status_code == 400
    unchanged = (await client.get(base, headers=admin_headers)).json()
    assert unchanged["check_out"] == "2030-03-16"


async def test_delete_confirmed_needs_reason_and_confirmation(
    app_context: dict[str, Any], admin_headers: dict[str, str], make_booking
) -> None:
    client: AsyncClient = app_context["client"]
    booking = await make_booking(
        check_in=CHECK_IN, check_out=CHECK_OUT, status=BookingStatus.CONFIRMED
    )
    url = f"/api/v1/bookings/{booking.id}"

    no_reason = await client.delete(url, headers=admin_headers)
    assert no_reason.status_code == 400
    assert no_reason.json()["code"] == "reason_required"

    armed = await client.delete(url, params={"reason": "Guest never paid"}, headers=admin_headers)
    assert armed.status_code == 409

    deleted = await client.delete(
        url, params={"reason": "Guest never paid"}, headers=admin_headers
    )
    assert deleted.status_code == 204
    assert (await client.get(url, headers=admin_headers)).status_code == 404

    events = await client.get(f"{url}/events", headers=admin_headers)
    assert events.json()[-1]["event_type"] == "booking.deleted"
    assert events.json()[-1]["description"] == "Guest never paid"


async def test_payment_notes_hidden_on_guest_dossier(
    app_context: dict[str, Any], admin_headers: dict[str, str]
) -> None:
    client: AsyncClient = app_context["client"]
    created = await _create(client)

    updated = await client.put(
        f"/api/v1/bookings/{created['id']}/payment-notes",
        json={"payment_notes": "Deposit via bank transfer"},
        headers=admin_headers,
    )
    assert updated.json()["payment_notes"] == "Deposit via bank transfer"

    admin_view = await client.get(
        f"/api/v1/bookings/{created['id']}/dossier", headers=admin_headers
    )
    assert admin_view.json()["payment_notes"] == "Deposit via bank transfer"
    assert "toggle_gate" in admin_view.json()["allowed_actions"]

    guest_view = await client.get(f"/api/v1/dossier/{created['public_token']}")
    assert guest_view.status_code == 200
    body = guest_view.json()
    assert body["payment_notes"] is None
    assert set(body["allowed_actions"]) == {
        "view",
        "upload_signed_contract",
        "submit_review",
        "share_link",
    }
    assert body["remaining_amount"] == "514.50"
    assert body["remaining_due_date"] == "2030-01-15"
    assert body["links"]["whatsapp_url"].startswith("https://wa.me/")
    assert body["next_gate"] == "whatsapp_notified"
