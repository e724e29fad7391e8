"""Assembles the dossier view of a booking for a given caller."""

from __future__ import annotations

import datetime

from villa_booking.core.config import get_settings
from villa_booking.domain import settlement
from villa_booking.domain.access import Caller, allowed_actions, visible_fields
from villa_booking.domain.availability import night_count
from villa_booking.domain.pricing import remaining_due_date
from villa_booking.integrations.blob_store import BlobStore
from villa_booking.models import Booking
from villa_booking.schemas.booking import DossierLinks, DossierRead, GateStateRead
from villa_booking.schemas.settings import SiteSettings
from villa_booking.services import booking_service, messaging_links

_REDACTABLE = ("payment_notes", "guest_signed_contract_file_path")


def build_links(booking: Booking, site: SiteSettings, contracts: BlobStore) -> DossierLinks:
    settings = get_settings()
    link = messaging_links.dossier_url(settings.public_site_url, booking.public_token)
    return DossierLinks(
        dossier_url=link,
        whatsapp_url=messaging_links.whatsapp_url(
            site.whatsapp_number.number,
            booking,
            link=link,
            currency_symbol=site.currency.symbol,
        ),
        mailto_url=messaging_links.mailto_url(
            site.owner_email.email,
            subject=f"Booking {booking.check_in.isoformat()} - {booking.guest_name}",
            body=link,
        ),
        contract_url=booking_service.contract_url(booking, contracts),
    )


def build_dossier(
    booking: Booking,
    *,
    caller: Caller,
    holds_token: bool,
    site: SiteSettings,
    contracts: BlobStore,
    today: datetime.date | None = None,
) -> DossierRead:
    today = today or datetime.datetime.now(datetime.UTC).date()
    deposit, remaining = booking_service.deposit_and_balance(booking)
    shown = visible_fields(caller, frozenset(_REDACTABLE))
    return DossierRead(
        id=booking.id,
        public_token=booking.public_token,
        guest_name=booking.guest_name,
        guest_email=booking.guest_email,
        guest_phone=booking.guest_phone,
        check_in=booking.check_in,
        check_out=booking.check_out,
        nights=night_count(booking.check_in, booking.check_out),
        num_guests=booking.num_guests,
        message=booking.message,
        language=booking.language,
        status=booking.status,
        total_price=booking.total_price,
        cleaning_fee=booking.cleaning_fee,
        deposit_amount=deposit,
        remaining_amount=remaining,
        remaining_due_date=remaining_due_date(booking.check_in),
        payment_notes=booking.payment_notes if "payment_notes" in shown else None,
        contract_file_path=booking.contract_file_path,
        contract_uploaded_at=booking.contract_uploaded_at,
        guest_contract_signed_name=booking.guest_contract_signed_name,
        guest_signed_contract_file_path=(
            booking.guest_signed_contract_file_path
            if "guest_signed_contract_file_path" in shown
            else None
        ),
        guest_signed_contract_uploaded_at=booking.guest_signed_contract_uploaded_at,
        gates=[
            GateStateRead(
                gate=state.gate,
                done=state.done,
                at=state.at,
                can_mark=state.can_mark,
                missing=list(state.missing),
            )
            for state in settlement.gate_states(booking)
        ],
        next_gate=settlement.next_gate(booking),
        review_author=booking.review_author,
        review_rating=booking.review_rating,
        review_text=booking.review_text,
        review_submitted_at=booking.review_submitted_at,
        review_open=settlement.review_window_open(booking, today),
        links=build_links(booking, site, contracts),
        allowed_actions=allowed_actions(caller, holds_token=holds_token),
    )
