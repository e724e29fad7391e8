"""Dossier, WhatsApp and mailto links for a booking."""

from __future__ import annotations

import re
from decimal import Decimal
from typing import Any
from urllib.parse import quote

_NON_DIGITS = re.compile(r"[^0-9]")

_WHATSAPP_TEMPLATE = (
    "Hello! I just requested a booking.\n"
    "Name: {name}\n"
    "Email: {email}\n"
    "Phone: {phone}\n"
    "Check-in: {check_in}\n"
    "Check-out: {check_out}\n"
    "Total: {total}\n"
    "Dossier: {link}"
)


def dossier_url(public_site_url: str, token: str) -> str:
    return f"{public_site_url.rstrip('/')}/booking/dossier/{token}"


def format_money(amount: Decimal | None, symbol: str = "€") -> str:
    value = Decimal(amount or 0)
    if value == value.to_integral_value():
        return f"{symbol}{value:,.0f}"
    return f"{symbol}{value:,.2f}"


def whatsapp_url(
    number: str | None,
    booking: Any | None = None,
    *,
    link: str | None = None,
    currency_symbol: str = "€",
) -> str:
    digits = _NON_DIGITS.sub("", number or "")
    if booking is None:
        return f"https://wa.me/{digits}"
    text = _WHATSAPP_TEMPLATE.format(
        name=booking.guest_name or "-",
        email=booking.guest_email or "-",
        phone=booking.guest_phone or "-",
        check_in=booking.check_in.isoformat(),
        check_out=booking.check_out.isoformat(),
        total=format_money(booking.total_price, currency_symbol),
        link=link or "-",
    )
    return f"https://wa.me/{digits}?text={quote(text, safe='')}"


def mailto_url(address: str | None, *, subject: str, body: str = "") -> str | None:
    if not address:
        return None
    url = f"mailto:{address}?subject={quote(subject, safe='')}"
    if body:
        url += f"&body={quote(body, safe='')}"
    return url
