"""Which cached read views each entity mutation makes stale."""

from __future__ import annotations

import enum


class Entity(str, enum.Enum):
    BOOKINGS = "bookings"
    BLOCKED_DATES = "blocked_dates"
    PRICING_RULES = "pricing_rules"
    SETTINGS = "settings"
    CONTACT_MESSAGES = "contact_messages"


class View(str, enum.Enum):
    BOOKINGS = "bookings"
    BOOKED_DATES = "booked-dates"
    BOOKING_DOSSIER = "booking-dossier"
    BLOCKED_DATES = "blocked-dates"
    PRICING_RULES = "pricing-rules"
    PRICING_RULES_ALL = "pricing-rules-all"
    SETTINGS = "settings"
    CONTACT_MESSAGES = "contact-messages"


INVALIDATES: dict[Entity, frozenset[View]] = {
    Entity.BOOKINGS: frozenset({View.BOOKINGS, View.BOOKED_DATES, View.BOOKING_DOSSIER}),
    Entity.BLOCKED_DATES: frozenset({View.BLOCKED_DATES}),
    Entity.PRICING_RULES: frozenset({View.PRICING_RULES, View.PRICING_RULES_ALL}),
    Entity.SETTINGS: frozenset({View.SETTINGS}),
    Entity.CONTACT_MESSAGES: frozenset({View.CONTACT_MESSAGES}),
}


def views_for(entity: Entity | str) -> frozenset[View]:
    return INVALIDATES[Entity(entity)]
