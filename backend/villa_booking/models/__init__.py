"""ORM models package export."""

from villa_booking.models.audit_event import AuditEvent
from villa_booking.models.blocked_date import BlockedDate
from villa_booking.domain.statuses import OCCUPYING_STATUSES, BookingStatus
from villa_booking.models.booking import Booking, GuestLanguage
from villa_booking.models.contact_message import ContactMessage, ContactMessageStatus
from villa_booking.models.pricing_rule import PricingRule
from villa_booking.models.setting import Setting
from villa_booking.models.user import User, UserRole, UserStatus

__all__ = [
    "AuditEvent",
    "BlockedDate",
    "Booking",
    "BookingStatus",
    "ContactMessage",
    "ContactMessageStatus",
    "GuestLanguage",
    "OCCUPYING_STATUSES",
    "PricingRule",
    "Setting",
    "User",
    "UserRole",
    "UserStatus",
]
