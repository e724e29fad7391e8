"""Schema exports."""

from villa_booking.schemas.auth import Token
from villa_booking.schemas.availability import (
    AvailabilityRead,
    BookedRangeRead,
    QuoteRead,
    QuoteRequest,
    SelectionRead,
    SelectionRequest,
)
from villa_booking.schemas.blocked_date import (
    BlockDaysRequest,
    BlockedDateCreate,
    BlockedDateRead,
    UnblockDaysRequest,
    UnblockResult,
)
from villa_booking.schemas.booking import (
    AuditEventRead,
    BookingCreate,
    BookingCreated,
    BookingDatesUpdate,
    BookingRead,
    BookingStatusUpdate,
    BookingYears,
    DossierLinks,
    DossierRead,
    GateStateRead,
    GateUpdate,
    PaymentNotesUpdate,
    ReviewCreate,
    SignedUrlRead,
)
from villa_booking.schemas.contact_message import (
    ContactMessageCreate,
    ContactMessageRead,
    ContactMessageStatusUpdate,
)
from villa_booking.schemas.pricing_rule import (
    PricingRuleCreate,
    PricingRuleRead,
    PricingRuleUpdate,
)
from villa_booking.schemas.settings import SiteSettings, SiteSettingsUpdate
from villa_booking.schemas.user import UserCreate, UserRead

__all__ = [
    "AuditEventRead",
    "AvailabilityRead",
    "BlockDaysRequest",
    "BlockedDateCreate",
    "BlockedDateRead",
    "BookedRangeRead",
    "BookingCreate",
    "BookingCreated",
    "BookingDatesUpdate",
    "BookingRead",
    "BookingStatusUpdate",
    "BookingYears",
    "ContactMessageCreate",
    "ContactMessageRead",
    "ContactMessageStatusUpdate",
    "DossierLinks",
    "DossierRead",
    "GateStateRead",
    "GateUpdate",
    "PaymentNotesUpdate",
    "PricingRuleCreate",
    "PricingRuleRead",
    "PricingRuleUpdate",
    "QuoteRead",
    "QuoteRequest",
    "ReviewCreate",
    "SelectionRead",
    "SelectionRequest",
    "SignedUrlRead",
    "SiteSettings",
    "SiteSettingsUpdate",
    "Token",
    "UnblockDaysRequest",
    "UnblockResult",
]
