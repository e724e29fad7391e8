"""Booking and dossier schemas."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    TypeAdapter,
    field_validator,
)

from villa_booking.domain.access import DossierAction
from villa_booking.domain.settlement import Gate
from villa_booking.domain.statuses import BookingStatus
from villa_booking.models.booking import GuestLanguage

_EMAIL_ADAPTER = TypeAdapter(EmailStr)


class BookingCreate(BaseModel):
    """Public booking request.

    Contact fields may arrive blank; the service reports every missing one at
    once instead of failing on the first.
    """

    guest_name: str = ""
    guest_email: str = ""
    guest_phone: str = ""
    check_in: date
    check_out: date
    num_guests: int = 1
    message: str | None = Field(default=None, max_length=5000)
    language: GuestLanguage = GuestLanguage.EN
    quoted_total: Decimal | None = None

    @field_validator("guest_email")
    @classmethod
    def _validate_email(cls, value: str) -> str:
        email = value.strip()
        if not email:
            return email
        return _EMAIL_ADAPTER.validate_python(email)


class BookingRead(BaseModel):
    """Full booking record for the back office."""

    id: uuid.UUID
    public_token: str
    guest_name: str
    guest_email: str
    guest_phone: str
    check_in: date
    check_out: date
    num_guests: int
    message: str | None = None
    language: GuestLanguage
    status: BookingStatus
    total_price: Decimal
    cleaning_fee: Decimal
    deposit_amount: Decimal
    payment_notes: str | None = None
    whatsapp_notified: bool
    whatsapp_notified_at: datetime | None = None
    contract_sent: bool
    contract_sent_at: datetime | None = None
    contract_file_path: str | None = None
    contract_uploaded_at: datetime | None = None
    guest_contract_signed: bool
    guest_contract_signed_at: datetime | None = None
    guest_contract_signed_name: str | None = None
    guest_signed_contract_file_path: str | None = None
    guest_signed_contract_uploaded_at: datetime | None = None
    deposit_paid: bool
    deposit_paid_at: datetime | None = None
    remaining_paid: bool
    remaining_paid_at: datetime | None = None
    contract_signed: bool
    contract_signed_at: datetime | None = None
    review_author: str | None = None
    review_rating: int | None = None
    review_text: str | None = None
    review_submitted_at: datetime | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class BookingCreated(BaseModel):
    """What a guest gets back after submitting a booking."""

    id: uuid.UUID
    public_token: str
    status: BookingStatus
    check_in: date
    check_out: date
    total_price: Decimal
    deposit_amount: Decimal
    dossier_url: str


class BookingStatusUpdate(BaseModel):
    status: BookingStatus


class GateUpdate(BaseModel):
    done: bool


class BookingDatesUpdate(BaseModel):
    check_in: date
    check_out: date


class PaymentNotesUpdate(BaseModel):
    payment_notes: str | None = Field(default=None, max_length=5000)


class ReviewCreate(BaseModel):
    author: str | None = Field(default=None, max_length=200)
    rating: int | None = None
    text: str | None = Field(default=None, max_length=5000)


class BookingYears(BaseModel):
    years: list[int]


class GateStateRead(BaseModel):
    gate: Gate
    done: bool
    at: datetime | None = None
    can_mark: bool
    missing: list[Gate]

    model_config = ConfigDict(from_attributes=True)


class DossierLinks(BaseModel):
    dossier_url: str
    whatsapp_url: str
    mailto_url: str | None = None
    contract_url: str | None = None


class DossierRead(BaseModel):
    """Dossier view; back-office-only fields stay empty for token holders."""

    id: uuid.UUID
    public_token: str
    guest_name: str
    guest_email: str
    guest_phone: str
    check_in: date
    check_out: date
    nights: int
    num_guests: int
    message: str | None = None
    language: GuestLanguage
    status: BookingStatus
    total_price: Decimal
    cleaning_fee: Decimal
    deposit_amount: Decimal
    remaining_amount: Decimal
    remaining_due_date: date
    payment_notes: str | None = None
    contract_file_path: str | None = None
    contract_uploaded_at: datetime | None = None
    guest_contract_signed_name: str | None = None
    guest_signed_contract_file_path: str | None = None
    guest_signed_contract_uploaded_at: datetime | None = None
    gates: list[GateStateRead]
    next_gate: Gate | None = None
    review_author: str | None = None
    review_rating: int | None = None
    review_text: str | None = None
    review_submitted_at: datetime | None = None
    review_open: bool
    links: DossierLinks
    allowed_actions: list[DossierAction]


class SignedUrlRead(BaseModel):
    url: str
    expires_in: int


class AuditEventRead(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID | None = None
    booking_id: uuid.UUID | None = None
    event_type: str
    description: str | None = None
    payload: dict | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
