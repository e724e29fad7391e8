"""Typed outcomes raised by the booking core.

Every error carries a stable ``code`` and an HTTP status so the API layer can
render a specific message without inspecting strings.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any


class BookingError(ValueError):
    """Base class for all expected booking failures."""

    code = "booking_error"
    status_code = 400

    def __init__(self, message: str, **extra: Any) -> None:
        super().__init__(message)
        self.message = message
        self.extra = extra

    def to_dict(self) -> dict[str, Any]:
        return {"detail": self.message, "code": self.code, **self.extra}


class InvalidDates(BookingError):
    code = "invalid_dates"

    def __init__(self, message: str = "Check-out must be at least one night after check-in") -> None:
        super().__init__(message)


class UnavailableRange(BookingError):
    code = "unavailable_range"
    status_code = 409

    def __init__(self, message: str = "The selected dates overlap a booked or blocked period") -> None:
        super().__init__(message)


class MinStayNotMet(BookingError):
    code = "min_stay_not_met"

    def __init__(self, required: int) -> None:
        super().__init__(f"Minimum stay is {required} nights", required=required)
        self.required = required


class RequiredFieldsMissing(BookingError):
    code = "required_fields_missing"

    def __init__(self, fields: Iterable[str]) -> None:
        missing = sorted(fields)
        super().__init__(
            f"Missing required fields: {', '.join(missing)}", fields=missing
        )
        self.fields = missing


class GuestCountOutOfRange(BookingError):
    code = "guest_count_out_of_range"

    def __init__(self, max_guests: int) -> None:
        super().__init__(
            f"Guest count must be between 1 and {max_guests}", max_guests=max_guests
        )
        self.max_guests = max_guests


class QuoteMismatch(BookingError):
    code = "quote_mismatch"
    status_code = 409

    def __init__(self, quoted: str, current: str) -> None:
        super().__init__(
            "The quoted price is out of date", quoted=quoted, current=current
        )


class GateSequenceViolation(BookingError):
    code = "gate_sequence_violation"

    def __init__(self, gate: str, missing: Iterable[str]) -> None:
        missing_list = list(missing)
        super().__init__(
            f"Cannot mark {gate} before {', '.join(missing_list)}",
            gate=gate,
            missing=missing_list,
        )
        self.gate = gate
        self.missing = missing_list


class ConfirmationRequired(BookingError):
    code = "confirmation_required"
    status_code = 409

    def __init__(self, action: str) -> None:
        super().__init__(
            f"Repeat the request to confirm {action}", action=action
        )
        self.action = action


class ReasonRequired(BookingError):
    code = "reason_required"

    def __init__(self) -> None:
        super().__init__("A reason is required to delete a confirmed booking")


class ContractNotYetSent(BookingError):
    code = "contract_not_yet_sent"

    def __init__(self) -> None:
        super().__init__("The contract has not been sent yet")


class ReviewWindowClosed(BookingError):
    code = "review_window_closed"

    def __init__(self, message: str = "Reviews open after check-out of a confirmed stay") -> None:
        super().__init__(message)


class UnsupportedFileType(BookingError):
    code = "unsupported_file_type"

    def __init__(self, content_type: str) -> None:
        super().__init__(
            f"Unsupported file type {content_type}", content_type=content_type
        )


class NotFound(BookingError):
    code = "not_found"
    status_code = 404

    def __init__(self, what: str = "Booking") -> None:
        super().__init__(f"{what} not found")


class PermissionDenied(BookingError):
    code = "permission_denied"
    status_code = 403

    def __init__(self, action: str) -> None:
        super().__init__(f"Not allowed to {action}", action=action)


class StorageFailure(BookingError):
    code = "storage_failure"
    status_code = 503


class BlobFailure(BookingError):
    code = "blob_failure"
    status_code = 503


__all__ = [
    "BlobFailure",
    "BookingError",
    "ConfirmationRequired",
    "ContractNotYetSent",
    "GateSequenceViolation",
    "GuestCountOutOfRange",
    "InvalidDates",
    "MinStayNotMet",
    "NotFound",
    "PermissionDenied",
    "QuoteMismatch",
    "ReasonRequired",
    "RequiredFieldsMissing",
    "ReviewWindowClosed",
    "StorageFailure",
    "UnavailableRange",
    "UnsupportedFileType",
]
