"""Fixed commercial terms of the booking flow."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True, slots=True)
class BookingFlowConfig:
    """Constants shared by pricing, validation and the dossier."""

    min_stay_nights: int = 6
    cleaning_fee: Decimal = Decimal("140.00")
    deposit_ratio: Decimal = Decimal("0.30")
    remaining_ratio: Decimal = Decimal("0.70")
    remaining_due_months_before_check_in: int = 1


BOOKING_FLOW = BookingFlowConfig()
