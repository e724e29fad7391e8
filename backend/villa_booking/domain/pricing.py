"""Nightly pricing, minimum stay and payment split for a candidate stay.

Money is handled as :class:`~decimal.Decimal` and rounded to cents with
``ROUND_HALF_UP``.
"""

from __future__ import annotations

import calendar
import datetime
from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Protocol

from villa_booking.domain.availability import iter_nights, night_count
from villa_booking.domain.booking_flow import BOOKING_FLOW

MONEY_PLACES = Decimal("0.01")


class RuleLike(Protocol):
    start_date: datetime.date
    end_date: datetime.date
    price_per_night: Decimal
    is_active: bool


@dataclass(frozen=True, slots=True)
class RuleSnapshot:
    """Seasonal price override detached from the ORM row."""

    name: str
    start_date: datetime.date
    end_date: datetime.date
    price_per_night: Decimal
    is_active: bool = True
    min_stay: int | None = None


@dataclass(frozen=True, slots=True)
class PricedStay:
    """Outcome of pricing a validated stay."""

    check_in: datetime.date
    check_out: datetime.date
    nights: int
    nightly_total: Decimal
    cleaning_fee: Decimal
    total_price: Decimal
    min_stay_required: int
    deposit_amount: Decimal
    remaining_amount: Decimal


def to_money(value: Decimal | float | int | str) -> Decimal:
    return Decimal(str(value)).quantize(MONEY_PLACES, rounding=ROUND_HALF_UP)


def price_for_night(
    day: datetime.date, rules: Iterable[RuleLike], base_price: Decimal
) -> Decimal:
    """Return the nightly price for ``day``.

    The first active rule in iteration order whose inclusive range contains
    ``day`` wins; overlapping rules are not ranked otherwise.
    """
    for rule in rules:
        if rule.is_active and rule.start_date <= day <= rule.end_date:
            return to_money(rule.price_per_night)
    return to_money(base_price)


def min_stay_for_date(day: datetime.date) -> int:
    """Minimum stay for a stay touching ``day``.

    Always the global minimum for now; kept per date so seasonal minimums can
    hook in here.
    """
    return BOOKING_FLOW.min_stay_nights


def min_stay_for_range(start: datetime.date, end: datetime.date) -> int:
    """Strictest minimum stay over the nights of ``[start, end)``.

    A zero or negative range still evaluates its first day.
    """
    nights = max(night_count(start, end), 0) or 1
    minimum = BOOKING_FLOW.min_stay_nights
    for offset in range(nights):
        minimum = max(minimum, min_stay_for_date(start + datetime.timedelta(days=offset)))
    return minimum


def nightly_total(
    start: datetime.date,
    end: datetime.date,
    rules: Iterable[RuleLike],
    base_price: Decimal,
) -> Decimal:
    rules = list(rules)
    return sum(
        (price_for_night(day, rules, base_price) for day in iter_nights(start, end)),
        Decimal("0.00"),
    )


def total_price(
    start: datetime.date,
    end: datetime.date,
    rules: Iterable[RuleLike],
    base_price: Decimal,
    cleaning_fee: Decimal = BOOKING_FLOW.cleaning_fee,
) -> Decimal:
    """Sum of nightly prices over ``[start, end)`` plus the cleaning fee.

    A zero-night range costs the cleaning fee alone; callers reject such
    ranges before charging.
    """
    return to_money(nightly_total(start, end, rules, base_price) + to_money(cleaning_fee))


def deposit_amount(total: Decimal, ratio: Decimal = BOOKING_FLOW.deposit_ratio) -> Decimal:
    return to_money(Decimal(total) * Decimal(ratio))


def remaining_amount(total: Decimal, deposit: Decimal) -> Decimal:
    return max(Decimal("0.00"), to_money(Decimal(total) - Decimal(deposit)))


def subtract_months(day: datetime.date, months: int) -> datetime.date:
    """Move ``day`` back by whole calendar months, clamping to month end."""
    month_index = day.year * 12 + (day.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return datetime.date(year, month, min(day.day, last_day))


def remaining_due_date(check_in: datetime.date) -> datetime.date:
    """Date the balance is due; informational only."""
    return subtract_months(check_in, BOOKING_FLOW.remaining_due_months_before_check_in)


def quote_stay(
    start: datetime.date,
    end: datetime.date,
    rules: Iterable[RuleLike],
    base_price: Decimal,
) -> PricedStay:
    rules = list(rules)
    nights_cost = to_money(nightly_total(start, end, rules, base_price))
    total = total_price(start, end, rules, base_price)
    deposit = deposit_amount(total)
    return PricedStay(
        check_in=start,
        check_out=end,
        nights=max(night_count(start, end), 0),
        nightly_total=nights_cost,
        cleaning_fee=to_money(BOOKING_FLOW.cleaning_fee),
        total_price=total,
        min_stay_required=min_stay_for_range(start, end),
        deposit_amount=deposit,
        remaining_amount=remaining_amount(total, deposit),
    )
