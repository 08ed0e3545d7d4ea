"""
Cancellation fee tiers.

The fee depends on the booking type and on how many days are left before the
event. `days_until_event` is rounded up, so an event 25 hours away counts as
two days and one 24 hours away counts as one.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal

from app.models import BookingType

CENTS = Decimal("0.01")
SECONDS_PER_DAY = 24 * 60 * 60

# (more than N days left, fee percent), checked top to bottom
FEE_TIERS: dict[BookingType, tuple[tuple[int, int], ...]] = {
    BookingType.HOTEL: ((7, 10), (3, 50), (1, 75)),
    BookingType.RESTAURANT: ((1, 0),),
    BookingType.ATTRACTION: ((3, 20), (1, 50)),
}

# One day or less left, including events that already started
LAST_MINUTE_FEE: dict[BookingType, int] = {
    BookingType.HOTEL: 100,
    BookingType.RESTAURANT: 20,
    BookingType.ATTRACTION: 75,
}


@dataclass(frozen=True)
class CancellationFee:
    fee_percent: int
    fee_amount: Decimal
    refund_amount: Decimal


def _to_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def days_until(event: datetime, now: datetime) -> int:
    """Whole days from `now` to `event`, rounded up. Negative once it has passed."""
    seconds = (_to_utc(event) - _to_utc(now)).total_seconds()
    return math.ceil(seconds / SECONDS_PER_DAY)


def fee_percent_for(booking_type: BookingType, days_until_event: int) -> int:
    for min_days, percent in FEE_TIERS[booking_type]:
        if days_until_event > min_days:
            return percent
    return LAST_MINUTE_FEE[booking_type]


def quote(
    booking_type: BookingType,
    total_price: Decimal,
    event_date: datetime,
    now: datetime,
) -> tuple[int, CancellationFee]:
    """Days left and the fee a cancellation at `now` would incur."""
    days = days_until(event_date, now)
    return days, compute_fee(booking_type, total_price, days)


def compute_fee(
    booking_type: BookingType,
    total_price: Decimal,
    days_until_event: int,
) -> CancellationFee:
    percent = fee_percent_for(booking_type, days_until_event)
    fee = (total_price * percent / 100).quantize(CENTS, rounding=ROUND_HALF_UP)
    refund = min(max(total_price - fee, Decimal("0")), total_price)
    return CancellationFee(
        fee_percent=percent,
        fee_amount=fee,
        refund_amount=refund.quantize(CENTS, rounding=ROUND_HALF_UP),
    )
