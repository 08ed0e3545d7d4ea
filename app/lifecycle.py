"""
Booking state rules.

    confirmed | pending  --cancel-->  cancelled
    confirmed | pending  --(external job)-->  completed

cancelled and completed are terminal: no further changes to dates, price or
status. Only cancellation moves the status from inside this service.
"""

from __future__ import annotations

from datetime import date, datetime, time, timezone
from decimal import Decimal

from app.errors import AlreadyCancelledError, InvalidStateError, ValidationError
from app.models import BookingStatus, BookingType, PaymentStatus
from app.schemas import BookingUpdate

INITIAL_STATUS = BookingStatus.CONFIRMED
ACTIVE_STATUSES = {BookingStatus.CONFIRMED, BookingStatus.PENDING}
TERMINAL_STATUSES = {BookingStatus.CANCELLED, BookingStatus.COMPLETED}

DEFAULT_CANCELLATION_REASON = "No reason provided"

# details keys a live booking may change, per type
_UPDATABLE_DETAILS: dict[BookingType, set[str]] = {
    BookingType.HOTEL: {"check_in_date", "check_out_date", "special_requests"},
    BookingType.RESTAURANT: {
        "reservation_date",
        "reservation_time",
        "occasion",
        "special_requests",
    },
    BookingType.ATTRACTION: {"visit_date"},
}

_DATE_KEYS = {
    "check_in_date",
    "check_out_date",
    "reservation_date",
    "reservation_time",
    "visit_date",
}


def assert_mutable(status: BookingStatus) -> None:
    if status in TERMINAL_STATUSES:
        raise InvalidStateError(
            "Cannot update a booking that is cancelled or completed"
        )


def assert_cancellable(status: BookingStatus) -> None:
    if status == BookingStatus.CANCELLED:
        raise AlreadyCancelledError("Booking is already cancelled")
    if status == BookingStatus.COMPLETED:
        raise InvalidStateError("Cannot cancel a completed booking")


def payment_status_after_refund(
    total_price: Decimal, refund_amount: Decimal
) -> PaymentStatus:
    if refund_amount <= 0:
        return PaymentStatus.PAID
    if refund_amount >= total_price:
        return PaymentStatus.REFUNDED
    return PaymentStatus.PARTIAL


def _required(details: dict, key: str) -> str:
    value = details.get(key)
    if value is None:
        raise ValidationError(f"{key} is required")
    return value


def _midnight_utc(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def event_window(booking_type: BookingType, details: dict) -> tuple[datetime, datetime]:
    """(start, end) of the booked event in UTC, read from the stored details."""
    if booking_type == BookingType.HOTEL:
        check_in = date.fromisoformat(_required(details, "check_in_date"))
        check_out = date.fromisoformat(_required(details, "check_out_date"))
        if check_out <= check_in:
            raise ValidationError("check_out_date must be after check_in_date")
        return _midnight_utc(check_in), _midnight_utc(check_out)

    if booking_type == BookingType.RESTAURANT:
        day = date.fromisoformat(_required(details, "reservation_date"))
        at = time.fromisoformat(_required(details, "reservation_time"))
        if at.tzinfo is None:
            start = datetime.combine(day, at, tzinfo=timezone.utc)
        else:
            # an offset on the time means local wall-clock time at that offset
            start = datetime.combine(day, at).astimezone(timezone.utc)
        return start, start

    start = _midnight_utc(date.fromisoformat(_required(details, "visit_date")))
    return start, start


def ensure_upcoming(booking_type: BookingType, start: datetime, now: datetime) -> None:
    """Reject dates that have already passed. Same-day bookings are allowed."""
    if booking_type == BookingType.RESTAURANT:
        passed = start < now
    else:
        passed = start.date() < now.astimezone(timezone.utc).date()
    if passed:
        raise ValidationError("Booking date must not be in the past")


def nights(start: datetime, end: datetime) -> int:
    return (end.date() - start.date()).days


def apply_update(
    booking_type: BookingType,
    details: dict,
    event_date: datetime,
    end_date: datetime,
    update: BookingUpdate,
    now: datetime,
) -> tuple[dict, datetime, datetime]:
    """
    Merge `update` into a live booking's details and return the new
    (details, event_date, end_date). The price was fixed at creation, so a
    hotel stay may be moved but not lengthened or shortened.
    """
    changes = update.model_dump(mode="json", exclude_unset=True, exclude={"notes"})
    not_allowed = set(changes) - _UPDATABLE_DETAILS[booking_type]
    if not_allowed:
        raise ValidationError(
            f"Cannot change {', '.join(sorted(not_allowed))} "
            f"on a {booking_type} booking"
        )

    merged = {**details, **changes}
    start, end = event_window(booking_type, merged)

    if booking_type == BookingType.HOTEL and nights(start, end) != nights(
        event_date, end_date
    ):
        raise ValidationError(
            "Changing the length of a stay requires a new booking"
        )
    if _DATE_KEYS & set(changes):
        ensure_upcoming(booking_type, start, now)

    return merged, start, end
