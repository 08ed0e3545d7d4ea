from datetime import UTC, date, datetime
from decimal import Decimal

import pytest

from app import lifecycle
from app.errors import AlreadyCancelledError, InvalidStateError, ValidationError
from app.models import BookingStatus, BookingType, PaymentStatus
from app.schemas import BookingUpdate

from .factories import NOW, hotel_details


def _utc(*args) -> datetime:
    return datetime(*args, tzinfo=UTC)


class TestStatusRules:
    def test_new_bookings_start_confirmed(self):
        assert lifecycle.INITIAL_STATUS == BookingStatus.CONFIRMED

    @pytest.mark.parametrize("status", [BookingStatus.CONFIRMED, BookingStatus.PENDING])
    def test_active_bookings_are_mutable_and_cancellable(self, status):
        lifecycle.assert_mutable(status)
        lifecycle.assert_cancellable(status)

    @pytest.mark.parametrize(
        "status", [BookingStatus.CANCELLED, BookingStatus.COMPLETED]
    )
    def test_terminal_bookings_are_frozen(self, status):
        with pytest.raises(InvalidStateError):
            lifecycle.assert_mutable(status)

    def test_cancelling_twice_is_reported_as_already_cancelled(self):
        with pytest.raises(AlreadyCancelledError) as exc_info:
            lifecycle.assert_cancellable(BookingStatus.CANCELLED)
        assert exc_info.value.detail == "Booking is already cancelled"

    def test_completed_booking_cannot_be_cancelled(self):
        with pytest.raises(InvalidStateError) as exc_info:
            lifecycle.assert_cancellable(BookingStatus.COMPLETED)
        assert not isinstance(exc_info.value, AlreadyCancelledError)


class TestPaymentStatusAfterRefund:
    @pytest.mark.parametrize(
        ("refund", "expected"),
        [
            ("0", PaymentStatus.PAID),
            ("2250", PaymentStatus.PARTIAL),
            ("9000", PaymentStatus.REFUNDED),
        ],
    )
    def test_refund_maps_to_payment_status(self, refund, expected):
        assert (
            lifecycle.payment_status_after_refund(Decimal("9000"), Decimal(refund))
            == expected
        )


class TestEventWindow:
    def test_hotel_spans_check_in_to_check_out(self):
        start, end = lifecycle.event_window(BookingType.HOTEL, hotel_details())
        assert start == _utc(2026, 6, 3)
        assert end == _utc(2026, 6, 5)

    def test_hotel_requires_check_out_after_check_in(self):
        details = hotel_details(date(2026, 6, 5), date(2026, 6, 5))
        with pytest.raises(ValidationError):
            lifecycle.event_window(BookingType.HOTEL, details)

    def test_restaurant_uses_reservation_time(self):
        details = {"reservation_date": "2026-06-03", "reservation_time": "19:30:00"}
        start, end = lifecycle.event_window(BookingType.RESTAURANT, details)
        assert start == end == _utc(2026, 6, 3, 19, 30)

    def test_attraction_is_a_single_day(self):
        start, end = lifecycle.event_window(
            BookingType.ATTRACTION, {"visit_date": "2026-06-03"}
        )
        assert start == end == _utc(2026, 6, 3)

    def test_missing_date_is_a_validation_error(self):
        with pytest.raises(ValidationError):
            lifecycle.event_window(BookingType.ATTRACTION, {})


class TestEnsureUpcoming:
    def test_same_day_visit_is_allowed(self):
        lifecycle.ensure_upcoming(BookingType.ATTRACTION, _utc(2026, 6, 1), NOW)

    def test_yesterday_is_rejected(self):
        with pytest.raises(ValidationError):
            lifecycle.ensure_upcoming(BookingType.HOTEL, _utc(2026, 5, 31), NOW)

    def test_restaurant_earlier_today_is_rejected(self):
        with pytest.raises(ValidationError):
            lifecycle.ensure_upcoming(
                BookingType.RESTAURANT, _utc(2026, 6, 1, 9, 0), NOW
            )

    def test_restaurant_later_today_is_allowed(self):
        lifecycle.ensure_upcoming(BookingType.RESTAURANT, _utc(2026, 6, 1, 20, 0), NOW)


class TestApplyUpdate:
    def _apply(self, update: dict, booking_type=BookingType.HOTEL, details=None):
        details = details if details is not None else hotel_details()
        event_date, end_date = lifecycle.event_window(booking_type, details)
        return lifecycle.apply_update(
            booking_type,
            details,
            event_date,
            end_date,
            BookingUpdate(**update),
            NOW,
        )

    def test_moving_a_stay_keeps_its_length(self):
        merged, start, end = self._apply(
            {"check_in_date": "2026-07-10", "check_out_date": "2026-07-12"}
        )
        assert merged["check_in_date"] == "2026-07-10"
        assert start == _utc(2026, 7, 10)
        assert end == _utc(2026, 7, 12)
        # untouched keys survive the merge
        assert merged["room_type"] == "standard"

    def test_changing_stay_length_is_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            self._apply({"check_out_date": "2026-06-08"})
        assert "length of a stay" in exc_info.value.detail

    def test_field_of_another_type_is_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            self._apply({"visit_date": "2026-07-01"})
        assert "visit_date" in exc_info.value.detail

    def test_moving_into_the_past_is_rejected(self):
        with pytest.raises(ValidationError):
            self._apply(
                {"check_in_date": "2026-05-20", "check_out_date": "2026-05-22"}
            )

    def test_text_only_change_skips_date_check(self):
        # the stay already started, but special requests can still change
        details = hotel_details(date(2026, 5, 31), date(2026, 6, 2))
        merged, _, _ = self._apply({"special_requests": "Late check-out"}, details=details)
        assert merged["special_requests"] == "Late check-out"

    def test_notes_are_not_part_of_details(self):
        merged, _, _ = self._apply({"notes": "anniversary trip"})
        assert "notes" not in merged

    def test_restaurant_reschedule(self):
        details = {
            "reservation_date": "2026-06-03",
            "reservation_time": "19:30:00",
            "party_size": 4,
        }
        merged, start, _ = self._apply(
            {"reservation_time": "21:00"},
            booking_type=BookingType.RESTAURANT,
            details=details,
        )
        assert merged["reservation_time"] == "21:00:00"
        assert start == _utc(2026, 6, 3, 21, 0)


class TestReservationTimeOffset:
    def test_offset_is_converted_to_utc(self):
        details = {"reservation_date": "2026-06-03", "reservation_time": "19:30:00+05:30"}
        start, end = lifecycle.event_window(BookingType.RESTAURANT, details)
        assert start == end == _utc(2026, 6, 3, 14, 0)

    def test_offset_can_move_the_utc_date(self):
        details = {"reservation_date": "2026-06-03", "reservation_time": "02:00:00+05:30"}
        start, _ = lifecycle.event_window(BookingType.RESTAURANT, details)
        assert start == _utc(2026, 6, 2, 20, 30)

    def test_offset_changes_the_cancellation_window(self):
        from app.cancellation import days_until

        # 10:30 IST on June 2nd is 05:00 UTC, under a day after NOW
        details = {"reservation_date": "2026-06-02", "reservation_time": "10:30:00+05:30"}
        start, _ = lifecycle.event_window(BookingType.RESTAURANT, details)
        assert days_until(start, NOW) == 1
