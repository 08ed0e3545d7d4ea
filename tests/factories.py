"""
All test-data builders in one place.
Import from here in every test file; never define dummy data inline.
"""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta
from uuid import UUID, uuid4

from app.deps import CurrentUser
from app.guards import Role

# ---------------------------------------------------------------------------
# Stable IDs: use these when a specific, repeatable UUID is needed.
# Call uuid4() inline when you need a fresh one per test.
# ---------------------------------------------------------------------------

CUSTOMER_ID: UUID = uuid4()
ADMIN_ID: UUID = uuid4()
OTHER_USER_ID: UUID = uuid4()

BOOKING_ID: UUID = uuid4()
HOTEL_ID: UUID = uuid4()
RESTAURANT_ID: UUID = uuid4()
ATTRACTION_ID: UUID = uuid4()

NOW = datetime(2026, 6, 1, 10, 0, 0, tzinfo=UTC)

# Request payloads go through the router's real clock, so keep them ahead of it
FUTURE_DAY: date = date.today() + timedelta(days=30)


# ---------------------------------------------------------------------------
# User factories
# ---------------------------------------------------------------------------


def make_customer(user_id: UUID = CUSTOMER_ID) -> CurrentUser:
    return CurrentUser(id=user_id, username=f"customer_{user_id}", role=Role.USER)


def make_other_user() -> CurrentUser:
    """A regular user who owns none of the test bookings."""
    return make_customer(OTHER_USER_ID)


def make_admin() -> CurrentUser:
    return CurrentUser(id=ADMIN_ID, username="admin", role=Role.ADMIN)


# ---------------------------------------------------------------------------
# Catalog item dicts  (what inventory.resolve returns)
# ---------------------------------------------------------------------------


def _catalog_base(item_id: UUID, name: str) -> dict:
    return dict(
        id=str(item_id),
        name=name,
        description="",
        city="Jaipur",
        state="Rajasthan",
        rating=4.5,
        created_at=NOW.isoformat(),
        updated_at=NOW.isoformat(),
    )


def hotel_dict(**overrides) -> dict:
    base = dict(
        _catalog_base(HOTEL_ID, "Rambagh Palace"),
        star_rating=5,
        price_per_night="3000.00",
    )
    return {**base, **overrides}


def restaurant_dict(**overrides) -> dict:
    base = dict(
        _catalog_base(RESTAURANT_ID, "Suvarna Mahal"),
        cuisine="Rajasthani",
        cost_per_person="1200.00",
    )
    return {**base, **overrides}


def attraction_dict(**overrides) -> dict:
    base = dict(
        _catalog_base(ATTRACTION_ID, "Amber Fort"),
        category="Historical",
        adult_ticket_price="500.00",
        child_ticket_price=None,
        senior_ticket_price=None,
    )
    return {**base, **overrides}


# ---------------------------------------------------------------------------
# Booking response dicts  (mirror what the CRUD layer returns)
# ---------------------------------------------------------------------------


def hotel_details(
    check_in: date = date(2026, 6, 3), check_out: date = date(2026, 6, 5)
) -> dict:
    return dict(
        check_in_date=check_in.isoformat(),
        check_out_date=check_out.isoformat(),
        room_type="standard",
        number_of_rooms=1,
        adults=2,
        children=0,
        special_requests=None,
    )


def booking_response(**overrides) -> dict:
    base = dict(
        id=str(BOOKING_ID),
        user_id=str(CUSTOMER_ID),
        type="hotel",
        target_id=str(HOTEL_ID),
        event_date=datetime(2026, 6, 3, tzinfo=UTC).isoformat(),
        end_date=datetime(2026, 6, 5, tzinfo=UTC).isoformat(),
        details=hotel_details(),
        status="confirmed",
        payment_status="paid",
        total_price="9000.00",
        currency="INR",
        notes=None,
        cancellation_reason=None,
        cancellation_date=None,
        cancellation_fee_percent=None,
        refund_amount=None,
        version=1,
        created_at=NOW.isoformat(),
        updated_at=NOW.isoformat(),
    )
    return {**base, **overrides}


# ---------------------------------------------------------------------------
# Request payload factories
# ---------------------------------------------------------------------------


def hotel_create_payload(**overrides) -> dict:
    base = dict(
        type="hotel",
        target_id=str(HOTEL_ID),
        check_in_date=FUTURE_DAY.isoformat(),
        check_out_date=(FUTURE_DAY + timedelta(days=2)).isoformat(),
        room_type="deluxe",
        number_of_rooms=2,
        adults=2,
    )
    return {**base, **overrides}


def restaurant_create_payload(**overrides) -> dict:
    base = dict(
        type="restaurant",
        target_id=str(RESTAURANT_ID),
        reservation_date=FUTURE_DAY.isoformat(),
        reservation_time="19:30",
        party_size=4,
        occasion="Birthday",
    )
    return {**base, **overrides}


def attraction_create_payload(**overrides) -> dict:
    base = dict(
        type="attraction",
        target_id=str(ATTRACTION_ID),
        visit_date=FUTURE_DAY.isoformat(),
        ticket_type="premium",
        tickets={"adult": 2, "child": 1, "senior": 0},
        guided_tour=False,
    )
    return {**base, **overrides}
