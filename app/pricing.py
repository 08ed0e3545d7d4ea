"""
Total price of a new booking, derived from the request payload and the rates
on the resolved catalog item. Prices are fixed at creation time.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from app.schemas import (
    AttractionBookingCreate,
    HotelBookingCreate,
    RestaurantBookingCreate,
    RoomType,
    TicketType,
)

CENTS = Decimal("0.01")

ROOM_TYPE_MULTIPLIERS: dict[RoomType, Decimal] = {
    RoomType.STANDARD: Decimal("1.0"),
    RoomType.DELUXE: Decimal("1.5"),
    RoomType.SUITE: Decimal("2.5"),
}

TICKET_TYPE_MULTIPLIERS: dict[TicketType, Decimal] = {
    TicketType.STANDARD: Decimal("1.0"),
    TicketType.PREMIUM: Decimal("1.5"),
    TicketType.VIP: Decimal("2.5"),
}

# Restaurants have a single seating tier
RESTAURANT_MULTIPLIER = Decimal("1.0")

CHILD_TICKET_RATIO = Decimal("0.5")
SENIOR_TICKET_RATIO = Decimal("0.7")
GUIDED_TOUR_SURCHARGE = Decimal("1000")


def _money(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def _rate(item: dict, key: str) -> Decimal:
    return Decimal(str(item[key]))


def hotel_price(payload: HotelBookingCreate, item: dict) -> Decimal:
    per_night = _rate(item, "price_per_night")
    multiplier = ROOM_TYPE_MULTIPLIERS[payload.room_type]
    return _money(per_night * multiplier * payload.number_of_rooms * payload.nights)


def restaurant_price(payload: RestaurantBookingCreate, item: dict) -> Decimal:
    per_person = _rate(item, "cost_per_person")
    return _money(per_person * payload.party_size * RESTAURANT_MULTIPLIER)


def attraction_price(payload: AttractionBookingCreate, item: dict) -> Decimal:
    adult = _rate(item, "adult_ticket_price")
    child = (
        _rate(item, "child_ticket_price")
        if item.get("child_ticket_price") is not None
        else adult * CHILD_TICKET_RATIO
    )
    senior = (
        _rate(item, "senior_ticket_price")
        if item.get("senior_ticket_price") is not None
        else adult * SENIOR_TICKET_RATIO
    )

    tickets = payload.tickets
    if tickets.total > 0:
        base = adult * tickets.adult + child * tickets.child + senior * tickets.senior
    else:
        # only a head count was given: charge everyone the adult rate
        base = adult * (payload.total_tickets or 0)

    total = base * TICKET_TYPE_MULTIPLIERS[payload.ticket_type]
    if payload.guided_tour:
        total += GUIDED_TOUR_SURCHARGE
    return _money(total)


def quote_total_price(
    payload: HotelBookingCreate | RestaurantBookingCreate | AttractionBookingCreate,
    item: dict,
) -> Decimal:
    """Dispatch on the booking variant. `item` is the resolved catalog item."""
    if isinstance(payload, HotelBookingCreate):
        return hotel_price(payload, item)
    if isinstance(payload, RestaurantBookingCreate):
        return restaurant_price(payload, item)
    return attraction_price(payload, item)
