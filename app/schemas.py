from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal
from enum import StrEnum
from typing import ClassVar, Literal, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.models import (
    BookingStatus,
    BookingType,
    FavoriteCategory,
    PaymentStatus,
)

# ---------------------------------------------------------------------------
# Booking creation: one variant per booking type
# ---------------------------------------------------------------------------


class RoomType(StrEnum):
    STANDARD = "standard"
    DELUXE = "deluxe"
    SUITE = "suite"


class TicketType(StrEnum):
    STANDARD = "standard"
    PREMIUM = "premium"
    VIP = "vip"


class _BookingCreateBase(BaseModel):
    target_id: UUID
    notes: str | None = Field(default=None, max_length=1000)

    def details(self) -> dict:
        """Type-specific payload stored alongside the booking row."""
        return self.model_dump(
            mode="json", exclude={"type", "target_id", "notes"}
        )


class HotelBookingCreate(_BookingCreateBase):
    type: Literal["hotel"]
    check_in_date: date
    check_out_date: date
    room_type: RoomType
    number_of_rooms: int = Field(ge=1)
    adults: int = Field(ge=1)
    children: int = Field(default=0, ge=0)
    special_requests: str | None = Field(default=None, max_length=1000)

    @model_validator(mode="after")
    def validate_stay(self) -> HotelBookingCreate:
        if self.check_out_date <= self.check_in_date:
            raise ValueError("check_out_date must be after check_in_date")
        return self

    @property
    def nights(self) -> int:
        return (self.check_out_date - self.check_in_date).days


class RestaurantBookingCreate(_BookingCreateBase):
    type: Literal["restaurant"]
    reservation_date: date
    reservation_time: time
    party_size: int = Field(ge=1)
    occasion: str | None = Field(default=None, max_length=100)
    special_requests: str | None = Field(default=None, max_length=1000)


class TicketCounts(BaseModel):
    adult: int = Field(default=0, ge=0)
    child: int = Field(default=0, ge=0)
    senior: int = Field(default=0, ge=0)

    @property
    def total(self) -> int:
        return self.adult + self.child + self.senior


class AttractionBookingCreate(_BookingCreateBase):
    type: Literal["attraction"]
    visit_date: date
    ticket_type: TicketType = TicketType.STANDARD
    tickets: TicketCounts = Field(default_factory=TicketCounts)
    total_tickets: int | None = Field(default=None, ge=1)
    guided_tour: bool = False

    @model_validator(mode="after")
    def require_tickets(self) -> AttractionBookingCreate:
        if self.tickets.total == 0 and not self.total_tickets:
            raise ValueError("at least one ticket is required")
        return self


# Request body of POST /bookings, discriminated on `type`
BookingCreate = Union[HotelBookingCreate, RestaurantBookingCreate, AttractionBookingCreate]


# ---------------------------------------------------------------------------
# Booking update / cancel
# ---------------------------------------------------------------------------


class BookingUpdate(BaseModel):
    """
    Mutable fields of a live booking. Price, type and target are fixed at
    creation; status only changes through cancellation.
    """

    model_config = ConfigDict(extra="forbid")

    check_in_date: date | None = None
    check_out_date: date | None = None
    reservation_date: date | None = None
    reservation_time: time | None = None
    visit_date: date | None = None
    occasion: str | None = Field(default=None, max_length=100)
    special_requests: str | None = Field(default=None, max_length=1000)
    notes: str | None = Field(default=None, max_length=1000)


class BookingCancel(BaseModel):
    reason: str | None = Field(default=None, max_length=500)


# ---------------------------------------------------------------------------
# Booking responses
# ---------------------------------------------------------------------------


class BookingResponse(BaseModel):
    id: UUID
    user_id: UUID
    type: BookingType
    target_id: UUID
    event_date: datetime
    end_date: datetime
    details: dict
    status: BookingStatus
    payment_status: PaymentStatus
    total_price: Decimal
    currency: str
    notes: str | None = None
    cancellation_reason: str | None = None
    cancellation_date: datetime | None = None
    cancellation_fee_percent: int | None = None
    refund_amount: Decimal | None = None
    version: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CancellationQuote(BaseModel):
    """What a cancellation issued right now would cost."""

    booking_id: UUID
    days_until_event: int
    fee_percent: int
    fee_amount: Decimal
    refund_amount: Decimal


class BookingFilters(BaseModel):
    """Bind to a FastAPI route via Depends(BookingFilters)."""

    type: BookingType | None = None
    status: BookingStatus | None = None

    # Pagination
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1, le=100)


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


class _CatalogBase(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: str = ""
    city: str = Field(min_length=1, max_length=100)
    state: str = Field(min_length=1, max_length=100)
    rating: float = Field(default=4.0, ge=1, le=5)


class _CatalogUpdateBase(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    city: str | None = Field(default=None, min_length=1, max_length=100)
    state: str | None = Field(default=None, min_length=1, max_length=100)
    rating: float | None = Field(default=None, ge=1, le=5)

    # columns that may be cleared with an explicit null
    nullable_fields: ClassVar[frozenset[str]] = frozenset()

    @model_validator(mode="after")
    def reject_null_for_required_columns(self) -> _CatalogUpdateBase:
        nulled = sorted(
            name
            for name in self.model_fields_set - self.nullable_fields
            if getattr(self, name) is None
        )
        if nulled:
            raise ValueError(f"{', '.join(nulled)} cannot be null")
        return self


class _CatalogResponseBase(BaseModel):
    id: UUID
    name: str
    description: str
    city: str
    state: str
    rating: float
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class HotelCreate(_CatalogBase):
    star_rating: int = Field(default=3, ge=1, le=7)
    price_per_night: Decimal = Field(gt=0, decimal_places=2)


class HotelUpdate(_CatalogUpdateBase):
    star_rating: int | None = Field(default=None, ge=1, le=7)
    price_per_night: Decimal | None = Field(default=None, gt=0, decimal_places=2)


class HotelResponse(_CatalogResponseBase):
    star_rating: int
    price_per_night: Decimal


class RestaurantCreate(_CatalogBase):
    cuisine: str = ""
    cost_per_person: Decimal = Field(gt=0, decimal_places=2)


class RestaurantUpdate(_CatalogUpdateBase):
    cuisine: str | None = None
    cost_per_person: Decimal | None = Field(default=None, gt=0, decimal_places=2)


class RestaurantResponse(_CatalogResponseBase):
    cuisine: str
    cost_per_person: Decimal


class AttractionCreate(_CatalogBase):
    category: str = "Others"
    adult_ticket_price: Decimal = Field(ge=0, decimal_places=2)
    child_ticket_price: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    senior_ticket_price: Decimal | None = Field(default=None, ge=0, decimal_places=2)


class AttractionUpdate(_CatalogUpdateBase):
    nullable_fields: ClassVar[frozenset[str]] = frozenset(
        {"child_ticket_price", "senior_ticket_price"}
    )

    category: str | None = None
    adult_ticket_price: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    child_ticket_price: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    senior_ticket_price: Decimal | None = Field(default=None, ge=0, decimal_places=2)


class AttractionResponse(_CatalogResponseBase):
    category: str
    adult_ticket_price: Decimal
    child_ticket_price: Decimal | None = None
    senior_ticket_price: Decimal | None = None


class CatalogFilters(BaseModel):
    """Bind to a FastAPI route via Depends(CatalogFilters)."""

    q: str | None = Field(default=None, max_length=100)
    city: str | None = None
    state: str | None = None
    min_rating: float | None = Field(default=None, ge=1, le=5)

    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1, le=100)


# ---------------------------------------------------------------------------
# Favorites
# ---------------------------------------------------------------------------


class FavoritesResponse(BaseModel):
    hotels: list[UUID] = Field(default_factory=list)
    restaurants: list[UUID] = Field(default_factory=list)
    attractions: list[UUID] = Field(default_factory=list)


class FavoriteStatus(BaseModel):
    category: FavoriteCategory
    item_id: UUID
    is_favorite: bool
