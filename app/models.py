from enum import StrEnum

from tortoise import fields
from tortoise.models import Model


class BookingType(StrEnum):
    HOTEL = "hotel"
    RESTAURANT = "restaurant"
    ATTRACTION = "attraction"


class BookingStatus(StrEnum):
    CONFIRMED = "confirmed"  # default for every new booking
    PENDING = "pending"  # awaiting payment or manual approval
    CANCELLED = "cancelled"  # cancelled by the customer or an admin
    COMPLETED = "completed"  # event elapsed, set by an external job


class PaymentStatus(StrEnum):
    PENDING = "pending"
    PAID = "paid"
    REFUNDED = "refunded"
    PARTIAL = "partial"  # partially refunded after a cancellation fee


class FavoriteCategory(StrEnum):
    HOTELS = "hotels"
    RESTAURANTS = "restaurants"
    ATTRACTIONS = "attractions"

    @property
    def booking_type(self) -> BookingType:
        return BookingType(self.value[:-1])


class TimestampedModel(Model):
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:  # type: ignore
        abstract = True


class Booking(TimestampedModel):
    id = fields.UUIDField(primary_key=True)

    user_id = fields.UUIDField()  # the customer who made the booking
    type = fields.CharEnumField(BookingType)
    target_id = fields.UUIDField()  # hotel / restaurant / attraction id

    event_date = fields.DatetimeField()  # check-in, reservation or visit
    end_date = fields.DatetimeField()  # check-out for hotels, else event_date

    # type-specific payload (room type, party size, tickets...)
    details = fields.JSONField(default=dict)

    status = fields.CharEnumField(BookingStatus, default=BookingStatus.CONFIRMED)
    payment_status = fields.CharEnumField(PaymentStatus, default=PaymentStatus.PAID)

    total_price = fields.DecimalField(max_digits=12, decimal_places=2)  # computed
    currency = fields.CharField(max_length=3, default="INR")
    notes = fields.TextField(null=True)

    cancellation_reason = fields.TextField(null=True)
    cancellation_date = fields.DatetimeField(null=True)
    cancellation_fee_percent = fields.IntField(null=True)
    refund_amount = fields.DecimalField(max_digits=12, decimal_places=2, null=True)

    version = fields.IntField(default=1)

    class Meta:  # type: ignore
        table = "bookings"
        ordering = ["-created_at"]


class CatalogItem(TimestampedModel):
    id = fields.UUIDField(primary_key=True)
    name = fields.CharField(max_length=200)
    description = fields.TextField(default="")
    city = fields.CharField(max_length=100)
    state = fields.CharField(max_length=100)
    rating = fields.FloatField(default=4.0)

    class Meta:  # type: ignore
        abstract = True


class Hotel(CatalogItem):
    star_rating = fields.IntField(default=3)
    price_per_night = fields.DecimalField(max_digits=10, decimal_places=2)

    class Meta:  # type: ignore
        table = "hotels"
        ordering = ["name"]


class Restaurant(CatalogItem):
    cuisine = fields.CharField(max_length=100, default="")
    cost_per_person = fields.DecimalField(max_digits=10, decimal_places=2)

    class Meta:  # type: ignore
        table = "restaurants"
        ordering = ["name"]


class Attraction(CatalogItem):
    category = fields.CharField(max_length=50, default="Others")
    adult_ticket_price = fields.DecimalField(max_digits=10, decimal_places=2)
    child_ticket_price = fields.DecimalField(max_digits=10, decimal_places=2, null=True)
    senior_ticket_price = fields.DecimalField(
        max_digits=10, decimal_places=2, null=True
    )

    class Meta:  # type: ignore
        table = "attractions"
        ordering = ["name"]


class Favorite(TimestampedModel):
    id = fields.IntField(primary_key=True)
    user_id = fields.UUIDField()
    category = fields.CharEnumField(FavoriteCategory)
    item_id = fields.UUIDField()

    class Meta:  # type: ignore
        table = "favorites"
        unique_together = (("user_id", "category", "item_id"),)
        ordering = ["created_at"]


CATALOG_MODELS: dict[BookingType, type[CatalogItem]] = {
    BookingType.HOTEL: Hotel,
    BookingType.RESTAURANT: Restaurant,
    BookingType.ATTRACTION: Attraction,
}
