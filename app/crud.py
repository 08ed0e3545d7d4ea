from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Callable
from uuid import UUID

from loguru import logger
from pydantic import BaseModel
from tortoise.expressions import Q

from app import cancellation
from app.errors import ConflictError, NotFoundError
from app.lifecycle import (
    ACTIVE_STATUSES,
    DEFAULT_CANCELLATION_REASON,
    INITIAL_STATUS,
    TERMINAL_STATUSES,
    apply_update,
    assert_cancellable,
    assert_mutable,
    payment_status_after_refund,
)
from app.models import (
    CATALOG_MODELS,
    Booking,
    BookingStatus,
    BookingType,
    Favorite,
    FavoriteCategory,
    PaymentStatus,
)
from app.schemas import (
    AttractionResponse,
    BookingFilters,
    BookingResponse,
    BookingUpdate,
    CatalogFilters,
    FavoritesResponse,
    HotelResponse,
    RestaurantResponse,
)


def _to_response(inst: Booking) -> BookingResponse:
    return BookingResponse.model_validate(inst, from_attributes=True)


class BookingCRUD:
    async def create_booking(
        self,
        user_id: UUID,
        booking_type: BookingType,
        target_id: UUID,
        event_date: datetime,
        end_date: datetime,
        details: dict,
        total_price: Decimal,
        currency: str,
        notes: str | None,
    ) -> BookingResponse:
        inst = await Booking.create(
            user_id=user_id,
            type=booking_type,
            target_id=target_id,
            event_date=event_date,
            end_date=end_date,
            details=details,
            status=INITIAL_STATUS,
            payment_status=PaymentStatus.PAID,
            total_price=total_price,
            currency=currency,
            notes=notes,
        )
        return _to_response(inst)

    async def get_booking(
        self,
        booking_id: UUID,
        user_id: UUID | None = None,
    ) -> BookingResponse | None:
        if user_id is not None:
            inst = await Booking.get_or_none(id=booking_id, user_id=user_id)
        else:
            inst = await Booking.get_or_none(id=booking_id)

        if not inst:
            return None
        return _to_response(inst)

    async def list_bookings(
        self,
        filters: BookingFilters,
        user_id: UUID | None = None,
    ) -> list[BookingResponse]:
        qs = Booking.all()

        if user_id is not None:
            qs = qs.filter(user_id=user_id)
        if filters.type is not None:
            qs = qs.filter(type=filters.type)
        if filters.status is not None:
            qs = qs.filter(status=filters.status)

        offset = (filters.page - 1) * filters.page_size
        qs = qs.offset(offset).limit(filters.page_size)

        return [_to_response(b) for b in await qs]

    async def list_upcoming(self, user_id: UUID, now: datetime) -> list[BookingResponse]:
        """Live bookings whose event has not started yet, soonest first."""
        bookings = await Booking.filter(
            user_id=user_id,
            status__in=list(ACTIVE_STATUSES),
            event_date__gte=now,
        ).order_by("event_date")
        return [_to_response(b) for b in bookings]

    async def list_past(self, user_id: UUID, now: datetime) -> list[BookingResponse]:
        """Finished bookings: terminal ones, or live ones whose event has ended."""
        bookings = await Booking.filter(
            Q(status__in=list(TERMINAL_STATUSES))
            | Q(status__in=list(ACTIVE_STATUSES), end_date__lt=now),
            user_id=user_id,
        ).order_by("-event_date")
        return [_to_response(b) for b in bookings]

    async def _raise_lost_race(
        self, booking_id: UUID, check: Callable[[BookingStatus], None]
    ) -> None:
        """
        A conditional write matched no row: the booking was deleted, moved to
        a terminal state, or changed by another request since we read it.
        """
        current = await Booking.get_or_none(id=booking_id)
        if current is None:
            raise NotFoundError(f"No booking found with id {booking_id}")
        check(current.status)
        raise ConflictError("Booking was modified concurrently, please retry")

    async def update_booking(
        self,
        booking_id: UUID,
        payload: BookingUpdate,
        now: datetime,
    ) -> BookingResponse:
        inst = await Booking.get_or_none(id=booking_id)
        if inst is None:
            raise NotFoundError(f"No booking found with id {booking_id}")
        assert_mutable(inst.status)

        details, event_date, end_date = apply_update(
            inst.type, inst.details, inst.event_date, inst.end_date, payload, now
        )
        changes: dict = dict(
            details=details,
            event_date=event_date,
            end_date=end_date,
            version=inst.version + 1,
            updated_at=now,
        )
        if "notes" in payload.model_fields_set:
            changes["notes"] = payload.notes

        # Conditional write: only the version we validated against may change
        updated = await Booking.filter(
            id=booking_id,
            version=inst.version,
            status__in=list(ACTIVE_STATUSES),
        ).update(**changes)
        if not updated:
            await self._raise_lost_race(booking_id, assert_mutable)

        logger.info("Booking {} updated (version {})", booking_id, inst.version + 1)
        return _to_response(await Booking.get(id=booking_id))

    async def cancel_booking(
        self,
        booking_id: UUID,
        reason: str | None,
        now: datetime,
    ) -> BookingResponse:
        inst = await Booking.get_or_none(id=booking_id)
        if inst is None:
            raise NotFoundError(f"No booking found with id {booking_id}")
        assert_cancellable(inst.status)

        days, fee = cancellation.quote(inst.type, inst.total_price, inst.event_date, now)

        updated = await Booking.filter(
            id=booking_id,
            version=inst.version,
            status__in=list(ACTIVE_STATUSES),
        ).update(
            status=BookingStatus.CANCELLED,
            cancellation_reason=reason or DEFAULT_CANCELLATION_REASON,
            cancellation_date=now,
            cancellation_fee_percent=fee.fee_percent,
            refund_amount=fee.refund_amount,
            payment_status=payment_status_after_refund(
                inst.total_price, fee.refund_amount
            ),
            version=inst.version + 1,
            updated_at=now,
        )
        if not updated:
            await self._raise_lost_race(booking_id, assert_cancellable)

        logger.info(
            "Booking {} cancelled {} day(s) ahead: fee {}%, refund {}",
            booking_id,
            days,
            fee.fee_percent,
            fee.refund_amount,
        )
        return _to_response(await Booking.get(id=booking_id))

    async def delete_booking(self, booking_id: UUID) -> bool:
        return await Booking.filter(id=booking_id).delete() > 0


booking_crud = BookingCRUD()


CATALOG_RESPONSES: dict[BookingType, type[BaseModel]] = {
    BookingType.HOTEL: HotelResponse,
    BookingType.RESTAURANT: RestaurantResponse,
    BookingType.ATTRACTION: AttractionResponse,
}


class CatalogCRUD:
    def _dump(self, kind: BookingType, inst) -> BaseModel:
        return CATALOG_RESPONSES[kind].model_validate(inst, from_attributes=True)

    async def get_item(self, kind: BookingType, item_id: UUID) -> BaseModel | None:
        inst = await CATALOG_MODELS[kind].get_or_none(id=item_id)
        return self._dump(kind, inst) if inst else None

    async def list_items(
        self, kind: BookingType, filters: CatalogFilters
    ) -> list[BaseModel]:
        qs = CATALOG_MODELS[kind].all()

        if filters.q:
            qs = qs.filter(name__icontains=filters.q)
        if filters.city:
            qs = qs.filter(city__iexact=filters.city)
        if filters.state:
            qs = qs.filter(state__iexact=filters.state)
        if filters.min_rating is not None:
            qs = qs.filter(rating__gte=filters.min_rating)

        offset = (filters.page - 1) * filters.page_size
        qs = qs.offset(offset).limit(filters.page_size)
        return [self._dump(kind, i) for i in await qs]

    async def top_rated(self, kind: BookingType, limit: int) -> list[BaseModel]:
        items = await CATALOG_MODELS[kind].all().order_by("-rating", "name").limit(limit)
        return [self._dump(kind, i) for i in items]

    async def create_item(self, kind: BookingType, payload: BaseModel) -> BaseModel:
        inst = await CATALOG_MODELS[kind].create(**payload.model_dump())
        return self._dump(kind, inst)

    async def update_item(
        self, kind: BookingType, item_id: UUID, payload: BaseModel
    ) -> BaseModel | None:
        inst = await CATALOG_MODELS[kind].get_or_none(id=item_id)
        if not inst:
            return None
        changes = payload.model_dump(exclude_unset=True)
        inst.update_from_dict(changes)
        await inst.save()
        return self._dump(kind, inst)

    async def delete_item(self, kind: BookingType, item_id: UUID) -> bool:
        return await CATALOG_MODELS[kind].filter(id=item_id).delete() > 0


catalog_crud = CatalogCRUD()


class FavoriteCRUD:
    async def list_favorites(self, user_id: UUID) -> FavoritesResponse:
        grouped: dict[str, list[UUID]] = {c.value: [] for c in FavoriteCategory}
        for fav in await Favorite.filter(user_id=user_id):
            grouped[fav.category].append(fav.item_id)
        return FavoritesResponse(**grouped)

    async def is_favorite(
        self, user_id: UUID, category: FavoriteCategory, item_id: UUID
    ) -> bool:
        return await Favorite.filter(
            user_id=user_id, category=category, item_id=item_id
        ).exists()

    async def add_favorite(
        self, user_id: UUID, category: FavoriteCategory, item_id: UUID
    ) -> FavoritesResponse:
        # get_or_create keeps each (user, category, item) at most once
        await Favorite.get_or_create(
            user_id=user_id, category=category, item_id=item_id
        )
        return await self.list_favorites(user_id)

    async def remove_favorite(
        self, user_id: UUID, category: FavoriteCategory, item_id: UUID
    ) -> FavoritesResponse:
        await Favorite.filter(
            user_id=user_id, category=category, item_id=item_id
        ).delete()
        return await self.list_favorites(user_id)


favorite_crud = FavoriteCRUD()
