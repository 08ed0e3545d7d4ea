from __future__ import annotations

from datetime import datetime, timezone
from uuid import UUID

from fastapi import APIRouter, Body, Depends, status
from loguru import logger

from app import cancellation, inventory, lifecycle
from app.crud import booking_crud
from app.deps import CurrentUser, get_current_user, require_admin
from app.errors import NotFoundError
from app.guards import BookingAction, authorize
from app.models import BookingType
from app.pricing import quote_total_price
from app.schemas import (
    BookingCancel,
    BookingCreate,
    BookingFilters,
    BookingResponse,
    BookingUpdate,
    CancellationQuote,
)
from app.settings import DEFAULT_CURRENCY

router = APIRouter(prefix="/bookings", tags=["bookings"])


def _now() -> datetime:
    return datetime.now(timezone.utc)


async def _get_authorized(
    booking_id: UUID, current_user: CurrentUser, action: BookingAction
) -> BookingResponse:
    """Fetch a booking without an ownership filter, then run the guard on it."""
    booking = await booking_crud.get_booking(booking_id)
    if not booking:
        raise NotFoundError(f"No booking found with id {booking_id}")
    authorize(booking.user_id, current_user.id, current_user.role, action)
    return booking


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.get("/", response_model=list[BookingResponse])
async def list_bookings(
    filters: BookingFilters = Depends(),
    current_user: CurrentUser = Depends(get_current_user),
) -> list[BookingResponse]:
    if current_user.is_admin:
        return await booking_crud.list_bookings(filters=filters)
    return await booking_crud.list_bookings(filters=filters, user_id=current_user.id)


@router.post("/", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    payload: BookingCreate = Body(..., discriminator="type"),
    current_user: CurrentUser = Depends(get_current_user),
) -> BookingResponse:
    booking_type = BookingType(payload.type)

    # 1. The booked hotel / restaurant / attraction must exist
    item = await inventory.resolve(booking_type, payload.target_id)

    # 2. Dates must be bookable, price is fixed from the item's rates
    details = payload.details()
    event_date, end_date = lifecycle.event_window(booking_type, details)
    lifecycle.ensure_upcoming(booking_type, event_date, _now())
    total_price = quote_total_price(payload, item)

    booking = await booking_crud.create_booking(
        user_id=current_user.id,
        booking_type=booking_type,
        target_id=payload.target_id,
        event_date=event_date,
        end_date=end_date,
        details=details,
        total_price=total_price,
        currency=item.get("currency", DEFAULT_CURRENCY),
        notes=payload.notes,
    )
    logger.info(
        "Booking {} created: {} {} for user {} at {}",
        booking.id,
        booking_type,
        payload.target_id,
        current_user.id,
        total_price,
    )
    return booking


@router.get("/upcoming", response_model=list[BookingResponse])
async def list_upcoming_bookings(
    current_user: CurrentUser = Depends(get_current_user),
) -> list[BookingResponse]:
    return await booking_crud.list_upcoming(current_user.id, _now())


@router.get("/past", response_model=list[BookingResponse])
async def list_past_bookings(
    current_user: CurrentUser = Depends(get_current_user),
) -> list[BookingResponse]:
    return await booking_crud.list_past(current_user.id, _now())


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
) -> BookingResponse:
    return await _get_authorized(booking_id, current_user, BookingAction.READ)


@router.get("/{booking_id}/cancellation-fee", response_model=CancellationQuote)
async def get_cancellation_fee(
    booking_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
) -> CancellationQuote:
    """Preview the fee and refund of cancelling now. Nothing is written."""
    booking = await _get_authorized(booking_id, current_user, BookingAction.CANCEL)
    lifecycle.assert_cancellable(booking.status)

    days, fee = cancellation.quote(
        booking.type, booking.total_price, booking.event_date, _now()
    )
    return CancellationQuote(
        booking_id=booking.id,
        days_until_event=days,
        fee_percent=fee.fee_percent,
        fee_amount=fee.fee_amount,
        refund_amount=fee.refund_amount,
    )


@router.put("/{booking_id}", response_model=BookingResponse)
async def update_booking(
    booking_id: UUID,
    payload: BookingUpdate,
    current_user: CurrentUser = Depends(get_current_user),
) -> BookingResponse:
    booking = await _get_authorized(booking_id, current_user, BookingAction.UPDATE)
    lifecycle.assert_mutable(booking.status)
    return await booking_crud.update_booking(booking_id, payload, _now())


@router.put("/{booking_id}/cancel", response_model=BookingResponse)
async def cancel_booking(
    booking_id: UUID,
    payload: BookingCancel | None = None,
    current_user: CurrentUser = Depends(get_current_user),
) -> BookingResponse:
    booking = await _get_authorized(booking_id, current_user, BookingAction.CANCEL)
    lifecycle.assert_cancellable(booking.status)

    reason = payload.reason if payload is not None else None
    return await booking_crud.cancel_booking(booking_id, reason, _now())


@router.delete("/{booking_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_booking(
    booking_id: UUID,
    current_user: CurrentUser = Depends(require_admin),
) -> None:
    deleted = await booking_crud.delete_booking(booking_id)
    if not deleted:
        raise NotFoundError(f"No booking found with id {booking_id}")
    logger.info("Booking {} deleted by admin {}", booking_id, current_user.id)
