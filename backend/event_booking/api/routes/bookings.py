"""
Booking endpoints with concurrency-safe seat reservation.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from event_booking.api.deps import get_current_user
from event_booking.core.config import get_settings
from event_booking.db.session import get_db
from event_booking.models.booking import Booking
from event_booking.models.user import User
from event_booking.schemas.booking import (
    BookingCreate,
    BookingDetailResponse,
    BookingResponse,
    BookingStatusResponse,
)
from event_booking.services import booking_service
from event_booking.services.cache_service import (
    get_cached,
    set_cached,
    user_bookings_key,
    invalidate_event_cache,
    invalidate_user_bookings,
)
from event_booking.core.logging import get_logger

logger = get_logger(__name__)
settings = get_settings()
router = APIRouter(prefix="/bookings", tags=["Bookings"])


def _invalidate_after_change(db: AsyncSession, booking: Booking) -> None:
    # Seat counts moved and the owner's booking list is stale
    invalidate_event_cache(db)
    invalidate_user_bookings(db, booking.user_id)


@router.post("/", response_model=BookingDetailResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking_data: BookingCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Book specific seats for an event.

    Seats are claimed with a conditional update so two concurrent requests
    cannot both take the same seat; the loser gets 409. The booking starts
    as `pending` until it is confirmed or paid.
    """
    booking = await booking_service.create_booking(db, user, booking_data)
    _invalidate_after_change(db, booking)
    return booking


@router.get("/user/bookings", response_model=list[BookingResponse])
async def list_user_bookings(
    include_cancelled: bool = Query(False),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Bookings of the authenticated user, newest first."""
    cache_key = user_bookings_key(user.id, include_cancelled)
    cached = await get_cached(cache_key)
    if cached is not None:
        return cached

    bookings = await booking_service.get_user_bookings(db, user.id, include_cancelled)
    data = [BookingResponse.model_validate(b).model_dump(mode="json") for b in bookings]
    await set_cached(cache_key, data, settings.BOOKINGS_CACHE_TTL)
    return data


@router.get("/{booking_id}", response_model=BookingDetailResponse)
async def get_booking(
    booking_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Booking with its seats and latest payment. Owner or admin only."""
    return await booking_service.get_booking(db, booking_id, user)


@router.patch("/{booking_id}/cancel", response_model=BookingStatusResponse)
async def cancel_booking_endpoint(
    booking_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Cancel a booking and release its seats back to the event."""
    booking = await booking_service.cancel_booking(db, booking_id, user)
    _invalidate_after_change(db, booking)
    return BookingStatusResponse(
        message="Booking cancelled successfully",
        booking_id=booking.id,
        status=booking.status,
    )


@router.patch("/{booking_id}/confirm", response_model=BookingStatusResponse)
async def confirm_booking_endpoint(
    booking_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    booking = await booking_service.confirm_booking(db, booking_id, user)
    invalidate_user_bookings(db, booking.user_id)
    return BookingStatusResponse(
        message="Booking confirmed successfully",
        booking_id=booking.id,
        status=booking.status,
    )
