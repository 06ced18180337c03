"""
Organizer dashboard endpoints. Every route requires the organizer role and
only ever exposes events the caller owns.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from event_booking.api.deps import require_roles
from event_booking.db.session import get_db
from event_booking.models.user import User
from event_booking.schemas.dashboard import (
    BookingSummary,
    CreatorDashboardResponse,
    EventStatsResponse,
)
from event_booking.schemas.event import EventDetailResponse, EventImageResponse, EventResponse
from event_booking.schemas.seat import SeatLayoutCreate, SeatListResponse, SeatResponse
from event_booking.schemas.user import MessageResponse
from event_booking.services import creator_service, seat_service
from event_booking.services.cache_service import invalidate_event_cache

router = APIRouter(prefix="/creator", tags=["Creator"])
organizer = require_roles("organizer")


class CreatorEventDetail(EventDetailResponse):
    bookings: list[BookingSummary] = []


@router.get("/stats", response_model=CreatorDashboardResponse)
async def dashboard_stats(user: User = Depends(organizer), db: AsyncSession = Depends(get_db)):
    return await creator_service.get_dashboard_stats(db, user)


@router.get("/events", response_model=list[EventResponse])
async def my_events(user: User = Depends(organizer), db: AsyncSession = Depends(get_db)):
    return await creator_service.get_my_events(db, user)


@router.get("/events/{event_id}", response_model=CreatorEventDetail)
async def event_details(event_id: int, user: User = Depends(organizer), db: AsyncSession = Depends(get_db)):
    """Owned event with images, the full seat map and every booking."""
    event, bookings = await creator_service.get_event_details(db, user, event_id)
    return CreatorEventDetail(
        **EventResponse.model_validate(event).model_dump(),
        images=[EventImageResponse.model_validate(i) for i in event.images],
        seats=[SeatResponse.model_validate(s) for s in event.seats],
        bookings=bookings,
    )


@router.get("/events/{event_id}/bookings", response_model=list[BookingSummary])
async def event_bookings(event_id: int, user: User = Depends(organizer), db: AsyncSession = Depends(get_db)):
    return await creator_service.get_event_bookings(db, user, event_id)


@router.get("/events/{event_id}/stats", response_model=EventStatsResponse)
@router.get("/events/{event_id}/insights", response_model=EventStatsResponse)
async def event_stats(event_id: int, user: User = Depends(organizer), db: AsyncSession = Depends(get_db)):
    return await creator_service.get_event_stats(db, user, event_id)


@router.post(
    "/events/{event_id}/seats",
    response_model=SeatListResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_seats(
    event_id: int,
    layout: SeatLayoutCreate,
    user: User = Depends(organizer),
    db: AsyncSession = Depends(get_db),
):
    """Append seats to the event's existing layout."""
    await creator_service.get_owned_event(db, user, event_id)
    seats = await seat_service.append_seats(db, event_id, layout.seats, user)
    invalidate_event_cache(db)
    return SeatListResponse(results=len(seats), seats=[SeatResponse.model_validate(s) for s in seats])


@router.delete("/events/{event_id}", response_model=MessageResponse)
async def delete_event(event_id: int, user: User = Depends(organizer), db: AsyncSession = Depends(get_db)):
    await creator_service.delete_event(db, user, event_id)
    invalidate_event_cache(db)
    return MessageResponse(message="Event deleted successfully")
