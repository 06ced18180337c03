"""
Event endpoints with Redis caching on list operations.
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from event_booking.api.deps import require_roles
from event_booking.db.session import get_db
from event_booking.models.user import User
from event_booking.schemas.event import (
    EventCreate,
    EventDetailResponse,
    EventImageCreate,
    EventImageResponse,
    EventListResponse,
    EventResponse,
    EventUpdate,
    SortBy,
)
from event_booking.schemas.seat import SeatLayoutCreate, SeatListResponse, SeatResponse
from event_booking.services import event_service, seat_service
from event_booking.services.cache_service import (
    event_list_key,
    get_cached,
    set_cached,
    invalidate_event_cache,
)
from event_booking.core.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/events", tags=["Events"])
organizer_or_admin = require_roles("organizer", "admin")


def _seat_list(seats) -> SeatListResponse:
    return SeatListResponse(
        results=len(seats),
        seats=[SeatResponse.model_validate(s) for s in seats],
    )


@router.post("/", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event_endpoint(
    event_data: EventCreate,
    user: User = Depends(organizer_or_admin),
    db: AsyncSession = Depends(get_db),
):
    """Create a new event. Requires the organizer or admin role."""
    event = await event_service.create_event(db, event_data, user)
    invalidate_event_cache(db)
    return event


@router.get("/", response_model=EventListResponse)
async def list_events_endpoint(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    category: Optional[str] = Query(None, description="Category name"),
    category_id: Optional[int] = Query(None, ge=1),
    search: Optional[str] = Query(None, max_length=100),
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    min_price: Optional[float] = Query(None, ge=0),
    max_price: Optional[float] = Query(None, ge=0),
    sort_by: SortBy = "date_asc",
    db: AsyncSession = Depends(get_db),
):
    """
    List active events with filters and pagination.
    Results are cached in Redis; any event or booking change invalidates them.
    """
    filters = {
        "category": category,
        "category_id": category_id,
        "search": search,
        "date_from": date_from,
        "date_to": date_to,
        "min_price": min_price,
        "max_price": max_price,
        "sort_by": sort_by,
    }
    cache_key = event_list_key({**filters, "page": page, "limit": limit})

    cached = await get_cached(cache_key)
    if cached:
        logger.info("events_list_cache_hit", page=page)
        cached["cached"] = True
        return EventListResponse(**cached)

    events, total = await event_service.list_events(db, page=page, limit=limit, **filters)

    response_data = {
        "events": [EventResponse.model_validate(e).model_dump(mode="json") for e in events],
        "total": total,
        "page": page,
        "limit": limit,
        "has_more": page * limit < total,
        "cached": False,
    }
    await set_cached(cache_key, response_data)

    return EventListResponse(**response_data)


@router.get("/{event_id}", response_model=EventDetailResponse)
async def get_event_endpoint(event_id: int, db: AsyncSession = Depends(get_db)):
    """Event with images and currently available seats. Not cached (real-time seat state)."""
    event, available = await event_service.get_event_details(db, event_id)
    return EventDetailResponse(
        **EventResponse.model_validate(event).model_dump(),
        images=[EventImageResponse.model_validate(i) for i in event.images],
        seats=[SeatResponse.model_validate(s) for s in available],
    )


@router.patch("/{event_id}", response_model=EventResponse)
async def update_event_endpoint(
    event_id: int,
    event_data: EventUpdate,
    user: User = Depends(organizer_or_admin),
    db: AsyncSession = Depends(get_db),
):
    event = await event_service.update_event(db, event_id, event_data, user)
    invalidate_event_cache(db)
    return event


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event_endpoint(
    event_id: int,
    user: User = Depends(organizer_or_admin),
    db: AsyncSession = Depends(get_db),
):
    await event_service.delete_event(db, event_id, user)
    invalidate_event_cache(db)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{event_id}/seats", response_model=SeatListResponse)
async def list_event_seats_endpoint(event_id: int, db: AsyncSession = Depends(get_db)):
    """Full seat map, booked seats included."""
    seats = await seat_service.list_event_seats(db, event_id)
    return _seat_list(seats)


@router.post("/{event_id}/seats", response_model=SeatListResponse, status_code=status.HTTP_201_CREATED)
async def set_seat_layout_endpoint(
    event_id: int,
    layout: SeatLayoutCreate,
    user: User = Depends(organizer_or_admin),
    db: AsyncSession = Depends(get_db),
):
    """Replace the event's seat layout."""
    seats = await seat_service.replace_seat_layout(db, event_id, layout.seats, user)
    invalidate_event_cache(db)
    return _seat_list(seats)


@router.post(
    "/{event_id}/seats/generate",
    response_model=SeatListResponse,
    status_code=status.HTTP_201_CREATED,
)
async def generate_seat_layout_endpoint(
    event_id: int,
    user: User = Depends(organizer_or_admin),
    db: AsyncSession = Depends(get_db),
):
    """Build a default layout of regular seats in rows of ten."""
    seats = await seat_service.generate_seat_layout(db, event_id, user)
    invalidate_event_cache(db)
    return _seat_list(seats)


@router.post(
    "/{event_id}/images",
    response_model=EventImageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_event_image_endpoint(
    event_id: int,
    image: EventImageCreate,
    user: User = Depends(organizer_or_admin),
    db: AsyncSession = Depends(get_db),
):
    return await event_service.add_event_image(db, event_id, image, user)
