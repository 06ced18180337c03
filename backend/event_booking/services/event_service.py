"""
Event service handling CRUD operations, listing filters and event images.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select, func, or_, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from fastapi import HTTPException, status

from event_booking.models.category import Category
from event_booking.models.event import Event, EventImage
from event_booking.models.seat import Seat
from event_booking.models.user import User
from event_booking.schemas.event import EventCreate, EventUpdate, EventImageCreate
from event_booking.services.access import ensure_owner_or_admin
from event_booking.core.logging import get_logger

logger = get_logger(__name__)

_SORT_ORDERS = {
    "date_asc": (Event.date.asc(), Event.id.asc()),
    "date_desc": (Event.date.desc(), Event.id.desc()),
    "price_asc": (Event.price.asc(), Event.date.asc()),
    "price_desc": (Event.price.desc(), Event.date.asc()),
}


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so they compare with aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _ensure_future(value: datetime) -> None:
    if as_utc(value) <= datetime.now(timezone.utc):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Event date must be in the future",
        )


async def _ensure_category_exists(db: AsyncSession, category_id: Optional[int]) -> None:
    if category_id is None:
        return
    category = await db.get(Category, category_id)
    if not category or not category.is_active:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No category found with that ID",
        )


async def create_event(db: AsyncSession, event_data: EventCreate, organizer: User) -> Event:
    """Create a new event with full seat availability."""
    _ensure_future(event_data.date)
    if event_data.end_date and as_utc(event_data.end_date) < as_utc(event_data.date):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Event end date must not be before its start date",
        )
    await _ensure_category_exists(db, event_data.category_id)

    event = Event(
        **event_data.model_dump(),
        available_seats=event_data.total_seats,
        organizer_id=organizer.id,
    )
    db.add(event)
    await db.flush()
    await db.refresh(event)

    logger.info("event_created", event_id=event.id, title=event.title, seats=event.total_seats)
    return event


async def get_event(
    db: AsyncSession,
    event_id: int,
    active_only: bool = True,
    for_update: bool = False,
) -> Event:
    """Get a single event by ID."""
    query = select(Event).where(Event.id == event_id)
    if for_update:
        query = query.with_for_update()
    result = await db.execute(query)
    event = result.scalar_one_or_none()

    if not event or (active_only and not event.is_active):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Event {event_id} not found",
        )
    return event


async def get_event_details(db: AsyncSession, event_id: int) -> tuple[Event, list[Seat]]:
    """Event with its images plus the seats that can still be booked."""
    result = await db.execute(
        select(Event)
        .where(Event.id == event_id, Event.is_active.is_(True))
        .options(selectinload(Event.images))
    )
    event = result.scalar_one_or_none()
    if not event:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Event {event_id} not found",
        )

    seats = await db.execute(
        select(Seat)
        .where(Seat.event_id == event_id, Seat.is_booked.is_(False))
        .order_by(Seat.id)
    )
    return event, list(seats.scalars().all())


async def list_events(
    db: AsyncSession,
    page: int = 1,
    limit: int = 10,
    category: Optional[str] = None,
    category_id: Optional[int] = None,
    search: Optional[str] = None,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    sort_by: str = "date_asc",
) -> tuple[list[Event], int]:
    """List active events with filters and pagination."""
    query = select(Event).where(Event.is_active.is_(True))

    if category:
        query = query.join(Category, Event.category_id == Category.id).where(Category.name == category)
    if category_id is not None:
        query = query.where(Event.category_id == category_id)
    if search:
        pattern = f"%{search}%"
        query = query.where(
            or_(
                Event.title.ilike(pattern),
                Event.description.ilike(pattern),
                Event.location.ilike(pattern),
            )
        )
    if date_from:
        query = query.where(Event.date >= date_from)
    if date_to:
        query = query.where(Event.date <= date_to)
    if min_price is not None:
        query = query.where(Event.price >= min_price)
    if max_price is not None:
        query = query.where(Event.price <= max_price)

    count_query = select(func.count()).select_from(query.subquery())
    total = (await db.execute(count_query)).scalar()

    events_query = (
        query
        .order_by(*_SORT_ORDERS.get(sort_by, _SORT_ORDERS["date_asc"]))
        .offset((page - 1) * limit)
        .limit(limit)
    )
    result = await db.execute(events_query)
    return list(result.scalars().all()), total


async def update_event(db: AsyncSession, event_id: int, data: EventUpdate, user: User) -> Event:
    event = await get_event(db, event_id, active_only=False)
    ensure_owner_or_admin(user, event.organizer_id, "update this event")

    updates = data.model_dump(exclude_unset=True)
    if "date" in updates:
        if updates["date"] is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Event date cannot be removed",
            )
        _ensure_future(updates["date"])
    if "category_id" in updates:
        await _ensure_category_exists(db, updates["category_id"])
    for field in ("title", "description", "location", "price"):
        if field in updates and updates[field] is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Event {field} cannot be removed",
            )

    for field, value in updates.items():
        setattr(event, field, value)
    await db.flush()
    await db.refresh(event)

    logger.info("event_updated", event_id=event.id, fields=sorted(updates))
    return event


async def delete_event(db: AsyncSession, event_id: int, user: User) -> None:
    """Soft delete: the event disappears from listings, bookings keep their history."""
    event = await get_event(db, event_id)
    ensure_owner_or_admin(user, event.organizer_id, "delete this event")

    event.is_active = False
    await db.flush()
    logger.info("event_deleted", event_id=event_id, by_user=user.id)


async def add_event_image(
    db: AsyncSession, event_id: int, data: EventImageCreate, user: User
) -> EventImage:
    event = await get_event(db, event_id)
    ensure_owner_or_admin(user, event.organizer_id, "add images to this event")

    if data.is_primary:
        await db.execute(
            update(EventImage)
            .where(EventImage.event_id == event_id)
            .values(is_primary=False)
        )

    next_order = (
        await db.execute(select(func.count(EventImage.id)).where(EventImage.event_id == event_id))
    ).scalar()
    image = EventImage(
        event_id=event_id,
        image_url=data.image_url,
        is_primary=data.is_primary,
        display_order=next_order,
    )
    db.add(image)
    await db.flush()
    await db.refresh(image)

    logger.info("event_image_added", event_id=event_id, image_id=image.id)
    return image
