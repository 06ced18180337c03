"""
Organizer-facing views over the events a user owns.
"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from fastapi import HTTPException, status

from event_booking.models.booking import Booking, BookedSeat
from event_booking.models.event import Event
from event_booking.models.user import User
from event_booking.services import reporting
from event_booking.core.logging import get_logger

logger = get_logger(__name__)


async def get_owned_event(db: AsyncSession, user: User, event_id: int, with_layout: bool = False) -> Event:
    query = select(Event).where(Event.id == event_id, Event.organizer_id == user.id)
    if with_layout:
        query = query.options(selectinload(Event.images), selectinload(Event.seats))
    event = (await db.execute(query)).scalar_one_or_none()
    if not event:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No event found with that ID",
        )
    return event


async def get_dashboard_stats(db: AsyncSession, user: User) -> dict:
    total_events = (
        await db.execute(select(func.count(Event.id)).where(Event.organizer_id == user.id))
    ).scalar()
    total_bookings = await reporting.count_bookings(
        db, Event.organizer_id == user.id, Booking.status == "confirmed"
    )
    revenue = await reporting.captured_revenue(db, Event.organizer_id == user.id)
    recent_events = await reporting.event_summaries(
        db, Event.organizer_id == user.id, limit=5
    )
    return {
        "stats": {
            "total_events": total_events,
            "total_bookings": total_bookings,
            "total_revenue": revenue,
        },
        "recent_events": recent_events,
    }


async def get_my_events(db: AsyncSession, user: User) -> list[Event]:
    result = await db.execute(
        select(Event)
        .where(Event.organizer_id == user.id, Event.is_active.is_(True))
        .order_by(Event.date.asc(), Event.id.asc())
    )
    return list(result.scalars().all())


async def get_event_details(db: AsyncSession, user: User, event_id: int) -> tuple[Event, list[dict]]:
    event = await get_owned_event(db, user, event_id, with_layout=True)
    bookings = await reporting.booking_summaries(db, Booking.event_id == event_id)
    return event, bookings


async def get_event_bookings(db: AsyncSession, user: User, event_id: int) -> list[dict]:
    await get_owned_event(db, user, event_id)
    return await reporting.booking_summaries(db, Booking.event_id == event_id)


async def get_event_stats(db: AsyncSession, user: User, event_id: int) -> dict:
    event = await get_owned_event(db, user, event_id)
    confirmed = (Booking.event_id == event_id, Booking.status == "confirmed")

    bookings = await reporting.count_bookings(db, *confirmed)
    revenue = await reporting.captured_revenue(db, Booking.event_id == event_id)
    seats_booked = (
        await db.execute(
            select(func.count(BookedSeat.id))
            .join(Booking, BookedSeat.booking_id == Booking.id)
            .where(*confirmed)
        )
    ).scalar()
    recent = await reporting.booking_summaries(db, *confirmed, limit=5)

    return {
        "event_id": event.id,
        "title": event.title,
        "stats": {
            "bookings": bookings,
            "revenue": revenue,
            "seats_booked": seats_booked,
            "available_seats": event.available_seats,
        },
        "recent_bookings": recent,
    }


async def delete_event(db: AsyncSession, user: User, event_id: int) -> None:
    event = await get_owned_event(db, user, event_id)
    confirmed = await reporting.count_bookings(
        db, Booking.event_id == event_id, Booking.status == "confirmed"
    )
    if confirmed > 0:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot delete event with confirmed bookings. Consider cancelling the event instead.",
        )
    event.is_active = False
    await db.flush()
    logger.info("event_deleted", event_id=event_id, by_user=user.id)
