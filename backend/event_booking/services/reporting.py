"""
Aggregate queries shared by the organizer and admin dashboards.
"""

from typing import Optional

from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from event_booking.models.booking import Booking
from event_booking.models.event import Event
from event_booking.models.payment import Payment
from event_booking.models.user import User


async def booking_summaries(
    db: AsyncSession,
    *criteria,
    limit: Optional[int] = None,
) -> list[dict]:
    """Bookings joined with their user and event, newest first."""
    query = (
        select(Booking, User.name, User.email, Event.title)
        .join(User, Booking.user_id == User.id)
        .join(Event, Booking.event_id == Event.id)
        .where(*criteria)
        .order_by(Booking.created_at.desc(), Booking.id.desc())
    )
    if limit:
        query = query.limit(limit)
    result = await db.execute(query)
    return [
        {
            "id": booking.id,
            "event_id": booking.event_id,
            "event_title": title,
            "user_id": booking.user_id,
            "user_name": name,
            "user_email": email,
            "total_amount": booking.total_amount,
            "status": booking.status,
            "created_at": booking.created_at,
        }
        for booking, name, email, title in result.all()
    ]


async def event_summaries(
    db: AsyncSession,
    *criteria,
    order_by=None,
    limit: Optional[int] = None,
    confirmed_only: bool = True,
) -> list[dict]:
    """Events with the number of bookings made against each."""
    join_on = Booking.event_id == Event.id
    if confirmed_only:
        join_on = and_(join_on, Booking.status == "confirmed")
    query = (
        select(Event, func.count(func.distinct(Booking.id)))
        .outerjoin(Booking, join_on)
        .where(*criteria)
        .group_by(Event.id)
        .order_by(*(order_by if order_by is not None else (Event.date.desc(),)))
    )
    if limit:
        query = query.limit(limit)
    result = await db.execute(query)
    return [
        {
            "id": event.id,
            "title": event.title,
            "date": event.date,
            "location": event.location,
            "is_active": event.is_active,
            "total_seats": event.total_seats,
            "available_seats": event.available_seats,
            "booking_count": count,
        }
        for event, count in result.all()
    ]


async def captured_revenue(db: AsyncSession, *criteria) -> float:
    query = (
        select(func.coalesce(func.sum(Payment.amount), 0))
        .select_from(Payment)
        .join(Booking, Payment.booking_id == Booking.id)
        .join(Event, Booking.event_id == Event.id)
        .where(Payment.payment_status == "captured", *criteria)
    )
    return float((await db.execute(query)).scalar() or 0)


async def count_bookings(db: AsyncSession, *criteria) -> int:
    query = (
        select(func.count(Booking.id))
        .select_from(Booking)
        .join(Event, Booking.event_id == Event.id)
        .where(*criteria)
    )
    return (await db.execute(query)).scalar() or 0
