"""
Administrative views and actions across all users, events and bookings.
"""

from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException, status

from event_booking.models.booking import Booking
from event_booking.models.event import Event
from event_booking.models.user import User
from event_booking.schemas.user import UserUpdate
from event_booking.services import reporting
from event_booking.core.logging import get_logger

logger = get_logger(__name__)


async def list_users(db: AsyncSession) -> list[User]:
    result = await db.execute(select(User).order_by(User.id))
    return list(result.scalars().all())


async def get_user(db: AsyncSession, user_id: int) -> User:
    user = await db.get(User, user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No user found with that ID",
        )
    return user


async def update_user(db: AsyncSession, user_id: int, data: UserUpdate) -> User:
    user = await get_user(db, user_id)
    updates = data.model_dump(exclude_unset=True, exclude_none=True)

    if "email" in updates:
        updates["email"] = updates["email"].lower()
        taken = await db.execute(
            select(User.id).where(User.email == updates["email"], User.id != user_id)
        )
        if taken.first() is not None:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Email already registered",
            )

    for field, value in updates.items():
        setattr(user, field, value)
    await db.flush()
    await db.refresh(user)

    logger.info("user_updated", user_id=user_id, fields=sorted(updates))
    return user


async def list_events(db: AsyncSession) -> list[dict]:
    return await reporting.event_summaries(
        db, order_by=(Event.created_at.desc(), Event.id.desc()), confirmed_only=False
    )


async def toggle_event_status(db: AsyncSession, event_id: int) -> Event:
    event = await db.get(Event, event_id)
    if not event:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No event found with that ID",
        )
    event.is_active = not event.is_active
    await db.flush()
    logger.info("event_status_toggled", event_id=event_id, is_active=event.is_active)
    return event


async def list_bookings(db: AsyncSession) -> list[dict]:
    return await reporting.booking_summaries(db)


async def get_event_bookings(db: AsyncSession, event_id: int) -> list[dict]:
    if await db.get(Event, event_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No event found with that ID",
        )
    return await reporting.booking_summaries(db, Booking.event_id == event_id)


async def get_dashboard_stats(db: AsyncSession) -> dict:
    users_count = (
        await db.execute(select(func.count(User.id)).where(User.role == "user"))
    ).scalar()
    events_count = (await db.execute(select(func.count(Event.id)))).scalar()
    bookings_count = (await db.execute(select(func.count(Booking.id)))).scalar()
    revenue = await reporting.captured_revenue(db)

    recent_bookings = await reporting.booking_summaries(db, limit=5)
    upcoming_events = await reporting.event_summaries(
        db,
        Event.date >= datetime.now(timezone.utc),
        order_by=(Event.date.asc(),),
        limit=5,
    )
    return {
        "stats": {
            "users_count": users_count,
            "events_count": events_count,
            "bookings_count": bookings_count,
            "total_revenue": revenue,
        },
        "recent_bookings": recent_bookings,
        "upcoming_events": upcoming_events,
    }
