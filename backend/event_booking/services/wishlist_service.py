from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException, status

from event_booking.models.event import Event
from event_booking.models.wishlist import Wishlist
from event_booking.services.event_service import get_event
from event_booking.core.logging import get_logger

logger = get_logger(__name__)


async def get_user_wishlist(db: AsyncSession, user_id: int) -> list[dict]:
    result = await db.execute(
        select(Wishlist, Event)
        .join(Event, Wishlist.event_id == Event.id)
        .where(Wishlist.user_id == user_id)
        .order_by(Wishlist.created_at.desc(), Wishlist.id.desc())
    )
    return [
        {
            "id": item.id,
            "event_id": event.id,
            "title": event.title,
            "date": event.date,
            "location": event.location,
            "price": event.price,
            "image_url": event.image_url,
            "created_at": item.created_at,
        }
        for item, event in result.all()
    ]


async def add_to_wishlist(db: AsyncSession, user_id: int, event_id: int) -> Wishlist:
    # inactive events 404 like every other public lookup
    await get_event(db, event_id)

    existing = await db.execute(
        select(Wishlist.id).where(Wishlist.user_id == user_id, Wishlist.event_id == event_id)
    )
    if existing.first() is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Event already in wishlist",
        )

    item = Wishlist(user_id=user_id, event_id=event_id)
    db.add(item)
    await db.flush()
    logger.info("wishlist_added", user_id=user_id, event_id=event_id)
    return item


async def remove_from_wishlist(db: AsyncSession, user_id: int, event_id: int) -> None:
    result = await db.execute(
        delete(Wishlist).where(Wishlist.user_id == user_id, Wishlist.event_id == event_id)
    )
    if result.rowcount == 0:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Event not found in wishlist",
        )
    logger.info("wishlist_removed", user_id=user_id, event_id=event_id)
