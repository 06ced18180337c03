"""
Seat layout management for events.

The event row keeps denormalized `total_seats` / `available_seats`
counters; every layout change here rewrites both from the seat rows in
the same transaction and bumps the event version.
"""

import math

from sqlalchemy import select, func, delete, update, insert
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException, status

from event_booking.models.booking import BookedSeat
from event_booking.models.event import Event
from event_booking.models.seat import Seat
from event_booking.models.user import User
from event_booking.schemas.seat import SeatCreate
from event_booking.services.access import ensure_owner_or_admin
from event_booking.services.event_service import get_event
from event_booking.core.logging import get_logger

logger = get_logger(__name__)

SEATS_PER_ROW = 10


def generate_default_layout(total_seats: int) -> list[SeatCreate]:
    """
    Rows of ten seats lettered A, B, C...: A1..A10, B1..B10, ...
    The last row holds whatever remains.
    """
    rows = math.ceil(total_seats / SEATS_PER_ROW)
    layout = []
    for row in range(rows):
        label = _row_label(row)
        if row == rows - 1:
            seats_in_row = total_seats % SEATS_PER_ROW or SEATS_PER_ROW
        else:
            seats_in_row = SEATS_PER_ROW
        for number in range(1, seats_in_row + 1):
            layout.append(SeatCreate(seat_number=f"{label}{number}"))
    return layout


def _row_label(index: int) -> str:
    # A..Z, then AA, AB, ...
    label = ""
    index += 1
    while index:
        index, remainder = divmod(index - 1, 26)
        label = chr(65 + remainder) + label
    return label


async def list_event_seats(db: AsyncSession, event_id: int) -> list[Seat]:
    await get_event(db, event_id)
    result = await db.execute(
        select(Seat).where(Seat.event_id == event_id).order_by(Seat.id)
    )
    return list(result.scalars().all())


async def _sync_event_counters(db: AsyncSession, event_id: int) -> None:
    total = (
        await db.execute(select(func.count(Seat.id)).where(Seat.event_id == event_id))
    ).scalar()
    available = (
        await db.execute(
            select(func.count(Seat.id)).where(Seat.event_id == event_id, Seat.is_booked.is_(False))
        )
    ).scalar()
    await db.execute(
        update(Event)
        .where(Event.id == event_id)
        .values(total_seats=total, available_seats=available, version=Event.version + 1)
    )


def _seat_rows(event_id: int, seats: list[SeatCreate]) -> list[dict]:
    return [
        {
            "event_id": event_id,
            "seat_number": seat.seat_number,
            "seat_type": seat.seat_type,
            "price_multiplier": seat.price_multiplier,
            "is_booked": False,
        }
        for seat in seats
    ]


async def replace_seat_layout(
    db: AsyncSession, event_id: int, seats: list[SeatCreate], user: User
) -> list[Seat]:
    """Replace the whole layout. Refused once any seat has ever been booked."""
    event = await get_event(db, event_id, for_update=True)
    ensure_owner_or_admin(user, event.organizer_id, "modify this event")

    referenced = await db.execute(
        select(BookedSeat.id)
        .join(Seat, BookedSeat.seat_id == Seat.id)
        .where(Seat.event_id == event_id)
        .limit(1)
    )
    if referenced.first() is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Seat layout cannot be replaced once seats have been booked",
        )

    await db.execute(delete(Seat).where(Seat.event_id == event_id))
    await db.execute(insert(Seat), _seat_rows(event_id, seats))
    await _sync_event_counters(db, event_id)

    logger.info("seat_layout_replaced", event_id=event_id, seats=len(seats))
    return await list_event_seats(db, event_id)


async def generate_seat_layout(db: AsyncSession, event_id: int, user: User) -> list[Seat]:
    event = await get_event(db, event_id)
    if event.total_seats <= 0:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Event has no seat capacity to lay out",
        )
    return await replace_seat_layout(db, event_id, generate_default_layout(event.total_seats), user)


async def append_seats(
    db: AsyncSession, event_id: int, seats: list[SeatCreate], user: User
) -> list[Seat]:
    """Add seats to an existing layout; seat numbers must not collide."""
    event = await get_event(db, event_id, for_update=True)
    ensure_owner_or_admin(user, event.organizer_id, "modify this event")

    numbers = [seat.seat_number for seat in seats]
    existing = await db.execute(
        select(Seat.seat_number).where(Seat.event_id == event_id, Seat.seat_number.in_(numbers))
    )
    clashes = sorted(existing.scalars().all())
    if clashes:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Seat numbers already exist: {', '.join(clashes)}",
        )

    await db.execute(insert(Seat), _seat_rows(event_id, seats))
    await _sync_event_counters(db, event_id)

    logger.info("seats_added", event_id=event_id, seats=len(seats))
    return await list_event_seats(db, event_id)
