"""
Booking service with concurrency-safe seat reservation.

CONCURRENCY STRATEGY: Conditional Seat Claim
============================================

Problem:
  Two users select the same seat and submit at the same moment.
  Both see is_booked = FALSE, both insert a booking, the seat is sold twice.

Solution:
  Seats are claimed with one conditional statement:

    UPDATE seats SET is_booked = TRUE
    WHERE id IN (:seat_ids) AND is_booked = FALSE

  The database applies row locks while evaluating the WHERE clause, so
  of two racing transactions only one can flip a given row. If the
  number of rows changed is smaller than the number of seats requested,
  another booking got there first: we raise 409 and the request
  transaction rolls back, releasing any seats this request did claim.

  The event's denormalized `available_seats` is decremented with a
  guarded UPDATE (`available_seats >= :n`) and the version bumped; the
  CHECK constraint (available_seats >= 0) is the final safety net.

  Everything runs in the request-scoped transaction opened by `get_db`:
  claim seats -> adjust counters -> insert booking and booked seats ->
  commit, or roll back on any error.

Status machine:
  pending --(confirm | payment)--> confirmed
  pending | confirmed --(cancel)--> cancelled   (seats released)
"""

from decimal import Decimal, ROUND_HALF_UP

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from fastapi import HTTPException, status

from event_booking.models.booking import Booking, BookedSeat
from event_booking.models.event import Event
from event_booking.models.seat import Seat
from event_booking.models.user import User
from event_booking.schemas.booking import BookingCreate
from event_booking.services.access import ensure_owner_or_admin
from event_booking.services.event_service import get_event
from event_booking.core.config import get_settings
from event_booking.core.logging import get_logger
from event_booking.core.metrics import (
    booking_latency,
    record_booking_attempt,
    record_booking_transition,
)

logger = get_logger(__name__)
settings = get_settings()

CENT = Decimal("0.01")
AMOUNT_TOLERANCE = Decimal("0.01")


def seat_price(event_price, multiplier) -> Decimal:
    return (Decimal(str(event_price)) * Decimal(str(multiplier))).quantize(CENT, rounding=ROUND_HALF_UP)


async def load_booking(db: AsyncSession, booking_id: int, for_update: bool = False) -> Booking:
    """Load a booking with seats, event and payments eagerly (async sessions cannot lazy load)."""
    query = (
        select(Booking)
        .where(Booking.id == booking_id)
        .options(
            selectinload(Booking.booked_seats).selectinload(BookedSeat.seat),
            selectinload(Booking.event),
            selectinload(Booking.payments),
        )
        .execution_options(populate_existing=True)
    )
    if for_update:
        query = query.with_for_update(of=Booking)
    booking = (await db.execute(query)).scalar_one_or_none()
    if not booking:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No booking found with that ID",
        )
    return booking


async def create_booking(db: AsyncSession, user: User, booking_data: BookingCreate) -> Booking:
    with booking_latency.time():
        try:
            booking = await _create_booking(db, user, booking_data)
        except HTTPException as exc:
            record_booking_attempt("conflict" if exc.status_code == status.HTTP_409_CONFLICT else "error")
            raise
    record_booking_attempt("success")
    return booking


async def _create_booking(db: AsyncSession, user: User, booking_data: BookingCreate) -> Booking:
    seat_ids = list(dict.fromkeys(booking_data.seat_ids))
    if len(seat_ids) > settings.MAX_SEATS_PER_BOOKING:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"A booking can hold at most {settings.MAX_SEATS_PER_BOOKING} seats",
        )

    event = await get_event(db, booking_data.event_id)

    result = await db.execute(
        select(Seat).where(Seat.id.in_(seat_ids), Seat.event_id == event.id)
    )
    seats = list(result.scalars().all())
    if len(seats) != len(seat_ids):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Some selected seats do not belong to this event",
        )
    if any(seat.is_booked for seat in seats):
        logger.warning("booking_failed_seats_taken", event_id=event.id, seat_ids=seat_ids)
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Some selected seats are not available",
        )

    prices = {seat.id: seat_price(event.price, seat.price_multiplier) for seat in seats}
    total = sum(prices.values(), Decimal("0.00"))
    if booking_data.total_amount is not None:
        if abs(Decimal(str(booking_data.total_amount)) - total) > AMOUNT_TOLERANCE:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Total amount does not match seat prices (expected {total})",
            )

    # Claim seats: only rows still free are flipped
    claim = await db.execute(
        update(Seat)
        .where(Seat.id.in_(seat_ids), Seat.is_booked.is_(False))
        .values(is_booked=True)
    )
    if claim.rowcount != len(seat_ids):
        logger.info(
            "booking_conflict",
            event_id=event.id,
            requested=len(seat_ids),
            claimed=claim.rowcount,
        )
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Some selected seats were just booked by someone else",
        )

    counter = await db.execute(
        update(Event)
        .where(Event.id == event.id, Event.available_seats >= len(seat_ids))
        .values(
            available_seats=Event.available_seats - len(seat_ids),
            version=Event.version + 1,
        )
    )
    if counter.rowcount == 0:
        logger.error("seat_counter_out_of_sync", event_id=event.id)
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Not enough seats available",
        )

    booking = Booking(
        user_id=user.id,
        event_id=event.id,
        total_amount=total,
        status="pending",
        booked_seats=[BookedSeat(seat_id=seat_id, price_paid=prices[seat_id]) for seat_id in seat_ids],
    )
    db.add(booking)
    await db.flush()

    logger.info(
        "booking_created",
        booking_id=booking.id,
        user_id=user.id,
        event_id=event.id,
        seats=len(seat_ids),
        total_amount=str(total),
    )
    return await load_booking(db, booking.id)


async def get_booking(db: AsyncSession, booking_id: int, user: User) -> Booking:
    booking = await load_booking(db, booking_id)
    ensure_owner_or_admin(user, booking.user_id, "view this booking")
    return booking


async def get_user_bookings(
    db: AsyncSession, user_id: int, include_cancelled: bool = False
) -> list[Booking]:
    """A user's bookings, newest first."""
    query = (
        select(Booking)
        .where(Booking.user_id == user_id)
        .options(
            selectinload(Booking.booked_seats).selectinload(BookedSeat.seat),
            selectinload(Booking.event),
        )
        .order_by(Booking.created_at.desc(), Booking.id.desc())
    )
    if not include_cancelled:
        query = query.where(Booking.status != "cancelled")
    result = await db.execute(query)
    return list(result.scalars().all())


async def cancel_booking(db: AsyncSession, booking_id: int, user: User) -> Booking:
    """Cancel a booking and release its seats back to the event."""
    booking = await load_booking(db, booking_id, for_update=True)
    ensure_owner_or_admin(user, booking.user_id, "cancel this booking")

    if booking.status == "cancelled":
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Booking is already cancelled",
        )

    seat_ids = [booked.seat_id for booked in booking.booked_seats]
    released = 0
    if seat_ids:
        result = await db.execute(
            update(Seat)
            .where(Seat.id.in_(seat_ids), Seat.is_booked.is_(True))
            .values(is_booked=False)
        )
        released = result.rowcount
        await db.execute(
            update(Event)
            .where(Event.id == booking.event_id)
            .values(
                available_seats=Event.available_seats + released,
                version=Event.version + 1,
            )
        )

    booking.status = "cancelled"
    await db.flush()
    record_booking_transition("cancelled")

    logger.info(
        "booking_cancelled",
        booking_id=booking.id,
        user_id=booking.user_id,
        event_id=booking.event_id,
        seats_released=released,
    )
    return await load_booking(db, booking.id)


async def confirm_booking(db: AsyncSession, booking_id: int, user: User) -> Booking:
    booking = await load_booking(db, booking_id, for_update=True)
    ensure_owner_or_admin(user, booking.user_id, "confirm this booking")
    mark_confirmed(booking)
    await db.flush()

    logger.info("booking_confirmed", booking_id=booking.id, user_id=booking.user_id)
    return await load_booking(db, booking.id)


def mark_confirmed(booking: Booking) -> None:
    """pending -> confirmed; any other starting state is a 400."""
    if booking.status == "confirmed":
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Booking is already confirmed",
        )
    if booking.status == "cancelled":
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cancelled bookings cannot be confirmed",
        )
    booking.status = "confirmed"
    record_booking_transition("confirmed")
