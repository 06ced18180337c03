"""
Booking model representing a user's reservation of seats for an event.

Key design decisions:
- Status moves pending -> confirmed, or to cancelled; rows are never deleted
- Each seat in a booking is a BookedSeat row carrying the price paid
- Cancelled bookings keep their BookedSeat rows as history; seat availability
  lives on Seat.is_booked
"""

from sqlalchemy import Column, Integer, String, ForeignKey, Numeric, CheckConstraint, UniqueConstraint
from sqlalchemy.orm import relationship

from event_booking.db.base import Base, TimestampMixin

BOOKING_STATUSES = ("pending", "confirmed", "cancelled")


class Booking(Base, TimestampMixin):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)
    total_amount = Column(Numeric(10, 2), nullable=False, default=0)
    status = Column(String(20), nullable=False, default="pending")

    user = relationship("User", back_populates="bookings")
    event = relationship("Event", back_populates="bookings")
    booked_seats = relationship("BookedSeat", back_populates="booking", cascade="all, delete-orphan")
    payments = relationship(
        "Payment", back_populates="booking", order_by="Payment.id.desc()"
    )

    __table_args__ = (
        CheckConstraint("total_amount >= 0", name="check_booking_total_non_negative"),
        CheckConstraint(
            "status IN ('pending', 'confirmed', 'cancelled')", name="check_booking_status"
        ),
    )

    # Read-only shortcuts for response serialization; need `event` / `payments` loaded.
    @property
    def event_title(self) -> str:
        return self.event.title

    @property
    def event_date(self):
        return self.event.date

    @property
    def event_location(self) -> str:
        return self.event.location

    @property
    def payment(self):
        return self.payments[0] if self.payments else None

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, user={self.user_id}, event={self.event_id}, status={self.status})>"


class BookedSeat(Base):
    __tablename__ = "booked_seats"

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True)
    seat_id = Column(Integer, ForeignKey("seats.id"), nullable=False, index=True)
    price_paid = Column(Numeric(10, 2), nullable=False)

    booking = relationship("Booking", back_populates="booked_seats")
    seat = relationship("Seat")

    __table_args__ = (
        UniqueConstraint("booking_id", "seat_id", name="uq_booking_seat"),
    )

    @property
    def seat_number(self) -> str:
        return self.seat.seat_number

    @property
    def seat_type(self) -> str:
        return self.seat.seat_type
