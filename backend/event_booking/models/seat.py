"""
Seat model: one bookable unit of an event's capacity.

`is_booked` is flipped with a conditional UPDATE
(`... WHERE is_booked = FALSE`), so two bookings can never claim
the same seat.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    ForeignKey,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from event_booking.db.base import Base, TimestampMixin

SEAT_TYPES = ("regular", "vip", "premium")

DEFAULT_PRICE_MULTIPLIERS = {
    "regular": 1.0,
    "vip": 1.5,
    "premium": 2.0,
}


class Seat(Base, TimestampMixin):
    __tablename__ = "seats"

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    seat_number = Column(String(20), nullable=False)
    seat_type = Column(String(20), nullable=False, default="regular")
    price_multiplier = Column(Numeric(4, 2), nullable=False, default=1)
    is_booked = Column(Boolean, nullable=False, default=False)

    event = relationship("Event", back_populates="seats")

    __table_args__ = (
        UniqueConstraint("event_id", "seat_number", name="uq_event_seat_number"),
        CheckConstraint("seat_type IN ('regular', 'vip', 'premium')", name="check_seat_type"),
        CheckConstraint("price_multiplier > 0", name="check_price_multiplier_positive"),
    )

    def __repr__(self) -> str:
        return f"<Seat(id={self.id}, event={self.event_id}, number={self.seat_number}, booked={self.is_booked})>"
