"""
Pydantic schemas for booking-related request/response validation.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from event_booking.schemas.payment import PaymentResponse


class BookingCreate(BaseModel):
    event_id: int = Field(..., gt=0)
    seat_ids: list[int] = Field(..., min_length=1)
    total_amount: Optional[float] = Field(None, ge=0)


class BookedSeatResponse(BaseModel):
    seat_id: int
    seat_number: str
    seat_type: str
    price_paid: float

    model_config = {"from_attributes": True}


class BookingResponse(BaseModel):
    id: int
    user_id: int
    event_id: int
    total_amount: float
    status: str
    created_at: datetime
    seats: list[BookedSeatResponse] = Field(default_factory=list, validation_alias="booked_seats")

    model_config = {"from_attributes": True, "populate_by_name": True}


class BookingDetailResponse(BookingResponse):
    event_title: str
    event_date: datetime
    event_location: str
    payment: Optional[PaymentResponse] = None


class BookingStatusResponse(BaseModel):
    message: str
    booking_id: int
    status: str
