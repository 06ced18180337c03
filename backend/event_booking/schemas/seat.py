"""
Pydantic schemas for seat layouts.
"""

from typing import Literal, Optional
from pydantic import BaseModel, Field, model_validator

from event_booking.models.seat import DEFAULT_PRICE_MULTIPLIERS

SeatType = Literal["regular", "vip", "premium"]


class SeatCreate(BaseModel):
    seat_number: str = Field(..., min_length=1, max_length=20)
    seat_type: SeatType = "regular"
    price_multiplier: Optional[float] = Field(None, gt=0, le=10)

    @model_validator(mode="after")
    def default_multiplier(self) -> "SeatCreate":
        if self.price_multiplier is None:
            self.price_multiplier = DEFAULT_PRICE_MULTIPLIERS[self.seat_type]
        return self


class SeatLayoutCreate(BaseModel):
    seats: list[SeatCreate] = Field(..., min_length=1, max_length=10000)

    @model_validator(mode="after")
    def unique_seat_numbers(self) -> "SeatLayoutCreate":
        numbers = [seat.seat_number for seat in self.seats]
        if len(numbers) != len(set(numbers)):
            raise ValueError("Seat numbers must be unique")
        return self


class SeatResponse(BaseModel):
    id: int
    event_id: int
    seat_number: str
    seat_type: str
    price_multiplier: float
    is_booked: bool

    model_config = {"from_attributes": True}


class SeatListResponse(BaseModel):
    results: int
    seats: list[SeatResponse]
