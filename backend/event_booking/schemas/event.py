"""
Pydantic schemas for event-related request/response validation.
"""

from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, Field

from event_booking.schemas.seat import SeatResponse

SortBy = Literal["date_asc", "date_desc", "price_asc", "price_desc"]


class EventCreate(BaseModel):
    title: str = Field(..., min_length=3, max_length=200)
    description: str = Field(..., min_length=10)
    short_description: Optional[str] = Field(None, max_length=500)
    date: datetime
    end_date: Optional[datetime] = None
    location: str = Field(..., min_length=1, max_length=255)
    venue_details: Optional[str] = Field(None, max_length=1000)
    total_seats: int = Field(..., gt=0, le=100000)
    price: float = Field(..., ge=0)
    category_id: Optional[int] = None
    image_url: Optional[str] = Field(None, max_length=500)


class EventUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=3, max_length=200)
    description: Optional[str] = Field(None, min_length=10)
    short_description: Optional[str] = Field(None, max_length=500)
    date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    location: Optional[str] = Field(None, min_length=1, max_length=255)
    venue_details: Optional[str] = Field(None, max_length=1000)
    price: Optional[float] = Field(None, ge=0)
    category_id: Optional[int] = None
    image_url: Optional[str] = Field(None, max_length=500)


class EventResponse(BaseModel):
    id: int
    title: str
    description: str
    short_description: Optional[str]
    date: datetime
    end_date: Optional[datetime]
    location: str
    venue_details: Optional[str]
    price: float
    total_seats: int
    available_seats: int
    image_url: Optional[str]
    is_active: bool
    category_id: Optional[int]
    organizer_id: int
    created_at: datetime

    model_config = {"from_attributes": True}


class EventImageCreate(BaseModel):
    image_url: str = Field(..., min_length=1, max_length=500)
    is_primary: bool = False


class EventImageResponse(BaseModel):
    id: int
    event_id: int
    image_url: str
    is_primary: bool
    display_order: int

    model_config = {"from_attributes": True}


class EventDetailResponse(EventResponse):
    images: list[EventImageResponse] = []
    seats: list[SeatResponse] = []


class EventListResponse(BaseModel):
    events: list[EventResponse]
    total: int
    page: int
    limit: int
    has_more: bool
    cached: bool = False
