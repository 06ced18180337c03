"""
Response schemas for organizer and admin dashboards.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class BookingSummary(BaseModel):
    id: int
    event_id: int
    event_title: Optional[str] = None
    user_id: int
    user_name: str
    user_email: Optional[str] = None
    total_amount: float
    status: str
    created_at: datetime


class EventSummary(BaseModel):
    id: int
    title: str
    date: datetime
    location: str
    is_active: bool
    total_seats: int
    available_seats: int
    booking_count: int = 0


class CreatorStats(BaseModel):
    total_events: int
    total_bookings: int
    total_revenue: float


class CreatorDashboardResponse(BaseModel):
    stats: CreatorStats
    recent_events: list[EventSummary]


class EventStats(BaseModel):
    bookings: int
    revenue: float
    seats_booked: int
    available_seats: int


class EventStatsResponse(BaseModel):
    event_id: int
    title: str
    stats: EventStats
    recent_bookings: list[BookingSummary]


class AdminStats(BaseModel):
    users_count: int
    events_count: int
    bookings_count: int
    total_revenue: float


class AdminDashboardResponse(BaseModel):
    stats: AdminStats
    recent_bookings: list[BookingSummary]
    upcoming_events: list[EventSummary]


class EventStatusResponse(BaseModel):
    event_id: int
    is_active: bool
    message: str