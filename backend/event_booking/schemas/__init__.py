from event_booking.schemas.user import UserCreate, UserResponse, UserLogin, UserUpdate, Token
from event_booking.schemas.category import CategoryCreate, CategoryUpdate, CategoryResponse
from event_booking.schemas.event import (
    EventCreate, EventUpdate, EventResponse, EventDetailResponse, EventListResponse,
)
from event_booking.schemas.seat import SeatCreate, SeatLayoutCreate, SeatResponse
from event_booking.schemas.booking import BookingCreate, BookingResponse, BookingDetailResponse
from event_booking.schemas.payment import PaymentCreate, PaymentResponse

__all__ = [
    "UserCreate", "UserResponse", "UserLogin", "UserUpdate", "Token",
    "CategoryCreate", "CategoryUpdate", "CategoryResponse",
    "EventCreate", "EventUpdate", "EventResponse", "EventDetailResponse", "EventListResponse",
    "SeatCreate", "SeatLayoutCreate", "SeatResponse",
    "BookingCreate", "BookingResponse", "BookingDetailResponse",
    "PaymentCreate", "PaymentResponse",
]
