from event_booking.models.user import User
from event_booking.models.category import Category
from event_booking.models.event import Event, EventImage
from event_booking.models.seat import Seat
from event_booking.models.booking import Booking, BookedSeat
from event_booking.models.payment import Payment
from event_booking.models.wishlist import Wishlist

__all__ = [
    "User", "Category", "Event", "EventImage", "Seat",
    "Booking", "BookedSeat", "Payment", "Wishlist",
]
