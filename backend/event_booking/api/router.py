"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter

from event_booking.api.routes import (
    admin,
    auth,
    bookings,
    categories,
    creator,
    events,
    payments,
    wishlists,
)
from event_booking.core.config import get_settings

settings = get_settings()

api_router = APIRouter(prefix=settings.API_PREFIX)
api_router.include_router(auth.router)
api_router.include_router(categories.router)
api_router.include_router(events.router)
api_router.include_router(bookings.router)
api_router.include_router(payments.router)
api_router.include_router(wishlists.router)
api_router.include_router(creator.router)
api_router.include_router(admin.router)
