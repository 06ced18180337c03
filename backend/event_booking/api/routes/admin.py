"""
Administrative endpoints. Admin role only.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from event_booking.api.deps import require_roles
from event_booking.db.session import get_db
from event_booking.schemas.dashboard import (
    AdminDashboardResponse,
    BookingSummary,
    EventStatusResponse,
    EventSummary,
)
from event_booking.schemas.user import UserResponse, UserUpdate
from event_booking.services import admin_service
from event_booking.services.cache_service import invalidate_event_cache

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    dependencies=[Depends(require_roles("admin"))],
)


@router.get("/users", response_model=list[UserResponse])
async def list_users(db: AsyncSession = Depends(get_db)):
    return await admin_service.list_users(db)


@router.get("/users/{user_id}", response_model=UserResponse)
async def get_user(user_id: int, db: AsyncSession = Depends(get_db)):
    return await admin_service.get_user(db, user_id)


@router.patch("/users/{user_id}", response_model=UserResponse)
async def update_user(user_id: int, data: UserUpdate, db: AsyncSession = Depends(get_db)):
    return await admin_service.update_user(db, user_id, data)


@router.get("/events", response_model=list[EventSummary])
async def list_events(db: AsyncSession = Depends(get_db)):
    """Every event, active or not, with its booking count."""
    return await admin_service.list_events(db)


@router.patch("/events/{event_id}/toggle-status", response_model=EventStatusResponse)
async def toggle_event_status(event_id: int, db: AsyncSession = Depends(get_db)):
    event = await admin_service.toggle_event_status(db, event_id)
    invalidate_event_cache(db)
    state = "activated" if event.is_active else "deactivated"
    return EventStatusResponse(
        event_id=event.id,
        is_active=event.is_active,
        message=f"Event {state} successfully",
    )


@router.get("/events/{event_id}/bookings", response_model=list[BookingSummary])
async def event_bookings(event_id: int, db: AsyncSession = Depends(get_db)):
    return await admin_service.get_event_bookings(db, event_id)


@router.get("/bookings", response_model=list[BookingSummary])
async def list_bookings(db: AsyncSession = Depends(get_db)):
    return await admin_service.list_bookings(db)


@router.get("/dashboard", response_model=AdminDashboardResponse)
async def dashboard(db: AsyncSession = Depends(get_db)):
    return await admin_service.get_dashboard_stats(db)
