"""
Payment endpoints. Capturing a payment confirms the booking.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from event_booking.api.deps import get_current_user
from event_booking.db.session import get_db
from event_booking.models.user import User
from event_booking.schemas.payment import PaymentCreate, PaymentResponse
from event_booking.services import payment_service
from event_booking.services.cache_service import invalidate_user_bookings

router = APIRouter(prefix="/payments", tags=["Payments"])


@router.post("/", response_model=PaymentResponse, status_code=status.HTTP_201_CREATED)
async def create_payment(
    payment_data: PaymentCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    payment = await payment_service.create_payment(db, user, payment_data)
    invalidate_user_bookings(db, payment.booking.user_id)
    return payment


@router.get("/booking/{booking_id}", response_model=list[PaymentResponse])
async def list_booking_payments(
    booking_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await payment_service.list_booking_payments(db, booking_id, user)
