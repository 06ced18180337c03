"""
Payment capture. A captured payment confirms its booking in the same transaction.
"""

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException, status

from event_booking.models.payment import Payment
from event_booking.models.user import User
from event_booking.schemas.payment import PaymentCreate
from event_booking.services.access import ensure_owner_or_admin
from event_booking.services.booking_service import load_booking, mark_confirmed
from event_booking.core.config import get_settings
from event_booking.core.logging import get_logger
from event_booking.core.metrics import record_payment

logger = get_logger(__name__)
settings = get_settings()


def generate_transaction_id() -> str:
    return f"TXN-{uuid.uuid4().hex[:16].upper()}"


async def create_payment(db: AsyncSession, user: User, data: PaymentCreate) -> Payment:
    booking = await load_booking(db, data.booking_id, for_update=True)
    ensure_owner_or_admin(user, booking.user_id, "pay for this booking")

    transaction_id = data.transaction_id or generate_transaction_id()
    existing = await db.execute(select(Payment.id).where(Payment.transaction_id == transaction_id))
    if existing.first() is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Transaction has already been recorded",
        )

    mark_confirmed(booking)

    payment = Payment(
        booking=booking,
        amount=booking.total_amount,
        payment_method=data.payment_method,
        transaction_id=transaction_id,
        payment_status="captured",
        currency=settings.DEFAULT_CURRENCY,
    )
    db.add(payment)
    await db.flush()
    await db.refresh(payment, attribute_names=["created_at"])
    record_payment(payment.currency)

    logger.info(
        "payment_captured",
        payment_id=payment.id,
        booking_id=booking.id,
        amount=str(payment.amount),
        currency=payment.currency,
    )
    return payment


async def list_booking_payments(db: AsyncSession, booking_id: int, user: User) -> list[Payment]:
    booking = await load_booking(db, booking_id)
    ensure_owner_or_admin(user, booking.user_id, "view payments for this booking")
    result = await db.execute(
        select(Payment).where(Payment.booking_id == booking_id).order_by(Payment.id.desc())
    )
    return list(result.scalars().all())
