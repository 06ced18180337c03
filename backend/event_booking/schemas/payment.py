from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class PaymentCreate(BaseModel):
    booking_id: int = Field(..., gt=0)
    payment_method: str = Field(..., min_length=2, max_length=50)
    transaction_id: Optional[str] = Field(None, min_length=4, max_length=100)


class PaymentResponse(BaseModel):
    id: int
    booking_id: int
    amount: float
    payment_method: str
    transaction_id: str
    payment_status: str
    currency: str
    created_at: datetime

    model_config = {"from_attributes": True}
