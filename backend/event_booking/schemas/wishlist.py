from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class WishlistItemResponse(BaseModel):
    id: int
    event_id: int
    title: str
    date: datetime
    location: str
    price: float
    image_url: Optional[str]
    created_at: datetime
