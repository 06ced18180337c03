"""
Wishlist endpoints for the authenticated user.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from event_booking.api.deps import get_current_user
from event_booking.db.session import get_db
from event_booking.models.user import User
from event_booking.schemas.user import MessageResponse
from event_booking.schemas.wishlist import WishlistItemResponse
from event_booking.services import wishlist_service

router = APIRouter(prefix="/wishlists", tags=["Wishlists"])


@router.get("/user", response_model=list[WishlistItemResponse])
async def get_user_wishlist(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await wishlist_service.get_user_wishlist(db, user.id)


@router.post("/{event_id}", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def add_to_wishlist(
    event_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await wishlist_service.add_to_wishlist(db, user.id, event_id)
    return MessageResponse(message="Added to wishlist")


@router.delete("/{event_id}", response_model=MessageResponse)
async def remove_from_wishlist(
    event_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await wishlist_service.remove_from_wishlist(db, user.id, event_id)
    return MessageResponse(message="Removed from wishlist")
