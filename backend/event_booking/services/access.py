"""
Ownership checks shared by services.
"""

from fastapi import HTTPException, status

from event_booking.models.user import User


def ensure_owner_or_admin(user: User, owner_id: int, action: str) -> None:
    """Raise 403 unless `user` owns the resource or is an admin."""
    if user.role != "admin" and owner_id != user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"You are not authorized to {action}",
        )
