"""
Category service. Categories are soft-deleted so existing events keep their label.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException, status

from event_booking.models.category import Category
from event_booking.schemas.category import CategoryCreate, CategoryUpdate
from event_booking.core.logging import get_logger

logger = get_logger(__name__)


async def _name_taken(db: AsyncSession, name: str, exclude_id: int = None) -> bool:
    query = select(Category.id).where(Category.name == name)
    if exclude_id is not None:
        query = query.where(Category.id != exclude_id)
    return (await db.execute(query)).first() is not None


async def list_categories(db: AsyncSession) -> list[Category]:
    result = await db.execute(
        select(Category).where(Category.is_active.is_(True)).order_by(Category.name)
    )
    return list(result.scalars().all())


async def get_category(db: AsyncSession, category_id: int, active_only: bool = True) -> Category:
    category = await db.get(Category, category_id)
    if not category or (active_only and not category.is_active):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No category found with that ID",
        )
    return category


async def create_category(db: AsyncSession, data: CategoryCreate) -> Category:
    if await _name_taken(db, data.name):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Category with this name already exists",
        )

    category = Category(**data.model_dump())
    db.add(category)
    await db.flush()
    await db.refresh(category)

    logger.info("category_created", category_id=category.id, name=category.name)
    return category


async def update_category(db: AsyncSession, category_id: int, data: CategoryUpdate) -> Category:
    category = await get_category(db, category_id, active_only=False)

    updates = data.model_dump(exclude_unset=True)
    if not updates:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No fields to update",
        )

    if "name" in updates and updates["name"] is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Category name cannot be removed",
        )
    if updates.get("name") and await _name_taken(db, updates["name"], exclude_id=category_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Category with this name already exists",
        )

    for field, value in updates.items():
        setattr(category, field, value)
    await db.flush()
    await db.refresh(category)

    logger.info("category_updated", category_id=category.id, fields=sorted(updates))
    return category


async def delete_category(db: AsyncSession, category_id: int) -> None:
    category = await get_category(db, category_id, active_only=False)
    category.is_active = False
    await db.flush()
    logger.info("category_deleted", category_id=category_id)
