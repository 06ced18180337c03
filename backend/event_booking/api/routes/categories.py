"""
Category endpoints. Reads are public and cached; writes are admin only.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from event_booking.api.deps import require_roles
from event_booking.core.config import get_settings
from event_booking.db.session import get_db
from event_booking.schemas.category import CategoryCreate, CategoryUpdate, CategoryResponse
from event_booking.schemas.user import MessageResponse
from event_booking.services import category_service
from event_booking.services.cache_service import (
    category_list_key,
    get_cached,
    set_cached,
    invalidate_category_cache,
)

settings = get_settings()
router = APIRouter(prefix="/categories", tags=["Categories"])
admin_only = require_roles("admin")


@router.get("/", response_model=list[CategoryResponse])
async def list_categories(db: AsyncSession = Depends(get_db)):
    cached = await get_cached(category_list_key())
    if cached is not None:
        return cached

    categories = await category_service.list_categories(db)
    data = [CategoryResponse.model_validate(c).model_dump(mode="json") for c in categories]
    await set_cached(category_list_key(), data, settings.CATEGORIES_CACHE_TTL)
    return data


@router.get("/{category_id}", response_model=CategoryResponse)
async def get_category(category_id: int, db: AsyncSession = Depends(get_db)):
    return await category_service.get_category(db, category_id)


@router.post(
    "/",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(admin_only)],
)
async def create_category(data: CategoryCreate, db: AsyncSession = Depends(get_db)):
    category = await category_service.create_category(db, data)
    invalidate_category_cache(db)
    return category


@router.patch("/{category_id}", response_model=CategoryResponse, dependencies=[Depends(admin_only)])
async def update_category(category_id: int, data: CategoryUpdate, db: AsyncSession = Depends(get_db)):
    category = await category_service.update_category(db, category_id, data)
    invalidate_category_cache(db)
    return category


@router.delete("/{category_id}", response_model=MessageResponse, dependencies=[Depends(admin_only)])
async def delete_category(category_id: int, db: AsyncSession = Depends(get_db)):
    await category_service.delete_category(db, category_id)
    invalidate_category_cache(db)
    return MessageResponse(message="Category deleted successfully")
