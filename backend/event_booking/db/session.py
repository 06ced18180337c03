"""
Async engine and request-scoped session dependency.

Each request gets one session and therefore one transaction: it is
committed when the endpoint returns and rolled back if anything raises,
so a booking either lands completely or not at all.
"""

from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from event_booking.core.config import get_settings
from event_booking.services.cache_service import (
    discard_pending_invalidations,
    run_pending_invalidations,
)

settings = get_settings()


def _engine_options() -> dict:
    if settings.DATABASE_URL.startswith("sqlite"):
        return {"echo": settings.DEBUG}
    return {
        "echo": settings.DEBUG,
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_MAX_OVERFLOW,
        "pool_timeout": settings.DB_POOL_TIMEOUT,
        "pool_recycle": settings.DB_POOL_RECYCLE,
        "pool_pre_ping": True,
    }


engine = create_async_engine(settings.DATABASE_URL, **_engine_options())
SessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with SessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            discard_pending_invalidations(session)
            raise
        # only now can other connections see the change
        await run_pending_invalidations(session)
