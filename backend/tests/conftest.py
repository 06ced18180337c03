"""
Pytest fixtures for test database, client, and authentication.

Tables are created and dropped around every test. The API runs against
the same session the fixtures use, committed or rolled back per request
the way `get_db` does it. Redis is switched off so every read hits the
database.
"""

import os

TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite:///./test_event_booking.db")
os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ["REDIS_ENABLED"] = "false"

from datetime import datetime, timezone, timedelta
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import NullPool

from event_booking.main import app
from event_booking.db.base import Base
from event_booking.db.session import get_db
from event_booking.services.cache_service import discard_pending_invalidations, run_pending_invalidations
from event_booking.core.security import create_access_token, hash_password
from event_booking.models import Category, Event, Seat, User

PASSWORD = "Password123"

test_engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool)
TestSessionLocal = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create tables, yield session, then drop tables for isolation."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client that overrides the DB dependency with the test session."""

    async def override_get_db():
        try:
            yield db_session
            await db_session.commit()
        except Exception:
            await db_session.rollback()
            discard_pending_invalidations(db_session)
            raise
        await run_pending_invalidations(db_session)

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def _create_user(db: AsyncSession, name: str, email: str, role: str) -> User:
    user = User(name=name, email=email, role=role, hashed_password=hash_password(PASSWORD))
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


def _headers(user: User) -> dict:
    token = create_access_token(data={"sub": str(user.id), "role": user.role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def session_factory():
    """Opens sessions on their own connections, outside the request session."""
    return TestSessionLocal


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> User:
    return await _create_user(db_session, "Test User", "test@example.com", "user")


@pytest_asyncio.fixture
async def other_user(db_session: AsyncSession) -> User:
    return await _create_user(db_session, "Other User", "other@example.com", "user")


@pytest_asyncio.fixture
async def organizer(db_session: AsyncSession) -> User:
    return await _create_user(db_session, "Olivia Organizer", "organizer@example.com", "organizer")


@pytest_asyncio.fixture
async def admin(db_session: AsyncSession) -> User:
    return await _create_user(db_session, "Ada Admin", "admin@example.com", "admin")


@pytest_asyncio.fixture
async def auth_headers(test_user: User) -> dict:
    """Authorization headers with Bearer token."""
    return _headers(test_user)


@pytest_asyncio.fixture
async def other_headers(other_user: User) -> dict:
    return _headers(other_user)


@pytest_asyncio.fixture
async def organizer_headers(organizer: User) -> dict:
    return _headers(organizer)


@pytest_asyncio.fixture
async def rival_headers(db_session: AsyncSession) -> dict:
    """Headers of an organizer who owns none of the fixture events."""
    rival = await _create_user(db_session, "Rita Rival", "rival@example.com", "organizer")
    return _headers(rival)


@pytest_asyncio.fixture
async def admin_headers(admin: User) -> dict:
    return _headers(admin)


@pytest_asyncio.fixture
async def category(db_session: AsyncSession) -> Category:
    category = Category(name="Music", description="Concerts and gigs")
    db_session.add(category)
    await db_session.commit()
    await db_session.refresh(category)
    return category


@pytest_asyncio.fixture
async def test_event(db_session: AsyncSession, organizer: User, category: Category) -> Event:
    """
    Event priced at 100 with ten seats: A1-A8 regular and V1-V2 vip (x1.5).
    """
    seats = [Seat(seat_number=f"A{n}", seat_type="regular", price_multiplier=1) for n in range(1, 9)]
    seats += [Seat(seat_number=f"V{n}", seat_type="vip", price_multiplier=1.5) for n in range(1, 3)]
    event = Event(
        title="Test Concert",
        description="A test event with a full seat map",
        date=datetime.now(timezone.utc) + timedelta(days=30),
        location="Test Venue",
        price=100,
        total_seats=10,
        available_seats=10,
        organizer_id=organizer.id,
        category_id=category.id,
        seats=seats,
    )
    db_session.add(event)
    await db_session.commit()
    return event


@pytest_asyncio.fixture
async def seat_ids(test_event: Event) -> list[int]:
    """Seat ids of `test_event` in layout order: eight regular, then two vip."""
    return [seat.id for seat in test_event.seats]


@pytest_asyncio.fixture
async def sold_out_event(db_session: AsyncSession, organizer: User) -> Event:
    """Event whose every seat is already booked."""
    event = Event(
        title="Sold Out Show",
        description="No seats left for this one",
        date=datetime.now(timezone.utc) + timedelta(days=30),
        location="Full Venue",
        price=50,
        total_seats=2,
        available_seats=0,
        organizer_id=organizer.id,
        seats=[Seat(seat_number=f"A{n}", is_booked=True) for n in range(1, 3)],
    )
    db_session.add(event)
    await db_session.commit()
    return event


@pytest_asyncio.fixture
async def book_seats(client: AsyncClient):
    """Helper that books seats and returns the created booking body."""

    async def _book(headers: dict, event_id: int, seat_ids: list[int]) -> dict:
        response = await client.post(
            "/api/v1/bookings/",
            json={"event_id": event_id, "seat_ids": seat_ids},
            headers=headers,
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _book
