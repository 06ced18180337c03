"""
Tests for authentication endpoints: registration, login and current user.
"""

import pytest
from httpx import AsyncClient

from event_booking.core.security import create_access_token, decode_access_token


@pytest.mark.asyncio
async def test_register_user(client: AsyncClient):
    """Successful registration returns user data."""
    response = await client.post("/api/v1/auth/register", json={
        "name": "New User",
        "email": "New@Example.com",
        "password": "Securepass1",
    })
    assert response.status_code == 201
    data = response.json()
    assert data["email"] == "new@example.com"
    assert data["name"] == "New User"
    assert data["role"] == "user"
    assert "hashed_password" not in data  # Never expose password hash


@pytest.mark.asyncio
async def test_register_organizer(client: AsyncClient):
    response = await client.post("/api/v1/auth/register", json={
        "name": "Event Host",
        "email": "host@example.com",
        "password": "Securepass1",
        "role": "organizer",
    })
    assert response.status_code == 201
    assert response.json()["role"] == "organizer"


@pytest.mark.asyncio
async def test_register_cannot_self_assign_admin(client: AsyncClient):
    response = await client.post("/api/v1/auth/register", json={
        "name": "Sneaky",
        "email": "sneaky@example.com",
        "password": "Securepass1",
        "role": "admin",
    })
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_register_duplicate_email(client: AsyncClient, test_user):
    """Duplicate email returns 409, whatever its case."""
    response = await client.post("/api/v1/auth/register", json={
        "name": "Different",
        "email": "TEST@example.com",
        "password": "Securepass1",
    })
    assert response.status_code == 409


@pytest.mark.asyncio
@pytest.mark.parametrize("password", ["Short1", "alllowercase1", "NoDigitsHere"])
async def test_register_weak_password(client: AsyncClient, password):
    response = await client.post("/api/v1/auth/register", json={
        "name": "Weak User",
        "email": "weak@example.com",
        "password": password,
    })
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_login_success(client: AsyncClient, test_user):
    """Valid credentials return a JWT carrying the user id."""
    user_id = test_user.id
    response = await client.post("/api/v1/auth/login", json={
        "email": "test@example.com",
        "password": "Password123",
    })
    assert response.status_code == 200
    data = response.json()
    assert data["token_type"] == "bearer"
    assert decode_access_token(data["access_token"]) == user_id


@pytest.mark.asyncio
async def test_login_wrong_password(client: AsyncClient, test_user):
    response = await client.post("/api/v1/auth/login", json={
        "email": "test@example.com",
        "password": "Wrongpass123",
    })
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_login_nonexistent_email(client: AsyncClient):
    response = await client.post("/api/v1/auth/login", json={
        "email": "nobody@example.com",
        "password": "Anypassword123",
    })
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_login_deactivated_account(client: AsyncClient, db_session, test_user):
    test_user.is_active = False
    await db_session.commit()

    response = await client.post("/api/v1/auth/login", json={
        "email": "test@example.com",
        "password": "Password123",
    })
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_me(client: AsyncClient, auth_headers):
    response = await client.get("/api/v1/auth/me", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["email"] == "test@example.com"


@pytest.mark.asyncio
async def test_me_without_token(client: AsyncClient):
    response = await client.get("/api/v1/auth/me")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_me_with_garbage_token(client: AsyncClient):
    response = await client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_me_for_deleted_user(client: AsyncClient, db_session):
    token = create_access_token(data={"sub": "9999"})
    response = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_logout(client: AsyncClient, auth_headers):
    response = await client.post("/api/v1/auth/logout", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["message"] == "Logged out successfully"
