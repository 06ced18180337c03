"""
Tests for application-level endpoints and handlers.
"""

from types import SimpleNamespace

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import create_async_engine
from starlette.requests import Request

from event_booking import main
from event_booking.api.middleware import _route_name
from event_booking.api.errors import integrity_error_handler


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["cache"] == {"status": "disabled"}


@pytest.mark.asyncio
async def test_readiness(client: AsyncClient):
    response = await client.get("/health/ready")
    assert response.status_code == 200
    assert response.json() == {"status": "ready", "database": "up"}
    # pooled connections belong to this test's event loop
    await main.engine.dispose()


class RefusingEngine:
    def connect(self):
        raise ConnectionRefusedError(111, "Connect call failed")


@pytest.mark.asyncio
async def test_readiness_when_database_refuses_connections(client: AsyncClient, monkeypatch):
    monkeypatch.setattr(main, "engine", RefusingEngine())

    response = await client.get("/health/ready")
    assert response.status_code == 503
    assert response.json() == {"status": "unavailable", "database": "down"}


@pytest.mark.asyncio
async def test_readiness_when_database_cannot_open(client: AsyncClient, monkeypatch, tmp_path):
    broken = create_async_engine(f"sqlite+aiosqlite:///{tmp_path}/missing/dir/app.db")
    monkeypatch.setattr(main, "engine", broken)

    response = await client.get("/health/ready")
    assert response.status_code == 503
    await broken.dispose()


@pytest.mark.asyncio
async def test_root(client: AsyncClient):
    response = await client.get("/")
    assert response.json()["docs"] == "/docs"


@pytest.mark.asyncio
async def test_metrics(client: AsyncClient, auth_headers, test_event, seat_ids, book_seats):
    await book_seats(auth_headers, test_event.id, seat_ids[:1])

    response = await client.get("/metrics")
    assert response.status_code == 200
    assert 'booking_attempts_total{status="success"}' in response.text


@pytest.mark.asyncio
async def test_request_id_header(client: AsyncClient):
    response = await client.get("/health")
    assert len(response.headers["X-Request-ID"]) == 8
    assert response.headers["X-Response-Time"].endswith("ms")


@pytest.mark.asyncio
async def test_integrity_error_becomes_conflict():
    class Request:
        class url:
            path = "/api/v1/things"

    exc = IntegrityError("INSERT ...", {}, Exception("UNIQUE constraint failed: seats.event_id"))
    response = await integrity_error_handler(Request(), exc)
    assert response.status_code == 409
    assert b"Resource already exists" in response.body


@pytest.mark.asyncio
async def test_incoming_request_id_is_reused(client: AsyncClient):
    response = await client.get("/", headers={"X-Request-ID": "upstream-42"})
    assert response.headers["X-Request-ID"] == "upstream-42"


@pytest.mark.asyncio
async def test_request_counter_uses_route_template(client: AsyncClient, test_event):
    await client.get(f"/api/v1/events/{test_event.id}")

    response = await client.get("/metrics")
    assert 'route="/api/v1/events/{event_id}"' in response.text


def _request_for(path: str, template) -> Request:
    return Request({
        "type": "http",
        "method": "GET",
        "scheme": "http",
        "server": ("test", 80),
        "path": path,
        "root_path": "",
        "query_string": b"",
        "headers": [],
        "route": SimpleNamespace(path=template) if template else None,
    })


@pytest.mark.parametrize("template", [
    "/api/v1/events/{event_id}/seats",
    "/events/{event_id}/seats",  # prefix of the outer router not carried on the route
])
def test_route_name_restores_router_prefix(template):
    request = _request_for("/api/v1/events/7/seats", template)
    assert _route_name(request, "") == "/api/v1/events/{event_id}/seats"


def test_route_name_for_unmatched_path():
    assert _route_name(_request_for("/nope", None), "") == "unmatched"
