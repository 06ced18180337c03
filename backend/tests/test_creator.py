"""
Tests for the organizer dashboard.
"""

import pytest
from httpx import AsyncClient


async def _pay(client: AsyncClient, headers: dict, booking_id: int) -> None:
    response = await client.post(
        "/api/v1/payments/",
        json={"booking_id": booking_id, "payment_method": "card"},
        headers=headers,
    )
    assert response.status_code == 201


@pytest.mark.asyncio
async def test_creator_requires_organizer(client: AsyncClient, auth_headers, admin_headers):
    assert (await client.get("/api/v1/creator/stats", headers=auth_headers)).status_code == 403
    assert (await client.get("/api/v1/creator/stats", headers=admin_headers)).status_code == 403


@pytest.mark.asyncio
async def test_dashboard_stats(
    client: AsyncClient, organizer_headers, auth_headers, test_event, sold_out_event, seat_ids, book_seats
):
    event_id = test_event.id
    paid = await book_seats(auth_headers, event_id, seat_ids[:2])
    await book_seats(auth_headers, event_id, seat_ids[2:3])  # stays pending
    await _pay(client, auth_headers, paid["id"])

    response = await client.get("/api/v1/creator/stats", headers=organizer_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["stats"] == {"total_events": 2, "total_bookings": 1, "total_revenue": 200.0}
    counts = {e["id"]: e["booking_count"] for e in data["recent_events"]}
    assert counts[event_id] == 1


@pytest.mark.asyncio
async def test_my_events_only_lists_own(
    client: AsyncClient, organizer_headers, rival_headers, test_event
):
    event_id = test_event.id
    mine = await client.get("/api/v1/creator/events", headers=organizer_headers)
    assert [e["id"] for e in mine.json()] == [event_id]

    theirs = await client.get("/api/v1/creator/events", headers=rival_headers)
    assert theirs.json() == []


@pytest.mark.asyncio
async def test_event_details_include_all_seats_and_bookings(
    client: AsyncClient, organizer_headers, auth_headers, test_event, seat_ids, book_seats
):
    event_id = test_event.id
    booking = await book_seats(auth_headers, event_id, seat_ids[:1])

    response = await client.get(f"/api/v1/creator/events/{event_id}", headers=organizer_headers)
    assert response.status_code == 200
    data = response.json()
    assert len(data["seats"]) == 10
    assert [b["id"] for b in data["bookings"]] == [booking["id"]]
    assert data["bookings"][0]["user_email"] == "test@example.com"


@pytest.mark.asyncio
async def test_event_details_not_owned(client: AsyncClient, rival_headers, test_event):
    event_id = test_event.id
    response = await client.get(f"/api/v1/creator/events/{event_id}", headers=rival_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_event_bookings(
    client: AsyncClient, organizer_headers, auth_headers, other_headers, test_event, seat_ids, book_seats
):
    event_id = test_event.id
    await book_seats(auth_headers, event_id, seat_ids[:1])
    await book_seats(other_headers, event_id, seat_ids[1:2])

    response = await client.get(f"/api/v1/creator/events/{event_id}/bookings", headers=organizer_headers)
    assert response.status_code == 200
    assert {b["user_name"] for b in response.json()} == {"Test User", "Other User"}


@pytest.mark.asyncio
@pytest.mark.parametrize("view", ["stats", "insights"])
async def test_event_stats(
    client: AsyncClient, organizer_headers, auth_headers, test_event, seat_ids, book_seats, view
):
    event_id = test_event.id
    paid = await book_seats(auth_headers, event_id, seat_ids[8:10])
    await book_seats(auth_headers, event_id, seat_ids[:1])
    await _pay(client, auth_headers, paid["id"])

    response = await client.get(f"/api/v1/creator/events/{event_id}/{view}", headers=organizer_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["title"] == "Test Concert"
    assert data["stats"] == {
        "bookings": 1,
        "revenue": 300.0,
        "seats_booked": 2,
        "available_seats": 7,
    }
    assert [b["id"] for b in data["recent_bookings"]] == [paid["id"]]


@pytest.mark.asyncio
async def test_append_seats(client: AsyncClient, organizer_headers, test_event):
    event_id = test_event.id
    response = await client.post(
        f"/api/v1/creator/events/{event_id}/seats",
        json={"seats": [{"seat_number": "P1", "seat_type": "premium"}, {"seat_number": "P2"}]},
        headers=organizer_headers,
    )
    assert response.status_code == 201
    assert response.json()["results"] == 12

    event = (await client.get(f"/api/v1/events/{event_id}")).json()
    assert event["total_seats"] == 12
    assert event["available_seats"] == 12


@pytest.mark.asyncio
async def test_append_clashing_seats(client: AsyncClient, organizer_headers, test_event):
    event_id = test_event.id
    response = await client.post(
        f"/api/v1/creator/events/{event_id}/seats",
        json={"seats": [{"seat_number": "A1"}]},
        headers=organizer_headers,
    )
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_delete_event_with_confirmed_bookings(
    client: AsyncClient, organizer_headers, auth_headers, test_event, seat_ids, book_seats
):
    event_id = test_event.id
    booking = await book_seats(auth_headers, event_id, seat_ids[:1])
    await _pay(client, auth_headers, booking["id"])

    response = await client.delete(f"/api/v1/creator/events/{event_id}", headers=organizer_headers)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_delete_event(client: AsyncClient, organizer_headers, test_event):
    event_id = test_event.id
    response = await client.delete(f"/api/v1/creator/events/{event_id}", headers=organizer_headers)
    assert response.status_code == 200

    assert (await client.get(f"/api/v1/events/{event_id}")).status_code == 404
    assert (await client.get("/api/v1/creator/events", headers=organizer_headers)).json() == []
