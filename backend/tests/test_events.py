"""
Tests for event CRUD, listing filters, seat layouts and images.
"""

import pytest
from datetime import datetime, timezone, timedelta
from httpx import AsyncClient


def _event_payload(**overrides) -> dict:
    payload = {
        "title": "Python Conference 2026",
        "description": "Annual Python gathering",
        "date": (datetime.now(timezone.utc) + timedelta(days=30)).isoformat(),
        "location": "Convention Center",
        "total_seats": 25,
        "price": 499,
    }
    payload.update(overrides)
    return payload


@pytest.mark.asyncio
async def test_create_event(client: AsyncClient, organizer_headers, organizer):
    """Organizers can create events; all seats start available."""
    organizer_id = organizer.id
    response = await client.post("/api/v1/events/", json=_event_payload(), headers=organizer_headers)
    assert response.status_code == 201
    data = response.json()
    assert data["title"] == "Python Conference 2026"
    assert data["total_seats"] == 25
    assert data["available_seats"] == 25
    assert data["organizer_id"] == organizer_id
    assert data["is_active"] is True


@pytest.mark.asyncio
async def test_create_event_unauthenticated(client: AsyncClient):
    response = await client.post("/api/v1/events/", json=_event_payload())
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_create_event_as_plain_user(client: AsyncClient, auth_headers):
    response = await client.post("/api/v1/events/", json=_event_payload(), headers=auth_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_create_event_past_date(client: AsyncClient, organizer_headers):
    past_date = (datetime.now(timezone.utc) - timedelta(days=1)).isoformat()
    response = await client.post(
        "/api/v1/events/", json=_event_payload(date=past_date), headers=organizer_headers
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_create_event_unknown_category(client: AsyncClient, organizer_headers):
    response = await client.post(
        "/api/v1/events/", json=_event_payload(category_id=42), headers=organizer_headers
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_list_events(client: AsyncClient, test_event, sold_out_event):
    response = await client.get("/api/v1/events/")
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 2
    assert data["page"] == 1
    assert data["has_more"] is False
    assert data["cached"] is False


@pytest.mark.asyncio
async def test_list_events_pagination(client: AsyncClient, test_event, sold_out_event):
    response = await client.get("/api/v1/events/", params={"page": 1, "limit": 1})
    data = response.json()
    assert len(data["events"]) == 1
    assert data["total"] == 2
    assert data["has_more"] is True


@pytest.mark.asyncio
async def test_list_events_filters(client: AsyncClient, test_event, sold_out_event):
    by_search = await client.get("/api/v1/events/", params={"search": "concert"})
    assert [e["title"] for e in by_search.json()["events"]] == ["Test Concert"]

    by_category = await client.get("/api/v1/events/", params={"category": "Music"})
    assert [e["title"] for e in by_category.json()["events"]] == ["Test Concert"]

    by_price = await client.get("/api/v1/events/", params={"max_price": 60})
    assert [e["title"] for e in by_price.json()["events"]] == ["Sold Out Show"]


@pytest.mark.asyncio
async def test_list_events_sorted_by_price(client: AsyncClient, test_event, sold_out_event):
    response = await client.get("/api/v1/events/", params={"sort_by": "price_desc"})
    prices = [e["price"] for e in response.json()["events"]]
    assert prices == [100.0, 50.0]


@pytest.mark.asyncio
async def test_list_events_rejects_unknown_sort(client: AsyncClient):
    response = await client.get("/api/v1/events/", params={"sort_by": "popularity"})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_get_event_shows_only_free_seats(
    client: AsyncClient, auth_headers, test_event, seat_ids, book_seats
):
    event_id = test_event.id
    await book_seats(auth_headers, event_id, seat_ids[:2])

    response = await client.get(f"/api/v1/events/{event_id}")
    assert response.status_code == 200
    data = response.json()
    assert data["available_seats"] == 8
    assert [s["id"] for s in data["seats"]] == seat_ids[2:]


@pytest.mark.asyncio
async def test_get_nonexistent_event(client: AsyncClient):
    response = await client.get("/api/v1/events/99999")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_update_event_by_owner(client: AsyncClient, organizer_headers, test_event):
    event_id = test_event.id
    response = await client.patch(
        f"/api/v1/events/{event_id}",
        json={"title": "Renamed Concert", "price": 120},
        headers=organizer_headers,
    )
    assert response.status_code == 200
    assert response.json()["title"] == "Renamed Concert"
    assert response.json()["price"] == 120.0


@pytest.mark.asyncio
async def test_update_event_by_other_organizer(client: AsyncClient, rival_headers, test_event):
    event_id = test_event.id
    response = await client.patch(
        f"/api/v1/events/{event_id}", json={"title": "Hijacked"}, headers=rival_headers
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_admin_can_update_any_event(client: AsyncClient, admin_headers, test_event):
    event_id = test_event.id
    response = await client.patch(
        f"/api/v1/events/{event_id}", json={"location": "Bigger Venue"}, headers=admin_headers
    )
    assert response.status_code == 200
    assert response.json()["location"] == "Bigger Venue"


@pytest.mark.asyncio
async def test_update_event_to_past_date(client: AsyncClient, organizer_headers, test_event):
    event_id = test_event.id
    past_date = (datetime.now(timezone.utc) - timedelta(days=1)).isoformat()
    response = await client.patch(
        f"/api/v1/events/{event_id}", json={"date": past_date}, headers=organizer_headers
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_delete_event_is_soft(client: AsyncClient, organizer_headers, test_event):
    event_id = test_event.id
    response = await client.delete(f"/api/v1/events/{event_id}", headers=organizer_headers)
    assert response.status_code == 204

    assert (await client.get(f"/api/v1/events/{event_id}")).status_code == 404
    assert (await client.get("/api/v1/events/")).json()["total"] == 0


@pytest.mark.asyncio
async def test_list_seats_includes_booked(client: AsyncClient, sold_out_event):
    event_id = sold_out_event.id
    response = await client.get(f"/api/v1/events/{event_id}/seats")
    assert response.status_code == 200
    data = response.json()
    assert data["results"] == 2
    assert all(seat["is_booked"] for seat in data["seats"])


@pytest.mark.asyncio
async def test_generate_seat_layout(client: AsyncClient, organizer_headers):
    created = await client.post(
        "/api/v1/events/", json=_event_payload(total_seats=25), headers=organizer_headers
    )
    event_id = created.json()["id"]

    response = await client.post(f"/api/v1/events/{event_id}/seats/generate", headers=organizer_headers)
    assert response.status_code == 201
    seats = response.json()["seats"]
    assert len(seats) == 25
    assert seats[0]["seat_number"] == "A1"
    assert seats[-1]["seat_number"] == "C5"

    event = (await client.get(f"/api/v1/events/{event_id}")).json()
    assert event["total_seats"] == 25
    assert event["available_seats"] == 25


@pytest.mark.asyncio
async def test_replace_seat_layout_recomputes_counters(client: AsyncClient, organizer_headers, test_event):
    event_id = test_event.id
    response = await client.post(
        f"/api/v1/events/{event_id}/seats",
        json={"seats": [
            {"seat_number": "P1", "seat_type": "premium"},
            {"seat_number": "R1"},
            {"seat_number": "R2", "price_multiplier": 1.25},
        ]},
        headers=organizer_headers,
    )
    assert response.status_code == 201
    seats = {s["seat_number"]: s for s in response.json()["seats"]}
    assert seats["P1"]["price_multiplier"] == 2.0
    assert seats["R1"]["price_multiplier"] == 1.0
    assert seats["R2"]["price_multiplier"] == 1.25

    event = (await client.get(f"/api/v1/events/{event_id}")).json()
    assert event["total_seats"] == 3
    assert event["available_seats"] == 3


@pytest.mark.asyncio
async def test_replace_seat_layout_rejects_duplicates(client: AsyncClient, organizer_headers, test_event):
    event_id = test_event.id
    response = await client.post(
        f"/api/v1/events/{event_id}/seats",
        json={"seats": [{"seat_number": "A1"}, {"seat_number": "A1"}]},
        headers=organizer_headers,
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_replace_seat_layout_after_booking(
    client: AsyncClient, organizer_headers, auth_headers, test_event, seat_ids, book_seats
):
    event_id = test_event.id
    await book_seats(auth_headers, event_id, seat_ids[:1])

    response = await client.post(
        f"/api/v1/events/{event_id}/seats",
        json={"seats": [{"seat_number": "Z1"}]},
        headers=organizer_headers,
    )
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_add_event_images(client: AsyncClient, organizer_headers, test_event):
    event_id = test_event.id
    first = await client.post(
        f"/api/v1/events/{event_id}/images",
        json={"image_url": "https://img.example.com/a.jpg", "is_primary": True},
        headers=organizer_headers,
    )
    second = await client.post(
        f"/api/v1/events/{event_id}/images",
        json={"image_url": "https://img.example.com/b.jpg", "is_primary": True},
        headers=organizer_headers,
    )
    assert first.status_code == 201
    assert second.json()["display_order"] == 1

    images = (await client.get(f"/api/v1/events/{event_id}")).json()["images"]
    assert [(i["image_url"][-5:], i["is_primary"]) for i in images] == [
        ("a.jpg", False),
        ("b.jpg", True),
    ]
