"""
Locust Load Test Suite

Run scenarios:
  locust -f locustfile.py --tags contention   # Many users, same seats
  locust -f locustfile.py --tags throughput   # Cached listings
  locust -f locustfile.py --tags edge         # Bad input
  locust -f locustfile.py                     # All tests

The contention scenario registers its own organizer to set up the event.
"""

import random
import uuid
from datetime import datetime, timezone, timedelta

from locust import HttpUser, task, between, tag, events

PASSWORD = "Loadtest123"

# Shared state, filled in by the first user that manages to set it up
CONTENTION_EVENT_ID = None
CONTENTION_SEAT_IDS = []


def random_email():
    return f"load_{uuid.uuid4().hex[:10]}@example.com"


def register_and_login(client, role="user"):
    email = random_email()
    client.post("/api/v1/auth/register", json={
        "name": "Load Tester",
        "email": email,
        "password": PASSWORD,
        "role": role,
    })
    resp = client.post("/api/v1/auth/login", json={"email": email, "password": PASSWORD})
    if resp.status_code != 200:
        return {}
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


@events.test_start.add_listener
def on_test_start(environment, **kwargs):
    print("\n" + "=" * 60)
    print("Booking load test starting against", environment.host)
    print("=" * 60)


class SeatContentionUser(HttpUser):
    """
    TEST 1: Contention - 100 users -> 10 seats

    Run: locust -f locustfile.py --tags contention -u 100 -r 50 --run-time 30s

    After test, verify no seat is held by two live bookings:
      SELECT bs.seat_id, COUNT(*) FROM booked_seats bs
      JOIN bookings b ON b.id = bs.booking_id
      WHERE b.status <> 'cancelled' GROUP BY bs.seat_id HAVING COUNT(*) > 1;
    Should return no rows.
    """
    wait_time = between(0, 0.1)

    def on_start(self):
        self.headers = register_and_login(self.client)
        if CONTENTION_EVENT_ID is None:
            self._create_contention_event()

    def _create_contention_event(self):
        global CONTENTION_EVENT_ID, CONTENTION_SEAT_IDS
        organizer = register_and_login(self.client, role="organizer")
        if not organizer:
            return

        future = (datetime.now(timezone.utc) + timedelta(days=30)).isoformat()
        resp = self.client.post("/api/v1/events/", json={
            "title": "Contention Test Event",
            "description": "Ten seats and a crowd",
            "date": future,
            "location": "Load Test Arena",
            "total_seats": 10,
            "price": 100,
        }, headers=organizer)
        if resp.status_code != 201:
            return
        event_id = resp.json()["id"]

        resp = self.client.post(f"/api/v1/events/{event_id}/seats/generate", headers=organizer)
        if resp.status_code == 201 and CONTENTION_EVENT_ID is None:
            CONTENTION_SEAT_IDS = [seat["id"] for seat in resp.json()["seats"]]
            CONTENTION_EVENT_ID = event_id
            print(f"\nCreated event {event_id} with {len(CONTENTION_SEAT_IDS)} seats\n")

    @tag("contention")
    @task
    def book_contended_seats(self):
        """Every user tries to grab two of the same ten seats."""
        if CONTENTION_EVENT_ID is None or not self.headers:
            return

        seat_ids = random.sample(CONTENTION_SEAT_IDS, 2)
        with self.client.post(
            "/api/v1/bookings/",
            json={"event_id": CONTENTION_EVENT_ID, "seat_ids": seat_ids},
            headers=self.headers,
            name="/api/v1/bookings/ [contended]",
            catch_response=True,
        ) as resp:
            if resp.status_code in (201, 409):
                resp.success()  # 409: someone else holds a seat
            else:
                resp.failure(f"Unexpected: {resp.status_code}")


class ThroughputUser(HttpUser):
    """
    TEST 2: Throughput - Cache effectiveness

    Run twice, with REDIS_ENABLED=true and false, and compare
    requests/sec and P95/P99 latency of the listing endpoint.
    """
    wait_time = between(0.1, 0.5)

    @tag("throughput", "read")
    @task(10)
    def list_events_cached(self):
        page = random.randint(1, 5)
        self.client.get(f"/api/v1/events/?page={page}&limit=20", name="/api/v1/events/ [cached]")

    @tag("throughput", "read")
    @task(3)
    def list_categories(self):
        self.client.get("/api/v1/categories/")

    @tag("throughput", "read")
    @task(3)
    def get_event_detail(self):
        if CONTENTION_EVENT_ID is not None:
            self.client.get(f"/api/v1/events/{CONTENTION_EVENT_ID}", name="/api/v1/events/{id}")

    @tag("throughput")
    @task(1)
    def health_check(self):
        self.client.get("/health")


class EdgeCaseUser(HttpUser):
    """
    TEST 3: Edge cases - Bad input handling

    Run: locust -f locustfile.py --tags edge -u 20 -r 5 --run-time 30s
    Every request here must be rejected with a 4xx, never a 5xx.
    """
    wait_time = between(0.5, 1)

    def on_start(self):
        self.headers = register_and_login(self.client)

    def _expect(self, resp, *codes):
        if resp.status_code in codes:
            resp.success()
        else:
            resp.failure(f"Expected {codes}, got {resp.status_code}")

    @tag("edge")
    @task
    def book_without_token(self):
        with self.client.post(
            "/api/v1/bookings/",
            json={"event_id": 1, "seat_ids": [1]},
            name="/api/v1/bookings/ [no auth]",
            catch_response=True,
        ) as resp:
            self._expect(resp, 401)

    @tag("edge")
    @task
    def book_empty_seat_list(self):
        with self.client.post(
            "/api/v1/bookings/",
            json={"event_id": 1, "seat_ids": []},
            headers=self.headers,
            name="/api/v1/bookings/ [no seats]",
            catch_response=True,
        ) as resp:
            self._expect(resp, 422)

    @tag("edge")
    @task
    def book_unknown_event(self):
        with self.client.post(
            "/api/v1/bookings/",
            json={"event_id": 10_000_000, "seat_ids": [1]},
            headers=self.headers,
            name="/api/v1/bookings/ [unknown event]",
            catch_response=True,
        ) as resp:
            self._expect(resp, 404)

    @tag("edge")
    @task
    def bad_sort(self):
        with self.client.get(
            "/api/v1/events/?sort_by=nonsense",
            name="/api/v1/events/ [bad sort]",
            catch_response=True,
        ) as resp:
            self._expect(resp, 422)

    @tag("edge")
    @task
    def pay_missing_booking(self):
        with self.client.post(
            "/api/v1/payments/",
            json={"booking_id": 10_000_000, "payment_method": "card"},
            headers=self.headers,
            name="/api/v1/payments/ [missing booking]",
            catch_response=True,
        ) as resp:
            self._expect(resp, 404)
