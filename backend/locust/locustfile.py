"""
Locust Load Test Suite

Run scenarios:
  locust -f locustfile.py --tags capacity   # Test capacity under contention
  locust -f locustfile.py --tags read       # Test listing/stats throughput
  locust -f locustfile.py --tags edge       # Test bad input
  locust -f locustfile.py                   # All tests
"""

import random
import uuid
from datetime import datetime, timezone, timedelta

from locust import HttpUser, task, between, tag

CONTENDED_CAPACITY = 10

# Shared state
EVENT_IDS = []
CONTENDED_EVENT_ID = None


def random_email():
    return f"load_{uuid.uuid4().hex[:12]}@test.com"


def future_iso(days):
    return (datetime.now(timezone.utc) + timedelta(days=days)).isoformat()


def create_user(client):
    resp = client.post("/api/users", json={"name": "Load User", "email": random_email()})
    if resp.status_code == 201:
        return resp.json()["user"]["id"]
    return None


class CapacityContentionUser(HttpUser):
    """
    TEST 1: Capacity - every user races for the same 10 places

    Run: locust -f locustfile.py --tags capacity -u 100 -r 50 --run-time 30s

    After test, verify:
      GET /api/events/{id}/stats -> total_registrations <= 10
    """
    wait_time = between(0, 0.1)

    def on_start(self):
        global CONTENDED_EVENT_ID
        self.user_id = create_user(self.client)

        if CONTENDED_EVENT_ID is None:
            resp = self.client.post("/api/events", json={
                "title": "Contention Test Event",
                "date_time": future_iso(30),
                "location": "Load Test Hall",
                "capacity": CONTENDED_CAPACITY,
            })
            if resp.status_code == 201:
                CONTENDED_EVENT_ID = resp.json()["event_id"]
                print(f"\nCreated event {CONTENDED_EVENT_ID} with {CONTENDED_CAPACITY} places\n")

    @tag("capacity")
    @task
    def register_for_contended_event(self):
        if CONTENDED_EVENT_ID is None or self.user_id is None:
            return

        with self.client.post("/api/registrations",
            json={"user_id": self.user_id, "event_id": CONTENDED_EVENT_ID},
            name="/api/registrations [contended]",
            catch_response=True
        ) as resp:
            # 400 = full, 409 = this user already got a place
            if resp.status_code in (201, 400, 409):
                resp.success()
            else:
                resp.failure(f"Unexpected: {resp.status_code}")

    @tag("capacity")
    @task
    def check_capacity_invariant(self):
        if CONTENDED_EVENT_ID is None:
            return

        with self.client.get(f"/api/events/{CONTENDED_EVENT_ID}/stats",
            name="/api/events/{id}/stats [contended]",
            catch_response=True
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Unexpected: {resp.status_code}")
            elif resp.json()["total_registrations"] > CONTENDED_CAPACITY:
                resp.failure("Event over capacity")
            else:
                resp.success()


class ReadThroughputUser(HttpUser):
    """
    TEST 2: Read throughput - listing, details and stats

    Run: locust -f locustfile.py --tags read -u 100 -r 20 --run-time 60s
    """
    wait_time = between(0.1, 0.5)

    @tag("read")
    @task(10)
    def list_upcoming_events(self):
        resp = self.client.get("/api/events")
        if resp.status_code == 200:
            for event in resp.json()["events"]:
                if event["id"] not in EVENT_IDS:
                    EVENT_IDS.append(event["id"])

    @tag("read")
    @task(3)
    def get_event_detail(self):
        if EVENT_IDS:
            self.client.get(f"/api/events/{random.choice(EVENT_IDS)}", name="/api/events/{id}")

    @tag("read")
    @task(3)
    def get_event_stats(self):
        if EVENT_IDS:
            self.client.get(f"/api/events/{random.choice(EVENT_IDS)}/stats", name="/api/events/{id}/stats")

    @tag("read")
    @task(1)
    def health_check(self):
        self.client.get("/health")


class EdgeCaseUser(HttpUser):
    """
    TEST 3: Edge cases - Bad input handling

    Run: locust -f locustfile.py --tags edge -u 20 -r 5 --run-time 30s

    System should NOT crash, return proper error codes.
    """
    wait_time = between(0.5, 1.5)

    def _expect(self, resp, codes):
        if resp.status_code in codes:
            resp.success()
        else:
            resp.failure(f"Expected {codes}, got {resp.status_code}")

    @tag("edge")
    @task
    def unknown_event(self):
        with self.client.post("/api/registrations",
            json={"user_id": 1, "event_id": 999999},
            catch_response=True
        ) as resp:
            self._expect(resp, [404])

    @tag("edge")
    @task
    def capacity_out_of_range(self):
        with self.client.post("/api/events",
            json={"title": "Too Big", "date_time": future_iso(5), "location": "X", "capacity": 5000},
            catch_response=True
        ) as resp:
            self._expect(resp, [400])

    @tag("edge")
    @task
    def past_event(self):
        with self.client.post("/api/events",
            json={"title": "Yesterday", "date_time": future_iso(-1), "location": "X", "capacity": 10},
            catch_response=True
        ) as resp:
            self._expect(resp, [400])

    @tag("edge")
    @task
    def malformed_json(self):
        with self.client.post("/api/registrations",
            data="not json at all",
            headers={"Content-Type": "application/json"},
            catch_response=True
        ) as resp:
            self._expect(resp, [400])

    @tag("edge")
    @task
    def status_missing_params(self):
        with self.client.get("/api/registrations/status?user_id=1", catch_response=True) as resp:
            self._expect(resp, [400])
