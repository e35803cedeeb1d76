"""
Tests for registration endpoints: the ordered consistency checks,
cancellation and status lookup.
"""

import asyncio

import pytest
from httpx import AsyncClient

HUGE_ID = 99999999999999999999


async def register(client: AsyncClient, user_id: int, event_id: int):
    return await client.post("/api/registrations", json={"user_id": user_id, "event_id": event_id})


async def cancel(client: AsyncClient, user_id: int, event_id: int):
    return await client.request(
        "DELETE", "/api/registrations", json={"user_id": user_id, "event_id": event_id}
    )


async def registration_count(client: AsyncClient, event_id: int) -> int:
    stats = await client.get(f"/api/events/{event_id}/stats")
    return stats.json()["total_registrations"]


@pytest.mark.asyncio
async def test_register(client: AsyncClient, test_user, test_event):
    response = await register(client, test_user.id, test_event.id)
    assert response.status_code == 201
    assert response.json() == {
        "message": "Registration successful",
        "user_id": test_user.id,
        "event_id": test_event.id,
        "event_title": "Test Concert",
    }
    assert await registration_count(client, test_event.id) == 1


@pytest.mark.asyncio
async def test_duplicate_registration(client: AsyncClient, test_user, test_event):
    """Same user registering twice returns 409 and leaves one row."""
    response1 = await register(client, test_user.id, test_event.id)
    assert response1.status_code == 201

    response2 = await register(client, test_user.id, test_event.id)
    assert response2.status_code == 409
    assert response2.json() == {
        "error": "Conflict",
        "message": "User is already registered for this event",
    }
    assert await registration_count(client, test_event.id) == 1


@pytest.mark.asyncio
async def test_register_full_event(client: AsyncClient, test_user, full_event):
    response = await register(client, test_user.id, full_event.id)
    assert response.status_code == 400
    assert response.json() == {"error": "Bad Request", "message": "Event is full"}
    assert await registration_count(client, full_event.id) == 2


@pytest.mark.asyncio
async def test_register_until_capacity(client: AsyncClient, make_user, make_event):
    event = await make_event(capacity=3)
    users = [await make_user(f"User {i}", f"user{i}@example.com") for i in range(4)]

    codes = [(await register(client, u.id, event.id)).status_code for u in users]
    assert codes == [201, 201, 201, 400]
    assert await registration_count(client, event.id) == 3


@pytest.mark.asyncio
async def test_register_past_event(client: AsyncClient, test_user, past_event):
    response = await register(client, test_user.id, past_event.id)
    assert response.status_code == 400
    assert response.json()["message"] == "Cannot register for past events"


@pytest.mark.asyncio
async def test_register_unknown_user(client: AsyncClient, test_event):
    response = await register(client, 99999, test_event.id)
    assert response.status_code == 404
    assert response.json()["message"] == "User not found"


@pytest.mark.asyncio
async def test_register_unknown_event(client: AsyncClient, test_user):
    response = await register(client, test_user.id, 99999)
    assert response.status_code == 404
    assert response.json()["message"] == "Event not found"


@pytest.mark.asyncio
async def test_register_checks_user_before_event(client: AsyncClient):
    response = await register(client, 99998, 99999)
    assert response.status_code == 404
    assert response.json()["message"] == "User not found"


@pytest.mark.asyncio
async def test_past_check_precedes_duplicate_check(client: AsyncClient, make_registration, test_user, past_event):
    """A registration on a past event reports 'past', not 'already registered'."""
    await make_registration(test_user.id, past_event.id)
    response = await register(client, test_user.id, past_event.id)
    assert response.status_code == 400


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [
    {"user_id": 0, "event_id": 1},
    {"user_id": "abc", "event_id": 1},
    {"user_id": True, "event_id": 1},
    {"user_id": HUGE_ID, "event_id": 1},
    {"user_id": 2**31, "event_id": 1},
    {"event_id": 1},
])
async def test_register_invalid_payload(client: AsyncClient, payload):
    response = await client.post("/api/registrations", json=payload)
    assert response.status_code == 400
    assert response.json()["error"] == "Validation Error"
    assert response.json()["details"][0]["field"] == "user_id"


@pytest.mark.asyncio
async def test_cancel_registration_lifecycle(client: AsyncClient, test_user, test_event):
    """Status flips with register and cancel; a second cancel is 404."""
    await register(client, test_user.id, test_event.id)

    status = await client.get(
        "/api/registrations/status",
        params={"user_id": test_user.id, "event_id": test_event.id},
    )
    assert status.status_code == 200
    assert status.json()["is_registered"] is True
    assert status.json()["registration_date"] is not None

    response = await cancel(client, test_user.id, test_event.id)
    assert response.status_code == 200
    assert response.json() == {
        "message": "Registration cancelled successfully",
        "user_id": test_user.id,
        "event_id": test_event.id,
    }

    status = await client.get(
        "/api/registrations/status",
        params={"user_id": test_user.id, "event_id": test_event.id},
    )
    assert status.json() == {
        "user_id": test_user.id,
        "event_id": test_event.id,
        "is_registered": False,
        "registration_date": None,
    }

    again = await cancel(client, test_user.id, test_event.id)
    assert again.status_code == 404
    assert again.json()["message"] == "User is not registered for this event"


@pytest.mark.asyncio
async def test_cancel_frees_a_place(client: AsyncClient, test_user, full_event):
    event_details = (await client.get(f"/api/events/{full_event.id}")).json()
    first_attendee = event_details["registrations"][0]["id"]

    assert (await cancel(client, first_attendee, full_event.id)).status_code == 200
    assert (await register(client, test_user.id, full_event.id)).status_code == 201


@pytest.mark.asyncio
async def test_cancel_past_event_allowed(client: AsyncClient, make_registration, test_user, past_event):
    await make_registration(test_user.id, past_event.id)
    response = await cancel(client, test_user.id, past_event.id)
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_cancel_unknown_user_and_event(client: AsyncClient, test_user, test_event):
    assert (await cancel(client, 99999, test_event.id)).json()["message"] == "User not found"
    assert (await cancel(client, test_user.id, 99999)).json()["message"] == "Event not found"


@pytest.mark.asyncio
@pytest.mark.parametrize("params", [{}, {"user_id": 1}, {"event_id": 1}])
async def test_status_requires_both_ids(client: AsyncClient, params):
    response = await client.get("/api/registrations/status", params=params)
    assert response.status_code == 400
    assert response.json() == {
        "error": "Bad Request",
        "message": "Both user_id and event_id are required",
    }


@pytest.mark.asyncio
async def test_status_for_unknown_ids(client: AsyncClient):
    """Status is a plain lookup; unknown ids are simply not registered."""
    response = await client.get("/api/registrations/status", params={"user_id": 5, "event_id": 7})
    assert response.status_code == 200
    assert response.json()["is_registered"] is False


@pytest.mark.asyncio
async def test_status_rejects_out_of_range_ids(client: AsyncClient):
    response = await client.get("/api/registrations/status", params={"user_id": 1, "event_id": HUGE_ID})
    assert response.status_code == 400
    assert response.json()["error"] == "Validation Error"
    assert response.json()["details"][0]["field"] == "event_id"


@pytest.mark.asyncio
async def test_cancel_rejects_out_of_range_ids(client: AsyncClient, test_user):
    response = await cancel(client, test_user.id, HUGE_ID)
    assert response.status_code == 400
    assert response.json()["details"][0]["field"] == "event_id"


@pytest.mark.asyncio
async def test_concurrent_registrations_never_exceed_capacity(client: AsyncClient, make_user, make_event):
    """
    Eight users race for two places. Exactly two get in; the rest see
    "Event is full", never a server error.
    """
    event = await make_event(title="Hot Ticket", capacity=2)
    users = [await make_user(f"Racer {i}", f"racer{i}@example.com") for i in range(8)]

    responses = await asyncio.gather(*(register(client, user.id, event.id) for user in users))
    codes = [r.status_code for r in responses]

    assert set(codes) <= {201, 400}
    assert codes.count(201) == 2
    for response in responses:
        if response.status_code == 400:
            assert response.json()["message"] == "Event is full"

    stats = (await client.get(f"/api/events/{event.id}/stats")).json()
    assert stats["total_registrations"] == stats["capacity"] == 2
    assert stats["remaining_capacity"] == 0
