"""
Tests for the transactional helper and storage-level guarantees.
"""

import pytest
from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError

from app.core.exceptions import InternalError, NotFoundError
from app.models.registration import Registration
from app.models.user import User
from app.services.unit_of_work import run_checked, user_exists


async def count_users(database) -> int:
    async with database.session() as session:
        return await session.scalar(select(func.count()).select_from(User))


@pytest.mark.asyncio
async def test_checks_run_in_order_and_share_state(database, test_user):
    seen = []

    async def record(session, state):
        seen.append(state["user"].id)

    async def mutation(session, state):
        return state["user"].name

    result = await run_checked(
        database, "test_op", checks=[user_exists(test_user.id), record], mutation=mutation,
        failure_message="Failed",
    )
    assert result == "Test User"
    assert seen == [test_user.id]


@pytest.mark.asyncio
async def test_failed_check_skips_mutation(database):
    called = False

    async def mutation(session, state):
        nonlocal called
        called = True

    with pytest.raises(NotFoundError):
        await run_checked(database, "test_op", checks=[user_exists(12345)], mutation=mutation,
                          failure_message="Failed")
    assert called is False


@pytest.mark.asyncio
async def test_unexpected_error_rolls_back_and_hides_detail(database):
    async def mutation(session, state):
        session.add(User(name="Ghost", email="ghost@example.com"))
        await session.flush()
        raise RuntimeError("connection reset by peer")

    with pytest.raises(InternalError) as exc_info:
        await run_checked(database, "test_op", checks=[], mutation=mutation,
                          failure_message="Failed to do the thing")

    assert exc_info.value.message == "Failed to do the thing"
    assert exc_info.value.to_dict() == {
        "error": "Internal Server Error",
        "message": "Failed to do the thing",
    }
    assert await count_users(database) == 0


@pytest.mark.asyncio
async def test_unique_constraint_backstops_duplicate_registration(database, test_user, test_event):
    async with database.transaction() as session:
        session.add(Registration(user_id=test_user.id, event_id=test_event.id))

    with pytest.raises(IntegrityError):
        async with database.transaction() as session:
            session.add(Registration(user_id=test_user.id, event_id=test_event.id))


@pytest.mark.asyncio
async def test_capacity_check_constraint(database, make_event):
    with pytest.raises(IntegrityError):
        await make_event(capacity=0)


@pytest.mark.asyncio
async def test_deleting_user_cascades_to_registrations(database, test_user, test_event, make_registration):
    await make_registration(test_user.id, test_event.id)

    async with database.transaction() as session:
        await session.execute(delete(User).where(User.id == test_user.id))

    async with database.session() as session:
        remaining = await session.scalar(select(func.count()).select_from(Registration))
    assert remaining == 0
