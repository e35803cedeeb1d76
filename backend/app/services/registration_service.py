"""
Registration service: the consistency rules for joining an event.

CONCURRENCY STRATEGY: Row Lock on the Event
===========================================

Problem:
  Registrations are counted, not stored in a counter. Two users register
  for the last free place at the same time; both count capacity - 1
  registrations, both insert. Result: the event is over capacity, and
  no constraint in the schema can catch it.

Solution:
  The event row is read with SELECT ... FOR UPDATE inside the registration
  transaction. A second registration for the same event blocks on that
  lock until the first commits, then counts the committed row.

  1. Lock the event row (also loads date_time and capacity)
  2. Reject past events, duplicates and full events
  3. INSERT the registration and commit, releasing the lock

  This approach:
  - Serializes only registrations for the same event
  - Works at the default READ COMMITTED isolation level
  - UNIQUE(user_id, event_id) remains the backstop against duplicates

Alternative approaches considered:
  - SERIALIZABLE isolation: correct, but every conflict becomes a retry.
  - Advisory lock keyed by event_id: equivalent, PostgreSQL-only.
  - Capacity trigger: moves business rules into the schema.
"""

import time
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import AppError, BadRequestError, ConflictError, NotFoundError
from app.core.logging import get_logger
from app.core.metrics import record_registration_attempt, registration_latency
from app.db.session import Database
from app.models.event import Event
from app.models.registration import Registration
from app.services.unit_of_work import State, Check, event_exists, reading, run_checked, user_exists
from app.services.validation import is_event_full, is_event_in_past

logger = get_logger(__name__)

ALREADY_REGISTERED = "User is already registered for this event"


def event_not_in_past() -> Check:
    async def check(session: AsyncSession, state: State) -> None:
        if is_event_in_past(state["event"].date_time):
            raise BadRequestError("Cannot register for past events", reason="past")

    return check


def not_already_registered(user_id: int, event_id: int) -> Check:
    async def check(session: AsyncSession, state: State) -> None:
        existing = await session.scalar(
            select(Registration.id).where(
                Registration.user_id == user_id,
                Registration.event_id == event_id,
            )
        )
        if existing is not None:
            raise ConflictError(ALREADY_REGISTERED)

    return check


def event_has_capacity(event_id: int) -> Check:
    async def check(session: AsyncSession, state: State) -> None:
        count = await count_registrations(session, event_id)
        if is_event_full(count, state["event"].capacity):
            logger.warning(
                "registration_rejected_full",
                event_id=event_id,
                registrations=count,
                capacity=state["event"].capacity,
            )
            raise BadRequestError("Event is full", reason="full")

    return check


def registration_exists(user_id: int, event_id: int) -> Check:
    async def check(session: AsyncSession, state: State) -> None:
        registration = await session.scalar(
            select(Registration).where(
                Registration.user_id == user_id,
                Registration.event_id == event_id,
            )
        )
        if registration is None:
            raise NotFoundError("User is not registered for this event")
        state["registration"] = registration

    return check


async def count_registrations(session: AsyncSession, event_id: int) -> int:
    result = await session.scalar(
        select(func.count()).select_from(Registration).where(Registration.event_id == event_id)
    )
    return int(result or 0)


def _attempt_status(exc: AppError) -> str:
    if isinstance(exc, NotFoundError):
        return "not_found"
    if isinstance(exc, ConflictError):
        return "conflict"
    if isinstance(exc, BadRequestError):
        return exc.reason or "rejected"
    return "error"


async def register_for_event(db: Database, user_id: int, event_id: int) -> tuple[Registration, Event]:
    """
    Register a user for an event in a single transaction.

    Checks run in order and the first failure wins:
    user exists -> event exists (locked) -> event not past ->
    not already registered -> event not full.
    """

    async def insert_registration(session: AsyncSession, state: State) -> tuple[Registration, Event]:
        registration = Registration(user_id=user_id, event_id=event_id)
        session.add(registration)
        try:
            await session.flush()
        except IntegrityError:
            # Lost a duplicate race to a concurrent request
            raise ConflictError(ALREADY_REGISTERED)
        return registration, state["event"]

    start_time = time.perf_counter()
    try:
        registration, event = await run_checked(
            db,
            "register_for_event",
            checks=[
                user_exists(user_id),
                event_exists(event_id, for_update=True),
                event_not_in_past(),
                not_already_registered(user_id, event_id),
                event_has_capacity(event_id),
            ],
            mutation=insert_registration,
            failure_message="Failed to register for event",
        )
    except AppError as exc:
        record_registration_attempt(_attempt_status(exc))
        logger.info(
            "registration_rejected",
            user_id=user_id,
            event_id=event_id,
            reason=exc.message,
        )
        raise
    finally:
        registration_latency.observe(time.perf_counter() - start_time)

    record_registration_attempt("success")
    logger.info(
        "registration_created",
        registration_id=registration.id,
        user_id=user_id,
        event_id=event_id,
    )
    return registration, event


async def cancel_registration(db: Database, user_id: int, event_id: int) -> None:
    """Delete a registration. Past events can still be cancelled."""

    async def delete_registration(session: AsyncSession, state: State) -> None:
        await session.delete(state["registration"])
        await session.flush()

    await run_checked(
        db,
        "cancel_registration",
        checks=[
            user_exists(user_id),
            event_exists(event_id),
            registration_exists(user_id, event_id),
        ],
        mutation=delete_registration,
        failure_message="Failed to cancel registration",
    )
    logger.info("registration_cancelled", user_id=user_id, event_id=event_id)


async def get_registration(db: Database, user_id: int, event_id: int) -> Optional[Registration]:
    """Plain read; no existence checks on the user or event."""
    async with reading(db, "get_registration_status", "Failed to get registration status") as session:
        return await session.scalar(
            select(Registration).where(
                Registration.user_id == user_id,
                Registration.event_id == event_id,
            )
        )
