"""
Event service: creation, details, upcoming listing and utilization stats.
"""

from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError
from app.core.logging import get_logger
from app.db.session import Database
from app.models.event import Event
from app.models.registration import Registration
from app.models.user import User
from app.schemas.event import EventCreate
from app.services.registration_service import count_registrations
from app.services.unit_of_work import State, reading, run_checked
from app.services.validation import ensure_utc, validate_new_event

logger = get_logger(__name__)


async def create_event(db: Database, event_data: EventCreate) -> Event:
    """Create an event after the business rules pass; nothing is written otherwise."""
    validate_new_event(event_data.capacity, event_data.date_time)

    async def insert_event(session: AsyncSession, state: State) -> Event:
        event = Event(
            title=event_data.title,
            date_time=event_data.date_time,
            location=event_data.location,
            capacity=event_data.capacity,
        )
        session.add(event)
        await session.flush()
        return event

    event = await run_checked(
        db,
        "create_event",
        checks=[],
        mutation=insert_event,
        failure_message="Failed to create event",
    )
    logger.info("event_created", event_id=event.id, capacity=event.capacity)
    return event


async def _get_event_or_404(session: AsyncSession, event_id: int) -> Event:
    event = await session.scalar(select(Event).where(Event.id == event_id))
    if event is None:
        raise NotFoundError("Event not found")
    return event


async def get_event_details(db: Database, event_id: int) -> tuple[Event, list[Any]]:
    """
    Get an event and its registrants.
    Registrants are ordered by registration time, earliest first.
    """
    async with reading(db, "get_event_details", "Failed to get event details") as session:
        event = await _get_event_or_404(session, event_id)
        result = await session.execute(
            select(User.id, User.name, User.email, Registration.registered_at)
            .join(User, Registration.user_id == User.id)
            .where(Registration.event_id == event_id)
            .order_by(Registration.registered_at.asc(), Registration.id.asc())
        )
        return event, list(result.all())


def sort_upcoming_events(events: list[Event]) -> list[Event]:
    """Date ascending, then location by plain string comparison."""
    return sorted(events, key=lambda e: (ensure_utc(e.date_time), e.location))


async def list_upcoming_events(db: Database, now: Optional[datetime] = None) -> list[Event]:
    """
    List events starting strictly after ``now``.
    Uses the ix_events_date_time index for the range filter. The location
    tie-break is applied in Python so it does not depend on the database
    collation.
    """
    now = now or datetime.now(timezone.utc)
    async with reading(db, "list_upcoming_events", "Failed to list upcoming events") as session:
        result = await session.scalars(
            select(Event)
            .where(Event.date_time > now)
            .order_by(Event.date_time.asc(), Event.location.asc())
        )
        return sort_upcoming_events(list(result.all()))


def utilization_percentage(total_registrations: int, capacity: int) -> int:
    """Percentage of capacity used, rounded half up (12.5 -> 13)."""
    ratio = Decimal(total_registrations * 100) / Decimal(capacity)
    return int(ratio.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def compute_event_stats(event: Event, total_registrations: int) -> dict:
    return {
        "event_id": event.id,
        "event_title": event.title,
        "total_registrations": total_registrations,
        "remaining_capacity": event.capacity - total_registrations,
        "percentage_used": utilization_percentage(total_registrations, event.capacity),
        "capacity": event.capacity,
    }


async def get_event_stats(db: Database, event_id: int) -> dict:
    async with reading(db, "get_event_stats", "Failed to get event stats") as session:
        event = await _get_event_or_404(session, event_id)
        total = await count_registrations(session, event_id)
        return compute_event_stats(event, total)
