"""
Business validation rules for events and registrations.

Structural checks (types, lengths, email format) live in the pydantic
schemas. The rules here are the second tier and the single source of truth
for capacity bounds and the temporal rules; the schemas import the bounds
from this module. Everything here is pure so it runs before any database
interaction.
"""

from datetime import datetime, timezone
from typing import Optional

from app.core.exceptions import ValidationError

MIN_EVENT_CAPACITY = 1
MAX_EVENT_CAPACITY = 1000

# Upper bound of the INTEGER primary keys
MAX_RECORD_ID = 2**31 - 1

CAPACITY_MESSAGE = (
    f"Capacity must be a positive integer between {MIN_EVENT_CAPACITY} and {MAX_EVENT_CAPACITY}"
)


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def validate_event_capacity(capacity) -> None:
    if (
        isinstance(capacity, bool)
        or not isinstance(capacity, int)
        or not MIN_EVENT_CAPACITY <= capacity <= MAX_EVENT_CAPACITY
    ):
        raise ValidationError(CAPACITY_MESSAGE)


def validate_event_date(date_time: datetime, now: Optional[datetime] = None) -> None:
    if is_event_in_past(date_time, now):
        raise ValidationError("Event date must be in the future")


def validate_new_event(capacity, date_time: datetime, now: Optional[datetime] = None) -> None:
    validate_event_capacity(capacity)
    validate_event_date(date_time, now)


def is_event_in_past(date_time: datetime, now: Optional[datetime] = None) -> bool:
    """An event whose start is not strictly after ``now`` counts as past."""
    now = now or datetime.now(timezone.utc)
    return ensure_utc(date_time) <= ensure_utc(now)


def is_event_full(current_registrations: int, capacity: int) -> bool:
    return current_registrations >= capacity
