"""
Pydantic schemas for event-related request/response validation.
"""

import re
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from app.schemas.common import UtcDatetime, reject_bool
from app.services.validation import MIN_EVENT_CAPACITY, MAX_EVENT_CAPACITY, ensure_utc

NUMERIC_STRING = re.compile(r"^\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?\s*$")


class EventCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    date_time: datetime
    location: str = Field(..., min_length=1, max_length=255)
    capacity: int = Field(..., ge=MIN_EVENT_CAPACITY, le=MAX_EVENT_CAPACITY)

    model_config = {"str_strip_whitespace": True}

    reject_bool_capacity = field_validator("capacity", mode="before")(reject_bool)

    @field_validator("date_time", mode="before")
    @classmethod
    def require_iso_string(cls, value):
        # pydantic would also accept unix timestamps, as numbers or numeric strings
        if isinstance(value, datetime):
            return value
        if not isinstance(value, str) or NUMERIC_STRING.match(value):
            raise ValueError("Date and time must be in ISO format")
        return value

    @field_validator("date_time")
    @classmethod
    def to_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)


class EventCreatedResponse(BaseModel):
    message: str
    event_id: int


class EventResponse(BaseModel):
    id: int
    title: str
    date_time: UtcDatetime
    location: str
    capacity: int
    created_at: UtcDatetime

    model_config = {"from_attributes": True}


class EventRegistrant(BaseModel):
    id: int
    name: str
    email: str
    registered_at: UtcDatetime

    model_config = {"from_attributes": True}


class EventDetailResponse(EventResponse):
    registrations: list[EventRegistrant]


class EventListResponse(BaseModel):
    count: int
    events: list[EventResponse]


class EventStatsResponse(BaseModel):
    event_id: int
    event_title: str
    total_registrations: int
    remaining_capacity: int
    percentage_used: int
    capacity: int
