"""
Pydantic schemas for registration-related request/response validation.
"""

from typing import Optional

from pydantic import BaseModel, field_validator

from app.schemas.common import RecordId, UtcDatetime, reject_bool


class RegistrationRequest(BaseModel):
    user_id: RecordId
    event_id: RecordId

    reject_bool_ids = field_validator("user_id", "event_id", mode="before")(reject_bool)


class RegistrationCreatedResponse(BaseModel):
    message: str
    user_id: int
    event_id: int
    event_title: str


class RegistrationCancelledResponse(BaseModel):
    message: str
    user_id: int
    event_id: int


class RegistrationStatusResponse(BaseModel):
    user_id: int
    event_id: int
    is_registered: bool
    registration_date: Optional[UtcDatetime] = None
