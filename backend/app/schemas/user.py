"""
Pydantic schemas for user-related request/response validation.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.schemas.common import UtcDatetime


class UserCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr

    model_config = {"str_strip_whitespace": True}

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.lower()


class UserSummary(BaseModel):
    id: int
    name: str
    email: str

    model_config = {"from_attributes": True}


class UserResponse(UserSummary):
    created_at: UtcDatetime


class UserCreatedResponse(BaseModel):
    message: str
    user: UserSummary


class UserListResponse(BaseModel):
    count: int
    users: list[UserResponse]


class UserRegistrationItem(BaseModel):
    event_id: int
    title: str
    date_time: UtcDatetime
    location: str
    capacity: int
    registered_at: UtcDatetime

    model_config = {"from_attributes": True}


class UserRegistrationsResponse(BaseModel):
    user_id: int
    registrations: list[UserRegistrationItem]
