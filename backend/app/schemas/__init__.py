from app.schemas.common import ErrorResponse
from app.schemas.user import UserCreate, UserResponse, UserListResponse, UserRegistrationsResponse
from app.schemas.event import EventCreate, EventDetailResponse, EventListResponse, EventStatsResponse
from app.schemas.registration import RegistrationRequest, RegistrationStatusResponse

__all__ = [
    "ErrorResponse",
    "UserCreate", "UserResponse", "UserListResponse", "UserRegistrationsResponse",
    "EventCreate", "EventDetailResponse", "EventListResponse", "EventStatsResponse",
    "RegistrationRequest", "RegistrationStatusResponse",
]
