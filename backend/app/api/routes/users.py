"""
User endpoints.
"""

from fastapi import APIRouter, Depends, Path, status

from app.db.session import Database, get_db
from app.schemas.common import ErrorResponse
from app.schemas.user import (
    UserCreate,
    UserCreatedResponse,
    UserListResponse,
    UserRegistrationItem,
    UserRegistrationsResponse,
    UserResponse,
    UserSummary,
)
from app.services.user_service import create_user, get_user, get_user_registrations, list_users
from app.services.validation import MAX_RECORD_ID

router = APIRouter(prefix="/users", tags=["Users"])


@router.post(
    "",
    response_model=UserCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def create_user_endpoint(user_data: UserCreate, db: Database = Depends(get_db)):
    """Create a user. Emails are compared case-insensitively."""
    user = await create_user(db, user_data)
    return UserCreatedResponse(
        message="User created successfully",
        user=UserSummary.model_validate(user),
    )


@router.get("", response_model=UserListResponse)
async def list_users_endpoint(db: Database = Depends(get_db)):
    """List all users, newest first."""
    users = await list_users(db)
    return UserListResponse(
        count=len(users),
        users=[UserResponse.model_validate(u) for u in users],
    )


@router.get("/{user_id}", response_model=UserResponse, responses={404: {"model": ErrorResponse}})
async def get_user_endpoint(
    user_id: int = Path(..., ge=1, le=MAX_RECORD_ID),
    db: Database = Depends(get_db),
):
    user = await get_user(db, user_id)
    return user


@router.get(
    "/{user_id}/registrations",
    response_model=UserRegistrationsResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_user_registrations_endpoint(
    user_id: int = Path(..., ge=1, le=MAX_RECORD_ID),
    db: Database = Depends(get_db),
):
    """Events the user is registered for, soonest first."""
    rows = await get_user_registrations(db, user_id)
    return UserRegistrationsResponse(
        user_id=user_id,
        registrations=[UserRegistrationItem.model_validate(r) for r in rows],
    )
