"""
Registration endpoints: register, cancel and status lookup.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from app.core.exceptions import BadRequestError
from app.db.session import Database, get_db
from app.schemas.common import ErrorResponse
from app.schemas.registration import (
    RegistrationCancelledResponse,
    RegistrationCreatedResponse,
    RegistrationRequest,
    RegistrationStatusResponse,
)
from app.services.registration_service import cancel_registration, get_registration, register_for_event
from app.services.validation import MAX_RECORD_ID

router = APIRouter(prefix="/registrations", tags=["Registrations"])


@router.post(
    "",
    response_model=RegistrationCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def register_endpoint(data: RegistrationRequest, db: Database = Depends(get_db)):
    """
    Register a user for an event.

    Fails with 404 if the user or event does not exist, 400 if the event
    is in the past or full, and 409 if the user is already registered.
    """
    registration, event = await register_for_event(db, data.user_id, data.event_id)
    return RegistrationCreatedResponse(
        message="Registration successful",
        user_id=registration.user_id,
        event_id=registration.event_id,
        event_title=event.title,
    )


@router.delete(
    "",
    response_model=RegistrationCancelledResponse,
    responses={404: {"model": ErrorResponse}},
)
async def cancel_endpoint(data: RegistrationRequest, db: Database = Depends(get_db)):
    await cancel_registration(db, data.user_id, data.event_id)
    return RegistrationCancelledResponse(
        message="Registration cancelled successfully",
        user_id=data.user_id,
        event_id=data.event_id,
    )


@router.get("/status", response_model=RegistrationStatusResponse, responses={400: {"model": ErrorResponse}})
async def status_endpoint(
    user_id: Optional[int] = Query(None, ge=1, le=MAX_RECORD_ID),
    event_id: Optional[int] = Query(None, ge=1, le=MAX_RECORD_ID),
    db: Database = Depends(get_db),
):
    if user_id is None or event_id is None:
        raise BadRequestError("Both user_id and event_id are required")

    registration = await get_registration(db, user_id, event_id)
    return RegistrationStatusResponse(
        user_id=user_id,
        event_id=event_id,
        is_registered=registration is not None,
        registration_date=registration.registered_at if registration else None,
    )
