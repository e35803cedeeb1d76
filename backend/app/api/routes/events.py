"""
Event endpoints.
"""

from fastapi import APIRouter, Depends, Path, status

from app.db.session import Database, get_db
from app.schemas.common import ErrorResponse
from app.schemas.event import (
    EventCreate,
    EventCreatedResponse,
    EventDetailResponse,
    EventListResponse,
    EventRegistrant,
    EventResponse,
    EventStatsResponse,
)
from app.services.event_service import create_event, get_event_details, get_event_stats, list_upcoming_events
from app.services.validation import MAX_RECORD_ID

router = APIRouter(prefix="/events", tags=["Events"])


@router.post(
    "",
    response_model=EventCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def create_event_endpoint(event_data: EventCreate, db: Database = Depends(get_db)):
    """Create an event. The date must be in the future and capacity within 1-1000."""
    event = await create_event(db, event_data)
    return EventCreatedResponse(message="Event created successfully", event_id=event.id)


@router.get("", response_model=EventListResponse)
async def list_events_endpoint(db: Database = Depends(get_db)):
    """
    List upcoming events.
    Sorted by date, then by location for events starting at the same time.
    """
    events = await list_upcoming_events(db)
    return EventListResponse(
        count=len(events),
        events=[EventResponse.model_validate(e) for e in events],
    )


@router.get("/{event_id}", response_model=EventDetailResponse, responses={404: {"model": ErrorResponse}})
async def get_event_endpoint(
    event_id: int = Path(..., ge=1, le=MAX_RECORD_ID),
    db: Database = Depends(get_db),
):
    """Get an event with its registrants, earliest registration first."""
    event, registrants = await get_event_details(db, event_id)
    return EventDetailResponse(
        **EventResponse.model_validate(event).model_dump(),
        registrations=[EventRegistrant.model_validate(r) for r in registrants],
    )


@router.get(
    "/{event_id}/stats",
    response_model=EventStatsResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_event_stats_endpoint(
    event_id: int = Path(..., ge=1, le=MAX_RECORD_ID),
    db: Database = Depends(get_db),
):
    stats = await get_event_stats(db, event_id)
    return EventStatsResponse(**stats)
