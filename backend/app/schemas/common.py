"""
Shared schema types: UTC datetimes, record ids and the error envelope.
"""

from datetime import datetime
from typing import Annotated, Any, Optional

from pydantic import AfterValidator, BaseModel, Field

from app.services.validation import MAX_RECORD_ID, ensure_utc

# Backends without timezone support hand back naive UTC values
UtcDatetime = Annotated[datetime, AfterValidator(ensure_utc)]

RecordId = Annotated[int, Field(ge=1, le=MAX_RECORD_ID)]


def reject_bool(value):
    """Lax int parsing would turn JSON true/false into 1/0."""
    if isinstance(value, bool):
        raise ValueError("Input should be a valid integer")
    return value


class ErrorResponse(BaseModel):
    error: str
    message: str
    details: Optional[list[dict[str, Any]]] = None
