from app.models.user import User
from app.models.event import Event
from app.models.registration import Registration

__all__ = ["User", "Event", "Registration"]
