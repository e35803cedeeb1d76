"""
Event model with a fixed, bounded capacity.

Key design decisions:
- Capacity is checked at the DB level too (1..1000) and never resized
- There is no denormalized seat counter; usage is COUNT(registrations),
  kept consistent by locking the event row while registering
- Indexes on `date_time` (upcoming listing) and `location` (tie-break sort)
"""

from sqlalchemy import Column, Integer, String, DateTime, Index, CheckConstraint
from sqlalchemy.orm import relationship

from app.db.base import Base, CreatedAtMixin
from app.services.validation import MIN_EVENT_CAPACITY, MAX_EVENT_CAPACITY


class Event(Base, CreatedAtMixin):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True)
    title = Column(String(255), nullable=False)
    date_time = Column(DateTime(timezone=True), nullable=False)
    location = Column(String(255), nullable=False)
    capacity = Column(Integer, nullable=False)

    registrations = relationship("Registration", back_populates="event", passive_deletes=True)

    __table_args__ = (
        CheckConstraint(
            f"capacity BETWEEN {MIN_EVENT_CAPACITY} AND {MAX_EVENT_CAPACITY}",
            name="check_event_capacity_range",
        ),
        Index("ix_events_date_time", "date_time"),
        Index("ix_events_location", "location"),
    )

    def __repr__(self) -> str:
        return f"<Event(id={self.id}, title={self.title}, capacity={self.capacity})>"
