"""
Registration model linking one user to one event.

Key design decisions:
- Unique constraint on (user_id, event_id): the storage-level backstop
  against two concurrent duplicate registrations
- Cancelling deletes the row; there is no status column
- ON DELETE CASCADE from both users and events
"""

from sqlalchemy import Column, Integer, ForeignKey, DateTime, UniqueConstraint, Index, func
from sqlalchemy.orm import relationship

from app.db.base import Base, utc_now


class Registration(Base):
    __tablename__ = "registrations"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    event_id = Column(Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False)
    registered_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=func.now(),
    )

    user = relationship("User", back_populates="registrations")
    event = relationship("Event", back_populates="registrations")

    __table_args__ = (
        UniqueConstraint("user_id", "event_id", name="uq_registration_user_event"),
        Index("ix_registrations_user_id", "user_id"),
        Index("ix_registrations_event_id", "event_id"),
    )

    def __repr__(self) -> str:
        return f"<Registration(id={self.id}, user={self.user_id}, event={self.event_id})>"
