"""
User service: creation, lookup and a user's registrations.
"""

from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError, NotFoundError
from app.core.logging import get_logger
from app.db.session import Database
from app.models.event import Event
from app.models.registration import Registration
from app.models.user import User
from app.schemas.user import UserCreate
from app.services.unit_of_work import State, reading, run_checked

logger = get_logger(__name__)


async def create_user(db: Database, user_data: UserCreate) -> User:
    """
    Create a user.
    Duplicate emails are detected by the unique index on insert rather than
    a prior lookup, so two concurrent sign-ups cannot both succeed.
    """

    async def insert_user(session: AsyncSession, state: State) -> User:
        user = User(name=user_data.name, email=user_data.email)
        session.add(user)
        try:
            await session.flush()
        except IntegrityError:
            logger.warning("user_creation_failed", reason="email_exists")
            raise ConflictError("User with this email already exists")
        return user

    user = await run_checked(
        db,
        "create_user",
        checks=[],
        mutation=insert_user,
        failure_message="Failed to create user",
    )
    logger.info("user_created", user_id=user.id)
    return user


async def _get_user_or_404(session: AsyncSession, user_id: int) -> User:
    user = await session.scalar(select(User).where(User.id == user_id))
    if user is None:
        raise NotFoundError("User not found")
    return user


async def get_user(db: Database, user_id: int) -> User:
    async with reading(db, "get_user", "Failed to get user details") as session:
        return await _get_user_or_404(session, user_id)


async def list_users(db: Database) -> list[User]:
    """All users, newest first."""
    async with reading(db, "list_users", "Failed to list users") as session:
        result = await session.scalars(
            select(User).order_by(User.created_at.desc(), User.id.desc())
        )
        return list(result.all())


async def get_user_registrations(db: Database, user_id: int) -> list[Any]:
    """A user's registrations joined to their events, soonest event first."""
    async with reading(db, "get_user_registrations", "Failed to get user registrations") as session:
        await _get_user_or_404(session, user_id)
        result = await session.execute(
            select(
                Event.id.label("event_id"),
                Event.title,
                Event.date_time,
                Event.location,
                Event.capacity,
                Registration.registered_at,
            )
            .join(Event, Registration.event_id == Event.id)
            .where(Registration.user_id == user_id)
            .order_by(Event.date_time.asc(), Event.id.asc())
        )
        return list(result.all())
