"""
Transactional unit of work with ordered precondition checks.

Every mutating operation follows the same shape: open a transaction, run a
list of checks that read rows and may reject the request, then perform the
write. ``run_checked`` owns that shape so the services only describe the
checks and the mutation:

    await run_checked(
        db,
        "register_for_event",
        checks=[user_exists(user_id), event_exists(event_id, for_update=True), ...],
        mutation=insert_registration,
        failure_message="Failed to register for event",
    )

Checks and the mutation share a ``state`` dict, so an event loaded by one
check is visible to the next without a second query. Any exception rolls
the whole transaction back. Domain errors (``AppError``) propagate as-is;
anything else is logged with the operation name and re-raised as an
``InternalError`` carrying only the generic ``failure_message``.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Awaitable, Callable, Sequence, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import AppError, InternalError, NotFoundError
from app.core.logging import get_logger
from app.core.metrics import record_db_operation
from app.db.session import Database
from app.models.event import Event
from app.models.user import User

logger = get_logger(__name__)

T = TypeVar("T")
State = dict[str, Any]
Check = Callable[[AsyncSession, State], Awaitable[None]]
Mutation = Callable[[AsyncSession, State], Awaitable[T]]


@asynccontextmanager
async def translate_errors(operation: str, failure_message: str) -> AsyncIterator[None]:
    """Let domain errors through; turn everything else into InternalError."""
    try:
        yield
    except AppError:
        raise
    except Exception as exc:
        logger.exception("operation_failed", operation=operation, error_type=type(exc).__name__)
        raise InternalError(failure_message) from exc


async def run_checked(
    db: Database,
    operation: str,
    checks: Sequence[Check],
    mutation: Mutation[T],
    failure_message: str,
) -> T:
    try:
        async with translate_errors(operation, failure_message):
            async with db.transaction() as session:
                state: State = {}
                for check in checks:
                    await check(session, state)
                result = await mutation(session, state)
    except InternalError:
        record_db_operation(operation, "failed")
        raise
    except AppError:
        record_db_operation(operation, "rejected")
        raise

    record_db_operation(operation, "committed")
    return result


@asynccontextmanager
async def reading(db: Database, operation: str, failure_message: str) -> AsyncIterator[AsyncSession]:
    """Session for read-only operations with the same error translation."""
    async with translate_errors(operation, failure_message):
        async with db.session() as session:
            yield session


# Reusable checks

def user_exists(user_id: int) -> Check:
    async def check(session: AsyncSession, state: State) -> None:
        user = await session.scalar(select(User).where(User.id == user_id))
        if user is None:
            raise NotFoundError("User not found")
        state["user"] = user

    return check


def event_exists(event_id: int, for_update: bool = False) -> Check:
    """Load the event into state. ``for_update`` locks the row until commit."""

    async def check(session: AsyncSession, state: State) -> None:
        query = select(Event).where(Event.id == event_id)
        if for_update:
            query = query.with_for_update()
        event = await session.scalar(query)
        if event is None:
            raise NotFoundError("Event not found")
        state["event"] = event

    return check
