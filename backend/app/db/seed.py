"""
Create the schema and load sample data.

    python -m app.db.seed

Safe to run repeatedly for users (existing emails are skipped); every run
adds the sample events again, dated relative to now.
"""

import asyncio
from datetime import datetime, timedelta, timezone

from sqlalchemy import select

from app.core.config import get_settings
from app.core.logging import get_logger, setup_logging
from app.db.session import Database
from app.models.event import Event
from app.models.user import User

logger = get_logger(__name__)

SAMPLE_USERS = [
    ("John Doe", "john@example.com"),
    ("Jane Smith", "jane@example.com"),
    ("Bob Johnson", "bob@example.com"),
    ("Alice Brown", "alice@example.com"),
]

# (title, days from now, location, capacity)
SAMPLE_EVENTS = [
    ("Tech Conference", 7, "San Francisco", 500),
    ("Music Festival", 14, "Los Angeles", 1000),
    ("Startup Meetup", 3, "New York", 200),
    ("Workshop: Web Development", 1, "Chicago", 50),
]


async def seed(db: Database) -> None:
    await db.create_all()
    logger.info("schema_ready")

    now = datetime.now(timezone.utc)
    async with db.transaction() as session:
        existing = set(await session.scalars(select(User.email)))
        new_users = [
            User(name=name, email=email)
            for name, email in SAMPLE_USERS
            if email not in existing
        ]
        session.add_all(new_users)
        session.add_all(
            Event(
                title=title,
                date_time=now + timedelta(days=days),
                location=location,
                capacity=capacity,
            )
            for title, days, location, capacity in SAMPLE_EVENTS
        )

    logger.info("sample_data_inserted", users=len(new_users), events=len(SAMPLE_EVENTS))


async def _main() -> None:
    db = Database.from_settings(get_settings())
    try:
        await seed(db)
    finally:
        await db.dispose()


def main() -> None:
    setup_logging()
    asyncio.run(_main())


if __name__ == "__main__":
    main()
