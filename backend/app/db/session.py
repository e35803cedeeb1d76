"""
Database handle: async engine, session factory and scoped transactions.

A ``Database`` is constructed once at application startup (see
``app.main.lifespan``), kept on ``app.state`` and handed to the services
through the ``get_db`` dependency. Nothing in the package holds a global
engine, so tests can swap in their own handle with
``app.dependency_overrides[get_db]``.

ISOLATION LEVEL
===============
Transactions run at the backend default, READ COMMITTED on PostgreSQL.
The registration flow takes a row lock on the event (``SELECT ... FOR
UPDATE``) before counting registrations, so two registrations for the same
event serialize on that row and the capacity check cannot be overshot.
SQLite ignores FOR UPDATE, and its driver would otherwise defer BEGIN
until the first INSERT, letting every concurrent request count before any
lock is held. On SQLite the handle therefore takes over transaction
control and opens every transaction with BEGIN IMMEDIATE, which acquires
the database write lock up front: registrations serialize as a whole,
checks included.

On PostgreSQL every transaction also sets ``statement_timeout`` so a
blocked lock wait cannot hold a request forever.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import Request
from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import Settings
from app.core.logging import get_logger
from app.db.base import Base

logger = get_logger(__name__)


def _configure_sqlite_connection(dbapi_connection, connection_record) -> None:
    # SQLite leaves ON DELETE CASCADE inert unless this pragma is on
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()
    # Stop the driver from issuing its own deferred BEGIN
    dbapi_connection.isolation_level = None


def _begin_sqlite_immediate(conn) -> None:
    conn.exec_driver_sql("BEGIN IMMEDIATE")


class Database:
    def __init__(
        self,
        url: str,
        *,
        pool_size: int = 20,
        max_overflow: int = 10,
        pool_timeout: int = 30,
        pool_recycle: int = 1800,
        statement_timeout_ms: Optional[int] = None,
        echo: bool = False,
    ):
        engine_kwargs = {"echo": echo, "pool_pre_ping": True}
        if url.startswith("sqlite"):
            # Seconds a BEGIN IMMEDIATE waits for the write lock
            engine_kwargs["connect_args"] = {"timeout": pool_timeout}
        else:
            engine_kwargs.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_timeout=pool_timeout,
                pool_recycle=pool_recycle,
            )

        self.engine = create_async_engine(url, **engine_kwargs)
        self.session_factory = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False
        )
        self.statement_timeout_ms = statement_timeout_ms

        if self.dialect == "sqlite":
            event.listen(self.engine.sync_engine, "connect", _configure_sqlite_connection)
            event.listen(self.engine.sync_engine, "begin", _begin_sqlite_immediate)

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(
            settings.DATABASE_URL,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_timeout=settings.DB_POOL_TIMEOUT,
            pool_recycle=settings.DB_POOL_RECYCLE,
            statement_timeout_ms=settings.DB_STATEMENT_TIMEOUT_MS,
            echo=settings.DEBUG,
        )

    @property
    def dialect(self) -> str:
        return self.engine.dialect.name

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Read-only session; closed (and rolled back) on exit."""
        async with self.session_factory() as session:
            yield session

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncSession]:
        """
        Session with an open transaction.
        Commits when the block exits cleanly, rolls back on any exception,
        and always returns the connection to the pool.
        """
        async with self.session_factory() as session:
            async with session.begin():
                if self.statement_timeout_ms and self.dialect == "postgresql":
                    await session.execute(
                        text(f"SET LOCAL statement_timeout = {int(self.statement_timeout_ms)}")
                    )
                yield session

    async def create_all(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def drop_all(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def dispose(self) -> None:
        await self.engine.dispose()
        logger.info("database_disposed")


def get_db(request: Request) -> Database:
    """FastAPI dependency returning the handle created at startup."""
    return request.app.state.db
