"""Async database engine, sessions and units of work."""
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from ..errors import InternalError, ReviewRosterError
from ..models.base import Base
from .unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


def _engine_kwargs(url: str, busy_timeout: float) -> dict:
    parsed = make_url(url)
    if parsed.get_backend_name() != "sqlite":
        return {"pool_pre_ping": True}

    kwargs: dict = {"connect_args": {"timeout": busy_timeout}}
    if parsed.database in (None, "", ":memory:"):
        # One shared connection, otherwise every checkout sees an empty database
        kwargs["poolclass"] = StaticPool
    return kwargs


def _setup_sqlite_events(engine: AsyncEngine) -> None:
    """Take over transaction control from the sqlite driver.

    The driver's implicit BEGIN is deferred, so two writers could both read
    the same rows before either takes the write lock. Every transaction is
    opened with BEGIN IMMEDIATE instead, which serializes writers for the
    whole read-modify-write cycle.
    """
    sync_engine = engine.sync_engine

    @event.listens_for(sync_engine, "connect")
    def on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(sync_engine, "begin")
    def on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


class Database:
    """Owns the async engine and hands out sessions and units of work."""

    def __init__(self, url: str, echo: bool = False, busy_timeout: float = 30.0):
        self.url = url
        kwargs = _engine_kwargs(url, busy_timeout)
        self.engine: AsyncEngine = create_async_engine(url, echo=echo, **kwargs)
        if self.is_sqlite:
            _setup_sqlite_events(self.engine)

        # An in-memory database lives on a single shared connection, so
        # sessions on it must take turns
        self._lock: Optional[asyncio.Lock] = (
            asyncio.Lock() if kwargs.get("poolclass") is StaticPool else None
        )

        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @property
    def is_sqlite(self) -> bool:
        return self.engine.dialect.name == "sqlite"

    @asynccontextmanager
    async def _exclusive(self) -> AsyncIterator[None]:
        if self._lock is None:
            yield
            return
        async with self._lock:
            yield

    async def create_tables(self) -> None:
        """Create all tables that don't exist yet."""
        async with self._exclusive():
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)

    async def drop_tables(self) -> None:
        async with self._exclusive():
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.drop_all)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Plain session for read-only work.

        Storage failures are re-raised as ``InternalError``.
        """
        async with self._exclusive():
            async with self.session_factory() as session:
                try:
                    yield session
                except SQLAlchemyError as e:
                    logger.error(f"Read failed: {e}")
                    raise InternalError() from e

    @asynccontextmanager
    async def unit_of_work(self) -> AsyncIterator[UnitOfWork]:
        """Open one atomic unit of work.

        Commits when the block exits normally. Any exception, including
        cancellation, rolls back every write issued inside the block.
        Storage failures are re-raised as ``InternalError``.

        Usage:
            async with db.unit_of_work() as uow:
                user = await uow.users.get("u1")
        """
        async with self._exclusive():
            async with self.session_factory() as session:
                uow = UnitOfWork(session)
                try:
                    yield uow
                    await session.commit()
                except ReviewRosterError:
                    await session.rollback()
                    raise
                except SQLAlchemyError as e:
                    await session.rollback()
                    logger.error(f"Unit of work failed, rolled back: {e}")
                    raise InternalError() from e
                except BaseException:
                    await session.rollback()
                    raise

    async def close(self) -> None:
        await self.engine.dispose()


# Global database instance
_db: Optional[Database] = None


def init_db(url: str, echo: bool = False, busy_timeout: float = 30.0) -> Database:
    """Initialize the global database instance."""
    global _db
    _db = Database(url, echo=echo, busy_timeout=busy_timeout)
    return _db


def get_db() -> Database:
    """Get the global database instance.

    Raises:
        RuntimeError: If the database has not been initialized
    """
    if _db is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")
    return _db
