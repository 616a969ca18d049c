import asyncio
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from loguru import logger
from sqlalchemy import text
from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import ArgumentError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_scoped_session,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from entity_store.models import Base
from entity_store.services.exceptions import UnsupportedDatabaseError

SUPPORTED_DRIVERS = ("sqlite+aiosqlite", "postgresql+asyncpg")


def parse_database_url(db_url: str) -> URL:
    """Parse a database URL, accepting only the supported async drivers.

    Raises:
        UnsupportedDatabaseError: the URL is malformed or its driver is not supported
    """
    try:
        url = make_url(db_url)
    except ArgumentError as e:
        raise UnsupportedDatabaseError(f"Invalid database URL: {db_url}") from e

    if url.drivername not in SUPPORTED_DRIVERS:
        raise UnsupportedDatabaseError(
            f"Unsupported database protocol: {url.drivername}. "
            f"Supported: {', '.join(SUPPORTED_DRIVERS)}"
        )
    return url


def check_database_url(db_url: str) -> str:
    """Return the URL unchanged if it names a supported driver."""
    parse_database_url(db_url)
    return db_url


def is_sqlite(session: AsyncSession) -> bool:
    return session.get_bind().dialect.name == "sqlite"


@asynccontextmanager
async def scoped_session(
    session_maker: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """One transaction, scoped to the current task.

    Commits when the block exits normally and rolls back when it raises. The
    error is re-raised and the session is closed either way. SQLite sessions
    get foreign key enforcement switched on first.
    """
    scoped = async_scoped_session(session_maker, scopefunc=asyncio.current_task)
    session = scoped()
    try:
        if is_sqlite(session):
            await session.execute(text("PRAGMA foreign_keys=ON"))
        yield session
        await session.commit()
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()
        await scoped.remove()


async def create_tables(engine: AsyncEngine) -> None:
    """Create missing tables. Existing tables are left as they are."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


def create_engine(db_url: str) -> AsyncEngine:
    """Create an async engine for a supported database URL."""
    url = parse_database_url(db_url)

    if url.get_backend_name() != "sqlite":
        return create_async_engine(url)

    connect_args = {"check_same_thread": False}
    if url.database in (None, "", ":memory:"):
        logger.info("Using in-memory SQLite database")
        # one shared connection, otherwise every connection sees an empty database
        return create_async_engine(url, connect_args=connect_args, poolclass=StaticPool)
    return create_async_engine(url, connect_args=connect_args)


@asynccontextmanager
async def engine_session_factory(
    db_url: str,
    init: bool = True,
) -> AsyncGenerator[tuple[AsyncEngine, async_sessionmaker[AsyncSession]], None]:
    """Open an engine and a session maker for it, disposing the engine on exit.

    With ``init`` the tables are created first.
    """
    engine = create_engine(db_url)
    logger.debug(f"Opened {engine.dialect.name} engine")
    try:
        if init:
            await create_tables(engine)
        yield engine, async_sessionmaker(engine, expire_on_commit=False)
    finally:
        await engine.dispose()
