"""Application context shared by every request."""

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncGenerator

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from entity_store import db
from entity_store.config import StoreConfig
from entity_store.services import EntityValidationService


@dataclass
class StoreContext:
    """Everything a request handler needs, built once at startup."""

    config: StoreConfig
    engine: AsyncEngine
    session_maker: async_sessionmaker[AsyncSession]
    validation: EntityValidationService


@asynccontextmanager
async def store_context(config: StoreConfig) -> AsyncGenerator[StoreContext, None]:
    """Open the database and build the context, disposing the engine on exit.

    Raises:
        UnsupportedDatabaseError: the configured database URL is not supported
    """
    db_url = db.check_database_url(config.resolved_database_url)
    logger.info(f"Initializing repositories with driver: {db_url.split('://', 1)[0]}")

    async with db.engine_session_factory(db_url) as (engine, session_maker):
        yield StoreContext(
            config=config,
            engine=engine,
            session_maker=session_maker,
            validation=EntityValidationService(),
        )
