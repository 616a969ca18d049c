"""Base repository implementation with generic CRUD operations."""

from typing import Any, Optional, Sequence, Type

from loguru import logger
from sqlalchemy import Executable, Result, func, inspect, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from entity_store import db
from entity_store.models import Base


class Repository[T: Base]:
    """Base repository implementation with generic CRUD operations.

    Every call runs in its own scoped session, one transaction per call.
    """

    def __init__(self, session_maker: async_sessionmaker[AsyncSession], Model: Type[T]):
        self.session_maker = session_maker
        self.Model = Model
        self.mapper = inspect(self.Model).mapper
        self.valid_columns = [column.key for column in self.mapper.columns]

    async def find_all(self) -> Sequence[T]:
        """Fetch all records of the model."""
        result = await self.execute_query(select(self.Model).order_by(self.Model.created_at))
        return result.scalars().all()

    async def find_by_id(self, entity_id: Any) -> Optional[T]:
        """Fetch a record by its primary key."""
        async with db.scoped_session(self.session_maker) as session:
            return await session.get(self.Model, entity_id)

    async def create(self, data: dict) -> T:
        """Create a new record from the provided data, ignoring unknown keys."""
        async with db.scoped_session(self.session_maker) as session:
            model = self.Model(**self.model_data(data))
            session.add(model)
            await session.flush()
            await session.refresh(model)
            logger.debug(f"Created {model}")
            return model

    async def update(self, entity_id: Any, data: dict) -> Optional[T]:
        """Update a record with the given data, returns None if it does not exist."""
        async with db.scoped_session(self.session_maker) as session:
            model = await session.get(self.Model, entity_id)
            if model is None:
                return None
            for key, value in self.model_data(data).items():
                setattr(model, key, value)
            await session.flush()
            await session.refresh(model)
            logger.debug(f"Updated {model}")
            return model

    async def count(self, query: Executable | None = None) -> int:
        """Count records in the model's table."""
        if query is None:
            query = select(func.count()).select_from(self.Model)
        result = await self.execute_query(query)
        scalar = result.scalar()
        return scalar if scalar is not None else 0

    async def execute_query(self, query: Executable) -> Result[Any]:
        """Execute a query asynchronously."""
        async with db.scoped_session(self.session_maker) as session:
            return await session.execute(query)

    def model_data(self, data: dict) -> dict:
        return {k: v for k, v in data.items() if k in self.valid_columns}
