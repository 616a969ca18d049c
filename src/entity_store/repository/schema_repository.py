"""Repository for managing Schema objects."""

from typing import Optional, Sequence

from loguru import logger
from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from entity_store import db
from entity_store.models import Entity, Relationship, Schema
from entity_store.repository.repository import Repository


class SchemaRepository(Repository[Schema]):
    """Repository for Schema model."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        super().__init__(session_maker, Schema)

    async def find_all(self) -> Sequence[Schema]:
        logger.debug("Retrieving all schemas")
        return await super().find_all()

    async def find_by_id(self, schema_id: str) -> Optional[Schema]:
        logger.debug(f"Searching for schema with id: {schema_id}")
        return await super().find_by_id(schema_id)

    async def delete_by_id(self, schema_id: str) -> bool:
        """Delete a schema with its entities and every edge touching them."""
        logger.debug(f"Deleting schema with id: {schema_id}")
        async with db.scoped_session(self.session_maker) as session:
            entity_ids = select(Entity.id).where(Entity.schema_id == schema_id)
            await session.execute(
                delete(Relationship).where(
                    or_(
                        Relationship.tail_id.in_(entity_ids),
                        Relationship.head_id.in_(entity_ids),
                    )
                )
            )
            entities = await session.execute(delete(Entity).where(Entity.schema_id == schema_id))
            result = await session.execute(delete(Schema).where(Schema.id == schema_id))

            deleted = result.rowcount > 0  # pyright: ignore [reportAttributeAccessIssue]
            if deleted:
                logger.info(
                    f"Deleted schema {schema_id} with {entities.rowcount} entities"  # pyright: ignore [reportAttributeAccessIssue]
                )
            return deleted
