"""Repository for managing entities of one schema."""

from typing import Any, Dict, List, Mapping, Optional, Sequence

from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from entity_store import db
from entity_store.models import Entity, Schema as SchemaModel
from entity_store.repository.relationship_repository import RelationshipRepository
from entity_store.repository.repository import Repository
from entity_store.schemas import Attribute, EntityRecord, Schema
from entity_store.services.exceptions import EntityNotFoundError, RelationshipTargetError
from entity_store.services.resolution import (
    partition_payload,
    reference_ids,
    require_relationship,
    shape_value,
)


def entity_record(entity: Entity) -> EntityRecord:
    """Scalar view of an entity: id, schemaId and the stored scalar values."""
    return {"id": entity.id, "schemaId": entity.schema_id, **(entity.fields or {})}


class EntityRepository(Repository[Entity]):
    """Repository for the entities of one schema.

    Reads return entity records with relationship attributes resolved one
    level deep. Writes store scalar values on the entity row and replace the
    edge set of every relationship attribute present in the payload, all in
    one transaction.
    """

    def __init__(self, session_maker: async_sessionmaker[AsyncSession], schema: Schema):
        super().__init__(session_maker, Entity)
        self.schema = schema
        self.relationships = RelationshipRepository(session_maker)

    async def find_all(self) -> List[EntityRecord]:  # pyright: ignore [reportIncompatibleMethodOverride]
        """All entities of the schema, resolved."""
        logger.debug(f"Retrieving all entities for schema: {self.schema.id}")
        async with db.scoped_session(self.session_maker) as session:
            query = (
                select(Entity)
                .where(Entity.schema_id == self.schema.id)
                .order_by(Entity.created_at, Entity.id)
            )
            result = await session.execute(query)
            return [await self.resolve(session, entity) for entity in result.scalars().all()]

    async def find_by_id(self, entity_id: str) -> Optional[EntityRecord]:  # pyright: ignore [reportIncompatibleMethodOverride]
        """Find an entity of this schema by id, resolved."""
        logger.debug(f"Searching for entity with id: {entity_id}")
        async with db.scoped_session(self.session_maker) as session:
            entity = await self.get_model(session, entity_id)
            if entity is None:
                return None
            return await self.resolve(session, entity)

    async def create(self, payload: Mapping[str, Any]) -> EntityRecord:  # pyright: ignore [reportIncompatibleMethodOverride]
        """Create an entity from a validated payload.

        The store assigns the id. A payload ``id`` is ignored.
        """
        scalars, relationships = partition_payload(self.schema, payload)
        targets = self.relationship_targets(relationships)

        async with db.scoped_session(self.session_maker) as session:
            entity = Entity(schema_id=self.schema.id, fields=scalars)
            session.add(entity)
            await session.flush()

            await self.write_relationships(session, entity, targets)
            logger.debug(f"Created {entity}")
            return await self.resolve(session, entity)

    async def update(self, entity_id: str, payload: Mapping[str, Any]) -> Optional[EntityRecord]:  # pyright: ignore [reportIncompatibleMethodOverride]
        """Update an entity from a validated payload.

        Scalar values are replaced as a whole. Relationship attributes present
        in the payload have their edge sets replaced, absent ones are left
        alone. Returns None if the entity does not exist.
        """
        scalars, relationships = partition_payload(self.schema, payload)
        targets = self.relationship_targets(relationships)

        async with db.scoped_session(self.session_maker) as session:
            entity = await self.get_model(session, entity_id)
            if entity is None:
                return None

            entity.fields = scalars
            await session.flush()

            await self.write_relationships(session, entity, targets)
            logger.debug(f"Updated {entity}")
            return await self.resolve(session, entity)

    async def delete_by_id(self, entity_id: str) -> bool:
        """Delete an entity and every edge it takes part in."""
        logger.debug(f"Deleting entity with id: {entity_id}")
        async with db.scoped_session(self.session_maker) as session:
            entity = await self.get_model(session, entity_id)
            if entity is None:
                return False
            await self.relationships.delete_for_entity(session, entity.id)
            await session.delete(entity)
            return True

    async def get_relationship(self, entity_id: str, name: str) -> Any:
        """Read one relationship attribute: an entity, None, or a list of entities."""
        attribute = require_relationship(self.schema, name)

        async with db.scoped_session(self.session_maker) as session:
            entity = await self.require_model(session, entity_id)
            targets = await self.resolve_relationship(session, entity, attribute)
            return shape_value(attribute, targets or [])

    async def set_relationship(self, entity_id: str, name: str, value: Any) -> Any:
        """Replace one relationship attribute and return its resolved value.

        The value shape is checked against the cardinality before anything is
        written.
        """
        attribute = require_relationship(self.schema, name)
        target_ids = reference_ids(attribute, value)

        async with db.scoped_session(self.session_maker) as session:
            entity = await self.require_model(session, entity_id)
            await self.write_relationships(session, entity, {attribute.name: target_ids})
            targets = await self.resolve_relationship(session, entity, attribute)
            return shape_value(attribute, targets or [])

    def relationship_targets(self, relationships: Mapping[str, Any]) -> Dict[str, List[str]]:
        """Check shapes and collect target ids, before any write happens."""
        return {
            name: reference_ids(self.schema.attribute_map[name], value)
            for name, value in relationships.items()
        }

    async def write_relationships(
        self, session: AsyncSession, entity: Entity, targets: Mapping[str, List[str]]
    ) -> None:
        for name, target_ids in targets.items():
            attribute = self.schema.attribute_map[name]
            await self.check_targets(session, attribute, target_ids)
            await self.relationships.replace_targets(session, entity.id, name, target_ids)

    async def check_targets(
        self, session: AsyncSession, attribute: Attribute, target_ids: Sequence[str]
    ) -> None:
        """Make sure every target exists and belongs to the attribute's target schema."""
        if not target_ids:
            return

        result = await session.execute(
            select(Entity.id, Entity.schema_id).where(Entity.id.in_(target_ids))
        )
        found = {row.id: row.schema_id for row in result}

        missing = [target_id for target_id in target_ids if target_id not in found]
        if missing:
            raise EntityNotFoundError(
                f"Target entities of '{attribute.name}' not found.",
                details={attribute.name: missing},
            )

        wrong_schema = [
            target_id for target_id in target_ids if found[target_id] != attribute.target_id
        ]
        if wrong_schema:
            raise RelationshipTargetError(
                f"Targets of '{attribute.name}' must be entities of schema '{attribute.target_id}'.",
                details={attribute.name: wrong_schema},
            )

    async def resolve(self, session: AsyncSession, entity: Entity) -> EntityRecord:
        """Build the output record: scalar values plus resolved relationships.

        A relationship attribute whose target schema cannot be found is left
        out of the record.
        """
        record = entity_record(entity)
        for attribute in self.schema.relationship_attributes:
            targets = await self.resolve_relationship(session, entity, attribute)
            if targets is None:
                continue
            record[attribute.name] = shape_value(attribute, targets)
        return record

    async def resolve_relationship(
        self, session: AsyncSession, entity: Entity, attribute: Attribute
    ) -> Optional[List[EntityRecord]]:
        """Resolve the targets of one relationship, or None when they cannot be resolved."""
        if await session.get(SchemaModel, attribute.target_id) is None:
            logger.warning(
                f"Target schema '{attribute.target_id}' of '{self.schema.id}.{attribute.name}' "
                f"not found, skipping attribute for entity {entity.id}"
            )
            return None

        heads = await self.relationships.find_target_entities(session, entity.id, attribute.name)

        # edges written before the attribute's targetId changed
        stale = [head.id for head in heads if head.schema_id != attribute.target_id]
        if stale:
            logger.warning(
                f"Skipping targets {stale} of '{self.schema.id}.{attribute.name}' for entity "
                f"{entity.id}, they are not entities of schema '{attribute.target_id}'"
            )

        return [entity_record(head) for head in heads if head.schema_id == attribute.target_id]

    async def get_model(self, session: AsyncSession, entity_id: str) -> Optional[Entity]:
        entity = await session.get(Entity, entity_id)
        if entity is None or entity.schema_id != self.schema.id:
            return None
        return entity

    async def require_model(self, session: AsyncSession, entity_id: str) -> Entity:
        entity = await self.get_model(session, entity_id)
        if entity is None:
            raise EntityNotFoundError("Entity not found.")
        return entity
