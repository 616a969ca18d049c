"""Service for managing entities and their relationships."""

from typing import Any, Dict, List, Mapping

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from entity_store.repository.entity_repository import EntityRepository
from entity_store.schemas import EntityRecord, Schema, ValidationResult
from entity_store.services.exceptions import EntityNotFoundError, EntityValidationError
from entity_store.services.schema_service import SchemaService
from entity_store.services.validation import EntityValidationService


class EntityService:
    """Service for entity operations.

    Every write goes schema lookup, validation, then storage. Invalid entities
    never reach the repository.
    """

    def __init__(
        self,
        session_maker: async_sessionmaker[AsyncSession],
        schema_service: SchemaService,
        validation_service: EntityValidationService,
    ):
        self.session_maker = session_maker
        self.schema_service = schema_service
        self.validation_service = validation_service

    def entity_repository(self, schema: Schema) -> EntityRepository:
        """Repository scoped to the entities of one schema."""
        return EntityRepository(self.session_maker, schema)

    async def validate_entity(self, schema_id: str, entity: Mapping[str, Any]) -> ValidationResult:
        schema = await self.schema_service.get_schema(schema_id)
        return self.validation_service.validate(schema, entity)

    async def list_entities(self, schema_id: str) -> List[EntityRecord]:
        schema = await self.schema_service.get_schema(schema_id)
        return await self.entity_repository(schema).find_all()

    async def get_entity(self, schema_id: str, entity_id: str) -> EntityRecord:
        schema = await self.schema_service.get_schema(schema_id)
        entity = await self.entity_repository(schema).find_by_id(entity_id)
        if entity is None:
            raise EntityNotFoundError("Entity not found.")
        return entity

    async def create_entity(self, schema_id: str, payload: Mapping[str, Any]) -> EntityRecord:
        """Validate and create an entity. The store assigns the id."""
        schema = await self.schema_service.get_schema(schema_id)

        entity: Dict[str, Any] = {k: v for k, v in payload.items() if k != "id"}
        entity["schemaId"] = schema.id

        self.check_valid(schema, entity)
        created = await self.entity_repository(schema).create(entity)
        logger.info(f"Created entity {created['id']} in schema {schema.id}")
        return created

    async def update_entity(
        self, schema_id: str, entity_id: str, payload: Mapping[str, Any]
    ) -> EntityRecord:
        """Validate and update an entity.

        A payload without schemaId belongs to the schema in the path. A payload
        naming another schema fails validation.
        """
        schema = await self.schema_service.get_schema(schema_id)

        entity: Dict[str, Any] = dict(payload)
        entity["id"] = entity_id
        entity.setdefault("schemaId", schema.id)

        self.check_valid(schema, entity)
        updated = await self.entity_repository(schema).update(entity_id, entity)
        if updated is None:
            raise EntityNotFoundError("Entity not found.")
        logger.info(f"Updated entity {entity_id} in schema {schema.id}")
        return updated

    async def delete_entity(self, schema_id: str, entity_id: str) -> None:
        schema = await self.schema_service.get_schema(schema_id)
        if not await self.entity_repository(schema).delete_by_id(entity_id):
            raise EntityNotFoundError("Entity not found.")
        logger.info(f"Deleted entity {entity_id} from schema {schema.id}")

    async def get_relationship(self, schema_id: str, entity_id: str, attribute: str) -> Any:
        schema = await self.schema_service.get_schema(schema_id)
        return await self.entity_repository(schema).get_relationship(entity_id, attribute)

    async def set_relationship(
        self, schema_id: str, entity_id: str, attribute: str, value: Any
    ) -> Any:
        schema = await self.schema_service.get_schema(schema_id)
        result = await self.entity_repository(schema).set_relationship(entity_id, attribute, value)
        logger.info(f"Set relationship {attribute} of entity {entity_id}")
        return result

    def check_valid(self, schema: Schema, entity: Mapping[str, Any]) -> None:
        """Raise EntityValidationError unless the entity is valid for the schema."""
        validation = self.validation_service.validate(schema, entity)
        if not validation.valid:
            raise EntityValidationError(
                validation.message or "Validation has failed", details=validation.messages
            )
