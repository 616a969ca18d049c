"""Service for managing schemas."""

from typing import List

from loguru import logger

from entity_store.models import Schema as SchemaModel
from entity_store.repository.schema_repository import SchemaRepository
from entity_store.schemas import Schema
from entity_store.services.exceptions import SchemaNotFoundError
from entity_store.services.service import BaseService


def schema_data(schema: Schema) -> dict:
    """Column values for a schema row. Attributes are stored as plain JSON."""
    return {
        "display": schema.display,
        "description": schema.description,
        "attributes": [
            attribute.model_dump(mode="json", exclude_none=True) for attribute in schema.attributes
        ],
    }


class SchemaService(BaseService[SchemaRepository]):
    """Service for managing schemas in the database."""

    async def create_schema(self, schema: Schema) -> Schema:
        """Create a schema. Any id on the request is ignored."""
        logger.debug(f"Creating schema: {schema.display}")
        model = await self.repository.create(schema_data(schema))
        return self.to_schema(model)

    async def list_schemas(self) -> List[Schema]:
        models = await self.repository.find_all()
        return [self.to_schema(model) for model in models]

    async def get_schema(self, schema_id: str) -> Schema:
        """Get a schema by id.

        Raises:
            SchemaNotFoundError: no schema with that id
        """
        model = await self.repository.find_by_id(schema_id)
        if model is None:
            raise SchemaNotFoundError("Schema not found.")
        return self.to_schema(model)

    async def update_schema(self, schema_id: str, schema: Schema) -> Schema:
        """Replace display, description and attributes of a schema."""
        logger.debug(f"Updating schema: {schema_id}")
        model = await self.repository.update(schema_id, schema_data(schema))
        if model is None:
            raise SchemaNotFoundError("Schema not found.")
        return self.to_schema(model)

    async def delete_schema(self, schema_id: str) -> None:
        """Delete a schema together with its entities and their relationships."""
        logger.debug(f"Deleting schema: {schema_id}")
        if not await self.repository.delete_by_id(schema_id):
            raise SchemaNotFoundError("Schema not found.")

    @staticmethod
    def to_schema(model: SchemaModel) -> Schema:
        return Schema.model_validate(model)
