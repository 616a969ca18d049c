"""Router for schema operations."""

from typing import Any, Dict, List

from fastapi import APIRouter, Body, Response
from loguru import logger

from entity_store.deps import EntityServiceDep, SchemaServiceDep
from entity_store.schemas import Schema, ValidationResult, ValueResponse

router = APIRouter(prefix="/schemas", tags=["schemas"])


@router.get("", response_model=ValueResponse[List[Schema]])
async def list_schemas(schema_service: SchemaServiceDep) -> ValueResponse[List[Schema]]:
    """List all schemas."""
    logger.info("API request", endpoint="list_schemas")
    return ValueResponse(value=await schema_service.list_schemas())


@router.post("", response_model=ValueResponse[Schema])
async def create_schema(data: Schema, schema_service: SchemaServiceDep) -> ValueResponse[Schema]:
    """Create a schema. The id is assigned by the store."""
    logger.info("API request", endpoint="create_schema", display=data.display)

    schema = await schema_service.create_schema(data)

    logger.info("API response", endpoint="create_schema", schema_id=schema.id)
    return ValueResponse(value=schema)


@router.get("/{schema_id}", response_model=ValueResponse[Schema])
async def get_schema(schema_id: str, schema_service: SchemaServiceDep) -> ValueResponse[Schema]:
    logger.info("API request", endpoint="get_schema", schema_id=schema_id)
    return ValueResponse(value=await schema_service.get_schema(schema_id))


@router.put("/{schema_id}", response_model=ValueResponse[Schema])
async def update_schema(
    schema_id: str, data: Schema, schema_service: SchemaServiceDep
) -> ValueResponse[Schema]:
    """Replace a schema's display, description and attributes. The path id wins."""
    logger.info("API request", endpoint="update_schema", schema_id=schema_id)
    return ValueResponse(value=await schema_service.update_schema(schema_id, data))


@router.delete("/{schema_id}", status_code=204)
async def delete_schema(schema_id: str, schema_service: SchemaServiceDep) -> Response:
    """Delete a schema along with its entities and their relationships."""
    logger.info("API request", endpoint="delete_schema", schema_id=schema_id)
    await schema_service.delete_schema(schema_id)
    return Response(status_code=204)


@router.put(
    "/{schema_id}/validate",
    response_model=ValueResponse[ValidationResult],
    response_model_exclude_none=True,
)
async def validate_entity(
    schema_id: str,
    entity_service: EntityServiceDep,
    entity: Dict[str, Any] = Body(...),
) -> ValueResponse[ValidationResult]:
    """Validate a candidate entity against a schema without storing it."""
    logger.info("API request", endpoint="validate_entity", schema_id=schema_id)

    result = await entity_service.validate_entity(schema_id, entity)

    logger.info("API response", endpoint="validate_entity", valid=result.valid)
    return ValueResponse(value=result)
