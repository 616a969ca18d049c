"""Router for entity and relationship operations."""

from typing import Any, Dict, List

from fastapi import APIRouter, Body, Response
from loguru import logger

from entity_store.deps import EntityServiceDep
from entity_store.schemas import EntityRecord, ValueResponse

router = APIRouter(prefix="/schemas/{schema_id}/entities", tags=["entities"])

## Entity endpoints


@router.get("", response_model=ValueResponse[List[EntityRecord]])
async def list_entities(
    schema_id: str, entity_service: EntityServiceDep
) -> ValueResponse[List[EntityRecord]]:
    """List the entities of a schema with their relationships resolved."""
    logger.info("API request", endpoint="list_entities", schema_id=schema_id)
    return ValueResponse(value=await entity_service.list_entities(schema_id))


@router.post("", response_model=ValueResponse[EntityRecord])
async def create_entity(
    schema_id: str,
    entity_service: EntityServiceDep,
    data: Dict[str, Any] = Body(...),
) -> ValueResponse[EntityRecord]:
    """Create an entity. Any id in the body is dropped and schemaId is set from the path."""
    logger.info("API request", endpoint="create_entity", schema_id=schema_id)

    entity = await entity_service.create_entity(schema_id, data)

    logger.info("API response", endpoint="create_entity", entity_id=entity["id"])
    return ValueResponse(value=entity)


@router.get("/{entity_id}", response_model=ValueResponse[EntityRecord])
async def get_entity(
    schema_id: str, entity_id: str, entity_service: EntityServiceDep
) -> ValueResponse[EntityRecord]:
    logger.info("API request", endpoint="get_entity", schema_id=schema_id, entity_id=entity_id)
    return ValueResponse(value=await entity_service.get_entity(schema_id, entity_id))


@router.put("/{entity_id}", response_model=ValueResponse[EntityRecord])
async def update_entity(
    schema_id: str,
    entity_id: str,
    entity_service: EntityServiceDep,
    data: Dict[str, Any] = Body(...),
) -> ValueResponse[EntityRecord]:
    """Update an entity. Scalar values are replaced as a whole."""
    logger.info("API request", endpoint="update_entity", schema_id=schema_id, entity_id=entity_id)
    return ValueResponse(value=await entity_service.update_entity(schema_id, entity_id, data))


@router.delete("/{entity_id}", status_code=204)
async def delete_entity(schema_id: str, entity_id: str, entity_service: EntityServiceDep) -> Response:
    logger.info("API request", endpoint="delete_entity", schema_id=schema_id, entity_id=entity_id)
    await entity_service.delete_entity(schema_id, entity_id)
    return Response(status_code=204)


## Relationship endpoints


@router.get("/{entity_id}/{attribute}", response_model=ValueResponse[Any])
async def get_relationship(
    schema_id: str, entity_id: str, attribute: str, entity_service: EntityServiceDep
) -> ValueResponse[Any]:
    """Read one relationship attribute: an entity (or null) when singular, an array when plural."""
    logger.info(
        "API request",
        endpoint="get_relationship",
        schema_id=schema_id,
        entity_id=entity_id,
        attribute=attribute,
    )
    return ValueResponse(
        value=await entity_service.get_relationship(schema_id, entity_id, attribute)
    )


@router.put("/{entity_id}/{attribute}", response_model=ValueResponse[Any])
async def set_relationship(
    schema_id: str,
    entity_id: str,
    attribute: str,
    entity_service: EntityServiceDep,
    value: Any = Body(None),
) -> ValueResponse[Any]:
    """Replace one relationship attribute.

    The body must be an array for plural cardinalities and a single entity
    reference (or null) for singular ones.
    """
    logger.info(
        "API request",
        endpoint="set_relationship",
        schema_id=schema_id,
        entity_id=entity_id,
        attribute=attribute,
    )
    result = await entity_service.set_relationship(schema_id, entity_id, attribute, value)
    return ValueResponse(value=result)
