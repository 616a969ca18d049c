"""Dependency injection functions for entity-store services."""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from entity_store.context import StoreContext
from entity_store.repository.schema_repository import SchemaRepository
from entity_store.services import EntityValidationService
from entity_store.services.entity_service import EntityService
from entity_store.services.schema_service import SchemaService


## context


def get_context(request: Request) -> StoreContext:
    """The context built by the app lifespan."""
    return request.app.state.context


ContextDep = Annotated[StoreContext, Depends(get_context)]


## sqlalchemy


async def get_session_maker(context: ContextDep) -> async_sessionmaker[AsyncSession]:
    """Get session maker."""
    return context.session_maker


SessionMakerDep = Annotated[async_sessionmaker, Depends(get_session_maker)]


## repositories


async def get_schema_repository(session_maker: SessionMakerDep) -> SchemaRepository:
    """Create a SchemaRepository instance."""
    return SchemaRepository(session_maker)


SchemaRepositoryDep = Annotated[SchemaRepository, Depends(get_schema_repository)]


## services


async def get_validation_service(context: ContextDep) -> EntityValidationService:
    return context.validation


ValidationServiceDep = Annotated[EntityValidationService, Depends(get_validation_service)]


async def get_schema_service(schema_repository: SchemaRepositoryDep) -> SchemaService:
    """Create SchemaService with repository."""
    return SchemaService(schema_repository)


SchemaServiceDep = Annotated[SchemaService, Depends(get_schema_service)]


async def get_entity_service(
    session_maker: SessionMakerDep,
    schema_service: SchemaServiceDep,
    validation_service: ValidationServiceDep,
) -> EntityService:
    """Create EntityService with dependencies."""
    return EntityService(session_maker, schema_service, validation_service)


EntityServiceDep = Annotated[EntityService, Depends(get_entity_service)]
