"""Common test fixtures."""

from pathlib import Path
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from entity_store import db
from entity_store.api.app import create_app
from entity_store.config import StoreConfig
from entity_store.context import StoreContext
from entity_store.deps import get_context
from entity_store.repository import RelationshipRepository, SchemaRepository
from entity_store.schemas import Attribute, AttributeType, Cardinality, Schema
from entity_store.services import EntityValidationService
from entity_store.services.entity_service import EntityService
from entity_store.services.schema_service import SchemaService


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def config_home(tmp_path, monkeypatch) -> Path:
    home = tmp_path / "entity-store"
    monkeypatch.setenv("ENTITY_STORE_HOME", str(home))
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("ENTITY_STORE_DATABASE_URL", raising=False)
    return home


@pytest.fixture
def store_config(config_home: Path) -> StoreConfig:
    """Create test configuration with a SQLite file under the test home."""
    return StoreConfig(home=config_home, log_level="DEBUG")


@pytest_asyncio.fixture(scope="function")
async def engine_factory(
    store_config: StoreConfig,
) -> AsyncGenerator[tuple[AsyncEngine, async_sessionmaker[AsyncSession]], None]:
    """Create engine and session factory with all tables created."""
    async with db.engine_session_factory(store_config.resolved_database_url) as (
        engine,
        session_maker,
    ):
        yield engine, session_maker


@pytest_asyncio.fixture
async def session_maker(engine_factory) -> async_sessionmaker[AsyncSession]:
    """Get session maker for tests."""
    _, session_maker = engine_factory
    return session_maker


@pytest.fixture
def validation_service() -> EntityValidationService:
    return EntityValidationService()


@pytest.fixture
def schema_repository(session_maker: async_sessionmaker[AsyncSession]) -> SchemaRepository:
    return SchemaRepository(session_maker)


@pytest.fixture
def relationship_repository(
    session_maker: async_sessionmaker[AsyncSession],
) -> RelationshipRepository:
    return RelationshipRepository(session_maker)


@pytest.fixture
def schema_service(schema_repository: SchemaRepository) -> SchemaService:
    return SchemaService(schema_repository)


@pytest.fixture
def entity_service(
    session_maker: async_sessionmaker[AsyncSession],
    schema_service: SchemaService,
    validation_service: EntityValidationService,
) -> EntityService:
    return EntityService(session_maker, schema_service, validation_service)


@pytest_asyncio.fixture
async def author_schema(schema_service: SchemaService) -> Schema:
    """A schema without relationships."""
    return await schema_service.create_schema(
        Schema(
            display="Author",
            description="People who write books",
            attributes=[
                Attribute(type=AttributeType.STRING, name="name", required=True, max_length=50),
                Attribute(type=AttributeType.NUMERIC, name="born", integer=True),
            ],
        )
    )


@pytest_asyncio.fixture
async def book_schema(schema_service: SchemaService, author_schema: Schema) -> Schema:
    """A schema with a singular and a plural relationship to authors."""
    return await schema_service.create_schema(
        Schema(
            display="Book",
            description="Books and who wrote them",
            attributes=[
                Attribute(type=AttributeType.STRING, name="title", required=True),
                Attribute(type=AttributeType.NUMERIC, name="pages", min=1, max=5000, integer=True),
                Attribute(type=AttributeType.BOOLEAN, name="published"),
                Attribute(
                    type=AttributeType.RELATIONSHIP,
                    name="editor",
                    cardinality=Cardinality.MANY_TO_ONE,
                    target_id=author_schema.id,
                ),
                Attribute(
                    type=AttributeType.RELATIONSHIP,
                    name="authors",
                    cardinality=Cardinality.MANY_TO_MANY,
                    target_id=author_schema.id,
                ),
            ],
        )
    )


@pytest.fixture
def store_context(store_config, engine_factory, validation_service) -> StoreContext:
    engine, session_maker = engine_factory
    return StoreContext(
        config=store_config,
        engine=engine,
        session_maker=session_maker,
        validation=validation_service,
    )


@pytest.fixture
def app(store_config: StoreConfig, store_context: StoreContext) -> FastAPI:
    """Create FastAPI test application."""
    app = create_app(store_config)
    app.dependency_overrides[get_context] = lambda: store_context
    return app


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create client using ASGI transport."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
