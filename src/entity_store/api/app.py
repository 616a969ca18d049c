"""FastAPI application for the entity-store API."""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

import entity_store
from entity_store.api.routers import entity_router, schema_router
from entity_store.config import StoreConfig
from entity_store.context import store_context
from entity_store.schemas import ErrorBody, ErrorResponse, HealthStatus, ValueResponse
from entity_store.services.exceptions import StoreError
from entity_store.utils import setup_logging


def error_response(status_code: int, message: str, details=None) -> JSONResponse:
    body = ErrorResponse(error=ErrorBody(message=message, details=details))
    return JSONResponse(
        status_code=status_code, content=jsonable_encoder(body.model_dump(exclude_none=True))
    )


async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"Request '{request.url}' failed: {exc.message}")
    else:
        logger.info(f"Request '{request.url}' rejected ({exc.status_code}): {exc.message}")
    return error_response(exc.status_code, exc.message, exc.details)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info(f"Request '{request.url}' has an invalid body")
    return error_response(400, "Invalid request body", exc.errors())


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(exc.status_code, str(exc.detail))


async def exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        f"An unhandled exception occurred for request '{request.url}', exception: {exc}"
    )
    return error_response(500, str(exc) or exc.__class__.__name__)


def create_app(config: Optional[StoreConfig] = None) -> FastAPI:
    """Build the API application.

    The database is opened in the lifespan. An unsupported database URL stops
    the startup.
    """
    config = config or StoreConfig()
    setup_logging(config.log_level, config.log_path)

    @asynccontextmanager
    async def lifespan(app: FastAPI):  # pragma: no cover
        """Lifecycle manager for the FastAPI app."""
        logger.info(f"Starting entity-store API {entity_store.__version__}")
        async with store_context(config) as context:
            app.state.context = context
            yield
        logger.info("Shutting down entity-store API")

    app = FastAPI(
        title="entity-store API",
        description="Schema-driven entity store",
        version=entity_store.__version__,
        lifespan=lifespan,
    )

    app.include_router(schema_router.router, prefix=config.api_prefix)
    app.include_router(entity_router.router, prefix=config.api_prefix)

    @app.get("/health", response_model=ValueResponse[HealthStatus])
    async def health() -> ValueResponse[HealthStatus]:
        return ValueResponse(value=HealthStatus(status="ok", version=entity_store.__version__))

    app.add_exception_handler(StoreError, store_error_handler)  # pyright: ignore [reportArgumentType]
    app.add_exception_handler(RequestValidationError, request_validation_handler)  # pyright: ignore [reportArgumentType]
    app.add_exception_handler(StarletteHTTPException, http_error_handler)  # pyright: ignore [reportArgumentType]
    app.add_exception_handler(Exception, exception_handler)

    return app
