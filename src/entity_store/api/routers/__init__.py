"""API routers."""

from . import entity_router
from . import schema_router

__all__ = ["entity_router", "schema_router"]
