"""Pydantic schemas for the entity-store API."""

from entity_store.schemas.base import (
    Attribute,
    AttributeType,
    Cardinality,
    Schema,
    StoreModel,
)
from entity_store.schemas.response import (
    EntityRecord,
    ErrorBody,
    ErrorResponse,
    HealthStatus,
    ValueResponse,
)
from entity_store.schemas.validation import ValidationResult

__all__ = [
    "Attribute",
    "AttributeType",
    "Cardinality",
    "EntityRecord",
    "ErrorBody",
    "ErrorResponse",
    "HealthStatus",
    "Schema",
    "StoreModel",
    "ValidationResult",
    "ValueResponse",
]
