"""Response envelopes for the entity-store API.

Every successful response wraps its payload as ``{"value": ...}``. Failures
are returned as ``{"error": {"message": ..., "details": ...}}`` with the HTTP
status carrying the error kind.
"""

from typing import Any, Dict, Generic, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")

EntityRecord = Dict[str, Any]
"""An entity as returned by the API: id, schemaId, scalar values and resolved relationships."""


class ValueResponse(BaseModel, Generic[T]):
    """Success envelope."""

    value: T


class ErrorBody(BaseModel):
    message: str
    details: Optional[Any] = None


class ErrorResponse(BaseModel):
    """Failure envelope."""

    error: ErrorBody


class HealthStatus(BaseModel):
    status: str
    version: str


