"""Models package for entity-store."""

from entity_store.models.base import Base
from entity_store.models.store import Entity, Relationship, Schema

__all__ = [
    "Base",
    "Entity",
    "Relationship",
    "Schema",
]
