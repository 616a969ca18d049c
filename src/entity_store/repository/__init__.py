from .entity_repository import EntityRepository
from .relationship_repository import RelationshipRepository
from .repository import Repository
from .schema_repository import SchemaRepository

__all__ = ["EntityRepository", "RelationshipRepository", "Repository", "SchemaRepository"]
