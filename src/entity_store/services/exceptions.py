from typing import Any, Optional


class StoreError(Exception):
    """Base for errors that map to an API error response"""

    status_code = 500

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class SchemaNotFoundError(StoreError):
    """Raised when a schema cannot be found"""

    status_code = 404


class EntityNotFoundError(StoreError):
    """Raised when an entity cannot be found"""

    status_code = 404


class AttributeNotFoundError(StoreError):
    """Raised when a schema does not declare an attribute"""

    status_code = 404


class EntityValidationError(StoreError):
    """Raised when an entity fails validation against its schema"""

    status_code = 400


class NotARelationshipError(StoreError):
    """Raised when a relationship operation targets a scalar attribute"""

    status_code = 400


class RelationshipShapeError(StoreError):
    """Raised when a relationship value does not match the attribute cardinality"""

    status_code = 400


class RelationshipTargetError(StoreError):
    """Raised when a relationship target belongs to the wrong schema"""

    status_code = 400


class UnsupportedDatabaseError(Exception):
    """Raised at startup when the database URL names an unsupported driver"""

    pass
