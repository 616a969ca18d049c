"""Services package."""

from .service import BaseService
from .validation import EntityValidationService

__all__ = [
    "BaseService",
    "EntityValidationService",
]
