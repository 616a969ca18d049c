"""Result of validating an entity against a schema."""

from typing import Dict, Optional

from pydantic import Field

from entity_store.schemas.base import StoreModel


class ValidationResult(StoreModel):
    """Outcome of a validation run.

    ``message`` is only set when the entity belongs to another schema.
    ``messages`` maps attribute names to one violation description each.

    Example Response:
    {
        "valid": false,
        "messages": {"number": "This attribute is required."}
    }
    """

    valid: bool
    message: Optional[str] = None
    messages: Optional[Dict[str, str]] = Field(default=None)
