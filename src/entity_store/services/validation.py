"""Validation of entity payloads against runtime-defined schemas."""

import math
from typing import Any, Dict, Mapping

from loguru import logger

from entity_store.schemas.base import Attribute, AttributeType, Schema
from entity_store.schemas.validation import ValidationResult
from entity_store.utils import json_kind

SCHEMA_MISMATCH = "This entity is not part of this schema"
NOT_DEFINED = "This attribute is not defined for this schema."
REQUIRED = "This attribute is required."

RESERVED_KEYS = ("id", "schemaId")


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class EntityValidationService:
    """Validates entities against a schema.

    Pure and reentrant: no I/O and no state, a single instance can serve every
    request. ``validate`` never raises, failures are reported in the result.
    """

    def validate(self, schema: Schema, entity: Mapping[str, Any]) -> ValidationResult:
        """Check an entity payload against a schema.

        Every key is checked, so one result can carry messages for several
        attributes, but each attribute gets at most one message.
        """
        logger.trace(f"Validating entity '{entity.get('id')}' against schema '{schema.id}'")

        if entity.get("schemaId") != schema.id:
            return ValidationResult(valid=False, message=SCHEMA_MISMATCH)

        attributes = schema.attribute_map
        expected_keys = [a.name for a in schema.scalar_attributes]
        missing_keys = [key for key in expected_keys if key not in entity]

        messages: Dict[str, str] = {}

        for key, value in entity.items():
            if key in RESERVED_KEYS:
                continue

            attribute = attributes.get(key)
            if attribute is None:
                messages[key] = NOT_DEFINED
                continue

            if value is None and attribute.required:
                messages[key] = REQUIRED
                continue

            message = self.check_value(attribute, value)
            if message:
                messages[key] = message

        for key in missing_keys:
            if attributes[key].required:
                messages[key] = REQUIRED

        return ValidationResult(valid=not messages, messages=messages)

    def check_value(self, attribute: Attribute, value: Any) -> str | None:
        """Run the type specific rules, returning the first violation."""
        if attribute.type == AttributeType.STRING:
            return self.check_string(attribute, value)
        if attribute.type == AttributeType.NUMERIC:
            return self.check_numeric(attribute, value)
        if attribute.type == AttributeType.BOOLEAN:
            return self.check_boolean(value)
        # relationship shapes are checked on write
        return None

    def check_string(self, attribute: Attribute, value: Any) -> str | None:
        if not isinstance(value, str):
            return f"This attribute must be a string but got '{json_kind(value)}'."
        if attribute.max_length is not None and len(value) > attribute.max_length:
            return f"Max length is {attribute.max_length}."
        return None

    def check_numeric(self, attribute: Attribute, value: Any) -> str | None:
        # bounds are not compared against non-numbers
        if not is_number(value):
            return f"This attribute must be numeric but got '{json_kind(value)}'."
        # NaN and Infinity are not valid JSON numbers
        if isinstance(value, float) and not math.isfinite(value):
            return f"This attribute must be numeric but got '{value}'."
        if attribute.max is not None and value > attribute.max:
            return f"Max value is {attribute.max}."
        if attribute.min is not None and value < attribute.min:
            # cites the max bound, matching the message existing clients see
            return f"Min value is {attribute.max}."
        if attribute.integer and isinstance(value, float) and not value.is_integer():
            return "Value must be an integer."
        return None

    def check_boolean(self, value: Any) -> str | None:
        if not isinstance(value, bool):
            return f"This attribute must be boolean but got '{json_kind(value)}'."
        return None
