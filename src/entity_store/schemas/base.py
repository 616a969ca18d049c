"""Core pydantic models for entity-store schemas and attributes.

A schema is a runtime-defined, ordered set of typed attributes. Entities are
open key/value records validated against a schema:

1. STRING, NUMERIC and BOOLEAN attributes hold scalar values on the entity
2. RELATIONSHIP attributes are directed, named edges to entities of a target schema
3. The cardinality of a relationship attribute decides whether it reads and
   writes as a single entity or as an array
"""
from enum import Enum
from typing import Annotated, Dict, List, Optional, Union

from annotated_types import MinLen
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class StoreModel(BaseModel):
    """Base for wire models: camelCase on the wire, snake_case in python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class AttributeType(str, Enum):
    """Types an attribute can have.

    Lookup is case-insensitive and also accepts the ``StringAttribute`` style
    names.
    """

    STRING = "STRING"
    NUMERIC = "NUMERIC"
    BOOLEAN = "BOOLEAN"
    RELATIONSHIP = "RELATIONSHIP"

    @classmethod
    def _missing_(cls, value: object) -> Optional["AttributeType"]:
        if not isinstance(value, str):
            return None
        name = value.upper()
        if name.endswith("ATTRIBUTE"):
            name = name[: -len("ATTRIBUTE")]
        return cls.__members__.get(name)


class Cardinality(str, Enum):
    """Cardinality of a relationship attribute."""

    ONE_TO_ONE = "ONE_TO_ONE"
    ONE_TO_MANY = "ONE_TO_MANY"
    MANY_TO_ONE = "MANY_TO_ONE"
    MANY_TO_MANY = "MANY_TO_MANY"

    @classmethod
    def _missing_(cls, value: object) -> Optional["Cardinality"]:
        if not isinstance(value, str):
            return None
        return cls.__members__.get(value.upper())

    @property
    def is_plural(self) -> bool:
        """Plural cardinalities read and write arrays of entities."""
        return self in (Cardinality.ONE_TO_MANY, Cardinality.MANY_TO_MANY)


Number = Union[int, float]

def strip_text(value: object) -> object:
    """Strip surrounding whitespace from strings, leave other values for type checking."""
    return value.strip() if isinstance(value, str) else value


AttributeName = Annotated[str, BeforeValidator(strip_text), MinLen(1)]
"""Key used for the attribute on entities. Must be non-empty."""


class Attribute(StoreModel):
    """A typed field descriptor on a schema.

    All attribute types share this one shape. Only the fields relevant to
    ``type`` are meaningful:

    - STRING: max_length
    - NUMERIC: min, max, integer
    - RELATIONSHIP: cardinality, target_id (both required)
    """

    type: AttributeType
    name: AttributeName
    display: Optional[str] = None
    description: Optional[str] = None
    required: bool = False

    max_length: Optional[int] = Field(default=None, ge=0)

    min: Optional[Number] = None
    max: Optional[Number] = None
    integer: bool = False

    cardinality: Optional[Cardinality] = None
    target_id: Optional[str] = None

    @model_validator(mode="after")
    def check_relationship_fields(self) -> "Attribute":
        if self.type == AttributeType.RELATIONSHIP:
            if self.cardinality is None:
                raise ValueError(f"Relationship attribute '{self.name}' needs a cardinality")
            if not self.target_id:
                raise ValueError(f"Relationship attribute '{self.name}' needs a targetId")
        return self

    @property
    def is_relationship(self) -> bool:
        return self.type == AttributeType.RELATIONSHIP

    @property
    def is_plural(self) -> bool:
        return self.cardinality is not None and self.cardinality.is_plural


class Schema(StoreModel):
    """A named set of attribute declarations entities are validated against.

    ``id`` is assigned by the store. Attribute names must be unique.
    """

    id: Optional[str] = None
    display: Optional[str] = None
    description: Optional[str] = None
    attributes: List[Attribute] = []

    @model_validator(mode="after")
    def check_unique_names(self) -> "Schema":
        seen = set()
        duplicates = []
        for attribute in self.attributes:
            if attribute.name in seen:
                duplicates.append(attribute.name)
            seen.add(attribute.name)
        if duplicates:
            raise ValueError(f"Duplicate attribute names: {', '.join(duplicates)}")
        return self

    def get_attribute(self, name: str) -> Optional[Attribute]:
        """Find an attribute by name."""
        return self.attribute_map.get(name)

    @property
    def attribute_map(self) -> Dict[str, Attribute]:
        return {attribute.name: attribute for attribute in self.attributes}

    @property
    def scalar_attributes(self) -> List[Attribute]:
        return [a for a in self.attributes if not a.is_relationship]

    @property
    def relationship_attributes(self) -> List[Attribute]:
        return [a for a in self.attributes if a.is_relationship]
