"""Rules for combining scalar values and relationship edges into one entity.

Entities persist scalar values on their own row. Relationship attributes are
edges keyed by ``(tail, name)`` and are attached to the entity only when it is
read. This module holds the storage-independent parts of that model: how a
payload is split, which relationship values are well formed, how an edge set
is replaced, and how resolved targets are shaped for the caller.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from entity_store.schemas.base import Attribute, Schema
from entity_store.services.exceptions import (
    AttributeNotFoundError,
    NotARelationshipError,
    RelationshipShapeError,
)
from entity_store.services.validation import RESERVED_KEYS


@dataclass
class RelationshipDiff:
    """Result of replacing the edge set of one ``(tail, name)`` pair."""

    created: List[str] = field(default_factory=list)
    deleted: List[str] = field(default_factory=list)
    unchanged: List[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.created or self.deleted)


def partition_payload(
    schema: Schema, payload: Mapping[str, Any]
) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """Split a payload into scalar assignments and relationship assignments.

    Reserved keys (id, schemaId) are skipped.

    Raises:
        AttributeNotFoundError: a key is not declared on the schema
    """
    scalars: Dict[str, Any] = {}
    relationships: Dict[str, Any] = {}

    for key, value in payload.items():
        if key in RESERVED_KEYS:
            continue
        attribute = schema.get_attribute(key)
        if attribute is None:
            raise AttributeNotFoundError(f"Attribute '{key}' is not defined for schema '{schema.id}'.")
        if attribute.is_relationship:
            relationships[key] = value
        else:
            scalars[key] = value

    return scalars, relationships


def require_relationship(schema: Schema, name: str) -> Attribute:
    """Look up a relationship attribute by name.

    Raises:
        AttributeNotFoundError: no attribute with that name
        NotARelationshipError: the attribute is a scalar
    """
    attribute = schema.get_attribute(name)
    if attribute is None:
        raise AttributeNotFoundError("Attribute not found.")
    if not attribute.is_relationship:
        raise NotARelationshipError("Target attribute is not a relationship.")
    return attribute


def check_relationship_shape(attribute: Attribute, value: Any) -> None:
    """Make sure a relationship value matches the attribute cardinality.

    Plural cardinalities take an array, singular ones a single reference or
    null.

    Raises:
        RelationshipShapeError: the value has the wrong shape
    """
    cardinality = attribute.cardinality.value if attribute.cardinality else None
    if attribute.is_plural:
        if not isinstance(value, list):
            raise RelationshipShapeError(
                f"{attribute.name} has cardinality {cardinality} which can only be updated with an array."
            )
    elif isinstance(value, list):
        raise RelationshipShapeError(
            f"{attribute.name} has cardinality {cardinality} which can only be updated with an entity."
        )


def reference_id(attribute: Attribute, reference: Any) -> str:
    """Get the target id out of one entity reference.

    A reference is either the id itself or an object with an ``id`` key.
    """
    if isinstance(reference, str) and reference:
        return reference
    if isinstance(reference, Mapping):
        ref_id = reference.get("id")
        if isinstance(ref_id, str) and ref_id:
            return ref_id
    raise RelationshipShapeError(
        f"{attribute.name} references must be an entity id or an object with an id.",
        details={attribute.name: repr(reference)},
    )


def reference_ids(attribute: Attribute, value: Any) -> List[str]:
    """Collect the target ids of a relationship value, in order, without duplicates."""
    check_relationship_shape(attribute, value)

    if value is None:
        references: Sequence[Any] = []
    elif isinstance(value, list):
        references = value
    else:
        references = [value]

    ids: List[str] = []
    for reference in references:
        ref_id = reference_id(attribute, reference)
        if ref_id not in ids:
            ids.append(ref_id)
    return ids


def diff_targets(existing: Sequence[str], desired: Sequence[str]) -> RelationshipDiff:
    """Compute the edges to create and delete to move from one target set to another."""
    existing_set = set(existing)
    desired_set = set(desired)
    return RelationshipDiff(
        created=[t for t in desired if t not in existing_set],
        deleted=[t for t in existing if t not in desired_set],
        unchanged=[t for t in existing if t in desired_set],
    )


def shape_value(attribute: Attribute, targets: List[Dict[str, Any]]) -> Optional[Any]:
    """Shape resolved targets for output: a list when plural, else the first target or None."""
    if attribute.is_plural:
        return targets
    return targets[0] if targets else None
