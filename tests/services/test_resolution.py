"""Tests for the entity/relationship resolution rules."""

import pytest

from entity_store.schemas import Attribute, AttributeType, Cardinality, Schema
from entity_store.services.exceptions import (
    AttributeNotFoundError,
    NotARelationshipError,
    RelationshipShapeError,
)
from entity_store.services.resolution import (
    check_relationship_shape,
    diff_targets,
    partition_payload,
    reference_ids,
    require_relationship,
    shape_value,
)


def relationship(cardinality: Cardinality, name: str = "link") -> Attribute:
    return Attribute(
        type=AttributeType.RELATIONSHIP, name=name, cardinality=cardinality, target_id="target"
    )


@pytest.fixture
def schema() -> Schema:
    return Schema(
        id="schema",
        attributes=[
            Attribute(type=AttributeType.STRING, name="name"),
            Attribute(type=AttributeType.BOOLEAN, name="active"),
            relationship(Cardinality.ONE_TO_ONE, "partner"),
            relationship(Cardinality.ONE_TO_MANY, "children"),
        ],
    )


def test_partition_payload(schema):
    scalars, relationships = partition_payload(
        schema,
        {
            "id": "e1",
            "schemaId": "schema",
            "name": "a",
            "active": True,
            "partner": "e2",
            "children": ["e3"],
        },
    )

    assert scalars == {"name": "a", "active": True}
    assert relationships == {"partner": "e2", "children": ["e3"]}


def test_partition_payload_rejects_unknown_keys(schema):
    with pytest.raises(AttributeNotFoundError):
        partition_payload(schema, {"schemaId": "schema", "color": "red"})


def test_require_relationship(schema):
    assert require_relationship(schema, "partner").name == "partner"

    with pytest.raises(AttributeNotFoundError):
        require_relationship(schema, "missing")

    with pytest.raises(NotARelationshipError):
        require_relationship(schema, "name")


@pytest.mark.parametrize("cardinality", [Cardinality.ONE_TO_MANY, Cardinality.MANY_TO_MANY])
def test_plural_cardinality_needs_array(cardinality):
    attribute = relationship(cardinality)

    check_relationship_shape(attribute, ["a", "b"])
    check_relationship_shape(attribute, [])

    with pytest.raises(RelationshipShapeError) as exc:
        check_relationship_shape(attribute, "a")
    assert "can only be updated with an array" in exc.value.message


@pytest.mark.parametrize("cardinality", [Cardinality.ONE_TO_ONE, Cardinality.MANY_TO_ONE])
def test_singular_cardinality_rejects_array(cardinality):
    attribute = relationship(cardinality)

    check_relationship_shape(attribute, "a")
    check_relationship_shape(attribute, {"id": "a"})
    check_relationship_shape(attribute, None)

    with pytest.raises(RelationshipShapeError) as exc:
        check_relationship_shape(attribute, ["a"])
    assert "can only be updated with an entity" in exc.value.message


def test_reference_ids_accepts_ids_and_objects():
    attribute = relationship(Cardinality.MANY_TO_MANY)

    ids = reference_ids(attribute, ["a", {"id": "b", "name": "ignored"}, "a"])

    assert ids == ["a", "b"]


def test_reference_ids_singular():
    attribute = relationship(Cardinality.MANY_TO_ONE)

    assert reference_ids(attribute, {"id": "a"}) == ["a"]
    assert reference_ids(attribute, None) == []


@pytest.mark.parametrize("reference", [1, {"name": "no id"}, "", {"id": 5}])
def test_reference_ids_rejects_bad_references(reference):
    attribute = relationship(Cardinality.MANY_TO_MANY)

    with pytest.raises(RelationshipShapeError):
        reference_ids(attribute, [reference])


def test_diff_targets():
    diff = diff_targets(["A", "B"], ["B", "C"])

    assert diff.created == ["C"]
    assert diff.deleted == ["A"]
    assert diff.unchanged == ["B"]
    assert diff.changed


def test_diff_targets_unchanged():
    diff = diff_targets(["A", "B"], ["B", "A"])

    assert diff.created == []
    assert diff.deleted == []
    assert not diff.changed


def test_shape_value():
    targets = [{"id": "a"}, {"id": "b"}]

    assert shape_value(relationship(Cardinality.MANY_TO_MANY), targets) == targets
    assert shape_value(relationship(Cardinality.ONE_TO_MANY), []) == []
    assert shape_value(relationship(Cardinality.ONE_TO_ONE), targets) == {"id": "a"}
    assert shape_value(relationship(Cardinality.MANY_TO_ONE), []) is None
