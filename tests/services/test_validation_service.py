"""Tests for EntityValidationService."""

import pytest

from entity_store.schemas import Attribute, AttributeType, Cardinality, Schema
from entity_store.services import EntityValidationService

SCHEMA_ID = "87654321-1234-1234-1234-123456789012"
ENTITY_ID = "12345678-1234-1234-1234-123456789012"


def make_schema(*attributes: Attribute) -> Schema:
    return Schema(id=SCHEMA_ID, display="Schema", description="The schema", attributes=list(attributes))


def scalar_schema(required: bool = False, max_length=None, min=None, max=None, integer=False) -> Schema:
    return make_schema(
        Attribute(type=AttributeType.BOOLEAN, name="bool", display="bool", required=False),
        Attribute(
            type=AttributeType.NUMERIC,
            name="number",
            display="number",
            required=required,
            min=min,
            max=max,
            integer=integer,
        ),
        Attribute(
            type=AttributeType.STRING,
            name="string",
            display="string",
            required=False,
            max_length=max_length,
        ),
    )


def entity(**fields) -> dict:
    return {"id": ENTITY_ID, "schemaId": SCHEMA_ID, **fields}


@pytest.fixture
def service() -> EntityValidationService:
    return EntityValidationService()


def test_valid_entity(service):
    result = service.validate(scalar_schema(), entity(bool=False, number=1.2, string="string"))

    assert result.valid
    assert result.messages == {}
    assert result.message is None


def test_schema_mismatch_short_circuits(service):
    schema = make_schema(Attribute(type=AttributeType.STRING, name="name", required=True))
    payload = {"schemaId": "another-schema", "unknown": 1, "name": 42}

    result = service.validate(schema, payload)

    assert not result.valid
    assert result.message == "This entity is not part of this schema"
    assert result.messages is None


def test_missing_schema_id_is_a_mismatch(service):
    result = service.validate(scalar_schema(), {"number": 1})

    assert not result.valid
    assert result.message == "This entity is not part of this schema"


def test_required_attributes_missing(service):
    schema = make_schema(
        Attribute(type=AttributeType.BOOLEAN, name="bool", required=True),
        Attribute(type=AttributeType.NUMERIC, name="number", required=True),
        Attribute(type=AttributeType.STRING, name="string", required=True),
    )

    result = service.validate(schema, entity())

    assert not result.valid
    assert result.messages == {
        "bool": "This attribute is required.",
        "number": "This attribute is required.",
        "string": "This attribute is required.",
    }


def test_only_missing_required_attribute_is_reported(service):
    schema = make_schema(
        Attribute(type=AttributeType.BOOLEAN, name="bool"),
        Attribute(type=AttributeType.NUMERIC, name="number", required=True),
    )

    result = service.validate(schema, {"schemaId": SCHEMA_ID})

    assert not result.valid
    assert result.messages == {"number": "This attribute is required."}


def test_required_attribute_with_null_value(service):
    result = service.validate(scalar_schema(required=True), entity(number=None))

    assert not result.valid
    assert result.messages == {"number": "This attribute is required."}


def test_optional_attribute_with_null_value_is_type_checked(service):
    result = service.validate(scalar_schema(), entity(string=None))

    assert not result.valid
    assert result.messages == {"string": "This attribute must be a string but got 'null'."}


def test_unknown_attribute(service):
    result = service.validate(scalar_schema(), entity(color="red"))

    assert not result.valid
    assert result.messages == {"color": "This attribute is not defined for this schema."}


def test_string_max_length_boundary(service):
    schema = make_schema(
        Attribute(type=AttributeType.STRING, name="string", required=True, max_length=5)
    )

    assert service.validate(schema, entity(string="12345")).valid

    result = service.validate(schema, entity(string="123456"))
    assert not result.valid
    assert result.messages == {"string": "Max length is 5."}


def test_string_type(service):
    result = service.validate(scalar_schema(), entity(string=12))

    assert not result.valid
    assert result.messages == {"string": "This attribute must be a string but got 'number'."}


@pytest.mark.parametrize("number", [0, 10, 5])
def test_number_within_bounds(service, number):
    schema = scalar_schema(required=True, min=0, max=10, integer=True)

    result = service.validate(schema, entity(number=number))

    assert result.valid
    assert "number" not in result.messages


def test_number_above_max(service):
    schema = scalar_schema(required=True, min=0, max=10, integer=True)

    result = service.validate(schema, entity(number=11))

    assert not result.valid
    assert result.messages == {"number": "Max value is 10."}


def test_number_below_min_cites_max_bound(service):
    schema = scalar_schema(required=True, min=0, max=10, integer=True)

    result = service.validate(schema, entity(number=-1))

    assert not result.valid
    assert result.messages == {"number": "Min value is 10."}


@pytest.mark.parametrize("number", [1.5, 0.1, 9.99])
def test_number_must_be_integer(service, number):
    schema = scalar_schema(min=0, max=10, integer=True)

    result = service.validate(schema, entity(number=number))

    assert not result.valid
    assert result.messages == {"number": "Value must be an integer."}


def test_integral_float_is_an_integer(service):
    schema = scalar_schema(integer=True)

    assert service.validate(schema, entity(number=4.0)).valid


def test_number_type_stops_numeric_checks(service):
    schema = scalar_schema(min=0, max=10, integer=True)

    result = service.validate(schema, entity(number="11"))

    assert not result.valid
    assert result.messages == {"number": "This attribute must be numeric but got 'string'."}


def test_boolean_is_not_numeric(service):
    result = service.validate(scalar_schema(), entity(number=True))

    assert result.messages == {"number": "This attribute must be numeric but got 'boolean'."}


def test_boolean_type(service):
    result = service.validate(scalar_schema(), entity(bool="yes"))

    assert not result.valid
    assert result.messages == {"bool": "This attribute must be boolean but got 'string'."}


def test_several_attributes_reported_together(service):
    schema = scalar_schema(max_length=1, max=10)

    result = service.validate(schema, entity(bool=1, number=50, string="long", extra=[]))

    assert not result.valid
    assert result.messages == {
        "bool": "This attribute must be boolean but got 'number'.",
        "number": "Max value is 10.",
        "string": "Max length is 1.",
        "extra": "This attribute is not defined for this schema.",
    }


def test_relationship_attributes_are_not_expected_keys(service):
    schema = make_schema(
        Attribute(type=AttributeType.STRING, name="name"),
        Attribute(
            type=AttributeType.RELATIONSHIP,
            name="friends",
            required=True,
            cardinality=Cardinality.MANY_TO_MANY,
            target_id=SCHEMA_ID,
        ),
    )

    assert service.validate(schema, entity(name="a")).valid
    assert service.validate(schema, entity(name="a", friends=["x"])).valid


def test_validation_is_deterministic(service):
    schema = scalar_schema(required=True, max=10)
    payload = entity(number=12, string=3)

    first = service.validate(schema, payload)
    second = service.validate(schema, payload)

    assert first == second
    assert payload == entity(number=12, string=3)


def test_key_order_does_not_change_result(service):
    schema = scalar_schema(max_length=2, max=10)
    forward = {"schemaId": SCHEMA_ID, "number": 20, "string": "abc", "bool": "x"}
    backward = dict(reversed(list(forward.items())))

    assert service.validate(schema, forward) == service.validate(schema, backward)


def test_integer_too_large_for_a_float(service):
    schema = scalar_schema(integer=True)

    result = service.validate(schema, entity(number=10**400))

    assert result.valid


def test_integer_too_large_for_a_float_against_bounds(service):
    schema = scalar_schema(min=0, max=10, integer=True)

    result = service.validate(schema, entity(number=10**400))

    assert result.messages == {"number": "Max value is 10."}


@pytest.mark.parametrize(
    "number,kind", [(float("nan"), "nan"), (float("inf"), "inf"), (float("-inf"), "-inf")]
)
def test_number_must_be_finite(service, number, kind):
    result = service.validate(scalar_schema(), entity(number=number))

    assert not result.valid
    assert result.messages == {"number": f"This attribute must be numeric but got '{kind}'."}
