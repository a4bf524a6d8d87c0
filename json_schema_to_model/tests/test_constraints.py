import json

import pytest

from json_schema_to_model.pipeline.analyzer.constraints import derive_constraints, describe_constraints
from json_schema_to_model.pipeline.analyzer.ir_nodes import Constraint, ConstraintKind
from json_schema_to_model.pipeline.schema_ast import build_schema


def property_schema(tmp_path, property_node, definitions=None):
    node = {"type": "object", "properties": {"p": property_node}}
    if definitions:
        node["definitions"] = definitions
    path = tmp_path / "s.json"
    path.write_text(json.dumps(node))
    schema, _ = build_schema(str(path))
    return schema.properties["p"]


@pytest.mark.parametrize(
    "constraint,expected",
    [
        (Constraint(ConstraintKind.NOT_NULL), "value may not be null"),
        (Constraint(ConstraintKind.EXCLUSIVE_MINIMUM, 0), "value must be > 0"),
        (Constraint(ConstraintKind.MINIMUM, 0.5), "value must be >= 0.5"),
        (Constraint(ConstraintKind.MAXIMUM, 1), "value must be <= 1"),
        (Constraint(ConstraintKind.EXCLUSIVE_MAXIMUM, 10), "value must be < 10"),
        (Constraint(ConstraintKind.MULTIPLE_OF, 4), "value must be a multiple of 4"),
        (Constraint(ConstraintKind.MIN_ITEMS, 1), "number of value elements must be >= 1"),
        (Constraint(ConstraintKind.MAX_LENGTH, 8), "length of value must be <= 8"),
        (Constraint(ConstraintKind.PATTERN, "^a$"), 'value must match the pattern "^a$"'),
        (Constraint(ConstraintKind.ENUM, ("SCALAR", "VEC2")), 'value must be one of ["SCALAR", "VEC2"]'),
        (
            Constraint(ConstraintKind.ENUM, (5120, 5121), is_open=True),
            "value must be one of [5120, 5121], or any other value of its type",
        ),
        (Constraint(ConstraintKind.ENUM, (True, None)), "value must be one of [true, null]"),
    ],
)
def test_describe(constraint, expected):
    assert constraint.describe() == expected


def test_describe_element_constraints():
    constraint = Constraint(
        ConstraintKind.ITEMS,
        element_constraints=(Constraint(ConstraintKind.MINIMUM, 0), Constraint(ConstraintKind.MAXIMUM, 1)),
    )
    assert constraint.describe("weights") == "each weights element must be >= 0; each weights element must be <= 1"


def test_required_exclusive_minimum(tmp_path):
    schema = property_schema(tmp_path, {"type": "integer", "exclusiveMinimum": 0})
    constraints = derive_constraints(schema, is_required=True)
    assert constraints == [
        Constraint(ConstraintKind.NOT_NULL),
        Constraint(ConstraintKind.EXCLUSIVE_MINIMUM, 0),
    ]
    assert describe_constraints(constraints, "count") == ["count may not be null", "count must be > 0"]


def test_optional_field_has_no_null_check(tmp_path):
    schema = property_schema(tmp_path, {"type": "number", "minimum": 0, "maximum": 1})
    assert derive_constraints(schema, is_required=False) == [
        Constraint(ConstraintKind.MINIMUM, 0),
        Constraint(ConstraintKind.MAXIMUM, 1),
    ]


def test_integer_limits_are_integers(tmp_path):
    schema = property_schema(tmp_path, {"type": "integer", "maximum": 10.0})
    (constraint,) = derive_constraints(schema, is_required=False)
    assert constraint.value == 10
    assert type(constraint.value) is int


def test_multiple_of_constraint(tmp_path):
    schema = property_schema(tmp_path, {"type": "integer", "minimum": 0, "multipleOf": 4.0})
    constraints = derive_constraints(schema, is_required=False)
    assert constraints == [
        Constraint(ConstraintKind.MINIMUM, 0),
        Constraint(ConstraintKind.MULTIPLE_OF, 4),
    ]
    assert type(constraints[1].value) is int
    assert describe_constraints(constraints, "stride") == ["stride must be >= 0", "stride must be a multiple of 4"]


def test_invalid_multiple_of_gives_no_constraint(tmp_path):
    schema = property_schema(tmp_path, {"type": "number", "multipleOf": 0})
    assert derive_constraints(schema, is_required=False) == []


def test_open_enum_from_any_of(tmp_path):
    schema = property_schema(
        tmp_path,
        {"anyOf": [{"const": 5120}, {"const": 5121}, {"type": "integer"}]},
    )
    (constraint,) = derive_constraints(schema, is_required=False)
    assert constraint.kind == ConstraintKind.ENUM
    assert constraint.value == (5120, 5121)
    assert constraint.is_open


def test_closed_enum(tmp_path):
    schema = property_schema(tmp_path, {"type": "string", "enum": ["OPAQUE", "MASK", "BLEND"]})
    (constraint,) = derive_constraints(schema, is_required=False)
    assert constraint == Constraint(ConstraintKind.ENUM, ("OPAQUE", "MASK", "BLEND"))


def test_string_constraints(tmp_path):
    schema = property_schema(tmp_path, {"type": "string", "minLength": 1, "maxLength": 3, "pattern": "^[a-z]+$"})
    assert derive_constraints(schema, is_required=False) == [
        Constraint(ConstraintKind.MIN_LENGTH, 1),
        Constraint(ConstraintKind.MAX_LENGTH, 3),
        Constraint(ConstraintKind.PATTERN, "^[a-z]+$"),
    ]


def test_array_constraints(tmp_path):
    schema = property_schema(
        tmp_path,
        {"type": "array", "items": {"type": "number", "minimum": 0}, "minItems": 1, "maxItems": 16},
    )
    assert derive_constraints(schema, is_required=False) == [
        Constraint(ConstraintKind.MIN_ITEMS, 1),
        Constraint(ConstraintKind.MAX_ITEMS, 16),
        Constraint(ConstraintKind.ITEMS, element_constraints=(Constraint(ConstraintKind.MINIMUM, 0),)),
    ]


def test_constraints_through_annotated_reference(tmp_path):
    schema = property_schema(
        tmp_path,
        {"allOf": [{"$ref": "#/definitions/id"}], "description": "The index of the buffer view."},
        definitions={"id": {"type": "integer", "minimum": 0}},
    )
    assert derive_constraints(schema, is_required=False) == [Constraint(ConstraintKind.MINIMUM, 0)]


def test_recursive_items_terminate(tmp_path):
    schema = property_schema(
        tmp_path,
        {"$ref": "#/definitions/nested"},
        definitions={"nested": {"type": "array", "minItems": 1, "items": {"$ref": "#/definitions/nested"}}},
    )
    assert derive_constraints(schema, is_required=False) == [Constraint(ConstraintKind.MIN_ITEMS, 1)]


def test_boolean_exclusive_minimum(tmp_path):
    path = tmp_path / "s.json"
    path.write_text(
        json.dumps(
            {
                "$schema": "http://json-schema.org/draft-04/schema",
                "type": "object",
                "properties": {"p": {"type": "number", "minimum": 0, "exclusiveMinimum": True}},
            }
        )
    )
    schema, _ = build_schema(str(path))
    constraints = derive_constraints(schema.properties["p"], is_required=False)
    assert describe_constraints(constraints) == ["value must be > 0"]
