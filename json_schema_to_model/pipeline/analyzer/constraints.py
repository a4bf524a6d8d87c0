"""
Derivation of validation constraints for fields.

Constraints are derived from the schema of a property. They are exposed
as ``Constraint`` descriptions, so that every backend can render them
as guard clauses in its own language.
"""

from __future__ import annotations

from ..schema_ast.nodes import ArraySchema, IntegerSchema, NumberSchema, Schema, StringSchema
from .composition import find_enum, find_variant, first_attribute
from .ir_nodes import Constraint, ConstraintKind

# Bound attributes of number schemas and the constraint they turn into
_NUMBER_BOUNDS = (
    ("minimum", ConstraintKind.MINIMUM),
    ("exclusive_minimum", ConstraintKind.EXCLUSIVE_MINIMUM),
    ("maximum", ConstraintKind.MAXIMUM),
    ("exclusive_maximum", ConstraintKind.EXCLUSIVE_MAXIMUM),
    ("multiple_of", ConstraintKind.MULTIPLE_OF),
)


def derive_constraints(schema: Schema, is_required: bool) -> list[Constraint]:
    """
    Derive the constraints for a field.

    Args:
        schema: The schema of the property
        is_required: Whether the property is required in its object

    Returns:
        The constraints, starting with the non-null contract of required fields
    """
    constraints = []
    if is_required:
        constraints.append(Constraint(ConstraintKind.NOT_NULL))
    constraints.extend(derive_value_constraints(schema))
    return constraints


def derive_value_constraints(schema: Schema, visiting: set[int] | None = None) -> list[Constraint]:
    """Derive the constraints for a value that is not None."""
    if visiting is None:
        visiting = set()
    if id(schema) in visiting:
        return []
    visiting.add(id(schema))
    try:
        constraints = []
        enum = find_enum(schema)
        if enum is not None:
            values, is_open = enum
            constraints.append(Constraint(ConstraintKind.ENUM, tuple(values), is_open=is_open))
        elif find_variant(schema, NumberSchema) is not None:
            constraints.extend(_number_constraints(schema))
        constraints.extend(_array_constraints(schema, visiting))
        constraints.extend(_string_constraints(schema))
        return constraints
    finally:
        visiting.discard(id(schema))


def _number_constraints(schema: Schema) -> list[Constraint]:
    is_integer = find_variant(schema, IntegerSchema) is not None
    constraints = []
    for attribute, kind in _NUMBER_BOUNDS:
        limit = first_attribute(schema, NumberSchema, attribute)
        if limit is None:
            continue
        if is_integer and isinstance(limit, float) and limit.is_integer():
            limit = int(limit)
        constraints.append(Constraint(kind, limit))
    return constraints


def _array_constraints(schema: Schema, visiting: set[int]) -> list[Constraint]:
    array_schema = find_variant(schema, ArraySchema)
    if array_schema is None:
        return []
    constraints = []
    min_items = first_attribute(schema, ArraySchema, "min_items")
    max_items = first_attribute(schema, ArraySchema, "max_items")
    if min_items is not None:
        constraints.append(Constraint(ConstraintKind.MIN_ITEMS, min_items))
    if max_items is not None:
        constraints.append(Constraint(ConstraintKind.MAX_ITEMS, max_items))
    items = first_attribute(schema, ArraySchema, "items")
    if items is not None:
        element_constraints = derive_value_constraints(items, visiting)
        if element_constraints:
            constraints.append(Constraint(ConstraintKind.ITEMS, element_constraints=tuple(element_constraints)))
    return constraints


def _string_constraints(schema: Schema) -> list[Constraint]:
    if find_variant(schema, StringSchema) is None:
        return []
    constraints = []
    min_length = first_attribute(schema, StringSchema, "min_length")
    max_length = first_attribute(schema, StringSchema, "max_length")
    pattern = first_attribute(schema, StringSchema, "pattern")
    if min_length is not None:
        constraints.append(Constraint(ConstraintKind.MIN_LENGTH, min_length))
    if max_length is not None:
        constraints.append(Constraint(ConstraintKind.MAX_LENGTH, max_length))
    if pattern is not None:
        constraints.append(Constraint(ConstraintKind.PATTERN, pattern))
    return constraints


def describe_constraints(constraints: list[Constraint], name: str = "value") -> list[str]:
    return [constraint.describe(name) for constraint in constraints]
