"""
Helpers for schemas that are composed with anyOf, allOf or references.

Schemas in the wild encode "extensible enumerations" as an ``anyOf`` of
single-value enums plus one open member, and they wrap references in a
one-element ``allOf`` to attach a description. These helpers find the
schema that actually carries the type information.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any

from ..schema_ast.nodes import ObjectSchema, Schema

logger = logging.getLogger(__name__)


def union_type_tags(schemas: list[Schema]) -> list[str]:
    tags: list[str] = []
    for schema in schemas:
        for tag in schema.type_tags:
            if tag not in tags:
                tags.append(tag)
    return tags


def determine_common_type_from_any_of(schema: Schema) -> Schema | None:
    """
    Return a member of ``anyOf`` if all members declare the same single type.

    Args:
        schema: The schema with an ``anyOf``

    Returns:
        The first member, or None if the members have different types
    """
    if not schema.any_of:
        return None
    tags = union_type_tags(schema.any_of)
    if len(tags) == 1:
        return schema.any_of[0]
    logger.debug("No common type in anyOf of %s: %s", schema.short_description(), tags)
    return None


def determine_type_from_untyped_any_of(schema: Schema) -> Schema | None:
    """
    Return the only ``anyOf`` member that is not an object schema.

    Typical input:
        "anyOf": [{"enum": [5120]}, {"enum": [5121]}, {"type": "integer"}]

    Returns:
        The single non-object member, or None if there is not exactly one
    """
    if not schema.any_of:
        return None
    candidates = [member for member in schema.any_of if not isinstance(member, ObjectSchema)]
    if len(candidates) == 1:
        return candidates[0]
    logger.debug("Found %d non-object members in anyOf of %s", len(candidates), schema.short_description())
    return None


def determine_enum_values_from_any_of(schema: Schema) -> list[Any]:
    """Return the union of the enum values of all ``anyOf`` members."""
    values: list[Any] = []
    for member in schema.any_of or []:
        for value in member.enum or []:
            if not _contains(values, value):
                values.append(value)
    return values


def is_any_of_open(schema: Schema) -> bool:
    """Whether an ``anyOf`` has a member that accepts values outside of all enums."""
    return any(member.enum is None for member in schema.any_of or [])


def delegation_chain(schema: Schema) -> Iterator[Schema]:
    """
    Yield the schema and the schemas it delegates to.

    A schema delegates to the target of its reference, to the only
    entry of a one-element ``allOf``, and to the ``anyOf`` member that
    carries its type. Cycles are cut.
    """
    seen: list[Schema] = []
    current: Schema | None = schema
    while current is not None and current not in seen:
        seen.append(current)
        yield current
        if current.ref is not None:
            current = current.ref
        elif current.all_of is not None and len(current.all_of) == 1:
            current = current.all_of[0]
        elif isinstance(current, ObjectSchema) and current.any_of and not current.properties:
            current = determine_common_type_from_any_of(current) or determine_type_from_untyped_any_of(current)
        else:
            current = None


def find_enum(schema: Schema) -> tuple[list[Any], bool] | None:
    """
    Find the valid values of a schema.

    Returns:
        The values and whether they are open (other values are allowed
        as well), or None if the schema does not enumerate its values
    """
    for member in delegation_chain(schema):
        if member.enum is not None:
            return list(member.enum), False
        if member.any_of:
            values = determine_enum_values_from_any_of(member)
            if values:
                return values, is_any_of_open(member)
    return None


def first_attribute(schema: Schema, variant: type, name: str) -> Any:
    """Return the first non-None attribute along the delegation chain of schemas of a variant."""
    for member in delegation_chain(schema):
        if isinstance(member, variant):
            value = getattr(member, name)
            if value is not None:
                return value
    return None


def find_variant(schema: Schema, variant: type) -> Schema | None:
    for member in delegation_chain(schema):
        if isinstance(member, variant):
            return member
    return None


def _contains(values: list[Any], value: Any) -> bool:
    # 1 == True in Python, but not in JSON
    return any(v == value and type(v) is type(value) for v in values)
