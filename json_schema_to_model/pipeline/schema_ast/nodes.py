"""
Schema model node definitions.

One node exists per distinct parsed JSON node. The variant is decided
by the declared type: ``ObjectSchema``, ``ArraySchema``, ``StringSchema``,
``NumberSchema``, ``IntegerSchema`` (a kind of number) and
``BooleanSchema``. Nodes compare by identity, so they can be used as
dictionary keys even though the graph may contain cycles.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# Type tags that may appear in the "type" keyword
VALID_TYPE_TAGS = ("null", "any", "object", "array", "boolean", "string", "number", "integer")


@dataclass(eq=False, repr=False)
class Schema:
    """Attributes common to all schema variants."""

    # Declared id (resolved against the document), or the URI the schema was created for
    id: str | None = None
    schema_uri: str | None = None  # $schema
    title: str | None = None
    description: str | None = None
    format: str | None = None

    # The default value, as JSON text
    default_string: str | None = None

    # Declared type tags, deduplicated, in declaration order
    type_tags: list[str] = field(default_factory=list)

    # Values of "enum", or the single value of "const"
    enum: list[Any] | None = None

    # Target of a reference pointer that has sibling keywords
    ref: Schema | None = None

    all_of: list[Schema] | None = None
    any_of: list[Schema] | None = None
    one_of: list[Schema] | None = None
    not_: Schema | None = None

    definitions: dict[str, Schema] | None = None

    # Set for the permissive stand-in of a reference that could not be resolved
    unresolved: bool = False

    def is_number(self) -> bool:
        return isinstance(self, NumberSchema)

    def is_integer(self) -> bool:
        return isinstance(self, IntegerSchema)

    def short_description(self) -> str:
        """Short, non-recursive text for log messages."""
        parts = [f"id={self.id}"]
        if self.title:
            parts.append(f"title={self.title!r}")
        if self.type_tags:
            parts.append(f"types={self.type_tags}")
        return f"{type(self).__name__}({', '.join(parts)})"

    def __repr__(self) -> str:
        return self.short_description()


@dataclass(eq=False, repr=False)
class ObjectSchema(Schema):
    """An object, or any schema that can not be mapped to a more specific variant."""

    properties: dict[str, Schema] | None = None
    required: list[str] = field(default_factory=list)
    additional_properties: Schema | None = None
    pattern_properties: dict[str, Schema] | None = None

    # Open schema that accepts anything ("any", or no information at all)
    is_any: bool = False


@dataclass(eq=False, repr=False)
class ArraySchema(Schema):
    items: Schema | None = None
    min_items: int | None = None
    max_items: int | None = None
    unique_items: bool | None = None


@dataclass(eq=False, repr=False)
class StringSchema(Schema):
    min_length: int | None = None
    max_length: int | None = None
    pattern: str | None = None


@dataclass(eq=False, repr=False)
class NumberSchema(Schema):
    """
    A number.

    Exclusive bounds are always numeric limits here. Dialects that encode
    them as boolean flags are converted while the schema is built.
    """

    minimum: float | None = None
    maximum: float | None = None
    exclusive_minimum: float | None = None
    exclusive_maximum: float | None = None
    multiple_of: float | None = None


@dataclass(eq=False, repr=False)
class IntegerSchema(NumberSchema):
    pass


@dataclass(eq=False, repr=False)
class BooleanSchema(Schema):
    pass


def create_schema(type_tag: str) -> Schema:
    """
    Create an empty schema of the variant that matches a single type tag.

    Args:
        type_tag: One of the VALID_TYPE_TAGS

    Returns:
        The new schema
    """
    match type_tag:
        case "string":
            return StringSchema()
        case "number":
            return NumberSchema()
        case "integer":
            return IntegerSchema()
        case "array":
            return ArraySchema()
        case "boolean":
            return BooleanSchema()
        case "any":
            return ObjectSchema(is_any=True)
        case _:
            return ObjectSchema()
