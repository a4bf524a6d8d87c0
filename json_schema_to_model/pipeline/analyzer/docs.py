"""
Documentation text for generated classes and fields.
"""

from __future__ import annotations

import json
import textwrap

from ..repository.uris import extract_schema_name
from ..schema_ast.nodes import ArraySchema, NumberSchema, Schema
from .composition import find_enum, find_variant, first_attribute

MAX_COMMENT_LINE_LENGTH = 70


def wrap(text: str, width: int = MAX_COMMENT_LINE_LENGTH) -> str:
    """Word-wrap each paragraph of a text."""
    paragraphs = [textwrap.fill(line, width=width) if line else "" for line in text.split("\n")]
    return "\n".join(paragraphs)


def class_doc(schema: Schema, canonical_uri: str | None) -> str:
    """
    Create the documentation of a class.

    Example:
        "Metadata about the glTF asset.\n\nAuto-generated for asset.schema.json"
    """
    parts = []
    if schema.description:
        parts.append(schema.description)
        parts.append("")
    name = extract_schema_name(canonical_uri) if canonical_uri else schema.id
    parts.append(f"Auto-generated for {name}")
    return "\n".join(parts)


def field_doc_lines(class_name: str, property_name: str, schema: Schema, is_required: bool) -> list[str]:
    """
    Create the documentation lines of a field.

    Args:
        class_name: The name of the class containing the field
        property_name: The JSON name of the property
        schema: The schema of the property
        is_required: Whether the property is required

    Returns:
        The lines, starting with the description
    """
    return _doc_lines(class_name, property_name, schema, is_required, [])


def _doc_lines(class_name: str, property_name: str, schema: Schema, is_required: bool, visiting: list[Schema]) -> list[str]:
    description = schema.description or first_attribute(schema, Schema, "description")
    if description is None:
        description = f"The {property_name} of this {class_name}"
    lines = [description + (" (required)" if is_required else " (optional)")]
    if schema.default_string is not None:
        lines.append(f"Default: {schema.default_string}")
    enum = find_enum(schema)
    if enum is not None:
        values, _ = enum
        lines.append(f"Valid values: [{', '.join(json.dumps(v) for v in values)}]")
    if find_variant(schema, NumberSchema) is not None:
        lines.extend(_bound_lines(schema, "Minimum", "minimum", "exclusive_minimum"))
        lines.extend(_bound_lines(schema, "Maximum", "maximum", "exclusive_maximum"))
    if find_variant(schema, ArraySchema) is not None and schema not in visiting:
        lines.extend(_array_lines(schema, visiting + [schema]))
    return lines


def _bound_lines(schema: Schema, label: str, inclusive: str, exclusive: str) -> list[str]:
    exclusive_limit = first_attribute(schema, NumberSchema, exclusive)
    if exclusive_limit is not None:
        return [f"{label}: {exclusive_limit} (exclusive)"]
    inclusive_limit = first_attribute(schema, NumberSchema, inclusive)
    if inclusive_limit is not None:
        return [f"{label}: {inclusive_limit} (inclusive)"]
    return []


def _array_lines(schema: Schema, visiting: list[Schema]) -> list[str]:
    lines = []
    min_items = first_attribute(schema, ArraySchema, "min_items")
    max_items = first_attribute(schema, ArraySchema, "max_items")
    if min_items is not None and min_items == max_items:
        lines.append(f"Number of items: {min_items}")
    else:
        if min_items is not None:
            lines.append(f"Minimum number of items: {min_items}")
        if max_items is not None:
            lines.append(f"Maximum number of items: {max_items}")
    items = first_attribute(schema, ArraySchema, "items")
    if items is not None:
        lines.append("Array elements:")
        for line in _doc_lines("array", "elements", items, False, visiting):
            lines.append("  " + line)
    return lines
