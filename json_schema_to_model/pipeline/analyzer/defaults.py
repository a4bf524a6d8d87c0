"""
Parsing of default values.

A schema keeps its default value as JSON text. The text is parsed into
a literal that matches the target type of the field: a boolean, an
integer, a float, a string, or a list (or map) whose elements are
parsed recursively.
"""

from __future__ import annotations

import json
from typing import Any

from .ir_nodes import ClassType, CollectionType, MapType, PrimitiveType, TargetType


def parse_default(default_string: str, target_type: TargetType) -> Any:
    """
    Parse a default value for a field.

    Args:
        default_string: The default value as JSON text
        target_type: The type of the field

    Returns:
        The literal value

    Raises:
        ValueError: If the text is not valid JSON or does not match the type
    """
    try:
        value = json.loads(default_string)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid default value {default_string!r}: {e}") from e
    return coerce_literal(value, target_type)


def coerce_literal(value: Any, target_type: TargetType) -> Any:
    """Check a parsed JSON value against a target type, converting numbers where needed."""
    match target_type:
        case PrimitiveType(name="boolean"):
            if isinstance(value, bool):
                return value
        case PrimitiveType(name="integer"):
            if isinstance(value, int) and not isinstance(value, bool):
                return value
            if isinstance(value, float) and value.is_integer():
                return int(value)
        case PrimitiveType(name="number"):
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                return float(value)
        case PrimitiveType(name="string"):
            if isinstance(value, str):
                return value
        case PrimitiveType():
            return value
        case CollectionType(item_type=item_type, fixed_size=fixed_size):
            if isinstance(value, list):
                if fixed_size is not None and len(value) != fixed_size:
                    raise ValueError(f"Expected {fixed_size} elements, found {len(value)}")
                return [coerce_literal(element, item_type) for element in value]
        case MapType(value_type=value_type):
            if isinstance(value, dict):
                return {key: coerce_literal(element, value_type) for key, element in value.items()}
        case ClassType():
            raise ValueError(f"Default values of class type {target_type.name} are not supported")
    raise ValueError(f"Default value {json.dumps(value)} does not match type {target_type}")
