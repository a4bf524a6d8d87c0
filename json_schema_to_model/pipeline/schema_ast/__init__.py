"""
Schema model: typed, memoized view of the resolved JSON Schema graph.
"""

from __future__ import annotations

from .builder import SchemaModelBuilder, build_schema
from .dialect import DIALECTS, DRAFT_03, DRAFT_04, DRAFT_2020_12, Dialect, detect_dialect, dialect_for
from .nodes import (
    ArraySchema,
    BooleanSchema,
    IntegerSchema,
    NumberSchema,
    ObjectSchema,
    Schema,
    StringSchema,
)

__all__ = [
    "SchemaModelBuilder",
    "build_schema",
    "Dialect",
    "DIALECTS",
    "DRAFT_03",
    "DRAFT_04",
    "DRAFT_2020_12",
    "detect_dialect",
    "dialect_for",
    "Schema",
    "ObjectSchema",
    "ArraySchema",
    "StringSchema",
    "NumberSchema",
    "IntegerSchema",
    "BooleanSchema",
]
