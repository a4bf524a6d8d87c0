"""
Type model: maps the schema model to primitives, collections, maps and classes.
"""

from __future__ import annotations

from .analyzer import TypeModelBuilder
from .ir_nodes import (
    ANY,
    BOOLEAN,
    INTEGER,
    NUMBER,
    STRING,
    ClassType,
    CollectionType,
    Constraint,
    ConstraintKind,
    FieldDef,
    MapType,
    PrimitiveType,
    TargetType,
    TypeModel,
    type_name,
)

__all__ = [
    "TypeModelBuilder",
    "TypeModel",
    "TargetType",
    "PrimitiveType",
    "CollectionType",
    "MapType",
    "ClassType",
    "FieldDef",
    "Constraint",
    "ConstraintKind",
    "type_name",
    "ANY",
    "BOOLEAN",
    "INTEGER",
    "NUMBER",
    "STRING",
]
