"""
Target type definitions.

These nodes represent the language-neutral class model that is handed
to the emission backends. A target type is one of ``PrimitiveType``,
``CollectionType``, ``MapType`` or ``ClassType``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..diagnostics import Diagnostics
from ..schema_ast.nodes import Schema


@dataclass(frozen=True)
class PrimitiveType:
    """A primitive value, or the open type that accepts anything."""

    name: str  # "boolean", "integer", "number", "string", "any", or an overridden type name


BOOLEAN = PrimitiveType("boolean")
INTEGER = PrimitiveType("integer")
NUMBER = PrimitiveType("number")
STRING = PrimitiveType("string")
ANY = PrimitiveType("any")

PRIMITIVES = {p.name: p for p in (BOOLEAN, INTEGER, NUMBER, STRING, ANY)}


@dataclass(frozen=True)
class CollectionType:
    """An ordered collection of elements."""

    item_type: TargetType
    # Set when minItems and maxItems are equal
    fixed_size: int | None = None
    unique_items: bool = False


@dataclass(frozen=True)
class MapType:
    """A map from strings to values."""

    value_type: TargetType


class ConstraintKind(Enum):
    """Kind of a validation constraint."""

    NOT_NULL = "not_null"
    MINIMUM = "minimum"  # value >= limit
    EXCLUSIVE_MINIMUM = "exclusive_minimum"  # value > limit
    MAXIMUM = "maximum"  # value <= limit
    EXCLUSIVE_MAXIMUM = "exclusive_maximum"  # value < limit
    MULTIPLE_OF = "multiple_of"
    ENUM = "enum"
    MIN_ITEMS = "min_items"
    MAX_ITEMS = "max_items"
    ITEMS = "items"  # constraints for each element
    MIN_LENGTH = "min_length"
    MAX_LENGTH = "max_length"
    PATTERN = "pattern"


_DESCRIPTIONS = {
    ConstraintKind.NOT_NULL: "{name} may not be null",
    ConstraintKind.MINIMUM: "{name} must be >= {value}",
    ConstraintKind.EXCLUSIVE_MINIMUM: "{name} must be > {value}",
    ConstraintKind.MAXIMUM: "{name} must be <= {value}",
    ConstraintKind.EXCLUSIVE_MAXIMUM: "{name} must be < {value}",
    ConstraintKind.MULTIPLE_OF: "{name} must be a multiple of {value}",
    ConstraintKind.MIN_ITEMS: "number of {name} elements must be >= {value}",
    ConstraintKind.MAX_ITEMS: "number of {name} elements must be <= {value}",
    ConstraintKind.MIN_LENGTH: "length of {name} must be >= {value}",
    ConstraintKind.MAX_LENGTH: "length of {name} must be <= {value}",
    ConstraintKind.PATTERN: "{name} must match the pattern {value}",
}


@dataclass(frozen=True)
class Constraint:
    """
    A validation constraint of a field.

    Constraints describe what a valid value looks like. Backends render
    them as guard clauses in their target language.
    """

    kind: ConstraintKind
    value: Any = None
    # For ENUM: the listed values are not exhaustive
    is_open: bool = False
    # For ITEMS: the constraints that apply to every element
    element_constraints: tuple[Constraint, ...] = ()

    def describe(self, name: str = "value") -> str:
        """
        Describe the constraint as text.

        Example:
            Constraint(ConstraintKind.EXCLUSIVE_MINIMUM, 0).describe() -> "value must be > 0"
        """
        if self.kind == ConstraintKind.ENUM:
            values = ", ".join(_format_value(v) for v in self.value)
            text = f"{name} must be one of [{values}]"
            if self.is_open:
                text += ", or any other value of its type"
            return text
        if self.kind == ConstraintKind.ITEMS:
            parts = [c.describe(f"each {name} element") for c in self.element_constraints]
            return "; ".join(parts)
        return _DESCRIPTIONS[self.kind].format(name=name, value=_format_value(self.value))


def _format_value(value: Any) -> str:
    if isinstance(value, str):
        return f'"{value}"'
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass(eq=False)
class FieldDef:
    """A field of a generated class."""

    name: str = ""  # Valid identifier
    json_name: str = ""  # Original JSON property name
    target_type: TargetType | None = None
    is_required: bool = False
    schema: Schema | None = None

    # Default value, parsed into a literal of the field type
    default_value: Any = None
    has_default: bool = False

    # Documentation lines
    doc: list[str] = field(default_factory=list)

    # Validation constraints; empty if validation is skipped for this field
    constraints: list[Constraint] = field(default_factory=list)
    validation_skipped: bool = False

    # Accessor contracts
    has_adder_and_remover: bool = False
    has_default_getter: bool = False

    # Whether this is the synthetic field for additionalProperties
    is_additional_properties: bool = False


@dataclass(eq=False)
class ClassType:
    """A generated class."""

    name: str = ""
    package: str = ""

    superclass: ClassType | None = None

    doc: str = ""

    fields: list[FieldDef] = field(default_factory=list)

    # The schema the class was created for, and the URIs that identify it
    schema: Schema | None = None
    uris: list[str] = field(default_factory=list)

    @property
    def full_name(self) -> str:
        if not self.package:
            return self.name
        return f"{self.package}.{self.name}"

    def ancestors(self) -> list[ClassType]:
        result = []
        current = self.superclass
        while current is not None and current not in result and current is not self:
            result.append(current)
            current = current.superclass
        return result

    def __repr__(self) -> str:
        return f"ClassType({self.full_name})"


TargetType = PrimitiveType | CollectionType | MapType | ClassType


@dataclass
class TypeModel:
    """The complete target type graph of one generator run."""

    classes: list[ClassType] = field(default_factory=list)

    # Target types of the root schemas, in input order
    roots: list[TargetType] = field(default_factory=list)

    # Full class name -> all URIs that identify the class
    class_uris: dict[str, list[str]] = field(default_factory=dict)

    diagnostics: Diagnostics = field(default_factory=Diagnostics)

    def get_class(self, name: str) -> ClassType | None:
        """Find a class by simple or full name."""
        for class_type in self.classes:
            if name in (class_type.name, class_type.full_name):
                return class_type
        return None

    def packages(self) -> list[str]:
        result: list[str] = []
        for class_type in self.classes:
            if class_type.package not in result:
                result.append(class_type.package)
        return result


def type_name(target_type: TargetType) -> str:
    """A readable, language-neutral name of a target type, e.g. ``list[integer]``."""
    match target_type:
        case PrimitiveType(name=name):
            return name
        case CollectionType(item_type=item_type, fixed_size=fixed_size):
            if fixed_size is not None:
                return f"list[{type_name(item_type)}; {fixed_size}]"
            return f"list[{type_name(item_type)}]"
        case MapType(value_type=value_type):
            return f"map[string, {type_name(value_type)}]"
        case ClassType():
            return target_type.full_name
    raise TypeError(f"Not a target type: {target_type!r}")
