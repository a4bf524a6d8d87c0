"""
JSON Schema dialect descriptors.

The supported drafts only differ in a few keyword names and in how
exclusive bounds are encoded. A ``Dialect`` captures these differences
so that a single builder can read all of them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Dialect:
    """Keyword table of one JSON Schema draft."""

    name: str

    # Keywords holding the schema id, in lookup order
    id_keywords: tuple[str, ...] = ("$id",)

    # Keywords holding nested definitions, in lookup order
    definitions_keywords: tuple[str, ...] = ("$defs", "definitions")

    # Whether exclusiveMinimum/exclusiveMaximum are flags modifying minimum/maximum
    boolean_exclusive_bounds: bool = False

    # Draft 3: "extends" (used like allOf) and "disallow" (used like not)
    extends_keyword: str | None = None
    disallow_keyword: str | None = None

    # Draft 3: "required": true inside of the property schema
    required_in_property: bool = False

    # Whether "const" is known
    supports_const: bool = True

    # Whether siblings of "$ref" are ignored, making every reference a plain alias
    ref_overrides_siblings: bool = False

    # Keywords that are recognized but not translated
    unsupported_keywords: tuple[str, ...] = ()

    def first_present(self, node: dict[str, Any], keywords: tuple[str, ...]) -> Any:
        for keyword in keywords:
            if keyword in node:
                return node[keyword]
        return None


DRAFT_03 = Dialect(
    name="draft-03",
    id_keywords=("id",),
    definitions_keywords=("definitions",),
    boolean_exclusive_bounds=True,
    extends_keyword="extends",
    disallow_keyword="disallow",
    required_in_property=True,
    ref_overrides_siblings=True,
    supports_const=False,
    unsupported_keywords=("patternProperties", "dependencies"),
)

DRAFT_04 = Dialect(
    name="draft-04",
    id_keywords=("id",),
    definitions_keywords=("definitions",),
    boolean_exclusive_bounds=True,
    ref_overrides_siblings=True,
    supports_const=False,
    unsupported_keywords=("patternProperties", "dependencies"),
)

DRAFT_2020_12 = Dialect(
    name="2020-12",
    id_keywords=("$id", "id"),
    definitions_keywords=("$defs", "definitions"),
    unsupported_keywords=(
        "patternProperties",
        "dependencies",
        "dependentRequired",
        "dependentSchemas",
        "if",
        "then",
        "else",
        "prefixItems",
        "unevaluatedProperties",
        "unevaluatedItems",
    ),
)

DIALECTS = {
    DRAFT_03.name: DRAFT_03,
    DRAFT_04.name: DRAFT_04,
    DRAFT_2020_12.name: DRAFT_2020_12,
}

# Markers in "$schema" URIs, checked in order
_SCHEMA_URI_MARKERS = (
    ("draft-03", DRAFT_03),
    ("draft-04", DRAFT_04),
    ("draft-06", DRAFT_2020_12),
    ("draft-07", DRAFT_2020_12),
    ("2019-09", DRAFT_2020_12),
    ("2020-12", DRAFT_2020_12),
)


def dialect_for(name: str) -> Dialect:
    """
    Look up a dialect by name.

    Raises:
        ValueError: If the name is unknown
    """
    try:
        return DIALECTS[name]
    except KeyError:
        raise ValueError(f"Unknown dialect '{name}', expected one of {sorted(DIALECTS)}") from None


def detect_dialect(node: Any, fallback: Dialect = DRAFT_2020_12) -> Dialect:
    """Pick the dialect named by the "$schema" keyword of a root node."""
    if isinstance(node, dict):
        schema_uri = node.get("$schema")
        if isinstance(schema_uri, str):
            for marker, dialect in _SCHEMA_URI_MARKERS:
                if marker in schema_uri:
                    return dialect
    return fallback
