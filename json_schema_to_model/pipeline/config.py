"""
Configuration for the model generator pipeline.

The core only queries the configuration through the small set of
``is_*``/``get_*`` methods below.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field


@dataclass
class ClassGeneratorConfig:
    """Configuration options for class generation."""

    # Generate add/remove methods for list and map fields
    create_adders_and_removers: bool = False

    # Generate a method returning the declared default of optional fields
    create_getters_with_default: bool = False

    # Regular expression (matched against the schema id) -> fixed type name
    type_overrides: dict[str, str] = field(default_factory=dict)

    # Derived class name -> replacement class name
    class_name_overrides: dict[str, str] = field(default_factory=dict)

    # Fields whose validation is suppressed, as "package.ClassName#property"
    skipped_validations: list[str] = field(default_factory=list)

    # JSON Schema dialect: "draft-03", "draft-04", "2020-12" or "auto"
    dialect: str = "auto"

    # Additional locations for resolving relative references
    search_locations: list[str] = field(default_factory=list)

    # Emit a validate() method built from the constraint descriptions
    add_validation: bool = True

    def is_creating_adders_and_removers(self) -> bool:
        return self.create_adders_and_removers

    def is_creating_getters_with_default(self) -> bool:
        return self.create_getters_with_default

    def get_type_override(self, schema_id: str | None) -> str | None:
        """
        Return the type that replaces the schema with the given id.

        Args:
            schema_id: The id of the schema

        Returns:
            The type name of the first matching override, or None
        """
        if schema_id is None:
            return None
        for pattern, type_name in self.type_overrides.items():
            if re.fullmatch(pattern, schema_id):
                return type_name
        return None

    def get_class_name_override(self, class_name: str) -> str | None:
        return self.class_name_overrides.get(class_name)

    def is_skipping_validation(self, full_property_name: str) -> bool:
        return full_property_name in self.skipped_validations

    @staticmethod
    def from_dict(d: dict) -> ClassGeneratorConfig:
        """Create a config from a dictionary."""
        config = ClassGeneratorConfig()
        for k, v in d.items():
            if hasattr(config, k):
                setattr(config, k, v)
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "create_adders_and_removers": self.create_adders_and_removers,
            "create_getters_with_default": self.create_getters_with_default,
            "type_overrides": self.type_overrides,
            "class_name_overrides": self.class_name_overrides,
            "skipped_validations": self.skipped_validations,
            "dialect": self.dialect,
            "search_locations": self.search_locations,
            "add_validation": self.add_validation,
        }


@dataclass
class GeneratorInput:
    """A root schema location and the package its classes are generated into."""

    url: str
    package_name: str
    # Raw text prepended to every generated file of the package
    header_code: str | None = None

    @staticmethod
    def from_dict(d: dict) -> GeneratorInput:
        return GeneratorInput(url=d["url"], package_name=d["package_name"], header_code=d.get("header_code"))
