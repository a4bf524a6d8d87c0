"""
Base class for code generation backends.

Defines the interface that all language-specific backends must implement.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

import jinja2

from ..analyzer.docs import wrap
from ..analyzer.ir_nodes import ClassType, FieldDef, TargetType, TypeModel
from ..config import ClassGeneratorConfig


class CodeBackend(ABC):
    """Abstract base class for code generation backends."""

    # Type mapping from primitive type names to language types
    TYPE_MAP: dict[str, str] = {}

    # Template directory name
    TEMPLATE_LANG: str = ""

    # File extension
    FILE_EXTENSION: str = ""

    def __init__(self, config: ClassGeneratorConfig):
        """
        Initialize the backend.

        Args:
            config: Class generation configuration
        """
        self.config = config
        self._setup_templates()

    def _setup_templates(self) -> None:
        """Set up Jinja2 templates."""
        template_dir = Path(__file__).parent.parent.parent / "templates" / self.TEMPLATE_LANG
        self.jinja_env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            lstrip_blocks=True,
            trim_blocks=True,
        )
        self.prefix_template = self.jinja_env.get_template(f"prefix.{self.FILE_EXTENSION}.jinja2")
        self.class_template = self.jinja_env.get_template(f"class.{self.FILE_EXTENSION}.jinja2")
        self.suffix_template = self.jinja_env.get_template(f"suffix.{self.FILE_EXTENSION}.jinja2")

    def generate(
        self,
        model: TypeModel,
        header_codes: dict[str, str | None] | None = None,
        generation_comment: str | None = None,
    ) -> dict[str, str]:
        """
        Generate one source file per package.

        Args:
            model: The type model
            header_codes: Package name -> raw text prepended to the file of the package
            generation_comment: Text added to the documentation of every file

        Returns:
            Relative file path -> source code
        """
        header_codes = header_codes or {}
        return {
            self.module_path(package): self.generate_package(model, package, header_codes.get(package), generation_comment)
            for package in model.packages()
        }

    @abstractmethod
    def module_path(self, package: str) -> str:
        """Return the relative path of the file generated for a package."""

    @abstractmethod
    def generate_package(
        self,
        model: TypeModel,
        package: str,
        header_code: str | None = None,
        generation_comment: str | None = None,
    ) -> str:
        """
        Generate the source code of all classes of one package.

        Args:
            model: The type model
            package: The package name
            header_code: Raw text prepended to the file
            generation_comment: Text added to the documentation of the file

        Returns:
            Generated code as a string
        """

    @abstractmethod
    def translate_type(self, target_type: TargetType, package: str) -> str:
        """
        Translate a target type to a language-specific type string.

        Args:
            target_type: The target type
            package: The package the type is used in

        Returns:
            Language-specific type string
        """

    @abstractmethod
    def format_default_value(self, value: Any, target_type: TargetType) -> str:
        """
        Format a default value for the target language.

        Args:
            value: The parsed default value
            target_type: The type of the value

        Returns:
            Formatted default value string
        """

    def _order_classes(self, classes: list[ClassType]) -> list[ClassType]:
        """
        Order classes so that a superclass is defined before its subclasses.

        The creation order is kept otherwise.
        """
        ordered: list[ClassType] = []
        members = set(map(id, classes))

        def visit(class_type: ClassType, path: set[int]) -> None:
            if class_type in ordered or id(class_type) in path:
                return
            superclass = class_type.superclass
            if superclass is not None and id(superclass) in members:
                visit(superclass, path | {id(class_type)})
            ordered.append(class_type)

        for class_type in classes:
            visit(class_type, set())
        return ordered

    def _order_fields(self, fields: list[FieldDef]) -> list[FieldDef]:
        """
        Order fields for readability.

        Required fields without defaults come first, then everything
        that can be omitted.
        """
        required_fields = []
        optional_fields = []
        for field_def in fields:
            if field_def.is_required and not field_def.has_default:
                required_fields.append(field_def)
            else:
                optional_fields.append(field_def)
        return required_fields + optional_fields

    def _doc_lines(self, text: str) -> list[str]:
        """Wrap documentation text into lines."""
        return wrap(text).split("\n")

    def _prepare_class_context(self, class_type: ClassType) -> dict[str, Any]:
        """
        Prepare the template context for a class.

        Args:
            class_type: The class

        Returns:
            Dictionary of template variables
        """
        properties = [self._prepare_field_context(class_type, field_def) for field_def in self._order_fields(class_type.fields)]
        return {
            "CLASS_NAME": class_type.name,
            "EXTENDS": class_type.superclass.name if class_type.superclass is not None else None,
            "DOC_LINES": self._doc_lines(class_type.doc),
            "properties": properties,
            "METHODS": self._prepare_methods(class_type),
        }

    def _prepare_field_context(self, class_type: ClassType, field_def: FieldDef) -> dict[str, Any]:
        """
        Prepare the template context for a field.

        Args:
            class_type: The class containing the field
            field_def: The field definition

        Returns:
            Dictionary of template variables
        """
        doc_lines = []
        for line in field_def.doc:
            indent = len(line) - len(line.lstrip(" "))
            doc_lines.extend(" " * indent + wrapped for wrapped in self._doc_lines(line.strip()))
        return {
            "NAME": field_def.name,
            "JSON_NAME": field_def.json_name,
            "TYPE": self.translate_type(field_def.target_type, class_type.package),
            "DOC_LINES": doc_lines,
        }

    def _prepare_methods(self, class_type: ClassType) -> list[list[str]]:
        """Return the source lines of the additional methods of a class."""
        return []
