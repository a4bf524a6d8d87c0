"""
Python code generation backend.

Generates one module of dataclasses per package from the type model.
"""

from __future__ import annotations

import collections
from typing import Any

from ...utils import camel_to_snake_case, indent_lines
from ..analyzer.ir_nodes import (
    ClassType,
    CollectionType,
    Constraint,
    ConstraintKind,
    FieldDef,
    MapType,
    PrimitiveType,
    TargetType,
    TypeModel,
)
from ..config import ClassGeneratorConfig
from .base import CodeBackend

# Comparison that fails for each bound constraint
_BOUND_CHECKS = {
    ConstraintKind.MINIMUM: "{value} < {limit}",
    ConstraintKind.EXCLUSIVE_MINIMUM: "{value} <= {limit}",
    ConstraintKind.MAXIMUM: "{value} > {limit}",
    ConstraintKind.EXCLUSIVE_MAXIMUM: "{value} >= {limit}",
    ConstraintKind.MULTIPLE_OF: "{value} % {limit} != 0",
    ConstraintKind.MIN_ITEMS: "len({value}) < {limit}",
    ConstraintKind.MAX_ITEMS: "len({value}) > {limit}",
    ConstraintKind.MIN_LENGTH: "len({value}) < {limit}",
    ConstraintKind.MAX_LENGTH: "len({value}) > {limit}",
}

_DEFAULT_MODULE = "model"


class PythonBackend(CodeBackend):
    """Python code generation backend."""

    TEMPLATE_LANG = "python"
    FILE_EXTENSION = "py"

    TYPE_MAP = {
        "integer": "int",
        "string": "str",
        "boolean": "bool",
        "number": "float",
        "any": "Any",
    }

    def __init__(self, config: ClassGeneratorConfig):
        super().__init__(config)
        self.python_imports: set[tuple[str, str]] = set()
        # Classes of other packages: needed at runtime (superclasses) or only for annotations
        self.runtime_imports: set[tuple[str, str]] = set()
        self.type_checking_imports: set[tuple[str, str]] = set()
        self.needs_re_import = False

    @staticmethod
    def module_name(package: str) -> str:
        return package or _DEFAULT_MODULE

    def module_path(self, package: str) -> str:
        return self.module_name(package).replace(".", "/") + f".{self.FILE_EXTENSION}"

    def generate_package(
        self,
        model: TypeModel,
        package: str,
        header_code: str | None = None,
        generation_comment: str | None = None,
    ) -> str:
        """Generate the Python module of one package."""
        self.python_imports = set()
        self.runtime_imports = set()
        self.type_checking_imports = set()
        self.needs_re_import = False

        classes = self._order_classes([c for c in model.classes if c.package == package])
        rendered_classes = []
        for class_type in classes:
            if class_type.superclass is not None and class_type.superclass.package != package:
                self.runtime_imports.add((self.module_name(class_type.superclass.package), class_type.superclass.name))
            class_ctx = self._prepare_class_context(class_type)
            rendered_classes.append(self.class_template.render(class_ctx))

        prefix = self.prefix_template.render(
            HEADER_CODE=header_code.strip() if header_code else None,
            GENERATION_COMMENT=f"Classes of the package {self.module_name(package)}, generated from JSON schema.",
            COMMAND_LINE=generation_comment,
            IMPORTS=self._assemble_imports(),
        )
        suffix = self.suffix_template.render(CLASS_NAMES=[c.name for c in classes])
        return "\n\n".join([prefix, *rendered_classes, suffix]) + "\n"

    def translate_type(self, target_type: TargetType, package: str) -> str:
        """Translate a target type to a Python type string."""
        match target_type:
            case PrimitiveType(name=name):
                result = self.TYPE_MAP.get(name, name)
                if result == "Any":
                    self.python_imports.add(("typing", "Any"))
                return result
            case CollectionType(item_type=item_type):
                return f"list[{self.translate_type(item_type, package)}]"
            case MapType(value_type=value_type):
                return f"dict[str, {self.translate_type(value_type, package)}]"
            case ClassType():
                if target_type.package != package:
                    self.type_checking_imports.add((self.module_name(target_type.package), target_type.name))
                return target_type.name
        self.python_imports.add(("typing", "Any"))
        return "Any"

    def format_default_value(self, value: Any, target_type: TargetType) -> str:
        """Format a default value for Python."""
        if isinstance(value, list):
            if not value:
                return "dataclasses.field(default_factory=list)"
            return f"dataclasses.field(default_factory=lambda: {value!r})"
        if isinstance(value, dict):
            if not value:
                return "dataclasses.field(default_factory=dict)"
            return f"dataclasses.field(default_factory=lambda: {value!r})"
        return repr(value)

    def _prepare_field_context(self, class_type: ClassType, field_def: FieldDef) -> dict[str, Any]:
        result = super()._prepare_field_context(class_type, field_def)
        type_str = result["TYPE"]
        if not field_def.is_required:
            type_str = f"{type_str} | None"
        if field_def.has_default:
            init = self.format_default_value(field_def.default_value, field_def.target_type)
        elif not field_def.is_required:
            init = "None"
        else:
            init = None
        result["DECLARATION"] = f"{field_def.name}: {type_str}" + (f" = {init}" if init is not None else "")
        result["DOC_LINES"] = [_escape_docstring(line) for line in result["DOC_LINES"]]
        return result

    def _prepare_class_context(self, class_type: ClassType) -> dict[str, Any]:
        result = super()._prepare_class_context(class_type)
        result["DOC_LINES"] = [_escape_docstring(line) for line in result["DOC_LINES"]]
        return result

    def _prepare_methods(self, class_type: ClassType) -> list[list[str]]:
        methods = []
        if self.config.add_validation:
            if class_type.superclass is None:
                methods.append(["def __post_init__(self) -> None:", "    self.validate()"])
            methods.append(self._validate_method(class_type))
        for field_def in class_type.fields:
            if field_def.has_adder_and_remover:
                methods.extend(self._adder_and_remover(class_type, field_def))
            if field_def.has_default_getter:
                methods.append(self._default_getter(class_type, field_def))
        return [indent_lines(method) for method in methods]

    # Validation

    def _validate_method(self, class_type: ClassType) -> list[str]:
        lines = [
            "def validate(self) -> None:",
            '    """Check the constraints of all fields, raise ValueError if one is violated."""',
        ]
        if class_type.superclass is not None:
            lines.append("    super().validate()")
        for field_def in self._order_fields(class_type.fields):
            lines.extend(indent_lines(self._field_validation_lines(field_def)))
        return lines

    def _field_validation_lines(self, field_def: FieldDef) -> list[str]:
        accessor = f"self.{field_def.name}"
        lines = []
        value_lines = []
        for constraint in field_def.constraints:
            if constraint.kind == ConstraintKind.NOT_NULL:
                lines.append(f"if {accessor} is None:")
                lines.append(f"    raise ValueError({constraint.describe(field_def.json_name)!r})")
            else:
                value_lines.extend(self._constraint_lines(constraint, accessor, field_def.json_name, 0))
        if _has_statements(value_lines):
            lines.append(f"if {accessor} is not None:")
            lines.extend(indent_lines(value_lines))
        else:
            lines.extend(value_lines)
        return lines

    def _constraint_lines(self, constraint: Constraint, value: str, label: str, depth: int) -> list[str]:
        """Return the guard clause for one constraint of a value that is not None."""
        message = constraint.describe(label)
        match constraint.kind:
            case ConstraintKind.ENUM if constraint.is_open:
                return [f"# {message}"]
            case ConstraintKind.ENUM:
                condition = f"{value} not in {tuple(constraint.value)!r}"
            case ConstraintKind.PATTERN:
                self.needs_re_import = True
                condition = f"re.search({constraint.value!r}, {value}) is None"
            case ConstraintKind.ITEMS:
                element = "element" if depth == 0 else f"element{depth}"
                body = []
                for element_constraint in constraint.element_constraints:
                    body.extend(self._constraint_lines(element_constraint, element, f"each {label} element", depth + 1))
                if not _has_statements(body):
                    return body
                return [f"for {element} in {value}:", f"    if {element} is not None:", *indent_lines(body, 2)]
            case _:
                condition = _BOUND_CHECKS[constraint.kind].format(value=value, limit=repr(constraint.value))
        return [f"if {condition}:", f"    raise ValueError({message!r})"]

    # Accessors

    def _adder_and_remover(self, class_type: ClassType, field_def: FieldDef) -> list[list[str]]:
        accessor = f"self.{field_def.name}"
        suffix = camel_to_snake_case(field_def.name)
        target_type = field_def.target_type
        if isinstance(target_type, MapType):
            value_type = self.translate_type(target_type.value_type, class_type.package)
            adder = [
                f"def add_{suffix}(self, key: str, value: {value_type}) -> None:",
                f'    """Add an entry to {field_def.json_name}."""',
                f"    if {accessor} is None:",
                f"        {accessor} = {{}}",
                f"    {accessor}[key] = value",
            ]
            remover = [
                f"def remove_{suffix}(self, key: str) -> None:",
                f'    """Remove an entry from {field_def.json_name}."""',
                f"    if {accessor} is not None:",
                f"        {accessor}.pop(key, None)",
            ]
            return [adder, remover]
        item_type = self.translate_type(target_type.item_type, class_type.package)
        adder = [
            f"def add_{suffix}(self, element: {item_type}) -> None:",
            f'    """Add an element to {field_def.json_name}."""',
            f"    if {accessor} is None:",
            f"        {accessor} = []",
            f"    {accessor}.append(element)",
        ]
        remover = [
            f"def remove_{suffix}(self, element: {item_type}) -> None:",
            f'    """Remove an element from {field_def.json_name}."""',
            f"    if {accessor} is not None and element in {accessor}:",
            f"        {accessor}.remove(element)",
        ]
        return [adder, remover]

    def _default_getter(self, class_type: ClassType, field_def: FieldDef) -> list[str]:
        accessor = f"self.{field_def.name}"
        type_str = self.translate_type(field_def.target_type, class_type.package)
        return [
            f"def get_{camel_to_snake_case(field_def.name)}_or_default(self) -> {type_str}:",
            f'    """Return {field_def.json_name}, or its default value if it is not set."""',
            f"    if {accessor} is None:",
            f"        return {field_def.default_value!r}",
            f"    return {accessor}",
        ]

    def _assemble_imports(self) -> list[str]:
        """Assemble Python import statements."""
        import_groups: dict[str, set[str]] = collections.defaultdict(set)
        for module, name in self.python_imports:
            import_groups[module].add(name)
        deferred_imports = self.type_checking_imports - self.runtime_imports
        if deferred_imports:
            import_groups["typing"].add("TYPE_CHECKING")

        assembled = ["from __future__ import annotations", "", "import dataclasses"]
        if self.needs_re_import:
            assembled.append("import re")
        for module in sorted(import_groups):
            assembled.append(f"from {module} import {', '.join(sorted(import_groups[module]))}")

        runtime_groups: dict[str, set[str]] = collections.defaultdict(set)
        for module, name in self.runtime_imports:
            runtime_groups[module].add(name)
        if runtime_groups:
            assembled.append("")
            for module in sorted(runtime_groups):
                assembled.append(f"from {module} import {', '.join(sorted(runtime_groups[module]))}")

        type_checking_groups: dict[str, set[str]] = collections.defaultdict(set)
        for module, name in deferred_imports:
            type_checking_groups[module].add(name)
        if type_checking_groups:
            assembled.extend(["", "if TYPE_CHECKING:"])
            for module in sorted(type_checking_groups):
                assembled.append(f"    from {module} import {', '.join(sorted(type_checking_groups[module]))}")
        return assembled


def _has_statements(lines: list[str]) -> bool:
    return any(not line.lstrip().startswith("#") for line in lines)


def _escape_docstring(line: str) -> str:
    return line.replace("\\", "\\\\").replace('"""', '\\"\\"\\"')
