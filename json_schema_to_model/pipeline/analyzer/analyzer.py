"""
Type model builder.

Maps the schema model to target types: primitives, collections, maps
and generated classes. Types are memoized by schema identity, so that a
schema that is referenced from several places maps to a single class.

JSON Schema has no inheritance. Where schemas simulate it, the builder
recovers it heuristically:

- a single-element ``allOf``/``anyOf``/``oneOf`` (or a reference with
  sibling keywords) makes the referenced class the superclass
- a two-element ``allOf`` whose second element is an object schema is
  treated as "extends element 0 and declares the fields of element 1"
- any other ``allOf`` is flattened into one class without superclass
"""

from __future__ import annotations

import logging

from ...errors import CompositionAmbiguityError
from ..config import ClassGeneratorConfig, GeneratorInput
from ..diagnostics import DiagnosticKind, Diagnostics
from ..repository.uris import base_directory, to_uri
from ..schema_ast.builder import SchemaModelBuilder
from ..schema_ast.nodes import (
    ArraySchema,
    BooleanSchema,
    IntegerSchema,
    NumberSchema,
    ObjectSchema,
    Schema,
    StringSchema,
)
from .composition import determine_common_type_from_any_of, determine_type_from_untyped_any_of
from .constraints import derive_constraints
from .defaults import parse_default
from .docs import class_doc, field_doc_lines
from .ir_nodes import (
    ANY,
    BOOLEAN,
    INTEGER,
    NUMBER,
    PRIMITIVES,
    STRING,
    ClassType,
    CollectionType,
    FieldDef,
    MapType,
    PrimitiveType,
    TargetType,
    TypeModel,
)
from .name_resolver import derive_class_name, make_valid_identifier

logger = logging.getLogger(__name__)


class TypeModelBuilder:
    """Maps ``Schema`` instances to target types."""

    def __init__(
        self,
        schema_builder: SchemaModelBuilder,
        config: ClassGeneratorConfig | None = None,
        inputs: list[GeneratorInput] | None = None,
        diagnostics: Diagnostics | None = None,
    ):
        """
        Initialize the builder.

        Args:
            schema_builder: The builder that created the schemas (knows their URIs)
            config: Generator configuration
            inputs: The generator inputs, used to assign classes to packages
            diagnostics: Collector for recoverable problems
        """
        self.schema_builder = schema_builder
        self.config = config or ClassGeneratorConfig()
        self.inputs = inputs or []
        self.diagnostics = diagnostics if diagnostics is not None else schema_builder.diagnostics
        self._types: dict[Schema, TargetType] = {}
        self._pending: set[Schema] = set()
        self._classes: list[ClassType] = []
        self._class_names: dict[tuple[str, str], ClassType] = {}
        self._unmatched_directories: set[str] = set()

    @property
    def classes(self) -> list[ClassType]:
        return list(self._classes)

    def build(self, roots: list[Schema]) -> TypeModel:
        """
        Build the target type graph for the given root schemas.

        Definitions of the roots are mapped as well, even if no property
        refers to them.

        Args:
            roots: The root schemas

        Returns:
            The type model
        """
        model = TypeModel(diagnostics=self.diagnostics)
        for root in roots:
            model.roots.append(self.resolve_type(root))
            for definition in (root.definitions or {}).values():
                self.resolve_type(definition)
        model.classes = self.classes
        for class_type in model.classes:
            class_type.uris = self.schema_builder.uris_of(class_type.schema) or class_type.uris
            model.class_uris[class_type.full_name] = list(class_type.uris)
        return model

    def resolve_type(self, schema: Schema) -> TargetType:
        """
        Return the target type for a schema.

        Args:
            schema: The schema

        Returns:
            The cached target type, or a newly created one
        """
        cached = self._types.get(schema)
        if cached is not None:
            return cached
        if schema in self._pending:
            logger.warning("Cyclic type without a class for %s, using the open type", schema.short_description())
            return ANY
        self._pending.add(schema)
        try:
            target_type = self._create_type(schema)
        finally:
            self._pending.discard(schema)
        return self._types.setdefault(schema, target_type)

    def _create_type(self, schema: Schema) -> TargetType:
        override = self.config.get_type_override(schema.id)
        if override is not None:
            logger.info("Using type override %s for %s", override, schema.id)
            return PRIMITIVES.get(override) or PrimitiveType(override)
        match schema:
            case ObjectSchema():
                return self._create_object_type(schema)
            case ArraySchema():
                return self._create_array_type(schema)
            case BooleanSchema():
                return BOOLEAN
            case IntegerSchema():
                return INTEGER
            case NumberSchema():
                return NUMBER
            case StringSchema():
                return STRING
        logger.warning("Could not create a type for %s, using the open type", schema.short_description())
        return ANY

    def _create_array_type(self, schema: ArraySchema) -> TargetType:
        if schema.items is None:
            return CollectionType(ANY, unique_items=bool(schema.unique_items))
        item_type = self.resolve_type(schema.items)
        fixed_size = None
        if schema.min_items is not None and schema.min_items == schema.max_items:
            fixed_size = schema.min_items
        return CollectionType(item_type, fixed_size=fixed_size, unique_items=bool(schema.unique_items))

    # Objects

    def _create_object_type(self, schema: ObjectSchema) -> TargetType:
        if schema.unresolved:
            return ANY
        if not self._has_relevant_information(schema) and not self._uses_implicit_extension(schema):
            try:
                return self._create_type_from_composition(schema)
            except CompositionAmbiguityError as e:
                self.diagnostics.add(DiagnosticKind.COMPOSITION, str(e), schema.id)
                return ANY
        return self._create_class(schema)

    @staticmethod
    def _has_relevant_information(schema: ObjectSchema) -> bool:
        return schema.properties is not None or schema.pattern_properties is not None

    @staticmethod
    def _uses_implicit_extension(schema: ObjectSchema) -> bool:
        return schema.all_of is not None and len(schema.all_of) == 2 and isinstance(schema.all_of[1], ObjectSchema)

    def _create_type_from_composition(self, schema: ObjectSchema) -> TargetType:
        """
        Map an object schema without properties through to the type it wraps.

        Raises:
            CompositionAmbiguityError: If the composition does not denote a single type
        """
        if schema.additional_properties is not None:
            return MapType(self.resolve_type(schema.additional_properties))
        if schema.ref is not None:
            logger.debug("No properties in %s, using the referenced type", schema.short_description())
            return self.resolve_type(schema.ref)
        if schema.all_of is not None:
            if len(schema.all_of) == 1:
                logger.info("No properties in %s, using the only type in allOf", schema.short_description())
                return self.resolve_type(schema.all_of[0])
            raise CompositionAmbiguityError(f"allOf with {len(schema.all_of)} elements and no properties in {schema.short_description()}")
        if schema.any_of:
            if len(schema.any_of) == 1:
                return self.resolve_type(schema.any_of[0])
            common = determine_common_type_from_any_of(schema)
            if common is not None:
                logger.info("Using the common type of the anyOf in %s", schema.short_description())
                return self.resolve_type(common)
            untyped = determine_type_from_untyped_any_of(schema)
            if untyped is not None:
                logger.info("Using the only typed element of the anyOf in %s", schema.short_description())
                return self.resolve_type(untyped)
            raise CompositionAmbiguityError(f"Could not determine a type from the anyOf in {schema.short_description()}")
        if schema.one_of:
            if len(schema.one_of) == 1:
                return self.resolve_type(schema.one_of[0])
            raise CompositionAmbiguityError(f"Could not determine a type from the oneOf in {schema.short_description()}")
        non_null = [tag for tag in schema.type_tags if tag != "null"]
        if len(non_null) == 1 and non_null[0] in PRIMITIVES:
            return PRIMITIVES[non_null[0]]
        logger.debug("No properties in %s, using the open type", schema.short_description())
        return ANY

    def _create_class(self, schema: ObjectSchema) -> ClassType:
        uris = self.schema_builder.uris_of(schema) or ([schema.id] if schema.id else [])
        name = derive_class_name(uris)
        override = self.config.get_class_name_override(name)
        if override is not None:
            name = override
        package = self._find_package(schema)
        class_type = ClassType(
            name=self._unique_name(package, name, schema),
            package=package,
            schema=schema,
            uris=uris,
            doc=class_doc(schema, self.schema_builder.canonical_uri(schema)),
        )
        self._class_names[(package, class_type.name)] = class_type
        self._classes.append(class_type)
        # Cache before the fields are created, a field may have the class as its type
        self._types[schema] = class_type
        self._initialize_class(class_type, schema)
        return class_type

    def _unique_name(self, package: str, name: str, schema: Schema) -> str:
        if (package, name) not in self._class_names:
            return name
        index = 2
        while (package, f"{name}{index}") in self._class_names:
            index += 1
        unique = f"{name}{index}"
        self.diagnostics.add(DiagnosticKind.NAMING, f"Class name {name} is already used, using {unique}", schema.id)
        return unique

    def _find_package(self, schema: Schema) -> str:
        if not self.inputs:
            return ""
        uri = self.schema_builder.canonical_uri(schema) or schema.id or ""
        directory = base_directory(uri)
        for generator_input in self.inputs:
            if base_directory(to_uri(generator_input.url)) == directory:
                return generator_input.package_name
        if directory not in self._unmatched_directories:
            self._unmatched_directories.add(directory)
            self.diagnostics.add(
                DiagnosticKind.NAMING,
                f"No input for directory {directory}, using package {self.inputs[0].package_name}",
                uri,
            )
        return self.inputs[0].package_name

    def _initialize_class(self, class_type: ClassType, schema: ObjectSchema) -> None:
        required = set(schema.required)
        if self._uses_implicit_extension(schema):
            base_schema, extension = schema.all_of
            logger.warning("Assuming implicit extension due to allOf with 2 elements in %s", schema.short_description())
            base_type = self.resolve_type(base_schema)
            if isinstance(base_type, ClassType) and base_type is not class_type:
                class_type.superclass = base_type
            else:
                logger.info("Base of implicit extension in %s is not a class", schema.short_description())
            required |= set(extension.required)
            self._add_property_fields(class_type, extension, required)
            self._add_property_fields(class_type, schema, required)
            self._add_additional_properties_field(class_type, extension)
        else:
            self._set_superclass(class_type, schema)
            self._add_property_fields(class_type, schema, required)
            self._add_additional_properties_field(class_type, schema)
        if schema.pattern_properties:
            logger.info("Ignoring patternProperties of %s", schema.short_description())
        for definition in (schema.definitions or {}).values():
            self.resolve_type(definition)

    def _extended_schema(self, schema: Schema) -> Schema | None:
        for entries in (schema.all_of, schema.any_of, schema.one_of):
            if entries is not None and len(entries) == 1:
                return entries[0]
        return schema.ref

    def _set_superclass(self, class_type: ClassType, schema: ObjectSchema) -> None:
        extended = self._extended_schema(schema)
        if extended is not None:
            extended_type = self.resolve_type(extended)
            if isinstance(extended_type, ClassType) and extended_type is not class_type:
                class_type.superclass = extended_type
                return
            logger.warning("Extended type of %s is not a class: %s", schema.short_description(), extended.short_description())
            return
        if schema.all_of:
            self.diagnostics.add(
                DiagnosticKind.COMPOSITION,
                f"Cannot extend {len(schema.all_of)} classes, flattening the allOf into {class_type.name}",
                schema.id,
            )
            for member in schema.all_of:
                if isinstance(member, ObjectSchema):
                    self._add_property_fields(class_type, member, set(schema.required) | set(member.required))
        if schema.any_of:
            self.diagnostics.add(DiagnosticKind.COMPOSITION, f"Cannot translate the anyOf of {class_type.name}", schema.id)
        if schema.one_of:
            self.diagnostics.add(DiagnosticKind.COMPOSITION, f"Cannot translate the oneOf of {class_type.name}", schema.id)

    def _is_inherited_property(self, class_type: ClassType, property_name: str) -> bool:
        for ancestor in class_type.ancestors():
            if any(f.json_name == property_name for f in ancestor.fields):
                return True
            if ancestor.schema is not None and property_name in self._declared_properties(ancestor.schema):
                return True
        return False

    def _declared_properties(self, schema: Schema) -> set[str]:
        names = set()
        if isinstance(schema, ObjectSchema):
            names.update(schema.properties or {})
            if self._uses_implicit_extension(schema):
                names.update(schema.all_of[1].properties or {})
        return names

    def _add_property_fields(self, class_type: ClassType, schema: ObjectSchema, required: set[str]) -> None:
        for property_name, property_schema in (schema.properties or {}).items():
            if self._is_inherited_property(class_type, property_name):
                logger.info("Skipping inherited property '%s' in %s", property_name, class_type.name)
                continue
            if any(f.json_name == property_name for f in class_type.fields):
                continue
            self._add_field(class_type, property_name, property_schema, property_name in required)

    def _add_field(self, class_type: ClassType, property_name: str, property_schema: Schema, is_required: bool) -> FieldDef:
        target_type = self.resolve_type(property_schema)
        field_def = FieldDef(
            name=self._field_name(class_type, property_name),
            json_name=property_name,
            target_type=target_type,
            is_required=is_required,
            schema=property_schema,
            doc=field_doc_lines(class_type.name, property_name, property_schema, is_required),
        )
        if self.config.is_skipping_validation(f"{class_type.full_name}#{property_name}"):
            field_def.validation_skipped = True
        else:
            field_def.constraints = derive_constraints(property_schema, is_required)
        if property_schema.default_string is not None:
            try:
                field_def.default_value = parse_default(property_schema.default_string, target_type)
                field_def.has_default = True
            except ValueError as e:
                self.diagnostics.add(DiagnosticKind.DEFAULT_VALUE, f"Ignoring default of {class_type.name}.{property_name}: {e}", property_schema.id)
        if self.config.is_creating_adders_and_removers():
            field_def.has_adder_and_remover = isinstance(target_type, (CollectionType, MapType))
        if self.config.is_creating_getters_with_default():
            field_def.has_default_getter = not is_required and field_def.has_default
        class_type.fields.append(field_def)
        return field_def

    def _add_additional_properties_field(self, class_type: ClassType, schema: ObjectSchema) -> None:
        if schema.additional_properties is None:
            return
        value_type = self.resolve_type(schema.additional_properties)
        field_def = FieldDef(
            name=self._field_name(class_type, "additional_properties"),
            json_name="additionalProperties",
            target_type=MapType(value_type),
            schema=schema.additional_properties,
            doc=[f"Additional properties of this {class_type.name} (optional)"],
            is_additional_properties=True,
            has_adder_and_remover=self.config.is_creating_adders_and_removers(),
        )
        class_type.fields.append(field_def)

    @staticmethod
    def _field_name(class_type: ClassType, property_name: str) -> str:
        name = make_valid_identifier(property_name)
        taken = {f.name for f in class_type.fields}
        candidate = name
        index = 2
        while candidate in taken:
            candidate = f"{name}_{index}"
            index += 1
        return candidate
