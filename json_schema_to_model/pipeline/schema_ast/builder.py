"""
Schema model builder.

Walks the parsed JSON nodes that are reachable from the root documents
and creates exactly one ``Schema`` per distinct node. Schemas are
memoized by node identity. A node whose schema is still being built is
tracked in a pending set, so that cyclic schemas receive the instance
that is currently being populated instead of recursing forever.
"""

from __future__ import annotations

import json
import logging
import warnings
from typing import Any

from ...errors import FragmentError, LoadError, UnsupportedKeywordWarning
from ..diagnostics import DiagnosticKind, Diagnostics
from ..repository import NodeRepository, ResolvedNode
from ..repository.uris import append_to_fragment, is_absolute, normalize, resolve_reference
from .dialect import DRAFT_2020_12, Dialect, detect_dialect
from .nodes import (
    VALID_TYPE_TAGS,
    ArraySchema,
    NumberSchema,
    ObjectSchema,
    Schema,
    StringSchema,
    create_schema,
)

logger = logging.getLogger(__name__)

# Keywords that do not change the meaning of a "$ref" they are next to
_REFERENCE_ANNOTATIONS = frozenset({"$ref", "$comment", "$schema"})

# Keywords that imply an object even if no type is declared
_OBJECT_KEYWORDS = ("properties", "additionalProperties", "patternProperties")


class SchemaModelBuilder:
    """Creates the memoized ``Schema`` graph for the nodes of a ``NodeRepository``."""

    def __init__(self, repository: NodeRepository, diagnostics: Diagnostics, dialect: Dialect | None = None):
        """
        Initialize the builder.

        Args:
            repository: The repository that nodes are resolved with
            diagnostics: Collector for recoverable problems
            dialect: The JSON Schema dialect. If None, it is detected from the first root.
        """
        self.repository = repository
        self.diagnostics = diagnostics
        self.dialect = dialect
        self._schemas: dict[int, Schema] = {}
        self._missing: dict[str, Schema] = {}
        self._uris: dict[Schema, list[str]] = {}
        self._pending: set[int] = set()

    def uris_of(self, schema: Schema) -> list[str]:
        """All URIs under which the given schema was reached."""
        return list(self._uris.get(schema, []))

    def canonical_uri(self, schema: Schema) -> str | None:
        uris = self._uris.get(schema)
        if not uris:
            return None
        return uris[0]

    def resolve_root(self, location: str) -> Schema:
        """
        Load a root document and build its schema.

        Raises:
            LoadError: If the root document can not be loaded
        """
        node = self.repository.add_root(location)
        if self.dialect is None:
            self.dialect = detect_dialect(node, DRAFT_2020_12)
            logger.info("Using dialect %s", self.dialect.name)
        return self.resolve_schema(self.repository.roots[-1].uri)

    def resolve_schema(self, uri: str) -> Schema:
        """
        Return the schema for the given URI.

        A URI that can not be resolved yields a permissive open schema
        that is flagged as ``unresolved``.

        Args:
            uri: The URI of the schema

        Returns:
            The schema
        """
        if self.dialect is None:
            self.dialect = DRAFT_2020_12
        uri = self.repository.canonicalize(uri)
        try:
            location = self.repository.locate(uri)
        except LoadError as e:
            return self._missing_schema(uri, DiagnosticKind.LOAD, str(e))
        except FragmentError as e:
            return self._missing_schema(uri, DiagnosticKind.FRAGMENT, str(e))
        return self._resolve_location(uri, location)

    def _resolve_location(self, uri: str, location: ResolvedNode) -> Schema:
        node = location.node
        if self._is_plain_reference(node):
            schema = self._schemas.get(id(node))
            if schema is not None:
                self._register_uri(schema, uri, location.uri)
                return schema
            return self._follow_reference(uri, location)

        key = id(node)
        empty = self._is_empty(node)
        schema = None if empty else self._schemas.get(key)
        if schema is not None:
            self._register_uri(schema, uri, location.uri)
            return schema

        if key in self._pending:
            # Reentered while the variant of this node was still undecided
            logger.debug("Creating placeholder for cyclic schema %s", location.uri)
            schema = ObjectSchema(id=location.uri)
            self._schemas[key] = schema
            self._register_uri(schema, uri, location.uri)
            return schema

        self._pending.add(key)
        try:
            schema = self._create_variant(location)
            placeholder = self._schemas.get(key)
            if placeholder is not None:
                if type(placeholder) is not type(schema):
                    self.diagnostics.add(
                        DiagnosticKind.COMPOSITION,
                        f"Schema is part of a cycle and stays an object schema instead of {type(schema).__name__}",
                        location.uri,
                    )
                placeholder.ref = schema.ref
                placeholder.type_tags = list(schema.type_tags)
                schema = placeholder
            elif not empty:
                self._schemas[key] = schema
            self._register_uri(schema, uri, location.uri)
            if isinstance(node, dict):
                self._populate(schema, location.uri, node)
        finally:
            self._pending.discard(key)
        return schema

    def _follow_reference(self, uri: str, location: ResolvedNode) -> Schema:
        """
        Follow a chain of plain references to the node with content.

        Every URI of the chain is recorded as pointing to the final
        target, and the schema of the target is registered under all of
        them. A chain that loops back into itself never reaches any
        content, and all its nodes share one open schema.
        """
        chain = [location]
        visited = {normalize(location.uri)}
        current = location
        while self._is_plain_reference(current.node):
            target_uri = resolve_reference(current.uri, current.node["$ref"])
            self.repository.record_canonical(uri, target_uri)
            self.repository.record_canonical(current.uri, target_uri)
            if target_uri in visited:
                return self._cyclic_reference_schema(uri, chain)
            visited.add(target_uri)
            try:
                current = self.repository.locate(target_uri)
            except LoadError as e:
                return self._missing_schema(target_uri, DiagnosticKind.LOAD, str(e))
            except FragmentError as e:
                return self._missing_schema(target_uri, DiagnosticKind.FRAGMENT, str(e))
            chain.append(current)
        schema = self._resolve_location(target_uri, current)
        self._register_uri(schema, uri, *(link.uri for link in chain))
        return schema

    def _cyclic_reference_schema(self, uri: str, chain: list[ResolvedNode]) -> Schema:
        keys = [id(link.node) for link in chain]
        schema = next((self._schemas[key] for key in keys if key in self._schemas), None)
        if schema is None:
            logger.info("Reference cycle without content at %s, using an open schema", uri)
            schema = ObjectSchema(id=chain[-1].uri, type_tags=["any"], is_any=True)
        for key in keys:
            self._schemas[key] = schema
        self._register_uri(schema, uri, *(link.uri for link in chain))
        return schema

    def _missing_schema(self, uri: str, kind: DiagnosticKind, message: str) -> Schema:
        schema = self._missing.get(uri)
        if schema is None:
            self.diagnostics.add(kind, message, uri)
            schema = ObjectSchema(id=uri, type_tags=["any"], is_any=True, unresolved=True)
            self._missing[uri] = schema
            self._register_uri(schema, uri)
        return schema

    def _register_uri(self, schema: Schema, *uris: str) -> None:
        registered = self._uris.setdefault(schema, [])
        for uri in uris:
            uri = normalize(uri)
            if is_absolute(uri) and uri not in registered:
                registered.append(uri)

    def _is_plain_reference(self, node: Any) -> bool:
        if not isinstance(node, dict) or not isinstance(node.get("$ref"), str):
            return False
        if self.dialect.ref_overrides_siblings:
            return True
        return all(key in _REFERENCE_ANNOTATIONS for key in node)

    @staticmethod
    def _is_empty(node: Any) -> bool:
        return not isinstance(node, dict) or len(node) == 0

    # Variant selection

    def _create_variant(self, location: ResolvedNode) -> Schema:
        node = location.node
        if not isinstance(node, dict):
            if not isinstance(node, bool):
                self.diagnostics.add(
                    DiagnosticKind.UNSUPPORTED_KEYWORD,
                    f"Expected a schema object, found {type(node).__name__}",
                    location.uri,
                )
            return ObjectSchema(type_tags=["any"], is_any=True)

        type_tags = self._declared_type_tags(location.uri, node)
        if len(type_tags) == 1:
            schema = create_schema(type_tags[0])
            schema.type_tags = type_tags
            return schema
        if len(type_tags) > 1:
            logger.info("Multiple types %s in %s, using an object schema", type_tags, location.uri)
            return ObjectSchema(type_tags=type_tags)
        if self._has_composition(node):
            return ObjectSchema()
        if "$ref" in node:
            target = self.resolve_schema(resolve_reference(location.uri, node["$ref"]))
            if len(target.type_tags) == 1:
                schema = create_schema(target.type_tags[0])
            else:
                schema = ObjectSchema()
            schema.type_tags = list(target.type_tags)
            schema.ref = target
            return schema
        if any(keyword in node for keyword in _OBJECT_KEYWORDS):
            return ObjectSchema()
        return ObjectSchema(type_tags=["any"], is_any=True)

    def _declared_type_tags(self, uri: str, node: dict[str, Any]) -> list[str]:
        declared = node.get("type")
        if declared is None:
            return []
        if not isinstance(declared, list):
            declared = [declared]
        type_tags: list[str] = []
        for tag in declared:
            if not isinstance(tag, str):
                self.diagnostics.add(DiagnosticKind.UNSUPPORTED_KEYWORD, f"Schemas as type tags are not supported: {tag!r}", uri)
            elif tag not in VALID_TYPE_TAGS:
                self.diagnostics.add(DiagnosticKind.UNSUPPORTED_KEYWORD, f"Invalid type tag '{tag}'", uri)
            elif tag not in type_tags:
                type_tags.append(tag)
        return type_tags

    def _has_composition(self, node: dict[str, Any]) -> bool:
        keywords = ["allOf", "anyOf", "oneOf", "not"]
        if self.dialect.extends_keyword:
            keywords.append(self.dialect.extends_keyword)
        if self.dialect.disallow_keyword:
            keywords.append(self.dialect.disallow_keyword)
        return any(keyword in node for keyword in keywords)

    # Population

    def _populate(self, schema: Schema, uri: str, node: dict[str, Any]) -> None:
        self._populate_common(schema, uri, node)
        match schema:
            case ObjectSchema():
                self._populate_object(schema, uri, node)
            case ArraySchema():
                self._populate_array(schema, uri, node)
            case NumberSchema():
                self._populate_number(schema, uri, node)
            case StringSchema():
                self._populate_string(schema, uri, node)
        self._report_unsupported(uri, node)

    def _populate_common(self, schema: Schema, uri: str, node: dict[str, Any]) -> None:
        dialect = self.dialect
        declared_id = dialect.first_present(node, dialect.id_keywords)
        if isinstance(declared_id, str) and schema.id is None:
            schema.id = resolve_reference(uri, declared_id)
        if schema.id is None:
            schema.id = uri
        schema.schema_uri = _string_or_none(node.get("$schema"))
        schema.title = _string_or_none(node.get("title"))
        schema.description = _string_or_none(node.get("description"))
        schema.format = _string_or_none(node.get("format"))
        if "default" in node:
            schema.default_string = json.dumps(node["default"])

        if isinstance(node.get("enum"), list):
            schema.enum = list(node["enum"])
        elif dialect.supports_const and "const" in node:
            schema.enum = [node["const"]]

        if "$ref" in node and schema.ref is None:
            schema.ref = self.resolve_schema(resolve_reference(uri, node["$ref"]))

        schema.all_of = self._resolve_schema_list(uri, node, "allOf")
        if dialect.extends_keyword and dialect.extends_keyword in node:
            extended = self._resolve_schema_list(uri, node, dialect.extends_keyword)
            schema.all_of = (schema.all_of or []) + (extended or [])
        schema.any_of = self._resolve_schema_list(uri, node, "anyOf")
        schema.one_of = self._resolve_schema_list(uri, node, "oneOf")
        if "not" in node:
            schema.not_ = self.resolve_schema(append_to_fragment(uri, "not"))
        elif dialect.disallow_keyword and isinstance(node.get(dialect.disallow_keyword), dict):
            schema.not_ = self.resolve_schema(append_to_fragment(uri, dialect.disallow_keyword))

        if not schema.type_tags and (schema.all_of or schema.any_of or schema.one_of):
            for sub_schema in (schema.all_of or []) + (schema.any_of or []) + (schema.one_of or []):
                for tag in sub_schema.type_tags:
                    if tag not in schema.type_tags:
                        schema.type_tags.append(tag)

        for keyword in dialect.definitions_keywords:
            definitions = node.get(keyword)
            if not isinstance(definitions, dict):
                continue
            if schema.definitions is None:
                schema.definitions = {}
            definitions_uri = append_to_fragment(uri, keyword)
            for name in definitions:
                schema.definitions[name] = self.resolve_schema(append_to_fragment(definitions_uri, name))

    def _resolve_schema_list(self, uri: str, node: dict[str, Any], keyword: str) -> list[Schema] | None:
        entries = node.get(keyword)
        if entries is None:
            return None
        keyword_uri = append_to_fragment(uri, keyword)
        if isinstance(entries, dict):
            # Draft 3 allows a single schema for "extends"
            return [self.resolve_schema(keyword_uri)]
        if not isinstance(entries, list):
            self.diagnostics.add(DiagnosticKind.UNSUPPORTED_KEYWORD, f"'{keyword}' must be an array", uri)
            return None
        return [self.resolve_schema(append_to_fragment(keyword_uri, i)) for i in range(len(entries))]

    def _resolve_schema_map(self, uri: str, node: dict[str, Any], keyword: str) -> dict[str, Schema] | None:
        entries = node.get(keyword)
        if not isinstance(entries, dict):
            return None
        keyword_uri = append_to_fragment(uri, keyword)
        return {name: self.resolve_schema(append_to_fragment(keyword_uri, name)) for name in entries}

    def _populate_object(self, schema: ObjectSchema, uri: str, node: dict[str, Any]) -> None:
        required = node.get("required")
        if isinstance(required, list):
            schema.required = [name for name in required if isinstance(name, str)]

        properties = node.get("properties")
        if isinstance(properties, dict):
            schema.properties = self._resolve_schema_map(uri, node, "properties")
            if self.dialect.required_in_property:
                for name, property_node in properties.items():
                    if isinstance(property_node, dict) and property_node.get("required") is True:
                        if name not in schema.required:
                            schema.required.append(name)

        additional = node.get("additionalProperties")
        if isinstance(additional, dict):
            schema.additional_properties = self.resolve_schema(append_to_fragment(uri, "additionalProperties"))

        schema.pattern_properties = self._resolve_schema_map(uri, node, "patternProperties")

    def _populate_array(self, schema: ArraySchema, uri: str, node: dict[str, Any]) -> None:
        items = node.get("items")
        if isinstance(items, dict):
            schema.items = self.resolve_schema(append_to_fragment(uri, "items"))
        elif isinstance(items, list):
            self.diagnostics.add(DiagnosticKind.UNSUPPORTED_KEYWORD, "Tuple typing with an 'items' array is not supported", uri)
        schema.min_items = self._non_negative(uri, node, "minItems")
        schema.max_items = self._non_negative(uri, node, "maxItems")
        if isinstance(node.get("uniqueItems"), bool):
            schema.unique_items = node["uniqueItems"]

    def _populate_string(self, schema: StringSchema, uri: str, node: dict[str, Any]) -> None:
        schema.min_length = self._non_negative(uri, node, "minLength")
        schema.max_length = self._non_negative(uri, node, "maxLength")
        schema.pattern = _string_or_none(node.get("pattern"))

    def _populate_number(self, schema: NumberSchema, uri: str, node: dict[str, Any]) -> None:
        schema.minimum = _number_or_none(node.get("minimum"))
        schema.maximum = _number_or_none(node.get("maximum"))
        schema.exclusive_minimum, schema.minimum = self._exclusive_bound(uri, node, "exclusiveMinimum", schema.minimum)
        schema.exclusive_maximum, schema.maximum = self._exclusive_bound(uri, node, "exclusiveMaximum", schema.maximum)
        multiple_of = _number_or_none(node.get("multipleOf"))
        if multiple_of is not None and multiple_of <= 0:
            self.diagnostics.add(DiagnosticKind.UNSUPPORTED_KEYWORD, f"multipleOf must be positive, found {multiple_of}", uri)
            multiple_of = None
        schema.multiple_of = multiple_of

    def _exclusive_bound(
        self, uri: str, node: dict[str, Any], keyword: str, inclusive: float | None
    ) -> tuple[float | None, float | None]:
        """
        Read an exclusive bound as a numeric limit.

        Args:
            uri: The URI of the schema, for diagnostics
            node: The schema node
            keyword: "exclusiveMinimum" or "exclusiveMaximum"
            inclusive: The inclusive bound that was read for the same side

        Returns:
            The exclusive limit and the remaining inclusive limit
        """
        value = node.get(keyword)
        if value is None:
            return None, inclusive
        if isinstance(value, bool):
            if not self.dialect.boolean_exclusive_bounds:
                logger.info("Boolean '%s' in %s dialect at %s", keyword, self.dialect.name, uri)
            if value and inclusive is not None:
                return inclusive, None
            return None, inclusive
        number = _number_or_none(value)
        if number is None:
            self.diagnostics.add(DiagnosticKind.UNSUPPORTED_KEYWORD, f"Invalid '{keyword}': {value!r}", uri)
            return None, inclusive
        if self.dialect.boolean_exclusive_bounds:
            logger.info("Numeric '%s' in %s dialect at %s", keyword, self.dialect.name, uri)
        return number, inclusive

    def _non_negative(self, uri: str, node: dict[str, Any], keyword: str) -> int | None:
        value = node.get(keyword)
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            self.diagnostics.add(DiagnosticKind.UNSUPPORTED_KEYWORD, f"'{keyword}' must be a non-negative integer, found {value!r}", uri)
            return None
        return value

    def _report_unsupported(self, uri: str, node: dict[str, Any]) -> None:
        for keyword in self.dialect.unsupported_keywords:
            if keyword in node:
                message = f"Keyword '{keyword}' is not supported"
                self.diagnostics.add(DiagnosticKind.UNSUPPORTED_KEYWORD, message, uri)
                warnings.warn(f"{message} ({uri})", UnsupportedKeywordWarning, stacklevel=2)


def _string_or_none(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _number_or_none(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def build_schema(location: str, dialect: Dialect | None = None) -> tuple[Schema, SchemaModelBuilder]:
    """Convenience function: build the schema model of a single root document."""
    builder = SchemaModelBuilder(NodeRepository(), Diagnostics(), dialect)
    return builder.resolve_root(location), builder
