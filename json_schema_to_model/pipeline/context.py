"""
Pipeline context: the state that is shared by the phases of one run.

A context owns the node repository, the schema model builder, the type
model builder and the diagnostics collector. Nothing is shared between
contexts, so independent runs can not affect each other.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .analyzer import TypeModelBuilder
from .config import ClassGeneratorConfig, GeneratorInput
from .diagnostics import Diagnostics
from .repository import NodeRepository
from .schema_ast import SchemaModelBuilder, dialect_for


@dataclass
class PipelineContext:
    """All mutable state of one generator run."""

    config: ClassGeneratorConfig
    inputs: list[GeneratorInput]
    repository: NodeRepository
    schema_builder: SchemaModelBuilder
    type_builder: TypeModelBuilder
    diagnostics: Diagnostics = field(default_factory=Diagnostics)

    @staticmethod
    def create(
        config: ClassGeneratorConfig,
        inputs: list[GeneratorInput],
        search_locations: list[str] | None = None,
    ) -> PipelineContext:
        """
        Create a fresh context.

        Args:
            config: Generator configuration
            inputs: The root schemas and their packages
            search_locations: Locations for relative references, in addition to the configured ones

        Raises:
            ValueError: If the configured dialect is unknown
        """
        diagnostics = Diagnostics()
        repository = NodeRepository(list(config.search_locations) + list(search_locations or []))
        dialect = None if config.dialect == "auto" else dialect_for(config.dialect)
        schema_builder = SchemaModelBuilder(repository, diagnostics, dialect)
        type_builder = TypeModelBuilder(schema_builder, config, inputs, diagnostics)
        return PipelineContext(
            config=config,
            inputs=inputs,
            repository=repository,
            schema_builder=schema_builder,
            type_builder=type_builder,
            diagnostics=diagnostics,
        )
