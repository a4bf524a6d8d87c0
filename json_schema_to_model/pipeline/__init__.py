"""
Pipeline - JSON Schema to typed class model generator.

The pipeline runs in phases:

1. Node repository: load JSON documents, resolve URIs to nodes
2. Schema model: one typed ``Schema`` per distinct node, cycle-safe
3. Type model: target types and classes, with recovered inheritance
4. Backend: render the classes as Python source
"""

from __future__ import annotations

from .analyzer import TypeModel, TypeModelBuilder
from .config import ClassGeneratorConfig, GeneratorInput
from .context import PipelineContext
from .diagnostics import Diagnostic, DiagnosticKind, Diagnostics
from .generator import PipelineGenerator
from .repository import NodeRepository
from .schema_ast import SchemaModelBuilder

__all__ = [
    "PipelineGenerator",
    "PipelineContext",
    "ClassGeneratorConfig",
    "GeneratorInput",
    "Diagnostic",
    "DiagnosticKind",
    "Diagnostics",
    "NodeRepository",
    "SchemaModelBuilder",
    "TypeModelBuilder",
    "TypeModel",
]
