"""JSON Schema to Model Generator

A Python package for generating typed class models from JSON Schema
documents. Resolves references across documents, recovers inheritance
from composition keywords and emits Python dataclasses.
"""

__version__ = "1.0.0"

from .errors import (
    CompositionAmbiguityError,
    FragmentError,
    LoadError,
    NameDerivationError,
    SchemaModelError,
    UnsupportedKeywordWarning,
)
from .pipeline import (
    ClassGeneratorConfig,
    DiagnosticKind,
    Diagnostics,
    GeneratorInput,
    PipelineGenerator,
    TypeModel,
)

__all__ = [
    "PipelineGenerator",
    "ClassGeneratorConfig",
    "GeneratorInput",
    "TypeModel",
    "Diagnostics",
    "DiagnosticKind",
    "SchemaModelError",
    "LoadError",
    "FragmentError",
    "CompositionAmbiguityError",
    "NameDerivationError",
    "UnsupportedKeywordWarning",
]
