"""
Error taxonomy for the schema model generator.

Only a failure to load a declared root document or a broken internal
invariant aborts a run. Everything else is caught where it is detected,
replaced by a permissive fallback, and recorded as a diagnostic.
"""

from __future__ import annotations


class SchemaModelError(Exception):
    """Base class for all errors raised by the generator."""


class LoadError(SchemaModelError):
    """A document could not be fetched or is not valid JSON."""

    def __init__(self, uri: str, reason: str):
        super().__init__(f"Could not load {uri}: {reason}")
        self.uri = uri
        self.reason = reason


class FragmentError(SchemaModelError):
    """A JSON pointer fragment does not denote a node in its document."""

    def __init__(self, uri: str, segment: str):
        super().__init__(f"Could not resolve segment '{segment}' of {uri}")
        self.uri = uri
        self.segment = segment


class CompositionAmbiguityError(SchemaModelError):
    """A combination of composition keywords can not be mapped to one type."""


class NameDerivationError(SchemaModelError):
    """A class name was requested for a schema without any URI."""


class UnsupportedKeywordWarning(UserWarning):
    """A schema keyword that is recognized but not translated."""
