"""
Collected diagnostics of one generator run.

Recoverable problems (missing references, ambiguous compositions,
unsupported keywords, unparsable defaults) are logged and kept here so
that callers and tests can inspect them after the run.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum

logger = logging.getLogger(__name__)


class DiagnosticKind(Enum):
    """Category of a diagnostic."""

    LOAD = "load"
    FRAGMENT = "fragment"
    COMPOSITION = "composition"
    UNSUPPORTED_KEYWORD = "unsupported_keyword"
    DEFAULT_VALUE = "default_value"
    NAMING = "naming"


@dataclass(frozen=True)
class Diagnostic:
    """A single recoverable problem."""

    kind: DiagnosticKind
    message: str
    uri: str | None = None

    def __str__(self) -> str:
        if self.uri is None:
            return f"[{self.kind.value}] {self.message}"
        return f"[{self.kind.value}] {self.message} ({self.uri})"


@dataclass
class Diagnostics:
    """Append-only list of diagnostics."""

    entries: list[Diagnostic] = field(default_factory=list)

    def add(self, kind: DiagnosticKind, message: str, uri: str | None = None) -> Diagnostic:
        """
        Record a diagnostic and log it as a warning.

        Args:
            kind: The category of the problem
            message: Human readable description
            uri: The schema location the problem refers to, if known

        Returns:
            The recorded diagnostic
        """
        diagnostic = Diagnostic(kind, message, uri)
        logger.warning("%s", diagnostic)
        self.entries.append(diagnostic)
        return diagnostic

    def of_kind(self, kind: DiagnosticKind) -> list[Diagnostic]:
        return [d for d in self.entries if d.kind == kind]

    def clear(self) -> None:
        self.entries.clear()

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)
