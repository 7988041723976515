"""Diagnostic types for the plate document validator.

A ``Diagnostic`` is an annotated message attached to a node path.  Most
findings describe shapes that normalization would repair; errors
describe shapes it cannot.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto

from plate.model.nodes import Path


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostics, aligned with LSP conventions."""

    ERROR = auto()
    WARNING = auto()
    INFORMATION = auto()
    HINT = auto()


@dataclass(frozen=True)
class Diagnostic:
    """A single validation finding.

    Parameters
    ----------
    severity:
        How serious this finding is.
    code:
        A short machine-readable identifier, e.g. ``"PLT001"``.
    message:
        Human-readable description of the problem.
    path:
        Path of the offending node; ``()`` for the whole document.
    suggestion:
        Optional human-readable fix suggestion.
    rule:
        The rule name that produced this diagnostic.
    """

    severity: DiagnosticSeverity
    code: str
    message: str
    path: Path = ()
    suggestion: str | None = field(default=None)
    rule: str = field(default="")

    def __str__(self) -> str:
        loc = format_path(self.path)
        prefix = f"[{self.code}] {self.severity.name}"
        suggestion_part = f" (hint: {self.suggestion})" if self.suggestion else ""
        return f"{prefix} at {loc}: {self.message}{suggestion_part}"

    @property
    def is_error(self) -> bool:
        """Return True if this diagnostic should block a successful validation."""
        return self.severity == DiagnosticSeverity.ERROR


def format_path(path: Path) -> str:
    return "document" if not path else "[" + ", ".join(str(i) for i in path) + "]"
