"""Error types for the plate editor core.

Every failure that can reach a caller of ``Editor.apply``,
``Editor.run_command`` or ``Editor.run_query`` is an ``EditorError``
subclass carrying a human-readable ``message``.  View layers surface
that message directly as validation feedback (e.g. ``"src is required"``).

``NormalizationDidNotConverge`` is the only error that indicates a
programming defect (a plugin normalizer that never reaches a fixed
point) rather than a recoverable user error.
"""
from __future__ import annotations


class EditorError(Exception):
    """Base class for all editor errors.

    Parameters
    ----------
    message:
        Human-readable description of the failure.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class PathNotFound(EditorError):
    """Raised when a path does not resolve against the current tree."""

    def __init__(self, path: tuple[int, ...], reason: str) -> None:
        self.path = tuple(path)
        super().__init__(f"Path {list(self.path)} not found: {reason}")


class InvalidOp(EditorError):
    """Raised when an op's precondition is violated (wrong node type, bad offset)."""


class UnknownCommand(EditorError):
    """Raised when no registered plugin provides the requested command."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown command: {name}")


class UnknownQuery(EditorError):
    """Raised when no registered plugin provides the requested query."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown query: {name}")


class MissingRequiredArg(EditorError):
    """Raised when a command or query argument is absent."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"{field} is required")


class InvalidArg(EditorError):
    """Raised when a command or query argument has the wrong shape or value."""

    def __init__(self, field: str, reason: str) -> None:
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid {field}: {reason}")


class TypeMismatch(EditorError):
    """Raised when a query result cannot be narrowed to the requested type."""


class NormalizationDidNotConverge(EditorError):
    """Raised when normalization exceeds its pass budget.

    This always signals a plugin authoring bug: some normalizer keeps
    reporting changes that another (or itself) undoes.
    """

    def __init__(self, iterations: int, last_normalizer: str | None = None) -> None:
        self.iterations = iterations
        self.last_normalizer = last_normalizer
        detail = f" (last change by {last_normalizer!r})" if last_normalizer else ""
        super().__init__(
            f"Normalization did not converge after {iterations} pass(es){detail}"
        )


class SerializationError(EditorError):
    """Raised when a persisted document or transaction cannot be decoded."""
