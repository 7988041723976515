"""The editor: owner of a document, its selection and a plugin registry.

All mutation goes through ``Editor.apply``.  Registered transaction
transforms may first rewrite the incoming transaction.  It is applied to
a private copy of the document; the copy replaces the live document only
after every op, the normalization run and selection snapping have
succeeded.  Any ``EditorError`` raised along the way leaves the editor
exactly as it was.

Example
-------
::

    from plate.editor import Editor

    editor = Editor.with_richtext_plugins()
    editor.run_command("block.set_heading", {"level": 2})
    editor.run_query("block.heading_level", result_type=int)
    2
"""
from __future__ import annotations

import logging
import types
from dataclasses import dataclass
from typing import Any, Union, get_args, get_origin

from plate.errors import TypeMismatch
from plate.model.nodes import Document, Point, Selection, paragraph
from plate.normalize.pipeline import DEFAULT_MAX_ITERATIONS, normalize, snap_selection
from plate.ops.apply import apply_op
from plate.ops.operations import Transaction
from plate.plugins.registry import PluginRegistry

logger = logging.getLogger(__name__)

_NONE_TYPE = type(None)


@dataclass
class EditorConfig:
    """Tunable editor behaviour.

    Parameters
    ----------
    max_normalize_iterations:
        Corrective transactions allowed per normalization run before
        ``NormalizationDidNotConverge`` is raised.
    default_emoji:
        Emoji inserted by ``emoji.insert`` when no ``emoji`` arg is given.
    """

    max_normalize_iterations: int = DEFAULT_MAX_ITERATIONS
    default_emoji: str = "\U0001f600"


class Editor:
    """A single-writer editing session.

    Parameters
    ----------
    doc:
        Initial document.  Defaults to one empty paragraph.  The editor
        takes a private copy.
    selection:
        Initial selection.  Defaults to the start of the document.
    registry:
        Plugins available to this editor.  Defaults to the core preset.
    config:
        Editor configuration.

    The initial document is normalized and the selection snapped before
    the constructor returns.
    """

    def __init__(
        self,
        doc: Document | None = None,
        selection: Selection | None = None,
        registry: PluginRegistry | None = None,
        config: EditorConfig | None = None,
    ) -> None:
        self._registry = registry if registry is not None else PluginRegistry.core()
        self._config = config if config is not None else EditorConfig()
        working = doc.clone() if doc is not None else Document(children=[paragraph("")])
        sel = selection if selection is not None else Selection.collapsed(Point((0, 0), 0))
        sel = normalize(working, sel, self._registry, self._config.max_normalize_iterations)
        self._doc = working
        self._selection = snap_selection(working, sel)

    @classmethod
    def with_core_plugins(
        cls,
        doc: Document | None = None,
        selection: Selection | None = None,
        config: EditorConfig | None = None,
    ) -> "Editor":
        return cls(doc, selection, PluginRegistry.core(), config)

    @classmethod
    def with_richtext_plugins(
        cls,
        doc: Document | None = None,
        selection: Selection | None = None,
        config: EditorConfig | None = None,
    ) -> "Editor":
        return cls(doc, selection, PluginRegistry.richtext(), config)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def doc(self) -> Document:
        """A snapshot of the current document; edits to it are not applied."""
        return self._doc.clone()

    @property
    def selection(self) -> Selection:
        return self._selection

    @property
    def registry(self) -> PluginRegistry:
        return self._registry

    @property
    def config(self) -> EditorConfig:
        return self._config

    def set_selection(self, selection: Selection) -> None:
        """Replace the selection, snapped onto existing text positions."""
        self._selection = snap_selection(self._doc, selection)

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    def apply(self, tx: Transaction) -> None:
        """Apply ``tx`` atomically.

        Raises
        ------
        PathNotFound, InvalidOp
            If an op cannot be applied.
        NormalizationDidNotConverge
            If the normalizers do not reach a fixed point.
        """
        tx = self._transform(tx)
        doc, selection = self._run(tx)
        self._doc = doc
        self._selection = selection
        logger.debug(
            "Applied transaction with %d op(s) (source=%s)", len(tx.ops), tx.meta.source
        )

    def preview(self, tx: Transaction) -> tuple[Document, Selection]:
        """Return the document and selection ``tx`` would produce, without committing."""
        return self._run(self._transform(tx))

    def _transform(self, tx: Transaction) -> Transaction:
        for spec in self._registry.transaction_transforms():
            rewritten = spec.fn(self, tx)
            if rewritten is not None:
                logger.debug("Transaction rewritten by %r", spec.name)
                tx = rewritten
        return tx

    def _run(self, tx: Transaction) -> tuple[Document, Selection]:
        working = self._doc.clone()
        selection = self._selection
        for op in tx.ops:
            selection = apply_op(working, selection, op)
        if tx.selection_after is not None:
            selection = tx.selection_after
        selection = normalize(
            working, selection, self._registry, self._config.max_normalize_iterations
        )
        return working, snap_selection(working, selection)

    # ------------------------------------------------------------------
    # Commands and queries
    # ------------------------------------------------------------------

    def run_command(self, name: str, args: dict[str, Any] | None = None) -> None:
        """Dispatch a named command.

        Raises
        ------
        UnknownCommand
            If no registered plugin provides ``name``.
        MissingRequiredArg, InvalidArg
            If ``args`` fail the handler's validation.
        """
        spec = self._registry.command(name)
        logger.debug("Running command %r", name)
        spec.handler(self, args)

    def run_query_json(self, name: str, args: dict[str, Any] | None = None) -> Any:
        """Run a named query and return its raw, JSON-compatible result."""
        spec = self._registry.query(name)
        return _to_json(spec.handler(self, args))

    def run_query(
        self,
        name: str,
        args: dict[str, Any] | None = None,
        result_type: Any = None,
    ) -> Any:
        """Run a named query, narrowing the result to ``result_type``.

        ``result_type`` may be a plain class (``bool``, ``int``, ``str``,
        ``float``, or a class with a ``from_dict`` constructor such as
        ``Marks``), or an ``Optional``/``Union`` of those.  ``None``
        returns the result unchanged.

        Raises
        ------
        UnknownQuery
            If no registered plugin provides ``name``.
        TypeMismatch
            If the result cannot be narrowed to ``result_type``.
        """
        spec = self._registry.query(name)
        value = spec.handler(self, args)
        if result_type is None:
            return value
        try:
            return _narrow(value, result_type)
        except TypeMismatch:
            raise TypeMismatch(
                f"Query {name!r} returned {type(value).__name__}, "
                f"which is not {_type_name(result_type)}"
            ) from None

    def __repr__(self) -> str:
        return (
            f"Editor(blocks={len(self._doc.children)}, "
            f"registry={self._registry.name!r}, selection={self._selection!r})"
        )


def _narrow(value: Any, result_type: Any) -> Any:
    if result_type is Any:
        return value
    if result_type is None or result_type is _NONE_TYPE:
        if value is None:
            return None
        raise TypeMismatch("expected None")

    origin = get_origin(result_type)
    if origin is Union or origin is types.UnionType:
        for member in get_args(result_type):
            try:
                return _narrow(value, member)
            except TypeMismatch:
                continue
        raise TypeMismatch("no union member matched")
    if origin is not None:
        if isinstance(value, origin):
            return value
        raise TypeMismatch(f"expected {origin.__name__}")

    if result_type is bool:
        if isinstance(value, bool):
            return value
    elif result_type is int:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    elif result_type is float:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
    elif isinstance(value, result_type):
        return value
    elif isinstance(value, dict) and hasattr(result_type, "from_dict"):
        try:
            return result_type.from_dict(value)
        except (KeyError, TypeError, ValueError) as exc:
            raise TypeMismatch(str(exc)) from exc
    raise TypeMismatch(f"expected {_type_name(result_type)}")


def _type_name(result_type: Any) -> str:
    return getattr(result_type, "__name__", None) or repr(result_type)


def _to_json(value: Any) -> Any:
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, (list, tuple)):
        return [_to_json(v) for v in value]
    if isinstance(value, dict):
        return {k: _to_json(v) for k, v in value.items()}
    return value
