"""plate-core — a transactional, schema-aware rich-text document model.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
::

    import plate

    doc = plate.load('''
        {"schema": "gpui-plate", "version": 1,
         "document": {"children": [
            {"node": "element", "kind": "heading", "attrs": {"level": 42},
             "children": [{"node": "text", "text": "Title"}]}]}}
    ''')

    # Open an editing session with the rich-text plugins
    editor = plate.new_editor(doc)
    editor.run_query("block.heading_level", result_type=int)
    6

    # Report problems without changing anything
    diagnostics = plate.check(doc)

    # Persist the edited document
    text = plate.dump(editor.doc)

    plate.__version__
    '0.1.0'
"""
from __future__ import annotations

from typing import TYPE_CHECKING

__version__: str = "0.1.0"

if TYPE_CHECKING:
    from plate.editor import Editor, EditorConfig
    from plate.model.nodes import Document, Selection
    from plate.plugins.registry import PluginRegistry
    from plate.validator.diagnostics import Diagnostic

PRESETS = ("core", "richtext")


def load(source: str, format: str = "json") -> "Document":  # noqa: A002
    """Decode a persisted document.

    Parameters
    ----------
    source:
        The ``DocumentValue`` text (schema, version and document).
    format:
        ``"json"`` or ``"yaml"``.

    Returns
    -------
    Document
        The decoded document, not yet normalized.

    Raises
    ------
    plate.errors.SerializationError
        If ``source`` is malformed.
    ValueError
        If ``format`` is not supported.
    """
    from plate.model.serializer import DocumentValue

    if format == "json":
        return DocumentValue.from_json_str(source).into_document()
    if format == "yaml":
        return DocumentValue.from_yaml(source).into_document()
    raise ValueError(f"Unsupported format {format!r}; expected 'json' or 'yaml'")


def dump(doc: "Document", format: str = "json") -> str:  # noqa: A002
    """Encode ``doc`` as a ``DocumentValue`` in ``"json"`` or ``"yaml"``."""
    from plate.model.serializer import DocumentValue

    value = DocumentValue.from_document(doc)
    if format == "json":
        return value.to_json_pretty()
    if format == "yaml":
        return value.to_yaml()
    raise ValueError(f"Unsupported format {format!r}; expected 'json' or 'yaml'")


def registry_for(preset: str) -> "PluginRegistry":
    """Return a fresh registry for a named preset (``core`` or ``richtext``)."""
    from plate.plugins.registry import PluginRegistry

    if preset == "core":
        return PluginRegistry.core()
    if preset == "richtext":
        return PluginRegistry.richtext()
    raise ValueError(f"Unknown preset {preset!r}; expected one of {', '.join(PRESETS)}")


def new_editor(
    doc: "Document | None" = None,
    selection: "Selection | None" = None,
    preset: str = "richtext",
    config: "EditorConfig | None" = None,
) -> "Editor":
    """Open an editing session on ``doc``.

    Parameters
    ----------
    doc:
        Starting document; defaults to one empty paragraph.
    selection:
        Starting selection; defaults to the start of the document.
    preset:
        Registry preset, ``"richtext"`` (default) or ``"core"``.
    config:
        Optional ``EditorConfig``.

    Returns
    -------
    Editor
        An editor whose document is already normalized.
    """
    from plate.editor import Editor

    return Editor(doc, selection, registry_for(preset), config)


def check(
    doc: "Document", strict: bool = False, registry: "PluginRegistry | None" = None
) -> list["Diagnostic"]:
    """Validate ``doc`` against the node specs of ``registry``.

    Parameters
    ----------
    doc:
        The document to inspect.  It is not modified.
    strict:
        When ``True``, warnings are promoted to errors.
    registry:
        Registry defining the known node kinds; defaults to richtext.

    Returns
    -------
    list[Diagnostic]
        All findings, sorted by node path.
    """
    from plate.validator.validator import validate as _validate

    return _validate(doc, registry, strict=strict)


__all__ = [
    "__version__",
    "PRESETS",
    "load",
    "dump",
    "registry_for",
    "new_editor",
    "check",
]
