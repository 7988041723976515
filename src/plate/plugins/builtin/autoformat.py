"""Autoformat plugin: markdown-style shortcuts typed at a paragraph start.

Typing a trigger such as ``"- "`` or ``"## "`` at the very start of a
paragraph turns the paragraph into the matching block and deletes the
trigger.  Only transactions whose source is ``"ime:replace_text"`` (plain
typed text from the input layer) are considered; marked-text
composition and programmatic edits pass through untouched.

Triggers whose target kind is not registered are ignored, so the plugin
can be combined with any subset of the block plugins.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from plate.errors import EditorError
from plate.model.nodes import ElementNode, Path, Point, Selection, TextNode
from plate.model.paths import find_node
from plate.ops.apply import apply_op
from plate.ops.operations import InsertNode, RemoveNode, Transaction
from plate.plugins.base import Plugin, TransactionTransformSpec
from plate.plugins.builtin.blocks import retype

if TYPE_CHECKING:
    from plate.editor import Editor
    from plate.plugins.registry import PluginRegistry

logger = logging.getLogger(__name__)

TYPED_TEXT_SOURCE = "ime:replace_text"

MAX_HEADING_MARKS = 6

# trigger -> (kind, attrs)
SHORTCUTS: dict[str, tuple[str, dict[str, Any]]] = {
    "- ": ("list_item", {"list_type": "bulleted"}),
    "* ": ("list_item", {"list_type": "bulleted"}),
    "+ ": ("list_item", {"list_type": "bulleted"}),
    "1. ": ("list_item", {"list_type": "ordered"}),
    "> ": ("blockquote", {}),
    "[ ] ": ("todo_item", {"checked": False}),
    "[x] ": ("todo_item", {"checked": True}),
    "``` ": ("code_block", {}),
}


def match_shortcut(prefix: str) -> tuple[str, dict[str, Any]] | None:
    """Return the ``(kind, attrs)`` that ``prefix`` triggers, if any."""
    if prefix in SHORTCUTS:
        return SHORTCUTS[prefix]
    hashes = prefix[:-1]
    if prefix.endswith(" ") and hashes and set(hashes) == {"#"}:
        if len(hashes) <= MAX_HEADING_MARKS:
            return "heading", {"level": len(hashes)}
    return None


def _build(
    block: ElementNode,
    remainder: list[Any],
    kind: str,
    attrs: dict[str, Any],
    registry: "PluginRegistry",
) -> ElementNode:
    stripped = ElementNode(kind=block.kind, attrs=dict(block.attrs), children=remainder)
    if kind == "blockquote":
        return ElementNode(kind="blockquote", children=[stripped])
    return retype(stripped, kind, registry, **attrs)


def autoformat(editor: "Editor", tx: Transaction) -> Transaction | None:
    if tx.meta.source != TYPED_TEXT_SOURCE:
        return None
    working = editor.doc
    selection = editor.selection
    try:
        for op in tx.ops:
            selection = apply_op(working, selection, op)
    except EditorError:
        return None
    if tx.selection_after is not None:
        selection = tx.selection_after
    if not selection.is_collapsed:
        return None

    focus = selection.focus
    block_path: Path = focus.path[:-1]
    if not block_path or focus.path[-1] != 0:
        return None
    block = find_node(working, block_path)
    if not isinstance(block, ElementNode) or block.kind != "paragraph" or not block.children:
        return None
    leaf = block.children[0]
    if not isinstance(leaf, TextNode) or not 0 < focus.offset <= len(leaf.text):
        return None
    found = match_shortcut(leaf.text[: focus.offset])
    if found is None:
        return None
    kind, attrs = found
    if not editor.registry.is_known_kind(kind):
        return None

    remainder = [TextNode(leaf.text[focus.offset :], leaf.marks)] + block.children[1:]
    replacement = _build(block, remainder, kind, attrs, editor.registry)
    text_path = block_path + ((0, 0) if kind == "blockquote" else (0,))
    logger.debug("Autoformat %r -> %s at %s", leaf.text[: focus.offset], kind, list(block_path))
    return Transaction(
        ops=tx.ops + (RemoveNode(path=block_path), InsertNode(path=block_path, node=replacement)),
        selection_after=Selection.collapsed(Point(text_path, 0)),
        meta=tx.meta,
    )


class AutoformatPlugin(Plugin):
    id = "autoformat"

    def transaction_transforms(self) -> list[TransactionTransformSpec]:
        return [TransactionTransformSpec("autoformat.markdown_shortcuts", autoformat)]
