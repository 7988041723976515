"""Helpers shared by block-level commands and queries.

Block commands act on the text blocks covered by the selection, at any
depth: a paragraph inside a blockquote is targeted the same way as a
top-level one.  Only elements of a known kind that hold inline content
are targeted; containers, voids and unknown kinds are skipped.
"""
from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from plate.model.nodes import Document, ElementNode, Node, Path, Selection
from plate.model.paths import iter_elements
from plate.ops.operations import InsertNode, Op, RemoveNode, Transaction
from plate.plugins.base import ChildConstraint

if TYPE_CHECKING:
    from plate.editor import Editor
    from plate.plugins.registry import PluginRegistry


def is_text_block(node: Node, registry: "PluginRegistry") -> bool:
    if not isinstance(node, ElementNode):
        return False
    spec = registry.node_spec(node.kind)
    return spec is not None and spec.children is ChildConstraint.INLINE_ONLY


def covers(selection: Selection, path: Path) -> bool:
    """Return True if the element at ``path`` overlaps ``selection``."""
    start, end = selection.ordered()
    depth = len(path)
    return start.path[:depth] <= path <= end.path[:depth]


def target_blocks(editor: "Editor") -> list[tuple[Path, ElementNode]]:
    """Return ``(path, element)`` for every targetable selected block."""
    selection = editor.selection
    return [
        (path, el)
        for path, el in iter_elements(editor.doc)
        if is_text_block(el, editor.registry) and covers(selection, path)
    ]


def element_ancestors(doc: Document, path: Path) -> list[tuple[Path, ElementNode]]:
    """Return the elements along ``path``, outermost first.

    The walk stops at the first index that does not resolve to an
    element, so a text leaf's path yields its enclosing blocks.
    """
    found: list[tuple[Path, ElementNode]] = []
    children = doc.children
    for depth, ix in enumerate(path):
        if ix < 0 or ix >= len(children):
            break
        node = children[ix]
        if not isinstance(node, ElementNode):
            break
        found.append((path[: depth + 1], node))
        children = node.children
    return found


def focus_block(editor: "Editor") -> ElementNode | None:
    """Return the innermost element containing the focus, if any."""
    ancestors = element_ancestors(editor.doc, editor.selection.focus.path)
    return ancestors[-1][1] if ancestors else None


def retype(
    node: ElementNode,
    kind: str,
    registry: "PluginRegistry",
    **attrs: Any,
) -> ElementNode:
    """Return a copy of ``node`` with a new kind and cleaned attributes.

    Attributes owned by other kinds are dropped; ``attrs`` are then set,
    and any ``None`` value in ``attrs`` removes that key.
    """
    foreign = registry.foreign_attrs(kind)
    new_attrs = {k: v for k, v in node.attrs.items() if k not in foreign}
    for key, value in attrs.items():
        if value is None:
            new_attrs.pop(key, None)
        else:
            new_attrs[key] = value
    return ElementNode(kind=kind, attrs=new_attrs, children=list(node.children))


def replace_blocks(
    editor: "Editor",
    targets: list[tuple[Path, ElementNode]],
    build: Callable[[ElementNode], ElementNode | None],
    source: str,
) -> None:
    """Replace each target block with ``build(block)`` in one transaction.

    ``build`` returns ``None`` to leave a block untouched.  Each block is
    reinserted at its own path, so later target paths stay valid.  Block
    contents are preserved, so the prior selection is kept explicitly.
    """
    ops: list[Op] = []
    for path, block in targets:
        replacement = build(block)
        if replacement is None or replacement == block:
            continue
        ops.append(RemoveNode(path=path))
        ops.append(InsertNode(path=path, node=replacement))
    if not ops:
        return
    tx = Transaction(ops=tuple(ops)).with_selection_after(editor.selection).with_source(
        f"command:{source}"
    )
    editor.apply(tx)
