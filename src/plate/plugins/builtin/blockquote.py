"""Blockquote plugin: a container block holding other blocks.

``blockquote.wrap_selection`` moves the top-level blocks spanned by the
selection into one new ``blockquote``; quotes inside the span are
flattened into it rather than nested.  ``blockquote.unwrap`` lifts the
children of the innermost quote around the focus back into its parent.
Both commands carry the selection to the moved text explicitly.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

from plate.model.nodes import (
    Document,
    ElementNode,
    Node,
    Path,
    Point,
    Selection,
    paragraph,
)
from plate.model.paths import iter_elements
from plate.ops.operations import InsertNode, Op, RemoveNode, Transaction, TransactionMeta
from plate.plugins.base import (
    ChildConstraint,
    CommandSpec,
    NodeRole,
    NodeSpec,
    NormalizerSpec,
    Plugin,
    QuerySpec,
)
from plate.plugins.builtin.blocks import element_ancestors

if TYPE_CHECKING:
    from plate.editor import Editor
    from plate.plugins.registry import PluginRegistry


def _is_quote(node: Node) -> bool:
    return isinstance(node, ElementNode) and node.kind == "blockquote"


def innermost_quote(doc: Document, path: Path) -> tuple[Path, ElementNode] | None:
    for quote_path, el in reversed(element_ancestors(doc, path)):
        if el.kind == "blockquote":
            return quote_path, el
    return None


def wrap_selection(editor: "Editor", args: dict[str, Any] | None) -> None:
    doc = editor.doc
    if not doc.children:
        return
    start, end = editor.selection.ordered()
    last_ix = len(doc.children) - 1
    first = min(start.path[0], last_ix) if start.path else 0
    last = min(end.path[0], last_ix) if end.path else 0
    if first == last and _is_quote(doc.children[first]):
        return

    children: list[Node] = []
    offsets: dict[int, int] = {}
    for ix in range(first, last + 1):
        node = doc.children[ix]
        offsets[ix] = len(children)
        if _is_quote(node):
            children.extend(node.children)  # type: ignore[union-attr]
        else:
            children.append(node)

    def remap(point: Point) -> Point:
        if not point.path or not first <= point.path[0] <= last:
            return point
        ix = point.path[0]
        rest = point.path[1:]
        if _is_quote(doc.children[ix]) and rest:
            inner = (first, offsets[ix] + rest[0]) + rest[1:]
        else:
            inner = (first, offsets[ix]) + rest
        return Point(inner, point.offset)

    ops: list[Op] = [RemoveNode(path=(ix,)) for ix in range(last, first - 1, -1)]
    ops.append(
        InsertNode(path=(first,), node=ElementNode(kind="blockquote", children=children))
    )
    selection = editor.selection
    after = Selection(anchor=remap(selection.anchor), focus=remap(selection.focus))
    tx = (
        Transaction(ops=tuple(ops))
        .with_selection_after(after)
        .with_source("command:blockquote.wrap_selection")
    )
    editor.apply(tx)


def unwrap(editor: "Editor", args: dict[str, Any] | None) -> None:
    doc = editor.doc
    found = innermost_quote(doc, editor.selection.focus.path)
    if found is None:
        return
    quote_path, quote = found
    parent, index = quote_path[:-1], quote_path[-1]
    depth = len(quote_path)

    def remap(point: Point) -> Point:
        path = point.path
        if len(path) > depth and path[:depth] == quote_path:
            lifted = parent + (index + path[depth],) + path[depth + 1 :]
            return Point(lifted, point.offset)
        if len(path) >= depth and path[: depth - 1] == parent and path[depth - 1] > index:
            shifted = parent + (path[depth - 1] + len(quote.children) - 1,) + path[depth:]
            return Point(shifted, point.offset)
        return point

    ops: list[Op] = [RemoveNode(path=quote_path)]
    ops.extend(
        InsertNode(path=parent + (index + i,), node=child) for i, child in enumerate(quote.children)
    )
    selection = editor.selection
    after = Selection(anchor=remap(selection.anchor), focus=remap(selection.focus))
    tx = (
        Transaction(ops=tuple(ops))
        .with_selection_after(after)
        .with_source("command:blockquote.unwrap")
    )
    editor.apply(tx)


def is_active(editor: "Editor", args: dict[str, Any] | None) -> bool:
    return innermost_quote(editor.doc, editor.selection.focus.path) is not None


def ensure_quote_content(
    doc: Document, selection: Selection, registry: "PluginRegistry"
) -> Transaction | None:
    """Give every empty blockquote an empty paragraph."""
    ops: list[Op] = [
        InsertNode(path=path + (0,), node=paragraph(""))
        for path, el in reversed(list(iter_elements(doc)))
        if el.kind == "blockquote" and not el.children
    ]
    if not ops:
        return None
    return Transaction(ops=tuple(ops), meta=TransactionMeta(source="normalize"))


class BlockquotePlugin(Plugin):
    id = "blockquote"

    def node_specs(self) -> list[NodeSpec]:
        return [NodeSpec("blockquote", NodeRole.BLOCK, children=ChildConstraint.BLOCK_ONLY)]

    def commands(self) -> list[CommandSpec]:
        return [
            CommandSpec("blockquote.wrap_selection", "Quote", wrap_selection),
            CommandSpec("blockquote.unwrap", "Remove quote", unwrap),
        ]

    def queries(self) -> list[QuerySpec]:
        return [QuerySpec("blockquote.is_active", is_active)]

    def normalizers(self) -> list[NormalizerSpec]:
        return [NormalizerSpec("blockquote.ensure_content", ensure_quote_content)]
