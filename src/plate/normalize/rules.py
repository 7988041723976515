"""Structural normalizers contributed by the core plugin.

Each normalizer is a pure function ``(doc, selection, registry)`` that
returns ``None`` when its invariant already holds, or a corrective
``Transaction``.  When a normalizer emits several ops in one
transaction, it walks parents in reverse document order and children
right to left, so every op's path is still valid after the ops emitted
before it.

    ensure_non_empty_document     the document has at least one block
    ensure_text_leaf              inline-content elements hold a text run
    merge_adjacent_texts          neighbouring runs with equal marks merge
    remove_empty_texts            empty runs next to another run are dropped
    flank_inline_voids            inline voids sit between text runs
    strip_foreign_attrs           attributes owned by another kind are removed
    ensure_block_void_followed    top-level block voids are followed by a paragraph
"""
from __future__ import annotations

from typing import TYPE_CHECKING

from plate.model.nodes import (
    AttrPatch,
    Document,
    ElementNode,
    Node,
    Path,
    Point,
    Selection,
    TextNode,
    VoidNode,
    paragraph,
    text,
)
from plate.model.paths import iter_elements, walk
from plate.ops.operations import (
    InsertNode,
    InsertText,
    Op,
    RemoveNode,
    SetNodeAttrs,
    Transaction,
    TransactionMeta,
)
from plate.plugins.base import ChildConstraint

if TYPE_CHECKING:
    from plate.plugins.registry import PluginRegistry

_META = TransactionMeta(source="normalize")


def _parents_reversed(doc: Document) -> list[tuple[Path, list[Node]]]:
    """Return every child list (root first) in reverse document order."""
    parents: list[tuple[Path, list[Node]]] = [((), doc.children)]
    parents.extend((path, el.children) for path, el in iter_elements(doc))
    parents.reverse()
    return parents


def _tx(ops: list[Op], selection_after: Selection | None = None) -> Transaction | None:
    if not ops:
        return None
    return Transaction(ops=tuple(ops), selection_after=selection_after, meta=_META)


# ---------------------------------------------------------------------------
# Document shape
# ---------------------------------------------------------------------------


def ensure_non_empty_document(
    doc: Document, selection: Selection, registry: "PluginRegistry"
) -> Transaction | None:
    if doc.children:
        return None
    return _tx([InsertNode(path=(0,), node=paragraph(""))])


def ensure_text_leaf(
    doc: Document, selection: Selection, registry: "PluginRegistry"
) -> Transaction | None:
    """Give every inline-content element without a text run an empty one."""
    ops: list[Op] = []
    for path, el in reversed(list(iter_elements(doc))):
        spec = registry.node_spec(el.kind)
        if spec is None or spec.children is not ChildConstraint.INLINE_ONLY:
            continue
        if not any(isinstance(child, TextNode) for child in el.children):
            ops.append(InsertNode(path=path + (0,), node=text("")))
    return _tx(ops)


def ensure_block_void_followed(
    doc: Document, selection: Selection, registry: "PluginRegistry"
) -> Transaction | None:
    """Keep a paragraph after each top-level block void.

    The paragraph gives the cursor a text target below images and
    dividers.  A block void already followed by a non-void block is
    left alone.
    """
    ops: list[Op] = []
    blocks = doc.children
    for ix in range(len(blocks) - 1, -1, -1):
        node = blocks[ix]
        if not (isinstance(node, VoidNode) and registry.is_block_void(node.kind)):
            continue
        nxt = blocks[ix + 1] if ix + 1 < len(blocks) else None
        if nxt is None or isinstance(nxt, VoidNode):
            ops.append(InsertNode(path=(ix + 1,), node=paragraph("")))
    return _tx(ops)


# ---------------------------------------------------------------------------
# Text runs
# ---------------------------------------------------------------------------


def _mergeable_runs(children: list[Node]) -> list[tuple[int, int]]:
    runs: list[tuple[int, int]] = []
    start = 0
    while start < len(children):
        end = start
        first = children[start]
        if isinstance(first, TextNode):
            while (
                end + 1 < len(children)
                and isinstance(children[end + 1], TextNode)
                and children[end + 1].marks == first.marks
            ):
                end += 1
        if end > start:
            runs.append((start, end))
        start = end + 1
    return runs


def merge_adjacent_texts(
    doc: Document, selection: Selection, registry: "PluginRegistry"
) -> Transaction | None:
    """Merge neighbouring text runs that carry identical marks.

    The generic selection transforms cannot tell a merge from a plain
    removal, so the remapped selection is computed here and attached as
    ``selection_after``.
    """
    ops: list[Op] = []
    anchor, focus = selection.anchor, selection.focus
    for parent_path, children in _parents_reversed(doc):
        for start, end in reversed(_mergeable_runs(children)):
            texts = [children[i].text for i in range(start, end + 1)]  # type: ignore[union-attr]
            ops.append(
                InsertText(
                    path=parent_path + (start,), offset=len(texts[0]), text="".join(texts[1:])
                )
            )
            ops.extend(RemoveNode(path=parent_path + (i,)) for i in range(end, start, -1))
            anchor = _merge_point(anchor, parent_path, start, end, texts)
            focus = _merge_point(focus, parent_path, start, end, texts)
    if not ops:
        return None
    return _tx(ops, Selection(anchor=anchor, focus=focus))


def _merge_point(point: Point, parent: Path, start: int, end: int, texts: list[str]) -> Point:
    depth = len(parent)
    if len(point.path) <= depth or point.path[:depth] != parent:
        return point
    ix = point.path[depth]
    if start < ix <= end and len(point.path) == depth + 1:
        prefix = sum(len(t) for t in texts[: ix - start])
        return Point(parent + (start,), prefix + point.offset)
    if ix > end:
        shifted = parent + (ix - (end - start),) + point.path[depth + 1 :]
        return Point(shifted, point.offset)
    return point


def remove_empty_texts(
    doc: Document, selection: Selection, registry: "PluginRegistry"
) -> Transaction | None:
    """Drop empty text runs that sit next to another text run.

    An empty run is kept when it is the only run around, or when it
    flanks an inline void and is the cursor's only landing spot.
    """
    ops: list[Op] = []
    for parent_path, children in _parents_reversed(doc):
        for ix in range(len(children) - 1, -1, -1):
            node = children[ix]
            if not isinstance(node, TextNode) or node.text:
                continue
            left = children[ix - 1] if ix > 0 else None
            right = children[ix + 1] if ix + 1 < len(children) else None
            if isinstance(left, TextNode) or (isinstance(right, TextNode) and right.text):
                ops.append(RemoveNode(path=parent_path + (ix,)))
    return _tx(ops)


def flank_inline_voids(
    doc: Document, selection: Selection, registry: "PluginRegistry"
) -> Transaction | None:
    """Ensure each inline void has a text run on both sides."""
    ops: list[Op] = []
    for parent_path, children in _parents_reversed(doc):
        if not parent_path:
            continue
        for ix in range(len(children) - 1, -1, -1):
            node = children[ix]
            if not (isinstance(node, VoidNode) and registry.is_inline_void(node.kind)):
                continue
            right = children[ix + 1] if ix + 1 < len(children) else None
            if not isinstance(right, TextNode):
                ops.append(InsertNode(path=parent_path + (ix + 1,), node=text("")))
            if ix == 0 or not isinstance(children[ix - 1], TextNode):
                ops.append(InsertNode(path=parent_path + (ix,), node=text("")))
    return _tx(ops)


# ---------------------------------------------------------------------------
# Attributes
# ---------------------------------------------------------------------------


def strip_foreign_attrs(
    doc: Document, selection: Selection, registry: "PluginRegistry"
) -> Transaction | None:
    """Remove attributes owned by a different node kind.

    A heading turned into a code block loses ``level``; a paragraph
    carrying ``list_type`` loses it.  Unknown kinds are left untouched.
    """
    ops: list[Op] = []
    for path, node in walk(doc):
        if isinstance(node, TextNode) or not registry.is_known_kind(node.kind):
            continue
        foreign = sorted(k for k in node.attrs if k in registry.foreign_attrs(node.kind))
        if foreign:
            ops.append(SetNodeAttrs(path=path, patch=AttrPatch(remove=tuple(foreign))))
    return _tx(ops)
