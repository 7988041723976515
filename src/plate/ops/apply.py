"""Applying a single op to a document and transforming the selection.

``apply_op`` mutates ``doc`` in place and returns the selection as it
must look after the op.  Callers that need atomicity (the ``Editor``)
hand it a private working copy and discard that copy on failure.

Selection transforms follow these rules:

* inserting text at or before a point on the same text run shifts it
  forward by the inserted length;
* removing text shifts later points back and clamps points inside the
  removed range to its start;
* inserting a node shifts every point at or after the slot (among the
  same siblings, including their descendants) forward by one;
* removing a node shifts later siblings back by one and clamps points
  inside the removed subtree to the nearest surviving boundary.
"""
from __future__ import annotations

import copy

from plate.errors import InvalidOp
from plate.model.nodes import (
    Document,
    ElementNode,
    Node,
    Path,
    Point,
    Selection,
    TextNode,
)
from plate.model.paths import (
    children_of,
    insert_node,
    node_at,
    remove_node,
    split_path,
    text_at,
)
from plate.ops.operations import (
    InsertNode,
    InsertText,
    Op,
    RemoveNode,
    RemoveText,
    SetNodeAttrs,
    SetTextMarks,
)


def apply_op(doc: Document, selection: Selection, op: Op) -> Selection:
    """Apply ``op`` to ``doc`` in place and return the transformed selection.

    Raises
    ------
    plate.errors.PathNotFound
        If the op's path does not resolve.
    plate.errors.InvalidOp
        If the op's preconditions do not hold.
    """
    if isinstance(op, InsertText):
        node = text_at(doc, op.path)
        if op.offset < 0 or op.offset > len(node.text):
            raise InvalidOp(
                f"insert_text offset {op.offset} out of range for text of length "
                f"{len(node.text)} at {list(op.path)}"
            )
        node.text = node.text[: op.offset] + op.text + node.text[op.offset :]
        return _map(selection, lambda p: _point_insert_text(p, op.path, op.offset, len(op.text)))

    if isinstance(op, RemoveText):
        node = text_at(doc, op.path)
        if not 0 <= op.start <= op.end <= len(node.text):
            raise InvalidOp(
                f"remove_text range {op.start}..{op.end} out of bounds for text of "
                f"length {len(node.text)} at {list(op.path)}"
            )
        node.text = node.text[: op.start] + node.text[op.end :]
        return _map(selection, lambda p: _point_remove_text(p, op.path, op.start, op.end))

    if isinstance(op, InsertNode):
        insert_node(doc, op.path, copy.deepcopy(op.node))
        return _map(selection, lambda p: _point_insert_node(p, op.path))

    if isinstance(op, RemoveNode):
        remove_node(doc, op.path)
        return _map(selection, lambda p: _point_remove_node(p, op.path, doc))

    if isinstance(op, SetNodeAttrs):
        node = node_at(doc, op.path)
        if isinstance(node, TextNode):
            raise InvalidOp(f"Text node at {list(op.path)} has no attributes")
        op.patch.apply_to(node.attrs)
        return selection

    if isinstance(op, SetTextMarks):
        text_at(doc, op.path).marks = op.marks
        return selection

    raise TypeError(f"Unknown op type: {type(op)}")


def _map(selection: Selection, fn) -> Selection:  # noqa: ANN001
    return Selection(anchor=fn(selection.anchor), focus=fn(selection.focus))


def _point_insert_text(point: Point, path: Path, offset: int, length: int) -> Point:
    if point.path == path and point.offset >= offset:
        return Point(point.path, point.offset + length)
    return point


def _point_remove_text(point: Point, path: Path, start: int, end: int) -> Point:
    if point.path != path or point.offset <= start:
        return point
    if point.offset >= end:
        return Point(point.path, point.offset - (end - start))
    return Point(point.path, start)


def _point_insert_node(point: Point, path: Path) -> Point:
    parent_path, index = split_path(path)
    depth = len(parent_path)
    if len(point.path) <= depth or point.path[:depth] != parent_path:
        return point
    if point.path[depth] < index:
        return point
    shifted = point.path[:depth] + (point.path[depth] + 1,) + point.path[depth + 1 :]
    return Point(shifted, point.offset)


def _point_remove_node(point: Point, path: Path, doc_after: Document) -> Point:
    parent_path, index = split_path(path)
    depth = len(parent_path)
    if len(point.path) <= depth or point.path[:depth] != parent_path:
        return point
    ix = point.path[depth]
    if ix < index:
        return point
    if ix > index:
        shifted = point.path[:depth] + (ix - 1,) + point.path[depth + 1 :]
        return Point(shifted, point.offset)

    # The point was inside the removed subtree.
    siblings = children_of(doc_after, parent_path)
    if index > 0:
        prev_path = parent_path + (index - 1,)
        return edge_point(siblings[index - 1], prev_path, at_end=True)
    if siblings:
        return edge_point(siblings[0], parent_path + (0,), at_end=False)
    return Point(parent_path or (0,), 0)


def edge_point(node: Node, path: Path, at_end: bool) -> Point:
    """Return the first (or last) cursor position inside ``node``."""
    if isinstance(node, TextNode):
        return Point(path, len(node.text) if at_end else 0)
    if isinstance(node, ElementNode) and node.children:
        ix = len(node.children) - 1 if at_end else 0
        return edge_point(node.children[ix], path + (ix,), at_end)
    return Point(path, 0)
