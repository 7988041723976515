"""Path addressing over a ``Document``.

A path is a tuple of child indices.  Resolution is a linear descent
from the document's top-level list: ``path[0]`` picks a block, and every
further index requires the current node to be an ``ElementNode``.
Voids and text runs have no children, so any path continuing past one
fails with ``PathNotFound``.

All helpers work on the live tree they are given; the transaction
engine passes its private working copy.
"""
from __future__ import annotations

from collections.abc import Iterator

from plate.errors import InvalidOp, PathNotFound
from plate.model.nodes import Document, ElementNode, Node, Path, TextNode, VoidNode


def node_at(doc: Document, path: Path) -> Node:
    """Return the node addressed by ``path``.

    Raises
    ------
    PathNotFound
        If ``path`` is empty, an index is out of bounds, or the walk
        crosses a text or void node.
    """
    if not path:
        raise PathNotFound(path, "empty path addresses the whole document")
    children = doc.children
    for depth, ix in enumerate(path[:-1]):
        node = _child(children, path, depth, ix)
        if not isinstance(node, ElementNode):
            raise PathNotFound(path, f"{type(node).__name__} at depth {depth} has no children")
        children = node.children
    return _child(children, path, len(path) - 1, path[-1])


def _child(children: list[Node], path: Path, depth: int, ix: int) -> Node:
    if ix < 0 or ix >= len(children):
        raise PathNotFound(
            path, f"index {ix} out of bounds at depth {depth} ({len(children)} children)"
        )
    return children[ix]


def find_node(doc: Document, path: Path) -> Node | None:
    """Like ``node_at`` but returns ``None`` instead of raising."""
    try:
        return node_at(doc, path)
    except PathNotFound:
        return None


def children_of(doc: Document, parent_path: Path) -> list[Node]:
    """Return the mutable child list of the container at ``parent_path``.

    The empty path yields the document's top-level list.
    """
    if not parent_path:
        return doc.children
    parent = node_at(doc, parent_path)
    if isinstance(parent, ElementNode):
        return parent.children
    kind = "Void" if isinstance(parent, VoidNode) else "Text"
    raise InvalidOp(f"{kind} node at {list(parent_path)} cannot have children")


def split_path(path: Path) -> tuple[Path, int]:
    """Split ``path`` into ``(parent_path, index)``."""
    if not path:
        raise PathNotFound(path, "empty path has no parent")
    return path[:-1], path[-1]


def text_at(doc: Document, path: Path) -> TextNode:
    node = node_at(doc, path)
    if not isinstance(node, TextNode):
        raise InvalidOp(f"Expected a Text node at {list(path)}, found {type(node).__name__}")
    return node


def insert_node(doc: Document, path: Path, node: Node) -> None:
    parent_path, index = split_path(path)
    siblings = children_of(doc, parent_path)
    if index < 0 or index > len(siblings):
        raise PathNotFound(path, f"insert slot {index} > {len(siblings)}")
    siblings.insert(index, node)


def remove_node(doc: Document, path: Path) -> Node:
    parent_path, index = split_path(path)
    siblings = children_of(doc, parent_path)
    if index < 0 or index >= len(siblings):
        raise PathNotFound(path, f"remove index {index} >= {len(siblings)}")
    return siblings.pop(index)


def is_ancestor(ancestor: Path, path: Path) -> bool:
    """Return True if ``ancestor`` is a strict prefix of ``path``."""
    return len(ancestor) < len(path) and path[: len(ancestor)] == ancestor


def walk(doc: Document) -> Iterator[tuple[Path, Node]]:
    """Yield ``(path, node)`` for every node in document (pre-)order."""

    def _walk(children: list[Node], prefix: Path) -> Iterator[tuple[Path, Node]]:
        for ix, child in enumerate(children):
            path = prefix + (ix,)
            yield path, child
            if isinstance(child, ElementNode):
                yield from _walk(child.children, path)

    yield from _walk(doc.children, ())


def iter_text_leaves(doc: Document) -> Iterator[tuple[Path, TextNode]]:
    for path, node in walk(doc):
        if isinstance(node, TextNode):
            yield path, node


def iter_elements(doc: Document) -> Iterator[tuple[Path, ElementNode]]:
    for path, node in walk(doc):
        if isinstance(node, ElementNode):
            yield path, node
