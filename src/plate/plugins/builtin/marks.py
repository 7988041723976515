"""Marks plugin: toggling and setting text formatting.

With a range selection only the selected characters change; partially
covered runs are split so the marks stop exactly at the selection
edges.  With a collapsed selection the run under the focus changes as a
whole.  Queries always read the marks of the run under the focus, so
they reflect exactly what the last command produced.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from plate.model.nodes import (
    BOOLEAN_MARKS,
    Document,
    Marks,
    Path,
    Point,
    Selection,
    TextNode,
)
from plate.model.paths import find_node, iter_text_leaves
from plate.ops.operations import InsertNode, Op, RemoveText, SetTextMarks, Transaction
from plate.plugins.args import require_str
from plate.plugins.base import CommandSpec, Plugin, QuerySpec

if TYPE_CHECKING:
    from plate.editor import Editor

logger = logging.getLogger(__name__)

# (mark name, argument field, label) for marks carrying a string value.
VALUED_COMMANDS: tuple[tuple[str, str, str], ...] = (
    ("text_color", "color", "text color"),
    ("highlight_color", "color", "highlight color"),
    ("link", "url", "link"),
)


def active_marks(editor: "Editor") -> Marks:
    """Return the marks of the text run under the focus."""
    node = find_node(editor.doc, editor.selection.focus.path)
    if isinstance(node, TextNode):
        return node.marks
    return Marks()


# ---------------------------------------------------------------------------
# Range splitting
# ---------------------------------------------------------------------------


def _pieces(doc: Document, selection: Selection) -> list[tuple[Path, TextNode, int, int]]:
    """Return ``(path, run, start, end)`` for each run the selection covers."""
    if selection.is_collapsed:
        node = find_node(doc, selection.focus.path)
        if isinstance(node, TextNode):
            return [(selection.focus.path, node, 0, len(node.text))]
        return []

    start, end = selection.ordered()
    pieces: list[tuple[Path, TextNode, int, int]] = []
    for path, node in iter_text_leaves(doc):
        if path < start.path:
            continue
        if path > end.path:
            break
        s = start.offset if path == start.path else 0
        e = end.offset if path == end.path else len(node.text)
        s, e = max(0, min(s, len(node.text))), max(0, min(e, len(node.text)))
        if s < e:
            pieces.append((path, node, s, e))
    return pieces


def _shift(path: Path, inserted: dict[tuple[Path, int], int]) -> Path:
    """Map an original path through sibling insertions recorded in ``inserted``.

    ``inserted`` maps ``(parent_path, index)`` of a split run to the
    number of siblings inserted right after it.
    """
    out = list(path)
    for depth in range(len(path)):
        parent = path[:depth]
        out[depth] += sum(
            count for (p, ix), count in inserted.items() if p == parent and ix < path[depth]
        )
    return tuple(out)


def set_mark_ops(
    doc: Document, selection: Selection, name: str, value: Any
) -> tuple[list[Op], Selection] | None:
    """Build ops setting mark ``name`` to ``value`` over ``selection``.

    Returns ``None`` when the selection covers no text.  The returned
    selection spans exactly the re-marked characters, in the original
    direction.
    """
    pieces = _pieces(doc, selection)
    if not pieces:
        return None

    ops: list[Op] = []
    inserted: dict[tuple[Path, int], int] = {}
    changed: dict[Path, bool] = {}
    for path, node, s, e in reversed(pieces):
        new_marks = node.marks.with_mark(name, value)
        changed[path] = new_marks != node.marks
        if not changed[path]:
            continue
        parent, ix = path[:-1], path[-1]
        count = 0
        if e < len(node.text):
            ops.append(RemoveText(path=path, start=e, end=len(node.text)))
            ops.append(InsertNode(path=parent + (ix + 1,), node=TextNode(node.text[e:], node.marks)))
            count += 1
        if s > 0:
            ops.append(RemoveText(path=path, start=s, end=e))
            ops.append(InsertNode(path=parent + (ix + 1,), node=TextNode(node.text[s:e], new_marks)))
            count += 1
        else:
            ops.append(SetTextMarks(path=path, marks=new_marks))
        inserted[(parent, ix)] = count

    if selection.is_collapsed:
        return ops, selection

    def locate(path: Path, s: int, e: int, at_end: bool) -> Point:
        if not changed[path]:
            return Point(_shift(path, inserted), e if at_end else s)
        new_path = _shift(path, inserted)
        if s > 0:
            new_path = new_path[:-1] + (new_path[-1] + 1,)
        return Point(new_path, e - s if at_end else 0)

    first, last = pieces[0], pieces[-1]
    new_start = locate(first[0], first[2], first[3], at_end=False)
    new_end = locate(last[0], last[2], last[3], at_end=True)
    if selection.is_backward:
        return ops, Selection(anchor=new_end, focus=new_start)
    return ops, Selection(anchor=new_start, focus=new_end)


def _apply_mark(editor: "Editor", name: str, value: Any, source: str) -> None:
    built = set_mark_ops(editor.doc, editor.selection, name, value)
    if built is None:
        logger.debug("Command %r: selection covers no text; nothing to do", source)
        return
    ops, selection_after = built
    if not ops:
        return
    tx = Transaction(ops=tuple(ops)).with_selection_after(selection_after).with_source(
        f"command:{source}"
    )
    editor.apply(tx)


# ---------------------------------------------------------------------------
# Command and query factories
# ---------------------------------------------------------------------------


def _toggle(name: str) -> CommandSpec:
    command = f"marks.toggle_{name}"

    def handler(editor: "Editor", args: dict[str, Any] | None) -> None:
        pieces = _pieces(editor.doc, editor.selection)
        enable = not pieces or not all(getattr(node.marks, name) for _, node, _, _ in pieces)
        _apply_mark(editor, name, enable, command)

    return CommandSpec(command, f"Toggle {name}", handler)


def _setter(name: str, field: str, label: str) -> CommandSpec:
    command = f"marks.set_{name}"

    def handler(editor: "Editor", args: dict[str, Any] | None) -> None:
        value = require_str(args, field)
        _apply_mark(editor, name, value, command)

    return CommandSpec(command, f"Set {label}", handler)


def _unsetter(name: str, label: str) -> CommandSpec:
    command = f"marks.unset_{name}"

    def handler(editor: "Editor", args: dict[str, Any] | None) -> None:
        _apply_mark(editor, name, None, command)

    return CommandSpec(command, f"Remove {label}", handler)


def _is_active(name: str) -> QuerySpec:
    def handler(editor: "Editor", args: dict[str, Any] | None) -> bool:
        return bool(getattr(active_marks(editor), name))

    return QuerySpec(f"marks.is_{name}_active", handler)


def _get_active(editor: "Editor", args: dict[str, Any] | None) -> dict[str, Any]:
    return active_marks(editor).to_dict()


def _has_link(editor: "Editor", args: dict[str, Any] | None) -> bool:
    return active_marks(editor).link is not None


class MarksPlugin(Plugin):
    id = "marks"

    def commands(self) -> list[CommandSpec]:
        specs = [_toggle(name) for name in BOOLEAN_MARKS]
        for name, field, label in VALUED_COMMANDS:
            specs.append(_setter(name, field, label))
            specs.append(_unsetter(name, label))
        return specs

    def queries(self) -> list[QuerySpec]:
        specs = [_is_active(name) for name in BOOLEAN_MARKS]
        specs.append(QuerySpec("marks.get_active", _get_active))
        specs.append(QuerySpec("marks.has_link_active", _has_link))
        return specs
