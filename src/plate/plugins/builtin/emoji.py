"""Emoji plugin: inline ``emoji`` voids inserted at the cursor."""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

from plate.errors import InvalidOp
from plate.model.nodes import Point, Selection, TextNode, VoidNode
from plate.model.paths import find_node
from plate.ops.operations import InsertNode, Op, RemoveText, Transaction
from plate.plugins.args import optional_str
from plate.plugins.base import ChildConstraint, CommandSpec, NodeRole, NodeSpec, Plugin

if TYPE_CHECKING:
    from plate.editor import Editor


def insert_emoji(editor: "Editor", args: dict[str, Any] | None) -> None:
    """Split the run under the focus and put an emoji void between the halves.

    The focus lands at the start of the trailing half, i.e. right after
    the emoji.
    """
    emoji = optional_str(args, "emoji") or editor.config.default_emoji
    focus = editor.selection.focus
    node = find_node(editor.doc, focus.path)
    if not isinstance(node, TextNode) or len(focus.path) < 2:
        raise InvalidOp("emoji.insert requires the focus to be inside a text run")

    parent, ix = focus.path[:-1], focus.path[-1]
    offset = min(focus.offset, len(node.text))
    ops: list[Op] = []
    if offset < len(node.text):
        ops.append(RemoveText(path=focus.path, start=offset, end=len(node.text)))
    ops.append(InsertNode(path=parent + (ix + 1,), node=TextNode(node.text[offset:], node.marks)))
    ops.append(InsertNode(path=parent + (ix + 1,), node=VoidNode(kind="emoji", attrs={"emoji": emoji})))

    tx = (
        Transaction(ops=tuple(ops))
        .with_selection_after(Selection.collapsed(Point(parent + (ix + 2,), 0)))
        .with_source("command:emoji.insert")
    )
    editor.apply(tx)


class EmojiPlugin(Plugin):
    id = "emoji"

    def node_specs(self) -> list[NodeSpec]:
        return [
            NodeSpec(
                "emoji",
                NodeRole.INLINE,
                is_void=True,
                children=ChildConstraint.NONE,
                owned_attrs=("emoji",),
            )
        ]

    def commands(self) -> list[CommandSpec]:
        return [CommandSpec("emoji.insert", "Insert emoji", insert_emoji)]
