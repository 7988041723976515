"""Image plugin: block-level ``image`` voids."""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

from plate.model.nodes import Point, Selection, VoidNode, paragraph
from plate.ops.operations import InsertNode, Transaction
from plate.plugins.args import optional_str, require_str
from plate.plugins.base import ChildConstraint, CommandSpec, NodeRole, NodeSpec, Plugin

if TYPE_CHECKING:
    from plate.editor import Editor


def insert_image(editor: "Editor", args: dict[str, Any] | None) -> None:
    """Insert an image after the focus block, followed by an empty paragraph.

    The focus moves into the new paragraph so typing continues below
    the image.
    """
    src = require_str(args, "src")
    alt = optional_str(args, "alt")
    attrs: dict[str, Any] = {"src": src}
    if alt is not None:
        attrs["alt"] = alt

    focus = editor.selection.focus
    block_ix = focus.path[0] if focus.path else 0
    insert_at = min(block_ix + 1, len(editor.doc.children))
    tx = (
        Transaction(
            ops=(
                InsertNode(path=(insert_at,), node=VoidNode(kind="image", attrs=attrs)),
                InsertNode(path=(insert_at + 1,), node=paragraph("")),
            )
        )
        .with_selection_after(Selection.collapsed(Point((insert_at + 1, 0), 0)))
        .with_source("command:image.insert")
    )
    editor.apply(tx)


class ImagePlugin(Plugin):
    id = "image"

    def node_specs(self) -> list[NodeSpec]:
        return [
            NodeSpec(
                "image",
                NodeRole.BLOCK,
                is_void=True,
                children=ChildConstraint.NONE,
                owned_attrs=("src", "alt"),
            )
        ]

    def commands(self) -> list[CommandSpec]:
        return [CommandSpec("image.insert", "Insert image", insert_image)]
