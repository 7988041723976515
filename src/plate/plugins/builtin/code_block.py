"""Code block plugin.

``code_block.toggle`` flips the selected blocks between ``code_block``
and ``paragraph``.  A code block cannot also be a heading or a list
item: attributes owned by those kinds are dropped on the way in.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

from plate.model.nodes import ElementNode
from plate.plugins.base import (
    ChildConstraint,
    CommandSpec,
    NodeRole,
    NodeSpec,
    Plugin,
    QuerySpec,
)
from plate.plugins.builtin.blocks import focus_block, replace_blocks, retype, target_blocks

if TYPE_CHECKING:
    from plate.editor import Editor


def toggle(editor: "Editor", args: dict[str, Any] | None) -> None:
    targets = target_blocks(editor)
    to_paragraph = bool(targets) and all(block.kind == "code_block" for _, block in targets)

    def build(block: ElementNode) -> ElementNode:
        kind = "paragraph" if to_paragraph else "code_block"
        return retype(block, kind, editor.registry)

    replace_blocks(editor, targets, build, "code_block.toggle")


def is_active(editor: "Editor", args: dict[str, Any] | None) -> bool:
    block = focus_block(editor)
    return block is not None and block.kind == "code_block"


class CodeBlockPlugin(Plugin):
    id = "code_block"

    def node_specs(self) -> list[NodeSpec]:
        return [
            NodeSpec(
                "code_block",
                NodeRole.BLOCK,
                children=ChildConstraint.INLINE_ONLY,
                owned_attrs=("language",),
            )
        ]

    def commands(self) -> list[CommandSpec]:
        return [CommandSpec("code_block.toggle", "Toggle code block", toggle)]

    def queries(self) -> list[QuerySpec]:
        return [QuerySpec("code_block.is_active", is_active)]
