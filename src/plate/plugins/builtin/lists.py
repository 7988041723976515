"""Lists plugin: bulleted and ordered ``list_item`` blocks.

A list item is a text block with ``kind="list_item"``, a
``list_type`` of ``"bulleted"`` or ``"ordered"``, and an optional
nesting ``list_level`` (see the indent plugin).
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

from plate.model.nodes import ElementNode
from plate.plugins.args import optional_choice
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

LIST_TYPES: tuple[str, ...] = ("bulleted", "ordered")


def list_type_of(block: ElementNode | None) -> str | None:
    if block is None or block.kind != "list_item":
        return None
    value = block.attrs.get("list_type")
    return value if value in LIST_TYPES else "bulleted"


def _toggle(list_type: str) -> CommandSpec:
    command = f"list.toggle_{list_type}"

    def handler(editor: "Editor", args: dict[str, Any] | None) -> None:
        targets = target_blocks(editor)
        deactivate = bool(targets) and all(
            list_type_of(block) == list_type for _, block in targets
        )

        def build(block: ElementNode) -> ElementNode:
            if deactivate:
                return retype(block, "paragraph", editor.registry)
            level = block.attrs.get("list_level") if block.kind == "list_item" else None
            return retype(
                block, "list_item", editor.registry, list_type=list_type, list_level=level
            )

        replace_blocks(editor, targets, build, command)

    return CommandSpec(command, f"Toggle {list_type} list", handler)


def unwrap(editor: "Editor", args: dict[str, Any] | None) -> None:
    replace_blocks(
        editor,
        target_blocks(editor),
        lambda block: retype(block, "paragraph", editor.registry)
        if block.kind == "list_item"
        else None,
        "list.unwrap",
    )


def active_type(editor: "Editor", args: dict[str, Any] | None) -> str | None:
    return list_type_of(focus_block(editor))


def is_active(editor: "Editor", args: dict[str, Any] | None) -> bool:
    wanted = optional_choice(args, "type", LIST_TYPES)
    current = list_type_of(focus_block(editor))
    if wanted is None:
        return current is not None
    return current == wanted


class ListsPlugin(Plugin):
    id = "lists"

    def node_specs(self) -> list[NodeSpec]:
        return [
            NodeSpec(
                "list_item",
                NodeRole.BLOCK,
                children=ChildConstraint.INLINE_ONLY,
                owned_attrs=("list_type", "list_level"),
            )
        ]

    def commands(self) -> list[CommandSpec]:
        return [
            _toggle("bulleted"),
            _toggle("ordered"),
            CommandSpec("list.unwrap", "Remove list", unwrap),
        ]

    def queries(self) -> list[QuerySpec]:
        return [
            QuerySpec("list.active_type", active_type),
            QuerySpec("list.is_active", is_active),
        ]
