"""Todo plugin: checklist ``todo_item`` blocks.

A todo item is a text block with a boolean ``checked`` attribute.
``todo.toggle`` converts the selected blocks to unchecked todo items, or
back to paragraphs when every selected block already is one.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

from plate.model.nodes import AttrPatch, Document, ElementNode, Selection
from plate.model.paths import iter_elements
from plate.ops.operations import Op, SetNodeAttrs, Transaction, TransactionMeta
from plate.plugins.base import (
    ChildConstraint,
    CommandSpec,
    NodeRole,
    NodeSpec,
    NormalizerSpec,
    Plugin,
    QuerySpec,
)
from plate.plugins.builtin.blocks import focus_block, replace_blocks, retype, target_blocks

if TYPE_CHECKING:
    from plate.editor import Editor
    from plate.plugins.registry import PluginRegistry


def is_checked_block(block: ElementNode | None) -> bool:
    return block is not None and block.kind == "todo_item" and block.attrs.get("checked") is True


def toggle(editor: "Editor", args: dict[str, Any] | None) -> None:
    targets = target_blocks(editor)
    to_paragraph = bool(targets) and all(block.kind == "todo_item" for _, block in targets)

    def build(block: ElementNode) -> ElementNode | None:
        if to_paragraph:
            return retype(block, "paragraph", editor.registry)
        if block.kind == "todo_item":
            return None
        return retype(block, "todo_item", editor.registry, checked=False)

    replace_blocks(editor, targets, build, "todo.toggle")


def toggle_checked(editor: "Editor", args: dict[str, Any] | None) -> None:
    todos = [(path, block) for path, block in target_blocks(editor) if block.kind == "todo_item"]
    if not todos:
        return
    checked = not all(is_checked_block(block) for _, block in todos)
    ops: list[Op] = [
        SetNodeAttrs(path=path, patch=AttrPatch(set={"checked": checked})) for path, _ in todos
    ]
    editor.apply(Transaction(ops=tuple(ops)).with_source("command:todo.toggle_checked"))


def is_active(editor: "Editor", args: dict[str, Any] | None) -> bool:
    block = focus_block(editor)
    return block is not None and block.kind == "todo_item"


def is_checked(editor: "Editor", args: dict[str, Any] | None) -> bool:
    return is_checked_block(focus_block(editor))


def ensure_checked_flag(
    doc: Document, selection: Selection, registry: "PluginRegistry"
) -> Transaction | None:
    ops: list[Op] = [
        SetNodeAttrs(path=path, patch=AttrPatch(set={"checked": False}))
        for path, el in iter_elements(doc)
        if el.kind == "todo_item" and not isinstance(el.attrs.get("checked"), bool)
    ]
    if not ops:
        return None
    return Transaction(ops=tuple(ops), meta=TransactionMeta(source="normalize"))


class TodoPlugin(Plugin):
    id = "todo"

    def node_specs(self) -> list[NodeSpec]:
        return [
            NodeSpec(
                "todo_item",
                NodeRole.BLOCK,
                children=ChildConstraint.INLINE_ONLY,
                owned_attrs=("checked",),
            )
        ]

    def commands(self) -> list[CommandSpec]:
        return [
            CommandSpec("todo.toggle", "Toggle todo", toggle),
            CommandSpec("todo.toggle_checked", "Toggle checked", toggle_checked),
        ]

    def queries(self) -> list[QuerySpec]:
        return [
            QuerySpec("todo.is_active", is_active),
            QuerySpec("todo.is_checked", is_checked),
        ]

    def normalizers(self) -> list[NormalizerSpec]:
        return [NormalizerSpec("todo.ensure_checked", ensure_checked_flag)]
