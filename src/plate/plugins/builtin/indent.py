"""Indent plugin: block indentation.

List items nest through ``list_level``; every other text block uses a
generic ``indent`` attribute.  A level of zero is represented by the
attribute being absent.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

from plate.model.nodes import AttrPatch, ElementNode
from plate.ops.operations import Op, SetNodeAttrs, Transaction
from plate.plugins.base import CommandSpec, Plugin, QuerySpec
from plate.plugins.builtin.blocks import focus_block, target_blocks

if TYPE_CHECKING:
    from plate.editor import Editor

MAX_INDENT = 8


def indent_attr(block: ElementNode) -> str:
    return "list_level" if block.kind == "list_item" else "indent"


def indent_of(block: ElementNode | None) -> int:
    if block is None:
        return 0
    value = block.attrs.get(indent_attr(block), 0)
    if isinstance(value, bool) or not isinstance(value, int):
        return 0
    return max(0, value)


def _adjust(delta: int, command: str) -> CommandSpec:
    def handler(editor: "Editor", args: dict[str, Any] | None) -> None:
        ops: list[Op] = []
        for path, block in target_blocks(editor):
            current = indent_of(block)
            level = max(0, min(MAX_INDENT, current + delta))
            if level == current:
                continue
            attr = indent_attr(block)
            patch = AttrPatch(set={attr: level}) if level else AttrPatch(remove=(attr,))
            ops.append(SetNodeAttrs(path=path, patch=patch))
        if not ops:
            return
        editor.apply(Transaction(ops=tuple(ops)).with_source(f"command:{command}"))

    label = "Increase indent" if delta > 0 else "Decrease indent"
    return CommandSpec(command, label, handler)


def indent_level(editor: "Editor", args: dict[str, Any] | None) -> int:
    return indent_of(focus_block(editor))


class IndentPlugin(Plugin):
    id = "indent"

    def commands(self) -> list[CommandSpec]:
        return [
            _adjust(1, "block.indent_increase"),
            _adjust(-1, "block.indent_decrease"),
        ]

    def queries(self) -> list[QuerySpec]:
        return [QuerySpec("block.indent_level", indent_level)]
