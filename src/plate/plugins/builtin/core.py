"""Core plugin: paragraphs, dividers, and the structural normalizers."""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

from plate.model.nodes import Point, Selection, divider, paragraph
from plate.normalize import rules
from plate.ops.operations import InsertNode, Transaction
from plate.plugins.base import (
    ChildConstraint,
    CommandSpec,
    NodeRole,
    NodeSpec,
    NormalizerSpec,
    Plugin,
)

if TYPE_CHECKING:
    from plate.editor import Editor


def insert_divider(editor: "Editor", args: dict[str, Any] | None) -> None:
    focus = editor.selection.focus
    block_ix = focus.path[0] if focus.path else 0
    insert_at = min(block_ix + 1, len(editor.doc.children))
    tx = (
        Transaction(
            ops=(
                InsertNode(path=(insert_at,), node=divider()),
                InsertNode(path=(insert_at + 1,), node=paragraph("")),
            )
        )
        .with_selection_after(Selection.collapsed(Point((insert_at + 1, 0), 0)))
        .with_source("command:core.insert_divider")
    )
    editor.apply(tx)


class CorePlugin(Plugin):
    id = "core"

    def node_specs(self) -> list[NodeSpec]:
        return [
            NodeSpec("paragraph", NodeRole.BLOCK, children=ChildConstraint.INLINE_ONLY),
            NodeSpec("divider", NodeRole.BLOCK, is_void=True, children=ChildConstraint.NONE),
        ]

    def commands(self) -> list[CommandSpec]:
        return [CommandSpec("core.insert_divider", "Insert divider", insert_divider)]

    def normalizers(self) -> list[NormalizerSpec]:
        return [
            NormalizerSpec("core.ensure_non_empty_document", rules.ensure_non_empty_document),
            NormalizerSpec("core.ensure_block_void_followed", rules.ensure_block_void_followed),
            NormalizerSpec("core.ensure_text_leaf", rules.ensure_text_leaf),
            NormalizerSpec("core.flank_inline_voids", rules.flank_inline_voids),
            NormalizerSpec("core.merge_adjacent_texts", rules.merge_adjacent_texts),
            NormalizerSpec("core.remove_empty_texts", rules.remove_empty_texts),
            NormalizerSpec("core.strip_foreign_attrs", rules.strip_foreign_attrs),
        ]
