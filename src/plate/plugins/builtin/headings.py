"""Headings plugin: ``heading`` blocks with a ``level`` from 1 to 6."""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

from plate.model.nodes import AttrPatch, Document, Selection
from plate.model.paths import iter_elements
from plate.ops.operations import Op, SetNodeAttrs, Transaction, TransactionMeta
from plate.plugins.args import require_int
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

MIN_LEVEL = 1
MAX_LEVEL = 6


def clamp_level(value: Any) -> int:
    """Clamp an arbitrary ``level`` attribute into ``[1, 6]``."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return MIN_LEVEL
    return max(MIN_LEVEL, min(MAX_LEVEL, int(value)))


def set_heading(editor: "Editor", args: dict[str, Any] | None) -> None:
    level = require_int(args, "level", MIN_LEVEL, MAX_LEVEL)
    replace_blocks(
        editor,
        target_blocks(editor),
        lambda block: retype(block, "heading", editor.registry, level=level),
        "block.set_heading",
    )


def unset_heading(editor: "Editor", args: dict[str, Any] | None) -> None:
    replace_blocks(
        editor,
        target_blocks(editor),
        lambda block: retype(block, "paragraph", editor.registry)
        if block.kind == "heading"
        else None,
        "block.unset_heading",
    )


def heading_level(editor: "Editor", args: dict[str, Any] | None) -> int | None:
    block = focus_block(editor)
    if block is None or block.kind != "heading":
        return None
    return clamp_level(block.attrs.get("level"))


def clamp_heading_levels(
    doc: Document, selection: Selection, registry: "PluginRegistry"
) -> Transaction | None:
    ops: list[Op] = []
    for path, el in iter_elements(doc):
        if el.kind != "heading":
            continue
        level = el.attrs.get("level")
        clamped = clamp_level(level)
        if level != clamped or isinstance(level, bool) or not isinstance(level, int):
            ops.append(SetNodeAttrs(path=path, patch=AttrPatch(set={"level": clamped})))
    if not ops:
        return None
    return Transaction(ops=tuple(ops), meta=TransactionMeta(source="normalize"))


class HeadingsPlugin(Plugin):
    id = "headings"

    def node_specs(self) -> list[NodeSpec]:
        return [
            NodeSpec(
                "heading",
                NodeRole.BLOCK,
                children=ChildConstraint.INLINE_ONLY,
                owned_attrs=("level",),
            )
        ]

    def commands(self) -> list[CommandSpec]:
        return [
            CommandSpec("block.set_heading", "Set heading", set_heading),
            CommandSpec("block.unset_heading", "Unset heading", unset_heading),
        ]

    def queries(self) -> list[QuerySpec]:
        return [QuerySpec("block.heading_level", heading_level)]

    def normalizers(self) -> list[NormalizerSpec]:
        return [NormalizerSpec("headings.clamp_level", clamp_heading_levels)]
