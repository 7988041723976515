"""Align plugin: horizontal alignment of text blocks.

Alignment is stored in an ``align`` attribute on any text block.  Left
is the default and is represented by the attribute being absent.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

from plate.model.nodes import AttrPatch, Document, ElementNode, Selection
from plate.model.paths import iter_elements
from plate.ops.operations import Op, SetNodeAttrs, Transaction, TransactionMeta
from plate.plugins.args import require_choice
from plate.plugins.base import CommandSpec, NormalizerSpec, Plugin, QuerySpec
from plate.plugins.builtin.blocks import focus_block, target_blocks

if TYPE_CHECKING:
    from plate.editor import Editor
    from plate.plugins.registry import PluginRegistry

ALIGNMENTS: tuple[str, ...] = ("left", "center", "right", "justify")
DEFAULT_ALIGN = "left"


def align_of(block: ElementNode | None) -> str | None:
    """Return the explicit alignment of ``block``; ``None`` means left."""
    if block is None:
        return None
    value = block.attrs.get("align")
    if value in ALIGNMENTS and value != DEFAULT_ALIGN:
        return value
    return None


def set_align(editor: "Editor", args: dict[str, Any] | None) -> None:
    align = require_choice(args, "align", ALIGNMENTS)
    ops: list[Op] = []
    for path, block in target_blocks(editor):
        if align == DEFAULT_ALIGN:
            if "align" in block.attrs:
                ops.append(SetNodeAttrs(path=path, patch=AttrPatch(remove=("align",))))
        elif block.attrs.get("align") != align:
            ops.append(SetNodeAttrs(path=path, patch=AttrPatch(set={"align": align})))
    if not ops:
        return
    editor.apply(Transaction(ops=tuple(ops)).with_source("command:block.set_align"))


def current_align(editor: "Editor", args: dict[str, Any] | None) -> str | None:
    return align_of(focus_block(editor))


def drop_default_align(
    doc: Document, selection: Selection, registry: "PluginRegistry"
) -> Transaction | None:
    """Remove ``align`` values that are left or not a known alignment."""
    ops: list[Op] = []
    for path, el in iter_elements(doc):
        if "align" in el.attrs and align_of(el) is None:
            ops.append(SetNodeAttrs(path=path, patch=AttrPatch(remove=("align",))))
    if not ops:
        return None
    return Transaction(ops=tuple(ops), meta=TransactionMeta(source="normalize"))


class AlignPlugin(Plugin):
    id = "align"

    def commands(self) -> list[CommandSpec]:
        return [CommandSpec("block.set_align", "Set alignment", set_align)]

    def queries(self) -> list[QuerySpec]:
        return [QuerySpec("block.align", current_align)]

    def normalizers(self) -> list[NormalizerSpec]:
        return [NormalizerSpec("align.drop_default", drop_default_align)]
