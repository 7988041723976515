"""Font size plugin: a per-block ``font_size`` in points.

The attribute is absent for the default size.  Stored values are
clamped into ``[MIN_FONT_SIZE, MAX_FONT_SIZE]`` by the normalizer, and
anything that is not a number is dropped.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

from plate.model.nodes import AttrPatch, Document, ElementNode, Selection
from plate.model.paths import iter_elements
from plate.ops.operations import Op, SetNodeAttrs, Transaction, TransactionMeta
from plate.plugins.args import require_int
from plate.plugins.base import CommandSpec, NormalizerSpec, Plugin, QuerySpec
from plate.plugins.builtin.blocks import focus_block, target_blocks

if TYPE_CHECKING:
    from plate.editor import Editor
    from plate.plugins.registry import PluginRegistry

MIN_FONT_SIZE = 8
MAX_FONT_SIZE = 72


def font_size_of(block: ElementNode | None) -> int | None:
    if block is None:
        return None
    value = block.attrs.get("font_size")
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def _set_all(editor: "Editor", patch_for: Any, command: str) -> None:
    ops: list[Op] = []
    for path, block in target_blocks(editor):
        patch = patch_for(block)
        if patch is not None:
            ops.append(SetNodeAttrs(path=path, patch=patch))
    if not ops:
        return
    editor.apply(Transaction(ops=tuple(ops)).with_source(f"command:{command}"))


def set_font_size(editor: "Editor", args: dict[str, Any] | None) -> None:
    size = require_int(args, "size", MIN_FONT_SIZE, MAX_FONT_SIZE)
    _set_all(
        editor,
        lambda block: None
        if block.attrs.get("font_size") == size
        else AttrPatch(set={"font_size": size}),
        "block.set_font_size",
    )


def unset_font_size(editor: "Editor", args: dict[str, Any] | None) -> None:
    _set_all(
        editor,
        lambda block: AttrPatch(remove=("font_size",)) if "font_size" in block.attrs else None,
        "block.unset_font_size",
    )


def current_font_size(editor: "Editor", args: dict[str, Any] | None) -> int | None:
    return font_size_of(focus_block(editor))


def clamp_font_sizes(
    doc: Document, selection: Selection, registry: "PluginRegistry"
) -> Transaction | None:
    ops: list[Op] = []
    for path, el in iter_elements(doc):
        if "font_size" not in el.attrs:
            continue
        value = el.attrs["font_size"]
        if isinstance(value, bool) or not isinstance(value, (int, float)) or (
            isinstance(value, float) and not value.is_integer()
        ):
            ops.append(SetNodeAttrs(path=path, patch=AttrPatch(remove=("font_size",))))
            continue
        clamped = max(MIN_FONT_SIZE, min(MAX_FONT_SIZE, int(value)))
        if clamped != value or not isinstance(value, int):
            ops.append(SetNodeAttrs(path=path, patch=AttrPatch(set={"font_size": clamped})))
    if not ops:
        return None
    return Transaction(ops=tuple(ops), meta=TransactionMeta(source="normalize"))


class FontSizePlugin(Plugin):
    id = "font_size"

    def commands(self) -> list[CommandSpec]:
        return [
            CommandSpec("block.set_font_size", "Set font size", set_font_size),
            CommandSpec("block.unset_font_size", "Reset font size", unset_font_size),
        ]

    def queries(self) -> list[QuerySpec]:
        return [QuerySpec("block.font_size", current_font_size)]

    def normalizers(self) -> list[NormalizerSpec]:
        return [NormalizerSpec("font_size.clamp", clamp_font_sizes)]
