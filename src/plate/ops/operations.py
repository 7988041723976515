"""Operation and transaction types.

Ops are the only way the document tree changes.  Each op names the path
it targets; that path is resolved against the tree *as left by the
previous op in the same transaction*, never against a snapshot taken
when the transaction was built.

A ``Transaction`` bundles ops with an optional explicit selection to
install after applying, plus pass-through metadata.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Union

from plate.model.nodes import AttrPatch, Marks, Node, Path, Selection


@dataclass(frozen=True, slots=True)
class InsertText:
    path: Path
    offset: int
    text: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", tuple(self.path))


@dataclass(frozen=True, slots=True)
class RemoveText:
    """Remove the half-open character range ``[start, end)``."""

    path: Path
    start: int
    end: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", tuple(self.path))


@dataclass(frozen=True, slots=True)
class InsertNode:
    """Insert ``node`` at slot ``path[-1]`` of the parent at ``path[:-1]``."""

    path: Path
    node: Node

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", tuple(self.path))


@dataclass(frozen=True, slots=True)
class RemoveNode:
    path: Path

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", tuple(self.path))


@dataclass(frozen=True, slots=True)
class SetNodeAttrs:
    path: Path
    patch: AttrPatch

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", tuple(self.path))


@dataclass(frozen=True, slots=True)
class SetTextMarks:
    """Replace the marks of the text run at ``path``."""

    path: Path
    marks: Marks

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", tuple(self.path))


Op = Union[InsertText, RemoveText, InsertNode, RemoveNode, SetNodeAttrs, SetTextMarks]

# JSON discriminator for each op class.
OP_NAMES: dict[type, str] = {
    InsertText: "insert_text",
    RemoveText: "remove_text",
    InsertNode: "insert_node",
    RemoveNode: "remove_node",
    SetNodeAttrs: "set_node_attrs",
    SetTextMarks: "set_text_marks",
}


@dataclass(frozen=True, slots=True)
class TransactionMeta:
    """Pass-through metadata.

    The core never interprets ``source``; transaction transforms such as
    autoformat may key off it.
    """

    source: str | None = None


@dataclass(frozen=True, slots=True)
class Transaction:
    """An ordered, atomically applied bundle of ops."""

    ops: tuple[Op, ...] = ()
    selection_after: Selection | None = None
    meta: TransactionMeta = field(default_factory=TransactionMeta)

    def __post_init__(self) -> None:
        object.__setattr__(self, "ops", tuple(self.ops))

    def with_selection_after(self, selection: Selection) -> "Transaction":
        return replace(self, selection_after=selection)

    def with_source(self, source: str) -> "Transaction":
        return replace(self, meta=TransactionMeta(source=source))
