"""Extension-point types for plate plugins.

A ``Plugin`` bundles five kinds of contributions:

* ``NodeSpec`` -- declares a node kind (block or inline, void or not,
  which children it accepts, and which attributes it owns);
* ``CommandSpec`` -- a named mutating operation;
* ``QuerySpec`` -- a named read-only derivation;
* ``NormalizerSpec`` -- a post-transaction corrective rule;
* ``TransactionTransformSpec`` -- a pre-apply rewrite of incoming
  transactions.

Every contribution method has an empty default, so a plugin overrides
only what it provides.

Example
-------
::

    class CalloutPlugin(Plugin):
        id = "callout"

        def node_specs(self) -> list[NodeSpec]:
            return [NodeSpec("callout", NodeRole.BLOCK, children=ChildConstraint.INLINE_ONLY,
                             owned_attrs=("icon",))]
"""
from __future__ import annotations

from abc import ABC
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from plate.editor import Editor
    from plate.model.nodes import Document, Selection
    from plate.ops.operations import Transaction
    from plate.plugins.registry import PluginRegistry


class NodeRole(Enum):
    """Whether a node kind lives between blocks or inside text content."""

    BLOCK = auto()
    INLINE = auto()


class ChildConstraint(Enum):
    """Which children an element kind accepts."""

    NONE = auto()
    BLOCK_ONLY = auto()
    INLINE_ONLY = auto()
    ANY = auto()


@dataclass(frozen=True)
class NodeSpec:
    """Schema declaration for one node kind.

    Parameters
    ----------
    kind:
        The ``kind`` tag of elements or voids of this type.
    role:
        Block-level or inline.
    is_void:
        ``True`` for childless leaves (emoji, image, divider).
    children:
        What the element accepts as children; ``NONE`` for voids.
    owned_attrs:
        Attributes only meaningful for this kind.  They are stripped
        from nodes of any other known kind during normalization.
    """

    kind: str
    role: NodeRole
    is_void: bool = False
    children: ChildConstraint = ChildConstraint.INLINE_ONLY
    owned_attrs: tuple[str, ...] = ()


CommandHandler = Callable[["Editor", Optional[dict[str, Any]]], None]
QueryHandler = Callable[["Editor", Optional[dict[str, Any]]], Any]
NormalizeFn = Callable[["Document", "Selection", "PluginRegistry"], Optional["Transaction"]]
TransformFn = Callable[["Editor", "Transaction"], Optional["Transaction"]]


@dataclass(frozen=True)
class CommandSpec:
    name: str
    label: str
    handler: CommandHandler = field(compare=False)


@dataclass(frozen=True)
class QuerySpec:
    name: str
    handler: QueryHandler = field(compare=False)


@dataclass(frozen=True)
class NormalizerSpec:
    """A named normalizer.

    ``fn`` inspects the document (and selection) and returns either
    ``None`` when nothing needs fixing, or a corrective transaction.
    It must never mutate its arguments.
    """

    name: str
    fn: NormalizeFn = field(compare=False)


@dataclass(frozen=True)
class TransactionTransformSpec:
    """A named rewrite applied to transactions before they run.

    ``fn`` receives the editor (in its pre-transaction state) and the
    incoming transaction, and returns either ``None`` to leave it alone
    or the transaction to apply instead.  Transforms run in registration
    order, each seeing the previous one's output.
    """

    name: str
    fn: TransformFn = field(compare=False)


class Plugin(ABC):
    """Base class for all plugins.

    Subclasses set a unique ``id`` and override the contribution
    methods they need.
    """

    id: str = ""

    def node_specs(self) -> list[NodeSpec]:
        return []

    def commands(self) -> list[CommandSpec]:
        return []

    def queries(self) -> list[QuerySpec]:
        return []

    def normalizers(self) -> list[NormalizerSpec]:
        return []

    def transaction_transforms(self) -> list[TransactionTransformSpec]:
        return []

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r})"
