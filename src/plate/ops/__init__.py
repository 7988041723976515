"""Typed operations, transactions, and single-op application."""
from __future__ import annotations

from plate.ops.apply import apply_op
from plate.ops.operations import (
    InsertNode,
    InsertText,
    Op,
    RemoveNode,
    RemoveText,
    SetNodeAttrs,
    SetTextMarks,
    Transaction,
    TransactionMeta,
)

__all__ = [
    "Op",
    "InsertText",
    "RemoveText",
    "InsertNode",
    "RemoveNode",
    "SetNodeAttrs",
    "SetTextMarks",
    "Transaction",
    "TransactionMeta",
    "apply_op",
]
