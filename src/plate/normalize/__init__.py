"""Post-transaction normalization: the fixed-point runner and core rules."""
from __future__ import annotations

from plate.normalize.pipeline import (
    DEFAULT_MAX_ITERATIONS,
    normalize,
    snap_point,
    snap_selection,
)

__all__ = [
    "DEFAULT_MAX_ITERATIONS",
    "normalize",
    "snap_point",
    "snap_selection",
]
