"""Fixed-point normalization and selection snapping.

After every successful transaction the editor calls ``normalize`` on its
working copy.  Each pass asks the registered normalizers, in
registration order, whether anything needs fixing; the first one that
returns a transaction has it applied and the pass restarts.  The run
ends on the first pass in which no normalizer reports a change.

The number of passes is bounded.  Running out of passes means two
normalizers keep undoing each other (or one keeps re-reporting its own
fix), which is a plugin bug and raises ``NormalizationDidNotConverge``.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from plate.errors import NormalizationDidNotConverge
from plate.model.nodes import Document, ElementNode, Point, Selection, TextNode
from plate.model.paths import iter_text_leaves
from plate.ops.apply import apply_op

if TYPE_CHECKING:
    from plate.plugins.registry import PluginRegistry

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITERATIONS = 100


def normalize(
    doc: Document,
    selection: Selection,
    registry: "PluginRegistry",
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> Selection:
    """Normalize ``doc`` in place until no normalizer reports a change.

    Parameters
    ----------
    doc:
        The document to normalize.  Mutated in place.
    selection:
        The selection to carry through the corrective transactions.
    registry:
        Source of the normalizers to run.
    max_iterations:
        Upper bound on the number of corrective transactions.

    Returns
    -------
    Selection
        The selection after all corrective transactions.

    Raises
    ------
    NormalizationDidNotConverge
        If a fixed point is not reached within ``max_iterations`` passes.
    """
    normalizers = registry.normalizers()
    last_change: str | None = None
    for iteration in range(max_iterations + 1):
        for spec in normalizers:
            tx = spec.fn(doc, selection, registry)
            if tx is None or (not tx.ops and tx.selection_after is None):
                continue
            if iteration == max_iterations:
                logger.error(
                    "Normalization did not converge after %d pass(es); "
                    "normalizer %r still reports changes",
                    max_iterations,
                    spec.name,
                )
                raise NormalizationDidNotConverge(max_iterations, spec.name)
            for op in tx.ops:
                selection = apply_op(doc, selection, op)
            if tx.selection_after is not None:
                selection = tx.selection_after
            last_change = spec.name
            logger.debug(
                "Normalizer %r applied %d op(s) on pass %d", spec.name, len(tx.ops), iteration
            )
            break
        else:
            if last_change is not None:
                logger.debug("Normalization converged after %d pass(es)", iteration)
            return selection
    # Unreachable: the final pass either returns or raises.
    raise NormalizationDidNotConverge(max_iterations, last_change)


def snap_selection(doc: Document, selection: Selection) -> Selection:
    """Move both points of ``selection`` onto existing text positions."""
    anchor = snap_point(doc, selection.anchor)
    focus = snap_point(doc, selection.focus)
    return Selection(anchor=anchor, focus=focus)


def snap_point(doc: Document, point: Point) -> Point:
    """Clamp ``point`` onto the nearest existing text position.

    The path is clamped index by index; a point landing on an element
    descends to its first text run, and a point landing on a void moves
    to the end of the previous text run (or the start of the next one).
    A document without any text keeps the clamped structural path.
    """
    children = doc.children
    path: list[int] = []
    node = None
    for ix in point.path:
        if not children:
            break
        ix = min(max(ix, 0), len(children) - 1)
        node = children[ix]
        path.append(ix)
        if not isinstance(node, ElementNode):
            break
        children = node.children

    if isinstance(node, TextNode):
        return Point(tuple(path), min(max(point.offset, 0), len(node.text)))

    if isinstance(node, ElementNode):
        for leaf_path, leaf in iter_text_leaves(Document(children=node.children)):
            return Point(tuple(path) + leaf_path, 0)

    target = tuple(path)
    before: Point | None = None
    for leaf_path, leaf in iter_text_leaves(doc):
        if leaf_path < target:
            before = Point(leaf_path, len(leaf.text))
            continue
        if before is not None and _same_block(before.path, target):
            return before
        return Point(leaf_path, 0)
    if before is not None:
        return before
    return Point(target or (0,), 0)


def _same_block(a: tuple[int, ...], b: tuple[int, ...]) -> bool:
    return bool(a) and bool(b) and a[0] == b[0]
