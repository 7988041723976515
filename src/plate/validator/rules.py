"""Individual validation rules for the plate document validator.

Each rule is a callable that accepts a ``Document`` and the
``PluginRegistry`` describing its node kinds, and returns a list of
``Diagnostic`` objects.  Rules never modify the document.

Rule codes use the ``PLT`` prefix followed by a three-digit number:

    PLT001  Unknown node kind
    PLT002  Empty text run next to another text run
    PLT003  Adjacent text runs with identical marks
    PLT004  Child does not fit its parent's children constraint
    PLT005  Heading level out of range (1-6)
    PLT006  Attribute owned by a different node kind
    PLT007  Empty document
    PLT008  Inline-content element without a text run
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from plate.model.nodes import Document, ElementNode, Node, Path, TextNode, VoidNode
from plate.model.paths import iter_elements, walk
from plate.plugins.base import ChildConstraint, NodeRole
from plate.validator.diagnostics import Diagnostic, DiagnosticSeverity

if TYPE_CHECKING:
    from plate.plugins.registry import PluginRegistry

Rule = Callable[[Document, "PluginRegistry"], list[Diagnostic]]


def _make(
    code: str,
    severity: DiagnosticSeverity,
    message: str,
    path: Path,
    suggestion: str | None = None,
    rule: str = "",
) -> Diagnostic:
    return Diagnostic(
        severity=severity,
        code=code,
        message=message,
        path=path,
        suggestion=suggestion,
        rule=rule,
    )


def _child_lists(doc: Document) -> list[tuple[Path, list[Node]]]:
    lists: list[tuple[Path, list[Node]]] = [((), doc.children)]
    lists.extend((path, el.children) for path, el in iter_elements(doc))
    return lists


# ---------------------------------------------------------------------------
# PLT001: unknown node kinds
# ---------------------------------------------------------------------------

def rule_unknown_kinds(doc: Document, registry: "PluginRegistry") -> list[Diagnostic]:
    """PLT001: Every element and void kind should be declared by a plugin."""
    diagnostics: list[Diagnostic] = []
    for path, node in walk(doc):
        if isinstance(node, TextNode) or registry.is_known_kind(node.kind):
            continue
        diagnostics.append(_make(
            "PLT001",
            DiagnosticSeverity.WARNING,
            f"Unknown node kind {node.kind!r}; commands will skip this node",
            path,
            suggestion="Register the plugin that declares this kind",
            rule="unknown_kinds",
        ))
    return diagnostics


# ---------------------------------------------------------------------------
# PLT002 / PLT003: text run shape
# ---------------------------------------------------------------------------

def rule_stray_empty_texts(doc: Document, registry: "PluginRegistry") -> list[Diagnostic]:
    """PLT002: An empty text run is only allowed when it has no text neighbour."""
    diagnostics: list[Diagnostic] = []
    for parent, children in _child_lists(doc):
        for ix, node in enumerate(children):
            if not isinstance(node, TextNode) or node.text:
                continue
            left = children[ix - 1] if ix > 0 else None
            right = children[ix + 1] if ix + 1 < len(children) else None
            if isinstance(left, TextNode) or (isinstance(right, TextNode) and right.text):
                diagnostics.append(_make(
                    "PLT002",
                    DiagnosticSeverity.WARNING,
                    "Empty text run next to another text run",
                    parent + (ix,),
                    suggestion="Run 'plate-core normalize' to drop it",
                    rule="stray_empty_texts",
                ))
    return diagnostics


def rule_unmerged_texts(doc: Document, registry: "PluginRegistry") -> list[Diagnostic]:
    """PLT003: Neighbouring text runs with identical marks should be one run."""
    diagnostics: list[Diagnostic] = []
    for parent, children in _child_lists(doc):
        for ix in range(1, len(children)):
            left, right = children[ix - 1], children[ix]
            if isinstance(left, TextNode) and isinstance(right, TextNode) and left.marks == right.marks:
                diagnostics.append(_make(
                    "PLT003",
                    DiagnosticSeverity.WARNING,
                    "Text run has the same marks as the run before it",
                    parent + (ix,),
                    suggestion="Run 'plate-core normalize' to merge the runs",
                    rule="unmerged_texts",
                ))
    return diagnostics


# ---------------------------------------------------------------------------
# PLT004: children constraints
# ---------------------------------------------------------------------------

def _is_inline(node: Node, registry: "PluginRegistry") -> bool:
    if isinstance(node, TextNode):
        return True
    spec = registry.node_spec(node.kind)
    return spec is not None and spec.role is NodeRole.INLINE


def _is_block(node: Node, registry: "PluginRegistry") -> bool:
    if isinstance(node, TextNode):
        return False
    spec = registry.node_spec(node.kind)
    return spec is not None and spec.role is NodeRole.BLOCK


def rule_children_constraints(doc: Document, registry: "PluginRegistry") -> list[Diagnostic]:
    """PLT004: Children must match what their parent accepts.

    Top-level children must be blocks.  Children of unknown kinds are
    never flagged here; PLT001 already reports them.
    """
    diagnostics: list[Diagnostic] = []
    for ix, node in enumerate(doc.children):
        if _is_inline(node, registry):
            what = "text run" if isinstance(node, TextNode) else f"inline {node.kind!r}"
            diagnostics.append(_make(
                "PLT004",
                DiagnosticSeverity.ERROR,
                f"A {what} cannot be a top-level block",
                (ix,),
                suggestion="Wrap it in a paragraph",
                rule="children_constraints",
            ))

    for path, el in iter_elements(doc):
        spec = registry.node_spec(el.kind)
        if spec is None:
            continue
        for ix, child in enumerate(el.children):
            if spec.children is ChildConstraint.NONE:
                bad = True
            elif spec.children is ChildConstraint.INLINE_ONLY:
                bad = _is_block(child, registry)
            elif spec.children is ChildConstraint.BLOCK_ONLY:
                bad = _is_inline(child, registry)
            else:
                bad = False
            if bad:
                diagnostics.append(_make(
                    "PLT004",
                    DiagnosticSeverity.ERROR,
                    f"{el.kind!r} does not accept this child "
                    f"({spec.children.name.lower().replace('_', ' ')})",
                    path + (ix,),
                    rule="children_constraints",
                ))
    return diagnostics


# ---------------------------------------------------------------------------
# PLT005 / PLT006: attributes
# ---------------------------------------------------------------------------

def rule_heading_levels(doc: Document, registry: "PluginRegistry") -> list[Diagnostic]:
    """PLT005: Heading levels must be integers from 1 to 6."""
    if not registry.is_known_kind("heading"):
        return []
    diagnostics: list[Diagnostic] = []
    for path, el in iter_elements(doc):
        if el.kind != "heading":
            continue
        level = el.attrs.get("level")
        if isinstance(level, int) and not isinstance(level, bool) and 1 <= level <= 6:
            continue
        diagnostics.append(_make(
            "PLT005",
            DiagnosticSeverity.WARNING,
            f"Heading level {level!r} is outside 1-6",
            path,
            suggestion="Normalization clamps the level into range",
            rule="heading_levels",
        ))
    return diagnostics


def rule_foreign_attrs(doc: Document, registry: "PluginRegistry") -> list[Diagnostic]:
    """PLT006: Attributes owned by another kind are stripped on normalization."""
    diagnostics: list[Diagnostic] = []
    for path, node in walk(doc):
        if not isinstance(node, (ElementNode, VoidNode)) or not registry.is_known_kind(node.kind):
            continue
        foreign = registry.foreign_attrs(node.kind)
        for key in sorted(k for k in node.attrs if k in foreign):
            diagnostics.append(_make(
                "PLT006",
                DiagnosticSeverity.WARNING,
                f"Attribute {key!r} does not belong on {node.kind!r}",
                path,
                suggestion=f"Remove {key!r}",
                rule="foreign_attrs",
            ))
    return diagnostics


# ---------------------------------------------------------------------------
# PLT007 / PLT008: required content
# ---------------------------------------------------------------------------

def rule_empty_document(doc: Document, registry: "PluginRegistry") -> list[Diagnostic]:
    """PLT007: A document holds at least one block."""
    if doc.children:
        return []
    return [_make(
        "PLT007",
        DiagnosticSeverity.WARNING,
        "Document has no blocks",
        (),
        suggestion="Normalization inserts an empty paragraph",
        rule="empty_document",
    )]


def rule_missing_text_leaf(doc: Document, registry: "PluginRegistry") -> list[Diagnostic]:
    """PLT008: Inline-content elements need a text run for the cursor."""
    diagnostics: list[Diagnostic] = []
    for path, el in iter_elements(doc):
        spec = registry.node_spec(el.kind)
        if spec is None or spec.children is not ChildConstraint.INLINE_ONLY:
            continue
        if not any(isinstance(child, TextNode) for child in el.children):
            diagnostics.append(_make(
                "PLT008",
                DiagnosticSeverity.WARNING,
                f"{el.kind!r} has no text run",
                path,
                suggestion="Normalization inserts an empty text run",
                rule="missing_text_leaf",
            ))
    return diagnostics


DEFAULT_RULES: list[Rule] = [
    rule_unknown_kinds,
    rule_stray_empty_texts,
    rule_unmerged_texts,
    rule_children_constraints,
    rule_heading_levels,
    rule_foreign_attrs,
    rule_empty_document,
    rule_missing_text_leaf,
]
