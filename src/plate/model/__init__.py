"""plate document model.

Exports the node types, selection value types, path helpers and the
serializer for converting documents to and from JSON/YAML.
"""
from __future__ import annotations

from plate.model.nodes import (
    AttrPatch,
    Attrs,
    Document,
    ElementNode,
    Marks,
    Node,
    Path,
    Point,
    Selection,
    TextNode,
    VoidNode,
    block_text,
    divider,
    element,
    paragraph,
    text,
)
from plate.model.serializer import DocumentSerializer, DocumentValue

__all__ = [
    # Node types
    "Node",
    "ElementNode",
    "TextNode",
    "VoidNode",
    "Document",
    "Marks",
    # Addressing and selection
    "Path",
    "Point",
    "Selection",
    "Attrs",
    "AttrPatch",
    # Constructors
    "paragraph",
    "element",
    "text",
    "divider",
    "block_text",
    # Serializer
    "DocumentSerializer",
    "DocumentValue",
]
