"""Node definitions for the plate document model.

A document is a tree of three node variants:

* ``ElementNode`` -- a container with a ``kind`` tag, an attribute mapping
  and ordered children (paragraphs, headings, list items, ...).
* ``TextNode`` -- a run of characters sharing one set of ``Marks``.
* ``VoidNode`` -- a leaf with a ``kind`` and attributes but no children
  (emoji, images, dividers).

Unlike the value types ``Point``, ``Selection``, ``Marks`` and
``AttrPatch``, node dataclasses are mutable: each element exclusively
owns its children, and the transaction engine edits a private deep copy
of the tree in place before committing it.
"""
from __future__ import annotations

import copy
from dataclasses import dataclass, field, fields, replace
from typing import Any, Union

Path = tuple[int, ...]
Attrs = dict[str, Any]

BOOLEAN_MARKS: tuple[str, ...] = ("bold", "italic", "underline", "strikethrough", "code")
VALUED_MARKS: tuple[str, ...] = ("text_color", "highlight_color", "link")


# ---------------------------------------------------------------------------
# Marks
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Marks:
    """Formatting flags carried by a text run.

    Boolean marks default to ``False``; valued marks default to ``None``.
    """

    bold: bool = False
    italic: bool = False
    underline: bool = False
    strikethrough: bool = False
    code: bool = False
    text_color: str | None = None
    highlight_color: str | None = None
    link: str | None = None

    def with_mark(self, name: str, value: Any) -> "Marks":
        """Return a copy with mark ``name`` set to ``value``."""
        if name not in BOOLEAN_MARKS and name not in VALUED_MARKS:
            raise KeyError(f"Unknown mark: {name!r}")
        return replace(self, **{name: value})

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {name: getattr(self, name) for name in BOOLEAN_MARKS}
        for name in VALUED_MARKS:
            value = getattr(self, name)
            if value is not None:
                data[name] = value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Marks":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown mark(s): {sorted(unknown)}")
        kwargs: dict[str, Any] = {}
        for name in BOOLEAN_MARKS:
            if name in data:
                if not isinstance(data[name], bool):
                    raise ValueError(f"Mark {name!r} must be a boolean, got {data[name]!r}")
                kwargs[name] = data[name]
        for name in VALUED_MARKS:
            value = data.get(name)
            if value is not None:
                if not isinstance(value, str):
                    raise ValueError(f"Mark {name!r} must be a string, got {value!r}")
                kwargs[name] = value
        return cls(**kwargs)


# ---------------------------------------------------------------------------
# Tree nodes
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class TextNode:
    """A run of text sharing one set of marks."""

    text: str
    marks: Marks = field(default_factory=Marks)


@dataclass(slots=True)
class VoidNode:
    """A childless leaf such as an emoji or an image."""

    kind: str
    attrs: Attrs = field(default_factory=dict)


@dataclass(slots=True)
class ElementNode:
    """A container node; ``kind`` selects the owning plugin."""

    kind: str
    attrs: Attrs = field(default_factory=dict)
    children: list["Node"] = field(default_factory=list)


Node = Union[ElementNode, TextNode, VoidNode]


@dataclass(slots=True)
class Document:
    """The root container.  Not addressable by a path itself."""

    children: list[Node] = field(default_factory=list)

    def clone(self) -> "Document":
        return copy.deepcopy(self)


# ---------------------------------------------------------------------------
# Constructors
# ---------------------------------------------------------------------------


def text(value: str = "", marks: Marks | None = None) -> TextNode:
    return TextNode(text=value, marks=marks if marks is not None else Marks())


def paragraph(value: str = "") -> ElementNode:
    """Return a paragraph element holding a single plain text run."""
    return ElementNode(kind="paragraph", children=[text(value)])


def element(kind: str, value: str = "", **attrs: Any) -> ElementNode:
    return ElementNode(kind=kind, attrs=dict(attrs), children=[text(value)])


def divider() -> VoidNode:
    return VoidNode(kind="divider")


def block_text(node: Node) -> str:
    """Return the concatenated text of ``node`` and its descendants."""
    if isinstance(node, TextNode):
        return node.text
    if isinstance(node, ElementNode):
        return "".join(block_text(child) for child in node.children)
    return ""


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Point:
    """A cursor position: a path plus a character (or child) offset."""

    path: Path
    offset: int = 0

    def __post_init__(self) -> None:
        # Accept lists from callers and deserializers.
        object.__setattr__(self, "path", tuple(self.path))

    def sort_key(self) -> tuple[Path, int]:
        return (self.path, self.offset)


@dataclass(frozen=True, slots=True)
class Selection:
    """An anchor/focus pair of points."""

    anchor: Point
    focus: Point

    @classmethod
    def collapsed(cls, point: Point) -> "Selection":
        return cls(anchor=point, focus=point)

    @property
    def is_collapsed(self) -> bool:
        return self.anchor == self.focus

    @property
    def is_backward(self) -> bool:
        return self.focus.sort_key() < self.anchor.sort_key()

    def ordered(self) -> tuple[Point, Point]:
        """Return ``(start, end)`` in document order."""
        if self.is_backward:
            return self.focus, self.anchor
        return self.anchor, self.focus


# ---------------------------------------------------------------------------
# Attribute patches
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class AttrPatch:
    """A set/remove delta for a node's attribute mapping.

    Keys in ``remove`` are dropped first, then ``set`` is applied, so a
    key present in both ends up set.
    """

    set: Attrs = field(default_factory=dict)
    remove: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "remove", tuple(self.remove))

    @property
    def is_empty(self) -> bool:
        return not self.set and not self.remove

    def apply_to(self, attrs: Attrs) -> None:
        for key in self.remove:
            attrs.pop(key, None)
        for key, value in self.set.items():
            attrs[key] = copy.deepcopy(value)
