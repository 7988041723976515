"""Serialization of documents, selections and transactions.

Provides round-trip conversion between the plate model and plain
dict/list structures, which map directly onto JSON and YAML.

Nodes are tagged with a ``"node"`` discriminator (``element``, ``text``,
``void``); ops with an ``"op"`` discriminator using snake_case names.
An op's ``path`` defaults to ``[]`` when omitted; ``selection_after`` and
``meta.source`` are omitted when absent.

Usage
-----
::

    from plate.model.serializer import DocumentValue

    value = DocumentValue.from_document(editor.doc)
    text = value.to_json_pretty()
    assert DocumentValue.from_json_str(text) == value
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

import yaml

from plate.errors import SerializationError
from plate.model.nodes import (
    AttrPatch,
    Document,
    ElementNode,
    Marks,
    Node,
    Point,
    Selection,
    TextNode,
    VoidNode,
)
from plate.ops.operations import (
    OP_NAMES,
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

DEFAULT_SCHEMA = "gpui-plate"
DEFAULT_VERSION = 1


class DocumentSerializer:
    """Converts between plate model objects and plain Python dicts."""

    # ------------------------------------------------------------------
    # Serialization (model → dict)
    # ------------------------------------------------------------------

    def node_to_dict(self, node: Node) -> dict[str, Any]:
        if isinstance(node, TextNode):
            return {"node": "text", "text": node.text, "marks": node.marks.to_dict()}
        if isinstance(node, VoidNode):
            return {"node": "void", "kind": node.kind, "attrs": dict(node.attrs)}
        if isinstance(node, ElementNode):
            return {
                "node": "element",
                "kind": node.kind,
                "attrs": dict(node.attrs),
                "children": [self.node_to_dict(c) for c in node.children],
            }
        raise TypeError(f"Unknown node type: {type(node)}")

    def document_to_dict(self, doc: Document) -> dict[str, Any]:
        return {"children": [self.node_to_dict(c) for c in doc.children]}

    def point_to_dict(self, point: Point) -> dict[str, Any]:
        return {"path": list(point.path), "offset": point.offset}

    def selection_to_dict(self, selection: Selection) -> dict[str, Any]:
        return {
            "anchor": self.point_to_dict(selection.anchor),
            "focus": self.point_to_dict(selection.focus),
        }

    def op_to_dict(self, op: Op) -> dict[str, Any]:
        data: dict[str, Any] = {"op": OP_NAMES[type(op)], "path": list(op.path)}
        if isinstance(op, InsertText):
            data.update(offset=op.offset, text=op.text)
        elif isinstance(op, RemoveText):
            data["range"] = {"start": op.start, "end": op.end}
        elif isinstance(op, InsertNode):
            data["node"] = self.node_to_dict(op.node)
        elif isinstance(op, SetNodeAttrs):
            data["patch"] = {"set": dict(op.patch.set), "remove": list(op.patch.remove)}
        elif isinstance(op, SetTextMarks):
            data["marks"] = op.marks.to_dict()
        return data

    def transaction_to_dict(self, tx: Transaction) -> dict[str, Any]:
        data: dict[str, Any] = {"ops": [self.op_to_dict(op) for op in tx.ops]}
        if tx.selection_after is not None:
            data["selection_after"] = self.selection_to_dict(tx.selection_after)
        meta: dict[str, Any] = {}
        if tx.meta.source is not None:
            meta["source"] = tx.meta.source
        data["meta"] = meta
        return data

    # ------------------------------------------------------------------
    # Deserialization (dict → model)
    # ------------------------------------------------------------------

    def node_from_dict(self, d: dict[str, Any]) -> Node:
        tag = d["node"]
        if tag == "text":
            if not isinstance(d["text"], str):
                raise SerializationError(f"Text node needs a string 'text', got {d['text']!r}")
            return TextNode(text=d["text"], marks=Marks.from_dict(d.get("marks") or {}))
        if tag == "void":
            return VoidNode(kind=str(d["kind"]), attrs=dict(d.get("attrs") or {}))
        if tag == "element":
            return ElementNode(
                kind=str(d["kind"]),
                attrs=dict(d.get("attrs") or {}),
                children=[self.node_from_dict(c) for c in d.get("children", [])],
            )
        raise ValueError(f"Unknown node tag: {tag!r}")

    def document_from_dict(self, d: dict[str, Any]) -> Document:
        return Document(children=[self.node_from_dict(c) for c in d.get("children", [])])

    def point_from_dict(self, d: dict[str, Any]) -> Point:
        return Point(path=tuple(int(i) for i in d.get("path", [])), offset=int(d["offset"]))

    def selection_from_dict(self, d: dict[str, Any]) -> Selection:
        return Selection(
            anchor=self.point_from_dict(d["anchor"]),
            focus=self.point_from_dict(d["focus"]),
        )

    def op_from_dict(self, d: dict[str, Any]) -> Op:
        name = d["op"]
        path = tuple(int(i) for i in d.get("path", []))
        if name == "insert_text":
            return InsertText(path=path, offset=int(d["offset"]), text=str(d["text"]))
        if name == "remove_text":
            rng = d["range"]
            return RemoveText(path=path, start=int(rng["start"]), end=int(rng["end"]))
        if name == "insert_node":
            return InsertNode(path=path, node=self.node_from_dict(d["node"]))
        if name == "remove_node":
            return RemoveNode(path=path)
        if name == "set_node_attrs":
            patch = d.get("patch") or {}
            return SetNodeAttrs(
                path=path,
                patch=AttrPatch(set=dict(patch.get("set") or {}), remove=patch.get("remove", ())),
            )
        if name == "set_text_marks":
            return SetTextMarks(path=path, marks=Marks.from_dict(d.get("marks") or {}))
        raise ValueError(f"Unknown op: {name!r}")

    def transaction_from_dict(self, d: dict[str, Any]) -> Transaction:
        selection = d.get("selection_after")
        meta = d.get("meta") or {}
        return Transaction(
            ops=tuple(self.op_from_dict(op) for op in d.get("ops", [])),
            selection_after=self.selection_from_dict(selection) if selection else None,
            meta=TransactionMeta(source=meta.get("source")),
        )

    # ------------------------------------------------------------------
    # JSON helpers
    # ------------------------------------------------------------------

    def document_to_json(self, doc: Document, indent: int = 2) -> str:
        return json.dumps(self.document_to_dict(doc), indent=indent, ensure_ascii=False)

    def document_from_json(self, text: str) -> Document:
        return _decode(self.document_from_dict, _load_json(text))

    def transaction_to_json(self, tx: Transaction, indent: int = 2) -> str:
        return json.dumps(self.transaction_to_dict(tx), indent=indent, ensure_ascii=False)

    def transaction_from_json(self, text: str) -> Transaction:
        return _decode(self.transaction_from_dict, _load_json(text))

    # ------------------------------------------------------------------
    # YAML helpers
    # ------------------------------------------------------------------

    def document_to_yaml(self, doc: Document) -> str:
        return yaml.dump(
            self.document_to_dict(doc), default_flow_style=False, allow_unicode=True, sort_keys=False
        )

    def document_from_yaml(self, text: str) -> Document:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise SerializationError(f"Invalid YAML: {exc}") from exc
        return _decode(self.document_from_dict, data)


@dataclass
class DocumentValue:
    """Persistence wrapper: a document tagged with its schema and version."""

    document: Document
    schema: str = DEFAULT_SCHEMA
    version: int = DEFAULT_VERSION

    @classmethod
    def from_document(cls, document: Document) -> "DocumentValue":
        return cls(document=document)

    def into_document(self) -> Document:
        return self.document

    def to_dict(self) -> dict[str, Any]:
        return {
            "schema": self.schema,
            "version": self.version,
            "document": DocumentSerializer().document_to_dict(self.document),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DocumentValue":
        return _decode(
            lambda d: cls(
                document=DocumentSerializer().document_from_dict(d["document"]),
                schema=str(d.get("schema", DEFAULT_SCHEMA)),
                version=int(d.get("version", DEFAULT_VERSION)),
            ),
            data,
        )

    def to_json_pretty(self) -> str:
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)

    @classmethod
    def from_json_str(cls, text: str) -> "DocumentValue":
        return cls.from_dict(_load_json(text))

    def to_yaml(self) -> str:
        return yaml.dump(self.to_dict(), default_flow_style=False, allow_unicode=True, sort_keys=False)

    @classmethod
    def from_yaml(cls, text: str) -> "DocumentValue":
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise SerializationError(f"Invalid YAML: {exc}") from exc
        return cls.from_dict(data)


def _load_json(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise SerializationError(f"Invalid JSON: {exc}") from exc


def _decode(fn, data: Any):  # noqa: ANN001, ANN202
    if not isinstance(data, dict):
        raise SerializationError(f"Expected an object, got {type(data).__name__}")
    try:
        return fn(data)
    except KeyError as exc:
        raise SerializationError(f"Missing field {exc.args[0]!r}") from exc
    except (TypeError, ValueError, AttributeError) as exc:
        raise SerializationError(str(exc)) from exc
