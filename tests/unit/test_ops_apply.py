"""Unit tests for plate.ops.apply — op semantics and selection transforms."""
from __future__ import annotations

import pytest

from plate.errors import InvalidOp, PathNotFound
from plate.model.nodes import (
    AttrPatch,
    Document,
    ElementNode,
    Marks,
    Point,
    Selection,
    TextNode,
    VoidNode,
    paragraph,
    text,
)
from plate.ops.apply import apply_op, edge_point
from plate.ops.operations import (
    InsertNode,
    InsertText,
    RemoveNode,
    RemoveText,
    SetNodeAttrs,
    SetTextMarks,
)


def _at(path: tuple[int, ...], offset: int) -> Selection:
    return Selection.collapsed(Point(path, offset))


def _two_paragraphs() -> Document:
    return Document(children=[paragraph("hello"), paragraph("world")])


# ===========================================================================
# Text ops
# ===========================================================================


class TestInsertText:
    def test_inserts_characters(self) -> None:
        doc = _two_paragraphs()
        apply_op(doc, _at((0, 0), 0), InsertText(path=(0, 0), offset=5, text="!"))
        assert doc.children[0].children[0].text == "hello!"  # type: ignore[union-attr]

    def test_shifts_point_at_or_after_offset(self) -> None:
        doc = _two_paragraphs()
        sel = apply_op(doc, _at((0, 0), 2), InsertText(path=(0, 0), offset=2, text="XY"))
        assert sel.focus == Point((0, 0), 4)

    def test_leaves_point_before_offset(self) -> None:
        doc = _two_paragraphs()
        sel = apply_op(doc, _at((0, 0), 1), InsertText(path=(0, 0), offset=2, text="XY"))
        assert sel.focus == Point((0, 0), 1)

    def test_leaves_other_runs_alone(self) -> None:
        doc = _two_paragraphs()
        sel = apply_op(doc, _at((1, 0), 3), InsertText(path=(0, 0), offset=0, text="XY"))
        assert sel.focus == Point((1, 0), 3)

    def test_offset_past_end_is_invalid(self) -> None:
        with pytest.raises(InvalidOp):
            apply_op(_two_paragraphs(), _at((0, 0), 0), InsertText(path=(0, 0), offset=6, text="x"))

    def test_non_text_target_is_invalid(self) -> None:
        with pytest.raises(InvalidOp):
            apply_op(_two_paragraphs(), _at((0, 0), 0), InsertText(path=(0,), offset=0, text="x"))


class TestRemoveText:
    def test_removes_range(self) -> None:
        doc = _two_paragraphs()
        apply_op(doc, _at((0, 0), 0), RemoveText(path=(0, 0), start=1, end=4))
        assert doc.children[0].children[0].text == "ho"  # type: ignore[union-attr]

    def test_point_after_range_shifts_back(self) -> None:
        doc = _two_paragraphs()
        sel = apply_op(doc, _at((0, 0), 5), RemoveText(path=(0, 0), start=1, end=4))
        assert sel.focus == Point((0, 0), 2)

    def test_point_inside_range_clamps_to_start(self) -> None:
        doc = _two_paragraphs()
        sel = apply_op(doc, _at((0, 0), 3), RemoveText(path=(0, 0), start=1, end=4))
        assert sel.focus == Point((0, 0), 1)

    def test_reversed_range_is_invalid(self) -> None:
        with pytest.raises(InvalidOp):
            apply_op(_two_paragraphs(), _at((0, 0), 0), RemoveText(path=(0, 0), start=3, end=1))

    def test_out_of_bounds_range_is_invalid(self) -> None:
        with pytest.raises(InvalidOp):
            apply_op(_two_paragraphs(), _at((0, 0), 0), RemoveText(path=(0, 0), start=0, end=9))


# ===========================================================================
# Node ops
# ===========================================================================


class TestInsertNode:
    def test_inserts_block_and_shifts_later_points(self) -> None:
        doc = _two_paragraphs()
        sel = apply_op(doc, _at((1, 0), 2), InsertNode(path=(1,), node=paragraph("mid")))
        assert [c.children[0].text for c in doc.children] == ["hello", "mid", "world"]  # type: ignore[union-attr]
        assert sel.focus == Point((2, 0), 2)

    def test_earlier_points_unchanged(self) -> None:
        doc = _two_paragraphs()
        sel = apply_op(doc, _at((0, 0), 2), InsertNode(path=(1,), node=paragraph("mid")))
        assert sel.focus == Point((0, 0), 2)

    def test_inserted_node_is_copied(self) -> None:
        doc = _two_paragraphs()
        node = paragraph("mid")
        apply_op(doc, _at((0, 0), 0), InsertNode(path=(1,), node=node))
        node.children[0].text = "changed"  # type: ignore[union-attr]
        assert doc.children[1].children[0].text == "mid"  # type: ignore[union-attr]

    def test_missing_parent_raises_path_not_found(self) -> None:
        with pytest.raises(PathNotFound):
            apply_op(_two_paragraphs(), _at((0, 0), 0), InsertNode(path=(5, 0), node=text("x")))

    def test_slot_past_end_raises_path_not_found(self) -> None:
        with pytest.raises(PathNotFound):
            apply_op(_two_paragraphs(), _at((0, 0), 0), InsertNode(path=(3,), node=paragraph()))

    def test_text_parent_is_invalid(self) -> None:
        with pytest.raises(InvalidOp):
            apply_op(_two_paragraphs(), _at((0, 0), 0), InsertNode(path=(0, 0, 0), node=text("x")))

    def test_void_parent_is_invalid(self) -> None:
        doc = Document(children=[VoidNode("divider"), paragraph("")])
        with pytest.raises(InvalidOp):
            apply_op(doc, _at((1, 0), 0), InsertNode(path=(0, 0), node=text("x")))

    def test_empty_path_is_rejected(self) -> None:
        with pytest.raises(PathNotFound):
            apply_op(_two_paragraphs(), _at((0, 0), 0), InsertNode(path=(), node=paragraph()))


class TestRemoveNode:
    def test_later_sibling_points_shift_back(self) -> None:
        doc = Document(children=[paragraph("a"), paragraph("b"), paragraph("c")])
        sel = apply_op(doc, _at((2, 0), 1), RemoveNode(path=(1,)))
        assert sel.focus == Point((1, 0), 1)

    def test_point_inside_removed_moves_to_previous_end(self) -> None:
        doc = Document(children=[paragraph("abc"), paragraph("def")])
        sel = apply_op(doc, _at((1, 0), 2), RemoveNode(path=(1,)))
        assert sel.focus == Point((0, 0), 3)

    def test_point_inside_first_moves_to_next_start(self) -> None:
        doc = Document(children=[paragraph("abc"), paragraph("def")])
        sel = apply_op(doc, _at((0, 0), 2), RemoveNode(path=(0,)))
        assert sel.focus == Point((0, 0), 0)

    def test_removing_last_block_leaves_structural_point(self) -> None:
        doc = Document(children=[paragraph("abc")])
        sel = apply_op(doc, _at((0, 0), 2), RemoveNode(path=(0,)))
        assert doc.children == []
        assert sel.focus == Point((0,), 0)

    def test_missing_path_raises(self) -> None:
        with pytest.raises(PathNotFound):
            apply_op(_two_paragraphs(), _at((0, 0), 0), RemoveNode(path=(4,)))


class TestAttributeOps:
    def test_set_node_attrs(self) -> None:
        doc = Document(children=[ElementNode("heading", {"level": 1, "x": 1}, [text("h")])])
        patch = AttrPatch(set={"level": 2}, remove=("x",))
        sel = apply_op(doc, _at((0, 0), 1), SetNodeAttrs(path=(0,), patch=patch))
        assert doc.children[0].attrs == {"level": 2}  # type: ignore[union-attr]
        assert sel.focus == Point((0, 0), 1)

    def test_set_node_attrs_on_void(self) -> None:
        doc = Document(children=[VoidNode("image", {"src": "a"}), paragraph("")])
        apply_op(doc, _at((1, 0), 0), SetNodeAttrs(path=(0,), patch=AttrPatch(set={"alt": "b"})))
        assert doc.children[0].attrs == {"src": "a", "alt": "b"}  # type: ignore[union-attr]

    def test_set_node_attrs_on_text_is_invalid(self) -> None:
        with pytest.raises(InvalidOp):
            apply_op(
                _two_paragraphs(),
                _at((0, 0), 0),
                SetNodeAttrs(path=(0, 0), patch=AttrPatch(set={"a": 1})),
            )

    def test_set_text_marks(self) -> None:
        doc = _two_paragraphs()
        apply_op(doc, _at((0, 0), 0), SetTextMarks(path=(0, 0), marks=Marks(bold=True)))
        assert doc.children[0].children[0].marks.bold  # type: ignore[union-attr]

    def test_set_text_marks_on_element_is_invalid(self) -> None:
        with pytest.raises(InvalidOp):
            apply_op(_two_paragraphs(), _at((0, 0), 0), SetTextMarks(path=(0,), marks=Marks()))


class TestEdgePoint:
    def test_end_of_nested_element(self) -> None:
        node = ElementNode("paragraph", children=[text("ab"), text("cde", Marks(bold=True))])
        assert edge_point(node, (3,), at_end=True) == Point((3, 1), 3)

    def test_start_of_element(self) -> None:
        assert edge_point(paragraph("ab"), (1,), at_end=False) == Point((1, 0), 0)

    def test_void_point(self) -> None:
        assert edge_point(VoidNode("divider"), (2,), at_end=True) == Point((2,), 0)
