"""Unit tests for plate.plugins.builtin.blockquote and for block commands
acting on blocks nested inside a quote.
"""
from __future__ import annotations

from collections.abc import Callable

from plate.editor import Editor
from plate.model.nodes import Document, ElementNode, Point, Selection, element, paragraph
from plate.plugins.registry import PluginRegistry
from plate.validator.validator import validate

MakeEditor = Callable[..., Editor]


def _quote(*children: ElementNode) -> ElementNode:
    return ElementNode("blockquote", children=list(children))


def _kinds(editor: Editor) -> list[str]:
    return [getattr(node, "kind") for node in editor.doc.children]


class TestWrapSelection:
    def test_wraps_three_paragraphs(self, make_editor: MakeEditor) -> None:
        selection = Selection(anchor=Point((0, 0), 0), focus=Point((2, 0), 1))
        editor = make_editor(
            paragraph("one"), paragraph("two"), paragraph("three"), selection=selection
        )
        editor.run_command("blockquote.wrap_selection")
        assert editor.doc.children == [
            _quote(paragraph("one"), paragraph("two"), paragraph("three"))
        ]
        assert editor.selection == Selection(
            anchor=Point((0, 0, 0), 0), focus=Point((0, 2, 0), 1)
        )
        assert editor.run_query("blockquote.is_active", result_type=bool) is True

    def test_blocks_outside_selection_untouched(self, make_editor: MakeEditor) -> None:
        editor = make_editor(
            paragraph("before"), paragraph("quoted"), paragraph("after"), cursor=((1, 0), 2)
        )
        editor.run_command("blockquote.wrap_selection")
        assert editor.doc.children == [
            paragraph("before"),
            _quote(paragraph("quoted")),
            paragraph("after"),
        ]
        assert editor.selection == Selection.collapsed(Point((1, 0, 0), 2))

    def test_existing_quote_is_flattened(self, make_editor: MakeEditor) -> None:
        selection = Selection(anchor=Point((0, 0, 0), 0), focus=Point((1, 0), 1))
        editor = make_editor(_quote(paragraph("a")), paragraph("b"), selection=selection)
        editor.run_command("blockquote.wrap_selection")
        assert editor.doc.children == [_quote(paragraph("a"), paragraph("b"))]
        assert editor.selection == Selection(
            anchor=Point((0, 0, 0), 0), focus=Point((0, 1, 0), 1)
        )

    def test_wrapping_inside_single_quote_is_noop(self, make_editor: MakeEditor) -> None:
        editor = make_editor(_quote(paragraph("a")), cursor=((0, 0, 0), 0))
        before = editor.doc
        editor.run_command("blockquote.wrap_selection")
        assert editor.doc == before

    def test_result_passes_validation(self, make_editor: MakeEditor) -> None:
        editor = make_editor(paragraph("a"), paragraph("b"))
        editor.run_command("blockquote.wrap_selection")
        assert validate(editor.doc, PluginRegistry.richtext()) == []


class TestUnwrap:
    def test_lifts_children_and_remaps_selection(self, make_editor: MakeEditor) -> None:
        editor = make_editor(
            _quote(paragraph("one"), paragraph("two")),
            paragraph("after"),
            cursor=((0, 1, 0), 1),
        )
        editor.run_command("blockquote.unwrap")
        assert editor.doc.children == [paragraph("one"), paragraph("two"), paragraph("after")]
        assert editor.selection == Selection.collapsed(Point((1, 0), 1))
        assert editor.run_query("blockquote.is_active", result_type=bool) is False

    def test_points_after_the_quote_shift(self, make_editor: MakeEditor) -> None:
        selection = Selection(anchor=Point((0, 0, 0), 0), focus=Point((1, 0), 2))
        editor = make_editor(
            _quote(paragraph("one"), paragraph("two")), paragraph("after"), selection=selection
        )
        editor.run_command("blockquote.unwrap")
        assert editor.selection == Selection(anchor=Point((0, 0), 0), focus=Point((2, 0), 2))

    def test_outside_quote_is_noop(self, make_editor: MakeEditor) -> None:
        editor = make_editor(paragraph("a"))
        editor.run_command("blockquote.unwrap")
        assert editor.doc.children == [paragraph("a")]

    def test_innermost_quote_unwrapped(self, make_editor: MakeEditor) -> None:
        editor = make_editor(_quote(_quote(paragraph("deep"))), cursor=((0, 0, 0, 0), 0))
        editor.run_command("blockquote.unwrap")
        assert editor.doc.children == [_quote(paragraph("deep"))]
        assert editor.selection == Selection.collapsed(Point((0, 0, 0), 0))


class TestQuoteNormalization:
    def test_empty_quote_gains_paragraph(self) -> None:
        editor = Editor(Document(children=[_quote()]), registry=PluginRegistry.richtext())
        assert editor.doc.children == [_quote(paragraph(""))]
        assert editor.selection == Selection.collapsed(Point((0, 0, 0), 0))

    def test_core_preset_leaves_unknown_quote_alone(self) -> None:
        editor = Editor(Document(children=[_quote(paragraph("x"))]))
        assert editor.doc.children == [_quote(paragraph("x"))]


class TestBlockCommandsInsideQuote:
    def test_set_heading_targets_nested_block(self, make_editor: MakeEditor) -> None:
        editor = make_editor(_quote(paragraph("a"), paragraph("b")), cursor=((0, 1, 0), 0))
        editor.run_command("block.set_heading", {"level": 2})
        assert editor.doc.children == [_quote(paragraph("a"), element("heading", "b", level=2))]
        assert editor.run_query("block.heading_level", result_type=int) == 2

    def test_range_across_quote_and_top_level(self, make_editor: MakeEditor) -> None:
        selection = Selection(anchor=Point((0, 1, 0), 0), focus=Point((1, 0), 1))
        editor = make_editor(
            _quote(paragraph("a"), paragraph("b")), paragraph("c"), selection=selection
        )
        editor.run_command("todo.toggle")
        assert editor.doc.children == [
            _quote(paragraph("a"), element("todo_item", "b", checked=False)),
            element("todo_item", "c", checked=False),
        ]

    def test_indent_nested_block(self, make_editor: MakeEditor) -> None:
        editor = make_editor(_quote(paragraph("a")), cursor=((0, 0, 0), 0))
        editor.run_command("block.indent_increase")
        assert editor.doc.children == [_quote(element("paragraph", "a", indent=1))]
        assert _kinds(editor) == ["blockquote"]
