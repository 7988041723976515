"""Unit tests for the void-inserting built-in plugins: emoji, image and
the core divider command.
"""
from __future__ import annotations

from collections.abc import Callable

import pytest

from plate.editor import Editor, EditorConfig
from plate.errors import EditorError, MissingRequiredArg
from plate.model.nodes import (
    Document,
    Point,
    Selection,
    TextNode,
    VoidNode,
    divider,
    paragraph,
)
from plate.plugins.registry import PluginRegistry

MakeEditor = Callable[..., Editor]


class TestEmoji:
    def test_splits_run_around_emoji(self, make_editor: MakeEditor) -> None:
        editor = make_editor(paragraph("hello"), cursor=((0, 0), 2))
        editor.run_command("emoji.insert")
        assert editor.doc.children[0].children == [  # type: ignore[union-attr]
            TextNode("he"),
            VoidNode("emoji", {"emoji": "\U0001f600"}),
            TextNode("llo"),
        ]
        assert editor.selection == Selection.collapsed(Point((0, 2), 0))

    def test_custom_emoji(self, make_editor: MakeEditor) -> None:
        editor = make_editor(paragraph("hi"), cursor=((0, 0), 2))
        editor.run_command("emoji.insert", {"emoji": "\U0001f389"})
        children = editor.doc.children[0].children  # type: ignore[union-attr]
        assert children[1] == VoidNode("emoji", {"emoji": "\U0001f389"})
        assert children[2] == TextNode("")
        assert editor.selection == Selection.collapsed(Point((0, 2), 0))

    def test_default_emoji_from_config(self) -> None:
        editor = Editor(
            Document(children=[paragraph("")]),
            registry=PluginRegistry.richtext(),
            config=EditorConfig(default_emoji="*"),
        )
        editor.run_command("emoji.insert")
        assert editor.doc.children[0].children[1] == VoidNode("emoji", {"emoji": "*"})  # type: ignore[union-attr]

    def test_typing_after_emoji_lands_after_it(self, make_editor: MakeEditor) -> None:
        editor = make_editor(paragraph("ab"), cursor=((0, 0), 1))
        editor.run_command("emoji.insert")
        editor.run_command("emoji.insert")
        children = editor.doc.children[0].children  # type: ignore[union-attr]
        assert [type(c).__name__ for c in children] == [
            "TextNode",
            "VoidNode",
            "TextNode",
            "VoidNode",
            "TextNode",
        ]
        assert children[-1] == TextNode("b")
        assert editor.selection.focus == Point((0, 4), 0)


class TestImage:
    def test_requires_src(self, make_editor: MakeEditor) -> None:
        editor = make_editor(paragraph("a"))
        before = editor.doc
        with pytest.raises(MissingRequiredArg) as exc_info:
            editor.run_command("image.insert", {"alt": "x"})
        assert "src" in exc_info.value.message
        assert editor.doc == before

    def test_blank_src_rejected(self, make_editor: MakeEditor) -> None:
        editor = make_editor(paragraph("a"))
        with pytest.raises(EditorError, match="src is required"):
            editor.run_command("image.insert", {"src": ""})

    def test_inserts_image_and_paragraph(self, make_editor: MakeEditor) -> None:
        editor = make_editor(paragraph("a"))
        editor.run_command("image.insert", {"src": "cat.png", "alt": "A cat"})
        assert editor.doc.children == [
            paragraph("a"),
            VoidNode("image", {"src": "cat.png", "alt": "A cat"}),
            paragraph(""),
        ]
        assert editor.selection == Selection.collapsed(Point((2, 0), 0))

    def test_inserts_after_focus_block(self, make_editor: MakeEditor) -> None:
        editor = make_editor(paragraph("a"), paragraph("b"), cursor=((0, 0), 1))
        editor.run_command("image.insert", {"src": "x.png"})
        kinds = [getattr(node, "kind") for node in editor.doc.children]
        assert kinds == ["paragraph", "image", "paragraph", "paragraph"]
        assert editor.selection.focus == Point((2, 0), 0)


class TestDivider:
    def test_insert_divider(self, make_editor: MakeEditor) -> None:
        editor = make_editor(paragraph("a"))
        editor.run_command("core.insert_divider")
        assert editor.doc.children == [paragraph("a"), divider(), paragraph("")]
        assert editor.selection == Selection.collapsed(Point((2, 0), 0))

    def test_available_in_core_preset(self) -> None:
        editor = Editor.with_core_plugins()
        editor.run_command("core.insert_divider")
        assert len(editor.doc.children) == 3
