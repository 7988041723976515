"""Built-in plugins and the preset plugin lists.

``core_plugins()`` is the minimal structural set; ``richtext_plugins()``
adds marks, headings, lists, code blocks, emoji, images, indentation,
alignment, font sizes, todo items, blockquotes and markdown-style
autoformatting.  Each call returns fresh plugin instances so registries
never share state.
"""
from __future__ import annotations

from plate.plugins.base import Plugin
from plate.plugins.builtin.align import AlignPlugin
from plate.plugins.builtin.autoformat import AutoformatPlugin
from plate.plugins.builtin.blockquote import BlockquotePlugin
from plate.plugins.builtin.code_block import CodeBlockPlugin
from plate.plugins.builtin.core import CorePlugin
from plate.plugins.builtin.emoji import EmojiPlugin
from plate.plugins.builtin.font_size import FontSizePlugin
from plate.plugins.builtin.headings import HeadingsPlugin
from plate.plugins.builtin.image import ImagePlugin
from plate.plugins.builtin.indent import IndentPlugin
from plate.plugins.builtin.lists import ListsPlugin
from plate.plugins.builtin.marks import MarksPlugin
from plate.plugins.builtin.todo import TodoPlugin


def core_plugins() -> list[Plugin]:
    return [CorePlugin()]


def richtext_plugins() -> list[Plugin]:
    return [
        CorePlugin(),
        MarksPlugin(),
        HeadingsPlugin(),
        ListsPlugin(),
        CodeBlockPlugin(),
        EmojiPlugin(),
        ImagePlugin(),
        IndentPlugin(),
        AlignPlugin(),
        FontSizePlugin(),
        TodoPlugin(),
        BlockquotePlugin(),
        AutoformatPlugin(),
    ]


__all__ = [
    "CorePlugin",
    "MarksPlugin",
    "HeadingsPlugin",
    "ListsPlugin",
    "CodeBlockPlugin",
    "EmojiPlugin",
    "ImagePlugin",
    "IndentPlugin",
    "AlignPlugin",
    "FontSizePlugin",
    "TodoPlugin",
    "BlockquotePlugin",
    "AutoformatPlugin",
    "core_plugins",
    "richtext_plugins",
]
