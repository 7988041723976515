"""Shared test fixtures for plate-core.

Fixtures defined here are available to all tests in the suite without
needing an explicit import. Add project-wide fixtures here; keep
domain-specific fixtures close to the tests that use them.
"""
from __future__ import annotations

from collections.abc import Callable

import pytest

from plate.editor import Editor
from plate.model.nodes import Document, ElementNode, Point, Selection, paragraph
from plate.plugins.registry import PluginRegistry


@pytest.fixture()
def package_name() -> str:
    """Return the importable package name for assertions."""
    return "plate"


@pytest.fixture()
def expected_version() -> str:
    """Return the current expected version string.

    Update this fixture when cutting a release so that the version
    test immediately catches stale ``__version__`` values.
    """
    return "0.1.0"


@pytest.fixture()
def make_editor() -> Callable[..., Editor]:
    """Return a factory building a richtext editor from blocks and a cursor.

    ``cursor`` is ``(path, offset)`` for a collapsed selection; pass
    ``selection`` for a range.
    """

    def _make(
        *blocks: ElementNode,
        cursor: tuple[tuple[int, ...], int] = ((0, 0), 0),
        selection: Selection | None = None,
    ) -> Editor:
        doc = Document(children=list(blocks) or [paragraph("")])
        sel = selection or Selection.collapsed(Point(*cursor))
        return Editor(doc, sel, PluginRegistry.richtext())

    return _make
