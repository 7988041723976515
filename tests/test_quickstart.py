"""Test that the quickstart API works for plate-core."""
from __future__ import annotations

import pytest


_SOURCE = """
{"schema": "gpui-plate", "version": 1,
 "document": {"children": [
    {"node": "element", "kind": "heading", "attrs": {"level": 42},
     "children": [{"node": "text", "text": "Title"}]}]}}
"""


def test_quickstart_import() -> None:
    import plate

    assert callable(plate.load)
    assert callable(plate.dump)
    assert callable(plate.new_editor)
    assert callable(plate.check)


def test_quickstart_version(package_name: str, expected_version: str) -> None:
    import plate

    assert plate.__name__ == package_name
    assert plate.__version__ == expected_version


def test_quickstart_load_and_edit() -> None:
    import plate

    doc = plate.load(_SOURCE)
    editor = plate.new_editor(doc)
    assert editor.run_query("block.heading_level", result_type=int) == 6


def test_quickstart_check_reports_without_modifying() -> None:
    import plate

    doc = plate.load(_SOURCE)
    diagnostics = plate.check(doc)
    assert [d.code for d in diagnostics] == ["PLT005"]
    assert doc.children[0].attrs == {"level": 42}  # type: ignore[union-attr]


def test_quickstart_dump_round_trip() -> None:
    import plate

    editor = plate.new_editor(plate.load(_SOURCE))
    text = plate.dump(editor.doc)
    assert plate.load(text) == editor.doc


def test_quickstart_yaml() -> None:
    import plate

    editor = plate.new_editor()
    text = plate.dump(editor.doc, format="yaml")
    assert plate.load(text, format="yaml") == editor.doc


def test_quickstart_core_preset() -> None:
    import plate

    editor = plate.new_editor(preset="core")
    assert editor.registry.list_plugins() == ["core"]


def test_quickstart_unknown_format() -> None:
    import plate

    with pytest.raises(ValueError):
        plate.dump(plate.new_editor().doc, format="xml")


def test_quickstart_unknown_preset() -> None:
    import plate

    with pytest.raises(ValueError):
        plate.registry_for("fancy")
