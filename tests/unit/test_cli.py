"""Unit tests for plate.cli.main — every command driven through CliRunner
against document files in a temporary directory.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from plate.cli.main import cli


# ===========================================================================
# Helpers
# ===========================================================================


def _make_runner() -> CliRunner:
    return CliRunner()


def _value(*blocks: dict[str, Any]) -> dict[str, Any]:
    return {"schema": "gpui-plate", "version": 1, "document": {"children": list(blocks)}}


def _block(kind: str, text: str, **attrs: Any) -> dict[str, Any]:
    return {
        "node": "element",
        "kind": kind,
        "attrs": attrs,
        "children": [{"node": "text", "text": text}],
    }


def _write(path: Path, data: dict[str, Any]) -> str:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path.name


@pytest.fixture()
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    return tmp_path


def _read_children(path: Path) -> list[dict[str, Any]]:
    return json.loads(path.read_text(encoding="utf-8"))["document"]["children"]


# ===========================================================================
# version / plugins
# ===========================================================================


class TestInfoCommands:
    def test_version(self) -> None:
        result = _make_runner().invoke(cli, ["version"])
        assert result.exit_code == 0
        assert "plate-core" in result.output
        assert "v0.1.0" in result.output

    def test_plugins_richtext(self) -> None:
        result = _make_runner().invoke(cli, ["plugins", "--no-entrypoints"])
        assert result.exit_code == 0
        assert "Plugins: richtext" in result.output
        assert "marks" in result.output

    def test_plugins_core(self) -> None:
        result = _make_runner().invoke(cli, ["plugins", "--preset", "core", "--no-entrypoints"])
        assert result.exit_code == 0
        assert "Plugins: core" in result.output
        assert "emoji" not in result.output

    def test_unknown_preset_rejected(self) -> None:
        result = _make_runner().invoke(cli, ["plugins", "--preset", "fancy"])
        assert result.exit_code != 0


# ===========================================================================
# check
# ===========================================================================


class TestCheck:
    def test_clean_document(self, workdir: Path) -> None:
        name = _write(workdir / "doc.json", _value(_block("paragraph", "hi")))
        result = _make_runner().invoke(cli, ["check", name])
        assert result.exit_code == 0
        assert "no issues found" in result.output

    def test_warnings_do_not_fail(self, workdir: Path) -> None:
        name = _write(workdir / "doc.json", _value(_block("heading", "T", level=42)))
        result = _make_runner().invoke(cli, ["check", name])
        assert result.exit_code == 0
        assert "PLT005" in result.output
        assert "0 error(s), 1 warning(s)" in result.output

    def test_strict_fails_on_warnings(self, workdir: Path) -> None:
        name = _write(workdir / "doc.json", _value(_block("heading", "T", level=42)))
        result = _make_runner().invoke(cli, ["check", name, "--strict"])
        assert result.exit_code == 1

    def test_top_level_text_is_error(self, workdir: Path) -> None:
        name = _write(workdir / "doc.json", _value({"node": "text", "text": "loose"}))
        result = _make_runner().invoke(cli, ["check", name])
        assert result.exit_code == 1
        assert "PLT004" in result.output

    def test_invalid_json(self, workdir: Path) -> None:
        (workdir / "doc.json").write_text("{not json", encoding="utf-8")
        result = _make_runner().invoke(cli, ["check", "doc.json"])
        assert result.exit_code == 1
        assert "Invalid document" in result.output

    def test_missing_file(self, workdir: Path) -> None:
        result = _make_runner().invoke(cli, ["check", "nope.json"])
        assert result.exit_code == 1
        assert "File not found" in result.output

    def test_yaml_input(self, workdir: Path) -> None:
        (workdir / "doc.yaml").write_text(
            "schema: gpui-plate\n"
            "version: 1\n"
            "document:\n"
            "  children:\n"
            "  - node: element\n"
            "    kind: paragraph\n"
            "    children:\n"
            "    - node: text\n"
            "      text: hi\n",
            encoding="utf-8",
        )
        result = _make_runner().invoke(cli, ["check", "doc.yaml"])
        assert result.exit_code == 0
        assert "no issues found" in result.output


# ===========================================================================
# normalize
# ===========================================================================


class TestNormalize:
    def test_writes_normalized_file(self, workdir: Path) -> None:
        name = _write(workdir / "doc.json", _value(_block("heading", "T", level=42)))
        result = _make_runner().invoke(cli, ["normalize", name, "-o", "out.json"])
        assert result.exit_code == 0
        assert "Document written to" in result.output
        children = _read_children(workdir / "out.json")
        assert children[0]["attrs"] == {"level": 6}

    def test_empty_document_gains_paragraph(self, workdir: Path) -> None:
        name = _write(workdir / "doc.json", _value())
        result = _make_runner().invoke(cli, ["normalize", name, "-o", "out.json"])
        assert result.exit_code == 0
        children = _read_children(workdir / "out.json")
        assert [c["kind"] for c in children] == ["paragraph"]

    def test_yaml_output_from_extension(self, workdir: Path) -> None:
        name = _write(workdir / "doc.json", _value(_block("paragraph", "hi")))
        result = _make_runner().invoke(cli, ["normalize", name, "-o", "out.yaml"])
        assert result.exit_code == 0
        assert "schema: gpui-plate" in (workdir / "out.yaml").read_text(encoding="utf-8")

    def test_prints_to_stdout(self, workdir: Path) -> None:
        name = _write(workdir / "doc.json", _value(_block("paragraph", "hi")))
        result = _make_runner().invoke(cli, ["normalize", name])
        assert result.exit_code == 0
        assert "gpui-plate" in result.output


# ===========================================================================
# run / apply / query
# ===========================================================================


class TestRun:
    def test_set_heading(self, workdir: Path) -> None:
        name = _write(workdir / "doc.json", _value(_block("paragraph", "Title")))
        result = _make_runner().invoke(
            cli, ["run", name, "block.set_heading", "--args", '{"level": 2}', "-o", "out.json"]
        )
        assert result.exit_code == 0
        children = _read_children(workdir / "out.json")
        assert children[0]["kind"] == "heading"
        assert children[0]["attrs"] == {"level": 2}

    def test_image_without_src_fails(self, workdir: Path) -> None:
        name = _write(workdir / "doc.json", _value(_block("paragraph", "a")))
        result = _make_runner().invoke(cli, ["run", name, "image.insert"])
        assert result.exit_code == 1
        assert "src" in result.output

    def test_image_with_src(self, workdir: Path) -> None:
        name = _write(workdir / "doc.json", _value(_block("paragraph", "a")))
        result = _make_runner().invoke(
            cli, ["run", name, "image.insert", "--args", '{"src": "cat.png"}', "-o", "out.json"]
        )
        assert result.exit_code == 0
        children = _read_children(workdir / "out.json")
        assert [c.get("kind") for c in children] == ["paragraph", "image", "paragraph"]

    def test_unknown_command(self, workdir: Path) -> None:
        name = _write(workdir / "doc.json", _value(_block("paragraph", "a")))
        result = _make_runner().invoke(cli, ["run", name, "does.not_exist"])
        assert result.exit_code == 1
        assert "failed" in result.output

    def test_bad_args_json(self, workdir: Path) -> None:
        name = _write(workdir / "doc.json", _value(_block("paragraph", "a")))
        result = _make_runner().invoke(cli, ["run", name, "block.set_heading", "--args", "{level"])
        assert result.exit_code == 1
        assert "--args is not valid JSON" in result.output

    def test_selection_option(self, workdir: Path) -> None:
        name = _write(workdir / "doc.json", _value(_block("paragraph", "a"), _block("paragraph", "b")))
        selection = '{"anchor": {"path": [1, 0], "offset": 0}, "focus": {"path": [1, 0], "offset": 1}}'
        result = _make_runner().invoke(
            cli,
            ["run", name, "block.set_heading", "--args", '{"level": 1}', "--selection", selection, "-o", "out.json"],
        )
        assert result.exit_code == 0
        assert [c["kind"] for c in _read_children(workdir / "out.json")] == ["paragraph", "heading"]


class TestApply:
    def test_applies_transaction(self, workdir: Path) -> None:
        name = _write(workdir / "doc.json", _value(_block("paragraph", "world")))
        tx = {"ops": [{"op": "insert_text", "path": [0, 0], "offset": 0, "text": "hello "}]}
        (workdir / "tx.json").write_text(json.dumps(tx), encoding="utf-8")
        result = _make_runner().invoke(cli, ["apply", name, "tx.json", "-o", "out.json"])
        assert result.exit_code == 0
        children = _read_children(workdir / "out.json")
        assert children[0]["children"][0]["text"] == "hello world"

    def test_bad_path_fails(self, workdir: Path) -> None:
        name = _write(workdir / "doc.json", _value(_block("paragraph", "world")))
        tx = {"ops": [{"op": "remove_node", "path": [7]}]}
        (workdir / "tx.json").write_text(json.dumps(tx), encoding="utf-8")
        result = _make_runner().invoke(cli, ["apply", name, "tx.json"])
        assert result.exit_code == 1
        assert "Transaction failed" in result.output


class TestQuery:
    def test_heading_level_after_normalization(self, workdir: Path) -> None:
        name = _write(workdir / "doc.json", _value(_block("heading", "T", level=42)))
        result = _make_runner().invoke(cli, ["query", name, "block.heading_level"])
        assert result.exit_code == 0
        assert result.output.strip() == "6"

    def test_active_marks(self, workdir: Path) -> None:
        doc = _value(
            {
                "node": "element",
                "kind": "paragraph",
                "children": [{"node": "text", "text": "b", "marks": {"bold": True}}],
            }
        )
        name = _write(workdir / "doc.json", doc)
        result = _make_runner().invoke(cli, ["query", name, "marks.get_active"])
        assert result.exit_code == 0
        assert json.loads(result.output)["bold"] is True

    def test_query_with_args(self, workdir: Path) -> None:
        name = _write(workdir / "doc.json", _value(_block("list_item", "x", list_type="ordered")))
        result = _make_runner().invoke(
            cli, ["query", name, "list.is_active", "--args", '{"type": "ordered"}']
        )
        assert result.exit_code == 0
        assert result.output.strip() == "true"

    def test_unknown_query(self, workdir: Path) -> None:
        name = _write(workdir / "doc.json", _value(_block("paragraph", "a")))
        result = _make_runner().invoke(cli, ["query", name, "nope.nothing"])
        assert result.exit_code == 1
