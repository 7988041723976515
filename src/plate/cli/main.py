"""CLI entry point for plate-core.

Invoked as::

    plate-core [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m plate.cli.main

Documents are read and written as ``DocumentValue`` JSON, or YAML when
the file name ends in ``.yaml``/``.yml``.

Commands
--------
version     Show version information
plugins     List the plugins of a preset with their commands and queries
check       Validate a document file
normalize   Normalize a document file
run         Run an editor command against a document file
apply       Apply a transaction file to a document file
query       Run an editor query against a document file
"""
from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

if TYPE_CHECKING:
    from plate.editor import Editor
    from plate.model.nodes import Document, Selection

console = Console()
err_console = Console(stderr=True)

PRESET_OPTION = click.option(
    "--preset",
    type=click.Choice(["core", "richtext"], case_sensitive=False),
    default="richtext",
    show_default=True,
    help="Plugin preset used to interpret the document",
)


def _read_source(path: str) -> str:
    """Read a document file, exiting on error."""
    try:
        return Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        err_console.print(f"[red]Error:[/red] File not found: {path}")
        sys.exit(1)
    except OSError as exc:
        err_console.print(f"[red]Error:[/red] Cannot read {path}: {exc}")
        sys.exit(1)


def _format_for(path: str) -> str:
    return "yaml" if Path(path).suffix.lower() in (".yaml", ".yml") else "json"


def _load_or_exit(path: str) -> "Document":
    """Decode a document file, printing the error and exiting on failure."""
    from plate import load
    from plate.errors import SerializationError

    source = _read_source(path)
    try:
        return load(source, format=_format_for(path))
    except SerializationError as exc:
        err_console.print(f"[red]Invalid document[/red] in {path}: {exc.message}")
        sys.exit(1)


def _parse_json_option(value: str | None, option: str) -> Any:
    if value is None:
        return None
    try:
        return json.loads(value)
    except json.JSONDecodeError as exc:
        err_console.print(f"[red]Error:[/red] {option} is not valid JSON: {exc}")
        sys.exit(1)


def _parse_selection(value: str | None) -> "Selection | None":
    from plate.model.serializer import DocumentSerializer

    data = _parse_json_option(value, "--selection")
    if data is None:
        return None
    try:
        return DocumentSerializer().selection_from_dict(data)
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        err_console.print(f"[red]Error:[/red] Invalid --selection: {exc}")
        sys.exit(1)


def _open_editor(file: str, preset: str, selection: str | None) -> "Editor":
    from plate import new_editor
    from plate.errors import EditorError

    doc = _load_or_exit(file)
    try:
        return new_editor(doc, _parse_selection(selection), preset=preset.lower())
    except EditorError as exc:
        err_console.print(f"[red]Error:[/red] {exc.message}")
        sys.exit(1)


def _emit_document(doc: "Document", output: str | None, output_format: str | None) -> None:
    """Write ``doc`` to ``output``, or pretty-print it to the console."""
    from plate import dump

    fmt = output_format or (_format_for(output) if output else "json")
    text = dump(doc, format=fmt)
    if output:
        Path(output).write_text(text, encoding="utf-8")
        console.print(f"[green]Document written to[/green] {output}")
    else:
        console.print(Syntax(text, fmt, line_numbers=True))


def _severity_color(severity_name: str) -> str:
    """Map a DiagnosticSeverity name to a Rich color string."""
    colors = {
        "ERROR": "red",
        "WARNING": "yellow",
        "INFORMATION": "blue",
        "HINT": "dim",
    }
    return colors.get(severity_name, "white")


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="plate-core")
def cli() -> None:
    """Transactional rich-text document model: check, normalize and edit documents."""


# ---------------------------------------------------------------------------
# version command
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from plate import __version__

    table = Table(show_header=False, box=None)
    table.add_row("[bold]plate-core[/bold]", f"v{__version__}")
    table.add_row("Python", f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}")
    table.add_row("Platform", sys.platform)
    console.print(table)


# ---------------------------------------------------------------------------
# plugins command
# ---------------------------------------------------------------------------


@cli.command(name="plugins")
@PRESET_OPTION
@click.option(
    "--entrypoints/--no-entrypoints",
    default=True,
    help="Also load plugins installed under the 'plate.plugins' entry-point group",
)
def plugins_command(preset: str, entrypoints: bool) -> None:
    """List the plugins of a preset with the extension points they contribute."""
    from plate import registry_for

    registry = registry_for(preset.lower())
    if entrypoints:
        registry.load_entrypoints()

    table = Table(title=f"Plugins: {registry.name}", show_lines=True)
    table.add_column("Plugin", style="bold")
    table.add_column("Node kinds")
    table.add_column("Commands")
    table.add_column("Queries")

    for plugin_id in registry.list_plugins():
        plugin = registry.get(plugin_id)
        table.add_row(
            plugin_id,
            "\n".join(spec.kind for spec in plugin.node_specs()),
            "\n".join(cmd.name for cmd in plugin.commands()),
            "\n".join(query.name for query in plugin.queries()),
        )
    console.print(table)


# ---------------------------------------------------------------------------
# check command
# ---------------------------------------------------------------------------


@cli.command(name="check")
@click.argument("file", type=click.Path(exists=False))
@click.option("--strict", is_flag=True, default=False, help="Treat warnings as errors")
@PRESET_OPTION
def check_command(file: str, strict: bool, preset: str) -> None:
    """Validate a document without modifying it.

    FILE is the path to the document file to check.
    """
    from plate import registry_for
    from plate.validator import Validator, format_path

    doc = _load_or_exit(file)
    diagnostics = Validator(registry_for(preset.lower()), strict=strict).validate(doc)

    if not diagnostics:
        console.print(f"[green]OK[/green] {file}: no issues found")
        sys.exit(0)

    errors = [d for d in diagnostics if d.is_error]
    warnings = [d for d in diagnostics if not d.is_error]

    table = Table(title=f"Check: {file}", show_lines=True)
    table.add_column("Severity", style="bold", min_width=10)
    table.add_column("Code", min_width=8)
    table.add_column("Path", min_width=10)
    table.add_column("Message")

    for d in diagnostics:
        color = _severity_color(d.severity.name)
        table.add_row(
            f"[{color}]{d.severity.name}[/{color}]",
            d.code,
            format_path(d.path),
            d.message + (f"\n[dim]hint: {d.suggestion}[/dim]" if d.suggestion else ""),
        )

    console.print(table)
    console.print(
        f"\n[bold]Summary:[/bold] {len(errors)} error(s), {len(warnings)} warning(s)"
    )

    if errors:
        sys.exit(1)


# ---------------------------------------------------------------------------
# normalize command
# ---------------------------------------------------------------------------


@cli.command(name="normalize")
@click.argument("file", type=click.Path(exists=False))
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "yaml"], case_sensitive=False),
    default=None,
    help="Output format (defaults to the output file's extension, else json)",
)
@click.option("--output", "-o", default=None, help="Output file path (defaults to stdout)")
@PRESET_OPTION
def normalize_command(
    file: str, output_format: str | None, output: str | None, preset: str
) -> None:
    """Normalize a document file.

    FILE is the path to the document file to normalize.
    """
    editor = _open_editor(file, preset, None)
    _emit_document(editor.doc, output, output_format and output_format.lower())


# ---------------------------------------------------------------------------
# run command
# ---------------------------------------------------------------------------


@cli.command(name="run")
@click.argument("file", type=click.Path(exists=False))
@click.argument("command")
@click.option("--args", "args_json", default=None, help="Command arguments as a JSON object")
@click.option("--selection", default=None, help="Selection as JSON: {anchor, focus}")
@click.option("--output", "-o", default=None, help="Output file path (defaults to stdout)")
@PRESET_OPTION
def run_command(
    file: str,
    command: str,
    args_json: str | None,
    selection: str | None,
    output: str | None,
    preset: str,
) -> None:
    """Run an editor command against a document.

    FILE is the path to the document file; COMMAND is the command name,
    e.g. ``block.set_heading``.

    Examples:

    \b
        plate-core run doc.json block.set_heading --args '{"level": 2}'
        plate-core run doc.json image.insert --args '{"src": "a.png"}' -o out.json
    """
    from plate.errors import EditorError

    editor = _open_editor(file, preset, selection)
    args = _parse_json_option(args_json, "--args")
    try:
        editor.run_command(command, args)
    except EditorError as exc:
        err_console.print(f"[red]Command {command!r} failed:[/red] {exc.message}")
        sys.exit(1)
    _emit_document(editor.doc, output, None)


# ---------------------------------------------------------------------------
# apply command
# ---------------------------------------------------------------------------


@cli.command(name="apply")
@click.argument("file", type=click.Path(exists=False))
@click.argument("transaction", type=click.Path(exists=False))
@click.option("--output", "-o", default=None, help="Output file path (defaults to stdout)")
@PRESET_OPTION
def apply_command(file: str, transaction: str, output: str | None, preset: str) -> None:
    """Apply a transaction file to a document.

    FILE is the path to the document file; TRANSACTION is a JSON file
    holding ``{"ops": [...], "selection_after": ..., "meta": ...}``.
    """
    from plate.errors import EditorError
    from plate.model.serializer import DocumentSerializer

    editor = _open_editor(file, preset, None)
    try:
        tx = DocumentSerializer().transaction_from_json(_read_source(transaction))
        editor.apply(tx)
    except EditorError as exc:
        err_console.print(f"[red]Transaction failed:[/red] {exc.message}")
        sys.exit(1)
    _emit_document(editor.doc, output, None)


# ---------------------------------------------------------------------------
# query command
# ---------------------------------------------------------------------------


@cli.command(name="query")
@click.argument("file", type=click.Path(exists=False))
@click.argument("query")
@click.option("--args", "args_json", default=None, help="Query arguments as a JSON object")
@click.option("--selection", default=None, help="Selection as JSON: {anchor, focus}")
@PRESET_OPTION
def query_command(
    file: str, query: str, args_json: str | None, selection: str | None, preset: str
) -> None:
    """Run an editor query against a document and print the JSON result.

    FILE is the path to the document file; QUERY is the query name,
    e.g. ``marks.get_active``.
    """
    from plate.errors import EditorError

    editor = _open_editor(file, preset, selection)
    args = _parse_json_option(args_json, "--args")
    try:
        result = editor.run_query_json(query, args)
    except EditorError as exc:
        err_console.print(f"[red]Query {query!r} failed:[/red] {exc.message}")
        sys.exit(1)
    click.echo(json.dumps(result, ensure_ascii=False))


if __name__ == "__main__":
    cli()
