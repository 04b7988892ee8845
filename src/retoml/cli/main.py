"""CLI entry point for retoml.

Invoked as::

    retoml [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m retoml.cli.main

Commands
--------
check       Parse TOML files and verify they re-encode byte-for-byte
get         Print the value stored under a dotted key
dump        Export a TOML file as JSON or YAML
fmt-key     Print the canonical spelling of a dotted key
version     Show version information
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

if TYPE_CHECKING:
    from retoml.model.document import Document
    from retoml.model.table_like import Item

console = Console()
err_console = Console(stderr=True)


def _read_source(path: str) -> str:
    """Read a TOML file, exiting on error."""
    try:
        # newline="" keeps CRLF line endings intact.
        with open(path, encoding="utf-8", newline="") as handle:
            return handle.read()
    except FileNotFoundError:
        err_console.print(f"[red]Error:[/red] File not found: {path}")
        sys.exit(1)
    except OSError as exc:
        err_console.print(f"[red]Error:[/red] Cannot read {path}: {exc}")
        sys.exit(1)


def _parse_or_exit(source: str, path: str) -> "Document":
    """Parse TOML source, printing the error and exiting on failure."""
    from retoml import parse_document
    from retoml.parser import TomlError

    try:
        return parse_document(source)
    except TomlError as exc:
        err_console.print(f"[red]Parse error[/red] in {path}:")
        err_console.print(str(exc), markup=False, highlight=False)
        sys.exit(1)


def _render(item: "Item") -> str:
    """Return the TOML text of ``item`` without its surrounding trivia."""
    from retoml.encode import encode_table_body, encode_value
    from retoml.model import ArrayOfTables, Decor, Table

    if isinstance(item, Table):
        return encode_table_body(item)
    if isinstance(item, ArrayOfTables):
        return "\n".join(encode_table_body(t) for t in item)
    decor = item.decor
    item.decor = Decor("", "")
    try:
        return encode_value(item)
    finally:
        item.decor = decor


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="retoml")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log parser activity to stderr")
def cli(verbose: bool) -> None:
    """Format-preserving TOML toolkit: check, query and export TOML files."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


# ---------------------------------------------------------------------------
# version command
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from retoml import __version__

    table = Table(show_header=False, box=None)
    table.add_row("[bold]retoml[/bold]", f"v{__version__}")
    table.add_row("Python", f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}")
    table.add_row("Platform", sys.platform)
    console.print(table)


# ---------------------------------------------------------------------------
# check command
# ---------------------------------------------------------------------------


@cli.command(name="check")
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=False))
def check_command(files: tuple[str, ...]) -> None:
    """Parse each FILE and verify that it re-encodes unchanged."""
    from retoml import parse_document
    from retoml.parser import TomlError

    table = Table(title="retoml check", show_lines=False)
    table.add_column("File")
    table.add_column("Status", style="bold")
    table.add_column("Detail")

    failures = 0
    for file in files:
        source = _read_source(file)
        try:
            doc = parse_document(source)
        except TomlError as exc:
            failures += 1
            table.add_row(file, "[red]ERROR[/red]", f"line {exc.line}, column {exc.column}: {exc.message}")
            continue
        if str(doc) != source:
            failures += 1
            table.add_row(file, "[yellow]DRIFT[/yellow]", "re-encoded text differs from the source")
        else:
            table.add_row(file, "[green]OK[/green]", "")

    console.print(table)
    console.print(f"\n[bold]Summary:[/bold] {len(files) - failures} ok, {failures} failed")
    if failures:
        sys.exit(1)


# ---------------------------------------------------------------------------
# get command
# ---------------------------------------------------------------------------


@cli.command(name="get")
@click.argument("file", type=click.Path(exists=False))
@click.argument("key")
def get_command(file: str, key: str) -> None:
    """Print the value under KEY in FILE.

    KEY is a dotted key such as server.port or 'a."b.c"'.
    """
    from retoml import parse_key_path
    from retoml.model import Array, ArrayOfTables, Formatted
    from retoml.parser import TomlError

    try:
        path = parse_key_path(key)
    except TomlError as exc:
        err_console.print(f"[red]Invalid key[/red] {key!r}:")
        err_console.print(str(exc), markup=False, highlight=False)
        sys.exit(1)

    doc = _parse_or_exit(_read_source(file), file)
    item: Item = doc.as_table()
    for depth, segment in enumerate(path):
        if isinstance(item, (Formatted, Array, ArrayOfTables)) or segment.get() not in item:
            walked = ".".join(str(k) for k in path[: depth + 1])
            err_console.print(f"[red]Error:[/red] no key `{walked}` in {file}")
            sys.exit(1)
        item = item[segment.get()]

    click.echo(_render(item))


# ---------------------------------------------------------------------------
# dump command
# ---------------------------------------------------------------------------


@cli.command(name="dump")
@click.argument("file", type=click.Path(exists=False))
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "yaml"], case_sensitive=False),
    default="json",
    help="Output format",
)
@click.option("--output", "-o", default=None, help="Output file path (defaults to stdout)")
def dump_command(file: str, output_format: str, output: str | None) -> None:
    """Export the data in FILE as JSON or YAML, dropping all formatting."""
    from retoml.model import DocumentSerializer

    doc = _parse_or_exit(_read_source(file), file)
    serializer = DocumentSerializer()

    if output_format == "json":
        text = serializer.to_json(doc, indent=2)
        lang = "json"
    else:
        text = serializer.to_yaml(doc)
        lang = "yaml"

    if output:
        Path(output).write_text(text, encoding="utf-8")
        console.print(f"[green]Data written to[/green] {output}")
    else:
        syntax = Syntax(text, lang, line_numbers=False)
        console.print(syntax)


# ---------------------------------------------------------------------------
# fmt-key command
# ---------------------------------------------------------------------------


@cli.command(name="fmt-key")
@click.argument("key")
def fmt_key_command(key: str) -> None:
    """Print the canonical spelling of KEY.

    Quotes are dropped where a bare key will do and whitespace around the
    dots is removed: ' "a" . \\'b c\\' ' becomes a.'b c'.
    """
    from retoml import parse_key_path
    from retoml.encode import encode_key_path
    from retoml.parser import TomlError

    try:
        path = parse_key_path(key)
    except TomlError as exc:
        err_console.print(f"[red]Invalid key[/red] {key!r}:")
        err_console.print(str(exc), markup=False, highlight=False)
        sys.exit(1)

    for segment in path:
        segment.format()
    click.echo(encode_key_path(path))


if __name__ == "__main__":
    cli()
