"""
CLI utility helpers — output formatting and error reporting.
"""

from __future__ import annotations

import json
from typing import Any, NoReturn

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from naming_spine.conventions.descriptor import Catalog, IdentifierDescriptor
from naming_spine.core.errors import AmbiguousParse, InconsistentPair, NamingError
from naming_spine.linter import LintResult, Severity

console = Console(soft_wrap=True)
err_console = Console(stderr=True, soft_wrap=True)

_SEVERITY_STYLE = {
    Severity.ERROR: "bold red",
    Severity.WARNING: "yellow",
    Severity.INFO: "cyan",
}


# ── Errors ───────────────────────────────────────────────────────────────


def fail(error: NamingError, *, as_json: bool = False) -> NoReturn:
    """Report ``error`` and exit with its exit code.

    The message names the descriptor and the rule that failed when the
    error carries them.
    """
    if as_json:
        typer.echo(json.dumps({"ok": False, "error": error.to_dict()}, indent=2, default=str))
        raise typer.Exit(code=error.exit_code)

    err_console.print(f"[bold red]Error[/bold red] ({type(error).__name__}): {escape(error.message)}")
    ctx = error.context
    if ctx.descriptor:
        err_console.print(f"  [cyan]descriptor[/cyan]: {escape(ctx.descriptor)}")
    if ctx.identifier:
        err_console.print(f"  [cyan]identifier[/cyan]: {escape(ctx.identifier)}")
    if ctx.rule:
        err_console.print(f"  [cyan]rule[/cyan]: {escape(ctx.rule)}")
    if ctx.source:
        err_console.print(f"  [cyan]source[/cyan]: {escape(ctx.source)}")
    if isinstance(error, AmbiguousParse):
        for candidate in error.candidates:
            err_console.print(f"  [yellow]candidate[/yellow]: {escape(str(candidate))}")
    if isinstance(error, InconsistentPair):
        for name, (a, b) in error.differences.items():
            err_console.print(f"  [yellow]{escape(name)}[/yellow]: {escape(repr(a))} != {escape(repr(b))}")
    raise typer.Exit(code=error.exit_code)


def build_catalog(schemas: list[str] | None, tables: list[str] | None) -> Catalog:
    """Catalog from repeated ``--schema`` / ``--table`` options."""
    return Catalog.build(schemas or (), tables or ())


# ── Output helpers ───────────────────────────────────────────────────────


def echo_json(payload: Any) -> None:
    """Print ``payload`` as indented JSON on stdout."""
    typer.echo(json.dumps(payload, indent=2, default=str))


def print_descriptor(descriptor: IdentifierDescriptor, renderings: dict[str, str]) -> None:
    """Render a descriptor as key-value pairs."""
    data = descriptor.to_dict()
    console.print(f"[bold]{escape(str(descriptor))}[/bold]")
    for k, v in data.items():
        if v in (None, [], ()):
            continue
        console.print(f"  [cyan]{k}[/cyan]: {escape(str(v))}")
    for label, text in renderings.items():
        console.print(f"  [green]{label}[/green]: {escape(text)}")


def print_table(rows: list[dict[str, Any]], *, title: str = "") -> None:
    """Render a list of dicts as a Rich table."""
    if not rows:
        console.print("[dim]No items.[/dim]")
        return
    table = Table(title=title or None, show_lines=False, pad_edge=False)
    for col in rows[0]:
        table.add_column(col, overflow="fold")
    for row in rows:
        table.add_row(*(escape(str(v)) for v in row.values()))
    console.print(table)


def print_lint_result(result: LintResult) -> None:
    """Summary line plus one line per diagnostic."""
    status = "green" if result.passed else "bold red"
    console.print(f"[{status}]{escape(result.summary())}[/{status}]")
    for d in result.diagnostics:
        style = _SEVERITY_STYLE[d.severity]
        console.print(f"  [{style}]{escape(str(d))}[/{style}]")
