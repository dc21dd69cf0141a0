"""
CLI: ``naming-spine scan`` — lint object names in DDL files.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.markup import escape

from naming_spine.cli.utils import echo_json, err_console, print_lint_result
from naming_spine.conventions import Convention
from naming_spine.core.logging import get_logger
from naming_spine.core.settings import get_settings
from naming_spine.linter import LintResult, lint_sql

logger = get_logger(__name__)


def scan_cmd(
    sql_files: list[str] = typer.Argument(..., help="SQL files to scan."),
    convention: str | None = typer.Option(  # noqa: UP007
        None, "--convention", "-c", help="Require snake or pascal (default: either)."
    ),
    strict: bool | None = typer.Option(  # noqa: UP007
        None, "--strict/--no-strict", help="Exit non-zero on warnings too."
    ),
    json_out: bool = typer.Option(False, "--json", "-j", help="Output as JSON."),
) -> None:
    """Check every CREATE / CONSTRAINT name in DDL against the naming grid.

    Example:
        naming-spine scan migrations/*.sql
        naming-spine scan schema.sql --convention pascal --json
    """
    logger.info("command_started", command="scan", files=len(sql_files))
    settings = get_settings()
    strict = settings.strict if strict is None else strict
    try:
        required = Convention.parse(convention) if convention else None
    except ValueError as e:
        typer.echo(f"{e}. Use: snake, pascal", err=True)
        raise typer.Exit(code=2) from None

    results: list[LintResult] = []
    for name in sql_files:
        path = Path(name)
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            err_console.print(f"[bold red]Error[/bold red]: cannot read {escape(str(path))}: {escape(str(e))}")
            raise typer.Exit(code=2) from None
        results.append(lint_sql(text, convention=required, source=str(path)))

    passed = all(r.passed for r in results)
    if json_out:
        echo_json({"passed": passed, "files": [r.to_dict() for r in results]})
    else:
        for result in results:
            print_lint_result(result)

    if not passed:
        raise typer.Exit(code=1)
    if strict and any(r.warnings for r in results):
        raise typer.Exit(code=1)
