"""
Root Typer application for the naming-spine CLI.

Commands are plain functions in sibling modules, registered here so the
command table reads in one place.
"""

from __future__ import annotations

import typer
from pydantic import ValidationError
from typer import Typer

from naming_spine.cli.identifiers import equivalent_cmd, kinds_cmd, parse_cmd
from naming_spine.cli.manifest import check_cmd, render_cmd
from naming_spine.cli.scan import scan_cmd
from naming_spine.core.logging import configure_logging
from naming_spine.core.settings import get_settings

app = Typer(
    name="naming-spine",
    help="naming-spine — render, parse and check PostgreSQL identifiers in snake_case and PascalCase.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from importlib.metadata import PackageNotFoundError
        from importlib.metadata import version as pkg_version

        try:
            v = pkg_version("naming-spine")
        except PackageNotFoundError:
            from naming_spine import __version__ as v
        typer.echo(f"naming-spine {v}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    log_level: str | None = typer.Option(  # noqa: UP007
        None, "--log-level", help="DEBUG, INFO, WARNING or ERROR (default from NAMING_LOG_LEVEL)."
    ),
    log_format: str | None = typer.Option(  # noqa: UP007
        None, "--log-format", help="console or json (default from NAMING_LOG_FORMAT)."
    ),
) -> None:
    """naming-spine CLI — one naming grid, two conventions."""
    try:
        settings = get_settings()
    except ValidationError as e:
        typer.echo(f"Invalid NAMING_* settings: {e}", err=True)
        raise typer.Exit(code=2) from None
    configure_logging(
        level=log_level or settings.log_level,
        format=log_format or settings.log_format,
        force=True,
    )


# ── Command registration ─────────────────────────────────────────────────

app.command("render")(render_cmd)
app.command("check")(check_cmd)
app.command("scan")(scan_cmd)
app.command("parse")(parse_cmd)
app.command("equivalent")(equivalent_cmd)
app.command("kinds")(kinds_cmd)
