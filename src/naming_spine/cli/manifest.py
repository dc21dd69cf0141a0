"""
CLI: ``naming-spine render`` and ``naming-spine check`` — work on manifests.
"""

from __future__ import annotations

import typer

from naming_spine.cli.utils import echo_json, fail, print_lint_result, print_table
from naming_spine.conventions import Convention, render_all
from naming_spine.core.errors import NamingError
from naming_spine.core.logging import get_logger
from naming_spine.core.settings import get_settings
from naming_spine.manifest import Manifest, load_manifest

logger = get_logger(__name__)


def _load(path: str, as_json: bool) -> Manifest:
    try:
        return load_manifest(path)
    except NamingError as e:
        fail(e, as_json=as_json)


# ── naming-spine render ──────────────────────────────────────────────


def render_cmd(
    manifest_file: str = typer.Argument(..., help="Naming manifest (YAML or JSON)."),
    convention: str | None = typer.Option(  # noqa: UP007
        None,
        "--convention",
        "-c",
        help="snake, pascal or both (default from NAMING_DEFAULT_CONVENTION).",
    ),
    json_out: bool = typer.Option(False, "--json", "-j", help="Output as JSON."),
) -> None:
    """Render every identifier in a manifest.

    Example:
        naming-spine render naming.yaml
        naming-spine render naming.yaml --convention pascal --json
    """
    logger.info("command_started", command="render", manifest=manifest_file)
    choice = (convention or get_settings().default_convention).strip().lower()
    if choice == "both":
        wanted = list(Convention)
    else:
        try:
            wanted = [Convention.parse(choice)]
        except ValueError as e:
            typer.echo(f"{e}. Use: snake, pascal, both", err=True)
            raise typer.Exit(code=2) from None

    manifest = _load(manifest_file, json_out)
    rows = []
    for entry in manifest.entries:
        rendered = render_all(entry.descriptor)
        row = {"#": entry.index, "descriptor": str(entry.descriptor)}
        for c in wanted:
            row[c.value] = rendered[c]
        rows.append(row)

    if json_out:
        echo_json(
            {
                "manifest": manifest.name,
                "identifiers": [
                    {
                        "index": entry.index,
                        "descriptor": entry.descriptor.to_dict(),
                        **{c.value: row[c.value] for c in wanted},
                    }
                    for entry, row in zip(manifest.entries, rows)
                ],
            }
        )
        return
    print_table(rows, title=manifest.name)


# ── naming-spine check ───────────────────────────────────────────────


def check_cmd(
    manifest_file: str = typer.Argument(..., help="Naming manifest (YAML or JSON)."),
    strict: bool | None = typer.Option(  # noqa: UP007
        None, "--strict/--no-strict", help="Exit non-zero on warnings too."
    ),
    max_length: int | None = typer.Option(  # noqa: UP007
        None, "--max-length", min=1, help="Identifier length limit (default 63)."
    ),
    json_out: bool = typer.Option(False, "--json", "-j", help="Output as JSON."),
) -> None:
    """Lint a manifest: declared renderings, collisions, lengths, keywords.

    Example:
        naming-spine check naming.yaml
        naming-spine check naming.yaml --strict --json
    """
    logger.info("command_started", command="check", manifest=manifest_file)
    settings = get_settings()
    if max_length is not None:
        settings = settings.model_copy(update={"max_identifier_length": max_length})
    strict = settings.strict if strict is None else strict

    manifest = _load(manifest_file, json_out)

    from naming_spine.linter import lint_manifest

    result = lint_manifest(manifest, settings)

    if json_out:
        echo_json(result.to_dict())
    else:
        print_lint_result(result)

    if not result.passed:
        raise typer.Exit(code=1)
    if strict and result.warnings:
        raise typer.Exit(code=1)
