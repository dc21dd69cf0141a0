"""
CLI: ``naming-spine parse``, ``equivalent`` and ``kinds`` — single identifiers.

These commands need no files: they reverse-map one identifier, compare a
snake_case/PascalCase pair, or print the naming grid.
"""

from __future__ import annotations

import typer

from naming_spine.cli.utils import build_catalog, echo_json, fail, print_descriptor, print_table
from naming_spine.conventions import (
    Convention,
    IdentifierDescriptor,
    ObjectKind,
    TableRef,
    assert_equivalent,
    parse,
    render_all,
    rule_for,
)
from naming_spine.conventions.kinds import Requirement
from naming_spine.core.errors import NamingError
from naming_spine.core.logging import get_logger

logger = get_logger(__name__)


def _renderings(descriptor: IdentifierDescriptor) -> dict[str, str]:
    return {c.value: text for c, text in render_all(descriptor).items()}


# ── naming-spine parse ───────────────────────────────────────────────


def parse_cmd(
    identifier: str = typer.Argument(..., help='Identifier, e.g. inventory_product_pky or \'"PK_Inventory_Product"\'.'),
    kind: str | None = typer.Option(None, "--kind", "-k", help="Restrict to one object kind."),  # noqa: UP007
    schemas: list[str] | None = typer.Option(  # noqa: UP007
        None, "--schema", "-s", help="Known schema (repeatable)."
    ),
    tables: list[str] | None = typer.Option(  # noqa: UP007
        None, "--table", "-t", help="Known table as schema.table (repeatable)."
    ),
    convention: str | None = typer.Option(  # noqa: UP007
        None, "--convention", "-c", help="Require snake or pascal."
    ),
    json_out: bool = typer.Option(False, "--json", "-j", help="Output as JSON."),
) -> None:
    """Reverse-map an identifier to its descriptor.

    Multi-word snake_case names can split several ways; pass the known
    schemas and tables to pick the right one.

    Example:
        naming-spine parse inventory_product_pky
        naming-spine parse sales_order_line_pky --table sales.order_line
    """
    logger.info("command_started", command="parse", identifier=identifier)
    try:
        wanted = Convention.parse(convention) if convention else None
    except ValueError as e:
        typer.echo(f"{e}. Use: snake, pascal", err=True)
        raise typer.Exit(code=2) from None
    try:
        catalog = build_catalog(schemas, tables)
        descriptor = parse(identifier, kind=kind, catalog=catalog, convention=wanted)
    except NamingError as e:
        fail(e, as_json=json_out)

    renderings = _renderings(descriptor)
    if json_out:
        echo_json({"ok": True, "descriptor": descriptor.to_dict(), "renderings": renderings})
        return
    print_descriptor(descriptor, renderings)


# ── naming-spine equivalent ──────────────────────────────────────────


def equivalent_cmd(
    snake: str = typer.Argument(..., help="snake_case rendering."),
    pascal: str = typer.Argument(..., help="PascalCase rendering (quoted)."),
    kind: str | None = typer.Option(None, "--kind", "-k", help="Object kind of both."),  # noqa: UP007
    schemas: list[str] | None = typer.Option(  # noqa: UP007
        None, "--schema", "-s", help="Known schema (repeatable)."
    ),
    tables: list[str] | None = typer.Option(  # noqa: UP007
        None, "--table", "-t", help="Known table as schema.table (repeatable)."
    ),
    json_out: bool = typer.Option(False, "--json", "-j", help="Output as JSON."),
) -> None:
    """Check that two renderings name the same object.

    Example:
        naming-spine equivalent inventory_product_pky '"PK_Inventory_Product"'
    """
    logger.info("command_started", command="equivalent", snake=snake, pascal=pascal)
    try:
        catalog = build_catalog(schemas, tables)
        descriptor = assert_equivalent(snake, pascal, kind=kind, catalog=catalog)
    except NamingError as e:
        fail(e, as_json=json_out)

    if json_out:
        echo_json({"ok": True, "equivalent": True, "descriptor": descriptor.to_dict()})
        return
    typer.echo(f"{snake} == {pascal}")
    typer.echo(f"  {descriptor}")


# ── naming-spine kinds ───────────────────────────────────────────────


def example_descriptor(kind: ObjectKind) -> IdentifierDescriptor:
    """A representative descriptor for one row of the grid."""
    rule = rule_for(kind)
    if kind is ObjectKind.SCHEMA:
        return IdentifierDescriptor(kind, "Inventory")
    if kind is ObjectKind.COLUMN:
        return IdentifierDescriptor(kind, "UnitPrice")
    # junction tables link tables of one schema
    ref_schema = None if kind is ObjectKind.JUNCTION_TABLE else "Purchasing"
    return IdentifierDescriptor(
        kind,
        "Product",
        schema_name="Inventory" if rule.schema is not Requirement.FORBIDDEN else None,
        referenced_objects=(TableRef("Supplier", ref_schema),) if rule.references else (),
        qualifiers=("Sku",) if rule.qualifiers is Requirement.REQUIRED else (),
    )


def kinds_cmd(
    json_out: bool = typer.Option(False, "--json", "-j", help="Output as JSON."),
) -> None:
    """Print the naming grid with an example per object kind."""
    rows = []
    for kind in ObjectKind:
        rule = rule_for(kind)
        rendered = render_all(example_descriptor(kind))
        rows.append(
            {
                "kind": kind.value,
                "shape": rule.shape.value,
                "snake": rendered[Convention.SNAKE_CASE],
                "pascal": rendered[Convention.PASCAL_CASE],
            }
        )
    if json_out:
        echo_json(rows)
        return
    print_table(rows, title="Naming grid")
