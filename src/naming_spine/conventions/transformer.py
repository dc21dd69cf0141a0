"""
Naming convention transformer — render, parse and compare identifiers.

This is the public face of the conventions package.  Rendering delegates to
the convention's :class:`~naming_spine.conventions.renderers.Renderer`;
parsing collects every candidate the renderer proposes and narrows them:

::

    parse(identifier, kind=?, catalog=?, convention=?)
    │
    ├── detect convention (leading quote -> PascalCase, lowercase -> snake_case)
    ├── renderer.candidates(identifier)      all interpretations
    ├── filter by kind hint
    ├── filter by catalog                    known schemas / tables
    ├── resolve snake_case FK target schema  from catalog
    ├── keep the most specific rank          catalog match > affix or table > bare name
    │
    ▼
    0 left -> UnrecognizedIdentifier
    1 left -> IdentifierDescriptor
    2+     -> AmbiguousParse

Examples:
    >>> d = IdentifierDescriptor(ObjectKind.PRIMARY_KEY, "Product", schema_name="Inventory")
    >>> render(d, Convention.SNAKE_CASE)
    'inventory_product_pky'
    >>> render(d, "pascal")
    '"PK_Inventory_Product"'
    >>> parse("inventory_product_pky").kind
    <ObjectKind.PRIMARY_KEY: 'primary-key'>
    >>> equivalent("inventory_product_pky", '"PK_Inventory_Product"')
    True

Every function here is pure: no shared state, no I/O, safe to call from any
number of threads.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable
from typing import Any, Union

from naming_spine.conventions.descriptor import Catalog, IdentifierDescriptor, TableRef
from naming_spine.conventions.kinds import Convention, ObjectKind, rule_for
from naming_spine.conventions.renderers import Candidate, detect_convention, get_renderer
from naming_spine.core.errors import AmbiguousParse, InconsistentPair, MalformedDescriptor, UnrecognizedIdentifier
from naming_spine.core.logging import get_logger

logger = get_logger(__name__)

# A kind, a kind name, or several of either
KindHint = Union[ObjectKind, str, Iterable[Union[ObjectKind, str]], None]


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def render(descriptor: IdentifierDescriptor, convention: Convention | str) -> str:
    """Render ``descriptor`` as an identifier in ``convention``.

    Raises:
        UnsupportedObjectKind: if the descriptor's kind is outside the grid.
    """
    return get_renderer(convention).render(descriptor)


def render_all(descriptor: IdentifierDescriptor) -> dict[Convention, str]:
    """Both renderings of ``descriptor``, keyed by convention."""
    return {convention: render(descriptor, convention) for convention in Convention}


def foreign_key_suffix(descriptor: IdentifierDescriptor, convention: Convention | str | None = None) -> str:
    """Unquoted foreign-key constraint name.

    snake_case: ``{schema}_{table}_{referencedTable}_fky``;
    PascalCase: ``FK_{Schema}_{Table}_{ReferencedSchema}_{ReferencedTable}``.
    A numeric ``ordinal`` is appended to tell apart several foreign keys
    between the same two tables.

    Uses ``descriptor.convention`` when ``convention`` is omitted.
    """
    chosen = convention if convention is not None else descriptor.convention
    if chosen is None:
        raise MalformedDescriptor(
            "foreign_key_suffix needs a convention (argument or descriptor.convention)",
            field="convention",
        ).with_context(descriptor=str(descriptor), rule="convention-required")
    return get_renderer(chosen).foreign_key_suffix(descriptor)


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def _admit(descriptor: IdentifierDescriptor, catalog: Catalog) -> bool:
    """Whether ``descriptor`` is consistent with the known schemas and tables."""
    kind = descriptor.kind
    if kind is ObjectKind.SCHEMA:
        return catalog.has_schema(descriptor.logical_name)
    if descriptor.schema_name and not catalog.has_schema(descriptor.schema_name):
        return False
    rule = rule_for(kind)
    if (kind is ObjectKind.TABLE or rule.owned) and not catalog.has_table(
        descriptor.schema_name, descriptor.logical_name
    ):
        return False
    ref = descriptor.referenced
    if ref is not None:
        if kind is ObjectKind.JUNCTION_TABLE:
            return catalog.has_table(descriptor.schema_name, ref.logical_name)
        if ref.schema_name:
            return catalog.has_table(ref.schema_name, ref.logical_name)
        return catalog.knows_table_name(ref.logical_name)
    return True


def _resolve_reference(descriptor: IdentifierDescriptor, catalog: Catalog) -> IdentifierDescriptor:
    """Fill in a foreign key's target schema when only the catalog knows it."""
    ref = descriptor.referenced
    if descriptor.kind is not ObjectKind.FOREIGN_KEY or ref is None or ref.schema_name or not catalog.tables:
        return descriptor
    schemas = catalog.schemas_with_table(ref.logical_name)
    if descriptor.schema_name in schemas:
        schema = descriptor.schema_name
    elif len(schemas) == 1:
        schema = schemas[0]
    else:
        return descriptor
    return dataclasses.replace(descriptor, referenced_objects=(TableRef(ref.logical_name, schema),))


def _rank(candidate: Candidate, catalog: Catalog) -> int:
    d = candidate.descriptor
    if d.kind is ObjectKind.TABLE and (d.schema_name, d.logical_name) in catalog.tables:
        return 2
    if d.kind is ObjectKind.SCHEMA and d.logical_name in catalog.schemas:
        return 2
    # a plain table competes with affixed readings (sales.order_view); bare schema and column names yield
    return 1 if candidate.affixed or d.kind is ObjectKind.TABLE else 0


def _detect(identifier: str, convention: Convention | str | None) -> Convention:
    if not isinstance(identifier, str) or not identifier.strip():
        raise UnrecognizedIdentifier(str(identifier), "Identifier is empty")
    detected = detect_convention(identifier)
    if detected is None:
        text = identifier.strip()
        if '"' not in text and any(ch.isupper() for ch in text):
            reason = "unquoted mixed case; PostgreSQL folds it to lowercase"
        else:
            reason = "matches neither snake_case nor quoted PascalCase"
        raise UnrecognizedIdentifier(identifier, f"Identifier {identifier!r}: {reason}")
    if convention is not None:
        wanted = Convention.parse(convention)
        if wanted is not detected:
            raise UnrecognizedIdentifier(
                identifier,
                f"Identifier {identifier!r} is {detected.label}, expected {wanted.label}",
            ).with_context(rule="convention")
    return detected


def _kinds(kind: KindHint) -> frozenset[ObjectKind] | None:
    if kind is None:
        return None
    if isinstance(kind, (str, ObjectKind)):
        return frozenset({ObjectKind.parse(kind)})
    return frozenset(ObjectKind.parse(k) for k in kind)


def parse_candidates(
    identifier: str,
    *,
    kind: KindHint = None,
    catalog: Catalog | None = None,
    convention: Convention | str | None = None,
) -> list[IdentifierDescriptor]:
    """Most specific interpretations of ``identifier`` after all filtering.

    ``kind`` may be a single kind or a collection of allowed kinds.  An
    empty list means the text does not fit the grid for those kinds; more
    than one entry means it is ambiguous.
    """
    detected = _detect(identifier, convention)
    catalog = catalog or Catalog()
    wanted = _kinds(kind)

    found = get_renderer(detected).candidates(identifier)
    if wanted is not None:
        found = [c for c in found if c.descriptor.kind in wanted]
    found = [c for c in found if _admit(c.descriptor, catalog)]
    if not found:
        return []

    best = max(_rank(c, catalog) for c in found)
    chosen = [_resolve_reference(c.descriptor, catalog) for c in found if _rank(c, catalog) == best]
    # several splits can produce the same descriptor
    return list(dict.fromkeys(chosen))


def parse(
    identifier: str,
    *,
    kind: KindHint = None,
    catalog: Catalog | None = None,
    convention: Convention | str | None = None,
) -> IdentifierDescriptor:
    """Reverse-map a rendered identifier to its descriptor.

    Args:
        identifier: snake_case or quoted PascalCase identifier text.
        kind: Restrict interpretations to one object kind.
        catalog: Known schemas/tables used to split multi-word snake_case names.
        convention: Require the identifier to be in this convention.

    Raises:
        UnrecognizedIdentifier: nothing in the grid produces this text.
        AmbiguousParse: more than one descriptor produces this text.
    """
    found = parse_candidates(identifier, kind=kind, catalog=catalog, convention=convention)
    if not found:
        wanted = _kinds(kind)
        hint = f" as {' or '.join(sorted(k.value for k in wanted))}" if wanted else ""
        logger.debug("identifier_unrecognized", identifier=identifier, kind=str(kind))
        raise UnrecognizedIdentifier(
            identifier, f"Identifier {identifier!r} does not follow the naming grid{hint}"
        ).with_context(rule="naming-grid")
    if len(found) > 1:
        logger.debug("identifier_ambiguous", identifier=identifier, candidates=len(found))
        raise AmbiguousParse(identifier, found).with_context(rule="unique-parse")
    return found[0]


# ---------------------------------------------------------------------------
# Equivalence
# ---------------------------------------------------------------------------


def differences(a: IdentifierDescriptor, b: IdentifierDescriptor) -> dict[str, tuple[Any, Any]]:
    """Fields in which two descriptors differ.

    A referenced schema that is unknown on either side (snake_case foreign
    keys do not spell it) matches any schema.
    """
    left, right = a.signature(), b.signature()
    diff: dict[str, tuple[Any, Any]] = {}
    for key, value in left.items():
        other = right[key]
        if key == "referenced_schema" and (value is None or other is None):
            continue
        if value != other:
            diff[key] = (value, other)
    return diff


def _parse_pair(
    snake_rendering: str,
    pascal_rendering: str,
    kind: ObjectKind | str | None,
    catalog: Catalog | None,
) -> tuple[IdentifierDescriptor, IdentifierDescriptor]:
    snake = parse(snake_rendering, kind=kind, catalog=catalog, convention=Convention.SNAKE_CASE)
    pascal = parse(pascal_rendering, kind=kind, catalog=catalog, convention=Convention.PASCAL_CASE)
    return snake, pascal


def equivalent(
    snake_rendering: str,
    pascal_rendering: str,
    *,
    kind: ObjectKind | str | None = None,
    catalog: Catalog | None = None,
) -> bool:
    """True if both renderings name the same logical object.

    Raises:
        AmbiguousParse: either rendering maps to more than one descriptor.
        UnrecognizedIdentifier: either rendering fits no rule of its convention.
    """
    snake, pascal = _parse_pair(snake_rendering, pascal_rendering, kind, catalog)
    return not differences(snake, pascal)


def assert_equivalent(
    snake_rendering: str,
    pascal_rendering: str,
    *,
    kind: ObjectKind | str | None = None,
    catalog: Catalog | None = None,
) -> IdentifierDescriptor:
    """Like :func:`equivalent` but raises ``InconsistentPair`` naming the differing fields.

    Returns the descriptor parsed from the PascalCase rendering (it carries
    the referenced schema, which snake_case omits).
    """
    snake, pascal = _parse_pair(snake_rendering, pascal_rendering, kind, catalog)
    diff = differences(snake, pascal)
    if diff:
        raise InconsistentPair(snake_rendering, pascal_rendering, diff).with_context(
            descriptor=str(pascal), rule="equivalent-pair"
        )
    return pascal
