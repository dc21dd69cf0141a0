"""Naming Linter — check manifests and DDL against the naming grid.

Catches identifiers that drift from the grid, pairs that do not name the
same object, collisions and over-long names *before* they reach a
migration.  Extensible via a rule registry so teams can add house rules.

Architecture::

    lint_manifest(manifest)                lint_sql(text)
    │                                      │
    ├── _check_declared_snake     E001     ├── scan_sql()        DDL names
    ├── _check_declared_pascal    E002     ├── catalog pass      schemas/tables
    ├── _check_declared_pairs     E003     ├── parse each name   E101 / E102 / E103
    ├── _check_duplicates         E004     └── convention mix    W101
    ├── _check_length             E005
    ├── _check_reserved_words     W001
    ├── _check_undeclared_tables  W002
    ├── _check_missing_primary_keys I001
    └── (custom rules via register_lint_rule)
    │
    ▼
    LintResult
    ├── diagnostics: list[LintDiagnostic]
    ├── passed → bool (no errors)
    ├── errors / warnings / infos
    └── summary() → str

Example::

    from naming_spine.linter import lint_manifest
    from naming_spine.manifest import load_manifest

    result = lint_manifest(load_manifest("naming.yaml"))
    if not result.passed:
        for d in result.errors:
            print(f"[{d.code}] {d.message}")

See Also:
    naming_spine.manifest — manifest format
    naming_spine.sql_scan — DDL name extraction
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from naming_spine.conventions.descriptor import Catalog, IdentifierDescriptor
from naming_spine.conventions.keywords import is_reserved
from naming_spine.conventions.kinds import Convention, ObjectKind, Shape, rule_for
from naming_spine.conventions.renderers import detect_convention
from naming_spine.conventions.transformer import assert_equivalent, parse_candidates, render
from naming_spine.core.errors import AmbiguousParse, InconsistentPair, UnrecognizedIdentifier
from naming_spine.core.logging import get_logger
from naming_spine.core.settings import NamingSettings, get_settings
from naming_spine.manifest import Manifest, ManifestEntry
from naming_spine.sql_scan import ScannedIdentifier, scan_sql

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Diagnostic model
# ---------------------------------------------------------------------------


class Severity(str, Enum):
    """Severity level for a lint diagnostic."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class LintDiagnostic:
    """A single lint finding.

    Attributes:
        code: Short identifier (e.g. ``"E001"``).
        severity: ``error``, ``warning``, or ``info``.
        message: Human-readable description.
        identifier: The identifier text at fault (if applicable).
        subject: Where it was found: a manifest entry or ``file:line``.
        suggestion: Recommended fix (optional).
    """

    code: str
    severity: Severity
    message: str
    identifier: str | None = None
    subject: str | None = None
    suggestion: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "severity": self.severity.value,
            "message": self.message,
            "identifier": self.identifier,
            "subject": self.subject,
            "suggestion": self.suggestion,
        }

    def __str__(self) -> str:
        prefix = f"[{self.code}] {self.severity.value.upper()}"
        location = f" at {self.subject}" if self.subject else ""
        hint = f" — {self.suggestion}" if self.suggestion else ""
        return f"{prefix}{location}: {self.message}{hint}"


@dataclass
class LintResult:
    """Aggregated result of linting one manifest or SQL file.

    Attributes:
        source: Manifest name or file path.
        diagnostics: All findings from all rules.
    """

    source: str
    diagnostics: list[LintDiagnostic] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        """True if there are no error-level diagnostics."""
        return not any(d.severity == Severity.ERROR for d in self.diagnostics)

    @property
    def errors(self) -> list[LintDiagnostic]:
        return [d for d in self.diagnostics if d.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[LintDiagnostic]:
        return [d for d in self.diagnostics if d.severity == Severity.WARNING]

    @property
    def infos(self) -> list[LintDiagnostic]:
        return [d for d in self.diagnostics if d.severity == Severity.INFO]

    def passed_strict(self) -> bool:
        """True if there are neither errors nor warnings."""
        return self.passed and not self.warnings

    def summary(self) -> str:
        """One-line summary of the lint result."""
        counts = {
            "errors": len(self.errors),
            "warnings": len(self.warnings),
            "infos": len(self.infos),
        }
        status = "PASS" if self.passed else "FAIL"
        parts = [f"{status}: {self.source}"]
        for label, count in counts.items():
            if count:
                parts.append(f"{count} {label}")
        return " | ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source,
            "passed": self.passed,
            "errors": len(self.errors),
            "warnings": len(self.warnings),
            "infos": len(self.infos),
            "diagnostics": [d.to_dict() for d in self.diagnostics],
        }

    def __str__(self) -> str:
        lines = [self.summary()]
        for d in self.diagnostics:
            lines.append(f"  {d}")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Lint context
# ---------------------------------------------------------------------------


@dataclass
class LintContext:
    """What every manifest rule sees.

    Renderings are computed once per entry and shared by all rules.
    """

    manifest: Manifest
    settings: NamingSettings
    catalog: Catalog = field(default_factory=Catalog)
    renderings: dict[int, dict[Convention, str]] = field(default_factory=dict)

    @classmethod
    def build(cls, manifest: Manifest, settings: NamingSettings) -> LintContext:
        renderings = {
            entry.index: {c: render(entry.descriptor, c) for c in Convention} for entry in manifest.entries
        }
        return cls(manifest=manifest, settings=settings, catalog=manifest.catalog(), renderings=renderings)

    def rendered(self, entry: ManifestEntry, convention: Convention) -> str:
        return self.renderings[entry.index][convention]


# ---------------------------------------------------------------------------
# Rule registry
# ---------------------------------------------------------------------------

# Type alias for lint rules: takes a LintContext, returns diagnostics
LintRule = Callable[[LintContext], list[LintDiagnostic]]

_RULES: list[tuple[str, LintRule]] = []


def register_lint_rule(name: str, rule: LintRule) -> None:
    """Register a custom manifest lint rule.

    Parameters
    ----------
    name
        Human-readable rule name (e.g. ``"check_prefix"``).
    rule
        Callable that takes a ``LintContext`` and returns a list of
        ``LintDiagnostic`` objects.
    """
    _RULES.append((name, rule))
    logger.debug("lint_rule_registered", rule=name)


def list_lint_rules() -> list[str]:
    """Return names of all registered lint rules (built-in + custom)."""
    return [name for name, _ in _BUILT_IN_RULES] + [name for name, _ in _RULES]


def clear_custom_rules() -> None:
    """Remove all custom lint rules (built-in rules are preserved)."""
    _RULES.clear()


# ---------------------------------------------------------------------------
# Built-in rules
# ---------------------------------------------------------------------------


def _declared_mismatch(ctx: LintContext, convention: Convention, code: str) -> list[LintDiagnostic]:
    diagnostics: list[LintDiagnostic] = []
    for entry in ctx.manifest.entries:
        declared = entry.expected(convention)
        if declared is None:
            continue
        rendered = ctx.rendered(entry, convention)
        if declared.strip() != rendered:
            diagnostics.append(
                LintDiagnostic(
                    code=code,
                    severity=Severity.ERROR,
                    message=f"declared {convention.label} {declared!r} differs from the grid rendering {rendered!r}",
                    identifier=declared,
                    subject=entry.label,
                    suggestion=f"Rename to {rendered}",
                )
            )
    return diagnostics


def _check_declared_snake(ctx: LintContext) -> list[LintDiagnostic]:
    """E001: Declared snake_case rendering differs from the grid."""
    return _declared_mismatch(ctx, Convention.SNAKE_CASE, "E001")


def _check_declared_pascal(ctx: LintContext) -> list[LintDiagnostic]:
    """E002: Declared PascalCase rendering differs from the grid."""
    return _declared_mismatch(ctx, Convention.PASCAL_CASE, "E002")


def _check_declared_pairs(ctx: LintContext) -> list[LintDiagnostic]:
    """E003: Declared snake/Pascal pair does not name one object.

    Pairs that both match the grid are equivalent by construction and
    are not re-parsed.
    """
    diagnostics: list[LintDiagnostic] = []
    for entry in ctx.manifest.entries:
        snake, pascal = entry.expect_snake, entry.expect_pascal
        if snake is None or pascal is None:
            continue
        if snake.strip() == ctx.rendered(entry, Convention.SNAKE_CASE) and pascal.strip() == ctx.rendered(
            entry, Convention.PASCAL_CASE
        ):
            continue
        try:
            assert_equivalent(snake.strip(), pascal.strip(), kind=entry.descriptor.kind, catalog=ctx.catalog)
        except InconsistentPair as e:
            fields = ", ".join(sorted(e.differences))
            diagnostics.append(
                LintDiagnostic(
                    code="E003",
                    severity=Severity.ERROR,
                    message=f"{snake!r} and {pascal!r} differ in {fields}",
                    identifier=pascal,
                    subject=entry.label,
                    suggestion="Make both renderings describe the same object",
                )
            )
        except (AmbiguousParse, UnrecognizedIdentifier) as e:
            diagnostics.append(
                LintDiagnostic(
                    code="E003",
                    severity=Severity.ERROR,
                    message=f"pair cannot be compared: {e.message}",
                    identifier=e.context.identifier,
                    subject=entry.label,
                )
            )
    return diagnostics


def _check_duplicates(ctx: LintContext) -> list[LintDiagnostic]:
    """E004: Two entries render to the same identifier."""
    diagnostics: list[LintDiagnostic] = []
    for convention in Convention:
        seen: dict[str, list[ManifestEntry]] = defaultdict(list)
        for entry in ctx.manifest.entries:
            seen[ctx.rendered(entry, convention)].append(entry)
        for rendered, entries in seen.items():
            if len(entries) < 2:
                continue
            indexes = ", ".join(f"identifiers[{e.index}]" for e in entries)
            all_fks = all(e.descriptor.kind is ObjectKind.FOREIGN_KEY for e in entries)
            diagnostics.append(
                LintDiagnostic(
                    code="E004",
                    severity=Severity.ERROR,
                    message=f"{convention.label} rendering {rendered!r} is produced by {indexes}",
                    identifier=rendered,
                    subject=entries[-1].label,
                    suggestion=(
                        "Give each foreign key a distinct ordinal"
                        if all_fks
                        else "Rename or remove the duplicate entry"
                    ),
                )
            )
    return diagnostics


def _name_parts(rendered: str) -> list[str]:
    return [part.strip('"') for part in rendered.replace('"."', ".").split(".")]


def _check_length(ctx: LintContext) -> list[LintDiagnostic]:
    """E005: A rendered name part exceeds the identifier length limit."""
    limit = ctx.settings.max_identifier_length
    diagnostics: list[LintDiagnostic] = []
    for entry in ctx.manifest.entries:
        for convention in Convention:
            rendered = ctx.rendered(entry, convention)
            for part in _name_parts(rendered):
                size = len(part.encode("utf-8"))
                if size > limit:
                    diagnostics.append(
                        LintDiagnostic(
                            code="E005",
                            severity=Severity.ERROR,
                            message=f"{convention.label} name {part!r} is {size} bytes; limit is {limit}",
                            identifier=rendered,
                            subject=entry.label,
                            suggestion="Shorten the logical name or qualifiers; PostgreSQL truncates silently",
                        )
                    )
    return diagnostics


def _check_reserved_words(ctx: LintContext) -> list[LintDiagnostic]:
    """W001: Unqualified snake_case name is a reserved key word."""
    diagnostics: list[LintDiagnostic] = []
    for entry in ctx.manifest.entries:
        rendered = ctx.rendered(entry, Convention.SNAKE_CASE)
        shape = rule_for(entry.descriptor.kind).shape
        if shape is Shape.BARE:
            word = rendered
        elif shape is Shape.QUALIFIED:
            # names after the dot may be key words; the schema may not
            word = rendered.split(".", 1)[0]
        else:
            continue
        if is_reserved(word):
            diagnostics.append(
                LintDiagnostic(
                    code="W001",
                    severity=Severity.WARNING,
                    message=f"{word!r} is a PostgreSQL reserved key word and must be quoted in snake_case SQL",
                    identifier=rendered,
                    subject=entry.label,
                    suggestion="Choose a different logical name",
                )
            )
    return diagnostics


def _check_undeclared_tables(ctx: LintContext) -> list[LintDiagnostic]:
    """W002: Foreign key, junction or owned object points at an undeclared table.

    Only runs when the manifest declares at least one table.
    """
    declared = {
        (e.descriptor.schema_name, e.descriptor.logical_name)
        for e in ctx.manifest.entries
        if e.descriptor.kind is ObjectKind.TABLE
    }
    if not declared:
        return []
    diagnostics: list[LintDiagnostic] = []
    for entry in ctx.manifest.entries:
        d = entry.descriptor
        wanted: list[tuple[str, tuple[str | None, str]]] = []
        if rule_for(d.kind).owned:
            wanted.append(("owning", (d.schema_name, d.logical_name)))
        for ref in d.referenced_objects:
            wanted.append(("referenced", (ref.schema_name or d.schema_name, ref.logical_name)))
        for role, (schema, table) in wanted:
            if (schema, table) not in declared:
                diagnostics.append(
                    LintDiagnostic(
                        code="W002",
                        severity=Severity.WARNING,
                        message=f"{role} table {schema}.{table} is not declared in the manifest",
                        subject=entry.label,
                        suggestion=f"Add a 'table' entry for {table} in schema {schema}",
                    )
                )
    return diagnostics


def _check_missing_primary_keys(ctx: LintContext) -> list[LintDiagnostic]:
    """I001: Declared table has no primary-key entry."""
    keyed = {
        (e.descriptor.schema_name, e.descriptor.logical_name)
        for e in ctx.manifest.entries
        if e.descriptor.kind is ObjectKind.PRIMARY_KEY
    }
    return [
        LintDiagnostic(
            code="I001",
            severity=Severity.INFO,
            message=f"table {e.descriptor.schema_name}.{e.descriptor.logical_name} has no primary-key entry",
            identifier=ctx.rendered(e, Convention.SNAKE_CASE),
            subject=e.label,
            suggestion="Declare its primary key so its constraint name is checked too",
        )
        for e in ctx.manifest.entries
        if e.descriptor.kind is ObjectKind.TABLE
        and (e.descriptor.schema_name, e.descriptor.logical_name) not in keyed
    ]


# Ordered list of built-in rules
_BUILT_IN_RULES: list[tuple[str, LintRule]] = [
    ("declared_snake", _check_declared_snake),
    ("declared_pascal", _check_declared_pascal),
    ("declared_pairs", _check_declared_pairs),
    ("duplicates", _check_duplicates),
    ("length", _check_length),
    ("reserved_words", _check_reserved_words),
    ("undeclared_tables", _check_undeclared_tables),
    ("missing_primary_keys", _check_missing_primary_keys),
]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def lint_manifest(
    manifest: Manifest,
    settings: NamingSettings | None = None,
    *,
    include_infos: bool = True,
    extra_rules: list[LintRule] | None = None,
) -> LintResult:
    """Run all lint rules against a manifest.

    Parameters
    ----------
    manifest
        The manifest to lint.
    settings
        Limits (identifier length); defaults to :func:`get_settings`.
    include_infos
        Whether to include info-level diagnostics (default True).
    extra_rules
        Additional one-off rules (not registered globally).

    Returns
    -------
    LintResult
        Aggregated diagnostics.
    """
    ctx = LintContext.build(manifest, settings or get_settings())
    diagnostics: list[LintDiagnostic] = []

    all_rules = list(_BUILT_IN_RULES) + list(_RULES)
    if extra_rules:
        all_rules.extend((f"extra_{i}", r) for i, r in enumerate(extra_rules))

    for name, rule in all_rules:
        try:
            diagnostics.extend(rule(ctx))
        except Exception:
            logger.warning("lint_rule_failed", rule=name, exc_info=True)
            diagnostics.append(
                LintDiagnostic(
                    code="X001",
                    severity=Severity.WARNING,
                    message=f"Lint rule '{name}' raised an exception",
                    suggestion="Check the rule implementation",
                )
            )

    if not include_infos:
        diagnostics = [d for d in diagnostics if d.severity != Severity.INFO]

    result = LintResult(source=manifest.name, diagnostics=diagnostics)
    logger.debug("manifest_linted", summary=result.summary())
    return result


# ---------------------------------------------------------------------------
# DDL linting
# ---------------------------------------------------------------------------

_CATALOG_KINDS = frozenset(
    {ObjectKind.SCHEMA, ObjectKind.TABLE, ObjectKind.AUDIT_TABLE, ObjectKind.JUNCTION_TABLE, ObjectKind.PARTITION}
)


def _sql_catalog(scanned: list[ScannedIdentifier]) -> Catalog:
    """Schemas and tables declared by the DDL itself.

    Names that do not parse cleanly are left out; they are reported by the
    main pass.
    """
    found: list[IdentifierDescriptor] = []
    for item in scanned:
        if not item.kinds & _CATALOG_KINDS:
            continue
        try:
            candidates = parse_candidates(item.identifier, kind=item.kinds)
        except UnrecognizedIdentifier:
            continue
        if len(candidates) == 1:
            found.append(candidates[0])
    return Catalog.from_descriptors(found)


def _kind_label(kinds: frozenset[ObjectKind]) -> str:
    return " or ".join(sorted(k.value for k in kinds))


def lint_sql(
    text: str,
    convention: Convention | str | None = None,
    source: str = "<sql>",
) -> LintResult:
    """Check every object name declared in DDL ``text``.

    Parameters
    ----------
    text
        SQL source.
    convention
        Require this convention; names in the other one are ``E103``.
    source
        File name used in diagnostics.
    """
    required = Convention.parse(convention) if convention is not None else None
    scanned = scan_sql(text)
    catalog = _sql_catalog(scanned)
    diagnostics: list[LintDiagnostic] = []
    used: dict[Convention, int] = defaultdict(int)

    for item in scanned:
        where = f"{source}:{item.line}"
        detected = detect_convention(item.identifier)
        if detected is not None:
            used[detected] += 1
        if required is not None and detected is not None and detected is not required:
            diagnostics.append(
                LintDiagnostic(
                    code="E103",
                    severity=Severity.ERROR,
                    message=f"{item.statement} name is {detected.label}, expected {required.label}",
                    identifier=item.identifier,
                    subject=where,
                )
            )
            continue
        try:
            candidates = parse_candidates(item.identifier, kind=item.kinds, catalog=catalog)
        except UnrecognizedIdentifier as e:
            candidates = []
            reason = e.message
        else:
            reason = f"{item.identifier!r} does not follow the naming grid as {_kind_label(item.kinds)}"
        if not candidates:
            diagnostics.append(
                LintDiagnostic(
                    code="E101",
                    severity=Severity.ERROR,
                    message=f"{item.statement}: {reason}",
                    identifier=item.identifier,
                    subject=where,
                )
            )
        elif len(candidates) > 1:
            options = "; ".join(str(c) for c in candidates)
            diagnostics.append(
                LintDiagnostic(
                    code="E102",
                    severity=Severity.ERROR,
                    message=f"{item.statement}: {item.identifier!r} is ambiguous ({options})",
                    identifier=item.identifier,
                    subject=where,
                    suggestion="Declare the schema and table it belongs to in the same file",
                )
            )

    if len(used) > 1:
        diagnostics.append(
            LintDiagnostic(
                code="W101",
                severity=Severity.WARNING,
                message=(
                    f"file mixes conventions: {used[Convention.SNAKE_CASE]} snake_case and "
                    f"{used[Convention.PASCAL_CASE]} PascalCase names"
                ),
                subject=source,
                suggestion="Pick one convention per schema",
            )
        )

    result = LintResult(source=source, diagnostics=diagnostics)
    logger.debug("sql_linted", summary=result.summary(), names=len(scanned))
    return result
