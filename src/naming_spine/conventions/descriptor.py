"""
Identifier descriptors — the convention-independent name of a database object.

An :class:`IdentifierDescriptor` says *what* is being named (kind, logical
name, schema, referenced tables, qualifiers) and nothing about *how*.  Both
renderers consume the same descriptor, and both parsers produce one, so a
snake_case and a PascalCase identifier can be compared field by field.

Descriptors are immutable and validated on construction: every valid
descriptor renders to exactly one string per convention.  Names are stored
in canonical PascalCase (``"order line"``, ``"order_line"`` and
``"OrderLine"`` are the same logical name).  The one exception is a
snake_case spelling that reads as a rendered constraint (``line_item_key``,
``customer_account_default``): it is refused as already rendered, while
``"LineItemKey"`` and ``"Line Item Key"`` are accepted.

Manifesto:
    - **One canonical record:** Two conventions, one source of truth
    - **Fail at construction:** A descriptor that exists can be rendered
    - **Immutable:** Parsing and normalising produce new objects

Examples:
    >>> d = IdentifierDescriptor(ObjectKind.TABLE, "order line", schema_name="sales")
    >>> d.logical_name, d.schema_name
    ('OrderLine', 'Sales')
    >>> str(d)
    'table Sales.OrderLine'

Tags:
    naming-spine, descriptor, value-object, validation

Doc-Types:
    - API Reference
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

from naming_spine.conventions.kinds import (
    CONSTRAINT_SUFFIXES,
    PASCAL_PREFIXES,
    Convention,
    ObjectKind,
    Requirement,
    rule_for,
)
from naming_spine.conventions.words import canonical, is_plain_name, split_words
from naming_spine.core.errors import MalformedDescriptor

_PASCAL_RENDERED_RE = re.compile(r"^(%s)_" % "|".join(sorted(PASCAL_PREFIXES, key=len, reverse=True)))
_SNAKE_RENDERED_RE = re.compile(r"^[a-z0-9]+(_[a-z0-9]+){1,}_(%s)$" % "|".join(sorted(CONSTRAINT_SUFFIXES)))


def _check_name(value: Any, field_name: str, *, allow_leading_digit: bool = False) -> str:
    """Validate one raw name and return its canonical PascalCase form."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise MalformedDescriptor(f"{field_name} is required", field=field_name)
    if not isinstance(value, str):
        raise MalformedDescriptor(f"{field_name} must be a string, got {type(value).__name__}", field=field_name)

    text = value.strip()
    if '"' in text or "." in text:
        raise MalformedDescriptor(
            f"{field_name} {text!r} looks like a rendered identifier; give the logical name instead",
            field=field_name,
        )
    if _PASCAL_RENDERED_RE.match(text):
        raise MalformedDescriptor(
            f"{field_name} {text!r} is already a rendered constraint/object name",
            field=field_name,
        )
    # Only the rendered spelling is refused; LineItemKey names the same words
    if _SNAKE_RENDERED_RE.match(text):
        raise MalformedDescriptor(
            f"{field_name} {text!r} is already a rendered constraint/object name; "
            f"write it as {canonical(text)!r} if that is the logical name",
            field=field_name,
        )
    if not text.isascii():
        raise MalformedDescriptor(
            f"{field_name} {text!r} contains non-ASCII characters; case folding would depend on locale",
            field=field_name,
        )
    if not is_plain_name(text):
        raise MalformedDescriptor(f"{field_name} {text!r} contains invalid characters", field=field_name)

    words = split_words(text)
    if not words:
        raise MalformedDescriptor(f"{field_name} is required", field=field_name)
    if not allow_leading_digit and words[0][0].isdigit():
        raise MalformedDescriptor(f"{field_name} {text!r} must start with a letter", field=field_name)
    return canonical(text)


@dataclass(frozen=True)
class TableRef:
    """A referenced table (foreign-key target, second junction table).

    ``schema_name`` is ``None`` when the schema is unknown or is the
    referencing object's own schema.
    """

    logical_name: str
    schema_name: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "logical_name", _check_name(self.logical_name, "referenced logical_name"))
        if self.schema_name is not None:
            object.__setattr__(self, "schema_name", _check_name(self.schema_name, "referenced schema_name"))

    @classmethod
    def coerce(cls, value: Any) -> TableRef:
        """Build from a ``TableRef``, a table descriptor, a mapping or a name."""
        if isinstance(value, TableRef):
            return value
        if isinstance(value, IdentifierDescriptor):
            return cls(value.logical_name, value.schema_name)
        if isinstance(value, dict):
            name = value.get("logical_name", value.get("logicalName", value.get("name")))
            schema = value.get("schema_name", value.get("schemaName", value.get("schema")))
            return cls(name, schema)
        if isinstance(value, str):
            return cls(value)
        raise MalformedDescriptor(f"Cannot use {value!r} as a referenced table", field="referenced_objects")

    def __str__(self) -> str:
        return f"{self.schema_name}.{self.logical_name}" if self.schema_name else self.logical_name


@dataclass(frozen=True)
class IdentifierDescriptor:
    """
    Convention-independent description of one database object name.

    Attributes:
        kind: Object kind (coerced from string; unknown kinds raise
            ``UnsupportedObjectKind``).
        logical_name: Business concept; the owning table for constraints,
            indexes, triggers, sequences, partitions, audit and junction tables.
        schema_name: Owning schema.
        referenced_objects: Referenced tables (foreign key / junction table).
        qualifiers: Columns, trigger purpose or partition key, in declared order.
        ordinal: Numeric disambiguator for foreign keys.
        convention: Convention a parsed descriptor came from (not compared).
    """

    kind: ObjectKind
    logical_name: str
    schema_name: str | None = None
    referenced_objects: tuple[TableRef, ...] = ()
    qualifiers: tuple[str, ...] = ()
    ordinal: int | None = None
    convention: Convention | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        kind = ObjectKind.parse(self.kind)
        rule = rule_for(kind)
        object.__setattr__(self, "kind", kind)
        object.__setattr__(self, "logical_name", _check_name(self.logical_name, "logical_name"))
        if self.convention is not None:
            object.__setattr__(self, "convention", Convention.parse(self.convention))

        label = f"{kind.value} {self.logical_name}"

        # schema
        schema = self.schema_name
        if schema is not None:
            schema = _check_name(schema, "schema_name")
        if kind is ObjectKind.SCHEMA:
            if schema is not None and schema != self.logical_name:
                raise MalformedDescriptor(
                    f"schema descriptor {self.logical_name!r} cannot sit in schema {schema!r}",
                    field="schema_name",
                ).with_context(descriptor=label, rule="schema-self")
            schema = None
        elif rule.schema is Requirement.REQUIRED and schema is None:
            raise MalformedDescriptor(f"{kind.value} requires a schema_name", field="schema_name").with_context(
                descriptor=label, rule="schema-required"
            )
        elif rule.schema is Requirement.FORBIDDEN and schema is not None:
            raise MalformedDescriptor(
                f"{kind.value} names are not schema-qualified; drop schema_name", field="schema_name"
            ).with_context(descriptor=label, rule="schema-forbidden")
        object.__setattr__(self, "schema_name", schema)

        # referenced objects
        refs = tuple(TableRef.coerce(r) for r in (self.referenced_objects or ()))
        if rule.references:
            if len(refs) != 1:
                raise MalformedDescriptor(
                    f"{kind.value} requires exactly one referenced table, got {len(refs)}",
                    field="referenced_objects",
                ).with_context(descriptor=label, rule="one-reference")
            if kind is ObjectKind.JUNCTION_TABLE and refs[0].schema_name not in (None, schema):
                raise MalformedDescriptor(
                    "junction-table must link tables in its own schema",
                    field="referenced_objects",
                ).with_context(descriptor=label, rule="junction-same-schema")
            if kind is ObjectKind.JUNCTION_TABLE:
                refs = (TableRef(refs[0].logical_name),)
        elif refs:
            raise MalformedDescriptor(
                f"{kind.value} does not take referenced objects", field="referenced_objects"
            ).with_context(descriptor=label, rule="no-references")
        object.__setattr__(self, "referenced_objects", refs)

        # qualifiers
        if isinstance(self.qualifiers, str):
            raw_qualifiers: Sequence[Any] = (self.qualifiers,)
        else:
            raw_qualifiers = tuple(self.qualifiers or ())
        qualifiers = tuple(_check_name(q, "qualifier", allow_leading_digit=True) for q in raw_qualifiers)
        if rule.qualifiers is Requirement.REQUIRED and not qualifiers:
            raise MalformedDescriptor(
                f"{kind.value} requires at least one qualifier (column, purpose or key)", field="qualifiers"
            ).with_context(descriptor=label, rule="qualifier-required")
        if rule.qualifiers is Requirement.FORBIDDEN and qualifiers:
            raise MalformedDescriptor(f"{kind.value} does not take qualifiers", field="qualifiers").with_context(
                descriptor=label, rule="qualifier-forbidden"
            )
        object.__setattr__(self, "qualifiers", qualifiers)

        # ordinal
        if self.ordinal is not None:
            if not rule.ordinal:
                raise MalformedDescriptor(f"{kind.value} does not take an ordinal", field="ordinal").with_context(
                    descriptor=label, rule="ordinal-forbidden"
                )
            if isinstance(self.ordinal, bool) or not isinstance(self.ordinal, int) or self.ordinal < 1:
                raise MalformedDescriptor("ordinal must be a positive integer", field="ordinal").with_context(
                    descriptor=label, rule="ordinal-positive"
                )

    # ------------------------------------------------------------------ #
    # Derived views
    # ------------------------------------------------------------------ #

    @property
    def words(self) -> tuple[str, ...]:
        return split_words(self.logical_name)

    @property
    def schema_words(self) -> tuple[str, ...]:
        return split_words(self.schema_name) if self.schema_name else ()

    @property
    def qualifier_words(self) -> tuple[str, ...]:
        """Qualifier words run together; snake_case cannot keep boundaries."""
        return tuple(w for q in self.qualifiers for w in split_words(q))

    @property
    def referenced(self) -> TableRef | None:
        return self.referenced_objects[0] if self.referenced_objects else None

    def signature(self) -> dict[str, Any]:
        """Fields compared by the equivalence check."""
        ref = self.referenced
        return {
            "kind": self.kind,
            "logical_name": self.logical_name,
            "schema_name": self.schema_name,
            "referenced_table": ref.logical_name if ref else None,
            "referenced_schema": ref.schema_name if ref else None,
            "qualifiers": self.qualifier_words,
            "ordinal": self.ordinal,
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "logical_name": self.logical_name,
            "schema_name": self.schema_name,
            "referenced_objects": [
                {"logical_name": r.logical_name, "schema_name": r.schema_name} for r in self.referenced_objects
            ],
            "qualifiers": list(self.qualifiers),
            "ordinal": self.ordinal,
            "convention": self.convention.value if self.convention else None,
        }

    def __str__(self) -> str:
        name = f"{self.schema_name}.{self.logical_name}" if self.schema_name else self.logical_name
        parts = [f"{self.kind.value} {name}"]
        if self.referenced_objects:
            parts.append("-> " + ", ".join(str(r) for r in self.referenced_objects))
        if self.qualifiers:
            parts.append("(" + ", ".join(self.qualifiers) + ")")
        if self.ordinal is not None:
            parts.append(f"#{self.ordinal}")
        return " ".join(parts)


@dataclass(frozen=True)
class Catalog:
    """Known schemas and tables, used to split multi-word snake_case names.

    Names are canonical PascalCase.  An empty dimension filters nothing.
    """

    schemas: frozenset[str] = frozenset()
    tables: frozenset[tuple[str, str]] = frozenset()

    @classmethod
    def build(
        cls,
        schemas: Iterable[str] = (),
        tables: Iterable[tuple[str, str] | str] = (),
    ) -> Catalog:
        """Build from raw names; tables may be ``(schema, table)`` or ``"schema.table"``."""
        schema_set = {canonical(s) for s in schemas}
        table_set: set[tuple[str, str]] = set()
        for t in tables:
            if isinstance(t, str):
                schema, _, name = t.partition(".")
                if not name:
                    raise MalformedDescriptor(f"catalog table {t!r} must be schema-qualified", field="tables")
            else:
                schema, name = t
            table_set.add((canonical(schema), canonical(name)))
        schema_set.update(s for s, _ in table_set)
        return cls(frozenset(schema_set), frozenset(table_set))

    @classmethod
    def from_descriptors(cls, descriptors: Iterable[IdentifierDescriptor]) -> Catalog:
        """Collect schemas, tables and owning tables from declared descriptors."""
        schemas: set[str] = set()
        tables: set[tuple[str, str]] = set()
        for d in descriptors:
            rule = rule_for(d.kind)
            if d.kind is ObjectKind.SCHEMA:
                schemas.add(d.logical_name)
                continue
            if d.schema_name:
                schemas.add(d.schema_name)
            if d.schema_name and (d.kind is ObjectKind.TABLE or rule.owned):
                tables.add((d.schema_name, d.logical_name))
            for ref in d.referenced_objects:
                ref_schema = ref.schema_name or d.schema_name
                if ref_schema:
                    tables.add((ref_schema, ref.logical_name))
        return cls(frozenset(schemas), frozenset(tables))

    def __bool__(self) -> bool:
        return bool(self.schemas or self.tables)

    def has_schema(self, schema: str) -> bool:
        return not self.schemas or schema in self.schemas

    def has_table(self, schema: str, table: str) -> bool:
        return not self.tables or (schema, table) in self.tables

    def schemas_with_table(self, table: str) -> list[str]:
        return sorted(s for s, t in self.tables if t == table)

    def knows_table_name(self, table: str) -> bool:
        return not self.tables or any(t == table for _, t in self.tables)
