"""
DDL scanner — pull object names out of PostgreSQL DDL text.

The scanner is a set of regular expressions, not a SQL parser: it finds the
name in each ``CREATE ...`` statement and each named ``CONSTRAINT`` and
reports which object kinds that name may legally be.  The linter then
checks every name against the naming grid.

Comments and string literals are blanked out first (newlines kept, so line
numbers stay correct).

Example:
    >>> [s.identifier for s in scan_sql("CREATE TABLE inventory.product (id int);")]
    ['inventory.product', 'id']
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from naming_spine.conventions.kinds import ObjectKind

K = ObjectKind

# ============================================================================
# Token patterns
# ============================================================================

# One identifier part: "Quoted Name" or bare_name
_PART = r'(?:"[^"]+"|[A-Za-z_][A-Za-z0-9_$]*)'

# Optionally schema-qualified name
# Example: inventory.product, "Inventory"."Product"
_NAME = rf"(?P<name>{_PART}(?:\s*\.\s*{_PART})?)"

_IF_NOT_EXISTS = r"(?:IF\s+NOT\s+EXISTS\s+)?"

# Comments and string literals, blanked before scanning
_NOISE_PATTERN = re.compile(r"--[^\n]*|/\*.*?\*/|'(?:[^']|'')*'", re.DOTALL)


# ============================================================================
# Statement patterns
# ============================================================================

# Example: CREATE SCHEMA IF NOT EXISTS inventory
CREATE_SCHEMA_PATTERN = re.compile(rf"\bCREATE\s+SCHEMA\s+{_IF_NOT_EXISTS}{_NAME}", re.IGNORECASE)

# Example: CREATE TEMP TABLE tmp_product (...)
# Example: CREATE TABLE sales.order_2024_part PARTITION OF sales.order ...
CREATE_TABLE_PATTERN = re.compile(
    rf"\bCREATE\s+(?:(?P<temp>(?:GLOBAL\s+|LOCAL\s+)?TEMP(?:ORARY)?)\s+|UNLOGGED\s+)?TABLE\s+"
    rf"{_IF_NOT_EXISTS}{_NAME}\s*(?P<partition>PARTITION\s+OF\b)?",
    re.IGNORECASE,
)

# Example: CONSTRAINT inventory_product_pky PRIMARY KEY (id)
CONSTRAINT_PATTERN = re.compile(
    rf"\bCONSTRAINT\s+{_NAME}\s+(?P<type>PRIMARY\s+KEY|FOREIGN\s+KEY|REFERENCES|CHECK|UNIQUE|DEFAULT)\b",
    re.IGNORECASE,
)

# Example: CREATE UNIQUE INDEX CONCURRENTLY IF NOT EXISTS sales_order_number_idx ON ...
CREATE_INDEX_PATTERN = re.compile(
    rf"\bCREATE\s+(?P<unique>UNIQUE\s+)?INDEX\s+(?:CONCURRENTLY\s+)?{_IF_NOT_EXISTS}{_NAME}\s+ON\b",
    re.IGNORECASE,
)

# Example: CREATE OR REPLACE MATERIALIZED VIEW sales.revenue_mview AS ...
CREATE_VIEW_PATTERN = re.compile(
    rf"\bCREATE\s+(?:OR\s+REPLACE\s+)?(?:TEMP(?:ORARY)?\s+)?(?P<materialized>MATERIALIZED\s+)?VIEW\s+"
    rf"{_IF_NOT_EXISTS}{_NAME}",
    re.IGNORECASE,
)

# Example: CREATE OR REPLACE FUNCTION inventory.reorder_level_fn(...)
CREATE_FUNCTION_PATTERN = re.compile(
    rf"\bCREATE\s+(?:OR\s+REPLACE\s+)?(?:FUNCTION|PROCEDURE)\s+{_NAME}\s*\(",
    re.IGNORECASE,
)

# Example: CREATE TRIGGER inventory_product_audit_trg AFTER UPDATE ON ...
CREATE_TRIGGER_PATTERN = re.compile(
    rf"\bCREATE\s+(?:OR\s+REPLACE\s+)?(?:CONSTRAINT\s+)?TRIGGER\s+{_NAME}",
    re.IGNORECASE,
)

# Example: CREATE SEQUENCE inventory.product_id_seq
CREATE_SEQUENCE_PATTERN = re.compile(
    rf"\bCREATE\s+(?:TEMP(?:ORARY)?\s+|UNLOGGED\s+)?SEQUENCE\s+{_IF_NOT_EXISTS}{_NAME}",
    re.IGNORECASE,
)

# Example: CREATE TYPE sales.status_enum AS ENUM (...)
# Example: CREATE TYPE sales.address_type AS (...)
CREATE_TYPE_PATTERN = re.compile(
    rf"\bCREATE\s+TYPE\s+{_NAME}\s+AS\s*(?P<enum>ENUM\b)?",
    re.IGNORECASE,
)

# Example: CREATE DOMAIN sales.email_domain AS text
CREATE_DOMAIN_PATTERN = re.compile(rf"\bCREATE\s+DOMAIN\s+{_NAME}", re.IGNORECASE)

# Opening parenthesis of a table body
_OPEN_PAREN_PATTERN = re.compile(r"\s*\(")

# First identifier of a column definition
_COLUMN_NAME_PATTERN = re.compile(rf"\s*(?P<name>{_PART})")

# Table-body items that are not column definitions
_TABLE_ITEM_KEYWORDS = frozenset({"CONSTRAINT", "PRIMARY", "FOREIGN", "UNIQUE", "CHECK", "EXCLUDE", "LIKE"})


@dataclass(frozen=True)
class ScannedIdentifier:
    """One object name found in DDL.

    Attributes:
        identifier: Name as written, whitespace around dots removed.
        kinds: Object kinds the statement allows the name to be.
        line: 1-based line number.
        statement: Short statement label (``CREATE TABLE``, ``CONSTRAINT``...).
    """

    identifier: str
    kinds: frozenset[ObjectKind]
    line: int
    statement: str


def strip_noise(sql: str) -> str:
    """Blank out comments and string literals, keeping newlines."""
    return _NOISE_PATTERN.sub(lambda m: re.sub(r"[^\n]", " ", m.group()), sql)


def _clean(name: str) -> str:
    return re.sub(r"\s*\.\s*", ".", name.strip())


def _line_of(text: str, pos: int) -> int:
    return text.count("\n", 0, pos) + 1


def _matching_paren(text: str, start: int) -> int:
    """Index of the ``)`` closing the ``(`` at ``start`` (or len(text))."""
    depth = 0
    for i in range(start, len(text)):
        ch = text[i]
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return i
    return len(text)


def _split_top_level(body: str, offset: int) -> list[tuple[str, int]]:
    """Split a table body on commas outside parentheses; keep offsets."""
    items: list[tuple[str, int]] = []
    depth = 0
    start = 0
    for i, ch in enumerate(body):
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        elif ch == "," and depth == 0:
            items.append((body[start:i], offset + start))
            start = i + 1
    items.append((body[start:], offset + start))
    return items


def _columns(text: str, after: int) -> list[tuple[int, ScannedIdentifier]]:
    """Column names from the parenthesised body starting at/after ``after``."""
    m = _OPEN_PAREN_PATTERN.match(text, after)
    if not m:
        return []
    open_pos = m.end() - 1
    close_pos = _matching_paren(text, open_pos)
    found: list[tuple[int, ScannedIdentifier]] = []
    for item, pos in _split_top_level(text[open_pos + 1 : close_pos], open_pos + 1):
        col = _COLUMN_NAME_PATTERN.match(item)
        if not col or col.group("name").upper() in _TABLE_ITEM_KEYWORDS:
            continue
        start = pos + col.start("name")
        found.append(
            (
                start,
                ScannedIdentifier(
                    identifier=col.group("name"),
                    kinds=frozenset({K.COLUMN}),
                    line=_line_of(text, start),
                    statement="COLUMN",
                ),
            )
        )
    return found


def scan_sql(sql: str) -> list[ScannedIdentifier]:
    """Every object name declared in ``sql``, in source order."""
    text = strip_noise(sql)
    found: list[tuple[int, ScannedIdentifier]] = []

    def add(match: re.Match, kinds: set[ObjectKind], statement: str) -> None:
        pos = match.start("name")
        found.append(
            (pos, ScannedIdentifier(_clean(match.group("name")), frozenset(kinds), _line_of(text, pos), statement))
        )

    for m in CREATE_SCHEMA_PATTERN.finditer(text):
        add(m, {K.SCHEMA}, "CREATE SCHEMA")

    for m in CREATE_TABLE_PATTERN.finditer(text):
        if m.group("partition"):
            add(m, {K.PARTITION}, "CREATE TABLE")
            continue
        if m.group("temp"):
            add(m, {K.TEMP_TABLE}, "CREATE TABLE")
        else:
            add(m, {K.TABLE, K.AUDIT_TABLE, K.JUNCTION_TABLE}, "CREATE TABLE")
        found.extend(_columns(text, m.end("name")))

    for m in CONSTRAINT_PATTERN.finditer(text):
        kind_word = m.group("type").split()[0].upper()
        kind = {
            "PRIMARY": K.PRIMARY_KEY,
            "FOREIGN": K.FOREIGN_KEY,
            "REFERENCES": K.FOREIGN_KEY,
            "CHECK": K.CHECK_CONSTRAINT,
            "UNIQUE": K.UNIQUE_CONSTRAINT,
            "DEFAULT": K.DEFAULT_CONSTRAINT,
        }[kind_word]
        add(m, {kind}, "CONSTRAINT")

    for m in CREATE_INDEX_PATTERN.finditer(text):
        add(m, {K.INDEX, K.UNIQUE_CONSTRAINT} if m.group("unique") else {K.INDEX}, "CREATE INDEX")

    for m in CREATE_VIEW_PATTERN.finditer(text):
        if m.group("materialized"):
            add(m, {K.MATERIALIZED_VIEW}, "CREATE MATERIALIZED VIEW")
        else:
            add(m, {K.VIEW}, "CREATE VIEW")

    for m in CREATE_FUNCTION_PATTERN.finditer(text):
        add(m, {K.FUNCTION}, "CREATE FUNCTION")

    for m in CREATE_TRIGGER_PATTERN.finditer(text):
        add(m, {K.TRIGGER}, "CREATE TRIGGER")

    for m in CREATE_SEQUENCE_PATTERN.finditer(text):
        add(m, {K.SEQUENCE}, "CREATE SEQUENCE")

    for m in CREATE_TYPE_PATTERN.finditer(text):
        add(m, {K.ENUM_TYPE} if m.group("enum") else {K.COMPOSITE_TYPE}, "CREATE TYPE")

    for m in CREATE_DOMAIN_PATTERN.finditer(text):
        add(m, {K.DOMAIN_TYPE}, "CREATE DOMAIN")

    return [s for _, s in sorted(found, key=lambda item: item[0])]
