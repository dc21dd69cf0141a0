"""
Object kinds, conventions, and the naming grid.

The grid is the single table both renderers read: for every
:class:`ObjectKind` it records the identifier *shape*, the snake_case
affix, the PascalCase prefix, and which descriptor fields the kind needs.
Keeping it in one place is what stops the two conventions drifting apart.

Grid::

    kind                snake_case            PascalCase
    ──────────────────  ────────────────────  ──────────────────────────
    schema              s                     "S"
    table               s.t                   "S"."T"
    column              c                     "C"
    temp-table          tmp_t                 "TMP_T"
    primary-key         s_t_pky               "PK_S_T"
    foreign-key         s_t_r[_n]_fky         "FK_S_T_RS_R[_N]"
    check-constraint    s_t[_q]_check         "CHK_S_T[_Q]"
    unique-constraint   s_t[_q]_key           "UQ_S_T[_Q]"
    default-constraint  s_t_q_default         "DF_S_T_Q"
    index               s_t_q_idx             "IX_S_T_Q"
    trigger             s_t_q_trg             "TR_S_T_Q"
    sequence            s.t_q_seq             "S"."SEQ_T_Q"
    view                s.t_view              "S"."VW_T"
    materialized-view   s.t_mview             "S"."MV_T"
    function            s.t_fn                "S"."FN_T"
    enum-type           s.t_enum              "S"."ENUM_T"
    domain-type         s.t_domain            "S"."DOM_T"
    composite-type      s.t_type              "S"."TYPE_T"
    partition           s.t_q_part            "S"."PART_T_Q"
    audit-table         s.t_audit             "S"."AUDIT_T"
    junction-table      s.t_r_map             "S"."MAP_T_R"
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from naming_spine.core.errors import UnsupportedObjectKind


class ObjectKind(str, Enum):
    """Every database object the naming grid covers."""

    SCHEMA = "schema"
    TABLE = "table"
    COLUMN = "column"
    PRIMARY_KEY = "primary-key"
    FOREIGN_KEY = "foreign-key"
    CHECK_CONSTRAINT = "check-constraint"
    UNIQUE_CONSTRAINT = "unique-constraint"
    DEFAULT_CONSTRAINT = "default-constraint"
    INDEX = "index"
    VIEW = "view"
    FUNCTION = "function"
    TRIGGER = "trigger"
    SEQUENCE = "sequence"
    MATERIALIZED_VIEW = "materialized-view"
    ENUM_TYPE = "enum-type"
    DOMAIN_TYPE = "domain-type"
    COMPOSITE_TYPE = "composite-type"
    PARTITION = "partition"
    TEMP_TABLE = "temp-table"
    AUDIT_TABLE = "audit-table"
    JUNCTION_TABLE = "junction-table"

    @classmethod
    def parse(cls, value: object) -> ObjectKind:
        """Coerce ``value`` to a kind, accepting ``primary_key``, ``PK``, etc.

        Raises:
            UnsupportedObjectKind: if no kind matches.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise UnsupportedObjectKind(value)
        key = value.strip().lower().replace("_", "-").replace(" ", "-")
        key = _KIND_ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            raise UnsupportedObjectKind(value) from None


_KIND_ALIASES = {
    "pk": "primary-key",
    "fk": "foreign-key",
    "check": "check-constraint",
    "unique": "unique-constraint",
    "default": "default-constraint",
    "mview": "materialized-view",
    "enum": "enum-type",
    "domain": "domain-type",
    "type": "composite-type",
    "temp": "temp-table",
    "audit": "audit-table",
    "junction": "junction-table",
}


class Convention(str, Enum):
    """The two naming conventions."""

    SNAKE_CASE = "snake"
    PASCAL_CASE = "pascal"

    @classmethod
    def parse(cls, value: object) -> Convention:
        """Coerce ``snake``, ``snake_case``, ``SnakeCase``, ``PascalCase``, ..."""
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower().replace("_", "").replace("-", "")
        if key in ("snake", "snakecase"):
            return cls.SNAKE_CASE
        if key in ("pascal", "pascalcase"):
            return cls.PASCAL_CASE
        raise ValueError(f"Unknown naming convention: {value!r}")

    @property
    def label(self) -> str:
        return "snake_case" if self is Convention.SNAKE_CASE else "PascalCase"


class Shape(str, Enum):
    """How an identifier is laid out, independent of convention."""

    # single unqualified name: schema, column, temp table
    BARE = "bare"
    # schema-qualified object name: s.t / "S"."T"
    QUALIFIED = "qualified"
    # unqualified name embedding schema and table: s_t_..._pky / "PK_S_T_..."
    CONSTRAINT = "constraint"


class Requirement(str, Enum):
    REQUIRED = "required"
    OPTIONAL = "optional"
    FORBIDDEN = "forbidden"


@dataclass(frozen=True)
class KindRule:
    """One row of the naming grid.

    Attributes:
        kind: The object kind.
        shape: Identifier layout.
        snake_suffix: Trailing word added in snake_case (``pky``, ``idx``, ...).
        snake_prefix: Leading word added in snake_case (``tmp``).
        pascal_prefix: Leading component in PascalCase (``PK``, ``IX``, ...).
        schema: Whether ``schema_name`` is required, optional or forbidden.
        qualifiers: Whether qualifiers are required, optional or forbidden.
        references: Whether the kind names one referenced table.
        owned: The logical name is the owning table (catalog-checked).
        ordinal: The kind accepts a numeric disambiguator.
    """

    kind: ObjectKind
    shape: Shape
    snake_suffix: str = ""
    snake_prefix: str = ""
    pascal_prefix: str = ""
    schema: Requirement = Requirement.REQUIRED
    qualifiers: Requirement = Requirement.FORBIDDEN
    references: bool = False
    owned: bool = False
    ordinal: bool = False

    @property
    def affixed(self) -> bool:
        return bool(self.snake_suffix or self.snake_prefix or self.pascal_prefix)


_R = Requirement

KIND_RULES: dict[ObjectKind, KindRule] = {
    rule.kind: rule
    for rule in (
        KindRule(ObjectKind.SCHEMA, Shape.BARE, schema=_R.FORBIDDEN),
        KindRule(ObjectKind.TABLE, Shape.QUALIFIED),
        KindRule(ObjectKind.COLUMN, Shape.BARE, schema=_R.FORBIDDEN),
        KindRule(
            ObjectKind.TEMP_TABLE, Shape.BARE, snake_prefix="tmp", pascal_prefix="TMP", schema=_R.FORBIDDEN
        ),
        KindRule(ObjectKind.PRIMARY_KEY, Shape.CONSTRAINT, "pky", pascal_prefix="PK", owned=True),
        KindRule(
            ObjectKind.FOREIGN_KEY,
            Shape.CONSTRAINT,
            "fky",
            pascal_prefix="FK",
            references=True,
            owned=True,
            ordinal=True,
        ),
        KindRule(
            ObjectKind.CHECK_CONSTRAINT,
            Shape.CONSTRAINT,
            "check",
            pascal_prefix="CHK",
            qualifiers=_R.OPTIONAL,
            owned=True,
        ),
        KindRule(
            ObjectKind.UNIQUE_CONSTRAINT,
            Shape.CONSTRAINT,
            "key",
            pascal_prefix="UQ",
            qualifiers=_R.OPTIONAL,
            owned=True,
        ),
        KindRule(
            ObjectKind.DEFAULT_CONSTRAINT,
            Shape.CONSTRAINT,
            "default",
            pascal_prefix="DF",
            qualifiers=_R.REQUIRED,
            owned=True,
        ),
        KindRule(ObjectKind.INDEX, Shape.CONSTRAINT, "idx", pascal_prefix="IX", qualifiers=_R.REQUIRED, owned=True),
        KindRule(ObjectKind.TRIGGER, Shape.CONSTRAINT, "trg", pascal_prefix="TR", qualifiers=_R.REQUIRED, owned=True),
        KindRule(
            ObjectKind.SEQUENCE, Shape.QUALIFIED, "seq", pascal_prefix="SEQ", qualifiers=_R.REQUIRED, owned=True
        ),
        KindRule(ObjectKind.VIEW, Shape.QUALIFIED, "view", pascal_prefix="VW"),
        KindRule(ObjectKind.MATERIALIZED_VIEW, Shape.QUALIFIED, "mview", pascal_prefix="MV"),
        KindRule(ObjectKind.FUNCTION, Shape.QUALIFIED, "fn", pascal_prefix="FN"),
        KindRule(ObjectKind.ENUM_TYPE, Shape.QUALIFIED, "enum", pascal_prefix="ENUM"),
        KindRule(ObjectKind.DOMAIN_TYPE, Shape.QUALIFIED, "domain", pascal_prefix="DOM"),
        KindRule(ObjectKind.COMPOSITE_TYPE, Shape.QUALIFIED, "type", pascal_prefix="TYPE"),
        KindRule(
            ObjectKind.PARTITION, Shape.QUALIFIED, "part", pascal_prefix="PART", qualifiers=_R.REQUIRED, owned=True
        ),
        KindRule(ObjectKind.AUDIT_TABLE, Shape.QUALIFIED, "audit", pascal_prefix="AUDIT", owned=True),
        KindRule(
            ObjectKind.JUNCTION_TABLE, Shape.QUALIFIED, "map", pascal_prefix="MAP", references=True, owned=True
        ),
    )
}

# Suffix words that end a rendered snake_case constraint name
CONSTRAINT_SUFFIXES = frozenset(
    rule.snake_suffix for rule in KIND_RULES.values() if rule.shape is Shape.CONSTRAINT
)

PASCAL_PREFIXES = frozenset(rule.pascal_prefix for rule in KIND_RULES.values() if rule.pascal_prefix)


def rule_for(kind: ObjectKind | str) -> KindRule:
    """Look up the grid row for ``kind``.

    Raises:
        UnsupportedObjectKind: for kinds outside the grid.
    """
    try:
        return KIND_RULES[ObjectKind.parse(kind)]
    except KeyError:
        raise UnsupportedObjectKind(kind) from None
