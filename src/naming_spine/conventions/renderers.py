"""
Convention renderers — one strategy per naming convention.

Each renderer owns both directions of its convention: :meth:`Renderer.render`
turns a descriptor into identifier text and :meth:`Renderer.candidates`
enumerates every descriptor the text could have come from.  Both read the
same grid row (:data:`~naming_spine.conventions.kinds.KIND_RULES`), so a
renderer cannot produce a shape its own parser does not recognise.

Architecture::

    Renderer (ABC)
    ├── render(descriptor) -> str
    ├── foreign_key_suffix(descriptor) -> str
    └── candidates(identifier) -> list[Candidate]
         │
         ├── SnakeCaseRenderer   inventory_product_pky
         └── PascalCaseRenderer  "PK_Inventory_Product"

Candidate enumeration is deliberately exhaustive: a snake_case name such as
``sales_order_line_pky`` yields one candidate per possible schema/table
split.  Narrowing (by kind, catalog, affix precedence) is the transformer's
job, not the renderer's.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from naming_spine.conventions.descriptor import IdentifierDescriptor, TableRef
from naming_spine.conventions.kinds import (
    KIND_RULES,
    Convention,
    KindRule,
    ObjectKind,
    Requirement,
    Shape,
    rule_for,
)
from naming_spine.conventions.words import (
    PASCAL_COMPONENT_RE,
    quote,
    snake_words,
    split_words,
    to_pascal,
    to_snake,
)
from naming_spine.core.errors import MalformedDescriptor, UnsupportedObjectKind


@dataclass(frozen=True)
class Candidate:
    """One interpretation of an identifier.

    ``affixed`` is True when the interpretation consumed a convention affix
    (``_pky``, ``PK_``, ``tmp_``, ...) rather than reading the whole text as
    a plain schema, table or column name.
    """

    descriptor: IdentifierDescriptor
    affixed: bool


def _splits(words: Sequence[str], min_head: int = 1, min_tail: int = 1) -> Iterator[tuple[tuple, tuple]]:
    """Every (head, tail) split with the given minimum lengths."""
    for i in range(min_head, len(words) - min_tail + 1):
        yield tuple(words[:i]), tuple(words[i:])


class Renderer(ABC):
    """Common capability of both convention renderers."""

    convention: Convention

    def render(self, descriptor: IdentifierDescriptor) -> str:
        """Render ``descriptor`` in this convention."""
        rule = self._rule(descriptor)
        if rule.shape is Shape.BARE:
            return self._render_bare(descriptor, rule)
        if rule.shape is Shape.QUALIFIED:
            return self._render_qualified(descriptor, rule)
        return self._render_constraint(descriptor, rule)

    def foreign_key_suffix(self, descriptor: IdentifierDescriptor) -> str:
        """Unquoted constraint name of a foreign key."""
        if descriptor.kind is not ObjectKind.FOREIGN_KEY:
            raise MalformedDescriptor(
                f"foreign_key_suffix needs a foreign-key descriptor, got {descriptor.kind.value}",
                field="kind",
            ).with_context(descriptor=str(descriptor), rule="foreign-key-only")
        return self._constraint_name(descriptor, self._rule(descriptor))

    @abstractmethod
    def candidates(self, identifier: str) -> list[Candidate]:
        """Every descriptor ``identifier`` could be a rendering of."""

    @abstractmethod
    def matches(self, identifier: str) -> bool:
        """True if ``identifier`` is lexically in this convention."""

    # ------------------------------------------------------------------ #
    # Shape hooks
    # ------------------------------------------------------------------ #

    @abstractmethod
    def _render_bare(self, d: IdentifierDescriptor, rule: KindRule) -> str: ...

    @abstractmethod
    def _render_qualified(self, d: IdentifierDescriptor, rule: KindRule) -> str: ...

    @abstractmethod
    def _constraint_name(self, d: IdentifierDescriptor, rule: KindRule) -> str: ...

    def _render_constraint(self, d: IdentifierDescriptor, rule: KindRule) -> str:
        return self._constraint_name(d, rule)

    @staticmethod
    def _rule(descriptor: IdentifierDescriptor) -> KindRule:
        if descriptor.kind not in KIND_RULES:
            raise UnsupportedObjectKind(descriptor.kind).with_context(descriptor=str(descriptor))
        return rule_for(descriptor.kind)

    def _make(
        self,
        kind: ObjectKind,
        name: Sequence[str],
        schema: Sequence[str] | None = None,
        ref: tuple[str, str | None] | None = None,
        qualifiers: tuple[str, ...] = (),
        ordinal: int | None = None,
    ) -> Candidate | None:
        """Build a candidate from word tuples; invalid combinations yield None.

        ``ref`` is a ``(table, schema)`` pair of PascalCase names.
        """
        try:
            descriptor = IdentifierDescriptor(
                kind,
                to_pascal(name),
                schema_name=to_pascal(schema) if schema else None,
                referenced_objects=(TableRef(*ref),) if ref is not None else (),
                qualifiers=qualifiers,
                ordinal=ordinal,
                convention=self.convention,
            )
        except MalformedDescriptor:
            # e.g. a split whose table part starts with a digit
            return None
        return Candidate(descriptor, KIND_RULES[kind].affixed)


# =============================================================================
# snake_case
# =============================================================================


class SnakeCaseRenderer(Renderer):
    """PostgreSQL Standard: lowercase words joined with underscores.

    ``inventory.product``, ``inventory_product_pky``,
    ``payroll_employee_department_fky``.
    """

    convention = Convention.SNAKE_CASE

    _PART_RE = re.compile(r"[a-z][a-z0-9]*(?:_[a-z0-9]+)*")

    def matches(self, identifier: str) -> bool:
        schema_part, dot, name_part = identifier.strip().partition(".")
        if dot:
            return bool(self._PART_RE.fullmatch(schema_part) and self._PART_RE.fullmatch(name_part))
        return bool(self._PART_RE.fullmatch(schema_part))

    def _render_bare(self, d: IdentifierDescriptor, rule: KindRule) -> str:
        prefix = (rule.snake_prefix,) if rule.snake_prefix else ()
        return to_snake(prefix + d.words)

    def _render_qualified(self, d: IdentifierDescriptor, rule: KindRule) -> str:
        return f"{to_snake(d.schema_words)}.{to_snake(self._body(d, rule))}"

    def _constraint_name(self, d: IdentifierDescriptor, rule: KindRule) -> str:
        return to_snake(d.schema_words + self._body(d, rule))

    @staticmethod
    def _body(d: IdentifierDescriptor, rule: KindRule) -> tuple[str, ...]:
        words = list(d.words)
        if d.referenced is not None:
            # referenced schema is not part of the snake_case name
            words.extend(split_words(d.referenced.logical_name))
        words.extend(d.qualifier_words)
        if d.ordinal is not None:
            words.append(str(d.ordinal))
        if rule.snake_suffix:
            words.append(rule.snake_suffix)
        return tuple(words)

    # ------------------------------------------------------------------ #
    # Reverse mapping
    # ------------------------------------------------------------------ #

    def candidates(self, identifier: str) -> list[Candidate]:
        if not self.matches(identifier):
            return []
        schema_part, dot, name_part = identifier.strip().partition(".")
        if dot:
            found = self._qualified(snake_words(schema_part), snake_words(name_part))
        else:
            found = self._unqualified(snake_words(schema_part))
        return [c for c in found if c is not None]

    def _qualified(self, schema: tuple, name: tuple) -> Iterator[Candidate | None]:
        yield self._make(ObjectKind.TABLE, name, schema)
        for rule in KIND_RULES.values():
            if rule.shape is not Shape.QUALIFIED or not rule.snake_suffix:
                continue
            if len(name) < 2 or name[-1] != rule.snake_suffix:
                continue
            body = name[:-1]
            if rule.references:
                for table, ref in _splits(body):
                    yield self._make(rule.kind, table, schema, ref=(to_pascal(ref), None))
            elif rule.qualifiers is Requirement.REQUIRED:
                for table, qualifier in _splits(body):
                    yield self._make(rule.kind, table, schema, qualifiers=(to_pascal(qualifier),))
            else:
                yield self._make(rule.kind, body, schema)

    def _unqualified(self, words: tuple) -> Iterator[Candidate | None]:
        yield self._make(ObjectKind.SCHEMA, words)
        yield self._make(ObjectKind.COLUMN, words)
        temp = KIND_RULES[ObjectKind.TEMP_TABLE]
        if len(words) > 1 and words[0] == temp.snake_prefix:
            yield self._make(ObjectKind.TEMP_TABLE, words[1:])

        for rule in KIND_RULES.values():
            if rule.shape is not Shape.CONSTRAINT or len(words) < 3 or words[-1] != rule.snake_suffix:
                continue
            body = words[:-1]
            for schema, rest in _splits(body):
                min_tail = 1 if (rule.references or rule.qualifiers is Requirement.REQUIRED) else 0
                for table, tail in _splits(rest, 1, min_tail):
                    yield from self._constraint_tails(rule, schema, table, tail)

    def _constraint_tails(self, rule: KindRule, schema: tuple, table: tuple, tail: tuple):
        if rule.references:
            yield self._make(rule.kind, table, schema, ref=(to_pascal(tail), None))
            if len(tail) > 1 and tail[-1].isdigit():
                yield self._make(
                    rule.kind, table, schema, ref=(to_pascal(tail[:-1]), None), ordinal=int(tail[-1])
                )
        elif rule.qualifiers is Requirement.FORBIDDEN:
            if not tail:
                yield self._make(rule.kind, table, schema)
        else:
            yield self._make(rule.kind, table, schema, qualifiers=(to_pascal(tail),) if tail else ())


# =============================================================================
# PascalCase
# =============================================================================


class PascalCaseRenderer(Renderer):
    """Domain Driven Database Design: quoted PascalCase with kind prefixes.

    ``"Inventory"."Product"``, ``"PK_Inventory_Product"``,
    ``"FK_Payroll_Employee_Payroll_Department"``.
    """

    convention = Convention.PASCAL_CASE

    _IDENT_RE = re.compile(r'"([A-Za-z0-9_]+)"(?:\."([A-Za-z0-9_]+)")?')
    _NAME_RE = re.compile(r"[A-Z][A-Za-z0-9]*")

    def matches(self, identifier: str) -> bool:
        return bool(self._IDENT_RE.fullmatch(identifier.strip()))

    def _render_bare(self, d: IdentifierDescriptor, rule: KindRule) -> str:
        return quote(self._join(rule.pascal_prefix, d.logical_name))

    def _render_qualified(self, d: IdentifierDescriptor, rule: KindRule) -> str:
        ref = d.referenced.logical_name if d.referenced is not None else None
        return quote(d.schema_name) + "." + quote(self._join(rule.pascal_prefix, d.logical_name, ref, *d.qualifiers))

    def _constraint_name(self, d: IdentifierDescriptor, rule: KindRule) -> str:
        parts = [rule.pascal_prefix, d.schema_name, d.logical_name]
        if d.referenced is not None:
            parts += [d.referenced.schema_name or d.schema_name, d.referenced.logical_name]
        parts += list(d.qualifiers)
        if d.ordinal is not None:
            parts.append(str(d.ordinal))
        return self._join(*parts)

    def _render_constraint(self, d: IdentifierDescriptor, rule: KindRule) -> str:
        return quote(self._constraint_name(d, rule))

    @staticmethod
    def _join(*parts: str | None) -> str:
        return "_".join(p for p in parts if p)

    # ------------------------------------------------------------------ #
    # Reverse mapping
    # ------------------------------------------------------------------ #

    def _is_name(self, component: str) -> bool:
        return bool(self._NAME_RE.fullmatch(component))

    def _names(self, *components: str) -> bool:
        return all(self._is_name(c) for c in components)

    def candidates(self, identifier: str) -> list[Candidate]:
        m = self._IDENT_RE.fullmatch(identifier.strip())
        if not m:
            return []
        first, second = m.group(1), m.group(2)
        if second is not None:
            if not self._is_name(first):
                return []
            found = self._qualified(first, second.split("_"))
        else:
            found = self._unqualified(first.split("_"))
        return [c for c in found if c is not None]

    def _qualified(self, schema: str, comps: list[str]) -> Iterator[Candidate | None]:
        if any(not c for c in comps):
            return
        s = split_words(schema)
        if len(comps) == 1:
            if self._is_name(comps[0]):
                yield self._make(ObjectKind.TABLE, split_words(comps[0]), s)
            return
        prefix, rest = comps[0], comps[1:]
        for rule in KIND_RULES.values():
            if rule.shape is not Shape.QUALIFIED or rule.pascal_prefix != prefix:
                continue
            if rule.references:
                if len(rest) == 2 and self._names(*rest):
                    yield self._make(rule.kind, split_words(rest[0]), s, ref=(rest[1], None))
            elif rule.qualifiers is Requirement.REQUIRED:
                tail = rest[1:]
                if tail and self._is_name(rest[0]) and all(PASCAL_COMPONENT_RE.fullmatch(q) for q in tail):
                    yield self._make(rule.kind, split_words(rest[0]), s, qualifiers=tuple(tail))
            elif len(rest) == 1 and self._is_name(rest[0]):
                yield self._make(rule.kind, split_words(rest[0]), s)

    def _unqualified(self, comps: list[str]) -> Iterator[Candidate | None]:
        if any(not c for c in comps):
            return
        if len(comps) == 1:
            if self._is_name(comps[0]):
                words = split_words(comps[0])
                yield self._make(ObjectKind.SCHEMA, words)
                yield self._make(ObjectKind.COLUMN, words)
            return
        prefix, rest = comps[0], comps[1:]
        temp = KIND_RULES[ObjectKind.TEMP_TABLE]
        if prefix == temp.pascal_prefix:
            if len(rest) == 1 and self._is_name(rest[0]):
                yield self._make(ObjectKind.TEMP_TABLE, split_words(rest[0]))
            return
        for rule in KIND_RULES.values():
            if rule.shape is not Shape.CONSTRAINT or rule.pascal_prefix != prefix or len(rest) < 2:
                continue
            schema, table, tail = rest[0], rest[1], rest[2:]
            if not self._names(schema, table):
                continue
            s, t = split_words(schema), split_words(table)
            if rule.references:
                if len(tail) == 2 and self._names(*tail):
                    yield self._make(rule.kind, t, s, ref=(tail[1], tail[0]))
                elif len(tail) == 3 and self._names(*tail[:2]) and tail[2].isdigit():
                    yield self._make(rule.kind, t, s, ref=(tail[1], tail[0]), ordinal=int(tail[2]))
            elif rule.qualifiers is Requirement.FORBIDDEN:
                if not tail:
                    yield self._make(rule.kind, t, s)
            elif rule.qualifiers is Requirement.REQUIRED and not tail:
                continue
            elif all(PASCAL_COMPONENT_RE.fullmatch(q) for q in tail):
                yield self._make(rule.kind, t, s, qualifiers=tuple(tail))


_RENDERERS: dict[Convention, Renderer] = {
    Convention.SNAKE_CASE: SnakeCaseRenderer(),
    Convention.PASCAL_CASE: PascalCaseRenderer(),
}


def get_renderer(convention: Convention | str) -> Renderer:
    """Renderer for ``convention`` (``snake``/``pascal`` and their spellings)."""
    return _RENDERERS[Convention.parse(convention)]


def detect_convention(identifier: str) -> Convention | None:
    """Which convention ``identifier`` is lexically written in, if any."""
    for convention, renderer in _RENDERERS.items():
        if renderer.matches(identifier):
            return convention
    return None
