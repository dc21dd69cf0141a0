"""
Naming conventions — the snake_case / PascalCase grid as code.

One canonical :class:`IdentifierDescriptor`, two pluggable renderers
(:class:`SnakeCaseRenderer`, :class:`PascalCaseRenderer`), and the
transformer functions that render, parse and compare identifiers.

Usage:
    from naming_spine.conventions import IdentifierDescriptor, ObjectKind, render

    fk = IdentifierDescriptor(
        ObjectKind.FOREIGN_KEY,
        "Employee",
        schema_name="Payroll",
        referenced_objects=[TableRef("Department", "Payroll")],
    )
    render(fk, "snake")    # payroll_employee_department_fky
    render(fk, "pascal")   # "FK_Payroll_Employee_Payroll_Department"
"""

from naming_spine.conventions.descriptor import Catalog, IdentifierDescriptor, TableRef
from naming_spine.conventions.keywords import RESERVED_KEYWORDS, is_reserved
from naming_spine.conventions.kinds import KIND_RULES, Convention, KindRule, ObjectKind, Shape, rule_for
from naming_spine.conventions.renderers import (
    PascalCaseRenderer,
    Renderer,
    SnakeCaseRenderer,
    detect_convention,
    get_renderer,
)
from naming_spine.conventions.transformer import (
    assert_equivalent,
    differences,
    equivalent,
    foreign_key_suffix,
    parse,
    parse_candidates,
    render,
    render_all,
)

__all__ = [
    # Model
    "Catalog",
    "Convention",
    "IdentifierDescriptor",
    "KIND_RULES",
    "KindRule",
    "ObjectKind",
    "Shape",
    "TableRef",
    "rule_for",
    # Renderers
    "PascalCaseRenderer",
    "Renderer",
    "SnakeCaseRenderer",
    "detect_convention",
    "get_renderer",
    # Transformer
    "assert_equivalent",
    "differences",
    "equivalent",
    "foreign_key_suffix",
    "parse",
    "parse_candidates",
    "render",
    "render_all",
    # Keywords
    "RESERVED_KEYWORDS",
    "is_reserved",
]
