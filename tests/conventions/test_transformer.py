"""Tests for naming_spine.conventions.transformer — parsing and equivalence.

Covers:
- Round trips for every grid row in both conventions
- Ambiguous snake_case splits and their resolution with a catalog
- Kind hints, affix precedence, convention requirements
- Equivalence and InconsistentPair
"""

import pytest

from naming_spine.conventions import (
    Catalog,
    Convention,
    IdentifierDescriptor,
    ObjectKind,
    TableRef,
    assert_equivalent,
    differences,
    equivalent,
    parse,
    parse_candidates,
    render,
)
from naming_spine.core.errors import AmbiguousParse, InconsistentPair, UnrecognizedIdentifier, UnsupportedObjectKind

from tests._support import GRID, grid_id

K = ObjectKind


def _catalog_for(descriptor: IdentifierDescriptor) -> Catalog:
    return Catalog.from_descriptors([descriptor])


class TestRoundTrip:
    @pytest.mark.parametrize("descriptor, snake, pascal", GRID, ids=[grid_id(case) for case in GRID])
    def test_pascal_round_trip_without_hints(self, descriptor, snake, pascal):
        if descriptor.kind in (K.SCHEMA, K.COLUMN):
            pytest.skip("a bare quoted name is a schema or a column; covered with a kind hint")
        parsed = parse(pascal)
        assert parsed == descriptor
        assert parsed.convention is Convention.PASCAL_CASE

    @pytest.mark.parametrize("descriptor, snake, pascal", GRID, ids=[grid_id(case) for case in GRID])
    def test_round_trip_with_kind_and_catalog(self, descriptor, snake, pascal):
        catalog = _catalog_for(descriptor)
        for text in (snake, pascal):
            parsed = parse(text, kind=descriptor.kind, catalog=catalog)
            assert parsed.kind is descriptor.kind
            assert parsed.logical_name == descriptor.logical_name
            assert parsed.schema_name == descriptor.schema_name
            assert not differences(parsed, descriptor)

    def test_snake_primary_key_without_catalog(self):
        parsed = parse("inventory_product_pky")
        assert parsed == IdentifierDescriptor(K.PRIMARY_KEY, "Product", schema_name="Inventory")
        assert parsed.convention is Convention.SNAKE_CASE

    def test_snake_foreign_key_without_catalog(self):
        parsed = parse("payroll_employee_department_fky")
        assert parsed.kind is K.FOREIGN_KEY
        assert parsed.logical_name == "Employee"
        assert parsed.referenced == TableRef("Department")

    def test_snake_table(self):
        assert parse("inventory.product") == IdentifierDescriptor(K.TABLE, "Product", schema_name="Inventory")

    def test_adjacent_single_letter_words(self):
        table = IdentifierDescriptor(K.TABLE, "A B Product", schema_name="Sales")
        assert table.logical_name == "AbProduct"
        for convention in Convention:
            parsed = parse(render(table, convention))
            assert parsed == table
            assert parsed.words == table.words

    def test_parse_strips_whitespace(self):
        assert parse("  inventory.product ").logical_name == "Product"


class TestAmbiguity:
    def test_multi_word_split_is_ambiguous(self):
        with pytest.raises(AmbiguousParse) as exc:
            parse("sales_order_line_pky")
        assert {str(c) for c in exc.value.candidates} == {
            "primary-key Sales.OrderLine",
            "primary-key SalesOrder.Line",
        }
        assert exc.value.context.rule == "unique-parse"

    def test_catalog_resolves_split(self, sales_catalog):
        parsed = parse("sales_order_line_pky", catalog=sales_catalog)
        assert parsed == IdentifierDescriptor(K.PRIMARY_KEY, "OrderLine", schema_name="Sales")

    def test_catalog_with_overlapping_tables_stays_ambiguous(self, sales_catalog):
        # sales.order + qualifier Line, or sales.order_line
        with pytest.raises(AmbiguousParse):
            parse("sales_order_line_check", catalog=sales_catalog)

    def test_bare_quoted_name_needs_kind(self):
        with pytest.raises(AmbiguousParse):
            parse('"Inventory"')
        assert parse('"Inventory"', kind="schema").kind is K.SCHEMA
        assert parse('"Inventory"', kind=K.COLUMN).kind is K.COLUMN

    def test_parse_candidates_lists_all(self):
        found = parse_candidates("inventory")
        assert {c.kind for c in found} == {K.SCHEMA, K.COLUMN}

    def test_kind_hint_accepts_several_kinds(self):
        found = parse_candidates("sales.order_audit", kind=[K.TABLE, K.AUDIT_TABLE])
        assert {c.kind for c in found} == {K.TABLE, K.AUDIT_TABLE}

    def test_ordinal_split_needs_catalog(self):
        with pytest.raises(AmbiguousParse):
            parse("payroll_employee_department_2_fky")
        catalog = Catalog.build(tables=["payroll.employee", "payroll.department"])
        parsed = parse("payroll_employee_department_2_fky", catalog=catalog)
        assert parsed.ordinal == 2
        assert parsed.referenced == TableRef("Department", "Payroll")

    def test_pascal_ordinal(self):
        parsed = parse('"FK_Payroll_Employee_Payroll_Department_2"')
        assert parsed.ordinal == 2


class TestPrecedence:
    def test_table_or_affixed_reading_is_ambiguous(self):
        with pytest.raises(AmbiguousParse) as exc:
            parse("sales.order_view")
        assert {str(c) for c in exc.value.candidates} == {"table Sales.OrderView", "view Sales.Order"}

    def test_kind_hint_resolves_table_or_affixed(self):
        assert parse("sales.order_view", kind="view") == IdentifierDescriptor(K.VIEW, "Order", schema_name="Sales")
        assert parse("sales.order_view", kind=K.TABLE).logical_name == "OrderView"

    def test_catalog_owner_resolves_to_affixed(self):
        parsed = parse("sales.order_view", catalog=Catalog.build(tables=["sales.order"]))
        assert parsed == IdentifierDescriptor(K.VIEW, "Order", schema_name="Sales")

    def test_table_with_suffix_word_round_trips_with_hint(self):
        table = IdentifierDescriptor(K.TABLE, "Order View", schema_name="Sales")
        snake = render(table, "snake")
        assert snake == "sales.order_view"
        with pytest.raises(AmbiguousParse):
            parse(snake)
        assert parse(snake, kind="table") == table
        assert parse(render(table, "pascal")) == table

    def test_catalog_table_beats_affix(self):
        catalog = Catalog.build(tables=["sales.order_audit"])
        parsed = parse("sales.order_audit", catalog=catalog)
        assert parsed.kind is K.TABLE
        assert parsed.logical_name == "OrderAudit"

    def test_affixed_beats_bare_column(self):
        # inventory_product_pky is also a valid column name
        assert parse("inventory_product_pky").kind is K.PRIMARY_KEY

    def test_temp_prefix(self):
        assert parse("tmp_staging").kind is K.TEMP_TABLE
        assert parse("tmp_staging", kind="column").logical_name == "TmpStaging"

    def test_catalog_resolves_reference_schema(self):
        catalog = Catalog.build(tables=["payroll.employee", "hr.department"])
        parsed = parse("payroll_employee_department_fky", catalog=catalog)
        assert parsed.referenced == TableRef("Department", "Hr")

    def test_reference_schema_left_open_when_catalog_cannot_tell(self):
        catalog = Catalog.build(tables=["payroll.employee", "hr.department", "ops.department"])
        parsed = parse("payroll_employee_department_fky", catalog=catalog)
        assert parsed.referenced == TableRef("Department")


class TestUnrecognized:
    @pytest.mark.parametrize(
        "identifier",
        ["Inventory.Product", "inventory-product", '"inventory"', '"PK_Inventory"', "", "   "],
    )
    def test_not_in_grid(self, identifier):
        with pytest.raises(UnrecognizedIdentifier):
            parse(identifier)

    def test_mixed_case_hint(self):
        with pytest.raises(UnrecognizedIdentifier, match="unquoted mixed case"):
            parse("Inventory.Product")

    def test_kind_filters_everything_out(self):
        with pytest.raises(UnrecognizedIdentifier, match="as index") as exc:
            parse("inventory_product_pky", kind="index")
        assert exc.value.context.rule == "naming-grid"

    def test_catalog_filters_everything_out(self, sales_catalog):
        with pytest.raises(UnrecognizedIdentifier):
            parse("payroll_employee_pky", kind="primary-key", catalog=sales_catalog)

    def test_required_convention(self):
        with pytest.raises(UnrecognizedIdentifier, match="expected PascalCase") as exc:
            parse("inventory_product_pky", convention="pascal")
        assert exc.value.context.rule == "convention"

    def test_unknown_kind_hint(self):
        with pytest.raises(UnsupportedObjectKind):
            parse("inventory_product_pky", kind="synonym")


class TestEquivalence:
    def test_primary_key_pair(self):
        assert equivalent("inventory_product_pky", '"PK_Inventory_Product"')

    def test_foreign_key_pair_ignores_missing_reference_schema(self):
        assert equivalent("payroll_employee_department_fky", '"FK_Payroll_Employee_Payroll_Department"')

    def test_different_tables(self):
        assert not equivalent("inventory_product_pky", '"PK_Inventory_Item"')

    def test_different_kinds(self):
        assert not equivalent("inventory.product", '"Inventory"."AUDIT_Product"')

    def test_assert_equivalent_returns_pascal_descriptor(self):
        descriptor = assert_equivalent("payroll_employee_department_fky", '"FK_Payroll_Employee_Hr_Department"')
        assert descriptor.referenced == TableRef("Department", "Hr")

    def test_assert_equivalent_names_differences(self):
        with pytest.raises(InconsistentPair) as exc:
            assert_equivalent("inventory_product_pky", '"PK_Inventory_Item"')
        assert exc.value.differences == {"logical_name": ("Product", "Item")}
        assert exc.value.context.rule == "equivalent-pair"

    def test_qualifier_order_matters(self):
        assert not equivalent(
            "payroll_employee_first_name_last_name_idx",
            '"IX_Payroll_Employee_LastName_FirstName"',
            catalog=Catalog.build(tables=["payroll.employee"]),
        )

    def test_qualifier_boundaries_do_not(self):
        assert equivalent(
            "payroll_employee_last_name_first_name_idx",
            '"IX_Payroll_Employee_LastName_FirstName"',
            catalog=Catalog.build(tables=["payroll.employee"]),
        )

    def test_pair_in_wrong_order(self):
        with pytest.raises(UnrecognizedIdentifier):
            equivalent('"PK_Inventory_Product"', "inventory_product_pky")

    def test_ambiguous_side_raises(self):
        with pytest.raises(AmbiguousParse):
            equivalent("sales_order_line_pky", '"PK_Sales_OrderLine"')

    def test_kind_hint(self):
        assert equivalent("inventory", '"Inventory"', kind="schema")

    def test_table_named_like_affixed_object_is_ambiguous(self):
        with pytest.raises(AmbiguousParse):
            equivalent("sales.order_audit", '"Sales"."OrderAudit"')
        assert equivalent("sales.order_audit", '"Sales"."OrderAudit"', kind="table")
        assert equivalent(
            "sales.order_audit", '"Sales"."OrderAudit"', catalog=Catalog.build(tables=["sales.order_audit"])
        )

    def test_rendered_pairs_are_equivalent(self):
        for descriptor, snake, pascal in GRID:
            catalog = _catalog_for(descriptor)
            assert render(descriptor, "snake") == snake
            assert equivalent(snake, pascal, kind=descriptor.kind, catalog=catalog), descriptor
