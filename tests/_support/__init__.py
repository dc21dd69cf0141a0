"""
Test support utilities for naming-spine tests.

Shared case tables that don't fit as pytest fixtures because they feed
``pytest.mark.parametrize``.
"""

from __future__ import annotations

from naming_spine.conventions import IdentifierDescriptor, ObjectKind, TableRef

K = ObjectKind


def d(kind, name, schema=None, refs=(), qualifiers=(), ordinal=None):
    return IdentifierDescriptor(
        kind, name, schema_name=schema, referenced_objects=refs, qualifiers=qualifiers, ordinal=ordinal
    )


# (descriptor, snake, pascal) for every row of the grid
GRID = [
    (d(K.SCHEMA, "Inventory"), "inventory", '"Inventory"'),
    (d(K.TABLE, "Product", "Inventory"), "inventory.product", '"Inventory"."Product"'),
    (d(K.COLUMN, "UnitPrice"), "unit_price", '"UnitPrice"'),
    (d(K.TEMP_TABLE, "Staging"), "tmp_staging", '"TMP_Staging"'),
    (d(K.PRIMARY_KEY, "Product", "Inventory"), "inventory_product_pky", '"PK_Inventory_Product"'),
    (
        d(K.FOREIGN_KEY, "Employee", "Payroll", refs=[TableRef("Department", "Payroll")]),
        "payroll_employee_department_fky",
        '"FK_Payroll_Employee_Payroll_Department"',
    ),
    (d(K.CHECK_CONSTRAINT, "Order", "Sales"), "sales_order_check", '"CHK_Sales_Order"'),
    (
        d(K.CHECK_CONSTRAINT, "Order", "Sales", qualifiers=["Quantity"]),
        "sales_order_quantity_check",
        '"CHK_Sales_Order_Quantity"',
    ),
    (d(K.UNIQUE_CONSTRAINT, "Order", "Sales", qualifiers=["Number"]), "sales_order_number_key", '"UQ_Sales_Order_Number"'),
    (
        d(K.DEFAULT_CONSTRAINT, "Order", "Sales", qualifiers=["CreatedAt"]),
        "sales_order_created_at_default",
        '"DF_Sales_Order_CreatedAt"',
    ),
    (
        d(K.INDEX, "Employee", "Payroll", qualifiers=["LastName", "FirstName"]),
        "payroll_employee_last_name_first_name_idx",
        '"IX_Payroll_Employee_LastName_FirstName"',
    ),
    (d(K.TRIGGER, "Product", "Inventory", qualifiers=["Audit"]), "inventory_product_audit_trg", '"TR_Inventory_Product_Audit"'),
    (d(K.SEQUENCE, "Product", "Inventory", qualifiers=["Id"]), "inventory.product_id_seq", '"Inventory"."SEQ_Product_Id"'),
    (d(K.VIEW, "Revenue", "Sales"), "sales.revenue_view", '"Sales"."VW_Revenue"'),
    (d(K.MATERIALIZED_VIEW, "Revenue", "Sales"), "sales.revenue_mview", '"Sales"."MV_Revenue"'),
    (d(K.FUNCTION, "ReorderLevel", "Inventory"), "inventory.reorder_level_fn", '"Inventory"."FN_ReorderLevel"'),
    (d(K.ENUM_TYPE, "OrderStatus", "Sales"), "sales.order_status_enum", '"Sales"."ENUM_OrderStatus"'),
    (d(K.DOMAIN_TYPE, "Email", "Sales"), "sales.email_domain", '"Sales"."DOM_Email"'),
    (d(K.COMPOSITE_TYPE, "Address", "Sales"), "sales.address_type", '"Sales"."TYPE_Address"'),
    (d(K.PARTITION, "Order", "Sales", qualifiers=["2024"]), "sales.order_2024_part", '"Sales"."PART_Order_2024"'),
    (d(K.AUDIT_TABLE, "Product", "Inventory"), "inventory.product_audit", '"Inventory"."AUDIT_Product"'),
    (
        d(K.JUNCTION_TABLE, "Order", "Sales", refs=["Product"]),
        "sales.order_product_map",
        '"Sales"."MAP_Order_Product"',
    ),
]


def grid_id(case: tuple) -> str:
    """Readable parametrize id: ``kind-snake``."""
    return f"{case[0].kind.value}-{case[1]}"
