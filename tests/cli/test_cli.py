"""Tests for naming_spine.cli — commands via CliRunner.

Covers render, check, scan, parse, equivalent and kinds, their JSON
output, and the exit codes: 0 ok, 1 findings or failed parse/pair,
2 bad input (descriptor, kind, manifest, file or option).
"""

from __future__ import annotations

import json

from typer.testing import CliRunner

from naming_spine.cli.app import app

runner = CliRunner()


def _json(result):
    return json.loads(result.stdout)


WARNING_MANIFEST = """\
metadata:
  name: warn
spec:
  identifiers:
    - kind: column
      name: Order
"""

ERROR_MANIFEST = """\
metadata:
  name: broken
spec:
  defaults:
    schema: Inventory
  identifiers:
    - kind: table
      name: Product
      expect:
        snake: inventory.products
"""


# ─── Root ────────────────────────────────────────────────────────────────


class TestRoot:
    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert result.stdout.startswith("naming-spine ")

    def test_help_lists_commands(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        for command in ("render", "check", "scan", "parse", "equivalent", "kinds"):
            assert command in result.stdout

    def test_invalid_settings_exit_2(self, monkeypatch):
        monkeypatch.setenv("NAMING_LOG_LEVEL", "LOUD")
        result = runner.invoke(app, ["kinds"])
        assert result.exit_code == 2
        assert "Invalid NAMING_* settings" in result.output


# ─── render ──────────────────────────────────────────────────────────────


class TestRender:
    def test_both_conventions_by_default(self, payroll_manifest_file):
        result = runner.invoke(app, ["render", str(payroll_manifest_file), "--json"])
        assert result.exit_code == 0
        data = _json(result)
        assert data["manifest"] == "payroll"
        assert len(data["identifiers"]) == 7
        first = data["identifiers"][0]
        assert first["snake"] == "payroll"
        assert first["pascal"] == '"Payroll"'
        assert first["descriptor"]["kind"] == "schema"

    def test_one_convention(self, payroll_manifest_file):
        result = runner.invoke(app, ["render", str(payroll_manifest_file), "-c", "pascal", "--json"])
        assert result.exit_code == 0
        fk = _json(result)["identifiers"][5]
        assert fk["pascal"] == '"FK_Payroll_Employee_Payroll_Department"'
        assert "snake" not in fk

    def test_default_from_environment(self, payroll_manifest_file, monkeypatch):
        monkeypatch.setenv("NAMING_DEFAULT_CONVENTION", "snake_case")
        result = runner.invoke(app, ["render", str(payroll_manifest_file), "--json"])
        assert result.exit_code == 0
        index = _json(result)["identifiers"][6]
        assert index["snake"] == "payroll_employee_last_name_first_name_idx"
        assert "pascal" not in index

    def test_table_output(self, payroll_manifest_file):
        result = runner.invoke(app, ["render", str(payroll_manifest_file)])
        assert result.exit_code == 0
        assert "payroll" in result.stdout

    def test_unknown_convention(self, payroll_manifest_file):
        result = runner.invoke(app, ["render", str(payroll_manifest_file), "-c", "kebab"])
        assert result.exit_code == 2

    def test_missing_manifest(self, tmp_path):
        result = runner.invoke(app, ["render", str(tmp_path / "nope.yaml")])
        assert result.exit_code == 2
        assert "Cannot read manifest" in result.output

    def test_bad_descriptor_names_entry(self, write_file):
        path = write_file(
            "bad.yaml",
            """\
            metadata:
              name: bad
            spec:
              identifiers:
                - kind: table
                  name: Product
            """,
        )
        result = runner.invoke(app, ["render", str(path), "--json"])
        assert result.exit_code == 2
        error = _json(result)["error"]
        assert error["error_type"] == "MalformedDescriptor"
        assert error["context"]["rule"] == "schema-required"
        assert error["context"]["source"].endswith("identifiers[0]")

    def test_unsupported_kind(self, write_file):
        path = write_file(
            "kind.yaml",
            """\
            metadata:
              name: bad
            spec:
              identifiers:
                - kind: synonym
                  name: Alias
            """,
        )
        result = runner.invoke(app, ["render", str(path)])
        assert result.exit_code == 2
        assert "UnsupportedObjectKind" in result.output


# ─── check ───────────────────────────────────────────────────────────────


class TestCheck:
    def test_clean_manifest(self, payroll_manifest_file):
        result = runner.invoke(app, ["check", str(payroll_manifest_file)])
        assert result.exit_code == 0
        assert "PASS: payroll" in result.stdout

    def test_errors_exit_1(self, write_file):
        path = write_file("broken.yaml", ERROR_MANIFEST)
        result = runner.invoke(app, ["check", str(path), "--json"])
        assert result.exit_code == 1
        data = _json(result)
        assert data["passed"] is False
        assert [d["code"] for d in data["diagnostics"]] == ["E001", "I001"]

    def test_warnings_pass_unless_strict(self, write_file):
        path = write_file("warn.yaml", WARNING_MANIFEST)
        assert runner.invoke(app, ["check", str(path)]).exit_code == 0
        assert runner.invoke(app, ["check", str(path), "--strict"]).exit_code == 1

    def test_strict_from_environment(self, write_file, monkeypatch):
        path = write_file("warn.yaml", WARNING_MANIFEST)
        monkeypatch.setenv("NAMING_STRICT", "true")
        assert runner.invoke(app, ["check", str(path)]).exit_code == 1
        assert runner.invoke(app, ["check", str(path), "--no-strict"]).exit_code == 0

    def test_max_length(self, payroll_manifest_file):
        result = runner.invoke(app, ["check", str(payroll_manifest_file), "--max-length", "10", "--json"])
        assert result.exit_code == 1
        assert {d["code"] for d in _json(result)["diagnostics"]} == {"E005"}

    def test_invalid_manifest(self, write_file):
        path = write_file("invalid.yaml", "metadata: {}\n")
        result = runner.invoke(app, ["check", str(path)])
        assert result.exit_code == 2
        assert "ManifestError" in result.output


# ─── scan ────────────────────────────────────────────────────────────────


class TestScan:
    def test_clean_file(self, write_file, clean_snake_ddl):
        path = write_file("clean.sql", clean_snake_ddl)
        result = runner.invoke(app, ["scan", str(path)])
        assert result.exit_code == 0
        assert "PASS" in result.stdout

    def test_findings_exit_1(self, write_file):
        clean = write_file("a.sql", "CREATE SCHEMA inventory;\n")
        bad = write_file("b.sql", "CREATE TABLE Inventory.Product (id int);\n")
        result = runner.invoke(app, ["scan", str(clean), str(bad), "--json"])
        assert result.exit_code == 1
        data = _json(result)
        assert data["passed"] is False
        assert [f["passed"] for f in data["files"]] == [True, False]
        assert data["files"][1]["diagnostics"][0]["code"] == "E101"

    def test_required_convention(self, write_file, clean_snake_ddl):
        path = write_file("clean.sql", clean_snake_ddl)
        assert runner.invoke(app, ["scan", str(path), "-c", "pascal"]).exit_code == 1
        assert runner.invoke(app, ["scan", str(path), "-c", "kebab"]).exit_code == 2

    def test_mixed_conventions_need_strict(self, write_file):
        path = write_file("mixed.sql", 'CREATE SCHEMA inventory;\nCREATE TABLE "Inventory"."Product" ("Id" int);\n')
        assert runner.invoke(app, ["scan", str(path)]).exit_code == 0
        assert runner.invoke(app, ["scan", str(path), "--strict"]).exit_code == 1

    def test_missing_file(self, tmp_path):
        result = runner.invoke(app, ["scan", str(tmp_path / "missing.sql")])
        assert result.exit_code == 2
        assert "cannot read" in result.output


# ─── parse ───────────────────────────────────────────────────────────────


class TestParse:
    def test_primary_key(self):
        result = runner.invoke(app, ["parse", "inventory_product_pky"])
        assert result.exit_code == 0
        assert "primary-key Inventory.Product" in result.stdout
        assert '"PK_Inventory_Product"' in result.stdout

    def test_json(self):
        result = runner.invoke(app, ["parse", '"FK_Payroll_Employee_Hr_Department"', "--json"])
        assert result.exit_code == 0
        data = _json(result)
        assert data["ok"] is True
        assert data["descriptor"]["kind"] == "foreign-key"
        assert data["renderings"]["snake"] == "payroll_employee_department_fky"

    def test_ambiguous_exit_1(self):
        result = runner.invoke(app, ["parse", "sales_order_line_pky"])
        assert result.exit_code == 1
        assert "AmbiguousParse" in result.output
        assert "primary-key Sales.OrderLine" in result.output

    def test_ambiguous_json_lists_candidates(self):
        result = runner.invoke(app, ["parse", "sales_order_line_pky", "--json"])
        assert result.exit_code == 1
        error = _json(result)["error"]
        assert sorted(error["candidates"]) == ["primary-key Sales.OrderLine", "primary-key SalesOrder.Line"]

    def test_catalog_resolves(self):
        result = runner.invoke(app, ["parse", "sales_order_line_pky", "--table", "sales.order_line", "--json"])
        assert result.exit_code == 0
        assert _json(result)["descriptor"]["logical_name"] == "OrderLine"

    def test_kind_hint(self):
        result = runner.invoke(app, ["parse", "inventory", "-k", "schema", "--json"])
        assert result.exit_code == 0
        assert _json(result)["descriptor"]["kind"] == "schema"

    def test_unrecognized_exit_1(self):
        result = runner.invoke(app, ["parse", "Inventory.Product"])
        assert result.exit_code == 1
        assert "UnrecognizedIdentifier" in result.output

    def test_unsupported_kind_exit_2(self):
        result = runner.invoke(app, ["parse", "inventory_product_pky", "--kind", "synonym"])
        assert result.exit_code == 2

    def test_wrong_convention(self):
        result = runner.invoke(app, ["parse", "inventory_product_pky", "-c", "pascal"])
        assert result.exit_code == 1

    def test_unknown_convention_exit_2(self):
        result = runner.invoke(app, ["parse", "inventory_product_pky", "-c", "kebab"])
        assert result.exit_code == 2


# ─── equivalent ──────────────────────────────────────────────────────────


class TestEquivalent:
    def test_equivalent_pair(self):
        result = runner.invoke(app, ["equivalent", "inventory_product_pky", '"PK_Inventory_Product"'])
        assert result.exit_code == 0
        assert 'inventory_product_pky == "PK_Inventory_Product"' in result.stdout

    def test_inconsistent_pair_json(self):
        result = runner.invoke(app, ["equivalent", "inventory_product_pky", '"PK_Inventory_Item"', "--json"])
        assert result.exit_code == 1
        error = _json(result)["error"]
        assert error["error_type"] == "InconsistentPair"
        assert error["differences"] == {"logical_name": ["Product", "Item"]}

    def test_inconsistent_pair_text(self):
        result = runner.invoke(app, ["equivalent", "inventory_product_pky", '"PK_Inventory_Item"'])
        assert result.exit_code == 1
        assert "logical_name" in result.output

    def test_catalog_options(self):
        result = runner.invoke(
            app,
            ["equivalent", "sales_order_line_pky", '"PK_Sales_OrderLine"', "-t", "sales.order_line", "--json"],
        )
        assert result.exit_code == 0
        assert _json(result)["equivalent"] is True


# ─── kinds ───────────────────────────────────────────────────────────────


class TestKinds:
    def test_json_grid(self):
        result = runner.invoke(app, ["kinds", "--json"])
        assert result.exit_code == 0
        rows = {row["kind"]: row for row in _json(result)}
        assert len(rows) == 21
        assert rows["foreign-key"]["snake"] == "inventory_product_supplier_fky"
        assert rows["foreign-key"]["pascal"] == '"FK_Inventory_Product_Purchasing_Supplier"'
        assert rows["junction-table"]["pascal"] == '"Inventory"."MAP_Product_Supplier"'
        assert rows["column"]["shape"] == "bare"

    def test_table_output(self):
        result = runner.invoke(app, ["kinds"])
        assert result.exit_code == 0
        assert "Naming grid" in result.stdout
