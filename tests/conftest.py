"""
Shared pytest fixtures and configuration for naming-spine tests.

This module provides:
- Environment and cache isolation (settings, custom lint rules, logging)
- Sample manifests (YAML text and files on disk)
- Sample DDL

Usage:
    Fixtures are auto-discovered by pytest; use them as function arguments.

    def test_something(payroll_manifest):
        ...
"""

import os
import sys
import textwrap
from pathlib import Path

import pytest

# Ensure naming_spine package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from naming_spine.conventions import Catalog  # noqa: E402
from naming_spine.core.logging import configure_logging  # noqa: E402
from naming_spine.core.settings import clear_settings_cache  # noqa: E402
from naming_spine.linter import clear_custom_rules  # noqa: E402
from naming_spine.manifest import Manifest, manifest_from_yaml  # noqa: E402


# =============================================================================
# Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """Strip NAMING_* variables, run from an empty directory, reset caches."""
    for key in list(os.environ):
        if key.startswith("NAMING_"):
            monkeypatch.delenv(key, raising=False)
    # no stray .env file from the working directory
    monkeypatch.chdir(tmp_path)
    clear_settings_cache()
    clear_custom_rules()
    configure_logging(level="WARNING", format="console", force=True)
    yield
    clear_settings_cache()
    clear_custom_rules()


# =============================================================================
# Sample Manifests
# =============================================================================

PAYROLL_MANIFEST = textwrap.dedent(
    """\
    apiVersion: naming-spine/v1
    kind: NamingManifest
    metadata:
      name: payroll
      description: Payroll schema naming grid
    spec:
      defaults:
        schema: Payroll
      identifiers:
        - kind: schema
          name: Payroll
          expect:
            snake: payroll
            pascal: '"Payroll"'
        - kind: table
          name: Employee
          expect:
            snake: payroll.employee
            pascal: '"Payroll"."Employee"'
        - kind: table
          name: Department
        - kind: primary-key
          name: Employee
          expect:
            snake: payroll_employee_pky
            pascal: '"PK_Payroll_Employee"'
        - kind: primary-key
          name: Department
        - kind: foreign-key
          name: Employee
          references:
            - name: Department
          expect:
            snake: payroll_employee_department_fky
            pascal: '"FK_Payroll_Employee_Payroll_Department"'
        - kind: index
          name: Employee
          columns: [LastName, FirstName]
          expect:
            snake: payroll_employee_last_name_first_name_idx
    """
)


@pytest.fixture
def payroll_manifest_yaml() -> str:
    """A manifest that passes every lint rule."""
    return PAYROLL_MANIFEST


@pytest.fixture
def payroll_manifest() -> Manifest:
    return manifest_from_yaml(PAYROLL_MANIFEST, "payroll.yaml")


@pytest.fixture
def write_file(tmp_path: Path):
    """Write dedented text to a file under tmp_path and return its path."""

    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.write_text(textwrap.dedent(content), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def payroll_manifest_file(write_file) -> Path:
    return write_file("payroll.yaml", PAYROLL_MANIFEST)


# =============================================================================
# Sample Catalog and DDL
# =============================================================================


@pytest.fixture
def sales_catalog() -> Catalog:
    """Known tables for splitting multi-word snake_case names."""
    return Catalog.build(tables=["sales.order", "sales.order_line", "inventory.product"])


CLEAN_SNAKE_DDL = textwrap.dedent(
    """\
    -- inventory schema
    CREATE SCHEMA IF NOT EXISTS inventory;

    CREATE TABLE inventory.product (
        id bigint NOT NULL,
        unit_price numeric(10, 2),
        CONSTRAINT inventory_product_pky PRIMARY KEY (id)
    );

    CREATE INDEX inventory_product_unit_price_idx ON inventory.product (unit_price);
    """
)


@pytest.fixture
def clean_snake_ddl() -> str:
    return CLEAN_SNAKE_DDL
