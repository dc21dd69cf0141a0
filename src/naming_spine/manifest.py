"""Pydantic models for naming manifests.

A manifest is a declarative list of identifier descriptors, optionally with
the renderings a document or schema already uses, so the linter can check
them.  YAML and JSON are both accepted (JSON is valid YAML).

Usage::

    from naming_spine.manifest import load_manifest

    manifest = load_manifest("naming.yaml")
    for entry in manifest.entries:
        print(entry.descriptor)

Example YAML::

    apiVersion: naming-spine/v1
    kind: NamingManifest
    metadata:
      name: payroll
      description: Payroll schema naming grid
    spec:
      defaults:
        schema: Payroll
      identifiers:
        - kind: table
          name: Employee
          expect:
            snake: payroll.employee
            pascal: '"Payroll"."Employee"'
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

Manifesto:
    The naming grid should be reviewable as data.  Authors list what
    they are naming; the tool produces both spellings and checks the
    ones already written down.

Tags:
    naming-spine, manifest, yaml, declarative, pydantic

Doc-Types:
    api-reference
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from naming_spine.conventions.descriptor import Catalog, IdentifierDescriptor, TableRef
from naming_spine.conventions.kinds import Convention, ObjectKind, Requirement, rule_for
from naming_spine.core.errors import ManifestError, NamingError
from naming_spine.core.logging import get_logger

logger = get_logger(__name__)

API_VERSION = "naming-spine/v1"


class ReferenceSpec(BaseModel):
    """A referenced table."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    name: str = Field(..., validation_alias=AliasChoices("name", "logicalName", "logical_name"))
    schema_name: str | None = Field(
        default=None, validation_alias=AliasChoices("schema", "schemaName", "schema_name")
    )


class ExpectSpec(BaseModel):
    """Renderings already in use, to be checked against the grid."""

    model_config = ConfigDict(extra="forbid")

    snake: str | None = Field(default=None, description="Declared snake_case identifier")
    pascal: str | None = Field(default=None, description="Declared PascalCase identifier")


class IdentifierSpec(BaseModel):
    """One identifier descriptor as written in a manifest."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    kind: str = Field(..., validation_alias=AliasChoices("kind", "objectKind", "object_kind"))
    name: str = Field(..., validation_alias=AliasChoices("name", "logicalName", "logical_name"))
    schema_name: str | None = Field(
        default=None, validation_alias=AliasChoices("schema", "schemaName", "schema_name")
    )
    references: list[ReferenceSpec] = Field(
        default_factory=list,
        validation_alias=AliasChoices("references", "referencedObjects", "referenced_objects"),
    )
    qualifiers: list[str] = Field(default_factory=list, validation_alias=AliasChoices("qualifiers", "columns"))
    ordinal: int | None = Field(default=None, ge=1)
    expect: ExpectSpec | None = None

    def to_descriptor(self, default_schema: str | None = None) -> IdentifierDescriptor:
        """Build the descriptor, filling in the manifest's default schema."""
        kind = ObjectKind.parse(self.kind)
        schema = self.schema_name
        if schema is None and rule_for(kind).schema is Requirement.REQUIRED:
            schema = default_schema
        return IdentifierDescriptor(
            kind,
            self.name,
            schema_name=schema,
            referenced_objects=tuple(TableRef(r.name, r.schema_name) for r in self.references),
            qualifiers=tuple(self.qualifiers),
            ordinal=self.ordinal,
        )


class ManifestMetadataSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1)
    description: str = Field(default="")


class ManifestDefaultsSpec(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    schema_name: str | None = Field(
        default=None, validation_alias=AliasChoices("schema", "schemaName", "schema_name")
    )


class ManifestSection(BaseModel):
    model_config = ConfigDict(extra="forbid")

    defaults: ManifestDefaultsSpec = Field(default_factory=ManifestDefaultsSpec)
    identifiers: list[IdentifierSpec] = Field(..., min_length=1)


class NamingManifestSpec(BaseModel):
    """Top-level manifest document."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    api_version: Literal["naming-spine/v1"] = Field(default=API_VERSION, alias="apiVersion")
    kind: Literal["NamingManifest"] = "NamingManifest"
    metadata: ManifestMetadataSpec
    spec: ManifestSection


# ---------------------------------------------------------------------------
# Resolved manifest
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ManifestEntry:
    """A validated manifest entry."""

    index: int
    descriptor: IdentifierDescriptor
    expect_snake: str | None = None
    expect_pascal: str | None = None

    @property
    def label(self) -> str:
        return f"identifiers[{self.index}] ({self.descriptor})"

    def expected(self, convention: Convention) -> str | None:
        return self.expect_snake if convention is Convention.SNAKE_CASE else self.expect_pascal


@dataclass
class Manifest:
    """A loaded manifest: its entries and the catalog they define."""

    name: str
    source: str
    entries: list[ManifestEntry] = field(default_factory=list)
    description: str = ""

    @property
    def descriptors(self) -> list[IdentifierDescriptor]:
        return [e.descriptor for e in self.entries]

    def catalog(self) -> Catalog:
        return Catalog.from_descriptors(self.descriptors)


def _format_validation_error(exc: ValidationError) -> str:
    problems = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"])
        problems.append(f"{loc}: {err['msg']}")
    return "; ".join(problems)


def manifest_from_dict(data: Any, source: str = "<manifest>") -> Manifest:
    """Validate a parsed manifest document and build its descriptors.

    Raises:
        ManifestError: the document does not validate.
        MalformedDescriptor / UnsupportedObjectKind: an entry cannot be
            turned into a descriptor (context names the entry).
    """
    if not isinstance(data, dict):
        raise ManifestError(f"{source}: manifest must be a mapping, got {type(data).__name__}").with_context(
            source=source
        )
    try:
        spec = NamingManifestSpec.model_validate(data)
    except ValidationError as e:
        raise ManifestError(f"{source}: {_format_validation_error(e)}", cause=e).with_context(source=source) from e

    default_schema = spec.spec.defaults.schema_name
    entries: list[ManifestEntry] = []
    for index, item in enumerate(spec.spec.identifiers):
        try:
            descriptor = item.to_descriptor(default_schema)
        except NamingError as e:
            raise e.with_context(source=f"{source}: identifiers[{index}]", descriptor=f"{item.kind} {item.name}")
        entries.append(
            ManifestEntry(
                index=index,
                descriptor=descriptor,
                expect_snake=item.expect.snake if item.expect else None,
                expect_pascal=item.expect.pascal if item.expect else None,
            )
        )

    logger.debug("manifest_loaded", source=source, entries=len(entries))
    return Manifest(
        name=spec.metadata.name,
        source=source,
        entries=entries,
        description=spec.metadata.description,
    )


def manifest_from_yaml(content: str, source: str = "<manifest>") -> Manifest:
    """Parse a YAML (or JSON) manifest string."""
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ManifestError(f"{source}: invalid YAML: {e}", cause=e).with_context(source=source) from e
    return manifest_from_dict(data, source)


def load_manifest(path: str | Path) -> Manifest:
    """Read and validate a manifest file.

    Raises:
        ManifestError: the file cannot be read or does not validate.
    """
    p = Path(path)
    try:
        content = p.read_text(encoding="utf-8")
    except OSError as e:
        raise ManifestError(f"Cannot read manifest {p}: {e.strerror or e}", cause=e).with_context(
            source=str(p)
        ) from e
    return manifest_from_yaml(content, str(p))
